"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of catalog, contribution and
breakdown data.
"""

from rich.console import Console
from rich.table import Table

from ..core.aggregation import AggregateResult, Slice
from ..core.models import Catalog, Exercise
from ..core.palette import slice_color

console = Console()

BAR_WIDTH = 24


def _bar(fraction: float, color: str) -> str:
    filled = int(round(max(0.0, min(1.0, fraction)) * BAR_WIDTH))
    return f"[{color}]{'█' * filled}[/]{'·' * (BAR_WIDTH - filled)}"


def _swatch(name: str) -> str:
    return f"[{slice_color(name)}]●[/]"


def print_catalog(catalog: Catalog) -> None:
    """Print groups with their muscles, plus any ungrouped muscles."""
    if not catalog.groups and not catalog.muscles:
        print_info("Catalog is empty. Add groups with 'add-group'.")
        return

    table = Table(title="Muscle Catalog")
    table.add_column("Group", style="bold")
    table.add_column("Muscles")
    table.add_column("Info", style="dim")

    for group in sorted(catalog.groups, key=lambda g: g.name):
        muscles = ", ".join(m.name for m in catalog.muscles_in_group(group.id)) or "-"
        table.add_row(f"{_swatch(group.name)} {group.name}", muscles, group.info or "")

    ungrouped = sorted(m.name for m in catalog.muscles if m.group_id is None)
    if ungrouped:
        table.add_row("[dim](no group)[/dim]", ", ".join(ungrouped), "")

    console.print(table)


def print_exercise_list(exercises: list[Exercise]) -> None:
    """Print exercises sorted as given."""
    if not exercises:
        print_info("No exercises yet. Add one with 'add-exercise'.")
        return

    table = Table(title="Exercises")
    table.add_column("Name", style="bold")
    table.add_column("Added")
    table.add_column("Categories", style="dim")
    table.add_column("Groups", justify="right")
    table.add_column("Muscles", justify="right")
    table.add_column("Workouts", justify="right")

    for e in exercises:
        table.add_row(
            e.name,
            e.date_added,
            ", ".join(e.categories),
            str(len(e.major_contributions)),
            str(len(e.specific_contributions)),
            str(len(e.workouts)),
        )
    console.print(table)


def print_contributions(exercise: Exercise, catalog: Catalog) -> None:
    """
    Print the persisted shares of one exercise.

    Specific muscles are listed under their group with their share of the
    exercise and of the group.
    """
    console.print(f"\n[bold]{exercise.name}[/bold]")
    if exercise.categories:
        console.print(f"[dim]{', '.join(exercise.categories)}[/dim]")
    if not exercise.major_contributions:
        print_info("No muscle contributions entered yet.")
        return

    by_group: dict[str, list[tuple[str, int]]] = {}
    for c in exercise.specific_contributions:
        muscle = catalog.muscle(c.muscle_id)
        if muscle is None or muscle.group_id is None:
            continue
        by_group.setdefault(muscle.group_id, []).append((muscle.name, c.share))

    table = Table()
    table.add_column("Group / Muscle")
    table.add_column("Share", justify="right")
    table.add_column("Of group", justify="right")
    table.add_column("")

    majors = sorted(
        exercise.major_contributions,
        key=lambda c: (-c.share, catalog.name_of(c.group_id)),
    )
    for c in majors:
        name = catalog.name_of(c.group_id)
        color = slice_color(name)
        table.add_row(f"{_swatch(name)} [bold]{name}[/bold]", f"{c.share}%", "", _bar(c.share / 100, color))
        for muscle_name, share in sorted(by_group.get(c.group_id, []), key=lambda t: (-t[1], t[0])):
            of_group = share / c.share if c.share else 0.0
            table.add_row(f"    {muscle_name}", f"{share}%", f"{of_group:.0%}", _bar(of_group, color))

    console.print(table)
    console.print(
        f"Total: major [bold]{exercise.total_major_share}%[/bold], "
        f"specific [bold]{exercise.total_specific_share}%[/bold]"
    )


def print_validation(messages: list[str]) -> None:
    """Print validation messages as warnings; they never block saving."""
    if not messages:
        print_success("Shares are consistent.")
        return
    for message in messages:
        print_warning(message)


def print_workouts(exercise: Exercise, unit: str = "kg") -> None:
    """Print the workout history of one exercise (1-based numbering)."""
    if not exercise.workouts:
        print_info(f"No workouts logged for {exercise.name}.")
        return

    table = Table(title=f"Workouts: {exercise.name}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date")
    table.add_column("Sets")
    table.add_column(f"Volume ({unit})", justify="right")
    table.add_column("Type")

    for i, w in enumerate(exercise.workouts, 1):
        sets = ", ".join(
            f"{s.reps}@{s.weight:g}" if s.is_weighted else f"{s.reps}" for s in w.sets
        )
        table.add_row(str(i), w.date, sets, f"{w.total_volume:,.1f}", w.measurement)
    console.print(table)


def _slice_table(title: str, slices: list[Slice], unit: str, fraction_label: str) -> Table:
    table = Table(title=title)
    table.add_column("Name")
    table.add_column(f"Volume ({unit})", justify="right")
    table.add_column(fraction_label, justify="right")
    table.add_column("")
    for s in slices:
        color = slice_color(s.name)
        table.add_row(
            f"{_swatch(s.name)} {s.name}",
            f"{s.amount:,.1f}",
            f"{s.fraction:.0%}",
            _bar(s.fraction, color),
        )
    return table


def print_breakdown(result: AggregateResult | None, unit: str = "kg") -> None:
    """Print where a workout's volume went."""
    if result is None:
        print_info("Nothing to display: no volume or no muscle contributions.")
        return

    # Bodyweight volume is a rep count
    label = "reps" if result.measurement == "bodyweight" else unit
    console.print(
        f"\nTotal volume: [bold]{result.total_volume:,.1f} {label}[/bold] "
        f"[dim]({result.measurement})[/dim]"
    )
    console.print(_slice_table("Major groups", result.major_slices, label, "Of total"))

    for group in result.specific_groups:
        console.print(
            _slice_table(
                f"{group.group_name} ({group.group_share}%, {group.group_amount:,.1f} {label})",
                group.slices,
                label,
                "Of group",
            )
        )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """Ask a yes/no question; default is no."""
    response = console.input(f"{message} [y/N]: ").strip().lower()
    return response in ("y", "yes")
