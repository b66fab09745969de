"""
Exercise commands: add, list, show, delete, and share editing.

Every editing command runs the same cycle: load the exercise into a
RatioStore, apply one edit, commit the absolute shares and save.  An edit
that changes nothing is not saved.  Validation messages are printed
afterwards as warnings; they never prevent the save.
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.models import Catalog, Exercise
from ...core.ratio_store import (
    ApplyTemplate,
    DistributeEvenly,
    EditCommand,
    NormalizeMajorShares,
    RatioStore,
    SetMajorShare,
    SetSpecificRatio,
    ToggleGroup,
    apply_edit,
    commit,
)
from ...core.templates import TEMPLATE_REGISTRY, find_template, get_template
from ...core.validation import validate_exercise, validate_store
from ...io.library_store import LibraryStore
from ...io.serializers import ValidationError, exercise_to_named_dict
from .. import views
from ..app import LibraryOption, app, get_store


def _load(library_path: Optional[Path], exercise_name: str) -> tuple[LibraryStore, Catalog, Exercise]:
    """Load the store, catalog and one exercise, exiting on any failure."""
    store = get_store(library_path)
    try:
        catalog, exercise = store.load_exercise(exercise_name)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if exercise is None:
        views.print_error(f"Exercise not found: {exercise_name}")
        raise typer.Exit(1)
    return store, catalog, exercise


def _group_id(catalog: Catalog, group_name: str) -> str:
    group = catalog.group_named(group_name)
    if group is None:
        views.print_error(f"Muscle group not found: {group_name}")
        raise typer.Exit(1)
    return group.id


def _edit(library_path: Optional[Path], exercise_name: str, make_command) -> None:
    """
    Run one edit cycle on an exercise.

    Args:
        library_path: Library file override
        exercise_name: Exercise name or id
        make_command: Callable (catalog) -> EditCommand; may exit on bad input
    """
    store, catalog, exercise = _load(library_path, exercise_name)
    command: EditCommand = make_command(catalog)

    before = RatioStore.from_exercise(exercise, catalog)
    after = apply_edit(before, command, catalog)
    categories = exercise.categories
    if isinstance(command, ApplyTemplate):
        categories = list(command.template.categories)
    if after == before and categories == exercise.categories:
        views.print_info("No change.")
        return

    exercise.categories = categories
    exercise.major_contributions, exercise.specific_contributions = commit(after, catalog)
    try:
        store.update_exercise(exercise)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_contributions(exercise, catalog)
    for message in validate_store(after, catalog):
        views.print_warning(message)


# =============================================================================
# CRUD
# =============================================================================


@app.command("add-exercise")
def add_exercise(
    name: Annotated[str, typer.Argument(help="Exercise name, e.g. 'Bench Press'")],
    template: Annotated[
        bool,
        typer.Option("--template/--no-template", help="Pre-fill shares from a matching template"),
    ] = True,
    library_path: LibraryOption = None,
) -> None:
    """
    Add an exercise.

    If a bundled template matches the name, its shares are applied to the
    muscle groups and muscles that exist in the catalog.
    """
    store = get_store(library_path)
    try:
        catalog = store.load_catalog()
        exercise = Exercise(name=name.strip())
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    tpl = find_template(name) if template else None
    if tpl is not None:
        shares = apply_edit(RatioStore(), ApplyTemplate(tpl), catalog)
        exercise.major_contributions, exercise.specific_contributions = commit(shares, catalog)
        exercise.categories = list(tpl.categories)
        if not exercise.major_contributions:
            views.print_warning(
                f"Template '{tpl.canonical_name}' matched but none of its groups are in the catalog."
            )

    try:
        store.create_exercise(exercise)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Added exercise: {exercise.name}")
    if tpl is not None and exercise.major_contributions:
        views.print_info(f"Shares taken from template: {tpl.canonical_name}")
        views.print_contributions(exercise, catalog)
        for message in validate_exercise(exercise, catalog):
            views.print_warning(message)


@app.command()
def exercises(library_path: LibraryOption = None) -> None:
    """
    List exercises sorted by name.
    """
    store = get_store(library_path)
    try:
        items = store.load_exercises()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_exercise_list(items)


@app.command()
def show(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE", help="Exercise name or id")],
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    library_path: LibraryOption = None,
) -> None:
    """
    Show an exercise's shares and any consistency warnings.
    """
    _, catalog, exercise = _load(library_path, exercise_name)
    messages = validate_exercise(exercise, catalog)

    if json_out:
        data = exercise_to_named_dict(exercise, catalog)
        data["warnings"] = messages
        print(json.dumps(data, indent=2))
        return

    views.print_contributions(exercise, catalog)
    views.print_validation(messages)


@app.command("delete-exercise")
def delete_exercise(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE", help="Exercise name or id")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation"),
    ] = False,
    library_path: LibraryOption = None,
) -> None:
    """
    Delete an exercise with its shares and workouts.
    """
    store, _, exercise = _load(library_path, exercise_name)
    if not force and not views.confirm_action(
        f"Delete {exercise.name} and its {len(exercise.workouts)} workout(s)?"
    ):
        views.print_info("Cancelled.")
        return
    try:
        store.delete_exercise(exercise.id)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Deleted exercise: {exercise.name}")


# =============================================================================
# EDITING
# =============================================================================


@app.command("toggle-group")
def toggle_group(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE")],
    group: Annotated[str, typer.Argument(help="Muscle group name")],
    on: Annotated[
        bool,
        typer.Option("--on/--off", help="Activate or deactivate the group"),
    ] = True,
    library_path: LibraryOption = None,
) -> None:
    """
    Activate or deactivate a muscle group for an exercise.

    A newly activated group takes whatever is left of 100% (at least 1%)
    and splits it evenly over its muscles.
    """
    _edit(library_path, exercise_name, lambda cat: ToggleGroup(_group_id(cat, group), on))


@app.command("set-major")
def set_major(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE")],
    group: Annotated[str, typer.Argument(help="Muscle group name")],
    percent: Annotated[float, typer.Argument(help="Share of the exercise, 0-100 (0 removes)")],
    library_path: LibraryOption = None,
) -> None:
    """
    Set a muscle group's share of the exercise.
    """
    _edit(library_path, exercise_name, lambda cat: SetMajorShare(_group_id(cat, group), percent))


@app.command("set-specific")
def set_specific(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE")],
    group: Annotated[str, typer.Argument(help="Muscle group name")],
    muscle: Annotated[str, typer.Argument(help="Specific muscle name")],
    percent: Annotated[float, typer.Argument(help="Share of the group, 0-100")],
    library_path: LibraryOption = None,
) -> None:
    """
    Set a muscle's share of its group.

    The group's other muscles are rescaled so the group still adds up.
    """

    def make(cat: Catalog) -> SetSpecificRatio:
        group_id = _group_id(cat, group)
        found = cat.muscle_named(muscle)
        if found is None or found.group_id != group_id:
            views.print_error(f"Muscle {muscle} not found in group {group}")
            raise typer.Exit(1)
        if percent < 0:
            views.print_error("Percent must be non-negative")
            raise typer.Exit(1)
        return SetSpecificRatio(group_id, found.id, percent / 100)

    _edit(library_path, exercise_name, make)


@app.command()
def distribute(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE")],
    group: Annotated[str, typer.Argument(help="Muscle group name")],
    library_path: LibraryOption = None,
) -> None:
    """
    Split a group's share evenly over its muscles.
    """
    _edit(library_path, exercise_name, lambda cat: DistributeEvenly(_group_id(cat, group)))


@app.command()
def normalize(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE")],
    library_path: LibraryOption = None,
) -> None:
    """
    Rescale the group shares so they total 100%.
    """
    _edit(library_path, exercise_name, lambda cat: NormalizeMajorShares())


@app.command("apply-template")
def apply_template(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE")],
    template_id: Annotated[
        Optional[str],
        typer.Argument(metavar="TEMPLATE", help="Template id (default: match by exercise name)"),
    ] = None,
    library_path: LibraryOption = None,
) -> None:
    """
    Replace an exercise's shares with a template's.
    """

    def make(cat: Catalog) -> ApplyTemplate:
        if template_id is not None:
            try:
                return ApplyTemplate(get_template(template_id))
            except ValueError as e:
                views.print_error(str(e))
                raise typer.Exit(1)
        tpl = find_template(exercise_name)
        if tpl is None:
            views.print_error(
                f"No template matches {exercise_name}. Available: {', '.join(sorted(TEMPLATE_REGISTRY))}"
            )
            raise typer.Exit(1)
        return ApplyTemplate(tpl)

    _edit(library_path, exercise_name, make)
