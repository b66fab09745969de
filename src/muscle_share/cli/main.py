"""
CLI entry point using Typer.

Provides commands for muscle contribution tracking:
- init / add-group / add-muscle / catalog: reference data
- add-exercise / show / set-major / set-specific: exercise shares
- log-workout / breakdown: where a workout's volume went
- export / import: named-field JSON exchange
"""

import typer

from . import views
from .app import app

# Importing the command modules registers their commands on ``app``.
from .commands import catalog as _catalog_cmds  # noqa: F401
from .commands import data as _data_cmds  # noqa: F401
from .commands import exercises as _exercise_cmds  # noqa: F401
from .commands import workouts as _workout_cmds  # noqa: F401


def _prompt_exercise() -> str:
    name = views.console.input("Exercise: ").strip()
    if not name:
        views.print_error("Exercise name is required")
        raise typer.Exit(1)
    return name


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """
    Muscle share tracker. Run without a command for interactive mode.
    """
    if ctx.invoked_subcommand is not None:
        return

    views.console.print()
    views.console.print("[bold cyan]muscle-share[/bold cyan] - muscle contribution tracker")
    views.console.print()

    menu = {
        "1": ("exercises", "List exercises"),
        "2": ("show",      "Show an exercise's shares"),
        "3": ("breakdown", "Volume breakdown of the latest workout"),
        "4": ("catalog",   "Muscle catalog"),
        "i": ("init",      "Create library"),
        "0": ("quit",      "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = menu.get(choice, (None, None))[0]
    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "exercises":
        ctx.invoke(_exercise_cmds.exercises)
    elif chosen == "show":
        ctx.invoke(_exercise_cmds.show, exercise_name=_prompt_exercise())
    elif chosen == "breakdown":
        ctx.invoke(_workout_cmds.breakdown, exercise_name=_prompt_exercise())
    elif chosen == "catalog":
        ctx.invoke(_catalog_cmds.catalog)
    elif chosen == "init":
        ctx.invoke(_catalog_cmds.init)


if __name__ == "__main__":
    app()
