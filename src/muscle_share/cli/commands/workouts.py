"""Workout commands: log-workout, workouts, breakdown."""

import json
from dataclasses import asdict
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.aggregation import build_for_workout
from ...core.models import WorkoutRecord
from ...io.serializers import ValidationError, parse_sets_string
from .. import views
from ..app import LibraryOption, app, get_store


@app.command("log-workout")
def log_workout(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE", help="Exercise name or id")],
    sets: Annotated[
        str,
        typer.Option(
            "--sets", "-s",
            help="Sets, e.g. '3x5@100, 8@60, 12' (bare reps = bodyweight)",
        ),
    ],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Workout date YYYY-MM-DD (default: today)"),
    ] = None,
    library_path: LibraryOption = None,
) -> None:
    """
    Log a workout for an exercise.
    """
    store = get_store(library_path)
    try:
        exercise = store.find_exercise(exercise_name)
        if exercise is None:
            raise ValidationError(f"Exercise not found: {exercise_name}")
        workout = WorkoutRecord(
            date=date or datetime.now().strftime("%Y-%m-%d"),
            sets=parse_sets_string(sets),
        )
        store.append_workout(exercise.id, workout)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(
        f"Logged {len(workout.sets)} set(s) of {exercise.name} on {workout.date} "
        f"(volume {workout.total_volume:,.1f}, {workout.measurement})"
    )


@app.command()
def workouts(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE", help="Exercise name or id")],
    library_path: LibraryOption = None,
) -> None:
    """
    Show the logged workouts of an exercise.
    """
    store = get_store(library_path)
    try:
        exercise = store.find_exercise(exercise_name)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if exercise is None:
        views.print_error(f"Exercise not found: {exercise_name}")
        raise typer.Exit(1)
    views.print_workouts(exercise)


@app.command()
def breakdown(
    exercise_name: Annotated[str, typer.Argument(metavar="EXERCISE", help="Exercise name or id")],
    workout: Annotated[
        Optional[int],
        typer.Option("--workout", "-w", help="Workout number from 'workouts' (default: latest)"),
    ] = None,
    unit: Annotated[
        str,
        typer.Option("--unit", "-u", help="Unit label for volumes"),
    ] = "kg",
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    library_path: LibraryOption = None,
) -> None:
    """
    Show how a workout's volume splits across groups and muscles.
    """
    store = get_store(library_path)
    try:
        catalog, exercise = store.load_exercise(exercise_name)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if exercise is None:
        views.print_error(f"Exercise not found: {exercise_name}")
        raise typer.Exit(1)
    if not exercise.workouts:
        views.print_info(f"No workouts logged for {exercise.name}.")
        return

    index = len(exercise.workouts) if workout is None else workout
    if not 1 <= index <= len(exercise.workouts):
        views.print_error(f"Workout number must be 1..{len(exercise.workouts)}")
        raise typer.Exit(1)

    result = build_for_workout(exercise, exercise.workouts[index - 1], catalog)

    if json_out:
        print(json.dumps(asdict(result) if result is not None else None, indent=2))
        return

    views.console.print(f"\n[bold]{exercise.name}[/bold] on {exercise.workouts[index - 1].date}")
    views.print_breakdown(result, unit)
