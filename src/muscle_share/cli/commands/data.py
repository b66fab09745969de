"""Import/export commands using the named-field JSON format."""

import json
from pathlib import Path
from typing import Annotated

import typer

from ...io.serializers import ValidationError
from .. import views
from ..app import LibraryOption, app, get_store


@app.command("export")
def export_cmd(
    path: Annotated[Path, typer.Argument(help="Destination JSON file")],
    library_path: LibraryOption = None,
) -> None:
    """
    Export all exercises with group and muscle names as keys.
    """
    store = get_store(library_path)
    try:
        records = store.export_exercises()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(records, f, indent=2)
    views.print_success(f"Exported {len(records)} exercise(s) to {path}")


@app.command("import")
def import_cmd(
    path: Annotated[Path, typer.Argument(help="JSON file written by 'export'")],
    library_path: LibraryOption = None,
) -> None:
    """
    Import exercises, adding unknown groups and muscles to the catalog.

    An imported exercise replaces a stored one with the same name.
    """
    store = get_store(library_path)
    if not store.exists():
        store.init()

    try:
        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)
    except FileNotFoundError:
        views.print_error(f"File not found: {path}")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        views.print_error(f"Error parsing {path}: {e}")
        raise typer.Exit(1)

    if not isinstance(records, list):
        views.print_error(f"{path} must contain a JSON list of exercises")
        raise typer.Exit(1)

    try:
        count = store.import_exercises(records)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Imported {count} exercise(s) from {path}")
