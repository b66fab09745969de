"""Reference-data commands: init, add-group, add-muscle, catalog, delete-group."""

from typing import Annotated, Optional

import typer

from ...io.serializers import ValidationError
from .. import views
from ..app import LibraryOption, app, get_store


@app.command()
def init(library_path: LibraryOption = None) -> None:
    """
    Create an empty library file.
    """
    store = get_store(library_path)
    if store.exists():
        views.print_info(f"Library already exists: {store.library_path}")
        return
    store.init()
    views.print_success(f"Created library: {store.library_path}")


@app.command("add-group")
def add_group(
    name: Annotated[str, typer.Argument(help="Muscle group name, e.g. Chest")],
    info: Annotated[
        Optional[str],
        typer.Option("--info", "-i", help="Free-form description"),
    ] = None,
    library_path: LibraryOption = None,
) -> None:
    """
    Add a major muscle group.
    """
    store = get_store(library_path)
    try:
        group = store.add_group(name, info)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Added group: {group.name}")


@app.command("add-muscle")
def add_muscle(
    name: Annotated[str, typer.Argument(help="Specific muscle name, e.g. Pectoralis Major")],
    group: Annotated[
        Optional[str],
        typer.Option("--group", "-g", help="Major group the muscle belongs to"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", "-n", help="Free-form notes"),
    ] = None,
    library_path: LibraryOption = None,
) -> None:
    """
    Add a specific muscle, optionally inside a group.

    Muscles without a group are kept but never receive a share.
    """
    store = get_store(library_path)
    try:
        muscle = store.add_muscle(name, group, notes)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if group is None:
        views.print_warning(f"{muscle.name} has no group and will not receive shares.")
    views.print_success(f"Added muscle: {muscle.name}")


@app.command()
def catalog(library_path: LibraryOption = None) -> None:
    """
    List muscle groups and their muscles.
    """
    store = get_store(library_path)
    try:
        cat = store.load_catalog()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_catalog(cat)


@app.command("delete-group")
def delete_group(
    name: Annotated[str, typer.Argument(help="Muscle group name")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation"),
    ] = False,
    library_path: LibraryOption = None,
) -> None:
    """
    Delete a muscle group and its muscles.

    Refused while any exercise still references the group or its muscles.
    """
    store = get_store(library_path)
    if not force and not views.confirm_action(f"Delete group {name} and its muscles?"):
        views.print_info("Cancelled.")
        return
    try:
        store.delete_group(name)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Deleted group: {name}")
