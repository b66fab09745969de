"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.library_store import LibraryStore, get_default_library_path

# Shared --library-path option type used across all commands
LibraryOption = Annotated[
    Optional[Path],
    typer.Option("--library-path", "-p", help="Path to library JSON file"),
]

app = typer.Typer(
    name="muscle-share",
    help="Track how each exercise's training effect splits across muscle groups and muscles.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(library_path: Path | None) -> LibraryStore:
    """Get library store from path or the default location."""
    if library_path is None:
        library_path = get_default_library_path()
    return LibraryStore(library_path)
