"""
JSON-based library storage.

One file holds the reference catalog (muscle groups and muscles) and all
exercises with their contribution records and workouts.  Every mutating
call rewrites the whole file.
"""

import json
from pathlib import Path
from typing import Any

from ..core.config import DATA_DIR_NAME, LIBRARY_FILE_NAME
from ..core.models import Catalog, Exercise, MuscleGroup, SpecificMuscle, WorkoutRecord
from .serializers import (
    ValidationError,
    catalog_to_dict,
    dict_to_catalog,
    dict_to_exercise,
    exercise_to_dict,
    exercise_to_named_dict,
    named_dict_to_exercise,
)


class LibraryStore:
    """
    Repository for the catalog and exercises, backed by a JSON file.

    File layout:
        {"catalog": {"groups": [...], "muscles": [...]}, "exercises": [...]}
    """

    def __init__(self, library_path: str | Path):
        """
        Initialize the store.

        Args:
            library_path: Path to the JSON library file
        """
        self.library_path = Path(library_path)

    def exists(self) -> bool:
        """Check if the library file exists."""
        return self.library_path.exists()

    def init(self) -> None:
        """
        Create an empty library file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.library_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.library_path.exists():
            self._write(Catalog(), [])

    # ------------------------------------------------------------------
    # Raw file access
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, Any]:
        if not self.library_path.exists():
            raise FileNotFoundError(
                f"Library file not found: {self.library_path}. Run 'init' first."
            )
        try:
            with open(self.library_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.library_path}: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError(f"Error parsing {self.library_path}: expected an object")
        return data

    def _write(self, catalog: Catalog, exercises: list[Exercise]) -> None:
        data = {
            "catalog": catalog_to_dict(catalog),
            "exercises": [exercise_to_dict(e) for e in sorted(exercises, key=lambda e: e.name)],
        }
        with open(self.library_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> tuple[Catalog, list[Exercise]]:
        """
        Load catalog and exercises.

        Returns:
            (catalog, exercises sorted by name)

        Raises:
            FileNotFoundError: If the library file doesn't exist
            ValidationError: If the file is invalid
        """
        data = self._read()
        catalog = dict_to_catalog(data.get("catalog", {}))
        exercises = [dict_to_exercise(e) for e in data.get("exercises", [])]
        exercises.sort(key=lambda e: e.name)
        return catalog, exercises

    def load_catalog(self) -> Catalog:
        return self.load()[0]

    def load_exercises(self) -> list[Exercise]:
        """All exercises, sorted by name."""
        return self.load()[1]

    def load_exercise(self, name_or_id: str) -> tuple[Catalog, Exercise | None]:
        """
        Load the catalog together with one exercise.

        Args:
            name_or_id: Exercise id or case-insensitive name

        Returns:
            (catalog, exercise), with exercise None if nothing matches
        """
        catalog, exercises = self.load()
        key = name_or_id.strip().lower()
        found = next(
            (e for e in exercises if e.id == name_or_id or e.name.lower() == key),
            None,
        )
        return catalog, found

    def find_exercise(self, name_or_id: str) -> Exercise | None:
        """Look an exercise up by id or case-insensitive name."""
        return self.load_exercise(name_or_id)[1]

    # ------------------------------------------------------------------
    # Exercises
    # ------------------------------------------------------------------

    def create_exercise(self, exercise: Exercise) -> None:
        """
        Add a new exercise.

        Raises:
            ValidationError: If an exercise with the same name exists
        """
        catalog, exercises = self.load()
        if any(e.name.lower() == exercise.name.strip().lower() for e in exercises):
            raise ValidationError(f"Exercise already exists: {exercise.name}")
        exercises.append(exercise)
        self._write(catalog, exercises)

    def update_exercise(self, exercise: Exercise) -> None:
        """
        Replace the stored exercise with the same id.

        Raises:
            ValidationError: If no such exercise exists
        """
        catalog, exercises = self.load()
        for i, existing in enumerate(exercises):
            if existing.id == exercise.id:
                exercises[i] = exercise
                self._write(catalog, exercises)
                return
        raise ValidationError(f"Exercise not found: {exercise.name}")

    def delete_exercise(self, exercise_id: str) -> None:
        """
        Delete an exercise and its records.

        Raises:
            ValidationError: If no such exercise exists
        """
        catalog, exercises = self.load()
        remaining = [e for e in exercises if e.id != exercise_id]
        if len(remaining) == len(exercises):
            raise ValidationError(f"Exercise not found: {exercise_id}")
        self._write(catalog, remaining)

    def append_workout(self, exercise_id: str, workout: WorkoutRecord) -> None:
        """
        Add a workout to an exercise, keeping workouts in date order.

        Raises:
            ValidationError: If no such exercise exists
        """
        catalog, exercises = self.load()
        for exercise in exercises:
            if exercise.id == exercise_id:
                exercise.workouts.append(workout)
                exercise.workouts.sort(key=lambda w: w.date)
                self._write(catalog, exercises)
                return
        raise ValidationError(f"Exercise not found: {exercise_id}")

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    def add_group(self, name: str, info: str | None = None) -> MuscleGroup:
        """
        Add a muscle group.

        Raises:
            ValidationError: If the name is taken
        """
        catalog, exercises = self.load()
        if catalog.group_named(name) is not None:
            raise ValidationError(f"Muscle group already exists: {name}")
        try:
            group = MuscleGroup(name=name.strip(), info=info)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        catalog.groups.append(group)
        self._write(catalog, exercises)
        return group

    def add_muscle(self, name: str, group_name: str | None, notes: str | None = None) -> SpecificMuscle:
        """
        Add a specific muscle, optionally inside an existing group.

        Raises:
            ValidationError: If the name is taken or the group doesn't exist
        """
        catalog, exercises = self.load()
        if catalog.muscle_named(name) is not None:
            raise ValidationError(f"Muscle already exists: {name}")
        group_id = None
        if group_name:
            group = catalog.group_named(group_name)
            if group is None:
                raise ValidationError(f"Muscle group not found: {group_name}")
            group_id = group.id
        try:
            muscle = SpecificMuscle(name=name.strip(), group_id=group_id, notes=notes)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        catalog.muscles.append(muscle)
        self._write(catalog, exercises)
        return muscle

    def delete_group(self, name: str) -> None:
        """
        Delete a muscle group and the muscles that belong to it.

        Raises:
            ValidationError: If the group doesn't exist or any exercise references it
        """
        catalog, exercises = self.load()
        group = catalog.group_named(name)
        if group is None:
            raise ValidationError(f"Muscle group not found: {name}")
        users = [e.name for e in exercises if e.references_group(group.id, catalog)]
        if users:
            raise ValidationError(
                f"Muscle group {group.name} is used by: {', '.join(users)}"
            )
        catalog.groups = [g for g in catalog.groups if g.id != group.id]
        catalog.muscles = [m for m in catalog.muscles if m.group_id != group.id]
        self._write(catalog, exercises)

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_exercises(self) -> list[dict[str, Any]]:
        """All exercises in the named-field exchange format."""
        catalog, exercises = self.load()
        return [exercise_to_named_dict(e, catalog) for e in exercises]

    def import_exercises(self, records: list[dict[str, Any]]) -> int:
        """
        Merge exercises from the named-field format.

        Unknown groups and muscles are added to the catalog.  An imported
        exercise replaces a stored one with the same name.

        Returns:
            Number of exercises imported

        Raises:
            ValidationError: If any record is invalid (nothing is written)
        """
        catalog, exercises = self.load()
        by_name = {e.name.lower(): e for e in exercises}
        for record in records:
            if not isinstance(record, dict):
                raise ValidationError(f"Exercise record must be an object, got {record!r}")
            imported = named_dict_to_exercise(record, catalog)
            existing = by_name.get(imported.name.lower())
            if existing is not None:
                imported.id = existing.id
            by_name[imported.name.lower()] = imported
        self._write(catalog, list(by_name.values()))
        return len(records)


def get_default_library_path() -> Path:
    """Return ~/.muscle-share/library.json."""
    return Path.home() / DATA_DIR_NAME / LIBRARY_FILE_NAME
