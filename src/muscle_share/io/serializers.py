"""
JSON serialization for muscle-share models.

Handles conversion between dataclasses and JSON-compatible dicts, in two
shapes:

- the internal library format, keyed by ids (see LibraryStore);
- the named-field exchange format used by import/export, where group and
  muscle names are the join keys.
"""

import re
from typing import Any

from ..core.models import (
    Catalog,
    Exercise,
    MajorContribution,
    MuscleGroup,
    SetEntry,
    SpecificContribution,
    SpecificMuscle,
    WorkoutRecord,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_share(value: Any, name: str) -> int:
    """
    Validate a stored share: an integer in 1..100.

    Raises:
        ValidationError: If the value is not a positive integer percent
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if not 0 < value <= 100:
        raise ValidationError(f"{name} must be in 1..100, got {value}")
    return int(value)


def _require(data: dict[str, Any], key: str, what: str) -> Any:
    if key not in data:
        raise ValidationError(f"{what} is missing '{key}'")
    return data[key]


# =============================================================================
# CATALOG
# =============================================================================


def catalog_to_dict(catalog: Catalog) -> dict[str, Any]:
    """Convert a Catalog to a JSON-compatible dict."""
    return {
        "groups": [
            {"id": g.id, "name": g.name, "info": g.info}
            for g in sorted(catalog.groups, key=lambda g: g.name)
        ],
        "muscles": [
            {"id": m.id, "name": m.name, "group_id": m.group_id, "notes": m.notes}
            for m in sorted(catalog.muscles, key=lambda m: m.name)
        ],
    }


def dict_to_catalog(data: dict[str, Any]) -> Catalog:
    """
    Convert dict to Catalog.

    Raises:
        ValidationError: If a record is malformed or a name is duplicated
    """
    try:
        groups = [
            MuscleGroup(name=_require(g, "name", "group"), info=g.get("info"), id=_require(g, "id", "group"))
            for g in data.get("groups", [])
        ]
        muscles = [
            SpecificMuscle(
                name=_require(m, "name", "muscle"),
                group_id=m.get("group_id"),
                notes=m.get("notes"),
                id=_require(m, "id", "muscle"),
            )
            for m in data.get("muscles", [])
        ]
    except ValueError as e:
        raise ValidationError(str(e)) from e

    for label, names in (("group", [g.name for g in groups]), ("muscle", [m.name for m in muscles])):
        lowered = [n.lower() for n in names]
        if len(lowered) != len(set(lowered)):
            raise ValidationError(f"Duplicate {label} name in catalog")

    return Catalog(groups=groups, muscles=muscles)


# =============================================================================
# EXERCISES (library format)
# =============================================================================


def set_entry_to_dict(entry: SetEntry) -> dict[str, Any]:
    return {"weight": entry.weight, "reps": entry.reps}


def dict_to_set_entry(data: dict[str, Any]) -> SetEntry:
    """
    Convert dict to SetEntry.  A missing or null weight is a bodyweight set.

    Raises:
        ValidationError: If reps/weight are missing or negative
    """
    try:
        return SetEntry(
            reps=int(_require(data, "reps", "set")),
            weight=float(data.get("weight") or 0.0),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid set: {e}") from e


def workout_to_dict(workout: WorkoutRecord) -> dict[str, Any]:
    return {
        "id": workout.id,
        "date": workout.date,
        "sets": [set_entry_to_dict(s) for s in workout.sets],
    }


def dict_to_workout(data: dict[str, Any]) -> WorkoutRecord:
    try:
        kwargs: dict[str, Any] = {
            "date": _require(data, "date", "workout"),
            "sets": [dict_to_set_entry(s) for s in data.get("sets", [])],
        }
        if data.get("id"):
            kwargs["id"] = data["id"]
        return WorkoutRecord(**kwargs)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """Convert Exercise to the id-keyed library dict."""
    return {
        "id": exercise.id,
        "name": exercise.name,
        "date_added": exercise.date_added,
        "categories": list(exercise.categories),
        "major_contributions": [
            {"group_id": c.group_id, "share": c.share} for c in exercise.major_contributions
        ],
        "specific_contributions": [
            {"muscle_id": c.muscle_id, "share": c.share} for c in exercise.specific_contributions
        ],
        "workouts": [workout_to_dict(w) for w in exercise.workouts],
    }


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert an id-keyed library dict to Exercise.

    Raises:
        ValidationError: If data is invalid
    """
    majors = [
        MajorContribution(
            group_id=_require(c, "group_id", "major contribution"),
            share=validate_share(_require(c, "share", "major contribution"), "major share"),
        )
        for c in data.get("major_contributions", [])
    ]
    specifics = [
        SpecificContribution(
            muscle_id=_require(c, "muscle_id", "specific contribution"),
            share=validate_share(_require(c, "share", "specific contribution"), "specific share"),
        )
        for c in data.get("specific_contributions", [])
    ]
    try:
        return Exercise(
            name=_require(data, "name", "exercise"),
            date_added=_require(data, "date_added", "exercise"),
            categories=[str(c) for c in data.get("categories", [])],
            major_contributions=majors,
            specific_contributions=specifics,
            workouts=[dict_to_workout(w) for w in data.get("workouts", [])],
            id=_require(data, "id", "exercise"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


# =============================================================================
# NAMED-FIELD EXCHANGE FORMAT
# =============================================================================


def exercise_to_named_dict(exercise: Exercise, catalog: Catalog) -> dict[str, Any]:
    """
    Export an exercise with names as join keys.

    Contributions whose group or muscle no longer exists are left out.
    """
    majors = []
    for c in exercise.major_contributions:
        group = catalog.group(c.group_id)
        if group is not None:
            majors.append({"groupName": group.name, "share": c.share})

    specifics = []
    for c in exercise.specific_contributions:
        muscle = catalog.muscle(c.muscle_id)
        group = catalog.group(muscle.group_id) if muscle and muscle.group_id else None
        if muscle is None or group is None:
            continue
        specifics.append({"majorGroupName": group.name, "muscleName": muscle.name, "share": c.share})

    return {
        "name": exercise.name,
        "dateAdded": exercise.date_added,
        "categories": list(exercise.categories),
        "majorContributions": majors,
        "specificContributions": specifics,
        "workouts": [
            {"date": w.date, "sets": [set_entry_to_dict(s) for s in w.sets]}
            for w in exercise.workouts
        ],
    }


def _resolve_group(catalog: Catalog, name: str) -> MuscleGroup:
    group = catalog.group_named(name)
    if group is None:
        group = MuscleGroup(name=name.strip())
        catalog.groups.append(group)
    return group


def _resolve_muscle(catalog: Catalog, name: str, group: MuscleGroup) -> SpecificMuscle:
    muscle = catalog.muscle_named(name)
    if muscle is None:
        muscle = SpecificMuscle(name=name.strip(), group_id=group.id)
        catalog.muscles.append(muscle)
    elif muscle.group_id is None:
        muscle.group_id = group.id
    return muscle


def named_dict_to_exercise(data: dict[str, Any], catalog: Catalog) -> Exercise:
    """
    Import an exercise from the named-field format.

    Names are merged case-insensitively into ``catalog``: unknown groups and
    muscles are created there (the catalog is modified in place).  Repeated
    entries for the same group or muscle keep the last share.

    Raises:
        ValidationError: If a field is missing or a share is out of range
    """
    try:
        name = _require(data, "name", "exercise")

        majors: dict[str, int] = {}
        for entry in data.get("majorContributions", []):
            group = _resolve_group(catalog, _require(entry, "groupName", "major contribution"))
            majors[group.id] = validate_share(_require(entry, "share", "major contribution"), "share")

        specifics: dict[str, int] = {}
        for entry in data.get("specificContributions", []):
            group = _resolve_group(catalog, _require(entry, "majorGroupName", "specific contribution"))
            muscle = _resolve_muscle(
                catalog, _require(entry, "muscleName", "specific contribution"), group
            )
            specifics[muscle.id] = validate_share(
                _require(entry, "share", "specific contribution"), "share"
            )

        kwargs: dict[str, Any] = {
            "name": name,
            "categories": [str(c) for c in data.get("categories") or []],
            "major_contributions": [MajorContribution(g, s) for g, s in majors.items()],
            "specific_contributions": [SpecificContribution(m, s) for m, s in specifics.items()],
            "workouts": [dict_to_workout(w) for w in data.get("workouts", [])],
        }
        if data.get("dateAdded"):
            kwargs["date_added"] = str(data["dateAdded"])[:10]
        return Exercise(**kwargs)
    except ValueError as e:
        raise ValidationError(str(e)) from e


# =============================================================================
# SETS STRING (CLI input)
# =============================================================================


def parse_sets_string(sets_str: str) -> list[SetEntry]:
    """
    Parse a comma-separated sets string.

    Per-entry formats:
        NxR@W     e.g. "3x5@100"   → 3 sets of 5 reps at 100
        NxR       e.g. "3x10"      → 3 bodyweight sets of 10 reps
        R@W       e.g. "8@60"      → 1 set of 8 reps at 60
        R W       e.g. "8 60"      → space-separated
        R         e.g. "12"        → bare reps, bodyweight

    Args:
        sets_str: Sets string to parse

    Returns:
        List of SetEntry, in input order

    Raises:
        ValidationError: If the format is invalid
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    entries: list[SetEntry] = []
    parts = [p.strip() for p in sets_str.split(",") if p.strip()]

    for part in parts:
        match_multi = re.match(r"^(\d+)\s*[xX]\s*(\d+)(?:\s*@\s*\+?(\d+\.?\d*))?$", part)
        match_at = re.match(r"^(\d+)\s*@\s*\+?(\d+\.?\d*)$", part)
        match_sp = re.match(r"^(\d+)\s+\+?(\d+\.?\d*)$", part)
        match_bare = re.match(r"^(\d+)$", part)

        if match_multi:
            count = int(match_multi.group(1))
            reps = int(match_multi.group(2))
            weight = float(match_multi.group(3) or 0.0)
        elif match_at:
            count, reps, weight = 1, int(match_at.group(1)), float(match_at.group(2))
        elif match_sp:
            count, reps, weight = 1, int(match_sp.group(1)), float(match_sp.group(2))
        elif match_bare:
            count, reps, weight = 1, int(match_bare.group(1)), 0.0
        else:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                f"Use: sets x reps @ weight (e.g. 3x5@100), reps@weight (e.g. 8@60),\n"
                f"     reps weight (e.g. 8 60) or bare reps (e.g. 12)."
            )

        if count == 0:
            raise ValidationError(f"Set count must be positive: '{part}'")
        entries.extend(SetEntry(reps=reps, weight=weight) for _ in range(count))

    return entries
