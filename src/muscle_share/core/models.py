"""
Data models for muscle-share.

Reference data (muscle groups and specific muscles), exercises with their
persisted contribution records, and logged workouts.  Identifiers are opaque
hex tokens that stay stable for the lifetime of an entity.
"""

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .config import MAX_SHARE

Measurement = Literal["weighted", "bodyweight", "mixed"]


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


def _require_name(value: str, what: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what} name must be a non-empty string")


def _validate_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass
class MuscleGroup:
    """A major muscle group (e.g. "Chest").  Names are unique in a catalog."""

    name: str
    info: str | None = None
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        _require_name(self.name, "Muscle group")


@dataclass
class SpecificMuscle:
    """
    A specific muscle, optionally belonging to a major group.

    Ungrouped muscles (group_id=None) are kept in the catalog but ignored by
    the allocation engine.
    """

    name: str
    group_id: str | None = None
    notes: str | None = None
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        _require_name(self.name, "Specific muscle")


def _validate_share(share: int, what: str) -> None:
    # A zero share is the absence of a contribution and is never stored.
    if not isinstance(share, int) or isinstance(share, bool):
        raise ValueError(f"{what} share must be an integer, got {share!r}")
    if share <= 0 or share > MAX_SHARE:
        raise ValueError(f"{what} share must be in 1..{MAX_SHARE}, got {share}")


@dataclass(frozen=True)
class MajorContribution:
    """Persisted record: the exercise trains ``group_id`` for ``share``% of its effect."""

    group_id: str
    share: int

    def __post_init__(self) -> None:
        _validate_share(self.share, "Major")


@dataclass(frozen=True)
class SpecificContribution:
    """
    Persisted record for one specific muscle.

    ``share`` is a percentage of the whole exercise, not of the muscle's group,
    so the specific shares of a group add up to that group's major share.
    """

    muscle_id: str
    share: int

    def __post_init__(self) -> None:
        _validate_share(self.share, "Specific")


@dataclass
class SetEntry:
    """
    One logged set.  weight=0 means a bodyweight set.

    A bodyweight set counts its reps as volume; a weighted set counts
    weight x reps.
    """

    reps: int
    weight: float = 0.0

    def __post_init__(self) -> None:
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.weight < 0:
            raise ValueError("weight must be non-negative")

    @property
    def is_weighted(self) -> bool:
        return self.weight > 0

    @property
    def volume(self) -> float:
        return self.weight * self.reps if self.is_weighted else float(self.reps)


@dataclass
class WorkoutRecord:
    """A logged workout of one exercise on one date."""

    date: str  # ISO format: YYYY-MM-DD
    sets: list[SetEntry] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        _validate_date(self.date)

    @property
    def total_volume(self) -> float:
        """Sum of the set volumes (weight x reps, or reps for a bodyweight set)."""
        return sum(s.volume for s in self.sets)

    @property
    def measurement(self) -> Measurement:
        """Classify the workout by whether its sets carried external weight."""
        has_weighted = any(s.is_weighted for s in self.sets)
        has_bodyweight = any(not s.is_weighted for s in self.sets)
        if has_weighted and has_bodyweight:
            return "mixed"
        if has_weighted:
            return "weighted"
        return "bodyweight"


@dataclass
class Exercise:
    """
    An exercise with its persisted contribution records and workout history.
    """

    name: str
    date_added: str = field(default_factory=lambda: datetime.now().strftime("%Y-%m-%d"))
    categories: list[str] = field(default_factory=list)  # free-text tags, e.g. "Push"
    major_contributions: list[MajorContribution] = field(default_factory=list)
    specific_contributions: list[SpecificContribution] = field(default_factory=list)
    workouts: list[WorkoutRecord] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        _require_name(self.name, "Exercise")
        _validate_date(self.date_added)

        group_ids = [c.group_id for c in self.major_contributions]
        if len(group_ids) != len(set(group_ids)):
            raise ValueError(f"Duplicate major contribution in exercise {self.name!r}")
        muscle_ids = [c.muscle_id for c in self.specific_contributions]
        if len(muscle_ids) != len(set(muscle_ids)):
            raise ValueError(f"Duplicate specific contribution in exercise {self.name!r}")

    @property
    def total_major_share(self) -> int:
        return sum(c.share for c in self.major_contributions)

    @property
    def total_specific_share(self) -> int:
        return sum(c.share for c in self.specific_contributions)

    def major_shares(self) -> dict[str, int]:
        """Return {group_id: share} for the persisted major records."""
        return {c.group_id: c.share for c in self.major_contributions}

    def references_group(self, group_id: str, catalog: "Catalog") -> bool:
        """True if any contribution points at the group or one of its muscles."""
        if any(c.group_id == group_id for c in self.major_contributions):
            return True
        for c in self.specific_contributions:
            muscle = catalog.muscle(c.muscle_id)
            if muscle is not None and muscle.group_id == group_id:
                return True
        return False


@dataclass
class Catalog:
    """
    Reference data consumed by the engine.

    All lookups return None for unknown ids or names; callers decide how to
    handle a dangling reference.
    """

    groups: list[MuscleGroup] = field(default_factory=list)
    muscles: list[SpecificMuscle] = field(default_factory=list)

    def group(self, group_id: str) -> MuscleGroup | None:
        return next((g for g in self.groups if g.id == group_id), None)

    def muscle(self, muscle_id: str) -> SpecificMuscle | None:
        return next((m for m in self.muscles if m.id == muscle_id), None)

    def group_named(self, name: str) -> MuscleGroup | None:
        key = name.strip().lower()
        return next((g for g in self.groups if g.name.lower() == key), None)

    def muscle_named(self, name: str) -> SpecificMuscle | None:
        key = name.strip().lower()
        return next((m for m in self.muscles if m.name.lower() == key), None)

    def muscles_in_group(self, group_id: str) -> list[SpecificMuscle]:
        """Muscles of one group, sorted by name."""
        return sorted(
            (m for m in self.muscles if m.group_id == group_id),
            key=lambda m: m.name,
        )

    def group_names(self) -> dict[str, str]:
        return {g.id: g.name for g in self.groups}

    def name_of(self, entity_id: str) -> str:
        """Display name for a group or muscle id, or the id itself if unknown."""
        group = self.group(entity_id)
        if group is not None:
            return group.name
        muscle = self.muscle(entity_id)
        if muscle is not None:
            return muscle.name
        return entity_id
