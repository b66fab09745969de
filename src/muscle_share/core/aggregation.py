"""
Volume contribution aggregation.

Projects an exercise's persisted percentage shares onto a workout's training
volume and returns display slices: one per major group and, nested, one per
specific muscle renormalized to its group's slice.

Nothing here raises for bad data.  A non-positive volume or the absence of
positive shares gives None ("nothing to display"), and contributions whose
group or muscle is missing from the catalog are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .config import PERCENT_TOTAL
from .models import Catalog, Exercise, Measurement, WorkoutRecord


@dataclass(frozen=True)
class Slice:
    """A named part of a total: absolute amount plus fraction (0..1)."""

    name: str
    amount: float
    fraction: float


@dataclass(frozen=True)
class SpecificGroupSlices:
    """Specific-muscle slices of one major group.

    Slice fractions are relative to ``group_amount``, not to the grand total.
    """

    group_name: str
    group_share: int
    group_amount: float
    slices: list[Slice] = field(default_factory=list)


@dataclass(frozen=True)
class AggregateResult:
    """Where a workout's volume went."""

    total_volume: float
    major_slices: list[Slice]
    specific_groups: list[SpecificGroupSlices]
    measurement: Measurement = "weighted"


def _slice_order(s: Slice) -> tuple[float, str]:
    # Amount descending, name ascending.
    return (-s.amount, s.name)


def build(
    major_shares: Mapping[str, int],
    specific_shares: Mapping[str, Mapping[str, int]],
    total_volume: float,
    measurement: Measurement = "weighted",
) -> AggregateResult | None:
    """
    Distribute ``total_volume`` over named major and specific shares.

    Major slice:    amount = total * share/100, fraction = share/100
    Specific slice: amount = total * share/100 (share is of the whole exercise),
                    fraction = amount / group_amount, clamped to [0, 1]

    Slices are sorted by amount descending with name ascending as tie-break;
    specific groups likewise by group amount.  Specific groups whose major
    group has no positive share, or that end up with no slices, are dropped.

    Args:
        major_shares: {group name: integer percent}
        specific_shares: {group name: {muscle name: integer percent of exercise}}
        total_volume: Workout volume, already converted to the display unit
        measurement: Carried through unchanged (classified by the caller)

    Returns:
        AggregateResult, or None if total_volume <= 0 or no major share is positive
    """
    if total_volume <= 0:
        return None

    major_slices: list[Slice] = []
    for name, share in major_shares.items():
        if share <= 0:
            continue
        fraction = share / PERCENT_TOTAL
        major_slices.append(Slice(name=name, amount=total_volume * fraction, fraction=fraction))
    major_slices.sort(key=_slice_order)

    if not major_slices:
        return None

    specific_groups: list[SpecificGroupSlices] = []
    for major in major_slices:
        group_share = major_shares[major.name]
        group_amount = major.amount
        if group_amount == 0:
            continue

        slices: list[Slice] = []
        for muscle_name, share in specific_shares.get(major.name, {}).items():
            if share <= 0:
                continue
            amount = total_volume * (share / PERCENT_TOTAL)
            fraction = min(max(amount / group_amount, 0.0), 1.0)
            slices.append(Slice(name=muscle_name, amount=amount, fraction=fraction))
        slices.sort(key=_slice_order)

        if slices:
            specific_groups.append(
                SpecificGroupSlices(
                    group_name=major.name,
                    group_share=group_share,
                    group_amount=group_amount,
                    slices=slices,
                )
            )

    specific_groups.sort(key=lambda g: (-g.group_amount, g.group_name))

    return AggregateResult(
        total_volume=total_volume,
        major_slices=major_slices,
        specific_groups=specific_groups,
        measurement=measurement,
    )


def resolve_named_shares(
    exercise: Exercise, catalog: Catalog
) -> tuple[dict[str, int], dict[str, dict[str, int]]]:
    """
    Turn id-keyed contribution records into name-keyed shares.

    Records whose group or muscle is missing from the catalog, and muscles
    without a group, are skipped.

    Returns:
        ({group name: share}, {group name: {muscle name: share}})
    """
    majors: dict[str, int] = {}
    for c in exercise.major_contributions:
        group = catalog.group(c.group_id)
        if group is None or c.share <= 0:
            continue
        majors[group.name] = majors.get(group.name, 0) + c.share

    specifics: dict[str, dict[str, int]] = {}
    for c in exercise.specific_contributions:
        muscle = catalog.muscle(c.muscle_id)
        if muscle is None or muscle.group_id is None or c.share <= 0:
            continue
        group = catalog.group(muscle.group_id)
        if group is None:
            continue
        specifics.setdefault(group.name, {})[muscle.name] = c.share

    return majors, specifics


def build_for_workout(
    exercise: Exercise,
    workout: WorkoutRecord,
    catalog: Catalog,
) -> AggregateResult | None:
    """Aggregate one logged workout of ``exercise`` using the current catalog."""
    majors, specifics = resolve_named_shares(exercise, catalog)
    return build(majors, specifics, workout.total_volume, measurement=workout.measurement)
