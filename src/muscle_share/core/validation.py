"""
Contribution validation.

Produces plain, human-readable consistency warnings.  Every rule is checked
independently and nothing here raises: callers decide whether a message is
advisory (it never blocks saving an exercise).
"""

from __future__ import annotations

from typing import Callable, Mapping

from .allocation import absolute_shares
from .config import (
    MAX_SHARE,
    MIN_SHARE,
    MSG_GROUP_TOTAL,
    MSG_MAJOR_TOTAL,
    MSG_ORPHAN_SPECIFICS,
    MSG_SPECIFIC_TOTAL,
    PERCENT_TOTAL,
)
from .models import Catalog, Exercise
from .ratio_store import RatioStore, name_tie_key


def _clamp_share(share: int) -> int:
    return max(MIN_SHARE, min(MAX_SHARE, share))


def validate(
    major_shares: Mapping[str, int],
    specific_ratios_by_group: Mapping[str, Mapping[str, float]],
    *,
    group_names: Mapping[str, str] | None = None,
    absolute_by_group: Mapping[str, Mapping[str, int]] | None = None,
    tie_key: Callable[[str], object] | None = None,
) -> list[str]:
    """
    Check authoring-time shares against the sum-to-100 invariants.

    Rules, all applied:
    1. Major shares, when present, must total 100.
    2. When any active group has specific ratios, the absolute specific
       shares across all groups must total 100.
    3. For each group with a positive share and specific ratios, its
       absolute specific shares must total its major share.

    Absolute shares are apportioned from the ratios unless
    ``absolute_by_group`` supplies them (e.g. values cached by a UI), in
    which case the supplied values are checked as-is.

    Args:
        major_shares: {group: integer percent}
        specific_ratios_by_group: {group: {muscle: ratio}}
        group_names: Display names for messages (default: the group key)
        absolute_by_group: Precomputed {group: {muscle: absolute share}}
        tie_key: Tie-break order used when apportioning

    Returns:
        Ordered list of messages; empty when consistent
    """
    names = group_names or {}
    messages: list[str] = []

    def _absolute(group: str) -> dict[str, int]:
        if absolute_by_group is not None and group in absolute_by_group:
            return dict(absolute_by_group[group])
        ratios = specific_ratios_by_group.get(group)
        if not ratios:
            return {}
        return absolute_shares(_clamp_share(major_shares[group]), ratios, tie_key=tie_key)

    def _has_breakdown(group: str) -> bool:
        if absolute_by_group is not None and absolute_by_group.get(group):
            return True
        return bool(specific_ratios_by_group.get(group))

    major_total = sum(major_shares.values())
    if major_shares and major_total != PERCENT_TOTAL:
        messages.append(MSG_MAJOR_TOTAL.format(total=major_total))

    has_specific_breakdown = any(_has_breakdown(g) for g in major_shares)
    if has_specific_breakdown:
        specific_total = sum(sum(_absolute(g).values()) for g in major_shares)
        if specific_total != PERCENT_TOTAL:
            messages.append(MSG_SPECIFIC_TOTAL.format(total=specific_total))

    for group in sorted(major_shares, key=lambda g: (names.get(g, g), g)):
        share = major_shares[group]
        if share <= 0 or not _has_breakdown(group):
            continue
        if sum(_absolute(group).values()) != share:
            messages.append(MSG_GROUP_TOTAL.format(group=names.get(group, group), share=share))

    return messages


def validate_store(store: RatioStore, catalog: Catalog) -> list[str]:
    """Validate an edit session, naming groups from the catalog."""
    return validate(
        store.major_shares,
        store.specific_ratios,
        group_names=catalog.group_names(),
        tie_key=name_tie_key(catalog),
    )


def validate_exercise(exercise: Exercise, catalog: Catalog) -> list[str]:
    """
    Check the persisted absolute shares of an exercise.

    Same three rules as ``validate`` applied to stored records, plus a
    warning when a specific muscle belongs to a group with no major share.
    Specific records whose muscle is unknown or ungrouped only count toward
    the overall specific total.
    """
    messages: list[str] = []
    names = catalog.group_names()

    major_total = exercise.total_major_share
    if exercise.major_contributions and major_total != PERCENT_TOTAL:
        messages.append(MSG_MAJOR_TOTAL.format(total=major_total))

    specific_total = exercise.total_specific_share
    if exercise.specific_contributions and specific_total != PERCENT_TOTAL:
        messages.append(MSG_SPECIFIC_TOTAL.format(total=specific_total))

    grouped: dict[str, int] = {}
    for c in exercise.specific_contributions:
        muscle = catalog.muscle(c.muscle_id)
        if muscle is None or muscle.group_id is None:
            continue
        grouped[muscle.group_id] = grouped.get(muscle.group_id, 0) + c.share

    majors = exercise.major_shares()
    for group_id in sorted(majors, key=lambda g: (names.get(g, g), g)):
        if group_id in grouped and grouped[group_id] != majors[group_id]:
            messages.append(
                MSG_GROUP_TOTAL.format(group=names.get(group_id, group_id), share=majors[group_id])
            )

    if any(group_id not in majors for group_id in grouped):
        messages.append(MSG_ORPHAN_SPECIFICS)

    return messages
