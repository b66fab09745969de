"""
Authoring-time share state for one exercise.

A RatioStore holds integer major shares per group and, per active group,
continuous ratios over that group's muscles.  It is an immutable snapshot:
edits are expressed as command objects and ``apply_edit`` returns a new
store, leaving the caller to own the mutable reference.

Absolute integer specific shares are never stored here; they are derived
on demand with ``allocation.absolute_shares`` and only materialise as
contribution records on ``commit``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Union

from .allocation import (
    absolute_shares,
    even_ratios,
    normalize_ratios,
    ratios_from_shares,
    rescale_to_hundred,
)
from .config import MAX_SHARE, MIN_ACTIVE_SHARE, MIN_SHARE, PERCENT_TOTAL
from .models import Catalog, Exercise, MajorContribution, SpecificContribution
from .templates.base import ExerciseTemplate


def name_tie_key(catalog: Catalog | None) -> Callable[[str], object]:
    """Order ids by display name, then by id, so ties have a total order."""
    if catalog is None:
        return lambda entity_id: entity_id
    return lambda entity_id: (catalog.name_of(entity_id), entity_id)


# =============================================================================
# EDIT COMMANDS
# =============================================================================


@dataclass(frozen=True)
class ToggleGroup:
    """Activate or deactivate a major group."""

    group_id: str
    active: bool


@dataclass(frozen=True)
class SetMajorShare:
    """Set a group's major share; rounded and clamped to 0..100, 0 deactivates."""

    group_id: str
    percent: float


@dataclass(frozen=True)
class SetSpecificRatio:
    """Set one muscle's ratio (0..1) inside its group; the group is re-normalized."""

    group_id: str
    muscle_id: str
    ratio: float


@dataclass(frozen=True)
class DistributeEvenly:
    """Reset a group's ratios to an even split over its catalogued muscles."""

    group_id: str


@dataclass(frozen=True)
class NormalizeMajorShares:
    """Rescale the major shares so they total 100."""


@dataclass(frozen=True)
class ApplyTemplate:
    """Replace all shares with the ones of an exercise template."""

    template: ExerciseTemplate


EditCommand = Union[
    ToggleGroup,
    SetMajorShare,
    SetSpecificRatio,
    DistributeEvenly,
    NormalizeMajorShares,
    ApplyTemplate,
]


# =============================================================================
# STORE
# =============================================================================


@dataclass(frozen=True)
class RatioStore:
    """
    Snapshot of the shares being edited.

    major_shares:    {group_id: integer percent 1..100}
    specific_ratios: {group_id: {muscle_id: ratio}}, ratios summing to 1.0 per group
    """

    major_shares: dict[str, int] = field(default_factory=dict)
    specific_ratios: dict[str, dict[str, float]] = field(default_factory=dict)

    @property
    def total_major_share(self) -> int:
        return sum(self.major_shares.values())

    @property
    def has_specific_breakdown(self) -> bool:
        """True if any active group carries specific ratios."""
        return any(self.specific_ratios.get(g) for g in self.major_shares)

    def absolute_specific_shares(
        self, group_id: str, catalog: Catalog | None = None
    ) -> dict[str, int]:
        """Integer shares of the exercise for each muscle of one group."""
        group_share = self.major_shares.get(group_id, 0)
        ratios = self.specific_ratios.get(group_id)
        if group_share <= 0 or not ratios:
            return {}
        return absolute_shares(group_share, ratios, tie_key=name_tie_key(catalog))

    def total_specific_share(self, catalog: Catalog | None = None) -> int:
        return sum(
            sum(self.absolute_specific_shares(g, catalog).values())
            for g in self.major_shares
        )

    @classmethod
    def from_exercise(cls, exercise: Exercise, catalog: Catalog) -> "RatioStore":
        """
        Start an edit session from persisted contribution records.

        Ratios are rebuilt as share / group_share and re-normalized.  Active
        groups without specific records fall back to even ratios over their
        catalogued muscles.  Records pointing at unknown groups are pruned.
        """
        majors = {
            c.group_id: c.share
            for c in exercise.major_contributions
            if c.share > 0 and catalog.group(c.group_id) is not None
        }

        by_group: dict[str, dict[str, int]] = {}
        for c in exercise.specific_contributions:
            muscle = catalog.muscle(c.muscle_id)
            if c.share <= 0 or muscle is None or muscle.group_id is None:
                continue
            by_group.setdefault(muscle.group_id, {})[muscle.id] = c.share

        ratios: dict[str, dict[str, float]] = {}
        for group_id, share in majors.items():
            rebuilt = ratios_from_shares(share, by_group.get(group_id, {}))
            if not rebuilt:
                rebuilt = even_ratios(m.id for m in catalog.muscles_in_group(group_id))
            if rebuilt:
                ratios[group_id] = rebuilt

        return cls(major_shares=majors, specific_ratios=ratios)


def _with(majors: dict[str, int], ratios: dict[str, dict[str, float]]) -> RatioStore:
    # Ratios never outlive their group's major share.
    return RatioStore(
        major_shares=majors,
        specific_ratios={g: r for g, r in ratios.items() if g in majors and r},
    )


def _even_for_group(catalog: Catalog, group_id: str) -> dict[str, float]:
    return even_ratios(m.id for m in catalog.muscles_in_group(group_id))


def _toggle(store: RatioStore, cmd: ToggleGroup, catalog: Catalog) -> RatioStore:
    majors = dict(store.major_shares)
    ratios = dict(store.specific_ratios)
    if not cmd.active:
        majors.pop(cmd.group_id, None)
        ratios.pop(cmd.group_id, None)
        return _with(majors, ratios)

    if cmd.group_id in majors or catalog.group(cmd.group_id) is None:
        return store
    remaining = max(0, PERCENT_TOTAL - store.total_major_share)
    majors[cmd.group_id] = max(MIN_ACTIVE_SHARE, remaining)
    even = _even_for_group(catalog, cmd.group_id)
    if even:
        ratios[cmd.group_id] = even
    return _with(majors, ratios)


def _set_major(store: RatioStore, cmd: SetMajorShare, catalog: Catalog) -> RatioStore:
    if catalog.group(cmd.group_id) is None:
        return store
    share = int(max(MIN_SHARE, min(MAX_SHARE, math.floor(cmd.percent + 0.5))))
    majors = dict(store.major_shares)
    ratios = dict(store.specific_ratios)
    if share <= 0:
        majors.pop(cmd.group_id, None)
        ratios.pop(cmd.group_id, None)
        return _with(majors, ratios)

    majors[cmd.group_id] = share
    if not ratios.get(cmd.group_id):
        even = _even_for_group(catalog, cmd.group_id)
        if even:
            ratios[cmd.group_id] = even
    return _with(majors, ratios)


def _set_specific(store: RatioStore, cmd: SetSpecificRatio, catalog: Catalog) -> RatioStore:
    if cmd.ratio < 0 or cmd.group_id not in store.major_shares:
        return store
    muscle = catalog.muscle(cmd.muscle_id)
    if muscle is None or muscle.group_id != cmd.group_id:
        return store

    group_ratios = dict(store.specific_ratios.get(cmd.group_id, {}))
    group_ratios[cmd.muscle_id] = max(0.0, min(1.0, cmd.ratio))
    normalized = normalize_ratios(group_ratios)
    if not normalized:
        normalized = _even_for_group(catalog, cmd.group_id)

    ratios = dict(store.specific_ratios)
    ratios[cmd.group_id] = normalized
    return _with(dict(store.major_shares), ratios)


def _distribute(store: RatioStore, cmd: DistributeEvenly, catalog: Catalog) -> RatioStore:
    even = _even_for_group(catalog, cmd.group_id)
    if not even or cmd.group_id not in store.major_shares:
        return store
    ratios = dict(store.specific_ratios)
    ratios[cmd.group_id] = even
    return _with(dict(store.major_shares), ratios)


def _normalize_majors(store: RatioStore, catalog: Catalog) -> RatioStore:
    total = store.total_major_share
    if total <= 0 or total == PERCENT_TOTAL:
        return store
    majors = rescale_to_hundred(store.major_shares, tie_key=name_tie_key(catalog))
    return _with(majors, dict(store.specific_ratios))


def _apply_template(store: RatioStore, cmd: ApplyTemplate, catalog: Catalog) -> RatioStore:
    majors: dict[str, int] = {}
    for entry in cmd.template.major_shares:
        group = catalog.group_named(entry.name)
        if group is not None and entry.share > 0:
            majors[group.id] = min(entry.share, MAX_SHARE)

    raw: dict[str, dict[str, float]] = {}
    for entry in cmd.template.specific_shares:
        muscle = catalog.muscle_named(entry.name)
        if muscle is None or muscle.group_id is None:
            continue
        group_share = majors.get(muscle.group_id, 0)
        if group_share <= 0:
            continue
        raw.setdefault(muscle.group_id, {})[muscle.id] = entry.share / group_share

    ratios = {g: normalize_ratios(r) for g, r in raw.items()}
    return _with(majors, ratios)


def apply_edit(store: RatioStore, command: EditCommand, catalog: Catalog) -> RatioStore:
    """
    Apply one edit command and return the resulting snapshot.

    Commands that refer to groups or muscles absent from the catalog, or to
    inactive groups, leave the store unchanged.

    Raises:
        TypeError: If ``command`` is not a known edit command
    """
    if isinstance(command, ToggleGroup):
        return _toggle(store, command, catalog)
    if isinstance(command, SetMajorShare):
        return _set_major(store, command, catalog)
    if isinstance(command, SetSpecificRatio):
        return _set_specific(store, command, catalog)
    if isinstance(command, DistributeEvenly):
        return _distribute(store, command, catalog)
    if isinstance(command, NormalizeMajorShares):
        return _normalize_majors(store, catalog)
    if isinstance(command, ApplyTemplate):
        return _apply_template(store, command, catalog)
    raise TypeError(f"Unknown edit command: {command!r}")


def commit(
    store: RatioStore, catalog: Catalog
) -> tuple[list[MajorContribution], list[SpecificContribution]]:
    """
    Convert the snapshot to persistable contribution records.

    Only positive shares on catalogued groups/muscles become records; the
    specific records of each group are apportioned so they total the
    group's major share exactly.
    """
    tie = name_tie_key(catalog)
    majors = [
        MajorContribution(group_id=g, share=s)
        for g, s in sorted(store.major_shares.items(), key=lambda kv: tie(kv[0]))
        if s > 0 and catalog.group(g) is not None
    ]

    specifics: list[SpecificContribution] = []
    for major in majors:
        shares = store.absolute_specific_shares(major.group_id, catalog)
        for muscle_id in sorted(shares, key=tie):
            muscle = catalog.muscle(muscle_id)
            if shares[muscle_id] <= 0 or muscle is None or muscle.group_id != major.group_id:
                continue
            specifics.append(SpecificContribution(muscle_id=muscle_id, share=shares[muscle_id]))

    return majors, specifics
