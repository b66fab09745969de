"""
Share allocation: ratio bookkeeping and integer apportionment.

All functions are pure; they never mutate their inputs and always return
new dicts.  Integer splits use the largest-remainder (Hare-Niemeyer) method
with an explicit tie-break so results are reproducible.
"""

from __future__ import annotations

import math
from typing import Callable, Hashable, Mapping, TypeVar

from .config import MAX_SHARE, MIN_SHARE, PERCENT_TOTAL, REMAINDER_PRECISION

K = TypeVar("K", bound=Hashable)

TieKey = Callable[[K], object]


def _identity(key):
    return key


def normalize_ratios(ratios: Mapping[K, float]) -> dict[K, float]:
    """
    Scale the positive ratios so that they sum to 1.0.

    Non-positive entries are dropped.  A map that already sums to 1.0
    (within float tolerance) is returned as-is, which makes the operation
    idempotent.

    Args:
        ratios: Arbitrary non-negative weights

    Returns:
        {key: weight / total} for the positive entries, or {} if none are positive
    """
    positive = {k: float(v) for k, v in ratios.items() if v > 0}
    if not positive:
        return {}
    total = sum(positive.values())
    if math.isclose(total, 1.0, rel_tol=1e-12, abs_tol=0.0):
        return positive
    return {k: v / total for k, v in positive.items()}


def even_ratios(keys) -> dict:
    """Assign 1/len(keys) to every key.  Empty input gives {}."""
    keys = list(keys)
    if not keys:
        return {}
    share = 1.0 / len(keys)
    return {k: share for k in keys}


def ratios_from_shares(group_share: int, shares: Mapping[K, int]) -> dict[K, float]:
    """
    Rebuild authoring ratios from persisted absolute shares.

    ratio = share / group_share, then re-normalized: a previous apportionment
    rounds, so the raw ratios rarely sum to exactly 1.0.

    Args:
        group_share: The group's major share
        shares: {muscle: absolute share} for muscles of that group

    Returns:
        Normalized ratios, or {} when group_share is not positive
    """
    if group_share <= 0:
        return {}
    raw = {k: max(0.0, s / group_share) for k, s in shares.items()}
    return normalize_ratios(raw)


def _largest_remainder(
    total: int,
    raw: Mapping[K, float],
    tie_key: TieKey,
) -> dict[K, int]:
    """Floor every raw value, then hand out the leftover units by fractional part."""
    floors = {k: math.floor(v) for k, v in raw.items()}
    remainder = total - sum(floors.values())
    if remainder <= 0 or not floors:
        return floors

    order = sorted(
        raw,
        key=lambda k: (-round(raw[k] - floors[k], REMAINDER_PRECISION), tie_key(k)),
    )
    i = 0
    while remainder > 0:
        floors[order[i % len(order)]] += 1
        remainder -= 1
        i += 1
    return floors


def absolute_shares(
    group_share: int,
    ratios: Mapping[K, float],
    tie_key: TieKey | None = None,
) -> dict[K, int]:
    """
    Split a group's integer percent across its muscles.

    raw_i = group_share * ratio_i; floors are assigned first and the
    remaining units go one at a time to the largest fractional remainders.
    Equal remainders are ordered by ``tie_key`` ascending (the key itself
    by default; pass a name lookup to break ties by muscle name).

    Postcondition: sum(result.values()) == group_share and every value lies
    in [0, group_share].

    Args:
        group_share: Integer percent of the group (0..100)
        ratios: Weights of the group's muscles; re-normalized here
        tie_key: Secondary ordering for equal remainders

    Returns:
        {key: integer absolute share}; {} if no ratio is positive

    Raises:
        ValueError: If group_share is outside 0..100
    """
    if not MIN_SHARE <= group_share <= MAX_SHARE:
        raise ValueError(f"group_share must be in {MIN_SHARE}..{MAX_SHARE}, got {group_share}")

    normalized = normalize_ratios(ratios)
    if not normalized:
        return {}

    raw = {k: round(group_share * r, REMAINDER_PRECISION) for k, r in normalized.items()}
    return _largest_remainder(group_share, raw, tie_key or _identity)


def rescale_to_hundred(
    shares: Mapping[K, int],
    tie_key: TieKey | None = None,
) -> dict[K, int]:
    """
    Rescale integer major shares so they total exactly 100.

    Each share is scaled by 100/sum and floored; the residual is apportioned
    by largest remainder.  Should the scaled values ever overshoot, units are
    taken back from the smallest non-zero entries.  Zero entries are dropped
    from the result.

    Args:
        shares: {group: integer share}, any total
        tie_key: Secondary ordering for equal remainders / equal values

    Returns:
        {group: share} summing to 100, or {} if nothing is positive

    Raises:
        ValueError: If any share is negative
    """
    negative = [k for k, v in shares.items() if v < 0]
    if negative:
        raise ValueError(f"shares must be non-negative, got negative entries for {negative}")

    key_fn = tie_key or _identity
    positive = {k: int(v) for k, v in shares.items() if v > 0}
    total = sum(positive.values())
    if total == 0:
        return {}
    if total == PERCENT_TOTAL:
        return dict(positive)

    raw = {
        k: round(v * PERCENT_TOTAL / total, REMAINDER_PRECISION)
        for k, v in positive.items()
    }
    result = _largest_remainder(PERCENT_TOTAL, raw, key_fn)

    excess = sum(result.values()) - PERCENT_TOTAL
    while excess > 0:
        candidates = [k for k, v in result.items() if v > 0]
        smallest = min(candidates, key=lambda k: (result[k], key_fn(k)))
        result[smallest] -= 1
        excess -= 1

    return {k: v for k, v in result.items() if v > 0}
