"""
Base types for exercise templates.

Templates refer to muscle groups and muscles by name; names are resolved
against the catalog when a template is applied, and unknown names are
skipped.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class NamedShare:
    """A share keyed by a group or muscle name."""

    name: str
    share: int  # Percent of the whole exercise


@dataclass(frozen=True)
class ExerciseTemplate:
    """
    Typical contribution profile of one exercise.

    Specific shares are absolute (percent of the whole exercise), in the
    same convention as persisted specific contributions.
    """

    template_id: str                      # e.g. "barbell_bench_press"
    canonical_name: str                   # e.g. "Barbell Bench Press"
    aliases: tuple[str, ...]              # sanitized substrings that select this template
    categories: tuple[str, ...]
    major_shares: tuple[NamedShare, ...]
    specific_shares: tuple[NamedShare, ...]

    @property
    def total_major_share(self) -> int:
        return sum(s.share for s in self.major_shares)
