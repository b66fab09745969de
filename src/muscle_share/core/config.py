"""
Configuration constants for the muscle-share engine.

All adjustable parameters and user-facing message templates are
centralized here.
"""

from typing import Final

# =============================================================================
# SHARE BOUNDS
# =============================================================================

PERCENT_TOTAL: Final[int] = 100  # Major shares (and all specific shares) must total this
MIN_SHARE: Final[int] = 0
MAX_SHARE: Final[int] = 100
MIN_ACTIVE_SHARE: Final[int] = 1  # Share given to a group toggled on when nothing is left

# Fractional remainders are rounded to this many digits before ranking, so
# float noise (33.300000000000004 vs 33.3) does not decide a tie.
REMAINDER_PRECISION: Final[int] = 9

# =============================================================================
# VALIDATION MESSAGES
# =============================================================================

MSG_MAJOR_TOTAL: Final[str] = "Major muscle shares must total 100%. Currently {total}%."
MSG_SPECIFIC_TOTAL: Final[str] = "Specific muscle shares must total 100%. Currently {total}%."
MSG_GROUP_TOTAL: Final[str] = (
    "Specific muscle shares for {group} must total {share}% of the exercise."
)
MSG_ORPHAN_SPECIFICS: Final[str] = (
    "Some specific muscles belong to a major group that isn't selected."
)

# =============================================================================
# PRESENTATION
# =============================================================================

# Hex colours keyed by lower-cased group name.
PALETTE: Final[dict[str, str]] = {
    "chest": "#e3596e",
    "back": "#5499ed",
    "shoulders": "#f0a833",
    "triceps": "#c97ddb",
    "biceps": "#73d66b",
    "forearms": "#33b39e",
    "abs/core": "#f07a5c",
    "glutes": "#9e73cc",
    "quads": "#5ccfbf",
    "hamstrings": "#4285e0",
    "calves": "#c48554",
    "adductors": "#e05e94",
    "abductors/tfl": "#78abe8",
}
FALLBACK_SATURATION: Final[float] = 0.45
FALLBACK_BRIGHTNESS: Final[float] = 0.85

# =============================================================================
# STORAGE
# =============================================================================

DATA_DIR_NAME: Final[str] = ".muscle-share"
LIBRARY_FILE_NAME: Final[str] = "library.json"
