"""
Colour keys for contribution slices.

``palette_color`` is an explicit lookup that returns None for names it does
not know; ``slice_color`` adds the deterministic fallback used by the CLI.
"""

import colorsys
import hashlib

from .config import FALLBACK_BRIGHTNESS, FALLBACK_SATURATION, PALETTE


def _sanitize(name: str) -> str:
    return name.strip().lower()


def palette_color(name: str) -> str | None:
    """
    Return the palette colour for a group name, or None.

    Exact (case-insensitive) matches win; otherwise the first palette key
    contained in the name is used, so "Upper Back" picks up "back".
    """
    key = _sanitize(name)
    if key in PALETTE:
        return PALETTE[key]
    for palette_key in sorted(PALETTE):
        if palette_key in key:
            return PALETTE[palette_key]
    return None


def hashed_color(name: str) -> str:
    """Stable hex colour derived from the name (same name, same colour, every run)."""
    digest = hashlib.md5(_sanitize(name).encode("utf-8")).hexdigest()
    hue = (int(digest, 16) % 360) / 360.0
    r, g, b = colorsys.hsv_to_rgb(hue, FALLBACK_SATURATION, FALLBACK_BRIGHTNESS)
    return "#{:02x}{:02x}{:02x}".format(round(r * 255), round(g * 255), round(b * 255))


def slice_color(name: str) -> str:
    """Palette colour if known, hashed colour otherwise."""
    return palette_color(name) or hashed_color(name)
