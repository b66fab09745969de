"""
YAML → ExerciseTemplate loader.

Loads templates from individual YAML files in the bundled
``src/muscle_share/templates/`` directory.  Each file (e.g. deadlift.yaml)
holds one flat template definition.

User overrides: place matching files in ``~/.muscle-share/templates/``.
A user file is deep-merged over the bundled template, so only changed keys
need to be listed.  A user file with no bundled counterpart is added as a
new template.

Usage (internal, called by registry.py):
    from .loader import load_templates_from_yaml
    templates = load_templates_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

import yaml

from ..config import DATA_DIR_NAME, MAX_SHARE
from .base import ExerciseTemplate, NamedShare

_REQUIRED_TEMPLATE_FIELDS: frozenset[str] = frozenset(
    {
        "template_id",
        "canonical_name",
        "major_shares",
    }
)


def _named_shares(raw: object, what: str) -> tuple[NamedShare, ...]:
    """Convert a {name: share} mapping, preserving file order."""
    if raw is None:
        return ()
    if not isinstance(raw, dict):
        raise ValueError(f"{what} must be a mapping of name -> share")
    result = []
    for name, share in raw.items():
        share = int(share)
        if not 0 < share <= MAX_SHARE:
            raise ValueError(f"{what}[{name!r}] must be in 1..{MAX_SHARE}, got {share}")
        result.append(NamedShare(name=str(name), share=share))
    return tuple(result)


def template_from_dict(d: dict) -> ExerciseTemplate:
    """Convert a raw dict (from YAML) to an ExerciseTemplate.

    Raises ValueError if any required field is absent or a share is out of range.
    """
    missing = _REQUIRED_TEMPLATE_FIELDS - set(d)
    if missing:
        raise ValueError(f"ExerciseTemplate missing fields: {sorted(missing)}")

    return ExerciseTemplate(
        template_id=str(d["template_id"]),
        canonical_name=str(d["canonical_name"]),
        aliases=tuple(str(a).lower() for a in d.get("aliases") or ()),
        categories=tuple(str(c) for c in d.get("categories") or ()),
        major_shares=_named_shares(d["major_shares"], "major_shares"),
        specific_shares=_named_shares(d.get("specific_shares"), "specific_shares"),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} if it is unreadable or not a mapping."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"muscle-share: cannot read template file {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _get_bundled_templates_dir() -> Path | None:
    """Return path to the bundled templates/ data directory, or None if not found."""
    # loader.py lives at src/muscle_share/core/templates/loader.py
    # three levels up → src/muscle_share/
    candidate = Path(__file__).parent.parent.parent / "templates"
    return candidate if candidate.is_dir() else None


def _get_user_templates_dir() -> Path | None:
    """Return ~/.muscle-share/templates/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / DATA_DIR_NAME / "templates"
    return p if p.is_dir() else None


def load_templates_from_yaml(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> dict[str, ExerciseTemplate] | None:
    """Return {template_id: ExerciseTemplate} loaded from per-template YAML files.

    Directories default to the bundled templates/ directory and
    ``~/.muscle-share/templates/``.  Files that fail validation are skipped
    with a warning.

    Returns None when no template could be loaded.
    """
    if bundled_dir is None:
        bundled_dir = _get_bundled_templates_dir()
    if user_dir is None:
        user_dir = _get_user_templates_dir()

    stems: dict[str, Path] = {}
    if bundled_dir is not None and bundled_dir.is_dir():
        for p in sorted(bundled_dir.glob("*.yaml")):
            stems[p.stem] = p

    user_only: list[Path] = []
    if user_dir is not None and user_dir.is_dir():
        for p in sorted(user_dir.glob("*.yaml")):
            if p.stem not in stems:
                user_only.append(p)

    result: dict[str, ExerciseTemplate] = {}

    for stem, bundled_path in stems.items():
        raw = _load_yaml_file(bundled_path)
        if not raw:
            continue
        if user_dir is not None:
            user_path = user_dir / f"{stem}.yaml"
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    raw = _deep_merge(raw, user_raw)
        try:
            tpl = template_from_dict(raw)
            result[tpl.template_id] = tpl
        except ValueError as exc:
            warnings.warn(
                f"muscle-share: skipping template '{stem}': {exc}",
                stacklevel=2,
            )

    for p in user_only:
        raw = _load_yaml_file(p)
        if not raw:
            continue
        try:
            tpl = template_from_dict(raw)
            result[tpl.template_id] = tpl
        except ValueError as exc:
            warnings.warn(
                f"muscle-share: skipping user template '{p.stem}': {exc}",
                stacklevel=2,
            )

    return result if result else None
