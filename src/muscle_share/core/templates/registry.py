"""
Template registry.

All bundled templates are registered here.  Use find_template() to match
an exercise name, or get_template() to look one up by template_id.

Templates are loaded from the per-template YAML files in the bundled
``src/muscle_share/templates/`` directory at import time.  If none can be
loaded a RuntimeError is raised; the package ships them as data.

User overrides: place matching files in ``~/.muscle-share/templates/``.
"""

import re

from .base import ExerciseTemplate


def _build_registry() -> dict[str, ExerciseTemplate]:
    from .loader import load_templates_from_yaml

    loaded = load_templates_from_yaml()
    if not loaded:
        raise RuntimeError(
            "muscle-share: no exercise templates could be loaded from YAML. "
            "Check that src/muscle_share/templates/*.yaml files are present and valid."
        )
    return loaded


TEMPLATE_REGISTRY: dict[str, ExerciseTemplate] = _build_registry()


def sanitize_name(name: str) -> str:
    """Lower-case, turn punctuation into spaces and collapse whitespace.

    "Pull-Up" → "pull up", "  Flat   Bench!" → "flat bench"
    """
    return re.sub(r"[^0-9a-z]+", " ", name.lower()).strip()


def get_template(template_id: str) -> ExerciseTemplate:
    """
    Return the ExerciseTemplate with the given template_id.

    Raises:
        ValueError: If template_id is not in the registry
    """
    if template_id not in TEMPLATE_REGISTRY:
        valid = ", ".join(TEMPLATE_REGISTRY)
        raise ValueError(f"Unknown template '{template_id}'. Valid IDs: {valid}")
    return TEMPLATE_REGISTRY[template_id]


def find_template(
    exercise_name: str,
    registry: dict[str, ExerciseTemplate] | None = None,
) -> ExerciseTemplate | None:
    """
    Match an exercise name to a template.

    An exact match on the sanitized canonical name or template_id wins;
    otherwise the first template (in template_id order) with an alias
    contained in the sanitized name is returned.

    Args:
        exercise_name: Free-form exercise name, e.g. "Incline Bench Press"
        registry: Templates to search (default: TEMPLATE_REGISTRY)

    Returns:
        The matching template, or None
    """
    templates = TEMPLATE_REGISTRY if registry is None else registry
    key = sanitize_name(exercise_name)
    if not key:
        return None

    for tpl in templates.values():
        if key in (sanitize_name(tpl.canonical_name), sanitize_name(tpl.template_id)):
            return tpl

    for template_id in sorted(templates):
        tpl = templates[template_id]
        for alias in tpl.aliases:
            if alias and sanitize_name(alias) in key:
                return tpl
    return None
