"""
Exercise templates for muscle-share.

A template carries typical major and specific shares for a well-known lift
and is matched against an exercise's name.
"""

from .base import ExerciseTemplate, NamedShare
from .registry import TEMPLATE_REGISTRY, find_template, get_template

__all__ = [
    "ExerciseTemplate",
    "NamedShare",
    "TEMPLATE_REGISTRY",
    "find_template",
    "get_template",
]
