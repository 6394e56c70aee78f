"""
String helpers for model and property naming.

Used by the validation pipeline (snake_case params to camelCase), the
definition DSL (foreign-key names) and association accessor naming.
"""

from __future__ import annotations

import re

__all__ = ["camelize", "snakeize", "capitalize", "decapitalize", "singularize"]

_SNAKE_BOUNDARY = re.compile(r"_+([a-zA-Z0-9])")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])|(?<=[A-Z])([A-Z])(?=[a-z])")

# Checked in order; first matching suffix wins.
_SINGULAR_RULES = (
    ("ies", "y"),
    ("sses", "ss"),
    ("xes", "x"),
    ("ches", "ch"),
    ("shes", "sh"),
    ("ss", "ss"),
    ("us", "us"),
    ("s", ""),
)

_IRREGULAR = {
    "people": "person",
    "children": "child",
    "men": "man",
    "women": "woman",
    "mice": "mouse",
}


def camelize(s: str, leading_underscore: bool = False) -> str:
    """
    Convert snake_case to camelCase.

    ``first_name`` becomes ``firstName``. With ``leading_underscore`` a
    leading underscore marker is kept, so ``_private_id`` becomes
    ``_privateId``; otherwise it is dropped like any other separator.
    """
    prefix = ""
    if leading_underscore:
        stripped = s.lstrip("_")
        prefix = s[: len(s) - len(stripped)]
        s = stripped
    camel = _SNAKE_BOUNDARY.sub(lambda m: m.group(1).upper(), s)
    return prefix + camel


def snakeize(s: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    return _CAMEL_BOUNDARY.sub(lambda m: "_" + (m.group(1) or m.group(2)), s).lower()


def capitalize(s: str) -> str:
    """Upper-case the first character only."""
    return s[:1].upper() + s[1:]


def decapitalize(s: str) -> str:
    """Lower-case the first character only (``BlogPost`` -> ``blogPost``)."""
    return s[:1].lower() + s[1:]


def singularize(s: str) -> str:
    """
    Best-effort English singular of a (possibly capitalized) noun.

    Only the last word is inflected: ``BlogPosts`` -> ``BlogPost``,
    ``Categories`` -> ``Category``, ``People`` -> ``Person``.
    """
    lower = s.lower()
    for plural, singular in _IRREGULAR.items():
        if lower.endswith(plural):
            head = s[: len(s) - len(plural)]
            tail = s[len(s) - len(plural):]
            return head + (capitalize(singular) if tail[:1].isupper() else singular)

    for suffix, replacement in _SINGULAR_RULES:
        if lower.endswith(suffix):
            return s[: len(s) - len(suffix)] + replacement
    return s
