"""
Message catalogue for validation and coercion errors.

Messages are ``str.format`` templates keyed by locale; lookups fall back
to the default locale, then to the key itself.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

DEFAULT_LOCALE = "en-us"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en-us": {
        "model.validatesPresent": "{name} is required.",
        "model.validatesAbsent": "{name} should not be provided.",
        "model.validatesConfirmed": "{name} and {qual} must match.",
        "model.validatesFormat": "{name} is not correctly formatted.",
        "model.validatesExactLength": "{name} must be exactly {num} characters.",
        "model.validatesMinLength": "{name} must be at least {min} characters.",
        "model.validatesMaxLength": "{name} may not exceed {max} characters.",
        "model.validatesWithFunction": "{name} is not valid.",
        "model.datatypes.string": "{name} must be a string.",
        "model.datatypes.number": "{name} must be a number.",
        "model.datatypes.int": "{name} must be an integer.",
        "model.datatypes.boolean": "{name} must be a boolean.",
        "model.datatypes.object": "{name} must be an object.",
        "model.datatypes.date": "{name} must be a date.",
        "model.datatypes.datetime": "{name} must be a datetime.",
        "model.datatypes.time": "{name} must be a time.",
    },
}


def add_messages(locale: str, messages: Mapping[str, str]) -> None:
    """Add or override messages for a locale."""
    MESSAGES.setdefault(locale.lower(), {}).update(messages)


def get_text(key: str, params: Optional[Mapping[str, Any]] = None, locale: Optional[str] = None) -> str:
    """Return the localized message for ``key`` formatted with ``params``."""
    catalogue = MESSAGES.get((locale or DEFAULT_LOCALE).lower()) or {}
    template = catalogue.get(key) or MESSAGES[DEFAULT_LOCALE].get(key)
    if template is None:
        return key
    return template.format(**(params or {}))
