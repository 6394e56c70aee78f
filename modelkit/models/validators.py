"""
Validator library — named rules attached to model properties.

Every validator has the signature::

    validator(name, value, params, rule, locale) -> Optional[str]

and returns an error message, or ``None`` when the value passes. ``rule``
is the dict stored on the property (``qualifier`` plus options such as a
custom ``message``). The keys of ``DEFAULT_VALIDATORS`` are also what the
definition DSL exposes as ``validates_<name>`` methods.

Usage from a model definition:

    class User:
        def define(self):
            self.property("login", "string")
            self.validates_present("login")
            self.validates_format("login", r"^[a-z]+$", message="Lowercase only")
            self.validates_length("login", {"min": 3})
            self.validates_confirmed("password", "confirmPassword")
            self.validates_with_function("password", lambda v, params: len(v) > 5)
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Mapping, Optional

from ..faults import ValidatorConfigFault
from ..i18n import get_text

__all__ = [
    "ValidatorFn",
    "is_empty",
    "present",
    "absent",
    "confirmed",
    "format",
    "length",
    "with_function",
    "DEFAULT_VALIDATORS",
]

ValidatorFn = Callable[[str, Any, Mapping[str, Any], Dict[str, Any], Optional[str]], Optional[str]]


def is_empty(value: Any) -> bool:
    """``None``, empty strings and empty collections are empty; 0 and False are not."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) == 0
    return False


def _message(rule: Dict[str, Any], key: str, locale: Optional[str], **params: Any) -> str:
    return rule.get("message") or get_text(key, params, locale)


def present(name, value, params, rule, locale=None):
    if is_empty(value):
        return _message(rule, "model.validatesPresent", locale, name=name)
    return None


def absent(name, value, params, rule, locale=None):
    if not is_empty(value):
        return _message(rule, "model.validatesAbsent", locale, name=name)
    return None


def confirmed(name, value, params, rule, locale=None):
    qual = rule.get("qualifier")
    if value != params.get(qual):
        return _message(rule, "model.validatesConfirmed", locale, name=name, qual=qual)
    return None


def format(name, value, params, rule, locale=None):
    # Empty values are the presence validator's concern
    if is_empty(value):
        return None
    pattern = rule.get("qualifier")
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    if not isinstance(pattern, re.Pattern):
        raise ValidatorConfigFault("format", name, "qualifier must be a regular expression")
    if not pattern.search(value if isinstance(value, str) else str(value)):
        return _message(rule, "model.validatesFormat", locale, name=name)
    return None


def length(name, value, params, rule, locale=None):
    qual = rule.get("qualifier")
    if is_empty(value):
        return _message(rule, "model.validatesPresent", locale, name=name)

    size = len(value) if hasattr(value, "__len__") else len(str(value))

    # Exact length
    if isinstance(qual, (int, str)) and not isinstance(qual, bool):
        try:
            num = int(qual)
        except ValueError:
            raise ValidatorConfigFault(
                "length", name, "qualifier must be a number or a min/max mapping"
            ) from None
        if size != num:
            return _message(rule, "model.validatesExactLength", locale, name=name, num=num)
        return None

    if isinstance(qual, Mapping) and ("min" in qual or "max" in qual):
        if "min" in qual and size < int(qual["min"]):
            return _message(rule, "model.validatesMinLength", locale, name=name, min=qual["min"])
        if "max" in qual and size > int(qual["max"]):
            return _message(rule, "model.validatesMaxLength", locale, name=name, max=qual["max"])
        return None

    raise ValidatorConfigFault("length", name, "qualifier must be a number or a min/max mapping")


def with_function(name, value, params, rule, locale=None):
    func = rule.get("qualifier")
    if not callable(func):
        raise ValidatorConfigFault("with_function", name, "qualifier must be callable")
    if not func(value, params):
        return _message(rule, "model.validatesWithFunction", locale, name=name)
    return None


DEFAULT_VALIDATORS: Dict[str, ValidatorFn] = {
    "present": present,
    "absent": absent,
    "confirmed": confirmed,
    "format": format,
    "length": length,
    "with_function": with_function,
}
