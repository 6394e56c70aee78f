"""
Datatype coercion — turns raw input into typed property values.

Each ``Datatype`` wraps a coercion callable ``(value, use_utc) -> value``
that raises ``ValueError``/``TypeError`` when the input cannot be
represented. ``Datatype.validate`` converts that into a localized
``DatatypeResult`` so the validation pipeline never sees an exception for
bad *data*.

Examples of coercion:
    "2112"  -> 2112            (int)
    "8.0"   -> 8.0             (number)
    "false" -> False           (boolean)
    "2012-01-01T00:00:00Z" -> datetime(2012, 1, 1, tzinfo=UTC)
"""

from __future__ import annotations

import datetime
import decimal
import json
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, NamedTuple, Optional

from ..i18n import get_text

__all__ = [
    "ANY",
    "Datatype",
    "DatatypeResult",
    "DEFAULT_DATATYPES",
]

ANY = "*"

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


class DatatypeResult(NamedTuple):
    """Outcome of a coercion: exactly one of ``err``/``val`` is meaningful."""
    err: Optional[str]
    val: Any


@dataclass(frozen=True)
class Datatype:
    """A named coercion routine."""

    name: str
    coerce: Callable[[Any, bool], Any]
    message_key: Optional[str] = None

    def validate(
        self,
        property_name: str,
        value: Any,
        locale: Optional[str] = None,
        *,
        use_utc: bool = True,
    ) -> DatatypeResult:
        try:
            return DatatypeResult(None, self.coerce(value, use_utc))
        except (TypeError, ValueError, OverflowError):
            key = self.message_key or f"model.datatypes.{self.name}"
            return DatatypeResult(get_text(key, {"name": property_name}, locale), None)


# ── Coercions ────────────────────────────────────────────────────────────────


def _passthrough(value: Any, use_utc: bool) -> Any:
    return value


def _to_string(value: Any, use_utc: bool) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float, decimal.Decimal)):
        return str(value)
    raise TypeError(f"cannot coerce {type(value).__name__} to string")


def _to_number(value: Any, use_utc: bool) -> Any:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, (int, float, decimal.Decimal)):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            number = float(text)
        if not math.isfinite(number):
            raise ValueError(f"{value!r} is not a finite number")
        return number
    raise TypeError(f"cannot coerce {type(value).__name__} to number")


def _to_int(value: Any, use_utc: bool) -> int:
    number = _to_number(value, use_utc)
    if isinstance(number, int):
        return number
    if float(number).is_integer():
        return int(number)
    raise ValueError(f"{value!r} is not an integer")


def _to_boolean(value: Any, use_utc: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"{value!r} is not a boolean")


def _to_object(value: Any, use_utc: bool) -> Any:
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, str):
        parsed = json.loads(value)
        if isinstance(parsed, (dict, list)):
            return parsed
    raise ValueError(f"{value!r} is not an object")


def _parse_iso_datetime(text: str) -> datetime.datetime:
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(text)


def _to_datetime(value: Any, use_utc: bool) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        result = value
    elif isinstance(value, datetime.date):
        result = datetime.datetime.combine(value, datetime.time())
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        result = datetime.datetime.fromtimestamp(value, datetime.timezone.utc)
    elif isinstance(value, str):
        result = _parse_iso_datetime(value)
    else:
        raise TypeError(f"cannot coerce {type(value).__name__} to datetime")

    if use_utc:
        if result.tzinfo is None:
            return result.replace(tzinfo=datetime.timezone.utc)
        return result.astimezone(datetime.timezone.utc)
    return result


def _to_date(value: Any, use_utc: bool) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value.strip())
        except ValueError:
            return _parse_iso_datetime(value).date()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _to_datetime(value, use_utc).date()
    raise TypeError(f"cannot coerce {type(value).__name__} to date")


def _to_time(value: Any, use_utc: bool) -> datetime.time:
    if isinstance(value, datetime.datetime):
        return value.time()
    if isinstance(value, datetime.time):
        return value
    if isinstance(value, str):
        return datetime.time.fromisoformat(value.strip())
    raise TypeError(f"cannot coerce {type(value).__name__} to time")


DEFAULT_DATATYPES: Dict[str, Datatype] = {
    ANY: Datatype(ANY, _passthrough),
    "string": Datatype("string", _to_string),
    "text": Datatype("text", _to_string, message_key="model.datatypes.string"),
    "number": Datatype("number", _to_number),
    "int": Datatype("int", _to_int),
    "boolean": Datatype("boolean", _to_boolean),
    "object": Datatype("object", _to_object),
    "date": Datatype("date", _to_date),
    "datetime": Datatype("datetime", _to_datetime),
    "time": Datatype("time", _to_time),
}
