"""
Serialization formatters, keyed by datatype name.

Only ``ModelItem.to_json`` uses these: each declared property whose
datatype has a formatter is passed through it before JSON encoding.
"""

from __future__ import annotations

import datetime
from typing import Any, Callable, Dict

__all__ = ["FormatterFn", "DEFAULT_FORMATTERS"]

FormatterFn = Callable[[Any], Any]


def _isoformat(value: Any) -> Any:
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return value


DEFAULT_FORMATTERS: Dict[str, FormatterFn] = {
    "date": _isoformat,
    "datetime": _isoformat,
    "time": _isoformat,
}
