"""
Query — the opaque filter object handed to storage adapters.

A query is built from ``(model, conditions, opts)``. Conditions are plain
equality matches; a list or tuple value matches any of its members.
Recognised options are ``limit``, ``skip`` and ``sort`` (a field name,
``"-field"`` for descending, or a list of those).
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import ModelItem

__all__ = ["Query"]


class Query:
    """
    Normalized query for one model.

    Usage:
        q = Query(User, {"login": ["alice", "bob"]}, {"limit": 1})
        q.matches({"login": "alice"})  # True
    """

    __slots__ = ("model", "conditions", "opts")

    def __init__(
        self,
        model: Type[ModelItem],
        conditions: Optional[Mapping[str, Any]] = None,
        opts: Optional[Mapping[str, Any]] = None,
    ):
        self.model = model
        self.conditions: Dict[str, Any] = dict(conditions or {})
        self.opts: Dict[str, Any] = dict(opts or {})

    @property
    def model_name(self) -> str:
        return self.model.model_name

    @property
    def limit(self) -> Optional[int]:
        return self.opts.get("limit")

    @property
    def skip(self) -> int:
        return self.opts.get("skip") or 0

    @property
    def sort(self) -> List[Tuple[str, bool]]:
        """Sort keys as ``(field, descending)`` pairs."""
        spec = self.opts.get("sort") or []
        if isinstance(spec, str):
            spec = [spec]
        return [(s[1:], True) if s.startswith("-") else (s, False) for s in spec]

    def matches(self, record: Mapping[str, Any]) -> bool:
        for key, expected in self.conditions.items():
            actual = record.get(key)
            if isinstance(expected, (list, tuple, set, frozenset)):
                if actual not in expected:
                    return False
            elif actual != expected:
                return False
        return True

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Query):
            return NotImplemented
        return (
            self.model is other.model
            and self.conditions == other.conditions
            and self.opts == other.opts
        )

    def __repr__(self) -> str:
        return f"<Query {self.model_name} {self.conditions!r} {self.opts!r}>"
