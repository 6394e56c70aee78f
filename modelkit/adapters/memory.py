"""
In-memory adapter — process-local storage for development and tests.

Records are stored per model name as plain dicts holding ``id`` plus every
declared property, in insertion order. Models with
``auto_increment_id = True`` get sequential integer ids; others get UUID
hex strings.

Serialized via asyncio.Lock, so concurrent coroutines never observe a
half-applied batch.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections import OrderedDict, defaultdict
from typing import Any, Dict, List, Sequence, Type, Union, TYPE_CHECKING

from .base import Adapter

if TYPE_CHECKING:
    from ..models.base import ModelItem
    from ..models.query import Query

logger = logging.getLogger("modelkit.adapters.memory")

__all__ = ["MemoryAdapter"]


class MemoryAdapter(Adapter):
    """Dict-backed adapter; one ordered table per model name."""

    __slots__ = ("_tables", "_counters", "_lock")

    def __init__(self):
        self._tables: Dict[str, "OrderedDict[Any, Dict[str, Any]]"] = defaultdict(OrderedDict)
        self._counters: Dict[str, int] = defaultdict(int)
        self._lock = asyncio.Lock()

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _snapshot(item: ModelItem) -> Dict[str, Any]:
        record = {"id": item.id}
        for name in item._description.properties:
            record[name] = item.__dict__.get(name)
        return record

    def _next_id(self, model_cls: Type[ModelItem]) -> Any:
        if model_cls.auto_increment_id:
            self._counters[model_cls.model_name] += 1
            return self._counters[model_cls.model_name]
        return uuid.uuid4().hex

    def _insert(self, item: ModelItem) -> ModelItem:
        model_cls = type(item)
        if item.id is None:
            item.id = self._next_id(model_cls)
        elif model_cls.auto_increment_id and isinstance(item.id, int):
            # Preset ids must never be handed out again
            name = model_cls.model_name
            self._counters[name] = max(self._counters[name], item.id)
        self._tables[model_cls.model_name][item.id] = self._snapshot(item)
        item._saved = True
        return item

    def _select(self, query: Query) -> List[Dict[str, Any]]:
        table = self._tables.get(query.model_name, {})
        rows = [row for row in table.values() if query.matches(row)]

        for field, descending in reversed(query.sort):
            rows.sort(
                key=lambda r: (r.get(field) is None, r.get(field)),
                reverse=descending,
            )

        rows = rows[query.skip:]
        if query.limit is not None:
            rows = rows[: query.limit]
        return rows

    # ── Adapter protocol ─────────────────────────────────────────────

    async def all(self, query: Query) -> List[ModelItem]:
        async with self._lock:
            rows = self._select(query)
        return [query.model.from_stored(dict(row)) for row in rows]

    async def save(
        self,
        data: Union[ModelItem, Sequence[ModelItem]],
        **opts: Any,
    ) -> Any:
        async with self._lock:
            if isinstance(data, (list, tuple)):
                saved = [self._insert(item) for item in data]
                logger.debug("Inserted %d items", len(saved))
                return saved
            return self._insert(data)

    async def update(self, data: Any, query: Query, **opts: Any) -> Any:
        """Returns the item when given one, else the number of rows updated."""
        from ..models.base import ModelItem

        if isinstance(data, ModelItem):
            values = self._snapshot(data)
            values.pop("id", None)
        else:
            declared = query.model._description.properties
            values = {k: v for k, v in dict(data).items() if k in declared}

        async with self._lock:
            rows = self._select(query)
            for row in rows:
                row.update(values)

        if isinstance(data, ModelItem):
            data._saved = True
            return data
        return len(rows)

    async def remove(self, query: Query) -> int:
        async with self._lock:
            table = self._tables.get(query.model_name)
            if not table:
                return 0
            rows = self._select(query)
            for row in rows:
                del table[row["id"]]
        return len(rows)

    async def drop_table(self, *names: str) -> None:
        async with self._lock:
            for name in names:
                self._tables.pop(name, None)
                self._counters.pop(name, None)

    def count(self, model_name: str) -> int:
        """Number of stored records for ``model_name``."""
        return len(self._tables.get(model_name, {}))
