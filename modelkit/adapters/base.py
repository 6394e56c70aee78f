"""
Adapter Protocol — the storage contract behind every model's static API.

Adapters receive ``Query`` objects and model items and perform the actual
I/O. Errors are raised, never returned: the model layer propagates them to
the caller untouched and performs no retries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Sequence, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.base import ModelItem
    from ..models.query import Query

__all__ = ["Adapter"]


class Adapter(ABC):
    """
    Abstract storage adapter.

    Implementations must mark every item they persist with
    ``_saved = True`` and assign its ``id``.
    """

    @abstractmethod
    async def all(self, query: Query) -> List[ModelItem]:
        """Return the items matching ``query`` (honouring limit/skip/sort)."""
        ...

    @abstractmethod
    async def save(
        self,
        data: Union[ModelItem, Sequence[ModelItem]],
        **opts: Any,
    ) -> Any:
        """Insert one new item or a batch of new items."""
        ...

    @abstractmethod
    async def update(self, data: Any, query: Query, **opts: Any) -> Any:
        """
        Apply ``data`` (an item or a mapping of values) to the items
        matching ``query``.
        """
        ...

    @abstractmethod
    async def remove(self, query: Query) -> int:
        """Delete the items matching ``query``; returns the number removed."""
        ...

    @abstractmethod
    async def drop_table(self, *names: str) -> None:
        """Discard all stored items for the named models."""
        ...

    @property
    def name(self) -> str:
        """Backend name for logging."""
        return self.__class__.__name__
