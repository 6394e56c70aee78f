"""
ModelKit Model Base — the runtime class behind every registered model.

``ModelRegistry.register`` generates one ``ModelItem`` subclass per model
name. The subclass carries the model's description and registry; the
static API lives here as classmethods and dispatches to the adapter the
registry holds for the model name.

Usage:
    User = registry.register("User", UserDefinition)

    user = User.create({"login": "mde"})        # validated, not persisted
    if user.is_valid():
        await user.save()

    same = await User.load(user.id)
    everyone = await User.all({"lastName": "Eernisse"}, sort="login")
    await User.update({"firstName": "M"}, user.id)
    await User.remove(user.id)
"""

from __future__ import annotations

import json
import logging
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Union,
    TYPE_CHECKING,
)

from ..faults import BulkSaveFault, ModelValidationFault
from .associations import AccessorSpec, AssociationManager
from .query import Query

if TYPE_CHECKING:
    from .description import ModelDescription
    from .registry import ModelRegistry

logger = logging.getLogger("modelkit.models")

__all__ = ["ModelItem", "hybridmethod"]

# Instance attributes that are bookkeeping, not data
_HIDDEN = frozenset({"type", "adapter", "associations", "_unsaved_associations"})


def _is_scalar(query: Any) -> bool:
    return isinstance(query, (str, int)) and not isinstance(query, bool)


def _normalize_query(query: Any) -> Dict[str, Any]:
    """Scalar ids become ``{"id": value}``."""
    if _is_scalar(query):
        return {"id": query}
    return dict(query or {})


class hybridmethod:
    """
    A method with separate class-level and instance-level implementations.

        @hybridmethod
        async def save(cls, data): ...

        @save.instancemethod
        async def save(self): ...
    """

    def __init__(self, fclass: Callable[..., Any], finstance: Optional[Callable[..., Any]] = None):
        self.fclass = fclass
        self.finstance = finstance
        self.__doc__ = fclass.__doc__

    def instancemethod(self, finstance: Callable[..., Any]) -> hybridmethod:
        self.finstance = finstance
        return self

    def __get__(self, obj: Any, objtype: Optional[type] = None) -> Callable[..., Any]:
        if obj is None or self.finstance is None:
            return self.fclass.__get__(objtype if objtype is not None else type(obj), type)
        return self.finstance.__get__(obj, objtype)


class ModelItem:
    """
    Base class for generated model classes.

    Instances keep declared property values as plain attributes. Reading a
    declared property that was never set gives ``None``; association
    accessors (``get_accounts``, ``add_account``...) resolve through the
    model's accessor table.
    """

    model_name: ClassVar[str] = ""
    auto_increment_id: ClassVar[bool] = False
    _description: ClassVar[Optional[ModelDescription]] = None
    _registry: ClassVar[Optional[ModelRegistry]] = None
    _association_methods: ClassVar[Dict[str, AccessorSpec]] = {}

    def __init__(self, params: Optional[Mapping[str, Any]] = None):
        params = params or {}
        self.type = self.model_name
        # Items fetched from an adapter arrive with ``_saved`` set
        self._saved: bool = bool(params.get("_saved", False))
        self.id = params.get("id")
        self.errors: Optional[Dict[str, str]] = None
        self._unsaved_associations: List[ModelItem] = []
        self.associations = AssociationManager(self)

    def __getattr__(self, name: str) -> Any:
        cls = type(self)
        spec = cls._association_methods.get(name)
        if spec is not None:
            return self.associations.accessor(spec)
        description = cls._description
        if description is not None and name in description.properties:
            return None
        raise AttributeError(f"'{cls.__name__}' object has no attribute '{name}'")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"

    # ── Static API ───────────────────────────────────────────────────

    @classmethod
    def create(cls, params: Optional[Mapping[str, Any]] = None, **opts: Any) -> ModelItem:
        """
        Build and validate a new item. Never raises on bad data: check
        ``is_valid()`` / ``errors`` on the result.
        """
        return cls._registry.create_item(cls.model_name, params, **opts)

    @classmethod
    def from_stored(cls, record: Mapping[str, Any]) -> ModelItem:
        """Rebuild a persisted item from an adapter record, without validation."""
        item = cls({"id": record.get("id"), "_saved": True})
        for key, value in record.items():
            if key not in ("id", "_saved", "type"):
                setattr(item, key, value)
        return item

    @classmethod
    async def load(cls, query: Any = None, **opts: Any) -> Optional[ModelItem]:
        """First item matching ``query`` (an id or a conditions mapping), or None."""
        query = _normalize_query(query)
        opts["limit"] = 1
        items = await cls.all(query, **opts)
        return items[0] if items else None

    @classmethod
    async def all(cls, query: Optional[Mapping[str, Any]] = None, **opts: Any) -> List[ModelItem]:
        """All items matching ``query``; ``limit``, ``skip`` and ``sort`` are honoured."""
        adapter = cls._registry.adapter_for(cls.model_name)
        q = Query(cls, query, opts)
        logger.debug("%s.all %r", cls.model_name, q)
        return await adapter.all(q)

    @hybridmethod
    async def save(cls, data: Union[ModelItem, Sequence[ModelItem]], **opts: Any) -> Any:
        """
        Persist one item or a batch of new items.

        Raises:
            AdapterNotFoundFault: no adapter for this model
            BulkSaveFault: a batch contains an already-saved item
            ModelValidationFault: an item is invalid (nothing is written)
        """
        registry = cls._registry
        adapter = registry.adapter_for(cls.model_name)

        # Bulk save only takes new items; existing ones go through instance.save
        if isinstance(data, (list, tuple)):
            items = list(data)
            if any(item._saved for item in items):
                raise BulkSaveFault(cls.model_name)
            for item in items:
                if not item.is_valid():
                    raise ModelValidationFault(cls.model_name, item.errors)
            result = await adapter.save(items, **opts)
            for item in items:
                item._saved = True
            return result

        if not data.is_valid():
            raise ModelValidationFault(cls.model_name, data.errors)

        if data._saved:
            if registry.config.use_timestamps:
                data.updatedAt = registry.now()
            return await cls.update(data, {"id": data.id}, **opts)

        result = await adapter.save(data, **opts)
        data._saved = True
        return result

    @save.instancemethod
    async def save(self, **opts: Any) -> Any:
        """Flush queued associated items, then save this item."""
        await self.associations.flush()
        return await type(self).save(self, **opts)

    @classmethod
    async def update(cls, data: Any, query: Any = None, **opts: Any) -> Any:
        """Apply ``data`` to the items matching ``query`` (an id or mapping)."""
        adapter = cls._registry.adapter_for(cls.model_name)
        q = Query(cls, _normalize_query(query), opts)
        if not isinstance(data, ModelItem):
            data = cls._registry.validation.normalize_params(data)
        result = await adapter.update(data, q, **opts)
        if isinstance(data, ModelItem):
            data._saved = True
        return result

    @classmethod
    async def remove(cls, query: Any = None, **opts: Any) -> Any:
        """Delete the items matching ``query``; a scalar id removes at most one."""
        if _is_scalar(query):
            opts["limit"] = 1
        adapter = cls._registry.adapter_for(cls.model_name)
        q = Query(cls, _normalize_query(query), opts)
        return await adapter.remove(q)

    # ── Instance API ─────────────────────────────────────────────────

    def is_valid(self) -> bool:
        return self.errors is None

    def update_attributes(self, params: Mapping[str, Any], **opts: Any) -> ModelItem:
        """Re-validate current values merged with ``params``, in place."""
        merged = {
            name: self.__dict__[name]
            for name in self._description.properties
            if name in self.__dict__
        }
        merged.update(self._registry.validation.normalize_params(params))
        return self._registry.update_item(self, merged, **opts)

    def to_obj(self) -> Dict[str, Any]:
        """Shallow snapshot of the item's data attributes."""
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in _HIDDEN and not callable(value)
        }

    def to_json(self) -> str:
        """JSON with ``id``, ``type`` and every declared property, formatted by datatype."""
        formatters = self._registry.formatters
        obj: Dict[str, Any] = {"id": self.id, "type": self.type}
        for name, prop in self._description.properties.items():
            value = getattr(self, name)
            formatter = formatters.get(prop.datatype.lower())
            obj[name] = formatter(value) if callable(formatter) else value
        return json.dumps(obj)

    __str__ = to_json

    # ── Associations ─────────────────────────────────────────────────

    async def get_association(
        self,
        model_name: str,
        kind: str,
        query: Optional[Mapping[str, Any]] = None,
        **opts: Any,
    ) -> Any:
        return await self.associations.get(model_name, kind, query, **opts)

    def create_association(self, model_name: str, kind: str, data: ModelItem) -> None:
        self.associations.create(model_name, kind, data)
