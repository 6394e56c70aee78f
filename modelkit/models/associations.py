"""
Association subsystem — accessors, foreign-key wiring and deferred saves.

Accessor names are derived once per model from its description:

    has_many("Accounts")  ->  get_accounts(query=None, **opts)  /  add_account(item)
    has_one("Profile")    ->  get_profile(**opts)               /  set_profile(item)
    belongs_to("User")    ->  get_user(**opts)                  /  set_user(item)

``create`` never writes to storage: it sets the foreign key and queues the
dependent item on the saved side's ``_unsaved_associations``. The queue is
flushed by the owner's next ``save()``, strictly one item at a time, so a
child is never written before the parent it references.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Union, TYPE_CHECKING

from ..faults import AssociationFault
from ..utils.strings import singularize, snakeize
from .definition import foreign_key_name
from .description import AssociationKind, ModelDescription

if TYPE_CHECKING:
    from .base import ModelItem

logger = logging.getLogger("modelkit.models.associations")

__all__ = ["AccessorSpec", "AssociationManager", "build_association_methods"]


class AccessorSpec(NamedTuple):
    """Entry of a model's accessor table."""
    action: str          # "get" or "create"
    model_name: str      # target model
    kind: AssociationKind


def build_association_methods(description: ModelDescription) -> Dict[str, AccessorSpec]:
    """Map accessor method names to the association they operate on."""
    table: Dict[str, AccessorSpec] = {}
    for kind in AssociationKind:
        create_prefix = "add" if kind is AssociationKind.HAS_MANY else "set"
        for key in description.associated(kind):
            model_name = singularize(key) if kind is AssociationKind.HAS_MANY else key
            table[f"get_{snakeize(key)}"] = AccessorSpec("get", model_name, kind)
            table[f"{create_prefix}_{snakeize(model_name)}"] = AccessorSpec(
                "create", model_name, kind
            )
    return table


class AssociationManager:
    """Association operations on behalf of one model item."""

    __slots__ = ("_item",)

    def __init__(self, item: ModelItem):
        self._item = item

    def accessor(self, spec: AccessorSpec) -> Callable[..., Any]:
        if spec.action == "get":
            return partial(self.get, spec.model_name, spec.kind)
        return partial(self.create, spec.model_name, spec.kind)

    async def get(
        self,
        model_name: str,
        kind: Union[AssociationKind, str],
        query: Optional[Mapping[str, Any]] = None,
        **opts: Any,
    ) -> Any:
        """
        Fetch associated items.

        ``belongs_to`` loads the item whose id is our foreign key; ``has_one``
        and ``has_many`` look for items whose foreign key is our id. Only
        ``has_many`` accepts extra query conditions and returns a list.
        """
        item = self._item
        kind = AssociationKind(kind)
        target = item._registry.model(model_name)

        conditions: Dict[str, Any] = dict(query or {}) if kind is AssociationKind.HAS_MANY else {}
        if kind is AssociationKind.BELONGS_TO:
            conditions["id"] = getattr(item, foreign_key_name(model_name))
        else:
            conditions[foreign_key_name(item.model_name)] = item.id

        if kind is AssociationKind.HAS_MANY:
            return await target.all(conditions, **opts)
        return await target.load(conditions, **opts)

    def create(
        self,
        model_name: str,
        kind: Union[AssociationKind, str],
        data: ModelItem,
    ) -> None:
        """
        Wire ``data`` to our item and queue the dependent side for saving.

        Raises:
            AssociationFault: the side that must already exist is unsaved
        """
        item = self._item
        kind = AssociationKind(kind)

        if kind is AssociationKind.BELONGS_TO:
            if not (data._saved and data.id):
                raise AssociationFault(
                    model_name, kind.value,
                    "the item it belongs to is not yet saved",
                )
            setattr(item, foreign_key_name(model_name), data.id)
            data._unsaved_associations.append(item)
        else:
            if not (item._saved and item.id):
                raise AssociationFault(
                    model_name, kind.value,
                    f"the owning {item.model_name} is not yet saved",
                )
            setattr(data, foreign_key_name(item.model_name), item.id)
            item._unsaved_associations.append(data)

    async def flush(self) -> List[ModelItem]:
        """
        Save queued associated items one at a time, in insertion order.

        Already-saved entries are skipped. The first exception aborts the
        flush and propagates; items saved before it stay saved.
        """
        unsaved = self._item._unsaved_associations
        flushed: List[ModelItem] = []
        while unsaved:
            assn = unsaved.pop(0)
            if assn._saved:
                continue
            logger.debug(
                "%s: saving associated %s", self._item.model_name, assn.model_name
            )
            await assn.save()
            flushed.append(assn)
        return flushed
