"""
ModelKit definition DSL — the surface a model definition runs against.

A definition is either a class with a ``define(self)`` method or a plain
callable taking the DSL object:

    class User:
        auto_increment_id = True

        def define(self):
            self.property("login", "string", required=True)
            self.property("lastName", "string")
            self.validates_length("login", {"min": 3})
            self.has_many("Accounts")

        def display_name(self):
            return self.login.title()

    def account(m):
        m.property("label", "string")
        m.belongs_to("User")

Every call writes into the registry's ``ModelDescription`` for the model
being defined.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, TYPE_CHECKING

from ..faults import ModelNotFoundFault, ModelRegistrationFault
from ..utils.strings import decapitalize
from .description import AssociationKind, ModelDescription, PropertyDescription

if TYPE_CHECKING:
    from .registry import ModelRegistry

logger = logging.getLogger("modelkit.models.definition")

__all__ = ["ModelDefinitionBase", "foreign_key_name"]


def foreign_key_name(model_name: str) -> str:
    """``User`` -> ``userId``."""
    return decapitalize(model_name) + "Id"


class ModelDefinitionBase:
    """
    DSL object bound to one model name.

    ``validates_<name>`` methods are not generated: attribute lookup falls
    back to the registry's validator table (``validates_present`` ->
    ``validates("present", ...)``).
    """

    def __init__(self, name: str, registry: ModelRegistry):
        self.name = name
        self._registry = registry

        # Base audit properties; user code may still override them
        if registry.config.use_timestamps:
            self.property("createdAt", "datetime")
            self.property("updatedAt", "datetime")

    @property
    def description(self) -> ModelDescription:
        return self._registry.description(self.name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        condition = self._registry.validator_methods.get(name)
        if condition is None:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            )

        def forward(property_name: str, qualifier: Any = None, **options: Any) -> None:
            self.validates(condition, property_name, qualifier, **options)

        forward.__name__ = name
        return forward

    def define_properties(self, mapping: Mapping[str, Mapping[str, Any]]) -> None:
        """
        Declare several properties at once.

        Usage:
            m.define_properties({
                "login": {"type": "string", "required": True},
                "age": {"type": "int"},
            })
        """
        for name, spec in mapping.items():
            options = {k: v for k, v in spec.items() if k != "type"}
            self.property(name, spec["type"], **options)

    def validates(
        self,
        condition: str,
        property_name: str,
        qualifier: Any = None,
        **options: Any,
    ) -> None:
        """Attach (or replace) the ``condition`` rule on a declared property."""
        prop = self.description.get_property(property_name)
        if prop is None:
            raise ModelRegistrationFault(
                self.name,
                f"cannot add '{condition}' validation to undeclared property '{property_name}'",
            )
        rule: Dict[str, Any] = dict(options)
        rule["qualifier"] = qualifier
        prop.validations[condition] = rule

    # ── Associations ─────────────────────────────────────────────────

    def has_many(self, name: str) -> None:
        self.description.add_association(AssociationKind.HAS_MANY, name)

    def has_one(self, name: str) -> None:
        self.description.add_association(AssociationKind.HAS_ONE, name)

    def belongs_to(self, name: str) -> None:
        """Declare ownership by ``name`` and its ``<name>Id`` foreign key."""
        target = self._registry.get_model(name)
        if target is None:
            raise ModelNotFoundFault(
                name,
                metadata={"reason": f"{self.name} belongs to '{name}', which is not registered yet"},
            )
        self.description.add_association(AssociationKind.BELONGS_TO, name)
        id_datatype = "int" if target.auto_increment_id else "string"
        self.property(foreign_key_name(name), id_datatype)

    # Declared last: the name shadows the ``property`` builtin in the class body
    def property(self, name: str, datatype: str, **options: Any) -> None:
        """Declare ``name``; a later call for the same name replaces it."""
        self.description.properties[name] = PropertyDescription(name, datatype, options)
        logger.debug("%s: declared property %s (%s)", self.name, name, datatype)


DefinitionFn = Callable[[ModelDefinitionBase], Optional[Any]]
