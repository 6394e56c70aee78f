"""
ModelKit Models — definition, registration, validation and associations.

Public API:
    from modelkit.models import ModelRegistry, ModelItem

    registry = ModelRegistry()

    class User:
        auto_increment_id = True

        def define(self):
            self.property("login", "string", required=True)
            self.has_many("Accounts")

    User = registry.register("User", User)
"""

from .description import AssociationKind, ModelDescription, PropertyDescription
from .datatypes import ANY, DEFAULT_DATATYPES, Datatype, DatatypeResult
from .validators import DEFAULT_VALIDATORS, ValidatorFn
from .formatters import DEFAULT_FORMATTERS, FormatterFn
from .query import Query
from .definition import ModelDefinitionBase, foreign_key_name
from .associations import AccessorSpec, AssociationManager, build_association_methods
from .validation import AUDIT_FIELDS, PropertyResult, ValidationPipeline
from .base import ModelItem, hybridmethod
from .registry import ModelRegistry

__all__ = [
    # Metadata
    "AssociationKind",
    "ModelDescription",
    "PropertyDescription",
    # Libraries
    "ANY",
    "Datatype",
    "DatatypeResult",
    "DEFAULT_DATATYPES",
    "DEFAULT_VALIDATORS",
    "DEFAULT_FORMATTERS",
    "ValidatorFn",
    "FormatterFn",
    # Runtime
    "Query",
    "ModelDefinitionBase",
    "foreign_key_name",
    "AccessorSpec",
    "AssociationManager",
    "build_association_methods",
    "AUDIT_FIELDS",
    "PropertyResult",
    "ValidationPipeline",
    "ModelItem",
    "hybridmethod",
    "ModelRegistry",
]
