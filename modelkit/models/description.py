"""
Model metadata — PropertyDescription and ModelDescription.

These dataclasses are the registry's record of what a model definition
declared. They are written by the definition DSL and read by the
validation pipeline, the model factory and the association subsystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class AssociationKind(str, Enum):
    """Association cardinality, as declared from the owning model."""
    HAS_MANY = "hasMany"
    HAS_ONE = "hasOne"
    BELONGS_TO = "belongsTo"


def derive_validations(options: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Build the implicit validation rules for a set of property options.

    ``required`` or ``length`` imply a ``present`` rule, ``length`` a
    ``length`` rule and ``format`` a ``format`` rule.
    """
    validations: Dict[str, Dict[str, Any]] = {}
    if options.get("required") or options.get("length"):
        validations["present"] = {}
    if options.get("length"):
        validations["length"] = {"qualifier": options["length"]}
    if options.get("format"):
        validations["format"] = {"qualifier": options["format"]}
    return validations


@dataclass
class PropertyDescription:
    """
    One declared model field.

    Example:
        PropertyDescription("login", "string", {"required": True})
        # validations == {"present": {}}
    """
    name: str
    datatype: str
    options: Dict[str, Any] = field(default_factory=dict)
    validations: Dict[str, Dict[str, Any]] = field(init=False)

    def __post_init__(self) -> None:
        self.validations = derive_validations(self.options)

    @property
    def is_wildcard(self) -> bool:
        return self.datatype == "*"


@dataclass
class ModelDescription:
    """
    Per-model metadata owned by the registry.

    ``properties`` keeps declaration order; ``associations`` maps each kind
    to the set of associated names (stored as ``{name: True}``).
    """
    name: str
    properties: Dict[str, PropertyDescription] = field(default_factory=dict)
    associations: Dict[AssociationKind, Dict[str, bool]] = field(default_factory=dict)

    def get_property(self, name: str) -> Optional[PropertyDescription]:
        """Find property by name."""
        return self.properties.get(name)

    @property
    def property_names(self) -> List[str]:
        return list(self.properties)

    def associated(self, kind: AssociationKind) -> List[str]:
        """Names associated under ``kind``, in declaration order."""
        return list(self.associations.get(kind, {}))

    def add_association(self, kind: AssociationKind, name: str) -> None:
        self.associations.setdefault(kind, {})[name] = True
