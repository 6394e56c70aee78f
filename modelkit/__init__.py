"""
ModelKit — model definitions, validation and associations over pluggable
storage adapters.

    from modelkit import ModelRegistry, MemoryAdapter

    registry = ModelRegistry()
    User = registry.register("User", UserDefinition)
    registry.set_adapter(MemoryAdapter())

    user = User.create({"login": "mde"})
    await user.save()
"""

__version__ = "0.1.0"

from .config import ConfigLoader, ModelConfig
from .faults import (
    AdapterNotFoundFault,
    AssociationFault,
    BulkSaveFault,
    ConfigInvalidFault,
    Fault,
    FaultDomain,
    ModelFault,
    ModelNotFoundFault,
    ModelRegistrationFault,
    ModelValidationFault,
    Severity,
    UnknownDatatypeFault,
    UnknownValidatorFault,
    ValidatorConfigFault,
)
from .models import (
    AssociationKind,
    Datatype,
    ModelDefinitionBase,
    ModelDescription,
    ModelItem,
    ModelRegistry,
    PropertyDescription,
    Query,
)
from .adapters import (
    ADAPTERS,
    Adapter,
    MemoryAdapter,
    create_adapter,
    get_adapter_info,
)

__all__ = [
    "__version__",
    # Config
    "ConfigLoader",
    "ModelConfig",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ModelFault",
    "ModelNotFoundFault",
    "ModelRegistrationFault",
    "ModelValidationFault",
    "AdapterNotFoundFault",
    "AssociationFault",
    "BulkSaveFault",
    "ConfigInvalidFault",
    "UnknownDatatypeFault",
    "UnknownValidatorFault",
    "ValidatorConfigFault",
    # Models
    "AssociationKind",
    "Datatype",
    "ModelDefinitionBase",
    "ModelDescription",
    "ModelItem",
    "ModelRegistry",
    "PropertyDescription",
    "Query",
    # Adapters
    "ADAPTERS",
    "Adapter",
    "MemoryAdapter",
    "create_adapter",
    "get_adapter_info",
]
