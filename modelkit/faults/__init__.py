"""
ModelKit Faults - structured fault types.

Errors in ModelKit are typed fault signals: each carries a stable code,
a domain, a severity and metadata so callers can tell programmer errors
(missing adapter, unknown validator) from per-record validation failures.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain enumeration
- Severity: Severity levels
"""

from .core import Fault, FaultDomain, Severity

from .domains import (
    AdapterNotFoundFault,
    AssociationFault,
    BulkSaveFault,
    ConfigFault,
    ConfigInvalidFault,
    ModelFault,
    ModelNotFoundFault,
    ModelRegistrationFault,
    ModelValidationFault,
    UnknownDatatypeFault,
    UnknownValidatorFault,
    ValidatorConfigFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",

    # Config
    "ConfigFault",
    "ConfigInvalidFault",

    # Model
    "ModelFault",
    "ModelNotFoundFault",
    "ModelRegistrationFault",
    "AdapterNotFoundFault",
    "UnknownDatatypeFault",
    "UnknownValidatorFault",
    "ValidatorConfigFault",
    "AssociationFault",
    "BulkSaveFault",
    "ModelValidationFault",
]
