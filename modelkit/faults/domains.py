"""
ModelKit Faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults
- MODEL faults (registration, usage, configuration of models)
- VALIDATION faults (per-record validation surfaced by save)
"""

from typing import Any, Optional
from .core import Fault, FaultDomain, Severity


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# MODEL Faults
# ============================================================================

class ModelFault(Fault):
    """Base class for model definition and usage faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        domain: FaultDomain = FaultDomain.MODEL,
        severity: Severity = Severity.ERROR,
        retryable: bool = False,
        public: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=domain,
            severity=severity,
            retryable=retryable,
            public=public,
            metadata=metadata,
        )


class ModelNotFoundFault(ModelFault):
    """Model not found in registry."""

    def __init__(self, model_name: str, **kwargs):
        super().__init__(
            code="MODEL_NOT_FOUND",
            message=f"Model '{model_name}' not found in ModelRegistry",
            domain=FaultDomain.REGISTRY,
            metadata={"model": model_name, **kwargs.get("metadata", {})},
        )


class ModelRegistrationFault(ModelFault):
    """Model registration failed."""

    def __init__(self, model_name: str, reason: str, **kwargs):
        super().__init__(
            code="MODEL_REGISTRATION_FAILED",
            message=f"Failed to register model '{model_name}': {reason}",
            domain=FaultDomain.REGISTRY,
            severity=Severity.FATAL,
            metadata={"model": model_name, "reason": reason, **kwargs.get("metadata", {})},
        )


class AdapterNotFoundFault(ModelFault):
    """No storage adapter is attached to a model."""

    def __init__(self, model_name: str, **kwargs):
        super().__init__(
            code="ADAPTER_NOT_FOUND",
            message=f"Adapter not found for {model_name}",
            severity=Severity.FATAL,
            metadata={"model": model_name, **kwargs.get("metadata", {})},
        )


class UnknownDatatypeFault(ModelFault):
    """A property declares a datatype with no registered coercion."""

    def __init__(self, datatype: str, property_name: str, **kwargs):
        super().__init__(
            code="UNKNOWN_DATATYPE",
            message=f"'{datatype}' is not a valid datatype (property '{property_name}')",
            severity=Severity.FATAL,
            metadata={"datatype": datatype, "property": property_name, **kwargs.get("metadata", {})},
        )


class UnknownValidatorFault(ModelFault):
    """A property carries a validation rule with no registered validator."""

    def __init__(self, validator: str, property_name: str, **kwargs):
        super().__init__(
            code="UNKNOWN_VALIDATOR",
            message=f"{validator} is not a valid validator (property '{property_name}')",
            severity=Severity.FATAL,
            metadata={"validator": validator, "property": property_name, **kwargs.get("metadata", {})},
        )


class ValidatorConfigFault(ModelFault):
    """A validation rule is malformed (bad qualifier)."""

    def __init__(self, validator: str, property_name: str, reason: str, **kwargs):
        super().__init__(
            code="VALIDATOR_MISCONFIGURED",
            message=f"{validator} validator for '{property_name}' is misconfigured: {reason}",
            severity=Severity.FATAL,
            metadata={
                "validator": validator,
                "property": property_name,
                "reason": reason,
                **kwargs.get("metadata", {}),
            },
        )


class AssociationFault(ModelFault):
    """An association was built between items in an invalid state."""

    def __init__(self, model_name: str, kind: str, reason: str, **kwargs):
        super().__init__(
            code="ASSOCIATION_INVALID",
            message=f"Cannot build {kind} association with {model_name}: {reason}",
            metadata={"model": model_name, "kind": kind, "reason": reason, **kwargs.get("metadata", {})},
        )


class BulkSaveFault(ModelFault):
    """A bulk save contained items that are already persisted."""

    def __init__(self, model_name: str, **kwargs):
        super().__init__(
            code="BULK_SAVE_REJECTED",
            message="A bulk-save can only have new items in it.",
            metadata={"model": model_name, **kwargs.get("metadata", {})},
        )


# ============================================================================
# VALIDATION Faults
# ============================================================================

class ModelValidationFault(ModelFault):
    """An item failed validation and was not handed to its adapter."""

    def __init__(self, model_name: str, errors: dict[str, str], **kwargs):
        self.errors = errors
        error_summary = "; ".join(f"{k}: {v}" for k, v in errors.items())
        super().__init__(
            code="MODEL_VALIDATION_FAILED",
            message=f"{model_name} failed validation: {error_summary}",
            domain=FaultDomain.VALIDATION,
            severity=Severity.WARN,
            public=True,
            metadata={"model": model_name, "errors": errors, **kwargs.get("metadata", {})},
        )

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base
