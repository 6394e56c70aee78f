"""
Tests for the fault taxonomy.
"""

import pytest

from modelkit.faults import (
    AdapterNotFoundFault,
    AssociationFault,
    BulkSaveFault,
    Fault,
    FaultDomain,
    ModelFault,
    ModelNotFoundFault,
    ModelValidationFault,
    Severity,
    UnknownValidatorFault,
)


class TestFault:
    """Base fault behaviour."""

    def test_str_and_to_dict(self):
        fault = Fault(code="BOOM", message="it broke", domain=FaultDomain.IO)
        assert str(fault) == "[BOOM] it broke"
        data = fault.to_dict()
        assert data["code"] == "BOOM"
        assert data["domain"] == "io"
        assert data["severity"] == "warn"
        assert data["retryable"] is True

    def test_missing_fields(self):
        with pytest.raises(TypeError):
            Fault(code="X")

    def test_is_exception(self):
        with pytest.raises(Exception):
            raise ModelNotFoundFault("User")


class TestModelFaults:
    """Concrete model faults."""

    def test_model_not_found(self):
        fault = ModelNotFoundFault("User")
        assert isinstance(fault, ModelFault)
        assert fault.domain == FaultDomain.REGISTRY
        assert fault.metadata == {"model": "User"}

    def test_adapter_not_found_message(self):
        fault = AdapterNotFoundFault("User")
        assert fault.message == "Adapter not found for User"
        assert fault.severity is Severity.FATAL

    def test_bulk_save_message(self):
        assert BulkSaveFault("User").message == "A bulk-save can only have new items in it."

    def test_association_fault(self):
        fault = AssociationFault("User", "belongsTo", "not saved")
        assert fault.code == "ASSOCIATION_INVALID"
        assert fault.metadata["kind"] == "belongsTo"

    def test_unknown_validator(self):
        fault = UnknownValidatorFault("telepathy", "login")
        assert "telepathy is not a valid validator" in fault.message

    def test_validation_fault_carries_errors(self):
        errors = {"login": "login is required."}
        fault = ModelValidationFault("User", errors)
        assert fault.errors == errors
        assert fault.domain == FaultDomain.VALIDATION
        assert fault.public is True
        assert fault.to_dict()["errors"] == errors
        assert "login: login is required." in fault.message
