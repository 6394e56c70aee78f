"""
Shared test fixtures and helpers for the ModelKit test suite.
"""

import pytest
from typing import Any, List, Tuple

from modelkit.adapters import MemoryAdapter
from modelkit.config import ModelConfig
from modelkit.models import ModelRegistry


# ============================================================================
# Model definitions
# ============================================================================

class UserDefinition:
    auto_increment_id = True

    def define(self):
        self.property("login", "string", required=True)
        self.property("firstName", "string")
        self.property("lastName", "string")
        self.property("password", "string")
        self.property("confirmPassword", "string")
        self.validates_length("login", {"min": 3})
        self.validates_confirmed("password", "confirmPassword")
        self.has_many("Accounts")
        self.has_one("Profile")

    def full_name(self):
        return f"{self.firstName} {self.lastName}"


class AccountDefinition:
    def define(self):
        self.property("label", "string")
        self.belongs_to("User")


def profile_definition(m):
    m.property("bio", "text")
    m.belongs_to("User")


def register_models(registry: ModelRegistry) -> ModelRegistry:
    registry.register("User", UserDefinition)
    registry.register("Account", AccountDefinition)
    registry.register("Profile", profile_definition)
    return registry


# ============================================================================
# Adapters
# ============================================================================

class RecordingAdapter(MemoryAdapter):
    """MemoryAdapter that records every call it receives."""

    def __init__(self):
        super().__init__()
        self.calls: List[Tuple[str, Any]] = []

    async def all(self, query):
        self.calls.append(("all", query))
        return await super().all(query)

    async def save(self, data, **opts):
        self.calls.append(("save", data))
        return await super().save(data, **opts)

    async def update(self, data, query, **opts):
        self.calls.append(("update", query))
        return await super().update(data, query, **opts)

    async def remove(self, query):
        self.calls.append(("remove", query))
        return await super().remove(query)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def config():
    """Default model configuration."""
    return ModelConfig()


@pytest.fixture
def registry(config):
    """Fresh, empty registry."""
    return ModelRegistry(config)


@pytest.fixture
def adapter():
    """Fresh recording in-memory adapter."""
    return RecordingAdapter()


@pytest.fixture
def store(registry, adapter):
    """Registry with User/Account/Profile registered and the adapter attached."""
    register_models(registry)
    registry.set_adapter(adapter)
    return registry


@pytest.fixture
def User(store):
    return store.model("User")


@pytest.fixture
def Account(store):
    return store.model("Account")


@pytest.fixture
def Profile(store):
    return store.model("Profile")
