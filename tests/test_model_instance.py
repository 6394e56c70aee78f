"""
Tests for the instance-level model API.
"""

import json

import pytest

from modelkit.config import ModelConfig
from modelkit.models import ModelRegistry


class Note:
    def define(self):
        self.property("title", "string", required=True)
        self.property("body", "text")

    def after_create(self):
        self.hook_calls = getattr(self, "hook_calls", []) + ["create"]

    def after_update(self):
        self.hook_calls = getattr(self, "hook_calls", []) + ["update"]


class TestAttributes:
    """Declared properties and attribute lookup."""

    def test_unset_property_reads_none(self, User):
        user = User.create({"login": "mde"})
        assert user.lastName is None

    def test_unknown_attribute(self, User):
        user = User.create({"login": "mde"})
        with pytest.raises(AttributeError):
            user.nickname

    def test_repr(self, User):
        assert repr(User.create({"login": "mde"})) == "<User id=None>"


class TestHooks:
    """after_create / after_update hooks from the definition."""

    def test_after_create(self, registry):
        Model = registry.register("Note", Note)
        note = Model.create({"title": "hi"})
        assert note.hook_calls == ["create"]

    def test_after_create_runs_for_invalid_items(self, registry):
        Model = registry.register("Note", Note)
        note = Model.create({})
        assert not note.is_valid()
        assert note.hook_calls == ["create"]

    def test_after_update(self, registry):
        Model = registry.register("Note", Note)
        note = Model.create({"title": "hi"})
        note.update_attributes({"body": "text"})
        assert note.hook_calls == ["create", "update"]


class TestUpdateAttributes:
    """In-place revalidation."""

    def test_merges_with_current_values(self, User):
        user = User.create({"login": "mde", "firstName": "Michael"})
        result = user.update_attributes({"last_name": "Eernisse"})
        assert result is user
        assert user.login == "mde"
        assert user.firstName == "Michael"
        assert user.lastName == "Eernisse"
        assert user.is_valid()

    def test_sets_errors(self, User):
        user = User.create({"login": "mde"})
        user.update_attributes({"login": ""})
        assert user.errors == {"login": "login is required."}

    def test_keeps_created_at(self, User):
        user = User.create({"login": "mde"})
        created = user.createdAt
        user.update_attributes({"login": "mde2"})
        assert user.createdAt == created

    @pytest.mark.asyncio
    async def test_does_not_persist(self, User, adapter):
        user = User.create({"login": "mde"})
        await user.save()
        user.update_attributes({"login": "other"})
        loaded = await User.load(user.id)
        assert loaded.login == "mde"


class TestSerialization:
    """to_obj / to_json."""

    def test_to_obj(self, User):
        user = User.create({"login": "mde"})
        obj = user.to_obj()
        assert obj["login"] == "mde"
        assert obj["id"] is None
        for hidden in ("type", "associations", "_unsaved_associations"):
            assert hidden not in obj

    def test_to_obj_is_a_copy(self, User):
        user = User.create({"login": "mde"})
        user.to_obj()["login"] = "changed"
        assert user.login == "mde"

    def test_to_json(self, User):
        user = User.create({"login": "mde"})
        data = json.loads(user.to_json())
        assert data["type"] == "User"
        assert data["id"] is None
        assert data["login"] == "mde"
        assert data["lastName"] is None
        assert data["createdAt"] == user.createdAt.isoformat()
        assert data["createdAt"].endswith("+00:00")

    def test_str_is_json(self, User):
        user = User.create({"login": "mde"})
        assert str(user) == user.to_json()

    def test_custom_formatter(self):
        registry = ModelRegistry(ModelConfig(use_timestamps=False))
        registry.register_formatter("string", str.upper)
        Model = registry.register("Tag", lambda m: m.property("name", "string"))
        assert json.loads(Model.create({"name": "py"}).to_json()) == {
            "id": None,
            "type": "Tag",
            "name": "PY",
        }


class TestInstanceSave:
    """save() in its instance form."""

    @pytest.mark.asyncio
    async def test_save(self, User):
        user = User.create({"login": "mde"})
        result = await user.save()
        assert result is user
        assert user._saved is True
        assert isinstance(user.id, int)

    @pytest.mark.asyncio
    async def test_save_again_updates(self, User):
        user = User.create({"login": "mde"})
        await user.save()
        user.firstName = "Michael"
        await user.save()
        loaded = await User.load(user.id)
        assert loaded.firstName == "Michael"
        assert loaded.updatedAt is not None
        assert len(await User.all()) == 1
