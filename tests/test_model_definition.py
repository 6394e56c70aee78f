"""
Tests for model metadata and the definition DSL.
"""

import pytest

from modelkit.config import ModelConfig
from modelkit.faults import ModelNotFoundFault, ModelRegistrationFault
from modelkit.models import (
    AssociationKind,
    ModelDescription,
    ModelRegistry,
    PropertyDescription,
    foreign_key_name,
)
from modelkit.models.description import derive_validations

from tests.conftest import UserDefinition


class TestPropertyDescription:
    """Implicit validation rules derived from property options."""

    def test_plain_property_has_no_rules(self):
        prop = PropertyDescription("bio", "text")
        assert prop.validations == {}

    def test_required_implies_present(self):
        prop = PropertyDescription("login", "string", {"required": True})
        assert prop.validations == {"present": {}}

    def test_length_implies_present_and_length(self):
        prop = PropertyDescription("zip", "string", {"length": 5})
        assert list(prop.validations) == ["present", "length"]
        assert prop.validations["length"] == {"qualifier": 5}

    def test_format_rule(self):
        rules = derive_validations({"format": r"^\d+$"})
        assert rules == {"format": {"qualifier": r"^\d+$"}}

    def test_wildcard(self):
        assert PropertyDescription("blob", "*").is_wildcard
        assert not PropertyDescription("blob", "object").is_wildcard


class TestModelDescription:
    """Declaration order and association bookkeeping."""

    def test_associations_keep_order(self):
        desc = ModelDescription("User")
        desc.add_association(AssociationKind.HAS_MANY, "Accounts")
        desc.add_association(AssociationKind.HAS_MANY, "Posts")
        assert desc.associated(AssociationKind.HAS_MANY) == ["Accounts", "Posts"]
        assert desc.associated(AssociationKind.HAS_ONE) == []

    def test_kind_values(self):
        assert AssociationKind("hasMany") is AssociationKind.HAS_MANY
        assert AssociationKind.BELONGS_TO.value == "belongsTo"

    def test_foreign_key_name(self):
        assert foreign_key_name("User") == "userId"
        assert foreign_key_name("BlogPost") == "blogPostId"


class TestDefinitionDSL:
    """The surface a definition runs against."""

    def test_timestamps_declared_first(self, registry):
        registry.register("User", UserDefinition)
        names = registry.description("User").property_names
        assert names[:3] == ["createdAt", "updatedAt", "login"]
        assert registry.description("User").properties["createdAt"].datatype == "datetime"

    def test_timestamps_disabled(self):
        registry = ModelRegistry(ModelConfig(use_timestamps=False))
        registry.register("User", UserDefinition)
        assert "createdAt" not in registry.description("User").properties

    def test_redeclaring_property_replaces_it(self, registry):
        def define(m):
            m.property("age", "string", required=True)
            m.property("age", "int")

        registry.register("Person", define)
        prop = registry.description("Person").properties["age"]
        assert prop.datatype == "int"
        assert prop.validations == {}

    def test_define_properties(self, registry):
        def define(m):
            m.define_properties({
                "login": {"type": "string", "required": True},
                "age": {"type": "int"},
            })

        registry.register("Person", define)
        props = registry.description("Person").properties
        assert props["login"].validations == {"present": {}}
        assert props["age"].datatype == "int"
        assert props["age"].options == {}

    def test_validates_stores_rule(self, registry):
        def define(m):
            m.property("login", "string")
            m.validates_format("login", r"^[a-z]+$", message="Lowercase only")

        registry.register("Person", define)
        rule = registry.description("Person").properties["login"].validations["format"]
        assert rule == {"qualifier": r"^[a-z]+$", "message": "Lowercase only"}

    def test_validates_overwrites_previous_rule(self, registry):
        def define(m):
            m.property("code", "string", length=4)
            m.validates_length("code", 6)

        registry.register("Coupon", define)
        rules = registry.description("Coupon").properties["code"].validations
        assert rules["length"] == {"qualifier": 6}

    def test_validates_undeclared_property(self, registry):
        def define(m):
            m.validates_present("ghost")

        with pytest.raises(ModelRegistrationFault):
            registry.register("Person", define)
        assert "Person" not in registry
        assert registry.get_description("Person") is None

    def test_unknown_validates_method(self, registry):
        def define(m):
            m.property("login", "string")
            m.validates_telepathy("login")

        with pytest.raises(AttributeError):
            registry.register("Person", define)

    def test_custom_validator_method(self, registry):
        registry.register_validator(
            "even", lambda name, value, params, rule, locale=None: None if value % 2 == 0 else "odd"
        )

        def define(m):
            m.property("count", "int")
            m.validates_even("count")

        registry.register("Counter", define)
        assert "even" in registry.description("Counter").properties["count"].validations

    def test_belongs_to_declares_int_key_for_auto_increment(self, store):
        prop = store.description("Account").properties["userId"]
        assert prop.datatype == "int"
        assert store.description("Account").associated(AssociationKind.BELONGS_TO) == ["User"]

    def test_belongs_to_declares_string_key(self, registry):
        registry.register("Team", lambda m: m.property("name", "string"))
        registry.register("Player", lambda m: m.belongs_to("Team"))
        assert registry.description("Player").properties["teamId"].datatype == "string"

    def test_belongs_to_unregistered_target(self, registry):
        with pytest.raises(ModelNotFoundFault):
            registry.register("Account", lambda m: m.belongs_to("User"))
        assert "Account" not in registry
