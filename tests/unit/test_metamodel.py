"""Unit tests for dcs.metamodel — namespace helpers, node kinds and the
AstSerializer wire format.
"""
from __future__ import annotations

import json

import pytest
import yaml

from dcs.metamodel.namespace import (
    NamespaceInfo,
    parse_namespace,
    split_fully_qualified_name,
    unversioned,
)
from dcs.metamodel.nodes import (
    Declaration,
    DeclarationKind,
    Decorator,
    DecoratorArgument,
    DecoratorLiteralKind,
    Model,
    Models,
    Property,
    PropertyKind,
    TypeIdentifier,
)
from dcs.metamodel.serializer import AstSerializer

_PERSON_JSON = {
    "$class": "concerto.metamodel@1.0.0.Models",
    "models": [
        {
            "$class": "concerto.metamodel@1.0.0.Model",
            "namespace": "org.acme@1.0.0",
            "imports": [],
            "declarations": [
                {
                    "$class": "concerto.metamodel@1.0.0.ConceptDeclaration",
                    "name": "Person",
                    "isAbstract": False,
                    "properties": [
                        {
                            "$class": "concerto.metamodel@1.0.0.StringProperty",
                            "name": "name",
                            "isArray": False,
                            "isOptional": False,
                            "validator": {
                                "$class": "concerto.metamodel@1.0.0.StringRegexValidator",
                                "pattern": "^[A-Z]",
                                "flags": "",
                            },
                            "decorators": [
                                {
                                    "$class": "concerto.metamodel@1.0.0.Decorator",
                                    "name": "Term",
                                    "arguments": [
                                        {
                                            "$class": "concerto.metamodel@1.0.0.DecoratorString",
                                            "value": "Name",
                                        }
                                    ],
                                }
                            ],
                        }
                    ],
                    "decorators": [
                        {
                            "$class": "concerto.metamodel@1.0.0.Decorator",
                            "name": "Resource",
                            "arguments": [
                                {
                                    "$class": "concerto.metamodel@1.0.0.DecoratorTypeReference",
                                    "type": {
                                        "$class": "concerto.metamodel@1.0.0.TypeIdentifier",
                                        "name": "Person",
                                    },
                                    "isArray": True,
                                }
                            ],
                        }
                    ],
                },
                {
                    "$class": "concerto.metamodel@1.0.0.StringScalar",
                    "name": "SSN",
                    "defaultValue": "000-00-0000",
                },
            ],
        }
    ],
}


# ===========================================================================
# Namespace helpers
# ===========================================================================


class TestParseNamespace:
    def test_versioned(self) -> None:
        assert parse_namespace("org.acme@1.2.3") == NamespaceInfo("org.acme", "1.2.3")

    def test_unversioned(self) -> None:
        info = parse_namespace("org.acme")
        assert info.name == "org.acme"
        assert info.version is None

    def test_str_round_trips(self) -> None:
        assert str(parse_namespace("org.acme@1.2.3")) == "org.acme@1.2.3"
        assert str(parse_namespace("org.acme")) == "org.acme"

    def test_two_at_signs_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid namespace"):
            parse_namespace("org@1@2")

    def test_unversioned_helper(self) -> None:
        assert unversioned("org.acme@1.0.0") == "org.acme"
        assert unversioned("org.acme") == "org.acme"


class TestSplitFullyQualifiedName:
    def test_versioned_namespace_keeps_its_dots(self) -> None:
        assert split_fully_qualified_name("org.acme@1.0.0.Person") == ("org.acme@1.0.0", "Person")

    def test_unversioned(self) -> None:
        assert split_fully_qualified_name("org.acme.Person") == ("org.acme", "Person")

    def test_bare_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            split_fully_qualified_name("Person")


# ===========================================================================
# Kinds and nodes
# ===========================================================================


class TestKinds:
    def test_property_class_name(self) -> None:
        assert PropertyKind.STRING.class_name == "concerto.metamodel@1.0.0.StringProperty"

    def test_from_fully_qualified_class_name(self) -> None:
        kind = DeclarationKind.from_class_name("concerto.metamodel@1.0.0.AssetDeclaration")
        assert kind is DeclarationKind.ASSET

    def test_from_short_class_name(self) -> None:
        assert PropertyKind.from_class_name("DoubleProperty") is PropertyKind.DOUBLE

    def test_unknown_class_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown PropertyKind"):
            PropertyKind.from_class_name("concerto.metamodel@1.0.0.FooProperty")

    def test_scalar_kinds(self) -> None:
        assert DeclarationKind.STRING_SCALAR.is_scalar
        assert not DeclarationKind.CONCEPT.is_scalar


class TestNodes:
    def test_declaration_get_property(self) -> None:
        decl = Declaration(
            name="Person",
            kind=DeclarationKind.CONCEPT,
            properties=[Property(name="name", kind=PropertyKind.STRING)],
        )
        assert decl.get_property("name") is decl.properties[0]
        assert decl.get_property("age") is None

    def test_scalar_get_property(self) -> None:
        decl = Declaration(name="SSN", kind=DeclarationKind.STRING_SCALAR)
        assert decl.get_property("anything") is None

    def test_model_get_declaration(self) -> None:
        model = Model(namespace="a@1.0.0", declarations=[Declaration("X", DeclarationKind.CONCEPT)])
        assert model.get_declaration("X") is not None
        assert model.get_declaration("Y") is None

    def test_type_identifier_fqn(self) -> None:
        assert TypeIdentifier("Person", "org.acme@1.0.0").fully_qualified_name == "org.acme@1.0.0.Person"
        assert TypeIdentifier("Person").fully_qualified_name is None


# ===========================================================================
# AstSerializer
# ===========================================================================


class TestAstSerializerFromDict:
    def setup_method(self) -> None:
        self.ast = AstSerializer().from_dict(_PERSON_JSON)

    def test_models_and_declarations(self) -> None:
        assert len(self.ast.models) == 1
        model = self.ast.models[0]
        assert model.namespace == "org.acme@1.0.0"
        assert [d.name for d in model.declarations] == ["Person", "SSN"]

    def test_declaration_kinds(self) -> None:
        person, ssn = self.ast.models[0].declarations
        assert person.kind is DeclarationKind.CONCEPT
        assert ssn.kind is DeclarationKind.STRING_SCALAR

    def test_scalar_has_no_properties(self) -> None:
        ssn = self.ast.models[0].declarations[1]
        assert ssn.properties is None
        assert ssn.extras == {"defaultValue": "000-00-0000"}

    def test_property_decorators(self) -> None:
        prop = self.ast.models[0].declarations[0].properties[0]
        assert prop.kind is PropertyKind.STRING
        assert prop.decorators == [
            Decorator(
                name="Term",
                arguments=[DecoratorArgument(kind=DecoratorLiteralKind.STRING, value="Name")],
            )
        ]

    def test_type_reference_argument(self) -> None:
        decorator = self.ast.models[0].declarations[0].decorators[0]
        arg = decorator.arguments[0]
        assert arg.kind is DecoratorLiteralKind.TYPE_REFERENCE
        assert arg.value == TypeIdentifier(name="Person")
        assert arg.is_array is True

    def test_unknown_fields_kept_in_extras(self) -> None:
        prop = self.ast.models[0].declarations[0].properties[0]
        assert prop.extras["validator"]["pattern"] == "^[A-Z]"
        assert self.ast.models[0].extras == {"imports": []}

    def test_single_model_document(self) -> None:
        ast = AstSerializer().from_dict(_PERSON_JSON["models"][0])
        assert isinstance(ast, Models)
        assert ast.models[0].namespace == "org.acme@1.0.0"

    def test_missing_class_rejected(self) -> None:
        data = {"namespace": "a@1.0.0", "declarations": [{"name": "X"}]}
        with pytest.raises(ValueError, match=r"\$class"):
            AstSerializer().from_dict(data)

    def test_missing_namespace_rejected(self) -> None:
        with pytest.raises(ValueError, match="namespace"):
            AstSerializer().from_dict({"declarations": []})


class TestAstSerializerToDict:
    def test_round_trip_is_lossless(self) -> None:
        serializer = AstSerializer()
        assert serializer.to_dict(serializer.from_dict(_PERSON_JSON)) == _PERSON_JSON

    def test_decorators_key_omitted_when_absent(self) -> None:
        model = Model(namespace="a@1.0.0", declarations=[Declaration("X", DeclarationKind.CONCEPT, properties=[])])
        data = AstSerializer().model_to_dict(model)
        assert "decorators" not in data
        assert "decorators" not in data["declarations"][0]

    def test_empty_decorators_list_kept(self) -> None:
        decl = Declaration("X", DeclarationKind.CONCEPT, properties=[], decorators=[])
        data = AstSerializer().model_to_dict(Model(namespace="a@1.0.0", declarations=[decl]))
        assert data["declarations"][0]["decorators"] == []

    def test_enum_property_has_no_array_flags(self) -> None:
        decl = Declaration(
            "Color", DeclarationKind.ENUM, properties=[Property("RED", PropertyKind.ENUM)]
        )
        data = AstSerializer().model_to_dict(Model(namespace="a@1.0.0", declarations=[decl]))
        assert data["declarations"][0]["properties"][0] == {
            "$class": "concerto.metamodel@1.0.0.EnumProperty",
            "name": "RED",
        }

    def test_argument_kind_inferred_without_class(self) -> None:
        serializer = AstSerializer()
        decorator = serializer.decorator_from_dict(
            {"name": "Form", "arguments": [{"value": "x"}, {"value": 3}, {"value": True}]}
        )
        assert [a.kind for a in decorator.arguments] == [
            DecoratorLiteralKind.STRING,
            DecoratorLiteralKind.NUMBER,
            DecoratorLiteralKind.BOOLEAN,
        ]


class TestAstSerializerFormats:
    def test_json_round_trip(self) -> None:
        serializer = AstSerializer()
        ast = serializer.from_dict(_PERSON_JSON)
        text = serializer.to_json(ast)
        assert json.loads(text) == _PERSON_JSON
        assert serializer.from_json(text) == ast

    def test_yaml_round_trip(self) -> None:
        serializer = AstSerializer()
        ast = serializer.from_dict(_PERSON_JSON)
        text = serializer.to_yaml(ast)
        assert yaml.safe_load(text) == _PERSON_JSON
        assert serializer.from_yaml(text) == ast
