"""Unit tests for dcs.decorators.applier — UPSERT / APPEND application."""
from __future__ import annotations

from typing import Any

import pytest

from dcs.commands.nodes import Command, CommandTarget, CommandType, DecoratorCommandSet
from dcs.decorators.applier import apply_decorator, decorate_ast, decorate_models
from dcs.errors import (
    StructuralValidationError,
    UnknownCommandTypeError,
    UnknownDeclarationError,
)
from dcs.metamodel.nodes import (
    Declaration,
    DeclarationKind,
    Decorator,
    DecoratorArgument,
    DecoratorLiteralKind,
    Models,
    Property,
    PropertyKind,
)
from dcs.typesystem.manager import ModelManager

_HR = "org.acme.hr@1.0.0"
_FINANCE = "org.acme.finance@2.0.0"
_STRING_PROPERTY = "concerto.metamodel@1.0.0.StringProperty"


def _decorator(name: str, *values: Any) -> Decorator:
    return Decorator(
        name=name,
        arguments=[DecoratorArgument(DecoratorLiteralKind.STRING, v) for v in values] or None,
    )


def _set(*commands: Command) -> DecoratorCommandSet:
    return DecoratorCommandSet(name="test", version="1.0.0", commands=commands)


def _cmd(decorator: Decorator, command_type: CommandType | str = CommandType.UPSERT, **target: Any) -> Command:
    if "properties" in target:
        target["properties"] = tuple(target["properties"])
    return Command(target=CommandTarget(**target), decorator=decorator, type=command_type)


def _names(decorated: Any) -> list[str]:
    return [d.name for d in decorated.decorators or ()]


def _decl(ast: Models, namespace: str, name: str) -> Declaration:
    for model in ast.models:
        if model.namespace == namespace:
            return model.get_declaration(name)
    raise AssertionError(f"{namespace}.{name} not found")


# ===========================================================================
# apply_decorator
# ===========================================================================


class TestApplyDecorator:
    def test_upsert_into_none_creates_list(self) -> None:
        prop = Property("name", PropertyKind.STRING)
        apply_decorator(prop, CommandType.UPSERT, _decorator("Form"))
        assert _names(prop) == ["Form"]

    def test_upsert_replaces_every_same_named(self) -> None:
        prop = Property(
            "name",
            PropertyKind.STRING,
            decorators=[_decorator("Form", "a"), _decorator("Other"), _decorator("Form", "b")],
        )
        apply_decorator(prop, CommandType.UPSERT, _decorator("Form", "c"))
        assert prop.decorators == [_decorator("Form", "c"), _decorator("Other"), _decorator("Form", "c")]

    def test_upsert_is_idempotent(self) -> None:
        prop = Property("name", PropertyKind.STRING)
        for _ in range(3):
            apply_decorator(prop, CommandType.UPSERT, _decorator("Form", "x"))
        assert prop.decorators == [_decorator("Form", "x")]

    def test_append_accumulates(self) -> None:
        prop = Property("name", PropertyKind.STRING, decorators=[_decorator("Form", "a")])
        apply_decorator(prop, CommandType.APPEND, _decorator("Form", "b"))
        apply_decorator(prop, CommandType.APPEND, _decorator("Form", "b"))
        assert _names(prop) == ["Form", "Form", "Form"]

    def test_raw_string_types(self) -> None:
        prop = Property("name", PropertyKind.STRING)
        apply_decorator(prop, "UPSERT", _decorator("A"))
        apply_decorator(prop, "APPEND", _decorator("A"))
        assert _names(prop) == ["A", "A"]

    def test_applied_decorator_is_a_copy(self) -> None:
        decorator = _decorator("Form", "x")
        first = Property("a", PropertyKind.STRING)
        second = Property("b", PropertyKind.STRING)
        apply_decorator(first, CommandType.UPSERT, decorator)
        apply_decorator(second, CommandType.UPSERT, decorator)
        first.decorators[0].arguments[0].value = "changed"
        assert decorator.arguments[0].value == "x"
        assert second.decorators[0].arguments[0].value == "x"

    def test_unknown_type(self) -> None:
        prop = Property("name", PropertyKind.STRING)
        with pytest.raises(UnknownCommandTypeError, match="Unknown command type DELETE"):
            apply_decorator(prop, "DELETE", _decorator("Form"))
        assert prop.decorators is None


# ===========================================================================
# decorate_ast
# ===========================================================================


class TestDecorateAst:
    def test_declaration_target(self, models: Models) -> None:
        result = decorate_ast(models, _set(_cmd(_decorator("Editable"), namespace=_HR, declaration="Person")))
        assert _names(_decl(result, _HR, "Person")) == ["Editable"]
        assert _names(_decl(result, _HR, "Employee")) == []
        assert all(p.decorators is None for p in _decl(result, _HR, "Person").properties)

    def test_unversioned_namespace_target(self, models: Models) -> None:
        result = decorate_ast(models, _set(_cmd(_decorator("X"), namespace="org.acme.hr", declaration="SSN")))
        assert _names(_decl(result, _HR, "SSN")) == ["X"]

    def test_other_version_does_not_match(self, models: Models) -> None:
        result = decorate_ast(models, _set(_cmd(_decorator("X"), namespace="org.acme.hr@2.0.0")))
        assert result == models

    def test_wildcard_target_hits_every_declaration(self, models: Models) -> None:
        result = decorate_ast(models, _set(_cmd(_decorator("Seen"))))
        for model in result.models:
            for decl in model.declarations:
                assert _names(decl) == ["Seen"]

    def test_property_target(self, models: Models) -> None:
        result = decorate_ast(
            models, _set(_cmd(_decorator("Form"), namespace=_HR, declaration="Person", property="age"))
        )
        person = _decl(result, _HR, "Person")
        assert _names(person) == []
        assert _names(person.get_property("age")) == ["Form"]
        assert _names(person.get_property("name")) == []

    def test_properties_with_type_target(self, models: Models) -> None:
        command = _cmd(
            _decorator("PII"),
            namespace=_HR,
            declaration="Person",
            properties=["name", "email", "age"],
            type=_STRING_PROPERTY,
        )
        person = _decl(decorate_ast(models, _set(command)), _HR, "Person")
        # age is listed but is not a string property
        assert [p.name for p in person.properties if p.decorators] == ["name", "email"]
        assert _names(person) == []

    def test_properties_alone_decorate_declaration(self, models: Models) -> None:
        result = decorate_ast(
            models,
            _set(_cmd(_decorator("PII"), namespace=_HR, declaration="Person", properties=["name"])),
        )
        person = _decl(result, _HR, "Person")
        assert _names(person) == ["PII"]
        assert person.get_property("name").decorators is None

    def test_type_target(self, models: Models) -> None:
        result = decorate_ast(models, _set(_cmd(_decorator("Form", "text"), type=_STRING_PROPERTY)))
        decorated = [
            (decl.name, prop.name)
            for model in result.models
            for decl in model.declarations
            for prop in decl.properties or ()
            if prop.decorators
        ]
        assert decorated == [("Address", "street"), ("Address", "city"), ("Person", "name"), ("Person", "email")]

    def test_type_and_property_both_match(self, models: Models) -> None:
        result = decorate_ast(
            models,
            _set(
                _cmd(_decorator("A"), declaration="Person", property="age", type=_STRING_PROPERTY),
                _cmd(_decorator("B"), declaration="Person", property="name", type=_STRING_PROPERTY),
            ),
        )
        person = _decl(result, _HR, "Person")
        assert person.get_property("age").decorators is None
        assert _names(person.get_property("name")) == ["B"]

    def test_inherited_properties_not_decorated_on_subtype(self, models: Models) -> None:
        result = decorate_ast(models, _set(_cmd(_decorator("X"), declaration="Employee", property="name")))
        assert _decl(result, _HR, "Person").get_property("name").decorators is None
        assert _decl(result, _HR, "Employee").get_property("name") is None

    def test_scalar_skipped_for_property_commands(self, models: Models) -> None:
        result = decorate_ast(models, _set(_cmd(_decorator("X"), declaration="SSN", property="anything")))
        assert _decl(result, _HR, "SSN").decorators is None

    def test_enum_members(self, models: Models) -> None:
        result = decorate_ast(
            models,
            _set(_cmd(_decorator("Label"), type="concerto.metamodel@1.0.0.EnumProperty")),
        )
        department = _decl(result, _HR, "Department")
        assert all(_names(p) == ["Label"] for p in department.properties)

    def test_commands_applied_in_order(self, models: Models) -> None:
        result = decorate_ast(
            models,
            _set(
                _cmd(_decorator("A"), declaration="Invoice"),
                _cmd(_decorator("B"), CommandType.APPEND, declaration="Invoice"),
                _cmd(_decorator("A", "again"), declaration="Invoice"),
            ),
        )
        invoice = _decl(result, _FINANCE, "Invoice")
        assert invoice.decorators == [_decorator("A", "again"), _decorator("B")]

    def test_input_ast_untouched(self, models: Models) -> None:
        before = repr(models)
        result = decorate_ast(models, _set(_cmd(_decorator("X"))))
        assert repr(models) == before
        assert result is not models

    def test_unknown_command_type_carries_command(self, models: Models) -> None:
        command = _cmd(_decorator("X"), "DELETE", declaration="Invoice")
        with pytest.raises(UnknownCommandTypeError) as exc_info:
            decorate_ast(models, _set(command))
        assert exc_info.value.command["type"] == "DELETE"
        assert exc_info.value.command["target"]["declaration"] == "Invoice"

    def test_unmatched_unknown_type_is_harmless(self, models: Models) -> None:
        decorate_ast(models, _set(_cmd(_decorator("X"), "DELETE", declaration="Nowhere")))


# ===========================================================================
# decorate_models
# ===========================================================================


def _payload(*commands: dict[str, Any]) -> dict[str, Any]:
    return {
        "$class": "org.accordproject.decoratorcommands.DecoratorCommandSet",
        "name": "web",
        "version": "1.0.0",
        "commands": list(commands),
    }


def _editable_command(declaration: str = "Person", command_type: str = "UPSERT") -> dict[str, Any]:
    return {
        "$class": "org.accordproject.decoratorcommands.Command",
        "type": command_type,
        "target": {
            "$class": "org.accordproject.decoratorcommands.CommandTarget",
            "namespace": _HR,
            "declaration": declaration,
        },
        "decorator": {"$class": "concerto.metamodel@1.0.0.Decorator", "name": "Editable"},
    }


class TestDecorateModels:
    def test_editable_scenario(self, model_manager: ModelManager) -> None:
        decorated = decorate_models(model_manager, _payload(_editable_command()))
        person = decorated.get_type(f"{_HR}.Person").declaration
        assert _names(person) == ["Editable"]
        assert model_manager.get_type(f"{_HR}.Person").declaration.decorators is None

    def test_returns_new_manager(self, model_manager: ModelManager) -> None:
        decorated = decorate_models(model_manager, _payload())
        assert decorated is not model_manager
        assert decorated.get_namespaces() == model_manager.get_namespaces()

    def test_type_references_resolved(self, model_manager: ModelManager) -> None:
        decorated = decorate_models(model_manager, _payload())
        address = decorated.get_type(f"{_HR}.Person").get_property("address")
        assert address.type.namespace == _HR

    def test_accepts_command_set_object(self, model_manager: ModelManager) -> None:
        decorated = decorate_models(model_manager, _set(_cmd(_decorator("X"), declaration="Invoice")))
        assert _names(decorated.get_type(f"{_FINANCE}.Invoice").declaration) == ["X"]

    def test_upsert_twice_is_stable(self, model_manager: ModelManager) -> None:
        once = decorate_models(model_manager, _payload(_editable_command()))
        twice = decorate_models(once, _payload(_editable_command()))
        assert once.get_ast() == twice.get_ast()

    def test_append_twice_accumulates(self, model_manager: ModelManager) -> None:
        payload = _payload(_editable_command(command_type="APPEND"))
        twice = decorate_models(decorate_models(model_manager, payload), payload)
        assert _names(twice.get_type(f"{_HR}.Person").declaration) == ["Editable", "Editable"]

    def test_structural_validation(self, model_manager: ModelManager) -> None:
        with pytest.raises(StructuralValidationError):
            decorate_models(model_manager, {"name": "broken"}, validate=True)

    def test_unknown_target_ignored_without_validation(self, model_manager: ModelManager) -> None:
        decorated = decorate_models(model_manager, _payload(_editable_command("Missing")), validate=True)
        assert decorated.get_ast() == model_manager.get_ast(resolved=True)

    def test_unknown_target_rejected_with_command_validation(self, model_manager: ModelManager) -> None:
        with pytest.raises(UnknownDeclarationError):
            decorate_models(
                model_manager,
                _payload(_editable_command("Missing")),
                validate=True,
                validate_commands=True,
            )

    def test_command_validation_needs_validate(self, model_manager: ModelManager) -> None:
        decorate_models(model_manager, _payload(_editable_command("Missing")), validate_commands=True)

    def test_scalar_kind_unchanged(self, model_manager: ModelManager) -> None:
        decorated = decorate_models(model_manager, _payload(_editable_command("SSN")))
        ssn = decorated.get_type(f"{_HR}.SSN").declaration
        assert ssn.kind is DeclarationKind.STRING_SCALAR
        assert ssn.properties is None
        assert _names(ssn) == ["Editable"]
