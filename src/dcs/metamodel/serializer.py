"""Serialization of metamodel ASTs to and from the concerto wire format.

The wire format is a plain dict/list structure in which every node
carries a ``$class`` discriminator, e.g.::

    {
      "$class": "concerto.metamodel@1.0.0.ConceptDeclaration",
      "name": "Person",
      "isAbstract": false,
      "properties": [
        {"$class": "concerto.metamodel@1.0.0.StringProperty",
         "name": "name", "isArray": false, "isOptional": false}
      ]
    }

Usage
-----
::

    from dcs.metamodel.serializer import AstSerializer

    serializer = AstSerializer()
    ast = serializer.from_json(text)
    assert serializer.from_dict(serializer.to_dict(ast)) == ast
"""
from __future__ import annotations

import json
from typing import Any

import yaml

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
    metamodel_class,
)

_MODELS_CLASS = metamodel_class("Models")
_MODEL_CLASS = metamodel_class("Model")
_DECORATOR_CLASS = metamodel_class("Decorator")
_TYPE_IDENTIFIER_CLASS = metamodel_class("TypeIdentifier")

_CLASS_LIKE = frozenset({
    DeclarationKind.CONCEPT,
    DeclarationKind.ASSET,
    DeclarationKind.PARTICIPANT,
    DeclarationKind.TRANSACTION,
    DeclarationKind.EVENT,
})

_MODEL_KEYS = frozenset({"$class", "namespace", "declarations", "decorators"})
_DECLARATION_KEYS = frozenset(
    {"$class", "name", "properties", "isAbstract", "superType", "decorators"}
)
_PROPERTY_KEYS = frozenset(
    {"$class", "name", "isArray", "isOptional", "type", "decorators"}
)
_DECORATOR_KEYS = frozenset({"$class", "name", "arguments"})


def _extras(data: dict[str, Any], known: frozenset[str]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in known}


def _infer_literal_kind(value: object) -> DecoratorLiteralKind:
    # bool is a subclass of int, so it must be tested first
    if isinstance(value, bool):
        return DecoratorLiteralKind.BOOLEAN
    if isinstance(value, (int, float)):
        return DecoratorLiteralKind.NUMBER
    if isinstance(value, str):
        return DecoratorLiteralKind.STRING
    raise ValueError(f"Cannot infer a decorator literal kind for {value!r}")


class AstSerializer:
    """Converts between metamodel AST nodes and plain Python dicts."""

    # ------------------------------------------------------------------
    # Serialization (AST → dict)
    # ------------------------------------------------------------------

    def to_dict(self, ast: Models) -> dict[str, Any]:
        """Serialize a ``Models`` document to a JSON-compatible dict."""
        return {
            "$class": _MODELS_CLASS,
            "models": [self.model_to_dict(m) for m in ast.models],
        }

    def model_to_dict(self, model: Model) -> dict[str, Any]:
        data: dict[str, Any] = {
            "$class": _MODEL_CLASS,
            "namespace": model.namespace,
        }
        data.update(model.extras)
        data["declarations"] = [self._declaration_to_dict(d) for d in model.declarations]
        if model.decorators is not None:
            data["decorators"] = [self.decorator_to_dict(d) for d in model.decorators]
        return data

    def _declaration_to_dict(self, decl: Declaration) -> dict[str, Any]:
        data: dict[str, Any] = {"$class": decl.kind.class_name, "name": decl.name}
        if decl.kind in _CLASS_LIKE:
            data["isAbstract"] = decl.is_abstract
        if decl.super_type is not None:
            data["superType"] = self._type_identifier_to_dict(decl.super_type)
        if decl.properties is not None:
            data["properties"] = [self._property_to_dict(p) for p in decl.properties]
        data.update(decl.extras)
        if decl.decorators is not None:
            data["decorators"] = [self.decorator_to_dict(d) for d in decl.decorators]
        return data

    def _property_to_dict(self, prop: Property) -> dict[str, Any]:
        data: dict[str, Any] = {"$class": prop.kind.class_name, "name": prop.name}
        if prop.kind is not PropertyKind.ENUM:
            data["isArray"] = prop.is_array
            data["isOptional"] = prop.is_optional
        if prop.type is not None:
            data["type"] = self._type_identifier_to_dict(prop.type)
        data.update(prop.extras)
        if prop.decorators is not None:
            data["decorators"] = [self.decorator_to_dict(d) for d in prop.decorators]
        return data

    def _type_identifier_to_dict(self, ident: TypeIdentifier) -> dict[str, Any]:
        data: dict[str, Any] = {"$class": _TYPE_IDENTIFIER_CLASS, "name": ident.name}
        if ident.namespace is not None:
            data["namespace"] = ident.namespace
        return data

    def decorator_to_dict(self, decorator: Decorator) -> dict[str, Any]:
        """Serialize a single decorator, including its arguments."""
        data: dict[str, Any] = {"$class": _DECORATOR_CLASS, "name": decorator.name}
        if decorator.arguments is not None:
            data["arguments"] = [self._argument_to_dict(a) for a in decorator.arguments]
        data.update(decorator.extras)
        return data

    def _argument_to_dict(self, arg: DecoratorArgument) -> dict[str, Any]:
        if arg.kind is DecoratorLiteralKind.TYPE_REFERENCE:
            if not isinstance(arg.value, TypeIdentifier):
                raise TypeError(f"Type reference argument holds {type(arg.value)}")
            return {
                "$class": arg.kind.class_name,
                "type": self._type_identifier_to_dict(arg.value),
                "isArray": arg.is_array,
            }
        return {"$class": arg.kind.class_name, "value": arg.value}

    # ------------------------------------------------------------------
    # Deserialization (dict → AST)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, Any]) -> Models:
        """Deserialize a ``Models`` document, or a single ``Model``.

        Raises
        ------
        ValueError
            If a ``$class`` discriminator is missing or unknown.
        """
        if data.get("$class") == _MODEL_CLASS or "models" not in data:
            return Models(models=[self.model_from_dict(data)])
        return Models(models=[self.model_from_dict(m) for m in data["models"]])

    def model_from_dict(self, data: dict[str, Any]) -> Model:
        if "namespace" not in data:
            raise ValueError("Model is missing its 'namespace'")
        return Model(
            namespace=data["namespace"],
            declarations=[self._declaration_from_dict(d) for d in data.get("declarations", [])],
            decorators=self._decorators_from_list(data.get("decorators")),
            extras=_extras(data, _MODEL_KEYS),
        )

    def _declaration_from_dict(self, data: dict[str, Any]) -> Declaration:
        kind = DeclarationKind.from_class_name(self._class_of(data))
        properties = data.get("properties")
        super_type = data.get("superType")
        return Declaration(
            name=data["name"],
            kind=kind,
            properties=(
                [self._property_from_dict(p) for p in properties]
                if properties is not None else None
            ),
            is_abstract=bool(data.get("isAbstract", False)),
            super_type=self._type_identifier_from_dict(super_type) if super_type else None,
            decorators=self._decorators_from_list(data.get("decorators")),
            extras=_extras(data, _DECLARATION_KEYS),
        )

    def _property_from_dict(self, data: dict[str, Any]) -> Property:
        kind = PropertyKind.from_class_name(self._class_of(data))
        type_ref = data.get("type")
        return Property(
            name=data["name"],
            kind=kind,
            is_array=bool(data.get("isArray", False)),
            is_optional=bool(data.get("isOptional", False)),
            type=self._type_identifier_from_dict(type_ref) if type_ref else None,
            decorators=self._decorators_from_list(data.get("decorators")),
            extras=_extras(data, _PROPERTY_KEYS),
        )

    def _type_identifier_from_dict(self, data: dict[str, Any]) -> TypeIdentifier:
        return TypeIdentifier(name=data["name"], namespace=data.get("namespace"))

    def _decorators_from_list(self, items: list[dict[str, Any]] | None) -> list[Decorator] | None:
        if items is None:
            return None
        return [self.decorator_from_dict(d) for d in items]

    def decorator_from_dict(self, data: dict[str, Any]) -> Decorator:
        """Deserialize a single decorator; ``$class`` is optional here."""
        arguments = data.get("arguments")
        return Decorator(
            name=data["name"],
            arguments=(
                [self.argument_from_dict(a) for a in arguments]
                if arguments is not None else None
            ),
            extras=_extras(data, _DECORATOR_KEYS),
        )

    def argument_from_dict(self, data: dict[str, Any]) -> DecoratorArgument:
        """Deserialize a decorator argument.

        Hand-written arguments may omit ``$class``; the literal kind is
        then inferred from the Python type of ``value``.
        """
        if "$class" not in data and "value" in data:
            return DecoratorArgument(kind=_infer_literal_kind(data["value"]), value=data["value"])
        kind = DecoratorLiteralKind.from_class_name(self._class_of(data))
        if kind is DecoratorLiteralKind.TYPE_REFERENCE:
            return DecoratorArgument(
                kind=kind,
                value=self._type_identifier_from_dict(data["type"]),
                is_array=bool(data.get("isArray", False)),
            )
        return DecoratorArgument(kind=kind, value=data["value"])

    def _class_of(self, data: dict[str, Any]) -> str:
        class_name = data.get("$class")
        if not isinstance(class_name, str):
            raise ValueError(f"Node is missing its '$class' discriminator: {data!r}")
        return class_name

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, ast: Models, indent: int = 2) -> str:
        """Serialize a ``Models`` document to a JSON string."""
        return json.dumps(self.to_dict(ast), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> Models:
        """Deserialize a ``Models`` document from a JSON string."""
        data: dict[str, Any] = json.loads(text)
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, ast: Models) -> str:
        """Serialize a ``Models`` document to a YAML string."""
        return yaml.dump(
            self.to_dict(ast), default_flow_style=False, allow_unicode=True, sort_keys=False
        )

    def from_yaml(self, text: str) -> Models:
        """Deserialize a ``Models`` document from a YAML string."""
        data: dict[str, Any] = yaml.safe_load(text)
        return self.from_dict(data)
