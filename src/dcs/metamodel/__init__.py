"""Metamodel AST module.

Exports the AST node types, the namespace helpers and the serializer
for converting AST trees to and from JSON/YAML.
"""
from __future__ import annotations

from dcs.metamodel.namespace import NamespaceInfo, parse_namespace, unversioned
from dcs.metamodel.nodes import (
    METAMODEL_NAMESPACE,
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

__all__ = [
    "METAMODEL_NAMESPACE",
    # Nodes
    "Models",
    "Model",
    "Declaration",
    "Property",
    "Decorator",
    "DecoratorArgument",
    "TypeIdentifier",
    # Enums
    "DeclarationKind",
    "PropertyKind",
    "DecoratorLiteralKind",
    # Namespaces
    "NamespaceInfo",
    "parse_namespace",
    "unversioned",
    # Serializer
    "AstSerializer",
]
