"""AST node definitions for the concerto-style metamodel.

A ``Models`` document holds one ``Model`` per namespace.  Each model
owns declarations, and class-like declarations own properties.  Models,
declarations and properties can all carry ``Decorator`` annotations.

Unlike a parser AST these nodes are mutable: the decorator applier and
extractor edit decorator lists in place on a private deep copy of the
tree.  Polymorphic nodes are tagged by an enum kind rather than a raw
``$class`` string; ``kind.class_name`` renders the canonical wire form.

Wire fields the toolkit does not interpret (validators, default values,
source locations, imports, ...) are kept verbatim in ``extras`` so the
tree serializes back without loss.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

METAMODEL_NAMESPACE = "concerto.metamodel@1.0.0"


def metamodel_class(short_name: str) -> str:
    """Return the fully qualified metamodel ``$class`` for ``short_name``."""
    return f"{METAMODEL_NAMESPACE}.{short_name}"


# ---------------------------------------------------------------------------
# Kind enums
# ---------------------------------------------------------------------------


class _MetamodelKind(Enum):
    """Enum whose values are metamodel short type names."""

    @property
    def class_name(self) -> str:
        """The fully qualified ``$class`` string for this kind."""
        return metamodel_class(self.value)

    @classmethod
    def from_class_name(cls, class_name: str) -> Any:
        """Look up a kind from its fully qualified or short ``$class``.

        Raises
        ------
        ValueError
            If ``class_name`` does not name a member of this enum.
        """
        short_name = class_name.rpartition(".")[2]
        try:
            return cls(short_name)
        except ValueError:
            raise ValueError(f"Unknown {cls.__name__} {class_name!r}") from None


class DeclarationKind(_MetamodelKind):
    """Kinds of top-level declaration inside a model."""

    CONCEPT = "ConceptDeclaration"
    ASSET = "AssetDeclaration"
    PARTICIPANT = "ParticipantDeclaration"
    TRANSACTION = "TransactionDeclaration"
    EVENT = "EventDeclaration"
    ENUM = "EnumDeclaration"
    MAP = "MapDeclaration"
    BOOLEAN_SCALAR = "BooleanScalar"
    INTEGER_SCALAR = "IntegerScalar"
    LONG_SCALAR = "LongScalar"
    DOUBLE_SCALAR = "DoubleScalar"
    STRING_SCALAR = "StringScalar"
    DATETIME_SCALAR = "DateTimeScalar"

    @property
    def is_scalar(self) -> bool:
        return self.value.endswith("Scalar")


class PropertyKind(_MetamodelKind):
    """Kinds of property (field) of a class-like declaration."""

    STRING = "StringProperty"
    BOOLEAN = "BooleanProperty"
    DATETIME = "DateTimeProperty"
    DOUBLE = "DoubleProperty"
    INTEGER = "IntegerProperty"
    LONG = "LongProperty"
    OBJECT = "ObjectProperty"
    RELATIONSHIP = "RelationshipProperty"
    ENUM = "EnumProperty"


class DecoratorLiteralKind(_MetamodelKind):
    """Kinds of literal argument a decorator may carry."""

    STRING = "DecoratorString"
    NUMBER = "DecoratorNumber"
    BOOLEAN = "DecoratorBoolean"
    TYPE_REFERENCE = "DecoratorTypeReference"


# ---------------------------------------------------------------------------
# Decorators
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class TypeIdentifier:
    """A reference to a named type, optionally namespace-qualified."""

    name: str
    namespace: str | None = None

    @property
    def fully_qualified_name(self) -> str | None:
        if self.namespace is None:
            return None
        return f"{self.namespace}.{self.name}"


@dataclass(slots=True)
class DecoratorArgument:
    """A single decorator argument.

    ``value`` is a ``str``, number or ``bool`` for literal kinds and a
    ``TypeIdentifier`` for ``DecoratorLiteralKind.TYPE_REFERENCE``.
    ``is_array`` is only meaningful for type references.
    """

    kind: DecoratorLiteralKind
    value: Union[str, float, int, bool, TypeIdentifier]
    is_array: bool = False


@dataclass(slots=True)
class Decorator:
    """A named metadata annotation, e.g. ``@Term("Person")``."""

    name: str
    arguments: list[DecoratorArgument] | None = None
    extras: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Declarations and properties
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class Property:
    """A named, typed member of a declaration.

    ``type`` is set for object, relationship and enum-typed properties
    and names the referenced declaration.
    """

    name: str
    kind: PropertyKind
    is_array: bool = False
    is_optional: bool = False
    type: TypeIdentifier | None = None
    decorators: list[Decorator] | None = None
    extras: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Declaration:
    """A named type definition inside a namespace.

    ``properties`` is ``None`` for declarations that have no fields at
    all (scalars and maps); an empty list means a class with no fields.
    """

    name: str
    kind: DeclarationKind
    properties: list[Property] | None = None
    is_abstract: bool = False
    super_type: TypeIdentifier | None = None
    decorators: list[Decorator] | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def get_property(self, name: str) -> Property | None:
        """Return the declared (not inherited) property called ``name``."""
        for prop in self.properties or ():
            if prop.name == name:
                return prop
        return None


@dataclass(slots=True)
class Model:
    """All declarations of a single namespace."""

    namespace: str
    declarations: list[Declaration] = field(default_factory=list)
    decorators: list[Decorator] | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def get_declaration(self, name: str) -> Declaration | None:
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None


@dataclass(slots=True)
class Models:
    """Root of a metamodel AST: an ordered list of models."""

    models: list[Model] = field(default_factory=list)
