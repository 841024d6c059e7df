"""Decorator command set object model.

A ``DecoratorCommandSet`` is a named, versioned list of ``Command``
objects.  Each command selects model elements with a ``CommandTarget``
and applies one ``Decorator`` to them, either replacing same-named
decorators (``UPSERT``) or adding another one (``APPEND``).

Every ``CommandTarget`` field is optional; an absent field is a
wildcard that matches anything at that level.
"""
from __future__ import annotations

import builtins
from dataclasses import dataclass
from enum import Enum

from dcs.metamodel.nodes import Decorator

DCS_NAMESPACE = "org.accordproject.decoratorcommands@0.3.0"
# Instances written by the toolkit use the unversioned namespace.
DCS_CLASS_NAMESPACE = "org.accordproject.decoratorcommands"


def dcs_class(short_name: str) -> str:
    """Return the ``$class`` used for command set instances of ``short_name``."""
    return f"{DCS_CLASS_NAMESPACE}.{short_name}"


class CommandType(Enum):
    """How a command merges its decorator into a node's decorators."""

    UPSERT = "UPSERT"
    APPEND = "APPEND"


@dataclass(frozen=True, slots=True)
class CommandTarget:
    """Selects the model elements a command applies to.

    Parameters
    ----------
    namespace:
        Versioned or unversioned namespace of the model.
    declaration:
        Name of the declaration.
    property:
        Name of a single property.  Mutually exclusive with ``properties``.
    properties:
        Names of several properties.
    type:
        Fully qualified property kind, e.g.
        ``concerto.metamodel@1.0.0.StringProperty``.
    """

    namespace: str | None = None
    declaration: str | None = None
    property: str | None = None
    properties: tuple[str, ...] | None = None
    type: str | None = None

    # The `property` field shadows the builtin inside the class body.
    @builtins.property
    def property_selector(self) -> str | tuple[str, ...] | None:
        """The property name(s) to match: ``property`` wins over ``properties``."""
        return self.property if self.property else self.properties


@dataclass(frozen=True, slots=True)
class Command:
    """Applies ``decorator`` to every element matched by ``target``.

    ``type`` holds the raw string when a payload named a command type
    other than UPSERT or APPEND; applying such a command fails.
    """

    target: CommandTarget
    decorator: Decorator
    type: CommandType | str = CommandType.UPSERT


@dataclass(frozen=True, slots=True)
class DecoratorCommandSetReference:
    """A reference to another named and versioned command set."""

    name: str
    version: str


@dataclass(frozen=True, slots=True)
class DecoratorCommandSet:
    """A named, versioned, ordered list of commands.

    ``includes`` is carried through serialization but never resolved.
    """

    name: str
    version: str
    commands: tuple[Command, ...] = ()
    includes: tuple[DecoratorCommandSetReference, ...] | None = None
