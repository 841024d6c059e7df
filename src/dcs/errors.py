"""Error types raised by the dcs toolkit.

Two families exist:

``ModelError``
    Raised by the type system (``dcs.typesystem``) when a model is
    malformed or a type cannot be found.
``CommandError``
    Raised while validating or applying a decorator command.  Every
    command error carries the offending command, serialized to a plain
    dict, so that callers can report exactly which command failed.
"""
from __future__ import annotations

import json
from typing import Any


class DcsError(Exception):
    """Root of every error raised by this package."""


# ---------------------------------------------------------------------------
# Type system errors
# ---------------------------------------------------------------------------


class ModelError(DcsError):
    """A model file or model manager is in an invalid state."""


class IllegalModelError(ModelError):
    """Raised when a model cannot be loaded into a ``ModelManager``."""


class TypeNotFoundError(ModelError):
    """Raised when a fully qualified type name cannot be resolved."""

    def __init__(self, type_name: str, context: str = "") -> None:
        self.type_name = type_name
        self.context = context
        where = f" (referenced by {context})" if context else ""
        super().__init__(f"Type {type_name!r} does not exist{where}")


# ---------------------------------------------------------------------------
# Command errors
# ---------------------------------------------------------------------------


class CommandError(DcsError):
    """Base class for errors about a decorator command or command set.

    Parameters
    ----------
    message:
        Human-readable description of the violated constraint.
    command:
        The offending command as a JSON-compatible dict, if known.
    """

    def __init__(self, message: str, command: dict[str, Any] | None = None) -> None:
        self.description = message
        self.command = command
        if command is not None:
            message = f"{message}: {json.dumps(command, indent=2)}"
        super().__init__(message)


class StructuralValidationError(CommandError):
    """The command set payload does not conform to the command set schema."""

    def __init__(self, message: str, path: str = "$") -> None:
        self.path = path
        super().__init__(f"{message} at {path}")


class ConflictingTargetError(CommandError):
    """A command target sets both ``property`` and ``properties``."""


class UnknownNamespaceError(CommandError):
    """A command target references a namespace that is not loaded."""

    def __init__(self, namespace: str, command: dict[str, Any] | None = None) -> None:
        self.namespace = namespace
        super().__init__(
            f"Decorator Command references namespace {namespace!r} which does not exist",
            command,
        )


class UnknownDeclarationError(CommandError):
    """A command target references a declaration missing from its namespace."""

    def __init__(
        self, namespace: str, declaration: str, command: dict[str, Any] | None = None
    ) -> None:
        self.namespace = namespace
        self.declaration = declaration
        super().__init__(
            f"Decorator Command references declaration {declaration!r} "
            f"which does not exist in namespace {namespace!r}",
            command,
        )


class UnknownPropertyError(CommandError):
    """A command target references a property its declaration lacks."""

    def __init__(
        self,
        namespace: str,
        declaration: str,
        property_name: str,
        command: dict[str, Any] | None = None,
    ) -> None:
        self.namespace = namespace
        self.declaration = declaration
        self.property_name = property_name
        super().__init__(
            f"Decorator Command references property "
            f"{namespace}.{declaration}.{property_name!s} which does not exist",
            command,
        )


class UnknownTypeError(CommandError):
    """A command target's ``type`` does not resolve to a known type."""

    def __init__(self, type_name: str, command: dict[str, Any] | None = None) -> None:
        self.type_name = type_name
        super().__init__(
            f"Decorator Command references type {type_name!r} which does not exist",
            command,
        )


class UnknownCommandTypeError(CommandError):
    """A command's ``type`` is neither UPSERT nor APPEND."""

    def __init__(self, command_type: object, command: dict[str, Any] | None = None) -> None:
        self.command_type = command_type
        super().__init__(f"Unknown command type {command_type!s}", command)
