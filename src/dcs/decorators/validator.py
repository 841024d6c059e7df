"""Structural and semantic validation of decorator command sets.

Structural validation (``validate``) checks a command set payload
against the built-in decorator command schema.  It cannot tell whether
the namespaces, declarations and properties the commands target exist;
``validate_command`` does that against the models loaded in the
``ModelManager`` returned by ``validate``.

Usage
-----
::

    from dcs.decorators.validator import validate, validate_command

    manager = validate(payload, model_manager.get_model_files())
    for command in command_set.commands:
        validate_command(manager, command)
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Union

from dcs.commands.nodes import Command, DecoratorCommandSet
from dcs.commands.schema import (
    DECORATOR_COMMAND_SET_CLASS,
    decorator_commands_model,
    metamodel_model,
)
from dcs.commands.serializer import CommandSetSerializer
from dcs.errors import (
    ConflictingTargetError,
    TypeNotFoundError,
    UnknownDeclarationError,
    UnknownNamespaceError,
    UnknownPropertyError,
    UnknownTypeError,
)
from dcs.typesystem.instance import InstanceValidator
from dcs.typesystem.manager import DeclarationHandle, ModelFile, ModelManager

logger = logging.getLogger(__name__)

CommandSetLike = Union[DecoratorCommandSet, Mapping[str, Any]]


def to_payload(command_set: CommandSetLike) -> dict[str, Any]:
    """Return ``command_set`` as a JSON-compatible dict."""
    if isinstance(command_set, DecoratorCommandSet):
        return CommandSetSerializer().to_dict(command_set)
    return dict(command_set)


def validate(
    command_set: CommandSetLike, model_files: Iterable[ModelFile] | None = None
) -> ModelManager:
    """Structurally validate a command set.

    Parameters
    ----------
    command_set:
        A ``DecoratorCommandSet`` or its JSON payload.
    model_files:
        Optional model files to load alongside the schema, so that the
        returned manager can be used with ``validate_command``.

    Returns
    -------
    ModelManager
        The strict manager built for validation.

    Raises
    ------
    StructuralValidationError
        If the payload does not conform to the command set schema.
    """
    manager = ModelManager(strict=True)
    manager.add_model(metamodel_model())
    if model_files:
        manager.add_model_files(model_files)
    manager.add_model(decorator_commands_model())

    payload = to_payload(command_set)
    InstanceValidator(manager).from_json(payload, default_class=DECORATOR_COMMAND_SET_CLASS)
    logger.debug(
        "Command set %r is structurally valid (%d commands)",
        payload.get("name"),
        len(payload.get("commands") or ()),
    )
    return manager


def validate_command(manager: ModelManager, command: Command | Mapping[str, Any]) -> None:
    """Check that a command's target refers to things that exist.

    Raises
    ------
    ConflictingTargetError
        If the target sets both ``property`` and ``properties``.
    UnknownTypeError
        If ``target.type`` does not resolve.
    UnknownNamespaceError
        If ``target.namespace`` is not loaded, under any version.
    UnknownDeclarationError
        If ``target.declaration`` is not in the target namespace.
    UnknownPropertyError
        If a targeted property is not exposed by the declaration.
    """
    serializer = CommandSetSerializer()
    if isinstance(command, Mapping):
        command = serializer.command_from_dict(command)
    serialized = serializer.command_to_dict(command)
    target = command.target

    if target.property and target.properties:
        raise ConflictingTargetError(
            "Decorator Command references both property and properties. "
            "You must either reference a single property or a list of properties",
            serialized,
        )

    if target.type:
        try:
            manager.resolve_type("DecoratorCommand.type", target.type)
        except TypeNotFoundError:
            raise UnknownTypeError(target.type, serialized) from None

    if not target.namespace:
        return
    try:
        model_file = manager.find_model_file(target.namespace)
    except ValueError:
        model_file = None
    if model_file is None:
        raise UnknownNamespaceError(target.namespace, serialized)

    if not target.declaration:
        return
    try:
        declaration = manager.get_type(f"{model_file.get_namespace()}.{target.declaration}")
    except TypeNotFoundError:
        raise UnknownDeclarationError(target.namespace, target.declaration, serialized) from None

    names = [target.property] if target.property else list(target.properties or ())
    for name in names:
        _require_property(declaration, name, target.namespace, serialized)


def _require_property(
    declaration: DeclarationHandle, name: str, namespace: str, serialized: dict[str, Any]
) -> None:
    if declaration.get_property(name) is None:
        raise UnknownPropertyError(namespace, declaration.name, name, serialized)
