"""Application of decorator commands to a metamodel AST.

Every command of a command set is tried against every declaration of
every model.  A command whose target names neither a property nor a
property type decorates the matching declarations themselves;
otherwise it decorates the matching properties of those declarations.

The caller's AST is never modified: ``decorate_ast`` works on a deep
copy and returns it.
"""
from __future__ import annotations

import copy
import logging

from dcs.commands.nodes import Command, CommandType, DecoratorCommandSet
from dcs.commands.serializer import CommandSetSerializer
from dcs.decorators.matcher import matches
from dcs.decorators.validator import CommandSetLike, to_payload, validate_command
from dcs.decorators.validator import validate as validate_command_set
from dcs.errors import UnknownCommandTypeError
from dcs.metamodel.namespace import unversioned
from dcs.metamodel.nodes import Declaration, Decorator, Model, Models, Property
from dcs.typesystem.manager import ModelManager

logger = logging.getLogger(__name__)

Decorated = Model | Declaration | Property


def apply_decorator(
    decorated: Decorated, command_type: CommandType | str, decorator: Decorator
) -> None:
    """Merge ``decorator`` into the decorators of ``decorated``.

    ``UPSERT`` replaces every decorator with the same name, or appends
    when there is none.  ``APPEND`` always appends.

    Raises
    ------
    UnknownCommandTypeError
        For any other command type.
    """
    if command_type in (CommandType.UPSERT, CommandType.UPSERT.value):
        updated = False
        for index, existing in enumerate(decorated.decorators or ()):
            if existing.name == decorator.name:
                decorated.decorators[index] = copy.deepcopy(decorator)
                updated = True
        if not updated:
            _append(decorated, decorator)
    elif command_type in (CommandType.APPEND, CommandType.APPEND.value):
        _append(decorated, decorator)
    else:
        raise UnknownCommandTypeError(command_type)


def _append(decorated: Decorated, decorator: Decorator) -> None:
    if decorated.decorators is None:
        decorated.decorators = []
    decorated.decorators.append(copy.deepcopy(decorator))


def execute_command(namespace: str, declaration: Declaration, command: Command) -> None:
    """Apply ``command`` to ``declaration`` or its properties if targeted."""
    target = command.target
    if not (
        matches(target.namespace, (namespace, unversioned(namespace)))
        and matches(target.declaration, (declaration.name,))
    ):
        return
    if not target.property and not target.type:
        apply_decorator(declaration, command.type, command.decorator)
    elif declaration.properties is not None:
        # scalars and maps have no properties
        for prop in declaration.properties:
            execute_property_command(prop, command)


def execute_property_command(prop: Property, command: Command) -> None:
    """Apply ``command`` to ``prop`` if its name and kind are targeted."""
    target = command.target
    if matches(target.property_selector, (prop.name,)) and matches(
        target.type, (prop.kind.class_name,)
    ):
        apply_decorator(prop, command.type, command.decorator)


def decorate_ast(ast: Models, command_set: DecoratorCommandSet) -> Models:
    """Return a decorated deep copy of ``ast``.

    Declarations are visited in AST order and, for each declaration,
    commands are applied in command set order.
    """
    decorated = copy.deepcopy(ast)
    for model in decorated.models:
        for declaration in model.declarations:
            for command in command_set.commands:
                try:
                    execute_command(model.namespace, declaration, command)
                except UnknownCommandTypeError as exc:
                    raise UnknownCommandTypeError(
                        exc.command_type, CommandSetSerializer().command_to_dict(command)
                    ) from None
    logger.debug(
        "Applied %d command(s) to %d model(s)", len(command_set.commands), len(decorated.models)
    )
    return decorated


def decorate_models(
    model_manager: ModelManager,
    command_set: CommandSetLike,
    *,
    validate: bool = False,
    validate_commands: bool = False,
) -> ModelManager:
    """Apply a decorator command set to every model of ``model_manager``.

    Parameters
    ----------
    model_manager:
        The models to decorate.  It is not modified.
    command_set:
        A ``DecoratorCommandSet`` or its JSON payload.
    validate:
        Structurally validate the command set first.
    validate_commands:
        Also check every command's target against the models.  Only
        honoured together with ``validate``.

    Returns
    -------
    ModelManager
        A new manager holding the decorated models.
    """
    validation_manager = None
    if validate:
        validation_manager = validate_command_set(command_set, model_manager.get_model_files())

    if isinstance(command_set, DecoratorCommandSet):
        commands = command_set
    else:
        commands = CommandSetSerializer().from_dict(to_payload(command_set))

    if validation_manager is not None and validate_commands:
        for command in commands.commands:
            validate_command(validation_manager, command)

    decorated = decorate_ast(model_manager.get_ast(resolved=True), commands)
    return ModelManager.from_ast(decorated)
