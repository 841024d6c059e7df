"""Decorator command set module.

Exports the command set object model, its serializer and the built-in
schema models used for structural validation.
"""
from __future__ import annotations

from dcs.commands.nodes import (
    DCS_NAMESPACE,
    Command,
    CommandTarget,
    CommandType,
    DecoratorCommandSet,
    DecoratorCommandSetReference,
)
from dcs.commands.schema import decorator_commands_model, metamodel_model
from dcs.commands.serializer import CommandSetSerializer

__all__ = [
    "DCS_NAMESPACE",
    "Command",
    "CommandTarget",
    "CommandType",
    "DecoratorCommandSet",
    "DecoratorCommandSetReference",
    "CommandSetSerializer",
    "decorator_commands_model",
    "metamodel_model",
]
