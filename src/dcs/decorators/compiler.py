"""Compile an extraction index into decorator command sets.

One ``DecoratorCommandSet`` is produced per namespace.  The set is named
after the unversioned namespace and versioned with the namespace
version (``1.0.0`` for unversioned namespaces).  Every recorded
decorator, except the vocabulary carriers ``Term`` and
``Term_description``, becomes an UPSERT command targeting exactly the
element it was found on.
"""
from __future__ import annotations

import copy
import logging

from dcs.commands.nodes import Command, CommandTarget, CommandType, DecoratorCommandSet
from dcs.decorators.index import ExtractionIndex, IndexEntry
from dcs.metamodel.namespace import parse_namespace
from dcs.metamodel.nodes import Decorator, DecoratorArgument

logger = logging.getLogger(__name__)

VOCABULARY_DECORATORS = frozenset({"Term", "Term_description"})
DEFAULT_VERSION = "1.0.0"


def _command_decorator(decorator: Decorator) -> Decorator:
    """Copy only the name and argument values; wire extras are left behind."""
    arguments = None
    if decorator.arguments:
        arguments = [
            DecoratorArgument(arg.kind, copy.deepcopy(arg.value), arg.is_array)
            for arg in decorator.arguments
        ]
    return Decorator(name=decorator.name, arguments=arguments)


class CommandSetCompiler:
    """Turns an ``ExtractionIndex`` into ``DecoratorCommandSet`` objects."""

    def compile(self, index: ExtractionIndex) -> list[DecoratorCommandSet]:
        """Return one command set per namespace, in index order."""
        return [self._compile_namespace(ns, entries) for ns, entries in index.items()]

    def _compile_namespace(self, namespace: str, entries: list[IndexEntry]) -> DecoratorCommandSet:
        info = parse_namespace(namespace)
        commands: list[Command] = []
        for entry in entries:
            target = CommandTarget(
                namespace=namespace,
                declaration=entry.declaration or None,
                property=entry.property or None,
            )
            for decorator in entry.decorators:
                if decorator.name in VOCABULARY_DECORATORS:
                    continue
                commands.append(Command(
                    target=target,
                    decorator=_command_decorator(decorator),
                    type=CommandType.UPSERT,
                ))
        logger.debug("Compiled %d command(s) for namespace %r", len(commands), namespace)
        return DecoratorCommandSet(
            name=info.name,
            version=info.version or DEFAULT_VERSION,
            commands=tuple(commands),
        )


def parse_decorators(index: ExtractionIndex) -> list[DecoratorCommandSet]:
    """Convenience function: compile ``index`` with a ``CommandSetCompiler``."""
    return CommandSetCompiler().compile(index)
