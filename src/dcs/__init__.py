"""dcs-toolkit — Decorator Command Sets for metamodel ASTs.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import dcs
    from dcs.metamodel import AstSerializer
    from dcs.typesystem import ModelManager

    manager = ModelManager.from_ast(AstSerializer().from_json(models_json))

    # Apply a decorator command set
    decorated = dcs.decorate_models(
        manager, command_set, validate=True, validate_commands=True
    )

    # Pull the decorators back out as command sets and vocabularies
    result = dcs.extract_decorators(
        decorated, remove_decorators_from_model=True, locale="en"
    )

    dcs.__version__
    '0.1.0'
"""
from __future__ import annotations

from collections.abc import Collection
from typing import TYPE_CHECKING, Any, Mapping, Union

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from dcs.commands.nodes import Command, DecoratorCommandSet
    from dcs.decorators.extractor import ExtractionResult
    from dcs.decorators.index import ExtractionIndex
    from dcs.decorators.matcher import Selector
    from dcs.metamodel.nodes import Models
    from dcs.typesystem.manager import ModelFile, ModelManager

    CommandSetLike = Union[DecoratorCommandSet, Mapping[str, Any]]


def validate(
    command_set: "CommandSetLike", model_files: "list[ModelFile] | None" = None
) -> "ModelManager":
    """Structurally validate a decorator command set.

    Parameters
    ----------
    command_set:
        A ``DecoratorCommandSet`` or its JSON payload.
    model_files:
        Model files to load next to the schema for later use with
        ``validate_command``.

    Returns
    -------
    ModelManager
        The manager built for validation.

    Raises
    ------
    dcs.errors.StructuralValidationError
        If the payload does not match the command set schema.
    """
    from dcs.decorators.validator import validate as _validate

    return _validate(command_set, model_files)


def validate_command(
    manager: "ModelManager", command: "Command | Mapping[str, Any]"
) -> None:
    """Check a single command's target against the models in ``manager``.

    Raises
    ------
    dcs.errors.CommandError
        The specific subclass names the violated constraint.
    """
    from dcs.decorators.validator import validate_command as _validate_command

    _validate_command(manager, command)


def decorate_models(
    model_manager: "ModelManager",
    command_set: "CommandSetLike",
    *,
    validate: bool = False,
    validate_commands: bool = False,
) -> "ModelManager":
    """Apply a decorator command set and return the decorated models.

    Parameters
    ----------
    model_manager:
        The models to decorate; left untouched.
    command_set:
        A ``DecoratorCommandSet`` or its JSON payload.
    validate:
        Structurally validate the command set first.
    validate_commands:
        Check every command target too (requires ``validate``).

    Returns
    -------
    ModelManager
        A new manager holding the decorated models.
    """
    from dcs.decorators.applier import decorate_models as _decorate_models

    return _decorate_models(
        model_manager, command_set, validate=validate, validate_commands=validate_commands
    )


def extract_decorators(
    model_manager: "ModelManager",
    *,
    remove_decorators_from_model: bool = False,
    locale: str = "en",
) -> "ExtractionResult":
    """Extract decorators into command sets and vocabulary documents.

    Parameters
    ----------
    model_manager:
        The models to extract from; left untouched.
    remove_decorators_from_model:
        Strip the decorators from the returned models.
    locale:
        Locale of the vocabulary documents.

    Returns
    -------
    ExtractionResult
        New models, command sets, vocabularies and the extraction index.
    """
    from dcs.decorators.extractor import extract_decorators as _extract_decorators

    return _extract_decorators(
        model_manager,
        remove_decorators_from_model=remove_decorators_from_model,
        locale=locale,
    )


def matches(test: "Selector", candidates: Collection[str]) -> bool:
    """Return True if a target selector matches any of ``candidates``.

    ``None``, ``""`` and empty sequences are wildcards.
    """
    from dcs.decorators.matcher import matches as _matches

    return _matches(test, candidates)


def decorate_ast(ast: "Models", command_set: "DecoratorCommandSet") -> "Models":
    """Return a decorated deep copy of ``ast``; no validation is performed."""
    from dcs.decorators.applier import decorate_ast as _decorate_ast

    return _decorate_ast(ast, command_set)


def parse_decorators(index: "ExtractionIndex") -> list["DecoratorCommandSet"]:
    """Compile an extraction index into one command set per namespace."""
    from dcs.decorators.compiler import parse_decorators as _parse_decorators

    return _parse_decorators(index)


def parse_vocabs(index: "ExtractionIndex", locale: str) -> list[str]:
    """Compile an extraction index into one vocabulary document per namespace.

    Parameters
    ----------
    index:
        The index produced by extraction.
    locale:
        Locale written into every document header.

    Returns
    -------
    list[str]
        YAML-shaped vocabulary documents, in namespace order.
    """
    from dcs.decorators.vocabulary import parse_vocabs as _parse_vocabs

    return _parse_vocabs(index, locale)


__all__ = [
    "__version__",
    "matches",
    "validate",
    "validate_command",
    "decorate_ast",
    "decorate_models",
    "extract_decorators",
    "parse_decorators",
    "parse_vocabs",
]
