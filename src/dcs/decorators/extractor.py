"""Extraction of decorators from a metamodel AST.

``extract_decorators`` is the inverse of ``decorate_models``: it walks
every model, declaration and property, records their decorators in an
``ExtractionIndex`` and compiles that index into decorator command sets
and vocabulary documents.  Optionally the decorators are stripped from
the returned models.

Usage
-----
::

    from dcs.decorators.extractor import extract_decorators

    result = extract_decorators(manager, remove_decorators_from_model=True, locale="en")
    for command_set in result.decorator_command_sets:
        ...
    for document in result.vocabularies:
        ...
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass

from dcs.commands.nodes import DecoratorCommandSet
from dcs.decorators.compiler import parse_decorators
from dcs.decorators.index import ExtractionIndex
from dcs.decorators.vocabulary import parse_vocabs
from dcs.metamodel.nodes import Declaration, Model, Models, Property
from dcs.typesystem.manager import ModelManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    """Everything produced by ``extract_decorators``.

    Parameters
    ----------
    model_manager:
        A new manager over the (possibly undecorated) models.
    decorator_command_sets:
        One command set per namespace that had decorators.
    vocabularies:
        One vocabulary document per namespace that had decorators.
    index:
        The extraction index both compilers were fed from.
    """

    model_manager: ModelManager
    decorator_command_sets: list[DecoratorCommandSet]
    vocabularies: list[str]
    index: ExtractionIndex


def _process(
    index: ExtractionIndex,
    namespace: str,
    node: Model | Declaration | Property,
    remove: bool,
    declaration: str = "",
    property: str = "",
) -> None:
    if not node.decorators:
        return
    index.record(namespace, node.decorators, declaration, property)
    if remove:
        node.decorators.clear()


def extract_from_ast(ast: Models, *, remove_decorators: bool = False) -> tuple[Models, ExtractionIndex]:
    """Record every decorator of ``ast`` in a new ``ExtractionIndex``.

    Returns a deep copy of ``ast`` (without decorators when
    ``remove_decorators`` is set) together with the index.
    """
    extracted = copy.deepcopy(ast)
    index = ExtractionIndex()
    for model in extracted.models:
        _process(index, model.namespace, model, remove_decorators)
        for decl in model.declarations:
            _process(index, model.namespace, decl, remove_decorators, decl.name)
            for prop in decl.properties or ():
                _process(index, model.namespace, prop, remove_decorators, decl.name, prop.name)
    logger.debug("Extracted decorators from %d namespace(s)", len(index))
    return extracted, index


def extract_decorators(
    model_manager: ModelManager,
    *,
    remove_decorators_from_model: bool = False,
    locale: str = "en",
) -> ExtractionResult:
    """Extract all decorators from ``model_manager``.

    Parameters
    ----------
    model_manager:
        The models to extract from.  It is not modified.
    remove_decorators_from_model:
        Strip the decorators from the returned models.
    locale:
        Locale written into the vocabulary documents.
    """
    ast, index = extract_from_ast(
        model_manager.get_ast(resolved=True), remove_decorators=remove_decorators_from_model
    )
    return ExtractionResult(
        model_manager=ModelManager.from_ast(ast),
        decorator_command_sets=parse_decorators(index),
        vocabularies=parse_vocabs(index, locale),
        index=index,
    )
