"""Decorator engine module.

Exports the operations that validate, apply and extract decorator
command sets, and the compilers that turn an extraction index into
command sets and vocabulary documents.
"""
from __future__ import annotations

from dcs.decorators.applier import (
    apply_decorator,
    decorate_ast,
    decorate_models,
    execute_command,
    execute_property_command,
)
from dcs.decorators.compiler import CommandSetCompiler, parse_decorators
from dcs.decorators.extractor import ExtractionResult, extract_decorators, extract_from_ast
from dcs.decorators.index import ExtractionIndex, IndexEntry
from dcs.decorators.matcher import matches
from dcs.decorators.validator import validate, validate_command
from dcs.decorators.vocabulary import VocabularyCompiler, parse_vocabs

__all__ = [
    # Matching
    "matches",
    # Validation
    "validate",
    "validate_command",
    # Application
    "apply_decorator",
    "execute_command",
    "execute_property_command",
    "decorate_ast",
    "decorate_models",
    # Extraction
    "ExtractionIndex",
    "IndexEntry",
    "ExtractionResult",
    "extract_from_ast",
    "extract_decorators",
    # Compilers
    "CommandSetCompiler",
    "parse_decorators",
    "VocabularyCompiler",
    "parse_vocabs",
]
