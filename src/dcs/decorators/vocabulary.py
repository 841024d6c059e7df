"""Compile an extraction index into localized vocabulary documents.

Vocabulary terms travel through a model as two reserved decorators:
``@Term("Person")`` gives an element its display label and
``@Term_description("A human being")`` a longer description.  This
module gathers them into one YAML-shaped document per namespace::

    locale: en
    namespace: org.acme@1.0.0
    declarations:
      - Person: A person
        description: A human being
        properties:
          - name: Name of the person

A declaration is only written out when it has a ``Term`` of its own.
Every property carrying either decorator is listed under it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dcs.decorators.index import ExtractionIndex, IndexEntry
from dcs.metamodel.nodes import Decorator

logger = logging.getLogger(__name__)

TERM = "Term"
TERM_DESCRIPTION = "Term_description"


@dataclass
class _Terms:
    term: str | None = None
    term_desc: str | None = None


@dataclass
class _DeclarationVocabulary(_Terms):
    properties: dict[str, _Terms] = field(default_factory=dict)


def _first_argument(decorator: Decorator) -> str | None:
    if not decorator.arguments:
        return None
    return str(decorator.arguments[0].value)


class VocabularyCompiler:
    """Turns an ``ExtractionIndex`` into vocabulary documents.

    Parameters
    ----------
    locale:
        Locale written into every document header, e.g. ``"en"``.
    """

    def __init__(self, locale: str) -> None:
        self._locale = locale

    def compile(self, index: ExtractionIndex) -> list[str]:
        """Return one vocabulary document per namespace, in index order."""
        return [self._render(ns, self._collect(entries)) for ns, entries in index.items()]

    def _collect(self, entries: list[IndexEntry]) -> dict[str, _DeclarationVocabulary]:
        vocabularies: dict[str, _DeclarationVocabulary] = {}
        for entry in entries:
            if entry.is_model_level:
                continue
            decl_vocab = vocabularies.setdefault(entry.declaration, _DeclarationVocabulary())
            for decorator in entry.decorators:
                if decorator.name not in (TERM, TERM_DESCRIPTION):
                    continue
                terms: _Terms = decl_vocab
                if entry.property:
                    terms = decl_vocab.properties.setdefault(entry.property, _Terms())
                value = _first_argument(decorator)
                if decorator.name == TERM:
                    terms.term = value
                else:
                    terms.term_desc = value
        return vocabularies

    def _render(self, namespace: str, vocabularies: dict[str, _DeclarationVocabulary]) -> str:
        lines = [
            f"locale: {self._locale}",
            f"namespace: {namespace}",
            "declarations:",
        ]
        for name, vocab in vocabularies.items():
            if not vocab.term:
                continue
            lines.append(f"  - {name}: {vocab.term}")
            if vocab.term_desc:
                lines.append(f"    description: {vocab.term_desc}")
            if not vocab.properties:
                continue
            lines.append("    properties:")
            for prop_name, prop_terms in vocab.properties.items():
                # a property with only a description is labelled with it
                label = prop_terms.term or prop_terms.term_desc or ""
                lines.append(f"      - {prop_name}: {label}")
                # repeats the declaration's description, not the property's
                if vocab.term_desc:
                    lines.append(f"        description: {vocab.term_desc}")
        logger.debug("Compiled vocabulary for namespace %r", namespace)
        return "\n".join(lines) + "\n"


def parse_vocabs(index: ExtractionIndex, locale: str) -> list[str]:
    """Convenience function: compile ``index`` with a ``VocabularyCompiler``."""
    return VocabularyCompiler(locale).compile(index)
