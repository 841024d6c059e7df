"""The extraction index shared by the command set and vocabulary compilers.

The index maps each namespace to the decorators recorded for it, in the
order they were found.  Each ``IndexEntry`` holds a private snapshot of
a decorator list, so clearing the decorators on the AST afterwards does
not affect the index.
"""
from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass

from dcs.metamodel.nodes import Decorator


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """Decorators recorded for one model element.

    ``declaration`` and ``property`` are empty strings for model-level
    decorators; ``property`` is empty for declaration-level decorators.
    """

    declaration: str
    property: str
    decorators: tuple[Decorator, ...]

    @property
    def is_model_level(self) -> bool:
        return not self.declaration and not self.property


class ExtractionIndex:
    """Ordered mapping of namespace to recorded ``IndexEntry`` objects."""

    def __init__(self) -> None:
        self._buckets: dict[str, list[IndexEntry]] = {}

    def record(
        self,
        namespace: str,
        decorators: list[Decorator],
        declaration: str = "",
        property: str = "",
    ) -> IndexEntry:
        """Append a snapshot of ``decorators`` to the bucket for ``namespace``."""
        entry = IndexEntry(
            declaration=declaration,
            property=property,
            decorators=tuple(copy.deepcopy(decorators)),
        )
        self._buckets.setdefault(namespace, []).append(entry)
        return entry

    @property
    def namespaces(self) -> list[str]:
        return list(self._buckets)

    def entries(self, namespace: str) -> list[IndexEntry]:
        return list(self._buckets.get(namespace, ()))

    def items(self) -> Iterator[tuple[str, list[IndexEntry]]]:
        for namespace, entries in self._buckets.items():
            yield namespace, list(entries)

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"ExtractionIndex(namespaces={self.namespaces!r})"
