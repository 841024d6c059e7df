"""Target matching for decorator commands.

A single rule decides every level of a ``CommandTarget`` match
(namespace, declaration, property, property type):

- an absent or empty test value is a wildcard and always matches,
- a single value matches if it is one of the candidates,
- a sequence matches if it shares at least one value with the candidates.
"""
from __future__ import annotations

from collections.abc import Collection, Sequence

Selector = str | Sequence[str] | None


def matches(test: Selector, candidates: Collection[str]) -> bool:
    """Return True if ``test`` selects any of ``candidates``."""
    if not test:
        return True
    if isinstance(test, str):
        return test in candidates
    return not set(test).isdisjoint(candidates)
