"""Namespace helpers.

A namespace is a dotted identifier optionally suffixed with ``@version``,
e.g. ``org.acme.hr@1.2.0``.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NamespaceInfo:
    """The two halves of a namespace string.

    ``version`` is ``None`` for an unversioned namespace.
    """

    name: str
    version: str | None = None

    def __str__(self) -> str:
        return f"{self.name}@{self.version}" if self.version else self.name


def parse_namespace(namespace: str) -> NamespaceInfo:
    """Split ``namespace`` into its name and optional version.

    Raises
    ------
    ValueError
        If ``namespace`` contains more than one ``@``.
    """
    parts = namespace.split("@")
    if len(parts) > 2:
        raise ValueError(f"Invalid namespace {namespace!r}")
    if len(parts) == 2:
        return NamespaceInfo(name=parts[0], version=parts[1])
    return NamespaceInfo(name=parts[0])


def unversioned(namespace: str) -> str:
    """Return ``namespace`` with any ``@version`` suffix removed."""
    return parse_namespace(namespace).name


def split_fully_qualified_name(fqn: str) -> tuple[str, str]:
    """Split ``org.acme@1.0.0.Person`` into ``("org.acme@1.0.0", "Person")``.

    Raises
    ------
    ValueError
        If ``fqn`` has no namespace part.
    """
    namespace, sep, short_name = fqn.rpartition(".")
    if not sep or not namespace:
        raise ValueError(f"{fqn!r} is not a fully qualified type name")
    return namespace, short_name
