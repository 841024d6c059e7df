"""Type system module.

Exports the ``ModelManager`` that indexes models by namespace and the
``InstanceValidator`` that checks JSON payloads against loaded types.
"""
from __future__ import annotations

from dcs.typesystem.instance import InstanceValidator
from dcs.typesystem.manager import DeclarationHandle, ModelFile, ModelManager

__all__ = [
    "ModelManager",
    "ModelFile",
    "DeclarationHandle",
    "InstanceValidator",
]
