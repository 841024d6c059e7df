"""Structural validation of JSON instances against loaded declarations.

``InstanceValidator`` checks that a plain dict/list payload is a valid
instance of a concept declared in a ``ModelManager``: every ``$class``
resolves, no unknown fields appear, every required field is present and
every value has the declared type.  Nested objects may omit ``$class``
when the declared field type is concrete.

Usage
-----
::

    validator = InstanceValidator(manager)
    validator.from_json({"$class": "org.acme@1.0.0.Person", "name": "Ann"})
"""
from __future__ import annotations

import datetime
from collections.abc import Callable
from typing import Any

from dcs.errors import StructuralValidationError, TypeNotFoundError
from dcs.metamodel.nodes import DeclarationKind, Property, PropertyKind
from dcs.typesystem.manager import DeclarationHandle, ModelManager


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_datetime(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


_PRIMITIVE_CHECKS: dict[PropertyKind, Callable[[object], bool]] = {
    PropertyKind.STRING: lambda v: isinstance(v, str),
    PropertyKind.BOOLEAN: lambda v: isinstance(v, bool),
    PropertyKind.INTEGER: _is_integer,
    PropertyKind.LONG: _is_integer,
    PropertyKind.DOUBLE: _is_number,
    PropertyKind.DATETIME: _is_datetime,
}

_INSTANTIABLE = frozenset({
    DeclarationKind.CONCEPT,
    DeclarationKind.ASSET,
    DeclarationKind.PARTICIPANT,
    DeclarationKind.TRANSACTION,
    DeclarationKind.EVENT,
})

_SCALAR_CHECKS: dict[DeclarationKind, Callable[[object], bool]] = {
    DeclarationKind.STRING_SCALAR: _PRIMITIVE_CHECKS[PropertyKind.STRING],
    DeclarationKind.BOOLEAN_SCALAR: _PRIMITIVE_CHECKS[PropertyKind.BOOLEAN],
    DeclarationKind.INTEGER_SCALAR: _is_integer,
    DeclarationKind.LONG_SCALAR: _is_integer,
    DeclarationKind.DOUBLE_SCALAR: _is_number,
    DeclarationKind.DATETIME_SCALAR: _is_datetime,
}


class InstanceValidator:
    """Validates JSON payloads against the types in a ``ModelManager``."""

    def __init__(self, manager: ModelManager) -> None:
        self._manager = manager

    def from_json(self, payload: Any, default_class: str | None = None) -> dict[str, Any]:
        """Validate ``payload`` and return it unchanged.

        Parameters
        ----------
        payload:
            The instance to validate.
        default_class:
            Type to assume when the root object has no ``$class``.

        Raises
        ------
        StructuralValidationError
            On the first shape violation found.
        """
        expected = None
        if default_class is not None:
            expected = self._resolve(default_class, "$")
        self._validate_object(payload, expected, "$")
        return payload

    def _resolve(self, class_name: str, path: str) -> DeclarationHandle:
        try:
            return self._manager.get_type(class_name)
        except TypeNotFoundError:
            raise StructuralValidationError(f"Unknown $class {class_name!r}", path) from None

    def _validate_object(self, value: Any, expected: DeclarationHandle | None, path: str) -> None:
        if not isinstance(value, dict):
            raise StructuralValidationError(f"Expected an object, got {value!r}", path)

        class_name = value.get("$class")
        if class_name is None:
            if expected is None:
                raise StructuralValidationError("Object has no '$class'", path)
            handle = expected
        elif not isinstance(class_name, str):
            raise StructuralValidationError(f"'$class' must be a string, got {class_name!r}", path)
        else:
            handle = self._resolve(class_name, path)
            if expected is not None and not handle.is_assignable_to(expected):
                raise StructuralValidationError(
                    f"{handle.fully_qualified_name} is not a {expected.fully_qualified_name}", path
                )

        if handle.is_abstract or handle.declaration.kind not in _INSTANTIABLE:
            raise StructuralValidationError(
                f"Cannot create an instance of {handle.fully_qualified_name}", path
            )

        properties = {p.name: p for p in handle.get_properties()}
        for key in value:
            if key != "$class" and key not in properties:
                raise StructuralValidationError(
                    f"Unknown field {key!r} for {handle.fully_qualified_name}", f"{path}.{key}"
                )
        for name, prop in properties.items():
            field_path = f"{path}.{name}"
            if value.get(name) is None:
                if not prop.is_optional:
                    raise StructuralValidationError(f"Missing required field {name!r}", field_path)
                continue
            self._validate_field(handle, prop, value[name], field_path)

    def _validate_field(self, owner: DeclarationHandle, prop: Property, value: Any, path: str) -> None:
        if not prop.is_array:
            self._validate_value(owner, prop, value, path)
            return
        if not isinstance(value, list):
            raise StructuralValidationError(f"Expected an array, got {value!r}", path)
        for index, item in enumerate(value):
            self._validate_value(owner, prop, item, f"{path}[{index}]")

    def _validate_value(self, owner: DeclarationHandle, prop: Property, value: Any, path: str) -> None:
        check = _PRIMITIVE_CHECKS.get(prop.kind)
        if check is not None:
            if not check(value):
                raise StructuralValidationError(
                    f"Expected a {prop.kind.value.removesuffix('Property')} value, got {value!r}", path
                )
            return
        if prop.kind is PropertyKind.RELATIONSHIP:
            if not isinstance(value, str):
                raise StructuralValidationError(f"Expected a relationship URI, got {value!r}", path)
            return

        try:
            target = owner.resolve_property_type(prop)
        except TypeNotFoundError as exc:
            raise StructuralValidationError(str(exc), path) from None

        kind = target.declaration.kind
        if kind is DeclarationKind.ENUM:
            allowed = [p.name for p in target.declaration.properties or ()]
            if value not in allowed:
                raise StructuralValidationError(
                    f"Invalid value {value!r} for enum {target.fully_qualified_name}; "
                    f"expected one of {', '.join(allowed)}",
                    path,
                )
            return
        scalar_check = _SCALAR_CHECKS.get(kind)
        if scalar_check is not None:
            if not scalar_check(value):
                raise StructuralValidationError(
                    f"Invalid value {value!r} for scalar {target.fully_qualified_name}", path
                )
            return
        self._validate_object(value, target, path)
