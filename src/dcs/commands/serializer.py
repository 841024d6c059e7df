"""Serialization of decorator command sets.

Converts ``DecoratorCommandSet`` objects to and from the JSON wire
format::

    {
      "$class": "org.accordproject.decoratorcommands.DecoratorCommandSet",
      "name": "web",
      "version": "1.0.0",
      "commands": [
        {
          "$class": "org.accordproject.decoratorcommands.Command",
          "type": "UPSERT",
          "target": {
            "$class": "org.accordproject.decoratorcommands.CommandTarget",
            "namespace": "org.acme@1.0.0",
            "declaration": "Person"
          },
          "decorator": {"$class": "concerto.metamodel@1.0.0.Decorator", "name": "Form"}
        }
      ]
    }

Deserialization is lenient: it only picks out known fields.  Use
``dcs.decorators.validator.validate`` for strict structural checks.
"""
from __future__ import annotations

import json
from typing import Any

import yaml

from dcs.commands.nodes import (
    Command,
    CommandTarget,
    CommandType,
    DecoratorCommandSet,
    DecoratorCommandSetReference,
    dcs_class,
)
from dcs.metamodel.serializer import AstSerializer

_TARGET_FIELDS = ("namespace", "declaration", "property", "properties", "type")


class CommandSetSerializer:
    """Converts between ``DecoratorCommandSet`` objects and plain dicts."""

    def __init__(self) -> None:
        self._ast = AstSerializer()

    # ------------------------------------------------------------------
    # Serialization (objects → dict)
    # ------------------------------------------------------------------

    def to_dict(self, command_set: DecoratorCommandSet) -> dict[str, Any]:
        """Serialize a command set to a JSON-compatible dict."""
        data: dict[str, Any] = {
            "$class": dcs_class("DecoratorCommandSet"),
            "name": command_set.name,
            "version": command_set.version,
        }
        if command_set.includes is not None:
            data["includes"] = [
                {
                    "$class": dcs_class("DecoratorCommandSetReference"),
                    "name": ref.name,
                    "version": ref.version,
                }
                for ref in command_set.includes
            ]
        data["commands"] = [self.command_to_dict(c) for c in command_set.commands]
        return data

    def command_to_dict(self, command: Command) -> dict[str, Any]:
        command_type = command.type
        if isinstance(command_type, CommandType):
            command_type = command_type.value
        return {
            "$class": dcs_class("Command"),
            "type": command_type,
            "target": self.target_to_dict(command.target),
            "decorator": self._ast.decorator_to_dict(command.decorator),
        }

    def target_to_dict(self, target: CommandTarget) -> dict[str, Any]:
        data: dict[str, Any] = {"$class": dcs_class("CommandTarget")}
        for name in _TARGET_FIELDS:
            value = getattr(target, name)
            if value is not None:
                data[name] = list(value) if name == "properties" else value
        return data

    # ------------------------------------------------------------------
    # Deserialization (dict → objects)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, Any]) -> DecoratorCommandSet:
        """Deserialize a command set from a plain dict."""
        includes = data.get("includes")
        return DecoratorCommandSet(
            name=data.get("name", ""),
            version=data.get("version", ""),
            commands=tuple(self.command_from_dict(c) for c in data.get("commands", [])),
            includes=(
                tuple(
                    DecoratorCommandSetReference(name=ref["name"], version=ref["version"])
                    for ref in includes
                )
                if includes is not None else None
            ),
        )

    def command_from_dict(self, data: dict[str, Any]) -> Command:
        raw_type = data.get("type")
        try:
            command_type: CommandType | str = CommandType(raw_type)
        except ValueError:
            command_type = str(raw_type)
        return Command(
            target=self.target_from_dict(data.get("target") or {}),
            decorator=self._ast.decorator_from_dict(data["decorator"]),
            type=command_type,
        )

    def target_from_dict(self, data: dict[str, Any]) -> CommandTarget:
        properties = data.get("properties")
        return CommandTarget(
            namespace=data.get("namespace"),
            declaration=data.get("declaration"),
            property=data.get("property"),
            properties=tuple(properties) if properties is not None else None,
            type=data.get("type"),
        )

    # ------------------------------------------------------------------
    # JSON / YAML helpers
    # ------------------------------------------------------------------

    def to_json(self, command_set: DecoratorCommandSet, indent: int = 2) -> str:
        return json.dumps(self.to_dict(command_set), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> DecoratorCommandSet:
        return self.from_dict(json.loads(text))

    def to_yaml(self, command_set: DecoratorCommandSet) -> str:
        return yaml.dump(
            self.to_dict(command_set), default_flow_style=False, allow_unicode=True, sort_keys=False
        )

    def from_yaml(self, text: str) -> DecoratorCommandSet:
        return self.from_dict(yaml.safe_load(text))
