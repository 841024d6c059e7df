#!/usr/bin/env python3
"""Example: Quickstart — dcs-toolkit

Minimal working example: load a model, validate a decorator command
set against it, apply it, and inspect the decorated declarations.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install dcs-toolkit
"""
from __future__ import annotations

import dcs
from dcs.errors import CommandError
from dcs.metamodel import AstSerializer
from dcs.typesystem import ModelManager

MODELS = {
    "$class": "concerto.metamodel@1.0.0.Model",
    "namespace": "org.acme.hr@1.0.0",
    "declarations": [
        {
            "$class": "concerto.metamodel@1.0.0.ConceptDeclaration",
            "name": "Person",
            "isAbstract": False,
            "properties": [
                {"$class": "concerto.metamodel@1.0.0.StringProperty",
                 "name": "firstName", "isArray": False, "isOptional": False},
                {"$class": "concerto.metamodel@1.0.0.StringProperty",
                 "name": "email", "isArray": False, "isOptional": True},
                {"$class": "concerto.metamodel@1.0.0.IntegerProperty",
                 "name": "age", "isArray": False, "isOptional": False},
            ],
        }
    ],
}

COMMAND_SET = {
    "$class": "org.accordproject.decoratorcommands.DecoratorCommandSet",
    "name": "web",
    "version": "1.0.0",
    "commands": [
        {
            "$class": "org.accordproject.decoratorcommands.Command",
            "type": "UPSERT",
            "target": {
                "$class": "org.accordproject.decoratorcommands.CommandTarget",
                "type": "concerto.metamodel@1.0.0.StringProperty",
            },
            "decorator": {
                "$class": "concerto.metamodel@1.0.0.Decorator",
                "name": "Form",
                "arguments": [
                    {"$class": "concerto.metamodel@1.0.0.DecoratorString", "value": "inputType"},
                    {"$class": "concerto.metamodel@1.0.0.DecoratorString", "value": "text"},
                ],
            },
        },
        {
            "$class": "org.accordproject.decoratorcommands.Command",
            "type": "APPEND",
            "target": {
                "$class": "org.accordproject.decoratorcommands.CommandTarget",
                "namespace": "org.acme.hr",
                "declaration": "Person",
                "property": "email",
            },
            "decorator": {"$class": "concerto.metamodel@1.0.0.Decorator", "name": "PII"},
        },
    ],
}


def main() -> None:
    print(f"dcs-toolkit version: {dcs.__version__}")

    # Step 1: Load the model into a ModelManager
    manager = ModelManager.from_ast(AstSerializer().from_dict(MODELS))
    print(f"Loaded namespaces: {manager.get_namespaces()}")

    # Step 2: Validate the command set, including every target
    try:
        validation_manager = dcs.validate(COMMAND_SET, manager.get_model_files())
        for command in COMMAND_SET["commands"]:
            dcs.validate_command(validation_manager, command)
    except CommandError as exc:
        print(f"Invalid command set: {exc.description}")
        return
    print("Command set is valid")

    # Step 3: Apply it
    decorated = dcs.decorate_models(manager, COMMAND_SET)

    # Step 4: Inspect the result
    person = decorated.get_type("org.acme.hr@1.0.0.Person")
    for prop in person.get_properties():
        names = [d.name for d in prop.decorators or ()]
        print(f"  {prop.name}: {names or '-'}")


if __name__ == "__main__":
    main()
