#!/usr/bin/env python3
"""Example: Extracting decorators — dcs-toolkit

Pull the decorators out of a decorated model: non-vocabulary decorators
become a decorator command set, ``@Term`` / ``@Term_description``
decorators become a vocabulary document, and the model is returned
without decorators.

Usage:
    python examples/02_extract_vocabulary.py

Requirements:
    pip install dcs-toolkit
"""
from __future__ import annotations

import dcs
from dcs.commands import CommandSetSerializer
from dcs.metamodel import (
    AstSerializer,
    Declaration,
    DeclarationKind,
    Decorator,
    DecoratorArgument,
    DecoratorLiteralKind,
    Model,
    Models,
    Property,
    PropertyKind,
)
from dcs.typesystem import ModelManager


def _decorator(name: str, *values: str) -> Decorator:
    return Decorator(
        name=name,
        arguments=[DecoratorArgument(DecoratorLiteralKind.STRING, v) for v in values] or None,
    )


def build_models() -> Models:
    return Models(models=[
        Model(
            namespace="org.acme.hr@1.0.0",
            declarations=[
                Declaration(
                    name="Person",
                    kind=DeclarationKind.CONCEPT,
                    decorators=[
                        _decorator("Term", "Person"),
                        _decorator("Term_description", "A human being"),
                        _decorator("Resource"),
                    ],
                    properties=[
                        Property(
                            name="firstName",
                            kind=PropertyKind.STRING,
                            decorators=[_decorator("Term", "First name"), _decorator("Form", "text")],
                        ),
                        Property(name="age", kind=PropertyKind.INTEGER),
                    ],
                )
            ],
        )
    ])


def main() -> None:
    manager = ModelManager.from_ast(build_models())

    result = dcs.extract_decorators(manager, remove_decorators_from_model=True, locale="en")

    serializer = CommandSetSerializer()
    for command_set in result.decorator_command_sets:
        print(f"--- {command_set.name}@{command_set.version}.dcs.yaml")
        print(serializer.to_yaml(command_set))

    for namespace, vocabulary in zip(result.index.namespaces, result.vocabularies):
        print(f"--- {namespace}_en.voc.yaml")
        print(vocabulary)

    print("--- undecorated models")
    print(AstSerializer().to_yaml(result.model_manager.get_ast()))

    # Re-applying the command sets restores every non-vocabulary decorator
    restored = result.model_manager
    for command_set in result.decorator_command_sets:
        restored = dcs.decorate_models(restored, command_set, validate=True)
    person = restored.get_type("org.acme.hr@1.0.0.Person")
    print(f"Restored Person decorators: {[d.name for d in person.declaration.decorators]}")


if __name__ == "__main__":
    main()
