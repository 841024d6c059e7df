"""Built-in models used to validate decorator command sets.

Two models are needed:

``concerto.metamodel@1.0.0``
    The decorator types plus one declaration per declaration kind and
    property kind, so that ``CommandTarget.type`` values such as
    ``concerto.metamodel@1.0.0.StringProperty`` resolve.
``org.accordproject.decoratorcommands@0.3.0``
    The command set schema itself, kept as YAML text in the metamodel
    wire format.
"""
from __future__ import annotations

from dcs.metamodel.nodes import (
    METAMODEL_NAMESPACE,
    Declaration,
    DeclarationKind,
    DecoratorLiteralKind,
    Model,
    Property,
    PropertyKind,
    TypeIdentifier,
)
from dcs.metamodel.serializer import AstSerializer

DECORATOR_COMMANDS_MODEL = """\
$class: concerto.metamodel@1.0.0.Model
namespace: org.accordproject.decoratorcommands@0.3.0
imports:
  - $class: concerto.metamodel@1.0.0.ImportType
    namespace: concerto.metamodel@1.0.0
    name: Decorator
declarations:
  # A reference to an existing named & versioned DecoratorCommandSet
  - $class: concerto.metamodel@1.0.0.ConceptDeclaration
    name: DecoratorCommandSetReference
    isAbstract: false
    properties:
      - {$class: concerto.metamodel@1.0.0.StringProperty, name: name, isArray: false, isOptional: false}
      - {$class: concerto.metamodel@1.0.0.StringProperty, name: version, isArray: false, isOptional: false}
  # Whether to upsert or append the decorator
  - $class: concerto.metamodel@1.0.0.EnumDeclaration
    name: CommandType
    properties:
      - {$class: concerto.metamodel@1.0.0.EnumProperty, name: UPSERT}
      - {$class: concerto.metamodel@1.0.0.EnumProperty, name: APPEND}
  # Which model elements to add the decorator to; absent fields are wildcards.
  # property and properties are mutually exclusive.
  - $class: concerto.metamodel@1.0.0.ConceptDeclaration
    name: CommandTarget
    isAbstract: false
    properties:
      - {$class: concerto.metamodel@1.0.0.StringProperty, name: namespace, isArray: false, isOptional: true}
      - {$class: concerto.metamodel@1.0.0.StringProperty, name: declaration, isArray: false, isOptional: true}
      - {$class: concerto.metamodel@1.0.0.StringProperty, name: property, isArray: false, isOptional: true}
      - {$class: concerto.metamodel@1.0.0.StringProperty, name: properties, isArray: true, isOptional: true}
      - {$class: concerto.metamodel@1.0.0.StringProperty, name: type, isArray: false, isOptional: true}
  # Applies a decorator to a given target
  - $class: concerto.metamodel@1.0.0.ConceptDeclaration
    name: Command
    isAbstract: false
    properties:
      - $class: concerto.metamodel@1.0.0.ObjectProperty
        name: target
        isArray: false
        isOptional: false
        type: {$class: concerto.metamodel@1.0.0.TypeIdentifier, name: CommandTarget}
      - $class: concerto.metamodel@1.0.0.ObjectProperty
        name: decorator
        isArray: false
        isOptional: false
        type: {$class: concerto.metamodel@1.0.0.TypeIdentifier, name: Decorator}
      - $class: concerto.metamodel@1.0.0.ObjectProperty
        name: type
        isArray: false
        isOptional: false
        type: {$class: concerto.metamodel@1.0.0.TypeIdentifier, name: CommandType}
  # A named and versioned set of commands; includes are not yet supported
  - $class: concerto.metamodel@1.0.0.ConceptDeclaration
    name: DecoratorCommandSet
    isAbstract: false
    properties:
      - {$class: concerto.metamodel@1.0.0.StringProperty, name: name, isArray: false, isOptional: false}
      - {$class: concerto.metamodel@1.0.0.StringProperty, name: version, isArray: false, isOptional: false}
      - $class: concerto.metamodel@1.0.0.ObjectProperty
        name: includes
        isArray: true
        isOptional: true
        type: {$class: concerto.metamodel@1.0.0.TypeIdentifier, name: DecoratorCommandSetReference}
      - $class: concerto.metamodel@1.0.0.ObjectProperty
        name: commands
        isArray: true
        isOptional: false
        type: {$class: concerto.metamodel@1.0.0.TypeIdentifier, name: Command}
"""

DECORATOR_COMMAND_SET_CLASS = "org.accordproject.decoratorcommands@0.3.0.DecoratorCommandSet"


def _field(
    name: str,
    kind: PropertyKind,
    type_name: str | None = None,
    *,
    array: bool = False,
    optional: bool = False,
) -> Property:
    return Property(
        name=name,
        kind=kind,
        is_array=array,
        is_optional=optional,
        type=TypeIdentifier(name=type_name) if type_name else None,
    )


def _concept(
    name: str,
    properties: list[Property] | None = None,
    *,
    super_type: str | None = None,
    abstract: bool = False,
) -> Declaration:
    return Declaration(
        name=name,
        kind=DeclarationKind.CONCEPT,
        properties=properties or [],
        is_abstract=abstract,
        super_type=TypeIdentifier(name=super_type) if super_type else None,
    )


def metamodel_model() -> Model:
    """Build the subset of ``concerto.metamodel@1.0.0`` the toolkit needs."""
    literal_values = {
        DecoratorLiteralKind.STRING: PropertyKind.STRING,
        DecoratorLiteralKind.NUMBER: PropertyKind.DOUBLE,
        DecoratorLiteralKind.BOOLEAN: PropertyKind.BOOLEAN,
    }
    declarations = [
        _concept("TypeIdentifier", [
            _field("name", PropertyKind.STRING),
            _field("namespace", PropertyKind.STRING, optional=True),
        ]),
        _concept("Decorator", [
            _field("name", PropertyKind.STRING),
            _field("arguments", PropertyKind.OBJECT, "DecoratorLiteral", array=True, optional=True),
        ]),
        _concept("DecoratorLiteral", abstract=True),
    ]
    for literal, value_kind in literal_values.items():
        declarations.append(
            _concept(literal.value, [_field("value", value_kind)], super_type="DecoratorLiteral")
        )
    declarations.append(_concept(
        DecoratorLiteralKind.TYPE_REFERENCE.value,
        [
            _field("type", PropertyKind.OBJECT, "TypeIdentifier"),
            _field("isArray", PropertyKind.BOOLEAN, optional=True),
        ],
        super_type="DecoratorLiteral",
    ))

    declarations.append(_concept("Declaration", [
        _field("name", PropertyKind.STRING),
        _field("decorators", PropertyKind.OBJECT, "Decorator", array=True, optional=True),
    ], abstract=True))
    declarations.extend(_concept(k.value, super_type="Declaration") for k in DeclarationKind)

    declarations.append(_concept("Property", [
        _field("name", PropertyKind.STRING),
        _field("isArray", PropertyKind.BOOLEAN, optional=True),
        _field("isOptional", PropertyKind.BOOLEAN, optional=True),
        _field("decorators", PropertyKind.OBJECT, "Decorator", array=True, optional=True),
    ], abstract=True))
    declarations.extend(_concept(k.value, super_type="Property") for k in PropertyKind)

    return Model(namespace=METAMODEL_NAMESPACE, declarations=declarations)


def decorator_commands_model() -> Model:
    """Parse the built-in decorator command set schema."""
    return AstSerializer().from_yaml(DECORATOR_COMMANDS_MODEL).models[0]
