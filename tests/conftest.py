"""Shared test fixtures for dcs-toolkit.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.

The sample models look like this in CTO notation::

    namespace org.acme.hr@1.0.0

    concept Address { o String street  o String city }
    concept Person { o String name  o Integer age  o String email optional
                     o Address address }
    concept Employee extends Person { o Double salary }
    scalar SSN extends String
    enum Department { o ENGINEERING  o SALES }

    namespace org.acme.finance@2.0.0

    concept Invoice { o Double amount }
"""
from __future__ import annotations

import pytest

from dcs.metamodel.nodes import (
    Declaration,
    DeclarationKind,
    Model,
    Models,
    Property,
    PropertyKind,
    TypeIdentifier,
)
from dcs.typesystem.manager import ModelManager

HR_NAMESPACE = "org.acme.hr@1.0.0"
FINANCE_NAMESPACE = "org.acme.finance@2.0.0"


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "dcs"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def hr_model() -> Model:
    return Model(
        namespace=HR_NAMESPACE,
        declarations=[
            Declaration(
                name="Address",
                kind=DeclarationKind.CONCEPT,
                properties=[
                    Property(name="street", kind=PropertyKind.STRING),
                    Property(name="city", kind=PropertyKind.STRING),
                ],
            ),
            Declaration(
                name="Person",
                kind=DeclarationKind.CONCEPT,
                properties=[
                    Property(name="name", kind=PropertyKind.STRING),
                    Property(name="age", kind=PropertyKind.INTEGER),
                    Property(name="email", kind=PropertyKind.STRING, is_optional=True),
                    Property(
                        name="address",
                        kind=PropertyKind.OBJECT,
                        type=TypeIdentifier(name="Address"),
                    ),
                ],
            ),
            Declaration(
                name="Employee",
                kind=DeclarationKind.CONCEPT,
                super_type=TypeIdentifier(name="Person"),
                properties=[Property(name="salary", kind=PropertyKind.DOUBLE)],
            ),
            Declaration(name="SSN", kind=DeclarationKind.STRING_SCALAR),
            Declaration(
                name="Department",
                kind=DeclarationKind.ENUM,
                properties=[
                    Property(name="ENGINEERING", kind=PropertyKind.ENUM),
                    Property(name="SALES", kind=PropertyKind.ENUM),
                ],
            ),
        ],
    )


@pytest.fixture()
def finance_model() -> Model:
    return Model(
        namespace=FINANCE_NAMESPACE,
        declarations=[
            Declaration(
                name="Invoice",
                kind=DeclarationKind.CONCEPT,
                properties=[Property(name="amount", kind=PropertyKind.DOUBLE)],
            ),
        ],
    )


@pytest.fixture()
def models(hr_model: Model, finance_model: Model) -> Models:
    return Models(models=[hr_model, finance_model])


@pytest.fixture()
def model_manager(models: Models) -> ModelManager:
    return ModelManager.from_ast(models)
