"""In-memory type system over metamodel ASTs.

``ModelManager`` holds one ``ModelFile`` per namespace and answers the
questions the decorator engine needs: does a namespace exist, does a
type exist, which properties does a declaration expose (including the
ones it inherits).

Usage
-----
::

    from dcs.typesystem import ModelManager

    manager = ModelManager.from_ast(ast)
    person = manager.get_type("org.acme@1.0.0.Person")
    person.get_property("name")
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Iterator

from dcs.errors import IllegalModelError, TypeNotFoundError
from dcs.metamodel.namespace import parse_namespace, split_fully_qualified_name, unversioned
from dcs.metamodel.nodes import Declaration, Model, Models, Property, TypeIdentifier

logger = logging.getLogger(__name__)


class ModelFile:
    """The declarations of a single namespace, as loaded in a manager."""

    def __init__(self, model: Model) -> None:
        try:
            parse_namespace(model.namespace)
        except ValueError as exc:
            raise IllegalModelError(str(exc)) from exc
        self._model = model

    @property
    def model(self) -> Model:
        return self._model

    def get_namespace(self) -> str:
        return self._model.namespace

    def get_unversioned_namespace(self) -> str:
        return unversioned(self._model.namespace)

    def get_declarations(self) -> list[Declaration]:
        return list(self._model.declarations)

    def get_local_type(self, name: str) -> Declaration | None:
        """Return the declaration called ``name`` in this namespace, if any."""
        return self._model.get_declaration(name)

    def get_imported_namespace(self, name: str) -> str | None:
        """Return the namespace that an import statement brings ``name`` from."""
        for imp in self._model.extras.get("imports", ()):
            namespace = imp.get("namespace")
            if imp.get("name") == name or name in imp.get("types", ()):
                return namespace
            if str(imp.get("$class", "")).endswith("ImportAll"):
                return namespace
        return None

    def __repr__(self) -> str:
        return f"ModelFile({self.get_namespace()!r})"


class DeclarationHandle:
    """A declaration resolved inside a ``ModelManager``.

    Gives access to inherited properties by following ``super_type``.
    """

    def __init__(self, manager: "ModelManager", model_file: ModelFile, declaration: Declaration) -> None:
        self._manager = manager
        self._model_file = model_file
        self._declaration = declaration

    @property
    def declaration(self) -> Declaration:
        return self._declaration

    @property
    def namespace(self) -> str:
        return self._model_file.get_namespace()

    @property
    def name(self) -> str:
        return self._declaration.name

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}"

    @property
    def is_abstract(self) -> bool:
        return self._declaration.is_abstract

    def get_super_type(self) -> "DeclarationHandle | None":
        """Resolve and return the direct super type, if declared."""
        super_type = self._declaration.super_type
        if super_type is None:
            return None
        return self._manager.resolve_type_identifier(super_type, self._model_file)

    def lineage(self) -> Iterator["DeclarationHandle"]:
        """Yield this declaration followed by each of its ancestors."""
        seen: set[str] = set()
        handle: DeclarationHandle | None = self
        while handle is not None and handle.fully_qualified_name not in seen:
            seen.add(handle.fully_qualified_name)
            yield handle
            handle = handle.get_super_type()

    def get_property(self, name: str) -> Property | None:
        """Return the property called ``name``, searching super types too."""
        for handle in self.lineage():
            prop = handle.declaration.get_property(name)
            if prop is not None:
                return prop
        return None

    def get_properties(self) -> list[Property]:
        """Return all properties, inherited ones first."""
        chain = list(self.lineage())
        properties: list[Property] = []
        for handle in reversed(chain):
            properties.extend(handle.declaration.properties or ())
        return properties

    def is_assignable_to(self, other: "DeclarationHandle") -> bool:
        """Return True if this type is ``other`` or extends it."""
        return any(
            h.fully_qualified_name == other.fully_qualified_name for h in self.lineage()
        )

    def resolve_property_type(self, prop: Property) -> "DeclarationHandle":
        """Resolve the declaration referenced by ``prop.type``."""
        if prop.type is None:
            raise TypeNotFoundError(prop.name, context=self.fully_qualified_name)
        return self._manager.resolve_type_identifier(prop.type, self._model_file)

    def __repr__(self) -> str:
        return f"DeclarationHandle({self.fully_qualified_name!r})"


class ModelManager:
    """A collection of models indexed by namespace.

    Parameters
    ----------
    strict:
        When ``True``, loading a namespace twice or declaring the same
        name twice in one model raises ``IllegalModelError``.  When
        ``False``, a reloaded namespace replaces the previous one.
    """

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict
        self._model_files: dict[str, ModelFile] = {}

    @classmethod
    def from_ast(cls, ast: Models, strict: bool = False) -> "ModelManager":
        """Build a fresh manager that owns a deep copy of ``ast``."""
        manager = cls(strict=strict)
        for model in copy.deepcopy(ast).models:
            manager._add(model)
        return manager

    @property
    def strict(self) -> bool:
        return self._strict

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def add_model(self, model: Model) -> ModelFile:
        """Load a deep copy of ``model`` and return its ``ModelFile``."""
        return self._add(copy.deepcopy(model))

    def add_model_file(self, model_file: ModelFile) -> ModelFile:
        return self.add_model(model_file.model)

    def add_model_files(self, model_files: Iterable[ModelFile]) -> None:
        for model_file in model_files:
            self.add_model_file(model_file)

    def _add(self, model: Model) -> ModelFile:
        model_file = ModelFile(model)
        namespace = model_file.get_namespace()
        if self._strict:
            if namespace in self._model_files:
                raise IllegalModelError(f"Namespace {namespace!r} is already loaded")
            names = [d.name for d in model.declarations]
            duplicates = sorted({n for n in names if names.count(n) > 1})
            if duplicates:
                raise IllegalModelError(
                    f"Namespace {namespace!r} declares {', '.join(duplicates)} more than once"
                )
        self._model_files[namespace] = model_file
        logger.debug("Loaded namespace %r (%d declarations)", namespace, len(model.declarations))
        return model_file

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_model_file(self, namespace: str) -> ModelFile | None:
        """Return the model file for exactly ``namespace``, if loaded."""
        return self._model_files.get(namespace)

    def get_model_files(self) -> list[ModelFile]:
        return list(self._model_files.values())

    def get_namespaces(self) -> list[str]:
        return list(self._model_files)

    def find_model_file(self, namespace: str) -> ModelFile | None:
        """Return the model file for ``namespace``.

        An unversioned ``namespace`` falls back to the first loaded model
        file whose unversioned namespace is equal to it.
        """
        model_file = self.get_model_file(namespace)
        if model_file is not None:
            return model_file
        info = parse_namespace(namespace)
        if info.version is None:
            for candidate in self._model_files.values():
                if candidate.get_unversioned_namespace() == info.name:
                    return candidate
        return None

    def get_type(self, fully_qualified_name: str) -> DeclarationHandle:
        """Resolve a fully qualified type name.

        Raises
        ------
        TypeNotFoundError
            If the namespace or the declaration does not exist.
        """
        try:
            namespace, name = split_fully_qualified_name(fully_qualified_name)
            model_file = self.find_model_file(namespace)
        except ValueError:
            raise TypeNotFoundError(fully_qualified_name) from None
        if model_file is None:
            raise TypeNotFoundError(fully_qualified_name)
        declaration = model_file.get_local_type(name)
        if declaration is None:
            raise TypeNotFoundError(fully_qualified_name)
        return DeclarationHandle(self, model_file, declaration)

    def resolve_type(self, context: str, type_name: str) -> None:
        """Check that ``type_name`` exists.

        Raises
        ------
        TypeNotFoundError
            If it does not; ``context`` names the referencing element.
        """
        try:
            self.get_type(type_name)
        except TypeNotFoundError:
            raise TypeNotFoundError(type_name, context=context) from None

    def resolve_type_identifier(self, ident: TypeIdentifier, model_file: ModelFile) -> DeclarationHandle:
        """Resolve ``ident`` as seen from inside ``model_file``."""
        namespace = ident.namespace or self._namespace_for(ident.name, model_file)
        if namespace is None:
            raise TypeNotFoundError(ident.name, context=model_file.get_namespace())
        return self.get_type(f"{namespace}.{ident.name}")

    def _namespace_for(self, name: str, model_file: ModelFile) -> str | None:
        if model_file.get_local_type(name) is not None:
            return model_file.get_namespace()
        return model_file.get_imported_namespace(name)

    # ------------------------------------------------------------------
    # AST snapshots
    # ------------------------------------------------------------------

    def get_ast(self, resolved: bool = False) -> Models:
        """Return a deep copy of every loaded model.

        When ``resolved`` is ``True``, type references that omit their
        namespace are filled in wherever they can be resolved.
        """
        ast = Models(models=copy.deepcopy([mf.model for mf in self._model_files.values()]))
        if resolved:
            for model in ast.models:
                model_file = self._model_files[model.namespace]
                for decl in model.declarations:
                    self._resolve_identifier(decl.super_type, model_file)
                    for prop in decl.properties or ():
                        self._resolve_identifier(prop.type, model_file)
        return ast

    def _resolve_identifier(self, ident: TypeIdentifier | None, model_file: ModelFile) -> None:
        if ident is None or ident.namespace is not None:
            return
        ident.namespace = self._namespace_for(ident.name, model_file)

    def __len__(self) -> int:
        return len(self._model_files)

    def __repr__(self) -> str:
        return f"ModelManager(namespaces={self.get_namespaces()!r})"
