"""Type registry for managing generated types during code generation.

This module provides the TypeRegistry class for tracking which schemas have
been given a generated type, keyed on schema identity, and for handing newly
discovered types to the namespace that owns them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from cmdletgen.codegen.naming import unique_name

if TYPE_CHECKING:
    from cmdletgen.codegen.schema import Schema, SchemaKind

logger = logging.getLogger(__name__)


@dataclass
class TypeInfo:
    """Information about a registered type.

    Attributes:
        name: The generated type name, unique within its namespace.
        full_name: The name qualified with the owning namespace.
        schema: The schema the type was generated for.
        namespace: Full name of the owning namespace.
        dependencies: Names of types this type refers to.
        is_materialized: Whether the owning namespace built its definition.
    """

    name: str
    full_name: str
    schema: Schema
    namespace: str
    dependencies: set[str] = field(default_factory=set)
    is_materialized: bool = False


class TypeOwner(Protocol):
    """A namespace that receives types as the resolver discovers them."""

    full_name: str

    def add_pending(self, type_info: TypeInfo) -> None: ...


class TypeRegistry:
    """Registry of generated types, keyed on schema identity.

    Registering the same Schema object twice returns the first entry, while
    two distinct schemas always get two entries, even when they look alike.
    Name collisions inside a namespace are resolved with a counter suffix.

    Example:
        >>> registry = TypeRegistry()
        >>> registry.bind(SchemaKind.OBJECT, models_namespace)
        >>> info = registry.register(widget_schema, 'Widget')
        >>> registry.register(widget_schema, 'Widget') is info
        True
    """

    def __init__(self):
        """Initialize an empty type registry."""
        self._types: dict[Schema, TypeInfo] = {}
        self._names: dict[str, set[str]] = {}
        self._owners: dict[SchemaKind, TypeOwner] = {}

    def bind(self, kind: SchemaKind, owner: TypeOwner) -> None:
        """Route newly registered types of ``kind`` to ``owner``."""
        self._owners[kind] = owner

    def owner_for(self, kind: SchemaKind) -> TypeOwner | None:
        return self._owners.get(kind)

    def register(self, schema: Schema, name: str) -> TypeInfo:
        """Register a schema if not known yet, otherwise return its entry.

        Args:
            schema: The schema that needs a generated type.
            name: Preferred type name; a suffix is added on collision.

        Returns:
            The TypeInfo for the schema (existing or newly registered).

        Raises:
            KeyError: If no namespace is bound for the schema's kind.
        """
        existing = self._types.get(schema)
        if existing is not None:
            return existing

        owner = self._owners.get(schema.kind)
        if owner is None:
            raise KeyError(f'No namespace bound for {schema.kind.value} types')

        taken = self._names.setdefault(owner.full_name, set())
        final_name = unique_name(name, taken)
        taken.add(final_name)

        type_info = TypeInfo(
            name=final_name,
            full_name=f'{owner.full_name}.{final_name}',
            schema=schema,
            namespace=owner.full_name,
        )
        self._types[schema] = type_info
        if final_name != name:
            logger.debug(f'Renamed {schema.path} to {final_name!r} to avoid a collision')
        owner.add_pending(type_info)
        return type_info

    def get(self, schema: Schema) -> TypeInfo | None:
        return self._types.get(schema)

    def add_dependency(self, schema: Schema, depends_on: str) -> None:
        """Record that the type of ``schema`` refers to type ``depends_on``.

        Raises:
            KeyError: If the schema is not registered.
        """
        type_info = self.get(schema)
        if type_info is None:
            raise KeyError(f"Schema '{schema.path}' is not registered")
        type_info.dependencies.add(depends_on)

    def get_types_in_dependency_order(self) -> list[TypeInfo]:
        """Get all types sorted so dependencies come first.

        Cycles are broken at the first revisited type.
        """
        by_name = {t.full_name: t for t in self._types.values()}
        result: list[TypeInfo] = []
        visited: set[str] = set()
        visiting: set[str] = set()

        def visit(name: str) -> None:
            if name in visited or name in visiting or name not in by_name:
                return
            visiting.add(name)
            for dep in sorted(by_name[name].dependencies):
                visit(dep)
            visiting.remove(name)
            visited.add(name)
            result.append(by_name[name])

        for name in by_name:
            visit(name)
        return result

    def get_unmaterialized_types(self) -> list[TypeInfo]:
        return [t for t in self._types.values() if not t.is_materialized]

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[TypeInfo]:
        return iter(self._types.values())

    def __contains__(self, schema: Schema) -> bool:
        return self.get(schema) is not None
