"""Base namespace and definition types.

A Namespace owns a named, ordered collection of generated definitions and
moves through a one-way lifecycle:

    CONSTRUCTED -> INITIALIZING -> FINALIZED

The first definition added moves a namespace to INITIALIZING; ``finalize``
makes it read-only. Adding to a finalized namespace is a programming error.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from cmdletgen.codegen.types import EnhancedTypeDeclaration
from cmdletgen.exceptions import NamespaceStateError

logger = logging.getLogger(__name__)


class NamespaceState(str, enum.Enum):
    CONSTRUCTED = 'constructed'
    INITIALIZING = 'initializing'
    FINALIZED = 'finalized'


@dataclasses.dataclass(frozen=True)
class PropertyDefinition:
    name: str
    serialized_name: str
    type: EnhancedTypeDeclaration
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'serializedName': self.serialized_name,
            'type': self.type.declaration,
            'required': self.type.is_required,
            'nullable': self.type.is_nullable,
            'default': self.type.default,
            'serializer': self.type.serializer,
        }


@dataclasses.dataclass(frozen=True)
class ParameterDefinition:
    name: str
    serialized_name: str
    type: EnhancedTypeDeclaration
    location: str
    required: bool = False
    position: int | None = None
    aliases: tuple[str, ...] = ()
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'serializedName': self.serialized_name,
            'type': self.type.declaration,
            'location': self.location,
            'mandatory': self.required,
            'position': self.position,
            'aliases': list(self.aliases),
        }


class Namespace:
    """A named collection of generated definitions.

    Attributes:
        name: Last segment of the namespace name.
        parent: Enclosing namespace, None for the root.
        full_name: Dotted name including all parents.
        state: Current lifecycle state.
    """

    def __init__(self, name: str, parent: Namespace | None = None):
        self.name = name
        self.parent = parent
        self.full_name = f'{parent.full_name}.{name}' if parent is not None else name
        self.state = NamespaceState.CONSTRUCTED
        self.children: list[Namespace] = []
        self._definitions: dict[str, Any] = {}
        if parent is not None:
            parent.children.append(self)

    def add(self, name: str, definition: Any) -> Any:
        """Add a definition under ``name``.

        Raises:
            NamespaceStateError: If the namespace is finalized.
            ValueError: If ``name`` is already defined.
        """
        if self.state is NamespaceState.FINALIZED:
            raise NamespaceStateError(self.full_name, self.state.value)
        if name in self._definitions:
            raise ValueError(f"'{name}' is already defined in namespace '{self.full_name}'")
        self.state = NamespaceState.INITIALIZING
        self._definitions[name] = definition
        return definition

    def get(self, name: str) -> Any | None:
        return self._definitions.get(name)

    @property
    def definitions(self) -> Mapping[str, Any]:
        return MappingProxyType(self._definitions)

    def finalize(self) -> None:
        if self.state is not NamespaceState.FINALIZED:
            logger.debug(
                f'Finalized namespace {self.full_name} with {len(self)} definition(s)'
            )
        self.state = NamespaceState.FINALIZED

    def walk(self) -> Iterator[Namespace]:
        """Yield this namespace and its descendants depth-first, in creation order."""
        yield self
        for child in self.children:
            yield from child.walk()

    @property
    def is_finalized(self) -> bool:
        return self.state is NamespaceState.FINALIZED

    def to_dict(self) -> dict[str, Any]:
        """Describe the namespace and its definitions as plain data."""
        return {
            'namespace': self.full_name,
            'definitions': [
                definition.to_dict() for definition in self._definitions.values()
            ],
        }

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._definitions.values())

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.full_name!r}, state={self.state.value})'
