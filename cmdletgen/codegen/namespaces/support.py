"""Support namespace: enums and runtime helper types.

Enums are registered lazily. The resolver registers an enum schema the first
time it is used, the TypeRegistry hands the entry to this namespace as
pending, and ``materialize`` turns pending entries into EnumDefinitions.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any

from cmdletgen.codegen.namespaces.base import Namespace
from cmdletgen.codegen.naming import sanitize_identifier, unique_name
from cmdletgen.codegen.schema import Schema, SchemaKind
from cmdletgen.exceptions import NamespaceStateError

if TYPE_CHECKING:
    from cmdletgen.codegen.namespaces.service import ServiceNamespace
    from cmdletgen.codegen.state import State
    from cmdletgen.codegen.type_registry import TypeInfo

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SupportTypeDefinition:
    name: str
    full_name: str

    def to_dict(self) -> dict[str, Any]:
        return {'kind': 'support', 'name': self.name, 'fullName': self.full_name}


@dataclasses.dataclass(frozen=True)
class EnumMember:
    name: str
    value: Any


@dataclasses.dataclass(frozen=True)
class EnumDefinition:
    """A generated enum with its PowerShell helpers.

    Attributes:
        name: Type name inside the support namespace.
        full_name: Qualified type name.
        schema: The enum schema.
        members: Members in declaration order; ``value`` is the serialized form.
        type_converter: Name of the generated type converter.
        completer: Name of the generated argument completer.
    """

    name: str
    full_name: str
    schema: Schema
    members: tuple[EnumMember, ...]
    type_converter: str
    completer: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'kind': 'enum',
            'name': self.name,
            'fullName': self.full_name,
            'members': [{'name': m.name, 'value': m.value} for m in self.members],
            'typeConverter': self.type_converter,
            'completer': self.completer,
        }


def enum_members(values: tuple[Any, ...]) -> tuple[EnumMember, ...]:
    """Give every enum value a unique identifier, keeping the value as is."""
    taken: set[str] = set()
    members = []
    for value in values:
        name = unique_name(sanitize_identifier(str(value)), taken)
        taken.add(name)
        members.append(EnumMember(name, value))
    return tuple(members)


class SupportNamespace(Namespace):
    def __init__(self, service: ServiceNamespace, state: State):
        super().__init__('Support', service)
        self.context = state
        self._pending: list[TypeInfo] = []

        for support_type in state.resolver.support_types:
            self.add(
                support_type,
                SupportTypeDefinition(support_type, f'{self.full_name}.{support_type}'),
            )
        state.registry.bind(SchemaKind.ENUM, self)

    def add_pending(self, type_info: TypeInfo) -> None:
        if self.is_finalized:
            raise NamespaceStateError(self.full_name, self.state.value, 'register types in')
        self._pending.append(type_info)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def materialize(self) -> int:
        """Build an EnumDefinition for every pending enum.

        Returns:
            The number of definitions added.
        """
        count = 0
        while self._pending:
            type_info = self._pending.pop(0)
            schema = type_info.schema
            self.add(
                type_info.name,
                EnumDefinition(
                    name=type_info.name,
                    full_name=type_info.full_name,
                    schema=schema,
                    members=enum_members(schema.enum),
                    type_converter=f'{type_info.name}TypeConverter',
                    completer=f'{type_info.name}Completer',
                    description=schema.description,
                ),
            )
            type_info.is_materialized = True
            count += 1
            logger.debug(f'Materialized enum {type_info.full_name}')
        return count
