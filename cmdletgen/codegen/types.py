"""Type declarations produced by the schema resolver.

This module provides:
- EnhancedTypeDeclaration, the resolved target-type descriptor of a schema
- ModelState, the ambient state a resolution runs in
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdletgen.codegen.schema import Schema
    from cmdletgen.codegen.type_registry import TypeRegistry

__all__ = ['EnhancedTypeDeclaration', 'ModelState']


@dataclasses.dataclass(frozen=True)
class EnhancedTypeDeclaration:
    """Resolved target type of a (schema, required) pair.

    Attributes:
        schema: The schema the declaration was resolved from.
        declaration: The type signature to write into generated code.
        is_required: Whether the value is required where it is used.
        default: Expression used to initialise an unset value.
        is_value_type: Whether the target type is a value type, i.e. needs a
            nullable wrapper to represent absence.
        serializer: Serialization hint for the wire format ('string',
            'date-time', 'object', 'array', ...).
        type_name: Full name of the generated type, if the schema has one.
        element: Resolved element type of an array or map.
    """

    schema: Schema | None
    declaration: str
    is_required: bool
    default: str
    is_value_type: bool = False
    serializer: str = 'object'
    type_name: str | None = None
    element: EnhancedTypeDeclaration | None = None

    @property
    def is_nullable(self) -> bool:
        return not self.is_value_type or not self.is_required


@dataclasses.dataclass(frozen=True)
class ModelState:
    """Where in the API description a resolution happens.

    Attributes:
        registry: Registry that records generated types by schema identity.
        path: Location used in error messages.
        name_hint: Name for an anonymous (inline) schema that needs a type.
    """

    registry: TypeRegistry
    path: str = '#'
    name_hint: str | None = None

    def child(self, *parts: str, name_hint: str | None = None) -> ModelState:
        path = '/'.join([self.path, *parts]) if parts else self.path
        return ModelState(self.registry, path, name_hint)
