"""Schema to target-type resolution.

The SchemaDefinitionResolver maps a schema plus a required flag to an
EnhancedTypeDeclaration. Special cases are data, not subclasses: an ordered
tuple of ResolverOverride entries is consulted before the default mapping,
and the first override whose predicate matches produces the declaration.
"""

import dataclasses
import json
import logging
from collections.abc import Callable, Iterable
from typing import Any

from cmdletgen.codegen.naming import sanitize_identifier
from cmdletgen.codegen.schema import Schema, SchemaKind
from cmdletgen.codegen.types import EnhancedTypeDeclaration, ModelState
from cmdletgen.exceptions import UnsupportedSchemaKindError

logger = logging.getLogger(__name__)

__all__ = [
    'ResolverOverride',
    'SWITCH_PARAMETER_OVERRIDE',
    'SchemaDefinitionResolver',
    'create_cmdlet_resolver',
]

SWITCH_PARAMETER = 'global::System.Management.Automation.SwitchParameter'
DICTIONARY = 'global::System.Collections.Generic.IDictionary'

# (type, format) -> (declaration, is_value_type, serializer)
_PRIMITIVE_TYPE_MAP: dict[tuple[str | None, str | None], tuple[str, bool, str]] = {
    ('string', None): ('string', False, 'string'),
    ('string', 'date-time'): ('global::System.DateTime', True, 'date-time'),
    ('string', 'date'): ('global::System.DateTime', True, 'date'),
    ('string', 'date-time-rfc1123'): ('global::System.DateTime', True, 'date-time-rfc1123'),
    ('string', 'duration'): ('global::System.TimeSpan', True, 'duration'),
    ('string', 'uuid'): ('string', False, 'uuid'),
    ('string', 'byte'): ('byte[]', False, 'byte'),
    ('string', 'binary'): ('byte[]', False, 'binary'),
    ('integer', None): ('int', True, 'integer'),
    ('integer', 'int32'): ('int', True, 'integer'),
    ('integer', 'int64'): ('long', True, 'integer'),
    ('number', None): ('double', True, 'number'),
    ('number', 'float'): ('float', True, 'number'),
    ('number', 'double'): ('double', True, 'number'),
    ('number', 'decimal'): ('decimal', True, 'number'),
    ('boolean', None): ('bool', True, 'boolean'),
    (None, None): ('object', False, 'any'),
}


@dataclasses.dataclass(frozen=True)
class ResolverOverride:
    """A special case consulted before the default mapping.

    Attributes:
        name: Identifies the override in logs.
        predicate: Decides whether the override applies to a schema.
        handler: Produces the declaration, called as (schema, required, state).
        support_type: Name of a runtime-support type the override needs, if
            any. The support namespace generates one definition per name.
    """

    name: str
    predicate: Callable[[Schema | None], bool]
    handler: Callable[[Schema, bool, ModelState], EnhancedTypeDeclaration]
    support_type: str | None = None


def _literal(value: Any) -> str | None:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value)
    return None


def _default_expression(
    schema: Schema | None, declaration: str, is_value_type: bool, required: bool
) -> str:
    if schema is not None and schema.default is not None:
        literal = _literal(schema.default)
        if literal is not None:
            return literal
    if is_value_type and required:
        return f'default({declaration})'
    return 'null'


def _nullable(declaration: str, is_value_type: bool, required: bool) -> str:
    return f'{declaration}?' if is_value_type and not required else declaration


class SchemaDefinitionResolver:
    """Resolves schemas to EnhancedTypeDeclarations.

    Resolution is deterministic: the same schema object, required flag and
    registry always produce an equal declaration. Objects, polymorphic
    parents and enums are registered with the state's TypeRegistry the first
    time they are resolved; later resolutions reuse that registration.

    Example:
        >>> resolver = create_cmdlet_resolver()
        >>> decl = resolver.resolve_type_declaration(widget, True, state)
        >>> decl.declaration
        'Contoso.Models.Widget'
    """

    def __init__(self, overrides: Iterable[ResolverOverride] = ()):
        self.overrides: tuple[ResolverOverride, ...] = tuple(overrides)

    def with_override(self, override: ResolverOverride) -> 'SchemaDefinitionResolver':
        """Return a resolver that also consults ``override``, after the existing ones."""
        return SchemaDefinitionResolver((*self.overrides, override))

    @property
    def support_types(self) -> list[str]:
        return [o.support_type for o in self.overrides if o.support_type]

    def resolve_type_declaration(
        self, schema: Schema | None, required: bool, state: ModelState
    ) -> EnhancedTypeDeclaration:
        """Resolve ``schema`` to its target type.

        Raises:
            UnsupportedSchemaKindError: If the schema's kind has no mapping.
        """
        for override in self.overrides:
            if override.predicate(schema):
                logger.debug(f'{override.name} override applied at {state.path}')
                return override.handler(schema, required, state)

        if schema is None:
            return self._primitive(None, None, None, required)

        if schema.kind in (SchemaKind.PRIMITIVE, SchemaKind.BOOLEAN):
            return self._primitive(schema, schema.type, schema.format, required)
        if schema.kind is SchemaKind.ENUM:
            return self._named(schema, required, state, is_value_type=True, serializer='enum')
        if schema.kind in (SchemaKind.OBJECT, SchemaKind.POLYMORPHIC):
            return self._named(schema, required, state, is_value_type=False, serializer='object')
        if schema.kind is SchemaKind.ARRAY:
            return self._array(schema, required, state)
        if schema.kind is SchemaKind.MAP:
            return self._map(schema, required, state)

        raise UnsupportedSchemaKindError(schema.path, schema.type or schema.kind.value)

    def _primitive(
        self,
        schema: Schema | None,
        type_: str | None,
        format_: str | None,
        required: bool,
    ) -> EnhancedTypeDeclaration:
        mapped = _PRIMITIVE_TYPE_MAP.get((type_, format_)) or _PRIMITIVE_TYPE_MAP.get(
            (type_, None)
        )
        if mapped is None:
            raise UnsupportedSchemaKindError(
                schema.path if schema is not None else '#', type_
            )
        declaration, is_value_type, serializer = mapped
        return EnhancedTypeDeclaration(
            schema=schema,
            declaration=_nullable(declaration, is_value_type, required),
            is_required=required,
            default=_default_expression(schema, declaration, is_value_type, required),
            is_value_type=is_value_type,
            serializer=serializer,
        )

    def _named(
        self,
        schema: Schema,
        required: bool,
        state: ModelState,
        is_value_type: bool,
        serializer: str,
    ) -> EnhancedTypeDeclaration:
        type_info = state.registry.register(
            schema, sanitize_identifier(schema.name or state.name_hint or '')
        )
        declaration = type_info.full_name
        default = (
            _default_expression(schema, declaration, is_value_type, required)
            if is_value_type
            else 'null'
        )
        return EnhancedTypeDeclaration(
            schema=schema,
            declaration=_nullable(declaration, is_value_type, required),
            is_required=required,
            default=default,
            is_value_type=is_value_type,
            serializer=serializer,
            type_name=type_info.full_name,
        )

    def _array(
        self, schema: Schema, required: bool, state: ModelState
    ) -> EnhancedTypeDeclaration:
        hint = f'{state.name_hint}Item' if state.name_hint else None
        element = self.resolve_type_declaration(
            schema.items, True, state.child('items', name_hint=hint)
        )
        return EnhancedTypeDeclaration(
            schema=schema,
            declaration=f'{element.declaration}[]',
            is_required=required,
            default='null',
            serializer='array',
            element=element,
        )

    def _map(
        self, schema: Schema, required: bool, state: ModelState
    ) -> EnhancedTypeDeclaration:
        hint = f'{state.name_hint}Value' if state.name_hint else None
        element = self.resolve_type_declaration(
            schema.items, True, state.child('additionalProperties', name_hint=hint)
        )
        return EnhancedTypeDeclaration(
            schema=schema,
            declaration=f'{DICTIONARY}<string, {element.declaration}>',
            is_required=required,
            default='null',
            serializer='map',
            element=element,
        )


def _is_boolean(schema: Schema | None) -> bool:
    return schema is not None and schema.kind is SchemaKind.BOOLEAN


def _switch_parameter(
    schema: Schema, required: bool, state: ModelState
) -> EnhancedTypeDeclaration:
    return EnhancedTypeDeclaration(
        schema=schema,
        declaration=_nullable(SWITCH_PARAMETER, True, required),
        is_required=required,
        default=_default_expression(schema, SWITCH_PARAMETER, True, required),
        is_value_type=True,
        serializer='boolean',
    )


SWITCH_PARAMETER_OVERRIDE = ResolverOverride(
    name='switch-parameter',
    predicate=_is_boolean,
    handler=_switch_parameter,
    support_type='SwitchParameterConverter',
)


def create_cmdlet_resolver() -> SchemaDefinitionResolver:
    """Resolver used for command generation: booleans become switch parameters."""
    return SchemaDefinitionResolver((SWITCH_PARAMETER_OVERRIDE,))
