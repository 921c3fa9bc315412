"""Tests for schema to target-type resolution."""

import pytest

from cmdletgen.codegen.resolver import (
    SWITCH_PARAMETER,
    ResolverOverride,
    SchemaDefinitionResolver,
    create_cmdlet_resolver,
)
from cmdletgen.codegen.schema import Schema, SchemaKind
from cmdletgen.codegen.type_registry import TypeRegistry
from cmdletgen.codegen.types import EnhancedTypeDeclaration, ModelState
from cmdletgen.exceptions import UnsupportedSchemaKindError


class RecordingOwner:
    def __init__(self, full_name):
        self.full_name = full_name
        self.pending = []

    def add_pending(self, type_info):
        self.pending.append(type_info)


@pytest.fixture
def models():
    return RecordingOwner('Contoso.Models')


@pytest.fixture
def support():
    return RecordingOwner('Contoso.Support')


@pytest.fixture
def state(models, support):
    registry = TypeRegistry()
    registry.bind(SchemaKind.OBJECT, models)
    registry.bind(SchemaKind.POLYMORPHIC, models)
    registry.bind(SchemaKind.ENUM, support)
    return ModelState(registry, '#/test')


def primitive(type_=None, format_=None, **kwargs):
    return Schema(kind=SchemaKind.PRIMITIVE, path='#/p', type=type_, format=format_, **kwargs)


def widget(name='Widget'):
    return Schema(
        kind=SchemaKind.OBJECT,
        path=f'#/components/schemas/{name}',
        name=name,
        properties={'name': primitive('string')},
        required=frozenset({'name'}),
    )


class TestPrimitives:
    """Tests for the default primitive mapping."""

    @pytest.mark.parametrize(
        'type_,format_,expected',
        [
            ('string', None, 'string'),
            ('string', 'email', 'string'),
            ('string', 'byte', 'byte[]'),
            ('integer', None, 'int'),
            ('integer', 'int64', 'long'),
            ('number', 'float', 'float'),
            ('number', None, 'double'),
            ('string', 'date-time', 'global::System.DateTime'),
            ('string', 'duration', 'global::System.TimeSpan'),
            (None, None, 'object'),
        ],
    )
    def test_required_declarations(self, state, type_, format_, expected):
        """Test declarations of required primitives."""
        resolver = SchemaDefinitionResolver()
        decl = resolver.resolve_type_declaration(primitive(type_, format_), True, state)
        assert decl.declaration == expected
        assert decl.is_required is True

    def test_optional_value_type_is_nullable(self, state):
        """Test that optional value types get a nullable declaration."""
        resolver = SchemaDefinitionResolver()
        decl = resolver.resolve_type_declaration(primitive('integer'), False, state)
        assert decl.declaration == 'int?'
        assert decl.is_nullable is True
        assert decl.default == 'null'

    def test_required_value_type_is_not_nullable(self, state):
        """Test that required value types are never nullable."""
        resolver = SchemaDefinitionResolver()
        decl = resolver.resolve_type_declaration(primitive('integer'), True, state)
        assert decl.declaration == 'int'
        assert decl.is_nullable is False
        assert decl.default == 'default(int)'

    def test_reference_type_needs_no_marker(self, state):
        """Test that strings are never suffixed, required or not."""
        resolver = SchemaDefinitionResolver()
        assert resolver.resolve_type_declaration(primitive('string'), False, state).declaration == 'string'

    def test_schema_default_literal(self, state):
        """Test that schema defaults become literals."""
        resolver = SchemaDefinitionResolver()
        assert resolver.resolve_type_declaration(primitive('integer', default=5), False, state).default == '5'
        assert resolver.resolve_type_declaration(primitive('string', default='x'), False, state).default == '"x"'

    def test_missing_schema_is_object(self, state):
        """Test that an absent schema resolves to object."""
        decl = SchemaDefinitionResolver().resolve_type_declaration(None, False, state)
        assert decl.declaration == 'object'

    def test_deterministic(self, state):
        """Test that resolving the same input twice gives equal declarations."""
        resolver = SchemaDefinitionResolver()
        schema = primitive('string', 'date-time')
        first = resolver.resolve_type_declaration(schema, False, state)
        second = resolver.resolve_type_declaration(schema, False, state)
        assert first == second


class TestNamedTypes:
    """Tests for lazy registration of objects and enums."""

    def test_object_is_registered_once(self, state, models):
        """Test that an object registers one pending type however often it is resolved."""
        resolver = SchemaDefinitionResolver()
        schema = widget()
        first = resolver.resolve_type_declaration(schema, True, state)
        second = resolver.resolve_type_declaration(schema, False, state)
        assert first.declaration == 'Contoso.Models.Widget'
        assert second.declaration == 'Contoso.Models.Widget'
        assert first.type_name == second.type_name
        assert len(models.pending) == 1
        assert len(state.registry) == 1

    def test_distinct_schemas_get_distinct_types(self, state, models):
        """Test that structurally identical schemas are not merged."""
        resolver = SchemaDefinitionResolver()
        first = resolver.resolve_type_declaration(widget(), True, state)
        second = resolver.resolve_type_declaration(widget(), True, state)
        assert first.declaration == 'Contoso.Models.Widget'
        assert second.declaration == 'Contoso.Models.Widget1'
        assert len(models.pending) == 2

    def test_anonymous_object_uses_name_hint(self, state):
        """Test that inline objects are named from the hint."""
        schema = Schema(kind=SchemaKind.OBJECT, path='#/inline')
        decl = SchemaDefinitionResolver().resolve_type_declaration(
            schema, True, state.child('body', name_hint='CreateWidgetBody')
        )
        assert decl.declaration == 'Contoso.Models.CreateWidgetBody'

    def test_enum_is_a_value_type(self, state, support):
        """Test that enums go to the support namespace and become nullable when optional."""
        schema = Schema(kind=SchemaKind.ENUM, path='#/e', name='Size', type='string', enum=('s', 'm'))
        decl = SchemaDefinitionResolver().resolve_type_declaration(schema, False, state)
        assert decl.declaration == 'Contoso.Support.Size?'
        assert decl.is_value_type is True
        assert support.pending[0].name == 'Size'

    def test_unbound_kind(self):
        """Test that registering a kind nobody owns fails loudly."""
        state = ModelState(TypeRegistry())
        with pytest.raises(KeyError):
            SchemaDefinitionResolver().resolve_type_declaration(widget(), True, state)


class TestCollections:
    """Tests for arrays and maps."""

    def test_array(self, state):
        """Test that arrays wrap their element declaration."""
        schema = Schema(kind=SchemaKind.ARRAY, path='#/a', type='array', items=widget())
        decl = SchemaDefinitionResolver().resolve_type_declaration(schema, False, state)
        assert decl.declaration == 'Contoso.Models.Widget[]'
        assert decl.element.declaration == 'Contoso.Models.Widget'

    def test_array_of_value_types(self, state):
        """Test that array elements are resolved as required."""
        schema = Schema(kind=SchemaKind.ARRAY, path='#/a', type='array', items=primitive('integer'))
        assert SchemaDefinitionResolver().resolve_type_declaration(schema, False, state).declaration == 'int[]'

    def test_map(self, state):
        """Test that maps become string-keyed dictionaries."""
        schema = Schema(kind=SchemaKind.MAP, path='#/m', type='object', items=primitive('string'))
        decl = SchemaDefinitionResolver().resolve_type_declaration(schema, True, state)
        assert decl.declaration == 'global::System.Collections.Generic.IDictionary<string, string>'

    def test_free_form_map(self, state):
        """Test that maps without a value schema hold objects."""
        schema = Schema(kind=SchemaKind.MAP, path='#/m', type='object')
        decl = SchemaDefinitionResolver().resolve_type_declaration(schema, True, state)
        assert decl.declaration == 'global::System.Collections.Generic.IDictionary<string, object>'


class TestUnsupported:
    """Tests for schemas without a mapping."""

    def test_unknown_kind(self, state):
        """Test that unknown kinds raise with the schema path."""
        schema = Schema(kind=SchemaKind.UNKNOWN, path='#/components/schemas/Attachment', type='file')
        with pytest.raises(UnsupportedSchemaKindError) as exc_info:
            SchemaDefinitionResolver().resolve_type_declaration(schema, True, state)
        assert exc_info.value.schema_path == '#/components/schemas/Attachment'
        assert exc_info.value.kind == 'file'

    def test_unknown_element(self, state):
        """Test that an unsupported element fails the whole array."""
        element = Schema(kind=SchemaKind.UNKNOWN, path='#/a/items', type='file')
        schema = Schema(kind=SchemaKind.ARRAY, path='#/a', type='array', items=element)
        with pytest.raises(UnsupportedSchemaKindError):
            SchemaDefinitionResolver().resolve_type_declaration(schema, True, state)


class TestOverrides:
    """Tests for override dispatch."""

    def test_boolean_without_override(self, state):
        """Test the default boolean mapping."""
        boolean = Schema(kind=SchemaKind.BOOLEAN, path='#/b', type='boolean')
        assert SchemaDefinitionResolver().resolve_type_declaration(boolean, False, state).declaration == 'bool?'

    def test_switch_parameter_override(self, state):
        """Test that booleans become switch parameters when the override is registered."""
        resolver = create_cmdlet_resolver()
        boolean = Schema(kind=SchemaKind.BOOLEAN, path='#/b', type='boolean')
        assert resolver.resolve_type_declaration(boolean, True, state).declaration == SWITCH_PARAMETER
        assert resolver.resolve_type_declaration(boolean, False, state).declaration == f'{SWITCH_PARAMETER}?'
        assert resolver.support_types == ['SwitchParameterConverter']

    def test_override_does_not_touch_other_kinds(self, state):
        """Test that the switch override leaves other kinds to the default mapping."""
        resolver = create_cmdlet_resolver()
        assert resolver.resolve_type_declaration(primitive('string'), True, state).declaration == 'string'

    def test_first_matching_override_wins(self, state):
        """Test that overrides are consulted in order."""

        def handler(label):
            return lambda schema, required, st: EnhancedTypeDeclaration(
                schema=schema, declaration=label, is_required=required, default='null'
            )

        strings = lambda schema: schema is not None and schema.type == 'string'
        resolver = (
            SchemaDefinitionResolver()
            .with_override(ResolverOverride('first', strings, handler('First')))
            .with_override(ResolverOverride('second', strings, handler('Second')))
        )
        assert resolver.resolve_type_declaration(primitive('string'), True, state).declaration == 'First'

    def test_with_override_returns_new_resolver(self):
        """Test that adding an override leaves the original resolver unchanged."""
        base = SchemaDefinitionResolver()
        extended = base.with_override(
            ResolverOverride('never', lambda schema: False, lambda *args: None)
        )
        assert base.overrides == ()
        assert len(extended.overrides) == 1
