"""Tests for identifier deconstruction, casing and command naming."""

import pytest

from cmdletgen.codegen.naming import (
    camel,
    camel_case,
    deconstruct,
    derive_operation_id,
    kebab_case,
    pascal,
    pascal_case,
    sanitize_identifier,
    snake_case,
    split_verb_noun,
    unique_name,
)


class TestDeconstruct:
    """Tests for splitting identifiers into word tokens."""

    @pytest.mark.parametrize(
        'identifier,expected',
        [
            ('HTTPServerName', ['http', 'server', 'name']),
            ('resourceGroupName', ['resource', 'group', 'name']),
            ('ResourceGroup', ['resource', 'group']),
            ('resource_group_name', ['resource', 'group', 'name']),
            ('resource-group-name', ['resource', 'group', 'name']),
            ('getV2Items', ['get', 'v2', 'items']),
            ('ipv4Address', ['ipv4', 'address']),
            ('ID', ['id']),
            ('__private__', ['private']),
            ('api-version', ['api', 'version']),
        ],
    )
    def test_deconstruct(self, identifier, expected):
        """Test that identifiers split on case and separator boundaries."""
        assert deconstruct(identifier) == expected

    def test_empty_identifier(self):
        """Test that an empty identifier yields no tokens."""
        assert deconstruct('') == []
        assert pascal_case(deconstruct('')) == ''

    def test_separators_only(self):
        """Test that non-alphanumeric characters are dropped, never kept."""
        assert deconstruct('--$$--') == []
        assert deconstruct('widget$name') == ['widget', 'name']

    def test_accents_are_folded(self):
        """Test that accented letters are reduced to their base letter."""
        assert deconstruct('café') == ['cafe']

    def test_tokens_are_lower_case(self):
        """Test that every token is lower case."""
        assert all(t == t.lower() for t in deconstruct('SomeXMLParserV2'))


class TestCasing:
    """Tests for recomposing tokens."""

    def test_pascal_case(self):
        """Test PascalCase recomposition."""
        assert pascal_case(['http', 'server', 'name']) == 'HttpServerName'

    def test_camel_case(self):
        """Test camelCase recomposition."""
        assert camel_case(['http', 'server', 'name']) == 'httpServerName'

    def test_snake_and_kebab_case(self):
        """Test separator-joined recompositions."""
        assert snake_case(['resource', 'group']) == 'resource_group'
        assert kebab_case(['resource', 'group']) == 'resource-group'

    def test_empty_tokens(self):
        """Test that empty token sequences produce empty strings."""
        assert pascal_case([]) == ''
        assert camel_case([]) == ''
        assert snake_case([]) == ''

    def test_deterministic(self):
        """Test that the same tokens always give the same output."""
        tokens = deconstruct('listWidgetsByColor')
        assert pascal_case(tokens) == pascal_case(list(tokens))

    def test_wrappers(self):
        """Test the identifier-level convenience wrappers."""
        assert pascal('resource_group') == 'ResourceGroup'
        assert camel('ResourceGroup') == 'resourceGroup'


class TestSanitizeIdentifier:
    """Tests for turning arbitrary names into identifiers."""

    def test_pascal_cases_name(self):
        """Test that names are PascalCased."""
        assert sanitize_identifier('api-version') == 'ApiVersion'

    def test_leading_digit(self):
        """Test that a leading digit gets an underscore prefix."""
        assert sanitize_identifier('2fa') == '_2fa'

    def test_empty_name(self):
        """Test the placeholder for names with nothing usable."""
        assert sanitize_identifier('') == 'UnnamedType'
        assert sanitize_identifier('!!') == 'UnnamedType'


class TestUniqueName:
    """Tests for collision-free names."""

    def test_free_name_is_kept(self):
        """Test that a free name is returned unchanged."""
        assert unique_name('Widget', set()) == 'Widget'

    def test_counter_suffix(self):
        """Test that collisions get the first free counter suffix."""
        assert unique_name('Widget', {'Widget'}) == 'Widget1'
        assert unique_name('Widget', {'Widget', 'Widget1'}) == 'Widget2'


class TestOperationNames:
    """Tests for operation ids and verb-noun splitting."""

    @pytest.mark.parametrize(
        'method,path,expected',
        [
            ('get', '/widgets', 'listWidgets'),
            ('GET', '/widgets/{id}', 'getWidgets'),
            ('post', '/widgets', 'createWidgets'),
            ('put', '/widgets/{id}', 'updateWidgets'),
            ('patch', '/widgets/{id}', 'updateWidgets'),
            ('delete', '/shops/{id}/widgets', 'deleteShopsWidgets'),
            ('get', '/', 'listRoot'),
        ],
    )
    def test_derive_operation_id(self, method, path, expected):
        """Test operation ids derived from method and path."""
        assert derive_operation_id(method, path) == expected

    @pytest.mark.parametrize(
        'operation_id,expected',
        [
            ('listWidgets', ('List', 'Widgets')),
            ('getWidget', ('Get', 'Widget')),
            ('createWidget', ('New', 'Widget')),
            ('deleteWidget', ('Remove', 'Widget')),
            ('patchWidget', ('Update', 'Widget')),
            ('Widgets_List', ('List', 'Widgets')),
            ('Widgets_ListByColor', ('List', 'WidgetsByColor')),
            ('ping', ('Invoke', 'Ping')),
        ],
    )
    def test_split_verb_noun(self, operation_id, expected):
        """Test verb and noun derived from operation ids."""
        assert split_verb_noun(operation_id) == expected
