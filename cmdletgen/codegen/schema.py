"""Schema model, decoding and loading for API descriptions.

This module provides:
- The immutable schema graph (Schema, Operation, ApiModel) the generator works on
- SchemaModelBuilder, which decodes a validated OpenAPI document into that graph
- SchemaLoader, which reads OpenAPI documents from URLs or files (YAML/JSON)
"""

import dataclasses
import enum
import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx
import yaml
from pydantic import ValidationError

from cmdletgen.codegen.naming import derive_operation_id
from cmdletgen.exceptions import (
    SchemaLoadError,
    SchemaReferenceError,
    SchemaValidationError,
)
from cmdletgen.openapi import models as raw

logger = logging.getLogger(__name__)

__all__ = [
    'ApiModel',
    'Discriminator',
    'Operation',
    'OperationParameter',
    'Schema',
    'SchemaKind',
    'SchemaLoader',
    'SchemaModelBuilder',
]

JSON_CONTENT_TYPES = ('application/json', 'text/json')
PRIMITIVE_TYPES = ('string', 'integer', 'number')


# =============================================================================
# Schema graph
# =============================================================================


class SchemaKind(str, enum.Enum):
    OBJECT = 'object'
    ENUM = 'enum'
    PRIMITIVE = 'primitive'
    ARRAY = 'array'
    MAP = 'map'
    BOOLEAN = 'boolean'
    POLYMORPHIC = 'polymorphic'
    UNKNOWN = 'unknown'


@dataclasses.dataclass(frozen=True)
class Discriminator:
    property_name: str
    mapping: dict[str, 'Schema'] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True, eq=False)
class Schema:
    """One node of the API type graph.

    Schemas compare and hash by identity: two structurally identical schemas
    are still two different types. The collections are filled by the builder
    while the graph is decoded (which is how cycles are closed) and are not
    touched afterwards.
    """

    kind: SchemaKind
    path: str
    name: str | None = None
    type: str | None = None
    format: str | None = None
    description: str | None = None
    default: Any = None
    properties: dict[str, 'Schema'] = dataclasses.field(default_factory=dict)
    required: frozenset[str] = frozenset()
    items: 'Schema | None' = None
    enum: tuple[Any, ...] = ()
    discriminator: Discriminator | None = None
    variants: list['Schema'] = dataclasses.field(default_factory=list)
    parents: list['Schema'] = dataclasses.field(default_factory=list)

    def __repr__(self) -> str:
        return f'Schema(kind={self.kind.value!r}, path={self.path!r})'


@dataclasses.dataclass(frozen=True)
class OperationParameter:
    name: str
    location: str
    schema: Schema
    required: bool = False
    description: str | None = None


@dataclasses.dataclass(frozen=True)
class Operation:
    operation_id: str
    method: str
    path: str
    parameters: tuple[OperationParameter, ...] = ()
    body: OperationParameter | None = None
    response: Schema | None = None
    summary: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class ApiModel:
    title: str
    version: str
    description: str | None = None
    profiles: tuple[str, ...] = ()
    schemas: dict[str, Schema] = dataclasses.field(default_factory=dict)
    operations: tuple[Operation, ...] = ()


# =============================================================================
# Decoding
# =============================================================================


class SchemaModelBuilder:
    """Decodes a validated OpenAPI document into an ApiModel.

    References to the same component resolve to the same Schema object, so
    identity is preserved across the whole graph. Object schemas are cached
    before their properties are decoded, which lets self-referencing and
    mutually referencing components terminate.

    Example:
        >>> document = raw.OpenAPI.model_validate(spec_dict)
        >>> model = SchemaModelBuilder(document).build()
        >>> model.schemas['Widget'].properties['name'].kind
        <SchemaKind.PRIMITIVE: 'primitive'>
    """

    def __init__(self, document: raw.OpenAPI):
        self.document = document
        self._components: dict[str, Schema] = {}
        self._building: set[str] = set()

    def build(self) -> ApiModel:
        schemas = {
            name: self._component(name) for name in self.document.components.schemas
        }
        self._link_polymorphic_children()

        operations = []
        for path, item in self.document.paths.items():
            for method, operation in item.operations():
                operations.append(self._operation(path, method, item, operation))

        model = ApiModel(
            title=self.document.info.title,
            version=self.document.info.version,
            description=self.document.info.description,
            profiles=tuple(self.document.info.profiles),
            schemas=schemas,
            operations=tuple(operations),
        )
        logger.debug(
            f'Decoded {len(schemas)} schemas and {len(operations)} operations '
            f'from {model.title!r}'
        )
        return model

    # -- references -----------------------------------------------------------

    def _component_name(self, ref: str) -> str:
        prefix = '#/components/schemas/'
        if not ref.startswith(prefix):
            raise SchemaReferenceError(
                ref, 'only local #/components/schemas/ references are supported'
            )
        name = ref[len(prefix):]
        if name not in self.document.components.schemas:
            raise SchemaReferenceError(ref, 'schema not found in components.schemas')
        return name

    def _mapping_target(self, value: str) -> str:
        """Component name of a discriminator mapping value.

        Mapping values are either references or bare schema names.
        """
        if value.startswith('#/'):
            return self._component_name(value)
        if value not in self.document.components.schemas:
            raise SchemaReferenceError(value, 'schema not found in components.schemas')
        return value

    def _component(self, name: str) -> Schema:
        if name in self._components:
            return self._components[name]
        if name in self._building:
            raise SchemaReferenceError(
                f'#/components/schemas/{name}',
                'circular reference through a non-object schema',
            )
        self._building.add(name)
        try:
            schema = self._decode(
                self.document.components.schemas[name],
                f'#/components/schemas/{name}',
                name,
                component=name,
            )
        finally:
            self._building.discard(name)
        self._components[name] = schema
        return schema

    def _lookup(self, ref: str, table: dict[str, Any], kind: str) -> Any:
        prefix = f'#/components/{kind}/'
        if not ref.startswith(prefix) or ref[len(prefix):] not in table:
            raise SchemaReferenceError(ref, f'{kind} component not found')
        return table[ref[len(prefix):]]

    # -- schemas --------------------------------------------------------------

    def _decode(
        self,
        node: raw.Schema | None,
        path: str,
        name: str | None,
        component: str | None = None,
    ) -> Schema:
        if node is None:
            return Schema(kind=SchemaKind.PRIMITIVE, path=path, name=name)

        if node.ref:
            return self._component(self._component_name(node.ref))

        common = dict(
            path=path,
            name=name or node.title,
            description=node.description,
            default=node.default,
        )

        if node.enum:
            return Schema(
                kind=SchemaKind.ENUM,
                type=node.type or 'string',
                enum=tuple(node.enum),
                **common,
            )

        if node.discriminator or node.oneOf or node.anyOf:
            return self._decode_object(node, SchemaKind.POLYMORPHIC, common, component)

        if node.type == 'array':
            return Schema(
                kind=SchemaKind.ARRAY,
                type='array',
                items=self._decode(node.items, f'{path}/items', None)
                if node.items is not None
                else None,
                **common,
            )

        if node.type == 'boolean':
            return Schema(kind=SchemaKind.BOOLEAN, type='boolean', **common)

        if node.type in PRIMITIVE_TYPES:
            return Schema(
                kind=SchemaKind.PRIMITIVE, type=node.type, format=node.format, **common
            )

        if node.properties or node.allOf:
            return self._decode_object(node, SchemaKind.OBJECT, common, component)

        if node.type == 'object':
            value = node.additionalProperties
            return Schema(
                kind=SchemaKind.MAP,
                type='object',
                items=self._decode(value, f'{path}/additionalProperties', None)
                if isinstance(value, raw.Schema)
                else None,
                **common,
            )

        if node.type is None:
            return Schema(kind=SchemaKind.PRIMITIVE, **common)

        logger.debug(f'Unrecognised schema type {node.type!r} at {path}')
        return Schema(kind=SchemaKind.UNKNOWN, type=node.type, **common)

    def _decode_object(
        self,
        node: raw.Schema,
        kind: SchemaKind,
        common: dict[str, Any],
        component: str | None,
    ) -> Schema:
        path = common['path']
        required = set(node.required or ())
        for part in node.allOf or ():
            if not part.ref:
                required.update(part.required or ())

        schema = Schema(
            kind=kind,
            type='object',
            required=frozenset(required),
            discriminator=Discriminator(node.discriminator.propertyName)
            if node.discriminator
            else None,
            **common,
        )
        # Cache before descending so references back to this schema terminate.
        if component:
            self._components[component] = schema

        for index, part in enumerate(node.allOf or ()):
            if part.ref:
                schema.parents.append(self._component(self._component_name(part.ref)))
            else:
                for prop_name, prop in (part.properties or {}).items():
                    schema.properties[prop_name] = self._decode(
                        prop, f'{path}/allOf/{index}/properties/{prop_name}', None
                    )

        for prop_name, prop in (node.properties or {}).items():
            schema.properties[prop_name] = self._decode(
                prop, f'{path}/properties/{prop_name}', None
            )

        for key in ('oneOf', 'anyOf'):
            for index, member in enumerate(getattr(node, key) or ()):
                variant = self._decode(member, f'{path}/{key}/{index}', None)
                if variant not in schema.variants:
                    schema.variants.append(variant)

        if schema.discriminator is not None:
            for value, ref in (node.discriminator.mapping or {}).items():
                schema.discriminator.mapping[value] = self._component(
                    self._mapping_target(ref)
                )
        return schema

    def _link_polymorphic_children(self) -> None:
        """Register allOf children as variants of their polymorphic parents."""
        for schema in self._components.values():
            for parent in schema.parents:
                if parent.kind is SchemaKind.POLYMORPHIC and schema not in parent.variants:
                    parent.variants.append(schema)

    # -- operations -----------------------------------------------------------

    def _operation(
        self, path: str, method: str, item: raw.PathItem, operation: raw.Operation
    ) -> Operation:
        operation_id = operation.operationId or derive_operation_id(method, path)
        base = f'#/paths/{path.replace("/", "~1")}/{method}'

        merged: dict[tuple[str, str], raw.Parameter] = {}
        for parameter in [*(item.parameters or ()), *(operation.parameters or ())]:
            if parameter.ref:
                parameter = self._lookup(
                    parameter.ref, self.document.components.parameters, 'parameters'
                )
            merged[(parameter.name or '', parameter.in_ or 'query')] = parameter

        parameters = tuple(
            OperationParameter(
                name=name,
                location=location,
                schema=self._decode(
                    parameter.schema_, f'{base}/parameters/{name}', None
                ),
                required=bool(parameter.required) or location == 'path',
                description=parameter.description,
            )
            for (name, location), parameter in merged.items()
        )

        return Operation(
            operation_id=operation_id,
            method=method,
            path=path,
            parameters=parameters,
            body=self._request_body(operation, base),
            response=self._response(operation, base),
            summary=operation.summary,
            description=operation.description,
            tags=tuple(operation.tags or ()),
        )

    def _json_schema(self, content: dict[str, raw.MediaType] | None) -> raw.Schema | None:
        for content_type, media in (content or {}).items():
            if content_type in JSON_CONTENT_TYPES or content_type.endswith('+json'):
                return media.schema_
        return None

    def _request_body(self, operation: raw.Operation, base: str) -> OperationParameter | None:
        body = operation.requestBody
        if body is None:
            return None
        if body.ref:
            body = self._lookup(body.ref, self.document.components.requestBodies, 'requestBodies')
        node = self._json_schema(body.content)
        if node is None:
            return None
        return OperationParameter(
            name='body',
            location='body',
            schema=self._decode(node, f'{base}/requestBody', None),
            required=bool(body.required),
            description=body.description,
        )

    def _response(self, operation: raw.Operation, base: str) -> Schema | None:
        for status in sorted(operation.responses):
            if not status.startswith('2'):
                continue
            response = operation.responses[status]
            if response.ref:
                response = self._lookup(
                    response.ref, self.document.components.responses, 'responses'
                )
            node = self._json_schema(response.content)
            if node is not None:
                return self._decode(node, f'{base}/responses/{status}', None)
        return None


# =============================================================================
# Loading
# =============================================================================


class SchemaLoader:
    """Loads API descriptions from URLs or file paths.

    Supports JSON and YAML, validates the document against the OpenAPI
    models and decodes it into an ApiModel.

    Example:
        >>> loader = SchemaLoader()
        >>> model = loader.load('./api.yaml')
        >>> model = loader.load('https://api.example.com/openapi.json')
    """

    def __init__(self, http_client: httpx.Client | None = None):
        """Initialize the schema loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
                        If not provided, httpx.get is used directly.
        """
        self._http_client = http_client

    def load(self, source: str) -> ApiModel:
        """Load, validate and decode the API description at ``source``.

        Raises:
            SchemaLoadError: If the document cannot be read or parsed.
            SchemaValidationError: If the document is not a valid description.
            SchemaReferenceError: If a $ref cannot be resolved.
        """
        try:
            if self._is_url(source):
                content = self._load_from_url(source)
            else:
                content = self._load_from_file(source)
        except SchemaLoadError:
            raise
        except Exception as e:
            raise SchemaLoadError(source, cause=e)

        return self.load_dict(content, source)

    def load_dict(self, content: Any, source: str = '<memory>') -> ApiModel:
        """Validate and decode an already parsed API description."""
        if not isinstance(content, dict):
            raise SchemaValidationError(source, errors=['document is not a mapping'])
        try:
            document = raw.OpenAPI.model_validate(content)
        except ValidationError as e:
            errors = [
                f'{".".join(str(part) for part in err["loc"])}: {err["msg"]}'
                for err in e.errors()
            ]
            raise SchemaValidationError(source, errors=errors)
        return SchemaModelBuilder(document).build()

    def _is_url(self, text: str) -> bool:
        try:
            result = urlparse(text)
            return result.scheme in ('http', 'https')
        except ValueError:
            return False

    def _load_from_url(self, url: str) -> dict:
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)

            response.raise_for_status()
            content_type = response.headers.get('content-type', '')
            content = response.text

            if 'yaml' in content_type or url.endswith(('.yaml', '.yml')):
                return yaml.safe_load(content)
            return json.loads(content)

        except httpx.HTTPError as e:
            raise SchemaLoadError(url, cause=e)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(url, cause=e)

    def _load_from_file(self, file_path: str) -> dict:
        path = Path(file_path)
        if not path.exists():
            raise SchemaLoadError(
                str(file_path), cause=FileNotFoundError(f'File not found: {path}')
            )

        try:
            content = path.read_text(encoding='utf-8')
            if path.suffix.lower() in ('.yaml', '.yml'):
                return yaml.safe_load(content)
            return json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(str(file_path), cause=e)
        except OSError as e:
            raise SchemaLoadError(str(file_path), cause=e)
