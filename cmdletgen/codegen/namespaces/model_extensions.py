"""Models namespace: one definition per object and polymorphic schema.

Construction visits the top-level schema table in declaration order and
resolves every object, polymorphic and enum schema, which registers them
with the TypeRegistry. ``materialize`` then builds definitions for pending
types. Resolving a model's properties can register further types (inline
objects, referenced enums), so it loops until nothing is pending.
"""

from __future__ import annotations

import dataclasses
import logging
from collections import deque
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from cmdletgen.codegen.namespaces.base import Namespace, PropertyDefinition
from cmdletgen.codegen.naming import pascal, sanitize_identifier, unique_name
from cmdletgen.codegen.schema import Schema, SchemaKind
from cmdletgen.codegen.types import EnhancedTypeDeclaration
from cmdletgen.exceptions import NamespaceStateError, UnsupportedSchemaKindError

if TYPE_CHECKING:
    from cmdletgen.codegen.namespaces.service import ServiceNamespace
    from cmdletgen.codegen.state import State
    from cmdletgen.codegen.type_registry import TypeInfo

logger = logging.getLogger(__name__)

MODEL_KINDS = (SchemaKind.OBJECT, SchemaKind.POLYMORPHIC)


@dataclasses.dataclass(frozen=True)
class ModelDefinition:
    """A generated model class.

    Attributes:
        name: Class name inside the models namespace.
        full_name: Qualified class name.
        schema: The schema the model was generated for.
        kind: 'object' or 'polymorphic'.
        properties: The model's own properties, in schema order.
        base_types: Qualified names of the allOf parents.
        variants: Qualified names of the known subtypes.
        discriminator: Discriminator property and value-to-type mapping.
        type_converter: Name of the generated PowerShell type converter.
    """

    name: str
    full_name: str
    schema: Schema
    kind: str
    properties: tuple[PropertyDefinition, ...] = ()
    base_types: tuple[str, ...] = ()
    variants: tuple[str, ...] = ()
    discriminator: dict[str, Any] | None = None
    type_converter: str = ''
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'kind': self.kind,
            'name': self.name,
            'fullName': self.full_name,
            'baseTypes': list(self.base_types),
            'variants': list(self.variants),
            'discriminator': self.discriminator,
            'typeConverter': self.type_converter,
            'properties': [p.to_dict() for p in self.properties],
        }


class ModelExtensionsNamespace(Namespace):
    def __init__(
        self,
        service: ServiceNamespace,
        state: State,
        schemas: Mapping[str, Schema],
        path: str,
    ):
        super().__init__('Models', service)
        self.context = state
        self._pending: deque[TypeInfo] = deque()
        for kind in MODEL_KINDS:
            state.registry.bind(kind, self)

        for name, schema in schemas.items():
            if schema.kind not in (*MODEL_KINDS, SchemaKind.ENUM):
                logger.debug(f'Skipping {schema.kind.value} schema {name!r}')
                continue
            try:
                state.resolver.resolve_type_declaration(
                    schema, True, state.model_state(f'{path}/{name}', name)
                )
            except UnsupportedSchemaKindError as e:
                state.record(e)

        self.materialize()

    def add_pending(self, type_info: TypeInfo) -> None:
        if self.is_finalized:
            raise NamespaceStateError(self.full_name, self.state.value, 'register types in')
        self._pending.append(type_info)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def materialize(self) -> int:
        """Build definitions until no model is pending.

        Returns:
            The number of definitions added.
        """
        count = 0
        while self._pending:
            type_info = self._pending.popleft()
            self.add(type_info.name, self._build(type_info))
            type_info.is_materialized = True
            count += 1
        if count:
            logger.debug(f'Materialized {count} model(s) in {self.full_name}')
        return count

    def in_dependency_order(self) -> list[ModelDefinition]:
        """Definitions ordered so referenced models come before their users.

        Cycles are broken at the first revisited model.
        """
        ordered = [
            self._definitions[type_info.name]
            for type_info in self.context.registry.get_types_in_dependency_order()
            if type_info.namespace == self.full_name and type_info.name in self._definitions
        ]
        seen = {definition.name for definition in ordered}
        ordered.extend(d for d in self._definitions.values() if d.name not in seen)
        return ordered

    def to_dict(self) -> dict[str, Any]:
        return {
            'namespace': self.full_name,
            'definitions': [definition.to_dict() for definition in self.in_dependency_order()],
        }

    def all_properties(self, model: ModelDefinition) -> list[PropertyDefinition]:
        """Properties of ``model`` including inherited ones, parents first."""
        properties: dict[str, PropertyDefinition] = {}
        seen: set[str] = set()

        def collect(definition: ModelDefinition) -> None:
            if definition.full_name in seen:
                return
            seen.add(definition.full_name)
            for base in definition.base_types:
                parent = self.get(base.rsplit('.', 1)[-1])
                if parent is not None:
                    collect(parent)
            for prop in definition.properties:
                properties.setdefault(prop.name, prop)

        collect(model)
        return list(properties.values())

    def _resolve(
        self, schema: Schema, required: bool, path: str, hint: str
    ) -> EnhancedTypeDeclaration:
        return self.context.resolver.resolve_type_declaration(
            schema, required, self.context.model_state(path, hint)
        )

    def _build(self, type_info: TypeInfo) -> ModelDefinition:
        schema = type_info.schema
        registry = self.context.registry

        properties = []
        taken = {type_info.name}
        for serialized_name, prop_schema in schema.properties.items():
            name = sanitize_identifier(serialized_name)
            if name == type_info.name:
                name = f'{name}Property'
            name = unique_name(name, taken)
            taken.add(name)
            try:
                declaration = self._resolve(
                    prop_schema,
                    serialized_name in schema.required,
                    f'{schema.path}/properties/{serialized_name}',
                    f'{type_info.name}{pascal(serialized_name)}',
                )
            except UnsupportedSchemaKindError as e:
                self.context.record(e)
                continue
            for dependency in _type_names(declaration):
                registry.add_dependency(schema, dependency)
            properties.append(
                PropertyDefinition(
                    name=name,
                    serialized_name=serialized_name,
                    type=declaration,
                    description=prop_schema.description,
                )
            )

        base_types = []
        for parent in schema.parents:
            if parent.kind not in MODEL_KINDS:
                logger.warning(
                    f'{schema.path}: allOf entry {parent.path} is not an object, ignored'
                )
                continue
            declaration = self._resolve(parent, True, parent.path, parent.name or '')
            base_types.append(declaration.type_name)
            registry.add_dependency(schema, declaration.type_name)

        variants = []
        for index, variant in enumerate(schema.variants):
            if variant.kind not in MODEL_KINDS:
                continue
            hint = variant.name or f'{type_info.name}Variant{index}'
            variants.append(self._resolve(variant, True, variant.path, hint).declaration)

        discriminator = None
        if schema.discriminator is not None:
            mapping = {}
            for value, target in schema.discriminator.mapping.items():
                if target.kind in MODEL_KINDS:
                    mapping[value] = self._resolve(
                        target, True, target.path, target.name or pascal(value)
                    ).declaration
            discriminator = {
                'propertyName': schema.discriminator.property_name,
                'mapping': mapping,
            }

        return ModelDefinition(
            name=type_info.name,
            full_name=type_info.full_name,
            schema=schema,
            kind=schema.kind.value,
            properties=tuple(properties),
            base_types=tuple(base_types),
            variants=tuple(variants),
            discriminator=discriminator,
            type_converter=f'{type_info.name}TypeConverter',
            description=schema.description,
        )


def _type_names(declaration: EnhancedTypeDeclaration) -> list[str]:
    names = []
    while declaration is not None:
        if declaration.type_name:
            names.append(declaration.type_name)
        declaration = declaration.element
    return names
