"""Code generation for cmdletgen.

Main Components:
    - SchemaLoader / SchemaModelBuilder: Load an API description into a schema graph
    - SchemaDefinitionResolver: Maps schemas to target type declarations
    - TypeRegistry: Tracks generated types by schema identity
    - ProjectAssembler: Builds the namespace tree and the Project
    - FileWriter / MemoryWriter: Destinations for generated files

Example:
    >>> from cmdletgen.codegen import ProjectAssembler, SchemaLoader, State
    >>> state = State(MappingConfigurationSource(values), SchemaLoader().load('./api.yaml'))
    >>> project = asyncio.run(ProjectAssembler(state).init())
"""

from cmdletgen.codegen.descriptors import CsprojDescriptor, ProjectDescriptor
from cmdletgen.codegen.file_writer import FileWriter, MemoryWriter, Writer
from cmdletgen.codegen.overrides import rewrite_overrides
from cmdletgen.codegen.project import (
    Project,
    ProjectAssembler,
    ProjectNames,
    ProjectPaths,
)
from cmdletgen.codegen.resolver import (
    ResolverOverride,
    SchemaDefinitionResolver,
    create_cmdlet_resolver,
)
from cmdletgen.codegen.schema import (
    ApiModel,
    Schema,
    SchemaKind,
    SchemaLoader,
    SchemaModelBuilder,
)
from cmdletgen.codegen.state import State
from cmdletgen.codegen.type_registry import TypeInfo, TypeRegistry
from cmdletgen.codegen.types import EnhancedTypeDeclaration, ModelState

__all__ = [
    'ApiModel',
    'CsprojDescriptor',
    'EnhancedTypeDeclaration',
    'FileWriter',
    'MemoryWriter',
    'ModelState',
    'Project',
    'ProjectAssembler',
    'ProjectDescriptor',
    'ProjectNames',
    'ProjectPaths',
    'ResolverOverride',
    'Schema',
    'SchemaDefinitionResolver',
    'SchemaKind',
    'SchemaLoader',
    'SchemaModelBuilder',
    'State',
    'TypeInfo',
    'TypeRegistry',
    'Writer',
    'create_cmdlet_resolver',
    'rewrite_overrides',
]
