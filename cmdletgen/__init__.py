"""cmdletgen - Generate PowerShell module projects from OpenAPI specifications.

cmdletgen decodes an OpenAPI 3.x description into a schema graph, resolves
every schema to a target type, and assembles a project: a tree of namespaces
holding model, enum and command definitions plus the build descriptor of the
generated module.

Quick Start:
    >>> import asyncio
    >>> from cmdletgen import FileWriter, MappingConfigurationSource, ProjectAssembler, SchemaLoader, State
    >>>
    >>> source = MappingConfigurationSource({
    ...     'module-name': 'Contoso', 'module-version': '1.0.0',
    ...     'dll-name': 'Contoso.private', 'help-link-prefix': 'https://docs.contoso.com/',
    ... })
    >>> state = State(source, SchemaLoader().load('./widgets.yaml'))
    >>> project = asyncio.run(ProjectAssembler(state).init())
    >>> project.emit(FileWriter('./out'))

CLI Usage:
    $ cmdletgen generate --config cmdletgen.yaml
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _package_version

from cmdletgen.codegen import (
    FileWriter,
    MemoryWriter,
    Project,
    ProjectAssembler,
    SchemaDefinitionResolver,
    SchemaLoader,
    State,
    TypeRegistry,
    rewrite_overrides,
)
from cmdletgen.config import (
    GeneratorConfig,
    MappingConfigurationSource,
    Metadata,
    get_config,
)
from cmdletgen.exceptions import (
    CmdletGenError,
    CodeGenerationError,
    ConfigurationError,
    GenerationAbortedError,
    MissingConfigurationError,
    NamespaceStateError,
    OutputError,
    SchemaError,
    SchemaLoadError,
    SchemaReferenceError,
    SchemaValidationError,
    UnsupportedSchemaKindError,
)

__all__ = [
    # Main classes
    'ProjectAssembler',
    'Project',
    'State',
    'SchemaLoader',
    'SchemaDefinitionResolver',
    'TypeRegistry',
    'FileWriter',
    'MemoryWriter',
    'rewrite_overrides',
    # Configuration
    'GeneratorConfig',
    'MappingConfigurationSource',
    'Metadata',
    'get_config',
    # Exceptions
    'CmdletGenError',
    'SchemaError',
    'SchemaLoadError',
    'SchemaValidationError',
    'SchemaReferenceError',
    'UnsupportedSchemaKindError',
    'ConfigurationError',
    'MissingConfigurationError',
    'CodeGenerationError',
    'NamespaceStateError',
    'GenerationAbortedError',
    'OutputError',
]

try:
    __version__ = _package_version('cmdletgen')
except PackageNotFoundError:
    __version__ = 'unknown'
