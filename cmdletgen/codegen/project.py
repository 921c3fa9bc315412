"""Project assembly.

ProjectAssembler reads the configuration, builds the namespace tree in a
fixed order and runs the error checkpoint. The result is a Project: an
immutable-by-convention composition of names, paths, metadata and the
namespace tree that stages and emits the generated files.

Example:
    >>> source = MappingConfigurationSource({'module-name': 'Contoso', ...})
    >>> state = State(source, SchemaLoader().load('./widgets.yaml'))
    >>> project = asyncio.run(ProjectAssembler(state).init())
    >>> project.emit(FileWriter('./out'))
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from cmdletgen.codegen.descriptors import CsprojDescriptor, ProjectDescriptor, remove_cd
from cmdletgen.codegen.file_writer import Writer
from cmdletgen.codegen.namespaces import (
    CmdletNamespace,
    ModelCmdletNamespace,
    ModelExtensionsNamespace,
    Namespace,
    ServiceNamespace,
    SupportNamespace,
)
from cmdletgen.codegen.naming import sanitize_identifier
from cmdletgen.codegen.overrides import rewrite_overrides
from cmdletgen.codegen.resolver import SchemaDefinitionResolver, create_cmdlet_resolver
from cmdletgen.codegen.state import State
from cmdletgen.config import DEFAULT_VALUES, Metadata
from cmdletgen.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    'ACCOUNTS_VERSION_MINIMUM',
    'Project',
    'ProjectAssembler',
    'ProjectNames',
    'ProjectPaths',
    'default_overrides',
]

ACCOUNTS_VERSION_MINIMUM = '1.6.0'

CSHARP_CONTENT_TYPE = 'source-file-csharp'
JSON_CONTENT_TYPE = 'source-file-json'

# Accepts booleans and the usual spellings ('true', 'false', 'yes', '0', ...)
_FLAG = TypeAdapter(bool)

# ProjectPaths attribute -> configuration key
FOLDER_KEYS = {
    'base_folder': 'current-folder',
    'module_folder': 'module-folder',
    'cmdlet_folder': 'cmdlet-folder',
    'model_cmdlet_folder': 'model-cmdlet-folder',
    'custom_folder': 'custom-cmdlet-folder',
    'internal_folder': 'internal-cmdlet-folder',
    'test_folder': 'test-folder',
    'runtime_folder': 'runtime-folder',
    'api_folder': 'api-folder',
    'bin_folder': 'bin-folder',
    'obj_folder': 'obj-folder',
    'exports_folder': 'exports-folder',
    'docs_folder': 'docs-folder',
    'dependency_module_folder': 'dependency-module-folder',
    'examples_folder': 'examples-folder',
    'resources_folder': 'resources-folder',
}

# ProjectPaths attribute -> (configuration key, default built from folders and names)
FILE_KEYS = {
    'csproj': ('csproj', '{base_folder}/{module_name}.csproj'),
    'dll': ('dll', '{bin_folder}/{dll_name}.dll'),
    'psd1': ('psd1', '{base_folder}/{module_name}.psd1'),
    'psm1': ('psm1', '{base_folder}/{module_name}.psm1'),
    'psm1_custom': ('psm1-custom', '{custom_folder}/{module_name}.custom.psm1'),
    'psm1_internal': ('psm1-internal', '{internal_folder}/{module_name}.internal.psm1'),
    'format_ps1xml': ('format-ps1xml', '{base_folder}/{module_name}.format.ps1xml'),
    'nuspec': ('nuspec', '{base_folder}/{module_name}.nuspec'),
}


def default_overrides(project_namespace: str) -> dict[str, str]:
    """Namespace rewrites applied to generated source files.

    Longer keys come before the keys they start with.
    """
    runtime = f'{project_namespace}.Runtime'
    json_runtime = f'{runtime}.Json'
    return {
        'Carbon.Json.Converters': json_runtime,
        'Carbon.Internal.Extensions': json_runtime,
        'Carbon.Internal': json_runtime,
        'Carbon.Data': json_runtime,
        'using Data;': '',
        'using Parser;': '',
        'using Converters;': '',
        'using Internal.Extensions;': '',
        'Carbon.Json.Parser': json_runtime,
        'Carbon.Json': json_runtime,
        'Microsoft.Rest.ClientRuntime': runtime,
        'Microsoft.Rest': project_namespace,
    }


@dataclasses.dataclass(frozen=True)
class ProjectNames:
    module_name: str
    dll_name: str
    project_namespace: str
    service_name: str
    module_version: str
    help_link_prefix: str
    prefix: str = ''
    subject_prefix: str = ''
    accounts_version_minimum: str = ACCOUNTS_VERSION_MINIMUM
    profiles: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class ProjectPaths:
    base_folder: str
    module_folder: str
    cmdlet_folder: str
    model_cmdlet_folder: str
    custom_folder: str
    internal_folder: str
    test_folder: str
    runtime_folder: str
    api_folder: str
    bin_folder: str
    obj_folder: str
    exports_folder: str
    docs_folder: str
    dependency_module_folder: str
    examples_folder: str
    resources_folder: str
    csproj: str
    dll: str
    psd1: str
    psm1: str
    psm1_custom: str
    psm1_internal: str
    format_ps1xml: str
    nuspec: str

    @property
    def git_ignore(self) -> str:
        return f'{self.base_folder}/.gitignore'

    @property
    def git_attributes(self) -> str:
        return f'{self.base_folder}/.gitattributes'

    @property
    def readme(self) -> str:
        return f'{self.base_folder}/readme.md'


class Project:
    """A fully initialized generated-module project.

    Attributes:
        names: Module, assembly and namespace names.
        paths: Folder and file locations.
        metadata: Package metadata.
        overrides: Text rewrites applied to staged source files.
        resolver: The resolver the namespaces were built with.
        descriptor: Renders the build project file.
        files: Staged files, path to content, filled by ``generate``.
        content_types: Content type of each staged file, None when unknown.
    """

    def __init__(
        self,
        names: ProjectNames,
        paths: ProjectPaths,
        metadata: Metadata,
        overrides: dict[str, str],
        resolver: SchemaDefinitionResolver,
        service: ServiceNamespace,
        support: SupportNamespace,
        model_cmdlets: ModelCmdletNamespace,
        models: ModelExtensionsNamespace,
        cmdlets: CmdletNamespace,
        azure: bool = False,
        skip_model_cmdlets: bool = True,
        descriptor: ProjectDescriptor | None = None,
    ):
        self.names = names
        self.paths = paths
        self.metadata = metadata
        self.overrides = overrides
        self.resolver = resolver
        self.service = service
        self.support = support
        self.model_cmdlets = model_cmdlets
        self.models = models
        self.cmdlets = cmdlets
        self.azure = azure
        self.skip_model_cmdlets = skip_model_cmdlets
        self.descriptor = descriptor or CsprojDescriptor()
        self.files: dict[str, str] = {}
        self.content_types: dict[str, str | None] = {}

    @property
    def namespaces(self) -> list[Namespace]:
        """Every namespace of the tree, root first, in creation order."""
        return list(self.service.walk())

    def add_source_file(
        self, path: str, content: str, content_type: str = CSHARP_CONTENT_TYPE
    ) -> None:
        """Stage a source file; the override rewrite is applied to its content."""
        self.files[path] = rewrite_overrides(content, self.overrides)
        self.content_types[path] = content_type

    def add_file(self, path: str, content: str, content_type: str | None = None) -> None:
        self.files[path] = content
        self.content_types[path] = content_type

    def manifest_path(self, namespace: Namespace) -> str:
        return f'{self.paths.api_folder}/{namespace.full_name}.json'

    def generate(self) -> dict[str, str]:
        """Stage the project files.

        Stages the build descriptor, .gitignore, .gitattributes and one JSON
        manifest per namespace describing its definitions.

        Returns:
            The staged files, path to content.
        """
        self.add_source_file(self.descriptor.path(self), self.descriptor.render(self))
        self.add_file(self.paths.git_ignore, self._git_ignore())
        self.add_file(self.paths.git_attributes, '* text=auto\n')
        for namespace in self.namespaces:
            self.add_file(
                self.manifest_path(namespace),
                json.dumps(namespace.to_dict(), indent=2) + '\n',
                JSON_CONTENT_TYPE,
            )
        logger.info(f'Staged {len(self.files)} file(s) for {self.names.module_name}')
        return self.files

    def emit(self, writer: Writer) -> list[str]:
        """Hand every staged file to ``writer``, staging first if needed.

        Returns:
            Where each file was written.
        """
        if not self.files:
            self.generate()
        return [
            writer.write(path, content, self.content_types.get(path))
            for path, content in self.files.items()
        ]

    def _git_ignore(self) -> str:
        entries = [
            remove_cd(self.paths.bin_folder),
            remove_cd(self.paths.obj_folder),
            '.vs',
            remove_cd(self.paths.module_folder),
            remove_cd(self.paths.internal_folder),
            remove_cd(self.paths.exports_folder),
            f'{remove_cd(self.paths.custom_folder)}/*.psm1',
            f'{remove_cd(self.paths.test_folder)}/*-TestResults.xml',
        ]
        return '\n'.join(entries) + '\n'

    def __repr__(self) -> str:
        return (
            f'Project({self.names.module_name!r}, '
            f'namespaces={[ns.full_name for ns in self.namespaces]})'
        )


class ProjectAssembler:
    """Builds a Project from configuration and the API model.

    ``init`` reads every configuration value, recording missing required
    ones on the state instead of failing immediately, then builds the
    namespaces in order: service, support, model cmdlets, models, cmdlets.
    Types the cmdlets discover are materialized afterwards. Finally every
    namespace is finalized and the state checkpoint aborts the run if any
    error was recorded, so a failed run never yields a Project.
    """

    def __init__(
        self,
        state: State,
        resolver: SchemaDefinitionResolver | None = None,
        descriptor: ProjectDescriptor | None = None,
    ):
        self.state = state
        self.resolver = resolver or create_cmdlet_resolver()
        self.descriptor = descriptor or CsprojDescriptor()

    async def init(self) -> Project:
        state = self.state
        state.resolver = self.resolver

        names = await self._names()
        paths = await self._paths(names)
        metadata = await self._metadata()
        azure = await self._flag('azure', False)
        skip_model_cmdlets = await self._flag('skip-model-cmdlets', True)

        service = ServiceNamespace(
            names.project_namespace,
            service_name=names.service_name,
            prefix=names.prefix,
            subject_prefix=names.subject_prefix,
        )
        support = SupportNamespace(service, state)
        model_cmdlets = ModelCmdletNamespace(service, state)
        models = ModelExtensionsNamespace(
            service, state, state.model.schemas, state.path('components', 'schemas')
        )
        cmdlets = await CmdletNamespace(service, state).init()
        self._materialize(support, models)

        if not skip_model_cmdlets:
            model_cmdlets.create_model_cmdlets(models)
            self._materialize(support, models)

        state.check_materialized()
        for namespace in service.walk():
            namespace.finalize()

        state.checkpoint()
        logger.info(
            f'Assembled project {names.module_name} with '
            f'{len(models)} model(s) and {len(cmdlets)} cmdlet variant(s)'
        )
        return Project(
            names=names,
            paths=paths,
            metadata=metadata,
            overrides=default_overrides(names.project_namespace),
            resolver=self.resolver,
            service=service,
            support=support,
            model_cmdlets=model_cmdlets,
            models=models,
            cmdlets=cmdlets,
            azure=azure,
            skip_model_cmdlets=skip_model_cmdlets,
            descriptor=self.descriptor,
        )

    async def _names(self) -> ProjectNames:
        state = self.state
        module_version = await state.get_value('module-version')
        help_link_prefix = await state.get_value('help-link-prefix')
        module_name = await state.get_value('module-name')
        dll_name = await state.get_value('dll-name')
        fallback = module_name or sanitize_identifier(state.model.title)
        return ProjectNames(
            module_name=module_name or '',
            dll_name=dll_name or '',
            project_namespace=await state.get_value('namespace', fallback),
            service_name=await state.get_value(
                'service-name', sanitize_identifier(state.model.title)
            ),
            module_version=module_version or '',
            help_link_prefix=help_link_prefix or '',
            prefix=await state.get_value('prefix', ''),
            subject_prefix=await state.get_value('subject-prefix', ''),
            profiles=state.model.profiles,
        )

    async def _paths(self, names: ProjectNames) -> ProjectPaths:
        values: dict[str, Any] = {}
        for attribute, key in FOLDER_KEYS.items():
            values[attribute] = await self.state.get_value(key, DEFAULT_VALUES[key])

        dll_name = names.dll_name
        if dll_name.lower().endswith('.dll'):
            dll_name = dll_name[: -len('.dll')]
        context = {**values, 'module_name': names.module_name, 'dll_name': dll_name}
        for attribute, (key, template) in FILE_KEYS.items():
            values[attribute] = await self.state.get_value(key, template.format(**context))
        return ProjectPaths(**values)

    async def _flag(self, key: str, default: bool) -> bool:
        value = await self.state.get_value(key, default)
        try:
            return _FLAG.validate_python(value)
        except ValidationError:
            self.state.record(
                ConfigurationError(f'Expected a boolean, got {value!r}', field=key)
            )
            return default

    async def _metadata(self) -> Metadata:
        value = await self.state.get_value('metadata', {})
        if isinstance(value, Metadata):
            return value
        try:
            return Metadata.model_validate(value or {})
        except ValidationError as e:
            self.state.record(
                ConfigurationError(f'Invalid metadata: {e.error_count()} error(s)', field='metadata')
            )
            return Metadata()

    def _materialize(self, support: SupportNamespace, models: ModelExtensionsNamespace) -> None:
        while support.pending or models.pending:
            models.materialize()
            support.materialize()
