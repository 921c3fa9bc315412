"""Build descriptors for the generated module.

A descriptor renders the project file the target toolchain builds the
module from. CsprojDescriptor produces an MSBuild project for a
netstandard2.0 class library.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cmdletgen.codegen.project import Project

__all__ = ['CsprojDescriptor', 'ProjectDescriptor', 'remove_cd']

LANG_VERSION = '7.1'
TARGET_FRAMEWORK = 'netstandard2.0'
PACKAGE_REFERENCES = (
    ('PowerShellStandard.Library', '5.1.0'),
    ('Microsoft.CSharp', '4.4.1'),
)

_SIGNED_RELEASE = """\
    <SignAssembly>true</SignAssembly>
    <DelaySign>true</DelaySign>
    <AssemblyOriginatorKeyFile>MSSharedLibKey.snk</AssemblyOriginatorKeyFile>
    <DefineConstants>TRACE;RELEASE;NETSTANDARD;SIGN</DefineConstants>"""

_RELEASE = """\
    <DefineConstants>TRACE;RELEASE;NETSTANDARD</DefineConstants>"""

_TEMPLATE = """\
<Project Sdk="Microsoft.NET.Sdk">

  <PropertyGroup>
    <Version>{version}</Version>
    <LangVersion>{lang_version}</LangVersion>
    <TargetFramework>{target_framework}</TargetFramework>
    <OutputType>Library</OutputType>
    <AssemblyName>{assembly_name}</AssemblyName>
    <RootNamespace>{root_namespace}</RootNamespace>
    <CopyLocalLockFileAssemblies>true</CopyLocalLockFileAssemblies>
    <AppendTargetFrameworkToOutputPath>false</AppendTargetFrameworkToOutputPath>
    <OutputPath>{output_path}</OutputPath>
    <PublishDir>$(OutputPath)</PublishDir>
    <NuspecFile>{module_name}.nuspec</NuspecFile>
    <NoPackageAnalysis>true</NoPackageAnalysis>
    <!-- Some methods are marked async and don't have an await in them -->
    <NoWarn>1998</NoWarn>
    <TreatWarningsAsErrors>true</TreatWarningsAsErrors>
    <WarningsAsErrors />
  </PropertyGroup>

  <PropertyGroup Condition="'$(Configuration)|$(Platform)'=='Debug|AnyCPU'">
    <DelaySign>false</DelaySign>
    <DefineConstants>TRACE;DEBUG;NETSTANDARD</DefineConstants>
  </PropertyGroup>

  <PropertyGroup Condition="'$(Configuration)|$(Platform)'=='Release|AnyCPU'">
{release}
  </PropertyGroup>

  <ItemGroup>
{package_references}
  </ItemGroup>

  <PropertyGroup>
    <DefaultItemExcludes>$(DefaultItemExcludes);{resources}/**</DefaultItemExcludes>
  </PropertyGroup>

</Project>
"""


def remove_cd(path: str) -> str:
    """Strip a leading './' from a relative path."""
    return path[2:] if path.startswith('./') else path


class ProjectDescriptor(Protocol):
    """Renders the build project file of a generated module."""

    def path(self, project: Project) -> str: ...

    def render(self, project: Project) -> str: ...


class CsprojDescriptor:
    """MSBuild project file.

    Strong-name signing is only configured for the release build of Azure
    modules.
    """

    def path(self, project: Project) -> str:
        return project.paths.csproj

    def render(self, project: Project) -> str:
        references = '\n'.join(
            f'    <PackageReference Include="{name}" Version="{version}" />'
            for name, version in PACKAGE_REFERENCES
        )
        return _TEMPLATE.format(
            version=project.names.module_version,
            lang_version=LANG_VERSION,
            target_framework=TARGET_FRAMEWORK,
            assembly_name=project.names.dll_name,
            root_namespace=project.names.project_namespace,
            output_path=project.paths.bin_folder,
            module_name=project.names.module_name,
            release=_SIGNED_RELEASE if project.azure else _RELEASE,
            package_references=references,
            resources=remove_cd(project.paths.resources_folder),
        )
