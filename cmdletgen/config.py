import os
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cmdletgen.exceptions import ConfigurationError, MissingConfigurationError

DEFAULT_FILENAMES = ['cmdletgen.yaml', 'cmdletgen.yml']

# Marks a get_value call without a default.
MISSING: Any = object()

# Folder and file locations used when the configuration does not name them.
DEFAULT_VALUES: dict[str, Any] = {
    'current-folder': '.',
    'module-folder': './generated',
    'cmdlet-folder': './generated/cmdlets',
    'model-cmdlet-folder': './generated/model-cmdlets',
    'custom-cmdlet-folder': './custom',
    'internal-cmdlet-folder': './internal',
    'test-folder': './test',
    'runtime-folder': './generated/runtime',
    'api-folder': './generated/api',
    'bin-folder': './bin',
    'obj-folder': './obj',
    'exports-folder': './exports',
    'docs-folder': './docs',
    'dependency-module-folder': './generated/modules',
    'examples-folder': './examples',
    'resources-folder': './resources',
}


class Metadata(BaseModel):
    """Package metadata of the generated module."""

    authors: str = ''
    owners: str = ''
    requireLicenseAcceptance: bool = False
    description: str = ''
    copyright: str = ''
    tags: str = ''
    companyName: str = ''
    licenseUrl: str = ''
    projectUrl: str = ''


class GeneratorConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='CMDLETGEN_')

    input: str = Field(..., description='Path or URL to the API description.')

    output: str = Field('.', description='Directory the generated project is written to.')

    values: dict[str, Any] = Field(
        default_factory=dict,
        description='Configuration values handed to the generator (module-name, dll-name, ...).',
    )


class ConfigurationSource(Protocol):
    """Read-only key/value source consulted during generation."""

    async def get_value(self, key: str, default: Any = MISSING) -> Any: ...


class MappingConfigurationSource:
    """Configuration source backed by a plain mapping.

    Lookup order is the supplied values, then the default passed to
    ``get_value``, then the built-in folder and file defaults.
    """

    def __init__(
        self,
        values: dict[str, Any] | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        self._values = dict(values or {})
        self._defaults = DEFAULT_VALUES if defaults is None else dict(defaults)

    async def get_value(self, key: str, default: Any = MISSING) -> Any:
        if key in self._values:
            return self._values[key]
        if default is not MISSING:
            return default
        if key in self._defaults:
            return self._defaults[key]
        raise MissingConfigurationError(key)


def load_yaml(path: str | Path) -> dict:
    import yaml

    return yaml.load(Path(path).read_text(), Loader=yaml.FullLoader)


def get_config(path: str | None = None) -> GeneratorConfig:
    """Load configuration from a file or the current project."""
    if path:
        return GeneratorConfig.model_validate(load_yaml(path))

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        path = Path(cwd) / filename
        if path.exists():
            return GeneratorConfig.model_validate(load_yaml(path))

    path = Path(os.getcwd()) / 'pyproject.toml'

    if path.exists():
        import tomllib

        pyproject = tomllib.loads(path.read_text())
        tools = pyproject.get('tool', {})

        if 'cmdletgen' in tools:
            return GeneratorConfig.model_validate(tools['cmdletgen'])

    raise ConfigurationError('No cmdletgen configuration found', config_path=cwd)
