"""Shared state of one generation run.

State gives every namespace access to the configuration source, the
decoded API model, the type resolver and registry, and the error list that
the final checkpoint inspects. Configuration and schema errors are recorded
here instead of being raised so a run reports every problem it finds.
"""

import logging
from typing import Any

from cmdletgen.codegen.resolver import SchemaDefinitionResolver
from cmdletgen.codegen.schema import ApiModel
from cmdletgen.codegen.type_registry import TypeRegistry
from cmdletgen.codegen.types import ModelState
from cmdletgen.config import MISSING, ConfigurationSource
from cmdletgen.exceptions import (
    CmdletGenError,
    CodeGenerationError,
    GenerationAbortedError,
    MissingConfigurationError,
)

logger = logging.getLogger(__name__)


class State:
    """Configuration, model and error bookkeeping for one generation run.

    Example:
        >>> state = State(MappingConfigurationSource({'module-name': 'Contoso'}), model)
        >>> await state.get_value('module-name')
        'Contoso'
        >>> await state.get_value('module-version')  # recorded, returns None
        >>> state.checkpoint()
        Traceback (most recent call last):
        GenerationAbortedError: Generation aborted with 1 error(s): ...
    """

    def __init__(
        self,
        config: ConfigurationSource,
        model: ApiModel,
        resolver: SchemaDefinitionResolver | None = None,
    ):
        self.config = config
        self.model = model
        self.resolver = resolver or SchemaDefinitionResolver()
        self.registry = TypeRegistry()
        self.errors: list[CmdletGenError] = []

    async def get_value(self, key: str, default: Any = MISSING) -> Any:
        """Read a configuration value.

        A missing value without a default is recorded as a
        MissingConfigurationError and None is returned, so generation can
        continue and report further problems.
        """
        try:
            return await self.config.get_value(key, default)
        except MissingConfigurationError as e:
            self.record(e)
            return None

    def record(self, error: CmdletGenError) -> None:
        logger.error(str(error))
        self.errors.append(error)

    def path(self, *parts: str) -> str:
        return '/'.join(['#', *parts])

    def model_state(self, path: str, name_hint: str | None = None) -> ModelState:
        return ModelState(self.registry, path, name_hint)

    def check_materialized(self) -> None:
        """Record every registered type that never received a definition."""
        for type_info in self.registry.get_unmaterialized_types():
            self.record(
                CodeGenerationError(
                    f'Type {type_info.full_name} was referenced but never defined',
                    context=type_info.namespace,
                )
            )

    def checkpoint(self) -> None:
        """Abort the run if any error was recorded.

        Raises:
            GenerationAbortedError: Carrying every recorded error.
        """
        if self.errors:
            raise GenerationAbortedError(self.errors)
