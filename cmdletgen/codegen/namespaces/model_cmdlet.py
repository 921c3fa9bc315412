from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cmdletgen.codegen.namespaces.base import Namespace, ParameterDefinition
from cmdletgen.codegen.namespaces.cmdlet import CmdletDefinition, parameter_name

if TYPE_CHECKING:
    from cmdletgen.codegen.namespaces.model_extensions import ModelExtensionsNamespace
    from cmdletgen.codegen.namespaces.service import ServiceNamespace
    from cmdletgen.codegen.state import State

logger = logging.getLogger(__name__)


class ModelCmdletNamespace(Namespace):
    """Commands that construct model objects locally.

    Stays empty unless ``create_model_cmdlets`` is called, which the project
    does only when model cmdlets are not skipped.
    """

    def __init__(self, service: ServiceNamespace, state: State):
        super().__init__('ModelCmdlets', service)
        self.service = service
        self.context = state

    def create_model_cmdlets(self, models: ModelExtensionsNamespace) -> int:
        """Add a ``New-{Prefix}{Model}Object`` command per model.

        Returns:
            The number of commands added.
        """
        count = 0
        resolver = self.context.resolver
        for model in models:
            noun = f'{self.service.prefix}{self.service.subject_prefix}{model.name}Object'
            class_name = f'New{noun}'
            taken: set[str] = set()
            parameters = tuple(
                ParameterDefinition(
                    name=parameter_name(prop.name, taken),
                    serialized_name=prop.serialized_name,
                    type=prop.type,
                    location='body',
                    description=prop.description,
                )
                for prop in models.all_properties(model)
            )
            output_type = resolver.resolve_type_declaration(
                model.schema,
                True,
                self.context.model_state(model.schema.path, model.name),
            )
            self.add(
                class_name,
                CmdletDefinition(
                    name=f'New-{noun}',
                    verb='New',
                    noun=noun,
                    variant='ModelObject',
                    class_name=class_name,
                    full_name=f'{self.full_name}.{class_name}',
                    parameters=parameters,
                    output_type=output_type,
                ),
            )
            count += 1
        logger.info(f'Created {count} model cmdlet(s) in {self.full_name}')
        return count
