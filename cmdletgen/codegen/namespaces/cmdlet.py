"""Cmdlet namespace: one command variant per API operation.

Initialization is two-phase. The constructor only attaches the namespace to
the tree; ``await init()`` reads the configuration it needs and synthesizes
the commands. Until init completes the namespace refuses to hand out
definitions, so no caller sees a half-built command list.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from cmdletgen.codegen.namespaces.base import Namespace, ParameterDefinition
from cmdletgen.codegen.naming import pascal, sanitize_identifier, split_verb_noun, unique_name
from cmdletgen.codegen.schema import Operation
from cmdletgen.codegen.types import EnhancedTypeDeclaration
from cmdletgen.exceptions import NamespaceStateError, UnsupportedSchemaKindError

if TYPE_CHECKING:
    from cmdletgen.codegen.namespaces.service import ServiceNamespace
    from cmdletgen.codegen.state import State

logger = logging.getLogger(__name__)

# Parameters every advanced PowerShell function already has.
COMMON_PARAMETERS = frozenset(
    {
        'Debug',
        'ErrorAction',
        'ErrorVariable',
        'InformationAction',
        'InformationVariable',
        'OutBuffer',
        'OutVariable',
        'PipelineVariable',
        'ProgressAction',
        'Verbose',
        'WarningAction',
        'WarningVariable',
        'WhatIf',
        'Confirm',
    }
)


@dataclasses.dataclass(frozen=True)
class CmdletDefinition:
    """One variant of a generated command.

    Attributes:
        name: Command name, ``Verb-Noun``.
        verb: Approved verb.
        noun: Noun including the configured prefixes.
        variant: Parameter-set name of this variant.
        class_name: Generated class, ``{Verb}{Noun}_{Variant}``.
        full_name: Class name qualified with the namespace.
        operation: The operation the variant invokes, None for local commands.
        parameters: Parameters in declaration order.
        output_type: Resolved type of the success response, if any.
        help_uri: Link to the command's online help.
    """

    name: str
    verb: str
    noun: str
    variant: str
    class_name: str
    full_name: str
    operation: Operation | None = None
    parameters: tuple[ParameterDefinition, ...] = ()
    output_type: EnhancedTypeDeclaration | None = None
    help_uri: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'kind': 'cmdlet',
            'name': self.name,
            'variant': self.variant,
            'className': self.class_name,
            'operationId': self.operation.operation_id if self.operation else None,
            'method': self.operation.method if self.operation else None,
            'path': self.operation.path if self.operation else None,
            'outputType': self.output_type.declaration if self.output_type else None,
            'helpUri': self.help_uri,
            'parameters': [p.to_dict() for p in self.parameters],
        }


def parameter_name(name: str, taken: set[str]) -> str:
    """PascalCase a parameter name and keep it clear of common parameters."""
    candidate = sanitize_identifier(name)
    if candidate in COMMON_PARAMETERS:
        candidate = f'{candidate}Parameter'
    candidate = unique_name(candidate, taken)
    taken.add(candidate)
    return candidate


class CmdletNamespace(Namespace):
    def __init__(self, service: ServiceNamespace, state: State):
        super().__init__('Cmdlets', service)
        self.service = service
        self.context = state
        self.initialized = False
        self.help_link_prefix = ''
        self.module_name = ''

    async def init(self) -> CmdletNamespace:
        """Synthesize one command variant per operation and finalize.

        Operations with an unsupported schema are recorded on the state and
        skipped; the caller's checkpoint reports them.
        """
        if self.initialized:
            return self

        self.help_link_prefix = await self.context.get_value('help-link-prefix', '')
        self.module_name = await self.context.get_value('module-name', self.service.name)

        for operation in self.context.model.operations:
            try:
                cmdlet = self._create_cmdlet(operation)
            except UnsupportedSchemaKindError as e:
                self.context.record(e)
                continue
            self.add(cmdlet.class_name, cmdlet)
            logger.debug(f'Added {cmdlet.name} ({cmdlet.variant}) for {operation.operation_id}')

        self.initialized = True
        self.finalize()
        logger.info(f'Created {len(self)} cmdlet variant(s) in {self.full_name}')
        return self

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise NamespaceStateError(self.full_name, self.state.value, 'read')

    def get(self, name: str) -> CmdletDefinition | None:
        self._require_initialized()
        return super().get(name)

    @property
    def definitions(self) -> Mapping[str, CmdletDefinition]:
        self._require_initialized()
        return super().definitions

    @property
    def commands(self) -> dict[str, list[CmdletDefinition]]:
        """Command name to its variants, in creation order."""
        grouped: dict[str, list[CmdletDefinition]] = {}
        for cmdlet in self.definitions.values():
            grouped.setdefault(cmdlet.name, []).append(cmdlet)
        return grouped

    def __iter__(self) -> Iterator[CmdletDefinition]:
        self._require_initialized()
        return super().__iter__()

    def _create_cmdlet(self, operation: Operation) -> CmdletDefinition:
        verb, noun = split_verb_noun(operation.operation_id)
        noun = f'{self.service.prefix}{self.service.subject_prefix}{noun}'
        variant = pascal(operation.operation_id) or verb
        class_name = unique_name(f'{verb}{noun}_{variant}', self._definitions)
        base = f'#/paths/{operation.path.replace("/", "~1")}/{operation.method}'

        taken: set[str] = set()
        parameters = []
        position = 0
        sources = [*operation.parameters, *([operation.body] if operation.body else [])]
        for source in sources:
            name = parameter_name(source.name, taken)
            declaration = self.context.resolver.resolve_type_declaration(
                source.schema,
                source.required,
                self.context.model_state(
                    f'{base}/parameters/{source.name}', f'{variant}{name}'
                ),
            )
            aliases = (source.name,) if source.name.lower() != name.lower() else ()
            parameters.append(
                ParameterDefinition(
                    name=name,
                    serialized_name=source.name,
                    type=declaration,
                    location=source.location,
                    required=source.required,
                    position=position if source.required else None,
                    aliases=aliases,
                    description=source.description,
                )
            )
            if source.required:
                position += 1

        output_type = None
        if operation.response is not None:
            output_type = self.context.resolver.resolve_type_declaration(
                operation.response,
                True,
                self.context.model_state(f'{base}/response', f'{variant}Response'),
            )

        name = f'{verb}-{noun}'
        help_uri = None
        if self.help_link_prefix:
            help_uri = f'{self.help_link_prefix}{self.module_name.lower()}/{name.lower()}'

        return CmdletDefinition(
            name=name,
            verb=verb,
            noun=noun,
            variant=variant,
            class_name=class_name,
            full_name=f'{self.full_name}.{class_name}',
            operation=operation,
            parameters=tuple(parameters),
            output_type=output_type,
            help_uri=help_uri,
        )
