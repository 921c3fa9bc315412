"""Namespace tree of a generated module.

Main Components:
    - ServiceNamespace: Root of the tree, named after the project namespace
    - SupportNamespace: Enums and runtime helper types
    - ModelExtensionsNamespace: Model classes for object and polymorphic schemas
    - CmdletNamespace: One command variant per API operation
    - ModelCmdletNamespace: Commands that construct model objects locally
"""

from cmdletgen.codegen.namespaces.base import (
    Namespace,
    NamespaceState,
    ParameterDefinition,
    PropertyDefinition,
)
from cmdletgen.codegen.namespaces.cmdlet import (
    COMMON_PARAMETERS,
    CmdletDefinition,
    CmdletNamespace,
)
from cmdletgen.codegen.namespaces.model_cmdlet import ModelCmdletNamespace
from cmdletgen.codegen.namespaces.model_extensions import (
    ModelDefinition,
    ModelExtensionsNamespace,
)
from cmdletgen.codegen.namespaces.service import ServiceNamespace
from cmdletgen.codegen.namespaces.support import (
    EnumDefinition,
    EnumMember,
    SupportNamespace,
    SupportTypeDefinition,
)

__all__ = [
    'COMMON_PARAMETERS',
    'CmdletDefinition',
    'CmdletNamespace',
    'EnumDefinition',
    'EnumMember',
    'ModelCmdletNamespace',
    'ModelDefinition',
    'ModelExtensionsNamespace',
    'Namespace',
    'NamespaceState',
    'ParameterDefinition',
    'PropertyDefinition',
    'ServiceNamespace',
    'SupportNamespace',
    'SupportTypeDefinition',
]
