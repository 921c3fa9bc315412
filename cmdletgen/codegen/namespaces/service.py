from __future__ import annotations

from cmdletgen.codegen.namespaces.base import Namespace


class ServiceNamespace(Namespace):
    """Root namespace of the generated module.

    Every other namespace hangs below it, so it has to exist first. Its name
    is the project namespace; the service name and the command prefixes are
    carried here for the namespaces that build names from them.
    """

    def __init__(
        self,
        name: str,
        service_name: str = '',
        prefix: str = '',
        subject_prefix: str = '',
    ):
        super().__init__(name)
        self.service_name = service_name
        self.prefix = prefix
        self.subject_prefix = subject_prefix

    def to_dict(self) -> dict:
        return {
            'namespace': self.full_name,
            'serviceName': self.service_name,
            'prefix': self.prefix,
            'subjectPrefix': self.subject_prefix,
            'children': [child.full_name for child in self.children],
        }
