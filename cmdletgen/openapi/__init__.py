from cmdletgen.openapi.models import (
    HTTP_METHODS,
    Components,
    Discriminator,
    Info,
    MediaType,
    OpenAPI,
    Operation,
    Parameter,
    PathItem,
    RequestBody,
    Response,
    Schema,
)

__all__ = [
    'HTTP_METHODS',
    'Components',
    'Discriminator',
    'Info',
    'MediaType',
    'OpenAPI',
    'Operation',
    'Parameter',
    'PathItem',
    'RequestBody',
    'Response',
    'Schema',
]
