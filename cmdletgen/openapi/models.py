from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

HTTP_METHODS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')


class Discriminator(BaseModel):
    propertyName: str
    mapping: Optional[Dict[str, str]] = None


class Schema(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    ref: Optional[str] = Field(None, alias='$ref')
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    enum: Optional[List[Any]] = None
    default: Optional[Any] = None
    properties: Optional[Dict[str, Schema]] = None
    required: Optional[List[str]] = None
    items: Optional[Schema] = None
    additionalProperties: Optional[Union[bool, Schema]] = None
    allOf: Optional[List[Schema]] = None
    oneOf: Optional[List[Schema]] = None
    anyOf: Optional[List[Schema]] = None
    discriminator: Optional[Discriminator] = None


class MediaType(BaseModel):
    model_config = ConfigDict(extra='allow')

    schema_: Optional[Schema] = Field(None, alias='schema')


class Parameter(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    ref: Optional[str] = Field(None, alias='$ref')
    name: Optional[str] = None
    in_: Optional[str] = Field(None, alias='in')
    description: Optional[str] = None
    required: Optional[bool] = False
    schema_: Optional[Schema] = Field(None, alias='schema')


class RequestBody(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    ref: Optional[str] = Field(None, alias='$ref')
    description: Optional[str] = None
    content: Dict[str, MediaType] = Field(default_factory=dict)
    required: Optional[bool] = False


class Response(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    ref: Optional[str] = Field(None, alias='$ref')
    description: Optional[str] = None
    content: Optional[Dict[str, MediaType]] = None


class Operation(BaseModel):
    model_config = ConfigDict(extra='allow')

    operationId: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    parameters: Optional[List[Parameter]] = None
    requestBody: Optional[RequestBody] = None
    responses: Dict[str, Response] = Field(default_factory=dict)


class PathItem(BaseModel):
    model_config = ConfigDict(extra='allow')

    parameters: Optional[List[Parameter]] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None

    def operations(self) -> list[tuple[str, Operation]]:
        """Operations of this path in HTTP_METHODS order."""
        return [
            (method, getattr(self, method))
            for method in HTTP_METHODS
            if getattr(self, method) is not None
        ]


class Info(BaseModel):
    model_config = ConfigDict(extra='allow')

    title: str
    version: str
    description: Optional[str] = None

    @property
    def profiles(self) -> list[str]:
        metadata = (self.model_extra or {}).get('x-ms-metadata') or {}
        return list(metadata.get('profiles') or [])


class Components(BaseModel):
    model_config = ConfigDict(extra='allow')

    schemas: Dict[str, Schema] = Field(default_factory=dict)
    parameters: Dict[str, Parameter] = Field(default_factory=dict)
    requestBodies: Dict[str, RequestBody] = Field(default_factory=dict)
    responses: Dict[str, Response] = Field(default_factory=dict)


class OpenAPI(BaseModel):
    model_config = ConfigDict(extra='allow')

    openapi: str
    info: Info
    paths: Dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)


Schema.model_rebuild()
