"""Intermediate representation of an API extracted from source.

The IR is accumulated additively during one run: endpoints are appended and
component schemas are registered first-write-wins. Once handed to the
document builder it is treated as read-only.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from springboot2postman.parser.type_resolver import resolve


class Parameter(BaseModel):
    """A path, query or header parameter."""

    name: str
    type: str = "String"
    location: Literal["path", "query", "header"]
    required: bool = False
    json_type: str = "string"
    format: str | None = None
    example: Any = None
    default_value: str | None = None
    description: str = ""


class RequestBody(BaseModel):
    type_name: str
    required: bool = True
    content_type: str = "application/json"
    schema_: dict = {}
    example: Any = None


class ResponseSpec(BaseModel):
    status: int
    description: str = "Successful response"
    content_type: str = "application/json"
    schema_: dict | None = None
    example: Any = None


class EndpointParameters(BaseModel):
    """Parameters partitioned by location; the keys are fixed."""

    path: list[Parameter] = []
    query: list[Parameter] = []
    header: list[Parameter] = []


class Endpoint(BaseModel):
    id: str
    method: str
    path: str
    name: str
    description: str = ""
    tags: list[str] = []
    parameters: EndpointParameters = Field(default_factory=EndpointParameters)
    request_body: RequestBody | None = None
    responses: list[ResponseSpec] = []

    @field_validator("path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()


class ApiIR(BaseModel):
    info: dict = {}
    servers: list[dict] = []
    endpoints: list[Endpoint] = []
    schemas: dict[str, dict] = {}

    def add_endpoint(self, endpoint: Endpoint) -> None:
        self.endpoints.append(endpoint)

    def add_schema(self, name: str, schema: dict) -> bool:
        """Register a component schema unless the name is taken. Returns True if added."""
        if name in self.schemas:
            return False
        self.schemas[name] = schema
        return True

    def set_server_url(self, url: str, description: str = "API server") -> None:
        self.servers = [{"url": url, "description": description}]


def create_empty_ir(title: str, version: str) -> ApiIR:
    return ApiIR(
        info={"title": title, "version": version, "description": f"Generated from {title} source"},
        servers=[{"url": "http://localhost:8080", "description": "Local development server"}],
    )


def create_parameter(name: str, java_type: str, location: str, required: bool) -> Parameter:
    resolved = resolve(java_type)
    return Parameter(
        name=name,
        type=java_type,
        location=location,
        required=required,
        json_type=resolved.get("type", "string"),
        format=resolved.get("format"),
    )


def create_request_body(java_type: str, required: bool) -> RequestBody:
    return RequestBody(type_name=java_type, required=required, schema_=resolve(java_type))
