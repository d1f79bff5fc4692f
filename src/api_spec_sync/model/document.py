"""Canonical OpenAPI document model.

The Builder produces these models, the codec reads and writes them, and the
Differ and Merger compare and reconcile them. Attribute names are snake_case;
the OpenAPI wire names are field aliases and either form is accepted on input.
Keys a model does not name (``x-*`` vendor extensions, ``allOf``, ``enum`` ...)
are kept as extra fields so nothing is lost on a read/write cycle.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD", "TRACE")

SecurityRequirement = dict[str, list[str]]


def stringify_keys(value: Any) -> Any:
    """YAML reads unquoted status codes as ints; response maps are keyed by str."""
    if isinstance(value, dict):
        return {str(k): v for k, v in value.items()}
    return value


class SpecModel(BaseModel):
    """Base for every document node."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @model_validator(mode="before")
    @classmethod
    def empty_collections(cls, data: Any) -> Any:
        """A key written with no value (``paths:``) reads as None; treat it as empty."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for name, field in cls.model_fields.items():
            for key in {name, field.alias or name}:
                if key in data and data[key] is None:
                    default = field.get_default(call_default_factory=True)
                    if isinstance(default, (dict, list)):
                        data[key] = type(default)()
        return data

    @property
    def extensions(self) -> dict[str, Any]:
        """Vendor extension (``x-*``) keys carried on this node."""
        return {k: v for k, v in (self.model_extra or {}).items() if k.startswith("x-")}


class ExternalDocs(SpecModel):
    url: str
    description: str = ""


class Contact(SpecModel):
    name: str = ""
    url: str = ""
    email: str = ""


class License(SpecModel):
    name: str
    url: str = ""
    identifier: str = ""


class Info(SpecModel):
    """API metadata. ``title`` and ``version`` are always written."""

    title: str = ""
    description: str = ""
    terms_of_service: str = Field("", alias="termsOfService")
    contact: Contact | None = None
    license: License | None = None
    version: str = ""


class ServerVariable(SpecModel):
    default: str = ""
    enum: list[str] = []
    description: str = ""


class Server(SpecModel):
    url: str
    description: str = ""
    variables: dict[str, ServerVariable] = {}


class Tag(SpecModel):
    name: str
    description: str = ""
    external_docs: ExternalDocs | None = Field(None, alias="externalDocs")


class Schema(SpecModel):
    """A JSON Schema object as used by OpenAPI.

    Only the keywords the reconciliation engine reads are modelled; every other
    keyword (``enum``, ``allOf``, ``minLength`` ...) rides along as an extra.
    """

    ref: str = Field("", alias="$ref")
    type: str | list[str] = ""
    format: str = ""
    title: str = ""
    description: str = ""
    nullable: bool = False
    deprecated: bool = False
    properties: dict[str, "Schema"] = {}
    required: list[str] = []
    items: "Schema | None" = None
    example: Any = None


class Example(SpecModel):
    summary: str = ""
    description: str = ""
    value: Any = None
    external_value: str = Field("", alias="externalValue")


class MediaType(SpecModel):
    schema_: Schema | None = Field(None, alias="schema")
    example: Any = None
    examples: dict[str, Example] = {}


class Header(SpecModel):
    description: str = ""
    required: bool = False
    deprecated: bool = False
    schema_: Schema | None = Field(None, alias="schema")


class Parameter(SpecModel):
    """An operation parameter.

    Identity is the ``(name, location)`` pair, or the ``$ref`` target for a
    reference parameter.
    """

    ref: str = Field("", alias="$ref")
    name: str = ""
    location: str = Field("", alias="in")  # path / query / header / cookie
    description: str = ""
    required: bool = False
    deprecated: bool = False
    schema_: Schema | None = Field(None, alias="schema")
    example: Any = None

    @property
    def key(self) -> tuple[str, str]:
        if self.ref:
            return self.ref, "$ref"
        return self.name, self.location


class RequestBody(SpecModel):
    description: str = ""
    required: bool = False
    content: dict[str, MediaType] = {}


class Response(SpecModel):
    description: str = ""
    headers: dict[str, Header] = {}
    content: dict[str, MediaType] = {}


class Operation(SpecModel):
    tags: list[str] = []
    summary: str = ""
    description: str = ""
    external_docs: ExternalDocs | None = Field(None, alias="externalDocs")
    operation_id: str = Field("", alias="operationId")
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(None, alias="requestBody")
    responses: dict[str, Response] = {}
    deprecated: bool = False
    security: list[SecurityRequirement] = []

    @field_validator("responses", mode="before")
    @classmethod
    def stringify_status_codes(cls, value: Any) -> Any:
        return stringify_keys(value)


class PathItem(SpecModel):
    """All operations for one path, one slot per HTTP method."""

    ref: str = Field("", alias="$ref")
    summary: str = ""
    description: str = ""
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None
    servers: list[Server] = []
    parameters: list[Parameter] = []

    def operation(self, method: str) -> Operation | None:
        return getattr(self, method.lower())

    def operations(self) -> list[tuple[str, Operation]]:
        """Defined operations as ``(METHOD, operation)`` pairs in canonical method order."""
        result = []
        for method in HTTP_METHODS:
            op = self.operation(method)
            if op is not None:
                result.append((method, op))
        return result


class OAuthFlow(SpecModel):
    authorization_url: str = Field("", alias="authorizationUrl")
    token_url: str = Field("", alias="tokenUrl")
    refresh_url: str = Field("", alias="refreshUrl")
    scopes: dict[str, str] = {}


class OAuthFlows(SpecModel):
    implicit: OAuthFlow | None = None
    password: OAuthFlow | None = None
    client_credentials: OAuthFlow | None = Field(None, alias="clientCredentials")
    authorization_code: OAuthFlow | None = Field(None, alias="authorizationCode")


class SecurityScheme(SpecModel):
    type: str
    description: str = ""
    name: str = ""
    location: str = Field("", alias="in")
    scheme: str = ""
    bearer_format: str = Field("", alias="bearerFormat")
    flows: OAuthFlows | None = None
    open_id_connect_url: str = Field("", alias="openIdConnectUrl")


class Link(SpecModel):
    operation_ref: str = Field("", alias="operationRef")
    operation_id: str = Field("", alias="operationId")
    parameters: dict[str, Any] = {}
    request_body: Any = Field(None, alias="requestBody")
    description: str = ""
    server: Server | None = None


class Components(SpecModel):
    schemas: dict[str, Schema] = {}
    responses: dict[str, Response] = {}
    parameters: dict[str, Parameter] = {}
    examples: dict[str, Example] = {}
    request_bodies: dict[str, RequestBody] = Field({}, alias="requestBodies")
    headers: dict[str, Header] = {}
    security_schemes: dict[str, SecurityScheme] = Field({}, alias="securitySchemes")
    links: dict[str, Link] = {}
    callbacks: dict[str, dict[str, PathItem]] = {}


class Document(SpecModel):
    """A complete OpenAPI 3.x specification."""

    openapi: str = ""
    info: Info = Field(default_factory=Info)
    servers: list[Server] = []
    paths: dict[str, PathItem] = {}
    components: Components | None = None
    security: list[SecurityRequirement] = []
    tags: list[Tag] = []
    external_docs: ExternalDocs | None = Field(None, alias="externalDocs")

    @property
    def schemas(self) -> dict[str, Schema]:
        """Component schemas, empty when the document has no components."""
        if self.components is None:
            return {}
        return self.components.schemas
