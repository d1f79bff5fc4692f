"""Extractor records consumed by the Builder.

Per-framework extractors turn route registrations into ``Route`` records and
type declarations into ``Schema`` records (see ``model.document.Schema``).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .document import Parameter, RequestBody, Response, SecurityRequirement, stringify_keys


class Route(BaseModel):
    """A single HTTP route extracted from source code."""

    model_config = ConfigDict(populate_by_name=True)

    method: str  # GET / POST / PUT / DELETE / PATCH / OPTIONS / HEAD / TRACE
    path: str  # /users/{id}
    handler: str = ""
    summary: str = ""
    description: str = ""
    tags: list[str] = []
    operation_id: str = Field("", alias="operationId")
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(None, alias="requestBody")
    responses: dict[str, Response] = {}
    security: list[SecurityRequirement] = []
    deprecated: bool = False
    source_file: str = Field("", alias="sourceFile")
    source_line: int = Field(0, alias="sourceLine")

    @field_validator("responses", mode="before")
    @classmethod
    def stringify_status_codes(cls, value: Any) -> Any:
        return stringify_keys(value)

    @property
    def source_location(self) -> str:
        """``file:line`` of the registration, for diagnostics only."""
        if not self.source_file:
            return "<unknown>"
        if self.source_line:
            return f"{self.source_file}:{self.source_line}"
        return self.source_file
