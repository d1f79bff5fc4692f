"""Project configuration: model, validation and file loading.

A config file is YAML or JSON. Keys may be written in camelCase (as in the
OpenAPI world) or snake_case.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from api_spec_sync.errors import ConfigError
from api_spec_sync.spec.merger import MergeOptions

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ("specsync.yaml", "specsync.json", ".specsync.yaml", ".specsync.json")

SUPPORTED_FORMATS = ("yaml", "json")
SUPPORTED_OPENAPI_VERSIONS = ("3.0.3", "3.1.0")


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContactConfig(_ConfigModel):
    name: str = ""
    url: str = ""
    email: str = ""


class LicenseConfig(_ConfigModel):
    name: str = ""
    url: str = ""


class InfoConfig(_ConfigModel):
    title: str = "API"
    description: str = ""
    version: str = "1.0.0"
    terms_of_service: str = ""
    contact: ContactConfig = Field(default_factory=ContactConfig)
    license: LicenseConfig = Field(default_factory=LicenseConfig)

    @field_validator("title", "version")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class ServerConfig(_ConfigModel):
    url: str
    description: str = ""


class TagConfig(_ConfigModel):
    name: str
    description: str = ""


class SecuritySchemeConfig(_ConfigModel):
    type: str  # apiKey / http / oauth2 / openIdConnect
    name: str = ""
    location: str = Field("", alias="in")  # header / query / cookie
    scheme: str = ""  # bearer / basic
    bearer_format: str = ""
    description: str = ""


class SecurityConfig(_ConfigModel):
    schemes: dict[str, SecuritySchemeConfig] = {}
    default: list[str] = []


class OpenApiConfig(_ConfigModel):
    version: str = "3.0.3"
    info: InfoConfig = Field(default_factory=InfoConfig)
    servers: list[ServerConfig] = []
    tags: list[TagConfig] = []
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    @field_validator("version")
    @classmethod
    def supported_version(cls, value: str) -> str:
        if value not in SUPPORTED_OPENAPI_VERSIONS:
            raise ValueError(f"unsupported OpenAPI version {value!r}, must be one of: {', '.join(SUPPORTED_OPENAPI_VERSIONS)}")
        return value


class GenerationConfig(_ConfigModel):
    default_responses: list[str] = ["200", "400", "500"]
    merge: bool = False

    @field_validator("default_responses", mode="before")
    @classmethod
    def stringify_codes(cls, value):
        if isinstance(value, list):
            return [str(code) for code in value]
        return value


class Config(_ConfigModel):
    """Top-level api-spec-sync configuration."""

    output: str = "openapi.yaml"
    format: str = "yaml"
    openapi: OpenApiConfig = Field(default_factory=OpenApiConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    merge: MergeOptions = Field(default_factory=MergeOptions)

    @field_validator("format")
    @classmethod
    def supported_format(cls, value: str) -> str:
        if value not in SUPPORTED_FORMATS:
            raise ValueError(f"unsupported format {value!r}, must be one of: {', '.join(SUPPORTED_FORMATS)}")
        return value


def find_config_file(search_dir: Path) -> Path | None:
    """Return the first known config file name present in ``search_dir``."""
    for name in CONFIG_FILE_NAMES:
        candidate = search_dir / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, search_dir: Path = Path(".")) -> Config:
    """Load configuration from ``path`` or the first config file in ``search_dir``.

    Falls back to defaults when no path is given and no file is found.
    Raises ConfigError for a missing explicit path, unparseable file or
    invalid values.
    """
    if path is None:
        path = find_config_file(search_dir)
        if path is None:
            logger.debug("No config file in %s, using defaults", search_dir)
            return Config()
    elif not path.is_file():
        raise ConfigError(f"config file not found: {path}")

    logger.debug("Loading config from %s", path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_describe(e)) from e


def _describe(error: ValidationError) -> str:
    lines = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"])
        lines.append(f"  - {field}: {item['msg']}")
    return "config validation errors:\n" + "\n".join(lines)
