"""Runtime configuration loaded from environment variables.

Settings are read fresh for every invocation so a single deployed function
can be reconfigured without a code change.
"""

import os
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.models.errors import ConfigurationError
from core.utils.constants import (
    DEFAULT_CACHE_TTL,
    DEFAULT_EVENT_PREFIX,
    DEFAULT_TRANSFORM_BACKEND,
    DEFAULT_UPLOAD_RATE_LIMIT,
    DEFAULT_UPLOAD_TOKEN,
    ENV_ALLOWED_ORIGINS,
    ENV_ANALYTICS_NAMESPACE,
    ENV_BRANDING_ASSETS_TABLE_NAME,
    ENV_CACHE_TTL,
    ENV_ENVIRONMENT,
    ENV_EVENT_PREFIX,
    ENV_IMAGE_TRANSFORM_BACKEND,
    ENV_MAX_UPLOAD_SIZE,
    ENV_PHOTOS_BUCKET_NAME,
    ENV_UPLOAD_RATE_LIMIT,
    ENV_UPLOAD_RATE_LIMIT_TABLE_NAME,
    ENV_UPLOAD_TOKEN,
    MAX_FILE_SIZE,
    PRODUCTION_ENVIRONMENT,
)
from core.utils.file_validation import validate_event_prefix
from core.utils.validators import sanitize_validation_errors

DISABLED_BACKENDS = frozenset({"", "none", "disabled"})

_ENV_FIELDS: Mapping[str, str] = {
    ENV_ENVIRONMENT: "environment",
    ENV_EVENT_PREFIX: "event_prefix",
    ENV_PHOTOS_BUCKET_NAME: "photos_bucket_name",
    ENV_BRANDING_ASSETS_TABLE_NAME: "branding_assets_table_name",
    ENV_IMAGE_TRANSFORM_BACKEND: "image_transform_backend",
    ENV_MAX_UPLOAD_SIZE: "max_upload_size",
    ENV_UPLOAD_RATE_LIMIT: "upload_rate_limit",
    ENV_UPLOAD_RATE_LIMIT_TABLE_NAME: "upload_rate_limit_table_name",
    ENV_UPLOAD_TOKEN: "upload_token",
    ENV_CACHE_TTL: "cache_ttl",
    ENV_ALLOWED_ORIGINS: "allowed_origins",
    ENV_ANALYTICS_NAMESPACE: "analytics_namespace",
}

# Optional names where an empty string means "not configured"
_NULLABLE_FIELDS = frozenset(
    {
        "photos_bucket_name",
        "branding_assets_table_name",
        "upload_rate_limit_table_name",
        "analytics_namespace",
    }
)


class Settings(BaseModel):
    """Validated service configuration."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    environment: str = "development"
    event_prefix: str = DEFAULT_EVENT_PREFIX
    photos_bucket_name: str | None = None
    branding_assets_table_name: str | None = None
    image_transform_backend: str = DEFAULT_TRANSFORM_BACKEND
    max_upload_size: int = Field(default=MAX_FILE_SIZE, gt=0)
    upload_rate_limit: int = Field(default=DEFAULT_UPLOAD_RATE_LIMIT, gt=0)
    upload_rate_limit_table_name: str | None = None
    upload_token: str = DEFAULT_UPLOAD_TOKEN
    cache_ttl: int = Field(default=DEFAULT_CACHE_TTL, ge=0)
    allowed_origins: tuple[str, ...] = ("*",)
    analytics_namespace: str | None = None

    @field_validator("event_prefix")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        if not validate_event_prefix(value):
            raise ValueError(f"Invalid event prefix '{value}'")
        return value

    @field_validator("image_transform_backend")
    @classmethod
    def normalize_backend(cls, value: str) -> str:
        return value.lower()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            origins = tuple(o.strip() for o in value.split(",") if o.strip())
            return origins or ("*",)
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == PRODUCTION_ENVIRONMENT

    @property
    def storage_configured(self) -> bool:
        return bool(self.photos_bucket_name)

    @property
    def transform_enabled(self) -> bool:
        return self.image_transform_backend not in DISABLED_BACKENDS

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigurationError: If any value fails validation
        """
        source = os.environ if env is None else env
        values: dict[str, Any] = {}

        for env_name, field_name in _ENV_FIELDS.items():
            raw = source.get(env_name)
            if raw is None:
                continue
            if field_name in _NULLABLE_FIELDS and not raw.strip():
                continue
            values[field_name] = raw

        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(
                message="Invalid service configuration",
                details={"errors": sanitize_validation_errors(exc.errors())},
            ) from exc


def validate_environment(env: Mapping[str, Any], required: Iterable[str]) -> None:
    """Ensure every required environment variable is present and non-empty.

    Raises:
        ConfigurationError: Naming every missing variable
    """
    missing = [name for name in required if not env.get(name)]

    if missing:
        raise ConfigurationError(
            message=f"Missing required environment variables: {', '.join(missing)}",
            details={"missing": missing},
        )
