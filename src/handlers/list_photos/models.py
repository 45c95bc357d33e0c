"""
Pydantic models for the photo listing request.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.constants import (
    ALLOWED_SORT_ORDERS,
    DEFAULT_LIST_LIMIT,
    MAX_LIST_LIMIT,
    SORT_NEWEST,
)


class ListPhotosRequest(BaseModel):
    """
    Validation model for the gallery listing API.

    - ``limit`` defaults to 50 and is capped at 100; below 1 is rejected
    - ``cursor`` is the opaque token returned by the previous page
    - ``sort`` falls back to ``newest`` for unknown values
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    limit: int = Field(
        default=DEFAULT_LIST_LIMIT,
        ge=1,
        description="Maximum photos per page",
    )
    cursor: str | None = Field(
        default=None,
        description="Pagination token from a previous response",
    )
    sort: str = Field(
        default=SORT_NEWEST,
        description="newest | oldest | name | size",
    )

    @field_validator("limit", mode="before")
    @classmethod
    def default_blank_limit(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_LIST_LIMIT
        return value

    @field_validator("limit")
    @classmethod
    def cap_limit(cls, value: int) -> int:
        return min(value, MAX_LIST_LIMIT)

    @field_validator("cursor")
    @classmethod
    def blank_cursor_is_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("sort", mode="before")
    @classmethod
    def normalize_sort(cls, value: Any) -> str:
        normalized = str(value or "").strip().lower()
        return normalized if normalized in ALLOWED_SORT_ORDERS else SORT_NEWEST
