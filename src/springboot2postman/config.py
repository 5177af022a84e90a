"""Generation options consumed by the strategies."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONCURRENCY = 5


class GenerateOptions(BaseModel):
    """Options for one generation run.

    include/exclude accept either a list of glob-style patterns or a single
    comma-separated string, as typed on the command line.
    """

    base_url: str | None = None
    format: Literal["postman", "openapi"] = "postman"
    include: list[str] = []
    exclude: list[str] = []
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _split_patterns(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [p.strip() for p in value.split(",") if p.strip()]
        return value
