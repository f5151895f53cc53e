"""Endpoint model — one configured HTTP target probed every cycle."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Endpoint(BaseModel):
    """Immutable endpoint record loaded once at startup.

    ``method`` is kept as written in the configuration; the check executor
    resolves it (trim, uppercase, GET when blank) at request time.
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    name: str = ""
    url: str = Field(..., min_length=1)
    method: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""

    @field_validator("name", "method", "body", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        # YAML "method:" with no value loads as None
        return "" if value is None else value

    @field_validator("headers", mode="before")
    @classmethod
    def _none_as_no_headers(cls, value: object) -> object:
        return {} if value is None else value
