"""Pydantic models describing vendor feed documents."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nativedb.domain.model import DEFAULT_RETURN_TYPE
from nativedb.domain.native_import import resolve_build_number


def _none_to_blank(value: object) -> object:
    return "" if value is None else value


class FeedBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ParamPayload(FeedBaseModel):
    name: str
    type: str = ""
    description: str = ""

    _normalize_blank = field_validator("type", "description", mode="before")(_none_to_blank)


class ExamplePayload(FeedBaseModel):
    lang: str = ""
    code: str = ""

    _normalize_blank = field_validator("lang", "code", mode="before")(_none_to_blank)


class NativeDocPayload(FeedBaseModel):
    name: str = ""
    jhash: str | None = None
    comment: str = ""
    params: list[ParamPayload] = Field(default_factory=list[ParamPayload])
    results: str = DEFAULT_RETURN_TYPE
    description: str = ""
    examples: list[ExamplePayload] = Field(default_factory=list[ExamplePayload])
    apiset: str = ""
    game: str = ""
    build: int = 0

    _normalize_blank = field_validator(
        "name", "comment", "description", "apiset", "game", mode="before"
    )(_none_to_blank)

    @field_validator("jhash", mode="before")
    @classmethod
    def _blank_jhash_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, value: object) -> object:
        return DEFAULT_RETURN_TYPE if value is None else value

    @field_validator("params", "examples", mode="before")
    @classmethod
    def _null_list(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("build", mode="before")
    @classmethod
    def _resolve_build(cls, value: object) -> int:
        return resolve_build_number(value)
