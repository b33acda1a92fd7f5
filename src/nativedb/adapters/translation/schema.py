"""Pydantic models for the chat-completions API and the translation payload."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ChatBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ChatMessage(ChatBaseModel):
    role: str = "assistant"
    content: str | None = None


class ChatChoice(ChatBaseModel):
    message: ChatMessage


class ChatError(ChatBaseModel):
    message: str = ""
    type: str | None = None


class ChatCompletionResponse(ChatBaseModel):
    choices: list[ChatChoice] = Field(default_factory=list[ChatChoice])
    error: ChatError | None = None


class TranslationPayload(ChatBaseModel):
    """The JSON object the model is instructed to return."""

    description: str = Field(
        default="",
        validation_alias=AliasChoices("description", "description_localized", "description_cn"),
    )
    params: dict[str, str] = Field(
        default_factory=dict[str, str],
        validation_alias=AliasChoices("params", "params_localized", "params_cn"),
    )

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("params", mode="before")
    @classmethod
    def _drop_non_text(cls, value: object) -> object:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {
                str(key): text
                for key, text in value.items()  # pyright: ignore[reportUnknownVariableType]
                if isinstance(text, str) and text
            }
        return value
