"""Client for an OpenAI-compatible chat-completions translation service."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from nativedb.adapters.http_resilience import ResilientClient
from nativedb.domain.errors import TranslationServiceError
from nativedb.domain.ports import TranslationRequest, TranslationResult

from .schema import ChatCompletionResponse, TranslationPayload

if TYPE_CHECKING:
    from nativedb.config import TranslationConfig

log = getLogger(__name__)

COMPLETIONS_PATH: Final[str] = "/chat/completions"
TEMPERATURE: Final[float] = 0.1
MAX_TOKENS: Final[int] = 4096

SYSTEM_PROMPT_TEMPLATE: Final[str] = """\
You are a documentation translator for FiveM / GTA V natives. Translate the input into \
{language}.
### Rules
1. Output: return one valid JSON object and nothing else. No Markdown fences around it.
2. Keep formatting: preserve Markdown (code blocks, bold, lists) inside the texts.
3. Glossary: Ped -> character/entity, Vehicle, Hash, Coordinates/Coords, Player, \
Native -> function; keep true/false as is. Use the established {language} terms.
4. Never translate parameter names, variable names or code.
5. If a description mixes prose and code in one code block, split the code into its own \
block; if it contains no code, drop the code block markers.

### Output shape
{{
    "description": "translated main description...",
    "params": {{
        "p0": "translated description of p0...",
        "modelHash": "translated description of modelHash..."
    }}
}}"""


def extract_json_object(raw: str) -> str:
    """Strip prose or code fences wrapped around a JSON object."""

    start = raw.find("{")
    end = raw.rfind("}")
    if start != -1 and end > start:
        return raw[start : end + 1]
    cleaned = raw.strip()
    cleaned = cleaned.removeprefix("```json").removeprefix("```")
    cleaned = cleaned.removesuffix("```")
    return cleaned.strip()


def parse_translation(raw: str) -> TranslationResult:
    try:
        payload = TranslationPayload.model_validate_json(extract_json_object(raw))
    except ValidationError as exc:
        raise TranslationServiceError(f"Invalid translation payload: {exc}") from exc
    return TranslationResult(description=payload.description, params=payload.params)


def build_user_message(request: TranslationRequest) -> str:
    return json.dumps(
        {
            "native_name": request.name,
            "description": request.description,
            "params": request.params,
        },
        ensure_ascii=False,
    )


@dataclass(slots=True)
class ChatTranslator:
    """Blocking translator; one instance is shared by every pipeline worker."""

    config: TranslationConfig
    client: ResilientClient

    def __call__(self, request: TranslationRequest) -> TranslationResult:
        body = {
            "model": self.config.model,
            "messages": [
                {
                    "role": "system",
                    "content": SYSTEM_PROMPT_TEMPLATE.format(language=self.config.target_language),
                },
                {"role": "user", "content": build_user_message(request)},
            ],
            "temperature": TEMPERATURE,
            "response_format": {"type": "json_object"},
            "max_tokens": MAX_TOKENS,
            "stream": False,
        }
        try:
            response = self.client.post(COMPLETIONS_PATH, json=body)
        except httpx.HTTPError as exc:
            raise TranslationServiceError(f"Translation request failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise TranslationServiceError(f"API status {response.status_code}")

        try:
            completion = ChatCompletionResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise TranslationServiceError(f"Unexpected completion payload: {exc}") from exc

        if completion.error is not None:
            raise TranslationServiceError(f"API error: {completion.error.message}")
        if not completion.choices or not completion.choices[0].message.content:
            raise TranslationServiceError("No choices in completion response")

        return parse_translation(completion.choices[0].message.content)

    def close(self) -> None:
        self.client.close()


def build_chat_translator(
    config: TranslationConfig,
    *,
    transport: httpx.BaseTransport | None = None,
) -> ChatTranslator:
    resilience = replace(
        config.resilience,
        default_headers={
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        },
    )
    return ChatTranslator(config=config, client=ResilientClient(resilience, transport=transport))
