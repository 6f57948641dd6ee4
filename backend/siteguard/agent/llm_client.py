import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, TypeVar

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from siteguard.core.config import settings

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

USAGE_LIMIT_MESSAGE = "AI Usage Limit Exceeded. Please try again later or upgrade plan."
STRUCTURED_ATTEMPTS = 2

_QUOTA_MARKERS = ("429", "quota", "RESOURCE_EXHAUSTED")
_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_decoder = json.JSONDecoder(strict=False)


class AIServiceError(Exception):
    """The model provider failed or returned something unusable."""


class AIUsageLimitExceeded(AIServiceError):
    def __init__(self, message: str = USAGE_LIMIT_MESSAGE):
        super().__init__(message)


def is_quota_error(error: BaseException) -> bool:
    if isinstance(error, openai.RateLimitError):
        return True
    if 429 in (getattr(error, "status_code", None), getattr(error, "code", None)):
        return True
    message = str(error)
    return any(marker in message for marker in _QUOTA_MARKERS)


@dataclass
class ImageInput:
    data: bytes
    mime_type: str = "image/jpeg"

    def as_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def _first_json_value(text: str) -> str | None:
    for opener in re.finditer(r"[\[{]", text):
        try:
            _, end = _decoder.raw_decode(text, opener.start())
        except json.JSONDecodeError:
            continue
        return text[opener.start():end]
    return None


def _json_candidates(raw_text: str) -> list[str]:
    """Pieces of a model answer worth parsing, most specific first: a fenced
    block, the whole answer, then the first JSON object or array inside it."""
    text = (raw_text or "").strip()
    if not text:
        return []

    found: list[str] = []
    fenced = _FENCED_JSON.search(text)
    if fenced:
        found.append(fenced.group(1).strip())
    found.append(text)
    embedded = _first_json_value(text)
    if embedded:
        found.append(embedded)
    return list(dict.fromkeys(found))


def _schema_instructions(response_schema: type[BaseModel], *, retry: bool) -> str:
    instructions = (
        "Reply with one JSON value that validates against the JSON Schema below. "
        "Do not wrap it in markdown fences and do not add any text before or after it.\n\n"
        f"JSON Schema:\n{json.dumps(response_schema.model_json_schema())}"
    )
    if retry:
        instructions += (
            "\n\nYour previous reply could not be parsed against this schema. "
            "Send the JSON object again and nothing else."
        )
    return instructions


class LLMClient:
    """Structured and plain-text generation over any OpenAI-compatible endpoint.

    The default base URL is Gemini's OpenAI-compatible endpoint, so a bare
    GEMINI_API_KEY is enough to run every agent.
    """

    def __init__(
        self,
        model_name: str | None = None,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        key = api_key or settings.LLM_API_KEY or settings.GEMINI_API_KEY
        if not key:
            raise AIServiceError("No LLM_API_KEY or GEMINI_API_KEY is configured.")
        self.model_name = model_name or settings.MODEL_DEFAULT
        self.client = AsyncOpenAI(api_key=key, base_url=base_url or settings.LLM_BASE_URL)

    @staticmethod
    def _user_content(user_prompt: str, image: ImageInput | None) -> str | list[dict[str, Any]]:
        if image is None:
            return user_prompt
        return [
            {"type": "image_url", "image_url": {"url": image.as_data_url()}},
            {"type": "text", "text": user_prompt},
        ]

    async def _complete(self, messages: list[dict[str, Any]], *, temperature: float) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=temperature,
            )
        except Exception as e:
            if is_quota_error(e):
                logger.warning("Usage limit hit on %s: %s", self.model_name, e)
                raise AIUsageLimitExceeded() from e
            logger.error("Request to %s failed: %s", self.model_name, e)
            raise AIServiceError(f"AI provider request failed: {e}") from e

        choices = getattr(completion, "choices", None)
        if not choices:
            logger.error("%s answered without choices: %s", self.model_name, completion)
            raise AIServiceError(f"Provider {self.model_name} returned no output.")
        return choices[0].message.content or ""

    async def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        response_schema: type[SchemaT],
        *,
        image: ImageInput | None = None,
    ) -> SchemaT:
        """
        Generate a response matching the given Pydantic schema.

        The JSON Schema is appended to the system prompt. An unparseable answer
        is asked for once more, at temperature 0, before a ValueError is raised.
        Quota errors surface immediately as AIUsageLimitExceeded.
        """
        errors: list[str] = []
        for attempt in range(1, STRUCTURED_ATTEMPTS + 1):
            retry = attempt > 1
            logger.info(
                "Structured request to %s (attempt %s of %s)",
                self.model_name,
                attempt,
                STRUCTURED_ATTEMPTS,
            )
            answer = await self._complete(
                [
                    {
                        "role": "system",
                        "content": f"{system_prompt}\n\n{_schema_instructions(response_schema, retry=retry)}",
                    },
                    {"role": "user", "content": self._user_content(user_prompt, image)},
                ],
                temperature=0 if retry else 0.2,
            )

            errors = []
            for candidate in _json_candidates(answer):
                try:
                    return response_schema.model_validate(json.loads(candidate, strict=False))
                except (json.JSONDecodeError, ValidationError) as e:
                    errors.append(str(e))
            if attempt < STRUCTURED_ATTEMPTS:
                logger.warning(
                    "Could not parse %s output as %s: %s",
                    self.model_name,
                    response_schema.__name__,
                    errors[0] if errors else "empty response",
                )

        logger.error("Giving up on structured output from %s: %s", self.model_name, errors[:3])
        raise ValueError("Unable to parse structured response: " + (" | ".join(errors[:3]) or "empty response"))

    async def generate_text(self, system_prompt: str, user_prompt: str, *, temperature: float = 0.4) -> str:
        logger.info("Text request to %s", self.model_name)
        answer = await self._complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
        )
        answer = answer.strip()
        if not answer:
            raise AIServiceError("Model returned empty content")
        return answer
