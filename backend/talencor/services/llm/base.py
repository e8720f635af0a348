"""
Base OpenAI client with timeout, retries, and JSON response handling.
"""
import asyncio
import json
from typing import Any

from openai import AsyncOpenAI
from openai import APIError, APITimeoutError

from talencor.config import get_settings
from talencor.utils.logger import get_logger

logger = get_logger(__name__)


class LLMServiceError(Exception):
    """Raised when LLM API fails after retries."""

    pass


def get_openai_client() -> AsyncOpenAI:
    settings = get_settings()
    if not settings.openai_api_key:
        raise LLMServiceError("OPENAI_API_KEY is not configured")
    return AsyncOpenAI(api_key=settings.openai_api_key)


async def chat_completion_json(
    client: AsyncOpenAI,
    system_prompt: str,
    user_content: str,
    max_tokens: int = 2000,
    temperature: float = 0.7,
) -> dict[str, Any]:
    """
    Call OpenAI chat with JSON response. Retries with exponential backoff.
    Returns parsed JSON dict. Raises LLMServiceError on failure.
    """
    settings = get_settings()
    last_error: Exception | None = None
    for attempt in range(settings.openai_max_retries):
        try:
            response = await client.chat.completions.create(
                model=settings.openai_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                response_format={"type": "json_object"},
                max_tokens=max_tokens,
                temperature=temperature,
                timeout=float(settings.openai_timeout_seconds),
            )
            choice = response.choices[0]
            if not choice.message.content:
                raise LLMServiceError("Empty response from model")
            data = json.loads(choice.message.content)
            if not isinstance(data, dict):
                raise LLMServiceError("Model did not return a JSON object")
            return data
        except (APIError, APITimeoutError) as e:
            last_error = e
            logger.warning(
                "OpenAI API attempt failed",
                extra={"attempt": attempt + 1, "error": str(e)[:200]},
            )
            if attempt < settings.openai_max_retries - 1:
                await asyncio.sleep(2 ** attempt)
        except json.JSONDecodeError as e:
            raise LLMServiceError(f"Model returned invalid JSON: {e}") from e
    raise LLMServiceError(f"OpenAI API failed after retries: {last_error}")


def as_str_list(value: Any, fallback: list[str] | None = None) -> list[str]:
    """Coerce a model field into a list of strings; fallback when absent or not a list."""
    if not isinstance(value, list) or not value:
        return list(fallback or [])
    return [str(v) for v in value if v is not None]
