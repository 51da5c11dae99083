import httpx
import openai

from app.structuring.client_base import BaseStructuringClient
from app.structuring.exceptions import (
    MalformedResponseError,
    PayloadTooLargeError,
    StructuringAuthError,
    StructuringError,
    StructuringNetworkError,
    StructuringRateLimitError,
)

_PAYLOAD_HINTS = ("length", "too long", "too large", "context window", "maximum context")


class OpenAIClientAdapter(BaseStructuringClient):
    """Chat client for OpenAI and OpenAI-compatible APIs (Groq, OpenRouter, ...)."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        max_retries: int = 2,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=max_retries,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        messages = [{"role": "user", "content": user_prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={"type": "json_object"},
                messages=messages,
            )
        except openai.AuthenticationError as exc:
            raise StructuringAuthError(f"Invalid API key: {exc}") from exc
        except openai.RateLimitError as exc:
            raise StructuringRateLimitError(f"AI provider rate limit: {exc}") from exc
        except openai.APIStatusError as exc:
            raise self._translate_status_error(exc) from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise StructuringNetworkError(
                f"AI provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise StructuringNetworkError(
                f"AI provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise MalformedResponseError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise MalformedResponseError("AI returned empty response")
        return content

    @staticmethod
    def _translate_status_error(exc: openai.APIStatusError) -> StructuringError:
        status = exc.status_code
        message = str(exc).lower()
        if status == 413:
            return PayloadTooLargeError(f"Document too long for AI processing: {exc}")
        if status in (401, 403):
            return StructuringAuthError(f"Invalid API key: {exc}")
        if status == 429:
            return StructuringRateLimitError(f"AI provider rate limit: {exc}")
        if status == 400 and "json_validate_failed" in message:
            return MalformedResponseError(f"AI generated invalid JSON: {exc}")
        if status == 400 and any(hint in message for hint in _PAYLOAD_HINTS):
            return PayloadTooLargeError(f"Document too long for AI processing: {exc}")
        if status >= 500:
            return StructuringNetworkError(f"AI provider API error: {exc}")
        return StructuringError(f"AI extraction failed: {status} {exc}")
