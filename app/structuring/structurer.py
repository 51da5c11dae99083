"""LLM-backed structured extraction of invoice documents."""

import json
from pathlib import Path

from app.logging.logger import Log
from app.structuring.base import BaseStructurer
from app.structuring.client_base import BaseStructuringClient
from app.structuring.exceptions import MalformedResponseError, StructuringError
from app.structuring.prompt_loader import load_json_schema, load_prompt_template

TRUNCATION_SENTINEL = "\n\n[... text truncated due to length ...]"
DEFAULT_MAX_TEXT_LENGTH = 6000


def truncate_text(text: str, max_length: int = DEFAULT_MAX_TEXT_LENGTH) -> str:
    """Cut *text* to *max_length* characters, appending a truncation marker.

    Text within the limit is returned unchanged.
    """
    if len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_SENTINEL


class InvoiceStructurer(BaseStructurer):
    """Extracts an invoice/products/customer document from raw text via an AI provider."""

    def __init__(
        self,
        *,
        client: BaseStructuringClient,
        model: str,
        temperature: float = 0.1,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = "",
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_text_length = max_text_length
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._json_schema = load_json_schema(json_schema_path)

    def structure(self, text: str) -> dict[str, object]:
        submitted = truncate_text(text, self._max_text_length)
        if len(submitted) != len(text):
            Log.warning(
                "Input text truncated before structuring",
                original_length=len(text),
                max_length=self._max_text_length,
            )
        prompt = self._build_prompt(submitted)
        Log.debug(f"Structuring prompt:\n{prompt}")

        raw_response = self._call_ai(prompt)
        Log.debug(f"AI raw response:\n{raw_response}")

        return self._parse_json(raw_response)

    def test_connection(self) -> bool:
        """Return True if the provider answers a trivial request with a JSON object."""
        try:
            content = self._client.create_chat_completion(
                model=self._model,
                temperature=0.0,
                system_prompt="",
                user_prompt='Return JSON: {"status": "ok"}',
            )
            self._parse_json(content)
        except StructuringError as exc:
            Log.warning(f"AI provider connection test failed: {exc}")
            return False
        return True

    def _build_prompt(self, text: str) -> str:
        return self._prompt_template.format(
            invoice_text=text,
            json_schema=self._json_schema,
        )

    def _call_ai(self, prompt: str) -> str:
        return self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise MalformedResponseError("JSON response must be an object")
        return parsed
