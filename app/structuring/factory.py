from typing import ClassVar

from app.config.settings import Settings
from app.structuring.example_client_adapter import ExampleClientAdapter
from app.structuring.openai_client_adapter import OpenAIClientAdapter
from app.structuring.structurer import InvoiceStructurer


class StructurerFactory:
    """Creates the configured structuring service."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "groq": "https://api.groq.com/openai/v1",
        "openrouter": "https://openrouter.ai/api/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> InvoiceStructurer:
        """Create a structurer from application settings."""
        provider = settings.structuring_provider.lower()
        if provider == "example":
            return InvoiceStructurer(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
                max_text_length=settings.max_text_length,
            )
        client = OpenAIClientAdapter(
            api_key=settings.structuring_api_key,
            timeout_seconds=settings.structuring_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
            max_retries=settings.structuring_max_retries,
        )
        return InvoiceStructurer(
            client=client,
            model=settings.structuring_model_name,
            temperature=settings.structuring_temperature,
            max_text_length=settings.max_text_length,
        )

    @classmethod
    def supported_providers(cls) -> list[str]:
        return ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.structuring_base_url.strip()
            if not url:
                raise ValueError(
                    "structuring_base_url is required for "
                    "structuring_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return settings.structuring_base_url.strip() or default_base_url
        raise ValueError(
            f"Unknown structuring provider '{provider}'. "
            f"Choose from: {cls.supported_providers()}"
        )
