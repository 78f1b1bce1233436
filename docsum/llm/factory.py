from typing import ClassVar

from docsum.config.settings import Settings
from docsum.llm.client_base import BaseLlmClient
from docsum.llm.example_client_adapter import ExampleClientAdapter
from docsum.llm.openai_client_adapter import OpenAIClientAdapter


class LlmClientFactory:
    """Creates the configured language-model client."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseLlmClient:
        """Create a client from application settings."""
        provider = settings.llm_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        base_url = cls._resolve_base_url(provider, settings)
        if not settings.openai_api_key and base_url is None:
            raise ValueError(
                "OpenAI API key not found. Set OPENAI_API_KEY in the environment or .env"
            )
        return OpenAIClientAdapter(
            api_key=settings.openai_api_key,
            timeout_seconds=settings.openai_timeout_seconds,
            base_url=base_url,
        )

    @classmethod
    def is_configured(cls, settings: Settings) -> bool:
        """True when the configured provider can be used without further setup."""
        provider = settings.llm_provider.lower()
        if provider == "example" or provider in cls.OPENAI_COMPATIBLE_BASE_URLS:
            return True
        return bool(settings.openai_api_key)

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "openai_compatible_base_url is required for llm_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown LLM provider '{provider}'. Choose from: {supported}")
