from abc import ABC, abstractmethod


class BaseLlmClient(ABC):
    """Contract for provider-specific language-model clients."""

    @abstractmethod
    async def create_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float | None = None,
        json_schema: dict[str, object] | None = None,
        schema_name: str = "structured_output",
        max_output_tokens: int | None = None,
    ) -> str:
        """Return the provider reply as plain text.

        When json_schema is given the reply is constrained to JSON matching it.

        Raises:
            LlmError: or one of its subclasses on any failure.
        """

    @abstractmethod
    async def check_connection(self, model: str) -> bool:
        """Send a minimal request and report whether it succeeded."""
