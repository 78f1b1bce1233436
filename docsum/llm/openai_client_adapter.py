from typing import Any

import httpx
import openai

from docsum.llm.client_base import BaseLlmClient
from docsum.llm.exceptions import (
    LlmAuthenticationError,
    LlmError,
    LlmNetworkError,
    LlmQuotaError,
    LlmRateLimitError,
    LlmResponseError,
)
from docsum.logging.logger import Log

# Model families that reject a sampling temperature.
_NO_TEMPERATURE_PREFIXES = ("gpt-5",)


def supports_temperature(model: str) -> bool:
    return not model.lower().startswith(_NO_TEMPERATURE_PREFIXES)


class OpenAIClientAdapter(BaseLlmClient):
    """Language-model client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

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
        params: dict[str, Any] = {}
        if temperature is not None:
            if supports_temperature(model):
                params["temperature"] = temperature
            else:
                Log.debug(f"Skipping temperature for model: {model}")
        if max_output_tokens is not None:
            params["max_completion_tokens"] = max_output_tokens
        if json_schema is not None:
            params["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": schema_name,
                    "strict": True,
                    "schema": json_schema,
                },
            }

        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                **params,
            )
        except openai.AuthenticationError as exc:
            raise LlmAuthenticationError(f"Invalid API key: {exc}") from exc
        except openai.RateLimitError as exc:
            if exc.code == "insufficient_quota":
                raise LlmQuotaError(f"API quota exceeded: {exc}") from exc
            raise LlmRateLimitError(f"API rate limit exceeded: {exc}") from exc
        except openai.APIStatusError as exc:
            if exc.status_code == 402:
                raise LlmQuotaError(f"API quota exceeded: {exc}") from exc
            raise LlmNetworkError(f"AI provider API error: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise LlmNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise LlmNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise LlmResponseError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise LlmResponseError("AI returned empty response")
        return content

    async def check_connection(self, model: str) -> bool:
        Log.info(f"Testing provider connection with model {model}")
        try:
            await self.create_completion(
                model=model,
                system_prompt="",
                user_prompt="Hello",
                max_output_tokens=5,
            )
        except LlmError as exc:
            Log.warning(f"Connection test failed: {exc}")
            return False
        Log.info("Connection test succeeded")
        return True
