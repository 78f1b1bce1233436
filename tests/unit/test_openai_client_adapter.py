import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from docsum.llm.exceptions import (
    LlmAuthenticationError,
    LlmNetworkError,
    LlmQuotaError,
    LlmRateLimitError,
    LlmResponseError,
)
from docsum.llm.openai_client_adapter import OpenAIClientAdapter, supports_temperature

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _status_error(
    cls: type[openai.APIStatusError], status: int, body: object = None
) -> openai.APIStatusError:
    return cls("provider error", response=httpx.Response(status, request=_REQUEST), body=body)


def _complete(
    *,
    response: Any = None,
    error: BaseException | None = None,
    **kwargs: Any,
) -> tuple[str, AsyncMock]:
    create = AsyncMock(return_value=response, side_effect=error)
    mock_client = MagicMock()
    mock_client.chat.completions.create = create
    with patch(
        "docsum.llm.openai_client_adapter.openai.AsyncOpenAI",
        return_value=mock_client,
    ):
        adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30, base_url=None)
        params = {"model": "m", "system_prompt": "system", "user_prompt": "user", **kwargs}
        content = asyncio.run(adapter.create_completion(**params))
    return content, create


class TestSupportsTemperature:
    @pytest.mark.parametrize("model", ["gpt-5", "gpt-5-mini", "GPT-5.1"])
    def test_gpt5_family_rejects_temperature(self, model: str) -> None:
        assert supports_temperature(model) is False

    @pytest.mark.parametrize("model", ["gpt-4.1-mini", "gpt-4o", "llama3"])
    def test_other_models_accept_temperature(self, model: str) -> None:
        assert supports_temperature(model) is True


class TestCreateCompletion:
    def test_returns_content(self) -> None:
        content, _ = _complete(response=_make_mock_response('{"ok": true}'))
        assert content == '{"ok": true}'

    def test_sends_messages_and_options(self) -> None:
        _, create = _complete(
            response=_make_mock_response("ok"), temperature=0.3, max_output_tokens=75
        )
        kwargs = create.await_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ]
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_completion_tokens"] == 75
        assert "response_format" not in kwargs

    def test_requests_strict_json_schema(self) -> None:
        _, create = _complete(
            response=_make_mock_response("{}"),
            json_schema={"type": "object"},
            schema_name="radiology_extraction",
        )
        assert create.await_args.kwargs["response_format"] == {
            "type": "json_schema",
            "json_schema": {
                "name": "radiology_extraction",
                "strict": True,
                "schema": {"type": "object"},
            },
        }

    def test_omits_temperature_for_gpt5(self) -> None:
        _, create = _complete(
            response=_make_mock_response("ok"), model="gpt-5-mini", temperature=0.3
        )
        assert "temperature" not in create.await_args.kwargs

    def test_omits_unset_options(self) -> None:
        _, create = _complete(response=_make_mock_response("ok"))
        kwargs = create.await_args.kwargs
        assert "temperature" not in kwargs
        assert "max_completion_tokens" not in kwargs

    def test_raises_error_for_empty_content(self) -> None:
        with pytest.raises(LlmResponseError, match="empty response"):
            _complete(response=_make_mock_response(None))

    def test_raises_error_for_no_choices(self) -> None:
        response = MagicMock()
        response.choices = []
        with pytest.raises(LlmResponseError, match="no choices"):
            _complete(response=response)


class TestErrorClassification:
    def test_authentication_error(self) -> None:
        with pytest.raises(LlmAuthenticationError, match="Invalid API key"):
            _complete(error=_status_error(openai.AuthenticationError, 401))

    def test_rate_limit_error(self) -> None:
        with pytest.raises(LlmRateLimitError, match="rate limit"):
            _complete(error=_status_error(openai.RateLimitError, 429))

    def test_insufficient_quota_error(self) -> None:
        error = _status_error(openai.RateLimitError, 429, body={"code": "insufficient_quota"})
        with pytest.raises(LlmQuotaError, match="quota"):
            _complete(error=error)

    def test_payment_required_error(self) -> None:
        with pytest.raises(LlmQuotaError, match="quota"):
            _complete(error=_status_error(openai.APIStatusError, 402))

    def test_other_status_error(self) -> None:
        with pytest.raises(LlmNetworkError, match="API error"):
            _complete(error=_status_error(openai.APIStatusError, 500))

    def test_connection_error(self) -> None:
        with pytest.raises(LlmNetworkError, match="network error"):
            _complete(error=openai.APIConnectionError(request=_REQUEST))

    def test_timeout(self) -> None:
        with pytest.raises(LlmNetworkError, match="network error"):
            _complete(error=httpx.TimeoutException("timeout"))

    def test_generic_api_error(self) -> None:
        error = openai.APIError(message="server error", request=_REQUEST, body=None)
        with pytest.raises(LlmNetworkError, match="API error"):
            _complete(error=error)


class TestCheckConnection:
    def _check(self, create: AsyncMock) -> bool:
        mock_client = MagicMock()
        mock_client.chat.completions.create = create
        with patch(
            "docsum.llm.openai_client_adapter.openai.AsyncOpenAI",
            return_value=mock_client,
        ):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            return asyncio.run(adapter.check_connection("gpt-4.1-mini"))

    def test_returns_true_on_reply(self) -> None:
        create = AsyncMock(return_value=_make_mock_response("Hi"))
        assert self._check(create) is True
        kwargs = create.await_args.kwargs
        assert kwargs["max_completion_tokens"] == 5
        assert kwargs["messages"][1]["content"] == "Hello"

    def test_returns_false_on_error(self) -> None:
        create = AsyncMock(side_effect=_status_error(openai.AuthenticationError, 401))
        assert self._check(create) is False


class TestClientConstruction:
    def test_passes_base_url_and_timeout(self) -> None:
        with patch("docsum.llm.openai_client_adapter.openai.AsyncOpenAI") as mock_cls:
            OpenAIClientAdapter(
                api_key="k", timeout_seconds=12, base_url="https://api.groq.com/openai/v1"
            )
        mock_cls.assert_called_once_with(
            api_key="k", timeout=12, base_url="https://api.groq.com/openai/v1"
        )
