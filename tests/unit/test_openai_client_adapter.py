from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from docvision.summarization.exceptions import (
    CompletionNetworkError,
    CompletionRateLimitedError,
    MissingCredentialError,
    SummarizationError,
)
from docvision.summarization.openai_client_adapter import OpenAIClientAdapter


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _mock_client(**create_kwargs: object) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(**create_kwargs)
    return client


async def _complete(mock_client: MagicMock) -> str:
    with patch(
        "docvision.summarization.openai_client_adapter.openai.AsyncOpenAI",
        return_value=mock_client,
    ):
        adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30, base_url=None)
        return await adapter.create_chat_completion(
            model="m",
            temperature=0.1,
            system_prompt="system",
            user_prompt="user",
        )


def _status_error(cls: type[openai.APIStatusError], status: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://api.example.test/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return cls("failure", response=response, body=None)


class TestOpenAIClientAdapter:
    @pytest.mark.asyncio
    async def test_returns_content(self) -> None:
        client = _mock_client(return_value=_make_mock_response('{"ok": true}'))
        assert await _complete(client) == '{"ok": true}'

    @pytest.mark.asyncio
    async def test_sends_system_and_user_messages(self) -> None:
        client = _mock_client(return_value=_make_mock_response("{}"))
        await _complete(client)
        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ]

    @pytest.mark.asyncio
    async def test_raises_error_for_empty_content(self) -> None:
        client = _mock_client(return_value=_make_mock_response(None))
        with pytest.raises(SummarizationError, match="empty response"):
            await _complete(client)

    @pytest.mark.asyncio
    async def test_raises_error_for_no_choices(self) -> None:
        response = MagicMock()
        response.choices = []
        with pytest.raises(SummarizationError, match="no choices"):
            await _complete(_mock_client(return_value=response))

    @pytest.mark.asyncio
    async def test_raises_network_error_on_connection_failure(self) -> None:
        client = _mock_client(side_effect=openai.APIConnectionError(request=MagicMock()))
        with pytest.raises(CompletionNetworkError, match="network error"):
            await _complete(client)

    @pytest.mark.asyncio
    async def test_raises_network_error_on_timeout(self) -> None:
        client = _mock_client(side_effect=httpx.TimeoutException("timeout"))
        with pytest.raises(CompletionNetworkError, match="network error"):
            await _complete(client)

    @pytest.mark.asyncio
    async def test_raises_rate_limited_on_429(self) -> None:
        client = _mock_client(side_effect=_status_error(openai.RateLimitError, 429))
        with pytest.raises(CompletionRateLimitedError, match="rate limited"):
            await _complete(client)

    @pytest.mark.asyncio
    async def test_raises_error_on_api_error(self) -> None:
        client = _mock_client(side_effect=_status_error(openai.InternalServerError, 500))
        with pytest.raises(SummarizationError, match="API error"):
            await _complete(client)

    @pytest.mark.asyncio
    async def test_missing_api_key_raises(self) -> None:
        adapter = OpenAIClientAdapter(api_key="", timeout_seconds=30)
        with pytest.raises(MissingCredentialError):
            await adapter.create_chat_completion(
                model="m", temperature=0.1, system_prompt="s", user_prompt="u"
            )

    def test_disables_sdk_retries(self) -> None:
        with patch(
            "docvision.summarization.openai_client_adapter.openai.AsyncOpenAI"
        ) as mock_cls:
            OpenAIClientAdapter(api_key="k", timeout_seconds=12, base_url="http://x/v1")
        mock_cls.assert_called_once_with(
            api_key="k", timeout=12, base_url="http://x/v1", max_retries=0
        )
