"""Tests for the Summarizer (OCR plus AI page summary)."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docvision.concurrency.retry import RetryPolicy
from docvision.ocr.exceptions import OcrError
from docvision.summarization.exceptions import (
    CompletionNetworkError,
    CompletionRateLimitedError,
    SummarizationError,
)
from docvision.summarization.summarizer import Summarizer

PAGE = Path("/out/page-001.png")


def _make_summarizer(
    text: str = "Quarterly report for the northern region",
    client: MagicMock | None = None,
    **kwargs: object,
) -> tuple[Summarizer, MagicMock, MagicMock]:
    ocr = MagicMock()
    ocr.recognize.return_value = text
    if client is None:
        client = MagicMock()
        client.create_chat_completion = AsyncMock(return_value=_valid_json_response())
    summarizer = Summarizer(ocr=ocr, client=client, model="test-model", **kwargs)  # type: ignore[arg-type]
    return summarizer, ocr, client


def _valid_json_response(title: str = "Northern region quarterly report overview") -> str:
    return json.dumps({"title": title, "description": "Revenue and staffing for the quarter."})


class TestSummarizeSuccess:
    @pytest.mark.asyncio
    async def test_returns_page_text(self) -> None:
        summarizer, _, _ = _make_summarizer()
        result = await summarizer.summarize(PAGE)
        assert result is not None
        assert result.title == "Northern region quarterly report overview"
        assert result.description == "Revenue and staffing for the quarter."

    @pytest.mark.asyncio
    async def test_passes_ocr_text_to_prompt(self) -> None:
        summarizer, ocr, client = _make_summarizer(text="  clinical input  ")
        await summarizer.summarize(PAGE)
        ocr.recognize.assert_called_once_with(PAGE)
        user_msg = client.create_chat_completion.call_args.kwargs["user_prompt"]
        assert "clinical input" in user_msg
        assert '{"title"' in user_msg

    @pytest.mark.asyncio
    async def test_calls_ai_with_model_and_system_prompt(self) -> None:
        summarizer, _, client = _make_summarizer()
        await summarizer.summarize(PAGE)
        kwargs = client.create_chat_completion.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["system_prompt"]

    @pytest.mark.asyncio
    async def test_clamps_temperature(self) -> None:
        summarizer, _, client = _make_summarizer(temperature=3.0)
        await summarizer.summarize(PAGE)
        assert client.create_chat_completion.call_args.kwargs["temperature"] == 1.0


class TestEmptyText:
    @pytest.mark.asyncio
    async def test_blank_ocr_skips_ai(self) -> None:
        summarizer, _, client = _make_summarizer(text="  \n\t ")
        assert await summarizer.summarize(PAGE) is None
        client.create_chat_completion.assert_not_called()

    @pytest.mark.asyncio
    async def test_ocr_failure_raises(self) -> None:
        summarizer, ocr, _ = _make_summarizer()
        ocr.recognize.side_effect = OcrError("tesseract missing")
        with pytest.raises(SummarizationError, match="OCR failed"):
            await summarizer.summarize(PAGE)


class TestJsonParsing:
    @pytest.mark.asyncio
    async def test_strips_markdown_code_fences(self) -> None:
        client = MagicMock()
        client.create_chat_completion = AsyncMock(
            return_value="```json\n" + _valid_json_response("Fenced title") + "\n```"
        )
        summarizer, _, _ = _make_summarizer(client=client)
        result = await summarizer.summarize(PAGE)
        assert result is not None
        assert result.title == "Fenced title"

    @pytest.mark.asyncio
    async def test_invalid_json_raises_error(self) -> None:
        client = MagicMock()
        client.create_chat_completion = AsyncMock(return_value="not valid json")
        summarizer, _, _ = _make_summarizer(client=client)
        with pytest.raises(SummarizationError, match="Invalid JSON"):
            await summarizer.summarize(PAGE)

    @pytest.mark.asyncio
    async def test_json_array_raises_error(self) -> None:
        client = MagicMock()
        client.create_chat_completion = AsyncMock(return_value="[]")
        summarizer, _, _ = _make_summarizer(client=client)
        with pytest.raises(SummarizationError, match="must be an object"):
            await summarizer.summarize(PAGE)

    @pytest.mark.asyncio
    async def test_missing_title_raises_error(self) -> None:
        client = MagicMock()
        client.create_chat_completion = AsyncMock(return_value='{"description": "x"}')
        summarizer, _, _ = _make_summarizer(client=client)
        with pytest.raises(SummarizationError, match="title"):
            await summarizer.summarize(PAGE)


class TestRateLimiting:
    @pytest.mark.asyncio
    async def test_retries_after_rate_limit(self) -> None:
        client = MagicMock()
        client.create_chat_completion = AsyncMock(side_effect=[
            CompletionRateLimitedError("429"),
            CompletionRateLimitedError("429"),
            _valid_json_response(),
        ])
        summarizer, _, _ = _make_summarizer(
            client=client, retry_policy=RetryPolicy(max_attempts=3, base_delay=1.0)
        )
        with patch("docvision.concurrency.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            result = await summarizer.summarize(PAGE)
        assert result is not None
        assert client.create_chat_completion.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self) -> None:
        client = MagicMock()
        client.create_chat_completion = AsyncMock(side_effect=CompletionRateLimitedError("429"))
        summarizer, _, _ = _make_summarizer(
            client=client, retry_policy=RetryPolicy(max_attempts=2, base_delay=0.0)
        )
        with pytest.raises(SummarizationError, match="Rate limited"):
            await summarizer.summarize(PAGE)
        assert client.create_chat_completion.await_count == 2

    @pytest.mark.asyncio
    async def test_network_error_is_not_retried(self) -> None:
        client = MagicMock()
        client.create_chat_completion = AsyncMock(side_effect=CompletionNetworkError("network"))
        summarizer, _, _ = _make_summarizer(client=client)
        with pytest.raises(CompletionNetworkError):
            await summarizer.summarize(PAGE)
        assert client.create_chat_completion.await_count == 1


class TestDebugLogging:
    @pytest.mark.asyncio
    async def test_logs_prompt_in_debug(self) -> None:
        summarizer, _, _ = _make_summarizer()
        with patch("docvision.summarization.summarizer.Log") as mock_log:
            await summarizer.summarize(PAGE)
        assert mock_log.debug.call_count >= 1
