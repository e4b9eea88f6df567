"""OCR plus AI-powered page summarizer."""

import asyncio
import json
from pathlib import Path
from typing import Any

from docvision.concurrency.retry import RetryExhaustedError, RetryPolicy, retry
from docvision.logging.logger import Log
from docvision.ocr.base import BaseOcrEngine
from docvision.ocr.exceptions import OcrError
from docvision.summarization.base import BaseSummarizer
from docvision.summarization.client_base import BaseCompletionClient
from docvision.summarization.exceptions import CompletionRateLimitedError, SummarizationError
from docvision.summarization.models import PageText
from docvision.summarization.prompt_loader import load_prompt_template, load_system_prompt


class Summarizer(BaseSummarizer):
    """Summarizes a rendered page: OCR first, then a title/description completion."""

    def __init__(
        self,
        *,
        ocr: BaseOcrEngine,
        client: BaseCompletionClient,
        model: str,
        temperature: float = 0.2,
        retry_policy: RetryPolicy | None = None,
        prompt_template_path: Path | None = None,
        system_prompt_path: Path | None = None,
    ) -> None:
        self._ocr = ocr
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._retry_policy = retry_policy or RetryPolicy()
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._system_prompt = load_system_prompt(system_prompt_path)

    async def summarize(self, image_path: Path) -> PageText | None:
        text = await self._recognize(image_path)
        if not text:
            Log.info(f"No text recognized on {image_path.name}; skipping summary")
            return None

        prompt = self._prompt_template.format(page_text=text)
        Log.debug(f"Summary prompt for {image_path.name}:\n{prompt}")
        try:
            raw_response = await retry(
                lambda: self._call_ai(prompt),
                self._retry_policy,
                retry_on=(CompletionRateLimitedError,),
            )
        except RetryExhaustedError as exc:
            raise SummarizationError(
                f"Rate limited on every attempt for {image_path.name}: {exc.last_error}"
            ) from exc
        Log.debug(f"AI raw response:\n{raw_response}")

        return self._build_page_text(self._parse_json(raw_response))

    async def _recognize(self, image_path: Path) -> str:
        try:
            text = await asyncio.to_thread(self._ocr.recognize, image_path)
        except OcrError as exc:
            raise SummarizationError(f"OCR failed: {exc}") from exc
        return text.strip()

    async def _call_ai(self, prompt: str) -> str:
        return await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, Any]:
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
            raise SummarizationError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise SummarizationError("JSON response must be an object")
        return parsed

    @staticmethod
    def _build_page_text(data: dict[str, Any]) -> PageText:
        title = data.get("title")
        description = data.get("description")
        if not isinstance(title, str) or not title.strip():
            raise SummarizationError("'title' must be a non-empty string")
        if not isinstance(description, str):
            raise SummarizationError("'description' must be a string")
        return PageText(title=title.strip(), description=description.strip())
