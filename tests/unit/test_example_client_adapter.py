import json

import pytest

from docvision.summarization.example_client_adapter import ExampleClientAdapter


class TestExampleClientAdapter:
    @pytest.mark.asyncio
    async def test_returns_valid_summary_json(self) -> None:
        adapter = ExampleClientAdapter()
        content = await adapter.create_chat_completion(
            model="example",
            temperature=0.2,
            system_prompt="system",
            user_prompt="user",
        )
        payload = json.loads(content)
        assert payload["title"] == "Example page title"
        assert isinstance(payload["description"], str)
