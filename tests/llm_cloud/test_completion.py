"""
Unit tests for `llm_cloud/completion.py` – the final answer step.

The async client is a MagicMock whose `chat.completions.create` is an AsyncMock, so the
enabled path runs without network access. The disabled path needs no client at all.
"""

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from llm_cloud.completion import COMPLETION_FALLBACK_MESSAGE, LIVE_SEARCH_INSTRUCTION, CompletionClient

MODEL_CONFIG = {"name": "answer-model", "settings": {"max_tokens": 200, "temperature": 0.2, "top_p": 0.9}}


def make_client(content="  The pipeline is blocked by security scans.  ", side_effect=None):
    client = MagicMock()
    response = MagicMock()
    response.choices[0].message.content = content
    client.chat.completions.create = AsyncMock(return_value=response, side_effect=side_effect)
    return client


class TestCompletionClient(unittest.IsolatedAsyncioTestCase):

    @patch("llm_cloud.completion.get_client")
    async def test_offline_answer_when_disabled(self, mock_get_client):
        completion = CompletionClient(enabled=False, model_config=MODEL_CONFIG)

        with_tools = await completion.complete("prompt", [{"google_search": {}}], "u-1")
        without_tools = await completion.complete("prompt", None, "u-1")

        self.assertEqual(
            with_tools,
            "[LLM Response] Answer for user u-1 based on the augmented prompt. Tools enabled: google_search.",
        )
        self.assertTrue(without_tools.endswith("Tools enabled: None."))
        mock_get_client.assert_not_called()

    async def test_enabled_calls_model(self):
        client = make_client()
        completion = CompletionClient(client=client, enabled=True, model_config=MODEL_CONFIG, timeout_s=1.0)

        answer = await completion.complete("final prompt", None, "u-1")

        self.assertEqual(answer, "The pipeline is blocked by security scans.")
        kwargs = client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "answer-model")
        self.assertEqual(kwargs["messages"], [{"role": "user", "content": "final prompt"}])
        self.assertEqual(kwargs["max_tokens"], 200)
        self.assertEqual(kwargs["top_p"], 0.9)

    async def test_live_search_adds_system_instruction(self):
        client = make_client()
        completion = CompletionClient(client=client, enabled=True, model_config=MODEL_CONFIG, timeout_s=1.0)

        await completion.complete("weather?", [{"google_search": {}}], None)

        messages = client.chat.completions.create.call_args.kwargs["messages"]
        self.assertEqual(messages[0], {"role": "system", "content": LIVE_SEARCH_INSTRUCTION})
        self.assertEqual(messages[1], {"role": "user", "content": "weather?"})

    async def test_failure_returns_fallback(self):
        client = make_client(side_effect=RuntimeError("rate limited"))
        completion = CompletionClient(client=client, enabled=True, model_config=MODEL_CONFIG, timeout_s=1.0)

        self.assertEqual(await completion.complete("p", None, "u"), COMPLETION_FALLBACK_MESSAGE)

    async def test_timeout_returns_fallback(self):
        async def slow_create(**kwargs):
            await asyncio.sleep(1)

        client = MagicMock()
        client.chat.completions.create = slow_create
        completion = CompletionClient(client=client, enabled=True, model_config=MODEL_CONFIG, timeout_s=0.01)

        self.assertEqual(await completion.complete("p", None, "u"), COMPLETION_FALLBACK_MESSAGE)

    @patch("llm_cloud.completion.get_client")
    async def test_missing_key_returns_fallback(self, mock_get_client):
        mock_get_client.side_effect = RuntimeError("Missing required environment variable")
        completion = CompletionClient(enabled=True, model_config=MODEL_CONFIG, timeout_s=1.0)

        self.assertEqual(await completion.complete("p", None, "u"), COMPLETION_FALLBACK_MESSAGE)


if __name__ == "__main__":
    unittest.main()
