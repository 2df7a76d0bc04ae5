"""
completion.py – Final answer generation from the augmented prompt.

The completion call sits after the orchestration core: it receives the prompt
rendered by the context manager plus the optional live-search descriptor and
returns the model's answer text.

Behaviour is feature-flagged through `CONFIG["features"]["llm_completion_enabled"]`:
- false (default): return a deterministic offline answer that echoes the caller
  identity and whether live search was requested. No network access, no key needed.
- true: issue one chat completion with `CONFIG["llm"]["models"]["completion"]`.
  Chat completions have no server-side search tool, so the live-search request is
  passed to the model as an extra system instruction.

A failed or timed-out completion returns a short apology; the response payload
is still assembled around it.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from config import CONFIG
from monitoring import LLM_REQUEST_TIME, record_degradation
from .provider import get_client

logger = logging.getLogger(__name__)

COMPLETION_FALLBACK_MESSAGE = "I apologize, but I encountered an unexpected issue processing your request. Please try again."

LIVE_SEARCH_INSTRUCTION = (
    "The user needs current information. Prefer the most recent data you have and "
    "state clearly when an answer may be out of date."
)


class CompletionClient:
    """
    Produces the final answer for an augmented prompt.

    Args:
        client: OpenAI-compatible async client; built lazily with `get_client()` when needed.
        enabled: Overrides the `llm_completion_enabled` feature flag.
        model_config: Defaults to `CONFIG["llm"]["models"]["completion"]`.
        timeout_s: Defaults to `CONFIG["llm"]["timeout_s"]`.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        enabled: Optional[bool] = None,
        model_config: Optional[Dict[str, Any]] = None,
        timeout_s: Optional[float] = None,
    ):
        self._client = client
        self.enabled = bool(CONFIG["features"]["llm_completion_enabled"] if enabled is None else enabled)
        self.model_config = model_config or CONFIG["llm"]["models"]["completion"]
        self.timeout_s = float(timeout_s if timeout_s is not None else CONFIG["llm"]["timeout_s"])

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_client()
        return self._client

    async def complete(
        self,
        prompt: str,
        tools: Optional[List[Dict[str, Any]]],
        identity: Optional[str],
    ) -> str:
        """
        Generate the answer text.

        Args:
            prompt (str): Final prompt from the context manager.
            tools: Live-search descriptor, or None when not requested.
            identity: Opaque caller identifier.

        Returns:
            str: The model answer, the offline answer, or the fallback apology.
        """
        logger.info("--- Calling final LLM --- prompt length: %d", len(prompt))
        if not self.enabled:
            return self.offline_answer(tools, identity)

        try:
            return await asyncio.wait_for(self._request(prompt, tools), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            logger.error("Completion timed out after %ss", self.timeout_s)
        except Exception as e:
            logger.error("Completion failed: %s: %s", type(e).__name__, e)
        record_degradation("completion", "llm_completion")
        return COMPLETION_FALLBACK_MESSAGE

    @staticmethod
    def offline_answer(tools: Optional[List[Dict[str, Any]]], identity: Optional[str]) -> str:
        tools_label = "google_search" if tools else "None"
        return (
            f"[LLM Response] Answer for user {identity} based on the augmented prompt. "
            f"Tools enabled: {tools_label}."
        )

    async def _request(self, prompt: str, tools: Optional[List[Dict[str, Any]]]) -> str:
        messages = []
        if tools:
            messages.append({"role": "system", "content": LIVE_SEARCH_INSTRUCTION})
        messages.append({"role": "user", "content": prompt})

        settings = self.model_config.get("settings", {})
        with LLM_REQUEST_TIME.labels(model=self.model_config["name"]).time():
            response = await self.client.chat.completions.create(
                model=self.model_config["name"],
                messages=messages,
                max_tokens=settings.get("max_tokens", 800),
                temperature=settings.get("temperature", 0.3),
                top_p=settings.get("top_p", 0.95),
            )
        return (response.choices[0].message.content or "").strip()
