"""
core/classifier.py

LLM-based connector classification.

This module asks an external LLM which connectors a query needs. It is the
probabilistic half of intent resolution: its output is unioned with the keyword
rules, so it can only add connectors, and any failure simply contributes nothing.
"""

import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from config import CONFIG
from llm_cloud.provider import get_client
from monitoring import LLM_REQUEST_TIME, record_degradation
from shared.models import ClassificationResult, ConnectorId

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class LLMConnectorClassifier:
    """
    Maps a user query to connector ids by delegating to the configured LLM.

    Responsibilities:
    - Render the classification system prompt with the allowed connector vocabulary
    - Issue exactly one chat completion per query, bounded by `llm.timeout_s`
    - Parse the reply as a JSON array and keep only ids from the vocabulary
    - Convert every failure (missing key, transport error, timeout, malformed
      reply) into a failed `ClassificationResult`; nothing is raised and nothing
      is retried

    Design notes:
    - The client is built lazily on first use and inside the guarded section, so
      a missing API key degrades classification instead of failing construction.
    - Tests inject a fake client through the `client` argument.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        allowed_connectors: Optional[Sequence[ConnectorId]] = None,
        model_config: Optional[Dict[str, Any]] = None,
        system_prompt: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ):
        """
        Initialize the classifier.

        Args:
            client: An OpenAI-compatible async client. Built with `get_client()` on first use when omitted.
            allowed_connectors: Vocabulary the model may choose from. Defaults to `ConnectorId.classifiable()`.
            model_config: Model name and settings. Defaults to `CONFIG["llm"]["models"]["classification"]`.
            system_prompt: Prompt template with a `{connectors}` placeholder. Defaults to
                `CONFIG["classification_message"]`, loaded from `classification_system_prompt.txt`.
            timeout_s: Upper bound for the request in seconds. Defaults to `CONFIG["llm"]["timeout_s"]`.
        """
        self._client = client
        self.allowed_connectors = tuple(allowed_connectors if allowed_connectors is not None else ConnectorId.classifiable())
        self.model_config = model_config or CONFIG["llm"]["models"]["classification"]
        template = system_prompt or CONFIG["classification_message"]
        self.system_prompt = template.format(
            connectors=", ".join(c.value for c in self.allowed_connectors)
        )
        self.timeout_s = float(timeout_s if timeout_s is not None else CONFIG["llm"]["timeout_s"])
        self._allowed_values = {c.value for c in self.allowed_connectors}

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_client()
        return self._client

    async def classify(self, query: str) -> ClassificationResult:
        """
        Classify a query into connector ids.

        Args:
            query (str): The raw user query.

        Returns:
            ClassificationResult: The recognised connector ids on success, or an empty
            result carrying the failure reason. Never raises.
        """
        try:
            content = await asyncio.wait_for(self._request(query), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            return self._failed(f"classification timed out after {self.timeout_s}s")
        except Exception as e:
            return self._failed(f"{type(e).__name__}: {e}")

        try:
            parsed = self.parse_response(content)
        except ValueError as e:
            return self._failed(str(e))

        connectors = []
        for item in parsed:
            if item not in self._allowed_values:
                logger.warning(f"[LLMConnectorClassifier] Ignoring unknown connector from model: '{item}'")
                continue
            if item not in connectors:
                connectors.append(item)

        logger.info(f"[LLMConnectorClassifier] Model selected connectors: {connectors}")
        return ClassificationResult(connectors=tuple(connectors))

    async def classify_connectors(self, query: str) -> List[str]:
        """Classify and collapse the result to a plain (possibly empty) list."""
        result = await self.classify(query)
        return list(result.connectors)

    async def _request(self, query: str) -> str:
        settings = self.model_config.get("settings", {})
        with LLM_REQUEST_TIME.labels(model=self.model_config["name"]).time():
            response = await self.client.chat.completions.create(
                model=self.model_config["name"],
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": query},
                ],
                max_tokens=settings.get("max_tokens", 100),
                temperature=settings.get("temperature", 0.0),
            )
        return response.choices[0].message.content or ""

    @staticmethod
    def parse_response(content: str) -> List[str]:
        """
        Parse the model reply as a JSON array of connector names.

        A Markdown code fence around the array is tolerated.

        Raises:
            ValueError: If the reply is not a JSON array of strings.
        """
        text = content.strip()
        fenced = CODE_FENCE_PATTERN.match(text)
        if fenced:
            text = fenced.group(1)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"reply is not valid JSON: {e}") from e
        if not isinstance(parsed, list):
            raise ValueError(f"reply is not a JSON array: {type(parsed).__name__}")
        if not all(isinstance(item, str) for item in parsed):
            raise ValueError("reply array contains non-string items")
        return parsed

    @staticmethod
    def _failed(reason: str) -> ClassificationResult:
        logger.error(f"[LLMConnectorClassifier] LLM analyzer error: {reason}")
        record_degradation("classifier", "llm_analyzer")
        return ClassificationResult.failure(reason)
