"""
core/context_manager.py

Context preparation for the final LLM call.

The context manager decides what domain knowledge to put in front of the model:
1. Infer topics from trigger phrases in the query
2. Retrieve reference excerpts for those topics and decide whether live search is needed
3. Render the instruction template around the retrieved context and the query

It is pure string processing over the immutable topic table, so it never waits
on I/O and two calls with the same query produce identical output. It has no
dependency on intent resolution and runs while the connector fetches are in flight.
"""

import logging
from typing import List, Optional

from config import CONFIG
from shared.models import AugmentedPrompt, RetrievedContext, live_search_tools
from .topics import TopicTable

logger = logging.getLogger(__name__)

CHUNK_SEPARATOR = "\n---\n"
MAX_EXCERPTS_PER_TOPIC = 2


class ContextManager:
    """
    Builds the augmented prompt for a query.

    Args:
        topic_table: Trigger phrases, excerpts and recency cues. Defaults to `TopicTable.default()`.
        prompt_template: Template with `{context_text}` and `{user_query}` placeholders.
            Defaults to `CONFIG["context_prompt_template"]`.
    """

    def __init__(self, topic_table: Optional[TopicTable] = None, prompt_template: Optional[str] = None):
        self.topic_table = topic_table if topic_table is not None else TopicTable.default()
        self.prompt_template = prompt_template or CONFIG["context_prompt_template"]

    def infer_topics(self, query: str) -> List[str]:
        """Topic labels whose trigger phrase appears in the query, in trigger order."""
        return [topic for phrase, topic in self.topic_table.triggers if phrase in query]

    def retrieve_context(self, topics: List[str], query: str) -> RetrievedContext:
        """
        Collect up to two excerpts per topic and check the query for recency cues.

        Topics without excerpts contribute nothing. Chunks keep topic order and are
        joined with CHUNK_SEPARATOR.
        """
        logger.info("[ContextManager] Retrieving context for inferred topics: %s", ", ".join(topics))

        chunks: List[str] = []
        for topic in topics:
            chunks.extend(self.topic_table.excerpts_for(topic)[:MAX_EXCERPTS_PER_TOPIC])

        lowered = query.lower()
        use_search_tool = any(cue in lowered for cue in self.topic_table.recency_cues)
        if use_search_tool:
            logger.info("[ContextManager] Query indicates real-time data needed, enabling search tool.")

        return RetrievedContext(context_text=CHUNK_SEPARATOR.join(chunks), use_search_tool=use_search_tool)

    def render_prompt(self, context_text: str, query: str) -> str:
        return self.prompt_template.format(context_text=context_text, user_query=query)

    def prepare_contextual_prompt(self, query: str) -> AugmentedPrompt:
        """
        Produce the final prompt and tool configuration for a query.

        When no topic can be inferred, the query is passed through unchanged and
        live search is requested so the model can ground its answer itself.

        Args:
            query (str): The raw user query.

        Returns:
            AugmentedPrompt: The rendered prompt; `tools` is the live-search descriptor
            when live data is needed and None otherwise.
        """
        topics = self.infer_topics(query)
        if not topics:
            logger.warning(
                "[ContextManager] No specific domain context inferred. Relying on the model's general knowledge and the search tool."
            )
            return AugmentedPrompt(final_prompt=query, tools=live_search_tools())

        retrieved = self.retrieve_context(topics, query)
        final_prompt = self.render_prompt(retrieved.context_text, query)
        tools = live_search_tools() if retrieved.use_search_tool else None
        return AugmentedPrompt(final_prompt=final_prompt, tools=tools)
