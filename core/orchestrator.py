"""
core/orchestrator.py

Central query orchestrator.

This module contains the coordination logic that, for every query:
1. Resolves intent (keyword rules + LLM classification) and fetches a summary
   from every selected connector
2. Prepares the augmented prompt with the context manager, concurrently with step 1
3. Calls the completion model with the augmented prompt
4. Assembles the response payload
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from config import CONFIG
from config.logging_config import get_logger
from llm_cloud.completion import CompletionClient
from monitoring import QUERY_PROCESSING_TIME, track_latency
from shared.models import (
    ConnectorContext,
    ConnectorSource,
    IntentResult,
    QueryMetadata,
    QueryResponse,
)
from shared.utils import generate_interaction_id, truncate_message_for_logging

from .classifier import LLMConnectorClassifier
from .connector_fetch import ConnectorFetchStage
from .context_manager import ContextManager
from .intent_resolver import HybridIntentResolver
from .rules import ConnectorRuleTable, load_rule_table
from .topics import TopicTable, load_topic_table

CONTEXT_SUMMARY_SEPARATOR = " ; "


class QueryOrchestrator:
    """
    Runs one query through intent resolution, connector fetches, context preparation and completion.

    Responsibilities:
    - Own the process-wide, read-only tables (connector rules and topics)
    - Run the connector branch (resolve, then fan out) concurrently with the context manager
    - Call the completion collaborator and assemble the response payload

    Every stage below the orchestrator degrades instead of raising, so a query
    always yields a non-empty connector list and a rendered prompt.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        rules: Optional[ConnectorRuleTable] = None,
        topic_table: Optional[TopicTable] = None,
        resolver: Optional[HybridIntentResolver] = None,
        fetch_stage: Optional[ConnectorFetchStage] = None,
        context_manager: Optional[ContextManager] = None,
        completion_client: Optional[CompletionClient] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Global configuration dictionary; defaults to CONFIG. Table paths are
                read from `config["paths"]` when the tables are not passed in.
            rules, topic_table: Pre-built tables; loaded from disk when omitted.
            resolver, fetch_stage, context_manager, completion_client: Collaborators;
                built from the tables and configuration when omitted.
        """
        self.config = config if config is not None else CONFIG
        paths = self.config.get("paths", {})

        self.rules = rules if rules is not None else load_rule_table(paths.get("intent_rules_full_path"))
        self.topic_table = topic_table if topic_table is not None else load_topic_table(paths.get("topic_sources_full_path"))

        self.resolver = resolver or HybridIntentResolver(
            rules=self.rules,
            llm_analyzer=LLMConnectorClassifier(),
        )
        self.fetch_stage = fetch_stage or ConnectorFetchStage()
        self.context_manager = context_manager or ContextManager(self.topic_table)
        self.completion_client = completion_client or CompletionClient()

    async def gather_connector_context(
        self, query: str, user_id: Optional[str]
    ) -> Tuple[IntentResult, List[ConnectorContext]]:
        """Resolve intent, then fetch every selected connector."""
        intent = await self.resolver.resolve(query)
        sources = await self.fetch_stage.fetch_all(intent, query, user_id)
        return intent, sources

    @track_latency(QUERY_PROCESSING_TIME)
    async def process_query(self, query: str, user_id: Optional[str] = None) -> QueryResponse:
        """
        Main entry point for query processing.

        Args:
            query (str): Non-empty user query (validated by the HTTP layer).
            user_id (Optional[str]): Opaque caller identifier, echoed in the response.

        Returns:
            QueryResponse: Final prompt, model answer and connector metadata.
        """
        interaction_id = generate_interaction_id()
        logger = get_logger(__name__, interaction_id=interaction_id, stage="orchestrator")
        logger.info("Analyzing query: '%s'", truncate_message_for_logging(query))

        # The connector branch suspends on I/O; the context manager is pure and runs meanwhile.
        connector_branch = asyncio.create_task(self.gather_connector_context(query, user_id))
        try:
            augmented = self.context_manager.prepare_contextual_prompt(query)
        except Exception:
            connector_branch.cancel()
            raise
        intent, sources = await connector_branch

        logger.info("Connectors selected: %s", list(intent.connectors))
        logger.info("Context manager prepared prompt and tools (tools: %s)", augmented.tools_label)

        final_response = await self.completion_client.complete(
            augmented.final_prompt, augmented.tools, user_id
        )

        return QueryResponse(
            final_llm_prompt=augmented.final_prompt,
            final_response=final_response,
            mcp_metadata=QueryMetadata(
                user_id=user_id,
                interaction_id=interaction_id,
                connectors_analyzed=list(intent.connectors),
                time_hint=intent.time_hint.value if intent.time_hint else None,
                tools_enabled_by_context_manager=augmented.tools_label,
                mcp_sources=[ConnectorSource(**source.to_dict()) for source in sources],
                context_summary=CONTEXT_SUMMARY_SEPARATOR.join(source.summary for source in sources),
            ),
        )

    def get_pipeline_info(self) -> Dict[str, Any]:
        """
        Describe the loaded tables and collaborators, for diagnostics.
        """
        return {
            "rule_connectors": [connector.value for connector, _ in self.rules.items()],
            "topics": [topic for _, topic in self.topic_table.triggers],
            "dedicated_connector_clients": sorted(self.fetch_stage.clients),
            "completion_enabled": self.completion_client.enabled,
        }
