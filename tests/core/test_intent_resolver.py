"""
Unit tests for `core/intent_resolver.py` – merging rule-based and LLM-based connector selection.

The LLM half is replaced by a MagicMock whose `classify_connectors` coroutine is an AsyncMock,
so each test controls exactly what the "model" contributes. The rule half runs for real against
the default rule table.
"""

import unittest
from unittest.mock import AsyncMock, MagicMock

from core.classifier import LLMConnectorClassifier
from core.intent_resolver import HybridIntentResolver
from core.rule_analyzer import RuleBasedAnalyzer
from core.rules import ConnectorRuleTable
from shared.models import TimeHint


def make_resolver(llm_connectors):
    llm_analyzer = MagicMock()
    llm_analyzer.classify_connectors = AsyncMock(return_value=llm_connectors)
    return HybridIntentResolver(rules=ConnectorRuleTable.default(), llm_analyzer=llm_analyzer), llm_analyzer


class TestHybridIntentResolver(unittest.IsolatedAsyncioTestCase):

    async def test_union_of_both_analyzers(self):
        resolver, _ = make_resolver(["notion_docs"])
        result = await resolver.resolve("Do I have meetings today?")

        self.assertEqual(set(result.connectors), {"google_calendar", "notion_docs"})
        self.assertEqual(result.time_hint, TimeHint.TODAY)

    async def test_overlap_is_deduplicated(self):
        resolver, _ = make_resolver(["google_calendar", "google_calendar"])
        result = await resolver.resolve("Am I free tomorrow?")

        self.assertEqual(result.connectors, ("google_calendar",))
        self.assertEqual(result.time_hint, TimeHint.TOMORROW)

    async def test_llm_failure_equals_rule_result(self):
        """
        A failed classification contributes an empty list, so the combined result must be
        exactly the rule result: same connectors and same time hint.
        """
        query = "Check the server status next week"
        resolver, _ = make_resolver([])
        result = await resolver.resolve(query)

        rule_result = RuleBasedAnalyzer(ConnectorRuleTable.default()).analyze(query)
        self.assertEqual(result, rule_result)

    async def test_result_is_superset_of_each_analyzer(self):
        queries = [
            ("What's the weather like?", ["google_calendar"]),
            ("Summarize my last commit", ["github_repo", "notion_docs"]),
            ("How many steps today?", []),
            ("Invoice status", ["stripe_finance", "aws_monitor"]),
        ]
        rule_analyzer = RuleBasedAnalyzer(ConnectorRuleTable.default())
        for query, llm_connectors in queries:
            resolver, _ = make_resolver(llm_connectors)
            result = await resolver.resolve(query)

            self.assertTrue(result.connectors)
            self.assertEqual(len(result.connectors), len(set(result.connectors)))
            self.assertTrue(set(rule_analyzer.analyze(query).connectors) <= set(result.connectors))
            self.assertTrue(set(llm_connectors) <= set(result.connectors))

    async def test_fallback_connector_survives_llm_additions(self):
        """The generic search selected by the rules is kept even when the model adds connectors."""
        resolver, _ = make_resolver(["google_calendar"])
        result = await resolver.resolve("What's the weather like?")
        self.assertEqual(set(result.connectors), {"semantic_search", "google_calendar"})

    async def test_time_hint_comes_from_rules_only(self):
        resolver, _ = make_resolver(["google_calendar"])
        result = await resolver.resolve("What's happening?")
        self.assertIsNone(result.time_hint)

    async def test_llm_receives_raw_query(self):
        resolver, llm_analyzer = make_resolver([])
        await resolver.resolve("Any PR to review?")
        llm_analyzer.classify_connectors.assert_awaited_once_with("Any PR to review?")

    async def test_transport_error_in_classifier_equals_rule_result(self):
        """
        A real classifier whose client raises a transport error contributes nothing, so the
        resolver returns exactly what the keyword rules produced.
        """
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=ConnectionError("connection reset"))
        classifier = LLMConnectorClassifier(
            client=client,
            model_config={"name": "test-model", "settings": {}},
            system_prompt="Possible connectors: {connectors}.",
            timeout_s=1.0,
        )
        resolver = HybridIntentResolver(rules=ConnectorRuleTable.default(), llm_analyzer=classifier)

        query = "Any meeting today? Also check the server."
        result = await resolver.resolve(query)

        self.assertEqual(result, RuleBasedAnalyzer(ConnectorRuleTable.default()).analyze(query))
        self.assertEqual(set(result.connectors), {"google_calendar", "aws_monitor"})
        client.chat.completions.create.assert_awaited_once()

    async def test_injected_empty_rule_table_is_kept(self):
        """An empty rule table is a valid table: nothing matches and only the fallback is selected."""
        llm_analyzer = MagicMock()
        llm_analyzer.classify_connectors = AsyncMock(return_value=[])
        resolver = HybridIntentResolver(rules=ConnectorRuleTable({}), llm_analyzer=llm_analyzer)

        result = await resolver.resolve("Any meeting today?")

        self.assertEqual(result.connectors, ("semantic_search",))
        self.assertEqual(result.time_hint, TimeHint.TODAY)


if __name__ == "__main__":
    unittest.main()
