"""
Tests for `connectors/template_client.py` – the deterministic connector data source.
"""

import unittest

from connectors import ConnectorClient, DEFAULT_SUMMARY_TEMPLATES, TemplateConnectorClient
from shared.models import ConnectorId, NO_DATA_SUMMARY, TimeHint


class TestTemplateConnectorClient(unittest.IsolatedAsyncioTestCase):

    async def test_calendar_reflects_time_hint(self):
        client = TemplateConnectorClient()
        for hint in TimeHint:
            summary = await client.fetch_summary("google_calendar", "meetings?", hint, "u")
            self.assertEqual(summary, f"Checked calendar for {hint.value} meetings.")

    async def test_fixed_summaries(self):
        client = TemplateConnectorClient()
        expected = {
            "aws_monitor": "Fetched server health metrics from AWS.",
            "notion_docs": "Retrieved recent meeting notes and project updates.",
            "github_repo": "Fetched latest pull requests and commits.",
            "stripe_finance": "Fetched balance and transaction summaries.",
            "fitbit_health": "Fetched recent step count and sleep stats.",
            "semantic_search": "Performed general semantic search for context.",
        }
        for connector, summary in expected.items():
            self.assertEqual(await client.fetch_summary(connector, "q", None, None), summary)

    async def test_unknown_connector_gets_sentinel(self):
        client = TemplateConnectorClient()
        self.assertEqual(await client.fetch_summary("jira_tickets", "q", None, None), NO_DATA_SUMMARY)

    async def test_custom_templates_replace_defaults(self):
        client = TemplateConnectorClient({"github_repo": lambda hint: "3 open pull requests"})
        self.assertEqual(await client.fetch_summary("github_repo", "q", None, None), "3 open pull requests")
        self.assertEqual(await client.fetch_summary("aws_monitor", "q", None, None), NO_DATA_SUMMARY)

    def test_every_connector_has_a_default_template(self):
        self.assertEqual(set(DEFAULT_SUMMARY_TEMPLATES), {c.value for c in ConnectorId})

    def test_interface_cannot_be_instantiated(self):
        with self.assertRaises(TypeError):
            ConnectorClient()


if __name__ == "__main__":
    unittest.main()
