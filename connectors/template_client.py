"""
Deterministic, template-based connector client for local runs, demos, and tests.

Each known connector maps to a fixed summary sentence; the calendar template
also reflects the resolved time hint. Connector ids missing from the table get
the "No data available" sentinel rather than an error, which keeps the fetch
stage's per-item degradation contract in one place for unknown ids.
"""

from types import MappingProxyType
from typing import Callable, Mapping, Optional

from shared.models import ConnectorId, NO_DATA_SUMMARY, TimeHint
from .base import ConnectorClient

SummaryTemplate = Callable[[Optional[TimeHint]], str]


def _calendar_summary(time_hint: Optional[TimeHint]) -> str:
    window = time_hint.value if time_hint else "upcoming"
    return f"Checked calendar for {window} meetings."


DEFAULT_SUMMARY_TEMPLATES: Mapping[str, SummaryTemplate] = MappingProxyType({
    ConnectorId.GOOGLE_CALENDAR.value: _calendar_summary,
    ConnectorId.AWS_MONITOR.value: lambda _: "Fetched server health metrics from AWS.",
    ConnectorId.NOTION_DOCS.value: lambda _: "Retrieved recent meeting notes and project updates.",
    ConnectorId.GITHUB_REPO.value: lambda _: "Fetched latest pull requests and commits.",
    ConnectorId.STRIPE_FINANCE.value: lambda _: "Fetched balance and transaction summaries.",
    ConnectorId.FITBIT_HEALTH.value: lambda _: "Fetched recent step count and sleep stats.",
    ConnectorId.SEMANTIC_SEARCH.value: lambda _: "Performed general semantic search for context.",
})


class TemplateConnectorClient(ConnectorClient):
    """
    Connector client answering from a fixed table of summary templates.

    Args:
        templates: Connector id -> callable taking the time hint and returning the summary.
            Defaults to `DEFAULT_SUMMARY_TEMPLATES`.
    """

    def __init__(self, templates: Optional[Mapping[str, SummaryTemplate]] = None) -> None:
        self._templates = MappingProxyType(dict(templates if templates is not None else DEFAULT_SUMMARY_TEMPLATES))

    async def fetch_summary(
        self,
        connector: str,
        query: str,
        time_hint: Optional[TimeHint],
        identity: Optional[str],
    ) -> str:
        template = self._templates.get(connector)
        if template is None:
            return NO_DATA_SUMMARY
        return template(time_hint)
