"""
core/rule_analyzer.py

Deterministic, keyword-based intent analysis.

The analyzer is the half of intent resolution that can never fail: it performs
no I/O and always returns at least one connector, which is what lets the hybrid
resolver promise a non-empty result even when the LLM classifier is down.
"""

import re
from typing import Optional

from shared.models import ConnectorId, IntentResult, TimeHint
from .rules import ConnectorRuleTable

NEXT_WEEK_PATTERN = re.compile(r"next\s+week")


def detect_time_hint(text: str) -> Optional[TimeHint]:
    """
    Find the time hint in an already lower-cased query.

    Checks run in priority order and the first match wins, so a query mentioning
    both "today" and "tomorrow" is a "today" query.
    """
    if "today" in text:
        return TimeHint.TODAY
    if "tomorrow" in text:
        return TimeHint.TOMORROW
    if NEXT_WEEK_PATTERN.search(text):
        return TimeHint.NEXT_WEEK
    return None


class RuleBasedAnalyzer:
    """
    Select connectors whose trigger strings occur in the query.

    Matching is a plain case-insensitive substring test (not tokenized), so a
    trigger inside a larger word still counts: "serverless" hits "server".
    """

    def __init__(self, rules: ConnectorRuleTable):
        self.rules = rules

    def analyze(self, query: str) -> IntentResult:
        text = query.lower()
        connectors = tuple(
            connector.value
            for connector, triggers in self.rules.items()
            if any(trigger in text for trigger in triggers)
        )
        if not connectors:
            connectors = (ConnectorId.SEMANTIC_SEARCH.value,)
        return IntentResult(connectors=connectors, time_hint=detect_time_hint(text))
