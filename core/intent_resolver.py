"""
core/intent_resolver.py

Hybrid intent resolution: keyword rules plus LLM classification.
"""

import logging
from typing import Optional

from monitoring import CONNECTOR_SELECTIONS
from shared.models import IntentResult
from .classifier import LLMConnectorClassifier
from .rule_analyzer import RuleBasedAnalyzer
from .rules import ConnectorRuleTable

logger = logging.getLogger(__name__)


class HybridIntentResolver:
    """
    Combines the rule-based analyzer and the LLM classifier into one IntentResult.

    The connector set is the deduplicated union of both analyzers. Because the
    rule analyzer always yields at least `semantic_search`, the union is never
    empty, and when the classifier fails the result equals the rule result. The
    time hint comes from the rule analyzer only.
    """

    def __init__(
        self,
        rules: Optional[ConnectorRuleTable] = None,
        rule_analyzer: Optional[RuleBasedAnalyzer] = None,
        llm_analyzer: Optional[LLMConnectorClassifier] = None,
    ):
        self.rule_analyzer = rule_analyzer or RuleBasedAnalyzer(rules if rules is not None else ConnectorRuleTable.default())
        self.llm_analyzer = llm_analyzer or LLMConnectorClassifier()

    async def resolve(self, query: str) -> IntentResult:
        rule_result = self.rule_analyzer.analyze(query)
        llm_connectors = await self.llm_analyzer.classify_connectors(query)

        # dict.fromkeys keeps first occurrences, so rule connectors lead the union
        combined = tuple(dict.fromkeys([*rule_result.connectors, *llm_connectors]))
        for connector in combined:
            CONNECTOR_SELECTIONS.labels(connector=connector).inc()

        logger.info(
            "Intent resolved: rules=%s llm=%s time_hint=%s",
            list(rule_result.connectors),
            llm_connectors,
            rule_result.time_hint.value if rule_result.time_hint else None,
        )
        return IntentResult(connectors=combined, time_hint=rule_result.time_hint)
