"""
core/rules.py

Connector rule table: which keywords or phrases point a query at which connector.

The table is loaded once at process start from `config/intent_rules.json`. The
file maps connector ids to lists of trigger strings. When the file is missing or
malformed (not an object, unknown connector id, non-string trigger) the built-in
default table is used instead and a warning is logged; a bad rules file never
stops the service from starting.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Sequence, Tuple, Union

from shared.models import ConnectorId

logger = logging.getLogger(__name__)

DEFAULT_CONNECTOR_RULES = {
    ConnectorId.GOOGLE_CALENDAR: ("meeting", "schedule", "calendar", "free", "busy"),
    ConnectorId.AWS_MONITOR: ("server", "status", "deployment", "aws", "error", "uptime"),
    ConnectorId.NOTION_DOCS: ("note", "decision", "project", "document", "summary"),
    ConnectorId.GITHUB_REPO: ("pull request", "repo", "commit", "issue"),
    ConnectorId.STRIPE_FINANCE: ("payment", "invoice", "balance", "transaction"),
    ConnectorId.FITBIT_HEALTH: ("steps", "sleep", "fitness", "health"),
}


class RuleTableError(ValueError):
    """Raised when a rule table definition does not have the expected shape."""


class ConnectorRuleTable:
    """
    Immutable mapping from ConnectorId to its ordered trigger strings.

    Triggers are stored lower-cased because the analyzer matches them against the
    lower-cased query. Iteration follows the order the table was defined in.
    """

    def __init__(self, rules: Mapping[ConnectorId, Sequence[str]]):
        normalized = {}
        for connector, triggers in rules.items():
            if not isinstance(connector, ConnectorId):
                raise RuleTableError(f"Unknown connector id: {connector!r}")
            if isinstance(triggers, str) or not all(isinstance(t, str) and t for t in triggers):
                raise RuleTableError(f"Triggers for {connector.value} must be a list of non-empty strings")
            normalized[connector] = tuple(t.lower() for t in triggers)
        self._rules = MappingProxyType(normalized)

    @classmethod
    def default(cls) -> "ConnectorRuleTable":
        return cls(DEFAULT_CONNECTOR_RULES)

    @classmethod
    def from_dict(cls, data: object) -> "ConnectorRuleTable":
        """
        Build a table from decoded JSON such as `{"google_calendar": ["meeting", ...]}`.

        Raises:
            RuleTableError: If the data is not an object of connector id -> list of strings.
        """
        if not isinstance(data, dict):
            raise RuleTableError("Rule table must be a JSON object")
        rules = {}
        for key, triggers in data.items():
            connector = ConnectorId.parse(key)
            if connector is None:
                raise RuleTableError(f"Unknown connector id: {key!r}")
            if not isinstance(triggers, list):
                raise RuleTableError(f"Triggers for {key} must be a list")
            rules[connector] = triggers
        return cls(rules)

    def items(self) -> Iterator[Tuple[ConnectorId, Tuple[str, ...]]]:
        return iter(self._rules.items())

    def triggers_for(self, connector: ConnectorId) -> Tuple[str, ...]:
        return self._rules.get(connector, ())

    def __contains__(self, connector: object) -> bool:
        return connector in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"ConnectorRuleTable({len(self)} connectors)"


def load_rule_table(path: Optional[Union[str, Path]]) -> ConnectorRuleTable:
    """
    Load the connector rule table from a JSON file, falling back to the defaults.

    Args:
        path: Location of the rules file. None means "use the defaults".

    Returns:
        ConnectorRuleTable: The table from the file, or the built-in default table
        when the file is absent, unreadable, not valid JSON, or has the wrong shape.
    """
    if not path:
        return ConnectorRuleTable.default()
    try:
        with open(path, "r", encoding="utf-8") as f:
            table = ConnectorRuleTable.from_dict(json.load(f))
    except FileNotFoundError:
        logger.warning("No connector rules file found at %s, using defaults", path)
        return ConnectorRuleTable.default()
    except (OSError, json.JSONDecodeError, RuleTableError) as e:
        logger.warning("Connector rules file %s is malformed (%s), using defaults", path, e)
        return ConnectorRuleTable.default()

    logger.info("Connector rules loaded successfully from %s (%d connectors)", path, len(table))
    return table
