"""
core/topics.py

Topic table for the context manager: trigger phrases, reference excerpts per
topic, and the phrases that signal a need for live data.

The table is read from `config/topic_sources.json` once at start-up:

    {
      "triggers": [{"phrase": "deployment", "topic": "Continuous Deployment"}, ...],
      "sources": {"continuous deployment": ["excerpt", ...], ...},
      "recency_cues": ["right now"]
    }

A missing or malformed file falls back to the built-in table below.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_TRIGGERS: Tuple[Tuple[str, str], ...] = (
    ("deployment", "Continuous Deployment"),
    ("ML", "Machine Learning"),
    ("cloud migration", "Cloud Migration"),
)

DEFAULT_TOPIC_SOURCES = {
    "continuous deployment": (
        "CD is the practice of automatically deploying code changes to production. The biggest challenge in 2025 is typically security validation within the automated pipeline.",
        "A common bottleneck is integration testing across microservices, requiring complex environment orchestration.",
        "Organizational challenges, specifically lack of trust between Dev and Ops, often prevent full CD adoption.",
    ),
    "machine learning": (
        "MLOps teams often struggle with model drift and continuous retraining pipeline complexity.",
    ),
    "cloud migration": (
        "Cost optimization and vendor lock-in are primary risks when migrating to the cloud.",
    ),
}

DEFAULT_RECENCY_CUES: Tuple[str, ...] = ("right now",)


class TopicTableError(ValueError):
    """Raised when a topic table definition does not have the expected shape."""


@dataclass(frozen=True)
class TopicTable:
    """
    Immutable topic configuration.

    Attributes:
        triggers: Ordered (phrase, topic label) pairs. Phrases are matched as written,
            so acronyms such as "ML" only match in upper case.
        sources: Lower-cased topic label -> reference excerpts, most relevant first.
        recency_cues: Lower-cased phrases that call for live search grounding.
    """
    triggers: Tuple[Tuple[str, str], ...]
    sources: Mapping[str, Tuple[str, ...]]
    recency_cues: Tuple[str, ...]

    @classmethod
    def build(cls, triggers, sources, recency_cues) -> "TopicTable":
        return cls(
            triggers=tuple((phrase, topic) for phrase, topic in triggers),
            sources=MappingProxyType({k.lower(): tuple(v) for k, v in sources.items()}),
            recency_cues=tuple(cue.lower() for cue in recency_cues),
        )

    @classmethod
    def default(cls) -> "TopicTable":
        return cls.build(DEFAULT_TOPIC_TRIGGERS, DEFAULT_TOPIC_SOURCES, DEFAULT_RECENCY_CUES)

    @classmethod
    def empty(cls) -> "TopicTable":
        return cls.build((), {}, DEFAULT_RECENCY_CUES)

    @classmethod
    def from_dict(cls, data: object) -> "TopicTable":
        """
        Build a table from decoded JSON.

        Raises:
            TopicTableError: If any section has the wrong shape.
        """
        if not isinstance(data, dict):
            raise TopicTableError("Topic table must be a JSON object")

        raw_triggers = data.get("triggers", [])
        if not isinstance(raw_triggers, list):
            raise TopicTableError("'triggers' must be a list")
        triggers = []
        for entry in raw_triggers:
            if not isinstance(entry, dict) or not isinstance(entry.get("phrase"), str) \
                    or not isinstance(entry.get("topic"), str) or not entry["phrase"]:
                raise TopicTableError(f"Invalid trigger entry: {entry!r}")
            triggers.append((entry["phrase"], entry["topic"]))

        raw_sources = data.get("sources", {})
        if not isinstance(raw_sources, dict):
            raise TopicTableError("'sources' must be an object")
        for topic, excerpts in raw_sources.items():
            if not isinstance(excerpts, list) or not all(isinstance(e, str) for e in excerpts):
                raise TopicTableError(f"Excerpts for {topic!r} must be a list of strings")

        recency_cues = data.get("recency_cues", list(DEFAULT_RECENCY_CUES))
        if not isinstance(recency_cues, list) or not all(isinstance(c, str) and c for c in recency_cues):
            raise TopicTableError("'recency_cues' must be a list of non-empty strings")

        return cls.build(triggers, raw_sources, recency_cues)

    def excerpts_for(self, topic: str) -> Tuple[str, ...]:
        return self.sources.get(topic.lower(), ())


def load_topic_table(path: Optional[Union[str, Path]]) -> TopicTable:
    """
    Load the topic table from a JSON file, falling back to the built-in default.

    Args:
        path: Location of the topic file. None means "use the defaults".

    Returns:
        TopicTable: The table from the file, or the default table when the file is
        absent, unreadable, not valid JSON, or has the wrong shape.
    """
    if not path:
        return TopicTable.default()
    try:
        with open(path, "r", encoding="utf-8") as f:
            table = TopicTable.from_dict(json.load(f))
    except FileNotFoundError:
        logger.warning("No topic sources file found at %s, using defaults", path)
        return TopicTable.default()
    except (OSError, json.JSONDecodeError, TopicTableError) as e:
        logger.warning("Topic sources file %s is malformed (%s), using defaults", path, e)
        return TopicTable.default()

    logger.info("Topic table loaded from %s (%d triggers, %d topics)", path, len(table.triggers), len(table.sources))
    return table
