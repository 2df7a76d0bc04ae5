"""
shared/models.py

Common data models and type definitions used across the orchestration stages.

The request-scoped values (IntentResult, ConnectorContext, RetrievedContext,
AugmentedPrompt, ...) are frozen dataclasses: each stage produces a fresh value
and nothing downstream can mutate what an earlier stage handed over. The HTTP
boundary uses Pydantic models so FastAPI can validate and document the payloads.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum
from pydantic import BaseModel, Field

NO_DATA_SUMMARY = "No data available"

LIVE_SEARCH_TOOL_NAME = "google_search"

class ConnectorId(str, Enum):
    """
    Connectors the orchestrator knows how to consult.

    SEMANTIC_SEARCH is the general-purpose fallback selected when no keyword rule
    fires; it is never offered to the LLM classifier as a choice.
    """
    GOOGLE_CALENDAR = "google_calendar"
    AWS_MONITOR = "aws_monitor"
    NOTION_DOCS = "notion_docs"
    GITHUB_REPO = "github_repo"
    STRIPE_FINANCE = "stripe_finance"
    FITBIT_HEALTH = "fitbit_health"
    SEMANTIC_SEARCH = "semantic_search"

    @classmethod
    def classifiable(cls) -> Tuple["ConnectorId", ...]:
        """Vocabulary offered to the LLM classifier."""
        return tuple(c for c in cls if c is not cls.SEMANTIC_SEARCH)

    @classmethod
    def parse(cls, value: str) -> Optional["ConnectorId"]:
        """Return the member for `value`, or None if it is not a known connector."""
        try:
            return cls(value)
        except ValueError:
            return None

class TimeHint(str, Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"
    NEXT_WEEK = "next_week"

@dataclass(frozen=True)
class IntentResult:
    """
    Outcome of intent resolution for one query.

    `connectors` is an ordered set: entries are unique and never empty, but their
    order carries no meaning and callers must not depend on it.
    """
    connectors: Tuple[str, ...]
    time_hint: Optional[TimeHint] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connectors": list(self.connectors),
            "time_hint": self.time_hint.value if self.time_hint else None,
        }

@dataclass(frozen=True)
class ClassificationResult:
    """
    Result of one LLM classification attempt.

    A failed attempt carries the reason in `error` and an empty connector tuple, so
    callers can collapse either outcome to a plain sequence without branching.
    """
    connectors: Tuple[str, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, reason: str) -> "ClassificationResult":
        return cls(connectors=(), error=reason)

@dataclass(frozen=True)
class ConnectorContext:
    connector: str
    summary: str

    def to_dict(self) -> Dict[str, str]:
        return {"connector": self.connector, "summary": self.summary}

@dataclass(frozen=True)
class RetrievedContext:
    context_text: str
    use_search_tool: bool

@dataclass(frozen=True)
class AugmentedPrompt:
    """
    Final prompt handed to the completion model.

    `tools` is None when live search is not requested. None is not the same as an
    empty list: downstream consumers treat an absent descriptor as "use defaults".
    """
    final_prompt: str
    tools: Optional[List[Dict[str, Any]]] = None

    @property
    def tools_enabled(self) -> bool:
        return self.tools is not None

    @property
    def tools_label(self) -> str:
        return LIVE_SEARCH_TOOL_NAME if self.tools_enabled else "None"

def live_search_tools() -> List[Dict[str, Any]]:
    """Build a fresh live-search tool descriptor."""
    return [{LIVE_SEARCH_TOOL_NAME: {}}]

class QueryRequest(BaseModel):
    """
    Request payload for the query endpoint.

    `query` is optional at the schema level so the endpoint can answer a missing
    or blank query with its own 400 error instead of a generic validation error.
    """
    user_id: Optional[str] = Field(None, description="Opaque caller identifier, echoed back")
    query: Optional[str] = Field(None, description="Free-text user query")

class ConnectorSource(BaseModel):
    connector: str
    summary: str

class QueryMetadata(BaseModel):
    user_id: Optional[str] = None
    interaction_id: str
    connectors_analyzed: List[str]
    time_hint: Optional[str] = None
    tools_enabled_by_context_manager: str
    mcp_sources: List[ConnectorSource] = Field(default_factory=list)
    context_summary: str = ""

class QueryResponse(BaseModel):
    """Response payload returned by the query endpoint."""
    final_llm_prompt: str
    final_response: str
    mcp_metadata: QueryMetadata
