"""
Connector-agnostic client interface for context summaries.

This module defines the contract any connector data source must fulfil to be
consulted by the connector fetch stage. The adapter pattern keeps connector
specifics (OAuth flows for a calendar, repository matching and REST calls for a
code host, metric queries for a monitoring service) out of the orchestration
code: the fetch stage only ever asks a client for a short, human-readable summary.

A template-based implementation lives in `connectors.template_client` so the
service runs end-to-end without credentials or network access. Integrating a real
data source means subclassing `ConnectorClient` and registering the instance for
its connector id when building the `ConnectorFetchStage`.
"""

from abc import ABC, abstractmethod
from typing import Optional

from shared.models import TimeHint


class ConnectorClient(ABC):
    """
    Abstract source of a context summary for one or more connectors.

    Implementations may raise on failure; the fetch stage catches the error,
    logs it, and substitutes the "No data available" summary for that connector
    only. Implementations should not retry indefinitely: the fetch stage bounds
    every call with a timeout and treats expiry as a failure.
    """

    @abstractmethod
    async def fetch_summary(
        self,
        connector: str,
        query: str,
        time_hint: Optional[TimeHint],
        identity: Optional[str],
    ) -> str:
        """
        Return a short summary of what this connector knows that is relevant to the query.

        Args:
            connector (str): Connector id being served (one client may serve several).
            query (str): The raw user query, e.g. used to pick a repository by name.
            time_hint (Optional[TimeHint]): Time window resolved from the query, if any.
            identity (Optional[str]): Opaque caller identifier, passed through untouched.

        Returns:
            str: Free-text summary. Its content is opaque to the orchestrator.
        """
        raise NotImplementedError
