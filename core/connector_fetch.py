"""
core/connector_fetch.py

Concurrent fan-out/fan-in over the connectors selected by intent resolution.
"""

import asyncio
import logging
from typing import List, Mapping, Optional

from config import CONFIG
from connectors import ConnectorClient, TemplateConnectorClient
from monitoring import CONNECTOR_FETCH_TIME, record_degradation
from shared.models import ConnectorContext, IntentResult, NO_DATA_SUMMARY, TimeHint

logger = logging.getLogger(__name__)


class ConnectorFetchStage:
    """
    Collect one ConnectorContext per selected connector.

    Every connector is looked up concurrently. A connector with no registered
    client is served by the default client. Failures are contained per item:
    an exception, a timeout, or an unknown connector id turns into a
    "No data available" summary for that connector while its siblings complete
    normally. The stage returns only after every lookup has finished, in the
    order of `intent.connectors`.
    """

    def __init__(
        self,
        clients: Optional[Mapping[str, ConnectorClient]] = None,
        default_client: Optional[ConnectorClient] = None,
        timeout_s: Optional[float] = None,
    ):
        """
        Args:
            clients: Connector id -> client for connectors backed by a dedicated source.
            default_client: Client for every other connector. Defaults to `TemplateConnectorClient()`.
            timeout_s: Per-connector upper bound in seconds. Defaults to `CONFIG["connectors"]["timeout_s"]`.
        """
        self.clients = dict(clients or {})
        self.default_client = default_client or TemplateConnectorClient()
        self.timeout_s = float(timeout_s if timeout_s is not None else CONFIG["connectors"]["timeout_s"])

    async def fetch_all(
        self,
        intent: IntentResult,
        query: str,
        identity: Optional[str] = None,
    ) -> List[ConnectorContext]:
        tasks = [
            self.fetch_one(connector, query, intent.time_hint, identity)
            for connector in intent.connectors
        ]
        # fetch_one never raises, so gather preserves a result for every connector
        return list(await asyncio.gather(*tasks))

    async def fetch_one(
        self,
        connector: str,
        query: str,
        time_hint: Optional[TimeHint],
        identity: Optional[str],
    ) -> ConnectorContext:
        client = self.clients.get(connector, self.default_client)
        try:
            with CONNECTOR_FETCH_TIME.labels(connector=connector).time():
                summary = await asyncio.wait_for(
                    client.fetch_summary(connector, query, time_hint, identity),
                    timeout=self.timeout_s,
                )
        except asyncio.TimeoutError:
            logger.warning("Connector %s timed out after %ss", connector, self.timeout_s)
            record_degradation("connector", connector)
            summary = NO_DATA_SUMMARY
        except Exception as e:
            logger.warning("Connector %s failed: %s: %s", connector, type(e).__name__, e)
            record_degradation("connector", connector)
            summary = NO_DATA_SUMMARY

        if not isinstance(summary, str) or not summary:
            summary = NO_DATA_SUMMARY
        return ConnectorContext(connector=connector, summary=summary)
