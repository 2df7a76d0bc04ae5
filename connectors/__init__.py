"""
connectors package: connector-agnostic context sources.

The fetch stage talks to every data source (calendar, monitoring, docs,
repository, finance, fitness, generic search) through one small contract, so
swapping the template-based source for a real API client never touches the
orchestration code.

Included modules:
- base: The abstract `ConnectorClient` interface.
- template_client: A deterministic implementation answering from fixed summary
  templates, used by default and in tests.
"""

from .base import ConnectorClient
from .template_client import TemplateConnectorClient, DEFAULT_SUMMARY_TEMPLATES

__all__ = [
    "ConnectorClient",
    "TemplateConnectorClient",
    "DEFAULT_SUMMARY_TEMPLATES",
]
