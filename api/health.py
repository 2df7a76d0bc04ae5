"""
Health endpoints for the context orchestrator.

GET / answers with a plain-text liveness line; GET /health returns a small JSON
payload with the service version and a UTC timestamp for readiness checks.
Neither touches the LLM provider or any connector.
"""

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from version import __version__

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "MCP Hybrid Analyzer Server is running"


@router.get("/health")
def health() -> Dict[str, str]:
    """
    Return a simple health status payload.

    Returns:
        Dict[str, str]: Keys "status" (always "ok"), "version" and "timestamp"
        (ISO-8601, UTC).
    """
    return {
        "status": "ok",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
