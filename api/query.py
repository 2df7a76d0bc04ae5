"""
api/query.py

HTTP entry point for query orchestration.

Endpoints:
  - POST /mcp-query: Receives `{user_id, query}`, runs the query through intent
                     resolution, connector fetches, context preparation and the
                     final completion, and returns the assembled payload.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core.orchestrator import QueryOrchestrator
from config import CONFIG
from monitoring import REQUEST_COUNT, REQUEST_LATENCY, track_errors
from shared.models import QueryRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_orchestrator() -> QueryOrchestrator:
    """
    Build the process-wide orchestrator on first use.

    The connector rule table and topic table are read from disk once here and
    shared read-only by every request afterwards.
    """
    return QueryOrchestrator(CONFIG)


@router.post("/mcp-query")
@track_errors('http', 'mcp_query')
async def handle_query(req: QueryRequest, orchestrator: QueryOrchestrator = Depends(get_orchestrator)):
    """
    Process a user query and return the augmented prompt, the model answer and connector metadata.

    Args:
        req (QueryRequest): `query` is required and must not be blank; `user_id` is an opaque
            identifier echoed back in the metadata.

    Returns:
        JSONResponse: The `QueryResponse` payload on success. HTTP 400 with
            `{"error": "Missing query text"}` when the query is missing or blank.

    Note:
        Unexpected errors propagate to the application-level handler in main.py, which
        answers HTTP 500 with `{"error": <message>}`.
    """
    with REQUEST_LATENCY.labels(method="POST", endpoint="/api/mcp-query").time():
        if not req.query or not req.query.strip():
            logger.warning("[handle_query] Rejected request without query text (user_id=%s)", req.user_id)
            REQUEST_COUNT.labels(method="POST", endpoint="/api/mcp-query", status="400").inc()
            return JSONResponse({"error": "Missing query text"}, status_code=400)

        logger.info("[handle_query] Received query for user: %s", req.user_id)
        result = await orchestrator.process_query(req.query, req.user_id)

        REQUEST_COUNT.labels(method="POST", endpoint="/api/mcp-query", status="200").inc()
        return JSONResponse(result.model_dump())
