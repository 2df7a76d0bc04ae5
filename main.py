""" main.py: FastAPI application entry point and runtime configuration.

This module builds the ASGI app, mounts API routers, configures CORS, and exposes a
Prometheus metrics endpoint. It centralizes web-layer wiring so the rest of the
codebase can focus on intent resolution and context assembly. When executed directly,
it starts a Uvicorn server using host/port values from configuration.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
import logging
from config import CONFIG
from monitoring import REQUEST_COUNT
from version import __version__

# --- Router Imports ---
from api import health as health_router
from api import query as query_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Context Orchestrator", version=__version__)

app.include_router(health_router.router, tags=["Health"])
app.include_router(query_router.router, prefix="/api", tags=["Query"])

# Add Prometheus metrics endpoint
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

allow_origins = CONFIG.get('cors', {}).get('allow_origins', ["*"])
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Answer any unhandled error with HTTP 500 and the error message."""
    logger.error("Error processing request %s: %s", request.url.path, exc)
    REQUEST_COUNT.labels(method=request.method, endpoint=request.url.path, status="500").inc()
    return JSONResponse({"error": str(exc)}, status_code=500)


if __name__ == '__main__':
    import uvicorn
    host = CONFIG.get('server', {}).get('host', '0.0.0.0')
    port = CONFIG.get('server', {}).get('port', 3000)
    logger.info("[__main__] Server running at http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port)
