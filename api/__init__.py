"""
API package.

FastAPI routers for the context orchestrator:
- query: POST /api/mcp-query, the query orchestration endpoint
- health: GET / and GET /health liveness/readiness checks

Routers are mounted by the application in main.py.
"""
