"""
shared/__init__.py

Shared utilities and models used across multiple modules.

This package contains common functionality that is used by the orchestration
stages and the HTTP layer:
- models: Request-scoped value objects and API payload schemas
- utils: Small helpers (interaction ids, log-friendly truncation)
"""
