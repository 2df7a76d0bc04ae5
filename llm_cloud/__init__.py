"""Top-level package exports for llm_cloud.

This package holds the LLM infrastructure used around the orchestration core:
    • provider.py   – async client configuration and provider routing
    • completion.py – final answer generation from the augmented prompt
"""

from .provider import get_client
from .completion import CompletionClient

__all__ = [
    "get_client",
    "CompletionClient",
]
