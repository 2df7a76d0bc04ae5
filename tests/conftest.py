"""
conftest.py – central pytest configuration and test bootstrap ("config test").

Pytest imports this module before it collects any test files, which gives us one place to
prepare the environment so that later imports succeed consistently:

1) Extend `sys.path` with the project root so absolute-style imports like `from core ...`
   and `from shared ...` resolve without an editable install.
2) Provide safe default environment variables read by the configuration layer. The LLM
   provider only needs `OPENAI_API_KEY` when a client is actually built, and every test
   injects a fake client, so the value is never sent anywhere.
3) Keep the final completion call on its offline path unless a test opts in explicitly.
"""

import os
import sys
from pathlib import Path

# Ensure project root is on sys.path for direct imports like `core`, `shared`, etc.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Provide required environment defaults for tests
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("LLM_COMPLETION_ENABLED", "false")
