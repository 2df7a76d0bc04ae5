"""
provider.py – External LLM client with provider routing and validation.
-------------------------------------------------------------------------
In the overall data-flow this file sits at the infrastructure layer.
It is the single place where we talk to the external LLM platform
(Nebius- or OpenAI-compatible endpoints).

Why a *provider* module?
• Keeps third-party SDK initialisation separate from business logic.
• Offers a tiny, easily mockable `get_client()` function instead of a
  global singleton. Tests patch this function or inject a fake client.
• Callers (the connector classifier, the completion client) simply ask
  for a client; they do not need to know about base URLs or API keys.

The client is asynchronous (`AsyncOpenAI`): classification and completion
requests are awaited inside the request's event loop, so they overlap with
connector fetches instead of blocking them.

Validation happens at client creation time (not import time). A missing key
therefore surfaces as a RuntimeError from `get_client()`, which the classifier
treats like any other transport failure.

Provider routing logic:
- "nebius": Uses Nebius-compatible API with LLM_API_KEY/NEBIUS_API_KEY
- "openai": Uses OpenAI's official API with OPENAI_API_KEY
- Unsupported providers raise ValueError with clear error message
"""

import logging
import os
from typing import Dict, List, Tuple

from openai import AsyncOpenAI
from config import CONFIG

logger = logging.getLogger(__name__)


def require_any_env(var_names: List[str]) -> Tuple[str, str]:
    """
    Check that at least one of the specified environment variables is present and non-empty.

    The function never logs or returns anything about the secret other than the
    name of the variable it came from.

    Args:
        var_names (List[str]): Environment variable names to check, in order of preference.

    Returns:
        Tuple[str, str]: (selected_var_name, value) for the first variable that is set.

    Raises:
        RuntimeError: If none of the specified environment variables are present or are empty.

    Example:
        >>> var_name, secret = require_any_env(["LLM_API_KEY", "NEBIUS_API_KEY"])
        >>> print(f"Using {var_name} for authentication")
        Using LLM_API_KEY for authentication
    """
    for var_name in var_names:
        value = os.getenv(var_name, "")
        if value:
            return var_name, value

    var_list = ", ".join(var_names)
    raise RuntimeError(
        f"Missing required environment variable. Set one of: {var_list}"
    )


def validate_env_for_provider(config: Dict) -> None:
    """
    Validate that required environment variables are present for the configured LLM provider.

    Args:
        config (Dict): The configuration dictionary, expected to contain an 'llm' section
            with a 'provider' key specifying either 'nebius' or 'openai'.

    Raises:
        ValueError: If an unsupported provider is configured.
        RuntimeError: If the required environment variables for the selected provider
            are missing or empty.
    """
    llm_config = config.get("llm", {})
    provider = llm_config.get("provider", "openai").strip().lower()

    if provider == "nebius":
        selected_var, _ = require_any_env(["LLM_API_KEY", "NEBIUS_API_KEY"])
    elif provider == "openai":
        selected_var, _ = require_any_env(["OPENAI_API_KEY"])
    else:
        raise ValueError(f"Unsupported LLM provider: {provider}")

    logger.debug("LLM provider %s uses environment variable: %s", provider, selected_var)


def get_client() -> AsyncOpenAI:
    """
    Build and return a configured OpenAI-compatible async client with provider routing.

    Provider selection logic:
    - "nebius": `CONFIG["llm"]["base_url"]` with LLM_API_KEY or NEBIUS_API_KEY
    - "openai": OpenAI's official endpoint with OPENAI_API_KEY

    The SDK's own timeout is aligned with `CONFIG["llm"]["timeout_s"]`; callers still
    wrap requests in `asyncio.wait_for` so a stalled connection cannot outlive it.

    Returns:
        AsyncOpenAI: A ready-to-use client configured for the selected provider.

    Raises:
        RuntimeError: If required environment variables are missing (via validation).
        ValueError: If an unsupported provider is configured.
    """
    validate_env_for_provider(CONFIG)

    llm_config = CONFIG.get("llm", {})
    provider = llm_config.get("provider", "openai").strip().lower()

    if provider == "nebius":
        _, api_key = require_any_env(["LLM_API_KEY", "NEBIUS_API_KEY"])
        base_url = llm_config.get("base_url", "https://api.studio.nebius.com/v1/")
    else:
        _, api_key = require_any_env(["OPENAI_API_KEY"])
        base_url = "https://api.openai.com/v1"

    logger.info("LLM provider selected: %s | base_url=%s", provider, base_url)

    return AsyncOpenAI(
        base_url=base_url,
        api_key=api_key,
        timeout=float(llm_config.get("timeout_s", 10.0)),
        max_retries=0,  # a failed classification degrades instead of retrying
    )
