import pytest
from openai import AsyncOpenAI


@pytest.fixture
def llm_config():
    from config import CONFIG  # type: ignore

    original = dict(CONFIG["llm"])
    yield CONFIG["llm"]
    CONFIG["llm"].clear()
    CONFIG["llm"].update(original)


@pytest.mark.parametrize("provider, env_var", [("nebius", "LLM_API_KEY"), ("openai", "OPENAI_API_KEY")])
def test_get_client_builds(provider, env_var, llm_config, monkeypatch):
    from llm_cloud.provider import get_client  # type: ignore

    monkeypatch.setenv(env_var, "test-key")
    # Switch provider in-memory
    llm_config["provider"] = provider

    client = get_client()
    assert isinstance(client, AsyncOpenAI)
    assert client.max_retries == 0


def test_nebius_accepts_legacy_key_name(llm_config, monkeypatch):
    from llm_cloud.provider import get_client  # type: ignore

    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.setenv("NEBIUS_API_KEY", "test-key")
    llm_config["provider"] = "nebius"

    assert "nebius" in str(get_client().base_url)


def test_missing_key_raises(llm_config, monkeypatch):
    from llm_cloud.provider import get_client  # type: ignore

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    llm_config["provider"] = "openai"

    with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
        get_client()


def test_unsupported_provider_raises(llm_config):
    from llm_cloud.provider import get_client  # type: ignore

    llm_config["provider"] = "acme"
    with pytest.raises(ValueError, match="Unsupported LLM provider"):
        get_client()


def test_require_any_env_prefers_first_name(monkeypatch):
    from llm_cloud.provider import require_any_env  # type: ignore

    monkeypatch.setenv("LLM_API_KEY", "primary")
    monkeypatch.setenv("NEBIUS_API_KEY", "legacy")
    assert require_any_env(["LLM_API_KEY", "NEBIUS_API_KEY"]) == ("LLM_API_KEY", "primary")
