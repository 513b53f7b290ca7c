from __future__ import annotations

import json

from feluda_providers.config import get_provider_config, reset_config_cache
from feluda_providers.config.env import get_env_var_candidates, is_placeholder, resolve_provider_key


def test_defaults_have_base_urls():
    assert get_provider_config("groq")["base_url"] == "https://api.groq.com/openai/v1"
    assert get_provider_config("xai")["base_url"] == "https://api.x.ai/v1"
    assert "api_key" not in get_provider_config("together")


def test_alias_env_vars(monkeypatch):
    assert list(get_env_var_candidates("google")) == ["GEMINI_API_KEY", "GOOGLE_API_KEY"]
    monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
    assert resolve_provider_key("google") == ("g-key", "GOOGLE_API_KEY")
    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    assert resolve_provider_key("google") == ("primary", "GEMINI_API_KEY")


def test_placeholder_keys_are_ignored(monkeypatch):
    assert is_placeholder("your-placeholder-key")
    assert is_placeholder("test_abc")
    assert not is_placeholder("sk-live")
    monkeypatch.setenv("GROQ_API_KEY", "changeme")
    assert "api_key" not in get_provider_config("groq")


def test_merge_order(monkeypatch, tmp_path):
    cfg_file = tmp_path / "providers.json"
    cfg_file.write_text(json.dumps({"groq": {"model": "from-file", "base_url": "http://file"}}))
    monkeypatch.setenv("FELUDA_PROVIDERS_CONFIG_FILE", str(cfg_file))
    reset_config_cache()
    assert get_provider_config("groq")["model"] == "from-file"
    monkeypatch.setenv("GROQ_MODEL", "from-env")
    cfg = get_provider_config("groq", overrides={"base_url": "http://override", "model": None})
    assert cfg["model"] == "from-env"
    assert cfg["base_url"] == "http://override"


def test_yaml_config_file(monkeypatch, tmp_path):
    cfg_file = tmp_path / "providers.yaml"
    cfg_file.write_text("mistral:\n  model: pixtral-large-latest\n")
    monkeypatch.setenv("FELUDA_PROVIDERS_CONFIG_FILE", str(cfg_file))
    reset_config_cache()
    assert get_provider_config("mistral")["model"] == "pixtral-large-latest"


def test_openrouter_referer(monkeypatch):
    monkeypatch.setenv("FELUDA_APP_URL", "https://feluda.app")
    assert get_provider_config("openrouter")["referer"] == "https://feluda.app"
    assert "referer" not in get_provider_config("groq")
