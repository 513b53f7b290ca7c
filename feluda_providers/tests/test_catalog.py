from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest
import requests

from feluda_providers.base.errors import ErrorCode, ProviderError
from feluda_providers.catalog import list_models, supported_providers
from feluda_providers.groq.get_groq_models import display_name


class _Response:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        return self._payload


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, headers=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class _GroqLister:
    def __init__(self, ids):
        self.ids = ids

    def list_models(self):
        return [SimpleNamespace(id=i) for i in self.ids]


def test_supported_providers():
    assert supported_providers() == ["gemini", "groq", "openrouter"]


def test_unknown_provider_is_not_found():
    with pytest.raises(ProviderError) as info:
        list_models("anthropic")
    assert info.value.code is ErrorCode.NOT_FOUND


def test_gemini_listing_is_static():
    wire = [e.to_wire() for e in list_models("gemini")]
    assert [m["id"] for m in wire] == ["gemini-1.5-pro", "gemini-1.5-flash"]
    assert wire[0]["maxTokens"] == 1_000_000
    assert wire[0]["provider"] == "Google"
    assert wire[1]["topP"] == 0.4


def test_openrouter_keeps_free_non_deprecated(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-real")
    monkeypatch.setenv("NEXT_PUBLIC_APP_URL", "https://feluda.example.org")
    payload = {
        "data": [
            {"id": "meta-llama/llama-3.1-8b-instruct:free", "name": "Llama 3.1 8B (free)", "context_length": 131072, "pricing": {"prompt": "0"}},
            {"id": "openai/gpt-4o", "context_length": 128000},
            {"id": "old/deprecated-model:free"},
            {"id": "qwen/qwen-2-7b-instruct:free"},
        ]
    }
    session = _Session(_Response(payload))
    entries = list_models("openrouter", session=session)
    wire = [e.to_wire() for e in entries]
    assert [m["id"] for m in wire] == ["meta-llama/llama-3.1-8b-instruct:free", "qwen/qwen-2-7b-instruct:free"]
    assert wire[0]["maxTokens"] == 131072
    assert wire[0]["contextWindow"] == 131072
    assert wire[0]["pricing"] == {"prompt": "0"}
    assert wire[1]["name"] == "qwen-2-7b-instruct"
    assert wire[1]["maxTokens"] == 8192
    assert "contextWindow" not in wire[1]
    sent = session.requests[0]
    assert sent["url"] == "https://openrouter.ai/api/v1/models"
    assert sent["headers"]["Authorization"] == "Bearer sk-or-real"
    assert sent["headers"]["X-Title"] == "FeludaAI"
    # "example" marks placeholder keys, never referers
    assert sent["headers"]["HTTP-Referer"] == "https://feluda.example.org"


@pytest.mark.parametrize(
    "session",
    [
        _Session(error=requests.ConnectionError("connection refused")),
        _Session(_Response({"error": "nope"}, status=503)),
        _Session(_Response({"data": [{"id": "openai/gpt-4o"}]})),
    ],
)
def test_openrouter_degrades_to_fallback(session, test_logger, caplog):
    with caplog.at_level(logging.WARNING, logger=test_logger.name):
        entries = list_models("openrouter", session=session, logger=test_logger)
    assert [e.display_name for e in entries] == ["Hermes 3 405B", "Llama 3.1 70B"]
    assert any("catalog.fallback" in r.getMessage() for r in caplog.records)


def test_groq_filters_preferred_in_order():
    lister = _GroqLister(["whisper-large-v3", "llama-3.2-11b-vision-preview", "llama-3.2-90b-vision-preview"])
    entries = list_models("groq", client=lister)
    assert [e.id for e in entries] == ["llama-3.2-90b-vision-preview", "llama-3.2-11b-vision-preview"]
    assert entries[0].display_name == "Llama 3.2-90b Vision"
    assert all(e.max_tokens == 8192 and e.provider == "Groq" for e in entries)


def test_groq_without_key_falls_back():
    entries = list_models("groq")
    assert [e.to_wire()["name"] for e in entries] == ["Llama 3.2 90B Vision"]


def test_display_name():
    assert display_name("llama-3.1-70b-versatile") == "Llama 3.1-70b Versatile"
