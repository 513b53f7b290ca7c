from __future__ import annotations

import threading
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from feluda_providers.base.errors import ErrorCode, ProviderError
from feluda_providers.dispatch import Dispatcher, decode_sse
from feluda_providers.gemini.file_analysis import FileAnalyzer
from feluda_providers.service.app import app
from feluda_providers.service.app_parts.app_core import get_dispatcher, get_file_analyzer, get_image_client, status_for
from feluda_providers.together.client import TogetherClient
from feluda_providers.together.images import TogetherImageClient

from .fakes import FakeGeminiFiles

HERMES = "nousresearch/hermes-3-llama-3.1-405b:free"


class _Images:
    def __init__(self, error=None):
        self.error = error

    def generate(self, **kwargs):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=[SimpleNamespace(url="https://img/fox.png")])


@pytest.fixture()
def gemini_files():
    return FakeGeminiFiles()


@pytest.fixture()
def staging(tmp_path):
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture()
def client(registry, gemini_files, staging):
    app.dependency_overrides[get_dispatcher] = lambda: Dispatcher(registry)
    app.dependency_overrides[get_file_analyzer] = lambda: FileAnalyzer(gemini_files, temp_dir=str(staging))
    app.dependency_overrides[get_image_client] = lambda: TogetherImageClient(
        TogetherClient(sdk_client=SimpleNamespace(images=_Images()))
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health_ok(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_generate_blocking(client, fake_clients):
    r = client.post("/api/generate", json={"model": "groq", "prompt": "hi", "options": {"maxTokens": 12}})
    assert r.status_code == 200
    assert r.json() == {"result": "groq says hi"}
    assert fake_clients.groq.calls[0].max_tokens == 12


def test_generate_streams_for_hermes(client):
    r = client.post("/api/generate", json={"model": HERMES, "prompt": "hi", "stream": False})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/event-stream")
    events = decode_sse(r.text)
    assert events[0] == {"text": "Hel", "accumulated": "Hel", "done": False}
    assert events[-1] == {"text": "", "accumulated": "Hello", "done": True}


def test_stream_error_arrives_as_final_event(client, fake_clients):
    fake_clients.openrouter.stream_kwargs = {"error_after": 1, "error": RuntimeError("upstream reset")}
    events = decode_sse(client.post("/api/generate", json={"model": HERMES, "prompt": "hi"}).text)
    assert events[-1]["done"] is True
    assert events[-1]["error"] == "upstream reset"
    assert events[-1]["accumulated"] == "Hel"
    assert fake_clients.openrouter.streams[0].closed


def test_generate_invalid_model(client):
    r = client.post("/api/generate", json={"model": "gpt-4o", "prompt": "hi"})
    assert r.status_code == 500
    assert r.json() == {"error": "Invalid model selected"}


def test_generate_no_content(client, fake_clients):
    fake_clients.google.response = ""
    r = client.post("/api/generate", json={"model": "gemini-1.5-pro", "prompt": "hi"})
    assert r.status_code == 500
    assert r.json() == {"error": "No content generated"}


def test_generate_upstream_message_verbatim(client, fake_clients):
    fake_clients.mistral.error = RuntimeError("Error code: 400 - context length exceeded")
    r = client.post("/api/generate", json={"model": "open-mistral-nemo", "prompt": "hi"})
    assert r.status_code == 500
    assert r.json() == {"error": "Error code: 400 - context length exceeded"}


@pytest.mark.parametrize(
    "code, upstream, status",
    [
        (ErrorCode.TIMEOUT, False, 504),
        (ErrorCode.VALIDATION, False, 400),
        (ErrorCode.NOT_FOUND, False, 404),
        (ErrorCode.INVALID_MODEL, False, 500),
        (ErrorCode.TIMEOUT, True, 500),
        (ErrorCode.VALIDATION, True, 500),
        (ErrorCode.NOT_FOUND, True, 500),
    ],
)
def test_status_for(code, upstream, status):
    assert status_for(ProviderError(code, "m", upstream=upstream)) == status


class _StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


@pytest.mark.parametrize(
    "error",
    [
        _StatusError("Error code: 400 - bad request", 400),
        _StatusError("Error code: 404 - no endpoints found for vendor/model", 404),
        _StatusError("Error code: 408 - request timeout", 408),
        _StatusError("Error code: 504 - gateway timeout", 504),
        RuntimeError("Request timed out."),
        TimeoutError("read timed out"),
    ],
)
def test_generate_upstream_failures_are_500(client, fake_clients, error):
    fake_clients.groq.error = error
    r = client.post("/api/generate", json={"model": "groq", "prompt": "hi"})
    assert r.status_code == 500
    assert r.json() == {"error": str(error)}


def test_vision_upstream_failure_is_500(client, staging):
    failing = FakeGeminiFiles(error=_StatusError("Error code: 400 - invalid argument", 400))
    app.dependency_overrides[get_file_analyzer] = lambda: FileAnalyzer(failing, temp_dir=str(staging))
    r = client.post("/api/vision", files={"file": ("a.png", b"\x89PNG", "image/png")}, data={"prompt": "x"})
    assert r.status_code == 500
    assert r.json() == {"error": "Error code: 400 - invalid argument"}
    assert list(staging.iterdir()) == []


def test_imagine_upstream_400_is_wrapped_500(client):
    app.dependency_overrides[get_image_client] = lambda: TogetherImageClient(
        TogetherClient(sdk_client=SimpleNamespace(images=_Images(error=_StatusError("bad size", 400))))
    )
    r = client.post("/api/imagine", json={"prompt": "a fox"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "bad size"}


@pytest.mark.parametrize("body", [{"prompt": "hi"}, {"model": "groq"}, {"model": "groq", "prompt": "x", "options": {"topP": 3}}])
def test_generate_malformed_body_is_400(client, body):
    r = client.post("/api/generate", json=body)
    assert r.status_code == 400
    assert "error" in r.json()


def test_session_context_and_history(client, fake_clients):
    first = client.post("/api/generate", json={"model": "groq", "prompt": "name a fox", "sessionId": "s1"})
    assert first.status_code == 200
    client.post("/api/generate", json={"model": "groq", "prompt": "make it red", "sessionId": "s1"})
    second_prompt = fake_clients.groq.calls[1].prompt
    assert fake_clients.groq.calls[0].prompt == "name a fox"
    assert "User: name a fox" in second_prompt
    assert "Current request: make it red" in second_prompt

    history = client.get("/api/conversations/s1").json()
    assert history["sessionId"] == "s1"
    assert [e["prompt"] for e in history["exchanges"]] == ["name a fox", "make it red"]
    assert client.get("/api/conversations/other").json()["exchanges"] == []


def test_vision_document(client, gemini_files):
    r = client.post(
        "/api/vision",
        files={"file": ("report.pdf", b"%PDF-1.4", "application/pdf")},
        data={"prompt": "summarize", "systemPrompt": "be brief"},
    )
    assert r.status_code == 200
    assert r.json()["fileType"] == "document"
    assert r.json()["result"].startswith("## Title")
    assert gemini_files.parts[0][0] == "be brief"


def test_vision_requires_file(client):
    r = client.post("/api/vision", data={"prompt": "x"})
    assert r.status_code == 400
    assert r.json() == {"error": "No file provided"}


def test_vision_rejects_unsupported_type(client):
    r = client.post("/api/vision", files={"file": ("a.zip", b"PK", "application/zip")}, data={"prompt": "x"})
    assert r.status_code == 400
    assert r.json() == {"error": "Unsupported file type"}


def test_vision_timeout_is_504_and_cleans_up(client, staging):
    gate = threading.Event()
    slow = FakeGeminiFiles(gate=gate)
    app.dependency_overrides[get_file_analyzer] = lambda: FileAnalyzer(slow, timeout_seconds=0.05, temp_dir=str(staging))
    try:
        r = client.post("/api/vision", files={"file": ("a.png", b"\x89PNG", "image/png")}, data={"prompt": "x"})
    finally:
        gate.set()
    assert r.status_code == 504
    assert r.json()["error"].startswith("Request timed out")
    assert list(staging.iterdir()) == []


def test_imagine(client):
    r = client.post("/api/imagine", json={"prompt": "a fox", "size": "1024x1792"})
    assert r.status_code == 200
    assert r.json() == {"success": True, "data": [{"url": "https://img/fox.png"}]}


def test_imagine_requires_prompt(client):
    r = client.post("/api/imagine", json={})
    assert r.status_code == 400
    assert r.json() == {"error": "Prompt is required"}


def test_imagine_upstream_failure(client):
    app.dependency_overrides[get_image_client] = lambda: TogetherImageClient(
        TogetherClient(sdk_client=SimpleNamespace(images=_Images(error=RuntimeError("quota exhausted"))))
    )
    r = client.post("/api/imagine", json={"prompt": "a fox"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "quota exhausted"}


def test_models_endpoint(client):
    r = client.get("/api/models/gemini")
    assert r.status_code == 200
    assert [m["id"] for m in r.json()["models"]] == ["gemini-1.5-pro", "gemini-1.5-flash"]


def test_models_unknown_provider_is_404(client):
    r = client.get("/api/models/anthropic")
    assert r.status_code == 404
    assert "Unknown provider" in r.json()["error"]


def test_settings_roundtrip(client):
    assert client.get("/api/settings").json() == {"selectedModel": "gemini-1.5-flash", "options": {}}
    saved = client.post("/api/settings", json={"selectedModel": "xai", "options": {"topP": 0.2}})
    assert saved.status_code == 200
    assert client.get("/api/settings").json() == {"selectedModel": "xai", "options": {"topP": 0.2}}
