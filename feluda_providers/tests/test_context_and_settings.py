from __future__ import annotations

import pytest
from pydantic import ValidationError

from feluda_providers.base.models import GenerationOptions
from feluda_providers.persistence.interfaces.repos import Exchange
from feluda_providers.persistence.sqlite import get_uow
from feluda_providers.service.context import build_contextual_prompt, render_history
from feluda_providers.service.settings import ClientSettings, OptionsBody, load_settings, save_settings


def _ex(i: int) -> Exchange:
    return Exchange(session_id="s", prompt=f"q{i}", response=f"a{i}", model="groq")


def test_no_history_returns_prompt_unchanged():
    assert build_contextual_prompt([], "hello") == "hello"


def test_context_keeps_last_five_oldest_first():
    out = build_contextual_prompt([_ex(i) for i in range(8)], "next")
    assert "User: q2" not in out
    assert out.index("User: q3") < out.index("User: q7")
    assert "Assistant: a7" in out
    assert "Current request: next" in out
    assert "FeludaAI" in out


def test_render_history():
    assert render_history([_ex(1)]) == "User: q1\n\nAssistant: a1"


def test_options_body_accepts_camel_case():
    body = OptionsBody.model_validate({"maxTokens": 10, "temperature": 0, "topP": 0.5})
    assert body.to_options() == GenerationOptions(max_tokens=10, temperature=0.0, top_p=0.5)


@pytest.mark.parametrize("payload", [{"maxTokens": 0}, {"topP": 1.5}, {"temperature": -1}])
def test_options_body_rejects_out_of_range(payload):
    with pytest.raises(ValidationError):
        OptionsBody.model_validate(payload)


def test_client_settings_build_requests():
    settings = ClientSettings.model_validate({"selectedModel": "xai", "options": {"maxTokens": 99}})
    request = settings.to_request("hi")
    assert request.model_id == "xai"
    assert request.options.max_tokens == 99
    assert settings.to_request("hi", model="groq").model_id == "groq"
    assert ClientSettings().selected_model == "gemini-1.5-flash"


def test_settings_persist():
    with get_uow() as uow:
        assert load_settings(uow.settings) == ClientSettings()
        save_settings(uow.settings, ClientSettings(selected_model="groq", options=OptionsBody(temperature=0.1)))
    with get_uow() as uow:
        loaded = load_settings(uow.settings)
    assert loaded.selected_model == "groq"
    assert loaded.options.temperature == 0.1
    assert loaded.to_wire() == {"selectedModel": "groq", "options": {"temperature": 0.1}}
