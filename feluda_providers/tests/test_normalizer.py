from __future__ import annotations

import pytest

from feluda_providers.base.models import GenerationOptions, GenerationRequest
from feluda_providers.config.defaults import DEFAULT_MAX_TOKENS
from feluda_providers.dispatch import default_max_tokens, normalize


def _call(registry, model_id, **opts):
    request = GenerationRequest(model_id=model_id, prompt="hi", options=GenerationOptions(**opts))
    return normalize(request, registry.resolve(model_id))


def test_token_defaults_ordering():
    pro = default_max_tokens("gemini-1.5-pro")
    flash = default_max_tokens("gemini-1.5-flash")
    assert pro > flash >= 8192
    assert default_max_tokens("never-heard-of-it") == DEFAULT_MAX_TOKENS


def test_github_alias_ceiling_uses_caller_id(registry):
    assert _call(registry, "github-gpt4-mini").max_tokens == 1000


def test_defaults_fill_missing_options(registry):
    call = _call(registry, "groq")
    assert call.model == "llama-3.2-90b-vision-preview"
    assert call.max_tokens == 8192
    assert call.temperature == pytest.approx(0.7)
    assert call.top_p == pytest.approx(0.95)
    assert call.stream is False


def test_hermes_defaults_and_stream_flag(registry):
    call = _call(registry, "nousresearch/hermes-3-llama-3.1-405b:free")
    assert call.stream is True
    assert (call.temperature, call.top_p) == (0.7, 0.4)


def test_caller_options_win(registry):
    call = _call(registry, "gemini-1.5-pro", max_tokens=256, temperature=0.2, top_p=0.5)
    assert (call.max_tokens, call.temperature, call.top_p) == (256, 0.2, 0.5)


def test_explicit_zero_is_kept(registry):
    call = _call(registry, "xai", temperature=0, top_p=0)
    assert call.temperature == 0.0
    assert call.top_p == 0.0


def test_stream_hint_is_ignored(registry):
    request = GenerationRequest(model_id="groq", prompt="hi", stream=True)
    assert normalize(request, registry.resolve("groq")).stream is False


def test_messages_carry_the_prompt(registry):
    call = _call(registry, "open-mistral-nemo")
    assert call.messages() == [{"role": "user", "content": "hi"}]
