"""Shared fixtures: fake provider clients and an isolated environment.

No test touches the network, the user's ``.env`` or the user's database.
"""

from __future__ import annotations

import logging
from typing import Iterator

import pytest

from feluda_providers.config.env import ENV_ALIASES, ENV_MAP
from feluda_providers.routing import ProviderClients, ProviderRegistry

from .fakes import FakeBlockingClient, FakeStreamingClient, chat_envelope


@pytest.fixture()
def fake_clients() -> ProviderClients:
    return ProviderClients(
        google=FakeBlockingClient("google", response="gemini says hi"),
        openrouter=FakeStreamingClient("openrouter"),
        together=FakeBlockingClient("together", response=chat_envelope("together says hi")),
        groq=FakeBlockingClient("groq", response=chat_envelope("groq says hi")),
        github=FakeBlockingClient("github", response=chat_envelope("github says hi")),
        mistral=FakeBlockingClient("mistral", response=chat_envelope("mistral says hi")),
        xai=FakeBlockingClient("xai", response=chat_envelope("grok says hi")),
    )


@pytest.fixture()
def registry(fake_clients: ProviderClients) -> ProviderRegistry:
    return ProviderRegistry.with_clients(fake_clients)


@pytest.fixture()
def test_logger() -> logging.Logger:
    """A propagating logger that ``caplog`` can observe."""
    logger = logging.getLogger("feluda_tests")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    import feluda_providers.config as config
    from feluda_providers.base.timeouts import reset_timeout_config

    names = set(ENV_MAP.values())
    for aliases in ENV_ALIASES.values():
        names.update(aliases)
    for name in names:
        monkeypatch.delenv(name, raising=False)
    for var in ("FELUDA_PROVIDERS_CONFIG_FILE", "NEXT_PUBLIC_APP_URL", "FELUDA_APP_URL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config, "_DOTENV_LOADED", True)
    monkeypatch.setenv("FELUDA_DB_PATH", str(tmp_path / "feluda.db"))
    config.reset_config_cache()
    reset_timeout_config()
    yield
    config.reset_config_cache()
    reset_timeout_config()
