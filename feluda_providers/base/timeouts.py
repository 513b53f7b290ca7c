"""Timeout configuration and wall-clock deadline helpers.

TimeoutConfig
    Normalized timeout values (seconds), read once per process from the
    environment:
        FELUDA_TIMEOUT_HTTP_SECONDS
        FELUDA_TIMEOUT_ANALYSIS_SECONDS
        FELUDA_TIMEOUT_CATALOG_SECONDS

run_with_deadline(fn, seconds)
    Race ``fn`` in a worker thread against a wall-clock budget. On expiry a
    ``TimeoutError`` is raised and the worker is abandoned: it keeps running
    to completion in the background and its result is discarded. Network
    calls in flight are not interrupted.
"""
from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Callable, TypeVar

from ..config.defaults import ANALYSIS_TIMEOUT_SECONDS

T = TypeVar("T")


@dataclass(frozen=True)
class TimeoutConfig:
    """Timeout values in seconds.

    Attributes:
        http_timeout_seconds: Per-request timeout handed to provider SDKs and
            catalog HTTP calls.
        analysis_timeout_seconds: Wall-clock budget for a file-analysis request.
        catalog_timeout_seconds: Timeout for live model listing calls.
    """

    http_timeout_seconds: float = 120.0
    analysis_timeout_seconds: float = ANALYSIS_TIMEOUT_SECONDS
    catalog_timeout_seconds: float = 10.0


_CACHED: TimeoutConfig | None = None


def _parse_env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED  # noqa: PLW0603
    if _CACHED is not None:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float("FELUDA_TIMEOUT_HTTP_SECONDS", defaults.http_timeout_seconds),
        analysis_timeout_seconds=_parse_env_float(
            "FELUDA_TIMEOUT_ANALYSIS_SECONDS", defaults.analysis_timeout_seconds
        ),
        catalog_timeout_seconds=_parse_env_float(
            "FELUDA_TIMEOUT_CATALOG_SECONDS", defaults.catalog_timeout_seconds
        ),
    )
    return _CACHED


def reset_timeout_config() -> None:
    """Drop the cached config so the next call re-reads the environment."""
    global _CACHED  # noqa: PLW0603
    _CACHED = None


def run_with_deadline(fn: Callable[[], T], seconds: float) -> T:
    """Run ``fn`` and return its result, or raise ``TimeoutError`` after ``seconds``.

    Exceptions raised by ``fn`` propagate unchanged.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="feluda-deadline")
    future = executor.submit(fn)
    try:
        return future.result(timeout=seconds)
    except FutureTimeout as exc:
        raise TimeoutError(f"operation exceeded {seconds:g}s") from exc
    finally:
        # abandon, never join, a worker that overran
        executor.shutdown(wait=False)


__all__ = ["TimeoutConfig", "get_timeout_config", "reset_timeout_config", "run_with_deadline"]
