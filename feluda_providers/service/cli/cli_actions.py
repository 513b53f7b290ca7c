"""Subcommand handlers for ``feluda-cli``.

Every handler returns a process exit code. Results go to stdout as JSON (or
raw deltas while streaming); failures go to stderr as ``{"error", "code"}``
and return ``1``. Collaborators are injectable so tests never touch the
network or the user's database.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from typing import Any, Callable, Dict, Optional, TextIO

from ...base.errors import ProviderError
from ...base.models import CompleteResult, GenerationOptions
from ...catalog import list_models
from ...dispatch import Dispatcher
from ...persistence.interfaces.repos import IUnitOfWork
from ...persistence.sqlite import get_uow
from ...routing import ProviderRegistry, get_registry
from ..settings import ClientSettings, load_settings, save_settings

UowFactory = Callable[[], IUnitOfWork]


def _emit(payload: Dict[str, Any], out: Optional[TextIO] = None) -> None:
    (out or sys.stdout).write(json.dumps(payload, ensure_ascii=False) + "\n")


def _fail(err: ProviderError, err_out: Optional[TextIO] = None) -> int:
    _emit({"error": err.message, "code": err.code.value}, err_out or sys.stderr)
    return 1


def handle_resolve(
    args: argparse.Namespace,
    *,
    registry: Optional[ProviderRegistry] = None,
    out: Optional[TextIO] = None,
    err_out: Optional[TextIO] = None,
) -> int:
    reg = registry or get_registry()
    try:
        binding = reg.resolve(args.model)
    except ProviderError as err:
        return _fail(err, err_out)
    _emit(
        {
            "model": args.model,
            "binding": binding.key,
            "provider": binding.provider.value,
            "upstreamModel": binding.upstream_model,
            "streaming": binding.supports_streaming,
            "maxContextTokens": binding.max_context_tokens,
        },
        out,
    )
    return 0


def handle_generate(
    args: argparse.Namespace,
    *,
    dispatcher: Optional[Dispatcher] = None,
    uow_factory: UowFactory = get_uow,
    out: Optional[TextIO] = None,
    err_out: Optional[TextIO] = None,
) -> int:
    """Dispatch one prompt.

    The model and options fall back to the saved settings; flags given on
    the command line win. Streaming bindings print deltas as they arrive.
    """
    with uow_factory() as uow:
        settings = load_settings(uow.settings)
    flags = GenerationOptions(max_tokens=args.max_tokens, temperature=args.temperature, top_p=args.top_p)
    request = settings.to_request(args.prompt, model=args.model)
    request = replace(request, options=GenerationOptions.from_wire({**request.options.to_wire(), **flags.to_wire()}))
    try:
        result = (dispatcher or Dispatcher()).dispatch(request)
    except ProviderError as err:
        return _fail(err, err_out)
    if isinstance(result, CompleteResult):
        _emit({"result": result.text}, out)
        return 0
    stream = out or sys.stdout
    for chunk in result.chunks:
        if chunk.error:
            stream.write("\n")
            _emit({"error": chunk.error}, err_out or sys.stderr)
            return 1
        stream.write(chunk.delta)
        stream.flush()
    stream.write("\n")
    return 0


def handle_models(
    args: argparse.Namespace,
    *,
    out: Optional[TextIO] = None,
    err_out: Optional[TextIO] = None,
    **fetch_kwargs: Any,
) -> int:
    try:
        entries = list_models(args.provider, **fetch_kwargs)
    except ProviderError as err:
        return _fail(err, err_out)
    _emit({"models": [e.to_wire() for e in entries]}, out)
    return 0


def handle_settings(
    args: argparse.Namespace,
    *,
    uow_factory: UowFactory = get_uow,
    out: Optional[TextIO] = None,
) -> int:
    with uow_factory() as uow:
        settings = load_settings(uow.settings)
        if args.model:
            settings = save_settings(
                uow.settings, ClientSettings(selected_model=args.model, options=settings.options)
            )
            uow.commit()
    _emit(settings.to_wire(), out)
    return 0


__all__ = ["handle_resolve", "handle_generate", "handle_models", "handle_settings"]
