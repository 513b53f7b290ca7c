"""Argument parser for ``feluda-cli``.

Wires subcommand shapes only; handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ...catalog import supported_providers


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``resolve``, ``generate``, ``models`` and ``settings``."""
    p = argparse.ArgumentParser(prog="feluda-cli", description="FeludaAI provider routing CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_resolve = sub.add_parser("resolve", help="Show the provider binding a model id routes to")
    p_resolve.add_argument("model")

    p_gen = sub.add_parser("generate", help="Send one prompt and print the result")
    p_gen.add_argument("--model", default=None, help="Model id (defaults to the saved setting)")
    p_gen.add_argument("--prompt", required=True)
    p_gen.add_argument("--max-tokens", dest="max_tokens", type=int, default=None)
    p_gen.add_argument("--temperature", type=float, default=None)
    p_gen.add_argument("--top-p", dest="top_p", type=float, default=None)

    p_models = sub.add_parser("models", help="List a provider's models")
    p_models.add_argument("provider", choices=supported_providers())

    p_settings = sub.add_parser("settings", help="Show or update saved client settings")
    p_settings.add_argument("--model", default=None, help="Persist a new selected model")

    return p


__all__ = ["build_parser"]
