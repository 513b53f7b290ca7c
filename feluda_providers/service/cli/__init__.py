"""FeludaAI command-line entrypoint (``feluda-cli``)."""

from __future__ import annotations

from typing import Optional

from .cli_actions import handle_generate, handle_models, handle_resolve, handle_settings
from .cli_parser import build_parser

_HANDLERS = {
    "resolve": handle_resolve,
    "generate": handle_generate,
    "models": handle_models,
    "settings": handle_settings,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Parse ``argv`` (default ``sys.argv[1:]``) and run the subcommand."""
    args = build_parser().parse_args(argv)
    return _HANDLERS[args.cmd](args)


__all__ = ["main", "build_parser"]
