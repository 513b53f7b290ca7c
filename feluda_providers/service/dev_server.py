from __future__ import annotations

import os

import uvicorn

from feluda_providers.base.logging import configure_logger
from feluda_providers.config.defaults import FELUDA_SERVICE_DEFAULT_HOST, FELUDA_SERVICE_DEFAULT_PORT


def _parse_port(value: str | None, default: int) -> int:
    """Best-effort parse of a port from string, falling back to ``default``."""
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_reload(value: str | None) -> bool:
    # unset means a developer at a terminal; reload on
    if value is None:
        return True
    return value.strip().lower() in {"1", "true", "yes", "on"}


def main() -> None:
    """Start the development server for the FeludaAI FastAPI app.

    Environment:

    - FELUDA_SERVICE_HOST: interface to bind (default "127.0.0.1")
    - FELUDA_SERVICE_PORT: port to bind (default 8091)
    - FELUDA_SERVICE_RELOAD: "true"/"false" to toggle auto-reload (default on)
    - FELUDA_LOG_FILE: also write JSON logs to this rotating file
    """
    if log_file := os.getenv("FELUDA_LOG_FILE"):
        configure_logger(file_path=log_file)
    host = os.getenv("FELUDA_SERVICE_HOST", FELUDA_SERVICE_DEFAULT_HOST)
    port = _parse_port(os.getenv("FELUDA_SERVICE_PORT"), FELUDA_SERVICE_DEFAULT_PORT)
    uvicorn.run(
        "feluda_providers.service.app:app",
        host=host,
        port=port,
        reload=_parse_reload(os.getenv("FELUDA_SERVICE_RELOAD")),
    )


if __name__ == "__main__":
    main()
