"""Architecture enforcement tests for the feluda_providers package.

Import boundaries only, checked by static scans of the source tree so that
nothing is imported (and no side effects run) during the check.

Rules validated here:
1) The routing/dispatch core and the provider clients must not import the
   service layer or the web framework.
   - HTTP concerns stay in ``feluda_providers/service``.
2) Only the persistence package and the service layer touch SQLite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
PACKAGE_ROOT = REPO_ROOT / "feluda_providers"

CORE_DIRS = (
    "base",
    "config",
    "routing",
    "dispatch",
    "gemini",
    "groq",
    "openrouter",
    "together",
    "github",
    "mistral",
    "xai",
)


def _iter_python_files(root: Path) -> Iterable[Path]:
    """Yield ``.py`` files under ``root``, skipping bytecode caches."""
    for path in root.rglob("*.py"):
        if "__pycache__" in path.parts:
            continue
        yield path


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _core_files() -> List[Path]:
    if not PACKAGE_ROOT.is_dir():
        pytest.skip("feluda_providers package not found; skipping boundary check")
    files: List[Path] = []
    for name in CORE_DIRS:
        files.extend(_iter_python_files(PACKAGE_ROOT / name))
    files.append(PACKAGE_ROOT / "catalog.py")
    return files


def test_core_does_not_import_service_layer() -> None:
    forbidden = (
        "from feluda_providers.service",
        "import feluda_providers.service",
        "from ..service",
        "from ...service",
        "import fastapi",
        "from fastapi",
        "from starlette",
    )
    offenders = [
        f"{py}: contains '{snippet}'"
        for py in _core_files()
        for snippet in forbidden
        if snippet in _read_text(py)
    ]
    if offenders:
        pytest.fail("Core modules must not import the service layer.\n" + "\n".join(offenders))


def test_sqlite_stays_in_persistence() -> None:
    offenders = [str(py) for py in _core_files() if "import sqlite3" in _read_text(py)]
    if offenders:
        pytest.fail("sqlite3 is only used under feluda_providers/persistence.\n" + "\n".join(offenders))
