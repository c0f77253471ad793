"""Pytest configuration.

Ensures the `src/` package can be imported during test collection without an install.
"""

import sys
from pathlib import Path


def _prepend_sys_path(path: Path) -> None:
    resolved = str(path.resolve())
    if resolved not in sys.path:
        sys.path.insert(0, resolved)


REPO_ROOT = Path(__file__).resolve().parent

# Allow importing `relay_backend` as a top-level package.
_prepend_sys_path(REPO_ROOT / "src")
