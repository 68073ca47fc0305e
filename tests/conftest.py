"""Root conftest for the passlink test suite."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PASSLINK_* from the developer's shell out of the tests."""
    for name in ("PASSLINK_BASE_URL", "PASSLINK_LOG_LEVEL", "PASSLINK_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logger():
    """setup_logging() attaches handlers to a process-wide logger."""
    yield
    log = logging.getLogger("passlink")
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()
    log.propagate = True
    log.setLevel(logging.NOTSET)


@pytest.fixture()
def runner():
    from click.testing import CliRunner

    return CliRunner()
