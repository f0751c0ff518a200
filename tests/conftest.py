"""Pytest configuration for test isolation.

The CLI and the ledger store read their defaults from the environment
(``ENVELOPE_BUDGET_LEDGER``, ``DATABASE_URL``, ``ENVELOPE_BUDGET_LOG_LEVEL``)
and keep process-wide state (the cached SQLAlchemy engines, the configured
package logger). Each test gets a clean environment pointing at its own
temporary directory, and that shared state is reset afterwards so tests never
observe each other's databases or handlers.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from budget_db.client import dispose_engines

from envelope_budget.logging_setup import reset_logging


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point the default ledger at the test's temp dir and clear DB/log settings."""

    monkeypatch.setenv("ENVELOPE_BUDGET_LEDGER", os.fspath(tmp_path / "ledger.json"))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("ENVELOPE_BUDGET_LOG_LEVEL", raising=False)
    # load_dotenv() reads ./.env; keep it from finding a developer's file.
    monkeypatch.chdir(tmp_path)
    yield
    dispose_engines()
    reset_logging()
