"""Environment-driven settings.

Values are read from the process environment at call time. The CLI loads a
local ``.env`` (without overriding variables that are already set) before any
of these are consulted.

- ``ENVELOPE_BUDGET_LEDGER``: default ledger file (``./ledger.json``).
- ``ENVELOPE_BUDGET_LOG_LEVEL``: see ``logging_setup``.
- ``DATABASE_URL``: SQL ledger store, read by ``budget_db.client``.
"""

from __future__ import annotations

import os
from pathlib import Path

LEDGER_PATH_ENV = "ENVELOPE_BUDGET_LEDGER"
DATABASE_URL_ENV = "DATABASE_URL"


def default_ledger_path() -> Path:
    """Return the ledger file to use when none is given explicitly.

    Default: ``./ledger.json`` under the current working directory.
    Override: ``ENVELOPE_BUDGET_LEDGER`` (absolute or relative).
    """

    raw = os.getenv(LEDGER_PATH_ENV)
    if raw and raw.strip():
        return Path(raw.strip()).expanduser().resolve()
    return (Path.cwd() / "ledger.json").resolve()


def database_url(override: str | None = None) -> str | None:
    """Explicit URL first, then ``DATABASE_URL``; ``None`` when neither is set."""

    if override and override.strip():
        return override.strip()
    env_val = os.getenv(DATABASE_URL_ENV)
    return env_val.strip() if env_val and env_val.strip() else None


__all__ = [
    "DATABASE_URL_ENV",
    "LEDGER_PATH_ENV",
    "database_url",
    "default_ledger_path",
]
