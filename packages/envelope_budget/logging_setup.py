"""Logging for the ``envelope_budget`` package.

Library modules log through ``get_logger("envelope_budget.<module>")`` and
never attach handlers themselves; the package stays silent until the CLI (or
a host application) calls :func:`configure_logging`.

The budget core logs category creation and transfers at DEBUG and renames at
INFO. Persistence logs loads and saves at DEBUG.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

LOG_LEVEL_ENV = "ENVELOPE_BUDGET_LOG_LEVEL"

_ROOT = logging.getLogger("envelope_budget")
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_handler: logging.Handler | None = None


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    # Unknown names fall back to INFO rather than failing the command.
    return logging.getLevelNamesMapping().get(level.strip().upper(), logging.INFO)


def configure_logging(level: int | str | None = None, *, stream: IO[str] | None = None) -> None:
    """Send package records to ``stream`` (stderr by default).

    ``level`` is a level number or name; when omitted it comes from
    ``ENVELOPE_BUDGET_LOG_LEVEL``, else INFO. Only the first call per process
    takes effect.
    """

    global _handler
    if _handler is not None:
        return
    for h in list(_ROOT.handlers):
        _ROOT.removeHandler(h)
    _handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _handler.setFormatter(logging.Formatter(_FORMAT))
    _ROOT.addHandler(_handler)
    _ROOT.setLevel(_resolve_level(level))
    _ROOT.propagate = False


def reset_logging() -> None:
    """Detach the configured handler so the next ``configure_logging`` applies."""

    global _handler
    for h in list(_ROOT.handlers):
        _ROOT.removeHandler(h)
    _ROOT.setLevel(logging.NOTSET)
    _ROOT.propagate = True
    _handler = None


def get_logger(name: str) -> logging.Logger:
    if not _ROOT.handlers:
        _ROOT.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "reset_logging"]
