# ruff: noqa: I001
"""CLI for the ``envelope_budget`` package.

This module exposes callable command handlers (``cmd_add``, ``cmd_summary``,
...) and a Typer-based console interface over them. Environment variables are
loaded from a local ``.env`` using ``python-dotenv`` before any command runs.
Business logic lives in ``envelope_budget.budget`` and
``envelope_budget.persistence``; the handlers only load, delegate and print.

Handlers return a process exit code. Errors are written to stderr.
"""

from __future__ import annotations

import sys
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

import typer
from dotenv import load_dotenv

from .budget import Budget
from .categories import normalize_name
from .config import database_url as resolve_database_url
from .config import default_ledger_path
from .errors import BudgetError
from .ledger import Ledger
from .logging_setup import configure_logging, get_logger
from .models import Summary, Transaction
from .months import CalendarMonth

_logger = get_logger("envelope_budget.cli")

_CENT = Decimal("0.01")
UNCATEGORISED_LABEL = "(uncategorised)"


# ---- Small module-level helpers -------------------------------------------------


def _err(msg: str) -> int:
    print(f"Error: {msg}", file=sys.stderr)
    return 1


def _load_or_empty(ledger_path: Path) -> Ledger:
    from .persistence import load_ledger_file

    if not ledger_path.exists():
        return Ledger(file_path=ledger_path)
    return load_ledger_file(ledger_path)


def _parse_day(raw: str) -> datetime:
    d = date.fromisoformat(raw.strip())
    return datetime(d.year, d.month, d.day, tzinfo=UTC)


def _fmt(d: Decimal) -> str:
    return str(d.quantize(_CENT, rounding=ROUND_HALF_UP))


# ---- Command handlers ------------------------------------------------------------


def cmd_add(
    ledger_path: Path,
    amount: str,
    *,
    category: str | None = None,
    description: str | None = None,
    payee: str | None = None,
    account: str | None = None,
    day: str | None = None,
    tags: list[str] | None = None,
    short_id: int | None = None,
) -> int:
    """Append one transaction to the ledger file, creating the file if needed."""

    from .persistence import save_ledger_file

    try:
        ledger = _load_or_empty(ledger_path)
        t = Transaction(
            amount,
            description=description,
            payee=payee,
            # typed names are tidied; blank ones leave the transaction uncategorised
            category=normalize_name(category) or None if category is not None else None,
            account=account,
            date_transaction=_parse_day(day) if day else None,
            id=short_id,
        )
        for tag in tags or []:
            t.tag(tag)
        ledger.add(t)
        save_ledger_file(ledger, ledger_path)
    except (BudgetError, ValueError) as e:
        return _err(str(e))
    except OSError as e:
        return _err(f"cannot write ledger '{ledger_path}': {e}")

    print(t.uuid)
    return 0


def cmd_summary(ledger_path: Path, *, month: str | None = None) -> int:
    """Print ``month, category, n, sum, mean, std_dev`` per bucket, tab-separated."""

    try:
        only = CalendarMonth.parse(month) if month else None
        budget = Budget.from_ledger(_load_or_empty(ledger_path))
    except (BudgetError, ValueError) as e:
        return _err(str(e))
    except OSError as e:
        return _err(f"cannot read ledger '{ledger_path}': {e}")

    rows: list[tuple[CalendarMonth, int, str, Summary]] = []
    for (m, cid), s in budget.summaries().items():
        rows.append((m, 0, budget.category_name(cid) or str(cid), s))
    for m, s in budget.uncategorised_summaries().items():
        rows.append((m, 1, UNCATEGORISED_LABEL, s))
    rows.sort(key=lambda r: (r[0], r[1], r[2]))

    for m, _, name, s in rows:
        if only is not None and m != only:
            continue
        print(f"{m}\t{name}\t{s.n}\t{s.sum}\t{_fmt(s.mean)}\t{_fmt(s.std_dev)}")
    return 0


def cmd_categories(ledger_path: Path) -> int:
    try:
        ledger = _load_or_empty(ledger_path)
    except (BudgetError, ValueError) as e:
        return _err(str(e))
    except OSError as e:
        return _err(f"cannot read ledger '{ledger_path}': {e}")
    for name in ledger.categories():
        print(name)
    return 0


def cmd_push(ledger_path: Path, *, database_url: str | None = None) -> int:
    """Copy the ledger file into the SQL ledger store."""

    from budget_db.client import session_scope
    from .persistence import load_ledger_file, save_ledger

    url = resolve_database_url(database_url)
    if url is None:
        return _err("no database URL; pass --database-url or set DATABASE_URL")
    try:
        ledger = load_ledger_file(ledger_path)
    except FileNotFoundError:
        return _err(f"File not found: {ledger_path}")
    except (BudgetError, ValueError) as e:
        return _err(str(e))

    try:
        with session_scope(database_url=url) as session:
            n = save_ledger(session, ledger)
    except Exception as e:
        return _err(f"persistence (push) failed: {e}")
    print(f"pushed {n} transactions")
    return 0


def cmd_pull(ledger_path: Path, *, database_url: str | None = None) -> int:
    """Overwrite the ledger file with the contents of the SQL ledger store."""

    from budget_db.client import session_scope
    from .persistence import load_ledger, save_ledger_file

    url = resolve_database_url(database_url)
    if url is None:
        return _err("no database URL; pass --database-url or set DATABASE_URL")
    try:
        with session_scope(database_url=url) as session:
            ledger = load_ledger(session)
    except Exception as e:
        return _err(f"persistence (pull) failed: {e}")

    try:
        save_ledger_file(ledger, ledger_path)
    except OSError as e:
        return _err(f"cannot write ledger '{ledger_path}': {e}")
    print(f"pulled {len(ledger)} transactions")
    return 0


# ---- Typer-based console interface -----------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Envelope budgeting over a JSON ledger file.",
)


def _ledger_from(ctx: typer.Context) -> Path:
    obj = ctx.obj or {}
    return obj.get("ledger") or default_ledger_path()


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


@app.command("add")
def add_cmd(
    ctx: typer.Context,
    *,
    amount: str = typer.Option(..., help="Signed amount; negative for spending."),
    category: str | None = typer.Option(None, help="Category name."),
    description: str | None = typer.Option(None, help="Free-text description."),
    payee: str | None = typer.Option(None, help="Payee."),
    account: str | None = typer.Option(None, help="Account."),
    day: str | None = typer.Option(None, "--date", help="Transaction date, YYYY-MM-DD."),
    tag: list[str] | None = typer.Option(None, "--tag", help="Tag (repeatable)."),
    short_id: int | None = typer.Option(None, "--id", help="Optional short numeric id."),
) -> None:
    """Append a transaction to the ledger."""

    _exit(
        cmd_add(
            _ledger_from(ctx),
            amount,
            category=category,
            description=description,
            payee=payee,
            account=account,
            day=day,
            tags=tag,
            short_id=short_id,
        )
    )


@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    *,
    month: str | None = typer.Option(None, help="Only this month, YYYY-MM."),
) -> None:
    """Print per-month, per-category statistics."""

    _exit(cmd_summary(_ledger_from(ctx), month=month))


@app.command("categories")
def categories_cmd(ctx: typer.Context) -> None:
    """List the categories used in the ledger."""

    _exit(cmd_categories(_ledger_from(ctx)))


@app.command("push")
def push_cmd(
    ctx: typer.Context,
    *,
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Save the ledger file into the SQL ledger store."""

    _exit(cmd_push(_ledger_from(ctx), database_url=database_url))


@app.command("pull")
def pull_cmd(
    ctx: typer.Context,
    *,
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Write the SQL ledger store back into the ledger file."""

    _exit(cmd_pull(_ledger_from(ctx), database_url=database_url))


@app.callback()
def _root(
    ctx: typer.Context,
    *,
    ledger: Path | None = typer.Option(
        None,
        "--ledger",
        help="Ledger JSON file (falls back to ENVELOPE_BUDGET_LEDGER, then ./ledger.json).",
        dir_okay=False,
    ),
    log_level: str | None = typer.Option(
        None, help="Logging level (falls back to ENVELOPE_BUDGET_LOG_LEVEL, then INFO)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory without overriding
    variables that are already set, then configures logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)
    ctx.obj = {"ledger": ledger}
    _logger.debug("ledger=%s", ledger or default_ledger_path())


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
