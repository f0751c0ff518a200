from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from envelope_budget.cli import app, cmd_add, cmd_categories, cmd_pull, cmd_push, cmd_summary
from envelope_budget.persistence import load_ledger_file
from tests.helpers.db import bootstrap_sqlite_db, count_rows


@pytest.fixture
def ledger_path(tmp_path: Path) -> Path:
    return tmp_path / "ledger.json"


def _seed(path: Path) -> None:
    assert cmd_add(path, "-50", category="Groceries", day="2024-03-02") == 0
    assert cmd_add(path, "-30", category="Groceries", day="2024-03-20", tags=["food", "food"]) == 0
    assert cmd_add(path, "2000", description="Salary", day="2024-03-01") == 0
    assert cmd_add(path, "-12", category="Fun", day="2024-04-02") == 0


def test_add_creates_ledger_file(ledger_path: Path, capsys: pytest.CaptureFixture[str]):
    assert not ledger_path.exists()
    assert cmd_add(ledger_path, "12.50", category="Fun", payee="Cinema", short_id=7) == 0
    printed_uuid = capsys.readouterr().out.strip()

    ledger = load_ledger_file(ledger_path)
    (t,) = list(ledger)
    assert str(t.uuid) == printed_uuid
    assert str(t.amount) == "12.50"
    assert t.payee == "Cinema"
    assert t.id == 7


def test_add_reports_bad_input(ledger_path: Path, capsys: pytest.CaptureFixture[str]):
    assert cmd_add(ledger_path, "lots") == 1
    assert "Error: Invalid amount" in capsys.readouterr().err
    assert cmd_add(ledger_path, "1", day="yesterday") == 1
    assert not ledger_path.exists()


def test_summary_lines(ledger_path: Path, capsys: pytest.CaptureFixture[str]):
    _seed(ledger_path)
    capsys.readouterr()

    assert cmd_summary(ledger_path) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "2024-03\tGroceries\t2\t-80\t-40.00\t10.00",
        "2024-03\t(uncategorised)\t1\t2000\t2000.00\t0.00",
        "2024-04\tFun\t1\t-12\t-12.00\t0.00",
    ]

    assert cmd_summary(ledger_path, month="2024-04") == 0
    assert capsys.readouterr().out.splitlines() == ["2024-04\tFun\t1\t-12\t-12.00\t0.00"]


def test_summary_bad_month(ledger_path: Path, capsys: pytest.CaptureFixture[str]):
    assert cmd_summary(ledger_path, month="April") == 1
    assert "YYYY-MM" in capsys.readouterr().err


def test_categories(ledger_path: Path, capsys: pytest.CaptureFixture[str]):
    _seed(ledger_path)
    capsys.readouterr()
    assert cmd_categories(ledger_path) == 0
    assert capsys.readouterr().out.splitlines() == ["Groceries", "Fun"]


def test_push_and_pull(tmp_path: Path, ledger_path: Path, capsys: pytest.CaptureFixture[str]):
    _seed(ledger_path)
    url = bootstrap_sqlite_db(tmp_path / "store.db")

    assert cmd_push(ledger_path, database_url=url) == 0
    assert count_rows(url) == 4

    restored = tmp_path / "restored.json"
    assert cmd_pull(restored, database_url=url) == 0
    assert "pulled 4 transactions" in capsys.readouterr().out

    a = list(load_ledger_file(ledger_path))
    b = list(load_ledger_file(restored))
    assert a == b


def test_push_requires_database_url(ledger_path: Path, capsys: pytest.CaptureFixture[str]):
    _seed(ledger_path)
    assert cmd_push(ledger_path) == 1
    assert "DATABASE_URL" in capsys.readouterr().err


def test_typer_app_end_to_end(tmp_path: Path):
    runner = CliRunner()
    path = tmp_path / "cli.json"

    res = runner.invoke(
        app,
        ["--ledger", str(path), "add", "--amount=-9.99", "--category", "Fun", "--date", "2024-05-01"],
    )
    assert res.exit_code == 0, res.output

    res = runner.invoke(app, ["--ledger", str(path), "summary"])
    assert res.exit_code == 0, res.output
    assert "2024-05\tFun\t1\t-9.99\t-9.99\t0.00" in res.output

    res = runner.invoke(app, ["--ledger", str(path), "add", "--amount", "nope"])
    assert res.exit_code == 1


def test_default_ledger_from_env(tmp_path: Path):
    # conftest points ENVELOPE_BUDGET_LEDGER at tmp_path / "ledger.json"
    runner = CliRunner()
    res = runner.invoke(app, ["add", "--amount", "3", "--category", "Env"])
    assert res.exit_code == 0, res.output
    assert (tmp_path / "ledger.json").exists()


def test_add_tidies_typed_category(ledger_path: Path, capsys: pytest.CaptureFixture[str]):
    assert cmd_add(ledger_path, "-4", category="  Eating   Out ", day="2024-03-02") == 0
    assert cmd_add(ledger_path, "-6", category="Eating Out", day="2024-03-03") == 0
    assert cmd_add(ledger_path, "1", category="   ", day="2024-03-04") == 0
    capsys.readouterr()

    assert cmd_categories(ledger_path) == 0
    assert capsys.readouterr().out.splitlines() == ["Eating Out"]
    assert cmd_summary(ledger_path) == 0
    assert capsys.readouterr().out.splitlines() == [
        "2024-03\tEating Out\t2\t-10\t-5.00\t1.00",
        "2024-03\t(uncategorised)\t1\t1\t1.00\t0.00",
    ]
