import json

import pytest
from click.testing import CliRunner

from Eduledger.cli import main


@pytest.fixture
def runner(tmp_path):
    return CliRunner(env={"EDULEDGER_DATA_DIR": str(tmp_path / "appdata"), "EDULEDGER_FILE_ACCESS": "1"})


def test_info_starts_on_fallback(runner):
    result = runner.invoke(main, ["info"])

    assert result.exit_code == 0, result.output
    assert "Backend: FALLBACK" in result.output


def test_invoices_on_sample_data(runner):
    result = runner.invoke(main, ["invoices", "2024-05"])

    assert result.exit_code == 0, result.output
    assert "3 created, 0 adjusted, 0 unchanged" in result.output

    again = runner.invoke(main, ["invoices", "2024-05"])
    assert "0 created, 0 adjusted, 3 unchanged" in again.output


@pytest.mark.parametrize("period", ["May 2024", "2024-13"])
def test_bad_period_is_a_usage_error(runner, period):
    result = runner.invoke(main, ["invoices", period])

    assert result.exit_code == 2


def test_report_json(runner):
    runner.invoke(main, ["invoices", "2024-05"])

    result = runner.invoke(main, ["report", "2024-05", "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["month"] == "2024-05"


def test_reconcile_on_consistent_ledger(runner):
    result = runner.invoke(main, ["reconcile"])

    assert "All balances match the ledger." in result.output


def test_use_file_then_fallback(runner, tmp_path):
    target = tmp_path / "center.json"

    result = runner.invoke(main, ["use-file", str(target)])

    assert result.exit_code == 0, result.output
    assert "FILE_HANDLE" in runner.invoke(main, ["info"]).output
    assert json.loads(target.read_text(encoding="utf-8"))["students"]
    assert "Now using the built-in storage." in runner.invoke(main, ["use-fallback"]).output
    assert "Already using" in runner.invoke(main, ["use-fallback"]).output


def test_backup_and_restore(runner, tmp_path):
    path = tmp_path / "backup.json"

    assert runner.invoke(main, ["backup", str(path)]).exit_code == 0
    assert json.loads(path.read_text(encoding="utf-8"))["classes"]
    result = runner.invoke(main, ["restore", str(path)])

    assert result.exit_code == 0, result.output
    assert "Backup merged." in result.output


def test_restore_of_broken_file_fails_cleanly(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{nope", encoding="utf-8")

    result = runner.invoke(main, ["restore", str(path)])

    assert result.exit_code == 1
    assert "not valid JSON" in result.output


def test_payroll_lists_teachers(runner):
    result = runner.invoke(main, ["payroll", "2024-05"])

    assert result.exit_code == 0, result.output
    assert "Do Thi Mai" in result.output
    assert "(2 sessions)" in result.output
