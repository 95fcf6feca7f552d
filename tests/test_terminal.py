"""Tests for the command line interface."""

import pendulum
import pytest
import typer
from typer.testing import CliRunner
from yaml import dump

from factories import client_row
from tidemark.terminal.app import app
from tidemark.terminal.parse import parse_date, parse_month
from tidemark.time import today_local

runner = CliRunner(env={"COLUMNS": "200"})


@pytest.fixture(autouse=True)
def _config(isolated_config):
    return isolated_config


def test_sync_shows_table_counts(data_dir):
    result = runner.invoke(app, ["sync", "--data-dir", str(data_dir)])

    assert result.exit_code == 0, result.output
    assert "dim_clientes" in result.output
    assert "horas_trabalhadas" in result.output


def test_sync_alias_replays_change_log(data_dir, tmp_path):
    changes = tmp_path / "changes.yaml"
    changes.write_text(
        dump(
            [
                {"table": "dim_clientes", "operation_type": "INSERT", "new_row": client_row(3)},
                {"table": "nowhere", "operation_type": "INSERT", "new_row": {}},
            ]
        )
    )

    result = runner.invoke(app, ["s", "-d", str(data_dir), "--changes", str(changes)])

    assert result.exit_code == 0, result.output
    assert "applied" in result.output
    assert "ignored" in result.output


def test_sync_rejects_missing_data_dir(tmp_path):
    result = runner.invoke(app, ["sync", "--data-dir", str(tmp_path / "nope")])

    assert result.exit_code != 0


def test_rollup(data_dir):
    result = runner.invoke(
        app,
        ["--no-header", "rollup", "--start", "2024-01-01", "--end", "2024-01-31", "-d", str(data_dir)],
    )

    assert result.exit_code == 0, result.output
    assert "ClientA" in result.output
    assert "900.00" in result.output
    assert "12.00" in result.output


def test_rollup_flat(data_dir):
    result = runner.invoke(
        app,
        ["r", "-s", "2024-01-01", "-e", "2024-01-31", "--flat", "-d", str(data_dir)],
    )

    assert result.exit_code == 0, result.output
    assert "Bruno" in result.output


def test_rollup_rejects_inverted_range(data_dir):
    result = runner.invoke(
        app, ["rollup", "-s", "2024-02-01", "-e", "2024-01-01", "-d", str(data_dir)]
    )

    assert result.exit_code != 0


def test_progress(data_dir):
    result = runner.invoke(app, ["progress", "--today", "2024-01-20", "-d", str(data_dir)])

    assert result.exit_code == 0, result.output
    assert "ProjectX" in result.output
    assert "2,000.00" in result.output


def test_capacity(data_dir):
    result = runner.invoke(app, ["cap", "--month", "2024-01", "-d", str(data_dir)])

    assert result.exit_code == 0, result.output
    assert "Bruno" in result.output
    assert "5.0%" in result.output


def test_config_show():
    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0, result.output
    assert "fallback_hourly_rate" in result.output


def test_config_set(isolated_config):
    result = runner.invoke(app, ["c", "set", "--report-window-days", "14"])

    assert result.exit_code == 0, result.output
    assert "updated" in result.output


def test_parse_date():
    assert parse_date(None) is None
    assert parse_date("2024-01-05") == pendulum.date(2024, 1, 5)
    assert parse_date("today") == today_local()
    assert parse_date("y") == today_local().subtract(days=1)
    assert parse_date("-3") == today_local().subtract(days=3)
    with pytest.raises(typer.BadParameter):
        parse_date("someday")


def test_parse_month():
    assert parse_month("2024-1") == "2024-01"
    with pytest.raises(typer.BadParameter):
        parse_month("2024-13")
