"""
tests/unit/test_cli.py - Command-line entrypoint wiring.
"""

import logging

import pytest
from click.testing import CliRunner

import run_monitor
from monitoring.cycle import CycleReport


@pytest.fixture
def runner():
    yield CliRunner()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "monitor.yaml"
    path.write_text(
        "validator_addresses:\n"
        "  - \"0x1111111111111111111111111111111111111111\"\n"
        "rpc_urls:\n"
        "  - \"https://rpc.test\"\n",
        encoding="utf-8",
    )
    return str(path)


def test_help_lists_commands(runner):
    result = runner.invoke(run_monitor.cli, ["--help"])
    assert result.exit_code == 0
    for command in ("check", "watch", "summary", "status"):
        assert command in result.output


def test_missing_config_exits_1(runner, tmp_path):
    result = runner.invoke(run_monitor.cli, ["--config", str(tmp_path / "absent.yaml"), "check"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_status_rejects_bad_address(runner, config_file):
    result = runner.invoke(run_monitor.cli, ["--config", config_file, "status", "0x123"])
    assert result.exit_code == 2
    assert "ADDRESS" in result.output


def test_check_reports_cycle_failure(runner, config_file, monkeypatch, now):
    failed = CycleReport(started_at=now, error="boom")
    monkeypatch.setattr(run_monitor, "run_cycle", lambda config, notifier: failed)

    result = runner.invoke(run_monitor.cli, ["--config", config_file, "check"])

    assert result.exit_code == 1
    assert "Cycle failed: boom" in result.output


def test_summary_prints_text(runner, config_file, monkeypatch):
    monkeypatch.setattr(run_monitor, "run_daily_summary", lambda config, notifier: "summary text")

    result = runner.invoke(run_monitor.cli, ["--config", config_file, "summary"])

    assert result.exit_code == 0
    assert "summary text" in result.output
