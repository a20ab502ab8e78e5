"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from fundreach.__main__ import cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setattr("fundreach.__main__.setup_logging", lambda *args, **kwargs: None)
    return CliRunner()


def _simulate(runner, *args):
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["simulate", "-o", "results.json", *args])
        payload = None
        if result.exit_code == 0:
            with open("results.json", encoding="utf-8") as fh:
                payload = json.load(fh)
    return result, payload


class TestSimulateCommand:
    def test_writes_results(self, runner):
        result, payload = _simulate(
            runner, "-p", "0:100000", "-p", "0:30000",
            "--volatility", "0.01", "--years", "1", "--runs", "200",
        )
        assert result.exit_code == 0, result.output
        assert [r["project"] for r in payload] == [
            {"start_year": 0, "total_amount": 100000.0},
            {"start_year": 0, "total_amount": 30000.0},
        ]
        assert payload[1]["groups"][0]["from"] == 130000
        assert payload[0]["groups"][0]["description"] == "Ziel erreichbar"

    def test_parallel_matches_sync(self, runner):
        args = ["-p", "0:1000", "-p", "1:2000", "-p", "2:3000",
                "--volatility", "0.2", "--years", "3", "--runs", "100"]
        _, sync_payload = _simulate(runner, *args)
        result, parallel_payload = _simulate(runner, *args, "--parallel", "--workers", "2")
        assert result.exit_code == 0, result.output
        assert parallel_payload == sync_payload

    def test_bad_project_format(self, runner):
        result, _ = _simulate(runner, "-p", "zero", "--volatility", "0.1")
        assert result.exit_code == 2
        assert "START_YEAR:AMOUNT" in result.output

    def test_invalid_options_are_usage_errors(self, runner):
        result, _ = _simulate(runner, "-p", "5:100", "--volatility", "0.1", "--years", "2")
        assert result.exit_code == 2
        assert "Invalid simulation options" in result.output

    def test_volatility_required(self, runner):
        result, _ = _simulate(runner, "-p", "0:100")
        assert result.exit_code == 2
