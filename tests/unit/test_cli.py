"""Tests for CLI entry point."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from runreport.email_reporter.cli import app

runner = CliRunner()

CONFIG = """
from: ci@example.com
to: qa@example.com
reportName: Nightly
smtp:
  host: smtp.example.com
"""


def _report(status: str) -> dict[str, object]:
    """Build a one-test Playwright report with the given result status."""
    return {
        "suites": [
            {
                "title": "home.spec.ts",
                "file": "home.spec.ts",
                "specs": [
                    {
                        "title": "loads",
                        "file": "home.spec.ts",
                        "tests": [
                            {
                                "projectName": "chromium",
                                "results": [
                                    {
                                        "status": status,
                                        "duration": 1200,
                                        "retry": 0,
                                        "error": {"message": "boom"},
                                    }
                                ],
                            }
                        ],
                    }
                ],
            }
        ],
        "stats": {"startTime": "2026-05-01T10:00:00.000Z", "duration": 3000},
    }


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write reporter configuration."""
    path = tmp_path / "reporter.yaml"
    path.write_text(CONFIG)
    return path


def _results_file(tmp_path: Path, status: str) -> Path:
    """Write a Playwright report file."""
    path = tmp_path / "results.json"
    path.write_text(json.dumps(_report(status)))
    return path


def _mock_channel(delivered: bool = True) -> MagicMock:
    """Create a channel whose send returns the given outcome."""
    channel = MagicMock()
    channel.send = AsyncMock(return_value=delivered)
    return channel


def test_main_failed_run_sends_report(tmp_path: Path, config_file: Path) -> None:
    """Main prints totals and sends the report when a test failed."""
    results = _results_file(tmp_path, "failed")
    channel = _mock_channel()

    with patch(
        "runreport.email_reporter.reporting.create_channel", return_value=channel
    ):
        result = runner.invoke(
            app, ["--results", str(results), "--config", str(config_file)]
        )

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["total"] == 1
    assert output["failed"] == 1
    assert output["duration_ms"] == 3000
    assert output["failed_tests"][0]["name"] == "home.spec.ts > loads"
    channel.send.assert_awaited_once()
    recipients, sender, subject, html_payload = channel.send.call_args[0]
    assert recipients == "qa@example.com"
    assert sender == "ci@example.com"
    assert subject == "Nightly"
    assert "boom" in html_payload


def test_main_green_run_not_sent(tmp_path: Path, config_file: Path) -> None:
    """Main skips delivery for a green run without mailOnSuccess."""
    results = _results_file(tmp_path, "passed")
    channel = _mock_channel()

    with patch(
        "runreport.email_reporter.reporting.create_channel", return_value=channel
    ):
        result = runner.invoke(
            app, ["--results", str(results), "--config", str(config_file)]
        )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["passed"] == 1
    channel.send.assert_not_called()


def test_main_green_run_held_back_is_not_a_failure(
    tmp_path: Path, config_file: Path
) -> None:
    """A report held back by the delivery gate does not fail the command."""
    results = _results_file(tmp_path, "passed")
    channel = _mock_channel(delivered=False)

    with patch(
        "runreport.email_reporter.reporting.create_channel", return_value=channel
    ):
        result = runner.invoke(
            app, ["--results", str(results), "--config", str(config_file)]
        )

    assert result.exit_code == 0
    assert "report delivery failed" not in result.output
    channel.send.assert_not_called()


def test_main_dry_run_writes_output(tmp_path: Path, config_file: Path) -> None:
    """Dry runs render the report to a file without sending it."""
    results = _results_file(tmp_path, "failed")
    output_file = tmp_path / "report.html"
    channel = _mock_channel()

    with patch(
        "runreport.email_reporter.reporting.create_channel", return_value=channel
    ):
        result = runner.invoke(
            app,
            [
                "--results",
                str(results),
                "--config",
                str(config_file),
                "--output",
                str(output_file),
                "--dry-run",
            ],
        )

    assert result.exit_code == 0
    channel.send.assert_not_called()
    html_payload = output_file.read_text(encoding="utf-8")
    assert "<h1>Nightly</h1>" in html_payload
    assert "home.spec.ts &gt; loads" in html_payload


def test_main_delivery_failure(tmp_path: Path, config_file: Path) -> None:
    """Main exits with error code when the report could not be delivered."""
    results = _results_file(tmp_path, "failed")
    channel = _mock_channel(delivered=False)

    with patch(
        "runreport.email_reporter.reporting.create_channel", return_value=channel
    ):
        result = runner.invoke(
            app, ["--results", str(results), "--config", str(config_file)]
        )

    assert result.exit_code == 1
    assert "report delivery failed" in result.output


def test_main_invalid_config(tmp_path: Path) -> None:
    """Main exits with error for unusable configuration."""
    results = _results_file(tmp_path, "failed")
    config_file = tmp_path / "reporter.yaml"
    config_file.write_text("from: ci@example.com\n")

    result = runner.invoke(
        app, ["--results", str(results), "--config", str(config_file)]
    )

    assert result.exit_code == 1
    assert "Invalid reporter configuration" in result.output


def test_main_missing_results(tmp_path: Path, config_file: Path) -> None:
    """Main exits with error when the results file is missing."""
    result = runner.invoke(
        app,
        [
            "--results",
            str(tmp_path / "missing.json"),
            "--config",
            str(config_file),
        ],
    )

    assert result.exit_code == 1
    assert "Report file not found" in result.output
