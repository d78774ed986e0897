"""CLI entry point for mailing the summary of a finished Playwright run."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import typer

from runreport.email_reporter.config_loader import (
    ConfigurationError,
    load_reporter_config,
)
from runreport.email_reporter.models.run_summary import RunSummary
from runreport.email_reporter.playwright_report import load_playwright_report
from runreport.email_reporter.rendering import render
from runreport.email_reporter.reporting import EmailReporter

# Configure logging - force reconfiguration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,
)
logger = logging.getLogger(__name__)

app = typer.Typer()


@app.command()
def main(
    results: Path = typer.Option(..., help="Playwright JSON reporter output file"),  # noqa: B008
    config: Path = typer.Option(..., help="Reporter YAML configuration file"),  # noqa: B008
    output: Path | None = typer.Option(  # noqa: B008
        None, help="Also write the rendered HTML report to this file"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Render the report without sending it"
    ),
) -> None:
    """Summarize a test run and mail the report."""
    try:
        options = load_reporter_config(config)
    except ConfigurationError as e:
        logger.error(f"Failed to load configuration: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        run = load_playwright_report(results)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load test results: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    reporter = EmailReporter(options)
    reporter.on_begin(run.start_time)
    summary = reporter.finish_run(run.end_time, run.records)

    if output is not None:
        output.write_text(render(summary, options.display), encoding="utf-8")
        logger.info(f"Report written to {output}")

    typer.echo(json.dumps(_summary_output(summary), indent=2))

    if dry_run:
        logger.info("Dry run, report not sent")
        return

    outcome = asyncio.run(reporter.deliver(summary))
    if outcome == "failed":
        typer.echo("Error: report delivery failed, see log for details", err=True)
        raise typer.Exit(code=1)


def _summary_output(summary: RunSummary) -> dict[str, object]:
    """Build the JSON totals printed on stdout."""
    return {
        "total": summary.total,
        "passed": summary.passed,
        "failed": summary.failed,
        "flaky": summary.flaky,
        "skipped": summary.skipped,
        "duration_ms": summary.duration_ms,
        "failed_tests": [
            {"name": t.name, "project": t.project, "duration": t.duration}
            for t in summary.failed_tests
        ],
    }


if __name__ == "__main__":  # pragma: no cover
    app()
