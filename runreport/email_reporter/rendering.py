"""HTML rendering of a run summary for e-mail delivery."""

import html

from runreport.email_reporter.formatting import format_duration
from runreport.email_reporter.models.reporter_config import DisplayConfig
from runreport.email_reporter.models.run_summary import FailedTestDetail, RunSummary

NO_FAILED_TESTS = "No failed tests"

_TABLE_STYLE = "border-collapse: collapse; width: 100%; font-family: sans-serif;"
_CELL_STYLE = "border: 1px solid #d0d7de; padding: 6px; text-align: left;"
_HEAD_STYLE = _CELL_STYLE + " background-color: #f6f8fa;"
_ERROR_STYLE = (
    "white-space: pre-wrap; font-family: monospace; font-size: 12px; margin: 0;"
)


def _cell(content: str, header: bool = False, extra: str = "") -> str:
    """Wrap already-escaped content in a styled table cell."""
    tag = "th" if header else "td"
    style = _HEAD_STYLE if header else _CELL_STYLE
    return f'<{tag} style="{style}"{extra}>{content}</{tag}>'


def _header(summary: RunSummary, display: DisplayConfig) -> str:
    """Render the title, description, and report link."""
    parts = [f"<h1>{html.escape(display.report_name)}</h1>"]
    if display.report_desc:
        parts.append(f"<p>{html.escape(display.report_desc)}</p>")
    if display.report_link:
        link = html.escape(display.report_link, quote=True)
        parts.append(
            f'<p>The full report can be found at <a href="{link}">{link}</a>.</p>'
        )
    parts.append(
        f"<p>Run started {summary.start_time.isoformat(timespec='seconds')} "
        f"and took {format_duration(summary.duration_ms)}.</p>"
    )
    return "\n".join(parts)


def _totals_table(summary: RunSummary) -> str:
    """Render the run totals table."""
    headers = ["Total Tests", "Passed", "Failed", "Flaky", "Skipped", "Duration"]
    values = [
        str(summary.total),
        str(summary.passed),
        str(summary.failed),
        str(summary.flaky),
        str(summary.skipped),
        format_duration(summary.duration_ms),
    ]
    head = "".join(_cell(h, header=True) for h in headers)
    row = "".join(_cell(v) for v in values)
    return (
        f'<table style="{_TABLE_STYLE}">'
        f"<thead><tr>{head}</tr></thead>"
        f"<tbody><tr>{row}</tr></tbody>"
        "</table>"
    )


def _failed_row(test: FailedTestDetail) -> str:
    """Render one failed test row; the error is already markup."""
    return (
        "<tr>"
        + _cell(html.escape(test.name))
        + _cell(html.escape(test.project))
        + _cell(format_duration(test.duration))
        + _cell(f'<pre style="{_ERROR_STYLE}">{test.error}</pre>')
        + "</tr>"
    )


def _failed_table(summary: RunSummary) -> str:
    """Render the failed tests table, or a placeholder row if there are none."""
    headers = ["Test", "Project", "Duration", "Error Message"]
    head = "".join(_cell(h, header=True) for h in headers)
    if summary.failed_tests:
        rows = "".join(_failed_row(test) for test in summary.failed_tests)
    else:
        rows = "<tr>" + _cell(NO_FAILED_TESTS, extra=' colspan="4"') + "</tr>"
    return (
        f'<table style="{_TABLE_STYLE}">'
        f"<thead><tr>{head}</tr></thead>"
        f"<tbody>{rows}</tbody>"
        "</table>"
    )


def render(summary: RunSummary, display: DisplayConfig) -> str:
    """Render a run summary as a self-contained HTML document.

    Args:
        summary: Aggregated run result
        display: Header title, description, and report link

    Returns:
        HTML document with inline styling and no external assets

    """
    return (
        "<!DOCTYPE html>\n"
        '<html><head><meta charset="utf-8">'
        f"<title>{html.escape(display.report_name)}</title></head>\n"
        '<body style="font-family: sans-serif;">\n'
        f"{_header(summary, display)}\n"
        f"{_totals_table(summary)}\n"
        "<h2>Failed Tests</h2>\n"
        f"{_failed_table(summary)}\n"
        "</body></html>\n"
    )
