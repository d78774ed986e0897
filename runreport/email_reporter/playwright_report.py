"""Load test records from a Playwright JSON reporter file."""

import json
import logging
from collections.abc import Iterator
from datetime import datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, Field

from runreport.email_reporter.models.playwright_report import (
    PlaywrightReport,
    PlaywrightSpec,
    PlaywrightSuite,
)
from runreport.email_reporter.models.test_record import (
    Attempt,
    TestIdentity,
    TestRecord,
)

logger = logging.getLogger(__name__)


class LoadedRun(BaseModel):
    """Test records of a finished run with its start and end time."""

    records: list[TestRecord] = Field(..., description="Records in report order")
    start_time: datetime = Field(..., description="Run start timestamp")
    end_time: datetime = Field(..., description="Run end timestamp")


def load_playwright_report(report_file: Path) -> LoadedRun:
    """Load a Playwright JSON report.

    Args:
        report_file: Path to the file written by Playwright's JSON reporter

    Returns:
        Test records in report order plus the run start and end time

    Raises:
        FileNotFoundError: If the report file doesn't exist
        ValueError: If the file is not valid JSON or doesn't match the schema

    """
    if not report_file.exists():
        raise FileNotFoundError(f"Report file not found: {report_file}")

    try:
        with report_file.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {report_file}: {e}") from e

    try:
        report = PlaywrightReport.model_validate(data)
    except Exception as e:
        raise ValueError(f"Invalid report schema in {report_file}: {e}") from e

    records = list(_collect_records(report.suites))
    start_time = report.stats.start_time
    end_time = start_time + timedelta(milliseconds=report.stats.duration)
    logger.info(f"Loaded {len(records)} tests from {report_file}")
    return LoadedRun(records=records, start_time=start_time, end_time=end_time)


def _collect_records(suites: list[PlaywrightSuite]) -> Iterator[TestRecord]:
    """Walk file suites and yield one record per spec and project."""
    for file_suite in suites:
        yield from _walk_suite(file_suite, file_suite.title, [])


def _walk_suite(
    suite: PlaywrightSuite, file_title: str, groups: list[str]
) -> Iterator[TestRecord]:
    """Yield records of a suite, then of its nested describe blocks."""
    for spec in suite.specs:
        yield from _spec_records(spec, file_title, groups)
    for child in suite.suites:
        yield from _walk_suite(child, file_title, [*groups, child.title])


def _spec_records(
    spec: PlaywrightSpec, file_title: str, groups: list[str]
) -> Iterator[TestRecord]:
    """Yield one record for each project the spec ran in.

    Entries without results never ran, e.g. after ``--max-failures`` stopped
    the run, and are left out.
    """
    for test in spec.tests:
        if not test.results:
            logger.info(
                f"Skipping {spec.title!r} in project {test.project_name!r}: not run"
            )
            continue
        identity = TestIdentity(
            file=spec.file,
            group_title=groups[-1] if groups else None,
            title=spec.title,
            title_path=("", test.project_name, file_title, *groups, spec.title),
        )
        attempts = [
            Attempt(
                status=result.status,
                duration=round(result.duration),
                retry=result.retry,
                error=result.error.message if result.error else None,
            )
            for result in test.results
        ]
        yield TestRecord(identity=identity, attempts=attempts)
