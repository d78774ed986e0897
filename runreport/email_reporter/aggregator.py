"""Aggregation of per-test attempt histories into a run summary."""

import logging
from collections.abc import Callable
from datetime import datetime

from runreport.email_reporter.formatting import ansi_to_html, format_test_name
from runreport.email_reporter.models.reporter_config import NameFormat
from runreport.email_reporter.models.run_summary import FailedTestDetail, RunSummary
from runreport.email_reporter.models.test_record import (
    Attempt,
    FinalStatus,
    TestIdentity,
    TestRecord,
)

logger = logging.getLogger(__name__)

NO_ERROR_MESSAGE = "No error message"


class LifecycleError(RuntimeError):
    """Raised when the aggregator lifecycle contract is violated."""


def classify(attempts: list[Attempt]) -> FinalStatus:
    """Derive the final status of a test from its last attempt.

    Args:
        attempts: Attempts ordered by retry index, at least one

    Returns:
        "flaky" when the last attempt passed on a retry, "passed" when it passed
        on the first run, "skipped" when it was skipped, "failed" otherwise

    """
    last = attempts[-1]
    if last.status == "passed":
        return "flaky" if last.retry > 0 else "passed"
    if last.status == "skipped":
        return "skipped"
    return "failed"


def find_defect(record: TestRecord) -> str | None:
    """Describe why a record cannot be classified, or None if it is usable."""
    if not record.attempts:
        return "no attempts were recorded"
    for attempt in record.attempts:
        if attempt.duration < 0:
            return (
                f"negative duration ({attempt.duration} ms) "
                f"on attempt {attempt.retry}"
            )
    return None


class Aggregator:
    """Single-use accumulator turning a run's attempts into a RunSummary.

    Attempts can be fed either a whole test at a time with ``ingest`` or one
    attempt at a time with ``record_attempt``. Both paths share the same
    bookkeeping, so the same data produces the same summary.
    """

    def __init__(
        self,
        name_format: NameFormat = "file-first",
        markup: Callable[[str], str] = ansi_to_html,
    ) -> None:
        """Initialize an aggregator for one run."""
        self.name_format = name_format
        self.markup = markup
        self._start_time: datetime | None = None
        self._finished = False
        # Insertion order is encounter order
        self._identities: dict[tuple[str, tuple[str, ...]], TestIdentity] = {}
        self._attempts: dict[tuple[str, tuple[str, ...]], list[Attempt]] = {}

    def begin(self, start_time: datetime) -> None:
        """Record the run start; allowed exactly once."""
        if self._start_time is not None:
            raise LifecycleError("begin() was already called for this run")
        self._start_time = start_time

    def ingest(self, record: TestRecord) -> None:
        """Accept a test together with its full attempt history."""
        self._check_open()
        self._track(record.identity)
        for attempt in record.attempts:
            self._add_attempt(record.identity, attempt)

    def record_attempt(self, identity: TestIdentity, attempt: Attempt) -> None:
        """Accept a single completed attempt of a test."""
        self._check_open()
        self._track(identity)
        self._add_attempt(identity, attempt)

    def finish(self, end_time: datetime) -> RunSummary:
        """Classify every known test and produce the run summary.

        Args:
            end_time: Run end timestamp

        Returns:
            The immutable summary of the run

        Raises:
            LifecycleError: If the run was not begun, was already finished, or
                ends before it started

        """
        if self._finished:
            raise LifecycleError("finish() was already called for this run")
        if self._start_time is None:
            raise LifecycleError("finish() called before begin()")
        if end_time < self._start_time:
            raise LifecycleError(
                f"Run end time {end_time.isoformat()} precedes start time "
                f"{self._start_time.isoformat()}"
            )
        self._finished = True

        counts: dict[FinalStatus, int] = {
            "passed": 0,
            "failed": 0,
            "flaky": 0,
            "skipped": 0,
        }
        failed_tests: list[FailedTestDetail] = []

        for key, identity in self._identities.items():
            record = TestRecord(identity=identity, attempts=self._attempts[key])
            defect = find_defect(record)
            if defect is not None:
                logger.warning(f"Malformed test record {identity.title!r}: {defect}")
                counts["failed"] += 1
                failed_tests.append(
                    self._failed_detail(
                        identity, 0, f"Malformed test record: {defect}"
                    )
                )
                continue

            status = classify(record.attempts)
            counts[status] += 1
            if status == "failed":
                last = record.attempts[-1]
                failed_tests.append(
                    self._failed_detail(
                        identity, last.duration, last.error or NO_ERROR_MESSAGE
                    )
                )

        summary = RunSummary(
            total=len(self._identities),
            passed=counts["passed"],
            failed=counts["failed"],
            flaky=counts["flaky"],
            skipped=counts["skipped"],
            failed_tests=tuple(failed_tests),
            start_time=self._start_time,
            end_time=end_time,
        )
        logger.info(
            f"Run finished: total={summary.total} passed={summary.passed} "
            f"failed={summary.failed} flaky={summary.flaky} "
            f"skipped={summary.skipped}"
        )
        return summary

    def _check_open(self) -> None:
        """Ensure the run accepts attempts."""
        if self._start_time is None:
            raise LifecycleError("Attempts cannot be recorded before begin()")
        if self._finished:
            raise LifecycleError("Attempts cannot be recorded after finish()")

    def _track(self, identity: TestIdentity) -> None:
        """Register a test the first time it is seen."""
        if identity.key not in self._identities:
            self._identities[identity.key] = identity
            self._attempts[identity.key] = []

    def _add_attempt(self, identity: TestIdentity, attempt: Attempt) -> None:
        """Insert an attempt in retry order, ignoring re-delivered attempts."""
        attempts = self._attempts[identity.key]
        if any(existing.retry == attempt.retry for existing in attempts):
            logger.debug(
                f"Ignoring duplicate attempt {attempt.retry} of {identity.title!r}"
            )
            return
        position = len(attempts)
        while position > 0 and attempts[position - 1].retry > attempt.retry:
            position -= 1
        attempts.insert(position, attempt)

    def _failed_detail(
        self, identity: TestIdentity, duration: int, error: str
    ) -> FailedTestDetail:
        """Build the report row of a failed test."""
        return FailedTestDetail(
            name=format_test_name(identity, self.name_format),
            project=identity.project,
            duration=duration,
            error=self.markup(error),
        )
