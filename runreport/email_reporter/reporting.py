"""Run lifecycle adapter that aggregates results and mails the summary."""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Literal

from runreport.email_reporter.aggregator import Aggregator
from runreport.email_reporter.channels import DeliveryChannel, create_channel
from runreport.email_reporter.formatting import format_duration
from runreport.email_reporter.models.reporter_config import ReporterOptions
from runreport.email_reporter.models.run_summary import RunSummary
from runreport.email_reporter.models.test_record import (
    Attempt,
    TestIdentity,
    TestRecord,
)
from runreport.email_reporter.rendering import render

logger = logging.getLogger(__name__)

DeliveryOutcome = Literal["sent", "skipped", "failed"]


def should_deliver(summary: RunSummary, always_deliver: bool) -> bool:
    """Decide whether the report of a run is sent.

    Args:
        summary: Aggregated run result
        always_deliver: Send even when nothing failed

    Returns:
        True if delivery is forced or at least one test failed

    """
    return always_deliver or summary.failed > 0


class EmailReporter:
    """Collects a run's results from runner callbacks and mails a summary.

    The runner calls ``on_begin`` once, then ``on_test_end`` for every
    finished attempt, and finally ``on_end``. Runners that expose the whole
    result tree at the end can instead pass the records to ``on_end``.
    """

    def __init__(
        self,
        options: ReporterOptions,
        channel: DeliveryChannel | None = None,
    ) -> None:
        """Initialize reporter; the channel defaults to the configured transport."""
        self.options = options
        self.channel = channel or create_channel(options)
        self.aggregator = Aggregator(name_format=options.name_format)

    def on_begin(self, start_time: datetime | None = None) -> None:
        """Mark the start of the run."""
        self.aggregator.begin(start_time or datetime.now(timezone.utc))

    def on_test_end(self, identity: TestIdentity, attempt: Attempt) -> None:
        """Record one finished attempt of a test."""
        self.aggregator.record_attempt(identity, attempt)

    async def on_end(
        self,
        end_time: datetime | None = None,
        tests: Iterable[TestRecord] = (),
    ) -> RunSummary:
        """Finish the run, then render and deliver the report if required.

        Args:
            end_time: Run end timestamp, defaults to now
            tests: Full test records, for runners that report the whole tree

        Returns:
            The run summary, whether or not a report was sent

        """
        summary = self.finish_run(end_time, tests)
        await self.deliver(summary)
        return summary

    def finish_run(
        self,
        end_time: datetime | None = None,
        tests: Iterable[TestRecord] = (),
    ) -> RunSummary:
        """Ingest any remaining records and finalize the run summary."""
        for record in tests:
            self.aggregator.ingest(record)
        summary = self.aggregator.finish(end_time or datetime.now(timezone.utc))
        logger.info(
            f"Run took {format_duration(summary.duration_ms)}, "
            f"{summary.failed}/{summary.total} tests failed"
        )
        return summary

    async def deliver(self, summary: RunSummary) -> DeliveryOutcome:
        """Render and send the report when the delivery gate allows it.

        Returns:
            "skipped" when the gate holds the report back, "sent" when the
            channel accepted it, "failed" when sending did not succeed

        """
        if not should_deliver(summary, self.options.mail_on_success):
            logger.info("No failed tests and mailOnSuccess is off, report not sent")
            return "skipped"

        html_payload = render(summary, self.options.display)
        delivered = await self.channel.send(
            self.options.recipients,
            self.options.sender,
            self.options.mail_subject,
            html_payload,
            timeout=self.options.timeout,
        )
        if not delivered:
            return "failed"
        logger.info("Email sent successfully.")
        return "sent"
