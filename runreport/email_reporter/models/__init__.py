"""Data models for test records, run summaries, and reporter configuration."""

from runreport.email_reporter.models.reporter_config import (
    DisplayConfig,
    MailgunConfig,
    ReporterOptions,
    SmtpConfig,
)
from runreport.email_reporter.models.run_summary import FailedTestDetail, RunSummary
from runreport.email_reporter.models.test_record import (
    Attempt,
    TestIdentity,
    TestRecord,
)

__all__ = [
    "Attempt",
    "DisplayConfig",
    "FailedTestDetail",
    "MailgunConfig",
    "ReporterOptions",
    "RunSummary",
    "SmtpConfig",
    "TestIdentity",
    "TestRecord",
]
