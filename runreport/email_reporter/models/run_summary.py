"""Models for the aggregated result of a test run."""

from datetime import datetime, timedelta
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class FailedTestDetail(BaseModel):
    """Report row for a test whose final status is failed."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name built from the test identity")
    project: str = Field(..., description="Project or suite label")
    duration: int = Field(..., ge=0, description="Last attempt duration in ms")
    error: str = Field(..., description="Error text converted to HTML markup")


class RunSummary(BaseModel):
    """Immutable summary of one test run."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(..., ge=0, description="Number of tests in the run")
    passed: int = Field(default=0, ge=0, description="Tests passed on first attempt")
    failed: int = Field(default=0, ge=0, description="Tests whose last attempt failed")
    flaky: int = Field(default=0, ge=0, description="Tests passed after a retry")
    skipped: int = Field(default=0, ge=0, description="Tests skipped")
    failed_tests: tuple[FailedTestDetail, ...] = Field(
        default=(), description="Failed test details in encounter order"
    )
    start_time: datetime = Field(..., description="Run start timestamp")
    end_time: datetime = Field(..., description="Run end timestamp")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_ms(self) -> int:
        """Run duration in whole milliseconds."""
        return (self.end_time - self.start_time) // timedelta(milliseconds=1)

    @model_validator(mode="after")
    def _check_consistency(self) -> Self:
        """Reject summaries whose counters or timestamps disagree."""
        counted = self.passed + self.failed + self.flaky + self.skipped
        if counted != self.total:
            raise ValueError(
                f"Status counts ({counted}) do not add up to total ({self.total})"
            )
        if len(self.failed_tests) != self.failed:
            raise ValueError(
                f"Expected {self.failed} failed test details, "
                f"got {len(self.failed_tests)}"
            )
        if self.end_time < self.start_time:
            raise ValueError("Run end time precedes start time")
        return self
