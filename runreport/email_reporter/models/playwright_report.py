"""Models for the subset of Playwright's JSON reporter output that is read."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from runreport.email_reporter.models.test_record import AttemptStatus


class PlaywrightError(BaseModel):
    """Error attached to a test result."""

    message: str | None = Field(default=None, description="Error message")


class PlaywrightResult(BaseModel):
    """One attempt of a test in a project."""

    status: AttemptStatus = Field(..., description="Attempt outcome")
    duration: float = Field(..., description="Attempt duration in milliseconds")
    retry: int = Field(default=0, description="Retry index")
    error: PlaywrightError | None = Field(default=None, description="First error")


class PlaywrightTest(BaseModel):
    """A spec executed in one project."""

    model_config = ConfigDict(populate_by_name=True)

    project_name: str = Field(
        default="", alias="projectName", description="Project the test ran in"
    )
    results: list[PlaywrightResult] = Field(
        default_factory=list, description="Attempts in execution order"
    )


class PlaywrightSpec(BaseModel):
    """A test declaration in a spec file."""

    title: str = Field(..., description="Test title")
    file: str = Field(..., description="Spec file path")
    tests: list[PlaywrightTest] = Field(
        default_factory=list, description="One entry per project"
    )


class PlaywrightSuite(BaseModel):
    """A spec file or a describe block."""

    title: str = Field(..., description="File path for file suites, else title")
    file: str = Field(default="", description="Spec file path")
    specs: list[PlaywrightSpec] = Field(default_factory=list, description="Tests")
    suites: list["PlaywrightSuite"] = Field(
        default_factory=list, description="Nested describe blocks"
    )


class PlaywrightStats(BaseModel):
    """Run-level statistics."""

    model_config = ConfigDict(populate_by_name=True)

    start_time: datetime = Field(..., alias="startTime", description="Run start")
    duration: float = Field(..., description="Run duration in milliseconds")


class PlaywrightReport(BaseModel):
    """Top-level JSON report."""

    suites: list[PlaywrightSuite] = Field(
        default_factory=list, description="One suite per spec file"
    )
    stats: PlaywrightStats = Field(..., description="Run statistics")
