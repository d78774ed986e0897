"""Configuration models for the e-mail reporter and its delivery channels."""

from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

NameFormat = Literal["file-first", "title-first"]

DEFAULT_REPORT_NAME = "Test Run Report"


class SmtpConfig(BaseModel):
    """Configuration for the SMTP delivery channel."""

    model_config = ConfigDict(populate_by_name=True)

    host: str = Field(..., description="SMTP server host name")
    port: int = Field(default=587, description="SMTP server port")
    secure: bool = Field(default=False, description="Use implicit TLS on connect")
    user: str | None = Field(default=None, description="SMTP login user")
    password: str | None = Field(
        default=None, alias="pass", description="SMTP login password"
    )


class MailgunConfig(BaseModel):
    """Configuration for the Mailgun HTTP delivery channel."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(..., alias="apiKey", description="Mailgun API key")
    domain: str = Field(..., description="Sending domain registered with Mailgun")
    base_url: str = Field(
        default="https://api.mailgun.net/v3",
        alias="baseUrl",
        description="Mailgun API base URL",
    )


class DisplayConfig(BaseModel):
    """Options that only affect how the report looks."""

    model_config = ConfigDict(populate_by_name=True)

    report_link: str | None = Field(
        default=None, alias="reportLink", description="Link to the full report"
    )
    report_name: str = Field(
        default=DEFAULT_REPORT_NAME, alias="reportName", description="Header title"
    )
    report_desc: str | None = Field(
        default=None, alias="reportDesc", description="Header description text"
    )


class ReporterOptions(DisplayConfig):
    """Complete reporter configuration."""

    mail_on_success: bool = Field(
        default=False,
        alias="mailOnSuccess",
        description="Send the report even when no test failed",
    )
    name_format: NameFormat = Field(
        default="file-first",
        alias="nameFormat",
        description="How failed test names are built",
    )
    sender: str = Field(..., alias="from", description="Sender address")
    recipients: str = Field(
        ..., alias="to", description="Recipient address list, comma separated"
    )
    subject: str | None = Field(
        default=None, description="Mail subject, defaults to the report name"
    )
    transport: Literal["smtp", "mailgun"] = Field(
        default="smtp", description="Delivery channel used to send the report"
    )
    smtp: SmtpConfig | None = Field(default=None, description="SMTP settings")
    mailgun: MailgunConfig | None = Field(default=None, description="Mailgun settings")
    timeout: float = Field(
        default=30.0, gt=0, description="Delivery timeout in seconds"
    )

    @model_validator(mode="after")
    def _check_transport(self) -> Self:
        """Require the settings block of the selected transport."""
        if self.transport == "smtp" and self.smtp is None:
            raise ValueError("transport 'smtp' requires an 'smtp' settings block")
        if self.transport == "mailgun" and self.mailgun is None:
            raise ValueError("transport 'mailgun' requires a 'mailgun' settings block")
        return self

    @property
    def display(self) -> DisplayConfig:
        """Display-only subset of the options."""
        return DisplayConfig(
            report_link=self.report_link,
            report_name=self.report_name,
            report_desc=self.report_desc,
        )

    @property
    def mail_subject(self) -> str:
        """Subject line used for the delivered report."""
        return self.subject or self.report_name
