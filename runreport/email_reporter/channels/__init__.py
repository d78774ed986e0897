"""Delivery channels for rendered reports."""

from runreport.email_reporter.channels.base import DeliveryChannel
from runreport.email_reporter.channels.mailgun import MailgunChannel
from runreport.email_reporter.channels.smtp import SmtpChannel
from runreport.email_reporter.models.reporter_config import ReporterOptions


def create_channel(options: ReporterOptions) -> DeliveryChannel:
    """Create the delivery channel selected by the reporter options."""
    if options.transport == "mailgun" and options.mailgun is not None:
        return MailgunChannel(options.mailgun)
    if options.transport == "smtp" and options.smtp is not None:
        return SmtpChannel(options.smtp)
    raise ValueError(
        f"No settings for transport: {options.transport}. "
        "Must provide an 'smtp' or 'mailgun' block"
    )


__all__ = ["DeliveryChannel", "MailgunChannel", "SmtpChannel", "create_channel"]
