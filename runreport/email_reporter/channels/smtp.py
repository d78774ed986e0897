"""SMTP delivery channel."""

from email.message import EmailMessage

import aiosmtplib

from runreport.email_reporter.channels.base import DeliveryChannel
from runreport.email_reporter.models.reporter_config import SmtpConfig


class SmtpChannel(DeliveryChannel):
    """Delivers reports through an SMTP server."""

    def __init__(self, config: SmtpConfig) -> None:
        """Initialize SMTP channel with configuration."""
        self.config = config

    async def deliver(
        self,
        recipients: str,
        sender: str,
        subject: str,
        html_payload: str,
    ) -> None:
        """Send the report as an HTML mail."""
        message = self._build_message(recipients, sender, subject, html_payload)

        try:
            await aiosmtplib.send(
                message,
                hostname=self.config.host,
                port=self.config.port,
                username=self.config.user,
                password=self.config.password,
                use_tls=self.config.secure,
            )
        except aiosmtplib.SMTPException as e:
            raise RuntimeError(
                f"Failed to send mail via {self.config.host}:{self.config.port}: {e}"
            ) from e

    def _build_message(
        self, recipients: str, sender: str, subject: str, html_payload: str
    ) -> EmailMessage:
        """Build a multipart message with a plain-text fallback."""
        message = EmailMessage()
        message["From"] = sender
        message["To"] = recipients
        message["Subject"] = subject
        message.set_content("This report requires an HTML capable mail client.")
        message.add_alternative(html_payload, subtype="html")
        return message
