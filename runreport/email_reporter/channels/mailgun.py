"""Mailgun HTTP API delivery channel."""

import aiohttp

from runreport.email_reporter.channels.base import DeliveryChannel
from runreport.email_reporter.models.reporter_config import MailgunConfig


class MailgunChannel(DeliveryChannel):
    """Delivers reports through the Mailgun messages API."""

    def __init__(self, config: MailgunConfig) -> None:
        """Initialize Mailgun channel with configuration."""
        self.config = config
        self.base_url = config.base_url.rstrip("/")

    async def deliver(
        self,
        recipients: str,
        sender: str,
        subject: str,
        html_payload: str,
    ) -> None:
        """Post the report to the messages endpoint of the sending domain."""
        url = f"{self.base_url}/{self.config.domain}/messages"
        auth = aiohttp.BasicAuth("api", self.config.api_key)

        data = aiohttp.FormData()
        data.add_field("from", sender)
        data.add_field("to", recipients)
        data.add_field("subject", subject)
        data.add_field("html", html_payload)

        async with aiohttp.ClientSession() as session:
            async with session.post(url, data=data, auth=auth) as response:
                if response.status != 200:
                    text = await response.text()
                    raise RuntimeError(
                        f"Failed to send mail via Mailgun: {response.status} {text}"
                    )
