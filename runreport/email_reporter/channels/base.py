"""Abstract base class for report delivery channels."""

import asyncio
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class DeliveryChannel(ABC):
    """Abstract base for channels that deliver a rendered report."""

    @abstractmethod
    async def deliver(
        self,
        recipients: str,
        sender: str,
        subject: str,
        html_payload: str,
    ) -> None:
        """Deliver a rendered report.

        Args:
            recipients: Comma separated recipient addresses
            sender: Sender address
            subject: Message subject
            html_payload: Rendered HTML report

        Raises:
            RuntimeError: If the transport rejects the message

        """

    async def send(
        self,
        recipients: str,
        sender: str,
        subject: str,
        html_payload: str,
        timeout: float = 30,
    ) -> bool:
        """Deliver a report once, reporting failures instead of raising them.

        Args:
            recipients: Comma separated recipient addresses
            sender: Sender address
            subject: Message subject
            html_payload: Rendered HTML report
            timeout: Maximum time in seconds allowed for delivery

        Returns:
            True if the report was delivered, False otherwise

        """
        try:
            await asyncio.wait_for(
                self.deliver(recipients, sender, subject, html_payload),
                timeout=timeout,
            )
        except TimeoutError:
            logger.error(f"Report delivery did not complete within {timeout} seconds")
            return False
        except Exception as e:
            logger.error(
                f"Report delivery failed: {type(e).__name__}: {e}", exc_info=e
            )
            return False

        logger.info(f"Report delivered to {recipients}")
        return True
