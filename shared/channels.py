"""
Notification channels for purchase confirmations.

Each channel logs every send and keeps a history of sent messages for test
assertions. When a transport is supplied (see shared.transports) the channel
hands the message to it; without one the channel runs in log-only mode.

Design decisions:
- All sends are logged for visibility
- Channels track sent messages for test assertions
- A transport that raises produces a failed NotificationResult; channels
  never raise on delivery problems
- Channel failures can be simulated for testing
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional
from enum import Enum

from shared.models import utc_now

# Configure logging for notification channels
logger = logging.getLogger("notifications")
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter(
    "%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S"
))
logger.addHandler(handler)
logger.setLevel(logging.INFO)


EmailTransport = Callable[[str, str, str], None]
MessageTransport = Callable[[str, str], None]


class ChannelType(str, Enum):
    """Supported notification channels."""
    EMAIL = "email"
    WHATSAPP = "whatsapp"


@dataclass
class NotificationResult:
    """
    Result of a notification send attempt.

    Captures success/failure and metadata for debugging and testing.
    """
    success: bool
    channel: ChannelType
    recipient: str
    subject: Optional[str]  # Email only
    body: str
    timestamp: datetime = field(default_factory=utc_now)
    error: Optional[str] = None

    def __str__(self) -> str:
        status = "✓" if self.success else "✗"
        if self.channel == ChannelType.EMAIL:
            return f"{status} EMAIL to {self.recipient}: {self.subject}"
        return f"{status} WHATSAPP to {self.recipient}: {self.body[:50]}..."


class _Channel:
    """Message history shared by all channels."""

    def __init__(self, fail_rate: float = 0.0, failure_message: Optional[str] = None):
        self.fail_rate = fail_rate
        self.failure_message = failure_message
        self.sent_messages: list[NotificationResult] = []

    def _should_fail(self) -> bool:
        return self.fail_rate > 0 and random.random() < self.fail_rate

    def get_sent_count(self) -> int:
        """Get the number of messages sent (for testing)."""
        return len(self.sent_messages)

    def get_successful_sends(self) -> list[NotificationResult]:
        """Get all successful sends."""
        return [m for m in self.sent_messages if m.success]

    def clear_history(self):
        """Clear sent message history (useful between tests)."""
        self.sent_messages.clear()

    def find_message_to(self, recipient: str) -> Optional[NotificationResult]:
        """Find a message sent to a specific recipient."""
        for msg in self.sent_messages:
            if msg.recipient == recipient:
                return msg
        return None


class EmailChannel(_Channel):
    """
    Email channel.

    Delegates to an SMTP transport when configured; otherwise logs the
    message. Can simulate failures for testing error handling.
    """

    def __init__(
        self,
        fail_rate: float = 0.0,
        transport: Optional[EmailTransport] = None,
        failure_message: Optional[str] = None,
    ):
        """
        Initialize the email channel.

        Args:
            fail_rate: Probability of send failure (0.0 to 1.0), for testing.
            transport: Callable (to, subject, body) performing real delivery.
            failure_message: Error text reported for simulated failures.
        """
        super().__init__(
            fail_rate=fail_rate,
            failure_message=failure_message or "Simulated email delivery failure",
        )
        self.transport = transport

    def send(self, to: str, subject: str, body: str) -> NotificationResult:
        """
        Send an email.

        Args:
            to: Recipient email address
            subject: Email subject line
            body: Email body content

        Returns:
            NotificationResult indicating success/failure
        """
        error = None
        if self._should_fail():
            error = self.failure_message
        elif self.transport is not None:
            try:
                self.transport(to, subject, body)
            except Exception as e:
                error = str(e) or e.__class__.__name__

        result = NotificationResult(
            success=error is None,
            channel=ChannelType.EMAIL,
            recipient=to,
            subject=subject,
            body=body,
            error=error,
        )
        if result.success:
            logger.info(f"[EMAIL] To: {to} | Subject: {subject}")
            logger.debug(f"[EMAIL BODY] {body}")
        else:
            logger.error(f"[EMAIL FAILED] To: {to} | Subject: {subject} | Error: {error}")

        self.sent_messages.append(result)
        return result


class WhatsAppChannel(_Channel):
    """
    WhatsApp messaging channel.

    Delegates to the WhatsApp Cloud API transport when configured; otherwise
    logs the message.
    """

    # WhatsApp rejects text bodies above this length
    MAX_LENGTH = 4096

    def __init__(
        self,
        fail_rate: float = 0.0,
        transport: Optional[MessageTransport] = None,
        failure_message: Optional[str] = None,
    ):
        """
        Initialize the WhatsApp channel.

        Args:
            fail_rate: Probability of send failure (0.0 to 1.0), for testing.
            transport: Callable (to, message) performing real delivery.
            failure_message: Error text reported for simulated failures.
        """
        super().__init__(
            fail_rate=fail_rate,
            failure_message=failure_message or "Simulated WhatsApp delivery failure",
        )
        self.transport = transport

    def send(self, to: str, message: str) -> NotificationResult:
        """
        Send a WhatsApp message.

        Args:
            to: Recipient phone number, already formatted for WhatsApp
            message: Message content

        Returns:
            NotificationResult indicating success/failure
        """
        if len(message) > self.MAX_LENGTH:
            logger.warning(
                f"[WHATSAPP] Message length ({len(message)}) exceeds {self.MAX_LENGTH} chars, "
                "provider may reject it"
            )

        error = None
        if self._should_fail():
            error = self.failure_message
        elif self.transport is not None:
            try:
                self.transport(to, message)
            except Exception as e:
                error = str(e) or e.__class__.__name__

        result = NotificationResult(
            success=error is None,
            channel=ChannelType.WHATSAPP,
            recipient=to,
            subject=None,
            body=message,
            error=error,
        )
        if result.success:
            logger.info(f"[WHATSAPP] To: {to} | Length: {len(message)}")
            logger.debug(f"[WHATSAPP BODY] {message}")
        else:
            logger.error(f"[WHATSAPP FAILED] To: {to} | Error: {error}")

        self.sent_messages.append(result)
        return result


class NotificationChannels:
    """
    Facade for all notification channels.

    Holds one email and one WhatsApp channel so callers (and tests) can
    inspect everything that was sent during a dispatch.
    """

    def __init__(
        self,
        email: Optional[EmailChannel] = None,
        whatsapp: Optional[WhatsAppChannel] = None,
    ):
        self.email = email or EmailChannel()
        self.whatsapp = whatsapp or WhatsAppChannel()

    def get_all_sent_messages(self) -> list[NotificationResult]:
        """Get all sent messages across all channels."""
        return self.email.sent_messages + self.whatsapp.sent_messages

    def get_total_sent_count(self) -> int:
        """Get total number of messages sent across all channels."""
        return self.email.get_sent_count() + self.whatsapp.get_sent_count()

    def clear_all_history(self):
        """Clear history for all channels."""
        self.email.clear_history()
        self.whatsapp.clear_history()
