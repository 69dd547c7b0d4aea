"""
Purchase confirmation dispatch.

This package turns a paid order into confirmations on two channels:
- context: loads the order snapshot and derives the payment data
- services: render and send the email / WhatsApp messages
- dispatcher: runs both channels and aggregates a partial-failure report
"""

from confirmations.bootstrap import build_channels, build_dispatcher
from confirmations.context import (
    OrderConfirmationContext,
    PaymentSnapshot,
    build_confirmation_context,
)
from confirmations.dispatcher import (
    ChannelOutcome,
    DispatchOutcome,
    NotificationDispatcher,
    RecipientClass,
    SendAttempt,
    SendState,
)
from confirmations.errors import (
    ChannelConfigurationError,
    ChannelDeliveryError,
    ChannelError,
    OrderNotFoundError,
)
from confirmations.services import PurchaseConfirmationEmailService, WhatsAppNotificationService

__all__ = [
    "build_channels",
    "build_dispatcher",
    "OrderConfirmationContext",
    "PaymentSnapshot",
    "build_confirmation_context",
    "ChannelOutcome",
    "DispatchOutcome",
    "NotificationDispatcher",
    "RecipientClass",
    "SendAttempt",
    "SendState",
    "ChannelConfigurationError",
    "ChannelDeliveryError",
    "ChannelError",
    "OrderNotFoundError",
    "PurchaseConfirmationEmailService",
    "WhatsAppNotificationService",
]
