"""Wire channels, transports and services into a NotificationDispatcher."""

import logging
from typing import Optional

from confirmations.dispatcher import NotificationDispatcher
from confirmations.services import PurchaseConfirmationEmailService, WhatsAppNotificationService
from shared.channels import EmailChannel, NotificationChannels, WhatsAppChannel
from shared.settings import Settings, get_settings
from shared.transports import smtp_transport_from_settings, whatsapp_transport_from_settings

logger = logging.getLogger("confirmations.bootstrap")


def build_channels(settings: Optional[Settings] = None) -> NotificationChannels:
    """Create channels, attaching real transports where credentials exist."""
    settings = settings or get_settings()
    email_transport = smtp_transport_from_settings(settings)
    whatsapp_transport = whatsapp_transport_from_settings(settings)

    if email_transport is None:
        logger.info("SMTP not configured, email channel runs in log-only mode")
    if whatsapp_transport is None:
        logger.info("WhatsApp not configured, WhatsApp channel runs in log-only mode")

    return NotificationChannels(
        email=EmailChannel(transport=email_transport),
        whatsapp=WhatsAppChannel(transport=whatsapp_transport),
    )


def build_dispatcher(
    settings: Optional[Settings] = None,
    channels: Optional[NotificationChannels] = None,
) -> NotificationDispatcher:
    """Create a dispatcher with services bound to the configured admin recipients."""
    settings = settings or get_settings()
    channels = channels or build_channels(settings)

    return NotificationDispatcher(
        email_service=PurchaseConfirmationEmailService(
            channels.email, admin_emails=settings.admin_emails
        ),
        whatsapp_service=WhatsAppNotificationService(
            channels.whatsapp, admin_numbers=settings.admin_phone_numbers
        ),
    )
