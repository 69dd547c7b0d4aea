"""
Shared pytest fixtures for the purchase confirmation notifier tests.

These fixtures provide consistent test data and fresh channel state per test.
"""

import pytest
from datetime import datetime
from pathlib import Path

from confirmations.context import build_confirmation_context
from confirmations.services import PurchaseConfirmationEmailService, WhatsAppNotificationService
from shared.channels import EmailChannel, NotificationChannels, WhatsAppChannel
from shared.data_store import DataStore
from shared.settings import Settings


@pytest.fixture
def data_dir() -> Path:
    """Path to the fixture data directory."""
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def data_store(data_dir: Path) -> DataStore:
    """
    Fresh DataStore instance for each test.

    Uses the real JSON fixtures but creates a new instance
    so tests don't interfere with each other.
    """
    return DataStore(data_dir=data_dir)


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    """Settings with two admin emails and one admin WhatsApp number."""
    return Settings(
        _env_file=None,
        data_dir=data_dir,
        purchase_confirmation_notification_email="ops@marketplace.example.com, sales@marketplace.example.com",
        whatsapp_notification_number="5215511112222",
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 5, 4, 12, 30, 0)


@pytest.fixture
def clock(fixed_now: datetime):
    return lambda: fixed_now


@pytest.fixture
def email_channel() -> EmailChannel:
    """Fresh EmailChannel for each test."""
    return EmailChannel(fail_rate=0.0)


@pytest.fixture
def whatsapp_channel() -> WhatsAppChannel:
    """Fresh WhatsAppChannel for each test."""
    return WhatsAppChannel(fail_rate=0.0)


@pytest.fixture
def channels(email_channel: EmailChannel, whatsapp_channel: WhatsAppChannel) -> NotificationChannels:
    """Facade over the per-test channels."""
    return NotificationChannels(email=email_channel, whatsapp=whatsapp_channel)


@pytest.fixture
def email_service(email_channel: EmailChannel, settings: Settings) -> PurchaseConfirmationEmailService:
    return PurchaseConfirmationEmailService(email_channel, admin_emails=settings.admin_emails)


@pytest.fixture
def whatsapp_service(whatsapp_channel: WhatsAppChannel, settings: Settings) -> WhatsAppNotificationService:
    return WhatsAppNotificationService(whatsapp_channel, admin_numbers=settings.admin_phone_numbers)


# =============================================================================
# Order Fixtures
# =============================================================================

@pytest.fixture
def full_order_id() -> int:
    """
    Order #7: customer with phone, USD, gateway reference TX-7781,
    billing profile and linked account.
    """
    return 7


@pytest.fixture
def no_phone_order_id() -> int:
    """Order #1042: customer a@b.com without phone, no transaction reference, MXN."""
    return 1042


@pytest.fixture
def pending_order_id() -> int:
    """Order #15: not paid yet."""
    return 15


@pytest.fixture
def no_currency_order_id() -> int:
    """Order #21: paid, no currency row (falls back to the default currency)."""
    return 21


@pytest.fixture
def orphan_order_id() -> int:
    """Order #30: references a customer that does not exist."""
    return 30


@pytest.fixture
def full_context(data_store, full_order_id, settings, clock):
    return build_confirmation_context(data_store, full_order_id, settings=settings, clock=clock)


@pytest.fixture
def no_phone_context(data_store, no_phone_order_id, settings, clock):
    return build_confirmation_context(data_store, no_phone_order_id, settings=settings, clock=clock)
