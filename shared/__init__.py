"""
Shared infrastructure for the purchase confirmation notifier.

This package contains:
- Domain models (Order, Customer, Currency, etc.)
- Data store for JSON-backed order data
- Notification channels (Email, WhatsApp) and their real transports
- Confirmation templates
- Settings
"""

from shared.models import (
    BillingProfile,
    Currency,
    Customer,
    LinkedAccount,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from shared.data_store import DataStore
from shared.channels import EmailChannel, WhatsAppChannel, NotificationChannels, NotificationResult
from shared.settings import Settings, get_settings

__all__ = [
    "BillingProfile",
    "Currency",
    "Customer",
    "LinkedAccount",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "DataStore",
    "EmailChannel",
    "WhatsAppChannel",
    "NotificationChannels",
    "NotificationResult",
    "Settings",
    "get_settings",
]
