"""
Domain models for the purchase confirmation notifier.

These models mirror the rows the marketplace order subsystem persists.
The notifier only ever reads them - ownership stays with order management.

Design decisions:
- Using Pydantic for validation and serialization
- Related rows (customer, currency, billing profile, linked account) are
  referenced by id, the way they are stored, and joined by the data store
- Each model includes only the fields the confirmation messages need
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, matching the stored timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# =============================================================================
# Enums - Status values used across the domain
# =============================================================================

class PaymentStatus(str, Enum):
    """Payment state of an order."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class OrderStatus(str, Enum):
    """Order lifecycle states."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# =============================================================================
# Reference data
# =============================================================================

class Currency(BaseModel):
    """A store currency. Orders reference it by id."""
    id: int = Field(..., gt=0)
    code: str = Field(..., min_length=3, max_length=3, description="ISO 4217 code")
    name: str = Field(default="")


class Customer(BaseModel):
    """
    The buyer associated with an order.

    The email address is required for the email channel. The phone number
    is optional; its presence gates the customer messaging send.
    """
    id: int = Field(..., gt=0)
    name: str = Field(..., description="Customer display name")
    email: str = Field(..., description="Primary email address")
    phone: Optional[str] = Field(default=None, description="Phone number for WhatsApp")


class LinkedAccount(BaseModel):
    """
    An account provisioned for the purchase (e.g. a cloud tenant).

    Zero-or-one per order.
    """
    id: int = Field(..., gt=0)
    domain: str = Field(..., description="Tenant domain / identifier")
    tenant_id: Optional[str] = Field(default=None)
    admin_email: Optional[str] = Field(default=None)


class BillingProfile(BaseModel):
    """Invoicing data for an order. Zero-or-one per order."""
    id: int = Field(..., gt=0)
    tax_id: str = Field(..., description="Tax identifier (e.g. RFC)")
    organization: str = Field(..., description="Legal organization name")
    postal_code: Optional[str] = Field(default=None)


# =============================================================================
# Orders
# =============================================================================

class OrderItem(BaseModel):
    """A single purchased product inside an order."""
    product_name: str = Field(..., description="Product title at time of purchase")
    sku: Optional[str] = Field(default=None)
    quantity: int = Field(..., ge=1, description="Quantity ordered")
    unit_price: float = Field(..., ge=0, description="Price at time of order")

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


class Order(BaseModel):
    """
    A completed (or in-flight) purchase.

    `transaction_reference` and `paid_at` stay empty until the payment
    gateway confirms the charge.
    """
    id: int = Field(..., gt=0, description="Unique order identifier")
    order_number: str = Field(..., description="Human-readable order number")
    customer_id: int = Field(..., gt=0, description="Reference to customer")
    currency_id: Optional[int] = Field(default=None)
    billing_profile_id: Optional[int] = Field(default=None)
    linked_account_id: Optional[int] = Field(default=None)
    status: OrderStatus = Field(default=OrderStatus.PENDING)
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    subtotal: float = Field(default=0.0, ge=0)
    tax_amount: float = Field(default=0.0, ge=0)
    total_amount: float = Field(..., ge=0, description="Order total")
    transaction_reference: Optional[str] = Field(default=None)
    paid_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    items: list[OrderItem] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)

    def is_paid(self) -> bool:
        """True once the gateway confirmed the payment."""
        return self.payment_status == PaymentStatus.PAID and self.paid_at is not None

    def items_count(self) -> int:
        return len(self.items)
