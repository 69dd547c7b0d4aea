"""
Order confirmation context assembly.

The context is the read-only snapshot both channels render from. It is
assembled once per dispatch, so the email and the WhatsApp messages always
describe the same order state, and it is discarded when the dispatch ends.
"""

import logging
import secrets
from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from confirmations.errors import OrderNotFoundError
from shared.data_store import DataStore
from shared.models import BillingProfile, Currency, Customer, LinkedAccount, Order, utc_now
from shared.settings import Settings, get_settings

logger = logging.getLogger("confirmations.context")

Clock = Callable[[], datetime]


class PaymentSnapshot(BaseModel):
    """
    Payment data shown in the confirmations.

    Built fresh for every dispatch and never persisted. `reference` is never
    empty: orders without a gateway reference get a generated one.
    """
    reference: str = Field(..., min_length=1)
    authorization_code: str
    amount: float
    currency: str
    processed_at: str = Field(..., description="ISO-8601 timestamp")

    model_config = ConfigDict(frozen=True)


class OrderConfirmationContext(BaseModel):
    """Everything the email and WhatsApp confirmations need for one order."""
    order: Order
    customer: Customer
    currency: Optional[Currency] = None
    linked_account: Optional[LinkedAccount] = None
    billing_profile: Optional[BillingProfile] = None
    payment: PaymentSnapshot

    model_config = ConfigDict(frozen=True)

    @property
    def order_id(self) -> int:
        return self.order.id

    @property
    def customer_phone(self) -> Optional[str]:
        return self.customer.phone or None

    def order_summary(self) -> dict:
        """Order fields echoed back in the dispatch report."""
        return {
            "id": self.order.id,
            "order_number": self.order.order_number,
            "total_amount": self.order.total_amount,
            "customer_email": self.customer.email,
            "customer_phone": self.customer_phone,
        }


def build_confirmation_context(
    store: DataStore,
    order_id: int,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> OrderConfirmationContext:
    """
    Load an order with its relations and derive the payment snapshot.

    Raises:
        OrderNotFoundError: If the order does not exist
        ValueError: If the order id is not positive, or the order's customer
            row is missing
    """
    if order_id <= 0:
        raise ValueError(f"order_id must be a positive integer, got {order_id}")

    settings = settings or get_settings()
    clock = clock or utc_now

    loaded = store.find_order_with_relations(order_id)
    if loaded is None:
        raise OrderNotFoundError(order_id)

    if loaded.customer is None:
        raise ValueError(
            f"Order {order_id} references missing customer {loaded.order.customer_id}"
        )

    payment = derive_payment_snapshot(
        loaded.order,
        loaded.currency,
        settings=settings,
        now=clock(),
    )

    logger.info(
        f"Confirmation context built: order_id={order_id} "
        f"order_number={loaded.order.order_number} reference={payment.reference} "
        f"has_linked_account={loaded.linked_account is not None}"
    )

    return OrderConfirmationContext(
        order=loaded.order,
        customer=loaded.customer,
        currency=loaded.currency,
        linked_account=loaded.linked_account,
        billing_profile=loaded.billing_profile,
        payment=payment,
    )


def derive_payment_snapshot(
    order: Order,
    currency: Optional[Currency],
    settings: Settings,
    now: datetime,
) -> PaymentSnapshot:
    """Build the payment snapshot for one dispatch attempt."""
    reference = order.transaction_reference or generate_reference(
        settings.generated_reference_prefix, now
    )
    processed_at = order.paid_at or now

    return PaymentSnapshot(
        reference=reference,
        authorization_code=generate_authorization_code(),
        amount=order.total_amount,
        currency=currency.code if currency else settings.default_currency,
        processed_at=processed_at.isoformat(),
    )


def generate_reference(prefix: str, now: datetime) -> str:
    # the random suffix keeps references distinct within the same microsecond
    return f"{prefix}{now:%Y%m%d%H%M%S%f}-{secrets.token_hex(3)}"


def generate_authorization_code() -> str:
    return f"AUTH-{secrets.randbelow(900000) + 100000}"
