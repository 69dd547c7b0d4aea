"""
Dual-channel purchase confirmation dispatch.

The dispatcher sends one order's confirmation through the email channel and
then the WhatsApp channel, and reports a combined outcome.

Rules:
- Every sub-send (customer/admin per channel) goes through `_attempt`, which
  turns exceptions into a FAILED SendAttempt. A failing send can never abort
  its sibling or the other channel.
- Customer is attempted before admin in both channels, and admin is
  attempted even when the customer send failed.
- The WhatsApp customer send is SKIPPED when the customer has no phone.
- A channel succeeds when every attempted sub-send succeeded. The dispatch
  succeeds when at least one channel succeeded.

There is no retry and no dedup: dispatching the same order twice sends
everything twice.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from confirmations.context import OrderConfirmationContext, PaymentSnapshot

logger = logging.getLogger("confirmations.dispatcher")


class EmailConfirmationSender(Protocol):
    def send_customer_confirmation(self, context: OrderConfirmationContext) -> bool: ...

    def send_admin_confirmation(self, context: OrderConfirmationContext) -> bool: ...


class MessagingConfirmationSender(Protocol):
    def send_purchase_confirmation_to_customer(self, context: OrderConfirmationContext) -> None: ...

    def send_purchase_confirmation_to_admins(self, context: OrderConfirmationContext) -> None: ...


class RecipientClass(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class SendState(str, Enum):
    """Lifecycle of a single sub-send."""
    NOT_ATTEMPTED = "not_attempted"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class ChannelStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class SendAttempt:
    """Outcome of one sub-send for one recipient class."""
    recipient: RecipientClass
    state: SendState = SendState.NOT_ATTEMPTED
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state == SendState.SUCCEEDED

    @property
    def attempted(self) -> bool:
        return self.state in (SendState.SUCCEEDED, SendState.FAILED)


@dataclass
class ChannelOutcome:
    """Per-channel result: the customer and admin sub-sends."""
    channel: str
    customer: SendAttempt
    admin: SendAttempt
    customer_phone: Optional[str] = None
    reports_phone: bool = False

    @property
    def attempts(self) -> list[SendAttempt]:
        return [self.customer, self.admin]

    @property
    def status(self) -> ChannelStatus:
        attempted = [a for a in self.attempts if a.attempted]
        if attempted and all(a.succeeded for a in attempted):
            return ChannelStatus.SUCCESS
        return ChannelStatus.ERROR

    @property
    def succeeded(self) -> bool:
        return self.status == ChannelStatus.SUCCESS

    @property
    def error(self) -> Optional[str]:
        errors = [a.error for a in self.attempts if a.state == SendState.FAILED and a.error]
        return "; ".join(errors) if errors else None

    def to_payload(self) -> dict[str, Any]:
        if not self.succeeded:
            return {
                "status": ChannelStatus.ERROR.value,
                "error": self.error or f"No {self.channel} confirmation was sent",
            }

        payload: dict[str, Any] = {
            "status": ChannelStatus.SUCCESS.value,
            "customer_sent": self.customer.succeeded,
        }
        if self.reports_phone:
            payload["customer_phone"] = self.customer_phone
        payload["admin_sent"] = self.admin.succeeded
        return payload


@dataclass
class DispatchOutcome:
    """Combined report for one dispatch."""
    order: dict[str, Any]
    payment: PaymentSnapshot
    email: ChannelOutcome
    whatsapp: ChannelOutcome
    channels: list[ChannelOutcome] = field(init=False)

    def __post_init__(self):
        self.channels = [self.email, self.whatsapp]

    @property
    def success(self) -> bool:
        """True if at least one channel fully succeeded."""
        return any(channel.succeeded for channel in self.channels)

    @property
    def message(self) -> str:
        if self.success:
            return "Order confirmations sent"
        return "Errors occurred while sending order confirmations"

    def to_payload(self) -> dict[str, Any]:
        return {
            "order": self.order,
            "payment_data": self.payment.model_dump(),
            "email_results": self.email.to_payload(),
            "whatsapp_results": self.whatsapp.to_payload(),
        }


class NotificationDispatcher:
    """
    Sends a purchase confirmation over email and WhatsApp.

    Collaborators are passed in explicitly:

        dispatcher = NotificationDispatcher(email_service, whatsapp_service)
        outcome = dispatcher.dispatch(context)
    """

    def __init__(
        self,
        email_service: EmailConfirmationSender,
        whatsapp_service: MessagingConfirmationSender,
    ):
        self.email_service = email_service
        self.whatsapp_service = whatsapp_service

    def dispatch(self, context: OrderConfirmationContext) -> DispatchOutcome:
        """Run both channels for one order and aggregate the result."""
        logger.info(
            f"Dispatching purchase confirmations: order_id={context.order_id} "
            f"order_number={context.order.order_number} "
            f"payment_reference={context.payment.reference} "
            f"customer_email={context.customer.email} "
            f"customer_phone={context.customer_phone} "
            f"has_linked_account={context.linked_account is not None}"
        )

        email = self._send_email(context)
        whatsapp = self._send_whatsapp(context)

        outcome = DispatchOutcome(
            order=context.order_summary(),
            payment=context.payment,
            email=email,
            whatsapp=whatsapp,
        )

        log = logger.info if outcome.success else logger.warning
        log(
            f"Dispatch finished: order_id={context.order_id} success={outcome.success} "
            f"email={email.status.value} whatsapp={whatsapp.status.value}"
        )
        return outcome

    def _send_email(self, context: OrderConfirmationContext) -> ChannelOutcome:
        customer = self._attempt(
            context, "email", RecipientClass.CUSTOMER,
            self.email_service.send_customer_confirmation,
            recipient=context.customer.email,
        )
        admin = self._attempt(
            context, "email", RecipientClass.ADMIN,
            self.email_service.send_admin_confirmation,
        )
        return ChannelOutcome(channel="email", customer=customer, admin=admin)

    def _send_whatsapp(self, context: OrderConfirmationContext) -> ChannelOutcome:
        phone = context.customer_phone
        if phone:
            customer = self._attempt(
                context, "whatsapp", RecipientClass.CUSTOMER,
                self.whatsapp_service.send_purchase_confirmation_to_customer,
                recipient=phone,
            )
        else:
            logger.info(
                f"Skipping customer WhatsApp: order_id={context.order_id} reason=no_phone"
            )
            customer = SendAttempt(RecipientClass.CUSTOMER, SendState.SKIPPED)

        admin = self._attempt(
            context, "whatsapp", RecipientClass.ADMIN,
            self.whatsapp_service.send_purchase_confirmation_to_admins,
        )
        return ChannelOutcome(
            channel="whatsapp",
            customer=customer,
            admin=admin,
            customer_phone=phone,
            reports_phone=True,
        )

    def _attempt(
        self,
        context: OrderConfirmationContext,
        channel: str,
        recipient_class: RecipientClass,
        send: Callable[[OrderConfirmationContext], Any],
        recipient: Optional[str] = None,
    ) -> SendAttempt:
        attempt = SendAttempt(recipient_class, SendState.ATTEMPTING)
        logger.info(
            f"Sending {channel} confirmation: order_id={context.order_id} "
            f"recipient_class={recipient_class.value} recipient={recipient or 'admin group'}"
        )

        try:
            result = send(context)
        except Exception as e:
            attempt.state = SendState.FAILED
            attempt.error = str(e) or e.__class__.__name__
            logger.error(
                f"Failed {channel} confirmation: order_id={context.order_id} "
                f"recipient_class={recipient_class.value} error={attempt.error}"
            )
            return attempt

        # senders that report failure by returning False instead of raising
        if result is False:
            attempt.state = SendState.FAILED
            attempt.error = f"{channel} {recipient_class.value} confirmation was not sent"
            logger.error(
                f"Failed {channel} confirmation: order_id={context.order_id} "
                f"recipient_class={recipient_class.value} error={attempt.error}"
            )
            return attempt

        attempt.state = SendState.SUCCEEDED
        return attempt
