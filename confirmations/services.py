"""
Purchase confirmation services for the email and WhatsApp channels.

Each service renders its messages from an OrderConfirmationContext and hands
them to a channel. Delivery problems are raised (ChannelError subclasses);
deciding what a failure means for the dispatch is the dispatcher's job.

Admin fan-out keeps going after an individual recipient fails, so one bad
address never hides the confirmation from the rest of the admin group.
"""

import logging
import re
from typing import Optional

from confirmations.context import OrderConfirmationContext
from confirmations.errors import ChannelConfigurationError, ChannelDeliveryError
from shared.channels import EmailChannel, WhatsAppChannel
from shared.templates import Audience, format_item_list, render_confirmation

logger = logging.getLogger("confirmations.services")


def confirmation_template_context(context: OrderConfirmationContext, channel: str) -> dict:
    """Flatten a confirmation context into template variables."""
    order = context.order
    payment = context.payment

    account_section = ""
    if context.linked_account:
        if channel == "whatsapp":
            account_section = f"🌐 *Domain:* {context.linked_account.domain}\n"
        else:
            account_section = f"\nLinked Account: {context.linked_account.domain}\n"

    billing_section = ""
    if context.billing_profile and channel == "email":
        billing_section = (
            f"\nBilling: {context.billing_profile.organization} "
            f"(Tax ID {context.billing_profile.tax_id})\n"
        )

    return {
        "order_id": order.id,
        "order_number": order.order_number,
        "customer_name": context.customer.name,
        "customer_email": context.customer.email,
        "customer_phone": context.customer_phone or "N/A",
        "total_amount": payment.amount,
        "currency": payment.currency,
        "reference": payment.reference,
        "authorization_code": payment.authorization_code,
        "processed_at": payment.processed_at,
        "items_count": order.items_count(),
        "item_list": format_item_list([
            {"name": item.product_name, "quantity": item.quantity, "price": item.line_total}
            for item in order.items
        ]),
        "account_section": account_section,
        "billing_section": billing_section,
    }


def format_phone_for_whatsapp(phone: str) -> str:
    """
    Normalize a phone number for the WhatsApp API.

    Non-digits are stripped. Numbers already carrying the 52 country code
    are kept, bare 10-digit national numbers get 52 prepended, anything
    else is returned as digits.
    """
    digits = re.sub(r"\D", "", phone)
    if digits.startswith("52"):
        return digits
    if len(digits) == 10:
        return "52" + digits
    return digits


class PurchaseConfirmationEmailService:
    """
    Sends purchase confirmation emails to the customer and the admin group.

    Example:
        service = PurchaseConfirmationEmailService(EmailChannel(), ["ops@example.com"])
        service.send_customer_confirmation(context)
    """

    def __init__(self, channel: EmailChannel, admin_emails: Optional[list[str]] = None):
        self.channel = channel
        self.admin_emails = list(admin_emails or [])

    def send_customer_confirmation(self, context: OrderConfirmationContext) -> bool:
        """
        Email the confirmation to the customer.

        Raises:
            ChannelDeliveryError: If the email could not be delivered
        """
        to = context.customer.email
        subject, body = render_confirmation(
            Audience.CUSTOMER, "email", **confirmation_template_context(context, "email")
        )

        result = self.channel.send(to, subject, body)
        if not result.success:
            raise ChannelDeliveryError(result.error or f"Email to {to} failed")

        logger.info(
            f"Purchase confirmation email sent to customer: "
            f"order_number={context.order.order_number} customer_email={to} "
            f"payment_reference={context.payment.reference}"
        )
        return True

    def send_admin_confirmation(self, context: OrderConfirmationContext) -> bool:
        """
        Email the confirmation to every configured admin address.

        Raises:
            ChannelConfigurationError: If no admin addresses are configured
            ChannelDeliveryError: If any admin address failed (after all
                addresses were attempted)
        """
        if not self.admin_emails:
            raise ChannelConfigurationError(
                "No admin emails configured for purchase confirmation"
            )

        subject, body = render_confirmation(
            Audience.ADMIN, "email", **confirmation_template_context(context, "email")
        )

        failures = []
        for admin_email in self.admin_emails:
            result = self.channel.send(admin_email, subject, body)
            if result.success:
                logger.info(
                    f"Purchase confirmation email sent to admin: "
                    f"order_number={context.order.order_number} admin_email={admin_email}"
                )
            else:
                logger.error(
                    f"Failed to send purchase confirmation email to admin: "
                    f"order_number={context.order.order_number} admin_email={admin_email} "
                    f"error={result.error}"
                )
                failures.append(f"{admin_email}: {result.error}")

        if failures:
            raise ChannelDeliveryError(
                f"Admin email failed for {len(failures)} of {len(self.admin_emails)} "
                f"recipients ({'; '.join(failures)})"
            )
        return True


class WhatsAppNotificationService:
    """Sends purchase confirmation WhatsApp messages to the customer and the admin group."""

    def __init__(self, channel: WhatsAppChannel, admin_numbers: Optional[list[str]] = None):
        self.channel = channel
        self.admin_numbers = list(admin_numbers or [])

    def send_purchase_confirmation_to_customer(self, context: OrderConfirmationContext) -> None:
        """
        Message the customer's phone.

        Raises:
            ChannelConfigurationError: If the customer has no phone number
            ChannelDeliveryError: If the message could not be delivered
        """
        if not context.customer_phone:
            raise ChannelConfigurationError(
                f"Customer {context.customer.id} has no phone number"
            )

        to = format_phone_for_whatsapp(context.customer_phone)
        _, message = render_confirmation(
            Audience.CUSTOMER, "whatsapp", **confirmation_template_context(context, "whatsapp")
        )

        result = self.channel.send(to, message)
        if not result.success:
            raise ChannelDeliveryError(result.error or f"WhatsApp to {to} failed")

        logger.info(
            f"Purchase confirmation WhatsApp sent to customer: "
            f"order_number={context.order.order_number} phone={to}"
        )

    def send_purchase_confirmation_to_admins(self, context: OrderConfirmationContext) -> None:
        """
        Message every configured admin number.

        With no admin numbers configured there is nobody to notify: a
        warning is logged and the send counts as done.

        Raises:
            ChannelDeliveryError: If any admin number failed (after all
                numbers were attempted)
        """
        if not self.admin_numbers:
            logger.warning(
                f"WhatsApp admin numbers not configured, skipping admin notification: "
                f"order_number={context.order.order_number}"
            )
            return

        _, message = render_confirmation(
            Audience.ADMIN, "whatsapp", **confirmation_template_context(context, "whatsapp")
        )

        failures = []
        for number in self.admin_numbers:
            result = self.channel.send(format_phone_for_whatsapp(number), message)
            if result.success:
                logger.info(
                    f"Purchase confirmation WhatsApp sent to admin: "
                    f"order_number={context.order.order_number} phone={number}"
                )
            else:
                logger.error(
                    f"Failed to send purchase confirmation WhatsApp to admin: "
                    f"order_number={context.order.order_number} phone={number} "
                    f"error={result.error}"
                )
                failures.append(f"{number}: {result.error}")

        if failures:
            raise ChannelDeliveryError(
                f"Admin WhatsApp failed for {len(failures)} of {len(self.admin_numbers)} "
                f"recipients ({'; '.join(failures)})"
            )
