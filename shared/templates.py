"""
Purchase confirmation message templates.

Templates support variable substitution using Python's string formatting.
Optional blocks (linked account, billing profile) are rendered to strings
by the caller and passed in as `account_section` / `billing_section`, so a
missing relation simply renders as an empty block.

Design decisions:
- Templates are stored as simple strings with {variable} placeholders
- Separate templates for the customer and for the admin group
- Email bodies are long-form; WhatsApp bodies use WhatsApp *bold* markup
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum


class Audience(str, Enum):
    """Who a confirmation is written for."""
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass
class ConfirmationTemplate:
    """
    A confirmation template with email and WhatsApp variants.
    """
    audience: Audience
    email_subject: str
    email_body: str
    message_body: str

    def render_email(self, **kwargs) -> tuple[str, str]:
        """
        Render the email template with provided variables.

        Returns:
            Tuple of (subject, body)
        """
        return (
            self.email_subject.format(**kwargs),
            self.email_body.format(**kwargs),
        )

    def render_message(self, **kwargs) -> str:
        """Render the WhatsApp template with provided variables."""
        return self.message_body.format(**kwargs)


# =============================================================================
# Template Definitions
# =============================================================================

TEMPLATES: dict[Audience, ConfirmationTemplate] = {

    Audience.CUSTOMER: ConfirmationTemplate(
        audience=Audience.CUSTOMER,
        email_subject="Purchase Confirmation - Order {order_number}",
        email_body="""Hi {customer_name},

Thank you for your purchase! Your payment for order {order_number} was received.

Order Total: {total_amount:,.2f} {currency}
Payment Reference: {reference}
Authorization Code: {authorization_code}
Processed At: {processed_at}

Items:
{item_list}
{account_section}{billing_section}
If you have any questions about your order, just reply to this email.

Thanks for shopping with us!
""",
        message_body=(
            "✅ *Purchase confirmed*\n\n"
            "Hi {customer_name}, we received your payment for order *{order_number}*.\n"
            "💰 *Total:* {total_amount:,.2f} {currency}\n"
            "🧾 *Reference:* {reference}\n"
            "{account_section}"
            "\nThanks for shopping with us!"
        ),
    ),

    Audience.ADMIN: ConfirmationTemplate(
        audience=Audience.ADMIN,
        email_subject="New Purchase - Order {order_number}",
        email_body="""A new purchase was completed.

Order: {order_number} (id {order_id})
Total: {total_amount:,.2f} {currency}
Payment Reference: {reference}
Authorization Code: {authorization_code}
Processed At: {processed_at}

Customer: {customer_name} <{customer_email}>
Phone: {customer_phone}

Items ({items_count}):
{item_list}
{account_section}{billing_section}""",
        message_body=(
            "🛒 *NEW PURCHASE*\n\n"
            "📋 *Order:* {order_number}\n"
            "💰 *Total:* {total_amount:,.2f} {currency}\n"
            "🧾 *Reference:* {reference}\n"
            "👤 *Customer:* {customer_name}\n"
            "📧 *Email:* {customer_email}\n"
            "📞 *Phone:* {customer_phone}\n"
            "{account_section}"
            "\n📦 *Items:*\n{item_list}\n"
            "\n⏰ *Processed:* {processed_at}"
        ),
    ),
}


# =============================================================================
# Template Access Functions
# =============================================================================

def get_template(audience: Audience) -> Optional[ConfirmationTemplate]:
    """Get a template by audience."""
    return TEMPLATES.get(audience)


def render_confirmation(
    audience: Audience,
    channel: str,
    **context
) -> tuple[Optional[str], str]:
    """
    Render a confirmation for a specific channel.

    Args:
        audience: Customer or admin variant
        channel: "email" or "whatsapp"
        **context: Variables to substitute in the template

    Returns:
        For email: (subject, body)
        For WhatsApp: (None, body)

    Raises:
        ValueError: If template not found or channel invalid
    """
    template = get_template(audience)
    if not template:
        raise ValueError(f"No template found for audience: {audience}")

    if channel == "email":
        return template.render_email(**context)
    elif channel == "whatsapp":
        return (None, template.render_message(**context))
    else:
        raise ValueError(f"Unknown channel: {channel}")


def format_item_list(items: list[dict]) -> str:
    """
    Format a list of items for inclusion in templates.

    Args:
        items: List of dicts with 'name', 'quantity', and optionally 'price'

    Returns:
        Formatted string, one item per line
    """
    if not items:
        return "  - (no items)"
    lines = []
    for item in items:
        if "price" in item:
            lines.append(f"  - {item['name']} (x{item['quantity']}) - {item['price']:,.2f}")
        else:
            lines.append(f"  - {item['name']} (x{item['quantity']})")
    return "\n".join(lines)
