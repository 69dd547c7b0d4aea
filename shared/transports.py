"""
Real delivery transports for the notification channels.

- SMTPTransport: plain SMTP with optional STARTTLS and login
- WhatsAppCloudTransport: WhatsApp Cloud API (Meta Graph API) over httpx

Both raise on failure; the channel that owns them turns the exception into a
failed NotificationResult. Timeouts are bounded by each transport's own
timeout setting.
"""

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Optional

import httpx

from shared.settings import Settings

logger = logging.getLogger("notifications.transports")


class WhatsAppAPIError(RuntimeError):
    """The WhatsApp Cloud API rejected both the template and the text message."""


class SMTPTransport:
    """Deliver emails through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        from_address: str = "notifications@marketplace.example.com",
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def __call__(self, to: str, subject: str, body: str) -> None:
        message = MIMEText(body, _charset="utf-8")
        message["Subject"] = subject
        message["From"] = self.from_address
        message["To"] = to

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.sendmail(self.from_address, [to], message.as_string())


class WhatsAppCloudTransport:
    """
    Send WhatsApp messages through the Cloud API.

    The approved template is tried first because business-initiated
    conversations require one; if the API rejects it, a plain text message
    is sent instead. Only when both fail is WhatsAppAPIError raised.
    """

    def __init__(
        self,
        token: str,
        phone_id: str,
        api_version: str = "v18.0",
        template_name: str = "purchase_confirmation",
        template_language: str = "es",
        base_url: str = "https://graph.facebook.com",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.token = token
        self.phone_id = phone_id
        self.api_version = api_version
        self.template_name = template_name
        self.template_language = template_language
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.api_version}/{self.phone_id}/messages"

    def __call__(self, to: str, message: str) -> None:
        response = self._post(self.template_payload(to, message))
        logger.info(f"WhatsApp template response: phone={to} status={response.status_code}")

        if not response.is_success:
            logger.warning(
                f"WhatsApp template message failed, trying plain text: "
                f"phone={to} error={response.text[:300]}"
            )
            response = self._post(self.text_payload(to, message))
            logger.info(f"WhatsApp text fallback response: phone={to} status={response.status_code}")

        if not response.is_success:
            raise WhatsAppAPIError(f"WhatsApp API error: {response.text[:300]}")

    def template_payload(self, to: str, message: str) -> dict:
        return {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "template",
            "template": {
                "name": self.template_name,
                "language": {"code": self.template_language},
                "components": [
                    {
                        "type": "body",
                        "parameters": [{"type": "text", "text": message}],
                    }
                ],
            },
        }

    def text_payload(self, to: str, message: str) -> dict:
        return {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": message},
        }

    def _post(self, payload: dict) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.token}"}
        if self._client is not None:
            return self._client.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.url, json=payload, headers=headers)


def smtp_transport_from_settings(settings: Settings) -> Optional[SMTPTransport]:
    """Build the SMTP transport, or None when SMTP is not configured."""
    if not settings.smtp_configured:
        return None
    return SMTPTransport(
        host=settings.smtp_host,
        port=settings.smtp_port,
        from_address=settings.mail_from_address,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout_seconds,
    )


def whatsapp_transport_from_settings(settings: Settings) -> Optional[WhatsAppCloudTransport]:
    """Build the WhatsApp transport, or None when credentials are missing."""
    if not settings.whatsapp_configured:
        return None
    return WhatsAppCloudTransport(
        token=settings.whatsapp_graph_token,
        phone_id=settings.whatsapp_phone_id,
        api_version=settings.whatsapp_api_version,
        template_name=settings.whatsapp_template_name,
        template_language=settings.whatsapp_template_language,
        base_url=settings.whatsapp_api_base_url,
        timeout=settings.whatsapp_timeout_seconds,
    )
