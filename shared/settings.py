"""
Runtime configuration for the purchase confirmation notifier.

Values come from environment variables (or a local `.env` file). Variable
names match the field names case-insensitively, e.g.
`PURCHASE_CONFIRMATION_NOTIFICATION_EMAIL=ops@example.com,sales@example.com`.

Real transports are only wired when their credentials are present; without
them the channels run in log-only mode, which is what tests and local demos use.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Notifier settings."""

    app_name: str = "Purchase Confirmation Notifier"
    log_level: str = "INFO"

    # Order data
    data_dir: Optional[Path] = None
    default_currency: str = "MXN"
    generated_reference_prefix: str = "generated-"

    # Admin recipients (comma-separated)
    purchase_confirmation_notification_email: str = ""
    whatsapp_notification_number: str = ""

    # Email transport
    mail_from_address: str = "notifications@marketplace.example.com"
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = Field(default=10.0, gt=0)

    # WhatsApp Cloud API transport
    whatsapp_graph_token: Optional[str] = None
    whatsapp_phone_id: Optional[str] = None
    whatsapp_api_base_url: str = "https://graph.facebook.com"
    whatsapp_api_version: str = "v18.0"
    whatsapp_template_name: str = "purchase_confirmation"
    whatsapp_template_language: str = "es"
    whatsapp_timeout_seconds: float = Field(default=10.0, gt=0)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def admin_emails(self) -> list[str]:
        return _split_csv(self.purchase_confirmation_notification_email)

    @property
    def admin_phone_numbers(self) -> list[str]:
        return _split_csv(self.whatsapp_notification_number)

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host)

    @property
    def whatsapp_configured(self) -> bool:
        return bool(self.whatsapp_graph_token and self.whatsapp_phone_id)


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


# Module-level singleton for convenience
# In tests, construct Settings(...) directly or call reset_settings()
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings(settings: Optional[Settings] = None) -> None:
    """Replace (or clear) the settings singleton."""
    global _settings
    _settings = settings
