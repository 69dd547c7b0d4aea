"""
Tests for notification channels.

These tests verify that the email and WhatsApp channels log and track sent
messages, delegate to transports, and convert transport errors into failed
results.
"""

import logging
import pytest
from shared.channels import (
    EmailChannel,
    WhatsAppChannel,
    NotificationChannels,
    ChannelType,
    NotificationResult,
)


class TestEmailChannel:
    """Tests for the email channel."""

    def test_send_email_success(self, email_channel: EmailChannel):
        """Test successful email send."""
        result = email_channel.send(
            to="test@example.com",
            subject="Test Subject",
            body="Test body content",
        )

        assert result.success is True
        assert result.channel == ChannelType.EMAIL
        assert result.recipient == "test@example.com"
        assert result.subject == "Test Subject"
        assert result.error is None

    def test_tracks_sent_messages(self, email_channel: EmailChannel):
        """Test that channel tracks sent messages."""
        email_channel.send("a@example.com", "Subject A", "Body A")
        email_channel.send("b@example.com", "Subject B", "Body B")

        assert email_channel.get_sent_count() == 2
        assert email_channel.find_message_to("b@example.com").subject == "Subject B"

    def test_clear_history(self, email_channel: EmailChannel):
        """Test clearing message history."""
        email_channel.send("test@example.com", "Test", "Body")
        email_channel.clear_history()

        assert email_channel.get_sent_count() == 0

    def test_simulated_failure(self):
        """Test simulated email failure."""
        failing_channel = EmailChannel(fail_rate=1.0)

        result = failing_channel.send("test@example.com", "Test", "Body")

        assert result.success is False
        assert "failure" in result.error.lower()
        assert failing_channel.get_successful_sends() == []

    def test_custom_failure_message(self):
        channel = EmailChannel(fail_rate=1.0, failure_message="SMTP timeout")

        result = channel.send("test@example.com", "Test", "Body")

        assert result.error == "SMTP timeout"

    def test_delegates_to_transport(self):
        """The transport receives (to, subject, body)."""
        calls = []
        channel = EmailChannel(transport=lambda to, subject, body: calls.append((to, subject, body)))

        result = channel.send("test@example.com", "Hello", "World")

        assert result.success is True
        assert calls == [("test@example.com", "Hello", "World")]

    def test_transport_error_becomes_failed_result(self):
        """A raising transport never propagates out of the channel."""
        def broken_transport(to, subject, body):
            raise TimeoutError("SMTP timeout")

        channel = EmailChannel(transport=broken_transport)

        result = channel.send("test@example.com", "Hello", "World")

        assert result.success is False
        assert result.error == "SMTP timeout"
        assert channel.get_sent_count() == 1


class TestWhatsAppChannel:
    """Tests for the WhatsApp channel."""

    def test_send_message_success(self, whatsapp_channel: WhatsAppChannel):
        result = whatsapp_channel.send(to="5215512345678", message="Order confirmed")

        assert result.success is True
        assert result.channel == ChannelType.WHATSAPP
        assert result.subject is None

    def test_long_message_warning(self, whatsapp_channel: WhatsAppChannel, caplog):
        """Messages above the WhatsApp limit trigger a warning."""
        long_message = "A" * (WhatsAppChannel.MAX_LENGTH + 1)

        with caplog.at_level(logging.WARNING, logger="notifications"):
            whatsapp_channel.send("5215512345678", long_message)

        assert any("exceeds" in record.message.lower() for record in caplog.records)

    def test_transport_error_becomes_failed_result(self):
        def broken_transport(to, message):
            raise RuntimeError("WhatsApp API error: invalid token")

        channel = WhatsAppChannel(transport=broken_transport)

        result = channel.send("5215512345678", "hi")

        assert result.success is False
        assert "invalid token" in result.error


class TestNotificationChannels:
    """Tests for the NotificationChannels facade."""

    def test_default_channels(self):
        channels = NotificationChannels()

        assert isinstance(channels.email, EmailChannel)
        assert isinstance(channels.whatsapp, WhatsAppChannel)

    def test_get_all_sent_messages(self, channels: NotificationChannels):
        channels.email.send("email@example.com", "Subject", "Body")
        channels.whatsapp.send("5215512345678", "Message")

        all_messages = channels.get_all_sent_messages()

        assert len(all_messages) == 2
        assert channels.get_total_sent_count() == 2

    def test_clear_all_history(self, channels: NotificationChannels):
        channels.email.send("test@example.com", "Test", "Body")
        channels.whatsapp.send("5215512345678", "Test")

        channels.clear_all_history()

        assert channels.get_total_sent_count() == 0


class TestNotificationResult:
    """Tests for NotificationResult."""

    def test_str_email_success(self):
        result = NotificationResult(
            success=True,
            channel=ChannelType.EMAIL,
            recipient="test@example.com",
            subject="Test Subject",
            body="Body",
        )

        str_repr = str(result)
        assert "✓" in str_repr
        assert "EMAIL" in str_repr
        assert "Test Subject" in str_repr

    def test_str_whatsapp_failure(self):
        result = NotificationResult(
            success=False,
            channel=ChannelType.WHATSAPP,
            recipient="5215512345678",
            subject=None,
            body="Test message",
            error="Delivery failed",
        )

        str_repr = str(result)
        assert "✗" in str_repr
        assert "WHATSAPP" in str_repr
