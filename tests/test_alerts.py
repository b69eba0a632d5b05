"""
Tests for found-pet notifications
"""
from datetime import datetime, timezone
from unittest.mock import patch, MagicMock

import pytest

import sys
sys.path.insert(0, '.')

from src.alerts.email_sender import (
    EmailConfig,
    EmailNotifier,
    EmailSender,
    generate_found_pet_email_html,
)
from src.alerts.notification import MockNotifier, NotificationIntent, get_notifier


@pytest.fixture
def intent():
    return NotificationIntent(
        report_id="abc123",
        pet_name="Biscuit",
        pet_type="dog",
        owner_name="Dana Reyes",
        owner_email="dana@example.com",
        owner_phone=None,
        location="Corner of 5th & Main",
        latitude=40.0003,
        longitude=-73.0003,
        finder_name="Sam <Okafor>",
        finder_email="sam@example.com",
        sighting_id=1,
        created_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
    )


def configured_sender():
    return EmailSender(EmailConfig(
        smtp_host="smtp.test",
        smtp_port=587,
        username="user",
        password="secret",
        from_address="noreply@petalert.app",
    ))


class TestNotificationIntent:
    """Test suite for notification intents."""

    def test_subject_and_message(self, intent):
        assert intent.subject == "Great News! Biscuit Has Been Found!"
        assert "Sam <Okafor> has reported finding Biscuit near Corner of 5th & Main" in intent.message

    def test_to_dict(self, intent):
        data = intent.to_dict()

        assert data["owner"]["email"] == "dana@example.com"
        assert data["finder"]["name"] == "Sam <Okafor>"
        assert data["location"]["latitude"] == 40.0003

    def test_html_escapes_user_text(self, intent):
        html = generate_found_pet_email_html(intent)

        assert "Sam &lt;Okafor&gt;" in html
        assert "5th &amp; Main" in html
        assert "maps?q=40.0003,-73.0003" in html


class TestEmailNotifier:
    """Test suite for email delivery."""

    def test_unconfigured_sender(self, intent):
        sender = EmailSender(EmailConfig(
            smtp_host="smtp.test", smtp_port=587, username="", password="", from_address="x@y.z",
        ))

        result = EmailNotifier(sender).send(intent)

        assert result["success"] is False
        assert result["sent_to"] == []

    @patch('src.alerts.email_sender.smtplib.SMTP')
    def test_send_to_owner(self, mock_smtp, intent):
        server = MagicMock()
        mock_smtp.return_value.__enter__ = MagicMock(return_value=server)
        mock_smtp.return_value.__exit__ = MagicMock(return_value=False)

        result = EmailNotifier(configured_sender()).send(intent)

        assert result["success"] is True
        assert result["sent_to"] == ["dana@example.com"]
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("user", "secret")
        args = server.sendmail.call_args[0]
        assert args[1] == ["dana@example.com"]

    @patch('src.alerts.email_sender.smtplib.SMTP')
    def test_connection_error_reported(self, mock_smtp, intent):
        mock_smtp.side_effect = OSError("connection refused")

        result = EmailNotifier(configured_sender()).send(intent)

        assert result["success"] is False
        assert "connection refused" in result["error"]


class TestGetNotifier:
    """Test suite for notifier selection."""

    @patch('src.alerts.email_sender.settings')
    def test_mock_when_smtp_missing(self, mock_settings):
        mock_settings.smtp_user = None
        mock_settings.smtp_password = None

        assert isinstance(get_notifier(), MockNotifier)

    @patch('src.alerts.email_sender.settings')
    def test_email_when_configured(self, mock_settings):
        mock_settings.smtp_host = "smtp.test"
        mock_settings.smtp_port = 587
        mock_settings.smtp_user = "user"
        mock_settings.smtp_password = "secret"

        assert isinstance(get_notifier(), EmailNotifier)

    def test_mock_notifier_records(self, intent):
        notifier = MockNotifier()

        result = notifier.send(intent)

        assert result["success"] is True
        assert notifier.sent == [intent]
