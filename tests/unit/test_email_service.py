"""Unit tests for Email Service."""

import smtplib
from unittest.mock import patch

import pytest

from app.core.config import Settings
from app.services.email_service import EmailService


@pytest.fixture
def email_service():
    """Create an email service with SMTP configured."""
    return EmailService(
        Settings(
            smtp_host="smtp.test.com",
            smtp_port=587,
            smtp_user="bot@test.com",
            smtp_password="password",
            email_from="noreply@test.com",
            app_url="http://localhost:3000",
        )
    )


class TestEmailService:
    """Test cases for EmailService."""

    def test_send_email_success(self, email_service):
        with patch("app.services.email_service.smtplib.SMTP") as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value

            assert email_service.send_email("user@test.com", "Hi", "<p>Hi</p>", "Hi") is True

        mock_smtp.assert_called_once_with("smtp.test.com", 587)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("bot@test.com", "password")
        message = server.send_message.call_args[0][0]
        assert message["To"] == "user@test.com"
        assert message["From"] == "noreply@test.com"

    def test_send_email_without_config(self):
        service = EmailService(Settings(smtp_host=None, smtp_user=None, smtp_password=None))

        with patch("app.services.email_service.smtplib.SMTP") as mock_smtp:
            assert service.send_email("user@test.com", "Hi", "<p>Hi</p>") is False

        mock_smtp.assert_not_called()

    def test_send_email_auth_failure(self, email_service):
        with patch("app.services.email_service.smtplib.SMTP") as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad")

            assert email_service.send_email("user@test.com", "Hi", "<p>Hi</p>") is False

    def test_send_email_connection_failure(self, email_service):
        with patch("app.services.email_service.smtplib.SMTP", side_effect=OSError("down")):
            assert email_service.send_email("user@test.com", "Hi", "<p>Hi</p>") is False

    def test_verification_email_links_token(self, email_service):
        with patch.object(email_service, "send_email", return_value=True) as mock_send:
            email_service.send_verification_email("user@test.com", "alice", "tok123")

        to_email, subject, html_content, text_content = mock_send.call_args[0]
        assert to_email == "user@test.com"
        assert "Verify" in subject
        assert "http://localhost:3000/verifyemail?token=tok123" in html_content
        assert "alice" in text_content

    def test_password_reset_email_links_token(self, email_service):
        with patch.object(email_service, "send_email", return_value=True) as mock_send:
            email_service.send_password_reset_email("user@test.com", "alice", "tok456")

        html_content = mock_send.call_args[0][2]
        assert "http://localhost:3000/reset-password?token=tok456" in html_content

    def test_username_is_escaped_in_html(self, email_service):
        with patch.object(email_service, "send_email", return_value=True) as mock_send:
            email_service.send_verification_email("user@test.com", "<b>eve</b>", "tok")
            email_service.send_password_reset_email("user@test.com", "<b>eve</b>", "tok")

        for call in mock_send.call_args_list:
            html_content = call[0][2]
            assert "<b>eve</b>" not in html_content
            assert "&lt;b&gt;eve&lt;/b&gt;" in html_content
