"""Email service for account verification and password reset mails."""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from urllib.parse import urlencode

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(self, config: Settings | None = None):
        """Initialize email service with SMTP configuration."""
        config = config or settings
        self.smtp_host = config.smtp_host
        self.smtp_port = config.smtp_port
        self.smtp_user = config.smtp_user
        self.smtp_password = config.smtp_password
        self.from_email = config.email_from or config.smtp_user
        self.app_name = config.app_name
        self.app_url = config.app_url

    def _validate_config(self) -> bool:
        """Validate email configuration."""
        if not all([self.smtp_host, self.smtp_user, self.smtp_password]):
            logger.warning("Email service not configured properly")
            return False
        return True

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Send an email via SMTP.

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML content of the email
            text_content: Plain text content (fallback)

        Returns:
            True if email sent successfully, False otherwise
        """
        if not self._validate_config():
            logger.error("Cannot send email - configuration invalid")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = to_email

        if text_content:
            msg.attach(MIMEText(text_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))

        try:
            logger.info("Sending email to %s with subject: %s", to_email, subject)
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed: %s", e)
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP error sending email: %s", e)
            return False

        logger.info("Email sent successfully to %s", to_email)
        return True

    def _link(self, path: str, token: str) -> str:
        return f"{self.app_url}{path}?{urlencode({'token': token})}"

    def send_verification_email(self, to_email: str, username: str, token: str) -> bool:
        """Send the link that confirms a new account's email address."""
        link = self._link("/verifyemail", token)
        subject = f"Verify your {self.app_name} account"
        html_content = (
            f"<p>Hi <strong>{html.escape(username)}</strong>,</p>"
            f"<p>Confirm your email address by opening the link below. "
            f"It expires in one hour.</p>"
            f'<p><a href="{link}">Verify email</a></p>'
        )
        text_content = (
            f"Hi {username},\n\nConfirm your email address by opening this link "
            f"(expires in one hour):\n{link}\n"
        )
        return self.send_email(to_email, subject, html_content, text_content)

    def send_password_reset_email(self, to_email: str, username: str, token: str) -> bool:
        """Send the link that lets a user choose a new password."""
        link = self._link("/reset-password", token)
        subject = f"Reset your {self.app_name} password"
        html_content = (
            f"<p>Hi <strong>{html.escape(username)}</strong>,</p>"
            f"<p>Someone asked to reset your password. If it was you, open the link "
            f"below within one hour. Otherwise ignore this email.</p>"
            f'<p><a href="{link}">Reset password</a></p>'
        )
        text_content = (
            f"Hi {username},\n\nReset your password within one hour using this link:\n"
            f"{link}\n\nIf you did not ask for this, ignore this email.\n"
        )
        return self.send_email(to_email, subject, html_content, text_content)


# Create singleton instance
email_service = EmailService()
