"""Outgoing mail for password reset links"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from ..config import APISettings, get_settings

logger = logging.getLogger(__name__)


class MailService:
    """Sends password reset mail over SMTP when a host is configured"""

    SUBJECT = "JobTracker - Password Reset Request"

    def __init__(self, settings: Optional[APISettings] = None):
        self.settings = settings or get_settings()

    @property
    def enabled(self) -> bool:
        return bool(self.settings.smtp_host)

    def _build_message(self, recipient: str, reset_url: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = self.SUBJECT
        msg["From"] = self.settings.mail_sender or self.settings.smtp_user or "noreply@localhost"
        msg["To"] = recipient
        msg.set_content(
            "You are receiving this email because you requested to reset the password "
            "for your JobTracker account.\n\n"
            f"Open this link to set a new password. It is valid for "
            f"{self.settings.reset_token_ttl_minutes} minutes:\n\n"
            f"{reset_url}\n\n"
            "If you did not request this, ignore this email and your password will "
            "remain unchanged.\n"
        )
        return msg

    def send_reset_link(self, recipient: str, reset_url: str) -> bool:
        """Send the reset link; returns False when mail is disabled or delivery fails"""
        if not self.enabled:
            return False

        msg = self._build_message(recipient, reset_url)
        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=10) as smtp:
                smtp.starttls()
                if self.settings.smtp_user and self.settings.smtp_password:
                    smtp.login(self.settings.smtp_user, self.settings.smtp_password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Reset mail delivery failed: {e}")
            return False

        logger.info(f"Reset mail sent to {recipient}")
        return True
