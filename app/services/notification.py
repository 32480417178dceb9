"""
Patient call notifications sent by email.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from ..core.config import Settings

logger = logging.getLogger(__name__)

SUBJECT = "It's your turn - Clinic queue"


class EmailNotifier:
    """Tells a patient they have been called to the consulting room."""

    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        use_tls: bool = True,
        timeout: int = 10,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender or user
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailNotifier":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            sender=settings.EMAIL_FROM,
            use_tls=settings.SMTP_USE_TLS,
            timeout=settings.SMTP_TIMEOUT,
        )

    @property
    def configured(self) -> bool:
        return bool(self.host and self.sender)

    def build_message(self, email: str, name: Optional[str]) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self.sender
        message["To"] = email
        greeting = f"Hello {name}!" if name else "Hello!"
        message.set_content(
            f"{greeting}\n\n"
            "It is your turn to be seen.\n"
            "Please go to the consulting room.\n\n"
            "Kind regards,\nMedical team"
        )
        message.add_alternative(
            f"<h1>{greeting}</h1>"
            "<p>It is your turn to be seen.</p>"
            "<p>Please go to the consulting room.</p>"
            "<p>Kind regards,<br>Medical team</p>",
            subtype="html",
        )
        return message

    def send(self, email: str, name: Optional[str]) -> bool:
        """Send the call notification. Returns False instead of raising."""
        if not self.configured:
            logger.warning(f"SMTP not configured, notification to {email} skipped")
            return False

        try:
            message = self.build_message(email, name)
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.user and self.password:
                    smtp.login(self.user, self.password)
                smtp.send_message(message)
        except Exception as e:
            logger.error(f"Failed to send notification to {email}: {str(e)}")
            return False

        logger.info(f"Notification sent to {email}")
        return True
