from __future__ import annotations

import smtplib
import ssl
from email.message import EmailMessage

from loguru import logger

from gift_claimer.config import Settings
from gift_claimer.notifications.formatter import EMAIL_SUBJECT

SMTP_TIMEOUT = 30  # seconds


class EmailSender:
    """Send plain-text notifications over SMTP to a single recipient."""

    def __init__(
        self,
        smtp_host: str,
        sender: str,
        recipient: str,
        smtp_port: int = 587,
        smtp_user: str = "",
        smtp_password: str = "",
        use_ssl: bool = False,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.sender = sender
        self.recipient = recipient
        self.use_ssl = use_ssl

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailSender":
        return cls(
            smtp_host=settings.smtp_host,
            sender=settings.smtp_from,
            recipient=settings.notify_to,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
            use_ssl=settings.smtp_use_ssl,
        )

    def _build_message(self, text: str) -> EmailMessage:
        email = EmailMessage()
        email["Subject"] = EMAIL_SUBJECT
        email["From"] = self.sender
        email["To"] = self.recipient
        email.set_content(text)
        return email

    def _maybe_login(self, server: smtplib.SMTP) -> None:
        if self.smtp_user and self.smtp_password:
            server.login(self.smtp_user, self.smtp_password)

    def send(self, text: str) -> bool:
        """Send ``text`` as the email body.

        Uses implicit SSL when ``use_ssl`` is set (port 465), STARTTLS otherwise.

        Returns:
            True if the SMTP server accepted the message, False otherwise.
        """
        email = self._build_message(text)
        context = ssl.create_default_context()

        try:
            if self.use_ssl:
                with smtplib.SMTP_SSL(
                    self.smtp_host, self.smtp_port, context=context, timeout=SMTP_TIMEOUT
                ) as server:
                    self._maybe_login(server)
                    server.send_message(email)
            else:
                with smtplib.SMTP(
                    self.smtp_host, self.smtp_port, timeout=SMTP_TIMEOUT
                ) as server:
                    server.starttls(context=context)
                    self._maybe_login(server)
                    server.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending email notification to {self.recipient}: {e}")
            return False

        logger.info(f"Email notification sent to {self.recipient}")
        return True
