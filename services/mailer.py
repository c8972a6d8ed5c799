"""Outgoing email over SMTP."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from .errors import InternalError

logger = logging.getLogger(__name__)


class Mailer:
    """Send plain-text email.

    With ``suppress=True`` (or no SMTP server configured) messages are kept in
    ``outbox`` instead of being delivered.
    """

    def __init__(
        self,
        server: str | None,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        sender: str = "no-reply@localhost",
        suppress: bool = False,
        timeout: float = 10,
    ) -> None:
        self.server = server
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.suppress = suppress or not server
        self.timeout = timeout
        self.outbox: list[EmailMessage] = []

    @classmethod
    def from_config(cls, config) -> "Mailer":
        return cls(
            server=config.get("MAIL_SERVER"),
            port=int(config.get("MAIL_PORT", 587)),
            username=config.get("MAIL_USERNAME"),
            password=config.get("MAIL_PASSWORD"),
            use_tls=bool(config.get("MAIL_USE_TLS", True)),
            sender=config.get("MAIL_DEFAULT_SENDER") or "no-reply@localhost",
            suppress=bool(config.get("MAIL_SUPPRESS_SEND", False)),
        )

    def send_email(self, to: str, subject: str, text: str) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)

        if self.suppress:
            logger.info("Mail delivery suppressed: %r to %s", subject, to)
            self.outbox.append(message)
            return

        try:
            with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send %r to %s: %s", subject, to, exc)
            raise InternalError("Could not send email") from exc
        logger.info("Sent %r to %s", subject, to)
