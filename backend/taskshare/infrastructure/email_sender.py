"""Notification Sinks — outbound email behind the NotificationSink protocol.

Invariants:
    - send() never raises: delivery failures are logged and reported as False
    - SMTP IO runs in a worker thread so the event loop is never blocked

Design Decisions:
    - LoggingEmailSender for development (email_provider="log"): it only logs and
      holds no per-message state, so the process-wide instance stays constant-size
    - Callers schedule send() as a background task: the HTTP response never
      waits on, or fails because of, email delivery
"""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from taskshare.config import Settings

logger = logging.getLogger(__name__)


class SMTPEmailSender:
    """SMTP email sender."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        from_address: str = "no-reply@taskshare.local",
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_address = from_address
        self.timeout = timeout

    async def send(self, to_address: str, subject: str, html_body: str) -> bool:
        try:
            await asyncio.to_thread(self._send_blocking, to_address, subject, html_body)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                f"Failed to send email via SMTP: {e}",
                extra={"to_address": to_address},
            )
            return False
        logger.info("Email sent via SMTP", extra={"to_address": to_address})
        return True

    def _send_blocking(self, to_address: str, subject: str, html_body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address
        msg.attach(MIMEText(html_body, "html"))

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.from_address, [to_address], msg.as_string())


class LoggingEmailSender:
    """Development sink: logs instead of delivering."""

    async def send(self, to_address: str, subject: str, html_body: str) -> bool:
        logger.info(f"Email (not delivered): {subject}", extra={"to_address": to_address})
        return True


def build_notification_sink(settings: Settings):
    if settings.email_provider == "smtp":
        return SMTPEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            from_address=settings.email_from,
        )
    return LoggingEmailSender()


async def deliver_in_background(sink, to_address: str, subject: str, html_body: str) -> None:
    """BackgroundTasks entry point: log the outcome, never propagate."""
    delivered = await sink.send(to_address, subject, html_body)
    if not delivered:
        logger.warning(
            "Notification could not be delivered",
            extra={"to_address": to_address},
        )
