"""Email delivery for contact form notifications.

Providers:
- smtp: Standard SMTP delivery (STARTTLS required by default)
- console: Logs emails to console (development)

Providers never raise; they report delivery with a boolean and log the
reason for a failure. There is no retry: a failed send surfaces to the
visitor, who can submit again.

The SMTP provider bounds the whole dispatch (connect, STARTTLS, login,
send) by SMTP_TIMEOUT_SECONDS inside the sending thread, so nothing keeps
running after it reports a failure.
"""

import smtplib
import time
from abc import ABC, abstractmethod
from email.mime.text import MIMEText
from email.utils import formataddr

from loguru import logger

from models.config import Settings


class EmailProvider(ABC):
    """Abstract base class for email providers."""

    @abstractmethod
    def send(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        reply_to: str | None = None,
    ) -> bool:
        """Send a plain-text email."""
        pass


class SMTPDeadlineExceeded(smtplib.SMTPException):
    """The dispatch deadline ran out before the message was handed over."""


class SMTPProvider(EmailProvider):
    """SMTP email provider."""

    def __init__(self, settings: Settings) -> None:
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.from_email = settings.sender_email
        self.from_name = settings.SMTP_FROM_NAME
        self.use_tls = settings.SMTP_USE_TLS
        self.use_ssl = settings.SMTP_USE_SSL
        self.timeout = settings.SMTP_TIMEOUT_SECONDS

    def _remaining(self, deadline: float) -> float:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise SMTPDeadlineExceeded(
                f"dispatch exceeded {self.timeout}s before the message was sent"
            )
        return remaining

    def _arm(self, server: smtplib.SMTP, deadline: float) -> None:
        """Shrink the socket timeout to what is left of the deadline."""
        remaining = self._remaining(deadline)
        if server.sock is not None:
            server.sock.settimeout(remaining)

    def _close(self, server: smtplib.SMTP, deadline: float) -> None:
        """QUIT within the deadline, otherwise just drop the connection."""
        try:
            self._arm(server, deadline)
            server.quit()
        except (smtplib.SMTPException, OSError):
            server.close()

    def _connect(self, deadline: float) -> smtplib.SMTP:
        if self.use_ssl:
            # Implicit SSL (port 465) - connection is encrypted from start
            return smtplib.SMTP_SSL(
                self.host, self.port, timeout=self._remaining(deadline)
            )

        server = smtplib.SMTP(self.host, self.port, timeout=self._remaining(deadline))
        if self.use_tls:
            # STARTTLS is mandatory here; a relay without it raises
            # SMTPNotSupportedError instead of silently sending in clear text
            try:
                self._arm(server, deadline)
                server.starttls()
            except (smtplib.SMTPException, OSError):
                server.close()
                raise
        return server

    def build_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        reply_to: str | None = None,
    ) -> MIMEText:
        msg = MIMEText(text_body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to_email
        if reply_to:
            msg["Reply-To"] = reply_to
        return msg

    def send(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        reply_to: str | None = None,
    ) -> bool:
        """Send email via SMTP.

        Supports both:
        - Implicit SSL (port 465): use SMTP_USE_SSL=true
        - STARTTLS (port 587): use SMTP_USE_TLS=true
        """
        msg = self.build_message(to_email, subject, text_body, reply_to)
        deadline = time.monotonic() + self.timeout

        try:
            logger.info(
                f"SMTP: Connecting to {self.host}:{self.port} "
                f"(SSL={self.use_ssl}, TLS={self.use_tls})"
            )
            server = self._connect(deadline)
            try:
                if self.user and self.password:
                    self._arm(server, deadline)
                    server.login(self.user, self.password)
                self._arm(server, deadline)
                refused = server.sendmail(self.from_email, [to_email], msg.as_string())
            finally:
                self._close(server, deadline)

            if refused:
                logger.error(f"SMTP: Recipients refused - {refused}")
                return False

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"SMTP: Recipients refused - {e.recipients}")
            return False
        except smtplib.SMTPSenderRefused as e:
            logger.error(f"SMTP: Sender refused - {e.smtp_code}: {e.smtp_error!r}")
            return False
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP: Authentication failed - {e.smtp_code}: {e.smtp_error!r}")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e!r}")
            return False


class ConsoleProvider(EmailProvider):
    """Console email provider for development/testing."""

    def send(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        reply_to: str | None = None,
    ) -> bool:
        """Log email to console."""
        logger.info(
            f"\n{'=' * 60}\n"
            f"EMAIL (Console Provider - Development Mode)\n"
            f"{'=' * 60}\n"
            f"To: {to_email}\n"
            f"Reply-To: {reply_to or '-'}\n"
            f"Subject: {subject}\n"
            f"{'-' * 60}\n"
            f"{text_body}\n"
            f"{'=' * 60}\n"
        )
        return True


def get_email_provider(settings: Settings) -> EmailProvider:
    """Get the configured email provider."""
    provider = settings.EMAIL_PROVIDER.lower()

    if provider == "smtp":
        return SMTPProvider(settings)
    if provider == "console":
        return ConsoleProvider()

    logger.warning(f"Unknown email provider '{provider}', falling back to console")
    return ConsoleProvider()
