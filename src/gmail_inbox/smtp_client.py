"""
SMTP Relay
==========

Outbound submission through smtp.gmail.com. Each send opens its own
implicit-TLS connection; nothing is shared with the IMAP session.
"""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from email_validator import EmailNotValidError, validate_email

from gmail_inbox.contracts import AddressFormatError, TransportError
from gmail_inbox.credentials import SMTP_HOST, SMTP_PORT

logger = logging.getLogger(__name__)


def validate_address(address: str) -> str:
    """Return the normalized address, or raise AddressFormatError."""
    try:
        return validate_email(address, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise AddressFormatError(f"Invalid address format: {address!r}: {e}") from e


def build_message(sender: str, to: str, subject: str, body: str) -> EmailMessage:
    """Plain-text UTF-8 message. Addresses must already be validated."""
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = to
    # Header values may not carry line breaks; fold them into spaces
    msg["Subject"] = " ".join(subject.splitlines())
    msg.set_content(body, charset="utf-8")
    assert msg.get_content_type() == "text/plain"
    return msg


class SMTPMailer:
    """Relay transport authenticated with the account credentials."""

    def __init__(self, host: str = SMTP_HOST, port: int = SMTP_PORT) -> None:
        self._host = host
        self._port = port

    def send(self, username: str, password: str, message: EmailMessage) -> None:
        try:
            with smtplib.SMTP_SSL(self._host, self._port) as smtp:
                smtp.login(username, password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("SMTP relay failed: %s", e.__class__.__name__)
            raise TransportError(f"Failed to send email: {e}") from e
