"""
Gmail Inbox
===========

Paged header listing, body retrieval and sending over one lazily
established IMAP session.

The session is opened by the first operation that needs it and reused by
every later call. A failed connect leaves the inbox disconnected, so the next
call tries again. There is no internal locking: callers must not share an
instance between threads without their own mutual exclusion.
"""

from __future__ import annotations

import logging

from gmail_inbox.contracts import (
    ConnectionFailedError,
    EmailHeader,
    IMAPCapability,
    MailboxInfo,
    MailSenderCapability,
    MessageDecodeError,
    MissingFieldError,
    Offset,
    Uid,
    UidNotFoundError,
)
from gmail_inbox.credentials import Credentials
from gmail_inbox.headers import HEADER_QUERY, create_email_header
from gmail_inbox.imap_client import EmailIMAPClient
from gmail_inbox.paging import PAGE_SIZE, generate_sequence
from gmail_inbox.smtp_client import SMTPMailer, build_message, validate_address

BODY_QUERY = ["BODY[TEXT]"]

logger = logging.getLogger(__name__)


class GmailInbox:
    """
    Gmail inbox over IMAP (reading) and SMTP (sending).

    Construction performs no I/O. `imap` and `mailer` default to the real
    Gmail transports and may be replaced by any object satisfying
    IMAPCapability / MailSenderCapability.
    """

    def __init__(
        self,
        username: str,
        password: str,
        *,
        imap: IMAPCapability | None = None,
        mailer: MailSenderCapability | None = None,
    ) -> None:
        self._credentials = Credentials(username=username, password=password)
        self._imap = imap if imap is not None else EmailIMAPClient()
        self._mailer = mailer if mailer is not None else SMTPMailer()
        self._mailbox: MailboxInfo | None = None

    @classmethod
    def from_credentials(cls, credentials: Credentials, **kwargs) -> GmailInbox:
        return cls(credentials.username, credentials.password, **kwargs)

    def __enter__(self) -> GmailInbox:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def connected(self) -> bool:
        return self._mailbox is not None

    def close(self) -> None:
        """Log out. The next IMAP operation reconnects lazily."""
        if self._mailbox is not None:
            self._mailbox = None
            self._imap.disconnect()
            logger.info("Inbox session closed")

    def get_last_emails(self) -> tuple[list[EmailHeader], Offset]:
        """Newest page of headers and the offset for get_more_emails()."""
        mailbox = self._ensure_session()
        # +1: the upper bound is exclusive and the newest message must be included
        return self._get_page(mailbox.exists + 1)

    def get_more_emails(self, offset: Offset) -> tuple[list[EmailHeader], Offset]:
        """
        Page of headers just older than `offset`.

        The offset is not checked against the current mailbox; messages
        arriving or expunged between pages shift sequence numbers.
        """
        self._ensure_session()
        return self._get_page(offset)

    def get_email_info(self, uid: Uid) -> str:
        """BODY[TEXT] of the message with `uid`, decoded as UTF-8."""
        self._ensure_session()
        fetched = self._fetch(self._imap.fetch_uid, uid, BODY_QUERY)

        # Unsolicited FETCH updates for other messages may share the response
        data = fetched.get(uid)
        if data is None:
            raise UidNotFoundError(uid)

        text = data.get(b"BODY[TEXT]")
        if text is None:
            raise MissingFieldError("TEXT")

        try:
            return text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MessageDecodeError(f"Message body is not valid UTF-8 (uid {uid})") from e

    def send_email(self, to: str, subject: str, body: str) -> None:
        """Send a plain-text message from the account address to `to`."""
        recipient = validate_address(to)
        sender = validate_address(self._credentials.username)
        message = build_message(sender, recipient, subject, body)

        self._mailer.send(self._credentials.username, self._credentials.password, message)
        logger.info("Message sent")

    def _ensure_session(self) -> MailboxInfo:
        if self._mailbox is None:
            try:
                self._mailbox = self._imap.connect(
                    self._credentials.username, self._credentials.password
                )
            except Exception as e:
                logger.warning("IMAP login failed: %s", e.__class__.__name__)
                raise
        return self._mailbox

    def _fetch(self, fetch, *args):
        """Run a FETCH; a dropped connection resets the session to Disconnected."""
        try:
            return fetch(*args)
        except ConnectionFailedError as e:
            logger.warning("IMAP connection lost: %s", e)
            self.close()
            raise

    def _get_page(self, last: int) -> tuple[list[EmailHeader], Offset]:
        sequence, offset = generate_sequence(last, PAGE_SIZE)
        fetched = self._fetch(self._imap.fetch_sequence, sequence, HEADER_QUERY)

        headers = [
            create_email_header(data)
            for _, data in sorted(fetched.items(), key=lambda item: item[0], reverse=True)
        ]
        logger.info("Fetched %d headers below sequence %d", len(headers), last)
        return headers, offset
