"""
Gmail Inbox Contract
====================

Paged header access, single-body retrieval and plain-text sending for a
Gmail-style mailbox over IMAP/SMTP.

This contract defines the required behavior of all public interfaces.
Implementations perform ONLY the declared behaviors.

CLAUSE CONVENTIONS:
- PRE-*:  caller obligations
- POST-*: guaranteed results
- INV-*:  invariants that hold across calls
- ERRORS: typed failures surfaced to the caller
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


# =============================================================================
# DOMAIN TYPES
# =============================================================================

Uid = int
"""Stable, server-assigned message identifier (survives sequence churn)."""

Offset = int
"""Pagination cursor: lowest sequence number delivered so far."""


@dataclass(frozen=True)
class EmailHeader:
    """Normalized view of one message's envelope."""
    from_: str  # "Name <mailbox@host>" entries joined with ";"
    date: str  # INTERNALDATE, IMAP date-time form
    subject: str
    uid: Uid

    def to_dict(self) -> dict:
        return {
            "from": self.from_,
            "date": self.date,
            "subject": self.subject,
            "uid": self.uid,
        }


@dataclass(frozen=True)
class MailboxInfo:
    """Metadata of the selected mailbox, captured at select time."""
    exists: int
    uidvalidity: int = 0
    uidnext: int = 0


# =============================================================================
# ERROR TYPES
# =============================================================================

class GmailInboxError(Exception):
    """Base error for all inbox operations."""
    code: str = "UNEXPECTED_ERROR"


class BiosecretDeniedError(GmailInboxError):
    """
    User cancelled the biometric prompt while credentials were retrieved.

    RECOVERY: Fatal for startup. Re-run to retry.
    """
    code = "BIOSECRET_DENIED"


class BiosecretNotFoundError(GmailInboxError):
    """
    No credentials stored under the expected keychain key.

    RECOVERY: Store credentials via biosecret before retry.
    """
    code = "BIOSECRET_NOT_FOUND"


class NotConfiguredError(GmailInboxError):
    """
    A tool was called before the server was given an account.

    RECOVERY: Restart the server with a valid account id.
    """
    code = "NOT_CONFIGURED"


class ConnectionFailedError(GmailInboxError):
    """
    TLS handshake or socket connection to the IMAP server failed, or the
    connection dropped during a FETCH.

    RECOVERY: Session stays disconnected; next call retries.
    """
    code = "CONNECTION_FAILED"


class AuthFailedError(GmailInboxError):
    """
    Server rejected the credentials, or INBOX could not be selected.

    RECOVERY: Session stays disconnected; next call retries.
    """
    code = "AUTH_FAILED"


class MissingFieldError(GmailInboxError):
    """
    A required field is absent from a server response record.

    RECOVERY: Fatal to the call. The session is kept.
    """
    code = "MISSING_FIELD"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Field not present in server response: {field}")


class UidNotFoundError(GmailInboxError):
    """
    The requested UID does not exist in the inbox.

    RECOVERY: Refresh the header list; the message may have been deleted.
    """
    code = "UID_NOT_FOUND"

    def __init__(self, uid: Uid) -> None:
        self.uid = uid
        super().__init__(f"UID does not exist in the inbox: {uid}")


class MessageDecodeError(GmailInboxError):
    """
    Message body bytes are not valid UTF-8.

    RECOVERY: Fatal to the call.
    """
    code = "DECODE_ERROR"


class AddressFormatError(GmailInboxError):
    """
    Recipient or sender address is malformed. Raised before any network I/O.
    """
    code = "ADDRESS_ERROR"


class TransportError(GmailInboxError):
    """
    SMTP relay connection, authentication or submission failed. No retry.
    """
    code = "SMTP_ERROR"


# =============================================================================
# CAPABILITY CONTRACTS (injected collaborators)
# =============================================================================

@runtime_checkable
class IMAPCapability(Protocol):
    """
    Narrow IMAP surface consumed by the inbox.

    POST-CONNECT-01: connect() returns only after TLS, login and INBOX
                     selection all succeeded
    INV-CONNECT-01:  On failure no half-open connection is retained
    INV-CONNECT-02:  A connection lost during FETCH raises CONNECTION_FAILED

    ERRORS:
    - CONNECTION_FAILED: TLS/socket failure, or connection lost during FETCH
    - AUTH_FAILED: Login rejected or INBOX not selectable
    """

    def connect(self, username: str, password: str) -> MailboxInfo:
        """Open a TLS connection, log in and select INBOX."""
        ...

    def fetch_sequence(self, sequence: str, query: list[str]) -> dict[int, dict[bytes, Any]]:
        """Fetch `query` items for a comma-separated sequence-number set."""
        ...

    def fetch_uid(self, uid: Uid, query: list[str]) -> dict[int, dict[bytes, Any]]:
        """Fetch `query` items for one message addressed by UID."""
        ...

    def disconnect(self) -> None:
        """Log out and drop the connection."""
        ...


@runtime_checkable
class MailSenderCapability(Protocol):
    """
    Outbound relay used only for sending. Independent of the IMAP session.

    PRE-SEND-01: Addresses already validated by the caller

    ERRORS:
    - SMTP_ERROR: Relay failure
    """

    def send(self, username: str, password: str, message: Any) -> None:
        """Authenticate against the relay and submit one message."""
        ...


# =============================================================================
# INBOX CONTRACTS
# =============================================================================

@runtime_checkable
class SessionLifecycleContract(Protocol):
    """
    Lazy, single-session connection lifecycle.

    STATES: Disconnected (initial) -> Connected

    POST-SESSION-01: Construction performs no network I/O
    POST-SESSION-02: First IMAP operation connects, logs in and selects INBOX
    POST-SESSION-03: Later operations reuse the same session
    POST-SESSION-04: close() logs out and returns to Disconnected
    POST-SESSION-05: A connection lost mid-session returns to Disconnected;
                     the next operation reconnects lazily

    INV-SESSION-01 (Atomic Connect): Authenticated-but-unselected is not a
                    representable state; any failure leaves Disconnected
    INV-SESSION-02 (Retry on Next Call): A failed connect is retried lazily
    INV-SESSION-03 (Single Writer): No internal locking; callers serialize

    ERRORS:
    - CONNECTION_FAILED: TLS/socket failure, or connection lost mid-session
    - AUTH_FAILED: Credentials rejected or INBOX not selectable
    """

    @property
    def connected(self) -> bool:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class HeaderPagingContract(Protocol):
    """
    Operations: get_last_emails / get_more_emails

    Page through the inbox newest-first, PAGE_SIZE headers at a time.

    PRE-PAGE-01: offset passed to get_more_emails came from a previous page

    POST-PAGE-01: First page covers sequence numbers
                  max(1, exists + 1 - PAGE_SIZE) .. exists
    POST-PAGE-02: Next page covers max(1, offset - PAGE_SIZE) .. offset - 1
    POST-PAGE-03: Headers ordered newest-first (descending sequence number)
    POST-PAGE-04: Returned offset is the lowest sequence number in the page
    POST-PAGE-05: offset <= 1 means no more pages

    INV-PAGE-01 (Pure Paging Math): Range generation has no hidden state
    INV-PAGE-02 (Non-overlapping): Successive pages never overlap while the
                 mailbox is unchanged
    INV-PAGE-03 (No Partial Headers): A record missing UID, ENVELOPE,
                 INTERNALDATE or FROM fails the whole call
    INV-PAGE-04 (Lenient Text): Undecodable subject becomes ""; undecodable
                 address entries are dropped from the From join

    KNOWN LIMITATION: the offset is not validated against the current
    mailbox; arrivals or deletions between pages can skip or repeat messages.

    ERRORS:
    - CONNECTION_FAILED / AUTH_FAILED
    - MISSING_FIELD
    """

    def get_last_emails(self) -> tuple[list[EmailHeader], Offset]:
        ...

    def get_more_emails(self, offset: Offset) -> tuple[list[EmailHeader], Offset]:
        ...


@runtime_checkable
class MessageBodyContract(Protocol):
    """
    Operation: get_email_info

    POST-BODY-01: Returns BODY[TEXT] of the message decoded as UTF-8
    POST-BODY-02: No MIME parsing is performed

    ERRORS:
    - CONNECTION_FAILED / AUTH_FAILED
    - UID_NOT_FOUND: No message with that UID
    - MISSING_FIELD: Response has no BODY[TEXT]
    - DECODE_ERROR: Body bytes are not valid UTF-8
    """

    def get_email_info(self, uid: Uid) -> str:
        ...


@runtime_checkable
class SendContract(Protocol):
    """
    Operation: send_email

    POST-SEND-01: One text/plain UTF-8 message submitted, From = username
    POST-SEND-02: Independent SMTP connection per call

    INV-SEND-01 (Validate First): Address errors raised before network I/O
    INV-SEND-02 (No IMAP): Sending neither requires nor opens the IMAP session

    ERRORS:
    - ADDRESS_ERROR: Recipient or sender malformed
    - SMTP_ERROR: Relay failure
    """

    def send_email(self, to: str, subject: str, body: str) -> None:
        ...


# =============================================================================
# TEST CASE INDEX (Traceability)
# =============================================================================

TEST_CASES = {
    # Paging math
    "test_first_page_small_mailbox": {
        "contract": "HeaderPagingContract",
        "enforces": ["POST-PAGE-01", "POST-PAGE-04"],
    },
    "test_pages_walk_to_end": {
        "contract": "HeaderPagingContract",
        "enforces": ["POST-PAGE-02", "POST-PAGE-05", "INV-PAGE-02"],
    },
    "test_generate_sequence_pure": {
        "contract": "HeaderPagingContract",
        "enforces": ["INV-PAGE-01"],
    },
    # Header normalization
    "test_header_missing_field_rejected": {
        "contract": "HeaderPagingContract",
        "enforces": ["INV-PAGE-03", "ERRORS: MISSING_FIELD"],
    },
    "test_invalid_address_dropped": {
        "contract": "HeaderPagingContract",
        "enforces": ["INV-PAGE-04"],
    },
    "test_first_page_newest_first": {
        "contract": "HeaderPagingContract",
        "enforces": ["POST-PAGE-03"],
    },
    # Lifecycle
    "test_construction_is_lazy": {
        "contract": "SessionLifecycleContract",
        "enforces": ["POST-SESSION-01"],
    },
    "test_session_reused": {
        "contract": "SessionLifecycleContract",
        "enforces": ["POST-SESSION-02", "POST-SESSION-03"],
    },
    "test_failed_login_retried": {
        "contract": "SessionLifecycleContract",
        "enforces": ["INV-SESSION-01", "INV-SESSION-02", "ERRORS: AUTH_FAILED"],
    },
    "test_connection_failed": {
        "contract": "SessionLifecycleContract",
        "enforces": ["ERRORS: CONNECTION_FAILED"],
    },
    "test_lost_connection_reconnects": {
        "contract": "SessionLifecycleContract",
        "enforces": ["POST-SESSION-05", "ERRORS: CONNECTION_FAILED"],
    },
    "test_lost_connection_during_body_fetch": {
        "contract": "SessionLifecycleContract",
        "enforces": ["POST-SESSION-05"],
    },
    "test_close_disconnects": {
        "contract": "SessionLifecycleContract",
        "enforces": ["POST-SESSION-04"],
    },
    # Body
    "test_get_body": {
        "contract": "MessageBodyContract",
        "enforces": ["POST-BODY-01", "POST-BODY-02"],
    },
    "test_get_body_uid_not_found": {
        "contract": "MessageBodyContract",
        "enforces": ["ERRORS: UID_NOT_FOUND"],
    },
    "test_get_body_ignores_other_records": {
        "contract": "MessageBodyContract",
        "enforces": ["POST-BODY-01"],
    },
    "test_get_body_only_other_records": {
        "contract": "MessageBodyContract",
        "enforces": ["ERRORS: UID_NOT_FOUND"],
    },
    "test_get_body_not_utf8": {
        "contract": "MessageBodyContract",
        "enforces": ["ERRORS: DECODE_ERROR"],
    },
    # Send
    "test_send_basic": {
        "contract": "SendContract",
        "enforces": ["POST-SEND-01", "POST-SEND-02", "INV-SEND-02"],
    },
    "test_send_empty_recipient": {
        "contract": "SendContract",
        "enforces": ["INV-SEND-01", "ERRORS: ADDRESS_ERROR"],
    },
    "test_send_relay_failure": {
        "contract": "SendContract",
        "enforces": ["ERRORS: SMTP_ERROR"],
    },
    "test_send_subject_line_breaks_folded": {
        "contract": "SendContract",
        "enforces": ["POST-SEND-01"],
    },
}
