"""
Shared fixtures: fake IMAP server state built from real imapclient types.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from imapclient.response_types import Address, Envelope

from gmail_inbox.credentials import Credentials

UID_BASE = 1000
BASE_DATE = datetime(2026, 1, 13, 10, 0, 0, tzinfo=timezone.utc)


def make_envelope(
    subject=b"Test Subject",
    from_=(Address(b"Sender", None, b"sender", b"example.com"),),
):
    return Envelope(
        date=None,
        subject=subject,
        from_=from_,
        sender=from_,
        reply_to=from_,
        to=(Address(b"Me", None, b"me", b"gmail.com"),),
        cc=None,
        bcc=None,
        in_reply_to=None,
        message_id=b"<abc123@example.com>",
    )


def make_record(seq: int, **envelope_kwargs) -> dict:
    """FETCH record for sequence number `seq` (UID = UID_BASE + seq)."""
    return {
        b"SEQ": seq,
        b"UID": UID_BASE + seq,
        b"INTERNALDATE": BASE_DATE + timedelta(minutes=seq),
        b"ENVELOPE": make_envelope(subject=f"Message {seq}".encode(), **envelope_kwargs),
    }


class FakeMailbox:
    """Server-side state behind the patched IMAPClient."""

    def __init__(self, exists: int = 45) -> None:
        self.exists = exists
        self.records = {seq: make_record(seq) for seq in range(1, exists + 1)}
        self.bodies: dict[int, dict] = {}

    def fetch(self, messages, query):
        if isinstance(messages, str):
            seqs = [int(n) for n in messages.split(",") if n]
            return {seq: self.records[seq] for seq in seqs if seq in self.records}
        uid = messages[0]
        return {uid: self.bodies[uid]} if uid in self.bodies else {}


@pytest.fixture
def mock_credentials():
    """Valid test credentials."""
    return Credentials(username="me@gmail.com", password="app-password-123")


@pytest.fixture
def fake_mailbox():
    return FakeMailbox(exists=45)


@pytest.fixture
def mock_imap_client(fake_mailbox):
    """Patched IMAPClient class; `.return_value` is the connection."""
    with patch("gmail_inbox.imap_client.IMAPClient") as mock:
        client = MagicMock()
        mock.return_value = client
        client.use_uid = False
        client.select_folder.side_effect = lambda folder: {
            b"EXISTS": fake_mailbox.exists,
            b"UIDVALIDITY": 12345,
            b"UIDNEXT": UID_BASE + fake_mailbox.exists + 1,
        }
        client.fetch.side_effect = fake_mailbox.fetch
        yield mock


@pytest.fixture
def mock_smtp():
    """Patched SMTP_SSL class; the `with` target is `mock.smtp`."""
    with patch("gmail_inbox.smtp_client.smtplib.SMTP_SSL") as mock:
        mock.smtp = mock.return_value.__enter__.return_value
        yield mock
