"""
Header Normalization
====================

Turns one `imapclient` FETCH record (ENVELOPE, UID, INTERNALDATE) into an
EmailHeader.

Required: UID, ENVELOPE, INTERNALDATE and the envelope's From list. Text is
lenient: an undecodable subject becomes "" and an undecodable address is
left out of the From join.
"""

from __future__ import annotations

from datetime import datetime
from email.errors import HeaderParseError
from email.header import decode_header
from typing import Any

from imapclient.datetime_util import datetime_to_INTERNALDATE
from imapclient.response_types import Address

from gmail_inbox.contracts import EmailHeader, MissingFieldError

HEADER_QUERY = ["ENVELOPE", "UID", "INTERNALDATE"]


def create_email_header(data: dict[bytes, Any]) -> EmailHeader:
    """Build an EmailHeader from a single FETCH response record."""
    internal_date = _require(data, b"INTERNALDATE", "INTERNALDATE")
    envelope = _require(data, b"ENVELOPE", "ENVELOPE")
    uid = _require(data, b"UID", "UID")

    if envelope.from_ is None:
        raise MissingFieldError("FROM")

    subject = ""
    if envelope.subject is not None:
        text = parse(envelope.subject)
        if text is not None:
            subject = _decode_words(text)

    return EmailHeader(
        from_=";".join(filter(None, (parse_address(a) for a in envelope.from_))),
        date=format_internal_date(internal_date),
        subject=subject,
        uid=int(uid),
    )


def parse_address(address: Address) -> str | None:
    """Render an envelope address as "Name <mailbox@host>", or None if undecodable."""
    name = parse(address.name or b"")
    mailbox = parse(address.mailbox or b"")
    host = parse(address.host or b"")
    if name is None or mailbox is None or host is None:
        return None

    if host:
        mailbox = f"{mailbox}@{host}"
    return f"{_decode_words(name)} <{mailbox}>"


def parse(buf: bytes | str) -> str | None:
    """Strict UTF-8 decode; None on invalid bytes."""
    if isinstance(buf, str):
        return buf
    try:
        return buf.decode("utf-8")
    except UnicodeDecodeError:
        return None


def format_internal_date(value: datetime | bytes | str) -> str:
    """INTERNALDATE in IMAP date-time form, e.g. "13-Jan-2026 10:00:00 +0000"."""
    if isinstance(value, datetime):
        return datetime_to_INTERNALDATE(value)
    if isinstance(value, bytes):
        return value.decode("ascii", errors="replace")
    return value


def _require(data: dict[bytes, Any], key: bytes, field: str) -> Any:
    value = data.get(key)
    if value is None:
        raise MissingFieldError(field)
    return value


def _decode_words(text: str) -> str:
    """Decode RFC 2047 encoded-words; text without them is returned as-is."""
    if "=?" not in text:
        return text
    try:
        parts = decode_header(text)
    except (HeaderParseError, ValueError):
        return text

    decoded = []
    for part, charset in parts:
        if isinstance(part, bytes):
            try:
                decoded.append(part.decode(charset or "utf-8", errors="replace"))
            except LookupError:
                decoded.append(part.decode("utf-8", errors="replace"))
        else:
            decoded.append(part)
    return "".join(decoded)
