"""
IMAP Client Wrapper
===================

Thin capability over `imapclient.IMAPClient` for the Gmail inbox.

- connect() is atomic: TLS, login and INBOX selection succeed together or
  the half-open client is discarded
- Sequence-number FETCH for paging, UID FETCH for single messages
- INTERNALDATE is returned with the server's own UTC offset
"""

from __future__ import annotations

import logging
from typing import Any

from imapclient import IMAPClient
from imapclient.exceptions import IMAPClientAbortError

from gmail_inbox.contracts import (
    AuthFailedError,
    ConnectionFailedError,
    MailboxInfo,
    Uid,
)
from gmail_inbox.credentials import IMAP_HOST, IMAP_PORT, MAILBOX

logger = logging.getLogger(__name__)


class EmailIMAPClient:
    """Single IMAP connection with INBOX selected."""

    def __init__(self, host: str = IMAP_HOST, port: int = IMAP_PORT) -> None:
        self._host = host
        self._port = port
        self._client: IMAPClient | None = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self, username: str, password: str) -> MailboxInfo:
        """
        Connect over TLS, authenticate and select INBOX.

        POST: connected is True and the returned MailboxInfo reflects INBOX
        ERRORS:
        - ConnectionFailedError: socket or TLS failure
        - AuthFailedError: login rejected or INBOX not selectable
        """
        try:
            client = IMAPClient(self._host, port=self._port, ssl=True, use_uid=False)
        except Exception as e:
            raise ConnectionFailedError(f"Failed to connect: {e}") from e

        # Keep the server's UTC offset on INTERNALDATE
        client.normalise_times = False

        try:
            client.login(username, password)
            select_info = client.select_folder(MAILBOX)
        except Exception as e:
            self._logout(client)
            raise AuthFailedError(f"Authentication failed: {e}") from e

        self._client = client
        logger.info("Connected to %s, %s selected", self._host, MAILBOX)
        return MailboxInfo(
            exists=select_info.get(b"EXISTS", 0),
            uidvalidity=select_info.get(b"UIDVALIDITY", 0),
            uidnext=select_info.get(b"UIDNEXT", 0),
        )

    def disconnect(self) -> None:
        """Log out and forget the connection."""
        if self._client:
            self._logout(self._client)
            self._client = None

    def fetch_sequence(self, sequence: str, query: list[str]) -> dict[int, dict[bytes, Any]]:
        """FETCH by sequence numbers; keys of the result are sequence numbers."""
        client = self._require_connection()
        if not sequence:
            return {}
        try:
            return client.fetch(sequence, query)
        except (IMAPClientAbortError, OSError) as e:
            raise ConnectionFailedError(f"Connection lost during FETCH: {e}") from e

    def fetch_uid(self, uid: Uid, query: list[str]) -> dict[int, dict[bytes, Any]]:
        """UID FETCH for a single message; empty if the UID does not exist."""
        client = self._require_connection()
        client.use_uid = True
        try:
            return client.fetch([uid], query)
        except (IMAPClientAbortError, OSError) as e:
            raise ConnectionFailedError(f"Connection lost during UID FETCH: {e}") from e
        finally:
            client.use_uid = False

    def _require_connection(self) -> IMAPClient:
        if self._client is None:
            raise RuntimeError("IMAP session used before connect()")
        return self._client

    @staticmethod
    def _logout(client: IMAPClient) -> None:
        try:
            client.logout()
        except Exception as e:
            logger.warning("IMAP logout failed: %s", e)
