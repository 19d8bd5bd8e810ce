"""
Credentials Management
======================

Gmail account credentials and the fixed server endpoints.

Credentials are retrieved through the biosecret CLI and held in memory only.
The password never appears in repr() or logs.
"""

import json
import subprocess
from dataclasses import dataclass, field

from gmail_inbox.contracts import (
    BiosecretDeniedError,
    BiosecretNotFoundError,
)

IMAP_HOST = "imap.gmail.com"
IMAP_PORT = 993
SMTP_HOST = "smtp.gmail.com"
SMTP_PORT = 465  # implicit TLS
MAILBOX = "INBOX"


@dataclass(frozen=True)
class Credentials:
    """Gmail username and app password, held in memory only."""

    username: str
    password: str = field(repr=False)


def retrieve_credentials(account_id: str) -> Credentials:
    """
    Retrieve credentials via biosecret CLI.

    PRE: biosecret CLI is available in PATH
    PRE: User has stored credentials under key "gmail-inbox/{account_id}"

    POST: Returns Credentials on success

    ERRORS:
    - BiosecretDeniedError: User cancelled biometric prompt
    - BiosecretNotFoundError: No credentials under expected key
    """
    try:
        result = subprocess.run(
            ["biosecret", "get", f"gmail-inbox/{account_id}"],
            capture_output=True,
            text=True,
            timeout=30,
        )

        if result.returncode != 0:
            stderr = result.stderr.lower() if result.stderr else ""
            if "cancel" in stderr or "denied" in stderr:
                raise BiosecretDeniedError("User cancelled biometric authentication")
            raise BiosecretNotFoundError(f"No credentials found for {account_id}")

        data = json.loads(result.stdout)
        return Credentials(username=data["username"], password=data["password"])
    except subprocess.TimeoutExpired as e:
        raise BiosecretDeniedError("Biometric authentication timed out") from e
    except (json.JSONDecodeError, KeyError) as e:
        raise BiosecretNotFoundError("Invalid credential format") from e
    except FileNotFoundError as e:
        raise BiosecretNotFoundError("biosecret CLI not found in PATH") from e
