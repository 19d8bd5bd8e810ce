"""
Gmail Inbox
===========

Paged IMAP header listing, body retrieval and SMTP sending for a Gmail inbox.
"""

__version__ = "0.1.0"

from gmail_inbox.credentials import Credentials, retrieve_credentials
from gmail_inbox.inbox import GmailInbox
from gmail_inbox.paging import PAGE_SIZE, generate_sequence
from gmail_inbox.server import InboxMCPServer, create_server, main

__all__ = [
    "GmailInbox",
    "Credentials",
    "retrieve_credentials",
    "PAGE_SIZE",
    "generate_sequence",
    "InboxMCPServer",
    "create_server",
    "main",
]
