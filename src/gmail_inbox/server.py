"""
Gmail Inbox MCP Server
======================

MCP server exposing the inbox operations as tools:

- inbox_first_page / inbox_next_page: newest-first header paging
- inbox_get_body: BODY[TEXT] of one message by UID
- inbox_send: plain-text message from the account address

Message bodies and credentials are never logged.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from gmail_inbox.contracts import EmailHeader, GmailInboxError, NotConfiguredError, Offset
from gmail_inbox.credentials import Credentials, retrieve_credentials
from gmail_inbox.inbox import GmailInbox
from gmail_inbox.paging import has_more

logger = logging.getLogger("gmail-inbox")


class InboxMCPServer:
    """MCP front end for a single GmailInbox."""

    def __init__(self) -> None:
        self._inbox: GmailInbox | None = None
        self._server = Server("gmail-inbox")
        self._setup_tools()

    def _setup_tools(self) -> None:
        """Register MCP tools."""

        @self._server.list_tools()
        async def list_tools() -> list[Tool]:
            return [
                Tool(
                    name="inbox_first_page",
                    description="List the newest page of inbox headers (newest first)",
                    inputSchema={
                        "type": "object",
                        "properties": {},
                    },
                ),
                Tool(
                    name="inbox_next_page",
                    description="List the page of headers older than a previous page's offset",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "offset": {
                                "type": "integer",
                                "description": "Offset returned by the previous page",
                                "minimum": 0,
                            },
                        },
                        "required": ["offset"],
                    },
                ),
                Tool(
                    name="inbox_get_body",
                    description="Get the text body of one message by UID",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "uid": {
                                "type": "integer",
                                "description": "Message UID from a header listing",
                                "minimum": 1,
                            },
                        },
                        "required": ["uid"],
                    },
                ),
                Tool(
                    name="inbox_send",
                    description="Send a plain-text email from the account address",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "to": {"type": "string", "description": "Recipient address"},
                            "subject": {"type": "string"},
                            "body": {"type": "string"},
                        },
                        "required": ["to", "subject", "body"],
                    },
                ),
            ]

        @self._server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            try:
                if name == "inbox_first_page":
                    result = self.inbox_first_page()
                elif name == "inbox_next_page":
                    result = self.inbox_next_page(**arguments)
                elif name == "inbox_get_body":
                    result = self.inbox_get_body(**arguments)
                elif name == "inbox_send":
                    result = self.inbox_send(**arguments)
                else:
                    return [TextContent(type="text", text=f"Unknown tool: {name}")]

                return [TextContent(type="text", text=self._serialize_result(result))]

            except GmailInboxError as e:
                return [TextContent(type="text", text=f"Error: {e.__class__.__name__}: {e}")]

    def configure(self, credentials: Credentials, **kwargs: Any) -> None:
        """Attach the account. No connection is made until the first tool call."""
        if self._inbox is not None:
            self._inbox.close()
        self._inbox = GmailInbox.from_credentials(credentials, **kwargs)
        logger.info("Inbox configured")  # No credentials logged

    def close(self) -> None:
        if self._inbox:
            self._inbox.close()
            self._inbox = None

    def _require_inbox(self) -> GmailInbox:
        if self._inbox is None:
            raise NotConfiguredError("No account configured")
        return self._inbox

    def inbox_first_page(self) -> dict:
        inbox = self._require_inbox()
        logger.info("Listing first page")
        return self._page_result(*inbox.get_last_emails())

    def inbox_next_page(self, *, offset: Offset) -> dict:
        inbox = self._require_inbox()
        logger.info(f"Listing page below offset={offset}")
        return self._page_result(*inbox.get_more_emails(offset))

    def inbox_get_body(self, *, uid: int) -> dict:
        inbox = self._require_inbox()
        # Log the UID only, NEVER the body
        logger.info(f"Fetching body of uid={uid}")
        return {"uid": uid, "body": inbox.get_email_info(uid)}

    def inbox_send(self, *, to: str, subject: str, body: str) -> dict:
        inbox = self._require_inbox()
        logger.info("Sending message")
        inbox.send_email(to, subject, body)
        return {"sent": True, "to": to}

    @staticmethod
    def _page_result(headers: list[EmailHeader], offset: Offset) -> dict:
        return {
            "headers": [h.to_dict() for h in headers],
            "offset": offset,
            "has_more": has_more(offset),
        }

    def _serialize_result(self, result: Any) -> str:
        """Serialize result to JSON string."""
        return json.dumps(result, indent=2)

    async def run(self) -> None:
        """Run the MCP server."""
        async with stdio_server() as (read_stream, write_stream):
            await self._server.run(
                read_stream, write_stream, self._server.create_initialization_options()
            )


def create_server() -> InboxMCPServer:
    """Create a new server instance."""
    return InboxMCPServer()


def main(argv: list[str] | None = None) -> None:
    """Retrieve credentials for an account and serve its inbox over stdio."""
    parser = argparse.ArgumentParser(prog="gmail-inbox")
    parser.add_argument("account_id", help="biosecret account id (gmail-inbox/<account_id>)")
    args = parser.parse_args(argv)

    # Logging NEVER includes message content or credentials
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    server = create_server()
    server.configure(retrieve_credentials(args.account_id))
    try:
        asyncio.run(server.run())
    finally:
        server.close()
