"""
Gmail Inbox Contract Index
==========================

AUTHORITY: This module is the SINGLE entrypoint for all inbox contracts.
Import from here, not from individual contract files.
"""

from gmail_inbox.contracts.mailbox_contract import (
    # Test Case Index
    TEST_CASES,
    AddressFormatError,
    AuthFailedError,
    BiosecretDeniedError,
    BiosecretNotFoundError,
    ConnectionFailedError,
    # Domain Types
    EmailHeader,
    # Error Types
    GmailInboxError,
    HeaderPagingContract,
    # Capabilities (Protocols)
    IMAPCapability,
    MailboxInfo,
    MailSenderCapability,
    MessageBodyContract,
    MessageDecodeError,
    MissingFieldError,
    NotConfiguredError,
    Offset,
    SendContract,
    # Contracts (Protocols)
    SessionLifecycleContract,
    TransportError,
    Uid,
    UidNotFoundError,
)

__all__ = [
    # Domain Types
    "Uid",
    "Offset",
    "EmailHeader",
    "MailboxInfo",
    # Error Types
    "GmailInboxError",
    "BiosecretDeniedError",
    "BiosecretNotFoundError",
    "NotConfiguredError",
    "ConnectionFailedError",
    "AuthFailedError",
    "MissingFieldError",
    "UidNotFoundError",
    "MessageDecodeError",
    "AddressFormatError",
    "TransportError",
    # Capabilities
    "IMAPCapability",
    "MailSenderCapability",
    # Contracts
    "SessionLifecycleContract",
    "HeaderPagingContract",
    "MessageBodyContract",
    "SendContract",
    # Test Traceability
    "TEST_CASES",
    # Functions
    "audit_contract_coverage",
]


def audit_contract_coverage() -> dict:
    """
    Audit which contract clauses have test coverage.

    Returns dict with:
    - covered: clauses with at least one test
    - uncovered: clauses with no tests
    - test_count: total tests defined
    """
    covered_clauses = set()
    for test_info in TEST_CASES.values():
        for clause in test_info.get("enforces", []):
            covered_clauses.add(clause)

    all_clauses = set()

    # Lifecycle clauses
    all_clauses.update(
        [
            "POST-SESSION-01",
            "POST-SESSION-02",
            "POST-SESSION-03",
            "POST-SESSION-04",
            "POST-SESSION-05",
            "INV-SESSION-01",
            "INV-SESSION-02",
            "INV-SESSION-03",
            "ERRORS: CONNECTION_FAILED",
            "ERRORS: AUTH_FAILED",
        ]
    )

    # Paging clauses
    all_clauses.update(
        [
            "PRE-PAGE-01",
            "POST-PAGE-01",
            "POST-PAGE-02",
            "POST-PAGE-03",
            "POST-PAGE-04",
            "POST-PAGE-05",
            "INV-PAGE-01",
            "INV-PAGE-02",
            "INV-PAGE-03",
            "INV-PAGE-04",
            "ERRORS: MISSING_FIELD",
        ]
    )

    # Body clauses
    all_clauses.update(
        [
            "POST-BODY-01",
            "POST-BODY-02",
            "ERRORS: UID_NOT_FOUND",
            "ERRORS: DECODE_ERROR",
        ]
    )

    # Send clauses
    all_clauses.update(
        [
            "POST-SEND-01",
            "POST-SEND-02",
            "INV-SEND-01",
            "INV-SEND-02",
            "ERRORS: ADDRESS_ERROR",
            "ERRORS: SMTP_ERROR",
        ]
    )

    uncovered = all_clauses - covered_clauses

    return {
        "covered": sorted(covered_clauses),
        "uncovered": sorted(uncovered),
        "test_count": len(TEST_CASES),
        "coverage_pct": round(len(covered_clauses & all_clauses) / len(all_clauses) * 100, 1),
    }
