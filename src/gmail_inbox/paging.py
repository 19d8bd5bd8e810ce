"""
Sequence Paging
===============

Newest-first paging over the mailbox sequence space.

Sequence numbers are 1-based and inclusive; the `last` bound passed here is
exclusive. The first page is requested with `last = exists + 1` so the newest
message is included, and every following page passes the previous offset
back unchanged.
"""

from __future__ import annotations

from gmail_inbox.contracts import Offset

PAGE_SIZE = 20


def sequence_numbers(last: int, page_size: int = PAGE_SIZE) -> list[int]:
    """Sequence numbers in `[max(1, last - page_size), last)`, ascending."""
    start = max(1, last - page_size)
    return list(range(start, last))


def generate_sequence(last: int, page_size: int = PAGE_SIZE) -> tuple[str, Offset]:
    """
    Build the FETCH sequence set for the page ending just below `last`.

    Returns the comma-joined sequence numbers and the new offset. The start
    never drops below 1, so a mailbox smaller than one page yields a short
    page, and `last <= 1` yields an empty set.
    """
    numbers = sequence_numbers(last, page_size)
    return ",".join(str(n) for n in numbers), max(1, last - page_size)


def has_more(offset: Offset) -> bool:
    """True while older messages remain below `offset`."""
    return offset > 1
