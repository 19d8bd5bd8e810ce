"""
Sequence Paging Tests
=====================

Pure paging math; no IMAP involved.
"""

import pytest

from gmail_inbox.paging import PAGE_SIZE, generate_sequence, has_more, sequence_numbers


def parse_range(sequence: str) -> list[int]:
    return [int(n) for n in sequence.split(",") if n]


class TestGenerateSequence:
    """Contract: HeaderPagingContract (range generation)."""

    def test_page_size_is_twenty(self):
        assert PAGE_SIZE == 20

    def test_first_page_small_mailbox(self):
        """
        Contract: HeaderPagingContract
        Enforces: POST-PAGE-01, POST-PAGE-04
        """
        sequence, offset = generate_sequence(5 + 1, PAGE_SIZE)

        assert sequence == "1,2,3,4,5"
        assert offset == 1

    @pytest.mark.parametrize("total", [0, 1, 5, 19, 20, 21, 45, 100, 1234])
    def test_first_page_covers_newest(self, total):
        """
        Contract: HeaderPagingContract
        Enforces: POST-PAGE-01, POST-PAGE-04
        """
        sequence, offset = generate_sequence(total + 1, PAGE_SIZE)

        start = max(1, total + 1 - PAGE_SIZE)
        assert parse_range(sequence) == list(range(start, total + 1))
        assert offset == start

    def test_pages_walk_to_end(self):
        """
        Contract: HeaderPagingContract
        Enforces: POST-PAGE-02, POST-PAGE-05, INV-PAGE-02
        """
        sequence, offset = generate_sequence(46, PAGE_SIZE)
        assert parse_range(sequence) == list(range(26, 46))
        assert offset == 26

        sequence, offset = generate_sequence(offset, PAGE_SIZE)
        assert parse_range(sequence) == list(range(6, 26))
        assert offset == 6

        sequence, offset = generate_sequence(offset, PAGE_SIZE)
        assert sequence == "1,2,3,4,5"
        assert offset == 1
        assert not has_more(offset)

    @pytest.mark.parametrize("last", range(0, 60))
    def test_start_never_below_one(self, last):
        sequence, offset = generate_sequence(last, PAGE_SIZE)

        assert offset >= 1
        assert all(n >= 1 for n in parse_range(sequence))

    @pytest.mark.parametrize("last", [0, 1])
    def test_exhausted_offset_yields_empty_range(self, last):
        assert generate_sequence(last, PAGE_SIZE) == ("", 1)

    def test_generate_sequence_pure(self):
        """
        Contract: HeaderPagingContract
        Enforces: INV-PAGE-01
        """
        assert generate_sequence(46, PAGE_SIZE) == generate_sequence(46, PAGE_SIZE)
        assert generate_sequence(7, 3) == ("4,5,6", 4)
        assert generate_sequence(7, 3) == ("4,5,6", 4)

    @pytest.mark.parametrize("total", [1, 20, 21, 40, 45, 99])
    def test_walk_is_non_overlapping_and_complete(self, total):
        """
        Contract: HeaderPagingContract
        Enforces: INV-PAGE-02
        """
        seen = []
        sequence, offset = generate_sequence(total + 1, PAGE_SIZE)
        seen.extend(reversed(parse_range(sequence)))
        while has_more(offset):
            previous = offset
            sequence, offset = generate_sequence(offset, PAGE_SIZE)
            page = parse_range(sequence)
            assert max(page) == previous - 1
            seen.extend(reversed(page))

        assert seen == list(range(total, 0, -1))


class TestHelpers:
    def test_sequence_numbers_matches_serialized_range(self):
        for last in (0, 1, 6, 26, 46):
            sequence, _ = generate_sequence(last)
            assert sequence_numbers(last) == parse_range(sequence)

    @pytest.mark.parametrize("offset,expected", [(0, False), (1, False), (2, True), (26, True)])
    def test_has_more(self, offset, expected):
        assert has_more(offset) is expected
