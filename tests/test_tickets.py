"""Tests for RSVP ticket and reference numbers."""

import pytest

from crewhub.utils.tickets import (
    format_ticket_number,
    generate_reference_number,
    is_valid_reference_number,
    next_ticket_number,
    parse_ticket_sequence,
    ticket_prefix,
)


class TestTicketNumbers:
    def test_format_pads_sequence(self):
        assert format_ticket_number(2025, 42) == "WO-2025-000042"
        assert ticket_prefix(2025) == "WO-2025-"

    @pytest.mark.parametrize("sequence", [0, -1, 1_000_000])
    def test_out_of_range_sequence(self, sequence):
        with pytest.raises(ValueError):
            format_ticket_number(2025, sequence)

    def test_sequence_starts_at_one(self):
        assert next_ticket_number(None, 2025) == "WO-2025-000001"

    def test_sequence_continues_within_year(self):
        assert next_ticket_number("WO-2025-000099", 2025) == "WO-2025-000100"

    def test_sequence_restarts_for_new_year(self):
        assert next_ticket_number("WO-2024-000099", 2025) == "WO-2025-000001"

    def test_parse_rejects_foreign_formats(self):
        assert parse_ticket_sequence("garbage", 2025) is None
        assert parse_ticket_sequence("WO-2025-42", 2025) is None
        assert parse_ticket_sequence("WO-2025-000042", 2025) == 42


class TestReferenceNumbers:
    def test_shape(self):
        reference = generate_reference_number()
        assert len(reference) == 14
        assert reference.startswith("#")
        assert is_valid_reference_number(reference)

    def test_references_are_random(self):
        references = {generate_reference_number() for _ in range(200)}
        assert len(references) == 200

    @pytest.mark.parametrize("value", [None, "", "#abc", "#ABCDEFGHIJKL", "ABCDEFGHIJKLMN", "#abcdefghijklm"])
    def test_invalid_references(self, value):
        assert not is_valid_reference_number(value)
