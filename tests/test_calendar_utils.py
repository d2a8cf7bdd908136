"""Tests for day-range parsing, calendar months and time helpers."""

from datetime import date

import pytest

from crewhub.utils.calendar_utils import (
    build_calendar_cells,
    build_schedule_entries,
    days_in_month,
    format_day_ranges,
    format_month_label,
    group_dates_by_month,
    label_to_24h,
    parse_day_ranges,
    parse_month_label,
    parts_to_time,
    readable_time,
    shift_month,
    split_time_range,
    time_to_parts,
    transform_calendar_months,
)


class TestParseDayRanges:
    def test_mixed_days_and_ranges(self):
        assert parse_day_ranges("1-5, 10, 15-20") == [1, 2, 3, 4, 5, 10, 15, 16, 17, 18, 19, 20]

    def test_en_dash_is_accepted(self):
        assert parse_day_ranges("3–5") == [3, 4, 5]

    def test_overlapping_tokens_are_deduplicated_and_sorted(self):
        assert parse_day_ranges("10, 1-3, 2, 3") == [1, 2, 3, 10]

    def test_invalid_tokens_are_skipped(self):
        assert parse_day_ranges("abc, 5-1, 0, 32, 7") == [7]

    def test_days_beyond_month_length_are_clamped(self):
        assert parse_day_ranges("28, 29, 30", max_day=28) == [28]
        assert parse_day_ranges("27-30", max_day=28) == [27, 28]
        assert parse_day_ranges("29-30", max_day=28) == []

    def test_range_end_with_many_digits_is_cut_at_month_length(self):
        assert parse_day_ranges("25-100") == [25, 26, 27, 28, 29, 30, 31]
        assert parse_day_ranges("0028", max_day=28) == [28]

    @pytest.mark.parametrize("text", [None, "", " , ,"])
    def test_empty_input(self, text):
        assert parse_day_ranges(text) == []

    def test_format_collapses_consecutive_days(self):
        assert format_day_ranges([5, 1, 2, 3, 10, 11]) == "1-3, 5, 10-11"
        assert format_day_ranges([]) == ""


class TestMonthLabels:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Sep 2025", (2025, 8)),
            ("September 2025", (2025, 8)),
            ("sept 2025", (2025, 8)),
            ("Jan, 2026", (2026, 0)),
        ],
    )
    def test_parse_month_label(self, label, expected):
        assert parse_month_label(label) == expected

    @pytest.mark.parametrize(
        "label",
        [
            None,
            "",
            "Se 2025",
            "Foo 2025",
            "Sep",
            "Sep twenty",
            "Sep \u00b2025",
            "Sep \u0662\u0660\u0662\u0665",
            "Sep 0",
            "Sep 10000",
        ],
    )
    def test_unparseable_labels(self, label):
        assert parse_month_label(label) is None

    def test_format_and_length(self):
        assert format_month_label(2025, 8) == "Sep 2025"
        assert days_in_month(2024, 1) == 29
        assert days_in_month(2025, 1) == 28


class TestTransformCalendarMonths:
    def test_same_month_entries_merge_in_first_appearance_order(self):
        entries = [
            {"month": "Sep 2025", "days": "1-3"},
            {"month": "Oct 2025", "days": "5"},
            {"month": "Sep 2025", "days": "10"},
        ]
        assert transform_calendar_months(entries) == [
            {"month": 8, "year": 2025, "highlightedDays": [1, 2, 3, 10]},
            {"month": 9, "year": 2025, "highlightedDays": [5]},
        ]

    def test_objects_with_attributes_are_accepted(self):
        class Row:
            month = "Feb 2025"
            days = "25-31, 30"

        assert transform_calendar_months([Row()]) == [
            {"month": 1, "year": 2025, "highlightedDays": [25, 26, 27, 28]}
        ]

    def test_invalid_months_are_skipped(self):
        assert transform_calendar_months([{"month": "Smarch 2025", "days": "1"}]) == []
        assert transform_calendar_months([{"month": "Sep \u00b2025", "days": "1"}]) == []
        assert transform_calendar_months([{"month": "Sep 0", "days": "1"}]) == []
        assert transform_calendar_months(None) == []

    def test_group_dates_by_month(self):
        dates = [date(2025, 10, 2), date(2025, 9, 30), date(2025, 9, 1)]
        assert group_dates_by_month(dates) == [
            {"month": 8, "year": 2025, "highlightedDays": [1, 30]},
            {"month": 9, "year": 2025, "highlightedDays": [2]},
        ]


class TestCalendarGrid:
    def test_month_starting_on_monday(self):
        cells = build_calendar_cells(2025, 9)
        assert len(cells) == 42
        assert cells[0] == {"day": 1, "type": "current"}
        assert cells[29] == {"day": 30, "type": "current"}
        assert cells[30] == {"day": 1, "type": "next"}

    def test_leading_cells_come_from_previous_month(self):
        cells = build_calendar_cells(2025, 10)  # Oct 1 2025 is a Wednesday
        assert cells[:3] == [
            {"day": 29, "type": "prev"},
            {"day": 30, "type": "prev"},
            {"day": 1, "type": "current"},
        ]

    def test_shift_month_wraps_years(self):
        assert shift_month(2025, 1, -1) == (2024, 12)
        assert shift_month(2025, 12, 1) == (2026, 1)


class TestTimeHelpers:
    def test_time_to_parts(self):
        assert time_to_parts("21:05") == (9, 5, "PM")
        assert time_to_parts("00:30") == (12, 30, "AM")
        assert time_to_parts("12:00") == (12, 0, "PM")

    def test_parts_to_time(self):
        assert parts_to_time(9, 5, "PM") == "21:05"
        assert parts_to_time(12, 0, "AM") == "00:00"
        assert parts_to_time(15, 70, "AM") == "00:59"

    def test_readable_time(self):
        assert readable_time("21:00") == "9:00 PM"
        assert readable_time("09:30") == "9:30 AM"

    def test_label_to_24h(self):
        assert label_to_24h("9:05 pm") == "21:05"
        assert label_to_24h("12:15 AM") == "00:15"
        assert label_to_24h("garbage") == "21:00"
        assert label_to_24h(None, "10:00") == "10:00"

    def test_split_time_range(self):
        assert split_time_range("9:00 PM - 10:00 PM") == ["9:00 PM", "10:00 PM"]
        assert split_time_range("") == []

    def test_build_schedule_entries_skips_days_outside_month(self):
        entries = build_schedule_entries(2025, 9, [5, 1, 31])
        assert [e["date"] for e in entries] == ["2025-09-01", "2025-09-05"]
        assert entries[0] == {
            "date": "2025-09-01",
            "dateLabel": "Mon, Sep 01 2025",
            "timeRange": "9:00 PM - 10:00 PM",
            "timezone": "IST",
        }
