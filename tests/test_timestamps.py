"""Tests for timestamp parsing and canonical formatting."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pagelogue.lib.timestamps import canonical_timestamp, format_timestamp, parse_timestamp


@pytest.mark.parametrize(
    "value",
    [
        1714564800,
        1714564800000,
        "1714564800",
        "2024-05-01T12:00:00Z",
        "2024-05-01T14:00:00+02:00",
        "2024-05-01T12:00:00",
        datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    ],
)
def test_equivalent_inputs_share_canonical_form(value):
    assert canonical_timestamp(value) == "2024-05-01T12:00:00.000Z"


@pytest.mark.parametrize("value", [None, "", "yesterday", "2024-13-45", True, float("inf")])
def test_unparseable_values_return_none(value):
    assert parse_timestamp(value) is None
    assert canonical_timestamp(value) is None


def test_milliseconds_are_kept():
    assert canonical_timestamp("2024-05-01T12:00:00.123456Z") == "2024-05-01T12:00:00.123Z"


def test_naive_datetime_is_treated_as_utc():
    parsed = parse_timestamp(datetime(2024, 1, 1))
    assert parsed is not None
    assert parsed.utcoffset() == timedelta(0)


def test_canonical_strings_sort_chronologically():
    earlier = format_timestamp(datetime(2023, 12, 31, 23, 59, 59, tzinfo=timezone.utc))
    later = format_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc))
    assert sorted([later, earlier]) == [earlier, later]


def test_canonical_form_is_a_fixed_point():
    value = "2024-05-01T12:00:00.000Z"
    assert canonical_timestamp(value) == value
