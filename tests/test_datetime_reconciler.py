# tests/test_datetime_reconciler.py

from __future__ import annotations

import logging
from datetime import datetime

import pytest

from lucid.tasks.datetime_reconciler import from_timestamp, to_timestamp


def test_to_timestamp_combines_date_and_time() -> None:
    assert to_timestamp("July 26, 2024", "3:00 PM") == datetime(2024, 7, 26, 15, 0)
    assert to_timestamp("Jul 26, 2024", "3 pm") == datetime(2024, 7, 26, 15, 0)
    assert to_timestamp("2024-07-26", "14:45") == datetime(2024, 7, 26, 14, 45)
    assert to_timestamp("  July   26,  2024 ", " 09:05 AM ") == datetime(2024, 7, 26, 9, 5)


def test_to_timestamp_all_day_is_start_of_day() -> None:
    assert to_timestamp("July 26, 2024", None) == datetime(2024, 7, 26)
    assert to_timestamp("July 26, 2024", "") == datetime(2024, 7, 26)


@pytest.mark.parametrize(
    "date_text,time_text",
    [
        ("February 30, 2024", None),
        ("February 30, 2024", "10:00 AM"),
        ("next Thursday-ish", None),
        ("", "10:00 AM"),
        (None, None),
        ("July 26, 2024", "25:99"),
        ("July 26, 2024", "teatime"),
    ],
)
def test_to_timestamp_unparseable_returns_none(date_text, time_text, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="lucid.tasks.datetime_reconciler"):
        assert to_timestamp(date_text, time_text) is None
    assert caplog.records, "parse failures should be logged"


def test_from_timestamp_fixed_format() -> None:
    assert from_timestamp(datetime(2024, 7, 5, 9, 7), False) == ("July 5, 2024", "9:07 AM")
    assert from_timestamp(datetime(2024, 12, 31, 12, 0), False) == ("December 31, 2024", "12:00 PM")
    assert from_timestamp(datetime(2024, 1, 1, 0, 30), False) == ("January 1, 2024", "12:30 AM")
    assert from_timestamp(datetime(2024, 1, 1, 23, 59, 59), False) == ("January 1, 2024", "11:59 PM")


def test_from_timestamp_all_day_drops_clock() -> None:
    assert from_timestamp(datetime(2024, 3, 9, 18, 45), True) == ("March 9, 2024", None)


def test_midnight_time_is_not_all_day() -> None:
    ts = to_timestamp("March 9, 2024", "12:00 AM")
    assert ts == datetime(2024, 3, 9)
    assert from_timestamp(ts, False) == ("March 9, 2024", "12:00 AM")


@pytest.mark.parametrize(
    "ts,all_day",
    [
        (datetime(2024, 2, 29, 13, 7, 31, 500), False),
        (datetime(1999, 12, 31, 23, 59, 59), False),
        (datetime(2031, 6, 1, 0, 0), False),
        (datetime(2024, 11, 3), True),
    ],
)
def test_round_trip_to_the_minute(ts: datetime, all_day: bool) -> None:
    back = to_timestamp(*from_timestamp(ts, all_day))
    assert back == ts.replace(second=0, microsecond=0)
