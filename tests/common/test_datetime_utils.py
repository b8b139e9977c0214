from datetime import date, datetime

import pytest

from src.driver_ops.driver_ops.common.datetime_utils import format_duration, js_weekday, seconds_between, week_window
from src.driver_ops.driver_ops.core.enums import Weekday


def test_week_window_sunday_start():
    # 2026-03-04 is a Wednesday
    assert week_window(date(2026, 3, 4)) == (date(2026, 3, 1), date(2026, 3, 7))


def test_week_window_monday_start_five_days():
    assert week_window(date(2026, 3, 4), starts_on=Weekday.MONDAY, days=5) == (date(2026, 3, 2), date(2026, 3, 6))


def test_week_window_on_sunday_anchor():
    assert week_window(date(2026, 3, 1))[0] == date(2026, 3, 1)
    assert week_window(date(2026, 3, 1), starts_on=Weekday.MONDAY)[0] == date(2026, 2, 23)


def test_week_window_rejects_bad_length():
    with pytest.raises(ValueError):
        week_window(date(2026, 3, 4), days=8)


def test_js_weekday_counts_from_sunday():
    assert js_weekday(date(2026, 3, 1)) == 0
    assert js_weekday(date(2026, 3, 2)) == 1
    assert js_weekday(date(2026, 3, 7)) == 6


def test_format_duration_and_floor():
    assert format_duration(0) == "00:00:00"
    assert format_duration(1807) == "00:30:07"
    assert format_duration(26 * 3600 + 61) == "26:01:01"
    assert seconds_between(datetime(2026, 3, 2, 9, 0), datetime(2026, 3, 2, 8, 0)) == 0
