from datetime import datetime

from shiftpay.time_range import normalize_time, parse_instant, shift_range


def test_normalize_time_pads_hours_and_minutes():
    assert normalize_time("8:00") == "08:00"
    assert normalize_time("8:5") == "08:05"
    assert normalize_time("17:30") == "17:30"


def test_normalize_time_defaults_missing_value_to_midnight():
    assert normalize_time("") == "00:00"
    assert normalize_time(None) == "00:00"


def test_normalize_time_leaves_colonless_values_alone():
    assert normalize_time("800") == "800"


def test_overnight_range_rolls_end_to_next_day():
    span = shift_range("2024-01-01", "22:00", "06:00")

    assert span.valid
    assert span.start == datetime(2024, 1, 1, 22, 0)
    assert span.end == datetime(2024, 1, 2, 6, 0)


def test_identical_times_do_not_roll_over():
    span = shift_range("2024-01-01", "09:00", "09:00")

    assert span.start == span.end


def test_unpadded_times_parse():
    span = shift_range("2024-03-05", "8:00", "9:15")

    assert span.start == datetime(2024, 3, 5, 8, 0)
    assert span.end == datetime(2024, 3, 5, 9, 15)


def test_bad_date_or_time_gives_invalid_range():
    assert not shift_range("2024-13-01", "08:00", "09:00").valid
    assert not shift_range("2024-01-01", "lunch", "09:00").valid
    assert not shift_range("2024-01-01", "08:00", "25:00").valid
    assert not shift_range("", "08:00", "09:00").valid


def test_parse_instant_returns_none_instead_of_raising():
    assert parse_instant("not a date", "08:00") is None
    assert parse_instant("2024-01-01", "7:45") == datetime(2024, 1, 1, 7, 45)


def test_normalize_time_drops_seconds():
    assert normalize_time("8:00:00") == "08:00"
    assert shift_range("2024-01-01", "8:00:00", "12:30:15").valid
