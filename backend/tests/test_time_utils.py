import pytest
from iqamah_timetable.utils.time_utils import (
    FormatError, add_minutes, format_clock, normalize_clock, parse_clock, strip_meridiem, to_clock_string
)

# --- parse / format ---

@pytest.mark.parametrize("clock_str, expected", [
    ("12:00 am", (0, 0)),
    ("12:30 pm", (12, 30)),
    ("1:05 pm", (13, 5)),
    ("11:59 pm", (23, 59)),
    ("5:07 am", (5, 7)),
    ("  6:15 PM ", (18, 15)),
    ("7:00AM", (7, 0)),
])
def test_parse_clock(clock_str, expected):
    assert parse_clock(clock_str) == expected

@pytest.mark.parametrize("bad", ["", "13:00 pm", "0:30 am", "5:60 am", "5:7 am", "05:30", "noon", "5:30 xm", None, 530])
def test_parse_clock_rejects_malformed(bad):
    with pytest.raises(FormatError):
        parse_clock(bad)

def test_format_clock_midnight_and_noon():
    assert format_clock(0, 0) == "12:00 am"
    assert format_clock(12, 0) == "12:00 pm"
    assert format_clock(9, 5) == "9:05 am"
    assert format_clock(21, 45) == "9:45 pm"

def test_format_clock_rejects_out_of_range():
    with pytest.raises(FormatError):
        format_clock(24, 0)

def test_round_trip_normalizes_spacing_and_case():
    for s in ["05:30 AM", "5:30am", " 12:01 Pm", "9:09 pm"]:
        assert format_clock(*parse_clock(s)) == normalize_clock(s)
    assert normalize_clock("05:30 AM") == "5:30 am"

# --- offsets ---

def test_add_minutes_wraps_past_midnight():
    assert add_minutes("11:50 pm", 20) == "12:10 am"

def test_add_minutes_crosses_noon():
    assert add_minutes("11:45 am", 20) == "12:05 pm"

def test_add_minutes_zero_is_identity():
    assert add_minutes("12:00 pm", 0) == "12:00 pm"
    assert add_minutes("07:05 AM", 0) == "7:05 am"

def test_add_minutes_over_an_hour():
    assert add_minutes("1:15 pm", 10) == "1:25 pm"
    assert add_minutes("6:50 pm", 75) == "8:05 pm"

def test_add_minutes_rejects_malformed_input():
    with pytest.raises(FormatError):
        add_minutes("", 10)

# --- display helpers ---

def test_strip_meridiem_keeps_hour():
    assert strip_meridiem("12:10 am") == "12:10"
    assert strip_meridiem("1:25 pm") == "1:25"

def test_strip_meridiem_rejects_malformed():
    with pytest.raises(FormatError):
        strip_meridiem("13:10")

# --- provider formats ---

@pytest.mark.parametrize("raw, expected", [
    ("05:12", "5:12 am"),
    ("13:01", "1:01 pm"),
    ("00:05", "12:05 am"),
    ("05:12 (CDT)", "5:12 am"),
    ("18:45:00", "6:45 pm"),
    ("5:12%am%", "5:12 am"),
    ("12:49%pm%", "12:49 pm"),
    ("1:15 pm", "1:15 pm"),
])
def test_to_clock_string(raw, expected):
    assert to_clock_string(raw) == expected

def test_to_clock_string_empty_is_none():
    assert to_clock_string(None) is None
    assert to_clock_string("") is None
    assert to_clock_string("N/A") is None

def test_to_clock_string_rejects_garbage():
    with pytest.raises(FormatError):
        to_clock_string("sometime")
