"""Unit tests for tripsheet.utils."""

from tripsheet.utils import (
    calc_block_time_minutes,
    format_block_time,
    format_friendly_date,
    format_friendly_time,
    new_trip_id,
    parse_local_datetime,
    truncate_summary,
)


def test_truncate_summary_caps_sentences_and_words():
    text = "Sentence one is here. Sentence two is also here. Sentence three should be dropped."
    truncated = truncate_summary(text, max_words=10, max_sentences=2)
    assert truncated.count(".") <= 2
    assert len(truncated.split()) <= 10


def test_block_time_same_day():
    assert calc_block_time_minutes("2023-06-25T12:58:00", "2023-06-25T14:00:00") == 62


def test_block_time_rolls_over_midnight():
    assert calc_block_time_minutes("2023-06-25T23:30:00", "2023-06-25T00:15:00") == 45


def test_block_time_unparseable_is_none():
    assert calc_block_time_minutes("TBD", "2023-06-25T14:00:00") is None
    assert calc_block_time_minutes("2023-06-25T12:58:00", "") is None


def test_parse_local_datetime_ignores_offset():
    parsed = parse_local_datetime("2023-06-25T12:58:00Z")
    assert parsed is not None and parsed.tzinfo is None
    assert parsed.hour == 12


def test_format_block_time():
    assert format_block_time(62) == "1h 02m"
    assert format_block_time(None) == "TBD"


def test_friendly_formats_fall_back_to_input():
    assert format_friendly_date("2023-06-25") == "Sunday Jun 25 2023"
    assert format_friendly_time("2023-06-25T14:00:00") == "2:00 PM"
    assert format_friendly_time("TBD") == "TBD"


def test_new_trip_id_shape():
    trip_id = new_trip_id()
    assert len(trip_id) == 9
    assert trip_id == trip_id.upper()
