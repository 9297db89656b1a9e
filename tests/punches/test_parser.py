from datetime import datetime, timezone

from src.adms_server.adms_server.common.datetime_utils import to_iso_z
from src.adms_server.adms_server.punches.parser import parse_attendance_log, parse_fallback_log


def test_tab_separated_line_is_normalized_to_utc():
    rows = parse_attendance_log("A1001\t2024-03-05 09:15:30")

    assert len(rows) == 1
    assert rows[0].identity == "A1001"
    assert to_iso_z(rows[0].timestamp) == "2024-03-05T09:15:30.000Z"
    assert rows[0].to_dict()["timestamp"] == "2024-03-05T09:15:30.000Z"


def test_slash_date_layout_is_accepted():
    rows = parse_attendance_log("7\t2024/12/31 23:59:59\t0\t1")

    assert rows[0].timestamp == datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


def test_optional_fields_map_in_order_and_default_to_none():
    full = parse_attendance_log("42\t2024-03-05 08:00:00\t0\t15\t3\t9")[0]
    short = parse_attendance_log("42\t2024-03-05 08:00:00\t1")[0]

    assert (full.status, full.verify_method, full.work_code, full.reserved) == ("0", "15", "3", "9")
    assert short.status == "1"
    assert short.verify_method is None
    assert short.work_code is None
    assert short.reserved is None


def test_empty_tab_field_is_none_not_empty_string():
    row = parse_attendance_log("42\t2024-03-05 08:00:00\t\t1")[0]

    assert row.status is None
    assert row.verify_method == "1"


def test_unrecognized_timestamp_drops_the_line():
    assert parse_attendance_log("A1001\t05-03-2024") == []
    assert parse_attendance_log("A1001\t2024-03-05T09:15:30") == []
    assert parse_attendance_log("A1001\t2024-3-5 09:15:30") == []


def test_impossible_calendar_value_drops_the_line():
    assert parse_attendance_log("A1001\t2024-02-30 09:15:30") == []


def test_single_token_line_is_dropped():
    assert parse_attendance_log("A1001") == []


def test_whitespace_fallback_only_applies_without_tabs():
    # Runs of spaces split the date from the time, so the timestamp token is incomplete.
    assert parse_attendance_log("A1001   2024-03-05 09:15:30") == []


def test_mixed_line_endings_and_blank_lines():
    text = "1\t2024-03-05 08:00:00\r\n\r\n2\t2024-03-05 09:00:00\r3\t2024-03-05 10:00:00\n   \n"

    rows = parse_attendance_log(text)

    assert [r.identity for r in rows] == ["1", "2", "3"]


def test_raw_line_is_the_trimmed_input_line():
    row = parse_attendance_log("  9\t2024-03-05 08:00:00\t0  \n")[0]

    assert row.raw_line == "9\t2024-03-05 08:00:00\t0"


def test_fallback_never_drops_non_blank_lines(fixed_now):
    text = "OPLOG 4\t0\t2024-03-05 10:00:00\nUSER PIN=1\tName=A\njust-text\n\n"

    rows = parse_fallback_log(text, now=fixed_now)

    assert len(rows) == 3
    assert all(r.status is None and r.verify_method is None for r in rows)


def test_fallback_uses_processing_time_when_date_is_unparseable(fixed_now):
    row = parse_fallback_log("OPLOG 4\tnot-a-date", now=fixed_now)[0]

    assert row.identity == "OPLOG 4"
    assert row.timestamp == fixed_now


def test_fallback_normalizes_slash_dates(fixed_now):
    row = parse_fallback_log("7\t2024/03/05 10:20:30", now=fixed_now)[0]

    assert row.timestamp == datetime(2024, 3, 5, 10, 20, 30, tzinfo=timezone.utc)


def test_fallback_splits_on_tabs_only(fixed_now):
    row = parse_fallback_log("7 2024-03-05 10:20:30", now=fixed_now)[0]

    assert row.identity == "7 2024-03-05 10:20:30"
    assert row.timestamp == fixed_now
    assert row.raw_line == "7 2024-03-05 10:20:30"


def test_fallback_survives_out_of_range_offset_timestamps(fixed_now):
    text = "X\t0001-01-01T00:00:00+05:00\nY\t9999-12-31T23:59:59-01:00\n"

    rows = parse_fallback_log(text, now=fixed_now)

    assert [r.identity for r in rows] == ["X", "Y"]
    assert all(r.timestamp == fixed_now for r in rows)


def test_fallback_converts_offset_timestamps_to_utc(fixed_now):
    row = parse_fallback_log("7\t2024-03-05T12:00:00+02:00", now=fixed_now)[0]

    assert row.timestamp == datetime(2024, 3, 5, 10, 0, 0, tzinfo=timezone.utc)


def test_only_cr_and_lf_end_a_record(fixed_now):
    text = "A\x0cB\t2024-03-05 10:00:00\nC\x1eD E\t2024-03-05 11:00:00\r\n"

    fallback = parse_fallback_log(text, now=fixed_now)
    strict = parse_attendance_log("42\t2024-03-05 08:00:00\t0\x0b1\x85x")

    assert [r.identity for r in fallback] == ["A\x0cB", "C\x1eD E"]
    assert len(strict) == 1
    assert strict[0].status == "0\x0b1\x85x"
