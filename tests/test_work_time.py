"""시간 정규화 + 정규/OT/휴게 분 계산 단위 테스트."""

from datetime import date
from types import SimpleNamespace

import pytest

from processor.work_time import (
    compute_minutes,
    format_duration,
    normalize_time,
    record_minutes,
    sum_minutes,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("830", "08:30"),
        ("0830", "08:30"),
        ("1730", "17:30"),
        ("8", "08:00"),
        ("14", "14:00"),
        ("8:", "08:00"),
        ("8:30", "08:30"),
        ("08:30", "08:30"),
        ("  9:05 ", "09:05"),
        ("0", "00:00"),
        ("2359", "23:59"),
    ],
)
def test_normalize_time_accepts_flexible_input(raw, expected):
    assert normalize_time(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", None, "abc", "25:00", "24", "2460", "12:60", "8:3", "12345", "8.30", ":30"],
)
def test_normalize_time_rejects_invalid_input(raw):
    """해석할 수 없으면 예외 대신 빈 문자열."""
    assert normalize_time(raw) == ""


@pytest.mark.parametrize("raw", ["830", "8", "8:", "8:30", "23:59", "0000"])
def test_normalize_time_is_idempotent(raw):
    once = normalize_time(raw)
    assert normalize_time(once) == once


def test_eight_hour_shift_with_break():
    """08:00-17:00 = 540분 → 휴게 60, 근무 480 (OT 없음)."""
    mins = compute_minutes(date(2024, 5, 1), "08:00", "17:00")

    assert mins.break_minutes == 60
    assert mins.work_minutes == 480
    assert mins.regular_minutes == 480
    assert mins.ot_minutes == 0


def test_overtime_shift():
    """08:00-20:00 = 720분 → 휴게 60, 근무 660 = 정규 480 + OT 180."""
    mins = compute_minutes(date(2024, 5, 1), "08:00", "20:00")

    assert mins.break_minutes == 60
    assert mins.work_minutes == 660
    assert mins.regular_minutes == 480
    assert mins.ot_minutes == 180


def test_exactly_eight_hours_has_no_break():
    mins = compute_minutes("2024-05-01", "08:00", "16:00")

    assert mins.break_minutes == 0
    assert mins.regular_minutes == 480


@pytest.mark.parametrize("start, end", [("17:00", "08:00"), ("08:00", "08:00")])
def test_end_not_after_start_gives_zero(start, end):
    """자정 넘김은 다루지 않는다 → 음수 대신 0."""
    mins = compute_minutes(date(2024, 5, 1), start, end)

    assert (mins.regular_minutes, mins.ot_minutes, mins.break_minutes) == (0, 0, 0)


@pytest.mark.parametrize(
    "start, end", [("07:15", "12:40"), ("06:00", "23:59"), ("08:00", "16:01")]
)
def test_buckets_are_consistent(start, end):
    mins = compute_minutes(date(2024, 5, 1), start, end)
    h1, m1 = map(int, start.split(":"))
    h2, m2 = map(int, end.split(":"))
    raw = (h2 * 60 + m2) - (h1 * 60 + m1)

    assert mins.regular_minutes + mins.ot_minutes == mins.work_minutes
    assert mins.work_minutes + mins.break_minutes <= raw


def test_invalid_date_or_time_degrades_to_zero():
    assert compute_minutes("not-a-date", "08:00", "17:00").work_minutes == 0
    assert compute_minutes(date(2024, 5, 1), "abc", "17:00").work_minutes == 0


def test_record_minutes_prefers_stored_values():
    """저장된 분 값이 있으면 시간보다 우선한다 (예전/새 데이터 혼재)."""
    record = SimpleNamespace(
        date=date(2024, 5, 1),
        start_time="08:00",
        end_time="20:00",
        regular_minutes=100,
        ot_minutes=5,
        break_minutes=0,
    )
    mins = record_minutes(record)

    assert (mins.regular_minutes, mins.ot_minutes) == (100, 5)


def test_record_minutes_derives_legacy_rows():
    """분 값이 없고 시간에 초가 붙은 예전 기록도 계산된다."""
    record = SimpleNamespace(
        date=date(2024, 5, 1),
        start_time="08:00:00",
        end_time="20:00:00",
        regular_minutes=None,
        ot_minutes=None,
        break_minutes=None,
    )
    mins = record_minutes(record)

    assert (mins.regular_minutes, mins.ot_minutes, mins.break_minutes) == (480, 180, 60)


def test_record_minutes_missing_fields_is_zero():
    assert record_minutes(SimpleNamespace(date=None, start_time="08:00")).work_minutes == 0


def test_sum_minutes():
    records = [
        SimpleNamespace(date=date(2024, 5, 1), start_time="08:00", end_time="17:00"),
        SimpleNamespace(date=date(2024, 5, 2), start_time="08:00", end_time="20:00"),
    ]
    totals = sum_minutes(records)

    assert totals.regular_minutes == 960
    assert totals.ot_minutes == 180
    assert totals.break_minutes == 120


def test_format_duration():
    assert format_duration(510) == "8시간 30분"
    assert format_duration(-5) == "0시간 0분"
    assert format_duration(float("nan")) == "0시간 0분"
