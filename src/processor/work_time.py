"""
근무 시간 정규화 + 정규/OT/휴게 분 계산.
모든 함수는 순수 함수이며 예외를 던지지 않는다.
잘못된 입력은 빈 문자열 또는 0분 결과로 떨어진다 (화면이 깨지지 않도록).
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

REGULAR_LIMIT_MINUTES = 8 * 60
BREAK_THRESHOLD_MINUTES = 8 * 60
BREAK_MINUTES = 60

_DIGITS_HHMM = re.compile(r"^[0-9]{3,4}$")
_DIGITS_HOUR = re.compile(r"^[0-9]{1,2}$")
_HOUR_COLON = re.compile(r"^([0-9]{1,2}):$")
_HOUR_MINUTE = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")


@dataclass(frozen=True)
class MinuteBuckets:
    regular_minutes: int = 0
    ot_minutes: int = 0
    break_minutes: int = 0

    @property
    def work_minutes(self) -> int:
        return self.regular_minutes + self.ot_minutes


ZERO = MinuteBuckets()


def _format(hour: int, minute: int) -> str:
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return f"{hour:02d}:{minute:02d}"
    return ""


def normalize_time(raw) -> str:
    """자유 형식 시간 입력 → "HH:MM". 해석할 수 없으면 ""를 반환한다.

    허용 형식 (우선순위 순):
        "830", "0830"  → 08:30  (3~4자리 숫자 = HHMM)
        "8", "14"      → 08:00  (시만 입력)
        "8:"           → 08:00
        "8:30", "14:05"
    """
    value = str(raw if raw is not None else "").strip()
    if not value:
        return ""

    if _DIGITS_HHMM.match(value):
        digits = value.zfill(4)
        return _format(int(digits[:2]), int(digits[2:]))

    if _DIGITS_HOUR.match(value):
        return _format(int(value), 0)

    match = _HOUR_COLON.match(value)
    if match:
        return _format(int(match.group(1)), 0)

    match = _HOUR_MINUTE.match(value)
    if match:
        return _format(int(match.group(1)), int(match.group(2)))

    return ""


def _combine(day: date | str, hhmm: str) -> datetime | None:
    try:
        if isinstance(day, str):
            day = date.fromisoformat(day)
        return datetime.combine(day, datetime.strptime(hhmm, "%H:%M").time())
    except (TypeError, ValueError):
        return None


def split_minutes(raw_minutes: int) -> MinuteBuckets:
    """경과 분 → 정규/OT/휴게.

    8시간을 넘으면 휴게 60분을 일괄 차감하고, 남은 근무 분 중 480분까지가 정규,
    나머지가 OT다.
    """
    raw_minutes = max(0, raw_minutes)
    break_minutes = BREAK_MINUTES if raw_minutes > BREAK_THRESHOLD_MINUTES else 0
    work = max(0, raw_minutes - break_minutes)
    return MinuteBuckets(
        regular_minutes=min(work, REGULAR_LIMIT_MINUTES),
        ot_minutes=max(0, work - REGULAR_LIMIT_MINUTES),
        break_minutes=break_minutes,
    )


def elapsed_minutes(day: date | str, start_time: str, end_time: str) -> int | None:
    """같은 날짜 위의 start → end 경과 분. 해석 불가면 None.

    자정을 넘기는 근무는 다루지 않는다: end가 start보다 이르면 음수가 나온다.
    """
    start = _combine(day, normalize_time(start_time))
    end = _combine(day, normalize_time(end_time))
    if start is None or end is None:
        return None
    return math.floor((end - start).total_seconds() / 60)


def compute_minutes(day: date | str, start_time: str, end_time: str) -> MinuteBuckets:
    minutes = elapsed_minutes(day, start_time, end_time)
    if minutes is None:
        return ZERO
    return split_minutes(minutes)


def _stored_time(value) -> str:
    # 예전 데이터는 "08:00:00"처럼 초가 붙어 있을 수 있다
    text = str(value if value is not None else "").strip()
    if re.match(r"^[0-9]{1,2}:[0-9]{2}:[0-9]{2}", text):
        text = text.rsplit(":", 1)[0]
    return text


def record_minutes(record) -> MinuteBuckets:
    """기록에 저장된 분 값을 우선 사용하고, 없으면 시간에서 다시 계산한다."""
    regular = getattr(record, "regular_minutes", None)
    ot = getattr(record, "ot_minutes", None)
    brk = getattr(record, "break_minutes", None)
    if all(isinstance(v, int) for v in (regular, ot, brk)):
        return MinuteBuckets(regular, ot, brk)

    day = getattr(record, "date", None)
    start = getattr(record, "start_time", None)
    end = getattr(record, "end_time", None)
    if not (day and start and end):
        return ZERO
    return compute_minutes(day, _stored_time(start), _stored_time(end))


def sum_minutes(records: Iterable) -> MinuteBuckets:
    regular = ot = brk = 0
    for record in records:
        mins = record_minutes(record)
        regular += mins.regular_minutes
        ot += mins.ot_minutes
        brk += mins.break_minutes
    return MinuteBuckets(regular, ot, brk)


def format_duration(total_minutes) -> str:
    """분 → "8시간 30분". 음수/비정상 값은 0으로 표시한다."""
    if not isinstance(total_minutes, (int, float)) or not math.isfinite(total_minutes):
        total_minutes = 0
    total_minutes = max(0, int(total_minutes))
    return f"{total_minutes // 60}시간 {total_minutes % 60}분"
