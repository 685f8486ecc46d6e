from datetime import date
from typing import Iterable

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from core.exceptions import (
    DuplicateDayRecord,
    InvalidTimeFormat,
    InvalidTimeRange,
    MissingField,
    TimeRecordNotFound,
)
from model.time_record import TimeRecord
from processor.work_time import elapsed_minutes, format_duration, normalize_time, split_minutes
from service.auth_service import CurrentUser
from service.workspace import WorkspaceState, fetch_time_records


def find_same_day_record(records: Iterable[TimeRecord], day: date) -> TimeRecord | None:
    """기계와 상관없이 같은 날짜의 기록을 찾는다 (시스템 전체에서 하루 한 건)."""
    return next((r for r in records if r.date == day), None)


def _conflict(record: TimeRecord, source: str) -> dict:
    return {
        "machine_id": record.machine_id,
        "date": record.date.isoformat(),
        "start_time": record.start_time,
        "end_time": record.end_time,
        "source": source,
    }


def _duplicate(record: TimeRecord, source: str) -> DuplicateDayRecord:
    return DuplicateDayRecord(
        f"{record.date.isoformat()} 에 이미 기계 {record.machine_id} 의 근무 시간이 "
        f"기록되어 있습니다 ({record.start_time} - {record.end_time}). "
        "하루에는 한 기계만 기록할 수 있으니 기존 기록을 먼저 삭제해 주세요",
        conflict=_conflict(record, source),
    )


def ensure_day_available(day: date, workspace: WorkspaceState, session: Session):
    """하루 한 건 규칙 검사. 캐시를 본 뒤 저장소를 다시 읽어 확정한다.

    캐시 적중은 힌트일 뿐이다. 다른 프로세스가 지운 행이 캐시에 남아 있을 수 있으므로
    저장소 결과로 판단하고, 읽은 목록으로 캐시를 갈아 끼운다.
    저장소 재조회는 두 클라이언트가 동시에 기록하는 창을 좁힐 뿐 없애지는 못한다.
    재조회 자체가 실패하면 로그를 남기고 캐시 결과만으로 판단한다.
    """
    cached = find_same_day_record(workspace.time_records, day)

    try:
        stored = fetch_time_records(session)
    except SQLAlchemyError as e:
        logger.error(f"[time] 중복 날짜 재조회 실패, 캐시로 판단: {e}")
        session.rollback()
        if cached:
            raise _duplicate(cached, "cache")
        return

    workspace.replace_time_records(stored)

    existing = find_same_day_record(stored, day)
    if existing:
        source = "cache" if cached and cached.id == existing.id else "store"
        raise _duplicate(existing, source)
    if cached:
        logger.info(f"[time] 캐시에만 남은 기록 #{cached.id} ({day}) 무시, 캐시 갱신")


def create_time_record(
    machine_id: str | None,
    day: date | None,
    start_time: str | None,
    end_time: str | None,
    user: CurrentUser,
    workspace: WorkspaceState,
    session: Session,
) -> TimeRecord:
    """근무 시간을 기록한다.

    1. 필수 항목 확인
    2. 시간 정규화 ("830" → "08:30")
    3. 종료 > 시작 확인
    4. 같은 날짜 기록 여부 (캐시 → 저장소)
    5. 정규/OT/휴게 분을 계산해 저장하고 캐시에 반영
    """
    machine_id = (machine_id or "").strip().upper()
    if not machine_id or not day or not start_time or not end_time:
        raise MissingField

    start = normalize_time(start_time)
    end = normalize_time(end_time)
    if not start or not end:
        raise InvalidTimeFormat

    minutes = elapsed_minutes(day, start, end)
    if minutes is None:
        raise InvalidTimeFormat("날짜 또는 시간을 해석할 수 없습니다")
    if minutes <= 0:
        raise InvalidTimeRange

    workspace.ensure_loaded(session)
    ensure_day_available(day, workspace, session)

    buckets = split_minutes(minutes)
    record = TimeRecord(
        machine_id=machine_id,
        date=day,
        start_time=start,
        end_time=end,
        regular_minutes=buckets.regular_minutes,
        ot_minutes=buckets.ot_minutes,
        break_minutes=buckets.break_minutes,
        work_minutes=buckets.work_minutes,
        duration=format_duration(buckets.work_minutes),
        user_email=user.email,
        user_name=user.user_name,
    )
    session.add(record)
    session.commit()
    session.refresh(record)

    workspace.add_time_record(record)
    logger.info(
        f"[time] 기록 생성 #{record.id} {machine_id} {day} {start}-{end} ({user.email})"
    )
    return record


def list_time_records(
    session: Session,
    owner_email: str | None = None,
    user_name: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    workspace: WorkspaceState | None = None,
) -> list[TimeRecord]:
    """최신순 기록 목록.

    user_name은 부분 일치(대소문자 무시), 날짜 범위는 두 값이 모두 있을 때만 적용한다.
    전체 목록을 읽었으면 workspace 캐시도 그 결과로 바꾼다.
    """
    records = fetch_time_records(session, owner_email)
    if workspace is not None and not owner_email:
        workspace.replace_time_records(records)

    if user_name and user_name.strip():
        needle = user_name.strip().lower()
        records = [r for r in records if needle in (r.user_name or "").lower()]

    if start_date and end_date:
        records = [r for r in records if start_date <= r.date <= end_date]

    return records


def get_time_record_or_raise(record_id: int, session: Session) -> TimeRecord:
    record = session.get(TimeRecord, record_id)
    if not record:
        raise TimeRecordNotFound
    return record


def delete_time_record(record_id: int, workspace: WorkspaceState, session: Session):
    record = get_time_record_or_raise(record_id, session)
    session.delete(record)
    session.commit()

    workspace.remove_time_record(record_id)
    logger.info(f"[time] 기록 삭제 #{record_id}")
