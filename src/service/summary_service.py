import math
from dataclasses import dataclass
from datetime import date

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from model.costcenter import MachineCostcenter
from model.job import Job, JobStatus
from model.time_record import TimeRecord
from model.user import AllowedUser
from processor.cost_summary import (
    DEFAULT_COSTCENTER,
    DEFAULT_OT_RATE,
    DEFAULT_WAGE_RATE,
    CostSummary,
    WageRate,
    summarize_costs,
)
from processor.work_time import record_minutes
from service.workspace import WorkspaceState
from utility.timer import timer

# --- 조회 (lookup miss는 오류가 아니라 기본값) ---


def lookup_machine_costcenter(machine_id: str, session: Session) -> str | None:
    """기계의 costcenter. 없으면 None."""
    if not machine_id:
        return None
    row = session.exec(
        select(MachineCostcenter).where(MachineCostcenter.machine_id == machine_id)
    ).first()
    return row.costcenter if row else None


def lookup_wage_rates(emails: list[str], session: Session) -> dict[str, WageRate]:
    """이메일 → 임금. 허용 목록에 없는 이메일은 결과에 포함되지 않는다.

    조회가 실패하면 빈 dict (전원 기본 임금으로 계산된다).
    """
    wanted = sorted({e.lower() for e in emails if e})
    if not wanted:
        return {}
    try:
        rows = session.exec(select(AllowedUser).where(AllowedUser.email.in_(wanted))).all()
    except SQLAlchemyError as e:
        logger.error(f"[summary] 임금 조회 실패, 기본값 사용: {e}")
        session.rollback()
        return {}
    return {
        row.email: WageRate(
            wage_rate=row.wage_rate or DEFAULT_WAGE_RATE,
            ot_rate=row.ot_rate or DEFAULT_OT_RATE,
        )
        for row in rows
    }


def resolve_costcenters(machine_ids: list[str], session: Session) -> dict[str, str]:
    """기계마다 독립적으로 조회한다. 한 기계의 실패가 나머지를 막지 않는다."""
    result = {}
    for machine_id in dict.fromkeys(m for m in machine_ids if m):
        try:
            result[machine_id] = lookup_machine_costcenter(machine_id, session) or DEFAULT_COSTCENTER
        except SQLAlchemyError as e:
            logger.error(f"[summary] costcenter 조회 실패 {machine_id}: {e}")
            session.rollback()
            result[machine_id] = DEFAULT_COSTCENTER
    return result


# --- 통계 ---


@dataclass
class TimeStatistics:
    total_records: int = 0
    total_work_minutes: int = 0
    total_ot_minutes: int = 0
    total_break_minutes: int = 0
    avg_work_minutes: int = 0
    unique_machines: int = 0
    this_month_records: int = 0
    today_records: int = 0


@dataclass
class JobStatistics:
    total_jobs: int = 0
    open_jobs: int = 0
    closed_jobs: int = 0
    this_month_jobs: int = 0
    avg_job_duration_days: float = 0.0


def _round_half_up(value: float) -> int:
    # 화면 표시와 같게 .5는 올린다 (round()는 짝수 쪽으로 내린다)
    return math.floor(value + 0.5)


def _same_month(day: date, today: date) -> bool:
    return day.year == today.year and day.month == today.month


def time_statistics(records: list[TimeRecord], today: date | None = None) -> TimeStatistics:
    if not records:
        return TimeStatistics()
    today = today or date.today()

    minutes = [record_minutes(r) for r in records]
    total_work = sum(m.work_minutes for m in minutes)
    return TimeStatistics(
        total_records=len(records),
        total_work_minutes=total_work,
        total_ot_minutes=sum(m.ot_minutes for m in minutes),
        total_break_minutes=sum(m.break_minutes for m in minutes),
        avg_work_minutes=_round_half_up(total_work / len(records)),
        unique_machines=len({r.machine_id for r in records if r.machine_id}),
        this_month_records=sum(1 for r in records if _same_month(r.date, today)),
        today_records=sum(1 for r in records if r.date == today),
    )


def job_statistics(jobs: list[Job], today: date | None = None) -> JobStatistics:
    """평균 작업 기간은 종료된 작업의 (종료일 - 시작일) 일수 평균, 소수 첫째 자리."""
    if not jobs:
        return JobStatistics()
    today = today or date.today()

    closed = [j for j in jobs if j.status == JobStatus.CLOSED and j.close_date]
    avg = 0.0
    if closed:
        days = [(j.close_date - j.open_date).days for j in closed]
        avg = round(sum(days) / len(days), 1)

    return JobStatistics(
        total_jobs=len(jobs),
        open_jobs=sum(1 for j in jobs if j.status == JobStatus.OPEN),
        closed_jobs=sum(1 for j in jobs if j.status == JobStatus.CLOSED),
        this_month_jobs=sum(1 for j in jobs if _same_month(j.open_date, today)),
        avg_job_duration_days=avg,
    )


# --- 화면 단위 조립 ---


def summary_records(
    workspace: WorkspaceState,
    session: Session,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[TimeRecord]:
    """저장소를 다시 읽어 캐시를 갱신한 뒤 기록을 돌려준다.

    날짜 범위는 두 값이 모두 있을 때만 적용한다 (양 끝 포함).
    """
    workspace.refresh(session)
    records = workspace.time_records
    if start_date and end_date:
        records = [r for r in records if start_date <= r.date <= end_date]
    return records


def build_cost_summary(records: list[TimeRecord], session: Session) -> CostSummary:
    with timer(f"cost summary ({len(records)} records)"):
        costcenters = resolve_costcenters([r.machine_id for r in records], session)
        wage_rates = lookup_wage_rates([r.user_email for r in records], session)
        return summarize_costs(records, costcenters, wage_rates)


@dataclass
class Summary:
    time: TimeStatistics
    jobs: JobStatistics
    costs: CostSummary


def build_summary(
    workspace: WorkspaceState,
    session: Session,
    start_date: date | None = None,
    end_date: date | None = None,
) -> Summary:
    # summary_records가 캐시를 새로 읽으므로 작업 통계도 최신 상태다
    records = summary_records(workspace, session, start_date, end_date)
    return Summary(
        time=time_statistics(records),
        jobs=job_statistics(workspace.jobs),
        costs=build_cost_summary(records, session),
    )
