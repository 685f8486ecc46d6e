import datetime as dt

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from core.dependencies import get_current_user, get_workspace
from model.database import get_session
from router.schemas import CostSummaryResponse
from service import summary_service
from service.auth_service import CurrentUser
from service.workspace import WorkspaceState

router = APIRouter(prefix="/api/summary", tags=["summary"])


class TimeStatisticsResponse(BaseModel):
    total_records: int
    total_work_minutes: int
    total_ot_minutes: int
    total_break_minutes: int
    avg_work_minutes: int
    unique_machines: int
    this_month_records: int
    today_records: int


class JobStatisticsResponse(BaseModel):
    total_jobs: int
    open_jobs: int
    closed_jobs: int
    this_month_jobs: int
    avg_job_duration_days: float


class SummaryResponse(BaseModel):
    time: TimeStatisticsResponse
    jobs: JobStatisticsResponse
    costs: CostSummaryResponse


@router.get("/", response_model=SummaryResponse)
def get_summary(
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    """근무/작업 통계 + 인건비 요약. 날짜 범위는 두 값이 모두 있을 때만 적용한다."""
    summary = summary_service.build_summary(workspace, session, start_date, end_date)
    return SummaryResponse(
        time=TimeStatisticsResponse(**vars(summary.time)),
        jobs=JobStatisticsResponse(**vars(summary.jobs)),
        costs=CostSummaryResponse.from_summary(summary.costs),
    )


@router.get("/costs", response_model=CostSummaryResponse)
def get_cost_summary(
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    records = summary_service.summary_records(workspace, session, start_date, end_date)
    return CostSummaryResponse.from_summary(summary_service.build_cost_summary(records, session))
