import datetime as dt

from fastapi import APIRouter, Depends
from sqlmodel import Session

from core.dependencies import get_current_user, get_workspace
from model.database import get_session
from processor.work_time import sum_minutes
from router.schemas import TimeRecordCreate, TimeRecordListResponse, TimeRecordResponse
from service import time_record_service
from service.auth_service import CurrentUser
from service.workspace import WorkspaceState

router = APIRouter(prefix="/api/time-records", tags=["time-records"])


@router.post("/", response_model=TimeRecordResponse, status_code=201)
def create_time_record(
    req: TimeRecordCreate,
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    """근무 시간 기록. 같은 날짜에 이미 기록이 있으면 409 DUPLICATE_DAY + conflict."""
    record = time_record_service.create_time_record(
        req.machine_id,
        req.date,
        req.start_time,
        req.end_time,
        current_user,
        workspace,
        session,
    )
    return TimeRecordResponse.from_model(record)


@router.get("/", response_model=TimeRecordListResponse)
def list_time_records(
    user_name: str | None = None,
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
    mine: bool = False,
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    """기록 목록 + 목록 전체의 정규/OT/휴게 분 합계."""
    records = time_record_service.list_time_records(
        session,
        owner_email=current_user.email if mine else None,
        user_name=user_name,
        start_date=start_date,
        end_date=end_date,
        workspace=workspace,
    )
    totals = sum_minutes(records)
    return TimeRecordListResponse(
        records=[TimeRecordResponse.from_model(r) for r in records],
        regular_minutes=totals.regular_minutes,
        ot_minutes=totals.ot_minutes,
        break_minutes=totals.break_minutes,
    )


@router.delete("/{record_id}")
def delete_time_record(
    record_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    time_record_service.delete_time_record(record_id, workspace, session)
    return {"detail": "Deleted"}
