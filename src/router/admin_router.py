from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr
from sqlmodel import Session

from core.dependencies import require_admin
from model.database import get_session
from service import admin_service
from service.auth_service import CurrentUser

router = APIRouter(prefix="/api/admin", tags=["admin"])


# --- 요청/응답 스키마 ---

class AllowedUserRequest(BaseModel):
    email: EmailStr
    user_name: str | None = None
    position: str | None = None
    is_electrical_responsible: bool = False
    wage_rate: float | None = None
    ot_rate: float | None = None


class AllowedUserResponse(AllowedUserRequest):
    email: str
    id: int


class CostcenterRequest(BaseModel):
    costcenter: str


class CostcenterResponse(BaseModel):
    machine_id: str
    costcenter: str


# --- 엔드포인트 (관리자 전용) ---

@router.get("/allowed-users", response_model=list[AllowedUserResponse])
def list_allowed_users(
    admin: CurrentUser = Depends(require_admin),
    session: Session = Depends(get_session),
):
    return [AllowedUserResponse(**u.model_dump()) for u in admin_service.list_allowed_users(session)]


@router.put("/allowed-users", response_model=AllowedUserResponse)
def upsert_allowed_user(
    req: AllowedUserRequest,
    admin: CurrentUser = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """허용 목록 추가/수정. 임금이 비어 있으면 요약 계산 시 기본값(350/525)을 쓴다."""
    entry = admin_service.upsert_allowed_user(
        req.email,
        session,
        user_name=req.user_name,
        position=req.position,
        is_electrical_responsible=req.is_electrical_responsible,
        wage_rate=req.wage_rate,
        ot_rate=req.ot_rate,
    )
    return AllowedUserResponse(**entry.model_dump())


@router.get("/costcenters", response_model=list[CostcenterResponse])
def list_costcenters(
    admin: CurrentUser = Depends(require_admin),
    session: Session = Depends(get_session),
):
    return [
        CostcenterResponse(machine_id=c.machine_id, costcenter=c.costcenter)
        for c in admin_service.list_costcenters(session)
    ]


@router.put("/costcenters/{machine_id}", response_model=CostcenterResponse)
def set_costcenter(
    machine_id: str,
    req: CostcenterRequest,
    admin: CurrentUser = Depends(require_admin),
    session: Session = Depends(get_session),
):
    row = admin_service.set_costcenter(machine_id, req.costcenter, session)
    return CostcenterResponse(machine_id=row.machine_id, costcenter=row.costcenter)
