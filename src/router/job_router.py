import datetime as dt

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlmodel import Session

from core.config import settings
from core.dependencies import get_current_user, get_workspace
from model.database import get_session
from model.job import ImageList, JobStatus
from processor.image_encoder import EncodedImage, RawUpload, encode_uploads
from router.schemas import ElectricalResponsibleResponse, JobResponse
from service import auth_service, job_service
from service.auth_service import CurrentUser
from service.workspace import WorkspaceState
from utility.timer import timer

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


async def _encode(files: list[UploadFile] | None) -> tuple[list[EncodedImage], list[str]]:
    """업로드 파일 → (인코딩된 사진, 건너뛴 파일명)."""
    uploads = []
    for f in files or []:
        uploads.append(
            RawUpload(
                name=f.filename or "image",
                content_type=f.content_type or "",
                content=await f.read(),
            )
        )

    with timer(f"encode {len(uploads)} files", warn_ms=2000):
        results = await encode_uploads(
            uploads,
            max_width=settings.IMAGE_MAX_WIDTH,
            quality=settings.IMAGE_JPEG_QUALITY,
            workers=settings.IMAGE_WORKERS,
        )
    return [r.image for r in results if r.ok], [r.name for r in results if not r.ok]


@router.get("/electrical-responsible", response_model=list[ElectricalResponsibleResponse])
def list_electrical_responsible(
    current_user: CurrentUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return [
        ElectricalResponsibleResponse(email=u.email, user_name=u.user_name, position=u.position)
        for u in auth_service.list_electrical_responsible(session)
    ]


@router.post("/", response_model=JobResponse, status_code=201)
async def open_job(
    machine_name: str = Form(""),
    open_date: dt.date | None = Form(None),
    electrical_responsible: str | None = Form(None),
    files: list[UploadFile] | None = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    images, skipped = await _encode(files)
    job = job_service.create_job(
        machine_name, open_date, images, electrical_responsible, current_user, workspace, session
    )
    return JobResponse.from_model(job, skipped)


@router.get("/", response_model=list[JobResponse])
def list_jobs(
    status: JobStatus | None = None,
    search: str | None = None,
    mine: bool = False,
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    jobs = job_service.list_jobs(
        session,
        owner_email=current_user.email if mine else None,
        status=status,
        search=search,
        workspace=workspace,
    )
    return [JobResponse.from_model(j) for j in jobs]


@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return JobResponse.from_model(job_service.get_job_or_raise(job_id, session))


@router.post("/{job_id}/close", response_model=JobResponse)
async def close_job(
    job_id: int,
    close_date: dt.date | None = Form(None),
    files: list[UploadFile] | None = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    """작업 종료. 날짜를 생략하면 오늘, 사진 없이 바로 종료할 수도 있다."""
    images, skipped = await _encode(files)
    job = job_service.close_job(job_id, close_date, images, workspace, session)
    return JobResponse.from_model(job, skipped)


@router.post("/{job_id}/images/{kind}", response_model=JobResponse)
async def add_images(
    job_id: int,
    kind: ImageList,
    files: list[UploadFile] | None = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    images, skipped = await _encode(files)
    job = job_service.add_images(job_id, images, kind, workspace, session)
    return JobResponse.from_model(job, skipped)


@router.delete("/{job_id}/images/{kind}/{image_id}", response_model=JobResponse)
def delete_image(
    job_id: int,
    kind: ImageList,
    image_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    job = job_service.delete_image(job_id, image_id, kind, workspace, session)
    return JobResponse.from_model(job)


@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    workspace: WorkspaceState = Depends(get_workspace),
    session: Session = Depends(get_session),
):
    job_service.delete_job(job_id, workspace, session)
    return {"detail": "Deleted"}
