from datetime import UTC, date, datetime

from loguru import logger
from sqlmodel import Session

from core.config import settings
from core.exceptions import (
    EmptyMachineName,
    ImageNotFound,
    InvalidImageList,
    InvalidJobUpdate,
    JobAlreadyClosed,
    JobNotFound,
)
from model.job import ImageList, Job, JobStatus
from processor.image_encoder import EncodedImage
from service.auth_service import CurrentUser
from service.workspace import WorkspaceState, fetch_jobs

# update_job으로 바꿀 수 있는 필드. 사진은 add_images/delete_image로만 다룬다.
UPDATABLE_FIELDS = {"status", "close_date", "close_images", "electrical_responsible"}


def storable_images(images: list[EncodedImage | dict]) -> list[dict]:
    """저장 가능한 사진만 남긴다.

    data가 비어 있거나 IMAGE_MAX_DATA_LENGTH 이상이면 조용히 버린다
    (저장소 필드 크기 제한. 사용자에게 알리지 않는 손실 동작).
    """
    kept = []
    for image in images:
        item = image.to_dict() if isinstance(image, EncodedImage) else dict(image)
        data = item.get("data")
        if not isinstance(data, str) or not data:
            continue
        if len(data) >= settings.IMAGE_MAX_DATA_LENGTH:
            logger.debug(f"[job] 크기 초과로 사진 제외: {item.get('name')} ({len(data)} chars)")
            continue
        kept.append(
            {
                "id": str(item.get("id") or ""),
                "name": item.get("name") or "image",
                "data": data,
            }
        )
    return kept


def create_job(
    machine_name: str,
    open_date: date | None,
    images: list[EncodedImage],
    electrical_responsible: str | None,
    user: CurrentUser,
    workspace: WorkspaceState,
    session: Session,
) -> Job:
    machine_name = (machine_name or "").strip().upper()
    if not machine_name:
        raise EmptyMachineName

    job = Job(
        machine_name=machine_name,
        job_name=machine_name,
        status=JobStatus.OPEN,
        open_date=open_date or date.today(),
        open_images=storable_images(images),
        close_images=[],
        user_email=user.email,
        user_name=user.user_name,
        electrical_responsible=(electrical_responsible or "").strip() or None,
    )
    session.add(job)
    session.commit()
    session.refresh(job)

    workspace.upsert_job(job)
    logger.info(
        f"[job] 작업 생성 #{job.id} {machine_name} ({user.email}, 사진 {len(job.open_images)}장)"
    )
    return job


def list_jobs(
    session: Session,
    owner_email: str | None = None,
    status: JobStatus | None = None,
    search: str | None = None,
    workspace: WorkspaceState | None = None,
) -> list[Job]:
    """최신순 작업 목록.

    search는 기계 이름, 작업자 이름, 작업 이름, 시작일(YYYY-MM-DD) 중 하나에
    부분 일치하면 포함한다. 전체 목록을 읽었으면 workspace 캐시도 그 결과로 바꾼다.
    """
    jobs = fetch_jobs(session, owner_email)
    if workspace is not None and not owner_email:
        workspace.replace_jobs(jobs)

    if status is not None:
        jobs = [j for j in jobs if j.status == status]

    if search and search.strip():
        needle = search.strip().lower()
        jobs = [
            j
            for j in jobs
            if needle in (j.machine_name or "").lower()
            or needle in (j.user_name or "").lower()
            or needle in (j.job_name or "").lower()
            or needle in j.open_date.isoformat()
        ]

    return jobs


def get_job_or_raise(job_id: int, session: Session) -> Job:
    job = session.get(Job, job_id)
    if not job:
        raise JobNotFound
    return job


def update_job(job_id: int, updates: dict, workspace: WorkspaceState, session: Session) -> Job:
    """허용된 필드만 갱신하고 updated_at을 찍는다.

    상태는 open → closed 방향으로만 바뀐다. 종료된 작업을 다시 열 수 없다.
    """
    job = get_job_or_raise(job_id, session)

    unknown = set(updates) - UPDATABLE_FIELDS
    if unknown:
        raise InvalidJobUpdate(f"변경할 수 없는 작업 항목: {sorted(unknown)}")

    new_status = updates.get("status", job.status)
    if job.status == JobStatus.CLOSED and new_status != JobStatus.CLOSED:
        raise JobAlreadyClosed("종료된 작업은 다시 열 수 없습니다")

    for key, value in updates.items():
        setattr(job, key, value)
    job.updated_at = datetime.now(UTC)

    session.add(job)
    session.commit()
    session.refresh(job)

    workspace.upsert_job(job)
    return job


def close_job(
    job_id: int,
    close_date: date | None,
    images: list[EncodedImage],
    workspace: WorkspaceState,
    session: Session,
) -> Job:
    """open → closed. 한 번만 가능하고 되돌릴 수 없다."""
    job = get_job_or_raise(job_id, session)
    if job.status == JobStatus.CLOSED:
        raise JobAlreadyClosed

    job = update_job(
        job_id,
        {
            "status": JobStatus.CLOSED,
            "close_date": close_date or date.today(),
            "close_images": storable_images(images),
        },
        workspace,
        session,
    )
    logger.info(f"[job] 작업 종료 #{job.id} {job.machine_name} ({job.close_date})")
    return job


def _check_list(job: Job, kind: ImageList):
    # 종료 사진 목록은 종료된 작업에서만 의미가 있다
    if kind == ImageList.CLOSE and job.status != JobStatus.CLOSED:
        raise InvalidImageList("종료되지 않은 작업에는 종료 사진을 추가할 수 없습니다")


def _set_images(job: Job, kind: ImageList, images: list[dict]):
    # JSON 컬럼은 새 리스트를 대입해야 변경이 감지된다
    if kind == ImageList.OPEN:
        job.open_images = images
    else:
        job.close_images = images
    job.updated_at = datetime.now(UTC)


def add_images(
    job_id: int,
    images: list[EncodedImage],
    kind: ImageList,
    workspace: WorkspaceState,
    session: Session,
) -> Job:
    """기존 사진 뒤에 새 사진을 이어 붙인다 (입력 순서 유지)."""
    job = get_job_or_raise(job_id, session)
    _check_list(job, kind)

    _set_images(job, kind, job.images_of(kind) + storable_images(images))
    session.add(job)
    session.commit()
    session.refresh(job)

    workspace.upsert_job(job)
    logger.info(f"[job] 사진 추가 #{job.id} {kind.value} → {len(job.images_of(kind))}장")
    return job


def delete_image(
    job_id: int,
    image_id: str,
    kind: ImageList,
    workspace: WorkspaceState,
    session: Session,
) -> Job:
    """사진 하나를 id 문자열 비교로 제거한다."""
    job = get_job_or_raise(job_id, session)

    existing = job.images_of(kind)
    remaining = [img for img in existing if str(img.get("id")) != str(image_id)]
    if len(remaining) == len(existing):
        raise ImageNotFound

    _set_images(job, kind, remaining)
    session.add(job)
    session.commit()
    session.refresh(job)

    workspace.upsert_job(job)
    logger.info(f"[job] 사진 삭제 #{job.id} {kind.value} id={image_id}")
    return job


def delete_job(job_id: int, workspace: WorkspaceState, session: Session):
    job = get_job_or_raise(job_id, session)
    machine_name = job.machine_name
    session.delete(job)
    session.commit()

    workspace.remove_job(job_id)
    logger.info(f"[job] 작업 삭제 #{job_id} {machine_name}")
