"""저장소 상태를 비추는 앱 단위 캐시.

lifespan에서 하나 만들어 app.state.workspace에 두고, 의존성으로 주입한다.
처음 사용할 때 저장소에서 한 번 읽어오고, 이후에는 쓰기가 성공한 뒤에만 갱신한다.
(쓰기 실패 시 캐시는 그대로 → 롤백할 필요 없음)

여러 프로세스로 띄우면 프로세스마다 캐시가 따로 존재한다.
중복 날짜 검사가 캐시 다음에 저장소를 다시 읽는 이유다.
"""

import threading

from sqlmodel import Session, SQLModel, select

from model.job import Job
from model.time_record import TimeRecord


def _snapshot(row: SQLModel) -> SQLModel:
    """세션과 분리된 사본. 세션이 commit/close 되어도 캐시 값이 만료되지 않는다."""
    return type(row).model_validate(row.model_dump())


class WorkspaceState:
    def __init__(self):
        self._lock = threading.Lock()
        self._loaded = False
        self._jobs: list[Job] = []
        self._time_records: list[TimeRecord] = []

    def ensure_loaded(self, session: Session):
        with self._lock:
            if self._loaded:
                return
        self.refresh(session)

    def refresh(self, session: Session):
        """저장소 전체를 다시 읽어 캐시를 통째로 바꾼다.

        다른 프로세스가 추가/삭제한 행이 여기서 반영된다.
        """
        jobs = fetch_jobs(session)
        records = fetch_time_records(session)
        with self._lock:
            self._jobs = [_snapshot(j) for j in jobs]
            self._time_records = [_snapshot(r) for r in records]
            self._loaded = True

    # --- 조회 (사본 반환, 호출 측에서 고쳐도 캐시는 그대로) ---

    @property
    def jobs(self) -> list[Job]:
        with self._lock:
            return [_snapshot(j) for j in self._jobs]

    @property
    def time_records(self) -> list[TimeRecord]:
        with self._lock:
            return [_snapshot(r) for r in self._time_records]

    # --- 저장소 조회 또는 쓰기 성공 후 반영 ---

    def replace_jobs(self, jobs: list[Job]):
        with self._lock:
            self._jobs = [_snapshot(j) for j in jobs]

    def replace_time_records(self, records: list[TimeRecord]):
        with self._lock:
            self._time_records = [_snapshot(r) for r in records]

    def upsert_job(self, job: Job):
        copy = _snapshot(job)
        with self._lock:
            if any(j.id == job.id for j in self._jobs):
                self._jobs = [copy if j.id == job.id else j for j in self._jobs]
            else:
                self._jobs = [copy] + self._jobs

    def remove_job(self, job_id: int):
        with self._lock:
            self._jobs = [j for j in self._jobs if j.id != job_id]

    def add_time_record(self, record: TimeRecord):
        with self._lock:
            self._time_records = [_snapshot(record)] + self._time_records

    def remove_time_record(self, record_id: int):
        with self._lock:
            self._time_records = [r for r in self._time_records if r.id != record_id]


def fetch_jobs(session: Session, owner_email: str | None = None) -> list[Job]:
    """최신순 작업 목록. owner_email이 있으면 해당 사용자가 연 작업만."""
    query = select(Job)
    if owner_email:
        query = query.where(Job.user_email == owner_email)
    query = query.order_by(Job.created_at.desc(), Job.id.desc())
    return list(session.exec(query).all())


def fetch_time_records(session: Session, owner_email: str | None = None) -> list[TimeRecord]:
    """최신순 근무 기록 목록. owner_email이 있으면 해당 사용자 기록만."""
    query = select(TimeRecord)
    if owner_email:
        query = query.where(TimeRecord.user_email == owner_email)
    query = query.order_by(TimeRecord.created_at.desc(), TimeRecord.id.desc())
    return list(session.exec(query).all())
