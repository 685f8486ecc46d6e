from datetime import UTC, date, datetime
from enum import Enum

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class JobStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ImageList(str, Enum):
    """사진이 속한 목록. 한 사진은 정확히 한 작업의 한 목록에만 속한다."""

    OPEN = "open"
    CLOSE = "close"


class Job(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    machine_name: str = Field(index=True)  # 대문자로 저장
    job_name: str = ""
    status: JobStatus = Field(default=JobStatus.OPEN)  # open → closed 한 번만
    open_date: date
    close_date: date | None = None

    # [{"id": "...", "name": "...", "data": "data:image/jpeg;base64,..."}, ...]
    # JSON 컬럼은 in-place 변경이 추적되지 않으므로 항상 새 리스트를 대입한다.
    open_images: list[dict] = Field(default_factory=list, sa_column=Column(JSON))
    close_images: list[dict] = Field(default_factory=list, sa_column=Column(JSON))

    user_email: str = ""
    user_name: str = ""
    electrical_responsible: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None

    def images_of(self, kind: ImageList) -> list[dict]:
        return list((self.open_images if kind == ImageList.OPEN else self.close_images) or [])
