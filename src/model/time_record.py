import datetime as dt

from sqlmodel import Field, SQLModel


class TimeRecord(SQLModel, table=True):
    """하루 한 건의 기계 근무 시간 기록.

    분 단위 필드는 기록 시점에 계산해 저장한다. 예전 데이터에는 비어 있을 수 있으며,
    그 경우 조회/집계 시 date + start_time/end_time으로 다시 계산한다.
    """

    __tablename__ = "time_record"

    id: int | None = Field(default=None, primary_key=True)
    machine_id: str = Field(index=True)  # 대문자로 저장
    date: dt.date = Field(index=True)
    start_time: str  # HH:MM
    end_time: str  # HH:MM

    regular_minutes: int | None = None
    ot_minutes: int | None = None
    break_minutes: int | None = None
    work_minutes: int | None = None
    duration: str | None = None

    user_email: str = ""
    user_name: str = ""
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.UTC))
