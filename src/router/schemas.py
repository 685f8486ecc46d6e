"""응답 스키마 + 요청 경계 정규화.

요청 본문은 camelCase(machineId)와 snake_case(machine_id)를 모두 받는다.
내부 로직에는 snake_case 한 가지 형태만 흘러간다.
"""

import datetime as dt
from typing import Self

from pydantic import AliasChoices, BaseModel, Field

from model.job import Job, JobStatus
from model.time_record import TimeRecord
from processor.cost_summary import CostcenterRollup, CostGroup, CostSummary, CostTotals
from processor.image_encoder import display_data
from processor.work_time import record_minutes


def _either(snake: str, camel: str):
    return Field(default=None, validation_alias=AliasChoices(snake, camel))


# --- 작업 ---


class ImageResponse(BaseModel):
    id: str
    name: str
    data: str


class JobResponse(BaseModel):
    id: int
    machine_name: str
    job_name: str
    status: JobStatus
    open_date: dt.date
    close_date: dt.date | None
    open_images: list[ImageResponse]
    close_images: list[ImageResponse]
    user_email: str
    user_name: str
    electrical_responsible: str | None
    created_at: dt.datetime
    updated_at: dt.datetime | None
    skipped_files: list[str] = []

    @classmethod
    def from_model(cls, job: Job, skipped_files: list[str] | None = None) -> Self:
        def images(items: list[dict] | None) -> list[ImageResponse]:
            return [
                ImageResponse(
                    id=str(img.get("id", "")),
                    name=img.get("name") or "image",
                    data=display_data(img.get("data")),
                )
                for img in items or []
            ]

        return cls(
            id=job.id,
            machine_name=job.machine_name,
            job_name=job.job_name or job.machine_name,
            status=job.status,
            open_date=job.open_date,
            close_date=job.close_date,
            open_images=images(job.open_images),
            close_images=images(job.close_images),
            user_email=job.user_email,
            user_name=job.user_name,
            electrical_responsible=job.electrical_responsible,
            created_at=job.created_at,
            updated_at=job.updated_at,
            skipped_files=skipped_files or [],
        )


class ElectricalResponsibleResponse(BaseModel):
    email: str
    user_name: str | None
    position: str | None


# --- 근무 기록 ---


class TimeRecordCreate(BaseModel):
    machine_id: str | None = _either("machine_id", "machineId")
    date: dt.date | None = None
    start_time: str | None = _either("start_time", "startTime")
    end_time: str | None = _either("end_time", "endTime")


class TimeRecordResponse(BaseModel):
    id: int
    machine_id: str
    date: dt.date
    start_time: str
    end_time: str
    regular_minutes: int
    ot_minutes: int
    break_minutes: int
    work_minutes: int
    duration: str | None
    user_email: str
    user_name: str
    created_at: dt.datetime

    @classmethod
    def from_model(cls, record: TimeRecord) -> Self:
        # 예전 기록은 분 필드가 비어 있을 수 있다 → 시간에서 다시 계산
        mins = record_minutes(record)
        return cls(
            id=record.id,
            machine_id=record.machine_id,
            date=record.date,
            start_time=record.start_time,
            end_time=record.end_time,
            regular_minutes=mins.regular_minutes,
            ot_minutes=mins.ot_minutes,
            break_minutes=mins.break_minutes,
            work_minutes=mins.work_minutes,
            duration=record.duration,
            user_email=record.user_email,
            user_name=record.user_name,
            created_at=record.created_at,
        )


class TimeRecordListResponse(BaseModel):
    records: list[TimeRecordResponse]
    regular_minutes: int
    ot_minutes: int
    break_minutes: int


# --- 요약 ---


class CostGroupResponse(BaseModel):
    machine_id: str
    user_email: str
    user_name: str
    costcenter: str
    record_count: int
    regular_minutes: int
    ot_minutes: int
    regular_hours: float
    ot_hours: float
    wage_rate: float
    ot_rate: float
    regular_cost: float
    ot_cost: float
    total_cost: float

    @classmethod
    def from_group(cls, group: CostGroup) -> Self:
        return cls(
            machine_id=group.machine_id,
            user_email=group.user_email,
            user_name=group.user_name,
            costcenter=group.costcenter,
            record_count=group.record_count,
            regular_minutes=group.regular_minutes,
            ot_minutes=group.ot_minutes,
            regular_hours=group.regular_hours,
            ot_hours=group.ot_hours,
            wage_rate=group.wage_rate,
            ot_rate=group.ot_rate,
            regular_cost=group.regular_cost,
            ot_cost=group.ot_cost,
            total_cost=group.total_cost,
        )


class CostTotalsResponse(BaseModel):
    regular_hours: float
    ot_hours: float
    regular_cost: float
    ot_cost: float
    total_cost: float

    @classmethod
    def from_totals(cls, totals: CostTotals) -> Self:
        return cls(
            regular_hours=totals.regular_hours,
            ot_hours=totals.ot_hours,
            regular_cost=totals.regular_cost,
            ot_cost=totals.ot_cost,
            total_cost=totals.total_cost,
        )


class CostcenterRollupResponse(BaseModel):
    costcenter: str
    machine_count: int
    user_count: int
    totals: CostTotalsResponse
    groups: list[CostGroupResponse]

    @classmethod
    def from_rollup(cls, rollup: CostcenterRollup) -> Self:
        return cls(
            costcenter=rollup.costcenter,
            machine_count=rollup.machine_count,
            user_count=rollup.user_count,
            totals=CostTotalsResponse.from_totals(rollup.totals),
            groups=[CostGroupResponse.from_group(g) for g in rollup.groups],
        )


class CostSummaryResponse(BaseModel):
    groups: list[CostGroupResponse]
    by_costcenter: list[CostcenterRollupResponse]
    totals: CostTotalsResponse

    @classmethod
    def from_summary(cls, summary: CostSummary) -> Self:
        return cls(
            groups=[CostGroupResponse.from_group(g) for g in summary.groups],
            by_costcenter=[CostcenterRollupResponse.from_rollup(r) for r in summary.by_costcenter],
            totals=CostTotalsResponse.from_totals(summary.totals),
        )
