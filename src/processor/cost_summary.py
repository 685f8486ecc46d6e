"""
근무 기록 → 인건비 집계.

(machine_id, user_email) 단위로 정규/OT 분을 합산해 비용을 계산하고,
costcenter 단위로 다시 묶은 뒤 전체 합계를 낸다.
표시용 반올림은 하지 않는다 (합계가 그룹 합과 정확히 일치해야 한다).
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from processor.work_time import record_minutes

DEFAULT_WAGE_RATE = 350.0
DEFAULT_OT_RATE = 525.0
DEFAULT_COSTCENTER = "N/A"


@dataclass(frozen=True)
class WageRate:
    wage_rate: float = DEFAULT_WAGE_RATE
    ot_rate: float = DEFAULT_OT_RATE


DEFAULT_RATES = WageRate()


@dataclass
class CostGroup:
    machine_id: str
    user_email: str
    user_name: str
    costcenter: str
    wage_rate: float
    ot_rate: float
    regular_minutes: int = 0
    ot_minutes: int = 0
    record_count: int = 0

    @property
    def regular_hours(self) -> float:
        return self.regular_minutes / 60

    @property
    def ot_hours(self) -> float:
        return self.ot_minutes / 60

    @property
    def regular_cost(self) -> float:
        return self.regular_hours * self.wage_rate

    @property
    def ot_cost(self) -> float:
        # ot_rate는 배수가 아니라 시간당 금액
        return self.ot_hours * self.ot_rate

    @property
    def total_cost(self) -> float:
        return self.regular_cost + self.ot_cost


@dataclass
class CostTotals:
    regular_hours: float = 0.0
    ot_hours: float = 0.0
    regular_cost: float = 0.0
    ot_cost: float = 0.0
    total_cost: float = 0.0

    def add(self, group: CostGroup):
        self.regular_hours += group.regular_hours
        self.ot_hours += group.ot_hours
        self.regular_cost += group.regular_cost
        self.ot_cost += group.ot_cost
        self.total_cost += group.total_cost


@dataclass
class CostcenterRollup:
    costcenter: str
    groups: list[CostGroup] = field(default_factory=list)
    totals: CostTotals = field(default_factory=CostTotals)
    machine_count: int = 0
    user_count: int = 0


@dataclass
class CostSummary:
    groups: list[CostGroup]
    by_costcenter: list[CostcenterRollup]
    totals: CostTotals


def resolve_rates(wage_rates: Mapping[str, WageRate | dict], email: str) -> WageRate:
    """조회 결과에서 사용자 임금을 꺼낸다. 없거나 0이면 기본값."""
    found = wage_rates.get(email)
    if found is None:
        return DEFAULT_RATES
    if isinstance(found, dict):
        wage, ot = found.get("wage_rate"), found.get("ot_rate")
    else:
        wage, ot = found.wage_rate, found.ot_rate
    return WageRate(
        wage_rate=wage or DEFAULT_WAGE_RATE,
        ot_rate=ot or DEFAULT_OT_RATE,
    )


def group_records(records: Iterable) -> dict[tuple[str, str], list]:
    """machine_id가 없는 기록은 집계에서 제외한다."""
    grouped: dict[tuple[str, str], list] = {}
    for record in records:
        machine_id = getattr(record, "machine_id", None)
        if not machine_id:
            continue
        key = (machine_id, getattr(record, "user_email", None) or "")
        grouped.setdefault(key, []).append(record)
    return grouped


def summarize_costs(
    records: Iterable,
    costcenters: Mapping[str, str],
    wage_rates: Mapping[str, WageRate | dict],
) -> CostSummary:
    groups: list[CostGroup] = []
    for (machine_id, user_email), members in group_records(records).items():
        rates = resolve_rates(wage_rates, user_email)
        group = CostGroup(
            machine_id=machine_id,
            user_email=user_email,
            user_name=next((r.user_name for r in members if getattr(r, "user_name", "")), ""),
            costcenter=costcenters.get(machine_id) or DEFAULT_COSTCENTER,
            wage_rate=rates.wage_rate,
            ot_rate=rates.ot_rate,
        )
        for record in members:
            mins = record_minutes(record)
            group.regular_minutes += mins.regular_minutes
            group.ot_minutes += mins.ot_minutes
            group.record_count += 1
        groups.append(group)

    rollups: dict[str, CostcenterRollup] = {}
    totals = CostTotals()
    for group in groups:
        rollup = rollups.setdefault(group.costcenter, CostcenterRollup(group.costcenter))
        rollup.groups.append(group)
        rollup.totals.add(group)
        totals.add(group)

    for rollup in rollups.values():
        rollup.machine_count = len({g.machine_id for g in rollup.groups})
        rollup.user_count = len({g.user_email for g in rollup.groups})

    return CostSummary(groups=groups, by_costcenter=list(rollups.values()), totals=totals)
