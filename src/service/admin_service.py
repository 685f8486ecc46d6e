from loguru import logger
from sqlmodel import Session, select

from model.costcenter import MachineCostcenter
from model.user import AllowedUser


def list_allowed_users(session: Session) -> list[AllowedUser]:
    return list(session.exec(select(AllowedUser).order_by(AllowedUser.email)).all())


def upsert_allowed_user(
    email: str,
    session: Session,
    user_name: str | None = None,
    position: str | None = None,
    is_electrical_responsible: bool = False,
    wage_rate: float | None = None,
    ot_rate: float | None = None,
) -> AllowedUser:
    """허용 목록에 추가하거나, 이미 있으면 전달된 값으로 덮어쓴다."""
    email = email.strip().lower()
    entry = session.exec(select(AllowedUser).where(AllowedUser.email == email)).first()
    if entry is None:
        entry = AllowedUser(email=email)

    entry.user_name = user_name
    entry.position = position
    entry.is_electrical_responsible = is_electrical_responsible
    entry.wage_rate = wage_rate
    entry.ot_rate = ot_rate

    session.add(entry)
    session.commit()
    session.refresh(entry)
    logger.info(f"[admin] 허용 목록 갱신: {email}")
    return entry


def list_costcenters(session: Session) -> list[MachineCostcenter]:
    return list(session.exec(select(MachineCostcenter).order_by(MachineCostcenter.machine_id)).all())


def set_costcenter(machine_id: str, costcenter: str, session: Session) -> MachineCostcenter:
    machine_id = machine_id.strip().upper()
    row = session.exec(
        select(MachineCostcenter).where(MachineCostcenter.machine_id == machine_id)
    ).first()
    if row is None:
        row = MachineCostcenter(machine_id=machine_id, costcenter=costcenter)
    else:
        row.costcenter = costcenter

    session.add(row)
    session.commit()
    session.refresh(row)
    logger.info(f"[admin] costcenter 지정: {machine_id} → {costcenter}")
    return row
