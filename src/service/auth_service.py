from dataclasses import dataclass

from loguru import logger
from sqlmodel import Session, select

from core.exceptions import DuplicateEmail, InvalidCredentials, UserNotAllowed
from core.security import create_access_token, hash_password, is_admin_email, verify_password
from model.user import AllowedUser, User


@dataclass(frozen=True)
class CurrentUser:
    id: int
    email: str
    user_name: str
    is_admin: bool = False


def check_user_allowed(email: str, session: Session) -> AllowedUser | None:
    """허용 목록에서 이메일을 찾는다. 없으면 None."""
    return session.exec(
        select(AllowedUser).where(AllowedUser.email == email.strip().lower())
    ).first()


def resolve_access(user: User, session: Session) -> CurrentUser:
    """접근 게이트: 관리자 이메일이거나 허용 목록에 있어야 한다.

    표시 이름은 허용 목록의 user_name → (관리자면 "Admin") → 이메일 앞부분 순.
    """
    email = user.email.lower()
    entry = check_user_allowed(email, session)
    admin = is_admin_email(email)

    if admin:
        name = (entry.user_name if entry else None) or "Admin"
    elif entry:
        name = entry.user_name or email.split("@")[0]
    else:
        logger.warning(f"[auth] 허용되지 않은 사용자 접근: {email}")
        raise UserNotAllowed(f"{email} 은(는) 아직 접근이 허용되지 않았습니다")

    return CurrentUser(id=user.id, email=email, user_name=name, is_admin=admin)


def register(email: str, password: str, session: Session) -> User:
    """새 계정을 만든다.

    1. 허용 목록(또는 관리자 이메일)에 있는지 확인
    2. 이메일 중복 확인
    3. 패스워드를 bcrypt로 해싱해 저장
    """
    email = email.strip().lower()
    if not is_admin_email(email) and check_user_allowed(email, session) is None:
        raise UserNotAllowed(f"{email} 은(는) 아직 접근이 허용되지 않았습니다")

    existing = session.exec(select(User).where(User.email == email)).first()
    if existing:
        raise DuplicateEmail

    user = User(email=email, hashed_password=hash_password(password))
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"[auth] 계정 생성: {email}")
    return user


def login(email: str, password: str, session: Session) -> str:
    """이메일/패스워드를 확인하고 JWT를 반환한다. 실패 시 InvalidCredentials."""
    user = session.exec(select(User).where(User.email == email.strip().lower())).first()
    if not user or not verify_password(password, user.hashed_password):
        raise InvalidCredentials

    return create_access_token(user.email)


def list_electrical_responsible(session: Session) -> list[AllowedUser]:
    """전기 담당자로 지정된 사용자 목록 (이름순). 작업 등록 폼의 선택지로 쓴다."""
    return list(
        session.exec(
            select(AllowedUser)
            .where(AllowedUser.is_electrical_responsible == True)  # noqa: E712
            .order_by(AllowedUser.user_name)
        ).all()
    )
