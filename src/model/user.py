from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """로그인 계정. 접근 허용 여부는 AllowedUser가 결정한다."""

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class AllowedUser(SQLModel, table=True):
    """접근 허용 목록 + 사용자별 임금 정보.

    wage_rate, ot_rate는 시간당 금액이며 비어 있으면 기본값(350/525)으로 계산한다.
    ot_rate는 wage_rate의 배수가 아니라 독립된 시간당 금액이다.
    """

    __tablename__ = "allowed_user"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)  # 항상 소문자
    user_name: str | None = None
    position: str | None = None
    is_electrical_responsible: bool = False
    wage_rate: float | None = None
    ot_rate: float | None = None
