from datetime import UTC, datetime, timedelta

import jwt
from pwdlib.hashers.bcrypt import BcryptHasher

from core.config import settings

# --- 패스워드 해싱 ---
pwd_hash = BcryptHasher()


def hash_password(plain: str) -> str:
    """평문 패스워드 → bcrypt 해시."""
    return pwd_hash.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_hash.verify(plain, hashed)


# --- JWT 토큰 ---
# sub에는 소문자 이메일을 넣는다. 허용 목록 검사는 토큰이 아니라 요청마다 DB에서 한다
# (허용이 취소되면 토큰이 살아 있어도 바로 막히도록).


def create_access_token(email: str, expires_delta: timedelta | None = None) -> str:
    """이메일을 sub로 담은 액세스 토큰을 만든다.

    Args:
        email: 로그인한 사용자 이메일
        expires_delta: 만료 시간. None이면 설정값 사용.
    """
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    )
    payload = {"sub": email.lower(), "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> dict | None:
    """토큰을 검증하고 payload를 반환한다. 유효하지 않거나 만료되면 None."""
    try:
        return jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.PyJWTError:
        return None


def is_admin_email(email: str | None) -> bool:
    return bool(email) and email.strip().lower() in settings.admin_emails
