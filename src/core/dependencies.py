from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session, select

from core.exceptions import Forbidden, InvalidToken
from core.security import verify_token
from model.database import get_session
from model.user import User
from service.auth_service import CurrentUser, resolve_access
from service.workspace import WorkspaceState

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> CurrentUser:
    """JWT 토큰에서 현재 사용자를 추출하고 접근 게이트를 통과시킨다.

    흐름:
    1. OAuth2PasswordBearer가 헤더에서 토큰 추출
    2. verify_token으로 서명 검증 + 만료 확인
    3. payload["sub"] (이메일)로 계정 조회
    4. 관리자 이메일 또는 허용 목록 확인 (없으면 403 USER_NOT_ALLOWED)
    """
    payload = verify_token(token)
    if not payload or not payload.get("sub"):
        raise InvalidToken

    user = session.exec(select(User).where(User.email == payload["sub"])).first()
    if not user:
        raise InvalidToken("계정을 찾을 수 없습니다")

    return resolve_access(user, session)


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise Forbidden("관리자만 사용할 수 있습니다")
    return current_user


def get_workspace(request: Request) -> WorkspaceState:
    """lifespan에서 만든 앱 단위 캐시."""
    return request.app.state.workspace
