from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel, EmailStr
from sqlmodel import Session

from core.dependencies import get_current_user
from model.database import get_session
from service import auth_service
from service.auth_service import CurrentUser

router = APIRouter(prefix="/auth", tags=["auth"])


# --- 요청/응답 스키마 ---

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterResponse(BaseModel):
    id: int
    email: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: int
    email: str
    user_name: str
    is_admin: bool


# --- 엔드포인트 ---

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, session: Session = Depends(get_session)):
    """회원가입: 허용 목록에 있는 이메일만 계정을 만들 수 있다."""
    user = auth_service.register(req.email, req.password, session)
    return RegisterResponse(id=user.id, email=user.email)


@router.post("/login", response_model=TokenResponse)
def login(form: OAuth2PasswordRequestForm = Depends(), session: Session = Depends(get_session)):
    """로그인: 이메일 + 패스워드 → JWT 토큰 반환.

    OAuth2 표준 필드명이 username이므로 form.username에 이메일을 넣는다.
    """
    token = auth_service.login(form.username, form.password, session)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: CurrentUser = Depends(get_current_user)):
    """현재 로그인한 사용자 정보 조회. (토큰 + 허용 목록 필수)"""
    return UserResponse(
        id=current_user.id,
        email=current_user.email,
        user_name=current_user.user_name,
        is_admin=current_user.is_admin,
    )
