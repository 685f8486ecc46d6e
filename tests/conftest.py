"""pytest 공용 fixture.

모든 API 테스트는 in-memory SQLite DB를 사용하여 격리된다.
- client: TestClient (인증 없음)
- allowed_users: 허용 목록 시드 (user1: 임금 지정 + 전기 담당, user2: 임금 없음)
- auth_headers / second_user_headers / admin_headers: 로그인한 유저의 Authorization 헤더
"""

import os
import sys
from pathlib import Path

# settings는 import 시점에 만들어지므로 먼저 환경을 고정한다
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_EMAILS"] = '["admin@test.com"]'

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# src/ 디렉토리를 import path에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from main import app
from model.database import get_session
from model.user import AllowedUser


@pytest.fixture()
def session():
    """테스트마다 새 in-memory SQLite DB를 생성한다.

    StaticPool을 사용해야 모든 커넥션이 같은 in-memory DB를 공유한다.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


@pytest.fixture()
def client(session):
    """get_session을 테스트용 세션으로 오버라이드한 TestClient."""

    def _override():
        yield session

    app.dependency_overrides[get_session] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def allowed_users(session):
    users = [
        AllowedUser(
            email="user1@test.com",
            user_name="Somchai",
            position="operator",
            is_electrical_responsible=True,
            wage_rate=400,
            ot_rate=600,
        ),
        AllowedUser(email="user2@test.com", user_name="Malee"),
    ]
    for u in users:
        session.add(u)
    session.commit()
    return users


def _register_and_login(client: TestClient, email: str, password: str) -> dict:
    """유저를 가입시키고 로그인하여 Authorization 헤더를 반환한다."""
    client.post(
        "/auth/register",
        json={"email": email, "password": password},
    )
    resp = client.post(
        "/auth/login",
        data={"username": email, "password": password},
    )
    token = resp.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(client, allowed_users):
    """첫 번째 테스트 유저(Somchai)의 인증 헤더."""
    return _register_and_login(client, "user1@test.com", "pass1234")


@pytest.fixture()
def second_user_headers(client, allowed_users):
    """두 번째 테스트 유저(Malee)의 인증 헤더."""
    return _register_and_login(client, "user2@test.com", "pass5678")


@pytest.fixture()
def admin_headers(client):
    """허용 목록이 아니라 ADMIN_EMAILS로 통과하는 관리자."""
    return _register_and_login(client, "admin@test.com", "admin1234")
