"""인증 API (register, login, me) + 허용 목록 게이트 테스트."""

from sqlmodel import select

from model.user import AllowedUser


class TestRegister:
    def test_register_success(self, client, allowed_users):
        """허용 목록의 이메일 → 201 + id, email 반환."""
        resp = client.post(
            "/auth/register",
            json={"email": "User1@Test.com", "password": "pass1234"},
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["email"] == "user1@test.com"
        assert "id" in data

    def test_register_not_allowed(self, client):
        """허용 목록에 없는 이메일 → 403 USER_NOT_ALLOWED."""
        resp = client.post(
            "/auth/register",
            json={"email": "stranger@test.com", "password": "pass1234"},
        )
        assert resp.status_code == 403
        assert resp.json()["error_code"] == "USER_NOT_ALLOWED"

    def test_register_admin_without_allow_list(self, client):
        resp = client.post(
            "/auth/register",
            json={"email": "admin@test.com", "password": "admin1234"},
        )
        assert resp.status_code == 201

    def test_register_duplicate_email(self, client, allowed_users):
        """중복 이메일 → 409 DUPLICATE_EMAIL."""
        payload = {"email": "user2@test.com", "password": "pass1234"}
        client.post("/auth/register", json=payload)

        resp = client.post("/auth/register", json=payload)
        assert resp.status_code == 409
        assert resp.json()["error_code"] == "DUPLICATE_EMAIL"

    def test_register_invalid_email(self, client):
        """잘못된 이메일 형식 → 422 (pydantic 검증)."""
        resp = client.post(
            "/auth/register",
            json={"email": "not-an-email", "password": "pass1234"},
        )
        assert resp.status_code == 422


class TestLogin:
    def test_login_success(self, client, allowed_users):
        """정상 로그인 → 200 + access_token 반환."""
        client.post(
            "/auth/register",
            json={"email": "user1@test.com", "password": "pass1234"},
        )
        resp = client.post(
            "/auth/login",
            data={"username": "user1@test.com", "password": "pass1234"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"

    def test_login_wrong_password(self, client, allowed_users):
        """잘못된 패스워드 → 401 INVALID_CREDENTIALS."""
        client.post(
            "/auth/register",
            json={"email": "user1@test.com", "password": "correct"},
        )
        resp = client.post(
            "/auth/login",
            data={"username": "user1@test.com", "password": "wrong"},
        )
        assert resp.status_code == 401
        assert resp.json()["error_code"] == "INVALID_CREDENTIALS"

    def test_login_nonexistent_email(self, client):
        """존재하지 않는 이메일 → 401 INVALID_CREDENTIALS."""
        resp = client.post(
            "/auth/login",
            data={"username": "nobody@test.com", "password": "pass"},
        )
        assert resp.status_code == 401
        assert resp.json()["error_code"] == "INVALID_CREDENTIALS"


class TestMe:
    def test_me_uses_allow_list_name(self, client, auth_headers):
        resp = client.get("/auth/me", headers=auth_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["email"] == "user1@test.com"
        assert data["user_name"] == "Somchai"
        assert data["is_admin"] is False

    def test_me_admin(self, client, admin_headers):
        data = client.get("/auth/me", headers=admin_headers).json()
        assert data["is_admin"] is True
        assert data["user_name"] == "Admin"

    def test_me_without_token(self, client):
        """토큰 없이 /me → 401."""
        resp = client.get("/auth/me")
        assert resp.status_code == 401

    def test_revoked_user_blocked_with_valid_token(self, client, session, auth_headers):
        """허용 목록에서 빠지면 토큰이 살아 있어도 403."""
        entry = session.exec(
            select(AllowedUser).where(AllowedUser.email == "user1@test.com")
        ).one()
        session.delete(entry)
        session.commit()

        resp = client.get("/auth/me", headers=auth_headers)
        assert resp.status_code == 403
        assert resp.json()["error_code"] == "USER_NOT_ALLOWED"
