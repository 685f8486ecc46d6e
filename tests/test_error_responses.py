"""커스텀 에러 응답 형식 검증 테스트.

모든 에러가 {"error_code": "...", "message": "..."} 형식인지 확인한다.
"""

from sqlalchemy.exc import OperationalError

from service import job_service


def test_error_has_error_code_and_message(client):
    """에러 응답에 error_code + message 필드가 존재한다."""
    resp = client.post(
        "/auth/login",
        data={"username": "nobody@test.com", "password": "x"},
    )
    data = resp.json()
    assert "error_code" in data, f"error_code 필드 없음: {data}"
    assert "message" in data, f"message 필드 없음: {data}"
    assert isinstance(data["error_code"], str)
    assert isinstance(data["message"], str)


def test_invalid_token_error_format(client):
    """잘못된 토큰 → 401 + INVALID_TOKEN 형식."""
    resp = client.get(
        "/auth/me",
        headers={"Authorization": "Bearer invalid.token.here"},
    )
    assert resp.status_code == 401
    data = resp.json()
    assert data["error_code"] == "INVALID_TOKEN"
    assert "message" in data


def test_not_found_error_format(client, auth_headers):
    resp = client.get("/api/jobs/9999", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "JOB_NOT_FOUND"


def test_forbidden_error_format(client, auth_headers):
    """관리자 전용 API를 일반 사용자가 호출 → 403 FORBIDDEN."""
    resp = client.get("/api/admin/allowed-users", headers=auth_headers)
    assert resp.status_code == 403
    assert resp.json()["error_code"] == "FORBIDDEN"


def test_extra_fields_are_merged_into_body(client, auth_headers):
    """중복 날짜 오류는 conflict 정보를 함께 싣는다."""
    body = {"machineId": "M1", "date": "2024-05-01", "startTime": "08:00", "endTime": "17:00"}
    client.post("/api/time-records/", headers=auth_headers, json=body)

    resp = client.post("/api/time-records/", headers=auth_headers, json=body)
    data = resp.json()
    assert set(data) == {"error_code", "message", "conflict"}


def test_store_failure_maps_to_503(client, auth_headers, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("select", {}, Exception("store down"))

    monkeypatch.setattr(job_service, "fetch_jobs", broken)

    resp = client.get("/api/jobs/", headers=auth_headers)
    assert resp.status_code == 503
    assert resp.json()["error_code"] == "STORE_ERROR"
