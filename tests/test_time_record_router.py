"""근무 시간 기록 API 테스트."""


def _body(**overrides):
    body = {"machineId": "m1", "date": "2024-05-01", "startTime": "08:00", "endTime": "17:00"}
    body.update(overrides)
    return body


class TestCreate:
    def test_create_camel_case(self, client, auth_headers):
        resp = client.post("/api/time-records/", headers=auth_headers, json=_body())

        assert resp.status_code == 201
        data = resp.json()
        assert data["machine_id"] == "M1"
        assert data["date"] == "2024-05-01"
        assert data["regular_minutes"] == 480
        assert data["ot_minutes"] == 0
        assert data["break_minutes"] == 60
        assert data["work_minutes"] == 480
        assert data["duration"] == "8시간 0분"
        assert data["user_email"] == "user1@test.com"
        assert data["user_name"] == "Somchai"

    def test_create_snake_case(self, client, auth_headers):
        body = {"machine_id": "M1", "date": "2024-05-01", "start_time": "8", "end_time": "20:00"}
        data = client.post("/api/time-records/", headers=auth_headers, json=body).json()

        assert data["start_time"] == "08:00"
        assert data["regular_minutes"] == 480
        assert data["ot_minutes"] == 180

    def test_loose_times_are_normalized(self, client, auth_headers):
        resp = client.post(
            "/api/time-records/",
            headers=auth_headers,
            json=_body(startTime="830", endTime="17:"),
        )
        data = resp.json()
        assert data["start_time"] == "08:30"
        assert data["end_time"] == "17:00"
        assert data["regular_minutes"] == 450
        assert data["break_minutes"] == 60

    def test_duplicate_day(self, client, auth_headers, second_user_headers):
        client.post("/api/time-records/", headers=auth_headers, json=_body())

        # 다른 기계, 다른 사용자라도 같은 날짜면 거부
        resp = client.post(
            "/api/time-records/",
            headers=second_user_headers,
            json=_body(machineId="M2", startTime="18:00", endTime="20:00"),
        )
        assert resp.status_code == 409
        data = resp.json()
        assert data["error_code"] == "DUPLICATE_DAY"
        assert data["conflict"]["machine_id"] == "M1"
        assert data["conflict"]["date"] == "2024-05-01"
        assert data["conflict"]["start_time"] == "08:00"
        assert data["conflict"]["end_time"] == "17:00"

        ok = client.post(
            "/api/time-records/", headers=second_user_headers, json=_body(date="2024-05-02")
        )
        assert ok.status_code == 201

    def test_invalid_time(self, client, auth_headers):
        resp = client.post("/api/time-records/", headers=auth_headers, json=_body(startTime="25:00"))
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_TIME_FORMAT"

    def test_end_before_start(self, client, auth_headers):
        resp = client.post(
            "/api/time-records/",
            headers=auth_headers,
            json=_body(startTime="17:00", endTime="08:00"),
        )
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_TIME_RANGE"

    def test_equal_times(self, client, auth_headers):
        resp = client.post(
            "/api/time-records/",
            headers=auth_headers,
            json=_body(startTime="08:00", endTime="0800"),
        )
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_TIME_RANGE"

    def test_missing_field(self, client, auth_headers):
        resp = client.post("/api/time-records/", headers=auth_headers, json=_body(machineId=""))
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "MISSING_FIELD"

        body = _body()
        del body["endTime"]
        resp = client.post("/api/time-records/", headers=auth_headers, json=body)
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "MISSING_FIELD"

    def test_failed_create_leaves_nothing(self, client, auth_headers):
        client.post("/api/time-records/", headers=auth_headers, json=_body(startTime="abc"))
        data = client.get("/api/time-records/", headers=auth_headers).json()
        assert data["records"] == []


class TestListAndDelete:
    def test_list_with_totals(self, client, auth_headers, second_user_headers):
        client.post("/api/time-records/", headers=auth_headers, json=_body())
        client.post(
            "/api/time-records/",
            headers=second_user_headers,
            json=_body(date="2024-05-02", endTime="20:00"),
        )

        data = client.get("/api/time-records/", headers=auth_headers).json()
        assert [r["date"] for r in data["records"]] == ["2024-05-02", "2024-05-01"]
        assert data["regular_minutes"] == 960
        assert data["ot_minutes"] == 180
        assert data["break_minutes"] == 120

        by_name = client.get("/api/time-records/?user_name=som", headers=auth_headers).json()
        assert [r["user_name"] for r in by_name["records"]] == ["Somchai"]

        ranged = client.get(
            "/api/time-records/?start_date=2024-05-02&end_date=2024-05-31",
            headers=auth_headers,
        ).json()
        assert [r["date"] for r in ranged["records"]] == ["2024-05-02"]

        mine = client.get("/api/time-records/?mine=true", headers=second_user_headers).json()
        assert [r["user_email"] for r in mine["records"]] == ["user2@test.com"]

    def test_delete(self, client, auth_headers):
        record = client.post("/api/time-records/", headers=auth_headers, json=_body()).json()

        resp = client.delete(f"/api/time-records/{record['id']}", headers=auth_headers)
        assert resp.status_code == 200

        resp = client.delete(f"/api/time-records/{record['id']}", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json()["error_code"] == "TIME_RECORD_NOT_FOUND"

        # 삭제 후 같은 날짜에 다시 기록할 수 있다
        again = client.post("/api/time-records/", headers=auth_headers, json=_body(machineId="M2"))
        assert again.status_code == 201
