from __future__ import annotations

import pytest

from src.hr_ledger.hr_ledger.main import create_app


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, *, user_id: int, role: str, employee_id=None):
    with client.session_transaction() as s:
        s.clear()
        s["user_id"] = user_id
        s["role"] = role
        if employee_id is not None:
            s["employee_id"] = employee_id


def test_requires_login(client):
    res = client.get("/api/attendance/today")
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_check_in_then_duplicate(client):
    login(client, user_id=10, role="user", employee_id=100)

    res = client.post("/api/attendance/checkin", json={"location": "HQ"})
    assert res.status_code == 201
    body = res.get_json()
    assert body["success"] is True
    assert body["data"]["status"] == "Present"
    assert body["data"]["checkIn"] == "2025-03-01T09:00:00"
    assert body["data"]["computedHours"] == "0.00"

    res = client.post("/api/attendance/checkin", json={})
    assert res.status_code == 409
    assert res.get_json()["error"]["code"] == "ALREADY_CHECKED_IN"


def test_leave_flow_over_http(client):
    login(client, user_id=10, role="user", employee_id=100)
    res = client.post(
        "/api/leaves",
        json={"leaveType": "Annual", "startDate": "2025-03-10", "endDate": "2025-03-12", "reason": "Trip"},
    )
    assert res.status_code == 201
    leave_id = res.get_json()["data"]["leaveId"]
    assert res.get_json()["data"]["totalDays"] == 3

    res = client.post(
        "/api/leaves",
        json={"leaveType": "Annual", "startDate": "2025-03-12", "endDate": "2025-03-14", "reason": "More"},
    )
    assert res.status_code == 409
    assert res.get_json()["error"]["code"] == "OVERLAPPING_LEAVE"

    res = client.put(f"/api/leaves/{leave_id}/status", json={"status": "Approved"})
    assert res.status_code == 403

    login(client, user_id=2, role="hr")
    assert client.get("/api/notifications/unread-count").get_json()["data"]["unreadCount"] == 1

    res = client.put(f"/api/leaves/{leave_id}/status", json={"status": "Approved"})
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "Approved"
    assert res.get_json()["data"]["approvedBy"] == 2


def test_leave_balance_shape(client):
    login(client, user_id=10, role="user", employee_id=100)
    data = client.get("/api/leaves/balance?year=2025").get_json()["data"]

    assert data["balance"]["Annual"] == {"total": 21, "used": 0, "remaining": 21}
    assert data["totalUsed"] == 0


def test_bad_dates_are_validation_errors(client):
    login(client, user_id=10, role="user", employee_id=100)
    res = client.post(
        "/api/leaves", json={"leaveType": "Annual", "startDate": "10/03/2025", "endDate": "2025-03-12", "reason": "x"}
    )
    assert res.status_code == 400
    assert res.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_payroll_errors_map_to_status_codes(client):
    login(client, user_id=1, role="admin")

    res = client.post("/api/payroll/generate", json={"employeeId": 100, "month": 13, "year": 2025})
    assert res.status_code == 400

    res = client.get("/api/payroll/42")
    assert res.status_code == 404
    assert res.get_json()["error"]["code"] == "NOT_FOUND"

    res = client.post("/api/payroll/generate", json={"employeeId": 101, "month": 9, "year": 2025})
    assert res.status_code == 201
    assert res.get_json()["data"]["netSalary"] == "3000.00"

    res = client.post("/api/payroll/generate", json={"employeeId": 101, "month": 9, "year": 2025})
    assert res.status_code == 409
    assert res.get_json()["error"]["code"] == "ALREADY_EXISTS"


def test_employee_sees_only_own_payroll(client):
    login(client, user_id=1, role="admin")
    client.post("/api/payroll/generate", json={"employeeId": 101, "month": 9, "year": 2025})
    client.post("/api/payroll/generate", json={"employeeId": 100, "month": 9, "year": 2025})

    login(client, user_id=10, role="user", employee_id=100)
    body = client.get("/api/payroll").get_json()
    assert [r["employeeId"] for r in body["data"]] == [100]
    assert body["meta"]["pagination"]["count"] == 1


def test_employee_resolved_from_user_when_session_lacks_it(client):
    login(client, user_id=11, role="user")

    res = client.post("/api/attendance/checkin", json={})
    assert res.status_code == 201
    assert res.get_json()["data"]["employeeId"] == 101

    res = client.get("/api/attendance/today")
    assert res.get_json()["data"]["employeeId"] == 101


def test_reviewer_without_profile_cannot_check_in(client):
    login(client, user_id=1, role="admin")
    res = client.post("/api/attendance/checkin", json={})
    assert res.status_code == 404


def test_non_text_fields_are_validation_errors(client):
    login(client, user_id=10, role="user", employee_id=100)

    res = client.post(
        "/api/leaves", json={"leaveType": "Annual", "startDate": "2025-03-10", "endDate": "2025-03-12", "reason": 5}
    )
    assert res.status_code == 400
    assert res.get_json()["error"]["code"] == "VALIDATION_ERROR"

    res = client.post("/api/attendance/checkin", json={"location": {"lat": 1, "lng": 2}})
    assert res.status_code == 400
    assert res.get_json()["error"]["code"] == "VALIDATION_ERROR"
    assert client.get("/api/attendance/today").get_json()["data"] is None

    res = client.post("/api/leaves", json={"leaveType": "Annual", "startDate": 20250310, "endDate": "2025-03-12"})
    assert res.status_code == 400


def test_broadcast_rejects_non_text_title(client):
    login(client, user_id=1, role="admin")
    res = client.post("/api/notifications/broadcast", json={"recipientIds": [10], "title": ["x"], "message": "Hi"})

    assert res.status_code == 400
    assert res.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_mark_rejects_offset_timestamps_and_foreign_days(client):
    login(client, user_id=2, role="hr")

    res = client.post(
        "/api/attendance/mark",
        json={
            "employeeId": 100,
            "date": "2025-06-02",
            "status": "Present",
            "checkIn": "2025-06-02T09:00:00+07:00",
            "checkOut": "2025-06-02T17:00:00",
        },
    )
    assert res.status_code == 400
    assert res.get_json()["error"]["code"] == "VALIDATION_ERROR"

    res = client.post(
        "/api/attendance/mark",
        json={
            "employeeId": 100,
            "date": "2025-06-03",
            "status": "Present",
            "checkIn": "2025-06-09T09:00:00",
            "checkOut": "2025-06-10T17:00:00",
        },
    )
    assert res.status_code == 400

    res = client.post(
        "/api/attendance/mark",
        json={
            "employeeId": 100,
            "date": "2025-06-03",
            "status": "Present",
            "checkIn": "2025-06-03T09:00:00",
            "checkOut": "2025-06-03T17:30:00",
        },
    )
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["workDate"] == "2025-06-03"
    assert data["computedHours"] == "8.50"
