from __future__ import annotations

import re
import threading

from fastapi.testclient import TestClient

from payslip_api.core.config import settings
from payslip_api.db.session import Base
from payslip_api.domains.payslips.store import PayslipStore
from payslip_api.main import app


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Payslip API running"


def test_create_payslip(client, payload):
    response = client.post("/api/payslips", json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Payslip generated successfully"
    payslip = body["payslip"]
    assert re.fullmatch(r"PSL-JANUARY2024-\d{3}", payslip["payslip_id"])
    assert payslip["net_salary"] == 66800.0
    assert payslip["status"] == "Generated"
    assert payslip["date_of_joining"] == "2022-03-01"


def test_create_then_fetch(client, payload):
    created = client.post("/api/payslips", json=payload).json()["payslip"]

    response = client.get(f"/api/payslips/{created['payslip_id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_validation_error_names_first_bad_field(client, make_payload):
    response = client.post("/api/payslips", json=make_payload(employee_id="ATS0000", uan_no="1"))

    assert response.status_code == 400
    assert "Employee ID" in response.json()["error"]


def test_missing_field_rejected(client, payload):
    del payload["employee_email"]

    response = client.post("/api/payslips", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required field: employee_email"}


def test_string_amount_rejected(client, make_payload):
    response = client.post("/api/payslips", json=make_payload(basic_salary="50000"))

    assert response.status_code == 400
    assert response.json()["error"] == "Basic salary must be a number greater than 0"


def test_non_object_body_rejected(client):
    response = client.post("/api/payslips", json=["not", "a", "payslip"])

    assert response.status_code == 400
    assert "error" in response.json()


def test_duplicate_rejected(client, payload):
    first = client.post("/api/payslips", json=payload)
    second = client.post("/api/payslips", json=payload)

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"error": "Payslip already exists for employee ATS0001 for January 2024"}
    assert len(client.get("/api/payslips/history", params={"search": "ATS0001"}).json()) == 1


def test_payslip_id_collision_rejected(client, make_payload, sequence_random):
    app.state.store = PayslipStore(app.state.store.engine, rng=sequence_random(473, 473))

    first = client.post("/api/payslips", json=make_payload(employee_id="ATS0001"))
    second = client.post("/api/payslips", json=make_payload(employee_id="ATS0002"))

    assert first.status_code == 201
    assert first.json()["payslip"]["payslip_id"] == "PSL-JANUARY2024-473"
    assert second.status_code == 400
    assert second.json() == {"error": "Payslip ID PSL-JANUARY2024-473 is already in use, please try again"}
    assert len(client.get("/api/payslips/history").json()) == 1


def test_concurrent_duplicate_posts_create_one_payslip(tmp_path, monkeypatch, payload):
    monkeypatch.setattr(settings, "database_url", f"sqlite:///{tmp_path / 'payslips.db'}")
    barrier = threading.Barrier(2)
    statuses = []

    with TestClient(app) as test_client:

        def submit():
            barrier.wait()
            statuses.append(test_client.post("/api/payslips", json=payload).status_code)

        threads = [threading.Thread(target=submit) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        history = test_client.get("/api/payslips/history", params={"search": "ATS0001"}).json()

    assert sorted(statuses) == [201, 400]
    assert len(history) == 1


def test_get_unknown_payslip(client):
    response = client.get("/api/payslips/PSL-JANUARY2024-123")

    assert response.status_code == 404
    assert response.json() == {"error": "Payslip not found"}


def test_history_empty(client):
    response = client.get("/api/payslips/history")

    assert response.status_code == 200
    assert response.json() == []


def test_history_filters_and_order(client, make_payload):
    client.post("/api/payslips", json=make_payload(employee_id="ATS0002", employee_name="Jane Roe"))
    client.post("/api/payslips", json=make_payload())
    client.post("/api/payslips", json=make_payload(month_year="March 2023"))

    everything = client.get("/api/payslips/history").json()
    assert [(p["month_year"], p["employee_id"]) for p in everything] == [
        ("January 2024", "ATS0001"),
        ("January 2024", "ATS0002"),
        ("March 2023", "ATS0001"),
    ]

    by_name = client.get("/api/payslips/history", params={"search": "jane"}).json()
    assert [p["employee_id"] for p in by_name] == ["ATS0002"]

    by_period = client.get("/api/payslips/history", params={"month": "3", "year": "2023"}).json()
    assert [p["month_year"] for p in by_period] == ["March 2023"]


def test_history_ignores_blank_filters(client, payload):
    client.post("/api/payslips", json=payload)

    response = client.get("/api/payslips/history?search=&month=&year=")

    assert response.status_code == 200
    assert len(response.json()) == 1


def test_history_rejects_bad_filters(client):
    assert client.get("/api/payslips/history", params={"month": "13"}).status_code == 400
    assert client.get("/api/payslips/history", params={"month": "jan"}).json() == {"error": "Month must be a number"}
    assert client.get("/api/payslips/history", params={"year": "24"}).status_code == 400


def test_storage_failure_is_not_leaked(client, payload):
    Base.metadata.drop_all(bind=app.state.store.engine)

    created = client.post("/api/payslips", json=payload)
    listed = client.get("/api/payslips/history")

    assert created.status_code == 500
    assert created.json() == {"error": "Internal server error"}
    assert listed.status_code == 500
    assert listed.json() == {"error": "Internal server error"}


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["dbStatus"] == "connected"
    assert body["timestamp"]
    assert body["uptime"] >= 0
