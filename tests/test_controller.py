from __future__ import annotations

from types import SimpleNamespace

import pytest
from flask import Flask

from attendance_gamification.core.enums import ConditionType
from attendance_gamification.gamification.controller import register


@pytest.fixture
def client(engine):
    engine.employees.add(1, "An")
    engine.employees.add(2, "Binh")
    engine.badges.define(1, "first_step", ConditionType.FIRST_CHECKIN.value, name="First Step")

    app = Flask(__name__)
    app.secret_key = "test"
    app.config["CRON_SECRET"] = "cron-123"
    container = SimpleNamespace(
        gamification_service=engine.service,
        settings_gateway=engine.settings,
        recalculation_service=engine.recalculation,
        daily_check_service=engine.daily_check,
    )
    register(app, container)
    return app.test_client()


def _login(client, user_id: int, role: str = "staff"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_profile_requires_login(client):
    assert client.get("/api/gamification/profile").status_code == 401


def test_profile_for_logged_in_employee(client):
    _login(client, 1)

    resp = client.get("/api/gamification/profile")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["employee_id"] == 1
    assert data["total_points"] == 0
    assert data["rank_icon"]


def test_staff_cannot_read_another_profile(client):
    _login(client, 1)

    assert client.get("/api/gamification/profile?employee_id=2").status_code == 403


def test_badges_with_progress(client):
    _login(client, 1)

    resp = client.get("/api/gamification/badges")

    assert resp.status_code == 200
    (badge,) = resp.get_json()["data"]
    assert badge["code"] == "first_step"
    assert badge["earned"] is False


def test_leaderboard_rejects_unknown_period(client):
    _login(client, 1)

    assert client.get("/api/gamification/leaderboard?period=weekly").status_code == 400
    resp = client.get("/api/gamification/leaderboard?period=alltime")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["period"] == "alltime"


def test_settings_are_admin_only(client):
    _login(client, 1)
    assert client.get("/api/gamification/settings").status_code == 403

    _login(client, 2, "admin")
    resp = client.put("/api/gamification/settings", json={"gamify_points_ot": 30, "work_start_time": "07:00"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["updated"] == ["gamify_points_ot"]
    assert client.get("/api/gamification/settings").get_json()["data"]["gamify_points_ot"] == "30"


def test_settings_update_rejects_unknown_timezone(client):
    _login(client, 2, "admin")

    resp = client.put("/api/gamification/settings", json={"gamify_timezone": "Mars/Olympus"})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_recalculate_single_employee(client):
    _login(client, 2, "admin")

    resp = client.post("/api/gamification/recalculate", json={"employee_id": 1})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["total_points"] == 0


def test_recalculate_everyone(client):
    _login(client, 2, "admin")

    resp = client.post("/api/gamification/recalculate", json={})

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"processed": 2, "failed": []}


def test_daily_check_requires_cron_secret(client):
    assert client.get("/api/gamification/daily-check").status_code == 401
    assert client.get("/api/gamification/daily-check", headers={"Authorization": "Bearer nope"}).status_code == 401

    resp = client.get("/api/gamification/daily-check", headers={"Authorization": "Bearer cron-123"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["processed"] == 2
