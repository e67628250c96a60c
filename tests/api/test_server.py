"""
API Surface Tests

Exercises the HTTP endpoints with in-memory requests.
"""

import pytest
from fastapi.testclient import TestClient

from carelog.api import server
from carelog.api.server import app

NOW = "2024-03-12T09:00:00+00:00"


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def records():
    return [
        {"id": "s1", "babyId": "baby_1", "type": "sleep",
         "startTime": "2024-03-11T22:00:00Z", "endTime": "2024-03-12T06:00:00Z"},
        {"id": "f1", "babyId": "baby_1", "type": "feed",
         "startTime": "2024-03-12T08:00:00Z", "amount": 120},
        {"id": "f2", "babyId": "baby_1", "type": "feed",
         "startTime": "2024-03-12T08:05:00Z", "amount": 60},
        {"id": "d1", "babyId": "baby_1", "type": "diaper",
         "startTime": "2024-03-12T08:30:00Z", "note": "pee"},
        {"id": "x1", "babyId": "baby_1", "type": "bath",
         "startTime": "2024-03-12T08:40:00Z"},
    ]


class TestHealth:
    def test_health_reports_online(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "online"}


class TestDayLayout:
    """POST /api/v1/layout/day"""

    def test_lays_out_valid_records(self, client, records):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12",
            "reference_now": NOW, "events": records,
        })
        assert response.status_code == 200
        layout = response.json()["layout"]

        ids = [i["event_id"] for i in layout["items"]]
        assert ids == ["s1", "f1", "f2", "d1"]
        assert layout["items"][0]["layer"] == "background"
        assert layout["feed_total"] == 180.0
        assert layout["is_today"] is True
        assert layout["now_minute"] == 540
        assert [g["time_label"] for g in layout["ghosts"]] == ["11:05"]

    def test_unknown_kind_is_rejected_not_fatal(self, client, records):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12",
            "reference_now": NOW, "events": records,
        })
        rejected = response.json()["rejected"]
        assert [r["record_id"] for r in rejected] == ["x1"]
        assert rejected[0]["code"] == "UNKNOWN_EVENT_KIND"

    def test_narrow_mode_assigns_lanes(self, client, records):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12", "mode": "narrow",
            "reference_now": NOW, "events": records,
        })
        layout = response.json()["layout"]
        assert layout["mode"] == "narrow"
        assert layout["ghosts"] == []
        lanes = {i["event_id"]: i["lane"] for i in layout["items"]}
        assert lanes["f1"] == 0
        assert lanes["f2"] == 1

    def test_config_override_applies(self, client, records):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12",
            "reference_now": NOW, "events": records,
            "config": {"showGhost": False},
        })
        assert response.json()["layout"]["ghosts"] == []

    def test_invalid_config_is_422(self, client, records):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12",
            "reference_now": NOW, "events": records,
            "config": {"ghostMode": "yesterday"},
        })
        assert response.status_code == 422

    def test_fractional_history_days_is_422(self, client, records):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12",
            "reference_now": NOW, "events": records,
            "config": {"historyDays": 2.5, "ghostMode": "historical-average"},
        })
        assert response.status_code == 422

    def test_string_flag_is_read_as_bool(self, client, records):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12",
            "reference_now": NOW, "events": records,
            "config": {"showGhost": "false"},
        })
        assert response.status_code == 200
        assert response.json()["layout"]["ghosts"] == []

    def test_out_of_range_config_reports_code(self, client, records):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12",
            "reference_now": NOW, "events": records,
            "config": {"history_days": 0},
        })
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_CONFIG"

    def test_dropped_amount_is_reported(self, client):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12", "reference_now": NOW,
            "events": [{"id": "f1", "babyId": "baby_1", "type": "feed",
                        "startTime": "2024-03-12T08:00:00Z", "amount": "lots"}],
        })
        warnings = response.json()["warnings"]
        assert [(w["event_id"], w["code"]) for w in warnings] == [("f1", "INVALID_MAGNITUDE")]

    def test_unknown_config_key_is_422(self, client):
        response = client.post("/api/v1/layout/day", json={
            "subject_id": "baby_1", "day": "2024-03-12",
            "config": {"colour": "blue"},
        })
        assert response.status_code == 422

    def test_missing_day_is_422(self, client):
        response = client.post("/api/v1/layout/day", json={"subject_id": "baby_1"})
        assert response.status_code == 422


class TestWeekLayout:
    def test_week_has_seven_columns_one_wide(self, client, records):
        response = client.post("/api/v1/layout/week", json={
            "subject_id": "baby_1", "selected_date": "2024-03-12",
            "reference_now": NOW, "events": records,
        })
        assert response.status_code == 200
        week = response.json()["week"]

        assert week["week_start"] == "2024-03-11"
        assert len(week["columns"]) == 7
        assert [c["mode"] for c in week["columns"]].count("wide") == 1
        assert week["columns"][1]["mode"] == "wide"
        # The overnight sleep shows on both Monday and Tuesday.
        assert [i["event_id"] for i in week["columns"][0]["items"]] == ["s1"]


class TestDaySummary:
    def test_summary_totals(self, client, records):
        response = client.post("/api/v1/summary/day", json={
            "subject_id": "baby_1", "day": "2024-03-12",
            "reference_now": NOW, "events": records,
        })
        assert response.status_code == 200
        summary = response.json()["summary"]

        assert summary["feed_count"] == 2
        assert summary["feed_total"] == 180.0
        assert summary["pee_count"] == 1
        assert summary["poop_count"] == 0
        # s1 started on Monday, so it is not counted here.
        assert summary["sleep_minutes"] == 0


class TestLifespan:
    def test_startup_reads_environment_config(self, monkeypatch):
        monkeypatch.setattr(server, "base_config", server.base_config)
        monkeypatch.setenv("CARELOG_SHOW_GHOST", "false")
        with TestClient(app) as client:
            response = client.post("/api/v1/layout/day", json={
                "subject_id": "baby_1", "day": "2024-03-12", "reference_now": NOW,
                "events": [{"id": "f1", "babyId": "baby_1", "type": "feed",
                            "startTime": "2024-03-12T08:00:00Z"}],
            })
        assert response.json()["layout"]["ghosts"] == []
