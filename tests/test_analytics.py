"""Analytics snapshots and the dashboard."""
from datetime import date, datetime

from wellnest.models import AnalyticsType, PeriodType
from wellnest.services import analytics_service


def _snapshot(user, kind, start: date, **extra):
    data = {
        "type": kind,
        "period_type": PeriodType.WEEKLY,
        "period_start": start,
        "period_end": start,
        "metrics": {"placeholder": 1},
    }
    data.update(extra)
    return analytics_service.create_analytics(user.id, data)


def test_dashboard_window_and_sections(app, alice) -> None:
    _snapshot(
        alice,
        AnalyticsType.WEIGHT_TRACKING,
        date(2025, 7, 10),
        metrics={"average_weight": 70.5, "weight_change": -0.5, "trend": "decreasing"},
        score=80,
        insights={"summary": "Weight trending down", "achievements": ["consistency"]},
        goals_progress={"weight": 40},
    )
    _snapshot(
        alice,
        AnalyticsType.WORKOUT_SUMMARY,
        date(2025, 7, 5),
        metrics={"workouts_count": 4, "total_duration": 180, "calories_burned": 1500},
        score=60,
        goals_progress={"weight": 20, "workouts": 50},
    )
    _snapshot(alice, AnalyticsType.WORKOUT_SUMMARY, date(2025, 5, 1), metrics={"workouts_count": 9})

    result = analytics_service.dashboard(alice.id, PeriodType.MONTHLY, now=datetime(2025, 7, 15, 12))

    assert result["window"] == {"start": "2025-06-15", "end": "2025-07-15"}
    assert result["overview"] == {
        "total_analytics": 2,
        "average_score": 70.0,
        "weight_trend": "decreasing",
        "workouts_completed": 4,
    }
    assert [point["date"] for point in result["charts"]["score_trend"]] == ["2025-07-05", "2025-07-10"]
    assert result["charts"]["weight_chart"][0]["weight"] == 70.5
    assert result["goals"] == {"weight": 40, "workouts": 50}
    assert result["insights"] == ["Weight trending down"]
    assert result["achievements"] == ["consistency"]


def test_empty_dashboard(app, alice) -> None:
    result = analytics_service.dashboard(alice.id, PeriodType.WEEKLY, now=datetime(2025, 7, 15))
    assert result["overview"]["total_analytics"] == 0
    assert result["overview"]["weight_trend"] == "no_data"
    assert result["insights"] == []


def test_create_via_api_validates_period(client, alice, auth_headers) -> None:
    payload = {
        "type": "sleep_pattern",
        "period_type": "daily",
        "period_start": "2025-07-02",
        "period_end": "2025-07-01",
        "metrics": {"hours": 7},
    }
    assert client.post("/api/analytics", json=payload, headers=auth_headers(alice)).status_code == 400
    payload["period_end"] = "2025-07-02"
    assert client.post("/api/analytics", json=payload, headers=auth_headers(alice)).status_code == 201
    payload["metrics"] = {}
    assert client.post("/api/analytics", json=payload, headers=auth_headers(alice)).status_code == 400


def test_dashboard_endpoint(client, alice, auth_headers) -> None:
    response = client.get("/api/analytics/dashboard?period=weekly", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.get_json()["period"] == "weekly"
    assert client.get("/api/analytics/dashboard?period=hourly", headers=auth_headers(alice)).status_code == 400


def test_dashboard_settings_defaults_and_update(client, alice, bob, auth_headers) -> None:
    settings = client.get("/api/analytics/dashboard/settings", headers=auth_headers(alice)).get_json()
    assert settings["theme"] == "light"
    assert settings["widget_preferences"]["weight_chart"]["enabled"] is True

    updated = client.put("/api/analytics/dashboard/settings", json={"theme": "dark"}, headers=auth_headers(alice))
    assert updated.get_json()["theme"] == "dark"
    assert client.put(
        "/api/analytics/dashboard/settings", json={"theme": "neon"}, headers=auth_headers(alice)
    ).status_code == 400

    other = client.get("/api/analytics/dashboard/settings", headers=auth_headers(bob)).get_json()
    assert other["theme"] == "light"
