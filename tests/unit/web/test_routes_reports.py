"""Tests for LPJ report, month metrics and health routes."""

from __future__ import annotations

from datetime import datetime, timezone


def _month() -> str:
    now = datetime.now(timezone.utc)
    return f"{now.year:04d}-{now.month:02d}"


class TestLpjReport:
    """Tests for GET /api/projects/{id}/reports/lpj."""

    def test_aggregates_project_records(self, client, make_project, auth_headers):
        project = make_project("Drainase", budget=20_000_000)
        pid = project["id"]
        client.post(
            f"/api/projects/{pid}/disbursements",
            json={"amount": 10_000_000, "date_received": "2024-02-01", "phase": "Tahap 1"},
            headers=auth_headers,
        )
        client.post(
            f"/api/projects/{pid}/expenses",
            json={"amount_spent": 4_000_000, "date_spent": "2024-02-10"},
            headers=auth_headers,
        )
        for pct in (30, 65):
            client.post(
                f"/api/projects/{pid}/progress",
                json={"notes": f"{pct}%", "completion_percentage": pct},
                headers=auth_headers,
            )
        client.post(
            f"/api/projects/{pid}/feedback", json={"comment_text": "Mantap"}, headers=auth_headers
        )

        response = client.get(f"/api/projects/{pid}/reports/lpj")

        assert response.status_code == 200
        body = response.json()
        assert body["project"]["id"] == pid
        assert len(body["disbursements"]) == 1
        assert len(body["expenses"]) == 1
        assert [p["completion_percentage"] for p in body["progress"]] == [30, 65]
        assert body["feedback"][0]["comment_text"] == "Mantap"
        assert body["summary"] == {
            "totalDisbursed": 10_000_000,
            "totalSpent": 4_000_000,
            "remaining": 6_000_000,
            "latestCompletion": 65,
        }

    def test_other_projects_excluded(self, client, make_project, auth_headers):
        a, b = make_project("A"), make_project("B")
        client.post(
            f"/api/projects/{b['id']}/disbursements",
            json={"amount": 1000, "date_received": "2024-02-01"},
            headers=auth_headers,
        )

        body = client.get(f"/api/projects/{a['id']}/reports/lpj").json()

        assert body["disbursements"] == []
        assert body["summary"]["totalDisbursed"] == 0
        assert body["summary"]["latestCompletion"] is None

    def test_notes_only_update_keeps_last_percentage(self, client, make_project, auth_headers):
        pid = make_project()["id"]
        client.post(
            f"/api/projects/{pid}/progress",
            json={"notes": "Pondasi", "completion_percentage": 50},
            headers=auth_headers,
        )
        client.post(
            f"/api/projects/{pid}/progress", json={"notes": "Hujan, kerja libur"}, headers=auth_headers
        )

        body = client.get(f"/api/projects/{pid}/reports/lpj").json()

        assert [p["completion_percentage"] for p in body["progress"]] == [50, None]
        assert body["summary"]["latestCompletion"] == 50

    def test_missing_project(self, client):
        response = client.get("/api/projects/999/reports/lpj")

        assert response.status_code == 404
        assert response.json() == {"error": "Project not found"}


class TestProjectsByMonth:
    """Tests for GET /api/metrics/projects-by-month."""

    def test_empty(self, client):
        response = client.get("/api/metrics/projects-by-month")

        assert response.status_code == 200
        assert response.json() == {}

    def test_current_month_bucket(self, client, make_project, auth_headers):
        month = _month()
        a = make_project("A", budget=1_000_000)
        make_project("B", budget=None)
        client.post(
            f"/api/projects/{a['id']}/expenses",
            json={"amount_spent": 250_000, "date_spent": f"{month}-01"},
            headers=auth_headers,
        )
        # No project was created in 2001, so this expense is not counted
        client.post(
            f"/api/projects/{a['id']}/expenses",
            json={"amount_spent": 999, "date_spent": "2001-01-01"},
            headers=auth_headers,
        )

        body = client.get("/api/metrics/projects-by-month").json()

        assert body == {month: {"projects": 2, "fundsIn": 1_000_000, "fundsOut": 250_000}}


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "connected"}


def test_prometheus_metrics_exposed(client):
    client.get("/api/health")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_request" in response.text


def test_request_id_echoed(client):
    response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
