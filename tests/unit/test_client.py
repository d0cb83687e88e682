"""Tests for the command-line client: API wrapper, project store and views."""

from __future__ import annotations

import json
from decimal import Decimal

import httpx
import pytest

from nusadana.client import (
    ApiClient,
    ApiError,
    ProjectStore,
    SessionStore,
    display_projects,
    format_rupiah,
    prioritized,
    project_payload,
)


def _api(handler, tmp_path) -> ApiClient:
    return ApiClient(
        base_url="http://nusadana.test/api",
        session=SessionStore(tmp_path / "session.json"),
        transport=httpx.MockTransport(handler),
    )


class TestFormatRupiah:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (5_000_000, "Rp 5.000.000"),
            (Decimal("1250000.50"), "Rp 1.250.001"),
            ("750", "Rp 750"),
            (0, "Rp 0"),
            (None, "Rp 0"),
            (-1500, "-Rp 1.500"),
        ],
    )
    def test_format(self, amount, expected):
        assert format_rupiah(amount) == expected


class TestViews:
    projects = [
        {"id": 1, "title": "A", "status": "draft", "priority": 2},
        {"id": 2, "title": "B", "status": "completed", "priority": None},
        {"id": 3, "title": "C", "status": "completed", "priority": 1},
    ]

    def test_all_projects_shown_by_default(self):
        assert [p["id"] for p in display_projects(self.projects)] == [1, 2, 3]

    def test_completed_only(self):
        assert [p["id"] for p in display_projects(self.projects, completed_only=True)] == [2, 3]

    def test_prioritized_sorted_and_filtered(self):
        assert [p["id"] for p in prioritized(self.projects)] == [3, 1]


class TestProjectPayload:
    def test_defaults(self):
        assert project_payload({"title": "Posyandu"}) == {
            "title": "Posyandu",
            "description": "No description",
            "location": "Desa",
            "estimated_budget": 0.0,
        }

    def test_dana_maps_to_budget(self):
        payload = project_payload(
            {"title": "Jalan", "description": "Aspal", "location": "RT 02", "dana": "7500000"}
        )

        assert payload["estimated_budget"] == 7_500_000.0
        assert payload["location"] == "RT 02"

    def test_unparseable_dana_is_zero(self):
        assert project_payload({"title": "X", "dana": "banyak"})["estimated_budget"] == 0.0


class TestApiClient:
    def test_error_field_surfaces(self, tmp_path):
        def handler(request):
            return httpx.Response(401, json={"error": "Invalid credentials"})

        with _api(handler, tmp_path) as api:
            with pytest.raises(ApiError) as exc_info:
                api.login("a@desa.id", "salah")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid credentials"

    def test_generic_fallback_without_error_field(self, tmp_path):
        def handler(request):
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        with _api(handler, tmp_path) as api:
            with pytest.raises(ApiError) as exc_info:
                api.get("/projects")

        assert exc_info.value.status_code == 502
        assert "error occurred" in exc_info.value.message

    def test_connection_failure(self, tmp_path):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with _api(handler, tmp_path) as api:
            with pytest.raises(ApiError) as exc_info:
                api.get("/projects")

        assert exc_info.value.status_code is None

    def test_login_persists_session_and_sends_token(self, tmp_path):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            if request.url.path == "/api/auth/login":
                return httpx.Response(
                    200, json={"user": {"id": 1, "name": "Siti", "role": "official"}, "token": "t0k"}
                )
            return httpx.Response(200, json=[])

        with _api(handler, tmp_path) as api:
            user = api.login("siti@desa.id", "rahasia")
            api.get("/projects")

        assert user["name"] == "Siti"
        saved = json.loads((tmp_path / "session.json").read_text())
        assert saved == {"token": "t0k", "user": user}
        assert "Authorization" not in seen[0].headers
        assert seen[1].headers["Authorization"] == "Bearer t0k"

    def test_logout_clears_session(self, tmp_path):
        session = SessionStore(tmp_path / "session.json")
        session.save("t0k", {"id": 1})

        api = ApiClient(session=session, transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        api.logout()
        api.close()

        assert session.token is None

    def test_base_url_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("NUSADANA_API_URL", "http://desa.example/api/")

        api = ApiClient(session=SessionStore(tmp_path / "s.json"))
        api.close()

        assert api.base_url == "http://desa.example/api"


class TestProjectStore:
    def test_refresh_loads_projects(self, tmp_path):
        rows = [{"id": 1, "title": "A"}]

        with _api(lambda r: httpx.Response(200, json=rows), tmp_path) as api:
            store = ProjectStore(api)
            assert store.loading is True
            store.refresh()

        assert store.projects == rows
        assert store.loading is False
        assert store.error is None

    def test_refresh_failure_sets_error(self, tmp_path):
        handler = lambda r: httpx.Response(500, json={"error": "connection reset"})  # noqa: E731

        with _api(handler, tmp_path) as api:
            store = ProjectStore(api)
            store.refresh()

        assert store.error == "connection reset"
        assert store.loading is False
        assert store.projects == []

    def test_add_project_appends_server_row(self, tmp_path):
        bodies: list[dict] = []

        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, json=[{"id": 1, "title": "Lama"}])
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"id": 2, "title": "Baru", "status": "draft"})

        with _api(handler, tmp_path) as api:
            store = ProjectStore(api)
            store.refresh()
            created = store.add_project({"title": "Baru", "dana": "1000000"})

        assert created["id"] == 2
        assert [p["id"] for p in store.projects] == [1, 2]
        assert bodies == [
            {
                "title": "Baru",
                "description": "No description",
                "location": "Desa",
                "estimated_budget": 1000000.0,
            }
        ]

    def test_add_project_failure_leaves_list(self, tmp_path):
        handler = lambda r: httpx.Response(401, json={"error": "Authentication required"})  # noqa: E731

        with _api(handler, tmp_path) as api:
            store = ProjectStore(api)
            with pytest.raises(ApiError, match="Authentication required"):
                store.add_project({"title": "X"})

        assert store.projects == []
