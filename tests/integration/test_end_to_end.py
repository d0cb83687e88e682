"""Integration tests for NusaDana end-to-end workflows.

Tests:
1. Register, log in and propose a project: it starts as an unranked draft
2. Re-prioritise three projects in reverse order
3. Fund totals after a disbursement and an expense
4. Full accountability flow ending in an LPJ report
"""

from __future__ import annotations


def _login(client, email: str, password: str) -> dict[str, str]:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def test_new_project_is_unranked_draft(client, register_user):
    register_user(email="a@desa.id", password="kata-sandi", role="official")
    headers = _login(client, "a@desa.id", "kata-sandi")

    created = client.post(
        "/api/projects",
        json={"title": "Jalan Desa", "estimated_budget": 5000000},
        headers=headers,
    )
    assert created.status_code == 201

    projects = client.get("/api/projects").json()

    assert len(projects) == 1
    assert projects[0]["title"] == "Jalan Desa"
    assert projects[0]["estimated_budget"] == 5000000
    assert projects[0]["status"] == "draft"
    assert projects[0]["priority"] is None


def test_reverse_priority_order(client, make_project, auth_headers):
    ids = [make_project(f"Projek {i}")["id"] for i in range(3)]
    reversed_ids = list(reversed(ids))

    response = client.put(
        "/api/projects/priority", json={"priority_list": reversed_ids}, headers=auth_headers
    )
    assert response.status_code == 200

    projects = client.get("/api/projects").json()

    assert [p["id"] for p in projects] == reversed_ids
    assert [p["priority"] for p in projects] == [1, 2, 3]


def test_funds_after_disbursement_and_expense(client, make_project, auth_headers):
    project = make_project()

    client.post(
        f"/api/projects/{project['id']}/disbursements",
        json={"amount": 100, "date_received": "2024-05-01"},
        headers=auth_headers,
    )
    client.post(
        f"/api/projects/{project['id']}/expenses",
        json={"amount_spent": 40, "date_spent": "2024-05-02"},
        headers=auth_headers,
    )

    assert client.get("/api/funds").json() == {
        "totalDisbursed": 100,
        "totalSpent": 40,
        "remaining": 60,
    }


def test_accountability_flow(client, register_user):
    official = register_user(email="kades@desa.id", role="official")
    villager = register_user(email="warga@desa.id", role="villager")
    official_headers = {"Authorization": f"Bearer {official['token']}"}
    villager_headers = {"Authorization": f"Bearer {villager['token']}"}

    project = client.post(
        "/api/projects",
        json={"title": "Irigasi Sawah", "location": "Dusun Lor", "estimated_budget": 30000000},
        headers=official_headers,
    ).json()
    pid = project["id"]

    client.put(f"/api/projects/{pid}/status", json={"status": "approved"}, headers=official_headers)
    client.post(
        f"/api/projects/{pid}/disbursements",
        json={"amount": 15000000, "date_received": "2024-06-01", "phase": "Tahap 1"},
        headers=official_headers,
    )
    client.put(f"/api/projects/{pid}/status", json={"status": "in_progress"}, headers=official_headers)
    client.post(
        f"/api/projects/{pid}/expenses",
        json={"amount_spent": 9750000.25, "date_spent": "2024-06-20", "description": "Pipa"},
        headers=official_headers,
    )
    client.post(
        f"/api/projects/{pid}/progress",
        json={"notes": "Saluran utama selesai", "completion_percentage": 50},
        headers=official_headers,
    )
    client.post(
        f"/api/projects/{pid}/feedback",
        json={"comment_text": "Air sudah mengalir"},
        headers=villager_headers,
    )
    upload = client.post(
        f"/api/projects/{pid}/documents",
        files={"file": ("kwitansi.pdf", b"%PDF kwitansi", "application/pdf")},
        data={"document_type": "kwitansi"},
        headers=official_headers,
    )
    assert upload.status_code == 201

    report = client.get(f"/api/projects/{pid}/reports/lpj").json()

    assert report["project"]["status"] == "in_progress"
    assert report["feedback"][0]["created_by"] == villager["user"]["id"]
    assert report["progress"][0]["created_by"] == official["user"]["id"]
    assert report["summary"] == {
        "totalDisbursed": 15000000,
        "totalSpent": 9750000.25,
        "remaining": 5249999.75,
        "latestCompletion": 50,
    }
    documents = client.get(f"/api/projects/{pid}/documents").json()
    assert [d["file_path"] for d in documents] == [f"{pid}/kwitansi.pdf"]
