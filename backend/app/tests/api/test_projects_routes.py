from datetime import timedelta

from fastapi.testclient import TestClient

from app.core.security import create_access_token

PROJECT_BODY = {
    "name": "Todo Tracker",
    "description": "A simple app to track todos.",
    "category": "Web Development",
    "difficulty": "beginner",
    "estimatedDuration": "2 weeks",
    "techStack": ["React", "Node.js"],
    "features": ["Add tasks", "Mark complete"],
}


def _create(client: TestClient, headers: dict[str, str], **overrides) -> dict:
    response = client.post("/api/projects", json={**PROJECT_BODY, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_project(client: TestClient, alice_headers):
    response = client.post("/api/projects", json=PROJECT_BODY, headers=alice_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Project created successfully"
    assert body["data"]["user_id"] == "alice"
    assert body["data"]["is_public"] is False
    assert body["data"]["status"] == "idea"
    assert body["data"]["tech_stack"] == ["React", "Node.js"]


def test_create_project_requires_token(client: TestClient):
    response = client.post("/api/projects", json=PROJECT_BODY)

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Access token required"}


def test_invalid_and_expired_tokens_are_forbidden(client: TestClient):
    expired = create_access_token("alice", expires_delta=timedelta(minutes=-5))

    for token in ("not-a-jwt", expired):
        response = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
        assert response.json()["message"] == "Invalid or expired token"


def test_create_project_validation(client: TestClient, alice_headers):
    response = client.post(
        "/api/projects",
        json={**PROJECT_BODY, "description": "too short", "difficulty": "legendary"},
        headers=alice_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation error"
    fields = {error.split(":")[0] for error in body["errors"]}
    assert {"description", "difficulty"} <= fields


def test_list_own_projects_paginated(client: TestClient, alice_headers, bob_headers):
    for i in range(3):
        _create(client, alice_headers, name=f"Idea {i}")
    _create(client, bob_headers)

    response = client.get("/api/projects", params={"page": 1, "limit": 2}, headers=alice_headers)

    data = response.json()["data"]
    assert data["total"] == 3
    assert data["totalPages"] == 2
    assert len(data["projects"]) == 2


def test_private_project_hidden_from_others(client: TestClient, alice_headers, bob_headers):
    project = _create(client, alice_headers)

    assert client.get(f"/api/projects/{project['id']}", headers=alice_headers).status_code == 200
    assert client.get(f"/api/projects/{project['id']}", headers=bob_headers).status_code == 404
    assert client.get(f"/api/projects/{project['id']}").status_code == 404


def test_update_share_and_delete(client: TestClient, alice_headers, bob_headers):
    project = _create(client, alice_headers)
    url = f"/api/projects/{project['id']}"

    denied = client.put(url, json={"name": "Mine now"}, headers=bob_headers)
    assert denied.status_code == 404
    assert denied.json()["message"] == "Project not found or you do not have permission to update it"

    updated = client.put(url, json={"isPublic": True, "status": "planning"}, headers=alice_headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["is_public"] is True
    assert updated.json()["data"]["status"] == "planning"

    public_view = client.get(url)
    assert public_view.status_code == 200
    assert public_view.json()["data"]["user_vote"] is None

    assert client.delete(url, headers=bob_headers).status_code == 404
    deleted = client.delete(url, headers=alice_headers)
    assert deleted.json() == {"success": True, "message": "Project deleted successfully"}
    assert client.get(url, headers=alice_headers).status_code == 404


def test_invalid_status_rejected(client: TestClient, alice_headers):
    project = _create(client, alice_headers)

    response = client.put(f"/api/projects/{project['id']}", json={"status": "abandoned"}, headers=alice_headers)

    assert response.status_code == 400


def test_malformed_id_is_a_validation_error(client: TestClient):
    response = client.get("/api/projects/not-a-uuid")

    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"


def test_search_by_tech_stack_csv(client: TestClient, alice_headers):
    _create(client, alice_headers, name="Chess Coach", techStack=["Python", "FastAPI"])
    _create(client, alice_headers)

    response = client.get(
        "/api/projects/search",
        params={"techStack": "Python, FastAPI"},
        headers=alice_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Projects searched successfully"
    assert [p["name"] for p in response.json()["data"]["projects"]] == ["Chess Coach"]


def test_search_by_non_ascii_tech(client: TestClient, alice_headers):
    _create(client, alice_headers, name="Patisserie Planner", techStack=["Crème", "React"])

    response = client.get("/api/projects/search", params={"techStack": "Crème"}, headers=alice_headers)

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 1
    assert [p["name"] for p in response.json()["data"]["projects"]] == ["Patisserie Planner"]


def test_unknown_route(client: TestClient):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found - /api/nowhere"}


def test_health(client: TestClient):
    body = client.get("/health").json()

    assert body["status"] == "OK"
    assert body["message"] == "Buildsy API is running"
    assert body["timestamp"]
