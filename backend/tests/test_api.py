"""HTTP boundary tests: routing, auth and error-kind to status mapping."""
import httpx
import pytest
import pytest_asyncio

from taskboard.core.database import get_db
from taskboard.main import create_app


@pytest_asyncio.fixture
async def client(session_factory):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def signup(client, name, email, role):
    response = await client.post("/api/auth/register", json={
        "name": name, "email": email, "password": "s3cret!", "role": role,
    })
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return {"Authorization": f"Bearer {data['access_token']}"}, data["user"]["id"]


@pytest_asyncio.fixture
async def accounts(client):
    admin = await signup(client, "Ada", "ada@taskboard.io", "admin")
    manager = await signup(client, "Mia", "mia@taskboard.io", "manager")
    alice = await signup(client, "Alice", "alice@taskboard.io", "member")
    bob = await signup(client, "Bob", "bob@taskboard.io", "member")
    return {"admin": admin, "manager": manager, "alice": alice, "bob": bob}


@pytest.mark.asyncio
async def test_requires_token(client):
    response = await client.get("/api/projects/")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_bad_token(client):
    response = await client.get("/api/projects/", headers={"Authorization": "Bearer junk"})
    assert response.status_code == 401
    assert response.json()["error"] == "auth_error"


@pytest.mark.asyncio
async def test_kanban_flow(client, accounts):
    admin_headers, _ = accounts["admin"]
    manager_headers, _ = accounts["manager"]
    alice_headers, alice_id = accounts["alice"]
    bob_headers, _ = accounts["bob"]

    response = await client.post("/api/projects/", headers=admin_headers,
                                 json={"name": "Launch", "team_members": [alice_id]})
    assert response.status_code == 201
    project_id = response.json()["data"]["id"]

    task_in = {"title": "Announce", "project_id": project_id, "assigned_to": alice_id}
    response = await client.post("/api/tasks/", headers=manager_headers, json=task_in)
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"

    response = await client.post("/api/tasks/", headers=admin_headers, json=task_in)
    assert response.status_code == 201
    task_id = response.json()["data"]["id"]

    response = await client.patch(f"/api/tasks/{task_id}/status", headers=alice_headers,
                                  json={"status": "in-progress"})
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "in-progress"

    response = await client.get(f"/api/tasks/{task_id}", headers=bob_headers)
    assert response.status_code == 403

    response = await client.get(f"/api/projects/{project_id}/board", headers=alice_headers)
    assert [t["id"] for t in response.json()["data"]["columns"]["in-progress"]] == [task_id]

    response = await client.get("/api/tasks/my-tasks", headers=alice_headers)
    assert response.json()["count"] == 1

    response = await client.delete(f"/api/projects/{project_id}", headers=admin_headers)
    assert response.status_code == 200
    response = await client.get(f"/api/tasks/{task_id}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_validation_maps_to_400(client, accounts):
    admin_headers, _ = accounts["admin"]
    response = await client.post("/api/projects/", headers=admin_headers, json={"name": "x" * 101})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "name"


@pytest.mark.asyncio
async def test_missing_project_maps_to_404(client, accounts):
    admin_headers, _ = accounts["admin"]
    response = await client.get("/api/projects/999", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Project not found"


@pytest.mark.asyncio
async def test_user_admin_routes(client, accounts):
    manager_headers, _ = accounts["manager"]
    admin_headers, _ = accounts["admin"]
    _, bob_id = accounts["bob"]

    assert (await client.get("/api/users/", headers=manager_headers)).status_code == 403

    response = await client.put(f"/api/users/{bob_id}", headers=admin_headers, json={"role": "manager"})
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "manager"

    response = await client.get("/api/auth/me", headers=accounts["bob"][0])
    assert response.json()["data"]["role"] == "manager"
