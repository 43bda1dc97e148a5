"""Full-flow E2E tests — register → login → token → tasks, through the real stack.

Learn: Nothing is mocked except the database location. Every request
goes through RequestId → SecurityHeaders → Authentication → route →
IdentityResolver → TaskService, using the token the API itself issued.
"""

import pytest


@pytest.mark.asyncio
async def test_single_user_lifecycle(client):
    # 1. Register
    r = await client.post(
        "/api/v1/auth/register",
        json={"email": "alice@example.com", "name": "Alice", "password": "secret1"},
    )
    assert r.status_code == 201
    alice_id = r.json()["user"]["id"]

    # 2. Login with the same credentials
    r = await client.post(
        "/api/v1/auth/login",
        json={"email": "alice@example.com", "password": "secret1"},
    )
    assert r.status_code == 200
    token = r.json()["access_token"]
    assert r.json()["user"]["id"] == alice_id
    headers = {"Authorization": f"Bearer {token}"}

    # 3. Create a task
    r = await client.post("/api/v1/tasks", json={"title": "Buy milk"}, headers=headers)
    assert r.status_code == 201

    # 4. List shows exactly that task, PENDING
    r = await client.get("/api/v1/tasks", headers=headers)
    assert r.status_code == 200
    tasks = r.json()
    assert len(tasks) == 1
    assert tasks[0]["title"] == "Buy milk"
    assert tasks[0]["status"] == "PENDING"


@pytest.mark.asyncio
async def test_two_users_are_isolated(client, register):
    a_headers, _ = await register("a@example.com", name="User A")
    b_headers, _ = await register("b@example.com", name="User B")

    r = await client.post("/api/v1/tasks", json={"title": "A's task"}, headers=a_headers)
    a_task = r.json()
    r = await client.post("/api/v1/tasks", json={"title": "B's task"}, headers=b_headers)
    b_task = r.json()

    r = await client.get("/api/v1/tasks", headers=a_headers)
    assert [t["id"] for t in r.json()] == [a_task["id"]]

    r = await client.get(f"/api/v1/tasks/{b_task['id']}", headers=a_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_full_task_lifecycle(client, register):
    headers, _ = await register("flow@example.com")

    r = await client.post(
        "/api/v1/tasks",
        json={"title": "Write report", "description": "Q3 numbers"},
        headers=headers,
    )
    task_id = r.json()["id"]

    for status in ("IN_PROGRESS", "COMPLETED"):
        r = await client.put(
            f"/api/v1/tasks/{task_id}", json={"status": status}, headers=headers
        )
        assert r.json()["status"] == status

    r = await client.get("/api/v1/tasks", params={"status": "COMPLETED"}, headers=headers)
    assert [t["id"] for t in r.json()] == [task_id]

    r = await client.delete(f"/api/v1/tasks/{task_id}", headers=headers)
    assert r.status_code == 204
    r = await client.get("/api/v1/tasks", headers=headers)
    assert r.json() == []
