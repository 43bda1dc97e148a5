"""
Shared helpers for TaskGuard examples.

Handles the backend check and account setup (register, falling back to
login) so each example can focus on its own workflow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api/v1"


def check_backend() -> None:
    """Verify the backend is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  taskguard init-db && taskguard serve")
        sys.exit(1)

    health = resp.json()
    print(f"Backend: {health['status']} (database: {health['database']})")
    if health["database"] != "ok":
        sys.exit(1)


def user_client(label: str, password: str = "demo-password-123") -> httpx.Client:
    """Register a throwaway user and return a client carrying its token."""
    email = f"{label}-{uuid.uuid4().hex[:8]}@example.com"
    resp = httpx.post(
        f"{BASE}/auth/register",
        json={"email": email, "name": label.title(), "password": password},
        timeout=10,
    )
    if resp.status_code == 409:
        resp = httpx.post(
            f"{BASE}/auth/login",
            json={"email": email, "password": password},
            timeout=10,
        )
    if resp.status_code not in (200, 201):
        print(f"ERROR: could not sign in {email}: {resp.status_code} {resp.text}")
        sys.exit(1)

    body = resp.json()
    print(f"  {label}: {body['user']['email']} (id {body['user']['id']})")
    return httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {body['access_token']}"},
    )
