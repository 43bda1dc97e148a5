#!/usr/bin/env python3
"""
TaskGuard Quickstart — two users, one store, no leaks.

Registers alice and bob, gives each a task, and shows that neither can
see, change or delete the other's.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
"""

from _common import check_backend, user_client


def main():
    check_backend()

    print("\n1. Registering two users...")
    alice = user_client("alice")
    bob = user_client("bob")

    print("\n2. Each creates a task...")
    a_task = alice.post("/tasks", json={"title": "Buy milk"}).json()
    b_task = bob.post("/tasks", json={"title": "Walk the dog"}).json()
    print(f"   alice: #{a_task['id']} {a_task['title']} [{a_task['status']}]")
    print(f"   bob:   #{b_task['id']} {b_task['title']} [{b_task['status']}]")

    print("\n3. Each lists their own tasks...")
    print(f"   alice sees: {[t['title'] for t in alice.get('/tasks').json()]}")
    print(f"   bob sees:   {[t['title'] for t in bob.get('/tasks').json()]}")

    print("\n4. Alice tries to touch bob's task...")
    for method in ("get", "put", "delete"):
        kwargs = {"json": {"status": "COMPLETED"}} if method == "put" else {}
        resp = getattr(alice, method)(f"/tasks/{b_task['id']}", **kwargs)
        print(f"   {method.upper():6} → {resp.status_code} {resp.json()['message']}")
    resp = alice.get("/tasks/999999999")
    print(f"   (nonexistent task → {resp.status_code} {resp.json()['message']})")

    print("\n5. Alice moves her own task along...")
    resp = alice.put(f"/tasks/{a_task['id']}", json={"status": "COMPLETED"})
    print(f"   #{a_task['id']} is now {resp.json()['status']}")

    print("\n6. No token at all...")
    resp = alice.get("/tasks", headers={"Authorization": ""})
    print(f"   GET /tasks → {resp.status_code} {resp.json()['error']}")


if __name__ == "__main__":
    main()
