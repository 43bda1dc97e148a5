"""TaskGuard CLI — run the server and manage your tasks from a terminal.

Usage:
    taskguard serve                          # Run the API with uvicorn
    taskguard init-db                        # Create tables (dev only; use alembic in prod)
    taskguard register alice@example.com Alice
    taskguard login alice@example.com        # Prints a token for TASKGUARD_TOKEN
    taskguard tasks                          # List your tasks
    taskguard add "Buy milk"                 # Create a task
    taskguard status 42 IN_PROGRESS          # Change a task's status
    taskguard rm 42                          # Delete a task
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

from taskguard import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"

STATUSES = ("PENDING", "IN_PROGRESS", "COMPLETED")


def _api_url() -> str:
    return os.environ.get("TASKGUARD_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the TaskGuard API."""
    headers = {}
    token = os.environ.get("TASKGUARD_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an async test) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _check(r: httpx.Response) -> None:
    """Exit with the API's error message on any non-2xx response."""
    if r.is_success:
        return
    try:
        body = r.json()
        message = body.get("message") or body.get("detail") or r.text
    except ValueError:
        message = r.text
    click.secho(f"Error ({r.status_code}): {message}", fg="red", err=True)
    sys.exit(1)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "—")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _status_color(status: str) -> str:
    colors = {
        "PENDING": "white",
        "IN_PROGRESS": "yellow",
        "COMPLETED": "green",
    }
    return colors.get(status, "white")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="taskguard")
def main():
    """TaskGuard — owner-scoped tasks behind stateless bearer tokens."""


# ---------------------------------------------------------------------------
# Server commands
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: TASKGUARD_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: TASKGUARD_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from taskguard.config import settings

    uvicorn.run(
        "taskguard.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create all tables from the models. For production, run alembic instead."""
    from taskguard.db.engine import create_schema

    _run(create_schema())
    click.secho("Tables created.", fg="green")


# ---------------------------------------------------------------------------
# Account commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.argument("name")
@click.password_option()
def register(email: str, name: str, password: str):
    """Create an account and print its access token."""
    _run(_auth_impl("/api/v1/auth/register", {
        "email": email, "name": name, "password": password,
    }))


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and print an access token.

    Export it for the other commands:  export TASKGUARD_TOKEN=<token>
    """
    _run(_auth_impl("/api/v1/auth/login", {"email": email, "password": password}))


async def _auth_impl(path: str, body: dict):
    async with _client() as c:
        r = await c.post(path, json=body)
        _check(r)
        data = r.json()
        click.secho(f"Signed in as {data['user']['email']} (id {data['user']['id']})", fg="green", err=True)
        click.echo(data["access_token"])


# ---------------------------------------------------------------------------
# Task commands
# ---------------------------------------------------------------------------


@main.command()
@click.option("--status", "-s", "status_filter", type=click.Choice(STATUSES), help="Filter by status")
@click.option("--limit", "-l", default=50, help="Max results")
def tasks(status_filter: Optional[str], limit: int):
    """List your tasks, newest first."""
    _run(_tasks_impl(status_filter, limit))


async def _tasks_impl(status_filter: Optional[str], limit: int):
    async with _client() as c:
        params: dict = {"limit": limit}
        if status_filter:
            params["status"] = status_filter

        r = await c.get("/api/v1/tasks", params=params)
        _check(r)
        rows = r.json()

        if not rows:
            click.echo("No tasks found.")
            return

        click.secho(f"Tasks ({len(rows)}):", bold=True)
        click.echo()
        _print_table(rows, [
            ("ID", "id", 6),
            ("Status", "status", 12),
            ("Title", "title", 50),
        ])


@main.command()
@click.argument("title")
@click.option("--description", "-d", help="Longer description")
def add(title: str, description: Optional[str]):
    """Create a task."""
    _run(_add_impl(title, description))


async def _add_impl(title: str, description: Optional[str]):
    async with _client() as c:
        r = await c.post("/api/v1/tasks", json={"title": title, "description": description})
        _check(r)
        task = r.json()
        click.secho(f"Task #{task['id']} created", fg="green")


@main.command()
@click.argument("task_id", type=int)
@click.argument("new_status", type=click.Choice(STATUSES))
def status(task_id: int, new_status: str):
    """Set a task's status."""
    _run(_status_impl(task_id, new_status))


async def _status_impl(task_id: int, new_status: str):
    async with _client() as c:
        r = await c.put(f"/api/v1/tasks/{task_id}", json={"status": new_status})
        _check(r)
        task = r.json()
        click.echo(f"Task #{task_id}: {click.style(task['status'], fg=_status_color(task['status']))}")


@main.command()
@click.argument("task_id", type=int)
def rm(task_id: int):
    """Delete a task."""
    _run(_rm_impl(task_id))


async def _rm_impl(task_id: int):
    async with _client() as c:
        r = await c.delete(f"/api/v1/tasks/{task_id}")
        _check(r)
        click.echo(f"Task #{task_id} deleted")


if __name__ == "__main__":
    main()
