"""
CLI: ``python -m readiness``: readiness gates for scripts and CI.

Usage::

    python -m readiness wait-db                      # uses DATABASE_URL
    python -m readiness wait-http http://localhost:8080/actuator/health
    python -m readiness verify http://localhost:8080
    python -m readiness smoke http://localhost:8080
"""

from __future__ import annotations

import typer

from core import db
from core.logging_config import configure_logging

from .checks import PollPolicy, ReadinessError, smoke_test, verify_deployment, wait_for_database, wait_for_http

app = typer.Typer(no_args_is_help=True)


def _ok(message: str) -> None:
    typer.secho(f"OK    {message}", fg=typer.colors.GREEN)


def _fail(message: str) -> None:
    typer.secho(f"FAIL  {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for polling details."),
) -> None:
    """Readiness gates: bounded polling for the database and HTTP endpoints."""
    configure_logging(log_level)


@app.command("wait-db")
def wait_db(
    dsn: str | None = typer.Option(None, "--dsn", help="Defaults to DATABASE_URL (+ DATABASE_USER/PASSWORD)."),
    attempts: int = typer.Option(30, "--attempts", "-n", min=1),
    interval: float = typer.Option(2.0, "--interval", "-i", min=0.0),
) -> None:
    """Wait until PostgreSQL accepts connections."""
    try:
        target = dsn or db.database_url()
    except RuntimeError as exc:
        _fail(str(exc))
    try:
        attempt = wait_for_database(target, policy=PollPolicy(attempts=attempts, interval_s=interval))
    except ReadinessError as exc:
        _fail(str(exc))
    _ok(f"database is accepting connections (attempt {attempt})")


@app.command("wait-http")
def wait_http(
    url: str = typer.Argument(..., help="URL that must answer 2xx."),
    attempts: int = typer.Option(30, "--attempts", "-n", min=1),
    interval: float = typer.Option(3.0, "--interval", "-i", min=0.0),
) -> None:
    """Wait until an HTTP endpoint answers 2xx."""
    try:
        resp = wait_for_http(url, policy=PollPolicy(attempts=attempts, interval_s=interval))
    except ReadinessError as exc:
        _fail(str(exc))
    _ok(f"{url} responded HTTP {resp.status_code}")


@app.command("verify")
def verify(
    base_url: str = typer.Argument("http://localhost:8080"),
    attempts: int = typer.Option(30, "--attempts", "-n", min=1),
    interval: float = typer.Option(3.0, "--interval", "-i", min=0.0),
) -> None:
    """Require health status UP and a reachable root endpoint."""
    try:
        verify_deployment(base_url, policy=PollPolicy(attempts=attempts, interval_s=interval))
    except ReadinessError as exc:
        _fail(str(exc))
    _ok(f"application health status: UP ({base_url})")


@app.command("smoke")
def smoke(base_url: str = typer.Argument("http://localhost:8080")) -> None:
    """Run a create/fetch/delete round against a live deployment."""
    try:
        record = smoke_test(base_url)
    except ReadinessError as exc:
        _fail(str(exc))
    _ok(f"CRUD smoke test passed (tutorial id {record['id']})")
