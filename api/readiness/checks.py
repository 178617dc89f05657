"""
Bounded readiness polling used by the deployment scripts and CI.

Each wait runs at most `attempts` probes, `interval_s` apart, and raises
`ReadinessError` with the last failure once the budget is spent.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import asyncpg
import httpx

logger = logging.getLogger(__name__)


class ReadinessError(RuntimeError):
    pass


@dataclass(frozen=True)
class PollPolicy:
    attempts: int = 30
    interval_s: float = 2.0


def _json_object(resp: httpx.Response, what: str) -> dict:
    try:
        body = resp.json()
    except ValueError as exc:
        raise ReadinessError(f"{what} returned a non-JSON body: {resp.text[:200]!r}") from exc
    if not isinstance(body, dict):
        raise ReadinessError(f"{what} returned {type(body).__name__}, expected a JSON object.")
    return body


def _poll(
    probe: Callable[[], str | None],
    *,
    what: str,
    policy: PollPolicy,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Call `probe` until it returns None (ready) or the attempt budget is spent.

    `probe` returns a short failure reason while the target is not ready.
    Returns the attempt number that succeeded.
    """
    if policy.attempts < 1:
        raise ValueError("attempts must be >= 1")

    reason = "not attempted"
    for attempt in range(1, policy.attempts + 1):
        reason = probe()
        if reason is None:
            logger.info("ready target=%s attempt=%s", what, attempt)
            return attempt
        logger.debug("not_ready target=%s attempt=%s reason=%s", what, attempt, reason)
        if attempt < policy.attempts:
            sleep(policy.interval_s)

    raise ReadinessError(f"{what} not ready after {policy.attempts} attempts: {reason}")


def wait_for_http(
    url: str,
    *,
    policy: PollPolicy = PollPolicy(attempts=30, interval_s=3.0),
    client: httpx.Client | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> httpx.Response:
    """
    Poll `url` with GET until it answers 2xx. Returns the successful response.
    """
    owns_client = client is None
    http = client or httpx.Client(timeout=5.0)
    last: dict[str, httpx.Response] = {}

    def probe() -> str | None:
        try:
            resp = http.get(url)
        except httpx.HTTPError as exc:
            return f"{type(exc).__name__}: {exc}"
        if resp.is_success:
            last["response"] = resp
            return None
        return f"HTTP {resp.status_code}"

    try:
        _poll(probe, what=url, policy=policy, sleep=sleep)
    finally:
        if owns_client:
            http.close()
    return last["response"]


async def _try_connect(dsn: str, timeout_s: float) -> None:
    conn = await asyncpg.connect(dsn=dsn, timeout=timeout_s)
    try:
        await conn.fetchval("SELECT 1")
    finally:
        await conn.close()


def wait_for_database(
    dsn: str,
    *,
    policy: PollPolicy = PollPolicy(attempts=30, interval_s=2.0),
    connect: Callable[[str], Any] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Poll PostgreSQL until a connection succeeds and `SELECT 1` runs.
    """
    run = connect or (lambda target: asyncio.run(_try_connect(target, 5.0)))

    def probe() -> str | None:
        try:
            run(dsn)
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
            return f"{type(exc).__name__}: {exc}"
        return None

    return _poll(probe, what="database", policy=policy, sleep=sleep)


def verify_deployment(
    base_url: str,
    *,
    policy: PollPolicy = PollPolicy(attempts=30, interval_s=3.0),
    client: httpx.Client | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> dict:
    """
    Wait for the health endpoint, require status UP, then probe the root path.
    """
    base_url = base_url.rstrip("/")
    owns_client = client is None
    http = client or httpx.Client(timeout=5.0)
    try:
        resp = wait_for_http(f"{base_url}/actuator/health", policy=policy, client=http, sleep=sleep)
        health = _json_object(resp, "Health endpoint")
        if health.get("status") != "UP":
            raise ReadinessError(f"Health status is {health.get('status')!r}, expected 'UP'.")

        root = http.get(f"{base_url}/")
        if not root.is_success:
            raise ReadinessError(f"Root endpoint returned HTTP {root.status_code}.")
    except httpx.HTTPError as exc:
        raise ReadinessError(f"Request failed: {exc}") from exc
    finally:
        if owns_client:
            http.close()
    return health


def smoke_test(base_url: str, *, client: httpx.Client | None = None) -> dict:
    """
    Create, fetch, delete, then re-fetch one tutorial against a live deployment.

    Returns the record that was created.
    """
    base_url = base_url.rstrip("/")
    owns_client = client is None
    http = client or httpx.Client(timeout=10.0)
    payload = {"title": "smoke-test", "description": "readiness smoke test", "published": True}
    try:
        created = http.post(f"{base_url}/api/tutorials", json=payload)
        if created.status_code != 201:
            raise ReadinessError(f"Create returned HTTP {created.status_code}.")
        record = _json_object(created, "Create")
        if "id" not in record:
            raise ReadinessError("Create response has no id.")
        item_url = f"{base_url}/api/tutorials/{record['id']}"

        fetched = http.get(item_url)
        if fetched.status_code != 200:
            raise ReadinessError(f"Fetch returned HTTP {fetched.status_code}.")
        body = _json_object(fetched, "Fetch")
        for key, value in payload.items():
            if body.get(key) != value:
                raise ReadinessError(f"Fetched {key}={body.get(key)!r}, expected {value!r}.")

        deleted = http.delete(item_url)
        if deleted.status_code != 204:
            raise ReadinessError(f"Delete returned HTTP {deleted.status_code}.")

        gone = http.get(item_url)
        if gone.status_code != 404:
            raise ReadinessError(f"Fetch after delete returned HTTP {gone.status_code}, expected 404.")
    except httpx.HTTPError as exc:
        raise ReadinessError(f"Request failed: {exc}") from exc
    finally:
        if owns_client:
            http.close()
    return record
