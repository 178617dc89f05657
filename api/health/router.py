"""
Liveness/readiness endpoint, shaped like Spring Boot's actuator health.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core import db

logger = logging.getLogger(__name__)

router = APIRouter()


async def database_status() -> str:
    try:
        value = await db.fetch_val("SELECT 1")
    except db.DatabaseError as exc:
        logger.warning("health_db_down error=%s", exc)
        return "DOWN"
    return "UP" if value == 1 else "DOWN"


@router.get("/actuator/health")
async def health() -> JSONResponse:
    db_status = await database_status()
    overall = "UP" if db_status == "UP" else "DOWN"
    return JSONResponse(
        status_code=200 if overall == "UP" else 503,
        content={"status": overall, "components": {"db": {"status": db_status}}},
    )
