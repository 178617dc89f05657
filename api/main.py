import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import db, settings
from core.logging_config import configure_logging
from health import router as health_router
from tutorials import router as tutorials_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


def create_app() -> FastAPI:
    app = FastAPI(title="tutorial-store", lifespan=lifespan)

    # Allow local frontend dev server to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(db.DatabaseError)
    async def database_error_handler(request: Request, exc: db.DatabaseError) -> JSONResponse:
        logger.error("database_unavailable path=%s error=%s", request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": "Database unavailable."})

    app.include_router(tutorials_router.router, tags=["tutorials"])
    app.include_router(health_router.router, tags=["health"])

    @app.get("/")
    def root() -> dict:
        return {"message": "tutorial-store api"}

    return app


app = create_app()
