from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError as SAOperationalError
from sqlalchemy.orm import Session
from starlette.responses import JSONResponse

from campus import __version__
from campus.api.router import api_router
from campus.core.bootstrap import bootstrap_store
from campus.core.config import settings
from campus.core.database import get_db, ping
from campus.core.errors import CampusError
from campus.core.logging import setup_logging


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    bootstrap_store()
    yield


def create_app() -> FastAPI:
    setup_logging(environment=settings.environment, level=settings.log_level)
    is_production = settings.is_production
    app = FastAPI(
        title="Campus Facilities API",
        version=__version__,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
        lifespan=lifespan,
    )

    @app.exception_handler(CampusError)
    def _campus_error(_request, exc: CampusError):
        if exc.status_code >= 500:
            logger.error("Unhandled campus error %s", exc.code, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(SAOperationalError)
    def _sqlalchemy_operational_error(_request, exc: SAOperationalError):
        logger.warning("Database operation failed (500)", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "code": "DATABASE_ERROR",
                "message": "Database operation failed.",
                "errors": [],
            },
        )

    allow_origins = [settings.frontend_origin]
    allow_origin_regex = None
    if not is_production:
        # Dev-friendly: allow the configured origin and any localhost port.
        allow_origins.extend(["http://localhost:5173", "http://127.0.0.1:5173"])
        allow_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_origin_regex=allow_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health(db: Session = Depends(get_db)) -> dict:
        # Always respond; reflect DB availability without crashing.
        return {"app": "ok", "database": "ok" if ping(db) else "down"}

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
