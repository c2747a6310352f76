"""FastAPI application for the Capaz skills-assessment API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.base import BaseHTTPMiddleware

from capaz.config import get_config
from capaz.core.logging import configure_logging
from capaz.db.connection import close_db
from capaz.web.errors import register_exception_handlers
from capaz.web.routes import assessments, auth, health, skills, users

logger = structlog.get_logger()


# Request Logging Middleware
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()

        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("request_failed", error=str(exc))
            raise

        logger.info("request_completed", status_code=response.status_code)
        response.headers["X-Request-ID"] = request_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app_startup")
    yield
    await close_db()
    logger.info("app_shutdown")


def create_app() -> FastAPI:
    config = get_config()
    configure_logging()

    app = FastAPI(
        title="Capaz API",
        description="Multi-tenant skills assessment backend",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus Metrics
    Instrumentator().instrument(app).expose(app)

    register_exception_handlers(app)

    prefix = config.api.prefix
    app.include_router(auth.router, prefix=prefix)
    app.include_router(skills.router, prefix=prefix)
    app.include_router(assessments.router, prefix=prefix)
    app.include_router(users.router, prefix=prefix)
    app.include_router(health.router, prefix=prefix)

    return app


app = create_app()
