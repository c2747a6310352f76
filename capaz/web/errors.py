"""Exception handlers rendering every failure as ``{status, message, errors?}``."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from capaz.config import get_config
from capaz.core.errors import CapazError, ValidationError, errors_from_pydantic

logger = structlog.get_logger()


async def capaz_error_handler(request: Request, exc: CapazError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_error", path=request.url.path, error=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, status_code=exc.status_code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(errors=errors_from_pydantic(exc.errors()))
    logger.info("request_rejected", path=request.url.path, status_code=400, errors=error.errors)
    return JSONResponse(status_code=400, content=error.to_body())


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": str(exc.detail)},
        headers=exc.headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error=str(exc))

    try:
        production = get_config().is_production
    except KeyError:
        production = True
    message = "Internal server error" if production else str(exc) or "Internal server error"
    return JSONResponse(status_code=500, content={"status": "error", "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CapazError, capaz_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
