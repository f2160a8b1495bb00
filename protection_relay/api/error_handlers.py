# This file defines the API error payload and the exception handlers that produce it.
# It exists so every failure returns the same `{success: false, error}` shape.
# Invalid input maps to 400, storefront failures and anything unexpected map to 500.
# Unexpected errors are logged with a stack trace but only a generic message reaches the client.

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from protection_relay.common.errors import InvalidInput, RemoteError, UnknownError

LOGGER = logging.getLogger("protection")

GENERIC_ERROR_MESSAGE = "unknown error"


def _error_body(message: str) -> dict[str, object]:
    return {"success": False, "error": message}


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
        LOGGER.info("rejected invalid input request_id=%s error=%s", _request_id(request), exc)
        return JSONResponse(status_code=400, content=_error_body(str(exc)))

    @app.exception_handler(RemoteError)
    async def remote_error_handler(request: Request, exc: RemoteError) -> JSONResponse:
        LOGGER.error(
            "admin api error request_id=%s status=%s body=%s",
            _request_id(request),
            exc.status,
            exc.body,
        )
        return JSONResponse(status_code=500, content=_error_body(str(exc)))

    @app.exception_handler(UnknownError)
    async def unknown_error_handler(request: Request, exc: UnknownError) -> JSONResponse:
        LOGGER.error("price update failed request_id=%s error=%s", _request_id(request), exc)
        return JSONResponse(status_code=500, content=_error_body(GENERIC_ERROR_MESSAGE))

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail)))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("unhandled error request_id=%s", _request_id(request), exc_info=exc)
        return JSONResponse(status_code=500, content=_error_body(GENERIC_ERROR_MESSAGE))
