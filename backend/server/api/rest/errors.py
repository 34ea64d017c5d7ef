from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.errors import StreamingAppError
from infrastructure.utils import format_kv

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    401: "not_authenticated",
    403: "not_authenticated",
    404: "not_found",
    405: "method_not_allowed",
}


def error_response(status_code: int, payload: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": jsonable_encoder(payload)})


async def _app_error_handler(request: Request, exc: StreamingAppError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(
        level,
        format_kv(event="request_failed", method=request.method, path=request.url.path, code=exc.code, message=exc.message),
    )
    return error_response(exc.status_code, exc.to_payload())


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(e.get("loc") or ()), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return error_response(
        422,
        {"code": "invalid_input", "message": "request validation failed", "retryable": False, "details": {"errors": errors}},
    )


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, "http_error")
    return error_response(
        exc.status_code,
        {"code": code, "message": str(exc.detail or code), "retryable": exc.status_code >= 500},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(format_kv(event="unhandled_error", method=request.method, path=request.url.path))
    return error_response(500, {"code": "internal_error", "message": "internal server error", "retryable": False})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StreamingAppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
