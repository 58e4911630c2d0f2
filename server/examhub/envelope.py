"""
Response envelope and exception handlers.

Every response carries `status_code`, `correlation_id`, `message`, `path`
and either `data` or `error: {kind, detail}`.
"""
import logging
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from examhub.errors import ErrorKind, ExamHubError

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

_STATUS_KINDS = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.UNAUTHENTICATED,
    403: ErrorKind.ACCESS_DENIED,
    404: ErrorKind.NOT_FOUND,
    422: ErrorKind.VALIDATION,
}


def get_correlation_id(request: Request) -> str:
    cid = getattr(request.state, "correlation_id", None)
    if not cid:
        cid = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = cid
    return cid


def success(request: Request, data: Any, message: str = "OK", status_code: int = 200) -> JSONResponse:
    body = {
        "status_code": status_code,
        "correlation_id": get_correlation_id(request),
        "message": message,
        "path": request.url.path,
        "data": jsonable_encoder(data),
    }
    headers = {CORRELATION_HEADER: body["correlation_id"]}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def error_response(
    request: Request,
    kind: ErrorKind,
    status_code: int,
    message: str,
    detail: Optional[Any] = None,
) -> JSONResponse:
    body = {
        "status_code": status_code,
        "correlation_id": get_correlation_id(request),
        "message": message,
        "path": request.url.path,
        "error": {"kind": kind.value, "detail": jsonable_encoder(detail)},
    }
    headers = {CORRELATION_HEADER: body["correlation_id"]}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def examhub_error_handler(request: Request, exc: ExamHubError):
    cid = get_correlation_id(request)
    logger.warning("[%s] %s %s -> %s: %s", cid, request.method, request.url.path, exc.kind.value, exc.detail)
    return error_response(request, exc.kind, exc.status_code, exc.message, exc.detail)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    cid = get_correlation_id(request)
    logger.info("[%s] %s %s -> invalid request body", cid, request.method, request.url.path)
    return error_response(request, ErrorKind.VALIDATION, 400, "Validation error", exc.errors())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    kind = _STATUS_KINDS.get(exc.status_code, ErrorKind.INTERNAL)
    return error_response(request, kind, exc.status_code, str(exc.detail), exc.detail)


async def unhandled_exception_handler(request: Request, exc: Exception):
    cid = get_correlation_id(request)
    logger.exception("[%s] Unhandled error on %s %s", cid, request.method, request.url.path)
    message = str(exc) or "Internal error"
    return error_response(request, ErrorKind.INTERNAL, 500, message, message)


def install(app: FastAPI):
    """Register the correlation-id middleware and the exception handlers."""

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        cid = get_correlation_id(request)
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = cid
        return response

    app.add_exception_handler(ExamHubError, examhub_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
