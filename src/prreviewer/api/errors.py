"""Exception handlers mapping engine failures to the API error envelope."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import DomainError, ErrorCode
from ..core.schemas.common import ErrorDetail, ErrorResponse
from ..core.storage.base import StoreError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "INTERNAL_ERROR"

STATUS_BY_CODE = {
    ErrorCode.TEAM_EXISTS: 400,
    ErrorCode.PR_EXISTS: 400,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.PR_MERGED: 409,
    ErrorCode.NOT_ASSIGNED: 409,
    ErrorCode.NO_CANDIDATE: 409,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.UNAUTHORIZED: 401,
}


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build a JSON response in the ``{"error": {"code", "message"}}`` envelope."""
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    return error_response(status_code, exc.code.value, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as INVALID_INPUT."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    message = "; ".join(problems) or "invalid request"
    return error_response(400, ErrorCode.INVALID_INPUT.value, message)


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
    return error_response(500, INTERNAL_ERROR, "internal server error")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(500, INTERNAL_ERROR, "internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
