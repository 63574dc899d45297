"""
Exception handlers that render every failure in the response envelope:

    {"success": false, "message": "...", "code": "...", "details": {...}}

``details`` is omitted when there is nothing to add.
"""

import logging
from typing import Any, Dict, NoReturn, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException
from .schemas.base_responses import ErrorResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred processing your request"


def _code_from_status(status_code: int) -> str:
    mapping = {
        400: "VALIDATION_ERROR",
        401: "AUTH_ERROR",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        500: "INTERNAL_ERROR",
    }
    return mapping.get(status_code, "ERROR")


def _envelope(
    *,
    message: str,
    code: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    body = ErrorResponse(
        message=message, code=code, details=jsonable_encoder(details) if details else None
    )
    return body.model_dump(exclude_none=True)


def _parse_detail(detail: Any) -> tuple[Optional[str], Optional[str], Optional[Any]]:
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        message = detail.get("message") or detail.get("detail")
        detail_text = message if isinstance(message, str) else None
        return detail_text, code, detail.get("details")
    if isinstance(detail, str):
        return detail, None, None
    if detail is None:
        return None, None, None
    return str(detail), None, None


def _describe_validation_errors(errors: Any) -> str:
    """First validation error as a short sentence, e.g. 'rating: Input should be ...'."""
    for error in errors or []:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        msg = error.get("msg", "Invalid value")
        return f"{'.'.join(loc)}: {msg}" if loc else msg
    return "Request validation failed"


def _validation_response(errors: Any) -> JSONResponse:
    detail_list = jsonable_encoder(errors)
    return JSONResponse(
        _envelope(
            message=_describe_validation_errors(detail_list),
            code="VALIDATION_ERROR",
            details={"errors": detail_list},
        ),
        status_code=400,
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        http_exc = exc.to_http_exception()
        detail_text, code, details = _parse_detail(http_exc.detail)
        return JSONResponse(
            _envelope(message=detail_text or "", code=code or exc.code, details=details),
            status_code=http_exc.status_code,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail_text, code, details = _parse_detail(exc.detail)
        return JSONResponse(
            _envelope(
                message=detail_text or "",
                code=code or _code_from_status(exc.status_code),
                details=details,
            ),
            status_code=exc.status_code,
            headers=exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail_text, code, details = _parse_detail(exc.detail)
        return JSONResponse(
            _envelope(
                message=detail_text or "",
                code=code or _code_from_status(exc.status_code),
                details=details,
            ),
            status_code=exc.status_code,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _validation_response(exc.errors())

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _validation_response(exc.errors())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            _envelope(message=GENERIC_ERROR_MESSAGE, code="INTERNAL_ERROR"),
            status_code=500,
        )


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception()
