"""
HTTP error shaping.

Every error leaves the API as a problem document: ``detail`` holds the
localized user message, ``code`` the stable error code and ``errors`` the
safe details. Internal diagnostic messages are logged, never returned.
"""

import logging
from typing import Any, Dict, NoReturn, Optional, TypeVar

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException
from .core.messages import get_user_message
from .core.result import Err, Ok, Result

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _title_from_status(status_code: int) -> str:
    mapping = {
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        409: "Conflict",
        422: "Unprocessable Entity",
        500: "Internal Server Error",
        503: "Service Unavailable",
    }
    return mapping.get(status_code, "Error")


def _problem(
    *,
    status: int,
    detail: Optional[str] = None,
    instance: Optional[str] = None,
    code: Optional[str] = None,
    errors: Optional[Any] = None,
) -> Dict[str, Any]:
    problem: Dict[str, Any] = {
        "type": "about:blank",
        "title": _title_from_status(status),
        "status": status,
        "detail": detail or "",
        "instance": instance or "",
    }
    if code:
        problem["code"] = code
    if errors is not None:
        problem["errors"] = errors
    return problem


def _parse_detail(detail: Any) -> tuple[Optional[str], Optional[str], Optional[Any]]:
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        message = detail.get("message") or detail.get("detail")
        detail_text = message if isinstance(message, str) else None
        errors = detail.get("details") or detail.get("errors")
        return detail_text, code, errors
    if isinstance(detail, str):
        return detail, None, None
    if detail is None:
        return None, None, None
    return str(detail), None, None


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    logger.info(
        f"Domain error {exc.code}: {exc.message}",
        extra={"code": exc.code, "kind": exc.kind.value},
    )
    raise exc.to_http_exception()


def unwrap_or_raise(result: Result[T]) -> T:
    """Return the value of ``Ok``; turn ``Err`` into the matching HTTP error."""
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, Err):
        handle_domain_exception(result.error)
    raise TypeError(f"Expected Ok or Err, got {type(result).__name__}")


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail_text, code, errors = _parse_detail(exc.detail)
        problem = _problem(
            status=exc.status_code,
            detail=detail_text,
            instance=request.url.path,
            code=code,
            errors=jsonable_encoder(errors) if errors is not None else None,
        )
        return JSONResponse(
            problem,
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        http_exc: HTTPException = exc.to_http_exception()
        detail_text, code, errors = _parse_detail(http_exc.detail)
        return JSONResponse(
            _problem(
                status=http_exc.status_code,
                detail=detail_text,
                instance=request.url.path,
                code=code,
                errors=jsonable_encoder(errors) if errors else None,
            ),
            status_code=http_exc.status_code,
            headers=http_exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        detail_list = jsonable_encoder(exc.errors())
        return JSONResponse(
            content=_problem(
                status=status.HTTP_400_BAD_REQUEST,
                detail=get_user_message("VALIDATION_ERROR"),
                instance=request.url.path,
                code="VALIDATION_ERROR",
                errors=detail_list,
            ),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
