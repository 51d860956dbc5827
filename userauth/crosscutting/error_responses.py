# userauth/crosscutting/error_responses.py
"""
===============================================================================
TARJETA CRC — crosscutting/error_responses.py (Problem Details, RFC 7807)
===============================================================================

Responsabilidades:
  - Catálogo estable de códigos de error (ErrorCode) para los clientes.
  - Modelo ErrorDetail y su documentación OpenAPI compartida.
  - AppHTTPException: error HTTP que ya conoce su ErrorCode.
  - problem_response(): única forma de construir la respuesta problem+json.

Colaboradores:
  - api/exception_handlers.py (traduce UserAuthError -> problem_response)
  - interfaces/api/http/dependencies.py (unauthorized / forbidden)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"
    TRANSACTION_ABORTED = "TRANSACTION_ABORTED"

    @property
    def title(self) -> str:
        return self.value.replace("_", " ").capitalize()


class ErrorDetail(BaseModel):
    """Cuerpo problem+json; `errors` lleva error_id/error_code/request_id."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {
        "description": description,
        "model": ErrorDetail,
        "content": {PROBLEM_JSON_MEDIA_TYPE: {}},
    }
    for status, description in (
        (400, "Malformed identifier"),
        (401, "Missing or invalid credentials"),
        (403, "Missing required claim"),
        (404, "User not found"),
        (409, "Duplicate record"),
        (422, "Invalid input"),
        (503, "Database unavailable"),
    )
}


class AppHTTPException(HTTPException):
    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.errors = errors


def unauthorized(detail: str = "Authentication required") -> AppHTTPException:
    return AppHTTPException(
        401, ErrorCode.UNAUTHORIZED, detail, headers={"WWW-Authenticate": "Bearer"}
    )


def forbidden(detail: str) -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def problem_response(
    request: Request,
    *,
    status_code: int,
    code: ErrorCode,
    detail: str,
    errors: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    entries = list(errors or [])
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        entries.append({"request_id": request_id})

    body = ErrorDetail(
        type=f"urn:userauth:error:{code.value.lower()}",
        title=code.title,
        status=status_code,
        detail=detail,
        code=code,
        instance=request.url.path,
        errors=entries or None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


async def app_exception_handler(request: Request, exc: AppHTTPException) -> JSONResponse:
    return problem_response(
        request,
        status_code=exc.status_code,
        code=exc.code,
        detail=str(exc.detail),
        errors=exc.errors,
        headers=exc.headers,
    )
