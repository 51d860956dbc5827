"""
===============================================================================
TARJETA CRC — userauth/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir errores tipados del servicio a respuestas HTTP RFC7807.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Mapeo:
  NotFoundError            -> 404 NOT_FOUND
  CredentialsError         -> 401 UNAUTHORIZED
  InvalidTokenError        -> 401 UNAUTHORIZED
  ValidationError          -> 422 VALIDATION_ERROR (incluye InvalidClaimError)
  InvalidIDError           -> 400 INVALID_ID
  DuplicateRecordError     -> 409 CONFLICT
  BackendUnavailableError  -> 503 SERVICE_UNAVAILABLE
  TransactionAbortError    -> 500 TRANSACTION_ABORTED
  DatabaseError            -> 503 DATABASE_ERROR
  UserAuthError (resto)    -> 500 INTERNAL_ERROR (Hashing / Signing)

Colaboradores:
  - crosscutting.error_responses: problem_response, app_exception_handler
  - crosscutting.exceptions: UserAuthError y derivadas
  - crosscutting.config.get_settings (para decidir nivel de detalle)
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    problem_response,
)
from ..crosscutting.exceptions import (
    BackendUnavailableError,
    CredentialsError,
    DatabaseError,
    DuplicateRecordError,
    InvalidIDError,
    InvalidTokenError,
    NotFoundError,
    TransactionAbortError,
    UserAuthError,
    ValidationError,
)
from ..crosscutting.logger import logger

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


@dataclass(frozen=True, slots=True)
class _Mapping:
    status_code: int
    code: ErrorCode
    headers: dict[str, str] | None = None


# R: Starlette resuelve por MRO; las subclases de DatabaseError ganan sobre la base.
ERROR_MAPPINGS: dict[type[UserAuthError], _Mapping] = {
    NotFoundError: _Mapping(404, ErrorCode.NOT_FOUND),
    CredentialsError: _Mapping(401, ErrorCode.UNAUTHORIZED, _BEARER_CHALLENGE),
    InvalidTokenError: _Mapping(401, ErrorCode.UNAUTHORIZED, _BEARER_CHALLENGE),
    ValidationError: _Mapping(422, ErrorCode.VALIDATION_ERROR),
    InvalidIDError: _Mapping(400, ErrorCode.INVALID_ID),
    DuplicateRecordError: _Mapping(409, ErrorCode.CONFLICT),
    BackendUnavailableError: _Mapping(503, ErrorCode.SERVICE_UNAVAILABLE),
    TransactionAbortError: _Mapping(500, ErrorCode.TRANSACTION_ABORTED),
    DatabaseError: _Mapping(503, ErrorCode.DATABASE_ERROR),
    UserAuthError: _Mapping(500, ErrorCode.INTERNAL_ERROR),
}


def _mapping_for(exc: UserAuthError) -> _Mapping:
    for cls in type(exc).__mro__:
        if cls in ERROR_MAPPINGS:
            return ERROR_MAPPINGS[cls]
    return ERROR_MAPPINGS[UserAuthError]


async def service_error_handler(request: Request, exc: UserAuthError) -> JSONResponse:
    mapping = _mapping_for(exc)
    logger.log(
        logging.ERROR if mapping.status_code >= 500 else logging.WARNING,
        "Error de servicio: %s",
        mapping.code.value,
        extra={
            "error_code": exc.error_code,
            "error_id": exc.error_id,
            "error_message": exc.message,
        },
    )
    return problem_response(
        request,
        status_code=mapping.status_code,
        code=mapping.code,
        detail=exc.message,
        errors=[{"error_id": exc.error_id, "error_code": exc.error_code}],
        headers=mapping.headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Stacktrace al log; en producción el cliente solo ve un mensaje genérico."""
    logger.error("Excepción no controlada", exc_info=exc)
    detail = "Error interno." if get_settings().is_production() else str(exc)
    return problem_response(
        request, status_code=500, code=ErrorCode.INTERNAL_ERROR, detail=detail
    )


def register_exception_handlers(app) -> None:
    for error_cls in ERROR_MAPPINGS:
        app.add_exception_handler(error_cls, service_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["ERROR_MAPPINGS", "register_exception_handlers"]
