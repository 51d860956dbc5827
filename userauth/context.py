"""
===============================================================================
TARJETA CRC — userauth/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar en una ContextVar el contexto del request en curso:
    request_id, método, path y (si hubo login por token) el subject.
  - Exponer el contexto como dict plano para enriquecer logs.

Colaboradores:
  - crosscutting.middleware: abre/cierra el contexto por request.
  - interfaces.api.http.dependencies: asocia el subject del token.
  - crosscutting.logger: lee as_log_fields().

Restricciones:
  - RequestContext es inmutable; bind_subject() reemplaza el valor actual.
  - Campos vacíos no se emiten.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import asdict, dataclass, replace


@dataclass(frozen=True, slots=True)
class RequestContext:
    request_id: str = ""
    method: str = ""
    path: str = ""
    subject: str = ""


_EMPTY = RequestContext()
_current: ContextVar[RequestContext] = ContextVar("userauth_request", default=_EMPTY)


def open_request(*, request_id: str, method: str, path: str) -> Token:
    """Inicia el contexto del request. Devuelve el token para close_request()."""
    return _current.set(RequestContext(request_id=request_id, method=method, path=path))


def close_request(token: Token) -> None:
    _current.reset(token)


def bind_subject(subject: str) -> None:
    """Asocia el usuario autenticado (sub del JWT) al request en curso."""
    _current.set(replace(_current.get(), subject=subject))


def current_request() -> RequestContext:
    return _current.get()


def as_log_fields() -> dict[str, str]:
    return {key: value for key, value in asdict(_current.get()).items() if value}
