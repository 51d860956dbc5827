# userauth/crosscutting/middleware.py
"""
===============================================================================
TARJETA CRC — crosscutting/middleware.py (Request context + access log)
===============================================================================

Responsabilidades:
  - Aceptar X-Request-Id entrante (si es razonable) o generar uno nuevo.
  - Abrir/cerrar el RequestContext para que los logs queden correlacionados.
  - Registrar métricas HTTP y una línea de access log por request.

Colaboradores:
  - userauth/context.py (open_request / close_request)
  - crosscutting/metrics.py (record_request_metrics)
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import close_request, open_request
from .logger import logger
from .metrics import record_request_metrics

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_REQUEST_ID_LEN = 128
# R: health/metrics se consultan seguido; no generan access log.
_UNLOGGED_PATHS = frozenset({"/healthz", "/metrics"})


def resolve_request_id(header_value: str | None) -> str:
    candidate = (header_value or "").strip()
    if candidate and len(candidate) <= _MAX_REQUEST_ID_LEN and candidate.isprintable():
        return candidate
    return uuid.uuid4().hex


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        path = request.url.path
        ctx_token = open_request(request_id=request_id, method=request.method, path=path)
        request.state.request_id = request_id

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            logger.exception("Request sin respuesta", extra={"status_code": status_code})
            raise
        finally:
            elapsed = time.perf_counter() - started
            record_request_metrics(
                endpoint=path,
                method=request.method,
                status_code=status_code,
                latency_seconds=elapsed,
            )
            if path not in _UNLOGGED_PATHS:
                logger.info(
                    "%s %s -> %s",
                    request.method,
                    path,
                    status_code,
                    extra={"latency_ms": round(elapsed * 1000, 2)},
                )
            close_request(ctx_token)
