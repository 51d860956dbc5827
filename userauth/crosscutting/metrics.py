"""
===============================================================================
MÓDULO: Métricas Prometheus (baja cardinalidad)
===============================================================================

Responsabilidades:
  - Registrar métricas HTTP (requests y latencia por endpoint normalizado)
  - Registrar resultados de login y de transacciones atómicas
  - Exponer el payload de /metrics

Colaboradores:
  - crosscutting/middleware.py (record_request_metrics)
  - application/user_service.py (login / transacciones)
  - api/main.py (/metrics)

Notas:
  - Registry propio (no el global) para que los tests puedan importar el
    módulo varias veces sin colisiones de nombres.
  - Los IDs (ObjectId hex) se normalizan a {id} en los paths.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

# ------------------------
# HTTP
# ------------------------
_requests_total = Counter(
    "userauth_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)
_request_latency = Histogram(
    "userauth_request_latency_seconds",
    "Latencia de requests HTTP",
    ["endpoint", "method"],
    registry=_registry,
)

# ------------------------
# Negocio
# ------------------------
_login_attempts_total = Counter(
    "userauth_login_attempts_total",
    "Intentos de login por resultado",
    ["outcome"],
    registry=_registry,
)
_transactions_total = Counter(
    "userauth_transactions_total",
    "Unidades atómicas por resultado",
    ["outcome"],
    registry=_registry,
)

_OBJECT_ID_RE = re.compile(r"/[0-9a-f]{24}(?=/|$)", re.IGNORECASE)
_EMAIL_SEGMENT_RE = re.compile(r"/email/[^/]+")


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra métricas HTTP (endpoint normalizado, status agrupado)."""
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized,
        method=method,
        status=_status_bucket(status_code),
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_login_attempt(outcome: str) -> None:
    """outcome: success | unknown_email | wrong_password."""
    _login_attempts_total.labels(outcome=outcome).inc()


def record_transaction(outcome: str) -> None:
    """outcome: committed | aborted."""
    _transactions_total.labels(outcome=outcome).inc()


def _normalize_endpoint(path: str) -> str:
    """Reemplaza ObjectIds y emails por placeholders."""
    path = _EMAIL_SEGMENT_RE.sub("/email/{email}", path)
    return _OBJECT_ID_RE.sub("/{id}", path)


def _status_bucket(code: int) -> str:
    """Agrupa status code para baja cardinalidad."""
    if 200 <= code < 300:
        return "2xx"
    if 400 <= code < 500:
        return "4xx"
    if 500 <= code < 600:
        return "5xx"
    return "other"


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
