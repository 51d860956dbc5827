"""
===============================================================================
CRC CARD — infrastructure/db/client.py
===============================================================================

Componente:
  Cliente MongoDB (singleton de proceso)

Responsabilidades:
  - Inicializar, exponer y cerrar el MongoClient (pool interno de pymongo).
  - Configurar timeouts (server selection / timeoutMS) y datetimes tz-aware.
  - Crear los índices que sostienen invariantes (email único).

Colaboradores:
  - pymongo.MongoClient
  - api/main.py (lifespan: init/close)
  - container.py (get_client / colecciones)

Principios:
  - Fail-fast (doble init, uso sin init)
  - Encapsulación (cliente global único, thread-safe)
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ...crosscutting.exceptions import DatabaseError
from ...crosscutting.logger import logger
from .errors import ClientAlreadyInitializedError, ClientNotInitializedError

EMAIL_INDEX_NAME = "email_unique"

_client: Optional[MongoClient] = None
_client_lock = threading.Lock()


def init_client(
    uri: str,
    *,
    server_selection_timeout_ms: int,
    timeout_ms: int = 0,
) -> MongoClient:
    """
    Inicializa el cliente (una vez por proceso).

    MongoClient conecta en background: un backend caído NO falla acá, sino en
    la primera operación (o en ping()).
    """
    global _client

    with _client_lock:
        if _client is not None:
            raise ClientAlreadyInitializedError("El cliente ya fue inicializado.")

        options: dict[str, object] = {
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            "tz_aware": True,
        }
        if timeout_ms > 0:
            options["timeoutMS"] = timeout_ms

        logger.info(
            "Inicializando cliente MongoDB",
            extra={
                "server_selection_timeout_ms": server_selection_timeout_ms,
                "timeout_ms": timeout_ms,
            },
        )
        _client = MongoClient(uri, **options)
        return _client


def get_client() -> MongoClient:
    """Retorna el cliente singleton."""
    if _client is None:
        raise ClientNotInitializedError(
            "Cliente no inicializado. Llamar init_client() primero."
        )
    return _client


def close_client() -> None:
    """Cierra el cliente (idempotente)."""
    global _client

    with _client_lock:
        if _client is not None:
            logger.info("Cerrando cliente MongoDB")
            try:
                _client.close()
            finally:
                _client = None


def ensure_user_indexes(collection: Collection) -> None:
    """
    Crea el índice único de email (idempotente).

    Raises:
        DatabaseError: si el backend rechaza la creación del índice.
    """
    try:
        collection.create_index(
            [("email", ASCENDING)], unique=True, name=EMAIL_INDEX_NAME
        )
    except PyMongoError as exc:
        logger.exception(
            "No se pudo crear el índice de email",
            extra={"collection": collection.name, "error": str(exc)},
        )
        raise DatabaseError(
            f"failed to create index {EMAIL_INDEX_NAME}", original_error=exc
        ) from exc
