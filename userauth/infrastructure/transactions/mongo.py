"""
============================================================
TARJETA CRC — infrastructure/transactions/mongo.py
============================================================
Class: MongoTransactionCoordinator

Responsibilities:
  - Ejecutar una secuencia de escrituras como unidad todo-o-nada.
  - Configurar la transacción con:
      - write concern "majority"
      - read concern "snapshot"
      - read preference primary (requisito de transacciones multi-documento)
  - Garantizar el cierre de la sesión (with start_session()) con éxito o falla.
  - Traducir cualquier falla de la unidad a TransactionAbortError.

Collaborators:
  - pymongo.MongoClient / ClientSession.with_transaction
  - domain.repositories.TransactionCoordinator (puerto)
  - crosscutting.exceptions.TransactionAbortError

Constraints / Notes:
  - with_transaction() reintenta la unidad COMPLETA ante errores con label
    TransientTransactionError / UnknownTransactionCommitResult; nunca se
    reintenta una escritura individual.
  - Las operaciones reciben la ClientSession y deben pasarla al driver.
============================================================
"""

from __future__ import annotations

from typing import Any, List, Sequence

from pymongo import MongoClient
from pymongo.client_session import ClientSession
from pymongo.errors import PyMongoError
from pymongo.read_concern import ReadConcern
from pymongo.read_preferences import ReadPreference
from pymongo.write_concern import WriteConcern

from ...crosscutting.exceptions import TransactionAbortError, UserAuthError
from ...crosscutting.logger import logger
from ...domain.repositories import WriteOperation


class MongoTransactionCoordinator:
    """TransactionCoordinator sobre sesiones de MongoDB."""

    def __init__(self, client: MongoClient) -> None:
        self._client = client

    @staticmethod
    def transaction_options() -> dict[str, Any]:
        """Opciones de la unidad atómica (majority / snapshot / primary)."""
        return {
            "read_concern": ReadConcern("snapshot"),
            "write_concern": WriteConcern("majority"),
            "read_preference": ReadPreference.PRIMARY,
        }

    def run(self, operations: Sequence[WriteOperation]) -> List[Any]:
        operations = list(operations)

        def callback(session: ClientSession) -> List[Any]:
            return [operation(session) for operation in operations]

        try:
            with self._client.start_session() as session:
                results = session.with_transaction(
                    callback, **self.transaction_options()
                )
        except (PyMongoError, UserAuthError) as exc:
            logger.warning(
                "Transacción abortada",
                extra={
                    "operations": len(operations),
                    "error_type": type(exc).__name__,
                    "error_code": getattr(exc, "error_code", None),
                },
            )
            raise TransactionAbortError(
                "atomic unit aborted; no writes were applied", original_error=exc
            ) from exc

        logger.info("Transacción confirmada", extra={"operations": len(operations)})
        return results
