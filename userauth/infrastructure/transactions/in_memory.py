"""
============================================================
TARJETA CRC — infrastructure/transactions/in_memory.py
============================================================
Class: InMemoryTransactionCoordinator

Responsibilities:
  - Emular la unidad atómica sobre repositorios InMemoryRepository.
  - Tomar los locks de todos los repositorios participantes durante la unidad
    (aislamiento equivalente a snapshot para un único proceso).
  - Tomar snapshot antes de ejecutar y restaurarlo ante cualquier falla.

Collaborators:
  - infrastructure.repositories.in_memory.InMemoryRepository (lock/snapshot/restore)
  - crosscutting.exceptions.TransactionAbortError

Constraints / Notes:
  - Las operaciones reciben un InMemorySession; los repos in-memory lo ignoran.
  - La sesión se marca como cerrada siempre (finally).
============================================================
"""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from typing import Any, List, Sequence
from uuid import uuid4

from ...crosscutting.exceptions import TransactionAbortError, UserAuthError
from ...crosscutting.logger import logger
from ...domain.repositories import WriteOperation
from ..repositories.in_memory import InMemoryRepository


@dataclass
class InMemorySession:
    """Handle opaco de sesión (solo para trazabilidad y asserts de tests)."""

    session_id: str
    active: bool = True


class InMemoryTransactionCoordinator:
    """TransactionCoordinator para repositorios in-memory."""

    def __init__(self, *repositories: InMemoryRepository) -> None:
        self._repositories = repositories
        self.last_session: InMemorySession | None = None

    def run(self, operations: Sequence[WriteOperation]) -> List[Any]:
        operations = list(operations)
        session = InMemorySession(session_id=str(uuid4()))
        self.last_session = session

        with ExitStack() as stack:
            for repo in self._repositories:
                stack.enter_context(repo.lock)
            snapshots = [repo.snapshot() for repo in self._repositories]

            try:
                results = [operation(session) for operation in operations]
            except Exception as exc:
                # R: rollback ante cualquier falla; solo los errores tipados se
                #    traducen (un bug se propaga tal cual, igual que en Mongo).
                for repo, snapshot in zip(self._repositories, snapshots):
                    repo.restore(snapshot)
                logger.warning(
                    "Transacción abortada",
                    extra={
                        "operations": len(operations),
                        "error_type": type(exc).__name__,
                        "error_code": getattr(exc, "error_code", None),
                    },
                )
                if not isinstance(exc, UserAuthError):
                    raise
                raise TransactionAbortError(
                    "atomic unit aborted; no writes were applied", original_error=exc
                ) from exc
            finally:
                session.active = False

        logger.info("Transacción confirmada", extra={"operations": len(operations)})
        return results
