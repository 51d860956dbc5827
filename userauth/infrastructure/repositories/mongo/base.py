"""
============================================================
TARJETA CRC — infrastructure/repositories/mongo/base.py
============================================================
Class: MongoRepository[T]

Responsibilities:
  - Implementar el puerto genérico Repository[T] sobre una Collection de pymongo.
  - Traducir records <-> documentos vía un RecordMapper[T] (sin casts).
  - Mapear errores del driver a errores tipados:
      DuplicateKeyError        -> DuplicateRecordError
      ConnectionFailure (*)    -> BackendUnavailableError
      PyMongoError (resto)     -> DatabaseError
    (*) incluye ServerSelectionTimeoutError / AutoReconnect.
  - Logging estructurado de fallas (sin datos sensibles).

Collaborators:
  - pymongo.collection.Collection
  - domain.repositories.RecordMapper / Repository
  - infrastructure.repositories.user_mapper.to_object_id

Constraints / Notes:
  - Dentro de una transacción (session != None) los errores del driver se
    propagan SIN traducir: with_transaction() necesita ver las labels
    (TransientTransactionError) para reintentar la unidad completa.
  - "Not found" se reporta con NotFoundError, no con None.
============================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generic, Iterator, List, Mapping, TypeVar

from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from ....crosscutting.exceptions import (
    BackendUnavailableError,
    DatabaseError,
    DuplicateRecordError,
    NotFoundError,
)
from ....crosscutting.logger import logger
from ....domain.repositories import RecordMapper
from ..user_mapper import FIELD_ID, to_object_id

T = TypeVar("T")


class MongoRepository(Generic[T]):
    """Repositorio genérico MongoDB ligado a un tipo de record concreto."""

    def __init__(
        self,
        collection: Collection,
        mapper: RecordMapper[T],
        *,
        entity: str,
    ) -> None:
        self._collection = collection
        self._mapper = mapper
        self._entity = entity

    @property
    def collection(self) -> Collection:
        return self._collection

    # =========================================================
    # Helpers internos
    # =========================================================
    @contextmanager
    def _translate_errors(self, operation: str, **extra: object) -> Iterator[None]:
        """Centraliza logging + traducción de errores del driver."""
        log_extra = {"collection": self._collection.name, "operation": operation}
        log_extra.update(extra)
        try:
            yield
        except DuplicateKeyError as exc:
            logger.warning("Mongo: duplicate key", extra=log_extra)
            raise DuplicateRecordError(
                f"{self._entity} violates a unique constraint", original_error=exc
            ) from exc
        except ConnectionFailure as exc:
            logger.error(
                "Mongo: backend unavailable", extra={**log_extra, "error": str(exc)}
            )
            raise BackendUnavailableError(
                "storage backend unavailable", original_error=exc
            ) from exc
        except PyMongoError as exc:
            logger.exception(
                "Mongo: operation failed", extra={**log_extra, "error": str(exc)}
            )
            raise DatabaseError(
                f"{self._entity} {operation} failed", original_error=exc
            ) from exc

    def _not_found(self, record_id: str) -> NotFoundError:
        return NotFoundError(f"{self._entity} {record_id} not found")

    # =========================================================
    # Repository[T]
    # =========================================================
    def find(self, filter: Mapping[str, Any]) -> List[T]:
        with self._translate_errors("find"):
            documents = list(self._collection.find(dict(filter)))
        return [self._mapper.from_document(doc) for doc in documents]

    def find_by_id(self, record_id: str) -> T:
        oid = to_object_id(record_id)
        with self._translate_errors("find_by_id", record_id=record_id):
            document = self._collection.find_one({FIELD_ID: oid})
        if document is None:
            raise self._not_found(record_id)
        return self._mapper.from_document(document)

    def insert(self, record: T, *, session: Any = None) -> str:
        document = self._mapper.to_document(record)
        if session is not None:
            result = self._collection.insert_one(document, session=session)
            return str(result.inserted_id)
        with self._translate_errors("insert"):
            result = self._collection.insert_one(document)
        return str(result.inserted_id)

    def replace_by_id(self, record_id: str, record: T) -> None:
        oid = to_object_id(record_id)
        document = self._mapper.to_document(record)
        document.pop(FIELD_ID, None)
        with self._translate_errors("replace_by_id", record_id=record_id):
            result = self._collection.replace_one({FIELD_ID: oid}, document)
        if result.matched_count == 0:
            raise self._not_found(record_id)

    def delete_by_id(self, record_id: str) -> None:
        oid = to_object_id(record_id)
        with self._translate_errors("delete_by_id", record_id=record_id):
            result = self._collection.delete_one({FIELD_ID: oid})
        if result.deleted_count == 0:
            raise self._not_found(record_id)

    def ping(self) -> None:
        with self._translate_errors("ping"):
            self._collection.database.client.admin.command("ping")
