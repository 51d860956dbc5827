"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/base.py
============================================================
Class: InMemoryRepository[T]

Responsibilities:
  - Almacenar documentos en memoria (tests / local dev).
  - Implementar el puerto genérico Repository[T] con la misma semántica
    observable que MongoRepository[T]:
      - ids ObjectId (InvalidIDError para formatos inválidos)
      - NotFoundError en lookups/replace/delete sin match
      - DuplicateRecordError en violaciones de campos únicos
  - Exponer snapshot()/restore() + lock para el coordinador transaccional
    in-memory.

Collaborators:
  - domain.repositories.RecordMapper / Repository
  - infrastructure.repositories.user_mapper.to_object_id
  - infrastructure.transactions.in_memory.InMemoryTransactionCoordinator

Constraints / Notes:
  - Thread-safe: acceso protegido por RLock (reentrante para transacciones).
  - Copias defensivas: nunca se comparten dicts/listas mutables con callers.
  - Orden de inserción preservado (como el orden natural de una colección).
============================================================
"""

from __future__ import annotations

import copy
from threading import RLock
from typing import Any, Dict, Generic, Iterable, List, Mapping, TypeVar

from bson import ObjectId

from ....crosscutting.exceptions import (
    BackendUnavailableError,
    DuplicateRecordError,
    NotFoundError,
)
from ....domain.repositories import RecordMapper
from ..user_mapper import FIELD_ID, to_object_id

T = TypeVar("T")

Snapshot = Dict[ObjectId, Dict[str, Any]]


class InMemoryRepository(Generic[T]):
    """Repositorio genérico in-memory, thread-safe."""

    def __init__(
        self,
        mapper: RecordMapper[T],
        *,
        entity: str,
        unique_fields: Iterable[str] = (),
    ) -> None:
        self._mapper = mapper
        self._entity = entity
        self._unique_fields = tuple(unique_fields)
        self._lock = RLock()
        self._documents: Dict[ObjectId, Dict[str, Any]] = {}
        self._available = True

    # =========================================================
    # Hooks para transacciones / tests
    # =========================================================
    @property
    def lock(self) -> RLock:
        return self._lock

    def snapshot(self) -> Snapshot:
        with self._lock:
            return copy.deepcopy(self._documents)

    def restore(self, snapshot: Snapshot) -> None:
        with self._lock:
            self._documents = copy.deepcopy(snapshot)

    def set_available(self, available: bool) -> None:
        """R: Simula caída/recuperación del backend (ping y operaciones)."""
        self._available = available

    # =========================================================
    # Helpers internos
    # =========================================================
    def _ensure_available(self) -> None:
        if not self._available:
            raise BackendUnavailableError("storage backend unavailable")

    @staticmethod
    def _matches(document: Mapping[str, Any], filter: Mapping[str, Any]) -> bool:
        return all(document.get(k) == v for k, v in filter.items())

    def _check_unique(self, document: Mapping[str, Any], *, skip: ObjectId | None) -> None:
        for field_name in self._unique_fields:
            value = document.get(field_name)
            for oid, existing in self._documents.items():
                if oid != skip and existing.get(field_name) == value:
                    raise DuplicateRecordError(
                        f"{self._entity} violates a unique constraint on {field_name}"
                    )

    def _not_found(self, record_id: str) -> NotFoundError:
        return NotFoundError(f"{self._entity} {record_id} not found")

    # =========================================================
    # Repository[T]
    # =========================================================
    def find(self, filter: Mapping[str, Any]) -> List[T]:
        with self._lock:
            self._ensure_available()
            documents = [
                copy.deepcopy(doc)
                for doc in self._documents.values()
                if self._matches(doc, filter)
            ]
        return [self._mapper.from_document(doc) for doc in documents]

    def find_by_id(self, record_id: str) -> T:
        oid = to_object_id(record_id)
        with self._lock:
            self._ensure_available()
            document = copy.deepcopy(self._documents.get(oid))
        if document is None:
            raise self._not_found(record_id)
        return self._mapper.from_document(document)

    def insert(self, record: T, *, session: Any = None) -> str:
        document = self._mapper.to_document(record)
        oid = document[FIELD_ID]
        with self._lock:
            self._ensure_available()
            if oid in self._documents:
                raise DuplicateRecordError(f"{self._entity} {oid} already exists")
            self._check_unique(document, skip=None)
            self._documents[oid] = copy.deepcopy(document)
        return str(oid)

    def replace_by_id(self, record_id: str, record: T) -> None:
        oid = to_object_id(record_id)
        document = self._mapper.to_document(record)
        document[FIELD_ID] = oid
        with self._lock:
            self._ensure_available()
            if oid not in self._documents:
                raise self._not_found(record_id)
            self._check_unique(document, skip=oid)
            self._documents[oid] = copy.deepcopy(document)

    def delete_by_id(self, record_id: str) -> None:
        oid = to_object_id(record_id)
        with self._lock:
            self._ensure_available()
            if self._documents.pop(oid, None) is None:
                raise self._not_found(record_id)

    def ping(self) -> None:
        self._ensure_available()

    def count(self) -> int:
        with self._lock:
            return len(self._documents)
