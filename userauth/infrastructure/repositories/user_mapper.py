"""
============================================================
TARJETA CRC — infrastructure/repositories/user_mapper.py
============================================================
Class: UserDocumentMapper

Responsibilities:
  - Traducir User (dominio) <-> documento de la colección `users`.
  - Mantener el contrato de nombres de campos del documento en un solo lugar.
  - Normalizar datetimes a UTC tz-aware al leer (BSON guarda UTC naive).
  - Validar/convertir identificadores (str hex <-> ObjectId).

Collaborators:
  - bson.ObjectId (pymongo)
  - domain.entities.User
  - crosscutting.exceptions.InvalidIDError / DatabaseError

Constraints:
  - Round-trip sin pérdida: from_document(to_document(u)) == u
    (con timestamps a precisión de milisegundos, como los estampa el servicio).
============================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from bson import ObjectId

from ...crosscutting.exceptions import DatabaseError, InvalidIDError
from ...domain.entities import User
from ...domain.identifiers import is_valid_record_id

# R: nombres de campos del documento (contrato con datos existentes).
FIELD_ID = "_id"
FIELD_NAME = "name"
FIELD_SURNAMES = "surnames"
FIELD_EMAIL = "email"
FIELD_PASSWORD_HASH = "passwordHash"
FIELD_CLAIMS = "claims"
FIELD_CREATED_AT = "createdAt"
FIELD_UPDATED_AT = "updatedAt"


def to_object_id(identifier: object) -> ObjectId:
    """Convierte un id externo a ObjectId o lanza InvalidIDError."""
    if isinstance(identifier, ObjectId):
        return identifier
    if not is_valid_record_id(identifier):
        raise InvalidIDError(identifier)
    return ObjectId(identifier)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UserDocumentMapper:
    """Mapper User <-> documento (implementa RecordMapper[User])."""

    def to_document(self, record: User) -> dict[str, Any]:
        return {
            FIELD_ID: to_object_id(record.id),
            FIELD_NAME: record.name,
            FIELD_SURNAMES: record.surnames,
            FIELD_EMAIL: record.email,
            FIELD_PASSWORD_HASH: record.password_hash,
            FIELD_CLAIMS: list(record.claims),
            FIELD_CREATED_AT: record.created_at,
            FIELD_UPDATED_AT: record.updated_at,
        }

    def from_document(self, document: Mapping[str, Any]) -> User:
        try:
            return User(
                id=str(document[FIELD_ID]),
                name=document[FIELD_NAME],
                surnames=document[FIELD_SURNAMES],
                email=document[FIELD_EMAIL],
                password_hash=document[FIELD_PASSWORD_HASH],
                claims=list(document.get(FIELD_CLAIMS) or []),
                created_at=_as_utc(document.get(FIELD_CREATED_AT)),
                updated_at=_as_utc(document.get(FIELD_UPDATED_AT)),
            )
        except KeyError as exc:
            # R: drift de esquema => error de infraestructura, no de negocio.
            raise DatabaseError(
                f"user document is missing field {exc.args[0]!r}", original_error=exc
            ) from exc


USER_MAPPER = UserDocumentMapper()
