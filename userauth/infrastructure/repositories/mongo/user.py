"""
============================================================
TARJETA CRC — infrastructure/repositories/mongo/user.py
============================================================
Class: MongoUserRepository

Responsibilities:
  - Adapter UserRepository sobre MongoRepository[User].
  - Lookups por email (filtro) además de los primitivos genéricos.

Collaborators:
  - pymongo.collection.Collection (colección `users`)
  - infrastructure.repositories.user_mapper.USER_MAPPER
  - crosscutting.exceptions.NotFoundError

Constraints / Notes:
  - La unicidad de email la garantiza el índice único (ensure_user_indexes),
    no este adapter.
============================================================
"""

from __future__ import annotations

from typing import List

from pymongo.collection import Collection

from ....crosscutting.exceptions import NotFoundError
from ....domain.entities import User
from ..user_mapper import FIELD_EMAIL, USER_MAPPER
from .base import MongoRepository


class MongoUserRepository(MongoRepository[User]):
    """Repositorio de usuarios (MongoDB)."""

    def __init__(self, collection: Collection) -> None:
        super().__init__(collection, USER_MAPPER, entity="user")

    def find_all(self) -> List[User]:
        return self.find({})

    def find_by_email(self, email: str) -> User:
        matches = self.find({FIELD_EMAIL: email})
        if not matches:
            raise NotFoundError("email not found")
        return matches[0]
