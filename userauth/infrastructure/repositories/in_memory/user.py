"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Adapter UserRepository sobre InMemoryRepository[User].
  - Emular el índice único de email de MongoDB.

Collaborators:
  - infrastructure.repositories.user_mapper.USER_MAPPER
  - crosscutting.exceptions.NotFoundError
============================================================
"""

from __future__ import annotations

from typing import List

from ....crosscutting.exceptions import NotFoundError
from ....domain.entities import User
from ..user_mapper import FIELD_EMAIL, USER_MAPPER
from .base import InMemoryRepository


class InMemoryUserRepository(InMemoryRepository[User]):
    """Repositorio de usuarios in-memory (email único)."""

    def __init__(self) -> None:
        super().__init__(USER_MAPPER, entity="user", unique_fields=(FIELD_EMAIL,))

    def find_all(self) -> List[User]:
        return self.find({})

    def find_by_email(self, email: str) -> User:
        matches = self.find({FIELD_EMAIL: email})
        if not matches:
            raise NotFoundError("email not found")
        return matches[0]
