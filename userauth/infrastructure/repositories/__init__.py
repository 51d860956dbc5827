"""
Repository implementations (infrastructure layer).

- mongo: MongoDB adapters (runtime)
- in_memory: thread-safe in-memory adapters (tests / local dev)
"""

from .in_memory import InMemoryRepository, InMemoryUserRepository
from .mongo import MongoRepository, MongoUserRepository
from .user_mapper import USER_MAPPER, UserDocumentMapper, to_object_id

__all__ = [
    "InMemoryRepository",
    "InMemoryUserRepository",
    "MongoRepository",
    "MongoUserRepository",
    "USER_MAPPER",
    "UserDocumentMapper",
    "to_object_id",
]
