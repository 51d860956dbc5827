from .base import InMemoryRepository
from .user import InMemoryUserRepository

__all__ = ["InMemoryRepository", "InMemoryUserRepository"]
