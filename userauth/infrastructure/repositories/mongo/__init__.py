from .base import MongoRepository
from .user import MongoUserRepository

__all__ = ["MongoRepository", "MongoUserRepository"]
