"""
Domain layer package for the user authentication service.

Exports entities and persistence ports used by application and
infrastructure layers.
"""

from .entities import LoginResult, NewUser, User, UserPatch
from .repositories import (
    RecordMapper,
    Repository,
    TransactionCoordinator,
    UserRepository,
    WriteOperation,
)

__all__ = [
    "LoginResult",
    "NewUser",
    "RecordMapper",
    "Repository",
    "TransactionCoordinator",
    "User",
    "UserPatch",
    "UserRepository",
    "WriteOperation",
]
