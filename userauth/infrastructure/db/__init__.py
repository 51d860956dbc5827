from .client import (
    EMAIL_INDEX_NAME,
    close_client,
    ensure_user_indexes,
    get_client,
    init_client,
)
from .errors import ClientAlreadyInitializedError, ClientNotInitializedError

__all__ = [
    "EMAIL_INDEX_NAME",
    "ClientAlreadyInitializedError",
    "ClientNotInitializedError",
    "close_client",
    "ensure_user_indexes",
    "get_client",
    "init_client",
]
