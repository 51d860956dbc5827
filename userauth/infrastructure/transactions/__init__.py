from .in_memory import InMemorySession, InMemoryTransactionCoordinator
from .mongo import MongoTransactionCoordinator

__all__ = [
    "InMemorySession",
    "InMemoryTransactionCoordinator",
    "MongoTransactionCoordinator",
]
