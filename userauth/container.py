"""
===============================================================================
TARJETA CRC — userauth/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorio, coordinador transaccional, servicio).
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache).
  - Decidir backend (MongoDB vs in-memory) según Settings.

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* (puertos)
  - infrastructure.* (implementaciones)
  - application.UserService

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO debe depender de FastAPI (solo expone factories).
  - El coordinador in-memory comparte la MISMA instancia de repositorio que
    el servicio; si no, el rollback no vería las escrituras.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application import UserService
from .crosscutting.config import get_settings
from .domain.repositories import TransactionCoordinator, UserRepository
from .identity.passwords import get_default_hasher
from .infrastructure.db import get_client
from .infrastructure.repositories import InMemoryUserRepository, MongoUserRepository
from .infrastructure.transactions import (
    InMemoryTransactionCoordinator,
    MongoTransactionCoordinator,
)


def uses_in_memory_store() -> bool:
    """
    Regla:
      - app_env ∈ {"test", "testing", "ci"} o USE_IN_MEMORY_STORE => in-memory.
    """
    settings = get_settings()
    return settings.is_test() or settings.use_in_memory_store


# =============================================================================
# Repositorios / transacciones (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Repositorio de usuarios (in-memory en test; MongoDB en runtime)."""
    if uses_in_memory_store():
        return InMemoryUserRepository()
    settings = get_settings()
    collection = get_client()[settings.mongo_database][settings.mongo_users_collection]
    return MongoUserRepository(collection)


@lru_cache(maxsize=1)
def get_transaction_coordinator() -> TransactionCoordinator:
    if uses_in_memory_store():
        return InMemoryTransactionCoordinator(get_user_repository())
    return MongoTransactionCoordinator(get_client())


# =============================================================================
# Servicios
# =============================================================================


@lru_cache(maxsize=1)
def get_user_service() -> UserService:
    settings = get_settings()
    return UserService(
        get_user_repository(),
        get_transaction_coordinator(),
        hasher=get_default_hasher(),
        token_secret=settings.jwt_secret,
    )


def reset_container() -> None:
    """Limpia los singletons (tests / reconfiguración)."""
    get_user_service.cache_clear()
    get_transaction_coordinator.cache_clear()
    get_user_repository.cache_clear()
