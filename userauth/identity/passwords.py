"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Credential Hasher (Argon2)

Responsabilidades:
    - Hashear passwords con Argon2id (salt propio, costo parametrizable).
    - Verificar password vs hash almacenado sin lanzar por "password incorrecto".
    - Envolver fallas internas del hasher en HashingError.

Colaboradores:
    - argon2.PasswordHasher (argon2-cffi)
    - crosscutting.config.get_settings: parámetros de costo.
    - crosscutting.exceptions.HashingError

Decisiones de diseño:
    - Password incorrecto o hash malformado => False (resultado esperado, no falla).
    - Nunca loguear el password ni el hash.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import HashingError as Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError

from ..crosscutting.config import get_settings
from ..crosscutting.exceptions import HashingError
from ..crosscutting.logger import logger


class CredentialHasher:
    """Hash/verify one-way de passwords (Argon2id)."""

    def __init__(
        self,
        *,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    def hash(self, plaintext: str) -> str:
        """Devuelve un hash autocontenido (`$argon2id$v=19$m=...`)."""
        try:
            return self._hasher.hash(plaintext)
        except Argon2HashingError as exc:
            logger.error("Password hashing failed", extra={"error": str(exc)})
            raise HashingError("password hashing failed", original_error=exc) from exc

    def verify(self, plaintext: str, hashed: str) -> bool:
        """True si el password corresponde al hash; False en cualquier otro caso."""
        if not hashed:
            return False
        try:
            return self._hasher.verify(hashed, plaintext)
        except (VerificationError, InvalidHashError):
            return False


@lru_cache(maxsize=1)
def get_default_hasher() -> CredentialHasher:
    """Hasher configurado desde Settings (singleton)."""
    s = get_settings()
    return CredentialHasher(
        time_cost=s.password_time_cost,
        memory_cost=s.password_memory_cost,
        parallelism=s.password_parallelism,
    )


def hash_password(plaintext: str) -> str:
    """Hashea un password usando el hasher configurado."""
    return get_default_hasher().hash(plaintext)


def verify_password(plaintext: str, hashed: str) -> bool:
    """Verifica password vs hash almacenado."""
    return get_default_hasher().verify(plaintext, hashed)
