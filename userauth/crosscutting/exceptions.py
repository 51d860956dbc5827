# userauth/crosscutting/exceptions.py
"""
===============================================================================
TARJETA CRC — crosscutting/exceptions.py (Jerarquía de errores)
===============================================================================

Responsabilidades:
  - Un único árbol (UserAuthError) para errores de dominio e infraestructura.
  - Cada error lleva error_code estable, error_id (uuid4) y la causa original.
  - El mensaje nunca incluye passwords, hashes ni tokens.

Colaboradores:
  - api/exception_handlers.py (ERROR_MAPPINGS: clase -> status HTTP)
  - application/user_service.py, identity/*, infrastructure/*
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class UserAuthError(Exception):
    error_code: str = "USERAUTH_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_id = error_id or uuid4().hex
        self.original_error = original_error

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error_code}, {self.message!r}, id={self.error_id})"


# -----------------------------------------------------------------------------
# Errores de negocio (validación / credenciales / lookups)
# -----------------------------------------------------------------------------
class ValidationError(UserAuthError):
    """Input rechazado antes de cualquier escritura."""

    error_code: str = "VALIDATION_ERROR"


class InvalidClaimError(ValidationError):
    """Código de claim fuera de la enumeración válida."""

    error_code: str = "INVALID_CLAIM"

    def __init__(self, code: object, **kwargs):
        self.code = code
        super().__init__(f"not valid claim detected: {code}", **kwargs)


class NotFoundError(UserAuthError):
    """Lookup sin resultados (id/email inexistente)."""

    error_code: str = "NOT_FOUND"


class CredentialsError(UserAuthError):
    """Email desconocido, password incorrecto u old password inválido."""

    error_code: str = "INVALID_CREDENTIALS"


class InvalidIDError(UserAuthError):
    """Identificador con formato inválido (distinto de "no encontrado")."""

    error_code: str = "INVALID_ID"

    def __init__(self, identifier: object, **kwargs):
        self.identifier = identifier
        super().__init__(f"invalid identifier: {identifier!r}", **kwargs)


class InvalidTokenError(UserAuthError):
    """Token ausente, mal firmado, expirado o sin claims mínimos."""

    error_code: str = "INVALID_TOKEN"


# -----------------------------------------------------------------------------
# Errores criptográficos (fallas de infraestructura)
# -----------------------------------------------------------------------------
class HashingError(UserAuthError):
    """Falla interna al hashear un password."""

    error_code: str = "HASHING_ERROR"


class SigningError(UserAuthError):
    """Secreto vacío/inválido o falla al firmar el token."""

    error_code: str = "SIGNING_ERROR"


# -----------------------------------------------------------------------------
# Errores de persistencia
# -----------------------------------------------------------------------------
class DatabaseError(UserAuthError):
    """Errores de DB (query, timeout, write concern)."""

    error_code: str = "DATABASE_ERROR"


class DuplicateRecordError(DatabaseError):
    """Violación de índice único (ej: email repetido)."""

    error_code: str = "DUPLICATE_RECORD"


class BackendUnavailableError(DatabaseError):
    """El backend de persistencia no responde (ping / server selection)."""

    error_code: str = "BACKEND_UNAVAILABLE"


class TransactionAbortError(DatabaseError):
    """La unidad atómica falló y fue revertida por completo."""

    error_code: str = "TRANSACTION_ABORTED"
