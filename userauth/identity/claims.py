"""
===============================================================================
TARJETA CRC — identity/claims.py
===============================================================================

Módulo:
    Claim Validator

Responsabilidades:
    - Definir la enumeración cerrada de claims de autorización.
    - Validar listas de códigos (corta en el primer código inválido).
    - Exponer la tabla código -> nombre para descubrimiento de capacidades.

Colaboradores:
    - identity/tokens.py: revalida claims antes de firmar.
    - application/user_service.py: valida en create/update.
    - interfaces/api/http/dependencies.py: require_claims().

Notas:
    - La tabla es una constante de proceso inmutable (MappingProxyType).
    - bool es subclase de int en Python; True/False NO son claims válidos.
===============================================================================
"""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Iterable, Mapping

from ..crosscutting.exceptions import InvalidClaimError


class Claim(IntEnum):
    """Capacidades de autorización (el código es el valor persistido)."""

    ADMIN = 0
    OPERATOR = 1

    @property
    def display_name(self) -> str:
        """Nombre usado en el payload del token y en GET /claims."""
        return self.name.lower()


_CLAIM_NAMES: Mapping[int, str] = MappingProxyType(
    {claim.value: claim.display_name for claim in Claim}
)


def is_valid_claim(code: object) -> bool:
    """True si el código pertenece a la enumeración."""
    return isinstance(code, int) and not isinstance(code, bool) and code in _CLAIM_NAMES


def validate_claims(claims: Iterable[object]) -> None:
    """
    Valida todos los códigos.

    Raises:
        InvalidClaimError: con el primer código inválido en orden de iteración.
    """
    for code in claims:
        if not is_valid_claim(code):
            raise InvalidClaimError(code)


def claim_name(code: int) -> str:
    """Nombre visible de un código ya validado."""
    return _CLAIM_NAMES[code]


def all_claims() -> dict[int, str]:
    """Copia de la tabla código -> nombre (el caller no puede mutar la original)."""
    return dict(_CLAIM_NAMES)
