"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Token Issuer (JWT HS256)

Responsabilidades:
    - Emitir JWT firmados con identidad + claims (un flag booleano por claim).
    - Expiración absoluta: emisión + 168h (sin refresh).
    - Decodificar/validar tokens para las dependencias HTTP.

Colaboradores:
    - PyJWT (jwt.encode / jwt.decode)
    - identity/claims.py: validate_claims, claim_name, Claim
    - crosscutting.exceptions: SigningError, InvalidTokenError, InvalidClaimError

Decisiones de diseño:
    - Los claims se revalidan antes de firmar: un token nunca embebe
      capacidades inválidas.
    - No loguear tokens ni secretos.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable

import jwt

from ..crosscutting.exceptions import InvalidTokenError, SigningError
from ..crosscutting.logger import logger
from .claims import Claim, claim_name, validate_claims

# ---------------------------------------------------------------------------
# Constantes (evitan strings mágicos)
# ---------------------------------------------------------------------------

JWT_ALGORITHM: str = "HS256"

# R: lifetime fijo de diseño; no hay refresh ni revocación.
TOKEN_LIFETIME: timedelta = timedelta(hours=168)

CLAIM_AUTHORIZED: str = "authorized"
CLAIM_USER_ID: str = "user_id"
CLAIM_EXP: str = "exp"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Payload validado de un token."""

    user_id: str
    expires_at: datetime
    claims: frozenset[Claim]

    def has(self, claim: Claim) -> bool:
        return claim in self.claims


def issue_token(
    user_id: str,
    secret: str,
    claims: Iterable[int],
    *,
    now: datetime | None = None,
) -> str:
    """
    Emite un token firmado.

    Raises:
        InvalidClaimError: si algún código no es válido.
        SigningError: secreto vacío o falla de PyJWT.
    """
    claims = list(claims)
    validate_claims(claims)

    if not secret or not secret.strip():
        raise SigningError("signing secret must not be empty")

    issued_at = now or datetime.now(timezone.utc)
    payload: dict[str, object] = {
        CLAIM_AUTHORIZED: True,
        CLAIM_USER_ID: user_id,
        CLAIM_EXP: int((issued_at + TOKEN_LIFETIME).timestamp()),
    }
    for code in claims:
        payload[claim_name(code)] = True

    try:
        return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
    except (jwt.PyJWTError, TypeError, ValueError) as exc:
        logger.error("Token signing failed", extra={"error": str(exc)})
        raise SigningError("token signing failed", original_error=exc) from exc


def decode_token(token: str, secret: str) -> TokenClaims:
    """
    Decodifica y valida un token emitido por issue_token().

    Errores:
        - InvalidTokenError si expiró, la firma no coincide o faltan claims mínimos.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_EXP, CLAIM_USER_ID, CLAIM_AUTHORIZED]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("token expired", original_error=exc) from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError("invalid token", original_error=exc) from exc

    user_id = payload.get(CLAIM_USER_ID)
    if payload.get(CLAIM_AUTHORIZED) is not True or not user_id:
        raise InvalidTokenError("invalid token")

    granted = frozenset(
        claim for claim in Claim if payload.get(claim.display_name) is True
    )
    return TokenClaims(
        user_id=str(user_id),
        expires_at=datetime.fromtimestamp(payload[CLAIM_EXP], tz=timezone.utc),
        claims=granted,
    )
