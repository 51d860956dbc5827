"""
===============================================================================
TARJETA CRC — dependencies.py (Dependencias de autenticación HTTP)
===============================================================================

Responsabilidades:
  - Extraer el token desde `Authorization: Bearer <token>`.
  - Validarlo con decode_token() y dejar los claims en request.state.
  - Exigir claims específicos por endpoint (403 si faltan).
  - Autorizar escrituras sobre usuarios (ensure_can_write_user).

Patrones aplicados:
  - Fail-fast: sin token => 401 antes de tocar el servicio.
  - Dependency factories (require_user / require_claims) como en FastAPI.

Colaboradores:
  - crosscutting.config.get_settings (jwt_secret)
  - crosscutting.error_responses (unauthorized / forbidden)
  - identity.tokens.decode_token / TokenClaims
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Header, Request

from userauth.context import bind_subject
from userauth.crosscutting.config import get_settings
from userauth.crosscutting.error_responses import forbidden, unauthorized
from userauth.identity.claims import Claim
from userauth.identity.tokens import TokenClaims, decode_token


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def require_user() -> Callable:
    """Dependency FastAPI: requiere un token válido."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> TokenClaims:
        token = extract_bearer_token(authorization)
        if not token:
            raise unauthorized("Falta token Bearer.")

        # R: InvalidTokenError la traduce el exception handler (401).
        token_claims = decode_token(token, get_settings().jwt_secret)
        request.state.token_claims = token_claims
        bind_subject(token_claims.user_id)
        return token_claims

    return dependency


def require_claims(*claims: Claim) -> Callable:
    """Dependency FastAPI: requiere token válido + todos los claims indicados."""
    required = frozenset(claims)

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> TokenClaims:
        token_claims = await require_user()(request, authorization)
        missing = required - token_claims.claims
        if missing:
            names = ", ".join(sorted(claim.display_name for claim in missing))
            raise forbidden(f"Missing required claim: {names}")
        return token_claims

    return dependency


def optional_user() -> Callable:
    """Dependency FastAPI: token opcional (None si no hay header Authorization)."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> TokenClaims | None:
        if not extract_bearer_token(authorization):
            return None
        return await require_user()(request, authorization)

    return dependency


def ensure_can_write_user(
    token_claims: TokenClaims | None, *, target_id: str | None, sets_claims: bool
) -> None:
    """
    Regla de escritura sobre usuarios:
      - Asignar claims exige el claim admin.
      - Sin admin, solo se puede modificar el propio registro.
    `target_id=None` es un alta (no hay registro previo).
    """
    if token_claims is not None and token_claims.has(Claim.ADMIN):
        return
    if sets_claims:
        if token_claims is None:
            raise unauthorized("Asignar claims requiere token Bearer de admin.")
        raise forbidden(f"Missing required claim: {Claim.ADMIN.display_name}")
    if target_id is not None and (
        token_claims is None or token_claims.user_id != target_id
    ):
        raise forbidden("Only admins can modify other users")
