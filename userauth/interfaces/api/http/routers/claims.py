"""
===============================================================================
TARJETA CRC — userauth/interfaces/api/http/routers/claims.py
===============================================================================

Responsibilities:
    - Exponer la tabla de claims válidos (código -> nombre).
    - Verificar conectividad del backend antes de responder (503 si cae).

Collaborators:
    - application.UserService (ping + get_claims)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from userauth.application import UserService
from userauth.container import get_user_service

router = APIRouter(tags=["claims"])


@router.get("/claims", response_model=dict[int, str])
def get_claims(service: UserService = Depends(get_user_service)):
    # R: BackendUnavailableError => 503 vía exception handler.
    service.ping()
    return service.get_claims()
