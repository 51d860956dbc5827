"""
===============================================================================
TARJETA CRC — userauth/interfaces/api/http/routers/__init__.py
===============================================================================

Responsibilities:
    - Re-exportar los routers HTTP para el router principal.

Notas:
    - Este archivo NO define endpoints.
===============================================================================
"""

from .claims import router as claims_router
from .users import router as users_router

__all__ = ["claims_router", "users_router"]
