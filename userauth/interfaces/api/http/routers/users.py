"""
===============================================================================
TARJETA CRC — userauth/interfaces/api/http/routers/users.py
===============================================================================

Class/Module:
    Users Router

Responsibilities:
    - Exponer endpoints HTTP del ciclo de vida de usuarios.
    - Convertir requests HTTP -> inputs del UserService (NewUser / UserPatch).
    - Enforce de auth/claims en el borde (capa HTTP): asignar claims exige
      admin; sin admin, PATCH solo sobre el propio registro.
    - Mapear entidades -> DTOs sin password_hash.

Collaborators:
    - application.UserService
    - container.get_user_service (DI)
    - dependencies.require_user / require_claims
    - schemas.users (DTOs Pydantic)

Notas:
    - Los errores tipados del servicio NO se traducen acá; los mapea
      api/exception_handlers.py.
    - /users/email/{email} y /users/atomic-transaction se declaran antes de
      /users/{user_id} para que el path literal gane.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from userauth.application import UserService
from userauth.container import get_user_service
from userauth.identity.claims import Claim
from userauth.identity.tokens import TokenClaims

from ..dependencies import (
    ensure_can_write_user,
    optional_user,
    require_claims,
    require_user,
)
from ..schemas.users import (
    CreateUserRequest,
    CreationResponse,
    LoginRequest,
    LoginResponse,
    UpdateUserRequest,
    UserResponse,
)

router = APIRouter(prefix="/users", tags=["users"])


# =============================================================================
# Endpoints públicos
# =============================================================================


@router.post("/login", response_model=LoginResponse)
def login(
    req: LoginRequest,
    service: UserService = Depends(get_user_service),
):
    """Verifica credenciales y devuelve usuario + token firmado."""
    result = service.login(req.email, req.password)
    return LoginResponse(user=UserResponse.from_user(result.user), token=result.token)


@router.post(
    "",
    response_model=CreationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    req: CreateUserRequest,
    token: TokenClaims | None = Depends(optional_user()),
    service: UserService = Depends(get_user_service),
):
    """Alta pública; con claims no vacíos exige token de admin."""
    ensure_can_write_user(token, target_id=None, sets_claims=bool(req.claims))
    inserted_id = service.create(req.to_new_user())
    return CreationResponse(inserted_id=inserted_id)


# =============================================================================
# Endpoints autenticados
# =============================================================================


@router.get("", response_model=list[UserResponse])
def list_users(
    _token: TokenClaims = Depends(require_user()),
    service: UserService = Depends(get_user_service),
):
    return [UserResponse.from_user(user) for user in service.get_all()]


@router.get("/email/{email}", response_model=UserResponse)
def get_user_by_email(
    email: str,
    _token: TokenClaims = Depends(require_user()),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.get_by_email(email))


@router.post("/atomic-transaction", status_code=status.HTTP_204_NO_CONTENT)
def atomic_transaction(
    _token: TokenClaims = Depends(require_claims(Claim.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    """Inserta los dos usuarios de demostración en una sola transacción."""
    service.atomic_demo()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    _token: TokenClaims = Depends(require_user()),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.get_by_id(user_id))


@router.patch("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_user(
    user_id: str,
    req: UpdateUserRequest,
    token: TokenClaims = Depends(require_user()),
    service: UserService = Depends(get_user_service),
):
    """Merge-patch: solo se aplican los campos presentes."""
    ensure_can_write_user(token, target_id=user_id, sets_claims=req.claims is not None)
    service.update(user_id, req.to_patch())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    _token: TokenClaims = Depends(require_claims(Claim.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
