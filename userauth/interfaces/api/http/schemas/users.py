"""
===============================================================================
TARJETA CRC — schemas/users.py
===============================================================================

Módulo:
    Schemas HTTP para usuarios

Responsabilidades:
    - Definir DTOs de request/response para endpoints de usuarios.
    - Validar la forma del wire (tipos, longitudes) antes del servicio.
    - No exponer password_hash en respuestas.

Colaboradores:
    - domain.entities (User, NewUser, UserPatch)
===============================================================================
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, StrictInt, field_validator

from userauth.domain.entities import NewUser, User, UserPatch


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()


class CreateUserRequest(BaseModel):
    """Request de alta. Los claims se validan en el servicio (InvalidClaimError)."""

    name: str = Field(..., min_length=1, max_length=200)
    surnames: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)
    claims: list[StrictInt] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()

    def to_new_user(self) -> NewUser:
        return NewUser(
            name=self.name,
            surnames=self.surnames,
            email=self.email,
            password=self.password,
            claims=list(self.claims),
        )


class UpdateUserRequest(BaseModel):
    """Merge-patch: campos ausentes (o null) no se tocan."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    surnames: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = Field(default=None, min_length=1, max_length=320)
    old_password: str | None = Field(default=None, max_length=512)
    new_password: str | None = Field(default=None, min_length=1, max_length=512)
    claims: list[StrictInt] | None = None

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None

    def to_patch(self) -> UserPatch:
        return UserPatch(
            name=self.name,
            surnames=self.surnames,
            email=self.email,
            old_password=self.old_password,
            new_password=self.new_password,
            claims=list(self.claims) if self.claims is not None else None,
        )


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserResponse(BaseModel):
    id: str
    name: str
    surnames: str
    email: str
    claims: list[int]
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            surnames=user.surnames,
            email=user.email,
            claims=list(user.claims),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginResponse(BaseModel):
    user: UserResponse
    token: str


class CreationResponse(BaseModel):
    inserted_id: str
