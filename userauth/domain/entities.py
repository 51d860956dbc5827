"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades de usuario (dominio)

Responsabilidades:
    - Definir el registro User persistido (identidad + credenciales + claims).
    - Definir los inputs de los casos de uso: NewUser (alta) y UserPatch
      (merge-patch con campos opcionales).
    - Definir LoginResult (usuario + token firmado).

Colaboradores:
    - application/user_service.py: construye y transforma estas entidades.
    - infrastructure/repositories/*: mapean User <-> documento de storage.

Notas:
    - Este módulo NO contiene lógica de negocio: solo "shapes" de datos.
    - User es inmutable; las mutaciones producen una copia (dataclasses.replace).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class User:
    """Registro de usuario tal como se persiste."""

    id: str
    name: str
    surnames: str
    email: str
    password_hash: str
    claims: list[int] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class NewUser:
    """Datos de alta; `password` llega en texto plano y nunca se persiste."""

    name: str
    surnames: str
    email: str
    password: str
    claims: list[int] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class UserPatch:
    """
    Merge-patch de un usuario.

    Contrato:
      - None => campo ausente (se conserva el valor almacenado).
      - claims=[] está presente y deja al usuario sin claims.
      - new_password requiere old_password.
    """

    name: str | None = None
    surnames: str | None = None
    email: str | None = None
    old_password: str | None = None
    new_password: str | None = None
    claims: list[int] | None = None



@dataclass(frozen=True, slots=True)
class LoginResult:
    """Resultado de un login exitoso."""

    user: User
    token: str
