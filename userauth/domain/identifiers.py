"""
===============================================================================
TARJETA CRC — domain/identifiers.py
===============================================================================

Módulo:
    Identificadores de registro

Responsabilidades:
    - Generar ids nuevos como ObjectId en hex (24 caracteres, minúsculas).
    - Validar el formato de un id recibido por el borde.

Colaboradores:
    - application/user_service.py: asigna el id antes del insert.
    - infrastructure/repositories/user_mapper.py: rechaza ids mal formados
      (InvalidIDError).

Notas:
    - El id lo genera el servicio, no el motor de storage: se conoce antes
      de insertar.
===============================================================================
"""

from bson import ObjectId


def new_record_id() -> str:
    """Return a fresh ObjectId as a 24-char lowercase hex string."""
    return str(ObjectId())


def is_valid_record_id(value: object) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value)
