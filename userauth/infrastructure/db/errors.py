"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Componente:
  Errores tipados del ciclo de vida del cliente MongoDB

Responsabilidades:
  - Evitar RuntimeError genéricos.
  - Dar semántica clara: "no inicializado", "ya inicializado".
===============================================================================
"""


class MongoClientError(Exception):
    """Base de errores del cliente de base de datos."""


class ClientAlreadyInitializedError(MongoClientError):
    """Se intentó inicializar el cliente más de una vez."""


class ClientNotInitializedError(MongoClientError):
    """Se intentó usar el cliente sin init_client()."""
