# userauth/crosscutting/config.py
"""
===============================================================================
TARJETA CRC — crosscutting/config.py (Settings del proceso)
===============================================================================

Responsabilidades:
  - Leer variables de entorno (y .env) con pydantic-settings, tipadas.
  - Rechazar valores imposibles al arrancar (costos argon2, timeouts).
  - En producción: exigir JWT_SECRET fuerte y prohibir el store en memoria.

Colaboradores:
  - api/main.py (CORS, cliente Mongo)
  - container.py (Mongo vs memoria, costos del hasher, secreto JWT)
  - crosscutting/logger.py (nivel y formato)

Notas:
  - Las transacciones requieren replica set; la URI por defecto apunta a
    un replica set de un nodo llamado rs0.
===============================================================================
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_PRODUCTION_SECRET_LEN = 32
_PLACEHOLDER_SECRETS = frozenset({"dev-secret", "changeme", "change-me", "secret"})


class Settings(BaseSettings):
    """Cada campo se lee de la variable de entorno homónima (MONGO_URI, JWT_SECRET, ...)."""

    # Environment
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017/?replicaSet=rs0"
    mongo_database: str = "userauth"
    mongo_users_collection: str = "users"
    mongo_server_selection_timeout_ms: int = 5000
    mongo_timeout_ms: int = 0
    use_in_memory_store: bool = False

    # Security - JWT
    jwt_secret: str = "dev-secret"

    # Security - Password hashing (argon2id)
    password_time_cost: int = 3
    password_memory_cost: int = 65536
    password_parallelism: int = 4

    # CORS
    allowed_origins: str = "http://localhost:3000"

    @field_validator(
        "mongo_server_selection_timeout_ms",
        "password_time_cost",
        "password_memory_cost",
        "password_parallelism",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("mongo_timeout_ms")
    @classmethod
    def timeout_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("mongo_timeout_ms must be >= 0")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_upper(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @model_validator(mode="after")
    def reject_unsafe_production_config(self):
        if self.is_production():
            problems = self._production_problems()
            if problems:
                raise ValueError("; ".join(problems))
        return self

    def _production_problems(self) -> list[str]:
        problems: list[str] = []
        secret = (self.jwt_secret or "").strip()
        if not secret or secret.lower() in _PLACEHOLDER_SECRETS:
            problems.append("JWT_SECRET is unset or a placeholder")
        elif len(secret) < MIN_PRODUCTION_SECRET_LEN:
            problems.append(
                f"JWT_SECRET needs at least {MIN_PRODUCTION_SECRET_LEN} characters"
            )
        if self.use_in_memory_store:
            problems.append("USE_IN_MEMORY_STORE is not allowed")
        return problems

    def _env_is(self, *names: str) -> bool:
        return self.app_env.strip().lower() in names

    def is_production(self) -> bool:
        return self._env_is("production", "prod")

    def is_test(self) -> bool:
        return self._env_is("test", "testing", "ci")

    def get_allowed_origins_list(self) -> list[str]:
        return [item for item in map(str.strip, self.allowed_origins.split(",")) if item]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Settings del proceso (cacheados). Lanza ValidationError si el entorno es inválido."""
    return Settings()
