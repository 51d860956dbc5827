"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (APP_ENV=test, cheap argon2 costs)
  - Provide in-memory repository / coordinator / service fixtures
  - Provide user factories and bearer-token helpers

Collaborators:
  - pytest: Test framework
  - userauth.infrastructure: in-memory adapters
  - userauth.application.UserService

Notes:
  - Environment variables are set BEFORE importing userauth so that the
    cached Settings (and the logger built from them) see them
  - Use @pytest.fixture(scope="function") for per-test isolation
"""

import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "unit-test-secret-with-enough-length-0123")
os.environ.setdefault("PASSWORD_TIME_COST", "1")
os.environ.setdefault("PASSWORD_MEMORY_COST", "8")
os.environ.setdefault("PASSWORD_PARALLELISM", "1")
os.environ.setdefault("LOG_JSON", "false")

from userauth.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from userauth.application import UserService  # noqa: E402
from userauth.domain.entities import NewUser  # noqa: E402
from userauth.identity.passwords import CredentialHasher  # noqa: E402
from userauth.infrastructure.repositories import InMemoryUserRepository  # noqa: E402
from userauth.infrastructure.transactions import (  # noqa: E402
    InMemoryTransactionCoordinator,
)

TEST_SECRET = os.environ["JWT_SECRET"]


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Identity Fixtures
# ============================================================================


@pytest.fixture
def hasher() -> CredentialHasher:
    """Argon2 hasher with minimal costs (fast tests)."""
    return CredentialHasher(time_cost=1, memory_cost=8, parallelism=1)


# ============================================================================
# Infrastructure Fixtures
# ============================================================================


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def coordinator(user_repository) -> InMemoryTransactionCoordinator:
    return InMemoryTransactionCoordinator(user_repository)


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def user_service(user_repository, coordinator, hasher) -> UserService:
    return UserService(
        user_repository,
        coordinator,
        hasher=hasher,
        token_secret=TEST_SECRET,
    )


@pytest.fixture
def new_user_factory():
    """Factory for NewUser inputs with sensible defaults."""

    def _create(**overrides) -> NewUser:
        data = {
            "name": "Ada",
            "surnames": "Lovelace",
            "email": "ada@example.com",
            "password": "analytical-engine",
            "claims": [],
        }
        data.update(overrides)
        return NewUser(**data)

    return _create
