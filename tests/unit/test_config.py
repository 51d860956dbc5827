"""
Name: Settings Tests

Responsibilities:
  - Validate defaults and env overrides
  - Validate field validators (positive costs, non-negative timeouts)
  - Validate production security requirements
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

STRONG_SECRET = "a" * 40


@pytest.mark.unit
class TestSettingsDefaults:
    def test_env_overrides(self):
        from userauth.crosscutting.config import Settings

        with patch.dict(
            "os.environ",
            {
                "MONGO_URI": "mongodb://db:27017/?replicaSet=rs0",
                "MONGO_DATABASE": "auth",
                "MONGO_TIMEOUT_MS": "2000",
            },
        ):
            settings = Settings()

        assert settings.mongo_uri == "mongodb://db:27017/?replicaSet=rs0"
        assert settings.mongo_database == "auth"
        assert settings.mongo_timeout_ms == 2000
        assert settings.mongo_users_collection == "users"

    def test_log_level_is_uppercased(self):
        from userauth.crosscutting.config import Settings

        with patch.dict("os.environ", {"LOG_LEVEL": "debug"}):
            assert Settings().log_level == "DEBUG"

    def test_allowed_origins_list(self):
        from userauth.crosscutting.config import Settings

        with patch.dict(
            "os.environ", {"ALLOWED_ORIGINS": "http://a.test, http://b.test ,"}
        ):
            assert Settings().get_allowed_origins_list() == [
                "http://a.test",
                "http://b.test",
            ]

    def test_test_environment_detection(self):
        from userauth.crosscutting.config import Settings

        with patch.dict("os.environ", {"APP_ENV": "ci"}):
            settings = Settings()

        assert settings.is_test() is True
        assert settings.is_production() is False


@pytest.mark.unit
class TestSettingsValidation:
    @pytest.mark.parametrize(
        "env_var",
        ["PASSWORD_TIME_COST", "PASSWORD_MEMORY_COST", "MONGO_SERVER_SELECTION_TIMEOUT_MS"],
    )
    def test_non_positive_values_rejected(self, env_var):
        from userauth.crosscutting.config import Settings

        with patch.dict("os.environ", {env_var: "0"}):
            with pytest.raises(ValidationError):
                Settings()

    def test_negative_operation_timeout_rejected(self):
        from userauth.crosscutting.config import Settings

        with patch.dict("os.environ", {"MONGO_TIMEOUT_MS": "-1"}):
            with pytest.raises(ValidationError):
                Settings()


@pytest.mark.unit
class TestProductionRequirements:
    def test_default_secret_rejected(self):
        from userauth.crosscutting.config import Settings

        with patch.dict(
            "os.environ", {"APP_ENV": "production", "JWT_SECRET": "dev-secret"}
        ):
            with pytest.raises(ValidationError, match="JWT_SECRET"):
                Settings()

    def test_short_secret_rejected(self):
        from userauth.crosscutting.config import Settings

        with patch.dict(
            "os.environ", {"APP_ENV": "production", "JWT_SECRET": "short-but-custom"}
        ):
            with pytest.raises(ValidationError, match="32"):
                Settings()

    def test_in_memory_store_rejected(self):
        from userauth.crosscutting.config import Settings

        with patch.dict(
            "os.environ",
            {
                "APP_ENV": "production",
                "JWT_SECRET": STRONG_SECRET,
                "USE_IN_MEMORY_STORE": "true",
            },
        ):
            with pytest.raises(ValidationError, match="USE_IN_MEMORY_STORE"):
                Settings()

    def test_strong_secret_accepted(self):
        from userauth.crosscutting.config import Settings

        with patch.dict(
            "os.environ",
            {
                "APP_ENV": "production",
                "JWT_SECRET": STRONG_SECRET,
                "USE_IN_MEMORY_STORE": "false",
            },
        ):
            assert Settings().is_production() is True
