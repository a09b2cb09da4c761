"""
Unit tests for environment configuration loading.
"""

import pytest

from ...config import AppConfig, ConfigurationError


def test_from_env_defaults():
    config = AppConfig.from_env({"JWT_SECRET": "s3cret"})

    assert config.jwt_secret == "s3cret"
    assert config.jwt_algorithm == "HS256"
    assert config.access_token_expire_minutes == 60
    assert config.bcrypt_rounds == 12
    assert config.cors_origins == ["http://localhost:3000"]
    assert config.cors_allow_credentials is True
    assert config.port == 8000


def test_from_env_overrides():
    config = AppConfig.from_env({
        "JWT_SECRET": "s3cret",
        "JWT_ALGORITHM": "HS512",
        "ACCESS_TOKEN_EXPIRE_MINUTES": "15",
        "BCRYPT_ROUNDS": "14",
        "CORS_ORIGINS": "https://app.example.com, https://admin.example.com,",
        "CORS_ALLOW_CREDENTIALS": "false",
        "LOG_LEVEL": "debug",
        "PORT": "9000",
    })

    assert config.jwt_algorithm == "HS512"
    assert config.access_token_expire_minutes == 15
    assert config.bcrypt_rounds == 14
    assert config.cors_origins == ["https://app.example.com", "https://admin.example.com"]
    assert config.cors_allow_credentials is False
    assert config.log_level == "DEBUG"
    assert config.port == 9000


def test_missing_secret_is_rejected():
    with pytest.raises(ConfigurationError, match="JWT_SECRET"):
        AppConfig.from_env({})


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("BCRYPT_ROUNDS", "10")

    config = AppConfig.from_env()

    assert config.jwt_secret == "from-env"
    assert config.bcrypt_rounds == 10


@pytest.mark.parametrize("env,message", [
    ({"JWT_ALGORITHM": "none"}, "Unsupported JWT algorithm"),
    ({"BCRYPT_ROUNDS": "3"}, "BCRYPT_ROUNDS"),
    ({"BCRYPT_ROUNDS": "many"}, "Invalid configuration value"),
    ({"ACCESS_TOKEN_EXPIRE_MINUTES": "0"}, "ACCESS_TOKEN_EXPIRE_MINUTES"),
    ({"LOG_LEVEL": "verbose"}, "Unknown LOG_LEVEL"),
])
def test_invalid_values_are_rejected(env, message):
    with pytest.raises(ConfigurationError, match=message):
        AppConfig.from_env({"JWT_SECRET": "s3cret", **env})
