"""
Application configuration loaded from the process environment.
Built once at startup and passed explicitly to the app factory.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


class ConfigurationError(ValueError):
    """Raised when the environment cannot produce a usable configuration."""


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class AppConfig:
    """Runtime settings for the API."""

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    bcrypt_rounds: int = 12  # ~250ms per hash on commodity hardware
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    cors_allow_credentials: bool = True
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def __post_init__(self):
        if not self.jwt_secret:
            raise ConfigurationError("JWT_SECRET must be set")
        if self.jwt_algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(
                f"Unsupported JWT algorithm {self.jwt_algorithm!r}, "
                f"expected one of {', '.join(SUPPORTED_ALGORITHMS)}"
            )
        if self.access_token_expire_minutes <= 0:
            raise ConfigurationError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        # bcrypt only accepts cost factors in this range
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ConfigurationError("BCRYPT_ROUNDS must be between 4 and 31")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"Unknown LOG_LEVEL {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from, defaults to os.environ

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If JWT_SECRET is missing or a value is malformed
        """
        env = os.environ if environ is None else environ

        try:
            return cls(
                jwt_secret=env.get("JWT_SECRET", ""),
                jwt_algorithm=env.get("JWT_ALGORITHM", "HS256"),
                access_token_expire_minutes=int(env.get("ACCESS_TOKEN_EXPIRE_MINUTES", "60")),
                bcrypt_rounds=int(env.get("BCRYPT_ROUNDS", "12")),
                cors_origins=_parse_list(env.get("CORS_ORIGINS", "http://localhost:3000")),
                cors_allow_credentials=_parse_bool(env.get("CORS_ALLOW_CREDENTIALS", "true")),
                log_level=env.get("LOG_LEVEL", "INFO").upper(),
                host=env.get("HOST", "0.0.0.0"),
                port=int(env.get("PORT", "8000")),
            )
        except ConfigurationError:
            raise
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e
