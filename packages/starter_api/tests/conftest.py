"""
Shared fixtures: a test configuration with a cheap bcrypt cost and a fixed clock.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from ..config import AppConfig
from ..core.auth.hashing import PasswordHasher
from ..core.auth.repository import UserRepository
from ..core.auth.token import TokenService
from ..services.api_gateway.main import create_app

TEST_SECRET = "test-secret-key-for-testing-only-do-not-use-in-production"
ISSUED_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def config():
    return AppConfig(
        jwt_secret=TEST_SECRET,
        access_token_expire_minutes=60,
        bcrypt_rounds=4,  # minimum cost keeps the suite fast
        cors_origins=["http://localhost:3000"],
        log_level="WARNING",
    )


@pytest.fixture
def hasher(config):
    return PasswordHasher(rounds=config.bcrypt_rounds)


@pytest.fixture
def token_service(config):
    return TokenService(config)


@pytest.fixture
def repository():
    return UserRepository()


@pytest.fixture
def app(config, repository):
    return create_app(config, repository=repository)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
