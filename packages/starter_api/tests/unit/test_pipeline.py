"""
Unit tests for the request pipeline and its two filters.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from ...core.auth.errors import Forbidden, PasswordHashingError, Unauthenticated
from ...core.auth.models import TokenData
from ...core.security.middleware import IDENTITY_KEY, CredentialVerifier, PasswordFieldHasher
from ...core.security.pipeline import Pipeline, RequestContext


async def echo(ctx: RequestContext):
    return {"body": ctx.body, "state": ctx.state}


def make_ctx(headers=None, body=None):
    return RequestContext(method="POST", path="/test", headers=headers or {}, body=body)


@pytest.mark.asyncio
class TestPipeline:

    async def test_runs_handlers_in_order_then_endpoint(self):
        calls = []

        def recorder(name):
            async def handler(ctx, call_next):
                calls.append(name)
                return await call_next(ctx)
            return handler

        pipeline = Pipeline([recorder("first"), recorder("second")], echo)
        await pipeline(make_ctx())

        assert calls == ["first", "second"]

    async def test_terminating_handler_short_circuits(self):
        endpoint = AsyncMock()
        later = AsyncMock()

        async def stop(ctx, call_next):
            return {"stopped": True}

        result = await Pipeline([stop, later], endpoint)(make_ctx())

        assert result == {"stopped": True}
        later.assert_not_called()
        endpoint.assert_not_called()

    async def test_then_appends_without_mutating(self):
        async def mark(ctx, call_next):
            ctx.state["marked"] = True
            return await call_next(ctx)

        base = Pipeline([], echo)
        extended = base.then(mark)

        assert base.handlers == ()
        assert (await extended(make_ctx()))["state"] == {"marked": True}

    async def test_headers_are_case_insensitive(self):
        ctx = make_ctx(headers={"Authorization": "Bearer abc"})

        assert ctx.header("authorization") == "Bearer abc"
        assert ctx.header("AUTHORIZATION") == "Bearer abc"


@pytest.mark.asyncio
class TestCredentialVerifier:

    @pytest.fixture
    def pipeline(self, token_service):
        return Pipeline([CredentialVerifier(token_service)], echo)

    async def test_missing_header_is_unauthenticated(self, pipeline):
        with pytest.raises(Unauthenticated) as exc_info:
            await pipeline(make_ctx())

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.parametrize("header", ["", "Bearer", "Bearer ", "Basic dXNlcjpwYXNz", "Token abc", "Bearer not-a-jwt"])
    async def test_present_but_broken_header_is_forbidden(self, pipeline, header):
        with pytest.raises(Forbidden) as exc_info:
            await pipeline(make_ctx(headers={"Authorization": header}))

        assert exc_info.value.status_code == 403

    async def test_expired_token_is_forbidden(self, pipeline, token_service):
        token = token_service.create_access_token("user123", expires_delta=timedelta(seconds=-120))

        with pytest.raises(Forbidden):
            await pipeline(make_ctx(headers={"Authorization": f"Bearer {token}"}))

    async def test_valid_token_attaches_identity(self, pipeline, token_service):
        token = token_service.create_access_token("user123", claims={"email": "a@example.com"})

        result = await pipeline(make_ctx(headers={"authorization": f"bearer {token}"}))

        identity = result["state"][IDENTITY_KEY]
        assert isinstance(identity, TokenData)
        assert identity.sub == "user123"
        assert identity.email == "a@example.com"


@pytest.mark.asyncio
class TestPasswordFieldHasher:

    async def test_password_replaced_by_hash(self, hasher):
        ctx = make_ctx(body={"email": "a@example.com", "password": "correct-horse"})

        result = await Pipeline([PasswordFieldHasher(hasher)], echo)(ctx)

        stored = result["body"]["password"]
        assert stored != "correct-horse"
        assert "correct-horse" not in stored
        assert hasher.verify("correct-horse", stored) is True
        assert result["body"]["email"] == "a@example.com"

    @pytest.mark.parametrize("body", [None, {}, {"email": "a@example.com"}, {"password": ""}, {"password": None}])
    async def test_absent_password_passes_through(self, hasher, body):
        original = dict(body) if body is not None else None

        result = await Pipeline([PasswordFieldHasher(hasher)], echo)(make_ctx(body=body))

        assert result["body"] == original

    async def test_hashing_failure_blocks_request(self, hasher):
        hasher.hash_async = AsyncMock(side_effect=RuntimeError("backend unavailable"))
        endpoint = AsyncMock()
        ctx = make_ctx(body={"password": "correct-horse"})

        with pytest.raises(PasswordHashingError) as exc_info:
            await Pipeline([PasswordFieldHasher(hasher)], endpoint)(ctx)

        assert exc_info.value.status_code == 500
        endpoint.assert_not_called()
        assert "password" not in ctx.body

    async def test_custom_field_name(self, hasher):
        ctx = make_ctx(body={"new_password": "correct-horse"})

        result = await Pipeline([PasswordFieldHasher(hasher, field="new_password")], echo)(ctx)

        assert hasher.verify("correct-horse", result["body"]["new_password"]) is True
