"""
Request filters for the pipeline.

CredentialVerifier guards routes that need an authenticated identity.
PasswordFieldHasher replaces a plaintext ``password`` body field with its
bcrypt hash before the request reaches persistence logic.
"""

import logging
from typing import Any

from ..auth.errors import Forbidden, InvalidTokenError, PasswordHashingError, Unauthenticated
from ..auth.hashing import PasswordHasher
from ..auth.token import TokenService
from .pipeline import NextHandler, RequestContext

logger = logging.getLogger(__name__)

IDENTITY_KEY = "identity"


class CredentialVerifier:
    """
    Validates the bearer token and attaches its claims to ``ctx.state``.

    A missing Authorization header is Unauthenticated (401). A header that
    is present but carries no usable token is Forbidden (403).
    """

    def __init__(self, token_service: TokenService):
        self.token_service = token_service

    async def __call__(self, ctx: RequestContext, call_next: NextHandler) -> Any:
        auth_header = ctx.header("authorization")
        if auth_header is None:
            logger.warning(f"No Authorization header on {ctx.method} {ctx.path}")
            raise Unauthenticated()

        scheme, _, token = auth_header.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            logger.warning(f"Malformed Authorization header on {ctx.method} {ctx.path}")
            raise Forbidden()

        try:
            identity = self.token_service.verify_token(token)
        except InvalidTokenError as e:
            logger.warning(f"Token rejected on {ctx.method} {ctx.path}: {e}")
            raise Forbidden() from e

        ctx.state[IDENTITY_KEY] = identity
        return await call_next(ctx)


class PasswordFieldHasher:
    """
    Hashes the ``password`` body field in place.

    If the field is absent or empty the request passes through unchanged.
    This skip is a policy choice carried over from the account-update flow,
    not a security property: callers that require a password must validate
    its presence before this filter runs.
    """

    def __init__(self, hasher: PasswordHasher, field: str = "password"):
        self.hasher = hasher
        self.field = field

    async def __call__(self, ctx: RequestContext, call_next: NextHandler) -> Any:
        plain = ctx.body.get(self.field) if ctx.body else None
        if not plain:
            logger.debug(f"No {self.field} field on {ctx.method} {ctx.path}, skipping hash")
            return await call_next(ctx)

        try:
            ctx.body[self.field] = await self.hasher.hash_async(plain)
        except Exception as e:
            # never forward the plaintext
            ctx.body.pop(self.field, None)
            logger.error(f"Password hashing failed on {ctx.method} {ctx.path}: {type(e).__name__}")
            raise PasswordHashingError() from e

        return await call_next(ctx)
