"""
JWT token management for bearer authentication.
Handles access token creation, signature validation and expiry checks.
"""

import calendar
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from jose import JWTError, jwt
from pydantic import ValidationError

from ...config import AppConfig
from .errors import InvalidTokenError
from .models import TokenData

logger = logging.getLogger(__name__)

RESERVED_CLAIMS = frozenset({"sub", "iat", "exp"})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return calendar.timegm(moment.utctimetuple())


class TokenService:
    """
    Issues and verifies signed access tokens.

    The signing secret comes from the injected configuration; rotating it
    invalidates every token issued before the rotation.
    """

    def __init__(self, config: AppConfig, clock: Callable[[], datetime] = utcnow):
        self._secret = config.jwt_secret
        self.algorithm = config.jwt_algorithm
        self.default_ttl = timedelta(minutes=config.access_token_expire_minutes)
        self._clock = clock

    def create_access_token(
        self,
        subject: str,
        claims: Optional[Dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Create a signed access token for a subject.

        Args:
            subject: Identity the token asserts (user id)
            claims: Extra public claims to embed, must not override sub/iat/exp
            expires_delta: Token lifetime, defaults to the configured TTL
            now: Issuance instant, defaults to the service clock

        Returns:
            Encoded JWT string

        Raises:
            ValueError: If subject is empty or claims collide with reserved ones
        """
        if not subject:
            raise ValueError("Token subject is required")

        extra = dict(claims or {})
        clashing = RESERVED_CLAIMS.intersection(extra)
        if clashing:
            raise ValueError(f"Reserved claims cannot be overridden: {sorted(clashing)}")

        issued_at = now or self._clock()
        expire = issued_at + (expires_delta or self.default_ttl)

        to_encode = {
            **extra,
            "sub": subject,
            "iat": _timestamp(issued_at),
            "exp": _timestamp(expire),
        }

        try:
            token = jwt.encode(to_encode, self._secret, algorithm=self.algorithm)
        except JWTError as e:
            logger.error(f"Failed to create access token: {e}")
            raise
        logger.debug(f"Access token issued for subject: {subject}")
        return token

    def verify_token(self, token: str, now: Optional[datetime] = None) -> TokenData:
        """
        Validate signature and expiry, then return the decoded claims.

        Args:
            token: Encoded JWT
            now: Instant to check expiry against, defaults to the service clock

        Returns:
            Decoded token data

        Raises:
            InvalidTokenError: If the token is malformed, forged or expired
        """
        if not token:
            raise InvalidTokenError("Token is empty")

        try:
            # no require_* options: jose maps them to verify_*, which would check exp
            # against the wall clock. TokenData enforces sub/iat/exp presence.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise InvalidTokenError(f"Token rejected: {e}") from e

        try:
            data = TokenData(**payload)
        except ValidationError as e:
            raise InvalidTokenError("Token claims are malformed") from e

        current = _timestamp(now or self._clock())
        if current >= data.exp:
            raise InvalidTokenError("Token has expired")

        return data
