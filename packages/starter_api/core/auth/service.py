"""
Authentication service implementing registration and login.
Issues bearer tokens for users whose credentials match the stored bcrypt hash.
"""

import logging
from typing import Optional

from fastapi import HTTPException, status

from .hashing import PasswordHasher
from .models import TokenResponse, User, UserLogin
from .repository import DuplicateUserError, UserRepository
from .token import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service handling user management and JWT tokens."""

    def __init__(self, repository: UserRepository, hasher: PasswordHasher, tokens: TokenService):
        self.repository = repository
        self.hasher = hasher
        self.tokens = tokens

    def _issue(self, user_id: str, email: str) -> TokenResponse:
        access_token = self.tokens.create_access_token(user_id, claims={"email": email})
        return TokenResponse(
            access_token=access_token,
            expires_in=int(self.tokens.default_ttl.total_seconds()),
        )

    async def register_user(self, email: str, password_hash: str) -> TokenResponse:
        """
        Store a new account and return an access token.

        Args:
            email: Account identifier
            password_hash: Already hashed password, see PasswordFieldHasher

        Returns:
            Token response for the new account

        Raises:
            HTTPException: 400 if the email is already registered
        """
        try:
            user = await self.repository.add(email, password_hash)
        except DuplicateUserError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        logger.info(f"User registered successfully: {user.id}")
        return self._issue(user.id, user.email)

    async def login_user(self, login_data: UserLogin) -> TokenResponse:
        """
        Authenticate user and return an access token.

        Raises:
            HTTPException: 401 if credentials are invalid
        """
        user = await self.repository.get_by_email(login_data.email)

        if user is None:
            # keep response time independent of whether the account exists
            await self.hasher.dummy_verify_async()
            logger.warning("Failed login attempt for unknown account")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        if not await self.hasher.verify_async(login_data.password, user.password_hash):
            logger.warning(f"Failed login attempt for user: {user.id}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        if self.hasher.needs_rehash(user.password_hash):
            await self.repository.update_password_hash(
                user.id, await self.hasher.hash_async(login_data.password)
            )
            logger.info(f"Password hash upgraded to current cost for user: {user.id}")

        await self.repository.touch_login(user.id)
        logger.info(f"User logged in successfully: {user.id}")
        return self._issue(user.id, user.email)

    async def get_user(self, user_id: str) -> Optional[User]:
        user = await self.repository.get_by_id(user_id)
        if user is None:
            return None
        return user.to_public()
