"""
Password hashing utilities using bcrypt for secure password storage.
The cost factor is configurable so it can be raised without invalidating stored hashes.
"""

import logging

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


class PasswordHasher:
    """
    bcrypt hasher built on a passlib CryptContext.

    Hashing and verification are CPU bound; the async variants run them in
    the thread pool so a slow hash never blocks the event loop.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self.context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
            # hashes below the current cost report needs_update()
            bcrypt__min_rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """
        Hash a plain text password using bcrypt.

        Args:
            password: Plain text password to hash

        Returns:
            Salted hash in modular crypt format ($2b$...)

        Raises:
            ValueError: If password is empty or longer than 72 bytes
        """
        if not password:
            raise ValueError("Password cannot be empty")
        if password_too_long(password):
            raise ValueError(f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes")

        try:
            hashed = self.context.hash(password)
        except Exception as e:
            logger.error(f"Password hashing failed: {type(e).__name__}")
            raise
        logger.debug("Password hashed successfully")
        return hashed

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plain text password against its hash.

        Returns:
            True if password matches, False otherwise
        """
        if not plain_password or not hashed_password:
            return False
        # a longer input would be compared on its 72-byte prefix only
        if password_too_long(plain_password):
            return False

        try:
            return self.context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            # unknown or corrupt hash format
            logger.warning(f"Password verification failed: {type(e).__name__}")
            return False

    def needs_rehash(self, hashed_password: str) -> bool:
        """True if the hash was produced with a different cost than configured."""
        return self.context.needs_update(hashed_password)

    def dummy_verify(self) -> None:
        """Spend the time of a real verification, used when the account is unknown."""
        self.context.dummy_verify()

    async def hash_async(self, password: str) -> str:
        return await run_in_threadpool(self.hash, password)

    async def verify_async(self, plain_password: str, hashed_password: str) -> bool:
        return await run_in_threadpool(self.verify, plain_password, hashed_password)

    async def dummy_verify_async(self) -> None:
        await run_in_threadpool(self.dummy_verify)
