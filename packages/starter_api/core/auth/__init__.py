"""
Authentication and authorization module.
Provides JWT token management and password hashing utilities.
"""

from .errors import Forbidden, InvalidTokenError, PasswordHashingError, Unauthenticated
from .hashing import PasswordHasher
from .models import TokenData, TokenResponse, User, UserCreate, UserLogin
from .repository import UserRepository
from .service import AuthService
from .token import TokenService

__all__ = [
    "PasswordHasher",
    "TokenService",
    "AuthService",
    "UserRepository",
    "Unauthenticated",
    "Forbidden",
    "InvalidTokenError",
    "PasswordHashingError",
    "TokenData",
    "TokenResponse",
    "User",
    "UserCreate",
    "UserLogin",
]
