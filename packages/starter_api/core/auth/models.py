"""
Pydantic models for authentication and user management.
Defines data structures for API requests, responses and decoded tokens.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .hashing import MAX_PASSWORD_BYTES, password_too_long


class UserCreate(BaseModel):
    """Model for user registration request."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if password_too_long(value):
            raise ValueError(f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes")
        return value


class UserLogin(BaseModel):
    """Model for user login request."""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Model for token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenData(BaseModel):
    """Model for decoded token data."""
    sub: str  # user_id
    exp: int  # expiration timestamp
    iat: int  # issued at timestamp
    email: Optional[str] = None


class User(BaseModel):
    """Public user data, never carries the password hash."""
    id: str
    email: str
    created_at: datetime
    last_login: Optional[datetime] = None
