"""
FastAPI routes for authentication endpoints.
Handles user registration, login and the current-user lookup.
"""

import logging
from dataclasses import dataclass

from fastapi import APIRouter, Request, status

from ..security.middleware import IDENTITY_KEY, CredentialVerifier, PasswordFieldHasher
from ..security.pipeline import Pipeline, RequestContext
from .errors import Forbidden
from .hashing import PasswordHasher
from .models import TokenResponse, User, UserCreate, UserLogin
from .service import AuthService
from .token import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@dataclass
class AuthPipelines:
    signup: Pipeline
    me: Pipeline


def build_pipelines(service: AuthService, hasher: PasswordHasher, tokens: TokenService) -> AuthPipelines:
    """Wire the request filters in front of each auth endpoint."""

    async def register(ctx: RequestContext) -> TokenResponse:
        return await service.register_user(ctx.body["email"], ctx.body["password"])

    async def current_user(ctx: RequestContext) -> User:
        identity = ctx.state[IDENTITY_KEY]
        user = await service.get_user(identity.sub)
        if user is None:
            # account removed after the token was issued
            raise Forbidden()
        return user

    return AuthPipelines(
        signup=Pipeline([PasswordFieldHasher(hasher)], register),
        me=Pipeline([CredentialVerifier(tokens)], current_user),
    )


def _pipelines(request: Request) -> AuthPipelines:
    return request.app.state.auth_pipelines


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(user_data: UserCreate, request: Request) -> TokenResponse:
    """
    Register a new user account.

    Returns:
        Access token for the new account

    Raises:
        HTTPException: 400 if email exists, 500 if hashing fails
    """
    ctx = RequestContext.from_request(request, body=user_data.model_dump())
    return await _pipelines(request).signup(ctx)


@router.post("/login", response_model=TokenResponse)
async def login(login_data: UserLogin, request: Request) -> TokenResponse:
    """
    Authenticate user and return an access token.

    Raises:
        HTTPException: 401 if credentials are invalid
    """
    service: AuthService = request.app.state.auth_service
    return await service.login_user(login_data)


@router.get("/me", response_model=User)
async def me(request: Request) -> User:
    """Return the account named by the bearer token."""
    ctx = RequestContext.from_request(request)
    return await _pipelines(request).me(ctx)
