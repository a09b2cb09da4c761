"""
Main FastAPI application entry point.
Wires configuration, logging, CORS, the auth module and health endpoints.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ... import __version__
from ...config import AppConfig
from ...core.auth.hashing import PasswordHasher
from ...core.auth.repository import UserRepository
from ...core.auth.routes import build_pipelines, router as auth_router
from ...core.auth.service import AuthService
from ...core.auth.token import TokenService
from .health import router as health_router

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Process-wide logging setup, only called from the entry point."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # passlib reads bcrypt.__about__ and logs a traceback on newer releases
    logging.getLogger("passlib").setLevel(logging.ERROR)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown of the application."""
    config: AppConfig = app.state.config
    logger.info(
        f"Starting Starter API {__version__} "
        f"(token ttl={config.access_token_expire_minutes}m, bcrypt rounds={config.bcrypt_rounds})"
    )
    yield
    logger.info("Application shutdown complete")


def create_app(config: Optional[AppConfig] = None, repository: Optional[UserRepository] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings to run with, loaded from the environment when omitted
        repository: User store, a fresh in-memory one when omitted

    Returns:
        Configured application
    """
    config = config or AppConfig.from_env()

    app = FastAPI(
        title="Starter API",
        description="Layered API skeleton with bcrypt password hashing and bearer tokens",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    hasher = PasswordHasher(rounds=config.bcrypt_rounds)
    tokens = TokenService(config)
    auth_service = AuthService(repository or UserRepository(), hasher, tokens)

    app.state.config = config
    app.state.auth_service = auth_service
    app.state.auth_pipelines = build_pipelines(auth_service, hasher, tokens)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(health_router)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Starter API",
            "version": __version__,
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    return app


def main():
    config = AppConfig.from_env()
    configure_logging(config.log_level)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
