"""FastAPI application wiring for the authgate service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from .api.errors import install_error_handlers
from .api.gate import AccessGate
from .api.routes import auth_router, profile_router
from .config import Settings, get_settings
from .domain.contracts import AccountDirectory
from .domain.service import AuthenticationService, ProfileService, RegistrationService
from .repository import AccountRepository
from .security.passwords import BcryptPasswordHasher
from .security.tokens import JwtTokenIssuer

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    directory: AccountDirectory | None = None,
) -> FastAPI:
    """Build the application and its collaborators.

    The token issuer and hasher are constructed here rather than lazily, so a
    missing ``JWT_SECRET`` or an unusable bcrypt cost aborts startup. When no
    ``directory`` is supplied a Postgres pool is created and opened for the
    lifetime of the app.
    """
    settings = settings or get_settings()

    tokens = JwtTokenIssuer(
        settings.jwt_secret,
        issuer=settings.jwt_issuer,
        ttl_seconds=settings.jwt_ttl_seconds,
    )
    hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)

    pool: ConnectionPool | None = None
    if directory is None:
        pool = ConnectionPool(settings.database_url, open=False)
        directory = AccountRepository(pool)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the Postgres pool (when owned) for the app lifecycle."""
        if pool is None:
            yield
            return
        pool.open()
        logger.info("connection pool opened")
        try:
            if settings.auto_migrate:
                app.state.directory.ensure_schema()
            yield
        finally:
            pool.close()
            logger.info("connection pool closed")

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
    app.state.settings = settings
    app.state.directory = directory
    app.state.access_gate = AccessGate(tokens)
    app.state.registration_service = RegistrationService(directory, hasher)
    app.state.authentication_service = AuthenticationService(directory, hasher, tokens)
    app.state.profile_service = ProfileService(directory)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    install_error_handlers(app)

    @app.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        """Return a minimal readiness indicator used by orchestration systems."""
        return {"status": "ok"}

    app.include_router(auth_router)
    app.include_router(profile_router)
    return app
