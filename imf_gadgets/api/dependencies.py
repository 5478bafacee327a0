"""FastAPI dependencies wiring settings, stores and services together."""

from datetime import timedelta
from typing import Optional

import asyncpg
import structlog
from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader

from imf_gadgets.config import Settings, get_settings
from imf_gadgets.database import get_pool
from imf_gadgets.models.user import TokenIdentity
from imf_gadgets.services.auth_service import AuthGateway, authenticate
from imf_gadgets.services.gadget_service import GadgetService
from imf_gadgets.services.gadget_store import GadgetStore
from imf_gadgets.services.password_service import PasswordHasher
from imf_gadgets.services.token_service import TokenService
from imf_gadgets.services.user_store import UserStore

# Raw header so that bare tokens (no "Bearer " prefix) are accepted too.
authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    description="Bearer token from /auth/login (the 'Bearer ' prefix is optional)",
)


async def get_db_pool() -> asyncpg.Pool:
    """Return the application's connection pool."""
    return await get_pool()


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(
        secret=settings.jwt_secret,
        ttl=timedelta(minutes=settings.token_ttl_minutes),
    )


def get_auth_gateway(
    pool: asyncpg.Pool = Depends(get_db_pool),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthGateway:
    return AuthGateway(UserStore(pool), hasher, tokens)


def get_gadget_service(pool: asyncpg.Pool = Depends(get_db_pool)) -> GadgetService:
    return GadgetService(GadgetStore(pool))


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Security(authorization_header),
    tokens: TokenService = Depends(get_token_service),
) -> TokenIdentity:
    """Verify the request's bearer token and attach the identity to the request.

    Raises:
        MissingCredential: If no Authorization header was sent
        InvalidToken: If the token is invalid or expired
    """
    identity = authenticate(authorization, tokens)
    request.state.identity = identity
    structlog.contextvars.bind_contextvars(user_id=str(identity.user_id))
    return identity
