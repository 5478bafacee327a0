"""Registration, login and bearer-token authentication."""

from typing import Optional
from uuid import UUID

import structlog
from starlette.concurrency import run_in_threadpool

from imf_gadgets.errors import (
    AuthenticationFailed,
    InvalidInput,
    MissingCredential,
)
from imf_gadgets.models.user import TokenIdentity
from imf_gadgets.services.password_service import PasswordHasher
from imf_gadgets.services.token_service import TokenService
from imf_gadgets.services.user_store import UserStore

logger = structlog.get_logger(__name__)

BEARER_SCHEME = "Bearer"


def extract_bearer_token(header_value: Optional[str]) -> Optional[str]:
    """Strip an optional ``Bearer `` prefix from an Authorization header.

    Bare tokens are returned unchanged. Returns None for a missing or
    blank header, and an empty string for a ``Bearer`` prefix with no
    credential after it, which then fails verification.
    """
    if header_value is None or not header_value.strip():
        return None
    token = header_value.strip()
    scheme, _, credentials = token.partition(" ")
    if scheme == BEARER_SCHEME:
        return credentials.strip()
    return token


def authenticate(authorization: Optional[str], tokens: TokenService) -> TokenIdentity:
    """Validate an Authorization header value.

    Args:
        authorization: Raw header value, with or without the Bearer prefix
        tokens: Token service used for verification

    Returns:
        Identity carried by the token

    Raises:
        MissingCredential: If no token was supplied
        InvalidToken: If the token fails verification
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise MissingCredential()
    return tokens.verify(token)


class AuthGateway:
    """Orchestrates the credential store, password hasher and token service."""

    def __init__(
        self,
        users: UserStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, username: Optional[str], password: Optional[str]) -> UUID:
        """Create a new user.

        Args:
            username: Desired username (case-sensitive)
            password: Plain-text password

        Returns:
            The new user's id

        Raises:
            InvalidInput: If either field is missing or empty
            DuplicateUser: If the username is already registered
        """
        if not username or not password:
            raise InvalidInput()

        password_hash = await run_in_threadpool(self.hasher.hash, password)
        user = await self.users.create(username, password_hash)

        logger.info("user_registered", user_id=str(user.id), username=username)
        return user.id

    async def login(self, username: Optional[str], password: Optional[str]) -> str:
        """Exchange a username and password for a bearer token.

        Unknown usernames and wrong passwords raise the same error.

        Raises:
            InvalidInput: If either field is missing or empty
            AuthenticationFailed: If the credentials do not match
        """
        if not username or not password:
            raise InvalidInput()

        result = await self.users.get_by_username(username)
        if result is None:
            logger.info("login_failed", username=username)
            raise AuthenticationFailed()

        user, password_hash = result

        if not await run_in_threadpool(self.hasher.verify, password, password_hash):
            logger.info("login_failed", username=username)
            raise AuthenticationFailed()

        logger.info("user_logged_in", user_id=str(user.id), username=user.username)
        return self.tokens.issue(user.id, user.username)

    def authenticate(self, authorization: Optional[str]) -> TokenIdentity:
        """Validate an Authorization header value against this gateway's tokens."""
        return authenticate(authorization, self.tokens)
