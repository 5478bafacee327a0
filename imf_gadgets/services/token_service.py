"""JWT bearer token issuance and verification."""

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import UUID

import jwt
import structlog

from imf_gadgets.errors import InvalidToken
from imf_gadgets.models.user import TokenIdentity

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"
TOKEN_EXPIRE_MINUTES = 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Signs and verifies time-limited bearer tokens.

    Expiry is checked here against the injected clock rather than by
    PyJWT, so there is no leeway: a token is valid up to and including
    its ``exp`` instant and rejected one second later.
    """

    def __init__(
        self,
        secret: str,
        ttl: timedelta = timedelta(minutes=TOKEN_EXPIRE_MINUTES),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._secret = secret
        self.ttl = ttl
        self._clock = clock or _utcnow

    def issue(self, user_id: UUID | str, username: str) -> str:
        """Create a signed JWT for a user.

        Args:
            user_id: User UUID (placed in the 'sub' claim)
            username: Username to include in the payload

        Returns:
            Encoded JWT string
        """
        now = self._clock()
        # Round exp up so a token never expires before issue time + ttl
        payload = {
            "sub": str(user_id),
            "username": username,
            "iat": int(now.timestamp()),
            "exp": math.ceil((now + self.ttl).timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        logger.debug(
            "access_token_issued",
            user_id=str(user_id),
            username=username,
            expires_at=payload["exp"],
        )
        return token

    def verify(self, token: str) -> TokenIdentity:
        """Decode and validate a JWT.

        Args:
            token: Encoded JWT string

        Returns:
            Identity carried by the token

        Raises:
            InvalidToken: If the signature, payload or expiry is invalid
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp", "iat"],
                },
            )
        except jwt.InvalidTokenError as e:
            logger.info("access_token_rejected", reason=str(e))
            raise InvalidToken() from e

        exp = payload["exp"]
        if not isinstance(exp, (int, float)):
            logger.info("access_token_rejected", reason="non-numeric exp")
            raise InvalidToken()

        if self._clock().timestamp() > exp:
            logger.info("access_token_rejected", reason="expired", user_id=payload["sub"])
            raise InvalidToken()

        try:
            return TokenIdentity(
                user_id=UUID(payload["sub"]),
                username=payload["username"],
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.info("access_token_rejected", reason="malformed payload")
            raise InvalidToken() from e
