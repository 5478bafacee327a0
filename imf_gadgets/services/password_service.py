"""bcrypt password hashing."""

import bcrypt
import structlog

from imf_gadgets.errors import CorruptCredential

logger = structlog.get_logger(__name__)

DEFAULT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    """Encode a password and cut it to the bytes bcrypt actually uses.

    Recent bcrypt releases raise on longer input instead of ignoring the
    tail, so both hash and verify truncate the same way.
    """
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


class PasswordHasher:
    """Salted one-way password hashing with a tunable work factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt with a freshly generated salt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(_password_bytes(password), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            password: Plain-text password to check
            password_hash: Bcrypt hash to verify against

        Returns:
            True if the password matches, False otherwise

        Raises:
            CorruptCredential: If the stored hash is not a valid bcrypt hash
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(password),
                password_hash.encode("utf-8"),
            )
        except ValueError as e:
            logger.error("password_hash_malformed", error=str(e))
            raise CorruptCredential() from e
