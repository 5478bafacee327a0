"""Credential store backed by the users table."""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

import asyncpg
import structlog

from imf_gadgets.database import acquire
from imf_gadgets.errors import DuplicateUser
from imf_gadgets.models.user import User

logger = structlog.get_logger(__name__)


class UserStore:
    """Persists user records. Username uniqueness is enforced by the table."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create(self, username: str, password_hash: str) -> User:
        """Insert a new user.

        Args:
            username: Unique, case-sensitive username
            password_hash: Already-hashed password

        Returns:
            Created User model

        Raises:
            DuplicateUser: If the username is already taken
            StorageFailure: If the database insert fails
        """
        user_id = uuid4()
        now = datetime.now(timezone.utc)

        async with acquire(self.pool) as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO users (id, username, password_hash, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $5)
                    """,
                    user_id,
                    username,
                    password_hash,
                    now,
                    now,
                )
            except asyncpg.UniqueViolationError as e:
                logger.info("user_create_duplicate", username=username)
                raise DuplicateUser() from e

        logger.info("user_created", user_id=str(user_id), username=username)

        return User(id=user_id, username=username, created_at=now)

    async def get_by_username(self, username: str) -> Optional[tuple[User, str]]:
        """Get a user by exact username.

        Args:
            username: Username to look up (case-sensitive)

        Returns:
            Tuple of (User, password_hash) or None if not found
        """
        async with acquire(self.pool) as conn:
            row = await conn.fetchrow(
                """
                SELECT id, username, password_hash, created_at
                FROM users
                WHERE username = $1
                """,
                username,
            )

        if row is None:
            return None

        user = User(
            id=row["id"],
            username=row["username"],
            created_at=row["created_at"],
        )
        return user, row["password_hash"]
