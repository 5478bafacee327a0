"""User and authentication models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class User(BaseModel):
    """A registered API user. The password hash never leaves the store."""

    id: UUID
    username: str
    created_at: datetime


class TokenIdentity(BaseModel):
    """Identity carried by a verified bearer token."""

    user_id: UUID
    username: str
