"""Auth request and response models."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RegisterRequest(BaseModel):
    """Registration credentials.

    Both fields are optional at the schema level so that missing and
    empty values surface as the same InvalidInput error from the gateway.
    """

    username: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Login credentials."""

    username: Optional[str] = None
    password: Optional[str] = None


class RegisterResponse(BaseModel):
    """Successful registration response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = "User registered successfully"
    user_id: UUID


class LoginResponse(BaseModel):
    """Successful login response carrying a bearer token."""

    message: str = "Login successful"
    token: str
