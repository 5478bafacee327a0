"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, status

from imf_gadgets.api.dependencies import get_auth_gateway
from imf_gadgets.models.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from imf_gadgets.services.auth_service import AuthGateway

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
)
async def register(
    request: RegisterRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> RegisterResponse:
    """Register a new user with a hashed password.

    Raises:
        InvalidInput (400): If username or password is missing
        DuplicateUser (409): If the username is taken
    """
    user_id = await gateway.register(request.username, request.password)
    return RegisterResponse(user_id=user_id)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> LoginResponse:
    """Authenticate and return a bearer token valid for one hour.

    Raises:
        InvalidInput (400): If username or password is missing
        AuthenticationFailed (401): If the credentials are invalid
    """
    token = await gateway.login(request.username, request.password)
    return LoginResponse(token=token)
