"""Models package exports."""

from imf_gadgets.models.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from imf_gadgets.models.gadget import (
    Gadget,
    GadgetAction,
    GadgetStatus,
    GadgetUpdate,
    GadgetWithProbability,
    RetireResponse,
    SelfDestructResponse,
)
from imf_gadgets.models.user import TokenIdentity, User

__all__ = [
    "Gadget",
    "GadgetAction",
    "GadgetStatus",
    "GadgetUpdate",
    "GadgetWithProbability",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "RetireResponse",
    "SelfDestructResponse",
    "TokenIdentity",
    "User",
]
