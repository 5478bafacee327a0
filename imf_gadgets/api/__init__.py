"""API package exports."""

from imf_gadgets.api.auth import router as auth_router
from imf_gadgets.api.gadgets import router as gadgets_router
from imf_gadgets.api.handlers import install_exception_handlers
from imf_gadgets.api.middleware import CorrelationIdMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "auth_router",
    "gadgets_router",
    "install_exception_handlers",
]
