"""Services package exports."""

from imf_gadgets.services.auth_service import AuthGateway
from imf_gadgets.services.codename_service import CODENAMES, CodenameAllocator, choose_codename
from imf_gadgets.services.gadget_service import GadgetService
from imf_gadgets.services.gadget_store import GadgetStore
from imf_gadgets.services.logging_service import configure_logging, get_logger
from imf_gadgets.services.password_service import PasswordHasher
from imf_gadgets.services.token_service import TokenService
from imf_gadgets.services.user_store import UserStore

__all__ = [
    "AuthGateway",
    "CODENAMES",
    "CodenameAllocator",
    "GadgetService",
    "GadgetStore",
    "PasswordHasher",
    "TokenService",
    "UserStore",
    "choose_codename",
    "configure_logging",
    "get_logger",
]
