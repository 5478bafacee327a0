"""Domain errors and their HTTP status mapping.

Every error raised by the services derives from ``GadgetApiError``. The
exception handler in ``imf_gadgets.main`` renders them as
``{"error": <message>}`` with the class's ``status_code``.
"""

from typing import Optional


class GadgetApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInput(GadgetApiError):
    """Required request fields are missing or empty."""

    status_code = 400
    message = "Username and password are required"


class DuplicateUser(GadgetApiError):
    """Registration attempted with a username that already exists."""

    status_code = 409
    message = "Username already exists"


class AuthenticationFailed(GadgetApiError):
    """Bad username/password combination.

    Unknown users and wrong passwords share this message so callers
    cannot tell which one failed.
    """

    status_code = 401
    message = "Invalid username or password"


class MissingCredential(GadgetApiError):
    """No bearer token was supplied."""

    status_code = 401
    message = "Access Denied"


class InvalidToken(AuthenticationFailed):
    """Token signature, payload or expiry check failed."""

    status_code = 403
    message = "Invalid Token"


class NotFound(GadgetApiError):
    """Unknown gadget id."""

    status_code = 404
    message = "Gadget not found"


class InvalidStateTransition(GadgetApiError):
    """Action not permitted from the gadget's current status."""

    status_code = 400
    message = "Gadget is decommissioned"


class CorruptCredential(GadgetApiError):
    """Stored password hash could not be parsed."""

    status_code = 500
    message = "Stored credential is corrupt"


class StorageFailure(GadgetApiError):
    """The database is unreachable or a statement failed."""

    status_code = 500
    message = "Storage unavailable"
