"""structlog setup for the gadget API.

Log lines are JSON by default. Credential-bearing keys are blanked, and
bearer tokens or bcrypt hashes that leak into free-text values (exception
messages, echoed headers) are masked in place.
"""

import logging
import re
import sys
from typing import Any, Dict

import structlog

REDACTED = "REDACTED"

SENSITIVE_KEYS = ("authorization", "secret", "password", "token")

_LEAKED_CREDENTIAL = re.compile(
    r"Bearer\s+[\w\-.=]+"  # Authorization header values
    r"|\$2[abxy]\$\d{2}\$[./A-Za-z0-9]{53}"  # bcrypt hashes
)


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Blank credential fields and mask credentials inside string values."""
    for key, value in event_dict.items():
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = _LEAKED_CREDENTIAL.sub(REDACTED, value)

    return event_dict


def _renderer(log_format: str):
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        log_format: ``json`` for one object per line, ``console`` for
            human-readable local output
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, bound to ``logger_name`` when given."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
