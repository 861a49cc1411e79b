"""structlog configuration for the dispatcher."""

import logging
import sys
from typing import Any, MutableMapping

import structlog

SENSITIVE_KEYS = frozenset({"token", "pat", "authorization", "password", "secret_value", "github_token", "ado_pat"})
SENSITIVE_SUFFIXES = ("_token", "_pat", "_password")
MASK = "***"


def is_sensitive_key(key: str) -> bool:
    """Return True if a log field name looks like it holds credential material."""
    lowered = key.lower()
    return lowered in SENSITIVE_KEYS or lowered.endswith(SENSITIVE_SUFFIXES)


def mask_credentials(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """structlog processor replacing credential-looking fields with a mask."""
    for key in list(event_dict.keys()):
        if is_sensitive_key(key) and event_dict[key]:
            event_dict[key] = MASK
    return event_dict


def configure_logging(debug: bool = False, json_logs: bool = False) -> None:
    """Configure stdlib logging and structlog for the process."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    renderer: Any = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            mask_credentials,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
