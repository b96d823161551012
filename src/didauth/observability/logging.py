"""Structured logging for didauth.

Events are emitted through structlog on the standard-library ``didauth``
logger, rendered as JSON or as colored console output. Verification
method descriptions carry key material, so every event passes through
``redact_key_material`` before it is rendered.

Environment Variables:
    DIDAUTH_LOG_FORMAT: "json" or "console" (default)
    DIDAUTH_LOG_LEVEL: DEBUG, INFO (default), WARNING or ERROR
    DIDAUTH_DEBUG: "true" or "1" to log key material unredacted

Example:
    >>> from didauth.observability.logging import get_logger
    >>> logger = get_logger("didauth.did.identity")
    >>> logger.info("didauth.identity.extracted", did="did:example:123", key_count=2)
"""

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from structlog.typing import Processor

ROOT_LOGGER_NAME = "didauth"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"

ENV_LOG_FORMAT = "DIDAUTH_LOG_FORMAT"
ENV_LOG_LEVEL = "DIDAUTH_LOG_LEVEL"
ENV_DEBUG = "DIDAUTH_DEBUG"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Key substrings (case-insensitive) that indicate key material or credentials
_SENSITIVE_KEY_PATTERNS = frozenset(
    {"publickey", "privatekey", "secret", "jwk", "password", "token", "authorization"}
)

_logging_configured = False


def _is_sensitive_key(key: str) -> bool:
    lower = key.lower()
    return any(pattern in lower for pattern in _SENSITIVE_KEY_PATTERNS)


def sanitize_for_logging(data: dict[str, Any]) -> dict[str, Any]:
    """Sanitize a dict for safe logging by redacting key material.

    Keys matching (case-insensitive) publicKey*, privateKey*, secret, jwk,
    password, token or authorization have their values replaced with
    REDACTED_PLACEHOLDER. Nested dicts and lists of dicts are handled
    recursively. When DIDAUTH_DEBUG is enabled the data is returned as is.

    Example:
        >>> sanitize_for_logging({"id": "did:ex:1#k", "publicKeyBase58": "H3C2..."})
        {'id': 'did:ex:1#k', 'publicKeyBase58': '***REDACTED***'}
    """
    if not data:
        return {}
    if is_debug_mode():
        return dict(data)
    result: dict[str, Any] = {}
    for k, v in data.items():
        if _is_sensitive_key(k):
            result[k] = REDACTED_PLACEHOLDER
        elif isinstance(v, dict):
            result[k] = sanitize_for_logging(v)
        elif isinstance(v, list):
            result[k] = [
                sanitize_for_logging(item) if isinstance(item, dict) else item for item in v
            ]
        else:
            result[k] = v
    return result


def redact_key_material(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor applying ``sanitize_for_logging`` to the whole event."""
    return sanitize_for_logging(dict(event_dict))


def is_debug_mode() -> bool:
    """Return True if DIDAUTH_DEBUG is set to a truthy value (e.g. true, 1)."""
    value = os.environ.get(ENV_DEBUG, "").strip().lower()
    return value in ("true", "1", "yes", "on")


def _shared_processors() -> list[Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        redact_key_material,
    ]


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    force: bool = False,
) -> None:
    """Install the didauth handler on the ``didauth`` logger.

    Args:
        log_format: "json" or "console". Defaults to DIDAUTH_LOG_FORMAT.
        log_level: Minimum level. Defaults to DIDAUTH_LOG_LEVEL.
        force: Reconfigure even if already configured.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_format = (log_format or os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)).lower()
    log_level = (log_level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()

    shared_processors = _shared_processors()
    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, log_level))
    package_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structured logger for ``name``; configures logging with defaults on first use."""
    if not _logging_configured:
        configure_logging()

    return structlog.stdlib.get_logger(name)
