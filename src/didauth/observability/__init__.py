"""Observability module for didauth.

Structured logging with JSON output for production and colored console
output for development; key material is redacted from every event.

Example:
    >>> from didauth.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("didauth.identity.extracted", did="did:example:123", key_count=2)
"""

from didauth.observability.logging import (
    REDACTED_PLACEHOLDER,
    configure_logging,
    get_logger,
    is_debug_mode,
    redact_key_material,
    sanitize_for_logging,
)

__all__ = [
    "REDACTED_PLACEHOLDER",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "redact_key_material",
    "sanitize_for_logging",
]
