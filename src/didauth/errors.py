"""didauth Error Taxonomy.

This module defines the error hierarchy for the key layer and the
verification-key extraction logic, providing structured error handling
with specific error codes and context information.

Cryptographic and parsing failures are deterministic functions of their
input; none of these errors is retried by the library.
"""
from __future__ import annotations

from typing import Any


class DIDAuthError(Exception):
    """Base exception for all didauth errors.

    Attributes:
        code: Error code following the didauth:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidKeyFormatError(DIDAuthError):
    """Raised when externally supplied key material cannot be decoded.

    Covers unknown format tags, malformed PEM/hex/Base58/Base64 text, key
    material of the wrong size or algorithm family, and canonical key
    objects whose members are missing or inconsistent.

    Attributes:
        reason: Short description of what was wrong with the input
    """

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        message = f"Invalid key format: {reason}"
        super().__init__(
            code="didauth:key/invalid_format",
            message=message,
            details={"reason": reason, **(details or {})},
        )
        self.reason = reason


class NoPrivateKeyError(DIDAuthError):
    """Raised when signing is attempted with a public-only key.

    Attributes:
        kid: Identifier of the key that was asked to sign
    """

    def __init__(self, kid: str, details: dict[str, Any] | None = None) -> None:
        message = f"No private key available for signing with key '{kid}'"
        super().__init__(
            code="didauth:key/no_private_key",
            message=message,
            details={"kid": kid, **(details or {})},
        )
        self.kid = kid


class InvalidSignatureError(DIDAuthError):
    """Malformed signature bytes, wrong length, or cryptographic mismatch.

    These causes are deliberately not distinguished; ``details`` may carry
    the underlying cause for diagnostics.
    """

    def __init__(
        self, message: str = "Invalid signature", details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            code="didauth:signature/invalid",
            message=message,
            details=details or {},
        )


class KeyExtractionError(DIDAuthError):
    """Raised by a key extractor that cannot build a key from a verification method.

    Attributes:
        method_id: The ``id`` of the verification method, if it had one
        reason: Why extraction failed
    """

    def __init__(
        self,
        method_id: str | None,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"Cannot extract key from verification method '{method_id}': {reason}"
        super().__init__(
            code="didauth:did/key_extraction",
            message=message,
            details={"method_id": method_id, "reason": reason, **(details or {})},
        )
        self.method_id = method_id
        self.reason = reason


class UnresolvedDocumentError(DIDAuthError):
    """Raised when key extraction is attempted before a document was resolved or set."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="didauth:did/unresolved_document",
            message="DID document has not been resolved",
            details=details or {},
        )


class InvalidDocumentError(DIDAuthError):
    """Raised when a DID document fails the id/authentication well-formedness check.

    Attributes:
        did: The DID the document was expected to describe
        reason: Which check failed
    """

    def __init__(self, did: str, reason: str, details: dict[str, Any] | None = None) -> None:
        message = f"Invalid DID document for '{did}': {reason}"
        super().__init__(
            code="didauth:did/invalid_document",
            message=message,
            details={"did": did, "reason": reason, **(details or {})},
        )
        self.did = did
        self.reason = reason


class DocumentResolutionError(DIDAuthError):
    """Raised when the external resolver fails to produce a DID document.

    Attributes:
        did: The DID that could not be resolved
    """

    def __init__(self, did: str, cause: str, details: dict[str, Any] | None = None) -> None:
        message = f"Failed to resolve DID '{did}': {cause}"
        super().__init__(
            code="didauth:did/resolution_error",
            message=message,
            details={"did": did, "cause": cause, **(details or {})},
        )
        self.did = did
