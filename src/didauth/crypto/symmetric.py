"""Symmetric (oct) adapter: HS256 with the shared secret ``k``."""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from didauth.errors import InvalidSignatureError

DEFAULT_SECRET_SIZE = 32


def generate(size: int = DEFAULT_SECRET_SIZE) -> bytes:
    return os.urandom(size)


def sign(secret: bytes, data: bytes) -> bytes:
    mac = hmac.HMAC(secret, hashes.SHA256())
    mac.update(data)
    return mac.finalize()


def verify(secret: bytes, data: bytes, signature: bytes) -> None:
    """Constant-time comparison; raises InvalidSignatureError on mismatch."""
    mac = hmac.HMAC(secret, hashes.SHA256())
    mac.update(data)
    try:
        mac.verify(signature)
    except (InvalidSignature, TypeError) as e:
        raise InvalidSignatureError(
            "HS256 signature verification failed", details={"cause": type(e).__name__}
        ) from e
