"""Ed25519 adapter: raw keys and PEM to and from cryptography Ed25519 keys, EdDSA primitives."""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from didauth.crypto.encoding import b64url_decode, b64url_encode, pem_label
from didauth.errors import InvalidKeyFormatError, InvalidSignatureError

CURVE_NAME = "Ed25519"
KEY_SIZE = 32
SIGNATURE_SIZE = 64


def raw_public_bytes(key: Ed25519PublicKey) -> bytes:
    return key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def raw_private_bytes(key: Ed25519PrivateKey) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def load_public_bytes(raw: bytes) -> Ed25519PublicKey:
    """From raw 32 bytes."""
    if len(raw) != KEY_SIZE:
        raise InvalidKeyFormatError(
            f"Ed25519 public key must be {KEY_SIZE} bytes, got {len(raw)}",
            details={"length": len(raw)},
        )
    try:
        return Ed25519PublicKey.from_public_bytes(raw)
    except ValueError as e:
        raise InvalidKeyFormatError("invalid Ed25519 public key", details={"cause": str(e)}) from e


def load_private_bytes(raw: bytes) -> Ed25519PrivateKey:
    """From a 32-byte seed, or a 64-byte ``seed || public`` secret.

    The public half of a 64-byte secret must match the key derived from the seed.
    """
    if len(raw) not in (KEY_SIZE, 2 * KEY_SIZE):
        raise InvalidKeyFormatError(
            f"Ed25519 secret must be {KEY_SIZE} or {2 * KEY_SIZE} bytes, got {len(raw)}",
            details={"length": len(raw)},
        )
    key = Ed25519PrivateKey.from_private_bytes(raw[:KEY_SIZE])
    if len(raw) == 2 * KEY_SIZE and raw_public_bytes(key.public_key()) != raw[KEY_SIZE:]:
        raise InvalidKeyFormatError("Ed25519 secret public half does not match its seed")
    return key


def load_pem(pem: str | bytes, private: bool | None = None) -> Ed25519PrivateKey | Ed25519PublicKey:
    text = pem.decode("ascii") if isinstance(pem, bytes) else pem
    is_private = "PRIVATE KEY" in pem_label(text)
    if private is not None and private != is_private:
        expected = "private" if private else "public"
        raise InvalidKeyFormatError(f"expected an Ed25519 {expected} key PEM")
    try:
        key: object
        if is_private:
            key = serialization.load_pem_private_key(text.encode("ascii"), password=None)
        else:
            key = serialization.load_pem_public_key(text.encode("ascii"))
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyFormatError("malformed Ed25519 PEM", details={"cause": str(e)}) from e
    if not isinstance(key, (Ed25519PrivateKey, Ed25519PublicKey)):
        raise InvalidKeyFormatError("PEM does not hold an Ed25519 key")
    return key


def public_fields(key: Ed25519PublicKey) -> dict[str, str]:
    return {"x": b64url_encode(raw_public_bytes(key))}


def private_fields(key: Ed25519PrivateKey) -> dict[str, str]:
    return {**public_fields(key.public_key()), "d": b64url_encode(raw_private_bytes(key))}


def public_key_from_fields(x: str) -> Ed25519PublicKey:
    return load_public_bytes(b64url_decode(x))


def private_key_from_fields(x: str, d: str) -> Ed25519PrivateKey:
    key = load_private_bytes(b64url_decode(d))
    if raw_public_bytes(key.public_key()) != b64url_decode(x):
        raise InvalidKeyFormatError("OKP private key does not match x")
    return key


def generate() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


def sign(key: Ed25519PrivateKey, data: bytes) -> bytes:
    """Deterministic Ed25519 over the raw message (64 bytes)."""
    return key.sign(data)


def verify(key: Ed25519PublicKey, data: bytes, signature: bytes) -> None:
    """Raises InvalidSignatureError on any failure."""
    try:
        key.verify(signature, data)
    except (InvalidSignature, ValueError, TypeError) as e:
        raise InvalidSignatureError(
            "EdDSA signature verification failed", details={"cause": type(e).__name__}
        ) from e
