"""Codec layer: external key encodings to raw bytes, raw integers to canonical Base64URL.

External key material reaches the library as PEM text, hexadecimal, Base58
(Bitcoin alphabet), Base64 / Base64URL or multibase text. Canonical key
objects carry every numeric member as unpadded Base64URL of the big-endian
unsigned integer.
"""

from __future__ import annotations

import base64
import binascii
import re
from enum import Enum

import base58

from didauth.errors import InvalidKeyFormatError


class KeyFormat(str, Enum):
    """Encodings accepted for supplied key material.

    Values are the DID document property names that carry each encoding.
    """

    PEM = "publicKeyPem"
    HEX = "publicKeyHex"
    BASE58 = "publicKeyBase58"
    BASE64 = "publicKeyBase64"
    MULTIBASE = "publicKeyMultibase"


# Varint-encoded multicodec prefixes for raw public keys.
MULTICODEC_ED25519_PUB = b"\xed\x01"
MULTICODEC_SECP256K1_PUB = b"\xe7\x01"

_PEM_RE = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----(?P<body>.*?)-----END (?P=label)-----",
    re.DOTALL,
)
_B64URL_RE = re.compile(r"^[A-Za-z0-9_-]*$")


def pem_label(text: str) -> str:
    """Return the label of the first PEM block (e.g. ``RSA PUBLIC KEY``)."""
    match = _PEM_RE.search(text)
    if match is None:
        raise InvalidKeyFormatError("no PEM block found")
    return match.group("label")


def _decode_pem(text: str) -> bytes:
    match = _PEM_RE.search(text)
    if match is None:
        raise InvalidKeyFormatError("no PEM block found")
    body = "".join(match.group("body").split())
    return base64.b64decode(body, validate=True)


def _decode_hex(text: str) -> bytes:
    if text[:2].lower() == "0x":
        text = text[2:]
    return bytes.fromhex(text)


def _decode_base64(text: str) -> bytes:
    """Standard or URL-safe alphabet, padding optional."""
    normalized = text.strip().replace("-", "+").replace("_", "/").rstrip("=")
    if len(normalized) % 4 == 1:
        raise ValueError("truncated base64 input")
    normalized += "=" * (-len(normalized) % 4)
    return base64.b64decode(normalized, validate=True)


def _decode_multibase(text: str) -> bytes:
    if not text.startswith("z"):
        raise ValueError("only base58btc ('z') multibase values are supported")
    return base58.b58decode(text[1:])


_DECODERS = {
    KeyFormat.PEM: _decode_pem,
    KeyFormat.HEX: _decode_hex,
    KeyFormat.BASE58: base58.b58decode,
    KeyFormat.BASE64: _decode_base64,
    KeyFormat.MULTIBASE: _decode_multibase,
}


def as_key_format(key_format: KeyFormat | str) -> KeyFormat:
    """Accept a KeyFormat, its property-name value, or its short name (``PEM``, ``base58``...)."""
    if isinstance(key_format, KeyFormat):
        return key_format
    if isinstance(key_format, str) and key_format.upper() in KeyFormat.__members__:
        return KeyFormat[key_format.upper()]
    try:
        return KeyFormat(key_format)
    except ValueError as e:
        raise InvalidKeyFormatError(
            f"unsupported key format {key_format!r}", details={"format": str(key_format)}
        ) from e


def decode_key_material(value: str | bytes, key_format: KeyFormat | str) -> bytes:
    """Decode supplied key material to raw bytes.

    For PEM the DER body is returned; callers that need the parsed key use
    the adapter's ``load_pem`` instead.

    Args:
        value: Encoded key text (bytes are decoded as ASCII).
        key_format: A KeyFormat member, its value or its short name.

    Returns:
        The decoded, non-empty bytes.

    Raises:
        InvalidKeyFormatError: Unknown format tag, malformed input or empty result.
    """
    fmt = as_key_format(key_format)
    try:
        text = value.decode("ascii") if isinstance(value, bytes) else value
        raw = _DECODERS[fmt](text)
    except (ValueError, TypeError, binascii.Error) as e:
        raise InvalidKeyFormatError(
            f"malformed {fmt.value} value", details={"format": fmt.value, "cause": str(e)}
        ) from e
    if not raw:
        raise InvalidKeyFormatError(f"empty {fmt.value} value", details={"format": fmt.value})
    return raw


def strip_multicodec(data: bytes, prefix: bytes) -> bytes:
    """Remove a multicodec prefix if present; other input is returned unchanged."""
    if data.startswith(prefix):
        return data[len(prefix) :]
    return data


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(text: str) -> bytes:
    """Strict unpadded (or padded) Base64URL decode.

    Raises:
        InvalidKeyFormatError: Characters outside the URL-safe alphabet or bad length.
    """
    stripped = text.rstrip("=")
    if not _B64URL_RE.match(stripped) or len(stripped) % 4 == 1:
        raise InvalidKeyFormatError("malformed base64url value")
    return base64.urlsafe_b64decode(stripped + "=" * (-len(stripped) % 4))


def int_to_b64url(value: int, length: int | None = None) -> str:
    """Big-endian unsigned encoding of ``value``; minimal unless ``length`` is given."""
    if length is None:
        length = max(1, (value.bit_length() + 7) // 8)
    return b64url_encode(value.to_bytes(length, "big"))


def b64url_to_int(text: str) -> int:
    # Leading zero bytes (sign bytes from other encoders) do not change the value.
    return int.from_bytes(b64url_decode(text), "big")
