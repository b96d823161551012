"""secp256k1 adapter: points, scalars and PEM to and from cryptography EC keys; ES256K primitives.

Signatures are the 64-byte ``r || s`` concatenation (each 32 bytes,
big-endian, zero-padded), not ASN.1 DER.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from didauth.crypto.encoding import b64url_to_int, int_to_b64url, pem_label
from didauth.errors import InvalidKeyFormatError, InvalidSignatureError

CURVE_NAME = "secp256k1"
COORDINATE_SIZE = 32
SIGNATURE_SIZE = 64
# Order of the secp256k1 base point.
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

_ECDSA = ec.ECDSA(hashes.SHA256())


def load_public_bytes(raw: bytes) -> ec.EllipticCurvePublicKey:
    """SEC1 uncompressed (65), compressed (33) or bare ``x || y`` (64 bytes) point."""
    if len(raw) == 2 * COORDINATE_SIZE:
        raw = b"\x04" + raw
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), raw)
    except ValueError as e:
        raise InvalidKeyFormatError(
            "invalid secp256k1 public point", details={"length": len(raw), "cause": str(e)}
        ) from e


def load_private_bytes(raw: bytes) -> ec.EllipticCurvePrivateKey:
    """32-byte big-endian private scalar."""
    if len(raw) != COORDINATE_SIZE:
        raise InvalidKeyFormatError(
            f"secp256k1 private key must be {COORDINATE_SIZE} bytes, got {len(raw)}",
            details={"length": len(raw)},
        )
    return _derive(int.from_bytes(raw, "big"))


def _derive(scalar: int) -> ec.EllipticCurvePrivateKey:
    try:
        return ec.derive_private_key(scalar, ec.SECP256K1())
    except ValueError as e:
        raise InvalidKeyFormatError(
            "secp256k1 private scalar out of range", details={"cause": str(e)}
        ) from e


def load_pem(
    pem: str | bytes, private: bool | None = None
) -> ec.EllipticCurvePrivateKey | ec.EllipticCurvePublicKey:
    """SPKI, PKCS#8 or SEC1 (``EC PRIVATE KEY``) PEM holding a secp256k1 key."""
    text = pem.decode("ascii") if isinstance(pem, bytes) else pem
    is_private = "PRIVATE KEY" in pem_label(text)
    if private is not None and private != is_private:
        expected = "private" if private else "public"
        raise InvalidKeyFormatError(f"expected an EC {expected} key PEM")
    try:
        key: object
        if is_private:
            key = serialization.load_pem_private_key(text.encode("ascii"), password=None)
        else:
            key = serialization.load_pem_public_key(text.encode("ascii"))
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyFormatError("malformed EC PEM", details={"cause": str(e)}) from e
    if not isinstance(key, (ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey)):
        raise InvalidKeyFormatError("PEM does not hold an EC key")
    if key.curve.name != CURVE_NAME:
        raise InvalidKeyFormatError(
            f"unsupported curve {key.curve.name!r}", details={"curve": key.curve.name}
        )
    return key


def public_fields(key: ec.EllipticCurvePublicKey) -> dict[str, str]:
    numbers = key.public_numbers()
    return {
        "x": int_to_b64url(numbers.x, COORDINATE_SIZE),
        "y": int_to_b64url(numbers.y, COORDINATE_SIZE),
    }


def private_fields(key: ec.EllipticCurvePrivateKey) -> dict[str, str]:
    return {
        **public_fields(key.public_key()),
        "d": int_to_b64url(key.private_numbers().private_value, COORDINATE_SIZE),
    }


def public_key_from_fields(x: str, y: str) -> ec.EllipticCurvePublicKey:
    numbers = ec.EllipticCurvePublicNumbers(b64url_to_int(x), b64url_to_int(y), ec.SECP256K1())
    try:
        return numbers.public_key()
    except ValueError as e:
        raise InvalidKeyFormatError(
            "point is not on secp256k1", details={"cause": str(e)}
        ) from e


def private_key_from_fields(x: str, y: str, d: str) -> ec.EllipticCurvePrivateKey:
    """Derive the key from ``d``; ``x``/``y`` must match the derived point."""
    key = _derive(b64url_to_int(d))
    numbers = key.public_key().public_numbers()
    if (numbers.x, numbers.y) != (b64url_to_int(x), b64url_to_int(y)):
        raise InvalidKeyFormatError("EC private scalar does not match x/y")
    return key


def generate() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256K1())


def sign(key: ec.EllipticCurvePrivateKey, data: bytes) -> bytes:
    """ECDSA over SHA-256(data); returns ``r || s`` with ``s`` in the lower half of the order."""
    r, s = decode_dss_signature(key.sign(data, _ECDSA))
    if s > CURVE_ORDER // 2:
        s = CURVE_ORDER - s
    return r.to_bytes(COORDINATE_SIZE, "big") + s.to_bytes(COORDINATE_SIZE, "big")


def verify(key: ec.EllipticCurvePublicKey, data: bytes, signature: bytes) -> None:
    """Raises InvalidSignatureError on any failure, including a length other than 64."""
    if not isinstance(signature, (bytes, bytearray)) or len(signature) != SIGNATURE_SIZE:
        length = len(signature) if isinstance(signature, (bytes, bytearray)) else None
        raise InvalidSignatureError(
            f"ES256K signature must be {SIGNATURE_SIZE} bytes",
            details={"signature_length": length},
        )
    r = int.from_bytes(signature[:COORDINATE_SIZE], "big")
    s = int.from_bytes(signature[COORDINATE_SIZE:], "big")
    try:
        key.verify(encode_dss_signature(r, s), data, _ECDSA)
    except (InvalidSignature, ValueError) as e:
        raise InvalidSignatureError(
            "ES256K signature verification failed", details={"cause": type(e).__name__}
        ) from e
