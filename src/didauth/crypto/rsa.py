"""RSA adapter: PEM and canonical members to and from cryptography RSA keys, RS256 primitives."""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from didauth.crypto.encoding import b64url_to_int, int_to_b64url, pem_label
from didauth.errors import InvalidKeyFormatError, InvalidSignatureError

PKCS1 = "pkcs1"
PKCS8 = "pkcs8"
PEM_FORMATS = (PKCS1, PKCS8)

DEFAULT_KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537

# PEM label -> (format, is_private)
_PEM_LABELS: dict[str, tuple[str, bool]] = {
    "RSA PUBLIC KEY": (PKCS1, False),
    "RSA PRIVATE KEY": (PKCS1, True),
    "PUBLIC KEY": (PKCS8, False),
    "PRIVATE KEY": (PKCS8, True),
}


def detect_pem_format(pem: str) -> tuple[str, bool]:
    """Return ``(format, is_private)`` from the PEM header label."""
    label = pem_label(pem)
    try:
        return _PEM_LABELS[label]
    except KeyError:
        raise InvalidKeyFormatError(
            f"unsupported PEM label {label!r}", details={"label": label}
        ) from None


def load_pem(
    pem: str | bytes, private: bool | None = None
) -> rsa.RSAPrivateKey | rsa.RSAPublicKey:
    """Parse a PKCS#1 or PKCS#8 PEM, public or private, auto-detected from its label.

    Args:
        pem: PEM text.
        private: When given, the PEM must hold a private (True) or public (False) key.

    Raises:
        InvalidKeyFormatError: Malformed PEM, encrypted key, non-RSA key or
            private/public mismatch.
    """
    text = pem.decode("ascii") if isinstance(pem, bytes) else pem
    fmt, is_private = detect_pem_format(text)
    if private is not None and private != is_private:
        expected = "private" if private else "public"
        raise InvalidKeyFormatError(
            f"expected an RSA {expected} key PEM", details={"format": fmt}
        )
    try:
        key: object
        if is_private:
            key = serialization.load_pem_private_key(text.encode("ascii"), password=None)
        else:
            key = serialization.load_pem_public_key(text.encode("ascii"))
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyFormatError(
            "malformed RSA PEM", details={"format": fmt, "cause": str(e)}
        ) from e
    if not isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        raise InvalidKeyFormatError("PEM does not hold an RSA key", details={"format": fmt})
    return key


def public_fields(key: rsa.RSAPublicKey) -> dict[str, str]:
    numbers = key.public_numbers()
    return {"n": int_to_b64url(numbers.n), "e": int_to_b64url(numbers.e)}


def private_fields(key: rsa.RSAPrivateKey) -> dict[str, str]:
    """Public members plus the private exponent and CRT parameters."""
    numbers = key.private_numbers()
    return {
        **public_fields(key.public_key()),
        "p": int_to_b64url(numbers.p),
        "q": int_to_b64url(numbers.q),
        "d": int_to_b64url(numbers.d),
        "dp": int_to_b64url(numbers.dmp1),
        "dq": int_to_b64url(numbers.dmq1),
        "qi": int_to_b64url(numbers.iqmp),
    }


def _public_numbers(n: str, e: str) -> rsa.RSAPublicNumbers:
    return rsa.RSAPublicNumbers(e=b64url_to_int(e), n=b64url_to_int(n))


def public_key_from_fields(n: str, e: str) -> rsa.RSAPublicKey:
    try:
        return _public_numbers(n, e).public_key()
    except (ValueError, UnsupportedAlgorithm) as err:
        raise InvalidKeyFormatError(
            "invalid RSA public members", details={"cause": str(err)}
        ) from err


def private_key_from_fields(
    n: str, e: str, p: str, q: str, d: str, dp: str, dq: str, qi: str
) -> rsa.RSAPrivateKey:
    """Rebuild a private key; inconsistent CRT parameters are rejected."""
    numbers = rsa.RSAPrivateNumbers(
        p=b64url_to_int(p),
        q=b64url_to_int(q),
        d=b64url_to_int(d),
        dmp1=b64url_to_int(dp),
        dmq1=b64url_to_int(dq),
        iqmp=b64url_to_int(qi),
        public_numbers=_public_numbers(n, e),
    )
    try:
        return numbers.private_key()
    except (ValueError, UnsupportedAlgorithm) as err:
        raise InvalidKeyFormatError(
            "invalid RSA private members", details={"cause": str(err)}
        ) from err


def to_pem(key: rsa.RSAPrivateKey | rsa.RSAPublicKey, fmt: str = PKCS8) -> str:
    """Serialize to one of the four PEM variants (pkcs1/pkcs8 x private/public)."""
    if fmt not in PEM_FORMATS:
        raise InvalidKeyFormatError(
            f"PEM format must be one of {PEM_FORMATS}, got {fmt!r}", details={"format": fmt}
        )
    if isinstance(key, rsa.RSAPrivateKey):
        pem = key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=(
                serialization.PrivateFormat.TraditionalOpenSSL
                if fmt == PKCS1
                else serialization.PrivateFormat.PKCS8
            ),
            encryption_algorithm=serialization.NoEncryption(),
        )
    else:
        pem = key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=(
                serialization.PublicFormat.PKCS1
                if fmt == PKCS1
                else serialization.PublicFormat.SubjectPublicKeyInfo
            ),
        )
    return pem.decode("ascii")


def generate(key_size: int = DEFAULT_KEY_SIZE) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)


def sign(key: rsa.RSAPrivateKey, data: bytes) -> bytes:
    """RSASSA-PKCS1-v1_5 with SHA-256; signature is modulus-length bytes."""
    return key.sign(data, padding.PKCS1v15(), hashes.SHA256())


def verify(key: rsa.RSAPublicKey, data: bytes, signature: bytes) -> None:
    """Raises InvalidSignatureError on any failure."""
    try:
        key.verify(signature, data, padding.PKCS1v15(), hashes.SHA256())
    except (InvalidSignature, ValueError, TypeError) as e:
        raise InvalidSignatureError(
            "RS256 signature verification failed", details={"cause": type(e).__name__}
        ) from e
