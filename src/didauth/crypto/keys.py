"""Key abstraction over RSA, secp256k1, Ed25519 and symmetric keys.

Every variant is built either from a canonical key object (JWK) or from
supplied key material, and exposes the same capability set: canonical
export, signing and verification. Instances are immutable; a public-only
key never holds private members and can never be upgraded to a private one.

Example:
    >>> key = OKPKey.generate("did:example:123#key-1")
    >>> signature = key.sign("hello")
    >>> key.public_key().verify("hello", signature)
    True
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, TypeVar

from cryptography.hazmat.primitives.asymmetric import ec as ec_types
from cryptography.hazmat.primitives.asymmetric import rsa as rsa_types
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from joserfc import jwk

from didauth.crypto import ec, okp, rsa, symmetric
from didauth.crypto.encoding import (
    MULTICODEC_ED25519_PUB,
    MULTICODEC_SECP256K1_PUB,
    KeyFormat,
    as_key_format,
    b64url_decode,
    b64url_encode,
    decode_key_material,
    strip_multicodec,
)
from didauth.crypto.models import (
    ECPrivateJWK,
    ECPublicJWK,
    JWKModel,
    KeyMaterial,
    KeyUse,
    OKPPrivateJWK,
    OKPPublicJWK,
    RSAPrivateJWK,
    RSAPublicJWK,
    SymmetricJWK,
    parse_jwk,
)
from didauth.errors import InvalidKeyFormatError, NoPrivateKeyError

K = TypeVar("K", bound="Key")

Message = str | bytes


def _to_bytes(message: Message) -> bytes:
    return message.encode("utf-8") if isinstance(message, str) else bytes(message)


class Key(ABC):
    """A single cryptographic key with a fixed kty/alg pairing."""

    kty: ClassVar[str]
    alg: ClassVar[str]

    __slots__ = ("_jwk", "_native", "_private")

    def __init__(self, model: JWKModel, native: Any, private: bool) -> None:
        self._jwk = model
        self._native = native
        self._private = private

    @property
    def kid(self) -> str:
        return self._jwk.kid

    @property
    def use(self) -> KeyUse:
        return self._jwk.use

    @property
    def is_private(self) -> bool:
        return self._private

    @classmethod
    def from_jwk(cls: type[K], data: dict[str, Any]) -> K:
        """Build a key of this variant from a canonical key object.

        Raises:
            InvalidKeyFormatError: Wrong kty for this variant, or invalid members.
        """
        kty = data.get("kty")
        if kty != cls.kty:
            raise InvalidKeyFormatError(
                f"expected kty {cls.kty!r}, got {kty!r}", details={"kty": kty}
            )
        return cls._from_model(parse_jwk(data))

    @classmethod
    @abstractmethod
    def _from_model(cls: type[K], model: Any) -> K: ...

    def to_jwk(self) -> dict[str, Any]:
        """Canonical key object; private members only when the key is private."""
        return self._jwk.to_dict()

    def thumbprint(self) -> str:
        """RFC 7638 SHA-256 thumbprint, Base64URL encoded."""
        return jwk.import_key(self.to_jwk(), self.kty).thumbprint()

    def sign(self, message: Message) -> bytes:
        """Sign ``message`` (str is UTF-8 encoded).

        Raises:
            NoPrivateKeyError: The key holds no private material.
        """
        if not self._private:
            raise NoPrivateKeyError(self.kid, details={"kty": self.kty})
        return self._sign(_to_bytes(message))

    def verify(self, message: Message, signature: bytes) -> bool:
        """Return True when ``signature`` is valid for ``message``.

        Raises:
            InvalidSignatureError: Malformed signature or cryptographic mismatch.
        """
        self._verify(_to_bytes(message), signature)
        return True

    @abstractmethod
    def _sign(self, data: bytes) -> bytes: ...

    @abstractmethod
    def _verify(self, data: bytes, signature: bytes) -> None: ...

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return type(self) is type(other) and self.to_jwk() == other.to_jwk()

    def __hash__(self) -> int:
        return hash((self.kty, self.kid, self.thumbprint(), self._private))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kid={self.kid!r}, private={self._private})"


class RSAKey(Key):
    """RS256 key (RSASSA-PKCS1-v1_5 with SHA-256)."""

    kty = "RSA"
    alg = "RS256"

    __slots__ = ()

    @classmethod
    def _from_model(cls, model: RSAPublicJWK) -> RSAKey:
        if isinstance(model, RSAPrivateJWK):
            native: Any = rsa.private_key_from_fields(
                n=model.n, e=model.e, p=model.p, q=model.q, d=model.d,
                dp=model.dp, dq=model.dq, qi=model.qi,
            )
        else:
            native = rsa.public_key_from_fields(model.n, model.e)
        # Members are re-encoded from the native key: no sign byte, no padding.
        return cls.from_native(native, model.kid, model.use)

    @classmethod
    def from_native(
        cls,
        native: rsa_types.RSAPrivateKey | rsa_types.RSAPublicKey,
        kid: str,
        use: KeyUse = KeyUse.SIGNATURE,
    ) -> RSAKey:
        if isinstance(native, rsa_types.RSAPrivateKey):
            return cls(RSAPrivateJWK(kid=kid, use=use, **rsa.private_fields(native)), native, True)
        return cls(RSAPublicJWK(kid=kid, use=use, **rsa.public_fields(native)), native, False)

    @classmethod
    def from_pem(cls, pem: str | bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> RSAKey:
        """Public or private, PKCS#1 or PKCS#8, detected from the PEM label."""
        return cls.from_native(rsa.load_pem(pem), kid, use)

    @classmethod
    def from_public_pem(cls, pem: str | bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> RSAKey:
        return cls.from_native(rsa.load_pem(pem, private=False), kid, use)

    @classmethod
    def from_private_pem(cls, pem: str | bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> RSAKey:
        return cls.from_native(rsa.load_pem(pem, private=True), kid, use)

    @classmethod
    def from_encoded(
        cls,
        value: str | bytes,
        kid: str,
        key_format: KeyFormat | str = KeyFormat.PEM,
        private: bool = False,
        use: KeyUse = KeyUse.SIGNATURE,
    ) -> RSAKey:
        """RSA material is only accepted as PEM."""
        if as_key_format(key_format) is not KeyFormat.PEM:
            raise InvalidKeyFormatError(
                "RSA keys must be supplied as PEM", details={"format": str(key_format)}
            )
        return cls.from_native(rsa.load_pem(value, private=private), kid, use)

    @classmethod
    def generate(
        cls, kid: str, key_size: int = rsa.DEFAULT_KEY_SIZE, use: KeyUse = KeyUse.SIGNATURE
    ) -> RSAKey:
        return cls.from_native(rsa.generate(key_size), kid, use)

    def to_pem(self, fmt: str = rsa.PKCS8) -> str:
        """PEM text; ``fmt`` (pkcs1 or pkcs8) combined with is_private selects the variant."""
        return rsa.to_pem(self._native, fmt)

    def public_key(self) -> RSAKey:
        if not self._private:
            return self
        return RSAKey.from_native(self._native.public_key(), self.kid, self.use)

    def _sign(self, data: bytes) -> bytes:
        return rsa.sign(self._native, data)

    def _verify(self, data: bytes, signature: bytes) -> None:
        native = self._native.public_key() if self._private else self._native
        rsa.verify(native, data, signature)


class ECKey(Key):
    """ES256K key on secp256k1; signatures are 64-byte ``r || s``."""

    kty = "EC"
    alg = "ES256K"

    __slots__ = ()

    @classmethod
    def _from_model(cls, model: ECPublicJWK) -> ECKey:
        if isinstance(model, ECPrivateJWK):
            native: Any = ec.private_key_from_fields(model.x, model.y, model.d)
        else:
            native = ec.public_key_from_fields(model.x, model.y)
        return cls.from_native(native, model.kid, model.use)

    @classmethod
    def from_native(
        cls,
        native: ec_types.EllipticCurvePrivateKey | ec_types.EllipticCurvePublicKey,
        kid: str,
        use: KeyUse = KeyUse.SIGNATURE,
    ) -> ECKey:
        if native.curve.name != ec.CURVE_NAME:
            raise InvalidKeyFormatError(
                f"unsupported curve {native.curve.name!r}", details={"curve": native.curve.name}
            )
        if isinstance(native, ec_types.EllipticCurvePrivateKey):
            return cls(ECPrivateJWK(kid=kid, use=use, **ec.private_fields(native)), native, True)
        return cls(ECPublicJWK(kid=kid, use=use, **ec.public_fields(native)), native, False)

    @classmethod
    def from_public_bytes(cls, raw: bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> ECKey:
        return cls.from_native(ec.load_public_bytes(raw), kid, use)

    @classmethod
    def from_private_bytes(cls, raw: bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> ECKey:
        """Public point is derived from the scalar."""
        return cls.from_native(ec.load_private_bytes(raw), kid, use)

    @classmethod
    def from_pem(cls, pem: str | bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> ECKey:
        return cls.from_native(ec.load_pem(pem), kid, use)

    @classmethod
    def from_encoded(
        cls,
        value: str | bytes,
        kid: str,
        key_format: KeyFormat | str,
        private: bool = False,
        use: KeyUse = KeyUse.SIGNATURE,
    ) -> ECKey:
        fmt = as_key_format(key_format)
        if fmt is KeyFormat.PEM:
            return cls.from_native(ec.load_pem(value, private=private), kid, use)
        raw = decode_key_material(value, fmt)
        if private:
            return cls.from_private_bytes(raw, kid, use)
        return cls.from_public_bytes(strip_multicodec(raw, MULTICODEC_SECP256K1_PUB), kid, use)

    @classmethod
    def generate(cls, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> ECKey:
        return cls.from_native(ec.generate(), kid, use)

    def public_key(self) -> ECKey:
        if not self._private:
            return self
        return ECKey.from_native(self._native.public_key(), self.kid, self.use)

    def _sign(self, data: bytes) -> bytes:
        return ec.sign(self._native, data)

    def _verify(self, data: bytes, signature: bytes) -> None:
        native = self._native.public_key() if self._private else self._native
        ec.verify(native, data, signature)


class OKPKey(Key):
    """EdDSA key on Ed25519."""

    kty = "OKP"
    alg = "EdDSA"

    __slots__ = ()

    @classmethod
    def _from_model(cls, model: OKPPublicJWK) -> OKPKey:
        if isinstance(model, OKPPrivateJWK):
            native: Any = okp.private_key_from_fields(model.x, model.d)
        else:
            native = okp.public_key_from_fields(model.x)
        return cls.from_native(native, model.kid, model.use)

    @classmethod
    def from_native(cls, native: Any, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> OKPKey:
        if isinstance(native, Ed25519PrivateKey):
            return cls(OKPPrivateJWK(kid=kid, use=use, **okp.private_fields(native)), native, True)
        return cls(OKPPublicJWK(kid=kid, use=use, **okp.public_fields(native)), native, False)

    @classmethod
    def from_public_bytes(cls, raw: bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> OKPKey:
        return cls.from_native(okp.load_public_bytes(raw), kid, use)

    @classmethod
    def from_private_bytes(cls, raw: bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> OKPKey:
        """From a 32-byte seed (or 64-byte seed || public secret)."""
        return cls.from_native(okp.load_private_bytes(raw), kid, use)

    @classmethod
    def from_pem(cls, pem: str | bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> OKPKey:
        return cls.from_native(okp.load_pem(pem), kid, use)

    @classmethod
    def from_encoded(
        cls,
        value: str | bytes,
        kid: str,
        key_format: KeyFormat | str,
        private: bool = False,
        use: KeyUse = KeyUse.SIGNATURE,
    ) -> OKPKey:
        fmt = as_key_format(key_format)
        if fmt is KeyFormat.PEM:
            return cls.from_native(okp.load_pem(value, private=private), kid, use)
        raw = decode_key_material(value, fmt)
        if private:
            return cls.from_private_bytes(raw, kid, use)
        return cls.from_public_bytes(strip_multicodec(raw, MULTICODEC_ED25519_PUB), kid, use)

    @classmethod
    def generate(cls, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> OKPKey:
        return cls.from_native(okp.generate(), kid, use)

    def public_key(self) -> OKPKey:
        if not self._private:
            return self
        return OKPKey.from_native(self._native.public_key(), self.kid, self.use)

    def _sign(self, data: bytes) -> bytes:
        return okp.sign(self._native, data)

    def _verify(self, data: bytes, signature: bytes) -> None:
        native = self._native.public_key() if self._private else self._native
        okp.verify(native, data, signature)


class SymmetricKey(Key):
    """HS256 key; the shared secret is always present so the key is always private."""

    kty = "oct"
    alg = "HS256"

    __slots__ = ()

    @classmethod
    def _from_model(cls, model: SymmetricJWK) -> SymmetricKey:
        return cls(model, b64url_decode(model.k), private=True)

    @classmethod
    def from_secret(cls, secret: bytes, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> SymmetricKey:
        if not secret:
            raise InvalidKeyFormatError("symmetric secret must not be empty")
        return cls(SymmetricJWK(kid=kid, use=use, k=b64url_encode(secret)), bytes(secret), True)

    @classmethod
    def from_encoded(
        cls,
        value: str | bytes,
        kid: str,
        key_format: KeyFormat | str,
        private: bool = True,
        use: KeyUse = KeyUse.SIGNATURE,
    ) -> SymmetricKey:
        fmt = as_key_format(key_format)
        if fmt is KeyFormat.PEM:
            raise InvalidKeyFormatError("symmetric secrets cannot be supplied as PEM")
        return cls.from_secret(decode_key_material(value, fmt), kid, use)

    @classmethod
    def generate(cls, kid: str, use: KeyUse = KeyUse.SIGNATURE) -> SymmetricKey:
        return cls.from_secret(symmetric.generate(), kid, use)

    def _sign(self, data: bytes) -> bytes:
        return symmetric.sign(self._native, data)

    def _verify(self, data: bytes, signature: bytes) -> None:
        symmetric.verify(self._native, data, signature)


KEY_TYPES: dict[str, type[Key]] = {
    RSAKey.kty: RSAKey,
    ECKey.kty: ECKey,
    OKPKey.kty: OKPKey,
    SymmetricKey.kty: SymmetricKey,
}


def key_from_jwk(data: dict[str, Any]) -> Key:
    """Build the matching key variant from a canonical key object."""
    model = parse_jwk(data)
    return KEY_TYPES[model.kty]._from_model(model)


def load_key(material: KeyMaterial, kty: str, private: bool = False) -> Key:
    """Build a key of family ``kty`` from supplied-encoding input.

    Raises:
        InvalidKeyFormatError: Unknown kty or undecodable material.
    """
    try:
        key_type = KEY_TYPES[kty]
    except KeyError:
        raise InvalidKeyFormatError(f"unsupported kty {kty!r}", details={"kty": kty}) from None
    return key_type.from_encoded(  # type: ignore[attr-defined, no-any-return]
        material.key, material.kid, material.format, private=private, use=material.use
    )
