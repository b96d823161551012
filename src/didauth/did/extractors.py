"""Verification-key extractors: build a Key from a DID verification method.

An extractor is a strategy injected into ``Identity.extract_authentication_keys``.
Each concrete extractor supports a set of verification method ``type``
names; ``CombinedExtractor`` dispatches on ``type`` to the first extractor
that supports it. Callers may add their own extractors for non-standard
method types.

Example:
    >>> method = {
    ...     "id": "did:example:123#key-1",
    ...     "type": "Ed25519VerificationKey2018",
    ...     "publicKeyBase58": "H3C2AVvLMv6gmMNam3uVAjZpfkcJCwDwnZn6z3wXmqPV",
    ... }
    >>> uni_extractor.extract(method).kty
    'OKP'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

from didauth.crypto.encoding import KeyFormat
from didauth.crypto.keys import ECKey, Key, OKPKey, RSAKey, key_from_jwk
from didauth.errors import DIDAuthError, KeyExtractionError

JWK_PROPERTY = "publicKeyJwk"
_PRIVATE_JWK_MEMBERS = frozenset({"d", "p", "q", "dp", "dq", "qi", "k"})

# Encoded-material properties, in lookup order.
_MATERIAL_FORMATS = (
    KeyFormat.PEM,
    KeyFormat.HEX,
    KeyFormat.BASE58,
    KeyFormat.BASE64,
    KeyFormat.MULTIBASE,
)


class KeyExtractor(ABC):
    """Strategy turning a verification method description into a Key."""

    names: tuple[str, ...] = ()

    def supports(self, method_type: str) -> bool:
        return method_type in self.names

    @abstractmethod
    def extract(self, method: Mapping[str, Any]) -> Key:
        """Build a public key from ``method``.

        Raises:
            KeyExtractionError: Unsupported type, missing or invalid key material.
        """


def _method_id(method: Mapping[str, Any]) -> str | None:
    value = method.get("id")
    return value if isinstance(value, str) else None


def _find_material(method: Mapping[str, Any]) -> tuple[KeyFormat | None, Any]:
    """Return ``(format, value)``; format is None for an embedded JWK."""
    if method.get(JWK_PROPERTY) is not None:
        return None, method[JWK_PROPERTY]
    for fmt in _MATERIAL_FORMATS:
        value = method.get(fmt.value)
        if value is None:
            continue
        if not isinstance(value, str) or not value:
            raise KeyExtractionError(_method_id(method), f"{fmt.value} must be a non-empty string")
        return fmt, value
    raise KeyExtractionError(_method_id(method), "no supported key material property")


class _TypedExtractor(KeyExtractor):
    """Shared flow: type check, material lookup, failures mapped to KeyExtractionError."""

    kty: str = ""

    def extract(self, method: Mapping[str, Any]) -> Key:
        method_id = _method_id(method)
        method_type = method.get("type")
        if not isinstance(method_type, str) or not self.supports(method_type):
            raise KeyExtractionError(
                method_id, f"unsupported verification method type {method_type!r}"
            )
        if method_id is None:
            raise KeyExtractionError(None, "verification method has no id")
        fmt, value = _find_material(method)
        try:
            if fmt is None:
                return self._from_jwk(method_id, value)
            return self._from_encoded(method_id, fmt, value)
        except KeyExtractionError:
            raise
        except DIDAuthError as e:
            raise KeyExtractionError(method_id, e.message, details=e.details) from e

    def _from_jwk(self, method_id: str, jwk: Any) -> Key:
        if not isinstance(jwk, Mapping):
            raise KeyExtractionError(method_id, "publicKeyJwk is not an object")
        if self.kty and jwk.get("kty") != self.kty:
            raise KeyExtractionError(
                method_id, f"publicKeyJwk kty {jwk.get('kty')!r} does not match {self.kty!r}"
            )
        # Private members of an embedded JWK are never imported.
        data = {name: value for name, value in jwk.items() if name not in _PRIVATE_JWK_MEMBERS}
        data.setdefault("kid", method_id)
        return key_from_jwk(data)

    @abstractmethod
    def _from_encoded(self, method_id: str, fmt: KeyFormat, value: str) -> Key: ...


class RSAVerificationKeyExtractor(_TypedExtractor):
    """RSA keys, published as PEM or JWK."""

    names = ("RsaVerificationKey2018",)
    kty = "RSA"

    def _from_encoded(self, method_id: str, fmt: KeyFormat, value: str) -> Key:
        if fmt is not KeyFormat.PEM:
            raise KeyExtractionError(
                method_id, f"RSA keys must be published as PEM, got {fmt.value}"
            )
        return RSAKey.from_public_pem(value, method_id)


class ECVerificationKeyExtractor(_TypedExtractor):
    """secp256k1 keys in any supported encoding."""

    names = (
        "EcdsaSecp256k1VerificationKey2019",
        "Secp256k1VerificationKey2018",
        "Secp256k1SignatureVerificationKey2018",
        "EcdsaPublicKeySecp256k1",
    )
    kty = "EC"

    def _from_encoded(self, method_id: str, fmt: KeyFormat, value: str) -> Key:
        return ECKey.from_encoded(value, method_id, fmt)


class EdDSAVerificationKeyExtractor(_TypedExtractor):
    """Ed25519 keys in any supported encoding."""

    names = (
        "Ed25519VerificationKey2018",
        "Ed25519VerificationKey2020",
        "ED25519SignatureVerification",
    )
    kty = "OKP"

    def _from_encoded(self, method_id: str, fmt: KeyFormat, value: str) -> Key:
        return OKPKey.from_encoded(value, method_id, fmt)


class JWKVerificationKeyExtractor(_TypedExtractor):
    """JsonWebKey2020 style methods; the family comes from the JWK ``kty``."""

    names = ("JsonWebKey2020", "JwsVerificationKey2020")

    def _from_encoded(self, method_id: str, fmt: KeyFormat, value: str) -> Key:
        raise KeyExtractionError(
            method_id, f"{fmt.value} is not valid for JWK verification methods"
        )


class CombinedExtractor(KeyExtractor):
    """Dispatches on the method ``type`` to the first supporting extractor."""

    def __init__(self, extractors: Iterable[KeyExtractor]) -> None:
        self._extractors = list(extractors)
        self.names = tuple(name for extractor in self._extractors for name in extractor.names)

    def supports(self, method_type: str) -> bool:
        return any(extractor.supports(method_type) for extractor in self._extractors)

    def extract(self, method: Mapping[str, Any]) -> Key:
        method_type = method.get("type")
        if isinstance(method_type, str):
            for extractor in self._extractors:
                if extractor.supports(method_type):
                    return extractor.extract(method)
        raise KeyExtractionError(
            _method_id(method), f"unsupported verification method type {method_type!r}"
        )


uni_extractor = CombinedExtractor(
    [
        RSAVerificationKeyExtractor(),
        ECVerificationKeyExtractor(),
        EdDSAVerificationKeyExtractor(),
        JWKVerificationKeyExtractor(),
    ]
)
