"""Mock resolver and DID document builders for didauth tests.

MockResolver satisfies the DidResolver protocol without any transport:
documents are pre-set per DID, calls are recorded for assertions, and a
failure can be configured for error-path tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import base58

from didauth.crypto.encoding import b64url_decode
from didauth.crypto.keys import ECKey, Key, OKPKey, RSAKey

# Verification method type used when publishing each key family.
METHOD_TYPES: dict[str, str] = {
    "RSA": "RsaVerificationKey2018",
    "EC": "EcdsaSecp256k1VerificationKey2019",
    "OKP": "Ed25519VerificationKey2018",
}

DEFAULT_CONTEXT = "https://w3id.org/did/v1"


class MockResolver:
    """Configurable in-memory resolver.

    Attributes:
        requests: DIDs passed to resolve(), in call order.
    """

    def __init__(self, documents: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._documents: dict[str, Mapping[str, Any]] = dict(documents or {})
        self._failure: Exception | None = None
        self._wrap_result = False
        self.requests: list[str] = []

    def add_document(self, document: Mapping[str, Any], did: str | None = None) -> None:
        self._documents[did or document["id"]] = document

    def set_failure(self, exc: Exception | None) -> None:
        """Raise ``exc`` from every resolve() call (None clears it)."""
        self._failure = exc

    def wrap_results(self, enabled: bool = True) -> None:
        """Return DID resolution results (``{"didDocument": ...}``) instead of bare documents."""
        self._wrap_result = enabled

    async def resolve(self, did: str) -> Mapping[str, Any]:
        self.requests.append(did)
        if self._failure is not None:
            raise self._failure
        try:
            document = self._documents[did]
        except KeyError:
            raise LookupError(f"notFound: {did}") from None
        if self._wrap_result:
            return {"didDocument": document, "didResolutionMetadata": {}}
        return document


def verification_method(
    key: Key, method_id: str | None = None, controller: str = ""
) -> dict[str, Any]:
    """Publish the public part of ``key`` as a verification method.

    RSA keys are published as PEM, secp256k1 keys as an uncompressed hex
    point and Ed25519 keys as Base58.
    """
    method: dict[str, Any] = {
        "id": method_id or key.kid,
        "type": METHOD_TYPES.get(key.kty, ""),
        "controller": controller,
    }
    jwk = key.to_jwk()
    if isinstance(key, RSAKey):
        method["publicKeyPem"] = key.public_key().to_pem()
    elif isinstance(key, ECKey):
        point = b"\x04" + b64url_decode(jwk["x"]) + b64url_decode(jwk["y"])
        method["publicKeyHex"] = point.hex()
    elif isinstance(key, OKPKey):
        method["publicKeyBase58"] = base58.b58encode(b64url_decode(jwk["x"])).decode("ascii")
    else:
        raise TypeError(f"cannot publish {type(key).__name__} as a verification method")
    return method


def build_document(
    did: str,
    authentication: Iterable[dict[str, Any] | str],
    public_key: Iterable[dict[str, Any]] | None = None,
    verification_method: Iterable[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Assemble a DID document dict."""
    document: dict[str, Any] = {
        "@context": DEFAULT_CONTEXT,
        "id": did,
        "authentication": list(authentication),
    }
    if public_key is not None:
        document["publicKey"] = list(public_key)
    if verification_method is not None:
        document["verificationMethod"] = list(verification_method)
    return document


def unsupported_method(method_id: str) -> dict[str, Any]:
    """A well-formed method of a type no built-in extractor handles."""
    return {
        "id": method_id,
        "type": "UnknownVerificationKey2099",
        "publicKeyHex": "01" * 32,
    }
