"""Interoperability with an independent JOSE implementation (joserfc).

Canonical key objects exported here must import into joserfc, and RS256 /
EdDSA / HS256 signatures must verify across both implementations.
"""

from typing import Any

import pytest
from joserfc import jws
from joserfc.jwk import OctKey, OKPKey as JoseOKPKey, RSAKey as JoseRSAKey

from didauth.crypto.encoding import b64url_decode, b64url_encode
from didauth.crypto.keys import Key, OKPKey, RSAKey, SymmetricKey

JOSE_KEY_TYPES = {"RSA": JoseRSAKey, "OKP": JoseOKPKey, "oct": OctKey}


def _jose_key(key: Key) -> Any:
    return JOSE_KEY_TYPES[key.kty].import_key(key.to_jwk())


def _our_token(key: Key, payload: bytes) -> str:
    header = b64url_encode(b'{"alg":"%s"}' % key.alg.encode())
    signing_input = f"{header}.{b64url_encode(payload)}"
    return f"{signing_input}.{b64url_encode(key.sign(signing_input))}"


@pytest.fixture
def keys(rsa_key: RSAKey, okp_key: OKPKey, symmetric_key: SymmetricKey) -> list[Key]:
    return [rsa_key, okp_key, symmetric_key]


def test_public_export_imports_into_joserfc(rsa_key: RSAKey, okp_key: OKPKey) -> None:
    for key in (rsa_key.public_key(), okp_key.public_key()):
        jose_key = _jose_key(key)

        assert jose_key.thumbprint() == key.thumbprint()


def test_our_signatures_verify_in_joserfc(keys: list[Key]) -> None:
    for key in keys:
        token = _our_token(key, b"interop payload")

        obj = jws.deserialize_compact(token, _jose_key(key), algorithms=[key.alg])

        assert obj.payload == b"interop payload"


def test_joserfc_signatures_verify_here(keys: list[Key]) -> None:
    for key in keys:
        token = jws.serialize_compact(
            {"alg": key.alg}, b"interop payload", _jose_key(key), algorithms=[key.alg]
        )
        header, payload, signature = token.split(".")

        verifier = key.public_key() if isinstance(key, (RSAKey, OKPKey)) else key
        assert verifier.verify(f"{header}.{payload}", b64url_decode(signature))
