"""Pytest fixtures for didauth tests.

Key generation (RSA in particular) is slow, so key fixtures are session
scoped; keys are immutable, which makes sharing them safe.

Fixtures (use with pytest):
    rsa_key: Private RS256 key.
    ec_key: Private ES256K key.
    okp_key: Private EdDSA key.
    symmetric_key: HS256 key.
    did_document: Document publishing all three asymmetric keys for authentication.
    mock_resolver: MockResolver serving did_document.
    identity: Identity wired to mock_resolver.
"""

from typing import Any

import pytest

from didauth.crypto.keys import ECKey, OKPKey, RSAKey, SymmetricKey
from didauth.did.identity import Identity
from didauth.testing.mocks import MockResolver, build_document, verification_method

TEST_DID = "did:example:123456789abcdefghi"


@pytest.fixture(scope="session")
def rsa_key() -> RSAKey:
    return RSAKey.generate(f"{TEST_DID}#keys-rsa")


@pytest.fixture(scope="session")
def ec_key() -> ECKey:
    return ECKey.generate(f"{TEST_DID}#keys-ec")


@pytest.fixture(scope="session")
def okp_key() -> OKPKey:
    return OKPKey.generate(f"{TEST_DID}#keys-okp")


@pytest.fixture
def symmetric_key() -> SymmetricKey:
    return SymmetricKey.generate(f"{TEST_DID}#keys-hmac")


@pytest.fixture
def did_document(rsa_key: RSAKey, ec_key: ECKey, okp_key: OKPKey) -> dict[str, Any]:
    """Document with one inline method, one publicKey reference and one bare reference.

    Returns:
        Dict with authentication resolving to [rsa_key, ec_key, okp_key] in that order.
    """
    return build_document(
        TEST_DID,
        authentication=[
            verification_method(rsa_key, controller=TEST_DID),
            {"type": "Secp256k1SignatureAuthentication2018", "publicKey": "#keys-ec"},
            okp_key.kid,
        ],
        public_key=[
            verification_method(ec_key, controller=TEST_DID),
            verification_method(okp_key, controller=TEST_DID),
        ],
    )


@pytest.fixture
def mock_resolver(did_document: dict[str, Any]) -> MockResolver:
    return MockResolver({TEST_DID: did_document})


@pytest.fixture
def identity(mock_resolver: MockResolver) -> Identity:
    """Unresolved Identity backed by mock_resolver."""
    return Identity(mock_resolver)
