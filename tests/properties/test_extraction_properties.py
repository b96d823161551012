"""Property-based tests for authentication key extraction.

With M usable and N-M corrupted references in any order, extraction yields
exactly the M keys, in reference order, and records the N-M skips.
"""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from didauth.crypto.keys import ECKey, Key, OKPKey, RSAKey
from didauth.did.identity import Identity
from didauth.testing import build_document, unsupported_method, verification_method
from didauth.testing.fixtures import TEST_DID


@pytest.fixture(scope="module")
def published(rsa_key: RSAKey, ec_key: ECKey, okp_key: OKPKey) -> list[Key]:
    return [rsa_key, ec_key, okp_key]


def _broken(index: int, kind: int) -> dict[str, Any]:
    method_id = f"{TEST_DID}#broken-{index}"
    if kind == 0:
        return unsupported_method(method_id)
    if kind == 1:
        return {"id": method_id, "type": "Ed25519VerificationKey2018", "publicKeyHex": "zz"}
    return {"id": method_id, "type": "EcdsaSecp256k1VerificationKey2019"}


@given(
    layout=st.lists(
        st.one_of(
            st.tuples(st.just("key"), st.integers(min_value=0, max_value=2)),
            st.tuples(st.just("broken"), st.integers(min_value=0, max_value=2)),
        ),
        min_size=1,
        max_size=12,
    )
)
@settings(max_examples=60, deadline=None)
def test_extraction_keeps_exactly_the_valid_keys(
    published: list[Key], layout: list[tuple[str, int]]
) -> None:
    authentication: list[dict[str, Any]] = []
    expected: list[Key] = []
    for index, (kind, choice) in enumerate(layout):
        if kind == "key":
            authentication.append(verification_method(published[choice]))
            expected.append(published[choice].public_key())  # type: ignore[attr-defined]
        else:
            authentication.append(_broken(index, choice))
    identity = Identity()
    identity.set_document(build_document(TEST_DID, authentication), TEST_DID)

    keys = identity.extract_authentication_keys()

    assert keys == expected
    assert len(identity.skipped) == len(layout) - len(expected)
    assert identity.extract_authentication_keys() == keys
