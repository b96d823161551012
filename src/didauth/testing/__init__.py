"""didauth testing utilities.

Modules:
    fixtures: Pytest fixtures (keys, did_document, mock_resolver, identity).
    mocks: MockResolver with pre-set documents and request recording, plus
           DID document builders.
    assertions: Custom assertions (assert_public_only, assert_signs_and_verifies).

Example:
    >>> from didauth.testing import MockResolver, build_document
"""

from didauth.testing.assertions import assert_public_only, assert_signs_and_verifies
from didauth.testing.mocks import (
    MockResolver,
    build_document,
    unsupported_method,
    verification_method,
)

__all__ = [
    "MockResolver",
    "assert_public_only",
    "assert_signs_and_verifies",
    "build_document",
    "unsupported_method",
    "verification_method",
]
