"""Shared pytest fixtures for didauth tests.

Key, document and resolver fixtures live in didauth.testing.fixtures so
downstream projects can reuse them; this module only adds test-suite
helpers.
"""

from __future__ import annotations

import pytest

# Load didauth.testing fixtures (rsa_key, ec_key, okp_key, did_document, mock_resolver, identity)
pytest_plugins = ["didauth.testing.fixtures"]

MESSAGE = b"The quick brown fox jumps over the lazy dog"


@pytest.fixture
def debug_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable DIDAUTH_DEBUG for the test."""
    monkeypatch.setenv("DIDAUTH_DEBUG", "true")
