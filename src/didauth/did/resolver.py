"""Resolver boundary: the external collaborator that turns a DID into a document.

Resolution transports (universal resolver, ledgers, did:web fetches) live
outside this package; they only need to satisfy ``DidResolver``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DidResolver(Protocol):
    """Anything that can asynchronously resolve a DID."""

    async def resolve(self, did: str) -> Mapping[str, Any]:
        """Return the DID document, or a DID resolution result carrying ``didDocument``."""
        ...


def unwrap_resolution_result(result: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """Extract the document from a DID resolution result.

    Results shaped ``{"didDocument": {...}, "didResolutionMetadata": {...}}``
    are unwrapped; a bare document is returned unchanged.
    """
    if "didDocument" in result:
        document = result["didDocument"]
        return document if isinstance(document, Mapping) else None
    return result
