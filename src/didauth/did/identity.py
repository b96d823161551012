"""Decentralized identity wrapper: resolved DID document plus its cached authentication keys.

State machine:

    UNRESOLVED --resolve / set_document--> RESOLVED --extract--> EXTRACTED
    RESOLVED | EXTRACTED --resolve / set_document--> RESOLVED (cache cleared)
    EXTRACTED --extract--> EXTRACTED (cached keys returned)

Replacing the document and extracting (with the cache write) are
serialized on a lock owned by the wrapper, so one Identity may be shared
between threads.

Example:
    >>> identity = Identity()
    >>> identity.set_document(doc, "did:example:123")
    >>> keys = identity.extract_authentication_keys()
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Any

from pydantic import ValidationError

from didauth.crypto.keys import Key
from didauth.did.document import DidDocument
from didauth.did.extractors import KeyExtractor, uni_extractor
from didauth.did.resolver import DidResolver, unwrap_resolution_result
from didauth.errors import (
    DIDAuthError,
    DocumentResolutionError,
    InvalidDocumentError,
    UnresolvedDocumentError,
)
from didauth.observability import get_logger, sanitize_for_logging

logger = get_logger(__name__)


class DocumentState(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    EXTRACTED = "extracted"


@dataclass(frozen=True)
class ExtractionSkip:
    """A reference that contributed no key, and why."""

    reference: str | None
    reason: str


def extract_verification_keys(
    document: DidDocument, extractor: KeyExtractor
) -> tuple[list[Key], list[ExtractionSkip]]:
    """Walk the document's authentication references and build their keys.

    Every reference is tested against all three shapes in order, so one
    reference may contribute several keys:

    - inline method (``id`` and ``type``): passed to the extractor as is;
    - indirect reference (``publicKey``: a string or a list): each name is
      matched against the key collection by exact id or by ``document.id + name``;
    - bare string: matched against the key collection by exact id.

    Keys are appended in reference order and never deduplicated. A
    contribution the extractor rejects is skipped and recorded.

    Returns:
        ``(keys, skipped)``.
    """
    keys: list[Key] = []
    skipped: list[ExtractionSkip] = []
    collection = document.key_collection()

    def contribute(method: Mapping[str, Any], reference: str | None) -> None:
        try:
            keys.append(extractor.extract(method))
        except Exception as e:  # noqa: BLE001
            reason = e.message if isinstance(e, DIDAuthError) else f"{type(e).__name__}: {e}"
            skipped.append(ExtractionSkip(reference=reference, reason=reason))
            logger.debug(
                "didauth.identity.extract.skipped",
                did=document.id,
                reference=reference,
                reason=reason,
            )

    def lookup(name: str, relative: bool) -> list[dict[str, Any]]:
        matches = [
            entry
            for entry in collection
            if entry.get("id") == name or (relative and entry.get("id") == document.id + name)
        ]
        if not matches:
            skipped.append(ExtractionSkip(reference=name, reason="no matching key in document"))
        return matches

    for method in document.authentication_references():
        if isinstance(method, Mapping):
            logger.debug(
                "didauth.identity.extract.method",
                did=document.id,
                method=sanitize_for_logging(dict(method)),
            )
            if method.get("id") and method.get("type"):
                method_id = method["id"]
                contribute(method, method_id if isinstance(method_id, str) else None)
            refs = method.get("publicKey")
            names = [refs] if isinstance(refs, str) else refs if isinstance(refs, list) else []
            for name in names:
                if not isinstance(name, str):
                    skipped.append(
                        ExtractionSkip(reference=None, reason="publicKey reference is not a string")
                    )
                    continue
                for entry in lookup(name, relative=True):
                    contribute(entry, name)
        elif isinstance(method, str):
            logger.debug("didauth.identity.extract.reference", did=document.id, reference=method)
            for entry in lookup(method, relative=False):
                contribute(entry, method)

    return keys, skipped


class Identity:
    """A DID whose document has been resolved (or set) and whose keys are extracted lazily.

    Attributes:
        state: Current DocumentState.
        skipped: Contributions swallowed during the last extraction pass.
    """

    def __init__(self, resolver: DidResolver | None = None) -> None:
        """Initialize an unresolved identity.

        Args:
            resolver: Collaborator used by ``resolve``; not needed with ``set_document``.
        """
        self._resolver = resolver
        self._document: DidDocument | None = None
        self._key_set: list[Key] = []
        self._skipped: list[ExtractionSkip] = []
        self._state = DocumentState.UNRESOLVED
        self._lock = Lock()

    @property
    def state(self) -> DocumentState:
        return self._state

    @property
    def skipped(self) -> list[ExtractionSkip]:
        with self._lock:
            return list(self._skipped)

    def is_resolved(self) -> bool:
        return self._state is not DocumentState.UNRESOLVED

    def get_document(self) -> DidDocument | None:
        return self._document

    async def resolve(self, did: str) -> str:
        """Resolve ``did`` through the configured resolver and set its document.

        Returns:
            The id of the resolved document.

        Raises:
            DocumentResolutionError: No resolver, or the resolver failed.
            InvalidDocumentError: The result holds no well-formed document for ``did``.
        """
        if self._resolver is None:
            raise DocumentResolutionError(did, "no resolver configured")
        try:
            result = await self._resolver.resolve(did)
        except Exception as e:  # noqa: BLE001
            logger.warning("didauth.identity.resolve.failed", did=did, error=str(e))
            raise DocumentResolutionError(did, str(e) or type(e).__name__) from e
        document = unwrap_resolution_result(result) if isinstance(result, Mapping) else None
        if document is None:
            raise InvalidDocumentError(did, "resolver returned no DID document")
        self.set_document(document, did)
        return did

    def set_document(self, document: Mapping[str, Any] | DidDocument, did: str) -> None:
        """Set a pre-resolved document, discarding any cached key set.

        Raises:
            InvalidDocumentError: ``document.id != did``, empty ``authentication``,
                or a document that is not an object. State is left unchanged.
        """
        parsed = _validate_document(document, did)
        with self._lock:
            self._document = parsed
            self._key_set = []
            self._skipped = []
            self._state = DocumentState.RESOLVED
        logger.info("didauth.identity.document_set", did=did)

    def extract_authentication_keys(self, extractor: KeyExtractor | None = None) -> list[Key]:
        """Return the keys usable for authentication, extracting them on first call.

        The result is cached until the document is replaced; later calls
        return the cached keys whatever ``extractor`` they pass.

        Args:
            extractor: Strategy building keys from methods; defaults to ``uni_extractor``.

        Raises:
            UnresolvedDocumentError: No document has been resolved or set.
        """
        with self._lock:
            if self._document is None:
                raise UnresolvedDocumentError()
            if self._state is DocumentState.EXTRACTED:
                return list(self._key_set)
            keys, skipped = extract_verification_keys(self._document, extractor or uni_extractor)
            self._key_set = keys
            self._skipped = skipped
            self._state = DocumentState.EXTRACTED
            logger.info(
                "didauth.identity.extracted",
                did=self._document.id,
                key_count=len(keys),
                skipped_count=len(skipped),
            )
            return list(keys)


def _validate_document(document: Mapping[str, Any] | DidDocument, did: str) -> DidDocument:
    if isinstance(document, DidDocument):
        parsed = document
    else:
        try:
            parsed = DidDocument.model_validate(
                dict(document) if isinstance(document, Mapping) else document
            )
        except ValidationError as e:
            errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
            raise InvalidDocumentError(
                did, "malformed DID document", details={"errors": errors}
            ) from e
    if parsed.id != did:
        raise InvalidDocumentError(
            did, "document id does not match DID", details={"document_id": parsed.id}
        )
    if not parsed.authentication:
        raise InvalidDocumentError(did, "document has no authentication methods")
    return parsed
