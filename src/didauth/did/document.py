"""DID document model as consumed from a resolver.

Documents are loosely specified; only the members the extraction logic
reads are modelled and everything else is kept untouched.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# A verification method reference: an inline object or a bare string id.
MethodReference = dict[str, Any] | str

ION_METHOD_PREFIX = "did:ion"


class DidDocument(BaseModel):
    """W3C DID document (the subset used for authentication key extraction)."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    context: Any = Field(default=None, alias="@context")
    id: str
    authentication: list[MethodReference] = Field(default_factory=list)
    verification_method: list[dict[str, Any]] = Field(
        default_factory=list, alias="verificationMethod"
    )
    public_key: list[dict[str, Any]] | None = Field(default=None, alias="publicKey")

    @property
    def is_ion(self) -> bool:
        return self.id.startswith(ION_METHOD_PREFIX)

    def authentication_references(self) -> list[MethodReference]:
        """verificationMethod for did:ion documents, authentication otherwise."""
        if self.is_ion:
            return list(self.verification_method)
        return list(self.authentication)

    def key_collection(self) -> list[dict[str, Any]]:
        """Entries that string references resolve against.

        The legacy ``publicKey`` list when the document has one, else
        ``verificationMethod``.
        """
        if self.public_key is not None:
            return list(self.public_key)
        return list(self.verification_method)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
