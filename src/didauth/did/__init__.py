"""DID document handling and verification-key extraction.

- DidDocument: the resolved document model
- DidResolver: boundary protocol for external resolution transports
- KeyExtractor strategies and the default ``uni_extractor``
- Identity: document wrapper caching its authentication keys
"""

from didauth.did.document import DidDocument
from didauth.did.extractors import (
    CombinedExtractor,
    ECVerificationKeyExtractor,
    EdDSAVerificationKeyExtractor,
    JWKVerificationKeyExtractor,
    KeyExtractor,
    RSAVerificationKeyExtractor,
    uni_extractor,
)
from didauth.did.identity import (
    DocumentState,
    ExtractionSkip,
    Identity,
    extract_verification_keys,
)
from didauth.did.resolver import DidResolver

__all__ = [
    "CombinedExtractor",
    "DidDocument",
    "DidResolver",
    "DocumentState",
    "ECVerificationKeyExtractor",
    "EdDSAVerificationKeyExtractor",
    "ExtractionSkip",
    "Identity",
    "JWKVerificationKeyExtractor",
    "KeyExtractor",
    "RSAVerificationKeyExtractor",
    "extract_verification_keys",
    "uni_extractor",
]
