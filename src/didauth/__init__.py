"""didauth: cryptographic trust layer for DID authentication.

Normalizes RSA, secp256k1 and Ed25519 keys into canonical key objects,
signs and verifies with them, and extracts the keys a DID may authenticate
with from its resolved document.
"""

from didauth.crypto import (
    ECKey,
    Key,
    KeyFormat,
    KeyMaterial,
    KeyUse,
    OKPKey,
    RSAKey,
    SymmetricKey,
    key_from_jwk,
    load_key,
)
from didauth.did import DidDocument, DidResolver, Identity, KeyExtractor, uni_extractor
from didauth.errors import (
    DIDAuthError,
    DocumentResolutionError,
    InvalidDocumentError,
    InvalidKeyFormatError,
    InvalidSignatureError,
    KeyExtractionError,
    NoPrivateKeyError,
    UnresolvedDocumentError,
)

__version__ = "0.1.0"

__all__ = [
    "DIDAuthError",
    "DidDocument",
    "DidResolver",
    "DocumentResolutionError",
    "ECKey",
    "Identity",
    "InvalidDocumentError",
    "InvalidKeyFormatError",
    "InvalidSignatureError",
    "Key",
    "KeyExtractionError",
    "KeyExtractor",
    "KeyFormat",
    "KeyMaterial",
    "KeyUse",
    "NoPrivateKeyError",
    "OKPKey",
    "RSAKey",
    "SymmetricKey",
    "UnresolvedDocumentError",
    "key_from_jwk",
    "load_key",
    "uni_extractor",
]
