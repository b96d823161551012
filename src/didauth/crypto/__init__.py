"""didauth cryptographic layer.

Normalizes keys of the RSA, secp256k1 and Ed25519 families (plus symmetric
secrets) into one canonical key-object representation and performs
algorithm-specific signing and verification:
- Codec layer: PEM, hex, Base58, Base64/Base64URL and multibase decoding
- Algorithm adapters wrapping the ``cryptography`` library per family
- Key abstraction with canonical (JWK) export, sign and verify

Public exports:
    keys: Key variants and constructors
    encoding: Codec layer
    models: Canonical key-object models
"""

from didauth.crypto import encoding, keys, models
from didauth.crypto.encoding import KeyFormat, decode_key_material
from didauth.crypto.keys import (
    ECKey,
    Key,
    OKPKey,
    RSAKey,
    SymmetricKey,
    key_from_jwk,
    load_key,
)
from didauth.crypto.models import KeyMaterial, KeyUse

__all__ = [
    "encoding",
    "keys",
    "models",
    "ECKey",
    "Key",
    "KeyFormat",
    "KeyMaterial",
    "KeyUse",
    "OKPKey",
    "RSAKey",
    "SymmetricKey",
    "decode_key_material",
    "key_from_jwk",
    "load_key",
]
