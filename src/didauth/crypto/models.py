"""Pydantic models for canonical key objects (JWK) and supplied key material."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError, field_validator

from didauth.crypto.encoding import KeyFormat, as_key_format, b64url_decode
from didauth.errors import InvalidKeyFormatError

SECP256K1_CURVE = "secp256k1"
ED25519_CURVE = "Ed25519"

RSA_PRIVATE_MEMBERS = ("p", "q", "d", "dp", "dq", "qi")


class KeyUse(str, Enum):
    """Advisory intended use of a key; not enforced by sign/verify."""

    SIGNATURE = "sig"
    ENCRYPTION = "enc"


def _check_b64url(value: str) -> str:
    try:
        raw = b64url_decode(value)
    except InvalidKeyFormatError as e:
        raise ValueError(e.message) from e
    if not raw:
        raise ValueError("empty base64url value")
    return value


B64UrlInt = Annotated[str, AfterValidator(_check_b64url)]


class _JWKBase(BaseModel):
    """Members shared by every canonical key object.

    Unknown JWK members (``key_ops``, ``x5c``...) are dropped on import.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    kid: str
    use: KeyUse = KeyUse.SIGNATURE

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class RSAPublicJWK(_JWKBase):
    kty: Literal["RSA"] = "RSA"
    alg: Literal["RS256"] = "RS256"
    e: B64UrlInt
    n: B64UrlInt


class RSAPrivateJWK(RSAPublicJWK):
    p: B64UrlInt
    q: B64UrlInt
    d: B64UrlInt
    dp: B64UrlInt
    dq: B64UrlInt
    qi: B64UrlInt


class ECPublicJWK(_JWKBase):
    kty: Literal["EC"] = "EC"
    alg: Literal["ES256K"] = "ES256K"
    crv: Literal["secp256k1"] = SECP256K1_CURVE
    x: B64UrlInt
    y: B64UrlInt


class ECPrivateJWK(ECPublicJWK):
    d: B64UrlInt


class OKPPublicJWK(_JWKBase):
    kty: Literal["OKP"] = "OKP"
    alg: Literal["EdDSA"] = "EdDSA"
    crv: Literal["Ed25519"] = ED25519_CURVE
    x: B64UrlInt


class OKPPrivateJWK(OKPPublicJWK):
    d: B64UrlInt


class SymmetricJWK(_JWKBase):
    kty: Literal["oct"] = "oct"
    alg: Literal["HS256"] = "HS256"
    k: B64UrlInt


JWKModel = (
    RSAPublicJWK
    | RSAPrivateJWK
    | ECPublicJWK
    | ECPrivateJWK
    | OKPPublicJWK
    | OKPPrivateJWK
    | SymmetricJWK
)


class KeyMaterial(BaseModel):
    """Supplied-encoding key input: encoded text plus identifying metadata."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Encoded key text.")
    kid: str
    use: KeyUse = KeyUse.SIGNATURE
    format: KeyFormat = Field(..., description="Encoding of ``key``.")

    @field_validator("format", mode="before")
    @classmethod
    def _parse_format(cls, value: Any) -> KeyFormat:
        # PEM / HEX / BASE58 / BASE64 as well as the DID property names.
        try:
            return as_key_format(value)
        except InvalidKeyFormatError as e:
            raise ValueError(e.message) from e


def parse_jwk(data: dict[str, Any]) -> JWKModel:
    """Validate a canonical key object and pick its model.

    The public or private model is chosen from the presence of private
    members; a partial RSA private member set is rejected.

    Raises:
        InvalidKeyFormatError: Unknown kty or invalid/missing members.
    """
    kty = data.get("kty")
    model: type[JWKModel]
    if kty == "RSA":
        present = [m for m in RSA_PRIVATE_MEMBERS if data.get(m) is not None]
        if present and len(present) != len(RSA_PRIVATE_MEMBERS):
            missing = sorted(set(RSA_PRIVATE_MEMBERS) - set(present))
            raise InvalidKeyFormatError(
                "incomplete RSA private key", details={"missing": missing}
            )
        model = RSAPrivateJWK if present else RSAPublicJWK
    elif kty == "EC":
        model = ECPrivateJWK if data.get("d") is not None else ECPublicJWK
    elif kty == "OKP":
        model = OKPPrivateJWK if data.get("d") is not None else OKPPublicJWK
    elif kty == "oct":
        model = SymmetricJWK
    else:
        raise InvalidKeyFormatError(f"unsupported kty {kty!r}", details={"kty": kty})
    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
        raise InvalidKeyFormatError(
            f"invalid {kty} key object", details={"errors": errors}
        ) from e
