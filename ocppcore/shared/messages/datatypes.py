"""
Data types shared by all OCPP generations: the canonical timestamp and binary
representations, the vendor specific CustomData bag and the cryptographic
Signature that can be attached to any message.
"""
from datetime import datetime
from typing import Optional

from pydantic import (
    AfterValidator,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
)
from typing_extensions import Annotated, TypeAlias

from ocppcore.shared.messages import BaseModel
from ocppcore.shared.messages.enums import SigningMethod
from ocppcore.shared.validators import (
    decode_base64,
    encode_base64,
    format_timestamp,
    normalize_timestamp,
)

# https://docs.pydantic.dev/latest/concepts/types/#composing-types-via-annotated
# All timestamps are UTC with millisecond precision, e.g.
# 2024-01-01T00:00:00.000Z, in both the JSON and the XML representation
Timestamp: TypeAlias = Annotated[
    datetime,
    AfterValidator(normalize_timestamp),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]

# Raw bytes in memory, base64 encoded text on the wire
Base64Binary: TypeAlias = Annotated[
    bytes,
    BeforeValidator(decode_base64),
    PlainSerializer(encode_base64, return_type=str, when_used="json"),
]


class CustomData(BaseModel):
    """
    An open, vendor namespaced bag of additional fields. Any key besides
    vendorId is kept as is, so that data we do not understand survives a
    decode -> encode round trip.
    """

    model_config = ConfigDict(extra="allow")

    vendor_id: str = Field(..., min_length=1, max_length=255, alias="vendorId")

    @property
    def extra_fields(self) -> dict:
        return dict(self.__pydantic_extra__ or {})


class Signature(BaseModel):
    """
    A cryptographic signature over the canonical form of a message.

    key_id is the X9.62 compressed point of the signer's public key, value the
    DER encoded ECDSA signature. Neither is checked when the signature is
    constructed or parsed; see ocppcore.shared.security.verify.
    """

    key_id: Base64Binary = Field(..., alias="keyId")
    value: Base64Binary = Field(..., alias="value")
    signing_method: SigningMethod = Field(
        SigningMethod.SECP256R1, alias="signingMethod"
    )
    name: Optional[str] = Field(None, max_length=50, alias="name")
    description: Optional[str] = Field(None, max_length=256, alias="description")
    timestamp: Optional[Timestamp] = Field(None, alias="timestamp")
    custom_data: Optional[CustomData] = Field(None, alias="customData")

    def __str__(self):
        return f"{self.signing_method.value}:{self.key_id.hex()[:16]}"
