"""
Enumerations and complex data types of the OCPP 2.1 messages implemented in
ocppcore.shared.messages.v2_1.body.

In contrast to OCPP 1.6, every complex data type of OCPP 2.1 may carry its
own vendor specific customData object.
"""
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from ocppcore.shared.messages import BaseModel
from ocppcore.shared.messages.datatypes import CustomData, Timestamp
from ocppcore.shared.validators import strip_and_check_not_empty


class IdTokenType(str, Enum):
    CENTRAL = "Central"
    DIRECT_LOGIN = "DirectLogin"
    EMAID = "eMAID"
    EVCCID = "EVCCID"
    ISO14443 = "ISO14443"
    ISO15693 = "ISO15693"
    KEY_CODE = "KeyCode"
    LOCAL = "Local"
    MAC_ADDRESS = "MacAddress"
    NEMA = "NEMA"
    NO_AUTHORIZATION = "NoAuthorization"
    VIN = "VIN"


class AuthorizationStatus(str, Enum):
    ACCEPTED = "Accepted"
    BLOCKED = "Blocked"
    CONCURRENT_TX = "ConcurrentTx"
    EXPIRED = "Expired"
    INVALID = "Invalid"
    NO_CREDIT = "NoCredit"
    NOT_ALLOWED_TYPE_EVSE = "NotAllowedTypeEVSE"
    NOT_AT_THIS_LOCATION = "NotAtThisLocation"
    NOT_AT_THIS_TIME = "NotAtThisTime"
    UNKNOWN = "Unknown"


class ResetType(str, Enum):
    IMMEDIATE = "Immediate"
    ON_IDLE = "OnIdle"
    IMMEDIATE_AND_RESUME = "ImmediateAndResume"


class ResetStatus(str, Enum):
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    SCHEDULED = "Scheduled"


class IdToken(BaseModel):
    id_token: str = Field(..., max_length=255, alias="idToken")
    token_type: IdTokenType = Field(..., alias="type")
    custom_data: Optional[CustomData] = Field(None, alias="customData")

    @field_validator("id_token")
    @classmethod
    def id_token_not_empty(cls, value):
        # pylint: disable=no-self-argument
        return strip_and_check_not_empty("idToken", value)


class IdTokenInfo(BaseModel):
    status: AuthorizationStatus = Field(..., alias="status")
    cache_expiry_date_time: Optional[Timestamp] = Field(
        None, alias="cacheExpiryDateTime"
    )
    # Lower values mean higher priority, 0 is the default
    charging_priority: Optional[int] = Field(
        None, ge=-9, le=9, alias="chargingPriority"
    )
    language1: Optional[str] = Field(None, max_length=8, alias="language1")
    group_id_token: Optional[IdToken] = Field(None, alias="groupIdToken")
    custom_data: Optional[CustomData] = Field(None, alias="customData")


class StatusInfo(BaseModel):
    """Additional information on the status of a response"""

    reason_code: str = Field(..., min_length=1, max_length=20, alias="reasonCode")
    additional_info: Optional[str] = Field(
        None, max_length=1024, alias="additionalInfo"
    )
    custom_data: Optional[CustomData] = Field(None, alias="customData")
