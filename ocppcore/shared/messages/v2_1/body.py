"""
The payloads of the OCPP 2.1 operations supported by ocppcore. OCPP 2.1 is
only defined for JSON, none of these operations has an XML binding.
"""
from typing import Optional

from pydantic import Field

from ocppcore.shared.messages import BaseModel
from ocppcore.shared.messages.datatypes import Timestamp
from ocppcore.shared.messages.v2_1.datatypes import (
    IdToken,
    IdTokenInfo,
    ResetStatus,
    ResetType,
    StatusInfo,
)


class AuthorizeReq(BaseModel):
    id_token: IdToken = Field(..., alias="idToken")


class AuthorizeRes(BaseModel):
    id_token_info: IdTokenInfo = Field(..., alias="idTokenInfo")


class HeartbeatReq(BaseModel):
    pass


class HeartbeatRes(BaseModel):
    current_time: Timestamp = Field(..., alias="currentTime")


class ResetReq(BaseModel):
    reset_type: ResetType = Field(..., alias="type")
    # Reset a single EVSE instead of the whole charging station
    evse_id: Optional[int] = Field(None, ge=0, alias="evseId")


class ResetRes(BaseModel):
    status: ResetStatus = Field(..., alias="status")
    status_info: Optional[StatusInfo] = Field(None, alias="statusInfo")
