"""
The payloads of the OCPP 1.6 operations supported by ocppcore. Requests are
suffixed with 'Req', responses with 'Res'.

Messages initiated by the charge point and handled by the central system
belong to the CS namespace of the SOAP binding, messages initiated by the
central system to the CP namespace. Which is which is recorded per operation
in ocppcore.shared.messages.operations.
"""
from typing import List, Optional

from pydantic import Field, field_validator

from ocppcore.shared.messages import BaseModel
from ocppcore.shared.messages.datatypes import Timestamp
from ocppcore.shared.messages.enums import UINT_32_MAX
from ocppcore.shared.messages.v1_6.datatypes import (
    ID_TOKEN_MAX_LENGTH,
    AuthorizationData,
    ConfigurationStatus,
    DataTransferStatus,
    IdTagInfo,
    RegistrationStatus,
    ResetStatus,
    ResetType,
    UpdateStatus,
    UpdateType,
)
from ocppcore.shared.validators import strip_and_check_not_empty


class AuthorizeReq(BaseModel):
    """See section 6.1 in OCPP 1.6"""

    id_tag: str = Field(..., max_length=ID_TOKEN_MAX_LENGTH, alias="idTag")

    @field_validator("id_tag")
    @classmethod
    def id_tag_not_empty(cls, value):
        # pylint: disable=no-self-argument
        return strip_and_check_not_empty("idTag", value)


class AuthorizeRes(BaseModel):
    """See section 6.2 in OCPP 1.6"""

    id_tag_info: IdTagInfo = Field(..., alias="idTagInfo")


class BootNotificationReq(BaseModel):
    """See section 6.3 in OCPP 1.6"""

    charge_point_vendor: str = Field(
        ..., min_length=1, max_length=20, alias="chargePointVendor"
    )
    charge_point_model: str = Field(
        ..., min_length=1, max_length=20, alias="chargePointModel"
    )
    charge_point_serial_number: Optional[str] = Field(
        None, max_length=25, alias="chargePointSerialNumber"
    )
    charge_box_serial_number: Optional[str] = Field(
        None, max_length=25, alias="chargeBoxSerialNumber"
    )
    firmware_version: Optional[str] = Field(
        None, max_length=50, alias="firmwareVersion"
    )
    iccid: Optional[str] = Field(None, max_length=20, alias="iccid")
    imsi: Optional[str] = Field(None, max_length=20, alias="imsi")
    meter_type: Optional[str] = Field(None, max_length=25, alias="meterType")
    meter_serial_number: Optional[str] = Field(
        None, max_length=25, alias="meterSerialNumber"
    )


class BootNotificationRes(BaseModel):
    """See section 6.4 in OCPP 1.6"""

    status: RegistrationStatus = Field(..., alias="status")
    current_time: Timestamp = Field(..., alias="currentTime")
    # Heartbeat interval in seconds if accepted, retry interval otherwise
    interval: int = Field(..., ge=0, le=UINT_32_MAX, alias="interval")


class HeartbeatReq(BaseModel):
    """See section 6.31 in OCPP 1.6. The request carries no fields."""


class HeartbeatRes(BaseModel):
    """See section 6.32 in OCPP 1.6"""

    current_time: Timestamp = Field(..., alias="currentTime")


class DataTransferReq(BaseModel):
    """See section 6.17 in OCPP 1.6"""

    vendor_id: str = Field(..., min_length=1, max_length=255, alias="vendorId")
    message_id: Optional[str] = Field(None, max_length=50, alias="messageId")
    # Free format, the meaning is defined by the vendor
    data: Optional[str] = Field(None, alias="data")


class DataTransferRes(BaseModel):
    """See section 6.18 in OCPP 1.6"""

    status: DataTransferStatus = Field(..., alias="status")
    data: Optional[str] = Field(None, alias="data")


class ResetReq(BaseModel):
    """See section 6.43 in OCPP 1.6"""

    reset_type: ResetType = Field(..., alias="type")


class ResetRes(BaseModel):
    """See section 6.44 in OCPP 1.6"""

    status: ResetStatus = Field(..., alias="status")


class ChangeConfigurationReq(BaseModel):
    """See section 6.9 in OCPP 1.6"""

    key: str = Field(..., min_length=1, max_length=50, alias="key")
    value: str = Field(..., max_length=500, alias="value")


class ChangeConfigurationRes(BaseModel):
    """See section 6.10 in OCPP 1.6"""

    status: ConfigurationStatus = Field(..., alias="status")


class SendLocalListReq(BaseModel):
    """See section 6.51 in OCPP 1.6"""

    list_version: int = Field(..., ge=0, le=UINT_32_MAX, alias="listVersion")
    update_type: UpdateType = Field(..., alias="updateType")
    local_authorization_list: Optional[List[AuthorizationData]] = Field(
        None, alias="localAuthorizationList"
    )

    @field_validator("local_authorization_list")
    @classmethod
    def unique_id_tags(cls, value):
        # pylint: disable=no-self-argument
        if value is None:
            return value
        id_tags = [entry.id_tag.upper() for entry in value]
        if len(id_tags) != len(set(id_tags)):
            raise ValueError("Each idTag may appear only once in the list")
        return value


class SendLocalListRes(BaseModel):
    """See section 6.52 in OCPP 1.6"""

    status: UpdateStatus = Field(..., alias="status")
