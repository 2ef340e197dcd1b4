"""
This module contains the enumerations and complex data types used by the
OCPP 1.6 messages implemented in ocppcore.shared.messages.v1_6.body.

The wire names (JSON keys of OCPP-J and XML element names of OCPP-S) are
given as pydantic aliases. Both bindings of OCPP 1.6 use the same names.
"""
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from ocppcore.shared.messages import BaseModel
from ocppcore.shared.messages.datatypes import Timestamp
from ocppcore.shared.validators import strip_and_check_not_empty

# The idToken of OCPP 1.6 is a case insensitive string of max. 20 characters
ID_TOKEN_MAX_LENGTH = 20


class AuthorizationStatus(str, Enum):
    ACCEPTED = "Accepted"
    BLOCKED = "Blocked"
    EXPIRED = "Expired"
    INVALID = "Invalid"
    CONCURRENT_TX = "ConcurrentTx"


class RegistrationStatus(str, Enum):
    ACCEPTED = "Accepted"
    PENDING = "Pending"
    REJECTED = "Rejected"


class DataTransferStatus(str, Enum):
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    UNKNOWN_MESSAGE_ID = "UnknownMessageId"
    UNKNOWN_VENDOR_ID = "UnknownVendorId"


class ResetType(str, Enum):
    HARD = "Hard"
    SOFT = "Soft"


class ResetStatus(str, Enum):
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class ConfigurationStatus(str, Enum):
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    REBOOT_REQUIRED = "RebootRequired"
    NOT_SUPPORTED = "NotSupported"


class UpdateType(str, Enum):
    DIFFERENTIAL = "Differential"
    FULL = "Full"


class UpdateStatus(str, Enum):
    ACCEPTED = "Accepted"
    FAILED = "Failed"
    NOT_SUPPORTED = "NotSupported"
    VERSION_MISMATCH = "VersionMismatch"


class IdTagInfo(BaseModel):
    """See section 7.30 IdTagInfo in OCPP 1.6"""

    status: AuthorizationStatus = Field(..., alias="status")
    expiry_date: Optional[Timestamp] = Field(None, alias="expiryDate")
    parent_id_tag: Optional[str] = Field(
        None, max_length=ID_TOKEN_MAX_LENGTH, alias="parentIdTag"
    )

    @field_validator("parent_id_tag")
    @classmethod
    def parent_id_tag_not_empty(cls, value):
        # pylint: disable=no-self-argument
        if value is None:
            return value
        return strip_and_check_not_empty("parentIdTag", value)


class AuthorizationData(BaseModel):
    """
    An entry of the local authorization list, see section 7.2 in OCPP 1.6.
    Without id_tag_info the entry is removed from the list when sent with a
    differential update.
    """

    id_tag: str = Field(..., max_length=ID_TOKEN_MAX_LENGTH, alias="idTag")
    id_tag_info: Optional[IdTagInfo] = Field(None, alias="idTagInfo")

    @field_validator("id_tag")
    @classmethod
    def id_tag_not_empty(cls, value):
        # pylint: disable=no-self-argument
        return strip_and_check_not_empty("idTag", value)
