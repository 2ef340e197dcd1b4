"""
This module contains functions used by various pydantic validators throughout
the model classes for OCPP 1.6 and OCPP 2.1 messages. Saves duplicated code.
"""

from base64 import b64decode, b64encode
from binascii import Error as BinasciiError
from datetime import datetime, timezone
from typing import Any


def normalize_timestamp(value: datetime) -> datetime:
    """
    Brings a datetime into the single canonical form used on the wire: UTC
    with millisecond precision. Naive datetimes are taken as UTC.

    Truncating here (and not only when serialising) keeps the in-memory value
    equal to what a peer will parse back from the wire.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def format_timestamp(value: datetime) -> str:
    value = normalize_timestamp(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def decode_base64(value: Any) -> Any:
    """
    Base64 encoded text arrives from the wire, raw bytes from Python code.
    Only the former needs decoding.
    """
    if isinstance(value, str):
        try:
            return b64decode(value, validate=True)
        except BinasciiError as exc:
            raise ValueError(f"Invalid base64 encoding: {exc}") from exc
    return value


def encode_base64(value: bytes) -> str:
    return b64encode(value).decode()


def strip_and_check_not_empty(var_name: str, value: str) -> str:
    """
    Identifiers and free text are trimmed; a value consisting of whitespace
    only is rejected.

    var_name
        Name of the field being checked, used in the error message
    value
        The string to check
    """
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"The given {var_name} must not be empty")
    return stripped
