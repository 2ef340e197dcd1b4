"""
The JSON binding (OCPP-J) of the message codec.

A message is a JSON object holding the payload fields. The envelope fields
'signatures' and 'customData' sit next to the payload fields in the same
object. The tree handed in and out is the decoded JSON object, i.e. a dict.
"""
import json
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from pydantic import Field

from ocppcore.shared.exceptions import InvalidTreeError
from ocppcore.shared.imessage_codec import MessageCodec
from ocppcore.shared.messages import BaseModel
from ocppcore.shared.messages.datatypes import CustomData, Signature
from ocppcore.shared.messages.enums import (
    CUSTOM_DATA_KEY,
    SIGNATURES_KEY,
    WireFormat,
)
from ocppcore.shared.messages.envelope import ReqP, ResP
from ocppcore.shared.settings import SettingKey
from ocppcore.shared.validators import encode_base64, format_timestamp

JSONTree = Dict[str, Any]


class CustomJSONEncoder(json.JSONEncoder):
    """
    Custom JSON encoder for trees amended by a customizer, which may contain
    raw bytes or datetimes. Bytes become Base64 encoded strings, datetimes
    the canonical timestamp format.
    """

    # pylint: disable=method-hidden
    def default(self, o):
        if isinstance(o, bytes):
            return encode_base64(o)
        if isinstance(o, datetime):
            return format_timestamp(o)
        return json.JSONEncoder.default(self, o)


def canonical_json(tree: JSONTree) -> bytes:
    """Sorted keys, no insignificant whitespace, UTF-8"""
    return json.dumps(
        tree,
        cls=CustomJSONEncoder,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


class _JSONEnvelope(BaseModel):
    signatures: List[Signature] = Field(default_factory=list, alias=SIGNATURES_KEY)
    custom_data: Optional[CustomData] = Field(None, alias=CUSTOM_DATA_KEY)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "a boolean"
    if isinstance(value, (list, tuple)):
        return "an array"
    if isinstance(value, str):
        return "a string"
    if isinstance(value, (int, float)):
        return "a number"
    return type(value).__name__


class JSONCodec(MessageCodec[ReqP, ResP, JSONTree]):
    wire_format = WireFormat.JSON
    log_setting = SettingKey.MESSAGE_LOG_JSON

    def _read(
        self, tree: JSONTree, payload_type: Type[BaseModel], element: str
    ) -> Tuple[BaseModel, Tuple[Signature, ...], Optional[CustomData]]:
        if not isinstance(tree, dict):
            raise InvalidTreeError(f"Expected a JSON object, got {_json_type(tree)}")

        try:
            text = json.dumps(tree)
        except (TypeError, ValueError) as exc:
            raise InvalidTreeError(f"Not a JSON tree: {exc}") from exc

        # Strict and by wire name only: "300" is no integer, 1704067200 no
        # timestamp and id_tag no idTag
        payload = payload_type.model_validate_json(
            text, strict=True, by_alias=True, by_name=False
        )
        envelope = _JSONEnvelope.model_validate_json(
            text, strict=True, by_alias=True, by_name=False
        )
        return payload, tuple(envelope.signatures), envelope.custom_data

    def _write(
        self,
        element: str,
        payload: BaseModel,
        signatures: Iterable[Signature],
        custom_data: Optional[CustomData],
    ) -> JSONTree:
        tree = payload.model_dump(mode="json", by_alias=True, exclude_none=True)

        signatures = [
            signature.model_dump(mode="json", by_alias=True, exclude_none=True)
            for signature in signatures
        ]
        if signatures:
            tree[SIGNATURES_KEY] = signatures
        if custom_data is not None:
            # Vendor keys are kept as they are, including null values
            tree[CUSTOM_DATA_KEY] = custom_data.model_dump(mode="json", by_alias=True)
        return tree

    def _canonical_bytes(self, tree: JSONTree) -> bytes:
        return canonical_json(tree)

    def _dump(self, tree: JSONTree) -> str:
        try:
            return json.dumps(tree, cls=CustomJSONEncoder)
        except (TypeError, ValueError):
            return repr(tree)
