"""
The envelope shared by all OCPP messages.

A concrete message is a pydantic payload model (e.g. AuthorizeReq) wrapped in
a Request or Response envelope. The envelope carries everything that is not
specific to the message: the ids used for correlation, timestamps, the
addressing information of the nodes involved, signatures and vendor specific
custom data.

An Operation binds exactly one request payload type to exactly one response
payload type. A Response can only be created for a Request of the same
operation, so whoever holds a Request[AuthorizeReq, AuthorizeRes] can only
ever receive a Response[AuthorizeReq, AuthorizeRes].
"""
import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Generic, Optional, Tuple, Type, TypeVar

from ocppcore.shared.exceptions import OperationMismatchError
from ocppcore.shared.identity import EventTrackingId, NetworkPath, NodeId, RequestId
from ocppcore.shared.messages import BaseModel
from ocppcore.shared.messages.datatypes import CustomData, Signature
from ocppcore.shared.messages.enums import (
    JSON_LD_CONTEXT_BASE,
    Namespace,
    ProtocolVersion,
)
from ocppcore.shared.outcome import Outcome
from ocppcore.shared.settings import SettingKey, shared_settings
from ocppcore.shared.validators import normalize_timestamp

ReqP = TypeVar("ReqP", bound=BaseModel)
ResP = TypeVar("ResP", bound=BaseModel)


def _utc_now() -> datetime:
    return normalize_timestamp(datetime.now(timezone.utc))


def _default_timeout() -> Optional[timedelta]:
    return timedelta(seconds=shared_settings[SettingKey.REQUEST_TIMEOUT])


def _payload_fingerprint(payload: Optional[BaseModel]) -> str:
    if payload is None:
        return ""
    return json.dumps(
        payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        sort_keys=True,
        separators=(",", ":"),
    )


def _check_payload(operation: "Operation", expected: Type[BaseModel], payload):
    if not isinstance(payload, expected):
        raise OperationMismatchError(
            operation.action, expected.__name__, type(payload).__name__
        )


@dataclass(frozen=True)
class Operation(Generic[ReqP, ResP]):
    """
    Describes one OCPP operation, e.g. Authorize in OCPP 1.6.

    Args:
        action: The OCPP action name, e.g. 'Authorize'
        version: The protocol generation the operation belongs to
        request_type: The payload model of the request
        response_type: The payload model of the response
        namespace: The XML namespace of the SOAP binding, None if the
                   operation is only defined for JSON
    """

    action: str
    version: ProtocolVersion
    request_type: Type[ReqP]
    response_type: Type[ResP]
    namespace: Optional[Namespace] = None

    @property
    def request_name(self) -> str:
        return f"{self.action} request"

    @property
    def response_name(self) -> str:
        return f"{self.action} response"

    @property
    def request_element(self) -> str:
        """The name of the SOAP body element, e.g. 'authorizeRequest'"""
        return self.action[0].lower() + self.action[1:] + "Request"

    @property
    def response_element(self) -> str:
        return self.action[0].lower() + self.action[1:] + "Response"

    @property
    def request_context(self) -> str:
        """The JSON-LD context of the request type"""
        return (
            f"{JSON_LD_CONTEXT_BASE}/{self.version.context_segment}/"
            f"{self.action}Request"
        )

    @property
    def response_context(self) -> str:
        return (
            f"{JSON_LD_CONTEXT_BASE}/{self.version.context_segment}/"
            f"{self.action}Response"
        )

    def request(self, payload: ReqP, **kwargs) -> "Request[ReqP, ResP]":
        return Request(self, payload, **kwargs)

    def response(
        self, request: "Request[ReqP, ResP]", payload: ResP, **kwargs
    ) -> "Response[ReqP, ResP]":
        if request.operation != self:
            raise OperationMismatchError(
                self.action,
                f"{self.action} request",
                request.operation.request_name,
            )
        return Response(request, payload, **kwargs)

    def __str__(self):
        return f"{self.action} ({self.version.value})"


@dataclass(frozen=True, eq=False)
class Request(Generic[ReqP, ResP]):
    """
    A request as constructed by the sender or as reconstructed from the wire
    by a codec. Everything except the operation and the payload has a
    default, so a minimal request only needs the message specific data.

    The request id travels in the transport envelope (e.g. the OCPP-J message
    array or the SOAP header), which is why a codec needs it handed in when
    parsing a request.
    """

    operation: Operation[ReqP, ResP]
    payload: ReqP
    request_id: RequestId = field(default_factory=RequestId.new)
    event_tracking_id: EventTrackingId = field(default_factory=EventTrackingId.new)
    timestamp: datetime = field(default_factory=_utc_now)
    # Metadata for the transport, nothing in here enforces it
    timeout: Optional[timedelta] = field(default_factory=_default_timeout)
    sender_id: Optional[NodeId] = None
    destination_id: Optional[NodeId] = None
    network_path: NetworkPath = field(default_factory=NetworkPath.empty)
    signatures: Tuple[Signature, ...] = ()
    custom_data: Optional[CustomData] = None

    def __post_init__(self):
        _check_payload(self.operation, self.operation.request_type, self.payload)
        object.__setattr__(self, "signatures", tuple(self.signatures))
        object.__setattr__(self, "timestamp", normalize_timestamp(self.timestamp))

    @property
    def name(self) -> str:
        return self.operation.request_name

    @property
    def is_signed(self) -> bool:
        return len(self.signatures) > 0

    def __eq__(self, other):
        # Correlation data (ids, timestamps, routing) and the envelope fields
        # do not take part in the comparison, only the message itself
        if not isinstance(other, Request):
            return NotImplemented
        return self.operation == other.operation and self.payload == other.payload

    def __hash__(self):
        return hash(
            (self.operation, "request", _payload_fingerprint(self.payload))
        )

    def __str__(self):
        return f"{self.name} {self.request_id}"


@dataclass(frozen=True, eq=False)
class Response(Generic[ReqP, ResP]):
    """
    The answer to a Request. A response cannot exist without the request it
    answers, and all addressing information is taken from that request.

    If the exchange did not complete successfully (timeout, transport error,
    malformed payload, ...) the response carries a non-success outcome and no
    payload. Check `outcome` before reading `payload`.
    """

    request: Request[ReqP, ResP]
    payload: Optional[ResP] = None
    outcome: Outcome = field(default_factory=Outcome.success)
    timestamp: datetime = field(default_factory=_utc_now)
    signatures: Tuple[Signature, ...] = ()
    custom_data: Optional[CustomData] = None

    def __post_init__(self):
        if not isinstance(self.request, Request):
            raise TypeError(
                "A response requires the request it answers, got "
                f"{type(self.request).__name__}"
            )
        if self.payload is not None or self.outcome.is_success:
            _check_payload(
                self.operation, self.operation.response_type, self.payload
            )
        object.__setattr__(self, "signatures", tuple(self.signatures))
        object.__setattr__(self, "timestamp", normalize_timestamp(self.timestamp))

    @property
    def operation(self) -> Operation[ReqP, ResP]:
        return self.request.operation

    @property
    def name(self) -> str:
        return self.operation.response_name

    @property
    def request_id(self) -> RequestId:
        return self.request.request_id

    @property
    def event_tracking_id(self) -> EventTrackingId:
        return self.request.event_tracking_id

    @property
    def sender_id(self) -> Optional[NodeId]:
        """The node answering is the node the request was addressed to"""
        return self.request.destination_id

    @property
    def destination_id(self) -> Optional[NodeId]:
        """The response goes back to the node that sent the request"""
        return self.request.sender_id

    @property
    def network_path(self) -> NetworkPath:
        return self.request.network_path

    @property
    def is_signed(self) -> bool:
        return len(self.signatures) > 0

    @classmethod
    def failed(
        cls, request: Request[ReqP, ResP], description: Optional[str] = None
    ) -> "Response[ReqP, ResP]":
        """The exchange could not be completed"""
        return cls(request, outcome=Outcome.transport_error(description))

    @classmethod
    def timeout(
        cls, request: Request[ReqP, ResP], description: Optional[str] = None
    ) -> "Response[ReqP, ResP]":
        return cls(request, outcome=Outcome.timeout(description))

    @classmethod
    def transport_error(
        cls, request: Request[ReqP, ResP], description: Optional[str] = None
    ) -> "Response[ReqP, ResP]":
        return cls(request, outcome=Outcome.transport_error(description))

    @classmethod
    def format_error(
        cls, request: Request[ReqP, ResP], description: str
    ) -> "Response[ReqP, ResP]":
        return cls(request, outcome=Outcome.format_error(description))

    @classmethod
    def signature_error(
        cls, request: Request[ReqP, ResP], description: str
    ) -> "Response[ReqP, ResP]":
        return cls(request, outcome=Outcome.signature_error(description))

    @classmethod
    def protocol_error(
        cls,
        request: Request[ReqP, ResP],
        error_code: str,
        description: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> "Response[ReqP, ResP]":
        return cls(
            request,
            outcome=Outcome.protocol_error(error_code, description, details),
        )

    @classmethod
    def from_exception(
        cls, request: Request[ReqP, ResP], exc: BaseException
    ) -> "Response[ReqP, ResP]":
        return cls(request, outcome=Outcome.from_exception(exc))

    def __eq__(self, other):
        if not isinstance(other, Response):
            return NotImplemented
        return (
            self.operation == other.operation
            and self.outcome.kind == other.outcome.kind
            and self.payload == other.payload
        )

    def __hash__(self):
        return hash(
            (
                self.operation,
                "response",
                self.outcome.kind,
                _payload_fingerprint(self.payload),
            )
        )

    def __str__(self):
        return f"{self.name} {self.request_id}: {self.outcome}"
