"""
The contract every wire format codec fulfils.

A codec is created for exactly one operation and converts the requests and
responses of that operation from and to a tree of the wire format (a dict for
JSON, an ElementTree element for XML). Turning trees into bytes is up to the
transport.

There are two flavours of parsing: try_parse_* never raises for malformed
input and reports the reason in the returned ParseResult, parse_* raises a
MessageParseError instead. Passing None as tree is a programming error and
raises a ValueError in both cases.
"""
import logging
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from pydantic import ValidationError

from ocppcore.shared.exceptions import (
    InvalidTreeError,
    MessageParseError,
    MessageSerializationError,
    OperationMismatchError,
)
from ocppcore.shared.identity import EventTrackingId, NetworkPath, NodeId, RequestId
from ocppcore.shared.logging import TRACE
from ocppcore.shared.messages import BaseModel
from ocppcore.shared.messages.datatypes import CustomData, Signature
from ocppcore.shared.messages.enums import WireFormat
from ocppcore.shared.messages.envelope import (
    Operation,
    ReqP,
    Request,
    ResP,
    Response,
)
from ocppcore.shared.settings import shared_settings

logger = logging.getLogger(__name__)

TreeT = TypeVar("TreeT")
MessageT = TypeVar("MessageT")


def format_validation_error(exc: ValidationError) -> str:
    """
    Turns all errors found by pydantic into a single line, each error prefixed
    with the wire name of the offending field, e.g.
    'idTagInfo.status: Input should be 'Accepted', 'Blocked', ...'
    """
    reasons = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        reasons.append(f"{location}: {error['msg']}")
    return "; ".join(reasons)


@dataclass(frozen=True)
class ParseResult(Generic[MessageT]):
    """
    Either the parsed message or the reason why parsing failed. Evaluates to
    True if parsing succeeded.
    """

    message: Optional[MessageT] = None
    exception: Optional[MessageParseError] = None

    @property
    def success(self) -> bool:
        return self.exception is None

    @property
    def error(self) -> Optional[str]:
        return str(self.exception) if self.exception else None

    def __bool__(self):
        return self.success


class MessageCustomizer(Generic[MessageT, TreeT]):
    """
    Hook for vendor specific extensions of a message. after_parse gets the
    tree a message was parsed from and may return an amended message,
    after_serialize gets the tree a message was serialised to and may return
    an amended tree. The default implementation changes nothing.
    """

    def after_parse(self, tree: TreeT, message: MessageT) -> MessageT:
        return message

    def after_serialize(self, message: MessageT, tree: TreeT) -> TreeT:
        return tree

    @staticmethod
    def from_functions(
        after_parse: Optional[Callable[[Any, Any], Any]] = None,
        after_serialize: Optional[Callable[[Any, Any], Any]] = None,
    ) -> "MessageCustomizer":
        return _FunctionCustomizer(after_parse, after_serialize)


class _FunctionCustomizer(MessageCustomizer):
    def __init__(
        self,
        after_parse: Optional[Callable[[Any, Any], Any]],
        after_serialize: Optional[Callable[[Any, Any], Any]],
    ):
        self._after_parse = after_parse
        self._after_serialize = after_serialize

    def after_parse(self, tree, message):
        if self._after_parse is None:
            return message
        return self._after_parse(tree, message)

    def after_serialize(self, message, tree):
        if self._after_serialize is None:
            return tree
        return self._after_serialize(message, tree)


class MessageCodec(Generic[ReqP, ResP, TreeT], metaclass=ABCMeta):
    """
    Base class of the JSON and the XML codec. Subclasses only implement how a
    payload and the envelope fields are read from and written to a tree; the
    flow of parsing, serialising, customizing and logging lives here.
    """

    wire_format: WireFormat
    # The shared setting that enables logging of the trees at INFO level
    log_setting: str

    def __init__(
        self,
        operation: Operation[ReqP, ResP],
        request_customizer: Optional[MessageCustomizer] = None,
        response_customizer: Optional[MessageCustomizer] = None,
    ):
        self.operation = operation
        self.request_customizer = request_customizer
        self.response_customizer = response_customizer

    @abstractmethod
    def _read(
        self, tree: TreeT, payload_type: Type[BaseModel], element: str
    ) -> Tuple[BaseModel, Tuple[Signature, ...], Optional[CustomData]]:
        """
        Reads the payload, the signatures and the custom data from the tree.
        Element is the name of the root element of the message (only
        meaningful for formats that name the root).
        Raises a pydantic ValidationError or an InvalidTreeError.
        """
        raise NotImplementedError

    @abstractmethod
    def _write(
        self,
        element: str,
        payload: BaseModel,
        signatures: Iterable[Signature],
        custom_data: Optional[CustomData],
    ) -> TreeT:
        raise NotImplementedError

    @abstractmethod
    def _canonical_bytes(self, tree: TreeT) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def _dump(self, tree: TreeT) -> str:
        """Text representation of the tree, only used for logging"""
        raise NotImplementedError

    def try_parse_request(
        self,
        tree: TreeT,
        request_id: Union[RequestId, str, int],
        sender_id: Optional[Union[NodeId, str]],
        network_path: Optional[Union[NetworkPath, Iterable[str]]] = None,
        destination_id: Optional[Union[NodeId, str]] = None,
        timestamp: Optional[datetime] = None,
        event_tracking_id: Optional[EventTrackingId] = None,
    ) -> ParseResult[Request[ReqP, ResP]]:
        """
        Parses a request received from the node sender_id. The request id and
        the network path are part of the transport envelope and must be
        passed in by the caller.
        """
        message_name = self.operation.request_name
        if tree is None:
            raise ValueError(f"No tree given to parse the {message_name} from")

        request_id = RequestId.parse(request_id)
        if not isinstance(network_path, NetworkPath):
            network_path = NetworkPath.from_nodes(*(network_path or ()))

        self._log_tree(f"Decoding {message_name}", tree)
        try:
            payload, signatures, custom_data = self._read(
                tree, self.operation.request_type, self.operation.request_element
            )
        except ValidationError as exc:
            return self._failure(message_name, format_validation_error(exc))
        except InvalidTreeError as exc:
            return self._failure(message_name, str(exc))

        optional_fields = {}
        if timestamp is not None:
            optional_fields["timestamp"] = timestamp
        if event_tracking_id is not None:
            optional_fields["event_tracking_id"] = event_tracking_id

        request = Request(
            self.operation,
            payload,
            request_id=request_id,
            sender_id=_optional_node_id(sender_id),
            destination_id=_optional_node_id(destination_id),
            network_path=network_path,
            signatures=signatures,
            custom_data=custom_data,
            **optional_fields,
        )
        return self._after_parse(self.request_customizer, tree, request)

    def parse_request(self, tree: TreeT, *args, **kwargs) -> Request[ReqP, ResP]:
        """
        Same as try_parse_request(), but raises a MessageParseError if the tree
        is not a valid representation of the request.
        """
        result = self.try_parse_request(tree, *args, **kwargs)
        if not result:
            raise result.exception
        return result.message

    def request_to_tree(self, request: Request[ReqP, ResP]) -> TreeT:
        self._check_operation(request.operation)
        tree = self._write(
            self.operation.request_element,
            request.payload,
            request.signatures,
            request.custom_data,
        )
        if self.request_customizer is not None:
            tree = self.request_customizer.after_serialize(request, tree)
        self._log_tree(f"Encoded {request.name}", tree)
        return tree

    def try_parse_response(
        self,
        request: Request[ReqP, ResP],
        tree: TreeT,
        timestamp: Optional[datetime] = None,
    ) -> ParseResult[Response[ReqP, ResP]]:
        """
        Parses the response to the given request. All addressing information
        of the response is taken from the request.
        """
        message_name = self.operation.response_name
        if request is None:
            raise ValueError(f"The {message_name} needs the request it answers")
        if tree is None:
            raise ValueError(f"No tree given to parse the {message_name} from")
        self._check_operation(request.operation)

        self._log_tree(f"Decoding {message_name}", tree)
        try:
            payload, signatures, custom_data = self._read(
                tree, self.operation.response_type, self.operation.response_element
            )
        except ValidationError as exc:
            return self._failure(message_name, format_validation_error(exc))
        except InvalidTreeError as exc:
            return self._failure(message_name, str(exc))

        optional_fields = {}
        if timestamp is not None:
            optional_fields["timestamp"] = timestamp

        response = Response(
            request,
            payload,
            signatures=signatures,
            custom_data=custom_data,
            **optional_fields,
        )
        return self._after_parse(self.response_customizer, tree, response)

    def parse_response(
        self,
        request: Request[ReqP, ResP],
        tree: TreeT,
        timestamp: Optional[datetime] = None,
    ) -> Response[ReqP, ResP]:
        result = self.try_parse_response(request, tree, timestamp)
        if not result:
            raise result.exception
        return result.message

    def response_to_tree(self, response: Response[ReqP, ResP]) -> TreeT:
        self._check_operation(response.operation)
        if response.payload is None:
            raise MessageSerializationError(
                f"The {response.name} has no {self.wire_format.value} "
                f"representation, its outcome is {response.outcome}"
            )
        tree = self._write(
            self.operation.response_element,
            response.payload,
            response.signatures,
            response.custom_data,
        )
        if self.response_customizer is not None:
            tree = self.response_customizer.after_serialize(response, tree)
        self._log_tree(f"Encoded {response.name}", tree)
        return tree

    def canonical_form(
        self, message: Union[Request[ReqP, ResP], Response[ReqP, ResP]]
    ) -> bytes:
        """
        The bytes signatures are computed over: the message without its
        signatures and before any customizer ran, in the canonical text form
        of the wire format.
        """
        self._check_operation(message.operation)
        if isinstance(message, Response):
            if message.payload is None:
                raise MessageSerializationError(
                    f"The {message.name} has no payload to sign or verify, "
                    f"its outcome is {message.outcome}"
                )
            element = self.operation.response_element
        else:
            element = self.operation.request_element
        tree = self._write(element, message.payload, (), message.custom_data)
        return self._canonical_bytes(tree)

    def _check_operation(self, operation: Operation):
        if operation != self.operation:
            raise OperationMismatchError(
                self.operation.action,
                f"messages of {self.operation}",
                f"a message of {operation}",
            )

    def _after_parse(
        self, customizer: Optional[MessageCustomizer], tree: TreeT, message
    ) -> ParseResult:
        if customizer is None:
            return ParseResult(message)

        try:
            customized = customizer.after_parse(tree, message)
        except Exception as exc:
            return self._failure(message.name, f"Custom parser failed: {exc}")

        if (
            not isinstance(customized, type(message))
            or customized.operation != message.operation
        ):
            return self._failure(
                message.name,
                f"Custom parser returned {type(customized).__name__} instead "
                f"of a {message.name}",
            )
        return ParseResult(customized)

    def _failure(self, message_name: str, reason: str) -> ParseResult:
        exc = MessageParseError(message_name, self.wire_format.value, reason)
        logger.debug(str(exc))
        return ParseResult(exception=exc)

    def _log_tree(self, text: str, tree: TreeT):
        level = logging.INFO if shared_settings[self.log_setting] else TRACE
        if logger.isEnabledFor(level):
            logger.log(level, f"{text} ({self.wire_format.value}): {self._dump(tree)}")


def _optional_node_id(value: Optional[Union[NodeId, str]]) -> Optional[NodeId]:
    if value is None:
        return None
    return NodeId.parse(value)
