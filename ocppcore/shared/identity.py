"""
Identifiers used to correlate requests and responses and to address the nodes
taking part in an exchange.

All identifiers are plain values: two identifiers are equal if their contents
are equal, no matter whether they were generated locally or parsed from the
wire.
"""
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union
from uuid import uuid4


def _check_identifier(kind: str, value: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{kind} must be a string, got {type(value).__name__}")
    value = value.strip()
    if not value:
        raise ValueError(f"{kind} must not be empty")
    return value


@dataclass(frozen=True)
class RequestId:
    """
    Unique per in-flight exchange. Generated by the sender unless the
    transport supplies the one it received. The value is opaque: SOAP peers
    send their WS-Addressing MessageID, e.g. "uuid:516f7065-...", which is
    longer than the 36 characters OCPP-J allows for its message ids.
    """

    value: str

    def __post_init__(self):
        object.__setattr__(self, "value", _check_identifier("RequestId", self.value))

    @classmethod
    def new(cls) -> "RequestId":
        return cls(str(uuid4()))

    @classmethod
    def parse(cls, value: Union[str, int, "RequestId"]) -> "RequestId":
        """
        SOAP and older OCPP-J peers use numeric message ids, newer ones use
        strings. Both end up as the same string based identifier.
        """
        if isinstance(value, RequestId):
            return value
        if isinstance(value, bool):
            raise TypeError("RequestId must be a string or an integer")
        if isinstance(value, int):
            return cls(str(value))
        return cls(value)

    def __str__(self):
        return self.value


def new_request_id() -> RequestId:
    return RequestId.new()


@dataclass(frozen=True)
class EventTrackingId:
    """
    Correlation token that may span several request/response exchanges, e.g.
    all retries of the same request.
    """

    value: str

    def __post_init__(self):
        object.__setattr__(
            self, "value", _check_identifier("EventTrackingId", self.value)
        )

    @classmethod
    def new(cls) -> "EventTrackingId":
        return cls(str(uuid4()))

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class NodeId:
    """
    Identity of a node: the charge box identity in OCPP 1.6, the networking
    node identity in OCPP 2.1.
    """

    value: str

    def __post_init__(self):
        object.__setattr__(self, "value", _check_identifier("NodeId", self.value))

    @classmethod
    def parse(cls, value: Union[str, "NodeId"]) -> "NodeId":
        if isinstance(value, NodeId):
            return value
        return cls(value)

    def __str__(self):
        return self.value


# The legacy name of a node identity
ChargeBoxId = NodeId


@dataclass(frozen=True)
class NetworkPath:
    """
    The ordered sequence of nodes a message passed through when it was
    forwarded by networking nodes. The first entry is the node the message
    originated from.
    """

    nodes: Tuple[NodeId, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "nodes", tuple(NodeId.parse(node) for node in self.nodes)
        )

    @classmethod
    def empty(cls) -> "NetworkPath":
        return cls()

    @classmethod
    def from_nodes(cls, *nodes: Union[str, NodeId]) -> "NetworkPath":
        return cls(tuple(NodeId.parse(node) for node in nodes))

    def append(self, node: Union[str, NodeId]) -> "NetworkPath":
        """Returns a new path with the given hop added at the end"""
        return NetworkPath(self.nodes + (NodeId.parse(node),))

    @property
    def origin(self) -> Optional[NodeId]:
        return self.nodes[0] if self.nodes else None

    @property
    def last(self) -> Optional[NodeId]:
        return self.nodes[-1] if self.nodes else None

    def __len__(self):
        return len(self.nodes)

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self.nodes)

    def __contains__(self, node) -> bool:
        return NodeId.parse(node) in self.nodes

    def __str__(self):
        return " -> ".join(node.value for node in self.nodes)
