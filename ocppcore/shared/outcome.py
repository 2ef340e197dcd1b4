"""
The outcome of a request/response exchange. Every Response carries one; only
on a successful outcome are the message specific fields of the response
meaningful.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class OutcomeKind(str, Enum):
    SUCCESS = "Success"
    TIMEOUT = "Timeout"
    TRANSPORT_ERROR = "TransportError"
    PROTOCOL_ERROR = "ProtocolError"
    FORMAT_ERROR = "FormatError"
    SIGNATURE_ERROR = "SignatureError"
    INTERNAL_ERROR = "InternalError"


# HTTP-like status code per outcome kind
STATUS_CODES = {
    OutcomeKind.SUCCESS: 200,
    OutcomeKind.FORMAT_ERROR: 400,
    OutcomeKind.SIGNATURE_ERROR: 401,
    OutcomeKind.TIMEOUT: 408,
    OutcomeKind.PROTOCOL_ERROR: 422,
    OutcomeKind.INTERNAL_ERROR: 500,
    OutcomeKind.TRANSPORT_ERROR: 503,
}


@dataclass(frozen=True)
class Outcome:
    """
    Args:
        kind: The classification of the outcome
        status_code: HTTP-like status code, derived from the kind unless given
        error_code: The protocol error code (e.g. 'NotSupported'), only set for
                    protocol errors
        description: Human readable explanation, None on success
        details: Additional machine readable error details
    """

    kind: OutcomeKind
    status_code: int = 0
    error_code: Optional[str] = None
    description: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if not self.status_code:
            object.__setattr__(self, "status_code", STATUS_CODES[self.kind])

    def __hash__(self):
        return hash((self.kind, self.status_code, self.error_code, self.description))

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @classmethod
    def success(cls) -> "Outcome":
        return cls(OutcomeKind.SUCCESS)

    @classmethod
    def timeout(cls, description: Optional[str] = None) -> "Outcome":
        return cls(OutcomeKind.TIMEOUT, description=description or "Request timed out")

    @classmethod
    def transport_error(cls, description: Optional[str] = None) -> "Outcome":
        return cls(
            OutcomeKind.TRANSPORT_ERROR,
            description=description or "The request could not be delivered",
        )

    @classmethod
    def protocol_error(
        cls,
        error_code: str,
        description: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> "Outcome":
        return cls(
            OutcomeKind.PROTOCOL_ERROR,
            error_code=error_code,
            description=description,
            details=details,
        )

    @classmethod
    def format_error(cls, description: str) -> "Outcome":
        return cls(
            OutcomeKind.FORMAT_ERROR,
            description=f"Invalid data format: {description}",
        )

    @classmethod
    def signature_error(cls, description: str) -> "Outcome":
        return cls(
            OutcomeKind.SIGNATURE_ERROR,
            description=f"Invalid signature(s): {description}",
        )

    @classmethod
    def internal_error(cls, description: Optional[str] = None) -> "Outcome":
        return cls(OutcomeKind.INTERNAL_ERROR, description=description)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Outcome":
        return cls(
            OutcomeKind.INTERNAL_ERROR,
            description=str(exc) or exc.__class__.__name__,
            details={"exception": exc.__class__.__name__},
        )

    def __str__(self):
        if self.is_success:
            return self.kind.value
        return f"{self.kind.value} ({self.status_code}): {self.description}"
