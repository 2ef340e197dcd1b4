from typing import Any


class MessageParseError(Exception):
    """
    Is thrown by the fail-fast parse functions of a codec when the given
    tree is not a valid representation of the message. The try_parse
    functions never throw this error but report the reason instead.

    The 'message_name' field names the message (e.g. 'Authorize request'),
    'wire_format' the format of the rejected tree and 'reason' the
    human-readable explanation naming the offending field(s).
    """

    def __init__(self, message_name: str, wire_format: str, reason: str):
        Exception.__init__(
            self,
            f"The given {wire_format} representation of the {message_name} is "
            f"invalid: {reason}",
        )
        self.message_name = message_name
        self.wire_format = wire_format
        self.reason = reason


class InvalidTreeError(Exception):
    """
    Is thrown by a codec when a tree does not have the shape of the expected
    message at all, e.g. a JSON array instead of an object or an XML element
    with an unexpected name. Reported as a parse failure, like a validation
    error of the payload.
    """


class MessageSerializationError(Exception):
    """
    Is thrown when trying to serialise a message that has no wire
    representation, e.g. a response to a request that timed out.
    """


class UnsupportedFormatError(Exception):
    """
    Is thrown when creating a codec for a wire format the operation has no
    binding for (e.g. XML for OCPP 2.1 messages).
    """

    def __init__(self, operation: str, wire_format: str):
        Exception.__init__(
            self, f"{operation} has no {wire_format} representation"
        )
        self.operation = operation
        self.wire_format = wire_format


class OperationMismatchError(Exception):
    """
    Is thrown when a request or response is constructed with a payload that
    does not belong to its operation, e.g. an AuthorizeRes payload for a
    Reset request.
    """

    def __init__(self, operation: str, expected: str, actual: str):
        Exception.__init__(
            self,
            f"{operation} expects {expected}, got {actual}",
        )
        self.operation = operation
        self.expected = expected
        self.actual = actual


class UnsignedMessageError(Exception):
    """
    Is thrown when asking to verify the signatures of a message that carries
    none. An unsigned message is not the same as one whose signatures failed
    verification, so callers need to check for signatures first.
    """


class KeyTypeError(Exception):
    """Is thrown when loading a private key whose type is not recognised"""


class PrivateKeyReadError(Exception):
    """Is thrown when an error occurs while trying to load a private key"""


class InvalidSettingsValueError(Exception):
    """
    Is thrown when a setting is read and the value is invalid.
    The 'entity' field provides information which group of settings the
    invalid value belongs to.
    """

    def __init__(self, entity: str, setting: str, invalid_value: Any):
        Exception.__init__(
            self, f"Invalid value '{invalid_value}' for {entity} setting {setting}"
        )
        self.entity = entity
        self.setting = setting
        self.invalid_value = invalid_value
