from enum import Enum

# For JSON schema type integer used as an unsigned 32 bit value
UINT_32_MAX = 2**32 - 1

# JSON keys that belong to the envelope rather than to the message payload
SIGNATURES_KEY = "signatures"
CUSTOM_DATA_KEY = "customData"

# Base of the JSON-LD contexts of all message types
JSON_LD_CONTEXT_BASE = "https://open.charging.cloud/context/ocpp"


class ProtocolVersion(str, Enum):
    """
    The OCPP generations supported. OCPP 1.6 addresses a single charge box,
    OCPP 2.1 supports networking nodes which route messages over several hops
    and record the hops in a network path.
    """

    OCPP_1_6 = "ocpp1.6"
    OCPP_2_1 = "ocpp2.1"

    @property
    def context_segment(self) -> str:
        return "v" + self.value[len("ocpp") :]


class Namespace(str, Enum):
    """
    XML namespaces of the OCPP 1.6 SOAP binding. Messages handled by the
    central system live in the CS namespace, messages handled by the charge
    point in the CP namespace.
    """

    OCPP_V1_6_CS = "urn://Ocpp/Cs/2015/10/"
    OCPP_V1_6_CP = "urn://Ocpp/Cp/2015/10/"


class WireFormat(str, Enum):
    JSON = "JSON"
    XML = "XML"


class SigningMethod(str, Enum):
    """
    The elliptic curves used for message signatures. Each curve is used with
    the hash function of matching strength.
    """

    SECP256R1 = "secp256r1"
    SECP384R1 = "secp384r1"
    SECP521R1 = "secp521r1"


class SignaturePolicy(str, Enum):
    """
    ALL: every signature attached to a message must be valid
    ANY: a single valid signature is sufficient
    """

    ALL = "all"
    ANY = "any"


class SigningAction(str, Enum):
    """What a signature policy does with an outgoing message of a given type"""

    SIGN = "Sign"
    FORWARD_UNSIGNED = "ForwardUnsigned"


class VerificationAction(str, Enum):
    """
    What a signature policy does with an incoming message of a given type.
    ACCEPT_UNVERIFIED accepts the message without looking at its signatures,
    DROP rejects it no matter what it carries.
    """

    VERIFY_ALL = "VerifyAll"
    VERIFY_ANY = "VerifyAny"
    ACCEPT_UNVERIFIED = "AcceptUnverified"
    DROP = "Drop"


class SignatureState(str, Enum):
    UNSIGNED = "Unsigned"
    VALID = "Valid"
    INVALID = "Invalid"
