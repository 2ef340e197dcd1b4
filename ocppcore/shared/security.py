"""
Signing and verification of messages.

A signature is an ECDSA signature over the canonical form of a message (see
MessageCodec.canonical_form), i.e. over the message without its signatures.
Several parties may sign the same message; every signature is independent of
the others.

A signer is identified by the X9.62 compressed point of its public key, which
is what Signature.key_id holds. Verification only accepts signatures by keys
the caller trusts.
"""
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Iterable, Optional, Set, Tuple, TypeVar, Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ocppcore.shared.exceptions import (
    KeyTypeError,
    PrivateKeyReadError,
    UnsignedMessageError,
)
from ocppcore.shared.imessage_codec import MessageCodec
from ocppcore.shared.messages.datatypes import CustomData, Signature
from ocppcore.shared.messages.enums import (
    SignaturePolicy,
    SignatureState,
    SigningAction,
    SigningMethod,
    VerificationAction,
)
from ocppcore.shared.messages.envelope import Request, Response
from ocppcore.shared.settings import SettingKey, shared_settings

logger = logging.getLogger(__name__)

MessageT = TypeVar("MessageT", Request, Response)

# Each curve is used with the hash function of the same strength
_CURVES = {
    SigningMethod.SECP256R1: (ec.SECP256R1, hashes.SHA256),
    SigningMethod.SECP384R1: (ec.SECP384R1, hashes.SHA384),
    SigningMethod.SECP521R1: (ec.SECP521R1, hashes.SHA512),
}


def _signing_method(curve: ec.EllipticCurve) -> SigningMethod:
    for method, (curve_type, _) in _CURVES.items():
        if isinstance(curve, curve_type):
            return method
    raise KeyTypeError(f"Unsupported elliptic curve {curve.name}")


def public_key_id(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """The X9.62 compressed point of the public key"""
    return public_key.public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
    )


class KeyPair:
    """An ECDSA private key on one of the supported curves"""

    def __init__(self, private_key: ec.EllipticCurvePrivateKey):
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise KeyTypeError(
                f"Expected an elliptic curve private key, got "
                f"{type(private_key).__name__}"
            )
        self.signing_method = _signing_method(private_key.curve)
        self.private_key = private_key

    @classmethod
    def generate(cls, method: SigningMethod = SigningMethod.SECP256R1) -> "KeyPair":
        curve_type, _ = _CURVES[SigningMethod(method)]
        return cls(ec.generate_private_key(curve_type()))

    @classmethod
    def from_pem(cls, data: bytes, password: Optional[bytes] = None) -> "KeyPair":
        try:
            private_key = serialization.load_pem_private_key(data, password=password)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise PrivateKeyReadError(
                f"{exc.__class__.__name__}: Could not read the private key: {exc}"
            ) from exc
        return cls(private_key)

    @classmethod
    def load(cls, path: str, password: Optional[bytes] = None) -> "KeyPair":
        """Reads a PEM encoded private key from a file"""
        try:
            with open(path, "rb") as key_file:
                data = key_file.read()
        except OSError as exc:
            raise PrivateKeyReadError(
                f"{exc.__class__.__name__}: Could not read the private key "
                f"from {path}: {exc}"
            ) from exc
        return cls.from_pem(data, password)

    @property
    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self.private_key.public_key()

    @property
    def key_id(self) -> bytes:
        return public_key_id(self.public_key)

    def sign(self, data: bytes) -> bytes:
        """DER encoded ECDSA signature over the data"""
        _, hash_type = _CURVES[self.signing_method]
        return self.private_key.sign(data, ec.ECDSA(hash_type()))


TrustedKey = Union[KeyPair, ec.EllipticCurvePublicKey, bytes]


def _trusted_key_ids(trusted_keys: Iterable[TrustedKey]) -> Set[bytes]:
    key_ids = set()
    for key in trusted_keys:
        if isinstance(key, KeyPair):
            key_ids.add(key.key_id)
        elif isinstance(key, ec.EllipticCurvePublicKey):
            key_ids.add(public_key_id(key))
        elif isinstance(key, bytes):
            key_ids.add(key)
        else:
            raise KeyTypeError(f"Cannot trust a key of type {type(key).__name__}")
    return key_ids


def attach(message: MessageT, *signatures: Signature) -> MessageT:
    """Returns a copy of the message with the given signatures appended"""
    return replace(message, signatures=message.signatures + tuple(signatures))


def sign(
    codec: MessageCodec,
    message: MessageT,
    key_pair: KeyPair,
    name: Optional[str] = None,
    description: Optional[str] = None,
    custom_data: Optional[CustomData] = None,
    timestamp: Optional[datetime] = None,
) -> MessageT:
    """
    Signs the canonical form of the message and returns a copy of the message
    with the new signature appended. Signatures already present are not part
    of the signed data, so every signer signs the same bytes.
    """
    signature = Signature(
        key_id=key_pair.key_id,
        value=key_pair.sign(codec.canonical_form(message)),
        signing_method=key_pair.signing_method,
        name=name,
        description=description,
        timestamp=timestamp,
        custom_data=custom_data,
    )
    logger.debug(f"Signed {message.name} with key {signature}")
    return attach(message, signature)


def _verify_signature(
    signature: Signature, data: bytes, trusted_key_ids: Set[bytes]
) -> bool:
    if signature.key_id not in trusted_key_ids:
        logger.debug(f"Signature {signature} is by an untrusted key")
        return False

    curve_type, hash_type = _CURVES[signature.signing_method]
    try:
        public_key = ec.EllipticCurvePublicKey.from_encoded_point(
            curve_type(), signature.key_id
        )
        public_key.verify(signature.value, data, ec.ECDSA(hash_type()))
    except (InvalidSignature, ValueError) as exc:
        logger.debug(
            f"Signature {signature} is invalid: {exc.__class__.__name__} {exc}"
        )
        return False
    return True


def verify(
    codec: MessageCodec,
    message: Union[Request, Response],
    trusted_keys: Iterable[TrustedKey],
    policy: Optional[SignaturePolicy] = None,
) -> bool:
    """
    Checks the signatures of the message against its canonical form.

    With SignaturePolicy.ALL every signature must be valid and made by a
    trusted key, with SignaturePolicy.ANY one such signature is enough. If no
    policy is given, the one configured in the shared settings is used.

    Raises:
        UnsignedMessageError if the message carries no signatures at all
    """
    if not message.signatures:
        raise UnsignedMessageError(f"The {message.name} carries no signatures")

    policy = SignaturePolicy(policy or shared_settings[SettingKey.SIGNATURE_POLICY])
    data = codec.canonical_form(message)
    trusted_key_ids = _trusted_key_ids(trusted_keys)
    results = [
        _verify_signature(signature, data, trusted_key_ids)
        for signature in message.signatures
    ]

    if policy == SignaturePolicy.ANY:
        return any(results)
    return all(results)


def signature_state(
    codec: MessageCodec,
    message: Union[Request, Response],
    trusted_keys: Iterable[TrustedKey],
    policy: Optional[SignaturePolicy] = None,
) -> SignatureState:
    if not message.signatures:
        return SignatureState.UNSIGNED
    if verify(codec, message, trusted_keys, policy):
        return SignatureState.VALID
    return SignatureState.INVALID


def message_context(message: Union[Request, Response]) -> str:
    """The JSON-LD context of the message's type, e.g. .../v1.6/AuthorizeRequest"""
    if isinstance(message, Response):
        return message.operation.response_context
    return message.operation.request_context


@dataclass(frozen=True)
class SigningRule:
    """How outgoing messages of the type identified by context are signed"""

    context: str
    action: SigningAction = SigningAction.SIGN
    key_pair: Optional[KeyPair] = None
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        if self.action == SigningAction.SIGN and self.key_pair is None:
            raise ValueError(f"Signing rule for {self.context} needs a key pair")


@dataclass(frozen=True)
class VerificationRule:
    """How incoming messages of the type identified by context are verified"""

    context: str
    action: VerificationAction = VerificationAction.VERIFY_ALL
    trusted_keys: Tuple[TrustedKey, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "trusted_keys", tuple(self.trusted_keys))
        # Fail early on keys we could never match
        _trusted_key_ids(self.trusted_keys)


class SignatureRules:
    """
    Signing and verification rules per message type. A message type is
    identified by its JSON-LD context (Operation.request_context and
    Operation.response_context), so requests and responses of the same
    operation can be treated differently.

    Message types without a rule get the default actions. By default
    outgoing messages are forwarded unsigned and incoming ones are accepted
    without verification.
    """

    def __init__(
        self,
        default_signing_action: SigningAction = SigningAction.FORWARD_UNSIGNED,
        default_key_pair: Optional[KeyPair] = None,
        default_verification_action: VerificationAction = (
            VerificationAction.ACCEPT_UNVERIFIED
        ),
        default_trusted_keys: Iterable[TrustedKey] = (),
    ):
        self.default_signing_rule = SigningRule(
            "default", SigningAction(default_signing_action), default_key_pair
        )
        default_verification_action = VerificationAction(default_verification_action)
        default_trusted_keys = tuple(default_trusted_keys)
        if (
            default_verification_action
            in (VerificationAction.VERIFY_ALL, VerificationAction.VERIFY_ANY)
            and not default_trusted_keys
        ):
            raise ValueError(
                f"Default verification action {default_verification_action.value} "
                "needs trusted keys"
            )
        self.default_verification_rule = VerificationRule(
            "default", default_verification_action, default_trusted_keys
        )
        self._signing_rules: Dict[str, SigningRule] = {}
        self._verification_rules: Dict[str, VerificationRule] = {}

    def add_signing_rule(
        self,
        context: str,
        key_pair: Optional[KeyPair] = None,
        action: SigningAction = SigningAction.SIGN,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> SigningRule:
        """Adds or replaces the signing rule for the given context"""
        rule = SigningRule(context, SigningAction(action), key_pair, name, description)
        self._signing_rules[context] = rule
        return rule

    def add_verification_rule(
        self,
        context: str,
        action: VerificationAction = VerificationAction.VERIFY_ALL,
        trusted_keys: Iterable[TrustedKey] = (),
    ) -> VerificationRule:
        """
        Adds or replaces the verification rule for the given context. Without
        trusted keys of its own the rule uses the default trusted keys.
        """
        rule = VerificationRule(
            context, VerificationAction(action), tuple(trusted_keys)
        )
        self._verification_rules[context] = rule
        return rule

    def signing_rule(self, context: str) -> SigningRule:
        return self._signing_rules.get(context, self.default_signing_rule)

    def verification_rule(self, context: str) -> VerificationRule:
        return self._verification_rules.get(context, self.default_verification_rule)

    def sign(
        self,
        codec: MessageCodec,
        message: MessageT,
        timestamp: Optional[datetime] = None,
    ) -> MessageT:
        """
        Signs the message if the rule for its type says so, otherwise returns
        it unchanged.
        """
        rule = self.signing_rule(message_context(message))
        if rule.action == SigningAction.FORWARD_UNSIGNED:
            return message
        return sign(
            codec,
            message,
            rule.key_pair,
            name=rule.name,
            description=rule.description,
            timestamp=timestamp,
        )

    def verify(self, codec: MessageCodec, message: Union[Request, Response]) -> bool:
        """
        Whether the message is acceptable under the rule for its type. Unlike
        the module level verify(), an unsigned message is not an error here:
        it is rejected if the rule requires verification.
        """
        context = message_context(message)
        rule = self.verification_rule(context)

        if rule.action == VerificationAction.ACCEPT_UNVERIFIED:
            return True
        if rule.action == VerificationAction.DROP:
            logger.debug(f"Dropping {message.name}, rule for {context} is Drop")
            return False
        if not message.signatures:
            logger.debug(f"Rejecting the unsigned {message.name} ({context})")
            return False

        trusted_keys = rule.trusted_keys or self.default_verification_rule.trusted_keys
        policy = (
            SignaturePolicy.ANY
            if rule.action == VerificationAction.VERIFY_ANY
            else SignaturePolicy.ALL
        )
        return verify(codec, message, trusted_keys, policy)
