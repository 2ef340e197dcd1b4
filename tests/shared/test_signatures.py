from dataclasses import replace
from datetime import datetime, timezone

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from ocppcore.shared.exceptions import (
    KeyTypeError,
    MessageSerializationError,
    PrivateKeyReadError,
    UnsignedMessageError,
)
from ocppcore.shared.json_codec import JSONCodec
from ocppcore.shared.messages.datatypes import CustomData, Signature
from ocppcore.shared.messages.enums import (
    SignaturePolicy,
    SignatureState,
    SigningAction,
    SigningMethod,
    VerificationAction,
)
from ocppcore.shared.messages.envelope import Response
from ocppcore.shared.messages.operations import AUTHORIZE_V1_6
from ocppcore.shared.messages.v1_6.body import AuthorizeReq, AuthorizeRes
from ocppcore.shared.messages.v1_6.datatypes import AuthorizationStatus, IdTagInfo
from ocppcore.shared.security import (
    KeyPair,
    SignatureRules,
    SigningRule,
    attach,
    message_context,
    public_key_id,
    sign,
    signature_state,
    verify,
)
from ocppcore.shared.settings import SettingKey, shared_settings
from ocppcore.shared.xml_codec import XMLCodec

CODEC = JSONCodec(AUTHORIZE_V1_6)


class TestKeyPair:
    @pytest.mark.parametrize(
        "method, key_id_length",
        [
            (SigningMethod.SECP256R1, 33),
            (SigningMethod.SECP384R1, 49),
            (SigningMethod.SECP521R1, 67),
        ],
    )
    def test_generate(self, method, key_id_length):
        key_pair = KeyPair.generate(method)

        assert key_pair.signing_method == method
        assert len(key_pair.key_id) == key_id_length
        assert key_pair.key_id == public_key_id(key_pair.public_key)

    def test_from_pem(self, key_pair, tmp_path):
        pem = key_pair.private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
        key_file = tmp_path / "key.pem"
        key_file.write_bytes(pem)

        assert KeyPair.from_pem(pem).key_id == key_pair.key_id
        assert KeyPair.load(str(key_file)).key_id == key_pair.key_id

    def test_unreadable_keys(self, tmp_path):
        with pytest.raises(PrivateKeyReadError):
            KeyPair.from_pem(b"no key")
        with pytest.raises(PrivateKeyReadError):
            KeyPair.load(str(tmp_path / "missing.pem"))

    def test_unsupported_keys(self):
        with pytest.raises(KeyTypeError):
            KeyPair(ed25519.Ed25519PrivateKey.generate())
        with pytest.raises(KeyTypeError):
            KeyPair(ec.generate_private_key(ec.SECP256K1()))


class TestSign:
    def test_sign_and_verify(self, authorize_request, key_pair):
        signed = sign(CODEC, authorize_request, key_pair, name="CSMS")

        assert authorize_request.signatures == ()
        assert len(signed.signatures) == 1
        signature = signed.signatures[0]
        assert signature.key_id == key_pair.key_id
        assert signature.signing_method == SigningMethod.SECP256R1
        assert signature.name == "CSMS"
        assert verify(CODEC, signed, [key_pair])
        assert signature_state(CODEC, signed, [key_pair]) == SignatureState.VALID

    @pytest.mark.parametrize("method", list(SigningMethod))
    def test_all_signing_methods(self, authorize_request, method):
        key_pair = KeyPair.generate(method)

        signed = sign(CODEC, authorize_request, key_pair)

        assert verify(CODEC, signed, [key_pair.public_key])

    def test_signature_survives_the_wire(self, authorize_request, key_pair):
        signed = sign(
            CODEC,
            authorize_request,
            key_pair,
            description="Signed by the CSMS",
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        tree = CODEC.request_to_tree(signed)
        parsed = CODEC.parse_request(tree, "1", "CSMS")

        assert tree["signatures"][0]["signingMethod"] == "secp256r1"
        assert tree["signatures"][0]["timestamp"] == "2024-01-01T00:00:00.000Z"
        assert parsed.signatures == signed.signatures
        assert verify(CODEC, parsed, [key_pair.key_id])

    def test_response(self, authorize_request, key_pair):
        response = AUTHORIZE_V1_6.response(
            authorize_request,
            AuthorizeRes(id_tag_info=IdTagInfo(status=AuthorizationStatus.ACCEPTED)),
        )

        signed = sign(CODEC, response, key_pair)

        assert isinstance(signed, Response)
        assert signed.request is authorize_request
        assert verify(CODEC, signed, [key_pair])

    def test_response_without_payload(self, authorize_request, key_pair):
        with pytest.raises(MessageSerializationError):
            sign(CODEC, Response.timeout(authorize_request), key_pair)

    def test_xml_codec(self, authorize_request, key_pair):
        codec = XMLCodec(AUTHORIZE_V1_6)

        signed = sign(codec, authorize_request, key_pair)

        assert verify(codec, signed, [key_pair])
        assert not verify(CODEC, signed, [key_pair])


class TestVerify:
    def test_unsigned_message(self, authorize_request, key_pair):
        with pytest.raises(UnsignedMessageError):
            verify(CODEC, authorize_request, [key_pair])

        assert (
            signature_state(CODEC, authorize_request, [key_pair])
            == SignatureState.UNSIGNED
        )

    def test_modified_payload(self, authorize_request, key_pair):
        signed = sign(CODEC, authorize_request, key_pair)
        tampered = replace(signed, payload=AuthorizeReq(id_tag="OTHER"))

        assert not verify(CODEC, tampered, [key_pair])
        assert signature_state(CODEC, tampered, [key_pair]) == SignatureState.INVALID

    def test_custom_data_is_signed(self, authorize_request, key_pair):
        request = replace(
            authorize_request, custom_data=CustomData(vendor_id="com.example")
        )
        signed = sign(CODEC, request, key_pair)

        assert verify(CODEC, signed, [key_pair])
        assert not verify(CODEC, replace(signed, custom_data=None), [key_pair])

    def test_untrusted_key(self, authorize_request, key_pair, other_key_pair):
        signed = sign(CODEC, authorize_request, key_pair)

        assert not verify(CODEC, signed, [other_key_pair])
        assert not verify(CODEC, signed, [])

    def test_malformed_signatures(self, authorize_request, key_pair):
        garbage_value = attach(
            authorize_request, Signature(key_id=key_pair.key_id, value=b"garbage")
        )
        garbage_key = attach(
            authorize_request, Signature(key_id=b"\x02garbage", value=b"garbage")
        )

        assert not verify(CODEC, garbage_value, [key_pair])
        assert not verify(CODEC, garbage_key, [b"\x02garbage"])

    def test_wrong_signing_method(self, authorize_request, key_pair):
        signed = sign(CODEC, authorize_request, key_pair)
        signature = signed.signatures[0].model_copy(
            update={"signing_method": SigningMethod.SECP384R1}
        )

        assert not verify(CODEC, replace(signed, signatures=(signature,)), [key_pair])

    def test_policies(self, authorize_request, key_pair, other_key_pair):
        signed = sign(
            CODEC, sign(CODEC, authorize_request, key_pair), other_key_pair
        )

        assert len(signed.signatures) == 2
        assert verify(CODEC, signed, [key_pair, other_key_pair])
        assert not verify(CODEC, signed, [key_pair])
        assert not verify(CODEC, signed, [key_pair], SignaturePolicy.ALL)
        assert verify(CODEC, signed, [key_pair], SignaturePolicy.ANY)

    def test_policy_from_settings(self, authorize_request, key_pair, other_key_pair):
        shared_settings[SettingKey.SIGNATURE_POLICY] = SignaturePolicy.ANY
        signed = sign(
            CODEC, sign(CODEC, authorize_request, key_pair), other_key_pair
        )

        assert verify(CODEC, signed, [other_key_pair])

    def test_untrusted_key_type(self, authorize_request, key_pair):
        signed = sign(CODEC, authorize_request, key_pair)

        with pytest.raises(KeyTypeError):
            verify(CODEC, signed, ["not a key"])


class TestSignatureRules:
    def test_message_context(self, authorize_request):
        response = Response.timeout(authorize_request)

        assert message_context(authorize_request) == (
            AUTHORIZE_V1_6.request_context
        )
        assert message_context(response) == AUTHORIZE_V1_6.response_context

    def test_defaults(self, authorize_request):
        rules = SignatureRules()

        assert rules.sign(CODEC, authorize_request) is authorize_request
        assert rules.verify(CODEC, authorize_request)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"default_signing_action": SigningAction.SIGN},
            {"default_verification_action": VerificationAction.VERIFY_ALL},
            {"default_verification_action": VerificationAction.VERIFY_ANY},
        ],
    )
    def test_default_action_needs_keys(self, kwargs):
        with pytest.raises(ValueError):
            SignatureRules(**kwargs)

    def test_signing_rule_needs_key_pair(self):
        with pytest.raises(ValueError):
            SigningRule(AUTHORIZE_V1_6.request_context)

    def test_sign_per_context(self, authorize_request, key_pair):
        rules = SignatureRules()
        rules.add_signing_rule(
            AUTHORIZE_V1_6.request_context, key_pair, name="csms001"
        )
        response = AUTHORIZE_V1_6.response(
            authorize_request,
            AuthorizeRes(id_tag_info=IdTagInfo(status=AuthorizationStatus.ACCEPTED)),
        )

        signed = rules.sign(CODEC, authorize_request)

        assert len(signed.signatures) == 1
        assert signed.signatures[0].name == "csms001"
        assert verify(CODEC, signed, [key_pair])
        # Only the request type has a rule
        assert not rules.sign(CODEC, response).is_signed

    def test_forward_unsigned_overrides_default(self, authorize_request, key_pair):
        rules = SignatureRules(
            default_signing_action=SigningAction.SIGN, default_key_pair=key_pair
        )
        rules.add_signing_rule(
            AUTHORIZE_V1_6.request_context, action=SigningAction.FORWARD_UNSIGNED
        )

        assert not rules.sign(CODEC, authorize_request).is_signed

    def test_verify_all(self, authorize_request, key_pair, other_key_pair):
        rules = SignatureRules()
        rules.add_verification_rule(
            AUTHORIZE_V1_6.request_context, trusted_keys=[key_pair]
        )
        signed = sign(CODEC, authorize_request, key_pair)

        assert rules.verify(CODEC, signed)
        assert not rules.verify(CODEC, authorize_request)
        assert not rules.verify(CODEC, sign(CODEC, signed, other_key_pair))

    def test_verify_any(self, authorize_request, key_pair, other_key_pair):
        rules = SignatureRules()
        rules.add_verification_rule(
            AUTHORIZE_V1_6.request_context,
            VerificationAction.VERIFY_ANY,
            [key_pair],
        )
        signed = sign(CODEC, sign(CODEC, authorize_request, key_pair), other_key_pair)

        assert rules.verify(CODEC, signed)

    def test_verify_uses_default_trusted_keys(self, authorize_request, key_pair):
        rules = SignatureRules(
            default_verification_action=VerificationAction.VERIFY_ALL,
            default_trusted_keys=[key_pair],
        )
        rules.add_verification_rule(AUTHORIZE_V1_6.request_context)

        assert rules.verify(CODEC, sign(CODEC, authorize_request, key_pair))
        assert not rules.verify(CODEC, authorize_request)

    def test_drop(self, authorize_request, key_pair):
        rules = SignatureRules()
        rules.add_verification_rule(
            AUTHORIZE_V1_6.request_context, VerificationAction.DROP
        )

        assert not rules.verify(CODEC, sign(CODEC, authorize_request, key_pair))

    def test_accept_unverified_ignores_bad_signatures(self, authorize_request):
        rules = SignatureRules(
            default_verification_action=VerificationAction.VERIFY_ALL,
            default_trusted_keys=[b"\x02unknown"],
        )
        rules.add_verification_rule(
            AUTHORIZE_V1_6.request_context, VerificationAction.ACCEPT_UNVERIFIED
        )
        tampered = attach(
            authorize_request, Signature(key_id=b"\x02garbage", value=b"garbage")
        )

        assert rules.verify(CODEC, tampered)

    def test_rule_lookup(self, key_pair):
        rules = SignatureRules()
        rule = rules.add_signing_rule(AUTHORIZE_V1_6.response_context, key_pair)

        assert rules.signing_rule(AUTHORIZE_V1_6.response_context) is rule
        assert rules.signing_rule(AUTHORIZE_V1_6.request_context) == (
            rules.default_signing_rule
        )
        assert rules.verification_rule(AUTHORIZE_V1_6.request_context) == (
            rules.default_verification_rule
        )

    def test_invalid_trusted_key(self):
        with pytest.raises(KeyTypeError):
            SignatureRules().add_verification_rule(
                AUTHORIZE_V1_6.request_context, trusted_keys=["not a key"]
            )
