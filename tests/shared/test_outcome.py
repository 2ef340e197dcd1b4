import pytest

from ocppcore.shared.outcome import Outcome, OutcomeKind


@pytest.mark.parametrize(
    "outcome, kind, status_code",
    [
        (Outcome.success(), OutcomeKind.SUCCESS, 200),
        (Outcome.timeout(), OutcomeKind.TIMEOUT, 408),
        (Outcome.transport_error(), OutcomeKind.TRANSPORT_ERROR, 503),
        (Outcome.protocol_error("NotSupported"), OutcomeKind.PROTOCOL_ERROR, 422),
        (Outcome.format_error("bad"), OutcomeKind.FORMAT_ERROR, 400),
        (Outcome.signature_error("bad"), OutcomeKind.SIGNATURE_ERROR, 401),
        (Outcome.internal_error(), OutcomeKind.INTERNAL_ERROR, 500),
    ],
)
def test_status_codes(outcome, kind, status_code):
    assert outcome.kind == kind
    assert outcome.status_code == status_code
    assert outcome.is_success == (kind == OutcomeKind.SUCCESS)


def test_explicit_status_code_is_kept():
    assert Outcome(OutcomeKind.PROTOCOL_ERROR, status_code=409).status_code == 409


def test_descriptions():
    assert Outcome.format_error("idTag missing").description == (
        "Invalid data format: idTag missing"
    )
    assert Outcome.signature_error("untrusted key").description == (
        "Invalid signature(s): untrusted key"
    )
    assert str(Outcome.success()) == "Success"
    assert str(Outcome.timeout()) == "Timeout (408): Request timed out"


def test_protocol_error():
    outcome = Outcome.protocol_error(
        "PropertyConstraintViolation", "Bad value", {"field": "type"}
    )

    assert outcome.error_code == "PropertyConstraintViolation"
    assert outcome.description == "Bad value"
    assert outcome.details == {"field": "type"}


def test_from_exception():
    outcome = Outcome.from_exception(ValueError("boom"))

    assert outcome.kind == OutcomeKind.INTERNAL_ERROR
    assert outcome.status_code == 500
    assert outcome.description == "boom"
    assert outcome.details == {"exception": "ValueError"}
    # Details do not take part in the hash
    assert hash(outcome) == hash(Outcome.from_exception(ValueError("boom")))
    assert Outcome.from_exception(KeyError()).description == "KeyError"
