import pytest

from ocppcore.shared.identity import NodeId, RequestId
from ocppcore.shared.messages.envelope import Request
from ocppcore.shared.messages.operations import AUTHORIZE_V1_6
from ocppcore.shared.messages.v1_6.body import AuthorizeReq
from ocppcore.shared.security import KeyPair
from ocppcore.shared.settings import shared_settings


@pytest.fixture(autouse=True)
def restore_shared_settings():
    saved = dict(shared_settings)
    yield
    shared_settings.clear()
    shared_settings.update(saved)


@pytest.fixture
def authorize_request() -> Request:
    return AUTHORIZE_V1_6.request(
        AuthorizeReq(id_tag="ABCDEF12"),
        request_id=RequestId("42"),
        sender_id=NodeId("CP-1"),
        destination_id=NodeId("CSMS"),
    )


@pytest.fixture(scope="session")
def key_pair() -> KeyPair:
    return KeyPair.generate()


@pytest.fixture(scope="session")
def other_key_pair() -> KeyPair:
    return KeyPair.generate()
