import pytest

from ocppcore.shared.messages.enums import Namespace, ProtocolVersion
from ocppcore.shared.messages.operations import (
    AUTHORIZE_V1_6,
    AUTHORIZE_V2_1,
    RESET_V1_6,
    RESET_V2_1,
    SEND_LOCAL_LIST_V1_6,
    get_operation,
    operations,
)


@pytest.mark.parametrize(
    "version, action, expected",
    [
        (ProtocolVersion.OCPP_1_6, "Authorize", AUTHORIZE_V1_6),
        ("ocpp1.6", "SendLocalList", SEND_LOCAL_LIST_V1_6),
        (ProtocolVersion.OCPP_2_1, "Authorize", AUTHORIZE_V2_1),
        ("ocpp2.1", "Reset", RESET_V2_1),
        ("ocpp1.6", "StartTransaction", None),
        ("ocpp3.0", "Authorize", None),
    ],
)
def test_get_operation(version, action, expected):
    assert get_operation(version, action) is expected


@pytest.mark.parametrize("operation", list(operations.values()))
def test_registered_operations(operation):
    assert operation.request_type.__name__ == f"{operation.action}Req"
    assert operation.response_type.__name__ == f"{operation.action}Res"
    if operation.version == ProtocolVersion.OCPP_1_6:
        assert operation.namespace in (Namespace.OCPP_V1_6_CS, Namespace.OCPP_V1_6_CP)
    else:
        assert operation.namespace is None


def test_request_type_determines_response_type():
    request_types = [operation.request_type for operation in operations.values()]

    assert len(request_types) == len(set(request_types))


def test_namespaces():
    assert AUTHORIZE_V1_6.namespace == Namespace.OCPP_V1_6_CS
    assert RESET_V1_6.namespace == Namespace.OCPP_V1_6_CP
