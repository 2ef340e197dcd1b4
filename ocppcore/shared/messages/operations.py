"""
The operations ocppcore knows about, grouped by protocol version. Use the
module level constants directly where the operation is known at development
time and get_operation() where it is only known at runtime, e.g. from the
action field of an OCPP-J call.
"""
from typing import Dict, Optional, Tuple, Union

from ocppcore.shared.messages.enums import Namespace, ProtocolVersion
from ocppcore.shared.messages.envelope import Operation
from ocppcore.shared.messages.v1_6 import body as v16
from ocppcore.shared.messages.v2_1 import body as v21

# OCPP 1.6, initiated by the charge point
AUTHORIZE_V1_6: Operation[v16.AuthorizeReq, v16.AuthorizeRes] = Operation(
    "Authorize",
    ProtocolVersion.OCPP_1_6,
    v16.AuthorizeReq,
    v16.AuthorizeRes,
    Namespace.OCPP_V1_6_CS,
)
BOOT_NOTIFICATION_V1_6: Operation[
    v16.BootNotificationReq, v16.BootNotificationRes
] = Operation(
    "BootNotification",
    ProtocolVersion.OCPP_1_6,
    v16.BootNotificationReq,
    v16.BootNotificationRes,
    Namespace.OCPP_V1_6_CS,
)
HEARTBEAT_V1_6: Operation[v16.HeartbeatReq, v16.HeartbeatRes] = Operation(
    "Heartbeat",
    ProtocolVersion.OCPP_1_6,
    v16.HeartbeatReq,
    v16.HeartbeatRes,
    Namespace.OCPP_V1_6_CS,
)
DATA_TRANSFER_V1_6: Operation[v16.DataTransferReq, v16.DataTransferRes] = Operation(
    "DataTransfer",
    ProtocolVersion.OCPP_1_6,
    v16.DataTransferReq,
    v16.DataTransferRes,
    Namespace.OCPP_V1_6_CS,
)

# OCPP 1.6, initiated by the central system
RESET_V1_6: Operation[v16.ResetReq, v16.ResetRes] = Operation(
    "Reset",
    ProtocolVersion.OCPP_1_6,
    v16.ResetReq,
    v16.ResetRes,
    Namespace.OCPP_V1_6_CP,
)
CHANGE_CONFIGURATION_V1_6: Operation[
    v16.ChangeConfigurationReq, v16.ChangeConfigurationRes
] = Operation(
    "ChangeConfiguration",
    ProtocolVersion.OCPP_1_6,
    v16.ChangeConfigurationReq,
    v16.ChangeConfigurationRes,
    Namespace.OCPP_V1_6_CP,
)
SEND_LOCAL_LIST_V1_6: Operation[
    v16.SendLocalListReq, v16.SendLocalListRes
] = Operation(
    "SendLocalList",
    ProtocolVersion.OCPP_1_6,
    v16.SendLocalListReq,
    v16.SendLocalListRes,
    Namespace.OCPP_V1_6_CP,
)

# OCPP 2.1, JSON only
AUTHORIZE_V2_1: Operation[v21.AuthorizeReq, v21.AuthorizeRes] = Operation(
    "Authorize", ProtocolVersion.OCPP_2_1, v21.AuthorizeReq, v21.AuthorizeRes
)
HEARTBEAT_V2_1: Operation[v21.HeartbeatReq, v21.HeartbeatRes] = Operation(
    "Heartbeat", ProtocolVersion.OCPP_2_1, v21.HeartbeatReq, v21.HeartbeatRes
)
RESET_V2_1: Operation[v21.ResetReq, v21.ResetRes] = Operation(
    "Reset", ProtocolVersion.OCPP_2_1, v21.ResetReq, v21.ResetRes
)


operations: Dict[Tuple[ProtocolVersion, str], Operation] = {
    (operation.version, operation.action): operation
    for operation in (
        AUTHORIZE_V1_6,
        BOOT_NOTIFICATION_V1_6,
        HEARTBEAT_V1_6,
        DATA_TRANSFER_V1_6,
        RESET_V1_6,
        CHANGE_CONFIGURATION_V1_6,
        SEND_LOCAL_LIST_V1_6,
        AUTHORIZE_V2_1,
        HEARTBEAT_V2_1,
        RESET_V2_1,
    )
}


def get_operation(
    version: Union[ProtocolVersion, str], action: str
) -> Optional[Operation]:
    """
    Returns the operation with the given action name for the given protocol
    version, or None if ocppcore does not implement it.
    """
    try:
        version = ProtocolVersion(version)
    except ValueError:
        return None
    return operations.get((version, action))
