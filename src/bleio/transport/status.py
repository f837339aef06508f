"""Mapping of transport status codes to exceptions."""

from __future__ import annotations

from ..exceptions import (
    LinkLostError,
    PermissionDeniedError,
    ProtocolFaultError,
    TransportError,
    TransportFailureError,
)
from ..models.enums import GattStatus

_STATUS_ERRORS: dict[int, tuple[type[TransportError], str]] = {
    GattStatus.UNREACHABLE: (LinkLostError, "device unreachable (link may have been lost)"),
    GattStatus.PROTOCOL_ERROR: (ProtocolFaultError, "GATT protocol error"),
    GattStatus.ACCESS_DENIED: (PermissionDeniedError, "access denied"),
}


def raise_for_status(status: GattStatus | int, action: str) -> None:
    """Raise the TransportError subclass matching a non-success status.

    Args:
        status: Status returned by a transport read or write
        action: What was attempted, used in the message (e.g. "write")

    Raises:
        LinkLostError: status is UNREACHABLE
        ProtocolFaultError: status is PROTOCOL_ERROR
        PermissionDeniedError: status is ACCESS_DENIED
        TransportFailureError: any other non-success status
    """
    if status == GattStatus.SUCCESS:
        return

    code = int(status)
    error_class, reason = _STATUS_ERRORS.get(
        code, (TransportFailureError, f"status {code}")
    )
    raise error_class(f"{action.capitalize()} failed: {reason}", status=code)
