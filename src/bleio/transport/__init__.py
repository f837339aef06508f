"""BLE transport and connection management."""

from .base import (
    BLETransport,
    CharRef,
    ConnectionStatusChanged,
    DeviceHandle,
    DeviceRef,
    DeviceSelector,
    ServiceRef,
)
from .bleak_transport import BleakTransport
from .connection import ConnectionManager, DeviceSession
from .polling import DEFAULT_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL, poll_single_pin
from .status import raise_for_status

__all__ = [
    "BLETransport",
    "BleakTransport",
    "CharRef",
    "ConnectionManager",
    "ConnectionStatusChanged",
    "DEFAULT_POLL_ATTEMPTS",
    "DEFAULT_POLL_INTERVAL",
    "DeviceHandle",
    "DeviceRef",
    "DeviceSelector",
    "DeviceSession",
    "ServiceRef",
    "poll_single_pin",
    "raise_for_status",
]
