"""Transport capability interface used by the connection manager."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

from ..models.enums import GattStatus


@dataclass(frozen=True)
class DeviceSelector:
    """Scan filter: match by advertised name or by 48-bit address."""

    name: str | None = None
    address: int | None = None


@dataclass(frozen=True)
class DeviceRef:
    """A device found by a scan."""

    address: str
    name: str | None = None
    raw: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class DeviceHandle:
    """A connected device."""

    ref: DeviceRef
    raw: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ServiceRef:
    """A GATT service on a connected device."""

    uuid: str
    device: DeviceHandle
    raw: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class CharRef:
    """A GATT characteristic within a service."""

    uuid: str
    service: ServiceRef
    raw: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ConnectionStatusChanged:
    """Connection status change delivered by the transport."""

    connected: bool


StatusListener = Callable[[ConnectionStatusChanged], None]


class BLETransport(ABC):
    """BLE capability object.

    Lifecycle:
        1. scan(selector) -> device refs
        2. connect(ref) -> device handle
        3. list_services / list_characteristics -> refs
        4. write_char / read_char (many times)
        5. release(char...), release(service), release(device)

    Reads and writes report a GattStatus (or a raw backend code) instead of
    raising, so the caller decides how to map failures.
    """

    @abstractmethod
    async def scan(self, selector: DeviceSelector) -> list[DeviceRef]:
        """Find devices matching the selector."""

    @abstractmethod
    async def connect(self, ref: DeviceRef) -> DeviceHandle:
        """Connect to a scanned device."""

    @abstractmethod
    async def list_services(self, device: DeviceHandle) -> list[ServiceRef]:
        """Enumerate all GATT services of a connected device."""

    @abstractmethod
    async def list_characteristics(self, service: ServiceRef, uuid: str) -> list[CharRef]:
        """Return the characteristics of service matching uuid."""

    @abstractmethod
    async def write_char(self, char: CharRef, data: bytes) -> GattStatus | int:
        """Write a characteristic value (with response)."""

    @abstractmethod
    async def read_char(self, char: CharRef) -> tuple[GattStatus | int, bytes]:
        """Read a characteristic value, bypassing any cache."""

    @abstractmethod
    def add_status_listener(self, device: DeviceHandle, listener: StatusListener) -> None:
        """Register for connection status changes of device."""

    @abstractmethod
    def remove_status_listener(self, device: DeviceHandle, listener: StatusListener) -> None:
        """Unregister a status listener (no-op if not registered)."""

    @abstractmethod
    async def release(self, ref: DeviceHandle | ServiceRef | CharRef) -> None:
        """Release a handle; releasing a device handle disconnects it."""
