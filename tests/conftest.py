"""Shared fixtures: an in-memory BLE transport standing in for bleak."""

from __future__ import annotations

import pytest
import pytest_asyncio

from bleio import BleioDevice
from bleio.models.enums import GattStatus, ReadProtocol
from bleio.protocol import CHAR_ADC_READ_UUID, CHAR_READ_UUID, CHAR_WRITE_UUID, SERVICE_UUID
from bleio.transport.base import (
    BLETransport,
    CharRef,
    ConnectionStatusChanged,
    DeviceHandle,
    DeviceRef,
    DeviceSelector,
    ServiceRef,
)

GENERIC_ACCESS_UUID = "00001800-0000-1000-8000-00805f9b34fb"
DEVICE_ADDRESS = "AA:BB:CC:DD:EE:FF"


class FakeTransport(BLETransport):
    """Scriptable transport recording every call.

    Attributes:
        devices: Refs returned by scan
        service_uuids: Services reported by the device
        char_uuids: Characteristics present in the BLEIO service
        write_statuses: Statuses returned by successive writes (SUCCESS when empty)
        reads: Per-characteristic queue of (status, data) read results
    """

    def __init__(self) -> None:
        self.devices = [DeviceRef(address=DEVICE_ADDRESS, name="BLEIO")]
        self.service_uuids = [GENERIC_ACCESS_UUID, SERVICE_UUID]
        self.char_uuids = {CHAR_WRITE_UUID, CHAR_READ_UUID, CHAR_ADC_READ_UUID}
        self.write_statuses: list[int] = []
        self.reads: dict[str, list[tuple[int, bytes]]] = {}
        self.connect_error: Exception | None = None

        self.scans: list[DeviceSelector] = []
        self.calls: list[str] = []
        self.writes: list[tuple[str, bytes]] = []
        self.released: list[object] = []
        self.listeners: list = []

    def queue_read(self, uuid: str, data: bytes, status: int = GattStatus.SUCCESS) -> None:
        self.reads.setdefault(uuid, []).append((status, data))

    def emit(self, connected: bool) -> None:
        for listener in list(self.listeners):
            listener(ConnectionStatusChanged(connected=connected))

    @property
    def io_calls(self) -> list[str]:
        return [c for c in self.calls if c in ("write", "read")]

    async def scan(self, selector: DeviceSelector) -> list[DeviceRef]:
        self.calls.append("scan")
        self.scans.append(selector)
        return list(self.devices)

    async def connect(self, ref: DeviceRef) -> DeviceHandle:
        self.calls.append("connect")
        if self.connect_error is not None:
            raise self.connect_error
        return DeviceHandle(ref=ref)

    async def list_services(self, device: DeviceHandle) -> list[ServiceRef]:
        self.calls.append("list_services")
        return [ServiceRef(uuid=uuid, device=device) for uuid in self.service_uuids]

    async def list_characteristics(self, service: ServiceRef, uuid: str) -> list[CharRef]:
        self.calls.append("list_characteristics")
        if uuid in self.char_uuids:
            return [CharRef(uuid=uuid, service=service)]
        return []

    async def write_char(self, char: CharRef, data: bytes) -> int:
        self.calls.append("write")
        self.writes.append((char.uuid, bytes(data)))
        if self.write_statuses:
            return self.write_statuses.pop(0)
        return GattStatus.SUCCESS

    async def read_char(self, char: CharRef) -> tuple[int, bytes]:
        self.calls.append("read")
        queue = self.reads.get(char.uuid)
        if queue:
            return queue.pop(0)
        return GattStatus.SUCCESS, b""

    def add_status_listener(self, device: DeviceHandle, listener) -> None:
        self.calls.append("subscribe")
        self.listeners.append(listener)

    def remove_status_listener(self, device: DeviceHandle, listener) -> None:
        self.calls.append("unsubscribe")
        if listener in self.listeners:
            self.listeners.remove(listener)

    async def release(self, ref) -> None:
        self.calls.append("release")
        self.released.append(ref)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest_asyncio.fixture
async def device(transport: FakeTransport) -> BleioDevice:
    """Connected device on extended firmware (batch reads, ADC present)."""
    dev = BleioDevice(transport=transport, read_protocol=ReadProtocol.BATCH_READ_ALL)
    await dev.connect()
    transport.calls.clear()
    transport.released.clear()
    return dev
