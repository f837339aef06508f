"""BLE transport backed by bleak."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict

from bleak import BleakClient, BleakScanner
from bleak.exc import BleakDeviceNotFoundError, BleakError
from bleak_retry_connector import BleakClientWithServiceCache, establish_connection

from ..address import format_mac_address
from ..models.enums import GattStatus
from .base import (
    BLETransport,
    CharRef,
    ConnectionStatusChanged,
    DeviceHandle,
    DeviceRef,
    DeviceSelector,
    ServiceRef,
    StatusListener,
)

_LOGGER = logging.getLogger(__name__)

# Fragments of backend error messages, lower case
_UNREACHABLE_MARKERS = ("not connected", "disconnected", "unreachable")
_ACCESS_DENIED_MARKERS = ("not permitted", "insufficient auth", "insufficient encryption", "access denied")

# Raised by backends on GATT I/O; D-Bus reports a dropped link as EOFError or OSError
_BACKEND_ERRORS = (BleakError, asyncio.TimeoutError, EOFError, OSError)


def status_from_exception(error: BaseException) -> GattStatus:
    """Map a bleak/asyncio exception to the closest GattStatus."""
    if isinstance(
        error,
        (asyncio.TimeoutError, BleakDeviceNotFoundError, EOFError, ConnectionError),
    ):
        return GattStatus.UNREACHABLE

    message = str(error).lower()
    if any(marker in message for marker in _UNREACHABLE_MARKERS):
        return GattStatus.UNREACHABLE
    if any(marker in message for marker in _ACCESS_DENIED_MARKERS):
        return GattStatus.ACCESS_DENIED
    return GattStatus.PROTOCOL_ERROR


class BleakTransport(BLETransport):
    """Transport using BleakScanner and bleak-retry-connector.

    Features:
    - Automatic retry logic with bleak-retry-connector
    - Service caching for faster reconnections
    - Disconnect notifications fanned out to status listeners
    """

    def __init__(
            self,
            timeout: float = 10.0,
            max_attempts: int = 4,
            use_services_cache: bool = True,
            scan_timeout: float = 5.0,
    ):
        """Initialize bleak transport.

        Args:
            timeout: Connection timeout in seconds (default: 10)
            max_attempts: Maximum connection attempts for bleak-retry-connector (default: 4)
            use_services_cache: Enable GATT service caching for faster reconnections (default: True)
            scan_timeout: How long a scan listens for advertisements in seconds (default: 5)
        """
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.use_services_cache = use_services_cache
        self.scan_timeout = scan_timeout

        self._listeners: dict[str, list[StatusListener]] = defaultdict(list)

    async def scan(self, selector: DeviceSelector) -> list[DeviceRef]:
        if selector.address is not None:
            address = format_mac_address(selector.address)
            _LOGGER.debug("Scanning for %s (timeout=%.1fs)", address, self.scan_timeout)
            device = await BleakScanner.find_device_by_address(
                address,
                timeout=self.scan_timeout,
            )
            devices = [device] if device is not None else []
        else:
            _LOGGER.debug("Scanning for '%s' (timeout=%.1fs)", selector.name, self.scan_timeout)
            found = await BleakScanner.discover(timeout=self.scan_timeout)
            devices = [d for d in found if selector.name is None or d.name == selector.name]

        return [DeviceRef(address=d.address, name=d.name, raw=d) for d in devices]

    async def connect(self, ref: DeviceRef) -> DeviceHandle:
        _LOGGER.debug(
            "Connecting to %s with bleak-retry-connector (max_attempts=%d)",
            ref.address,
            self.max_attempts,
        )

        def _disconnected(_client: BleakClient) -> None:
            self._notify(ref.address, ConnectionStatusChanged(connected=False))

        client = await establish_connection(
            client_class=BleakClientWithServiceCache,
            device=ref.raw,
            name=ref.name or ref.address,
            disconnected_callback=_disconnected,
            max_attempts=self.max_attempts,
            use_services_cache=self.use_services_cache,
            timeout=self.timeout,
        )
        return DeviceHandle(ref=ref, raw=client)

    async def list_services(self, device: DeviceHandle) -> list[ServiceRef]:
        client: BleakClient = device.raw
        return [
            ServiceRef(uuid=service.uuid, device=device, raw=service)
            for service in client.services
        ]

    async def list_characteristics(self, service: ServiceRef, uuid: str) -> list[CharRef]:
        return [
            CharRef(uuid=char.uuid, service=service, raw=char)
            for char in service.raw.characteristics
            if char.uuid.lower() == uuid.lower()
        ]

    async def write_char(self, char: CharRef, data: bytes) -> GattStatus:
        client: BleakClient = char.service.device.raw
        try:
            await client.write_gatt_char(char.raw, data, response=True)
        except _BACKEND_ERRORS as e:
            _LOGGER.debug("Write to %s failed: %s", char.uuid, e)
            return status_from_exception(e)
        return GattStatus.SUCCESS

    async def read_char(self, char: CharRef) -> tuple[GattStatus, bytes]:
        client: BleakClient = char.service.device.raw
        try:
            data = await client.read_gatt_char(char.raw)
        except _BACKEND_ERRORS as e:
            _LOGGER.debug("Read from %s failed: %s", char.uuid, e)
            return status_from_exception(e), b""
        return GattStatus.SUCCESS, bytes(data)

    def add_status_listener(self, device: DeviceHandle, listener: StatusListener) -> None:
        self._listeners[device.ref.address].append(listener)

    def remove_status_listener(self, device: DeviceHandle, listener: StatusListener) -> None:
        listeners = self._listeners.get(device.ref.address)
        if listeners and listener in listeners:
            listeners.remove(listener)
        if not listeners:
            self._listeners.pop(device.ref.address, None)

    async def release(self, ref: DeviceHandle | ServiceRef | CharRef) -> None:
        # Services and characteristics hold no backend resources in bleak
        if not isinstance(ref, DeviceHandle):
            return

        client: BleakClient = ref.raw
        if client is not None and client.is_connected:
            _LOGGER.debug("Disconnecting from %s", ref.ref.address)
            await client.disconnect()

    def _notify(self, address: str, event: ConnectionStatusChanged) -> None:
        for listener in list(self._listeners.get(address, ())):
            listener(event)
