"""BLE connection management."""

from __future__ import annotations

import asyncio
import logging
import threading

from ..address import format_mac_address, pack_address, parse_mac_address
from ..exceptions import (
    BLEConnectionError,
    BleioError,
    BLETimeoutError,
    CharacteristicNotFoundError,
    DeviceNotFoundError,
    FeatureUnavailableError,
    NotConnectedError,
    ServiceNotFoundError,
)
from ..models.enums import ConnectionStatus
from ..models.readings import DigitalReading
from ..protocol import (
    CHAR_ADC_READ_UUID,
    CHAR_READ_UUID,
    CHAR_WRITE_UUID,
    DEFAULT_DEVICE_NAME,
    SERVICE_UUID,
)
from .base import (
    BLETransport,
    CharRef,
    ConnectionStatusChanged,
    DeviceHandle,
    DeviceSelector,
    ServiceRef,
)
from .bleak_transport import BleakTransport
from .polling import DEFAULT_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL, poll_single_pin
from .status import raise_for_status

_LOGGER = logging.getLogger(__name__)


class DeviceSession:
    """One connected BLEIO peripheral and the GATT handles resolved on it.

    Handles stay None until resolution succeeds. The session becomes READY
    only once the device, service, write and read characteristics are all
    resolved; the ADC characteristic is optional.

    Reads and writes are serialized: the firmware handles one request at a
    time and does not pipeline.
    """

    def __init__(self, transport: BLETransport):
        self._transport = transport

        self.device: DeviceHandle | None = None
        self.service: ServiceRef | None = None
        self.write_char: CharRef | None = None
        self.read_char: CharRef | None = None
        self.adc_char: CharRef | None = None

        self._status = ConnectionStatus.DISCONNECTED
        # Status change events may arrive from a backend thread
        self._status_lock = threading.Lock()
        self._io_lock = asyncio.Lock()
        self._subscribed = False

    @property
    def status(self) -> ConnectionStatus:
        with self._status_lock:
            return self._status

    @property
    def is_ready(self) -> bool:
        return self.status == ConnectionStatus.READY

    @property
    def has_adc(self) -> bool:
        """Whether the firmware exposes the ADC read characteristic."""
        return self.adc_char is not None

    def _set_status(self, status: ConnectionStatus) -> None:
        with self._status_lock:
            self._status = status

    def handle_status_change(self, event: ConnectionStatusChanged) -> None:
        """Apply a connection status change reported by the transport.

        Handles are kept on LOST; reconnecting is up to the transport.
        """
        with self._status_lock:
            if self._status in (ConnectionStatus.DISCONNECTED, ConnectionStatus.CONNECTING):
                return
            previous = self._status
            current = ConnectionStatus.READY if event.connected else ConnectionStatus.LOST
            self._status = current

        if previous == current:
            return
        if event.connected:
            _LOGGER.info("Reconnected to %s", self._address)
        else:
            _LOGGER.warning("Connection to %s lost", self._address)

    def mark_connecting(self) -> None:
        self._set_status(ConnectionStatus.CONNECTING)

    def subscribe(self) -> None:
        """Register for status changes and mark the session READY."""
        if self.device is None:
            raise BLEConnectionError("Cannot subscribe without a device handle")
        self._transport.add_status_listener(self.device, self.handle_status_change)
        self._subscribed = True
        self._set_status(ConnectionStatus.READY)

    def ensure_ready(self) -> None:
        """Raise NotConnectedError unless the session is READY."""
        status = self.status
        if status == ConnectionStatus.LOST:
            raise NotConnectedError("Connection to device lost, reconnect and retry")
        if status != ConnectionStatus.READY:
            raise NotConnectedError("Not connected")

    async def write(self, data: bytes) -> None:
        """Write a command frame to the write characteristic.

        Raises:
            NotConnectedError: If the session is not READY
            TransportError: If the transport reports a failure
        """
        async with self._io_lock:
            self.ensure_ready()
            status = await self._transport.write_char(self.write_char, data)
        raise_for_status(status, "write")

    async def read_inputs(self) -> bytes:
        """Read the raw all-inputs frame."""
        return await self._read("read_char")

    async def read_adc(self) -> bytes:
        """Read the raw ADC values frame.

        Raises:
            FeatureUnavailableError: If the firmware has no ADC characteristic
        """
        return await self._read("adc_char")

    async def poll_pin(
            self,
            pin: int,
            attempts: int = DEFAULT_POLL_ATTEMPTS,
            interval: float = DEFAULT_POLL_INTERVAL,
    ) -> DigitalReading:
        """Read one pin with the legacy single-pin protocol."""
        async with self._io_lock:
            self.ensure_ready()
            return await poll_single_pin(
                self._transport, self.read_char, pin, attempts=attempts, interval=interval
            )

    async def _read(self, attr: str) -> bytes:
        # Check under the lock, a queued close() clears the handles
        async with self._io_lock:
            self.ensure_ready()
            char = getattr(self, attr)
            if char is None:
                raise FeatureUnavailableError("Connected firmware does not support ADC reads")
            status, data = await self._transport.read_char(char)
        raise_for_status(status, "read")
        return data

    async def close(self) -> None:
        """Release all handles in reverse acquisition order.

        Safe to call from any state and more than once.
        """
        async with self._io_lock:
            if self._subscribed and self.device is not None:
                self._transport.remove_status_listener(self.device, self.handle_status_change)
            self._subscribed = False

            for attr in ("adc_char", "read_char", "write_char", "service", "device"):
                ref = getattr(self, attr)
                if ref is None:
                    continue
                setattr(self, attr, None)
                try:
                    await self._transport.release(ref)
                except Exception as e:
                    _LOGGER.warning("Error releasing %s: %s", attr, e)

            self._set_status(ConnectionStatus.DISCONNECTED)

    @property
    def _address(self) -> str:
        return self.device.ref.address if self.device else "<unknown>"


class ConnectionManager:
    """Finds a BLEIO peripheral, connects and resolves its GATT handles.

    Usage:
        async with ConnectionManager() as manager:
            session = await manager.connect_by_name("BLEIO")
            await session.write(frame)
    """

    def __init__(
            self,
            transport: BLETransport | None = None,
            timeout: float = 10.0,
            max_attempts: int = 4,
            use_services_cache: bool = True,
    ):
        """Initialize connection manager.

        Args:
            transport: BLE transport (default: BleakTransport)
            timeout: Connection timeout in seconds (default: 10)
            max_attempts: Maximum connection attempts for bleak-retry-connector (default: 4)
            use_services_cache: Enable GATT service caching for faster reconnections (default: True)
        """
        if transport is None:
            transport = BleakTransport(
                timeout=timeout,
                max_attempts=max_attempts,
                use_services_cache=use_services_cache,
            )
        self.transport = transport
        self.timeout = timeout
        self.session: DeviceSession | None = None

    async def __aenter__(self) -> ConnectionManager:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    async def connect_by_name(self, name: str = DEFAULT_DEVICE_NAME) -> DeviceSession:
        """Scan for a device by advertised name and connect to the first match.

        Raises:
            DeviceNotFoundError: If no device advertises the name
            ServiceNotFoundError: If the device lacks the BLEIO service
            CharacteristicNotFoundError: If a mandatory characteristic is missing
            BLEConnectionError: If the transport fails to connect
            BLETimeoutError: If the connection times out
        """
        return await self._connect(DeviceSelector(name=name), f"'{name}'")

    async def connect_by_address(self, address: str | bytes | int) -> DeviceSession:
        """Connect to a device by Bluetooth address.

        Args:
            address: "aa:bb:cc:dd:ee:ff", six raw bytes (most significant
                first) or the packed 48-bit integer

        Raises:
            AddressParseError: If the address text is malformed
            DeviceNotFoundError: If no device with that address is found
        """
        if isinstance(address, str):
            packed = parse_mac_address(address)
        elif isinstance(address, (bytes, bytearray)):
            packed = pack_address(bytes(address))
        else:
            packed = address
        label = format_mac_address(packed)
        return await self._connect(DeviceSelector(address=packed), label)

    async def disconnect(self) -> None:
        """Tear down the current session, if any."""
        session = self.session
        if session is None:
            return
        if session.device is not None:
            _LOGGER.debug("Disconnecting from %s", session.device.ref.address)
        await session.close()

    async def _connect(self, selector: DeviceSelector, label: str) -> DeviceSession:
        if self.session is not None and self.session.is_ready:
            return self.session  # Already connected

        await self.disconnect()
        session = DeviceSession(self.transport)
        session.mark_connecting()
        self.session = session

        try:
            _LOGGER.debug("Scanning for device %s", label)
            refs = await self.transport.scan(selector)
            if not refs:
                raise DeviceNotFoundError(f"Device {label} not found during scan")

            ref = refs[0]
            session.device = await self.transport.connect(ref)
            _LOGGER.info("Connected to %s (%s)", ref.name or "<unnamed>", ref.address)

            await self._resolve(session)
            session.subscribe()

        except BleioError:
            await session.close()
            raise
        except asyncio.TimeoutError as e:
            await session.close()
            raise BLETimeoutError(
                f"Connection timeout after {self.timeout}s"
            ) from e
        except Exception as e:
            await session.close()
            raise BLEConnectionError(
                f"Failed to connect: {e}"
            ) from e
        except BaseException:
            # Cancelled mid-connect
            await session.close()
            raise

        _LOGGER.debug(
            "GATT resolution complete (adc=%s)",
            "yes" if session.has_adc else "no",
        )
        return session

    async def _resolve(self, session: DeviceSession) -> None:
        """Resolve the BLEIO service and its characteristics.

        Raises:
            ServiceNotFoundError: If the service is missing
            CharacteristicNotFoundError: If write or read characteristic is missing
        """
        services = await self.transport.list_services(session.device)
        _LOGGER.debug("Found %d GATT services", len(services))

        for service in services:
            if session.service is None and service.uuid.lower() == SERVICE_UUID:
                session.service = service
                _LOGGER.debug("  - %s (target)", service.uuid)
            else:
                _LOGGER.debug("  - %s", service.uuid)
                # Only one service is needed, free the rest right away
                await self.transport.release(service)

        if session.service is None:
            raise ServiceNotFoundError(f"Service {SERVICE_UUID} not found")

        session.write_char = await self._find_characteristic(session.service, CHAR_WRITE_UUID)
        if session.write_char is None:
            raise CharacteristicNotFoundError(CHAR_WRITE_UUID)

        session.read_char = await self._find_characteristic(session.service, CHAR_READ_UUID)
        if session.read_char is None:
            raise CharacteristicNotFoundError(CHAR_READ_UUID)

        session.adc_char = await self._find_characteristic(session.service, CHAR_ADC_READ_UUID)
        if session.adc_char is None:
            _LOGGER.debug("ADC characteristic %s not present, ADC reads disabled", CHAR_ADC_READ_UUID)

    async def _find_characteristic(self, service: ServiceRef, uuid: str) -> CharRef | None:
        chars = await self.transport.list_characteristics(service, uuid)
        if not chars:
            return None
        for extra in chars[1:]:
            await self.transport.release(extra)
        return chars[0]
