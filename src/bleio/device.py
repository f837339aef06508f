"""Main BLEIO device class."""

from __future__ import annotations

import logging
from typing import Sequence

from .exceptions import NotConnectedError
from .models.capabilities import DeviceCapabilities
from .models.command import GpioCommand
from .models.enums import (
    AdcAttenuation,
    BlinkMode,
    ConnectionStatus,
    DisconnectBehavior,
    InputConfig,
    LatchMode,
    OutputKind,
    PinMode,
    PwmFrequency,
    ReadProtocol,
    SerialLedPattern,
)
from .models.readings import AdcReading, DigitalReading
from .protocol import (
    DEFAULT_DEVICE_NAME,
    adc_to_voltage,
    build_blink_command,
    build_digital_write_command,
    build_disable_adc_command,
    build_disconnect_behavior_command,
    build_enable_adc_command,
    build_enable_serial_led_command,
    build_input_command,
    build_output_command,
    build_pin_mode_command,
    build_pwm_command,
    build_serial_led_color_commands,
    build_serial_led_pattern_commands,
    decode_adc_reads,
    encode_commands,
)
from .readers import InputReader, decode_response, select_reader
from .transport import (
    DEFAULT_POLL_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    BLETransport,
    ConnectionManager,
    DeviceSession,
)

_LOGGER = logging.getLogger(__name__)


class BleioDevice:
    """BLEIO GPIO peripheral.

    Main API for driving the pins of a BLEIO microcontroller over BLE.

    Usage:
        # Connect by advertised name
        async with BleioDevice() as device:
            await device.digital_write(2, True)

        # Connect by address, force the legacy read protocol
        async with BleioDevice(address="AA:BB:CC:DD:EE:FF",
                               read_protocol=ReadProtocol.SINGLE_PIN_POLL) as device:
            state = await device.read_input(34)
    """

    def __init__(
            self,
            name: str = DEFAULT_DEVICE_NAME,
            address: str | bytes | int | None = None,
            transport: BLETransport | None = None,
            timeout: float = 10.0,
            max_attempts: int = 4,
            use_services_cache: bool = True,
            read_protocol: ReadProtocol | None = None,
            poll_attempts: int = DEFAULT_POLL_ATTEMPTS,
            poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        """Initialize BLEIO device.

        Args:
            name: Advertised device name, used when no address is given (default: "BLEIO")
            address: Optional MAC address; takes precedence over name
            transport: Optional BLE transport (default: bleak)
            timeout: BLE connection timeout in seconds (default: 10)
            max_attempts: Connection attempts (default: 4)
            use_services_cache: Enable GATT service caching (default: True)
            read_protocol: Digital input protocol; None picks it from the firmware
            poll_attempts: Read budget of the legacy protocol (default: 30)
            poll_interval: Delay between legacy reads in seconds (default: 0.1)
        """
        self.name = name
        self.address = address
        self._manager = ConnectionManager(
            transport,
            timeout=timeout,
            max_attempts=max_attempts,
            use_services_cache=use_services_cache,
        )
        self._read_protocol = read_protocol
        self._poll_attempts = poll_attempts
        self._poll_interval = poll_interval

        self._session: DeviceSession | None = None
        self._reader: InputReader | None = None
        self._capabilities: DeviceCapabilities | None = None
        self._adc_attenuation: dict[int, AdcAttenuation] = {}

    async def __aenter__(self) -> BleioDevice:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    async def connect(self) -> None:
        """Connect and resolve the GATT handles.

        Raises:
            BLEConnectionError: If the device, service or a mandatory
                characteristic cannot be found, or connecting fails
            AddressParseError: If address is malformed
        """
        if self.address is not None:
            session = await self._manager.connect_by_address(self.address)
        else:
            session = await self._manager.connect_by_name(self.name)

        self._session = session
        self._reader = select_reader(
            session,
            self._read_protocol,
            poll_attempts=self._poll_attempts,
            poll_interval=self._poll_interval,
        )
        self._capabilities = DeviceCapabilities(
            adc=session.has_adc,
            read_protocol=self._reader.protocol,
        )
        _LOGGER.info(
            "Device ready (adc=%s, read protocol=%s)",
            self._capabilities.adc,
            self._capabilities.read_protocol.name,
        )

    async def disconnect(self) -> None:
        """Disconnect from device. Safe to call repeatedly."""
        await self._manager.disconnect()
        self._reader = None
        self._capabilities = None
        self._adc_attenuation.clear()

    @property
    def status(self) -> ConnectionStatus:
        if self._session is None:
            return ConnectionStatus.DISCONNECTED
        return self._session.status

    @property
    def is_connected(self) -> bool:
        return self.status == ConnectionStatus.READY

    @property
    def capabilities(self) -> DeviceCapabilities | None:
        """Features of the connected firmware (None before connecting)."""
        return self._capabilities

    def _require_session(self) -> DeviceSession:
        if self._session is None:
            raise NotConnectedError("Not connected")
        self._session.ensure_ready()
        return self._session

    # Commands

    async def send_commands(self, commands: Sequence[GpioCommand]) -> None:
        """Send 1-24 commands in one frame, applied by the device in order.

        Raises:
            NotConnectedError: If not connected
            InvalidBatchSizeError: If the batch size is outside 1-24
            TransportError: If the write fails
        """
        await self._send(self._require_session(), commands)

    async def _send(self, session: DeviceSession, commands: Sequence[GpioCommand]) -> None:
        frame = encode_commands(commands)
        await session.write(frame)
        _LOGGER.debug("Sent %d commands: %s", len(commands), frame.hex())

    async def set_pin_mode(self, pin: int, mode: PinMode, latch: LatchMode = LatchMode.NONE) -> None:
        session = self._require_session()
        await self._send(session, [build_pin_mode_command(pin, mode, latch)])

    async def set_input(
            self,
            pin: int,
            config: InputConfig = InputConfig.FLOATING,
            latch: LatchMode = LatchMode.NONE,
    ) -> None:
        """Configure a pin as input with the given bias."""
        session = self._require_session()
        await self._send(session, [build_input_command(pin, config, latch)])

    async def digital_write(self, pin: int, value: bool) -> None:
        session = self._require_session()
        await self._send(session, [build_digital_write_command(pin, value)])

    async def set_output(self, pin: int, kind: OutputKind) -> None:
        """Drive a pin LOW/HIGH or start firmware blinking."""
        session = self._require_session()
        await self._send(session, [build_output_command(pin, kind)])

    async def start_blink(self, pin: int, mode: BlinkMode) -> None:
        session = self._require_session()
        await self._send(session, [build_blink_command(pin, mode)])

    async def set_pwm(
            self,
            pin: int,
            duty_cycle: float,
            frequency: PwmFrequency = PwmFrequency.FREQ_1KHZ,
    ) -> None:
        """Start PWM output.

        Args:
            pin: GPIO number
            duty_cycle: 0.0-1.0
            frequency: PWM frequency (default: 1 kHz)

        Raises:
            OutOfRangeError: If duty_cycle is outside 0.0-1.0
        """
        session = self._require_session()
        await self._send(session, [build_pwm_command(pin, duty_cycle, frequency)])

    async def enable_adc(
            self,
            pin: int,
            attenuation: AdcAttenuation = AdcAttenuation.ATTEN_11DB,
    ) -> None:
        """Enable ADC sampling on a pin.

        The attenuation is remembered and used to convert values read back
        from this pin.

        Raises:
            InvalidPinError: If the pin is not one of 32, 33, 34, 35, 36, 39
        """
        session = self._require_session()
        await self._send(session, [build_enable_adc_command(pin, attenuation)])
        self._adc_attenuation[pin] = AdcAttenuation(attenuation)

    async def disable_adc(self, pin: int) -> None:
        session = self._require_session()
        await self._send(session, [build_disable_adc_command(pin)])
        self._adc_attenuation.pop(pin, None)

    async def set_disconnect_behavior(self, pin: int, behavior: DisconnectBehavior) -> None:
        """Set what the firmware does with a pin when the BLE link drops."""
        session = self._require_session()
        await self._send(session, [build_disconnect_behavior_command(pin, behavior)])

    async def enable_serial_led(self, pin: int, led_count: int, brightness: int = 255) -> None:
        """Enable an addressable LED chain on a pin; all LEDs start off."""
        session = self._require_session()
        await self._send(session, [build_enable_serial_led_command(pin, led_count, brightness)])

    async def set_serial_led_color(
            self,
            pin: int,
            led_index: int,
            red: int,
            green: int,
            blue: int,
    ) -> None:
        """Set one LED of a chain (1-based index) to a solid color."""
        session = self._require_session()
        await self._send(session, build_serial_led_color_commands(pin, led_index, red, green, blue))

    async def set_serial_led_pattern(
            self,
            pin: int,
            led_index: int,
            pattern: SerialLedPattern,
            param1: int = 0,
            param2: int = 0,
    ) -> None:
        """Start an animation on one LED of a chain."""
        session = self._require_session()
        await self._send(
            session,
            build_serial_led_pattern_commands(pin, led_index, pattern, param1, param2)
        )

    # Reads

    async def read_all_inputs(self) -> list[DigitalReading]:
        """Read every pin configured as input.

        Raises:
            NotConnectedError: If not connected
            FeatureUnavailableError: If the firmware only speaks the legacy protocol
            TransportError: If the read fails
            MalformedResponseError: If the response frame is invalid
        """
        self._require_session()
        return await self._reader.read_all()

    async def read_input(self, pin: int) -> bool | None:
        """Read one digital input.

        Returns:
            Pin state, or None if the pin is not configured as input

        Raises:
            ReadTimeoutError: Legacy protocol only, no response within budget
        """
        self._require_session()
        return await self._reader.read_input(pin)

    async def read_all_adc(self) -> list[AdcReading]:
        """Read every ADC-enabled pin, converted to volts.

        Raises:
            FeatureUnavailableError: If the firmware has no ADC characteristic
            MalformedResponseError: If the response frame is invalid
        """
        session = self._require_session()
        data = await session.read_adc()
        samples = decode_response(decode_adc_reads, data)

        readings = []
        for sample in samples:
            attenuation = self._adc_attenuation.get(sample.pin, AdcAttenuation.ATTEN_11DB)
            voltage = adc_to_voltage(sample.raw, attenuation)
            _LOGGER.debug("    GPIO%d: raw=%d, %.3fV", sample.pin, sample.raw, voltage)
            readings.append(AdcReading(
                pin=sample.pin,
                raw_value=sample.raw,
                voltage=voltage,
                attenuation=attenuation,
            ))
        return readings

    async def read_adc(self, pin: int) -> AdcReading | None:
        """Read one ADC pin; None if ADC is not enabled on it."""
        for reading in await self.read_all_adc():
            if reading.pin == pin:
                return reading
        _LOGGER.debug("GPIO%d is not configured for ADC", pin)
        return None
