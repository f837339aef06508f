"""Test BleioDevice command operations."""

from __future__ import annotations

import pytest

from bleio import BleioDevice
from bleio.exceptions import (
    InvalidBatchSizeError,
    InvalidPinError,
    LinkLostError,
    NotConnectedError,
    OutOfRangeError,
    PermissionDeniedError,
    ProtocolFaultError,
    TransportFailureError,
    ValidationError,
)
from bleio.models.command import GpioCommand
from bleio.models.enums import (
    AdcAttenuation,
    BlinkMode,
    ConnectionStatus,
    DisconnectBehavior,
    GattStatus,
    InputConfig,
    LatchMode,
    OutputKind,
    PinMode,
    PwmFrequency,
    SerialLedPattern,
)
from bleio.protocol import CHAR_WRITE_UUID


def _frames(transport) -> list[bytes]:
    return [data for uuid, data in transport.writes if uuid == CHAR_WRITE_UUID]


class TestNotConnected:
    """Operations fail fast before connecting."""

    @pytest.mark.asyncio
    async def test_digital_write_requires_connection(self, transport):
        device = BleioDevice(transport=transport)

        with pytest.raises(NotConnectedError):
            await device.digital_write(2, True)

        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_not_connected_checked_before_validation(self, transport):
        device = BleioDevice(transport=transport)

        with pytest.raises(NotConnectedError):
            await device.set_pwm(2, 5.0)

    @pytest.mark.asyncio
    async def test_operations_fail_after_disconnect(self, device, transport):
        await device.disconnect()
        transport.calls.clear()

        with pytest.raises(NotConnectedError):
            await device.set_output(2, OutputKind.HIGH)

        assert transport.io_calls == []
        assert device.status == ConnectionStatus.DISCONNECTED

    @pytest.mark.asyncio
    async def test_operations_fail_when_link_lost(self, device, transport):
        transport.emit(connected=False)

        with pytest.raises(NotConnectedError, match="lost"):
            await device.digital_write(2, False)

        assert transport.io_calls == []
        assert not device.is_connected


class TestCommandFrames:
    """Each operation writes the expected frame."""

    @pytest.mark.asyncio
    async def test_digital_write(self, device, transport):
        await device.digital_write(2, True)
        await device.digital_write(2, False)

        assert _frames(transport) == [b'\x01\x02\x0b\x00\x00', b'\x01\x02\x0a\x00\x00']

    @pytest.mark.asyncio
    async def test_set_pin_mode_with_latch(self, device, transport):
        await device.set_pin_mode(26, PinMode.INPUT_PULLUP, LatchMode.LOW)

        assert _frames(transport) == [b'\x01\x1a\x02\x01\x00']

    @pytest.mark.asyncio
    async def test_set_input(self, device, transport):
        await device.set_input(34, InputConfig.PULLDOWN)

        assert _frames(transport) == [b'\x01\x22\x03\x00\x00']

    @pytest.mark.asyncio
    async def test_set_output_and_blink(self, device, transport):
        await device.set_output(16, OutputKind.BLINK_250MS)
        await device.start_blink(17, BlinkMode.BLINK_500MS)

        assert _frames(transport) == [b'\x01\x10\x0d\x00\x00', b'\x01\x11\x0c\x00\x00']

    @pytest.mark.asyncio
    async def test_set_pwm(self, device, transport):
        await device.set_pwm(2, 0.75, PwmFrequency.FREQ_10KHZ)

        assert _frames(transport) == [bytes([1, 2, 20, 191, 2])]

    @pytest.mark.asyncio
    async def test_set_pwm_out_of_range_sends_nothing(self, device, transport):
        with pytest.raises(OutOfRangeError):
            await device.set_pwm(2, 1.5)

        assert transport.io_calls == []

    @pytest.mark.asyncio
    async def test_enable_adc(self, device, transport):
        await device.enable_adc(34, AdcAttenuation.ATTEN_0DB)

        assert _frames(transport) == [bytes([1, 34, 30, 0, 0])]

    @pytest.mark.asyncio
    async def test_enable_adc_invalid_pin_sends_nothing(self, device, transport):
        with pytest.raises(InvalidPinError):
            await device.enable_adc(2)

        assert transport.io_calls == []

    @pytest.mark.asyncio
    async def test_disable_adc(self, device, transport):
        await device.disable_adc(32)

        assert _frames(transport) == [bytes([1, 32, 31, 0, 0])]

    @pytest.mark.asyncio
    async def test_set_disconnect_behavior(self, device, transport):
        await device.set_disconnect_behavior(2, DisconnectBehavior.SET_LOW)

        assert _frames(transport) == [bytes([1, 2, 40, 1, 0])]

    @pytest.mark.asyncio
    async def test_serial_led_sequence(self, device, transport):
        await device.enable_serial_led(18, 2, 64)
        await device.set_serial_led_color(18, 1, 255, 0, 0)
        await device.set_serial_led_pattern(18, 2, SerialLedPattern.FLICKER, 128, 128)

        assert _frames(transport) == [
            bytes([1, 18, 50, 2, 64]),
            bytes([2, 18, 51, 1, 255, 18, 52, 0, 0]),
            bytes([2, 18, 53, 2, 4, 18, 54, 128, 128]),
        ]

    @pytest.mark.asyncio
    async def test_send_commands_batch(self, device, transport):
        commands = [GpioCommand(pin, 11) for pin in (16, 17, 18)]

        await device.send_commands(commands)

        assert _frames(transport) == [bytes([3, 16, 11, 0, 0, 17, 11, 0, 0, 18, 11, 0, 0])]

    @pytest.mark.asyncio
    async def test_send_commands_rejects_empty_batch(self, device, transport):
        with pytest.raises(InvalidBatchSizeError):
            await device.send_commands([])

        assert transport.io_calls == []


class TestWriteStatusMapping:
    """Transport write statuses map to the error taxonomy."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, error", [
        (GattStatus.UNREACHABLE, LinkLostError),
        (GattStatus.PROTOCOL_ERROR, ProtocolFaultError),
        (GattStatus.ACCESS_DENIED, PermissionDeniedError),
        (9, TransportFailureError),
    ])
    async def test_status_mapping(self, device, transport, status, error):
        transport.write_statuses = [status]

        with pytest.raises(error) as exc_info:
            await device.digital_write(2, True)

        assert exc_info.value.status == int(status)

    @pytest.mark.asyncio
    async def test_failed_write_not_retried(self, device, transport):
        transport.write_statuses = [GattStatus.PROTOCOL_ERROR]

        with pytest.raises(ProtocolFaultError):
            await device.digital_write(2, True)

        assert transport.io_calls == ["write"]

    @pytest.mark.asyncio
    async def test_unknown_status_message_has_code(self, device, transport):
        transport.write_statuses = [42]

        with pytest.raises(TransportFailureError, match="status 42"):
            await device.digital_write(2, True)


class TestValidation:
    """Invalid arguments raise validation errors before any write."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("call", [
        lambda d: d.set_pin_mode(2, 9),
        lambda d: d.set_pin_mode(2, PinMode.OUTPUT, 7),
        lambda d: d.set_input(2, 0),
        lambda d: d.set_output(2, 14),
        lambda d: d.start_blink(2, 10),
        lambda d: d.set_pwm(2, 0.5, 8),
        lambda d: d.enable_adc(34, 4),
        lambda d: d.set_disconnect_behavior(2, 3),
        lambda d: d.set_serial_led_pattern(18, 1, 9),
        lambda d: d.digital_write(300, True),
    ])
    async def test_invalid_argument(self, device, transport, call):
        with pytest.raises(ValidationError):
            await call(device)

        assert transport.io_calls == []

    @pytest.mark.asyncio
    async def test_set_input_writes_once(self, device, transport):
        await device.set_input(34, InputConfig.PULLUP, LatchMode.HIGH)

        assert _frames(transport) == [b'\x01\x22\x02\x02\x00']
