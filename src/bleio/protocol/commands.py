"""BLE protocol commands for BLEIO devices."""

from __future__ import annotations

from enum import IntEnum
from typing import Final, Sequence

from ..exceptions import InvalidBatchSizeError, InvalidPinError, OutOfRangeError
from ..models.command import GpioCommand
from ..models.enums import (
    AdcAttenuation,
    BlinkMode,
    DisconnectBehavior,
    InputConfig,
    LatchMode,
    OutputKind,
    PinMode,
    PwmFrequency,
    SerialLedPattern,
)


class Opcode(IntEnum):
    """GPIO command opcodes (second byte of each command record)."""

    # Pin mode (values match PinMode)
    SET_OUTPUT = 0
    SET_INPUT_FLOATING = 1
    SET_INPUT_PULLUP = 2
    SET_INPUT_PULLDOWN = 3

    # Output
    DIGITAL_LOW = 10
    DIGITAL_HIGH = 11
    BLINK_500MS = 12
    BLINK_250MS = 13
    SET_PWM = 20

    # ADC
    ENABLE_ADC = 30
    DISABLE_ADC = 31

    # Fail-safe
    SET_DISCONNECT_BEHAVIOR = 40

    # Addressable LED chain
    ENABLE_SERIAL_LED = 50
    SERIAL_LED_COLOR = 51          # param1=index, param2=red
    SERIAL_LED_COLOR_GB = 52       # param1=green, param2=blue
    SERIAL_LED_PATTERN = 53        # param1=index, param2=pattern
    SERIAL_LED_PATTERN_PARAMS = 54  # param1, param2 pattern specific


# Protocol constants
SERVICE_UUID = "4fafc201-1fb5-459e-8fcc-c5c9c333914b"
CHAR_WRITE_UUID = "beb5483e-36e1-4688-b7f5-ea07361b26a8"
CHAR_READ_UUID = "1c95d5e3-d8f7-413a-bf3d-7a2e5d7be87e"
CHAR_ADC_READ_UUID = "2d8a7b3c-4e9f-4a1b-8c5d-6e7f8a9b0c1d"  # extended firmware only

DEFAULT_DEVICE_NAME = "BLEIO"
LEGACY_DEVICE_NAME = "ESP32-GPIO"

MAX_COMMANDS_PER_FRAME = 24
COMMAND_RECORD_SIZE = 4

# GPIOs wired to ADC1 on the ESP32
ADC_CAPABLE_PINS: Final[frozenset[int]] = frozenset({32, 33, 34, 35, 36, 39})


def _enum_value(enum_cls: type[IntEnum], value: int, name: str) -> int:
    try:
        return enum_cls(value).value
    except ValueError as e:
        raise OutOfRangeError(f"Invalid {name}: {value!r}") from e


def encode_commands(commands: Sequence[GpioCommand]) -> bytes:
    """Encode a batch of commands into one write frame.

    Args:
        commands: 1-24 commands, applied by the device in the given order

    Returns:
        Frame bytes: [count:1][pin:1, opcode:1, param1:1, param2:1]*count

    Raises:
        InvalidBatchSizeError: If the batch is empty or too large
    """
    if not 1 <= len(commands) <= MAX_COMMANDS_PER_FRAME:
        raise InvalidBatchSizeError(
            f"Command count must be 1-{MAX_COMMANDS_PER_FRAME}, got {len(commands)}"
        )

    frame = bytearray([len(commands)])
    for command in commands:
        frame += command.to_bytes()
    return bytes(frame)


def build_pin_mode_command(
        pin: int,
        mode: PinMode,
        latch: LatchMode = LatchMode.NONE,
) -> GpioCommand:
    """Build a set-pin-mode command (opcode = mode, param1 = latch)."""
    return GpioCommand(
        pin,
        _enum_value(PinMode, mode, "pin mode"),
        _enum_value(LatchMode, latch, "latch mode"),
    )


def build_input_command(
        pin: int,
        config: InputConfig = InputConfig.FLOATING,
        latch: LatchMode = LatchMode.NONE,
) -> GpioCommand:
    """Build a set-pin-mode command configuring an input with the given bias."""
    return GpioCommand(
        pin,
        _enum_value(InputConfig, config, "input config"),
        _enum_value(LatchMode, latch, "latch mode"),
    )


def build_digital_write_command(pin: int, value: bool) -> GpioCommand:
    opcode = Opcode.DIGITAL_HIGH if value else Opcode.DIGITAL_LOW
    return GpioCommand(pin, opcode)


def build_output_command(pin: int, kind: OutputKind) -> GpioCommand:
    return GpioCommand(pin, _enum_value(OutputKind, kind, "output kind"))


def build_blink_command(pin: int, mode: BlinkMode) -> GpioCommand:
    return GpioCommand(pin, _enum_value(BlinkMode, mode, "blink mode"))


def build_pwm_command(
        pin: int,
        duty_cycle: float,
        frequency: PwmFrequency = PwmFrequency.FREQ_1KHZ,
) -> GpioCommand:
    """Build a set-PWM command.

    Args:
        pin: GPIO number
        duty_cycle: 0.0-1.0, scaled to 0-255
        frequency: PWM frequency selector

    Raises:
        OutOfRangeError: If duty_cycle is outside 0.0-1.0
    """
    if not 0.0 <= duty_cycle <= 1.0:
        raise OutOfRangeError(
            f"Duty cycle out of range: {duty_cycle} (must be 0.0-1.0)"
        )
    duty = round(duty_cycle * 255)
    return GpioCommand(pin, Opcode.SET_PWM, duty, _enum_value(PwmFrequency, frequency, "PWM frequency"))


def build_enable_adc_command(
        pin: int,
        attenuation: AdcAttenuation = AdcAttenuation.ATTEN_11DB,
) -> GpioCommand:
    """Build an enable-ADC command.

    Raises:
        InvalidPinError: If the pin has no ADC
    """
    if pin not in ADC_CAPABLE_PINS:
        raise InvalidPinError(
            f"GPIO{pin} does not support ADC (use one of {sorted(ADC_CAPABLE_PINS)})"
        )
    return GpioCommand(pin, Opcode.ENABLE_ADC, _enum_value(AdcAttenuation, attenuation, "ADC attenuation"))


def build_disable_adc_command(pin: int) -> GpioCommand:
    return GpioCommand(pin, Opcode.DISABLE_ADC)


def build_disconnect_behavior_command(pin: int, behavior: DisconnectBehavior) -> GpioCommand:
    return GpioCommand(
        pin,
        Opcode.SET_DISCONNECT_BEHAVIOR,
        _enum_value(DisconnectBehavior, behavior, "disconnect behavior"),
    )


def build_enable_serial_led_command(pin: int, led_count: int, brightness: int = 255) -> GpioCommand:
    """Build a command enabling an addressable LED chain (all LEDs start off).

    Raises:
        OutOfRangeError: If led_count is not 1-255 or brightness not 0-255
    """
    if not 1 <= led_count <= 0xFF:
        raise OutOfRangeError(f"LED count out of range: {led_count} (must be 1-255)")
    if not 0 <= brightness <= 0xFF:
        raise OutOfRangeError(f"Brightness out of range: {brightness} (must be 0-255)")
    return GpioCommand(pin, Opcode.ENABLE_SERIAL_LED, led_count, brightness)


def build_serial_led_color_commands(
        pin: int,
        led_index: int,
        red: int,
        green: int,
        blue: int,
) -> list[GpioCommand]:
    """Build the two records that set one LED's color.

    An RGB triple plus index does not fit one record, so the color is split
    over consecutive records that must travel in the same frame.

    Format:
        [pin, 0x33, index, red][pin, 0x34, green, blue]
    """
    if not 1 <= led_index <= 0xFF:
        raise OutOfRangeError(f"LED index out of range: {led_index} (must be 1-255)")
    for name, value in (("red", red), ("green", green), ("blue", blue)):
        if not 0 <= value <= 0xFF:
            raise OutOfRangeError(f"{name} out of range: {value} (must be 0-255)")
    return [
        GpioCommand(pin, Opcode.SERIAL_LED_COLOR, led_index, red),
        GpioCommand(pin, Opcode.SERIAL_LED_COLOR_GB, green, blue),
    ]


def build_serial_led_pattern_commands(
        pin: int,
        led_index: int,
        pattern: SerialLedPattern,
        param1: int = 0,
        param2: int = 0,
) -> list[GpioCommand]:
    """Build the two records that start a pattern on one LED.

    Format:
        [pin, 0x35, index, pattern][pin, 0x36, param1, param2]
    """
    if not 1 <= led_index <= 0xFF:
        raise OutOfRangeError(f"LED index out of range: {led_index} (must be 1-255)")
    for name, value in (("param1", param1), ("param2", param2)):
        if not 0 <= value <= 0xFF:
            raise OutOfRangeError(f"{name} out of range: {value} (must be 0-255)")
    return [
        GpioCommand(
            pin,
            Opcode.SERIAL_LED_PATTERN,
            led_index,
            _enum_value(SerialLedPattern, pattern, "LED pattern"),
        ),
        GpioCommand(pin, Opcode.SERIAL_LED_PATTERN_PARAMS, param1, param2),
    ]


def build_single_pin_read_request(pin: int) -> bytes:
    """Build the legacy single-pin read request.

    Format:
        [pin:1]
    """
    return pin.to_bytes(1, byteorder='big')
