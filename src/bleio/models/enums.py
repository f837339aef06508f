from __future__ import annotations

from enum import IntEnum
from typing import Final


class PinMode(IntEnum):
    """Pin direction/bias; the value is the opcode sent to the device."""
    OUTPUT = 0
    INPUT_FLOATING = 1
    INPUT_PULLUP = 2
    INPUT_PULLDOWN = 3


class InputConfig(IntEnum):
    """Input bias subset of PinMode."""
    FLOATING = 1
    PULLUP = 2
    PULLDOWN = 3


class LatchMode(IntEnum):
    """Input latch mode (param1 of a set-pin-mode command)."""
    NONE = 0
    LOW = 1
    HIGH = 2


class BlinkMode(IntEnum):
    """Firmware driven blink; the value is the opcode."""
    BLINK_500MS = 12
    BLINK_250MS = 13


class OutputKind(IntEnum):
    """Output states accepted by set_output; the value is the opcode."""
    LOW = 10
    HIGH = 11
    BLINK_500MS = 12
    BLINK_250MS = 13


class PwmFrequency(IntEnum):
    """PWM frequency selector (param2 of a set-PWM command)."""
    FREQ_1KHZ = 0     # default
    FREQ_5KHZ = 1     # LED dimming
    FREQ_10KHZ = 2    # LED dimming
    FREQ_25KHZ = 3    # motors
    FREQ_50HZ = 4     # servos
    FREQ_100HZ = 5
    FREQ_500HZ = 6
    FREQ_20KHZ = 7    # above audible range


class AdcAttenuation(IntEnum):
    """ESP32 ADC input attenuation (param1 of an enable-ADC command)."""
    ATTEN_0DB = 0
    ATTEN_2_5DB = 1
    ATTEN_6DB = 2
    ATTEN_11DB = 3


ADC_FULL_SCALE_VOLTAGE: Final[dict[AdcAttenuation, float]] = {
    AdcAttenuation.ATTEN_0DB: 1.1,
    AdcAttenuation.ATTEN_2_5DB: 1.5,
    AdcAttenuation.ATTEN_6DB: 2.2,
    AdcAttenuation.ATTEN_11DB: 3.3,
}


class DisconnectBehavior(IntEnum):
    """What the firmware does with a pin when the BLE link drops."""
    MAINTAIN = 0
    SET_LOW = 1
    SET_HIGH = 2


class SerialLedPattern(IntEnum):
    """Per-LED animation patterns for addressable LED chains."""
    ON = 0
    BLINK_250MS = 1
    BLINK_500MS = 2
    RAINBOW = 3
    FLICKER = 4


class ConnectionStatus(IntEnum):
    """Lifecycle state of a device session."""
    DISCONNECTED = 0
    CONNECTING = 1
    READY = 2
    LOST = 3


class GattStatus(IntEnum):
    """Status codes returned by transport reads and writes."""
    SUCCESS = 0
    UNREACHABLE = 1
    PROTOCOL_ERROR = 2
    ACCESS_DENIED = 3


class ReadProtocol(IntEnum):
    """How digital inputs are read back from the device.

    SINGLE_PIN_POLL is the legacy firmware protocol: write a pin number to the
    read characteristic and poll until a [pin, state] pair arrives.
    BATCH_READ_ALL reads a count-prefixed list of every configured input.
    """
    SINGLE_PIN_POLL = 0
    BATCH_READ_ALL = 1
