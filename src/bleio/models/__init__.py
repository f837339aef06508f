"""Data models for BLEIO devices."""

from .capabilities import DeviceCapabilities
from .command import GpioCommand
from .enums import (
    ADC_FULL_SCALE_VOLTAGE,
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
    ReadProtocol,
    SerialLedPattern,
)
from .readings import AdcReading, AdcSample, DigitalReading

__all__ = [
    "ADC_FULL_SCALE_VOLTAGE",
    "AdcAttenuation",
    "AdcReading",
    "AdcSample",
    "BlinkMode",
    "ConnectionStatus",
    "DeviceCapabilities",
    "DigitalReading",
    "DisconnectBehavior",
    "GattStatus",
    "GpioCommand",
    "InputConfig",
    "LatchMode",
    "OutputKind",
    "PinMode",
    "PwmFrequency",
    "ReadProtocol",
    "SerialLedPattern",
]
