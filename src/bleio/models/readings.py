"""Decoded pin state records."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import AdcAttenuation


@dataclass(frozen=True, slots=True)
class DigitalReading:
    """State of one digital input pin."""

    pin: int
    state: bool


@dataclass(frozen=True, slots=True)
class AdcSample:
    """Raw ADC value for one pin as sent by the device."""

    pin: int
    raw: int


@dataclass(frozen=True, slots=True)
class AdcReading:
    """ADC value converted to volts."""

    pin: int
    raw_value: int
    voltage: float
    attenuation: AdcAttenuation = AdcAttenuation.ATTEN_11DB
