"""BLE response validation and parsing."""

from __future__ import annotations

from ..exceptions import EmptyResponseError, LengthMismatchError
from ..models.enums import ADC_FULL_SCALE_VOLTAGE, AdcAttenuation
from ..models.readings import AdcSample, DigitalReading

ADC_MAX_RAW = 4095  # 12-bit converter
DEFAULT_FULL_SCALE_VOLTAGE = 3.3

DIGITAL_RECORD_SIZE = 2
ADC_RECORD_SIZE = 3


def _check_count_prefixed(data: bytes, record_size: int) -> int:
    """Validate a [count:1][record]*count frame and return count."""
    if len(data) < 1:
        raise EmptyResponseError("Response is empty")

    count = data[0]
    expected = 1 + record_size * count
    if len(data) != expected:
        raise LengthMismatchError(expected=expected, actual=len(data))
    return count


def decode_digital_reads(data: bytes) -> list[DigitalReading]:
    """Parse an all-inputs response.

    Format: [count:1][pin:1, state:1]*count

    Args:
        data: Raw characteristic value

    Returns:
        Readings in the order sent by the device

    Raises:
        EmptyResponseError: If data is empty
        LengthMismatchError: If length disagrees with the count prefix
    """
    count = _check_count_prefixed(data, DIGITAL_RECORD_SIZE)
    return [
        DigitalReading(pin=data[1 + 2 * i], state=data[2 + 2 * i] != 0)
        for i in range(count)
    ]


def decode_adc_reads(data: bytes) -> list[AdcSample]:
    """Parse an ADC values response.

    Format: [count:1][pin:1, raw_lo:1, raw_hi:1]*count

    Raises:
        EmptyResponseError: If data is empty
        LengthMismatchError: If length disagrees with the count prefix
    """
    count = _check_count_prefixed(data, ADC_RECORD_SIZE)
    samples = []
    for i in range(count):
        offset = 1 + 3 * i
        raw = int.from_bytes(data[offset + 1:offset + 3], "little")
        samples.append(AdcSample(pin=data[offset], raw=raw))
    return samples


def decode_single_pin_response(data: bytes) -> DigitalReading | None:
    """Parse a legacy single-pin read response.

    Format: [pin:1][state:1] (trailing bytes ignored)

    Returns:
        The reading, or None if the device has not filled in the value yet
    """
    if len(data) < 2:
        return None
    return DigitalReading(pin=data[0], state=data[1] != 0)


def full_scale_voltage(attenuation: AdcAttenuation | int) -> float:
    """Full-scale input voltage for an attenuation level (3.3V if unknown)."""
    try:
        return ADC_FULL_SCALE_VOLTAGE[AdcAttenuation(attenuation)]
    except (ValueError, KeyError):
        return DEFAULT_FULL_SCALE_VOLTAGE


def adc_to_voltage(raw: int, attenuation: AdcAttenuation | int = AdcAttenuation.ATTEN_11DB) -> float:
    """Convert a raw 12-bit ADC value to volts."""
    return raw / float(ADC_MAX_RAW) * full_scale_voltage(attenuation)
