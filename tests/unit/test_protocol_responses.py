"""Test protocol response parsing."""

import pytest

from bleio.exceptions import EmptyResponseError, LengthMismatchError
from bleio.models.enums import AdcAttenuation
from bleio.models.readings import AdcSample, DigitalReading
from bleio.protocol.responses import (
    adc_to_voltage,
    decode_adc_reads,
    decode_digital_reads,
    decode_single_pin_response,
    full_scale_voltage,
)


class TestDecodeDigitalReads:
    """Test all-inputs response decoding."""

    def test_decode_two_pins(self):
        """Test count-prefixed pin/state pairs."""
        data = bytes([0x02, 0x05, 0x01, 0x22, 0x00])
        assert decode_digital_reads(data) == [
            DigitalReading(pin=5, state=True),
            DigitalReading(pin=34, state=False),
        ]

    def test_any_nonzero_state_is_high(self):
        data = bytes([0x01, 0x04, 0x7F])
        assert decode_digital_reads(data) == [DigitalReading(pin=4, state=True)]

    def test_zero_count(self):
        """Test no configured inputs decodes to an empty list."""
        assert decode_digital_reads(b'\x00') == []

    def test_empty_response(self):
        with pytest.raises(EmptyResponseError):
            decode_digital_reads(b'')

    def test_short_response(self):
        """Test count=3 with 5 bytes reports expected 7."""
        data = bytes([0x03, 0x01, 0x00, 0x02, 0x01])
        with pytest.raises(LengthMismatchError) as exc_info:
            decode_digital_reads(data)
        assert exc_info.value.expected == 7
        assert exc_info.value.actual == 5

    def test_trailing_bytes_rejected(self):
        data = bytes([0x01, 0x05, 0x01, 0xFF])
        with pytest.raises(LengthMismatchError, match="expected 3 bytes, got 4"):
            decode_digital_reads(data)


class TestDecodeAdcReads:
    """Test ADC values response decoding."""

    def test_decode_little_endian_raw(self):
        """Test raw value is lo | hi << 8."""
        data = bytes([0x02, 0x20, 0xFF, 0x0F, 0x22, 0x00, 0x08])
        assert decode_adc_reads(data) == [
            AdcSample(pin=32, raw=4095),
            AdcSample(pin=34, raw=2048),
        ]

    def test_empty_response(self):
        with pytest.raises(EmptyResponseError):
            decode_adc_reads(b'')

    def test_length_mismatch(self):
        data = bytes([0x02, 0x20, 0xFF, 0x0F])
        with pytest.raises(LengthMismatchError) as exc_info:
            decode_adc_reads(data)
        assert exc_info.value.expected == 7
        assert exc_info.value.actual == 4


class TestDecodeSinglePinResponse:
    """Test legacy [pin, state] responses."""

    def test_two_bytes(self):
        assert decode_single_pin_response(b'\x22\x01') == DigitalReading(pin=34, state=True)

    def test_trailing_bytes_ignored(self):
        assert decode_single_pin_response(b'\x22\x00\xAA\xBB') == DigitalReading(pin=34, state=False)

    @pytest.mark.parametrize("data", [b'', b'\x22'])
    def test_not_ready(self, data):
        """Test short responses mean the value is not ready yet."""
        assert decode_single_pin_response(data) is None


class TestAdcToVoltage:
    """Test raw to volts conversion."""

    def test_full_scale_11db(self):
        assert adc_to_voltage(4095, AdcAttenuation.ATTEN_11DB) == pytest.approx(3.3)

    @pytest.mark.parametrize("attenuation", list(AdcAttenuation))
    def test_zero_is_zero(self, attenuation):
        assert adc_to_voltage(0, attenuation) == 0.0

    def test_midscale_0db(self):
        assert adc_to_voltage(2048, AdcAttenuation.ATTEN_0DB) == pytest.approx(0.55, abs=0.001)

    def test_full_scale_table(self):
        assert full_scale_voltage(AdcAttenuation.ATTEN_0DB) == 1.1
        assert full_scale_voltage(AdcAttenuation.ATTEN_2_5DB) == 1.5
        assert full_scale_voltage(AdcAttenuation.ATTEN_6DB) == 2.2
        assert full_scale_voltage(AdcAttenuation.ATTEN_11DB) == 3.3

    def test_unknown_attenuation_defaults_to_3v3(self):
        assert full_scale_voltage(9) == 3.3
        assert adc_to_voltage(4095, 9) == pytest.approx(3.3)

    def test_default_attenuation(self):
        assert adc_to_voltage(4095) == pytest.approx(3.3)
