"""BLE protocol implementation."""

from .commands import (
    ADC_CAPABLE_PINS,
    CHAR_ADC_READ_UUID,
    CHAR_READ_UUID,
    CHAR_WRITE_UUID,
    DEFAULT_DEVICE_NAME,
    LEGACY_DEVICE_NAME,
    MAX_COMMANDS_PER_FRAME,
    SERVICE_UUID,
    Opcode,
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
    build_single_pin_read_request,
    encode_commands,
)
from .responses import (
    adc_to_voltage,
    decode_adc_reads,
    decode_digital_reads,
    decode_single_pin_response,
    full_scale_voltage,
)

__all__ = [
    "Opcode",
    "SERVICE_UUID",
    "CHAR_WRITE_UUID",
    "CHAR_READ_UUID",
    "CHAR_ADC_READ_UUID",
    "DEFAULT_DEVICE_NAME",
    "LEGACY_DEVICE_NAME",
    "MAX_COMMANDS_PER_FRAME",
    "ADC_CAPABLE_PINS",
    "encode_commands",
    "build_pin_mode_command",
    "build_digital_write_command",
    "build_output_command",
    "build_blink_command",
    "build_pwm_command",
    "build_enable_adc_command",
    "build_disable_adc_command",
    "build_disconnect_behavior_command",
    "build_enable_serial_led_command",
    "build_input_command",
    "build_serial_led_color_commands",
    "build_serial_led_pattern_commands",
    "build_single_pin_read_request",
    "decode_digital_reads",
    "decode_adc_reads",
    "decode_single_pin_response",
    "adc_to_voltage",
    "full_scale_voltage",
]
