"""BLEIO BLE GPIO client package.

  Pure Python package for driving the GPIO pins of BLEIO microcontroller
  peripherals over Bluetooth Low Energy.
  """

from .address import format_mac_address, parse_mac_address
from .device import BleioDevice
from .discovery import discover_devices
from .exceptions import (
    AddressParseError,
    BLEConnectionError,
    BleioError,
    BLETimeoutError,
    CharacteristicNotFoundError,
    DecodeError,
    DeviceNotFoundError,
    EmptyResponseError,
    FeatureUnavailableError,
    InvalidBatchSizeError,
    InvalidPinError,
    LengthMismatchError,
    LinkLostError,
    MalformedResponseError,
    NotConnectedError,
    OutOfRangeError,
    PermissionDeniedError,
    ProtocolFaultError,
    ReadTimeoutError,
    ServiceNotFoundError,
    TransportError,
    TransportFailureError,
    ValidationError,
    WriteFailedError,
)
from .models import (
    AdcAttenuation,
    AdcReading,
    AdcSample,
    BlinkMode,
    ConnectionStatus,
    DeviceCapabilities,
    DigitalReading,
    DisconnectBehavior,
    GattStatus,
    GpioCommand,
    InputConfig,
    LatchMode,
    OutputKind,
    PinMode,
    PwmFrequency,
    ReadProtocol,
    SerialLedPattern,
)
from .protocol import (
    CHAR_ADC_READ_UUID,
    CHAR_READ_UUID,
    CHAR_WRITE_UUID,
    SERVICE_UUID,
    adc_to_voltage,
    decode_adc_reads,
    decode_digital_reads,
    encode_commands,
)
from .transport import BleakTransport, BLETransport, ConnectionManager, DeviceSession

__version__ = "0.1.0"

__all__ = [
    # Main API
    "BleioDevice",
    "ConnectionManager",
    "DeviceSession",
    "discover_devices",
    # Transport
    "BLETransport",
    "BleakTransport",
    # Exceptions
    "BleioError",
    "BLEConnectionError",
    "BLETimeoutError",
    "DeviceNotFoundError",
    "ServiceNotFoundError",
    "CharacteristicNotFoundError",
    "AddressParseError",
    "FeatureUnavailableError",
    "NotConnectedError",
    "ValidationError",
    "InvalidBatchSizeError",
    "InvalidPinError",
    "OutOfRangeError",
    "TransportError",
    "LinkLostError",
    "ProtocolFaultError",
    "PermissionDeniedError",
    "TransportFailureError",
    "WriteFailedError",
    "ReadTimeoutError",
    "DecodeError",
    "EmptyResponseError",
    "LengthMismatchError",
    "MalformedResponseError",
    # Models
    "GpioCommand",
    "DigitalReading",
    "AdcSample",
    "AdcReading",
    "DeviceCapabilities",
    # Enums
    "PinMode",
    "InputConfig",
    "LatchMode",
    "BlinkMode",
    "OutputKind",
    "PwmFrequency",
    "AdcAttenuation",
    "DisconnectBehavior",
    "SerialLedPattern",
    "ConnectionStatus",
    "GattStatus",
    "ReadProtocol",
    # Utilities
    "encode_commands",
    "decode_digital_reads",
    "decode_adc_reads",
    "adc_to_voltage",
    "parse_mac_address",
    "format_mac_address",
    # Constants
    "SERVICE_UUID",
    "CHAR_WRITE_UUID",
    "CHAR_READ_UUID",
    "CHAR_ADC_READ_UUID",
]
