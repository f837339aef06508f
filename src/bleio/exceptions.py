"""Exceptions raised by the BLEIO client."""

from __future__ import annotations


class BleioError(Exception):
    """Base exception for all BLEIO errors."""


class BLEConnectionError(BleioError):
    """Connecting to or resolving the peripheral failed."""


class BLETimeoutError(BleioError):
    """A BLE operation did not complete in time."""


class DeviceNotFoundError(BLEConnectionError):
    """No device matched the name or address selector."""


class ServiceNotFoundError(BLEConnectionError):
    """The device does not expose the BLEIO GATT service."""


class CharacteristicNotFoundError(BLEConnectionError):
    """A mandatory characteristic is missing from the service."""

    def __init__(self, uuid: str):
        super().__init__(f"Characteristic {uuid} not found")
        self.uuid = uuid


class AddressParseError(BleioError, ValueError):
    """MAC address text is not six colon-separated hex octets."""


class FeatureUnavailableError(BleioError):
    """The connected firmware does not provide the requested feature."""


class NotConnectedError(BleioError):
    """Operation attempted while the session is not ready."""


class ValidationError(BleioError, ValueError):
    """Argument rejected before anything was sent to the device."""


class InvalidBatchSizeError(ValidationError):
    """Command batch is empty or exceeds the per-frame limit."""


class InvalidPinError(ValidationError):
    """Pin does not support the requested function."""


class OutOfRangeError(ValidationError):
    """Numeric argument outside its accepted range."""


class TransportError(BleioError):
    """Transport reported a non-success status.

    Attributes:
        status: Raw status code reported by the transport
    """

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status


class LinkLostError(TransportError):
    """Device unreachable, the link was probably dropped."""


class ProtocolFaultError(TransportError):
    """GATT protocol error reported by the peripheral."""


class PermissionDeniedError(TransportError):
    """Access to the characteristic was denied."""


class TransportFailureError(TransportError):
    """Any other non-success transport status."""


class WriteFailedError(TransportError):
    """Pin selector write failed in the legacy polling protocol."""


class ReadTimeoutError(BLETimeoutError):
    """Legacy polling exhausted its retry budget without a response."""

    def __init__(self, pin: int, attempts: int):
        super().__init__(f"No response for GPIO{pin} after {attempts} attempts")
        self.pin = pin
        self.attempts = attempts


class DecodeError(BleioError):
    """Response frame has an invalid shape."""


class EmptyResponseError(DecodeError):
    """Response frame contained no bytes."""


class LengthMismatchError(DecodeError):
    """Response length disagrees with its count prefix."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Response length mismatch: expected {expected} bytes, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class MalformedResponseError(BleioError):
    """A successful read returned a frame that failed validation.

    Attributes:
        expected: Expected frame length, if known
        actual: Received frame length
    """

    def __init__(self, message: str, expected: int | None = None, actual: int | None = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
