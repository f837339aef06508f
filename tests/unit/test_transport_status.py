"""Test transport status mapping."""

import asyncio

import pytest
from bleak.exc import BleakError

from bleio.exceptions import (
    LinkLostError,
    PermissionDeniedError,
    ProtocolFaultError,
    TransportError,
    TransportFailureError,
)
from bleio.models.enums import GattStatus
from bleio.transport import CharRef, DeviceHandle, DeviceRef, ServiceRef, raise_for_status
from bleio.transport.bleak_transport import BleakTransport, status_from_exception


class TestRaiseForStatus:
    """Test status code to exception mapping."""

    def test_success_is_silent(self):
        raise_for_status(GattStatus.SUCCESS, "write")

    @pytest.mark.parametrize("status, error", [
        (GattStatus.UNREACHABLE, LinkLostError),
        (GattStatus.PROTOCOL_ERROR, ProtocolFaultError),
        (GattStatus.ACCESS_DENIED, PermissionDeniedError),
        (17, TransportFailureError),
    ])
    def test_mapping(self, status, error):
        with pytest.raises(error) as exc_info:
            raise_for_status(status, "read")

        assert isinstance(exc_info.value, TransportError)
        assert exc_info.value.status == int(status)
        assert str(exc_info.value).startswith("Read failed")


class TestStatusFromException:
    """Test bleak exception classification."""

    def test_timeout_is_unreachable(self):
        assert status_from_exception(asyncio.TimeoutError()) == GattStatus.UNREACHABLE

    def test_not_connected_is_unreachable(self):
        assert status_from_exception(BleakError("Not connected")) == GattStatus.UNREACHABLE

    def test_auth_is_access_denied(self):
        error = BleakError("Write not permitted")
        assert status_from_exception(error) == GattStatus.ACCESS_DENIED

    def test_other_is_protocol_error(self):
        assert status_from_exception(BleakError("ATT error 0x0e")) == GattStatus.PROTOCOL_ERROR

    def test_dropped_link_is_unreachable(self):
        assert status_from_exception(EOFError()) == GattStatus.UNREACHABLE
        assert status_from_exception(BrokenPipeError()) == GattStatus.UNREACHABLE


class _FailingClient:
    def __init__(self, error):
        self.error = error

    async def write_gatt_char(self, char, data, response):
        raise self.error

    async def read_gatt_char(self, char):
        raise self.error


def _char_on(client) -> CharRef:
    device = DeviceHandle(ref=DeviceRef(address="AA:BB:CC:DD:EE:FF"), raw=client)
    service = ServiceRef(uuid="4fafc201-1fb5-459e-8fcc-c5c9c333914b", device=device)
    return CharRef(uuid="beb5483e-36e1-4688-b7f5-ea07361b26a8", service=service)


class TestBleakTransportErrors:
    """Backend exceptions become status codes instead of escaping."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error, status", [
        (EOFError(), GattStatus.UNREACHABLE),
        (OSError("Input/output error"), GattStatus.PROTOCOL_ERROR),
        (BleakError("Not connected"), GattStatus.UNREACHABLE),
    ])
    async def test_write_maps_backend_error(self, error, status):
        char = _char_on(_FailingClient(error))

        assert await BleakTransport().write_char(char, b'\x01') == status

    @pytest.mark.asyncio
    async def test_read_maps_backend_error(self):
        char = _char_on(_FailingClient(EOFError()))

        assert await BleakTransport().read_char(char) == (GattStatus.UNREACHABLE, b"")
