"""Digital input readers for the two firmware read protocols."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, TypeVar

from .exceptions import (
    DecodeError,
    FeatureUnavailableError,
    LengthMismatchError,
    MalformedResponseError,
)
from .models.enums import ReadProtocol
from .models.readings import DigitalReading
from .protocol import decode_digital_reads
from .transport import DEFAULT_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL, DeviceSession

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def decode_response(decoder: Callable[[bytes], T], data: bytes) -> T:
    """Run a frame decoder, reporting shape errors as MalformedResponseError.

    The transport read itself succeeded at this point, so a bad frame is a
    device-side problem rather than a link failure.
    """
    try:
        return decoder(data)
    except LengthMismatchError as e:
        raise MalformedResponseError(str(e), expected=e.expected, actual=e.actual) from e
    except DecodeError as e:
        raise MalformedResponseError(str(e), actual=len(data)) from e


class InputReader(ABC):
    """Reads digital input state from a session."""

    protocol: ReadProtocol

    def __init__(self, session: DeviceSession):
        self._session = session

    @abstractmethod
    async def read_all(self) -> list[DigitalReading]:
        """Read every pin configured as input."""

    @abstractmethod
    async def read_input(self, pin: int) -> bool | None:
        """Read one pin; None if it is not configured as input."""


class BatchReadAll(InputReader):
    """Count-prefixed read of all inputs in one characteristic read."""

    protocol = ReadProtocol.BATCH_READ_ALL

    async def read_all(self) -> list[DigitalReading]:
        data = await self._session.read_inputs()
        readings = decode_response(decode_digital_reads, data)
        for reading in readings:
            _LOGGER.debug("    GPIO%d: %s", reading.pin, "HIGH" if reading.state else "LOW")
        _LOGGER.debug("Read %d input pins", len(readings))
        return readings

    async def read_input(self, pin: int) -> bool | None:
        readings = await self.read_all()
        for reading in readings:
            if reading.pin == pin:
                return reading.state

        # Absent GPIO0 reads as LOW
        if pin == 0:
            return False
        _LOGGER.debug("GPIO%d is not configured as input", pin)
        return None


class SinglePinPoll(InputReader):
    """Legacy protocol answering for one pin per request."""

    protocol = ReadProtocol.SINGLE_PIN_POLL

    def __init__(
            self,
            session: DeviceSession,
            attempts: int = DEFAULT_POLL_ATTEMPTS,
            interval: float = DEFAULT_POLL_INTERVAL,
    ):
        super().__init__(session)
        self.attempts = attempts
        self.interval = interval

    async def read_all(self) -> list[DigitalReading]:
        raise FeatureUnavailableError(
            "Legacy firmware cannot report all inputs at once"
        )

    async def read_input(self, pin: int) -> bool | None:
        reading = await self._session.poll_pin(pin, attempts=self.attempts, interval=self.interval)
        return reading.state


def select_reader(
        session: DeviceSession,
        protocol: ReadProtocol | None = None,
        poll_attempts: int = DEFAULT_POLL_ATTEMPTS,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> InputReader:
    """Pick the reader for a session.

    Without an explicit protocol, firmware exposing the ADC characteristic
    is the extended firmware and uses batch reads; anything else is assumed
    to speak the legacy single-pin protocol.
    """
    if protocol is None:
        protocol = ReadProtocol.BATCH_READ_ALL if session.has_adc else ReadProtocol.SINGLE_PIN_POLL

    if protocol == ReadProtocol.BATCH_READ_ALL:
        return BatchReadAll(session)
    return SinglePinPoll(session, attempts=poll_attempts, interval=poll_interval)
