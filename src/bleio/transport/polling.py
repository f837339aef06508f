"""Legacy single-pin read protocol.

Older firmware answers for one pin per request: the client writes the pin
number to the read characteristic, then polls it until the device has placed
a [pin, state] pair there.
"""

from __future__ import annotations

import asyncio
import logging

from ..exceptions import ReadTimeoutError, WriteFailedError
from ..models.enums import GattStatus
from ..models.readings import DigitalReading
from ..protocol import build_single_pin_read_request, decode_single_pin_response
from .base import BLETransport, CharRef
from .status import raise_for_status

_LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_ATTEMPTS = 30
DEFAULT_POLL_INTERVAL = 0.1  # seconds


async def poll_single_pin(
        transport: BLETransport,
        char: CharRef,
        pin: int,
        attempts: int = DEFAULT_POLL_ATTEMPTS,
        interval: float = DEFAULT_POLL_INTERVAL,
) -> DigitalReading:
    """Read one pin using the legacy write-then-poll protocol.

    Args:
        transport: Transport to issue the write and reads through
        char: Digital read characteristic
        pin: GPIO number
        attempts: Maximum number of reads (default: 30)
        interval: Delay between reads in seconds (default: 0.1)

    Returns:
        Reading decoded from the first response of at least 2 bytes

    Raises:
        WriteFailedError: If writing the pin selector fails (not retried)
        TransportError: If a read fails at the transport level (not retried)
        ReadTimeoutError: If no complete response arrives within the budget
    """
    status = await transport.write_char(char, build_single_pin_read_request(pin))
    if status != GattStatus.SUCCESS:
        raise WriteFailedError(
            f"Writing pin selector for GPIO{pin} failed with status {int(status)}",
            status=int(status),
        )

    for attempt in range(attempts):
        if attempt > 0:
            await asyncio.sleep(interval)

        status, response = await transport.read_char(char)
        raise_for_status(status, "read")

        reading = decode_single_pin_response(response)
        if reading is not None:
            _LOGGER.debug(
                "GPIO%d read on attempt %d: %s",
                pin,
                attempt + 1,
                response.hex(),
            )
            return reading

        if response:
            _LOGGER.debug(
                "Short response on attempt %d (%d bytes, need 2), retrying",
                attempt + 1,
                len(response),
            )

    raise ReadTimeoutError(pin=pin, attempts=attempts)
