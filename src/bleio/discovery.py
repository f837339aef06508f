"""Discovery of BLEIO peripherals."""

from __future__ import annotations

import logging

from bleak import BleakScanner

from .protocol import SERVICE_UUID

_LOGGER = logging.getLogger(__name__)


async def discover_devices(timeout: float = 5.0) -> dict[str, str]:
    """Scan for devices advertising the BLEIO service.

    Args:
        timeout: Scan duration in seconds (default: 5)

    Returns:
        Mapping of device address to advertised name
    """
    found = await BleakScanner.discover(timeout=timeout, return_adv=True)

    devices: dict[str, str] = {}
    for address, (device, adv) in found.items():
        uuids = [uuid.lower() for uuid in adv.service_uuids]
        if SERVICE_UUID not in uuids:
            continue
        devices[address] = adv.local_name or device.name or ""
        _LOGGER.debug("Found %s (%s) rssi=%s", devices[address], address, adv.rssi)

    _LOGGER.info("Discovered %d BLEIO device(s)", len(devices))
    return devices
