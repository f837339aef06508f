"""Device capabilities model."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ReadProtocol


@dataclass
class DeviceCapabilities:
    """Features available on the connected firmware, derived from resolved characteristics."""

    adc: bool
    read_protocol: ReadProtocol
