"""Single GPIO command record."""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import OutOfRangeError


def _check_u8(name: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise OutOfRangeError(f"{name} out of range: {value} (must be 0-255)")


@dataclass(frozen=True, slots=True)
class GpioCommand:
    """One remote operation: 4 bytes on the wire (pin, opcode, param1, param2)."""

    pin: int
    opcode: int
    param1: int = 0
    param2: int = 0

    def __post_init__(self) -> None:
        _check_u8("pin", self.pin)
        _check_u8("opcode", self.opcode)
        _check_u8("param1", self.param1)
        _check_u8("param2", self.param2)

    def to_bytes(self) -> bytes:
        """Serialize to the 4-byte command record."""
        return bytes([self.pin, self.opcode, self.param1, self.param2])

    @classmethod
    def from_bytes(cls, data: bytes) -> GpioCommand:
        """Parse a 4-byte command record."""
        if len(data) != 4:
            raise ValueError(f"GPIO command must be exactly 4 bytes, got {len(data)}")
        return cls(pin=data[0], opcode=data[1], param1=data[2], param2=data[3])
