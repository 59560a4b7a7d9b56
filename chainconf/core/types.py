"""
Domain value types referenced by configuration groups.
"""

from dataclasses import dataclass

from chainconf.utils.validation import ADDRESS_SIZE, validate_hex_string


def hex_to_bytes(value: str) -> bytes:
    """Decode a hex string, with or without 0x prefix."""
    valid, err = validate_hex_string(value, "hex")
    if not valid:
        raise ValueError(err)
    if value[:2] in ("0x", "0X"):
        value = value[2:]
    return bytes.fromhex(value)


def bytes_to_hex(data: bytes) -> str:
    """Encode bytes as 0x-prefixed hex."""
    return "0x" + data.hex()


@dataclass(frozen=True)
class Address:
    """
    A 20-byte account address.

    Shorter inputs are left-padded with zeros, so "0x1" and
    "0x0000000000000000000000000000000000000001" are the same address.
    """

    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, bytes):
            raise TypeError(f"address must be bytes, got {type(self.raw).__name__}")
        if len(self.raw) != ADDRESS_SIZE:
            raise ValueError(f"address must be {ADDRESS_SIZE} bytes, got {len(self.raw)}")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Address":
        if len(data) > ADDRESS_SIZE:
            raise ValueError(f"address must be at most {ADDRESS_SIZE} bytes, got {len(data)}")
        return cls(bytes(data).rjust(ADDRESS_SIZE, b"\x00"))

    @classmethod
    def from_hex(cls, value: str) -> "Address":
        return cls.from_bytes(hex_to_bytes(value))

    def to_hex(self) -> str:
        return bytes_to_hex(self.raw)

    def __str__(self) -> str:
        return self.to_hex()
