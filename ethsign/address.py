"""Twenty-byte Ethereum addresses and their text forms."""

from __future__ import annotations

import binascii

from .hexbytes import keccak256

ADDRESS_LENGTH = 20


class AddressError(ValueError):
    """Raised when a value is not a valid address."""


class Address(bytes):
    """A 20-byte address; formats as lower-case ``0x`` hex by default."""

    def __new__(cls, value: bytes = bytes(ADDRESS_LENGTH)) -> "Address":
        raw = bytes(value)
        if len(raw) != ADDRESS_LENGTH:
            raise AddressError(
                f"bad address - must be {ADDRESS_LENGTH} bytes (len={len(raw)})"
            )
        return super().__new__(cls, raw)

    @classmethod
    def parse(cls, text: str) -> "Address":
        """Parse hex text, with or without ``0x``, in any letter case."""
        if not isinstance(text, str):
            raise AddressError(
                f"bad address: expected a string, got {type(text).__name__}"
            )
        try:
            raw = binascii.unhexlify(text.removeprefix("0x"))
        except (binascii.Error, ValueError) as err:
            raise AddressError(f"bad address: {err}") from err
        return cls(raw)

    def to_hex(self) -> str:
        """Lower-case hex with an ``0x`` prefix and no checksum."""
        return "0x" + self.hex()

    def to_plain_hex(self) -> str:
        """Lower-case hex with no prefix."""
        return self.hex()

    def to_checksum(self) -> str:
        """EIP-55 mixed-case checksum form with an ``0x`` prefix."""
        hex_addr = self.hex()
        hex_hash = keccak256(hex_addr.encode("ascii")).hex()
        chars = (
            ch.upper() if int(hash_digit, 16) >= 8 else ch.lower()
            for ch, hash_digit in zip(hex_addr, hex_hash)
        )
        return "0x" + "".join(chars)

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"Address({self.to_hex()!r})"


def parse_address(text: str) -> Address:
    """Parse an address from hex text."""
    return Address.parse(text)