"""Byte strings that read and write as hex, plus Keccak-256 hashing."""

from __future__ import annotations

import binascii

from Crypto.Hash import keccak


def decode_hex(text: str) -> bytes:
    """Decode hex text, with or without a leading ``0x``, into bytes."""
    if not isinstance(text, str):
        raise TypeError(f"bad hex: expected a string, got {type(text).__name__}")
    digits = text.removeprefix("0x")
    try:
        return binascii.unhexlify(digits)
    except (binascii.Error, ValueError) as err:
        raise ValueError(f"bad hex: {err}") from err


def keccak256(*args: bytes) -> "HexBytes":
    """Return the legacy Keccak-256 digest of the concatenated arguments."""
    digest = keccak.new(digest_bits=256)
    for chunk in args:
        digest.update(bytes(chunk))
    return HexBytes(digest.digest())


class HexBytes(bytes):
    """Bytes that format as hex, either plain or with an ``0x`` prefix."""

    @classmethod
    def from_hex(cls, text: str) -> "HexBytes":
        """Parse hex text, with or without a leading ``0x``."""
        return cls(decode_hex(text))

    def plain(self) -> str:
        """Lower-case hex with no prefix."""
        return self.hex()

    def prefixed(self) -> str:
        """Lower-case hex with an ``0x`` prefix."""
        return "0x" + self.hex()

    def __str__(self) -> str:
        return self.prefixed()

    def __repr__(self) -> str:
        return f"HexBytes({self.prefixed()!r})"