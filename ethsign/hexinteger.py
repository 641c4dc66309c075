"""Non-negative integers that format as ``0x`` hex and parse flexibly."""

from __future__ import annotations

_PREFIX_BASES = {"0x": 16, "0X": 16, "0b": 2, "0B": 2, "0o": 8, "0O": 8}


def _parse_integer_text(text: str) -> int:
    """Parse text with base detection: 0x/0b/0o prefixes, leading 0 for octal."""
    if not text or text != text.strip():
        raise ValueError(text)
    sign = 1
    body = text
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    base = 10
    prefix = body[:2]
    if prefix in _PREFIX_BASES:
        base = _PREFIX_BASES[prefix]
        body = body[2:]
    elif len(body) > 1 and body[0] == "0":
        base = 8
        body = body[1:]
    if not body or body[0] in "+-_" or body[-1] == "_":
        raise ValueError(text)
    return sign * int(body, base)


class HexInteger(int):
    """An integer that formats as ``0x`` hex with no leading zeros."""

    @classmethod
    def parse(cls, value: object) -> "HexInteger":
        """Parse a JSON-style value: a number, or a string in any base."""
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise TypeError(
                f"unable to parse integer from type {type(value).__name__}"
            )
        if isinstance(value, float):
            return cls(int(value))
        if isinstance(value, int):
            return cls(value)
        try:
            number = _parse_integer_text(value)
        except ValueError as err:
            raise ValueError(f"unable to parse integer: {value}") from err
        if number < 0:
            raise ValueError(f"negative values are not supported: {value}")
        return cls(number)

    @classmethod
    def scan(cls, value: object) -> "HexInteger | None":
        """Restore a value read from a database column; NULL gives None."""
        if value is None:
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise TypeError(
            f"failed to restore type '{type(value).__name__}' into HexInteger"
        )

    def to_hex(self) -> str:
        """Format as ``0x`` followed by lower-case hex digits."""
        return "0x" + format(int(self), "x")

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"HexInteger({self.to_hex()})"


def parse_hex_integer(value: object) -> HexInteger:
    """Parse a JSON-style value into a HexInteger."""
    return HexInteger.parse(value)


def format_hex_integer(value: int | None) -> str | None:
    """Format an integer as ``0x`` hex; None stays None."""
    if value is None:
        return None
    return HexInteger(value).to_hex()