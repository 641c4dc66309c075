"""Password-based key derivation: scrypt and PBKDF2."""

from __future__ import annotations

import hashlib

_INT_MAX = 2**31 - 1


class KeyDerivationError(ValueError):
    """Raised when key derivation parameters are invalid."""


def _as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def scrypt_key(
    password: str | bytes, salt: bytes, n: int, r: int, p: int, dklen: int
) -> bytes:
    """Derive ``dklen`` bytes with scrypt."""
    if n <= 1 or n & (n - 1):
        raise KeyDerivationError("scrypt: N must be > 1 and a power of 2")
    if r < 1 or p < 1 or r * p >= 1 << 30 or n > _INT_MAX // 128 // r:
        raise KeyDerivationError("scrypt: parameters are too large")
    if dklen < 1:
        raise KeyDerivationError("scrypt: derived key length must be positive")
    maxmem = min(128 * r * (n + p + 2) + (1 << 16), _INT_MAX)
    try:
        return hashlib.scrypt(
            _as_bytes(password),
            salt=bytes(salt),
            n=n,
            r=r,
            p=p,
            maxmem=maxmem,
            dklen=dklen,
        )
    except (ValueError, MemoryError) as err:
        raise KeyDerivationError(f"scrypt: {err}") from err


def pbkdf2_key(
    password: str | bytes,
    salt: bytes,
    iterations: int,
    dklen: int,
    prf: str = "sha256",
) -> bytes:
    """Derive ``dklen`` bytes with PBKDF2 using HMAC over the hash ``prf``."""
    if iterations < 1:
        raise KeyDerivationError("pbkdf2: iteration count must be positive")
    if dklen < 1:
        raise KeyDerivationError("pbkdf2: derived key length must be positive")
    try:
        return hashlib.pbkdf2_hmac(
            prf, _as_bytes(password), bytes(salt), iterations, dklen
        )
    except (ValueError, TypeError) as err:
        raise KeyDerivationError(f"pbkdf2: {err}") from err