"""AES-128-CTR encryption with a full 16-byte big-endian counter block."""

from __future__ import annotations

from Crypto.Cipher import AES


def _ctr_cipher(key: bytes, iv: bytes):
    try:
        return AES.new(bytes(key), AES.MODE_CTR, nonce=b"", initial_value=bytes(iv))
    except (ValueError, TypeError) as err:
        raise ValueError(f"AES initialization failed: {err}") from err


def aes128_ctr_encrypt(key: bytes, iv: bytes, plaintext: bytes) -> bytes:
    """Encrypt ``plaintext``; the IV is the initial 128-bit counter value."""
    return _ctr_cipher(key, iv).encrypt(bytes(plaintext))


def aes128_ctr_decrypt(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """Decrypt ``ciphertext``; the IV is the initial 128-bit counter value."""
    return _ctr_cipher(key, iv).decrypt(bytes(ciphertext))