"""Ethereum signing payloads, hex value types and V3 keystore wallet files."""

__version__ = "0.1.0"