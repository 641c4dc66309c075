"""Ethereum transactions: RLP encoding, signature payloads and signing."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence, Union

from .address import Address
from .hexbytes import HexBytes, keccak256

TRANSACTION_TYPE_LEGACY = 0x00
TRANSACTION_TYPE_2930 = 0x01
TRANSACTION_TYPE_1559 = 0x02

RLPItem = Union[bytes, int, Sequence["RLPItem"]]


class SignerError(ValueError):
    """Raised when no usable signer is supplied."""


def _int_bytes(value: int) -> bytes:
    if value < 0:
        raise ValueError(f"cannot RLP encode a negative integer: {value}")
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def _length_prefix(length: int, offset: int) -> bytes:
    if length <= 55:
        return bytes([offset + length])
    length_bytes = _int_bytes(length)
    return bytes([offset + 55 + len(length_bytes)]) + length_bytes


def rlp_encode(item: RLPItem) -> bytes:
    """RLP-encode bytes, non-negative integers and (nested) lists of them."""
    if isinstance(item, (list, tuple)):
        payload = b"".join(rlp_encode(child) for child in item)
        return _length_prefix(len(payload), 0xC0) + payload
    if isinstance(item, bool):
        raise TypeError("cannot RLP encode a bool")
    if isinstance(item, int):
        raw = _int_bytes(item)
    elif isinstance(item, (bytes, bytearray, memoryview)):
        raw = bytes(item)
    else:
        raise TypeError(f"cannot RLP encode type {type(item).__name__}")
    if len(raw) == 1 and raw[0] < 0x80:
        return raw
    return _length_prefix(len(raw), 0x80) + raw


@dataclass
class SignatureData:
    """An ECDSA signature; ``v`` starts as the legacy 27/28 value."""

    v: int
    r: int
    s: int

    def update_eip155(self, chain_id: int) -> None:
        """Switch ``v`` to the EIP-155 form: 2*chainID + 35 + Y-parity."""
        self.v = self.v - 27 + chain_id * 2 + 35

    def update_eip2930(self) -> None:
        """Switch ``v`` to the direct 0/1 Y-parity value."""
        self.v = self.v - 27


class Signer(ABC):
    """Something that signs a message (hashing it first) with a secp256k1 key."""

    @abstractmethod
    def sign(self, message: bytes) -> SignatureData:
        """Hash and sign ``message``, returning a signature with v of 27/28."""


@dataclass
class TransactionSignaturePayload:
    """The RLP fields that are signed and the exact bytes that are hashed."""

    fields: list
    data: bytes

    def hash(self) -> HexBytes:
        """Keccak-256 hash of the payload bytes."""
        return keccak256(self.data)

    def __bytes__(self) -> bytes:
        return self.data


def _as_int(value: int | None) -> int:
    return 0 if value is None else int(value)


def _require_signer(signer: Signer | None) -> Signer:
    if signer is None:
        raise SignerError("invalid signer")
    return signer


@dataclass
class Transaction:
    """An Ethereum transaction; unset numeric fields count as zero."""

    from_address: Any = None
    nonce: int | None = None
    gas_price: int | None = None
    max_priority_fee_per_gas: int | None = None
    max_fee_per_gas: int | None = None
    gas_limit: int | None = None
    to: Address | None = None
    value: int | None = None
    data: bytes = field(default=b"")

    def _to_bytes(self) -> bytes:
        return b"" if self.to is None else bytes(self.to)

    def _is_1559(self) -> bool:
        return (
            _as_int(self.max_priority_fee_per_gas) > 0
            or _as_int(self.max_fee_per_gas) > 0
        )

    def build_legacy(self) -> list:
        """Fields of a legacy transaction, without signature."""
        return [
            _int_bytes(_as_int(self.nonce)),
            _int_bytes(_as_int(self.gas_price)),
            _int_bytes(_as_int(self.gas_limit)),
            self._to_bytes(),
            _int_bytes(_as_int(self.value)),
            bytes(self.data or b""),
        ]

    def add_eip155_hash_values(self, fields: list, chain_id: int) -> list:
        """Append the chainID, 0, 0 values that EIP-155 puts into the hash."""
        return [*fields, _int_bytes(chain_id), b"", b""]

    def build_1559(self, chain_id: int) -> list:
        """Fields of an EIP-1559 transaction, with an empty access list."""
        return [
            _int_bytes(chain_id),
            _int_bytes(_as_int(self.nonce)),
            _int_bytes(_as_int(self.max_priority_fee_per_gas)),
            _int_bytes(_as_int(self.max_fee_per_gas)),
            _int_bytes(_as_int(self.gas_limit)),
            self._to_bytes(),
            _int_bytes(_as_int(self.value)),
            bytes(self.data or b""),
            [],
        ]

    def add_signature(self, fields: list, sig: SignatureData) -> list:
        """Append the V, R and S values of a signature."""
        return [*fields, _int_bytes(sig.v), _int_bytes(sig.r), _int_bytes(sig.s)]

    def sign(self, signer: Signer | None, chain_id: int) -> bytes:
        """Sign with EIP-1559 if either fee field is set, otherwise EIP-155."""
        _require_signer(signer)
        if self._is_1559():
            return self.sign_eip1559(signer, chain_id)
        return self.sign_legacy_eip155(signer, chain_id)

    def signature_payload(self, chain_id: int) -> TransactionSignaturePayload:
        """The payload that ``sign`` would sign, without signing it."""
        if self._is_1559():
            return self.signature_payload_eip1559(chain_id)
        return self.signature_payload_legacy_eip155(chain_id)

    def signature_payload_legacy_original(self) -> TransactionSignaturePayload:
        """Payload of a pre-EIP-155 legacy transaction."""
        fields = self.build_legacy()
        return TransactionSignaturePayload(fields=fields, data=rlp_encode(fields))

    def sign_legacy_original(self, signer: Signer | None) -> bytes:
        """Sign as a legacy transaction with the 27/28 V value."""
        signer = _require_signer(signer)
        payload = self.signature_payload_legacy_original()
        sig = signer.sign(payload.data)
        return rlp_encode(self.add_signature(payload.fields, sig))

    def signature_payload_legacy_eip155(
        self, chain_id: int
    ) -> TransactionSignaturePayload:
        """Payload of a legacy transaction with EIP-155 replay protection."""
        fields = self.add_eip155_hash_values(self.build_legacy(), chain_id)
        return TransactionSignaturePayload(fields=fields, data=rlp_encode(fields))

    def sign_legacy_eip155(self, signer: Signer | None, chain_id: int) -> bytes:
        """Sign as a legacy transaction with the EIP-155 V value."""
        signer = _require_signer(signer)
        payload = self.signature_payload_legacy_eip155(chain_id)
        sig = signer.sign(payload.data)
        sig.update_eip155(chain_id)
        # The chainID/0/0 hash values are not part of the signed transaction.
        return rlp_encode(self.add_signature(payload.fields[:6], sig))

    def signature_payload_eip1559(self, chain_id: int) -> TransactionSignaturePayload:
        """Payload of an EIP-1559 transaction: type byte then RLP fields."""
        fields = self.build_1559(chain_id)
        return TransactionSignaturePayload(
            fields=fields,
            data=bytes([TRANSACTION_TYPE_1559]) + rlp_encode(fields),
        )

    def sign_eip1559(self, signer: Signer | None, chain_id: int) -> bytes:
        """Sign as an EIP-1559 transaction with a 0/1 Y-parity V value."""
        signer = _require_signer(signer)
        payload = self.signature_payload_eip1559(chain_id)
        sig = signer.sign(payload.data)
        sig.update_eip2930()
        fields = self.add_signature(payload.fields, sig)
        return bytes([TRANSACTION_TYPE_1559]) + rlp_encode(fields)