"""Version 3 JSON keystore files: reading, decrypting and creating them."""

from __future__ import annotations

import hmac
import json
import os
import uuid
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .address import Address
from .aes128ctr import aes128_ctr_decrypt, aes128_ctr_encrypt
from .hexbytes import decode_hex, keccak256
from .kdf import KeyDerivationError, pbkdf2_key, scrypt_key

VERSION3 = 3
CIPHER_AES128_CTR = "aes-128-ctr"
KDF_SCRYPT = "scrypt"
KDF_PBKDF2 = "pbkdf2"
PRF_HMAC_SHA256 = "hmac-sha256"

DEFAULT_R = 8
N_LIGHT = 1 << 12
N_STANDARD = 1 << 10
P_DEFAULT = 1

_SECP256K1_ORDER = int(
    "fffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141", 16
)


class KeystoreError(ValueError):
    """Raised when a keystore file cannot be read or decrypted."""


def _password_bytes(password: str | bytes) -> bytes:
    if isinstance(password, str):
        return password.encode("utf-8")
    return bytes(password)


def _normalise_private_key(private_key: bytes) -> bytes:
    scalar = int.from_bytes(bytes(private_key), byteorder="big")
    if not 0 < scalar < _SECP256K1_ORDER:
        raise KeystoreError("invalid private key: out of range for secp256k1")
    return scalar.to_bytes(32, byteorder="big")


def address_from_private_key(private_key: bytes) -> Address:
    """Return the address belonging to a secp256k1 private key."""
    scalar = int.from_bytes(_normalise_private_key(private_key), byteorder="big")
    public_key = ec.derive_private_key(scalar, ec.SECP256K1()).public_key()
    point = public_key.public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
    )
    return Address(keccak256(point[1:])[-20:])


def generate_mac(mac_key: bytes, ciphertext: bytes) -> bytes:
    """Keccak-256 over the MAC half of the derived key and the ciphertext."""
    return bytes(keccak256(mac_key, ciphertext))


def _get_int(data: dict, key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field '{key}' must be an integer")
    return value


def _get_str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string")
    return value


def _get_hex(data: dict, key: str) -> bytes:
    value = data.get(key)
    if value is None:
        return b""
    return decode_hex(value)


def _get_object(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"field '{key}' must be an object")
    return value


@dataclass(frozen=True)
class _ScryptParams:
    dklen: int
    n: int
    p: int
    r: int
    salt: bytes

    kdf: ClassVar[str] = KDF_SCRYPT
    parse_error: ClassVar[str] = "invalid scrypt wallet file"

    @classmethod
    def from_dict(cls, data: dict) -> "_ScryptParams":
        return cls(
            dklen=_get_int(data, "dklen"),
            n=_get_int(data, "n"),
            p=_get_int(data, "p"),
            r=_get_int(data, "r"),
            salt=_get_hex(data, "salt"),
        )

    def derive(self, password: bytes) -> bytes:
        try:
            return scrypt_key(password, self.salt, self.n, self.r, self.p, self.dklen)
        except KeyDerivationError as err:
            raise KeystoreError(f"invalid scrypt keystore: {err}") from err

    def to_dict(self) -> dict:
        return {
            "dklen": self.dklen,
            "n": self.n,
            "p": self.p,
            "r": self.r,
            "salt": self.salt.hex(),
        }


@dataclass(frozen=True)
class _Pbkdf2Params:
    dklen: int
    c: int
    prf: str
    salt: bytes

    kdf: ClassVar[str] = KDF_PBKDF2
    parse_error: ClassVar[str] = "invalid pbkdf2 keystore"

    @classmethod
    def from_dict(cls, data: dict) -> "_Pbkdf2Params":
        return cls(
            dklen=_get_int(data, "dklen"),
            c=_get_int(data, "c"),
            prf=_get_str(data, "prf"),
            salt=_get_hex(data, "salt"),
        )

    def derive(self, password: bytes) -> bytes:
        if self.prf != PRF_HMAC_SHA256:
            raise KeystoreError(
                f"invalid pbkdf2 wallet file: unsupported prf '{self.prf}'"
            )
        try:
            return pbkdf2_key(password, self.salt, self.c, self.dklen, "sha256")
        except KeyDerivationError as err:
            raise KeystoreError(f"invalid pbkdf2 keystore: {err}") from err

    def to_dict(self) -> dict:
        return {
            "dklen": self.dklen,
            "c": self.c,
            "prf": self.prf,
            "salt": self.salt.hex(),
        }


_KDFParams = Union[_ScryptParams, _Pbkdf2Params]
_KDF_TYPES: dict[str, type] = {KDF_SCRYPT: _ScryptParams, KDF_PBKDF2: _Pbkdf2Params}


@dataclass
class WalletFile:
    """A decrypted V3 keystore file and the private key it holds."""

    address: Address
    id: uuid.UUID
    ciphertext: bytes
    iv: bytes
    mac: bytes
    kdf_params: _KDFParams
    private_key: bytes = field(repr=False)
    version: int = VERSION3
    cipher: str = CIPHER_AES128_CTR

    @property
    def kdf(self) -> str:
        """Name of the key derivation function."""
        return self.kdf_params.kdf

    def to_dict(self) -> dict[str, Any]:
        """The keystore document as JSON-ready data."""
        return {
            "address": self.address.to_plain_hex(),
            "id": str(self.id),
            "version": self.version,
            "crypto": {
                "cipher": self.cipher,
                "ciphertext": self.ciphertext.hex(),
                "cipherparams": {"iv": self.iv.hex()},
                "kdf": self.kdf,
                "mac": self.mac.hex(),
                "kdfparams": self.kdf_params.to_dict(),
            },
        }

    def to_json(self) -> str:
        """The keystore document as compact JSON text."""
        return json.dumps(self.to_dict(), separators=(",", ":"))


def _decrypt_common(
    derived_key: bytes, ciphertext: bytes, mac: bytes, iv: bytes
) -> bytes:
    if len(derived_key) != 32:
        raise KeystoreError(
            f"invalid scrypt keystore: derived key length {len(derived_key)} != 32"
        )
    if not hmac.compare_digest(generate_mac(derived_key[16:32], ciphertext), mac):
        raise KeystoreError("invalid password provided")
    try:
        return aes128_ctr_decrypt(derived_key[0:16], iv, ciphertext)
    except ValueError as err:
        raise KeystoreError(str(err)) from err


def _parse_address(document: dict) -> Address:
    if "address" not in document:
        return Address()
    return Address.parse(document["address"])


def _parse_id(document: dict) -> uuid.UUID | None:
    value = document.get("id")
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("field 'id' must be a string")
    return uuid.UUID(value)


def read_wallet_file(json_wallet: str | bytes, password: str | bytes) -> WalletFile:
    """Parse a V3 keystore document and decrypt its private key."""
    try:
        document = json.loads(json_wallet)
        if not isinstance(document, dict):
            raise ValueError("expected a JSON object")
        address = _parse_address(document)
        key_id = _parse_id(document)
        version = _get_int(document, "version")
        crypto = _get_object(document, "crypto")
        cipher = _get_str(crypto, "cipher")
        ciphertext = _get_hex(crypto, "ciphertext")
        iv = _get_hex(_get_object(crypto, "cipherparams"), "iv")
        kdf = _get_str(crypto, "kdf")
        mac = _get_hex(crypto, "mac")
    except (ValueError, TypeError) as err:
        raise KeystoreError(f"invalid wallet file: {err}") from err

    if key_id is None:
        raise KeystoreError("missing keyfile id")
    if version != VERSION3:
        raise KeystoreError(
            f"incorrect keyfile version (only V3 supported): {version}"
        )
    params_type = _KDF_TYPES.get(kdf)
    if params_type is None:
        raise KeystoreError(f"unsupported kdf: {kdf}")
    try:
        params = params_type.from_dict(_get_object(crypto, "kdfparams"))
    except (ValueError, TypeError) as err:
        raise KeystoreError(f"{params_type.parse_error}: {err}") from err

    derived_key = params.derive(_password_bytes(password))
    private_key = _normalise_private_key(
        _decrypt_common(derived_key, ciphertext, mac, iv)
    )
    return WalletFile(
        address=address,
        id=key_id,
        ciphertext=ciphertext,
        iv=iv,
        mac=mac,
        kdf_params=params,
        private_key=private_key,
        version=version,
        cipher=cipher,
    )


def _new_scrypt_wallet_file(
    password: str | bytes, private_key: bytes, n: int, p: int
) -> WalletFile:
    private_key = _normalise_private_key(private_key)
    salt = os.urandom(32)
    derived_key = scrypt_key(_password_bytes(password), salt, n, DEFAULT_R, p, 32)
    iv = os.urandom(16)
    ciphertext = aes128_ctr_encrypt(derived_key[0:16], iv, private_key)
    return WalletFile(
        address=address_from_private_key(private_key),
        id=uuid.uuid4(),
        ciphertext=ciphertext,
        iv=iv,
        mac=generate_mac(derived_key[16:32], ciphertext),
        kdf_params=_ScryptParams(dklen=32, n=n, p=p, r=DEFAULT_R, salt=salt),
        private_key=private_key,
    )


def new_wallet_file_light(password: str | bytes, private_key: bytes) -> WalletFile:
    """Encrypt a private key into a scrypt keystore with N=4096."""
    return _new_scrypt_wallet_file(password, private_key, N_LIGHT, P_DEFAULT)


def new_wallet_file_standard(password: str | bytes, private_key: bytes) -> WalletFile:
    """Encrypt a private key into a scrypt keystore with N=1024."""
    return _new_scrypt_wallet_file(password, private_key, N_STANDARD, P_DEFAULT)