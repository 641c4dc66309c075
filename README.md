# ethsign

Building blocks for signing Ethereum transactions and for handling V3
keystore wallet files:

- **Hex value types**: `HexBytes`, `Address` (plain, `0x` and EIP-55
  checksum forms) and `HexInteger`, a non-negative integer written as `0x`
  hex. `HexInteger` reads hex strings, decimal strings and JSON numbers.
- **Transactions**: `Transaction` builds the RLP field lists and signature
  payloads for original legacy, EIP-155 and EIP-1559 transactions. It signs
  through any `Signer` you supply.
- **Keystores**: reads V3 keystore files that use scrypt or pbkdf2
  (`hmac-sha256`) key derivation with AES-128-CTR encryption, and writes new
  scrypt keystores.

## Installation

```
pip install ethsign
```

To run the test suite, install the extra and run pytest:

```
pip install "ethsign[test]"
pytest
```

## Hex values

```python
from ethsign.address import Address
from ethsign.hexbytes import HexBytes, keccak256
from ethsign.hexinteger import HexInteger

addr = Address.parse("497EEDC4299DEA2F2A364BE10025D0AD0F702DE3")
addr.to_hex()        # '0x497eedc4299dea2f2a364be10025d0ad0f702de3'
addr.to_plain_hex()  # '497eedc4299dea2f2a364be10025d0ad0f702de3'
addr.to_checksum()   # '0x497EEdc4299Dea2f2A364Be10025d0aD0f702De3'

data = HexBytes.from_hex("0xFEEDBEEF")
data.prefixed()      # '0xfeedbeef'
data.plain()         # 'feedbeef'

HexInteger.parse("54321").to_hex()   # '0xd431'
HexInteger.parse(12345).to_hex()     # '0x3039'

keccak256(b"hello")  # 32-byte Keccak-256 digest, as HexBytes
```

Bad input raises an exception:

- `Address.parse("0x00")` raises `AddressError`, because an address must be
  20 bytes.
- `HexInteger.parse("-1")` raises `ValueError`, because negative values are
  not supported.

## Transactions

`Transaction.sign` chooses the signing scheme from the fields that are set:

- If `max_priority_fee_per_gas` or `max_fee_per_gas` is above zero, it uses
  EIP-1559. The result is prefixed with the type byte `0x02`.
- Otherwise it uses legacy EIP-155, where V is `2 * chain_id + 35 + parity`.

To produce original legacy signatures, with V equal to 27 or 28, call
`sign_legacy_original`.

`signature_payload(chain_id)` returns the bytes that are signed, without
signing them. Its `hash()` method gives the Keccak-256 digest, which you can
use to check a signature.

To sign, subclass `Signer` and implement `sign(message)`. It must return a
`SignatureData` whose `v` is 27 or 28. Passing `None` as the signer raises
`SignerError`.

`rlp_encode` performs the RLP encoding that these payloads use.

## Keystore files

```python
import secrets

from ethsign.keystore import (
    address_from_private_key,
    new_wallet_file_light,
    read_wallet_file,
)

password = "password"
wallet = new_wallet_file_light(password, secrets.token_bytes(32))
document = wallet.to_json()

restored = read_wallet_file(document, password)
assert restored.private_key == wallet.private_key
print(address_from_private_key(restored.private_key).to_hex())
```

`new_wallet_file_standard` works the same way but uses the standard scrypt
cost parameters (N=1024 rather than N=4096).

`read_wallet_file` raises `KeystoreError` in these cases:

- malformed JSON
- a missing `id`
- a keystore version other than 3
- an unsupported KDF or PRF
- a wrong password, detected when the MAC does not match

Lower-level helpers are also available:

- `scrypt_key` and `pbkdf2_key` in `ethsign.kdf`
- `aes128_ctr_encrypt` and `aes128_ctr_decrypt` in `ethsign.aes128ctr`

## What this package does not do

- It has no secp256k1 signer of its own. You supply the `Signer`
  implementation that produces signatures.
- It does not recover addresses from signatures.
- It does not decode RLP.
- It does not sign EIP-712 typed data.
- It does not watch or manage a directory of keystore files.
- It has no command-line program and no server.