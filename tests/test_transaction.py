import pytest

from ethsign.address import Address
from ethsign.hexinteger import HexInteger
from ethsign.transaction import (
    TRANSACTION_TYPE_1559,
    SignatureData,
    Signer,
    SignerError,
    Transaction,
    rlp_encode,
)

INPUT_DATA_HEX = (
    "3674e15c00000000000000000000000000000000000000000000000000000000000000a0"
    "3f04a4e93ded4d2aaa1a41d617e55c59ac5f1b28a47047e2a526e76d45eb9681"
    "d19642e9120d63a9b7f5f537565a430d8ad321ef1bc76689a4b3edc861c640fc"
    "00000000000000000000000000000000000000000000000000000000000000e0"
    "0000000000000000000000000000000000000000000000000000000000000140"
    "0000000000000000000000000000000000000000000000000000000000000009"
    "66665f73797374656d0000000000000000000000000000000000000000000000"
    "000000000000000000000000000000000000000000000000000000000000002e"
    "516d58747653456758626265506855684165364167426f3465796a7053434b43"
    "7834515a4c50793548646a617773000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000001"
    "a1f7502c8f8797999c0c6b9c2da653ea736598ed0daa856c47ae71411aa8fea2"
)
INPUT_DATA = bytes.fromhex(INPUT_DATA_HEX)
TO_ADDR = Address.parse("0x497eedc4299dea2f2a364be10025d0ad0f702de3")

FIXED_R = 0xEA6E1513D716146AF3A02E1497FBE7FC3B2FFB08CCB4A1BFEF4EAA2A122F62DF
FIXED_S = 0xDDC23AEC20948A55D3E1F8AFD29B5570D8D279450A472B55561EF6AFE4A07FF


class FixedSigner(Signer):
    def __init__(self, v=28):
        self.v = v
        self.messages = []

    def sign(self, message):
        self.messages.append(message)
        return SignatureData(v=self.v, r=FIXED_R, s=FIXED_S)


class FailingSigner(Signer):
    def sign(self, message):
        raise RuntimeError("pop")


def legacy_txn():
    return Transaction(
        nonce=HexInteger(3),
        gas_price=HexInteger(100000000),
        gas_limit=HexInteger(40574),
        to=TO_ADDR,
        data=INPUT_DATA,
        value=HexInteger(100000000),
    )


def eip1559_txn():
    return Transaction(
        nonce=HexInteger(3),
        max_priority_fee_per_gas=HexInteger(123456780),
        max_fee_per_gas=HexInteger(150000000),
        gas_limit=HexInteger(40574),
        to=TO_ADDR,
        data=INPUT_DATA,
        value=HexInteger(100000000),
    )


@pytest.mark.parametrize(
    "item, expected",
    [
        (b"", "80"),
        (b"\x0f", "0f"),
        (b"\x80", "8180"),
        (b"dog", "83646f67"),
        ([], "c0"),
        ([b"cat", b"dog"], "c88363617483646f67"),
        (0, "80"),
        (1024, "820400"),
        ([[], [[]], [[], [[]]]], "c7c0c1c0c3c0c1c0"),
    ],
)
def test_rlp_encode_known_values(item, expected):
    assert rlp_encode(item).hex() == expected


def test_rlp_encode_long_string():
    payload = b"a" * 56
    assert rlp_encode(payload) == b"\xb8\x38" + payload


def test_rlp_encode_rejects_negative_and_bad_types():
    with pytest.raises(ValueError):
        rlp_encode(-1)
    with pytest.raises(TypeError):
        rlp_encode("text")


def test_encode_existing_legacy_eip155():
    expected_raw = bytes.fromhex(
        "f901e70380829e7e94497eedc4299dea2f2a364be10025d0ad0f702de380b90184"
        + INPUT_DATA_HEX
        + "820feea002e6e9728373680d0a7d75f99697d3887069dd5db4b9581c42bfb5749fb5fc80"
        + "a0032e8717112b372f41c4a2a46ad0ea807f56645990130cbbc60614f2240a3a1a"
    )
    txn = Transaction(
        nonce=HexInteger(3),
        gas_limit=HexInteger(40574),
        to=TO_ADDR,
        data=INPUT_DATA,
    )
    sig = SignatureData(
        v=0xFEE,
        r=0x2E6E9728373680D0A7D75F99697D3887069DD5DB4B9581C42BFB5749FB5FC80,
        s=0x32E8717112B372F41C4A2A46AD0EA807F56645990130CBBC60614F2240A3A1A,
    )
    raw = rlp_encode(txn.add_signature(txn.build_legacy(), sig))
    assert raw == expected_raw


def test_encode_existing_eip1559():
    expected_hex = (
        "02f89701248459682f00854e58be5c3c8302b13d943c99f2a4b366d46bcf2277639a135a6d"
        "1288eceb878e1bc9bf040000a4a0712d6800000000000000000000000000000000000000"
        "00000000000000000000000001c001a0ea6e1513d716146af3a02e1497fbe7fc3b2ffb08"
        "ccb4a1bfef4eaa2a122f62dfa00ddc23aec20948a55d3e1f8afd29b5570d8d279450a472"
        "b55561ef6afe4a07ff"
    )
    txn = Transaction(
        nonce=HexInteger(0x24),
        max_fee_per_gas=HexInteger(0x4E58BE5C3C),
        max_priority_fee_per_gas=HexInteger(0x59682F00),
        gas_limit=HexInteger(0x2B13D),
        value=HexInteger(0x8E1BC9BF040000),
        to=Address.parse("0x3c99f2a4b366d46bcf2277639a135a6d1288eceb"),
        data=bytes.fromhex(
            "a0712d680000000000000000000000000000000000000000000000000000000000000001"
        ),
    )
    sig = SignatureData(v=1, r=FIXED_R, s=FIXED_S)
    fields = txn.add_signature(txn.build_1559(1), sig)
    raw = bytes([TRANSACTION_TYPE_1559]) + rlp_encode(fields)
    assert raw.hex() == expected_hex


def test_signature_payload_eip155_hash():
    payload = legacy_txn().signature_payload(1001)
    assert (
        str(payload.hash())
        == "0x4524b8ac39ace2a3a2c061b73125c19c76daf0d25d44a4d88799f3c2ba686fe6"
    )


def test_sign_auto_eip155():
    txn = legacy_txn()
    signer = FixedSigner(v=28)
    raw = txn.sign(signer, 1001)
    payload = txn.signature_payload(1001)
    assert signer.messages == [payload.data]
    expected_fields = payload.fields[:6] + [
        (2 * 1001 + 35 + 1).to_bytes(2, "big"),
        FIXED_R.to_bytes(32, "big"),
        FIXED_S.to_bytes(32, "big"),
    ]
    assert raw == rlp_encode(expected_fields)
    assert raw[0] != TRANSACTION_TYPE_1559


def test_sign_auto_eip1559():
    txn = eip1559_txn()
    signer = FixedSigner(v=28)
    raw = txn.sign(signer, 1001)
    payload = txn.signature_payload(1001)
    assert payload.data[0] == TRANSACTION_TYPE_1559
    assert signer.messages == [payload.data]
    assert raw[0] == TRANSACTION_TYPE_1559
    expected_fields = payload.fields + [
        b"\x01",
        FIXED_R.to_bytes(32, "big"),
        FIXED_S.to_bytes(32, "big"),
    ]
    assert raw[1:] == rlp_encode(expected_fields)


def test_sign_legacy_original_keeps_v():
    txn = legacy_txn()
    signer = FixedSigner(v=27)
    raw = txn.sign_legacy_original(signer)
    payload = txn.signature_payload_legacy_original()
    assert signer.messages == [payload.data]
    assert payload.data == rlp_encode(txn.build_legacy())
    expected_fields = txn.build_legacy() + [
        b"\x1b",
        FIXED_R.to_bytes(32, "big"),
        FIXED_S.to_bytes(32, "big"),
    ]
    assert raw == rlp_encode(expected_fields)


def test_empty_transaction_encodes_zero_fields():
    assert Transaction().build_legacy() == [b"", b"", b"", b"", b"", b""]
    assert rlp_encode(Transaction().build_1559(0)) == bytes.fromhex("c98080808080808080c0")


def test_signature_data_updates():
    sig = SignatureData(v=28, r=1, s=2)
    sig.update_eip155(1001)
    assert sig.v == 2038
    sig2 = SignatureData(v=27, r=1, s=2)
    sig2.update_eip2930()
    assert sig2.v == 0


def test_sign_fail_no_signer():
    txn = Transaction()
    with pytest.raises(SignerError):
        txn.sign_legacy_original(None)
    with pytest.raises(SignerError):
        txn.sign_legacy_eip155(None, 0)
    with pytest.raises(SignerError):
        txn.sign_eip1559(None, 0)
    with pytest.raises(SignerError, match="invalid signer"):
        txn.sign(None, 1001)


@pytest.mark.parametrize(
    "call",
    [
        lambda txn, s: txn.sign_legacy_original(s),
        lambda txn, s: txn.sign_legacy_eip155(s, 12345),
        lambda txn, s: txn.sign_eip1559(s, 12345),
    ],
)
def test_signer_error_propagates(call):
    with pytest.raises(RuntimeError, match="pop"):
        call(Transaction(), FailingSigner())