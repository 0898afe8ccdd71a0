"""
Test suite for StrKey encoding (SEP-0023).

Covers:
  - Account id / seed round trips and known vectors
  - Version byte, checksum and base32 rejection
  - Single-bit corruption of the decoded identifier
  - Muxed accounts, contracts, liquidity pools, claimable balances
  - Signed payloads: vectors, size bounds, padding validation
  - is_valid_* never raising
"""

import base64
import os
import unittest

import pytest

from stellar_crypto import strkey
from stellar_crypto.checksum import crc16_bytes
from stellar_crypto.errors import (
    InvalidChecksum,
    InvalidEncoding,
    InvalidLength,
    InvalidVersionByte,
    StellarCryptoError,
)
from stellar_crypto.strkey import SignedPayload
from stellar_crypto.version_bytes import VersionByte

ACCOUNT = "GA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJVSGZ"
MUXED = "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJVAAAAAAAAAAAAAJLK"
MUXED_HEX = "3f0c34bf93ad0d9971d04ccc90f705511c838aad9734a4a2fb0d7a03fc7fe89a8000000000000000"
POOL_HEX = "3f0c34bf93ad0d9971d04ccc90f705511c838aad9734a4a2fb0d7a03fc7fe89a"

VALID_ACCOUNTS = [
    "GBBM6BKZPEHWYO3E3YKREDPQXMS4VK35YLNU7NFBRI26RAN7GI5POFBB",
    "GB7KKHHVYLDIZEKYJPAJUOTBE5E3NJAXPSDZK7O6O44WR3EBRO5HRPVT",
    "GD6WVYRVID442Y4JVWFWKWCZKB45UGHJAABBJRS22TUSTWGJYXIUR7N2",
    "GBCG42WTVWPO4Q6OZCYI3D6ZSTFSJIXIS6INCIUF23L6VN3ADE4337AP",
    "GDFX463YPLCO2EY7NGFMI7SXWWDQAMASGYZXCG2LATOF3PP5NQIUKBPT",
    "GBXEODUMM3SJ3QSX2VYUWFU3NRP7BQRC2ERWS7E2LZXDJXL2N66ZQ5PT",
    "GAJHORKJKDDEPYCD6URDFODV7CVLJ5AAOJKR6PG2VQOLWFQOF3X7XLOG",
    "GACXQEAXYBEZLBMQ2XETOBRO4P66FZAJENDHOQRYPUIXZIIXLKMZEXBJ",
    "GDD3XRXU3G4DXHVRUDH7LJM4CD4PDZTVP4QHOO4Q6DELKXUATR657OZV",
    "GDTYVCTAUQVPKEDZIBWEJGKBQHB4UGGXI2SXXUEW7LXMD4B7MK37CWLJ",
]

INVALID_ACCOUNTS = [
    "GADE5QJ2TY7S5ZB65Q43DFGWYWCPHIYDJ2326KZGAGBN7AE5UY6JVDRRA",
    "GB6OWYST45X57HCJY5XWOHDEBULB6XUROWPIKW77L5DSNANBEQGUPADT2",
    "GB6OWYST45X57HCJY5XWOHDEBULB6XUROWPIKW77L5DSNANBEQGUPADT2T",
    "GDXIIZTKTLVYCBHURXL2UPMTYXOVNI7BRAEFQCP6EZCY4JLKY4VKFNLT",
    "SAB5556L5AN5KSR5WF7UOEFDCIODEWEO7H2UR4S5R62DFTQOGLKOVZDY",
    "GA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJVSGZA",
    "G47QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJVP2I",
    "GAAAAAAAACGC6",
    "GA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUACUSI",
    "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJVAAAAAAAAAAAAAAV75I",
    "",
]

VALID_SEEDS = [
    "SAB5556L5AN5KSR5WF7UOEFDCIODEWEO7H2UR4S5R62DFTQOGLKOVZDY",
    "SCZTUEKSEH2VYZQC6VLOTOM4ZDLMAGV4LUMH4AASZ4ORF27V2X64F2S2",
    "SCGNLQKTZ4XCDUGVIADRVOD4DEVNYZ5A7PGLIIZQGH7QEHK6DYODTFEH",
    "SDH6R7PMU4WIUEXSM66LFE4JCUHGYRTLTOXVUV5GUEPITQEO3INRLHER",
    "SC2RDTRNSHXJNCWEUVO7VGUSPNRAWFCQDPP6BGN4JFMWDSEZBRAPANYW",
    "SCEMFYOSFZ5MUXDKTLZ2GC5RTOJO6FGTAJCF3CCPZXSLXA2GX6QUYOA7",
]

INVALID_SEEDS = [
    "SAB5556L5AN5KSR5WF7UOEFDCIODEWEO7H2UR4S5R62DFTQOGLKOVZDYT",
    "SAFGAMN5Z6IHVI3IVEPIILS7ITZDYSCEPLN4FN5Z3IY63DRH4CIYEVIT",
    "GBBM6BKZPEHWYO3E3YKREDPQXMS4VK35YLNU7NFBRI26RAN7GI5POFBB",
]

INVALID_MUXED = [
    "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUAAAAAAAAAAAACJUR",
    "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJVAAAAAAAAAAAAAJLKA",
    "M47QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUAAAAAAAAAAAACJUQ",
    "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUAAAAAAAAAAAACJUK===",
    "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUAAAAAAAAAAAACJUO===",
    ACCOUNT,
]


def _reencode_raw(raw: bytes) -> str:
    return base64.b32encode(raw).decode("ascii").rstrip("=")


# ═══════════════════════════════════════════════════════════════════
#  Accounts and seeds
# ═══════════════════════════════════════════════════════════════════

class TestAccountAndSeed(unittest.TestCase):

    def test_known_vector_round_trip(self):
        account = "GBRPYHIL2CI3FNQ4BXLFMNDLFJUNPU2HY3ZMFSHONUCEOASW7QC7OX2H"
        raw = strkey.decode_account_id(account)
        self.assertEqual(len(raw), 32)
        self.assertEqual(strkey.encode_account_id(raw), account)

    def test_random_round_trip(self):
        for _ in range(20):
            raw = os.urandom(32)
            encoded = strkey.encode_account_id(raw)
            self.assertEqual(len(encoded), 56)
            self.assertTrue(encoded.startswith("G"))
            self.assertEqual(strkey.decode_account_id(encoded), raw)

    def test_seed_round_trip(self):
        raw = os.urandom(32)
        encoded = strkey.encode_seed(raw)
        self.assertTrue(encoded.startswith("S"))
        self.assertEqual(strkey.decode_seed(encoded), raw)

    def test_account_from_seed(self):
        self.assertEqual(
            strkey.account_id_from_seed("SDJHRQF4GCMIIKAAAQ6IHY42X73FQFLHUULAPSKKD4DFDM7UXWWCRHBE"),
            "GCZHXL5HXQX5ABDM26LHYRCQZ5OJFHLOPLZX47WEBP3V2PF5AVFK2A5D",
        )

    def test_valid_accounts(self):
        for account in VALID_ACCOUNTS:
            self.assertTrue(strkey.is_valid_account_id(account), account)

    def test_invalid_accounts(self):
        for account in INVALID_ACCOUNTS:
            self.assertFalse(strkey.is_valid_account_id(account), account)

    def test_valid_seeds(self):
        for seed in VALID_SEEDS:
            self.assertTrue(strkey.is_valid_seed(seed), seed)

    def test_invalid_seeds(self):
        for seed in INVALID_SEEDS:
            self.assertFalse(strkey.is_valid_seed(seed), seed)

    def test_encode_wrong_length(self):
        with self.assertRaises(InvalidLength):
            strkey.encode_account_id(b"\x00" * 31)
        with self.assertRaises(InvalidLength):
            strkey.encode_seed(b"\x00" * 33)

    def test_pre_auth_tx_and_hash_prefixes(self):
        raw = os.urandom(32)
        self.assertTrue(strkey.encode_pre_auth_tx(raw).startswith("T"))
        self.assertTrue(strkey.encode_sha256_hash(raw).startswith("X"))
        self.assertEqual(strkey.decode_pre_auth_tx(strkey.encode_pre_auth_tx(raw)), raw)
        self.assertEqual(strkey.decode_sha256_hash(strkey.encode_sha256_hash(raw)), raw)
        self.assertTrue(strkey.is_valid_pre_auth_tx(strkey.encode_pre_auth_tx(raw)))
        self.assertFalse(strkey.is_valid_sha256_hash(strkey.encode_pre_auth_tx(raw)))


# ═══════════════════════════════════════════════════════════════════
#  Decode errors
# ═══════════════════════════════════════════════════════════════════

class TestDecodeErrors(unittest.TestCase):

    def test_wrong_version_byte(self):
        with self.assertRaises(InvalidVersionByte) as ctx:
            strkey.decode_seed("GBPXXOA5N4JYPESHAADMQKBPWZWQDQ64ZV6ZL2S3LAGW4SY7NTCMWIVL")
        self.assertEqual(ctx.exception.expected, VersionByte.SEED)
        self.assertEqual(ctx.exception.actual, VersionByte.ACCOUNT_ID)
        with self.assertRaises(InvalidVersionByte):
            strkey.decode_account_id("SBGWKM3CD4IL47QN6X54N6Y33T3JDNVI6AIJ6CD5IM47HG3IG4O36XCU")

    def test_invalid_characters(self):
        with self.assertRaises(InvalidEncoding):
            strkey.decode_account_id("GBPXX0A5N4JYPESHAADMQKBPWZWQDQ64ZV6ZL2S3LAGW4SY7NTCMWIVL")

    def test_bad_checksum(self):
        with self.assertRaises(InvalidChecksum):
            strkey.decode_account_id("GBPXXOA5N4JYPESHAADMQKBPWZWQDQ64ZV6ZL2S3LAGW4SY7NTCMWIVT")
        with self.assertRaises(InvalidChecksum):
            strkey.decode_seed("SBGWKM3CD4IL47QN6X54N6Y33T3JDNVI6AIJ6CD5IM47HG3IG4O36XCX")

    def test_padding_rejected(self):
        with self.assertRaises(InvalidEncoding):
            strkey.decode_claimable_balance_id(
                "BAAD6DBUX6J22DMZOHIEZTEQ64CVCHEDRKWZONFEUL5Q26QD7R76RGR4TV==="
            )

    def test_lowercase_rejected(self):
        with self.assertRaises(InvalidEncoding):
            strkey.decode_account_id(VALID_ACCOUNTS[0].lower())

    def test_all_errors_are_value_errors(self):
        with self.assertRaises(ValueError):
            strkey.decode_account_id("not a strkey")

    def test_single_bit_corruption_detected(self):
        raw = base64.b32decode(VALID_ACCOUNTS[3])
        for bit in range(len(raw) * 8):
            corrupted = bytearray(raw)
            corrupted[bit // 8] ^= 1 << (bit % 8)
            with self.assertRaises((InvalidChecksum, InvalidVersionByte)):
                strkey.decode_account_id(_reencode_raw(bytes(corrupted)))

    def test_decode_check_explicit_version(self):
        payload = b"\x01\x02\x03"
        versioned = bytes([VersionByte.SHA256_HASH]) + payload
        encoded = _reencode_raw(versioned + crc16_bytes(versioned))
        self.assertEqual(strkey.encode_check(VersionByte.SHA256_HASH, payload), encoded)
        self.assertEqual(strkey.decode_check(VersionByte.SHA256_HASH, encoded), payload)


# ═══════════════════════════════════════════════════════════════════
#  Muxed accounts, contracts, pools, claimable balances
# ═══════════════════════════════════════════════════════════════════

class TestExtendedIdentifiers(unittest.TestCase):

    def test_muxed_vector(self):
        self.assertEqual(strkey.decode_muxed_account_id(MUXED).hex(), MUXED_HEX)
        self.assertEqual(strkey.encode_muxed_account_id(bytes.fromhex(MUXED_HEX)), MUXED)
        self.assertTrue(strkey.is_valid_muxed_account_id(MUXED))

    def test_invalid_muxed(self):
        for value in INVALID_MUXED:
            self.assertFalse(strkey.is_valid_muxed_account_id(value), value)

    def test_contract_vector(self):
        contract = "CA3D5KRYM6CB7OWQ6TWYRR3Z4T7GNZLKERYNZGGA5SOAOPIFY6YQGAXE"
        contract_hex = "363eaa3867841fbad0f4ed88c779e4fe66e56a2470dc98c0ec9c073d05c7b103"
        self.assertTrue(strkey.is_valid_contract_id(contract))
        self.assertFalse(
            strkey.is_valid_contract_id("GA3D5KRYM6CB7OWQ6TWYRR3Z4T7GNZLKERYNZGGA5SOAOPIFY6YQGAXE")
        )
        self.assertEqual(strkey.decode_contract_id_hex(contract), contract_hex)
        self.assertEqual(strkey.encode_contract_id_hex(contract_hex), contract)

    def test_liquidity_pool_vector(self):
        pool = "LA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUPJN"
        self.assertTrue(strkey.is_valid_liquidity_pool_id(pool))
        self.assertFalse(
            strkey.is_valid_liquidity_pool_id("LB7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUPJN")
        )
        self.assertEqual(strkey.decode_liquidity_pool_id_hex(pool), POOL_HEX)
        self.assertEqual(strkey.encode_liquidity_pool_id_hex(POOL_HEX), pool)

    def test_claimable_balance_vector(self):
        balance = "BAAD6DBUX6J22DMZOHIEZTEQ64CVCHEDRKWZONFEUL5Q26QD7R76RGR4TU"
        self.assertTrue(strkey.is_valid_claimable_balance_id(balance))
        self.assertFalse(
            strkey.is_valid_claimable_balance_id("BBAD6DBUX6J22DMZOHIEZTEQ64CVCHEDRKWZONFEUL5Q26QD7R76RGR4TU")
        )
        self.assertEqual(strkey.decode_claimable_balance_id_hex(balance), "00" + POOL_HEX)
        self.assertEqual(strkey.encode_claimable_balance_id_hex("00" + POOL_HEX), balance)
        # bare hash gets the V0 discriminant
        self.assertEqual(strkey.encode_claimable_balance_id_hex(POOL_HEX), balance)

    def test_bad_hex(self):
        with self.assertRaises(InvalidEncoding):
            strkey.encode_contract_id_hex("zz")


# ═══════════════════════════════════════════════════════════════════
#  Signed payloads (CAP-0040)
# ═══════════════════════════════════════════════════════════════════

class TestSignedPayload(unittest.TestCase):

    def test_vector_32_byte_payload(self):
        encoded = (
            "PA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUAAAAAQACAQDAQCQMBYIBEFAWDANBYHRAEISCMKBKFQXDAMRUGY4DUPB6IBZGM"
        )
        sp = strkey.decode_signed_payload(encoded)
        self.assertEqual(sp.signer_account_id, ACCOUNT)
        self.assertEqual(sp.payload.hex(), "0102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f20")
        self.assertEqual(strkey.encode_signed_payload(sp), encoded)
        self.assertTrue(strkey.is_valid_signed_payload(encoded))

    def test_vector_29_byte_payload(self):
        encoded = (
            "PA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUAAAAAOQCAQDAQCQMBYIBEFAWDANBYHRAEISCMKBKFQXDAMRUGY4DUAAAAFGBU"
        )
        sp = strkey.decode_signed_payload(encoded)
        self.assertEqual(sp.signer_account_id, ACCOUNT)
        self.assertEqual(sp.payload.hex(), "0102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d")
        self.assertEqual(strkey.encode_signed_payload(sp), encoded)

    def test_too_short_payload(self):
        with self.assertRaises(InvalidLength):
            SignedPayload.from_account_id(ACCOUNT, b"\x01\x02\x03")

    def test_too_long_payload(self):
        with self.assertRaises(InvalidLength):
            SignedPayload.from_account_id(ACCOUNT, b"\x01" * 65)

    def test_minimum_and_maximum_lengths(self):
        shortest = strkey.encode_signed_payload(SignedPayload.from_account_id(ACCOUNT, b"\x01" * 4))
        longest = strkey.encode_signed_payload(SignedPayload.from_account_id(ACCOUNT, b"\x01" * 64))
        self.assertEqual(len(shortest), 69)
        self.assertEqual(len(longest), 165)
        self.assertTrue(strkey.is_valid_signed_payload(shortest))
        self.assertTrue(strkey.is_valid_signed_payload(longest))

    def test_nonzero_padding_rejected(self):
        sp = SignedPayload.from_account_id(ACCOUNT, b"\x01" * 5)
        raw = bytearray(sp.to_bytes())
        raw[-1] = 0xFF
        encoded = strkey.encode_check(VersionByte.SIGNED_PAYLOAD, bytes(raw))
        with self.assertRaises(InvalidEncoding):
            strkey.decode_signed_payload(encoded)
        self.assertFalse(strkey.is_valid_signed_payload(encoded))

    def test_length_prefix_mismatch_rejected(self):
        sp = SignedPayload.from_account_id(ACCOUNT, b"\x01" * 8)
        raw = sp.to_bytes()[:-4]
        encoded = strkey.encode_check(VersionByte.SIGNED_PAYLOAD, raw)
        with self.assertRaises(InvalidLength):
            strkey.decode_signed_payload(encoded)


@pytest.mark.parametrize("validator", [
    strkey.is_valid_account_id,
    strkey.is_valid_seed,
    strkey.is_valid_muxed_account_id,
    strkey.is_valid_signed_payload,
    strkey.is_valid_contract_id,
    strkey.is_valid_liquidity_pool_id,
    strkey.is_valid_claimable_balance_id,
])
@pytest.mark.parametrize("value", ["", "G", "!!!!", "A" * 56, "A" * 69, None, 12345])
def test_is_valid_never_raises(validator, value):
    assert validator(value) is False


def test_every_error_is_a_stellar_crypto_error():
    with pytest.raises(StellarCryptoError):
        strkey.decode_muxed_account_id(ACCOUNT)
