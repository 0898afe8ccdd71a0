"""
Strkey encoding for Stellar keys and identifiers (SEP-0023).

A strkey is the unpadded RFC4648 base32 rendering of

    version byte (1) ‖ payload (N) ‖ CRC16-XModem(version ‖ payload) (2, LE)

Provides:
  - encode_check / decode_check for an explicit version byte
  - per-kind encode_* / decode_* / is_valid_* helpers
  - SignedPayload, the CAP-0040 ``P...`` structure
  - public key / account id derivation from raw private keys and seeds
"""

from __future__ import annotations

import base64
import binascii
import re
import struct
from dataclasses import dataclass
from typing import Callable

from nacl.signing import SigningKey

from stellar_crypto.checksum import crc16_bytes, verify_crc16
from stellar_crypto.errors import (
    InvalidChecksum,
    InvalidEncoding,
    InvalidLength,
    InvalidVersionByte,
    StellarCryptoError,
)
from stellar_crypto.version_bytes import VersionByte

ED25519_KEY_LENGTH = 32
MUXED_ACCOUNT_DECODED_LENGTH = 40
CLAIMABLE_BALANCE_DECODED_LENGTH = 33

SIGNED_PAYLOAD_LENGTH_PREFIX_BYTES = 4
SIGNED_PAYLOAD_MIN_LENGTH_BYTES = 4
SIGNED_PAYLOAD_MAX_LENGTH_BYTES = 64

STRKEY_ACCOUNT_ID_LENGTH = 56
STRKEY_MUXED_ACCOUNT_ID_LENGTH = 69
STRKEY_CLAIMABLE_BALANCE_LENGTH = 58
# 1 + 32 + 4 + 4 + 2 = 43 bytes -> 69 chars; 1 + 32 + 4 + 64 + 2 = 103 bytes -> 165 chars
STRKEY_SIGNED_PAYLOAD_MIN_LENGTH = 69
STRKEY_SIGNED_PAYLOAD_MAX_LENGTH = 165

_BASE32_RE = re.compile(r"[A-Z2-7]+")
_NON_BASE32_RE = re.compile(r"[^A-Z2-7]")


# ===================================================================
#  Generic version-byte codec
# ===================================================================

def _b32encode(data: bytes) -> str:
    return _NON_BASE32_RE.sub("", base64.b32encode(data).decode("ascii"))


def _b32decode(encoded: str) -> bytes:
    """Decode canonical unpadded base32, rejecting anything else."""
    if not isinstance(encoded, str) or not _BASE32_RE.fullmatch(encoded):
        raise InvalidEncoding("Strkey must be a non-empty string over [A-Z2-7]")
    # lengths congruent to 1, 3 or 6 mod 8 cannot come from whole bytes
    if len(encoded) % 8 in (1, 3, 6):
        raise InvalidEncoding(f"Invalid base32 length {len(encoded)}")
    padded = encoded + "=" * (-len(encoded) % 8)
    try:
        decoded = base64.b32decode(padded)
    except binascii.Error as exc:
        raise InvalidEncoding(f"Invalid base32 data: {exc}") from exc
    if _b32encode(decoded) != encoded:
        raise InvalidEncoding("Non-canonical base32 encoding (trailing bits set)")
    return decoded


def encode_check(version_byte: int, data: bytes) -> str:
    """Encode *data* under *version_byte* with a trailing CRC16 checksum."""
    versioned = bytes([version_byte]) + bytes(data)
    return _b32encode(versioned + crc16_bytes(versioned))


def decode_check(version_byte: int, encoded: str) -> bytes:
    """
    Decode a strkey and return its payload.

    Raises InvalidEncoding for malformed base32, InvalidVersionByte when the
    leading byte is not *version_byte* and InvalidChecksum when the CRC16
    does not verify.
    """
    decoded = _b32decode(encoded)
    if len(decoded) < 3:
        raise InvalidLength(f"Decoded strkey too short: {len(decoded)} bytes")

    version = decoded[0]
    if version != version_byte:
        raise InvalidVersionByte(version_byte, version)

    data, checksum = decoded[:-2], decoded[-2:]
    if not verify_crc16(data, checksum):
        raise InvalidChecksum("Invalid checksum in encoded data")
    return data[1:]


def _encode_sized(version_byte: int, data: bytes, size: int) -> str:
    if len(data) != size:
        raise InvalidLength(f"Expected {size} bytes, got {len(data)}")
    return encode_check(version_byte, data)


def _decode_sized(version_byte: int, encoded: str, size: int) -> bytes:
    data = decode_check(version_byte, encoded)
    if len(data) != size:
        raise InvalidLength(f"Expected {size} byte payload, got {len(data)}")
    return data


def _is_valid(encoded: str, lengths: range, decoder: Callable[[str], object]) -> bool:
    if not isinstance(encoded, str) or len(encoded) not in lengths:
        return False
    try:
        decoder(encoded)
    except StellarCryptoError:
        return False
    return True


def _from_hex(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise InvalidEncoding(f"Invalid hex string: {exc}") from exc


_KEY_LENGTHS = range(STRKEY_ACCOUNT_ID_LENGTH, STRKEY_ACCOUNT_ID_LENGTH + 1)


# ===================================================================
#  Accounts, seeds, pre-auth transactions, hashes
# ===================================================================

def encode_account_id(data: bytes) -> str:
    """Raw Ed25519 public key -> ``G...``."""
    return _encode_sized(VersionByte.ACCOUNT_ID, data, ED25519_KEY_LENGTH)


def decode_account_id(account_id: str) -> bytes:
    """``G...`` -> raw 32-byte Ed25519 public key."""
    return _decode_sized(VersionByte.ACCOUNT_ID, account_id, ED25519_KEY_LENGTH)


def is_valid_account_id(account_id: str) -> bool:
    return _is_valid(account_id, _KEY_LENGTHS, decode_account_id)


def encode_seed(data: bytes) -> str:
    """Raw 32-byte Ed25519 seed -> ``S...``."""
    return _encode_sized(VersionByte.SEED, data, ED25519_KEY_LENGTH)


def decode_seed(seed: str) -> bytes:
    """``S...`` -> raw 32-byte Ed25519 seed."""
    return _decode_sized(VersionByte.SEED, seed, ED25519_KEY_LENGTH)


def is_valid_seed(seed: str) -> bool:
    return _is_valid(seed, _KEY_LENGTHS, decode_seed)


def encode_pre_auth_tx(data: bytes) -> str:
    return _encode_sized(VersionByte.PRE_AUTH_TX, data, ED25519_KEY_LENGTH)


def decode_pre_auth_tx(pre_auth_tx: str) -> bytes:
    return _decode_sized(VersionByte.PRE_AUTH_TX, pre_auth_tx, ED25519_KEY_LENGTH)


def is_valid_pre_auth_tx(pre_auth_tx: str) -> bool:
    return _is_valid(pre_auth_tx, _KEY_LENGTHS, decode_pre_auth_tx)


def encode_sha256_hash(data: bytes) -> str:
    return _encode_sized(VersionByte.SHA256_HASH, data, ED25519_KEY_LENGTH)


def decode_sha256_hash(sha256_hash: str) -> bytes:
    return _decode_sized(VersionByte.SHA256_HASH, sha256_hash, ED25519_KEY_LENGTH)


def is_valid_sha256_hash(sha256_hash: str) -> bool:
    return _is_valid(sha256_hash, _KEY_LENGTHS, decode_sha256_hash)


# ===================================================================
#  Muxed accounts (CAP-0027)
# ===================================================================

def encode_muxed_account_id(data: bytes) -> str:
    """``ed25519 (32) ‖ id u64 big-endian (8)`` -> ``M...``."""
    return _encode_sized(VersionByte.MUXED_ACCOUNT_ID, data, MUXED_ACCOUNT_DECODED_LENGTH)


def decode_muxed_account_id(muxed_account_id: str) -> bytes:
    return _decode_sized(
        VersionByte.MUXED_ACCOUNT_ID, muxed_account_id, MUXED_ACCOUNT_DECODED_LENGTH,
    )


def is_valid_muxed_account_id(muxed_account_id: str) -> bool:
    return _is_valid(
        muxed_account_id,
        range(STRKEY_MUXED_ACCOUNT_ID_LENGTH, STRKEY_MUXED_ACCOUNT_ID_LENGTH + 1),
        decode_muxed_account_id,
    )


# ===================================================================
#  Contracts, liquidity pools, claimable balances
# ===================================================================

def encode_contract_id(data: bytes) -> str:
    return _encode_sized(VersionByte.CONTRACT_ID, data, ED25519_KEY_LENGTH)


def encode_contract_id_hex(contract_id: str) -> str:
    return encode_contract_id(_from_hex(contract_id))


def decode_contract_id(contract_id: str) -> bytes:
    return _decode_sized(VersionByte.CONTRACT_ID, contract_id, ED25519_KEY_LENGTH)


def decode_contract_id_hex(contract_id: str) -> str:
    return decode_contract_id(contract_id).hex()


def is_valid_contract_id(contract_id: str) -> bool:
    return _is_valid(contract_id, _KEY_LENGTHS, decode_contract_id)


def encode_liquidity_pool_id(data: bytes) -> str:
    return _encode_sized(VersionByte.LIQUIDITY_POOL_ID, data, ED25519_KEY_LENGTH)


def encode_liquidity_pool_id_hex(liquidity_pool_id: str) -> str:
    return encode_liquidity_pool_id(_from_hex(liquidity_pool_id))


def decode_liquidity_pool_id(liquidity_pool_id: str) -> bytes:
    return _decode_sized(VersionByte.LIQUIDITY_POOL_ID, liquidity_pool_id, ED25519_KEY_LENGTH)


def decode_liquidity_pool_id_hex(liquidity_pool_id: str) -> str:
    return decode_liquidity_pool_id(liquidity_pool_id).hex()


def is_valid_liquidity_pool_id(liquidity_pool_id: str) -> bool:
    return _is_valid(liquidity_pool_id, _KEY_LENGTHS, decode_liquidity_pool_id)


def encode_claimable_balance_id(data: bytes) -> str:
    """
    Encode a claimable balance id (``B...``).

    A bare 32-byte hash gets the ``0x00`` (V0) discriminant prepended.
    """
    if len(data) == ED25519_KEY_LENGTH:
        data = b"\x00" + data
    return _encode_sized(
        VersionByte.CLAIMABLE_BALANCE_ID, data, CLAIMABLE_BALANCE_DECODED_LENGTH,
    )


def encode_claimable_balance_id_hex(claimable_balance_id: str) -> str:
    return encode_claimable_balance_id(_from_hex(claimable_balance_id))


def decode_claimable_balance_id(claimable_balance_id: str) -> bytes:
    """``B...`` -> discriminant byte followed by the 32-byte balance hash."""
    return _decode_sized(
        VersionByte.CLAIMABLE_BALANCE_ID, claimable_balance_id, CLAIMABLE_BALANCE_DECODED_LENGTH,
    )


def decode_claimable_balance_id_hex(claimable_balance_id: str) -> str:
    return decode_claimable_balance_id(claimable_balance_id).hex()


def is_valid_claimable_balance_id(claimable_balance_id: str) -> bool:
    return _is_valid(
        claimable_balance_id,
        range(STRKEY_CLAIMABLE_BALANCE_LENGTH, STRKEY_CLAIMABLE_BALANCE_LENGTH + 1),
        decode_claimable_balance_id,
    )


# ===================================================================
#  Signed payloads (CAP-0040)
# ===================================================================

@dataclass(frozen=True)
class SignedPayload:
    """
    An Ed25519 signer bound to 4..64 bytes of payload.

    Wire layout (XDR)::

        ed25519 (32) ‖ u32 big-endian length (4) ‖ payload ‖ zero pad to 4
    """

    ed25519: bytes
    payload: bytes

    def __post_init__(self) -> None:
        if len(self.ed25519) != ED25519_KEY_LENGTH:
            raise InvalidLength(
                f"Signer public key must be {ED25519_KEY_LENGTH} bytes, got {len(self.ed25519)}"
            )
        if not SIGNED_PAYLOAD_MIN_LENGTH_BYTES <= len(self.payload) <= SIGNED_PAYLOAD_MAX_LENGTH_BYTES:
            raise InvalidLength(
                f"Signed payload must be {SIGNED_PAYLOAD_MIN_LENGTH_BYTES}-"
                f"{SIGNED_PAYLOAD_MAX_LENGTH_BYTES} bytes, got {len(self.payload)}"
            )

    @classmethod
    def from_account_id(cls, account_id: str, payload: bytes) -> SignedPayload:
        return cls(decode_account_id(account_id), bytes(payload))

    @property
    def signer_account_id(self) -> str:
        return encode_account_id(self.ed25519)

    def to_bytes(self) -> bytes:
        padding = b"\x00" * (-len(self.payload) % 4)
        return (
            self.ed25519
            + struct.pack(">I", len(self.payload))
            + self.payload
            + padding
        )

    @classmethod
    def from_bytes(cls, raw: bytes) -> SignedPayload:
        header = ED25519_KEY_LENGTH + SIGNED_PAYLOAD_LENGTH_PREFIX_BYTES
        if len(raw) < header:
            raise InvalidLength(f"Signed payload too short: {len(raw)} bytes")
        (length,) = struct.unpack(">I", raw[ED25519_KEY_LENGTH:header])
        if not SIGNED_PAYLOAD_MIN_LENGTH_BYTES <= length <= SIGNED_PAYLOAD_MAX_LENGTH_BYTES:
            raise InvalidLength(f"Invalid signed payload length prefix {length}")
        padded = length + (-length % 4)
        if len(raw) != header + padded:
            raise InvalidLength(
                f"Signed payload body is {len(raw) - header} bytes, expected {padded}"
            )
        if any(raw[header + length:]):
            raise InvalidEncoding("Signed payload padding must be zero")
        return cls(raw[:ED25519_KEY_LENGTH], raw[header:header + length])


def encode_signed_payload(signed_payload: SignedPayload) -> str:
    """SignedPayload -> ``P...``."""
    return encode_check(VersionByte.SIGNED_PAYLOAD, signed_payload.to_bytes())


def decode_signed_payload(signed_payload: str) -> SignedPayload:
    """``P...`` -> SignedPayload."""
    return SignedPayload.from_bytes(decode_check(VersionByte.SIGNED_PAYLOAD, signed_payload))


def is_valid_signed_payload(signed_payload: str) -> bool:
    return _is_valid(
        signed_payload,
        range(STRKEY_SIGNED_PAYLOAD_MIN_LENGTH, STRKEY_SIGNED_PAYLOAD_MAX_LENGTH + 1),
        decode_signed_payload,
    )


# ===================================================================
#  Key derivation helpers
# ===================================================================

def public_key_from_private_key(private_key: bytes) -> bytes:
    """Derive the 32-byte Ed25519 public key of a 32-byte seed."""
    if len(private_key) != ED25519_KEY_LENGTH:
        raise InvalidLength(
            f"Ed25519 private key must be {ED25519_KEY_LENGTH} bytes, got {len(private_key)}"
        )
    return bytes(SigningKey(bytes(private_key)).verify_key)


def account_id_from_private_key(private_key: bytes) -> str:
    return encode_account_id(public_key_from_private_key(private_key))


def account_id_from_seed(seed: str) -> str:
    return account_id_from_private_key(decode_seed(seed))
