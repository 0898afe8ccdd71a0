"""
Ed25519 key pairs as used on the Stellar network.

A KeyPair always carries a 32-byte public key and optionally the 32-byte
private seed.  Without the private half it can verify but not sign.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Union

from nacl.exceptions import CryptoError
from nacl.signing import SigningKey, VerifyKey

from stellar_crypto import strkey
from stellar_crypto.bip39 import Mnemonic
from stellar_crypto.errors import InvalidLength
from stellar_crypto.hd_node import HDNode
from stellar_crypto.muxed_account import MuxedAccount
from stellar_crypto.wordlist import LANGUAGE_ENGLISH

log = logging.getLogger("stellar_crypto.keypair")

KEY_LENGTH = 32
SIGNATURE_LENGTH = 64
HINT_LENGTH = 4

SIGNED_MESSAGE_PREFIX = b"Stellar Signed Message:\n"


@dataclass(frozen=True)
class DecoratedSignature:
    """A signature together with the 4-byte hint of the signer."""

    hint: bytes
    signature: bytes


def _message_bytes(message: Union[str, bytes]) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)


def signed_message_hash(message: Union[str, bytes]) -> bytes:
    """SHA-256 of the SEP-53 prefixed message."""
    return hashlib.sha256(SIGNED_MESSAGE_PREFIX + _message_bytes(message)).digest()


class KeyPair:
    """Immutable Ed25519 key pair."""

    __slots__ = ("_public_key", "_private_key")

    def __init__(self, public_key: bytes, private_key: Optional[bytes] = None):
        public_key = bytes(public_key)
        if len(public_key) != KEY_LENGTH:
            raise InvalidLength(
                f"Public key must be {KEY_LENGTH} bytes, got {len(public_key)}"
            )
        if private_key is not None:
            private_key = bytes(private_key)
            if len(private_key) != KEY_LENGTH:
                raise InvalidLength(
                    f"Private key must be {KEY_LENGTH} bytes, got {len(private_key)}"
                )
        self._public_key = public_key
        self._private_key = private_key

    # ---- factory methods ----

    @classmethod
    def random(cls) -> KeyPair:
        """Generate a key pair from 32 bytes of OS randomness."""
        return cls.from_private_key(secrets.token_bytes(KEY_LENGTH))

    @classmethod
    def from_private_key(cls, private_key: bytes) -> KeyPair:
        private_key = bytes(private_key)
        return cls(strkey.public_key_from_private_key(private_key), private_key)

    @classmethod
    def from_public_key(cls, public_key: bytes) -> KeyPair:
        return cls(public_key)

    @classmethod
    def from_secret_seed(cls, seed: str) -> KeyPair:
        """Build a signing key pair from an ``S...`` seed."""
        return cls.from_private_key(strkey.decode_seed(seed))

    from_seed = from_secret_seed

    @classmethod
    def from_account_id(cls, account_id: str) -> KeyPair:
        """Public-only key pair from ``G...`` or the account inside an ``M...``."""
        if account_id.startswith("M"):
            muxed = MuxedAccount.from_med25519_account_id(account_id)
            return cls(muxed.ed25519_public_key)
        return cls(strkey.decode_account_id(account_id))

    @classmethod
    def from_bip39_seed(cls, seed: bytes, index: int = 0) -> KeyPair:
        """Derive the account at ``m/44'/148'/index'`` from a 64-byte BIP-39 seed."""
        node = HDNode.master_node(seed).derive_path(HDNode.account_path(index))
        return cls.from_private_key(node.private_key)

    @classmethod
    def from_bip39_seed_hex(cls, seed_hex: str, index: int = 0) -> KeyPair:
        return cls.from_bip39_seed(strkey._from_hex(seed_hex), index)

    @classmethod
    def from_mnemonic(
        cls,
        mnemonic: Union[str, Mnemonic],
        index: int = 0,
        passphrase: str = "",
        language: str = LANGUAGE_ENGLISH,
    ) -> KeyPair:
        if not isinstance(mnemonic, Mnemonic):
            mnemonic = Mnemonic.from_words(mnemonic, language)
        return cls.from_bip39_seed(mnemonic.to_seed(passphrase), index)

    # ---- accessors ----

    @property
    def account_id(self) -> str:
        return strkey.encode_account_id(self._public_key)

    @property
    def secret_seed(self) -> Optional[str]:
        if self._private_key is None:
            return None
        return strkey.encode_seed(self._private_key)

    @property
    def raw_public_key(self) -> bytes:
        return self._public_key

    @property
    def raw_private_key(self) -> Optional[bytes]:
        return self._private_key

    @property
    def hint(self) -> bytes:
        """Last 4 bytes of the public key."""
        return self._public_key[-HINT_LENGTH:]

    def can_sign(self) -> bool:
        return self._private_key is not None

    def muxed_account(self, id: Optional[int] = None) -> MuxedAccount:
        return MuxedAccount(self.account_id, id)

    # ---- signing ----

    def sign(self, message: Union[str, bytes]) -> Optional[bytes]:
        """Detached 64-byte signature, or None when signing is impossible."""
        if self._private_key is None:
            return None
        try:
            return bytes(SigningKey(self._private_key).sign(_message_bytes(message)).signature)
        except CryptoError as exc:
            log.debug("Ed25519 signing failed for %s: %s", self.account_id, exc)
            return None

    def sign_decorated(self, message: bytes) -> Optional[DecoratedSignature]:
        signature = self.sign(message)
        if signature is None:
            return None
        return DecoratedSignature(self.hint, signature)

    def sign_payload_decorated(self, payload: bytes) -> Optional[DecoratedSignature]:
        """
        Sign *payload* for a signed-payload signer.

        The hint is the key hint XORed with the last 4 bytes of the payload;
        payloads shorter than 4 bytes are right-padded with zeros first.
        """
        payload = bytes(payload)
        signature = self.sign(payload)
        if signature is None:
            return None
        tail = payload[-HINT_LENGTH:].ljust(HINT_LENGTH, b"\x00")
        hint = bytes(a ^ b for a, b in zip(self.hint, tail))
        return DecoratedSignature(hint, signature)

    def verify(self, signature: Optional[bytes], message: Union[str, bytes]) -> bool:
        """True only for a valid 64-byte signature of *message*; never raises."""
        if not isinstance(signature, (bytes, bytearray, memoryview)):
            return False
        if len(signature) != SIGNATURE_LENGTH:
            return False
        try:
            VerifyKey(self._public_key).verify(_message_bytes(message), bytes(signature))
        except (CryptoError, TypeError) as exc:
            log.debug("Signature rejected for %s: %s", self.account_id, exc)
            return False
        return True

    def sign_message(self, message: Union[str, bytes]) -> Optional[bytes]:
        return self.sign(signed_message_hash(message))

    def verify_message(self, message: Union[str, bytes], signature: bytes) -> bool:
        return self.verify(signature, signed_message_hash(message))

    # ---- dunder ----

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyPair):
            return NotImplemented
        return (
            self._public_key == other._public_key
            and self._private_key == other._private_key
        )

    def __hash__(self) -> int:
        return hash((self._public_key, self._private_key))

    def __repr__(self) -> str:
        return f"KeyPair({self.account_id!r}, can_sign={self.can_sign()})"
