"""
BIP-39 mnemonic phrases for Stellar (SEP-0005).

Provides:
  - Entropy -> words with the SHA-256 checksum appended
  - Words -> entropy with checksum verification
  - Fresh phrases from the OS CSPRNG
  - Phrase -> 64-byte seed (PBKDF2-HMAC-SHA512, 2048 rounds)
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import unicodedata
from dataclasses import dataclass
from typing import Sequence, Union

from stellar_crypto.errors import (
    ChecksumMismatch,
    InvalidEncoding,
    InvalidEntropyLength,
    InvalidLength,
    UnknownWord,
)
from stellar_crypto.wordlist import LANGUAGE_ENGLISH, WordList

log = logging.getLogger("stellar_crypto.bip39")

VALID_WORD_COUNTS = (12, 15, 18, 21, 24)
VALID_ENTROPY_BYTES = (16, 20, 24, 28, 32)
BITS_PER_WORD = 11
PBKDF2_ROUNDS = 2048
SEED_LENGTH = 64


def bit_budget(word_count: int) -> tuple[int, int]:
    """Return ``(entropy_bits, checksum_bits)`` for a phrase of *word_count* words."""
    if word_count not in VALID_WORD_COUNTS:
        raise InvalidLength(
            f"Mnemonic must have 12, 15, 18, 21 or 24 words, got {word_count}"
        )
    checksum_bits = word_count // 3
    return word_count * BITS_PER_WORD - checksum_bits, checksum_bits


def _checksum_bits(entropy: bytes) -> str:
    h = hashlib.sha256(entropy).digest()
    count = len(entropy) * 8 // 32
    return bin(h[0])[2:].zfill(8)[:count]


def _coerce_entropy(entropy: Union[bytes, str]) -> bytes:
    if isinstance(entropy, str):
        try:
            entropy = bytes.fromhex(entropy)
        except ValueError:
            raise InvalidEncoding("Entropy must be hexadecimal") from None
    entropy = bytes(entropy)
    if len(entropy) not in VALID_ENTROPY_BYTES:
        raise InvalidEntropyLength(
            f"Entropy must be 128, 160, 192, 224 or 256 bits, got {len(entropy) * 8}"
        )
    return entropy


@dataclass(frozen=True)
class Mnemonic:
    """A BIP-39 phrase plus the entropy it encodes."""

    words: tuple[str, ...]
    word_indexes: tuple[int, ...]
    raw_binary_chunks: tuple[str, ...]
    entropy: str
    language: str = LANGUAGE_ENGLISH

    def __post_init__(self) -> None:
        entropy_bits, checksum_bits = bit_budget(len(self.words))
        if not len(self.words) == len(self.word_indexes) == len(self.raw_binary_chunks):
            raise InvalidLength(
                f"words, word_indexes and raw_binary_chunks differ in length: "
                f"{len(self.words)}, {len(self.word_indexes)}, {len(self.raw_binary_chunks)}"
            )
        actual_bits = len(_coerce_entropy(self.entropy)) * 8
        if len(self.words) * BITS_PER_WORD != actual_bits + checksum_bits:
            raise InvalidLength(
                f"{len(self.words)} words carry {entropy_bits} bits of entropy, got {actual_bits}"
            )

    # ---- construction ----

    @classmethod
    def from_entropy(
        cls, entropy: Union[bytes, str], language: str = LANGUAGE_ENGLISH,
    ) -> Mnemonic:
        """Encode 16..32 bytes of entropy (raw or hex) as words."""
        entropy = _coerce_entropy(entropy)
        wordlist = WordList.for_language(language)
        bits = bin(int.from_bytes(entropy, "big"))[2:].zfill(len(entropy) * 8)
        bits += _checksum_bits(entropy)

        chunks = tuple(bits[i:i + BITS_PER_WORD] for i in range(0, len(bits), BITS_PER_WORD))
        indexes = tuple(int(chunk, 2) for chunk in chunks)
        return cls(
            words=tuple(wordlist.word_at(i) for i in indexes),
            word_indexes=indexes,
            raw_binary_chunks=chunks,
            entropy=entropy.hex(),
            language=language,
        )

    @classmethod
    def generate(cls, word_count: int = 12, language: str = LANGUAGE_ENGLISH) -> Mnemonic:
        """New random phrase of *word_count* words."""
        entropy_bits, _ = bit_budget(word_count)
        mnemonic = cls.from_entropy(secrets.token_bytes(entropy_bits // 8), language)
        log.debug("Generated %d-word %s mnemonic", word_count, language)
        return mnemonic

    @classmethod
    def from_words(
        cls,
        words: Union[str, Sequence[str]],
        language: str = LANGUAGE_ENGLISH,
        verify_checksum: bool = True,
    ) -> Mnemonic:
        """
        Recover a phrase from its words.

        *words* may be a list or a whitespace-separated string.  Words are
        matched case-insensitively and stored in their word-list spelling.
        """
        if isinstance(words, str):
            words = unicodedata.normalize("NFKD", words).split()
        else:
            words = [unicodedata.normalize("NFKD", w).strip() for w in words]
        entropy_bits, _ = bit_budget(len(words))
        wordlist = WordList.for_language(language)

        indexes = []
        for position, word in enumerate(words, start=1):
            index = wordlist.index_of(word, case_insensitive=True)
            if index is None:
                # word-list spelling may be composed (e.g. accented French)
                index = wordlist.index_of(
                    unicodedata.normalize("NFC", word), case_insensitive=True,
                )
            if index is None:
                raise UnknownWord(position, word)
            indexes.append(index)

        chunks = tuple(bin(i)[2:].zfill(BITS_PER_WORD) for i in indexes)
        bits = "".join(chunks)
        entropy = int(bits[:entropy_bits], 2).to_bytes(entropy_bits // 8, "big")
        if verify_checksum and bits[entropy_bits:] != _checksum_bits(entropy):
            raise ChecksumMismatch("Entropy checksum match failed")

        return cls(
            words=tuple(wordlist.word_at(i) for i in indexes),
            word_indexes=tuple(indexes),
            raw_binary_chunks=chunks,
            entropy=entropy.hex(),
            language=language,
        )

    # ---- accessors ----

    @property
    def phrase(self) -> str:
        return " ".join(self.words)

    @property
    def entropy_bytes(self) -> bytes:
        return bytes.fromhex(self.entropy)

    @property
    def word_count(self) -> int:
        return len(self.words)

    # ---- seeds ----

    def to_seed(self, passphrase: str = "") -> bytes:
        """64-byte BIP-39 seed for this phrase and *passphrase*."""
        password = unicodedata.normalize("NFKD", self.phrase).encode("utf-8")
        salt = unicodedata.normalize("NFKD", "mnemonic" + passphrase).encode("utf-8")
        return hashlib.pbkdf2_hmac("sha512", password, salt, PBKDF2_ROUNDS, dklen=SEED_LENGTH)

    def bip39_seed_hex(self, passphrase: str = "") -> str:
        return self.to_seed(passphrase).hex()

    def m44148_key_hex(self, passphrase: str = "") -> str:
        """Private key at ``m/44'/148'`` as hex."""
        from stellar_crypto.hd_node import STELLAR_ROOT_PATH, HDNode

        node = HDNode.master_node(self.to_seed(passphrase)).derive_path(STELLAR_ROOT_PATH)
        return node.private_key.hex()

    def __repr__(self) -> str:
        return f"Mnemonic(word_count={self.word_count}, language={self.language!r})"


# ===================================================================
#  Convenience functions
# ===================================================================

def generate_mnemonic(word_count: int = 12, language: str = LANGUAGE_ENGLISH) -> str:
    """Generate a new phrase and return it as a string."""
    return Mnemonic.generate(word_count, language).phrase


def entropy_to_mnemonic(entropy: Union[bytes, str], language: str = LANGUAGE_ENGLISH) -> str:
    return Mnemonic.from_entropy(entropy, language).phrase


def mnemonic_to_seed(phrase: str, passphrase: str = "", language: str = LANGUAGE_ENGLISH) -> bytes:
    return Mnemonic.from_words(phrase, language).to_seed(passphrase)


def validate_mnemonic(phrase: str, language: str = LANGUAGE_ENGLISH) -> bool:
    """True when *phrase* has a valid length, known words and a matching checksum."""
    try:
        Mnemonic.from_words(phrase, language)
    except (InvalidLength, UnknownWord, ChecksumMismatch):
        return False
    return True
