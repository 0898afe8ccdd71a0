"""
Error types raised by stellar_crypto.

Every error derives from :class:`StellarCryptoError`, itself a
``ValueError``, so callers that already guard key handling with
``except ValueError`` keep working.  The taxonomy is intentionally flat;
the three sub-classes (``InvalidEntropyLength``, ``ChecksumMismatch``,
``NonHardenedIndex``) only narrow the situation in which their parent is
raised.
"""

from __future__ import annotations


class StellarCryptoError(ValueError):
    """Base class for all key, strkey and derivation errors."""


class InvalidLength(StellarCryptoError):
    """Key, entropy, payload or word count does not have the required size."""


class InvalidEntropyLength(InvalidLength):
    """Entropy is not 128/160/192/224/256 bits."""


class InvalidEncoding(StellarCryptoError):
    """String is not canonical unpadded base32."""


class InvalidVersionByte(StellarCryptoError):
    """Decoded version byte differs from the expected one."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Version byte mismatch: expected 0x{expected:02x}, got 0x{actual:02x}"
        )
        self.expected = expected
        self.actual = actual


class InvalidChecksum(StellarCryptoError):
    """CRC16 of a strkey does not verify."""


class ChecksumMismatch(InvalidChecksum):
    """Mnemonic checksum bits do not match the entropy."""


class InvalidPath(StellarCryptoError):
    """Malformed derivation path."""


class NonHardenedIndex(InvalidPath):
    """Index cannot be mapped into the hardened range."""


class UnknownWord(StellarCryptoError):
    """Mnemonic word is absent from the word list (position is 1-based)."""

    def __init__(self, position: int, word: str):
        super().__init__(f"Invalid/unknown word at position {position}")
        self.position = position
        self.word = word


class UnsupportedLanguage(StellarCryptoError):
    """No word list exists for the requested language."""


class CorruptWordList(StellarCryptoError):
    """Word list dataset does not hold exactly 2048 words."""


class CryptoFailure(StellarCryptoError):
    """The Ed25519 primitive rejected its input."""
