"""
Strkey version bytes.

Each value is ``tag << 3``; the tag selects the leading base32 character
of the encoded string (``G`` for accounts, ``S`` for seeds, ...).
"""

from __future__ import annotations

from enum import IntEnum


class VersionByte(IntEnum):
    ACCOUNT_ID = 6 << 3            # G
    MUXED_ACCOUNT_ID = 12 << 3     # M
    SEED = 18 << 3                 # S
    PRE_AUTH_TX = 19 << 3          # T
    SHA256_HASH = 23 << 3          # X
    SIGNED_PAYLOAD = 15 << 3       # P
    CONTRACT_ID = 2 << 3           # C
    LIQUIDITY_POOL_ID = 11 << 3    # L
    CLAIMABLE_BALANCE_ID = 1 << 3  # B

    @property
    def prefix(self) -> str:
        """Leading character of strkeys carrying this version byte."""
        return "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"[self.value >> 3]
