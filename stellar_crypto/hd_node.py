"""
SLIP-0010 style Ed25519 key derivation (SEP-0005).

Only hardened children exist for Ed25519, so every index passed to
:meth:`HDNode.derive` is shifted into the hardened range.  Stellar accounts
live at ``m/44'/148'/N'``.
"""

from __future__ import annotations

import hashlib
import hmac
import re
import struct

from stellar_crypto.errors import InvalidLength, InvalidPath, NonHardenedIndex

HARDENED_MINIMUM_INDEX = 0x80000000
MASTER_HMAC_KEY = b"ed25519 seed"

STELLAR_ACCOUNT_PATH = "m/44'/148'/{index}'"
STELLAR_ROOT_PATH = "m/44'/148'"

_SEGMENT_RE = re.compile(r"([0-9]+)'")


class HDNode:
    """
    Derivation node: a 32-byte private key and its 32-byte chain code.

    Nodes are never mutated; derivation returns new instances.
    """

    __slots__ = ("private_key", "chain_code", "depth", "index")

    def __init__(self, private_key: bytes, chain_code: bytes, depth: int = 0, index: int = 0):
        if len(private_key) != 32:
            raise InvalidLength(f"HD private key must be 32 bytes, got {len(private_key)}")
        if len(chain_code) != 32:
            raise InvalidLength(f"HD chain code must be 32 bytes, got {len(chain_code)}")
        self.private_key = bytes(private_key)
        self.chain_code = bytes(chain_code)
        self.depth = depth
        self.index = index

    @classmethod
    def master_node(cls, seed: bytes) -> HDNode:
        """Create the master node from a BIP-39 seed."""
        I = hmac.new(MASTER_HMAC_KEY, bytes(seed), hashlib.sha512).digest()
        return cls(I[:32], I[32:])

    @staticmethod
    def account_path(index: int) -> str:
        return STELLAR_ACCOUNT_PATH.format(index=index)

    def derive(self, index: int) -> HDNode:
        """Derive the hardened child ``index'``."""
        if not 0 <= index < HARDENED_MINIMUM_INDEX:
            raise NonHardenedIndex(
                f"Index must be in 0..{HARDENED_MINIMUM_INDEX - 1}, got {index}"
            )
        hardened = index + HARDENED_MINIMUM_INDEX
        data = b"\x00" + self.private_key + struct.pack(">I", hardened)
        I = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        return HDNode(I[:32], I[32:], depth=self.depth + 1, index=hardened)

    def derive_path(self, path: str) -> HDNode:
        """
        Walk a path like ``m/44'/148'/0'``.

        Every segment after ``m`` must be decimal digits followed by a single
        apostrophe.
        """
        segments = path.split("/")
        if segments[0].lower() != "m":
            raise InvalidPath(f"Path must start with 'm': {path!r}")
        node = self
        for segment in segments[1:]:
            match = _SEGMENT_RE.fullmatch(segment)
            if match is None:
                raise InvalidPath(f"Invalid path segment {segment!r} in {path!r}")
            node = node.derive(int(match.group(1)))
        return node

    def derive_account(self, index: int = 0):
        """KeyPair of the Stellar account ``m/44'/148'/index'`` below this master."""
        from stellar_crypto.keypair import KeyPair

        node = self.derive_path(self.account_path(index))
        return KeyPair.from_private_key(node.private_key)

    def __repr__(self) -> str:
        return f"HDNode(depth={self.depth}, index=0x{self.index:08x})"
