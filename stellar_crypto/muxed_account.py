"""
Muxed accounts (CAP-0027): a ``G...`` account plus an optional 64-bit id,
rendered as ``M...`` when the id is present.
"""

from __future__ import annotations

import struct
from typing import Optional

from stellar_crypto import strkey
from stellar_crypto.errors import InvalidEncoding, InvalidLength

_MAX_ID = 2**64 - 1


class MuxedAccount:
    """Immutable (account id, optional id) pair."""

    __slots__ = ("_ed25519_account_id", "_id")

    def __init__(self, ed25519_account_id: str, id: Optional[int] = None):
        if not ed25519_account_id.startswith("G"):
            raise InvalidEncoding("ed25519_account_id must start with G")
        # validates checksum and length
        strkey.decode_account_id(ed25519_account_id)
        if id is not None and not 0 <= id <= _MAX_ID:
            raise InvalidLength(f"Muxed id must fit in an unsigned 64-bit integer, got {id}")
        self._ed25519_account_id = ed25519_account_id
        self._id = id

    # ---- factory methods ----

    @classmethod
    def from_account_id(cls, account_id: str) -> MuxedAccount:
        """Accept either a ``G...`` or an ``M...`` address."""
        if account_id.startswith("G"):
            return cls(account_id)
        if account_id.startswith("M"):
            return cls.from_med25519_account_id(account_id)
        raise InvalidEncoding(f"Invalid account id: {account_id}")

    @classmethod
    def from_med25519_account_id(cls, med25519_account_id: str) -> MuxedAccount:
        raw = strkey.decode_muxed_account_id(med25519_account_id)
        (mux_id,) = struct.unpack(">Q", raw[32:])
        return cls(strkey.encode_account_id(raw[:32]), mux_id)

    # ---- accessors ----

    @property
    def ed25519_account_id(self) -> str:
        return self._ed25519_account_id

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def ed25519_public_key(self) -> bytes:
        return strkey.decode_account_id(self._ed25519_account_id)

    @property
    def account_id(self) -> str:
        """``M...`` when an id is set, the plain ``G...`` otherwise."""
        if self._id is None:
            return self._ed25519_account_id
        raw = self.ed25519_public_key + struct.pack(">Q", self._id)
        return strkey.encode_muxed_account_id(raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MuxedAccount):
            return NotImplemented
        return (self._ed25519_account_id, self._id) == (other._ed25519_account_id, other._id)

    def __hash__(self) -> int:
        return hash((self._ed25519_account_id, self._id))

    def __repr__(self) -> str:
        return f"MuxedAccount({self._ed25519_account_id!r}, id={self._id!r})"
