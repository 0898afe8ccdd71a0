"""
CRC16-CCITT (XModem) checksum used by every strkey.

Polynomial 0x1021, initial value 0x0000, MSB-first, no final XOR.
"""

from __future__ import annotations

import struct

CRC16_INITIAL = 0x0000
CRC16_POLYNOMIAL = 0x1021
CRC16_MASK = 0xFFFF


def crc16(data: bytes) -> int:
    """Return the CRC16-XModem of *data* as an int in ``0..0xFFFF``."""
    crc = CRC16_INITIAL
    for byte in data:
        for i in range(8):
            bit = (byte >> (7 - i)) & 1
            c15 = (crc >> 15) & 1
            crc = (crc << 1) & CRC16_MASK
            if c15 ^ bit:
                crc ^= CRC16_POLYNOMIAL
    return crc & CRC16_MASK


def crc16_bytes(data: bytes) -> bytes:
    """CRC16 of *data* packed as 2 little-endian bytes."""
    return struct.pack("<H", crc16(data))


def verify_crc16(data: bytes, checksum: bytes) -> bool:
    return crc16_bytes(data) == checksum
