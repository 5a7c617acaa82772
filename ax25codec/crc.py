#!/usr/bin/env python3

"""
Bit reversal and the 16-bit CRC-CCITT frame check sequence used by AX.25.

AX.25 transmits each octet least-significant bit first.  The HDLC layer in
this package works on bytes that have been bit-reversed into transmission
order, so the FCS is computed over the reversed bytes.  The CRC itself is
the reflected CCITT polynomial (CRC-16/X.25): init 0xffff, polynomial
0x8408, final XOR 0xffff.
"""

CRC_INIT = 0xFFFF
CRC_POLY = 0x8408
CRC_XOROUT = 0xFFFF


def _reverse_byte(byte):
    result = 0
    for _ in range(8):
        result = (result << 1) | (byte & 1)
        byte >>= 1
    return result


# Computed once, the reversal is used on every byte in both directions.
REVERSED = bytes([_reverse_byte(b) for b in range(256)])


def bit_reverse(data):
    """
    Reverse the order of the eight bits in every byte of data.
    """
    return bytes(data).translate(REVERSED)


def crc_ccitt(data):
    """
    Compute the 16-bit frame check sequence over the given bytes.
    """
    crc = CRC_INIT
    for byte in bytes(data):
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ CRC_POLY
            else:
                crc >>= 1
    return crc ^ CRC_XOROUT
