#!/usr/bin/env python3

"""
Unsigned integer encoding and decoding routines.

AX.25 mixes endianness freely: control fields and most XID values are sent
little-endian, while the XID group length and the segmentation length
header are big-endian.  Some fields are odd sizes too, like the 24-bit HDLC
Optional Functions value.
"""


def encode(value, length=None, big_endian=False):
    """
    Encode the unsigned integer value as bytes.  If length is given, the
    output is exactly that many bytes and a value that does not fit raises
    ValueError.
    """
    value = int(value)
    if value < 0:
        raise ValueError("Cannot encode negative value %d" % value)

    if length is None:
        length = max(1, (value.bit_length() + 7) // 8)
    elif value >> (8 * length):
        raise ValueError(
            "Value 0x%x does not fit in %d bytes" % (value, length)
        )

    output = bytearray(length)
    for pos in range(length):
        output[pos] = (value >> (8 * pos)) & 0xFF

    if big_endian:
        output.reverse()

    return bytes(output)


def decode(value, big_endian=False):
    """
    Decode the given bytes as an unsigned integer.
    """
    if not big_endian:
        value = reversed(value)

    output = 0
    for byte in value:
        output = (output << 8) | byte
    return output
