#!/usr/bin/env python3

"""
APRS Base-91 compression: a bijection between n printable characters in the
range '!'..'~' and an unsigned integer in [0, 91**n).
"""

from ..errors import InvalidField

BYTE_VALUE_OFFSET = 33
BYTE_VALUE_RADIX = 91


def compress(value, length):
    value = int(value)
    if not (0 <= value < (BYTE_VALUE_RADIX ** length)):
        raise InvalidField(
                'Value %d does not fit in %d base-91 digits' \
                % (value, length)
        )

    # Initialise our byte values
    bvalue = [0] * length

    # Figure out the bytes
    for pos in range(length):
        (div, rem) = divmod(
                value,
                BYTE_VALUE_RADIX ** (length - pos - 1)
        )
        bvalue[pos] += int(div)
        value = rem

    # Encode them into ASCII
    return ''.join([chr(b + BYTE_VALUE_OFFSET) for b in bvalue])


def decompress(value):
    digits = [ord(c) - BYTE_VALUE_OFFSET for c in value]
    for (pos, digit) in enumerate(digits):
        if not (0 <= digit < BYTE_VALUE_RADIX):
            raise InvalidField(
                    'Not a base-91 character: %r at position %d in %r' \
                    % (value[pos], pos, value)
            )

    length = len(digits)
    return sum([
            (d * (BYTE_VALUE_RADIX ** (length - i - 1)))
            for (i, d) in enumerate(digits)
    ])
