#!/usr/bin/env python3

"""
HDLC framing for AX.25.

On the air an AX.25 frame is sent least-significant bit first, protected by
a 16-bit FCS, bit-stuffed so the body can never contain six consecutive 1
bits, and delimited by 0x7e flags.  Here the bit stream is represented as a
string of bytes holding the bits most-significant bit first, so the encoder
bit-reverses every octet of the AX.25 frame before anything else.

The closing flag follows the last body bit directly; whatever is left of the
final byte is filled with idle 1 bits.
"""

import logging

from .crc import bit_reverse, crc_ccitt
from .errors import InvalidFrame, BadFcs, Runaway, check_capacity
from . import uint

FLAG = 0x7E
FLAG_BITS = (0, 1, 1, 1, 1, 1, 1, 0)
FCS_LEN = 2

# Stuff a zero after this many consecutive ones.
MAX_ONES = 5

# Six ones are legal only as part of a flag.
MAX_RUN = 6


def _bits(data):
    """
    Yield the bits of each byte, most significant first.
    """
    for byte in data:
        for shift in range(7, -1, -1):
            yield (byte >> shift) & 1


def _pack(bits, fill=1):
    """
    Pack a sequence of bits into bytes, most significant bit first, filling
    the tail of the last byte with the given bit value.
    """
    output = bytearray()
    byte = 0
    count = 0
    for bit in bits:
        byte = (byte << 1) | bit
        count += 1
        if count == 8:
            output.append(byte)
            byte = 0
            count = 0

    if count:
        for _ in range(8 - count):
            byte = (byte << 1) | fill
        output.append(byte)

    return bytes(output)


def _stuff(bits):
    """
    Insert a zero after every run of five consecutive one bits.
    """
    ones = 0
    for bit in bits:
        yield bit
        if bit:
            ones += 1
            if ones == MAX_ONES:
                yield 0
                ones = 0
        else:
            ones = 0


def encode(frame, capacity=None):
    """
    Wrap the given AX.25 frame (bytes) in HDLC framing.
    """
    body = bit_reverse(frame)
    body += uint.encode(crc_ccitt(body), length=FCS_LEN, big_endian=True)

    def _stream():
        for bit in FLAG_BITS:
            yield bit
        for bit in _stuff(_bits(body)):
            yield bit
        for bit in FLAG_BITS:
            yield bit

    return check_capacity(_pack(_stream()), capacity)


def _check_fcs(data):
    """
    Verify and strip the FCS of a destuffed frame, then restore the original
    bit order.
    """
    if len(data) < FCS_LEN:
        raise InvalidFrame("Frame too short to hold an FCS")

    body = bytes(data[:-FCS_LEN])
    fcs = uint.decode(data[-FCS_LEN:], big_endian=True)
    computed = crc_ccitt(body)
    if fcs != computed:
        raise BadFcs(
            "FCS mismatch: frame has 0x%04x, computed 0x%04x"
            % (fcs, computed)
        )

    return bit_reverse(body)


def decode(data):
    """
    Extract the first complete frame from an HDLC encoded byte stream and
    return the AX.25 frame it carries.
    """
    decoder = HDLCDecoder(strict=True)
    frames = decoder.feed(data)
    if not frames:
        raise InvalidFrame("No complete flag-delimited frame found")
    return frames[0]


class HDLCDecoder(object):
    """
    Incremental HDLC decoder.  Feed it chunks of the received byte stream;
    every complete frame found is returned from feed().  The closing flag of
    one frame may serve as the opening flag of the next.

    In strict mode, a bit-stuffing violation or an FCS mismatch raises an
    exception.  Otherwise the damaged frame is logged and dropped and the
    decoder goes back to hunting for a flag.
    """

    def __init__(self, strict=False, log=None):
        if log is None:
            log = logging.getLogger(self.__class__.__module__)

        self._log = log
        self._strict = strict
        self._shift = 0
        self._reset(in_frame=False)

    def _reset(self, in_frame):
        self._in_frame = in_frame
        self._ones = 0
        self._byte = 0
        self._nbits = 0
        self._body = bytearray()

    @property
    def in_frame(self):
        """
        True if the opening flag of a frame has been seen.
        """
        return self._in_frame

    def feed(self, data):
        """
        Feed received bytes to the decoder, return the list of decoded AX.25
        frames.
        """
        frames = []
        for bit in _bits(bytes(data)):
            frame = self._receive(bit)
            if frame is not None:
                frames.append(frame)
                if self._strict:
                    break
        return frames

    def _receive(self, bit):
        self._shift = ((self._shift << 1) | bit) & 0xFF

        if not self._in_frame:
            if self._shift == FLAG:
                self._reset(in_frame=True)
            return None

        if self._shift == FLAG:
            # Closing flag (or an opening flag repeated)
            body = self._body
            self._reset(in_frame=True)
            if not body:
                return None
            return self._finish(body)

        if bit:
            self._ones += 1
            if self._ones > MAX_RUN:
                return self._abort(
                    Runaway("%d consecutive one bits in frame" % self._ones)
                )
        elif self._ones == MAX_ONES:
            # Stuffed bit, discard
            self._ones = 0
            return None
        else:
            self._ones = 0

        self._byte = (self._byte << 1) | bit
        self._nbits += 1
        if self._nbits == 8:
            self._body.append(self._byte)
            self._byte = 0
            self._nbits = 0
        return None

    def _finish(self, body):
        try:
            return _check_fcs(body)
        except InvalidFrame:
            if self._strict:
                raise
            self._log.debug("Dropping short frame: %r", bytes(body))
        except BadFcs:
            if self._strict:
                raise
            self._log.debug("Dropping frame with bad FCS", exc_info=1)
        return None

    def _abort(self, error):
        empty = not self._body
        self._reset(in_frame=False)
        if empty:
            # Idle line between frames
            return None
        if self._strict:
            raise error
        self._log.debug("Aborted frame: %s", error)
        return None
