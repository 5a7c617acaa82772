#!/usr/bin/env python3

"""
AX.25 segmentation (AX.25 2.2 section 6.9).

A payload too large for one I or UI frame is split into segments, each sent
as the information field of a frame with PID 0x08.  Every segment starts
with a byte holding the number of segments still to follow; on the first
segment bit 7 of that byte is also set and the total payload length follows
as a big-endian 16-bit value.
"""

import logging

from . import uint
from .errors import BadSegment

FIRST_SEGMENT = 0x80
REMAINING_MASK = 0x7F
LENGTH_LEN = 2

# The remaining count is 7 bits, so at most 128 segments.
MAX_SEGMENTS = 128

# First segment overhead: count byte and total length.
FIRST_OVERHEAD = 1 + LENGTH_LEN


class AX25Segmenter(object):
    """
    Split payloads into segments no larger than n1 bytes.
    """

    def __init__(self, n1=256):
        n1 = int(n1)
        if n1 <= FIRST_OVERHEAD:
            raise ValueError(
                "Segment size must exceed %d bytes, got %d"
                % (FIRST_OVERHEAD, n1)
            )
        self._n1 = n1

    @property
    def n1(self):
        return self._n1

    def segment(self, payload):
        """
        Return the list of segments for the given payload.
        """
        payload = bytes(payload)
        if len(payload) > 0xFFFF:
            raise ValueError(
                "Payload of %d bytes is too large to segment" % len(payload)
            )

        chunks = [payload[0 : self.n1 - FIRST_OVERHEAD]]
        rest = payload[self.n1 - FIRST_OVERHEAD :]
        step = self.n1 - 1
        while rest:
            chunks.append(rest[0:step])
            rest = rest[step:]

        if len(chunks) > MAX_SEGMENTS:
            raise ValueError(
                "Payload needs %d segments, at most %d permitted"
                % (len(chunks), MAX_SEGMENTS)
            )

        remaining = len(chunks) - 1
        segments = [
            bytes([FIRST_SEGMENT | remaining])
            + uint.encode(len(payload), length=LENGTH_LEN, big_endian=True)
            + chunks[0]
        ]
        for chunk in chunks[1:]:
            remaining -= 1
            segments.append(bytes([remaining]) + chunk)

        return segments


class AX25Reassembler(object):
    """
    Reassemble segmented payloads.  Segments must arrive in order; add()
    returns the complete payload once the last segment is received and None
    until then.
    """

    def __init__(self, log=None):
        if log is None:
            log = logging.getLogger(self.__class__.__module__)
        self._log = log
        self.reset()

    def reset(self):
        """
        Discard any partially reassembled payload.
        """
        self._expected = None
        self._remaining = None
        self._buffer = bytearray()

    @property
    def in_progress(self):
        return self._remaining is not None

    def add(self, segment):
        segment = bytes(segment)
        if not segment:
            raise BadSegment("Empty segment")

        header = segment[0]
        remaining = header & REMAINING_MASK

        if header & FIRST_SEGMENT:
            if self.in_progress:
                outstanding = self._remaining
                self._log.debug(
                    "New first segment, discarding %d bytes",
                    len(self._buffer),
                )
                self.reset()
                raise BadSegment(
                    "First segment received while %d segments outstanding"
                    % outstanding
                )

            if len(segment) < FIRST_OVERHEAD:
                raise BadSegment("First segment too short")

            self._expected = uint.decode(
                segment[1:FIRST_OVERHEAD], big_endian=True
            )
            self._remaining = remaining
            self._buffer = bytearray(segment[FIRST_OVERHEAD:])
        else:
            if not self.in_progress:
                raise BadSegment("Segment received without a first segment")

            if remaining != self._remaining - 1:
                expected = self._remaining - 1
                self.reset()
                raise BadSegment(
                    "Segment out of order: expected %d remaining, got %d"
                    % (expected, remaining)
                )

            self._remaining = remaining
            self._buffer += segment[1:]

        if len(self._buffer) > self._expected:
            expected = self._expected
            self.reset()
            raise BadSegment(
                "Reassembled payload exceeds declared length %d" % expected
            )

        if self._remaining:
            return None

        payload = bytes(self._buffer)
        expected = self._expected
        self.reset()
        if len(payload) != expected:
            raise BadSegment(
                "Reassembled %d bytes, expected %d" % (len(payload), expected)
            )
        return payload

    def reassemble(self, segments):
        """
        Reassemble a complete list of segments into the original payload.
        """
        self.reset()
        payload = None
        for segment in segments:
            if payload is not None:
                raise BadSegment("Segments follow the last segment")
            payload = self.add(segment)

        if payload is None:
            self.reset()
            raise BadSegment("Missing segments")
        return payload
