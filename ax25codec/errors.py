#!/usr/bin/env python3

"""
Exception classes raised by the codecs.

Everything here is a ValueError, so callers that only care whether a frame
or information field could be decoded can simply catch that.  The more
specific classes let a caller tell the failure modes apart, for instance to
try another decoder when a compressed position turns out not to be one.
"""


class CodecError(ValueError):
    """
    Base class for all codec errors.
    """

    pass


# HDLC framing


class HDLCError(CodecError):
    pass


class InvalidFrame(HDLCError):
    """
    No complete flag-delimited frame was found in the bit stream.
    """

    pass


class Runaway(HDLCError):
    """
    More than six consecutive 1 bits were seen inside a frame body.
    """

    pass


# AX.25 framing


class AX25Error(CodecError):
    pass


class ShortFrame(AX25Error):
    pass


class BadAddress(AX25Error):
    pass


class UnknownControl(AX25Error):
    pass


class UnknownModifier(AX25Error):
    pass


class BadSegment(AX25Error):
    pass


# APRS information fields


class APRSError(CodecError):
    pass


class BufferTooSmall(APRSError):
    """
    The encoded output does not fit the capacity given by the caller.
    """

    def __init__(self, needed, capacity):
        super(BufferTooSmall, self).__init__(
            "Output needs %d bytes, capacity is %d" % (needed, capacity)
        )
        self.needed = needed
        self.capacity = capacity


class InvalidField(APRSError):
    pass


class InvalidCoord(InvalidField):
    pass


class InvalidTimestamp(InvalidField):
    pass


class InvalidLength(APRSError):
    pass


class InvalidChecksum(APRSError):
    pass


class BadFcs(HDLCError, InvalidChecksum):
    """
    The HDLC frame check sequence did not match the frame contents.
    """

    pass


class Unsupported(APRSError):
    """
    The information field type is recognised but not handled.
    """

    pass


class InvalidDti(Unsupported):
    """
    The first byte of the information field is not a data type identifier.
    """

    pass


def check_capacity(data, capacity):
    """
    Raise BufferTooSmall if data will not fit in capacity bytes.  A capacity
    of None means "unlimited".  Returns the data unchanged.
    """
    if (capacity is not None) and (len(data) > capacity):
        raise BufferTooSmall(len(data), capacity)
    return data
