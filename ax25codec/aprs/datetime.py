#!/usr/bin/env python3

"""
APRS date and time formats.

Not enough information is carried in an APRS timestamp to build a full
date/time, and local timestamps are a nightmare to handle, so these classes
just reproduce enough to check and round-trip the values in APRS.
"""

from enum import Enum

from ..errors import InvalidTimestamp


class APRSTimestampFormat(Enum):
    """
    The shapes an APRS timestamp can take.
    """
    DHM_ZULU    = 'DHM zulu'    # DDHHMMz
    DHM_LOCAL   = 'DHM local'   # DDHHMM/ (or DDHHMMl)
    HMS         = 'HMS'         # HHMMSSh
    MDHM        = 'MDHM'        # MMDDHHMM


def _check(name, value, low, high):
    if not (low <= value <= high):
        raise InvalidTimestamp(
                '%s %d out of range %d-%d' % (name, value, low, high)
        )
    return value


class APRSTimestamp(object):
    """
    Base abstract class for APRS timestamps.
    """
    TS_LENGTH = 7
    TS_SUFFIX = ''

    def _fields(self): # pragma: no cover
        raise NotImplementedError('To be implemented in sub-class')

    def __str__(self):
        return ''.join('%02d' % f for f in self._fields()) + self.TS_SUFFIX

    def __repr__(self): # pragma: no cover
        return '%s(%r)' % (self.__class__.__name__, str(self))

    def __eq__(self, other):
        if not isinstance(other, APRSTimestamp):
            return NotImplemented
        return (self.FORMAT, str(self)) == (other.FORMAT, str(other))

    def __hash__(self):
        return hash((self.FORMAT, str(self)))


class DHMBaseTimestamp(APRSTimestamp):
    """
    Day/Hour/Minute timestamp (base class)
    """
    def __init__(self, day, hour, minute):
        self.day = _check('day', int(day), 1, 31)
        self.hour = _check('hour', int(hour), 0, 23)
        self.minute = _check('minute', int(minute), 0, 59)

    def _fields(self):
        return (self.day, self.hour, self.minute)


class DHMUTCTimestamp(DHMBaseTimestamp):
    """
    Day/Hour/Minute timestamp in UTC.
    """
    FORMAT = APRSTimestampFormat.DHM_ZULU
    TS_SUFFIX = "z"


class DHMLocalTimestamp(DHMBaseTimestamp):
    """
    Day/Hour/Minute timestamp in local time.  Written with a '/' marker by
    default; some stations send 'l' instead, which is accepted on decode
    and written back unchanged.
    """
    FORMAT = APRSTimestampFormat.DHM_LOCAL
    TS_SUFFIX = "/"
    TS_SUFFIXES = ("/", "l")

    def __init__(self, day, hour, minute, suffix=TS_SUFFIX):
        if suffix not in self.TS_SUFFIXES:
            raise InvalidTimestamp('Invalid local time marker %r' % suffix)
        self.TS_SUFFIX = suffix
        super(DHMLocalTimestamp, self).__init__(day, hour, minute)


class HMSTimestamp(APRSTimestamp):
    """
    Hour/Minute/Second timestamp in UTC.
    """
    FORMAT = APRSTimestampFormat.HMS
    TS_SUFFIX = "h"

    def __init__(self, hour, minute, second):
        self.hour = _check('hour', int(hour), 0, 23)
        self.minute = _check('minute', int(minute), 0, 59)
        self.second = _check('second', int(second), 0, 59)

    def _fields(self):
        return (self.hour, self.minute, self.second)


class MDHMTimestamp(APRSTimestamp):
    """
    Month/Day/Hour/Minute timestamp in UTC, used by weather reports.
    """
    FORMAT = APRSTimestampFormat.MDHM
    TS_LENGTH = 8

    def __init__(self, month, day, hour, minute):
        self.month = _check('month', int(month), 1, 12)
        self.day = _check('day', int(day), 1, 31)
        self.hour = _check('hour', int(hour), 0, 23)
        self.minute = _check('minute', int(minute), 0, 59)

    def _fields(self):
        return (self.month, self.day, self.hour, self.minute)


def _digits(dtstr, length):
    digits = dtstr[0:length]
    if (len(digits) != length) or not digits.isdigit() \
            or not digits.isascii():
        raise InvalidTimestamp('Timestamp digits expected: %r' % dtstr)
    return [int(digits[p:p+2]) for p in range(0, length, 2)]


def decode(dtstr, allow_mdhm=False):
    """
    Decode a APRS date/time date code from the start of dtstr.  The
    month/day/hour/minute form is only recognised when allow_mdhm is set, as
    it is only valid in weather reports.
    """
    if len(dtstr) < APRSTimestamp.TS_LENGTH:
        # Not a valid date/time format
        raise InvalidTimestamp('Timestamp string too short: %r' % dtstr)

    suffix = dtstr[6]
    if suffix == DHMUTCTimestamp.TS_SUFFIX:
        # Format is:
        #   DDHHMMz
        return DHMUTCTimestamp(*_digits(dtstr, 6))
    elif suffix in DHMLocalTimestamp.TS_SUFFIXES:
        # Format is:
        #   DDHHMM/
        (day, hour, minute) = _digits(dtstr, 6)
        return DHMLocalTimestamp(day, hour, minute, suffix=suffix)
    elif suffix == HMSTimestamp.TS_SUFFIX:
        # Format is:
        #   HHMMSSh
        return HMSTimestamp(*_digits(dtstr, 6))
    elif allow_mdhm and (len(dtstr) >= MDHMTimestamp.TS_LENGTH):
        # Format is:
        #   MMDDHHMM
        return MDHMTimestamp(*_digits(dtstr, 8))

    raise InvalidTimestamp('Timestamp format not recognised: %r' % dtstr)


def coerce(timestamp, allow_mdhm=False):
    """
    Accept a timestamp object or its text form.
    """
    if (timestamp is None) or isinstance(timestamp, APRSTimestamp):
        return timestamp

    timestamp = str(timestamp)
    decoded = decode(timestamp, allow_mdhm=allow_mdhm)
    if len(timestamp) != decoded.TS_LENGTH:
        raise InvalidTimestamp('Trailing data in timestamp %r' % timestamp)
    return decoded
