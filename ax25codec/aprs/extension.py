#!/usr/bin/env python3

"""
APRS data extensions and comment tokens.

A position, object or item may carry one seven byte data extension straight
after its symbol code:

    ccc/sss     course and speed
    PHGphgd     power, antenna height, gain and directivity
    RNGrrrr     pre-calculated radio range
    DFSshgd     DF signal strength, antenna height, gain and directivity

Two more tokens may appear anywhere in the comment: "/A=nnnnnn", the
altitude in feet, and "!DAO!", the datum and an extra digit of latitude and
longitude precision.  Those are parsed from the comment but the comment is
kept as given.
"""

import re

from ..errors import InvalidField
from ..unit import convertvalue, quantity

EXTENSION_LENGTH = 7


def _digit(name, value):
    value = int(value)
    if not (0 <= value <= 9):
        raise InvalidField('%s code %d out of range 0-9' % (name, value))
    return value


class APRSCourseSpeed(object):
    """
    Course (degrees) and speed (knots) in the form ccc/sss.  The course is
    wrapped into 0-359, so 360 is sent as 000.
    """
    RE = re.compile(r'^([0-9]{3})/([0-9]{3})')

    SPEED_UNITS = 'knot'
    SPEED_MAX = 999

    @classmethod
    def decode(cls, text):
        """
        Decode a course/speed extension from the start of text, return it
        (or None if there isn't one) and the remaining text.
        """
        match = cls.RE.match(text)
        if not match:
            return (None, text)

        course = int(match.group(1))
        if course > 360:
            # Not a course, so not a course/speed extension
            return (None, text)

        return (
                cls(course=course, speed=int(match.group(2))),
                text[EXTENSION_LENGTH:]
        )

    def __init__(self, course, speed):
        course = int(course)
        speed = convertvalue('speed', speed, self.SPEED_UNITS, required=True)
        if speed < 0:
            raise InvalidField('Speed must not be negative: %r' % speed)

        # Wrap the course, clamp the speed.
        self.course = ((course % 360) + 360) % 360
        self.speed = min(int(round(speed)), self.SPEED_MAX)

    @property
    def speed_q(self):
        return quantity(self.speed, self.SPEED_UNITS)

    def __eq__(self, other):
        if not isinstance(other, APRSCourseSpeed):
            return NotImplemented
        return (self.course, self.speed) == (other.course, other.speed)

    def __repr__(self): # pragma: no cover
        return '%s(course=%r, speed=%r)' % (
                self.__class__.__name__, self.course, self.speed
        )

    def __str__(self):
        return '%03d/%03d' % (self.course, self.speed)


class APRSAntennaExtension(object):
    """
    Base for the PHGphgd and DFSshgd extensions: four single digit codes.
    The first code is the transmitter power (PHG) or the received signal
    strength (DFS); the others describe the antenna.
    """
    PREFIX = None
    FIRST = None

    @classmethod
    def decode(cls, text):
        """
        Decode the extension from the start of text, return it (or None if
        there isn't one) and the remaining text.
        """
        if not text.startswith(cls.PREFIX):
            return (None, text)

        codes = text[len(cls.PREFIX):EXTENSION_LENGTH]
        if (len(codes) != 4) or not all(c in '0123456789' for c in codes):
            return (None, text)

        return (
                cls(*[int(c) for c in codes]),
                text[EXTENSION_LENGTH:]
        )

    def __init__(self, first, height, gain, directivity):
        setattr(self, self.FIRST, _digit(self.FIRST, first))
        self.height = _digit('height', height)
        self.gain = _digit('gain', gain)
        self.directivity = _digit('directivity', directivity)

    @property
    def codes(self):
        return (
                getattr(self, self.FIRST),
                self.height, self.gain, self.directivity
        )

    @property
    def height_ft(self):
        """
        Antenna height above average terrain in feet.
        """
        return 10 * (2 ** self.height)

    @property
    def height_q(self):
        return quantity(self.height_ft, 'foot')

    @property
    def gain_db(self):
        return self.gain

    @property
    def direction(self):
        """
        Direction of maximum gain in degrees, or None for omni-directional.
        """
        if self.directivity == 0:
            return None
        return self.directivity * 45

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.codes == other.codes

    def __repr__(self): # pragma: no cover
        return '%s%r' % (self.__class__.__name__, self.codes)

    def __str__(self):
        return self.PREFIX + ''.join('%d' % c for c in self.codes)


class APRSPHG(APRSAntennaExtension):
    """
    Power, height, gain and directivity.
    """
    PREFIX = 'PHG'
    FIRST = 'power'

    @property
    def power_w(self):
        """
        Transmitter power in watts.
        """
        return self.power ** 2

    @property
    def power_q(self):
        return quantity(self.power_w, 'watt')


class APRSDFS(APRSAntennaExtension):
    """
    Omni-DF signal strength, height, gain and directivity.
    """
    PREFIX = 'DFS'
    FIRST = 'strength'


class APRSRange(object):
    """
    Pre-calculated radio range in miles.
    """
    PREFIX = 'RNG'
    RANGE_UNITS = 'mile'

    @classmethod
    def decode(cls, text):
        if not text.startswith(cls.PREFIX):
            return (None, text)

        digits = text[len(cls.PREFIX):EXTENSION_LENGTH]
        if (len(digits) != 4) or not all(c in '0123456789' for c in digits):
            return (None, text)

        return (cls(int(digits)), text[EXTENSION_LENGTH:])

    def __init__(self, rng):
        rng = int(round(convertvalue('rng', rng, self.RANGE_UNITS,
            required=True)))
        if not (0 <= rng <= 9999):
            raise InvalidField('Range %d out of range 0-9999' % rng)
        self.rng = rng

    @property
    def rng_q(self):
        return quantity(self.rng, self.RANGE_UNITS)

    def __eq__(self, other):
        if not isinstance(other, APRSRange):
            return NotImplemented
        return self.rng == other.rng

    def __repr__(self): # pragma: no cover
        return '%s(%r)' % (self.__class__.__name__, self.rng)

    def __str__(self):
        return '%s%04d' % (self.PREFIX, self.rng)


# Extensions that may follow the symbol code, in the order tried
DATA_EXTENSIONS = (APRSCourseSpeed, APRSPHG, APRSRange, APRSDFS)


def decode_extension(text, allowed=DATA_EXTENSIONS):
    """
    Decode a data extension from the start of text.  Returns the extension
    (or None) and the remaining text.
    """
    for extension in allowed:
        (value, rest) = extension.decode(text)
        if value is not None:
            return (value, rest)
    return (None, text)


class APRSAltitude(object):
    """
    The /A=nnnnnn altitude comment token, in feet.
    """
    RE = re.compile(r'/A=(-[0-9]{5}|[0-9]{6})')
    ALTITUDE_UNITS = 'foot'

    @classmethod
    def find(cls, comment):
        """
        Return the altitude in the comment, or None.
        """
        if not comment:
            return None
        match = cls.RE.search(comment)
        if not match:
            return None
        return int(match.group(1))

    @classmethod
    def encode(cls, altitude):
        altitude = int(round(altitude))
        if not (-99999 <= altitude <= 999999):
            raise InvalidField('Altitude %d out of range' % altitude)
        if altitude < 0:
            return '/A=-%05d' % -altitude
        return '/A=%06d' % altitude


class APRSDAO(object):
    """
    The !DAO! datum and extra precision comment token.  With an upper-case
    datum the A and O characters are the next digit of the latitude and
    longitude minutes (thousandths); with a lower-case datum they are base-91
    digits giving 1/91 steps of a hundredth of a minute.
    """
    RE = re.compile(r'!([A-Za-z])([\x21-\x7b ])([\x21-\x7b ])!')

    @classmethod
    def find(cls, comment):
        if not comment:
            return None
        match = cls.RE.search(comment)
        if not match:
            return None
        try:
            return cls(*match.groups())
        except InvalidField:
            return None

    def __init__(self, datum, lat_extra=' ', lon_extra=' '):
        if (len(datum) != 1) or not datum.isalpha():
            raise InvalidField('Invalid DAO datum %r' % datum)
        for extra in (lat_extra, lon_extra):
            if datum.isupper():
                if extra not in ' 0123456789':
                    raise InvalidField('Invalid DAO digit %r' % extra)
            elif not ((extra == ' ') or (0x21 <= ord(extra) <= 0x7b)):
                raise InvalidField('Invalid DAO base-91 digit %r' % extra)

        self.datum = datum
        self.lat_extra = lat_extra
        self.lon_extra = lon_extra

    def _offset(self, extra):
        if extra == ' ':
            return 0.0
        if self.datum.isupper():
            return int(extra) * 0.001
        return (ord(extra) - 33) * 0.01 / 91.0

    @property
    def lat_minutes(self):
        """
        Extra latitude minutes (magnitude) given by this token.
        """
        return self._offset(self.lat_extra)

    @property
    def lon_minutes(self):
        """
        Extra longitude minutes (magnitude) given by this token.
        """
        return self._offset(self.lon_extra)

    def apply(self, latitude, longitude):
        """
        Refine the given decimal degrees with the extra precision.
        """
        lat = abs(latitude) + (self.lat_minutes / 60.0)
        lon = abs(longitude) + (self.lon_minutes / 60.0)
        return (
                -lat if latitude < 0 else lat,
                -lon if longitude < 0 else lon
        )

    def __eq__(self, other):
        if not isinstance(other, APRSDAO):
            return NotImplemented
        return str(self) == str(other)

    def __repr__(self): # pragma: no cover
        return '%s(%r)' % (self.__class__.__name__, str(self))

    def __str__(self):
        return '!%s%s%s!' % (self.datum, self.lat_extra, self.lon_extra)
