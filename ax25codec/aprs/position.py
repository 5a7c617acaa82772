#!/usr/bin/env python3

"""
APRS position reports.

Positions are sent either as text:

    0123456789012345678
    DDMM.hhNTDDDMM.hhWC

or compressed into base-91:

    0123456789012
    TYYYYXXXXCcst

D = degrees, M = minutes, h = hundredths of minutes, N/W = hemisphere,
T = symbol table, C = symbol code, Y = compressed latitude, X = compressed
longitude, cs = compressed course/speed, range or altitude, t = compression
type.

The same shapes are used inside object and item reports, so the encoding and
decoding of the location part lives in APRSLocation, which the records mix
in.
"""

import math
from enum import IntEnum

from ..errors import InvalidCoord, InvalidDti, InvalidField, InvalidLength
from ..unit import convertvalue, quantity
from .compression import compress, decompress, BYTE_VALUE_OFFSET, \
        BYTE_VALUE_RADIX
from .datatype import APRSDataType, POSITION_TYPES
from .datetime import coerce as coerce_timestamp, decode as decode_datetime
from .extension import APRSAltitude, APRSCourseSpeed, APRSDAO, APRSDFS, \
        APRSPHG, APRSRange, decode_extension
from .record import APRSRecord, datatype_of, getlog, totext
from .symbol import APRSSymbol, PRI_SYMBOL


class APRSPositionAmbiguity(IntEnum):
    """
    Number of trailing digits blanked out of a text position.
    """
    NONE                = 0
    HUNDREDTH_MINUTE    = 1
    TENTH_MINUTE        = 2
    MINUTE              = 3
    TEN_MINUTES         = 4


def _ambiguity(value):
    try:
        return APRSPositionAmbiguity(int(value))
    except ValueError:
        raise InvalidField('Ambiguity %r out of range 0-4' % (value,))


class APRSCoordinate(object):
    """
    Text co-ordinate codec: DDMM.hhN for latitude, DDDMM.hhE for longitude.
    """
    DEGREE_DIGITS = None
    LIMIT = None
    POS_SUFFIX = None
    NEG_SUFFIX = None

    @classmethod
    def _length(cls):
        return cls.DEGREE_DIGITS + 6

    @classmethod
    def _blanks(cls):
        # Blanked from the least significant digit upward:
        # hundredths, tenths, minutes, tens of minutes.
        dd = cls.DEGREE_DIGITS
        return (dd + 4, dd + 3, dd + 1, dd)

    @classmethod
    def check(cls, value):
        """
        Validate a co-ordinate in decimal degrees.
        """
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise InvalidCoord('Not a co-ordinate: %r' % (value,))

        if math.isnan(value) or (abs(value) > cls.LIMIT):
            raise InvalidCoord(
                    'Co-ordinate %r out of range -%d..%d' \
                    % (value, cls.LIMIT, cls.LIMIT)
            )
        return value

    @classmethod
    def encode(cls, value, ambiguity=APRSPositionAmbiguity.NONE):
        value = cls.check(value)
        ambiguity = _ambiguity(ambiguity)

        suffix = cls.NEG_SUFFIX if value < 0 else cls.POS_SUFFIX
        hundredths = int(round(abs(value) * 6000))
        (degrees, hundredths) = divmod(hundredths, 6000)
        (minutes, hundredths) = divmod(hundredths, 100)

        pos = list('%0*d%02d.%02d%s' % (
                cls.DEGREE_DIGITS, degrees, minutes, hundredths, suffix
        ))
        for blank in cls._blanks()[0:ambiguity]:
            pos[blank] = ' '
        return ''.join(pos)

    @classmethod
    def decode(cls, posstr):
        """
        Decode a text co-ordinate, return the decimal degrees and the
        ambiguity.  Blanked digits are taken to be at the centre of the
        range they hide.
        """
        if len(posstr) != cls._length():
            raise InvalidLength(
                    'Co-ordinate must be %d characters: %r' \
                    % (cls._length(), posstr)
            )

        dd = cls.DEGREE_DIGITS
        if posstr[dd + 2] != '.':
            raise InvalidCoord('No decimal point in %r' % posstr)

        if posstr[-1] == cls.POS_SUFFIX:
            sign = 1
        elif posstr[-1] == cls.NEG_SUFFIX:
            sign = -1
        else:
            raise InvalidCoord('Unrecognised hemisphere in %r' % posstr)

        blanked = [p for p in cls._blanks() if posstr[p] == ' ']
        ambiguity = APRSPositionAmbiguity(len(blanked))
        if blanked != list(cls._blanks()[0:ambiguity]):
            raise InvalidCoord('Irregular ambiguity in %r' % posstr)

        for (pos, char) in enumerate(posstr[0:-1]):
            if (pos == dd + 2) or (pos in blanked):
                continue
            if char not in '0123456789':
                raise InvalidCoord('Non-numeric co-ordinate %r' % posstr)

        digits = posstr[0:dd + 2] + posstr[dd + 3:dd + 5]
        digits = digits.replace(' ', '0')

        degrees = int(digits[0:dd])
        tens = int(digits[dd])
        ones = int(digits[dd + 1])
        tenths = int(digits[dd + 2])
        hundredths = int(digits[dd + 3])

        if ambiguity == APRSPositionAmbiguity.NONE:
            minutes = (tens * 10) + ones + (tenths / 10.0) \
                    + (hundredths / 100.0)
        elif ambiguity == APRSPositionAmbiguity.HUNDREDTH_MINUTE:
            minutes = (tens * 10) + ones + (tenths / 10.0) + 0.05
        elif ambiguity == APRSPositionAmbiguity.TENTH_MINUTE:
            minutes = (tens * 10) + ones + 0.5
        elif ambiguity == APRSPositionAmbiguity.MINUTE:
            minutes = (tens * 10) + 5
        else:
            minutes = 30

        if minutes >= 60:
            raise InvalidCoord('Minutes out of range in %r' % posstr)

        value = degrees + (minutes / 60.0)
        if value > cls.LIMIT:
            if ambiguity == APRSPositionAmbiguity.NONE:
                raise InvalidCoord(
                        'Co-ordinate out of range in %r' % posstr
                )
            # Centre of the box lies past the pole or date line
            value = float(cls.LIMIT)

        return (sign * value, ambiguity)


class APRSLatitude(APRSCoordinate):
    DEGREE_DIGITS = 2
    LIMIT = 90
    POS_SUFFIX = 'N'
    NEG_SUFFIX = 'S'
    LENGTH = 8


class APRSLongitude(APRSCoordinate):
    DEGREE_DIGITS = 3
    LIMIT = 180
    POS_SUFFIX = 'E'
    NEG_SUFFIX = 'W'
    LENGTH = 9


class APRSCompressedCoordinate(object):
    LENGTH = 4
    MAXIMUM = (BYTE_VALUE_RADIX ** 4) - 1

    @classmethod
    def encode(cls, value):
        value = cls.COORDINATE.check(value)
        scaled = int(round((cls.OFFSET + (cls.PRESCALE * value)) \
                * cls.POSTSCALE))
        return compress(min(max(scaled, 0), cls.MAXIMUM), cls.LENGTH)

    @classmethod
    def decode(cls, text):
        if len(text) != cls.LENGTH:
            raise InvalidLength('Compressed co-ordinate must be 4 bytes')

        value = ((decompress(text) / float(cls.POSTSCALE)) - cls.OFFSET) \
                / cls.PRESCALE
        return cls.COORDINATE.check(value)


class APRSCompressedLatitude(APRSCompressedCoordinate):
    COORDINATE = APRSLatitude
    POSTSCALE = 380926
    PRESCALE = -1
    OFFSET = 90


class APRSCompressedLongitude(APRSCompressedCoordinate):
    COORDINATE = APRSLongitude
    POSTSCALE = 190463
    PRESCALE = 1
    OFFSET = 180


class APRSCompressionTypeGPSFix(IntEnum):
    OLD     = 0b00000000
    CURRENT = 0b00100000


class APRSCompressionTypeNMEASrc(IntEnum):
    OTHER   = 0b00000000
    GLL     = 0b00001000
    GGA     = 0b00010000
    RMC     = 0b00011000


class APRSCompressionTypeOrigin(IntEnum):
    COMPRESSED  = 0b00000000
    TNC_BTEXT   = 0b00000001
    SOFTWARE    = 0b00000010
    TBD         = 0b00000011
    KPC3        = 0b00000100
    PICO        = 0b00000101
    OTHER       = 0b00000110
    DIGIPEATER  = 0b00000111


class APRSCompressionType(object):
    """
    The compression type byte: GPS fix age, NMEA source and origin.  A GGA
    source means the cs bytes hold an altitude.
    """
    LENGTH = 1

    GPSFIX_MASK     = 0b00100000
    NMEASRC_MASK    = 0b00011000
    ORIGIN_MASK     = 0b00000111
    RESERVED_MASK   = 0b11000000

    @classmethod
    def decode(cls, typechar):
        typebyte = ord(typechar) - BYTE_VALUE_OFFSET
        if not (0 <= typebyte < BYTE_VALUE_RADIX) \
                or (typebyte & cls.RESERVED_MASK):
            raise InvalidField('Invalid compression type %r' % typechar)

        gpsfix = APRSCompressionTypeGPSFix(typebyte & cls.GPSFIX_MASK)
        nmeasrc = APRSCompressionTypeNMEASrc(typebyte & cls.NMEASRC_MASK)
        origin = APRSCompressionTypeOrigin(typebyte & cls.ORIGIN_MASK)

        return cls(gpsfix, nmeasrc, origin)

    def __init__(self, gpsfix=APRSCompressionTypeGPSFix.CURRENT,
            nmeasrc=APRSCompressionTypeNMEASrc.OTHER,
            origin=APRSCompressionTypeOrigin.SOFTWARE):
        self.gpsfix = APRSCompressionTypeGPSFix(gpsfix)
        self.nmeasrc = APRSCompressionTypeNMEASrc(nmeasrc)
        self.origin = APRSCompressionTypeOrigin(origin)

    @property
    def raw(self):
        return self.gpsfix.value | self.nmeasrc.value | self.origin.value

    @property
    def is_current(self):
        return self.gpsfix == APRSCompressionTypeGPSFix.CURRENT

    @property
    def is_altitude(self):
        return self.nmeasrc == APRSCompressionTypeNMEASrc.GGA

    def copy(self, **overrides):
        fields = dict(gpsfix=self.gpsfix, nmeasrc=self.nmeasrc,
                origin=self.origin)
        fields.update(overrides)
        return self.__class__(**fields)

    def __eq__(self, other):
        if not isinstance(other, APRSCompressionType):
            return NotImplemented
        return self.raw == other.raw

    def __repr__(self): # pragma: no cover
        return (
                '%s(gpsfix=%r, nmeasrc=%r, origin=%r)' \
                        % (
                            self.__class__.__name__,
                            self.gpsfix, self.nmeasrc, self.origin
                        )
        )

    def __str__(self):
        return chr(self.raw + BYTE_VALUE_OFFSET)


class APRSCompressedCourseSpeedRange(object):
    """
    The two cs bytes of a compressed position: course/speed, range or
    altitude.
    """
    LENGTH = 2
    COURSE_SPEED_MAX = 89
    COURSE_SCALE = 4

    # this is in "knots".
    SPEED_RADIX = 1.08
    SPEED_OFFSET = -1

    # these values compute "miles".
    RANGE_HEADER = 90
    RANGE_SCALE = 2
    RANGE_RADIX = 1.08

    # these values compute "feet".
    ALTITUDE_RADIX = 1.002

    NO_DATA = '  '

    @classmethod
    def decode(cls, csvalue, ctype):
        """
        Decode the cs bytes, return a dict of the fields they carry.
        """
        if len(csvalue) != cls.LENGTH:
            raise InvalidLength('Course/Speed value must be 2 bytes')

        if csvalue[0] == ' ':
            # No course, speed, range or altitude
            return {}

        if ctype.is_altitude:
            return dict(
                    altitude=int(round(
                        cls.ALTITUDE_RADIX ** decompress(csvalue)
                    ))
            )

        (c, s) = [ord(b) - BYTE_VALUE_OFFSET for b in csvalue]
        if not (0 <= s <= cls.COURSE_SPEED_MAX):
            raise InvalidField('Invalid compressed speed/range %r' % csvalue)

        if c == cls.RANGE_HEADER:
            # This is a range value
            return dict(rng=cls.RANGE_SCALE * (cls.RANGE_RADIX ** s))
        elif 0 <= c <= cls.COURSE_SPEED_MAX:
            return dict(
                    course=cls.COURSE_SCALE * c,
                    speed=int(round(
                        (cls.SPEED_RADIX ** s) + cls.SPEED_OFFSET
                    ))
            )
        else:
            raise InvalidField('Unknown Course/Speed/Range field: %r' \
                    % csvalue)

    @classmethod
    def encode_course_speed(cls, course, speed):
        c = min((course % 360) // cls.COURSE_SCALE, cls.COURSE_SPEED_MAX)
        s = min(int(round(math.log(speed + 1, cls.SPEED_RADIX))),
                cls.COURSE_SPEED_MAX)
        return chr(c + BYTE_VALUE_OFFSET) + chr(s + BYTE_VALUE_OFFSET)

    @classmethod
    def encode_range(cls, rng):
        if rng < cls.RANGE_SCALE:
            s = 0
        else:
            s = min(int(round(math.log(rng / cls.RANGE_SCALE,
                cls.RANGE_RADIX))), cls.COURSE_SPEED_MAX)
        return chr(cls.RANGE_HEADER + BYTE_VALUE_OFFSET) \
                + chr(s + BYTE_VALUE_OFFSET)

    @classmethod
    def encode_altitude(cls, altitude):
        if altitude < 1:
            raise InvalidField('Altitude %r too low to compress' % altitude)
        exponent = int(round(math.log(altitude, cls.ALTITUDE_RADIX)))
        if exponent >= (BYTE_VALUE_RADIX ** cls.LENGTH):
            raise InvalidField('Altitude %r too high to compress' % altitude)
        return compress(exponent, cls.LENGTH)


class APRSLocation(object):
    """
    Location part shared by position, object and item reports: the
    co-ordinates, the symbol, an optional data extension and the comment.
    """
    SPEED_UNITS = 'knot'
    RANGE_UNITS = 'mile'
    ALTITUDE_UNITS = 'foot'

    COMPRESSED_LENGTH = 13
    UNCOMPRESSED_LENGTH = APRSLatitude.LENGTH + APRSLongitude.LENGTH + 2
    CST_FILL = ' sT'

    def _init_location(self, latitude, longitude, symbol_table=PRI_SYMBOL,
            symbol_code='/', ambiguity=APRSPositionAmbiguity.NONE,
            course=None, speed=None, rng=None, altitude=None, phg=None,
            dfs=None, dao=None, comment=None, compressed=False,
            compression_type=None):
        self.latitude = APRSLatitude.check(latitude)
        self.longitude = APRSLongitude.check(longitude)
        self.symbol = APRSSymbol(symbol_table, symbol_code)
        self.ambiguity = _ambiguity(ambiguity)
        self.compressed = bool(compressed)
        self.comment = str(comment or '')

        if (course is None) != (speed is None):
            raise InvalidField('Course and speed must both be specified')

        if course is not None:
            cse = APRSCourseSpeed(course, speed)
            (self.course, self.speed) = (cse.course, cse.speed)
        else:
            (self.course, self.speed) = (None, None)

        if rng is not None:
            rng = convertvalue('rng', rng, self.RANGE_UNITS)
            if rng < 0:
                raise InvalidField('Range must not be negative')
        self.rng = rng

        if altitude is not None:
            altitude = int(round(convertvalue('altitude', altitude,
                self.ALTITUDE_UNITS)))
        self.altitude = altitude

        if (phg is not None) and not isinstance(phg, APRSPHG):
            phg = APRSPHG(*phg)
        self.phg = phg

        if (dfs is not None) and not isinstance(dfs, APRSDFS):
            dfs = APRSDFS(*dfs)
        self.dfs = dfs

        if (dao is not None) and not isinstance(dao, APRSDAO):
            dao = APRSDAO(*dao)
        self.dao = dao

        extensions = [e for e in (self.course, self.rng, self.phg, self.dfs)
                if e is not None]
        if len(extensions) > 1:
            raise InvalidField(
                    'Only one of course/speed, range, PHG or DFS '
                    'may be given'
            )

        if self.compressed:
            if self.ambiguity:
                raise InvalidField('Compressed positions are not ambiguous')
            if (self.phg is not None) or (self.dfs is not None):
                raise InvalidField(
                        'PHG and DFS cannot be sent in a compressed position'
                )
            if compression_type is None:
                compression_type = APRSCompressionType()
                self._cst_fill = self.CST_FILL
            else:
                # An empty cs keeps the type byte it came with
                self._cst_fill = self.CST_FILL[0:2] + str(compression_type)
            self.compression_type = compression_type
        else:
            self.compression_type = None

    @property
    def symbol_table(self):
        return self.symbol.tableident

    @property
    def symbol_code(self):
        return self.symbol.symbol

    @property
    def speed_q(self):
        """
        Speed as a Pint quantity.
        """
        return quantity(self.speed, self.SPEED_UNITS)

    @property
    def rng_q(self):
        """
        Range as a Pint quantity.
        """
        return quantity(self.rng, self.RANGE_UNITS)

    @property
    def altitude_q(self):
        """
        Altitude as a Pint quantity.
        """
        return quantity(self.altitude, self.ALTITUDE_UNITS)

    @property
    def precise_coordinates(self):
        """
        Latitude and longitude refined by the !DAO! token, if any.
        """
        if self.dao is None:
            return (self.latitude, self.longitude)
        return self.dao.apply(self.latitude, self.longitude)

    def _location_kwargs(self):
        """
        Return the constructor arguments describing the location, for
        building a related record.
        """
        return dict(
                latitude=self.latitude, longitude=self.longitude,
                symbol_table=self.symbol_table, symbol_code=self.symbol_code,
                ambiguity=self.ambiguity, course=self.course,
                speed=self.speed, rng=self.rng, altitude=self.altitude,
                phg=self.phg, dfs=self.dfs, dao=self.dao,
                comment=self.comment, compressed=self.compressed,
                compression_type=self.compression_type
        )

    def _encode_cst(self):
        """
        Return the cs and t bytes of a compressed position, and whether the
        altitude was encoded in them.
        """
        ctype = self.compression_type
        if self.course is not None:
            if ctype.is_altitude:
                ctype = ctype.copy(nmeasrc=APRSCompressionTypeNMEASrc.RMC)
            return (
                    APRSCompressedCourseSpeedRange.encode_course_speed(
                        self.course, self.speed) + str(ctype),
                    False
            )
        elif self.rng is not None:
            if ctype.is_altitude:
                ctype = ctype.copy(nmeasrc=APRSCompressionTypeNMEASrc.OTHER)
            return (
                    APRSCompressedCourseSpeedRange.encode_range(self.rng) \
                            + str(ctype),
                    False
            )
        elif (self.altitude is not None) and (self.altitude >= 1) \
                and (APRSAltitude.find(self.comment) is None):
            # Altitudes below 1 foot go in the comment instead
            ctype = ctype.copy(nmeasrc=APRSCompressionTypeNMEASrc.GGA)
            return (
                    APRSCompressedCourseSpeedRange.encode_altitude(
                        self.altitude) + str(ctype),
                    True
            )
        else:
            return (self._cst_fill, False)

    def _encode_comment(self, altitude_sent=False):
        comment = self.comment
        if (self.altitude is not None) and not altitude_sent:
            found = APRSAltitude.find(comment)
            if found is None:
                comment = APRSAltitude.encode(self.altitude) + comment
            elif found != self.altitude:
                raise InvalidField(
                        'Altitude %d disagrees with comment %r' \
                        % (self.altitude, comment)
                )

        if (self.dao is not None) and (APRSDAO.find(comment) is None):
            comment += str(self.dao)

        return comment

    def _encode_location(self):
        if self.compressed:
            (cst, altitude_sent) = self._encode_cst()
            return ''.join([
                self.symbol_table,
                APRSCompressedLatitude.encode(self.latitude),
                APRSCompressedLongitude.encode(self.longitude),
                self.symbol_code,
                cst,
                self._encode_comment(altitude_sent)
            ])

        if self.course is not None:
            extension = str(APRSCourseSpeed(self.course, self.speed))
        elif self.rng is not None:
            extension = str(APRSRange(self.rng))
        elif self.phg is not None:
            extension = str(self.phg)
        elif self.dfs is not None:
            extension = str(self.dfs)
        else:
            extension = ''

        return ''.join([
            APRSLatitude.encode(self.latitude, self.ambiguity),
            self.symbol_table,
            APRSLongitude.encode(self.longitude, self.ambiguity),
            self.symbol_code,
            extension,
            self._encode_comment()
        ])

    @classmethod
    def _decode_location(cls, text, extensions=True):
        """
        Decode the location part of an information field, return the
        constructor arguments.  If extensions is False, anything after the
        symbol code is left in the comment.
        """
        if is_uncompressed(text):
            kwargs = cls._decode_uncompressed(text, extensions)
        elif len(text) >= cls.COMPRESSED_LENGTH:
            kwargs = cls._decode_compressed(text)
        else:
            raise InvalidLength('Position too short: %r' % text)

        comment = kwargs['comment']
        if kwargs.get('altitude') is None:
            kwargs['altitude'] = APRSAltitude.find(comment)
        kwargs['dao'] = APRSDAO.find(comment)
        return kwargs

    @classmethod
    def _decode_uncompressed(cls, text, extensions=True):
        if len(text) < cls.UNCOMPRESSED_LENGTH:
            raise InvalidLength('Position too short: %r' % text)

        (latitude, lat_ambiguity) = APRSLatitude.decode(
                text[0:APRSLatitude.LENGTH])
        table = text[APRSLatitude.LENGTH]
        lon_start = APRSLatitude.LENGTH + 1
        (longitude, lon_ambiguity) = APRSLongitude.decode(
                text[lon_start:lon_start + APRSLongitude.LENGTH])
        code = text[cls.UNCOMPRESSED_LENGTH - 1]
        rest = text[cls.UNCOMPRESSED_LENGTH:]

        kwargs = dict(
                latitude=latitude, longitude=longitude,
                symbol_table=table, symbol_code=code,
                ambiguity=max(lat_ambiguity, lon_ambiguity),
                compressed=False
        )

        if extensions:
            (extension, rest) = decode_extension(rest)
            if isinstance(extension, APRSCourseSpeed):
                kwargs.update(course=extension.course,
                        speed=extension.speed)
            elif isinstance(extension, APRSRange):
                kwargs['rng'] = extension.rng
            elif isinstance(extension, APRSPHG):
                kwargs['phg'] = extension
            elif isinstance(extension, APRSDFS):
                kwargs['dfs'] = extension

        kwargs['comment'] = rest
        return kwargs

    @classmethod
    def _decode_compressed(cls, text):
        if len(text) < cls.COMPRESSED_LENGTH:
            raise InvalidLength('Compressed position too short: %r' % text)

        table = text[0]
        latitude = APRSCompressedLatitude.decode(text[1:5])
        longitude = APRSCompressedLongitude.decode(text[5:9])
        code = text[9]
        cs = text[10:12]

        kwargs = dict(
                latitude=latitude, longitude=longitude,
                symbol_table=table, symbol_code=code,
                compressed=True, comment=text[cls.COMPRESSED_LENGTH:]
        )

        ctype = APRSCompressionType.decode(text[12])
        kwargs['compression_type'] = ctype
        if cs[0] != ' ':
            kwargs.update(APRSCompressedCourseSpeedRange.decode(cs, ctype))

        return kwargs


def is_uncompressed(text):
    """
    Tell whether the location at the start of text is an uncompressed one:
    it must be long enough and have decimal points in the expected places.
    """
    return (len(text) >= APRSLocation.UNCOMPRESSED_LENGTH) \
            and (text[4] == '.') and (text[14] == '.')


def is_compressed_position(info):
    """
    Tell whether the information field is a valid compressed position
    report.
    """
    info = totext(info)
    try:
        datatype = datatype_of(info)
    except ValueError:
        return False

    if datatype not in POSITION_TYPES:
        return False

    body = info[8:] if datatype.has_timestamp else info[1:]
    if is_uncompressed(body):
        return False

    try:
        APRSLocation._decode_compressed(body)
        APRSSymbol(body[0], body[9])
    except ValueError:
        return False
    return True


class APRSPosition(APRSLocation, APRSRecord):
    """
    A position report.  The data type identifier is '!' (or '=' if the
    station is messaging capable) without a timestamp, '/' (or '@') with
    one.

    Specialised reports (weather-bearing positions, DF reports) are
    sub-classes listed in VARIANTS; the decoder hands each decoded position
    to their `from_position` method in turn and uses the first record
    returned.
    """

    VARIANTS = []

    @classmethod
    def variant(cls, subclass):
        """
        Register a specialised position report.
        """
        cls.VARIANTS.append(subclass)
        return subclass

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        datatype = datatype_of(info)
        if datatype not in POSITION_TYPES:
            raise InvalidDti('Not a position report: %r' % info)

        if datatype.has_timestamp:
            timestamp = decode_datetime(info[1:8])
            body = info[8:]
        else:
            timestamp = None
            body = info[1:]

        kwargs = cls._decode_location(body)
        kwargs.update(timestamp=timestamp, dti=str(datatype))
        log.debug('Position fields: %r', kwargs)

        for variant in cls.VARIANTS:
            record = variant.from_position(kwargs, log)
            if record is not None:
                return record

        if kwargs['compressed']:
            return APRSCompressedPosition(**kwargs)
        elif timestamp is not None:
            return APRSTimestampedPosition(**kwargs)
        return APRSPosition(**kwargs)

    def __init__(self, latitude, longitude, symbol_table=PRI_SYMBOL,
            symbol_code='/', comment=None, dti=None, timestamp=None,
            **kwargs):
        timestamp = coerce_timestamp(timestamp)
        if dti is None:
            dti = '/' if timestamp is not None else '!'
        elif isinstance(dti, APRSDataType):
            dti = str(dti)

        try:
            datatype = APRSDataType(ord(dti))
        except (TypeError, ValueError):
            datatype = None

        if datatype not in POSITION_TYPES:
            raise InvalidField('Invalid position DTI %r' % (dti,))

        if datatype.has_timestamp != (timestamp is not None):
            raise InvalidField(
                    'DTI %r %s a timestamp' % (
                        dti,
                        'requires' if datatype.has_timestamp \
                                else 'does not permit'
                    )
            )

        self.dti = dti
        self.timestamp = timestamp
        self._init_location(latitude, longitude, symbol_table, symbol_code,
                comment=comment, **kwargs)

    @property
    def messaging(self):
        """
        True if the sending station is messaging capable.
        """
        return self.datatype.messaging

    @property
    def datatype(self):
        return APRSDataType(ord(self.dti))

    def _position_kwargs(self):
        kwargs = self._location_kwargs()
        kwargs.update(dti=self.dti, timestamp=self.timestamp)
        return kwargs

    def _encode(self):
        return ''.join([
            self.dti,
            str(self.timestamp) if self.timestamp is not None else '',
            self._encode_location()
        ])


class APRSTimestampedPosition(APRSPosition):
    """
    A position report with a timestamp ('/' or '@').
    """

    def __init__(self, latitude, longitude, timestamp, symbol_table=PRI_SYMBOL,
            symbol_code='/', comment=None, dti='/', **kwargs):
        if timestamp is None:
            raise InvalidField('Timestamped position requires a timestamp')
        super(APRSTimestampedPosition, self).__init__(
                latitude=latitude, longitude=longitude,
                symbol_table=symbol_table, symbol_code=symbol_code,
                comment=comment, dti=dti, timestamp=timestamp, **kwargs
        )


class APRSCompressedPosition(APRSPosition):
    """
    A position report in base-91 compressed form, with or without a
    timestamp.
    """

    def __init__(self, latitude, longitude, symbol_table=PRI_SYMBOL,
            symbol_code='/', comment=None, dti=None, timestamp=None,
            compressed=True, **kwargs):
        if not compressed:
            raise InvalidField('Compressed position must be compressed')
        super(APRSCompressedPosition, self).__init__(
                latitude=latitude, longitude=longitude,
                symbol_table=symbol_table, symbol_code=symbol_code,
                comment=comment, dti=dti, timestamp=timestamp,
                compressed=True, **kwargs
        )


for _datatype in POSITION_TYPES:
    APRSRecord.register(_datatype)(APRSPosition)
