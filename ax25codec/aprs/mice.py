#!/usr/bin/env python3

"""
Mic-E position reports.

Mic-E splits a position between the AX.25 destination address and the
information field.  The six destination characters carry the latitude
digits, three message bits, the N/S and W/E flags and the longitude offset:

    position    0-2             3           4               5
    meaning     message bit     N/S         longitude +100  W/E
    bit clear   '0'-'9'         'A'-'J'     '0'-'9'         'A'-'J'
    bit set     'P'-'Y'         'P'-'Y'     'P'-'Y'         'P'-'Y'

The information field holds the DTI, three longitude bytes, three
speed/course bytes, the symbol code and the symbol table, then an optional
comment.
"""

from enum import Enum

from ..errors import InvalidCoord, InvalidDti, InvalidField, InvalidLength
from ..unit import convertvalue, quantity
from .compression import decompress
from .datatype import APRSDataType
from .position import APRSLatitude, APRSLongitude
from .record import APRSRecord, datatype_of, getlog, totext
from .symbol import APRSSymbol, PRI_SYMBOL


DESTINATION_LENGTH = 6
INFO_LENGTH = 9
BYTE_OFFSET = 28

# Altitude in the comment: three base-91 digits, metres above -10km.
ALTITUDE_MARKER = '}'
ALTITUDE_OFFSET = 10000
ALTITUDE_TYPE_BYTES = '>]`\''


class APRSMicEMessageCode(Enum):
    """
    The Mic-E message codes.  The standard (M) and custom (C) sets share
    the same bit patterns; the DTI tells them apart.
    """
    M0 = 'M0'
    M1 = 'M1'
    M2 = 'M2'
    M3 = 'M3'
    M4 = 'M4'
    M5 = 'M5'
    M6 = 'M6'
    C0 = 'C0'
    C1 = 'C1'
    C2 = 'C2'
    C3 = 'C3'
    C4 = 'C4'
    C5 = 'C5'
    C6 = 'C6'
    EMERGENCY = 'Emergency'

    def __str__(self):
        return self.value

    @property
    def bits(self):
        return MESSAGE_BITS[self]

    @property
    def is_custom(self):
        return self.value.startswith('C')

    @classmethod
    def from_bits(cls, bits, custom=False):
        if bits == 0:
            return cls.EMERGENCY
        return cls('%s%d' % ('C' if custom else 'M', 7 - bits))


MESSAGE_BITS = dict(
        [(code, 7 - int(code.value[1]))
            for code in APRSMicEMessageCode
            if code != APRSMicEMessageCode.EMERGENCY]
        + [(APRSMicEMessageCode.EMERGENCY, 0)]
)


def _split(value):
    """
    Split decimal degrees into degrees, minutes and hundredths.
    """
    hundredths = int(round(abs(value) * 6000))
    (degrees, hundredths) = divmod(hundredths, 6000)
    (minutes, hundredths) = divmod(hundredths, 100)
    return (degrees, minutes, hundredths)


def _dest_char(position, digit, bit):
    if bit:
        return chr(ord('P') + digit)
    elif position in (3, 5):
        return chr(ord('A') + digit)
    return chr(ord('0') + digit)


def _dest_digit(position, char):
    """
    Return the digit and bit a destination character carries.
    """
    if 'P' <= char <= 'Y':
        return (ord(char) - ord('P'), 1)
    elif '0' <= char <= '9':
        return (ord(char) - ord('0'), 0)
    elif (position in (3, 5)) and ('A' <= char <= 'J'):
        return (ord(char) - ord('A'), 0)
    raise InvalidField(
            'Invalid Mic-E destination character %r at position %d' \
            % (char, position)
    )


def encode_destination(latitude, longitude, message):
    """
    Return the six character destination callsign carrying the latitude,
    the message bits and the longitude flags.
    """
    latitude = APRSLatitude.check(latitude)
    longitude = APRSLongitude.check(longitude)
    message = APRSMicEMessageCode(message)

    (degrees, minutes, hundredths) = _split(latitude)
    digits = [degrees // 10, degrees % 10, minutes // 10, minutes % 10,
            hundredths // 10, hundredths % 10]

    bits = [
            (message.bits >> 2) & 1,
            (message.bits >> 1) & 1,
            message.bits & 1,
            1 if latitude >= 0 else 0,
            1 if _longitude_offset(abs(longitude)) else 0,
            1 if longitude < 0 else 0,
    ]

    return ''.join([
        _dest_char(pos, digit, bit)
        for (pos, (digit, bit)) in enumerate(zip(digits, bits))
    ])


def decode_destination(destination, custom=False):
    """
    Decode the destination callsign.  Returns the latitude, message code,
    longitude offset flag and west flag.
    """
    if hasattr(destination, 'callsign'):
        destination = destination.callsign
    destination = str(destination).split('-')[0]

    if len(destination) != DESTINATION_LENGTH:
        raise InvalidLength(
                'Mic-E destination must be %d characters: %r' \
                % (DESTINATION_LENGTH, destination)
        )

    (digits, bits) = zip(*[_dest_digit(pos, char)
        for (pos, char) in enumerate(destination)])

    degrees = (digits[0] * 10) + digits[1]
    minutes = (digits[2] * 10) + digits[3] \
            + (((digits[4] * 10) + digits[5]) / 100.0)
    if (degrees > 90) or (minutes >= 60):
        raise InvalidCoord('Invalid Mic-E latitude in %r' % destination)

    latitude = APRSLatitude.check(degrees + (minutes / 60.0))
    if not bits[3]:
        latitude = -latitude

    message = APRSMicEMessageCode.from_bits(
            (bits[0] << 2) | (bits[1] << 1) | bits[2],
            custom=custom
    )
    return (latitude, message, bool(bits[4]), bool(bits[5]))


def _longitude_offset(degrees):
    return (degrees < 10) or (degrees >= 100)


@APRSRecord.register(APRSDataType.MIC_E, APRSDataType.MIC_E_OLD)
class APRSMicE(APRSRecord):
    """
    A Mic-E position report.  `destination` holds the destination callsign
    to send it with; `str()` and `encode()` give the information field.
    """
    SPEED_UNITS = 'knot'
    ALTITUDE_UNITS = 'metre'
    SPEED_MAX = 799

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        datatype = datatype_of(info)
        if datatype not in (APRSDataType.MIC_E, APRSDataType.MIC_E_OLD):
            raise InvalidDti('Not a Mic-E report: %r' % info)

        if destination is None:
            raise InvalidField('Mic-E decoding requires the destination')

        if len(info) < INFO_LENGTH:
            raise InvalidLength('Mic-E information field too short')

        custom = (datatype == APRSDataType.MIC_E_OLD)
        (latitude, message, offset, west) = decode_destination(
                destination, custom=custom)

        (d, m, h, sp, dc, se) = [ord(c) - BYTE_OFFSET for c in info[1:7]]

        if 120 <= d <= 159:
            # Bytes above 0x7f: 60-99 degrees sent with a +60 shift
            d -= 60
        if offset:
            d += 100
        if 180 <= d <= 189:
            d -= 80
        elif 190 <= d <= 199:
            d -= 190

        if m >= 60:
            m -= 60

        if not ((0 <= d <= 179) and (0 <= m <= 59) and (0 <= h <= 99)):
            raise InvalidCoord('Invalid Mic-E longitude in %r' % info)

        longitude = APRSLongitude.check(d + ((m + (h / 100.0)) / 60.0))
        if west:
            longitude = -longitude

        speed = (sp * 10) + (dc // 10)
        course = ((dc % 10) * 100) + se
        if speed >= 800:
            speed -= 800
        if course >= 400:
            course -= 400

        log.debug('Mic-E: lat=%f lon=%f speed=%d course=%d message=%s',
                latitude, longitude, speed, course, message)

        return cls(
                latitude=latitude, longitude=longitude,
                speed=speed, course=course,
                symbol_table=info[8], symbol_code=info[7],
                message=message, comment=info[INFO_LENGTH:]
        )

    def __init__(self, latitude, longitude, speed=0, course=0,
            symbol_table=PRI_SYMBOL, symbol_code='>',
            message=APRSMicEMessageCode.M0, comment=None):
        self.latitude = APRSLatitude.check(latitude)
        self.longitude = APRSLongitude.check(longitude)

        speed = convertvalue('speed', speed, self.SPEED_UNITS,
                required=True)
        speed = int(round(speed))
        if not (0 <= speed <= self.SPEED_MAX):
            raise InvalidField('Mic-E speed %d out of range 0-%d' \
                    % (speed, self.SPEED_MAX))
        self.speed = speed

        course = int(course)
        if not (0 <= course <= 360):
            raise InvalidField('Mic-E course %d out of range 0-360' % course)
        self.course = course

        self.symbol = APRSSymbol(symbol_table, symbol_code)

        try:
            self.message = APRSMicEMessageCode(message)
        except ValueError:
            raise InvalidField('Unknown Mic-E message code %r' % (message,))

        self.comment = str(comment or '')

    @property
    def symbol_table(self):
        return self.symbol.tableident

    @property
    def symbol_code(self):
        return self.symbol.symbol

    @property
    def datatype(self):
        if self.message.is_custom:
            return APRSDataType.MIC_E_OLD
        return APRSDataType.MIC_E

    @property
    def destination(self):
        """
        The destination callsign this report must be sent to.
        """
        return encode_destination(self.latitude, self.longitude,
                self.message)

    @property
    def speed_q(self):
        return quantity(self.speed, self.SPEED_UNITS)

    @property
    def altitude(self):
        """
        Altitude in metres from the comment, if present.
        """
        comment = self.comment
        if comment[0:1] in ALTITUDE_TYPE_BYTES:
            comment = comment[1:]
        if comment[3:4] != ALTITUDE_MARKER:
            return None
        try:
            return decompress(comment[0:3]) - ALTITUDE_OFFSET
        except InvalidField:
            return None

    @property
    def altitude_q(self):
        return quantity(self.altitude, self.ALTITUDE_UNITS)

    def _encode(self):
        (degrees, minutes, hundredths) = _split(self.longitude)

        if degrees > 179:
            raise InvalidCoord('Mic-E cannot encode longitude %r' \
                    % self.longitude)
        elif degrees < 10:
            d = degrees + 118
        elif degrees < 100:
            d = degrees + 28
        elif degrees < 110:
            d = degrees + 8
        else:
            d = degrees - 72

        m = minutes + (88 if minutes < 10 else 28)
        h = hundredths + BYTE_OFFSET

        sp = (self.speed // 10) + BYTE_OFFSET
        dc = ((self.speed % 10) * 10) + (self.course // 100) + BYTE_OFFSET
        se = (self.course % 100) + BYTE_OFFSET

        return ''.join([
            str(self.datatype),
            ''.join([chr(b) for b in (d, m, h, sp, dc, se)]),
            self.symbol_code,
            self.symbol_table,
            self.comment
        ])
