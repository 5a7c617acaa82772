#!/usr/bin/env python3

"""
APRS direction finding reports.

A DF report is a position report with the DF symbol, a course/speed
extension and a bearing and "NRQ" (number of hits, range, quality) block:

    @092345z4903.50N/07201.75W\\088/036/270/729

The Agrelo DFJr format carries just a bearing and a quality:

    %270/7
"""

import re

from ..errors import InvalidDti, InvalidField, InvalidLength
from ..unit import quantity
from .datatype import APRSDataType
from .extension import APRSDFS, APRSPHG, decode_extension
from .position import APRSPosition
from .record import APRSRecord, datatype_of, getlog, totext


def _bearing(value):
    value = int(value)
    if not (0 <= value <= 359):
        raise InvalidField('Bearing %d out of range 0-359' % value)
    return value


def _digit(name, value):
    value = int(value)
    if not (0 <= value <= 9):
        raise InvalidField('%s %d out of range 0-9' % (name, value))
    return value


# Beam width in degrees for each quality digit
BEAMWIDTH = (None, 240, 120, 64, 32, 16, 8, 4, 2, 1)


@APRSPosition.variant
class APRSDFReport(APRSPosition):
    """
    A DF report: the position of the DF station, then the bearing to the
    signal with the number of hits, range and quality of the fix.  A DFS or
    PHG extension describing the DF antenna may follow.
    """
    BRG_NRQ_RE = re.compile(r'^/([0-9]{3})/([0-9])([0-9])([0-9])')
    BRG_NRQ_LENGTH = 8

    @classmethod
    def from_position(cls, kwargs, log):
        if kwargs.get('course') is None:
            return None

        match = cls.BRG_NRQ_RE.match(kwargs['comment'])
        if not match:
            return None

        try:
            bearing = _bearing(match.group(1))
        except InvalidField as e:
            log.debug('Not a DF report: %s', e)
            return None

        kwargs = dict(kwargs)
        rest = kwargs.pop('comment')[cls.BRG_NRQ_LENGTH:]
        (extension, rest) = decode_extension(rest, (APRSDFS, APRSPHG))

        log.debug('DF report: bearing %d NRQ %s', bearing,
                match.group(2, 3, 4))
        return cls(
                bearing=bearing,
                hits=int(match.group(2)),
                range_code=int(match.group(3)),
                quality=int(match.group(4)),
                antenna=extension,
                comment=rest,
                **kwargs
        )

    def __init__(self, latitude, longitude, course, speed, bearing,
            hits=0, range_code=0, quality=0, antenna=None, comment=None,
            symbol_table='/', symbol_code='\\', dti=None, timestamp=None,
            **kwargs):
        self.bearing = _bearing(bearing)
        self.hits = _digit('Hits', hits)
        self.range_code = _digit('Range', range_code)
        self.quality = _digit('Quality', quality)

        if (antenna is not None) \
                and not isinstance(antenna, (APRSDFS, APRSPHG)):
            raise InvalidField('DF antenna must be DFS or PHG: %r' \
                    % (antenna,))
        self.antenna = antenna
        self.df_comment = str(comment or '')

        if dti is None:
            dti = '@' if timestamp is not None else '!'

        super(APRSDFReport, self).__init__(
                latitude=latitude, longitude=longitude,
                symbol_table=symbol_table, symbol_code=symbol_code,
                course=course, speed=speed, dti=dti, timestamp=timestamp,
                comment='/%03d/%d%d%d%s%s' % (
                    self.bearing, self.hits, self.range_code, self.quality,
                    str(self.antenna) if self.antenna is not None else '',
                    self.df_comment
                ),
                **kwargs
        )

    @property
    def nrq(self):
        return (self.hits, self.range_code, self.quality)

    @property
    def range_mi(self):
        """
        Range of the fix in miles.
        """
        return 2 ** self.range_code

    @property
    def range_q(self):
        return quantity(self.range_mi, 'mile')

    @property
    def beamwidth(self):
        """
        Accuracy of the bearing in degrees, None if the fix is useless.
        """
        return BEAMWIDTH[self.quality]


@APRSRecord.register(APRSDataType.AGRELO_DFJR)
class APRSAgreloDF(APRSRecord):
    """
    Agrelo DFJr bearing report: %bbb/q
    """
    RE = re.compile(r'^%([0-9]{3})/([0-9])')
    LENGTH = 6

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if datatype_of(info) != APRSDataType.AGRELO_DFJR:
            raise InvalidDti('Not an Agrelo DF report: %r' % info)

        if len(info) < cls.LENGTH:
            raise InvalidLength('Agrelo DF report too short: %r' % info)

        match = cls.RE.match(info)
        if not match:
            raise InvalidField('Malformed Agrelo DF report: %r' % info)

        return cls(
                bearing=int(match.group(1)),
                quality=int(match.group(2)),
                comment=info[cls.LENGTH:]
        )

    def __init__(self, bearing, quality, comment=None):
        self.bearing = _bearing(bearing)
        self.quality = _digit('Quality', quality)
        self.comment = str(comment or '')

    def _encode(self):
        return '%%%03d/%d%s' % (self.bearing, self.quality, self.comment)
