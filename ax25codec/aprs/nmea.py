#!/usr/bin/env python3

"""
Raw GPS data: NMEA sentences sent as-is after the '$' DTI.  The same DTI
carries Ultimeter weather reports ('$ULTW'), so decoding picks between the
two.
"""

import re
from functools import reduce

from ..errors import InvalidChecksum, InvalidDti, InvalidField, InvalidLength
from .datatype import APRSDataType
from .record import APRSRecord, datatype_of, getlog, totext
from .weather import APRSUltimeterWeather


TALKER_RE = re.compile(r'^G[PNLAB][A-Z]{3}(,|\*|$)')


def checksum(sentence):
    """
    NMEA checksum: the XOR of all characters between '$' and '*'.
    """
    return reduce(lambda a, c: a ^ ord(c), sentence, 0)


class APRSRawGPS(APRSRecord):
    """
    A raw NMEA sentence, e.g. $GPRMC,... with an optional *HH checksum.
    """

    @classmethod
    def decode(cls, info, destination=None, log=None):
        info = totext(info)
        if datatype_of(info) != APRSDataType.RAW_GPS_ULT2K:
            raise InvalidDti('Not raw GPS data: %r' % info)
        return cls(info[1:].rstrip('\r\n'))

    def __init__(self, sentence, add_checksum=False):
        sentence = str(sentence)
        if sentence.startswith('$'):
            sentence = sentence[1:]

        if len(sentence) < 3:
            raise InvalidLength('NMEA sentence too short: %r' % sentence)

        if not TALKER_RE.match(sentence):
            raise InvalidField('Not a GPS NMEA sentence: %r' % sentence)

        (body, star, given) = sentence.partition('*')
        if star:
            if (len(given) != 2) \
                    or not all(c in '0123456789ABCDEFabcdef' for c in given):
                raise InvalidField('Malformed NMEA checksum %r' % given)
            if int(given, 16) != checksum(body):
                raise InvalidChecksum(
                        'NMEA checksum mismatch: got %s, expected %02X' \
                        % (given, checksum(body))
                )
        elif add_checksum:
            sentence = '%s*%02X' % (body, checksum(body))

        self.sentence = sentence

    @property
    def body(self):
        """
        The sentence without its checksum.
        """
        return self.sentence.partition('*')[0]

    @property
    def sentence_type(self):
        return self.fields[0]

    @property
    def fields(self):
        return self.body.split(',')

    @property
    def checksum(self):
        (body, star, given) = self.sentence.partition('*')
        if not star:
            return None
        return int(given, 16)

    def _encode(self):
        return '$%s' % self.sentence


@APRSRecord.register(APRSDataType.RAW_GPS_ULT2K)
class APRSRawData(object):
    """
    Decoder for the '$' data type: Ultimeter weather or NMEA.
    """

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if info.startswith(APRSUltimeterWeather.MARKER):
            log.debug('Raw data is an Ultimeter report')
            return APRSUltimeterWeather.decode(info, log=log)
        return APRSRawGPS.decode(info, log=log)
