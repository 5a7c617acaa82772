#!/usr/bin/env python3

"""
APRS object and item reports.

    ;NNNNNNNNN*DDHHMMzLOCATION      object (9 character name, live or killed)
    )NAME!LOCATION                  item (3 to 9 character name)

The location takes the same forms as in a position report, uncompressed or
compressed.
"""

from ..errors import InvalidDti, InvalidField, InvalidLength
from .datatype import APRSDataType
from .datetime import coerce as coerce_timestamp, decode as decode_datetime
from .position import APRSLocation
from .record import APRSRecord, datatype_of, getlog, totext
from .symbol import is_printable, PRI_SYMBOL


def _check_name(name, minimum, maximum, forbidden=''):
    name = str(name)
    if not (minimum <= len(name) <= maximum):
        raise InvalidLength(
                'Name %r must be %d-%d characters' % (name, minimum, maximum)
        )
    for char in name:
        if (char != ' ') and not is_printable(char):
            raise InvalidField('Invalid character %r in name %r' \
                    % (char, name))
        if char in forbidden:
            raise InvalidField('Character %r not permitted in name %r' \
                    % (char, name))
    return name


@APRSRecord.register(APRSDataType.OBJECT)
class APRSObject(APRSLocation, APRSRecord):
    """
    An object report: a named thing at a location, reported on behalf of
    something else.
    """
    NAME_LENGTH = 9
    LIVE = '*'
    KILLED = '_'

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if datatype_of(info) != APRSDataType.OBJECT:
            raise InvalidDti('Not an object: %r' % info)

        header = 1 + cls.NAME_LENGTH + 1 + 7
        if len(info) < (header + cls.COMPRESSED_LENGTH):
            raise InvalidLength('Object too short: %r' % info)

        name = info[1:cls.NAME_LENGTH + 1]
        state = info[cls.NAME_LENGTH + 1]
        if state not in (cls.LIVE, cls.KILLED):
            raise InvalidField('Invalid object state %r' % state)

        timestamp = decode_datetime(info[cls.NAME_LENGTH + 2:header])
        kwargs = cls._decode_location(info[header:])
        log.debug('Object %r fields: %r', name, kwargs)

        return cls(name=name, timestamp=timestamp,
                killed=(state == cls.KILLED), **kwargs)

    def __init__(self, name, latitude, longitude, timestamp,
            symbol_table=PRI_SYMBOL, symbol_code='/', killed=False,
            comment=None, **kwargs):
        self.name = _check_name(str(name).rstrip(' '), 1, self.NAME_LENGTH)

        timestamp = coerce_timestamp(timestamp)
        if timestamp is None:
            raise InvalidField('Objects require a timestamp')
        self.timestamp = timestamp
        self.killed = bool(killed)

        self._init_location(latitude, longitude, symbol_table, symbol_code,
                comment=comment, **kwargs)

    @property
    def live(self):
        return not self.killed

    def _encode(self):
        return ';%-9s%s%s%s' % (
                self.name,
                self.KILLED if self.killed else self.LIVE,
                self.timestamp,
                self._encode_location()
        )


@APRSRecord.register(APRSDataType.ITEM)
class APRSItem(APRSLocation, APRSRecord):
    """
    An item report: like an object, but with no timestamp and a name of up
    to 9 characters.
    """
    NAME_MIN = 1
    NAME_MAX = 9
    LIVE = '!'
    KILLED = '_'

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if datatype_of(info) != APRSDataType.ITEM:
            raise InvalidDti('Not an item: %r' % info)

        # Name ends at the first state marker after the minimum length
        end = None
        for pos in range(cls.NAME_MIN + 1, min(cls.NAME_MAX + 2, len(info))):
            if info[pos] in (cls.LIVE, cls.KILLED):
                end = pos
                break

        if end is None:
            raise InvalidField('Item name not terminated: %r' % info)

        name = info[1:end]
        state = info[end]
        kwargs = cls._decode_location(info[end + 1:])
        log.debug('Item %r fields: %r', name, kwargs)

        return cls(name=name, killed=(state == cls.KILLED), **kwargs)

    def __init__(self, name, latitude, longitude, symbol_table=PRI_SYMBOL,
            symbol_code='/', killed=False, comment=None, **kwargs):
        self.name = _check_name(name, self.NAME_MIN, self.NAME_MAX,
                forbidden=(self.LIVE + self.KILLED))
        self.killed = bool(killed)

        self._init_location(latitude, longitude, symbol_table, symbol_code,
                comment=comment, **kwargs)

    @property
    def live(self):
        return not self.killed

    def _encode(self):
        return ')%s%s%s' % (
                self.name,
                self.KILLED if self.killed else self.LIVE,
                self._encode_location()
        )
