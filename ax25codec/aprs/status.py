#!/usr/bin/env python3

"""
APRS status reports and station capabilities.

    >DDHHMMzstatus text
    <IGATE,MSG_CNT=1,LOC_CNT=3
"""

import re

from ..errors import InvalidDti, InvalidField, InvalidLength
from .datatype import APRSDataType
from .datetime import coerce as coerce_timestamp, decode as decode_datetime, \
        DHMUTCTimestamp
from .record import APRSRecord, datatype_of, getlog, totext


@APRSRecord.register(APRSDataType.STATUS)
class APRSStatus(APRSRecord):
    """
    A status report, optionally time-stamped (zulu day/hour/minute only).
    """
    TEXT_LENGTH = 62
    TEXT_LENGTH_TS = 55
    TIMESTAMP_RE = re.compile(r'^[0-9]{6}z')

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if datatype_of(info) != APRSDataType.STATUS:
            raise InvalidDti('Not a status report: %r' % info)

        body = info[1:]
        timestamp = None
        if cls.TIMESTAMP_RE.match(body):
            timestamp = decode_datetime(body)
            body = body[timestamp.TS_LENGTH:]
            log.debug('Status timestamp %s', timestamp)

        return cls(text=body, timestamp=timestamp)

    def __init__(self, text='', timestamp=None):
        timestamp = coerce_timestamp(timestamp)
        if (timestamp is not None) \
                and not isinstance(timestamp, DHMUTCTimestamp):
            raise InvalidField('Status timestamps must be DHM zulu')
        self.timestamp = timestamp

        text = str(text)
        limit = self.TEXT_LENGTH if timestamp is None \
                else self.TEXT_LENGTH_TS
        if len(text) > limit:
            raise InvalidLength('Status text longer than %d characters' \
                    % limit)
        for char in '|~':
            if char in text:
                raise InvalidField(
                        'Character %r not permitted in status text' % char
                )
        self.text = text

    def _encode(self):
        return '>%s%s' % (
                self.timestamp if self.timestamp is not None else '',
                self.text
        )


@APRSRecord.register(APRSDataType.STATIONCAP)
class APRSStationCapabilities(APRSRecord):
    """
    Station capabilities: free text, by convention a comma separated list
    of tokens or token=value pairs.
    """
    TEXT_LENGTH = 99

    @classmethod
    def decode(cls, info, destination=None, log=None):
        info = totext(info)
        if datatype_of(info) != APRSDataType.STATIONCAP:
            raise InvalidDti('Not a capabilities report: %r' % info)
        return cls(info[1:])

    def __init__(self, text):
        text = str(text)
        if len(text) > self.TEXT_LENGTH:
            raise InvalidLength('Capabilities longer than %d characters' \
                    % self.TEXT_LENGTH)
        self.text = text

    @property
    def capabilities(self):
        """
        The capabilities as a dict; tokens without a value map to None.
        """
        capabilities = {}
        for token in self.text.split(','):
            token = token.strip()
            if not token:
                continue
            if '=' in token:
                (name, value) = token.split('=', 1)
                capabilities[name.strip()] = value.strip()
            else:
                capabilities[token] = None
        return capabilities

    def _encode(self):
        return '<%s' % self.text
