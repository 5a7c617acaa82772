#!/usr/bin/env python3

"""
APRS general queries: ?TYPE?
"""

import re

from ..errors import InvalidDti, InvalidField, InvalidLength
from .datatype import APRSDataType
from .record import APRSRecord, datatype_of, totext


@APRSRecord.register(APRSDataType.QUERY)
class APRSQuery(APRSRecord):
    """
    A general query, e.g. ?APRS? (all stations) or ?IGATE?.
    """
    TYPE_LENGTH = 10
    TYPE_RE = re.compile(r'^[0-9A-Za-z]+$')

    @classmethod
    def decode(cls, info, destination=None, log=None):
        info = totext(info)
        if datatype_of(info) != APRSDataType.QUERY:
            raise InvalidDti('Not a query: %r' % info)

        if (len(info) < 3) or not info.endswith('?'):
            raise InvalidField('Query not terminated: %r' % info)

        return cls(info[1:-1])

    def __init__(self, query_type):
        query_type = str(query_type)
        if not (1 <= len(query_type) <= self.TYPE_LENGTH):
            raise InvalidLength('Query type must be 1-%d characters: %r' \
                    % (self.TYPE_LENGTH, query_type))
        if not self.TYPE_RE.match(query_type):
            raise InvalidField('Invalid query type %r' % query_type)
        self.query_type = query_type

    def _encode(self):
        return '?%s?' % self.query_type
