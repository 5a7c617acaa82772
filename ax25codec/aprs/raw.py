#!/usr/bin/env python3

"""
APRS wrappers with opaque or nested contents: test packets, user defined
data and third-party traffic.
"""

from ..errors import InvalidDti, InvalidField, InvalidLength
from .datatype import APRSDataType
from .record import APRSRecord, datatype_of, getlog, totext
from .symbol import is_printable


@APRSRecord.register(APRSDataType.TEST_DATA)
class APRSTestPacket(APRSRecord):
    """
    Test data: ',' followed by anything.
    """

    @classmethod
    def decode(cls, info, destination=None, log=None):
        info = totext(info)
        if datatype_of(info) != APRSDataType.TEST_DATA:
            raise InvalidDti('Not a test packet: %r' % info)
        return cls(info[1:])

    def __init__(self, data=''):
        self.data = totext(data)

    def _encode(self):
        return ',%s' % self.data


@APRSRecord.register(APRSDataType.USER_DEFINED)
class APRSUserDefined(APRSRecord):
    """
    User defined data: '{', a user ID byte, a packet type byte, then data
    in a format of the user's choosing.
    """

    @classmethod
    def decode(cls, info, destination=None, log=None):
        info = totext(info)
        if datatype_of(info) != APRSDataType.USER_DEFINED:
            raise InvalidDti('Not user defined data: %r' % info)

        if len(info) < 3:
            raise InvalidLength('User defined data too short: %r' % info)

        return cls(user_id=info[1], packet_type=info[2], data=info[3:])

    def __init__(self, user_id, packet_type, data=''):
        for (name, value) in (('user ID', user_id),
                ('packet type', packet_type)):
            if not is_printable(value):
                raise InvalidField('Invalid %s %r' % (name, value))

        self.user_id = user_id
        self.packet_type = packet_type
        self.data = totext(data)

    def _encode(self):
        return '{%s%s%s' % (self.user_id, self.packet_type, self.data)


@APRSRecord.register(APRSDataType.THIRD_PARTY)
class APRSThirdParty(APRSRecord):
    """
    Third-party traffic: '}', the original header in text form
    (SOURCE>DEST,PATH), ':' and the original information field.
    """
    SEPARATOR = ':'

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if datatype_of(info) != APRSDataType.THIRD_PARTY:
            raise InvalidDti('Not third-party traffic: %r' % info)

        body = info[1:]
        if cls.SEPARATOR not in body:
            raise InvalidField('Third-party header not terminated: %r' \
                    % info)

        (header, payload) = body.split(cls.SEPARATOR, 1)
        log.debug('Third-party traffic from %r', header)
        return cls(header, payload)

    def __init__(self, header, payload):
        header = str(header)
        if (not header) or ('>' not in header) \
                or (self.SEPARATOR in header):
            raise InvalidField('Invalid third-party header %r' % header)

        self.header = header
        self.payload = totext(payload)

    @property
    def source(self):
        return self.header.split('>', 1)[0]

    @property
    def path(self):
        """
        The destination and digipeaters of the original frame.
        """
        return self.header.split('>', 1)[1].split(',')

    def record(self, log=None):
        """
        Decode the nested information field.
        """
        return APRSRecord.dispatch(self.payload, destination=self.path[0],
                log=log)

    def _encode(self):
        return '}%s%s%s' % (self.header, self.SEPARATOR, self.payload)
