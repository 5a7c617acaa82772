#!/usr/bin/env python3

"""
APRS information field records.

Every APRS information field starts with a Data Type Identifier (DTI) byte
which selects its format.  Each format is handled by a sub-class of
APRSRecord, which knows how to decode the information field and how to
encode itself back again.  Sub-classes register themselves against the DTIs
they handle in DATA_TYPE_HANDLERS.
"""

import logging

from ..errors import InvalidDti, InvalidLength, Unsupported, check_capacity
from .datatype import APRSDataType

# Information fields are handled as text; bytes map 1:1 onto code points so
# that Mic-E fields (which use bytes above 0x7f) survive.
ENCODING = 'latin-1'


def totext(info):
    """
    Return the information field given as text.
    """
    if isinstance(info, (bytes, bytearray)):
        return bytes(info).decode(ENCODING)
    return str(info)


def getlog(log, name):
    if log is None:
        log = logging.getLogger(name)
    return log


def datatype_of(info):
    """
    Identify the data type of an information field.
    """
    if not info:
        raise InvalidLength('Empty information field')

    try:
        return APRSDataType(ord(info[0]))
    except ValueError:
        raise InvalidDti('Not a recognised data type: %r' % info[0])


class APRSRecord(object):
    """
    Base class for all APRS information field records.
    """

    DATA_TYPE_HANDLERS = {}

    @classmethod
    def register(cls, *datatypes):
        """
        Register a handler for the given data types.  The handler must
        provide a decode(info, destination=None, log=None) class method.
        """
        def _register(handler):
            for datatype in datatypes:
                assert datatype not in cls.DATA_TYPE_HANDLERS, \
                        'Duplicate registration of %s' % datatype
                cls.DATA_TYPE_HANDLERS[datatype] = handler
            return handler
        return _register

    @classmethod
    def dispatch(cls, info, destination=None, log=None):
        """
        Decode an information field into the appropriate record.
        `destination` is the AX.25 destination callsign, needed to decode
        Mic-E reports.
        """
        log = getlog(log, cls.__module__)
        info = totext(info)
        datatype = datatype_of(info)

        try:
            handler = cls.DATA_TYPE_HANDLERS[datatype]
        except KeyError:
            raise Unsupported('Data type %s is not supported' % datatype)

        log.debug('Decoding %s with %s', datatype, handler.__name__)
        record = handler.decode(info, destination=destination, log=log)
        log.debug('Decoded %r', record)
        return record

    @property
    def datatype(self):
        """
        Return the data type identifier of this record.
        """
        return APRSDataType(ord(str(self)[0]))

    def _encode(self): # pragma: no cover
        """
        Return the information field as text, validating all fields first.
        """
        raise NotImplementedError('To be implemented in sub-class')

    def encode(self, capacity=None):
        """
        Encode the information field as bytes.  If capacity is given and
        the output would be longer, BufferTooSmall is raised.
        """
        return check_capacity(
                self._encode().encode(ENCODING), capacity
        )

    def __bytes__(self):
        return self.encode()

    def __str__(self):
        return self._encode()

    def __eq__(self, other):
        if not isinstance(other, APRSRecord):
            return NotImplemented
        return (type(self) is type(other)) and (str(self) == str(other))

    def __hash__(self):
        return hash((type(self), str(self)))

    def __repr__(self): # pragma: no cover
        return '%s(%r)' % (self.__class__.__name__, str(self))
