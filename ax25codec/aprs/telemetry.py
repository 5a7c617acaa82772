#!/usr/bin/env python3

"""
APRS telemetry reports.

    T#sss,aaa,aaa,aaa,aaa,aaa,bbbbbbbb

Sequence number, five analogue values and eight digital bits, most
significant bit first.
"""

import re

from ..errors import InvalidDti, InvalidField, InvalidLength
from .datatype import APRSDataType
from .record import APRSRecord, datatype_of, getlog, totext


@APRSRecord.register(APRSDataType.TELEMETRY)
class APRSTelemetry(APRSRecord):
    ANALOG_CHANNELS = 5
    DIGITAL_BITS = 8
    VALUE_MAX = 999

    RE = re.compile(
            r'^T#([0-9]{1,3}),' \
            r'([0-9]{1,3}),([0-9]{1,3}),([0-9]{1,3}),([0-9]{1,3}),' \
            r'([0-9]{1,3}),([01]{8})(.*)$',
            re.DOTALL
    )

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if datatype_of(info) != APRSDataType.TELEMETRY:
            raise InvalidDti('Not a telemetry report: %r' % info)

        if not info.startswith('T#'):
            raise InvalidField('Telemetry must start with T#: %r' % info)

        match = cls.RE.match(info)
        if not match:
            raise InvalidLength('Malformed telemetry report: %r' % info)

        groups = match.groups()
        log.debug('Telemetry fields: %r', groups)
        return cls(
                sequence=int(groups[0]),
                analog=[int(v) for v in groups[1:6]],
                digital=int(groups[6], 2),
                comment=groups[7]
        )

    def __init__(self, sequence, analog, digital=0, comment=None):
        sequence = int(sequence)
        if not (0 <= sequence <= self.VALUE_MAX):
            raise InvalidField('Sequence number %d out of range' % sequence)
        self.sequence = sequence

        analog = [int(v) for v in analog]
        if len(analog) != self.ANALOG_CHANNELS:
            raise InvalidLength('Telemetry requires %d analogue values' \
                    % self.ANALOG_CHANNELS)
        for value in analog:
            if not (0 <= value <= self.VALUE_MAX):
                raise InvalidField('Analogue value %d out of range' % value)
        self.analog = analog

        digital = int(digital)
        if not (0 <= digital < (1 << self.DIGITAL_BITS)):
            raise InvalidField('Digital value %d out of range' % digital)
        self.digital = digital

        self.comment = str(comment or '')

    @property
    def bits(self):
        """
        The digital bits as booleans, most significant first.
        """
        return [bool(self.digital & (1 << bit))
                for bit in range(self.DIGITAL_BITS - 1, -1, -1)]

    def _encode(self):
        return 'T#%03d,%s,%s%s' % (
                self.sequence,
                ','.join(['%03d' % v for v in self.analog]),
                ''.join(['1' if b else '0' for b in self.bits]),
                self.comment
        )
