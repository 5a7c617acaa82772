#!/usr/bin/env python3

"""
APRS framing: APRS information fields travel in AX.25 UI frames with no
layer 3 protocol.
"""

import logging

from ..frame import AX25UnnumberedInformationFrame
from .record import APRSRecord


class APRSFrame(AX25UnnumberedInformationFrame):
    """
    This is a helper sub-class for encoding and decoding APRS records into
    AX.25 frames.
    """

    @classmethod
    def decode(cls, uiframe, log=None):
        """
        Decode the given UI frame (AX25UnnumberedInformationFrame) to an
        APRSFrame.  Frames that are not APRS, or cannot be decoded, are
        returned as-is.
        """
        if log is None:
            log = logging.getLogger(cls.__module__)

        # Do not decode if not the APRS PID value
        if uiframe.pid != cls.PID_NO_L3:
            # Clearly not an APRS message
            log.debug('Frame has wrong PID for APRS')
            return uiframe

        if len(uiframe.payload) == 0:
            log.debug('Frame has no payload data')
            return uiframe

        try:
            record = APRSRecord.dispatch(
                    uiframe.payload,
                    destination=uiframe.header.destination,
                    log=log
            )
        except ValueError:
            # Not decodable, leave as-is
            log.debug('Failed to decode as APRS', exc_info=1)
            return uiframe

        return cls(
                destination=uiframe.header.destination,
                source=uiframe.header.source,
                record=record,
                repeaters=uiframe.header.repeaters,
                pf=uiframe.pf, cr=uiframe.header.cr
        )

    def __init__(self, source, record, destination=None, repeaters=None,
            pf=False, cr=False):
        if destination is None:
            # Mic-E reports dictate their destination
            destination = getattr(record, 'destination', 'APRS')

        super(APRSFrame, self).__init__(
                destination=destination,
                source=source,
                pid=self.PID_NO_L3, # No layer 3
                payload=record.encode(),
                repeaters=repeaters,
                pf=pf, cr=cr)
        self._record = record

    @property
    def record(self):
        return self._record
