#!/usr/bin/env python3

"""
APRS library
"""

from .record import APRSRecord
from .datatype import APRSDataType

# Record types register themselves with APRSRecord on import.
from .position import APRSPosition, APRSTimestampedPosition, \
        APRSCompressedPosition
from .message import APRSMessage, APRSMessageAck, APRSMessageRej, \
        APRSBulletin
from .object import APRSObject, APRSItem
from .mice import APRSMicE, APRSMicEMessageCode
from .weather import APRSWeatherReport, APRSPositionWeather, \
        APRSPeetBrosWeather, APRSPeetBrosWeather2, APRSUltimeterWeather
from .df import APRSDFReport, APRSAgreloDF
from .telemetry import APRSTelemetry
from .status import APRSStatus, APRSStationCapabilities
from .query import APRSQuery
from .grid import APRSGridSquare
from .nmea import APRSRawGPS
from .raw import APRSTestPacket, APRSUserDefined, APRSThirdParty
from .station import APRSStation, APRSQueryResponder
from .frame import APRSFrame

assert APRSTimestampedPosition
assert APRSCompressedPosition
assert APRSMessageAck
assert APRSMessageRej
assert APRSBulletin
assert APRSObject
assert APRSItem
assert APRSMicE
assert APRSMicEMessageCode
assert APRSWeatherReport
assert APRSPositionWeather
assert APRSPeetBrosWeather
assert APRSPeetBrosWeather2
assert APRSUltimeterWeather
assert APRSDFReport
assert APRSAgreloDF
assert APRSTelemetry
assert APRSStatus
assert APRSStationCapabilities
assert APRSQuery
assert APRSGridSquare
assert APRSRawGPS
assert APRSTestPacket
assert APRSUserDefined
assert APRSThirdParty
assert APRSStation
assert APRSQueryResponder
assert APRSFrame
assert APRSDataType
assert APRSPosition
assert APRSMessage


def decode(info, destination=None, log=None):
    """
    Decode an APRS information field to a record.  Mic-E reports need the
    AX.25 destination callsign.
    """
    return APRSRecord.dispatch(info, destination=destination, log=log)


def encode(record, capacity=None):
    """
    Encode a record to the information field bytes, raising BufferTooSmall
    if it does not fit within capacity.
    """
    return record.encode(capacity=capacity)
