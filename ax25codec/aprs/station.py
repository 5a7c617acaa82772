#!/usr/bin/env python3

"""
Local station description and directed query responder.

A directed query is a message addressed to this station whose text is
?TYPE?, e.g. ?APRSP? asks for our position.  The responder works out the
information field to send back.
"""

import datetime
import logging
import math

from ..errors import InvalidField, check_capacity
from ..unit import quantity
from .datetime import coerce as coerce_timestamp, DHMUTCTimestamp
from .message import APRSMessage
from .position import APRSLatitude, APRSLongitude, APRSPosition, \
        APRSTimestampedPosition
from .record import ENCODING
from .status import APRSStatus
from .symbol import APRSSymbol, PRI_SYMBOL
from .weather import APRSWeatherReport


EARTH_RADIUS_KM = 6371.0

# Sent in answer to ?WX? when the station has no weather data
PLACEHOLDER_WEATHER = '_000000zc090s005t025'


def haversine_km(lat1, lon1, lat2, lon2):
    """
    Great circle distance in kilometres.
    """
    (lat1, lon1, lat2, lon2) = [math.radians(v)
            for v in (lat1, lon1, lat2, lon2)]
    a = (math.sin((lat2 - lat1) / 2) ** 2) \
            + (math.cos(lat1) * math.cos(lat2) \
                * (math.sin((lon2 - lon1) / 2) ** 2))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class APRSStation(object):
    """
    Description of the local station, used to answer queries.
    """
    ALTITUDE_UNITS = 'foot'

    def __init__(self, callsign, latitude, longitude, software_version='',
            status_text='', symbol_table=PRI_SYMBOL, symbol_code='-',
            destination=None, altitude=None, timestamp=None, weather=None):
        self.callsign = str(callsign).strip().upper()
        if not self.callsign:
            raise InvalidField('Station callsign required')

        self.software_version = str(software_version)
        self.status_text = str(status_text)
        self.latitude = APRSLatitude.check(latitude)
        self.longitude = APRSLongitude.check(longitude)
        self.symbol = APRSSymbol(symbol_table, symbol_code)

        if destination is not None:
            (dest_lat, dest_lon) = destination
            destination = (
                    APRSLatitude.check(dest_lat),
                    APRSLongitude.check(dest_lon)
            )
        self.destination = destination

        self.altitude = altitude
        self.timestamp = coerce_timestamp(timestamp)

        if (weather is not None) \
                and not isinstance(weather, APRSWeatherReport):
            raise InvalidField('Weather must be an APRSWeatherReport')
        self.weather = weather

    @property
    def distance(self):
        """
        Distance to the destination in km, or None if there's no
        destination.
        """
        if self.destination is None:
            return None
        return haversine_km(self.latitude, self.longitude,
                *self.destination)

    @property
    def distance_q(self):
        return quantity(self.distance, 'kilometer')

    @property
    def current_timestamp(self):
        """
        The station's timestamp, or the current time if it has none.
        """
        if self.timestamp is not None:
            return self.timestamp
        now = datetime.datetime.now(datetime.timezone.utc)
        return DHMUTCTimestamp(now.day, now.hour, now.minute)

    def position(self, timestamp=None):
        """
        Return a position report for this station.
        """
        kwargs = dict(
                latitude=self.latitude, longitude=self.longitude,
                symbol_table=self.symbol.tableident,
                symbol_code=self.symbol.symbol,
                altitude=self.altitude
        )
        if timestamp is not None:
            return APRSTimestampedPosition(timestamp=timestamp, **kwargs)
        return APRSPosition(dti='!', **kwargs)


class APRSQueryResponder(object):
    """
    Answers directed queries sent to the local station.
    """

    def __init__(self, station, log=None):
        if log is None:
            log = logging.getLogger(self.__class__.__module__)
        self._log = log
        self._station = station

        self._handlers = {
                'APRS': self._on_aprs,
                'INFO': self._on_info,
                'LOC': self._on_loc,
                'TIME': self._on_time,
                'WX': self._on_wx,
                'MSG': self._on_msg,
                'DST': self._on_dst,
                'APRSP': self._on_aprsp,
                'APRSS': self._on_aprss,
                'APRSD': lambda : 'Directs=',
                'APRSM': lambda : 'No messages pending',
                'APRSO': lambda : 'No objects',
                'APRST': self._on_trace,
                'PING': self._on_trace,
        }

    @property
    def station(self):
        return self._station

    def respond(self, message, capacity=None):
        """
        Return the information field answering the message as bytes, or
        None if the message is not a query directed at this station.
        """
        if not isinstance(message, APRSMessage):
            self._log.debug('Ignoring %r: not a message', message)
            return None

        if message.addressee != self._station.callsign:
            self._log.debug('Ignoring message for %s', message.addressee)
            return None

        query_type = message.query_type
        if query_type is None:
            self._log.debug('Ignoring message %r: not a query', message.text)
            return None

        if query_type.startswith('APRSH'):
            handler = lambda : 'Not heard %s' % query_type[5:]
        else:
            handler = self._handlers.get(query_type)

        if handler is None:
            self._log.debug('Unsupported query type %r', query_type)
            return None

        response = handler()
        self._log.info('Answering ?%s? query', query_type)
        if isinstance(response, str):
            return check_capacity(response.encode(ENCODING), capacity)
        return response.encode(capacity=capacity)

    def _on_aprs(self):
        return self._station.software_version

    def _on_info(self):
        return APRSStatus(self._station.status_text)

    def _on_loc(self):
        return self._station.position()

    def _on_time(self):
        timestamp = self._station.current_timestamp
        if isinstance(timestamp, DHMUTCTimestamp):
            return APRSStatus('', timestamp=timestamp)
        # Status reports only carry zulu times; echo other forms verbatim
        return '>%s' % timestamp

    def _on_wx(self):
        if self._station.weather is not None:
            return self._station.weather
        return PLACEHOLDER_WEATHER

    def _on_msg(self):
        return 'MSG supported'

    def _on_dst(self):
        distance = self._station.distance
        if distance is None:
            return 'Unknown'
        return '%d km' % int(round(distance))

    def _on_aprsp(self):
        return self._station.position(
                timestamp=self._station.current_timestamp)

    def _on_aprss(self):
        return APRSStatus(self._station.status_text)

    def _on_trace(self):
        return '%s>APRS' % self._station.callsign
