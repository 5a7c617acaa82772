#!/usr/bin/env python3

"""
APRS weather reports.

Weather data is a stream of fields, each a key letter followed by a fixed
number of digits:

    _10090556c220s004g005t077r000p000P000h50b09900wRSW

The same stream is used by positionless weather reports ('_'), by the Peet
Bros '#W1' and '*W2' formats and in the comment of a position report with
the weather symbol.  The Ultimeter '$ULTW' format is a hex stream of its
own.

Values are kept in the units they are sent in (e.g. hundredths of an inch
of rain, tenths of a millibar); `quantity()` returns any of them as a Pint
quantity in the real unit.
"""

import re

from ..errors import InvalidField, InvalidDti, InvalidLength
from ..unit import quantity
from .datatype import APRSDataType
from .datetime import coerce as coerce_timestamp, decode as decode_datetime
from .position import APRSPosition
from .record import APRSRecord, datatype_of, getlog, totext


class APRSWeatherField(object):
    """
    A fixed width numeric weather field.  A signed field sends negative
    values as '-' and `neg_width` digits.
    """
    def __init__(self, name, key, width, units=None, scale=1,
            signed=False, neg_width=None):
        self.name = name
        self.key = key
        self.width = width
        self.units = units
        self.scale = scale
        self.signed = signed
        if (neg_width is None) and (width is not None):
            neg_width = width - 1
        self.neg_width = neg_width

    @property
    def keys(self):
        return (self.key,)

    def parse(self, text, pos):
        """
        Parse the value starting at pos (just past the key).  Returns the
        value and the position after it, or None if there's no valid value.
        """
        if self.signed and (text[pos:pos+1] == '-'):
            digits = text[pos+1:pos+1+self.neg_width]
            if (len(digits) != self.neg_width) or not _isdigits(digits):
                return None
            return (-int(digits), pos + 1 + self.neg_width)

        digits = text[pos:pos+self.width]
        if (len(digits) != self.width) or not _isdigits(digits):
            return None
        return (int(digits), pos + self.width)

    def check(self, value):
        value = int(round(value))
        if value < 0:
            if (not self.signed) or (value <= -(10 ** self.neg_width)):
                raise InvalidField('%s %d out of range' % (self.name, value))
        elif value >= (10 ** self.width):
            raise InvalidField('%s %d out of range' % (self.name, value))
        return value

    def encode(self, value):
        value = self.check(value)
        if value < 0:
            return '%s-%0*d' % (self.key, self.neg_width, -value)
        return '%s%0*d' % (self.key, self.width, value)

    def quantity(self, value):
        if (value is None) or (self.units is None):
            return value
        return quantity(value * self.scale, self.units)


class APRSHumidityField(APRSWeatherField):
    """
    Relative humidity: two digits, with 00 meaning 100%.
    """
    def parse(self, text, pos):
        result = super(APRSHumidityField, self).parse(text, pos)
        if result is None:
            return None
        (value, pos) = result
        return (value or 100, pos)

    def check(self, value):
        value = int(round(value))
        if not (1 <= value <= 100):
            raise InvalidField('%s %d out of range 1-100' % (self.name, value))
        return value

    def encode(self, value):
        return '%s%02d' % (self.key, self.check(value) % 100)


class APRSLuminosityField(APRSWeatherField):
    """
    Luminosity in W/m^2: 'L' for 0-999, 'l' for 1000-1999.
    """
    HIGH_KEY = 'l'
    HIGH_OFFSET = 1000

    @property
    def keys(self):
        return (self.key, self.HIGH_KEY)

    def parse(self, text, pos):
        result = super(APRSLuminosityField, self).parse(text, pos)
        if result is None:
            return None
        (value, end) = result
        if text[pos-1] == self.HIGH_KEY:
            value += self.HIGH_OFFSET
        return (value, end)

    def check(self, value):
        value = int(round(value))
        if not (0 <= value < (2 * self.HIGH_OFFSET)):
            raise InvalidField('%s %d out of range' % (self.name, value))
        return value

    def encode(self, value):
        value = self.check(value)
        if value >= self.HIGH_OFFSET:
            return '%s%03d' % (self.HIGH_KEY, value - self.HIGH_OFFSET)
        return '%s%03d' % (self.key, value)


class APRSWaterHeightField(APRSWeatherField):
    """
    Water height: a decimal number of variable width.
    """
    RE = re.compile(r'[0-9]+(\.[0-9]+)?')

    def parse(self, text, pos):
        match = self.RE.match(text, pos)
        if not match:
            return None
        return (float(match.group(0)), match.end())

    def check(self, value):
        value = float(value)
        if value < 0:
            raise InvalidField('%s %r out of range' % (self.name, value))
        return value

    def encode(self, value):
        return '%s%.1f' % (self.key, self.check(value))


def _isdigits(text):
    return all(c in '0123456789' for c in text)


HEX_DIGITS = '0123456789ABCDEFabcdef'


# In encoding order
WEATHER_FIELDS = (
        APRSWeatherField('wind_direction', 'c', 3, 'degree'),
        APRSWeatherField('wind_speed', 's', 3, 'mile / hour'),
        APRSWeatherField('temperature', 't', 3, 'degF', signed=True),
        APRSWeatherField('wind_gust', 'g', 3, 'mile / hour'),
        APRSWeatherField('rain_1h', 'r', 3, 'inch', scale=0.01),
        APRSWeatherField('rain_24h', 'p', 3, 'inch', scale=0.01),
        APRSWeatherField('rain_midnight', 'P', 3, 'inch', scale=0.01),
        APRSHumidityField('humidity', 'h', 2, 'percent'),
        APRSWeatherField('pressure', 'b', 5, 'millibar', scale=0.1),
        APRSLuminosityField('luminosity', 'L', 3, 'watt / meter ** 2'),
        APRSWeatherField('snowfall', 'S', 3, 'inch', scale=0.1),
        APRSWeatherField('rain_rate', 'R', 3, 'inch / hour', scale=0.01),
        APRSWaterHeightField('water_height_ft', 'F', None, 'foot'),
        APRSWaterHeightField('water_height_m', 'f', None, 'metre'),
        APRSWeatherField('indoor_temperature', 'i', 2, 'degF',
            signed=True, neg_width=2),
        APRSHumidityField('indoor_humidity', 'I', 2, 'percent'),
        APRSWeatherField('rain_counter', '#', 5),
)

FIELDS_BY_NAME = dict([(f.name, f) for f in WEATHER_FIELDS])
FIELDS_BY_KEY = dict([(k, f) for f in WEATHER_FIELDS for k in f.keys])


def decode_fields(text, strict=False, log=None):
    """
    Decode a weather field stream.  A key whose value does not parse is
    skipped along with anything else not recognised, one character at a
    time.  If strict, decoding stops at the first such character instead.
    Returns the values found and the undecoded remainder.
    """
    values = {}
    pos = 0
    while pos < len(text):
        field = FIELDS_BY_KEY.get(text[pos])
        result = None
        if field is not None:
            result = field.parse(text, pos + 1)

        if result is not None:
            (values[field.name], pos) = result
            continue

        if strict:
            break

        if log is not None:
            log.debug('Skipping weather data at %d: %r', pos, text[pos:])
        pos += 1

    return (values, text[pos:])


def encode_fields(values, exclude=()):
    """
    Encode the given weather values as a field stream, omitting any that
    are absent.
    """
    return ''.join([
        field.encode(values[field.name])
        for field in WEATHER_FIELDS
        if (field.name not in exclude) and (values.get(field.name) is not None)
    ])


class APRSWeatherData(object):
    """
    Mixin holding weather values as attributes, one per field; absent
    values are None.
    """

    def _init_weather(self, fields):
        for name in fields.keys():
            if name not in FIELDS_BY_NAME:
                raise InvalidField('Unknown weather field %r' % name)

        for field in WEATHER_FIELDS:
            value = fields.get(field.name)
            if value is not None:
                value = field.check(value)
            setattr(self, field.name, value)

    @property
    def values(self):
        """
        The weather values present, as a dict.
        """
        return dict([
            (field.name, getattr(self, field.name))
            for field in WEATHER_FIELDS
            if getattr(self, field.name) is not None
        ])

    def quantity(self, name):
        """
        Return the named value as a Pint quantity, or None if absent.
        """
        try:
            field = FIELDS_BY_NAME[name]
        except KeyError:
            raise InvalidField('Unknown weather field %r' % name)
        return field.quantity(getattr(self, name))


@APRSRecord.register(APRSDataType.WX)
class APRSWeatherReport(APRSWeatherData, APRSRecord):
    """
    A positionless weather report, with an optional timestamp (MDHM, DHM or
    HMS).
    """

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if datatype_of(info) != APRSDataType.WX:
            raise InvalidDti('Not a weather report: %r' % info)

        body = info[1:]
        try:
            timestamp = decode_datetime(body, allow_mdhm=True)
            body = body[timestamp.TS_LENGTH:]
        except InvalidField as e:
            log.debug('No weather timestamp: %s', e)
            timestamp = None

        (values, rest) = decode_fields(body, log=log)
        return cls(timestamp=timestamp, **values)

    def __init__(self, timestamp=None, **fields):
        self.timestamp = coerce_timestamp(timestamp, allow_mdhm=True)
        self._init_weather(fields)

    def _encode(self):
        return '_%s%s' % (
                self.timestamp if self.timestamp is not None else '',
                encode_fields(self.values)
        )


class APRSPeetBrosWeather(APRSWeatherData, APRSRecord):
    """
    Peet Bros weather report, format 1 ('#W1').  The fields are sent in a
    fixed order; absent values are sent as dots.
    """
    MARKER = '#W1'
    FIELD_ORDER = ('wind_direction', 'wind_speed', 'wind_gust',
            'temperature', 'rain_1h', 'rain_24h', 'rain_midnight',
            'humidity', 'pressure')

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if not info.startswith(cls.MARKER):
            raise InvalidDti('Not a %s report: %r' % (cls.MARKER, info))

        (values, rest) = decode_fields(info[len(cls.MARKER):], log=log)
        return cls(**dict([
            (name, value) for (name, value) in values.items()
            if name in cls.FIELD_ORDER
        ]))

    def __init__(self, **fields):
        for name in fields.keys():
            if name not in self.FIELD_ORDER:
                raise InvalidField(
                        '%s reports do not carry %s' % (self.MARKER, name)
                )
        self._init_weather(fields)

    def _encode(self):
        output = self.MARKER
        for name in self.FIELD_ORDER:
            field = FIELDS_BY_NAME[name]
            value = getattr(self, name)
            if value is None:
                output += field.key + ('.' * field.width)
            else:
                output += field.encode(value)
        return output


class APRSPeetBrosWeather2(APRSPeetBrosWeather):
    """
    Peet Bros weather report, format 2 ('*W2').
    """
    MARKER = '*W2'


APRSRecord.register(APRSDataType.PEET_BROS_WX1)(APRSPeetBrosWeather)
APRSRecord.register(APRSDataType.PEET_BROS_WX2)(APRSPeetBrosWeather2)


class APRSUltimeterWeather(APRSWeatherData, APRSRecord):
    """
    Ultimeter 2000 data logger report: '$ULTW' then 11 to 13 fields of four
    hex digits, '----' where a value is not available.  The raw values are
    kept in `raw`; the canonical weather values are worked out from them.
    """
    MARKER = '$ULTW'
    FIELD_WIDTH = 4
    MIN_FIELDS = 11
    MAX_FIELDS = 13
    ABSENT = '----'

    # Raw fields, in order, with their units
    RAW_FIELDS = (
            ('peak_wind', 0.1, 'kilometer / hour'),
            ('peak_wind_direction', 360 / 256.0, 'degree'),
            ('outdoor_temperature', 0.1, 'degF'),
            ('rain_total', 0.01, 'inch'),
            ('barometer', 0.1, 'millibar'),
            ('barometer_delta', 0.1, 'millibar'),
            ('barometer_correction_lsw', 1, None),
            ('barometer_correction_msw', 1, None),
            ('outdoor_humidity', 0.1, 'percent'),
            ('date', 1, None),
            ('minutes', 1, 'minute'),
            ('rain_today', 0.01, 'inch'),
            ('wind_average', 0.1, 'kilometer / hour'),
    )
    SIGNED = ('outdoor_temperature', 'barometer_delta')

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info).rstrip('\r\n')
        if not info.startswith(cls.MARKER):
            raise InvalidDti('Not an Ultimeter report: %r' % info)

        data = info[len(cls.MARKER):]
        if len(data) % cls.FIELD_WIDTH:
            raise InvalidLength('Ultimeter data is not whole fields: %r' \
                    % data)

        raw = []
        for pos in range(0, len(data), cls.FIELD_WIDTH):
            text = data[pos:pos+cls.FIELD_WIDTH]
            if text == cls.ABSENT:
                raw.append(None)
                continue
            if not all(c in HEX_DIGITS for c in text):
                raise InvalidField('Invalid Ultimeter field %r' % text)
            value = int(text, 16)

            if (len(raw) < len(cls.RAW_FIELDS)) \
                    and (cls.RAW_FIELDS[len(raw)][0] in cls.SIGNED) \
                    and (value & 0x8000):
                value -= 0x10000
            raw.append(value)

        log.debug('Ultimeter fields: %r', raw)
        return cls(raw)

    def __init__(self, raw):
        raw = list(raw)
        if not (self.MIN_FIELDS <= len(raw) <= self.MAX_FIELDS):
            raise InvalidLength(
                    'Ultimeter reports carry %d-%d fields, got %d' \
                    % (self.MIN_FIELDS, self.MAX_FIELDS, len(raw))
            )

        for ((name, scale, units), value) in zip(self.RAW_FIELDS, raw):
            if value is None:
                continue
            low = -0x8000 if name in self.SIGNED else 0
            high = 0x7fff if name in self.SIGNED else 0xffff
            if not (low <= value <= high):
                raise InvalidField('Ultimeter %s %r out of range' \
                        % (name, value))
        self.raw = raw

        self._init_weather(dict([
            (name, value) for (name, value) in self._canonical().items()
            if value is not None
        ]))

    def raw_value(self, name):
        """
        Return the named raw field, or None if absent or not sent.
        """
        for ((field, scale, units), value) in zip(self.RAW_FIELDS, self.raw):
            if field == name:
                return value
        return None

    def raw_quantity(self, name):
        for ((field, scale, units), value) in zip(self.RAW_FIELDS, self.raw):
            if field == name:
                if (value is None) or (units is None):
                    return value
                return quantity(value * scale, units)
        return None

    def _canonical(self):
        def _convert(name, units):
            value = self.raw_quantity(name)
            if value is None:
                return None
            return int(round(value.to(units).magnitude))

        humidity = _convert('outdoor_humidity', 'percent')
        if humidity is not None:
            humidity = min(max(humidity, 1), 100)

        direction = self.raw_value('peak_wind_direction')
        if direction is not None:
            direction = int(round(direction * 360 / 256.0)) % 360

        return dict(
                wind_gust=_convert('peak_wind', 'mile / hour'),
                wind_direction=direction,
                temperature=_convert('outdoor_temperature', 'degF'),
                pressure=self.raw_value('barometer'),
                humidity=humidity,
                rain_midnight=self.raw_value('rain_today'),
                wind_speed=_convert('wind_average', 'mile / hour'),
        )

    def _encode(self):
        output = self.MARKER
        for value in self.raw:
            if value is None:
                output += self.ABSENT
            else:
                output += '%04X' % (value & 0xffff)
        return output


@APRSPosition.variant
class APRSPositionWeather(APRSWeatherData, APRSPosition):
    """
    A position report from a weather station: symbol '_', wind direction
    and speed in the course/speed extension, the other weather fields
    leading the comment.
    """
    SYMBOL_CODE = '_'

    @classmethod
    def from_position(cls, kwargs, log):
        if kwargs.get('compressed') \
                or (kwargs['symbol_code'] != cls.SYMBOL_CODE):
            return None

        kwargs = dict(kwargs)
        (values, comment) = decode_fields(kwargs.pop('comment'), strict=True)

        course = kwargs.pop('course', None)
        speed = kwargs.pop('speed', None)
        if course is not None:
            values.update(wind_direction=course, wind_speed=speed)

        log.debug('Position weather: %r', values)
        return cls(comment=comment, weather=values, **kwargs)

    def __init__(self, latitude, longitude, weather=None, comment=None,
            symbol_table='/', symbol_code='_', **kwargs):
        if isinstance(weather, APRSWeatherData):
            weather = weather.values
        self._init_weather(weather or {})

        if (self.wind_direction is not None) and (self.wind_speed is not None):
            kwargs.update(course=self.wind_direction, speed=self.wind_speed)
            exclude = ('wind_direction', 'wind_speed')
        else:
            exclude = ()

        self.weather_comment = str(comment or '')
        super(APRSPositionWeather, self).__init__(
                latitude=latitude, longitude=longitude,
                symbol_table=symbol_table, symbol_code=symbol_code,
                comment=encode_fields(self.values, exclude=exclude) \
                        + self.weather_comment,
                **kwargs
        )
