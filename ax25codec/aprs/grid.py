#!/usr/bin/env python3

"""
APRS Maidenhead grid locator beacons.

    [IO91SX comment
"""

import re

from ..errors import InvalidDti, InvalidField, InvalidLength
from .datatype import APRSDataType
from .position import APRSLatitude, APRSLongitude
from .record import APRSRecord, datatype_of, totext


GRID_RE = re.compile(r'^[A-Ra-r]{2}[0-9]{2}([A-Xa-x]{2})?$')


@APRSRecord.register(APRSDataType.MAIDENHEAD)
class APRSGridSquare(APRSRecord):
    """
    A 4 or 6 character Maidenhead locator with an optional comment.
    """
    SEPARATOR = ' '

    @classmethod
    def decode(cls, info, destination=None, log=None):
        info = totext(info)
        if datatype_of(info) != APRSDataType.MAIDENHEAD:
            raise InvalidDti('Not a grid square beacon: %r' % info)

        body = info[1:]
        if cls.SEPARATOR not in body:
            raise InvalidField('Grid square not terminated: %r' % info)

        (grid, comment) = body.split(cls.SEPARATOR, 1)
        return cls(grid, comment)

    @classmethod
    def from_coordinates(cls, latitude, longitude, precision=6, comment=None):
        """
        Return the beacon for the grid square containing the given point.
        """
        latitude = APRSLatitude.check(latitude) + 90
        longitude = APRSLongitude.check(longitude) + 180

        # The north and east edges belong to the last square
        latitude = min(latitude, 179.99999)
        longitude = min(longitude, 359.99999)

        grid = chr(ord('A') + int(longitude // 20)) \
                + chr(ord('A') + int(latitude // 10)) \
                + str(int((longitude % 20) // 2)) \
                + str(int(latitude % 10))
        if precision == 6:
            grid += chr(ord('a') + int((longitude % 2) * 12)) \
                    + chr(ord('a') + int((latitude % 1) * 24))
        elif precision != 4:
            raise InvalidField('Precision must be 4 or 6, not %r' \
                    % (precision,))
        return cls(grid, comment)

    def __init__(self, grid, comment=None):
        grid = str(grid)
        if len(grid) not in (4, 6):
            raise InvalidLength('Grid square must be 4 or 6 characters: %r' \
                    % grid)
        if not GRID_RE.match(grid):
            raise InvalidField('Invalid grid square %r' % grid)
        self.grid = grid
        self.comment = str(comment or '')

    @property
    def coordinates(self):
        """
        Latitude and longitude of the centre of the grid square.
        """
        grid = self.grid.upper()
        longitude = ((ord(grid[0]) - ord('A')) * 20) + (int(grid[2]) * 2)
        latitude = ((ord(grid[1]) - ord('A')) * 10) + int(grid[3])

        if len(grid) == 6:
            longitude += ((ord(grid[4]) - ord('A')) + 0.5) * (2 / 24.0)
            latitude += ((ord(grid[5]) - ord('A')) + 0.5) * (1 / 24.0)
        else:
            longitude += 1
            latitude += 0.5

        return (latitude - 90, longitude - 180)

    def _encode(self):
        return '[%s%s%s' % (self.grid, self.SEPARATOR, self.comment)
