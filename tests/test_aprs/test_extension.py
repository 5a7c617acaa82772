#!/usr/bin/env python3

from pint import Quantity

from ax25codec.aprs.extension import APRSCourseSpeed, APRSPHG, APRSDFS, \
        APRSRange, APRSAltitude, APRSDAO, decode_extension
from ax25codec.errors import InvalidField

"""
Data extension and comment token tests.
"""


def test_course_speed_decode():
    """
    Test we can decode a course/speed extension.
    """
    (cse, rest) = APRSCourseSpeed.decode('088/036rest')
    assert cse.course == 88
    assert cse.speed == 36
    assert rest == 'rest'
    assert str(cse) == '088/036'


def test_course_speed_not_course():
    """
    Test courses above 360 are not extensions.
    """
    (cse, rest) = APRSCourseSpeed.decode('400/036rest')
    assert cse is None
    assert rest == '400/036rest'


def test_course_speed_wrap_clamp():
    """
    Test 360 wraps to 0 and speed is clamped at 999 knots.
    """
    cse = APRSCourseSpeed(course=360, speed=1500)
    assert str(cse) == '000/999'


def test_course_speed_quantity():
    """
    Test speeds may be given in other units.
    """
    cse = APRSCourseSpeed(course=90, speed=Quantity(100, 'km/h'))
    assert cse.speed == 54
    assert cse.speed_q.to('knot').magnitude == 54


def test_course_speed_negative():
    """
    Test negative speeds are rejected.
    """
    try:
        APRSCourseSpeed(course=90, speed=-1)
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == 'Speed must not be negative: -1.0'


def test_phg():
    """
    Test the PHG extension.
    """
    (phg, rest) = APRSPHG.decode('PHG5132')
    assert rest == ''
    assert phg.power_w == 25
    assert phg.height_ft == 20
    assert phg.gain_db == 3
    assert phg.direction == 90
    assert str(phg) == 'PHG5132'
    assert APRSPHG(1, 0, 0, 0).direction is None


def test_phg_range():
    """
    Test PHG digits are range checked.
    """
    try:
        APRSPHG(10, 1, 3, 2)
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == 'power code 10 out of range 0-9'


def test_dfs():
    """
    Test the DFS extension.
    """
    (dfs, rest) = APRSDFS.decode('DFS2360 fox')
    assert dfs.strength == 2
    assert dfs.height == 3
    assert dfs.gain == 6
    assert dfs.direction is None
    assert rest == ' fox'


def test_antenna_not_digits():
    """
    Test non-digit codes are not taken as an extension.
    """
    (phg, rest) = APRSPHG.decode('PHG51x2')
    assert phg is None
    assert rest == 'PHG51x2'


def test_range():
    """
    Test the RNG extension.
    """
    (rng, rest) = APRSRange.decode('RNG0050')
    assert rng.rng == 50
    assert str(rng) == 'RNG0050'
    assert rng.rng_q.to('mile').magnitude == 50

    try:
        APRSRange(10000)
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == 'Range 10000 out of range 0-9999'


def test_decode_extension():
    """
    Test the extension decoder tries each type in turn.
    """
    (ext, rest) = decode_extension('RNG0050 comment')
    assert ext == APRSRange(50)
    assert rest == ' comment'

    (ext, rest) = decode_extension('No extension')
    assert ext is None
    assert rest == 'No extension'

    (ext, rest) = decode_extension('088/036', (APRSPHG,))
    assert ext is None


def test_altitude():
    """
    Test the altitude comment token.
    """
    assert APRSAltitude.find('Hi /A=001234 there') == 1234
    assert APRSAltitude.find('/A=-00012') == -12
    assert APRSAltitude.find('/A=12') is None
    assert APRSAltitude.find(None) is None
    assert APRSAltitude.encode(1234) == '/A=001234'
    assert APRSAltitude.encode(-12) == '/A=-00012'

    try:
        APRSAltitude.encode(1000000)
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == 'Altitude 1000000 out of range'


def test_dao_upper():
    """
    Test a DAO token with decimal digits.
    """
    dao = APRSDAO.find('comment !W52!')
    assert dao.datum == 'W'
    assert abs(dao.lat_minutes - 0.005) < 1e-9
    assert abs(dao.lon_minutes - 0.002) < 1e-9
    assert str(dao) == '!W52!'

    (lat, lon) = dao.apply(-49.5, -72.75)
    assert abs(lat - (-49.5 - (0.005 / 60))) < 1e-9
    assert abs(lon - (-72.75 - (0.002 / 60))) < 1e-9


def test_dao_lower():
    """
    Test a DAO token with base-91 digits.
    """
    dao = APRSDAO.find('!w"!!')
    assert dao.lat_minutes == 0.01 / 91.0
    assert dao.lon_minutes == 0.0


def test_dao_invalid():
    """
    Test invalid tokens are ignored by find() and rejected when built.
    """
    assert APRSDAO.find('!WAB!') is None
    assert APRSDAO.find('no token') is None

    try:
        APRSDAO('W', 'A', '1')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == "Invalid DAO digit 'A'"

    try:
        APRSDAO('1')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == "Invalid DAO datum '1'"

    try:
        APRSDAO('w', '~')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == "Invalid DAO base-91 digit '~'"
