#!/usr/bin/env python3

from pint import Quantity

from ax25codec.aprs.position import APRSLatitude, APRSLongitude, \
        APRSCompressedLatitude, APRSCompressedLongitude, \
        APRSCompressionType, APRSCompressionTypeNMEASrc, \
        APRSPosition, APRSTimestampedPosition, APRSCompressedPosition, \
        APRSPositionAmbiguity, is_compressed_position
from ax25codec.aprs.datetime import DHMUTCTimestamp
from ax25codec.aprs.extension import APRSPHG, APRSDAO
from ax25codec.errors import InvalidCoord, InvalidDti, InvalidField, \
        InvalidLength

"""
Position handling tests.
"""


def test_latitude_encode():
    """
    Test we can encode a latitude as text.
    """
    assert APRSLatitude.encode(49.5) == '4930.00N'
    assert APRSLatitude.encode(-27.437244) == '2726.23S'


def test_longitude_encode():
    """
    Test we can encode a longitude as text.
    """
    assert APRSLongitude.encode(-72.75) == '07245.00W'
    assert APRSLongitude.encode(153.0095) == '15300.57E'


def test_coordinate_ambiguity_encode():
    """
    Test ambiguity blanks the least significant digits.
    """
    assert APRSLatitude.encode(49.5, 3) == '493 .  N'
    assert APRSLongitude.encode(-72.75, 3) == '0724 .  W'
    assert APRSLatitude.encode(49.5, 4) == '49  .  N'


def test_coordinate_ambiguity_decode():
    """
    Test an ambiguous co-ordinate decodes to the centre of its box.
    """
    (lat, ambiguity) = APRSLatitude.decode('493 .  N')
    assert ambiguity == APRSPositionAmbiguity.MINUTE
    assert abs(lat - (49 + (35 / 60.0))) < 0.00001

    (lon, ambiguity) = APRSLongitude.decode('0724 .  W')
    assert ambiguity == APRSPositionAmbiguity.MINUTE
    assert abs(lon - -72.75) < 0.00001


def test_coordinate_decode_irregular_ambiguity():
    """
    Test blanks in the wrong places are rejected.
    """
    try:
        APRSLatitude.decode('49 0.00N')
        assert False, 'Should not have worked'
    except InvalidCoord as e:
        assert str(e) == "Irregular ambiguity in '49 0.00N'"


def test_coordinate_decode_nonnumeric():
    """
    Test non-numeric co-ordinates are rejected.
    """
    try:
        APRSLatitude.decode('49A0.00N')
        assert False, 'Should not have worked'
    except InvalidCoord as e:
        assert str(e) == "Non-numeric co-ordinate '49A0.00N'"


def test_coordinate_decode_hemisphere():
    """
    Test unknown hemispheres are rejected.
    """
    try:
        APRSLatitude.decode('4930.00X')
        assert False, 'Should not have worked'
    except InvalidCoord as e:
        assert str(e) == "Unrecognised hemisphere in '4930.00X'"


def test_coordinate_range():
    """
    Test out of range co-ordinates are rejected.
    """
    try:
        APRSLatitude.check(91)
        assert False, 'Should not have worked'
    except InvalidCoord as e:
        assert str(e) == 'Co-ordinate 91.0 out of range -90..90'

    try:
        APRSLongitude.check(float('nan'))
        assert False, 'Should not have worked'
    except InvalidCoord:
        pass


def test_compressed_coordinates():
    """
    Test the compressed co-ordinates from the APRS protocol reference.
    """
    assert APRSCompressedLatitude.encode(49.5) == '5L!!'
    assert APRSCompressedLatitude.decode('5L!!') == 49.5
    assert abs(APRSCompressedLongitude.decode('<*e7') - -72.75) < 0.0001


def test_compression_type():
    """
    Test the compression type byte is decoded.
    """
    ctype = APRSCompressionType.decode('[')
    assert ctype.is_current
    assert ctype.nmeasrc == APRSCompressionTypeNMEASrc.RMC
    assert not ctype.is_altitude
    assert str(ctype) == '['


def test_compression_type_reserved():
    """
    Test the reserved compression type bits must be clear.
    """
    try:
        APRSCompressionType.decode('~')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == "Invalid compression type '~'"


def test_position_encode():
    """
    Test we can encode a plain position report.
    """
    pos = APRSPosition(49.5, -72.75, symbol_table='/', symbol_code='-',
            comment='Test')
    assert str(pos) == '!4930.00N/07245.00W-Test'
    assert pos.encode() == b'!4930.00N/07245.00W-Test'
    assert len(pos.encode()) == 24


def test_position_decode():
    """
    Test we can decode a plain position report.
    """
    pos = APRSPosition.decode('!4930.00N/07245.00W-Test')
    assert type(pos) is APRSPosition
    assert pos.latitude == 49.5
    assert pos.longitude == -72.75
    assert pos.symbol_table == '/'
    assert pos.symbol_code == '-'
    assert pos.comment == 'Test'
    assert pos.messaging is False
    assert pos.timestamp is None
    assert str(pos) == '!4930.00N/07245.00W-Test'


def test_position_decode_timestamped():
    """
    Test we can decode a time-stamped position report.
    """
    pos = APRSPosition.decode('@092345z4903.50N/07201.75W-Test')
    assert isinstance(pos, APRSTimestampedPosition)
    assert pos.dti == '@'
    assert pos.messaging is True
    assert str(pos.timestamp) == '092345z'
    assert abs(pos.latitude - 49.058333) < 0.00001
    assert abs(pos.longitude - -72.029167) < 0.00001
    assert pos.symbol_table == '/'
    assert pos.symbol_code == '-'
    assert pos.comment == 'Test'
    assert str(pos) == '@092345z4903.50N/07201.75W-Test'


def test_position_timestamped_encode():
    """
    Test a time-stamped report defaults to the '/' DTI.
    """
    pos = APRSTimestampedPosition(49.5, -72.75,
            timestamp=DHMUTCTimestamp(9, 23, 45), symbol_code='-')
    assert str(pos) == '/092345z4930.00N/07245.00W-'


def test_position_dti_timestamp_mismatch():
    """
    Test the DTI must agree with the presence of a timestamp.
    """
    try:
        APRSPosition(49.5, -72.75, dti='/')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == "DTI '/' requires a timestamp"

    try:
        APRSPosition(49.5, -72.75, dti='!', timestamp='092345z')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == "DTI '!' does not permit a timestamp"


def test_position_decode_wrong_dti():
    """
    Test the decoder refuses other data types.
    """
    try:
        APRSPosition.decode(':foo')
        assert False, 'Should not have worked'
    except InvalidDti as e:
        assert str(e) == "Not a position report: ':foo'"


def test_position_decode_short():
    """
    Test truncated positions are rejected.
    """
    try:
        APRSPosition.decode('!4930.00N/07')
        assert False, 'Should not have worked'
    except InvalidLength as e:
        assert str(e) == "Position too short: '4930.00N/07'"


def test_position_ambiguity():
    """
    Test an ambiguous position report round-trips.
    """
    pos = APRSPosition(49.5, -72.75, symbol_code='-', ambiguity=3)
    assert str(pos) == '!493 .  N/0724 .  W-'

    decoded = APRSPosition.decode(str(pos))
    assert decoded.ambiguity == APRSPositionAmbiguity.MINUTE
    assert abs(decoded.latitude - 49.583333) < 0.00001
    assert abs(decoded.longitude - -72.75) < 0.00001
    assert str(decoded) == str(pos)


def test_position_course_speed():
    """
    Test the course/speed extension is decoded.
    """
    pos = APRSPosition.decode('!4903.50N/07201.75W>088/036')
    assert pos.course == 88
    assert pos.speed == 36
    assert pos.comment == ''
    assert isinstance(pos.speed_q, Quantity)
    assert pos.speed_q.magnitude == 36
    assert str(pos) == '!4903.50N/07201.75W>088/036'


def test_position_speed_quantity():
    """
    Test speeds may be given as quantities in other units.
    """
    pos = APRSPosition(49.5, -72.75, course=90,
            speed=Quantity(100, 'kilometer / hour'))
    assert pos.speed == 54


def test_position_course_without_speed():
    """
    Test course and speed go together.
    """
    try:
        APRSPosition(49.5, -72.75, course=90)
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == 'Course and speed must both be specified'


def test_position_phg():
    """
    Test the PHG extension is decoded.
    """
    pos = APRSPosition.decode('=4903.50N/07201.75W#PHG5132Test')
    assert pos.messaging is True
    assert pos.phg == APRSPHG(5, 1, 3, 2)
    assert pos.phg.power_w == 25
    assert pos.phg.height_ft == 20
    assert pos.phg.gain_db == 3
    assert pos.phg.direction == 90
    assert pos.comment == 'Test'
    assert str(pos) == '=4903.50N/07201.75W#PHG5132Test'


def test_position_range():
    """
    Test the RNG extension is decoded.
    """
    pos = APRSPosition.decode('!4903.50N/07201.75W>RNG0050')
    assert pos.rng == 50
    assert str(pos) == '!4903.50N/07201.75W>RNG0050'


def test_position_multiple_extensions():
    """
    Test only one data extension may be given.
    """
    try:
        APRSPosition(49.5, -72.75, course=90, speed=10, phg=(5, 1, 3, 2))
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == \
                'Only one of course/speed, range, PHG or DFS may be given'


def test_position_altitude_decode():
    """
    Test the altitude is found in the comment.
    """
    pos = APRSPosition.decode('!4903.50N/07201.75W>/A=001234 hi')
    assert pos.altitude == 1234
    assert pos.comment == '/A=001234 hi'
    assert str(pos) == '!4903.50N/07201.75W>/A=001234 hi'


def test_position_altitude_encode():
    """
    Test the altitude is added to the comment.
    """
    pos = APRSPosition(49.5, -72.75, symbol_code='-', altitude=1234,
            comment='hi')
    assert str(pos) == '!4930.00N/07245.00W-/A=001234hi'

    pos = APRSPosition(49.5, -72.75, symbol_code='-', altitude=-12)
    assert str(pos) == '!4930.00N/07245.00W-/A=-00012'


def test_position_dao():
    """
    Test the DAO token is parsed and refines the position.
    """
    pos = APRSPosition.decode('!4903.50N/07201.75W>!W52!')
    assert pos.dao == APRSDAO('W', '5', '2')
    (lat, lon) = pos.precise_coordinates
    assert abs(lat - (49 + (3.505 / 60.0))) < 0.0000001
    assert abs(lon - -(72 + (1.752 / 60.0))) < 0.0000001
    assert str(pos) == '!4903.50N/07201.75W>!W52!'


def test_compressed_decode():
    """
    Test we can decode the compressed position from the APRS protocol
    reference.
    """
    pos = APRSPosition.decode('!/5L!!<*e7>7P[')
    assert isinstance(pos, APRSCompressedPosition)
    assert pos.compressed is True
    assert pos.latitude == 49.5
    assert abs(pos.longitude - -72.75) < 0.0001
    assert pos.symbol_table == '/'
    assert pos.symbol_code == '>'
    assert pos.course == 88
    assert pos.speed == 36
    assert pos.compression_type.nmeasrc == APRSCompressionTypeNMEASrc.RMC
    assert str(pos) == '!/5L!!<*e7>7P['


def test_compressed_encode_no_data():
    """
    Test a compressed position with no course, speed, range or altitude.
    """
    pos = APRSCompressedPosition(49.5, -72.75, symbol_code='>')
    assert str(pos) == '!/5L!!<*e8> sT'
    assert len(pos.encode()) == 14

    decoded = APRSPosition.decode(str(pos))
    assert decoded.course is None
    assert decoded.altitude is None
    assert str(decoded) == str(pos)


def test_compressed_no_data_keeps_type():
    """
    Test the type byte is kept when the cs bytes are blank.
    """
    pos = APRSPosition.decode('!/5L!!<*e7> sC')
    assert pos.course is None
    assert pos.altitude is None
    assert str(pos.compression_type) == 'C'
    assert str(pos) == '!/5L!!<*e7> sC'


def test_compressed_no_data_bad_type():
    """
    Test the type byte is checked even when the cs bytes are blank.
    """
    try:
        APRSPosition.decode('!/5L!!<*e7>  \x7f')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == "Invalid compression type '\\x7f'"


def test_compressed_course_speed_roundtrip():
    """
    Test course and speed survive compression within tolerance.
    """
    pos = APRSCompressedPosition(34.0522, -118.2437, symbol_code='>',
            course=268, speed=63, comment='Moving west')
    decoded = APRSPosition.decode(pos.encode())
    assert abs(decoded.latitude - 34.0522) < 0.01
    assert abs(decoded.longitude - -118.2437) < 0.01
    assert abs(decoded.course - 268) <= 4
    assert abs(decoded.speed - 63) <= 1
    assert decoded.comment == 'Moving west'


def test_compressed_altitude_roundtrip():
    """
    Test the altitude is carried in the cs bytes.
    """
    pos = APRSCompressedPosition(39.7392, -104.9903, symbol_table='\\',
            symbol_code='^', altitude=1999, comment='Altitude test')
    encoded = pos.encode()
    assert b'/A=' not in encoded

    decoded = APRSPosition.decode(encoded)
    assert decoded.compression_type.is_altitude
    assert decoded.altitude == 1999
    assert decoded.comment == 'Altitude test'
    assert decoded.encode() == encoded


def test_compressed_altitude_low():
    """
    Test altitudes below a foot are sent in the comment.
    """
    pos = APRSCompressedPosition(49.5, -72.75, symbol_code='>',
            altitude=-20)
    assert str(pos) == '!/5L!!<*e8> sT/A=-00020'
    assert APRSPosition.decode(str(pos)).altitude == -20


def test_compressed_range():
    """
    Test a pre-calculated range survives compression.
    """
    pos = APRSCompressedPosition(49.5, -72.75, symbol_code='>', rng=20)
    decoded = APRSPosition.decode(pos.encode())
    assert abs(decoded.rng - 20) < 1
    assert decoded.course is None


def test_compressed_not_ambiguous():
    """
    Test compressed positions cannot be ambiguous.
    """
    try:
        APRSCompressedPosition(49.5, -72.75, ambiguity=1)
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == 'Compressed positions are not ambiguous'


def test_is_compressed_position():
    """
    Test we can tell compressed positions apart.
    """
    assert is_compressed_position('!/5L!!<*e7>7P[')
    assert is_compressed_position(b'@092345z/5L!!<*e7>7P[')
    assert not is_compressed_position('!4930.00N/07245.00W-Test')
    assert not is_compressed_position(':WB2OSZ-7 :Hello')
    assert not is_compressed_position('')
