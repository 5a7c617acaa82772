#!/usr/bin/env python3

"""
HDLC framing tests
"""

from ax25codec import hdlc
from ax25codec.errors import BadFcs, BufferTooSmall, InvalidFrame, \
        Runaway, HDLCError, InvalidChecksum
from ax25codec.frame import AX25UnnumberedInformationFrame
from .hex import from_hex, hex_cmp


def _ones_runs(data):
    """
    Return the longest run of one bits in data.
    """
    longest = 0
    run = 0
    for byte in data:
        for shift in range(7, -1, -1):
            if (byte >> shift) & 1:
                run += 1
                longest = max(longest, run)
            else:
                run = 0
    return longest


def test_encode_empty():
    """
    Test an empty frame is two flags around a zero FCS.
    """
    hex_cmp(hdlc.encode(b''), '7e 00 00 7e')


def test_decode_empty():
    """
    Test we can decode an empty frame.
    """
    assert hdlc.decode(from_hex('7e 00 00 7e')) == b''


def test_encode_starts_with_flag():
    """
    Test encoded frames open with a flag.
    """
    data = hdlc.encode(b'TEST')
    assert data[0] == 0x7e


def test_encode_stuffing():
    """
    Test the body of an encoded frame never has six consecutive ones.
    """
    data = hdlc.encode(b'\xff' * 16)
    # Strip the opening flag; the closing flag and idle fill may have six.
    body = data[1:-2]
    assert _ones_runs(body) <= 5


def test_round_trip_frame():
    """
    Test an AX.25 frame survives HDLC framing.
    """
    frame = bytes(AX25UnnumberedInformationFrame(
        destination='APRS', source='VK4MSL-7', pid=0xf0,
        payload=b'>Testing \xff\xfe\x7e\x7d'
    ))
    assert hdlc.decode(hdlc.encode(frame)) == frame


def test_encode_capacity():
    """
    Test encode refuses output larger than the capacity given.
    """
    try:
        hdlc.encode(b'TEST', capacity=4)
        assert False, 'Should not have worked'
    except BufferTooSmall as e:
        assert e.capacity == 4
        assert e.needed > 4


def test_decode_bad_fcs():
    """
    Test a frame whose FCS does not match is rejected.
    """
    try:
        hdlc.decode(from_hex('7e 00 01 7e'))
        assert False, 'Should not have worked'
    except BadFcs as e:
        assert str(e) == 'FCS mismatch: frame has 0x0001, computed 0x0000'
        assert isinstance(e, HDLCError)
        assert isinstance(e, InvalidChecksum)


def test_decode_too_short():
    """
    Test a frame too short to hold an FCS is rejected.
    """
    try:
        hdlc.decode(from_hex('7e 00 7e'))
        assert False, 'Should not have worked'
    except InvalidFrame as e:
        assert str(e) == 'Frame too short to hold an FCS'


def test_decode_no_flags():
    """
    Test a stream without a complete frame is rejected.
    """
    try:
        hdlc.decode(from_hex('00 00 00'))
        assert False, 'Should not have worked'
    except InvalidFrame as e:
        assert str(e) == 'No complete flag-delimited frame found'


def test_decode_runaway():
    """
    Test seven ones inside a frame abort it.
    """
    try:
        hdlc.decode(from_hex('7e 00 ff ff 7e'))
        assert False, 'Should not have worked'
    except Runaway as e:
        assert str(e) == '7 consecutive one bits in frame'


def test_decoder_multiple_frames():
    """
    Test the incremental decoder returns every frame in the stream.
    """
    decoder = hdlc.HDLCDecoder()
    stream = hdlc.encode(b'first') + hdlc.encode(b'second frame')
    assert decoder.feed(stream) == [b'first', b'second frame']


def test_decoder_chunks():
    """
    Test frames split across feeds are reassembled.
    """
    decoder = hdlc.HDLCDecoder()
    stream = hdlc.encode(b'split frame')
    assert decoder.feed(stream[0:3]) == []
    assert decoder.in_frame is True
    assert decoder.feed(stream[3:]) == [b'split frame']


def test_decoder_drops_bad_frames(logger):
    """
    Test the lenient decoder logs and drops a damaged frame.
    """
    decoder = hdlc.HDLCDecoder(log=logger)
    stream = from_hex('7e 00 01 7e') + hdlc.encode(b'good')
    assert decoder.feed(stream) == [b'good']

    assert len(logger.logrecords) == 1
    assert logger.logrecords[0]['method'] == 'debug'
    assert logger.logrecords[0]['args'] == ('Dropping frame with bad FCS',)
    assert logger.logrecords[0]['ex_type'] is BadFcs
