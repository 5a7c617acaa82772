#!/usr/bin/env python3

from ax25codec.frame import (
    AX25Frame,
    AX258BitInformationFrame,
    AX2516BitInformationFrame,
)
from ..hex import from_hex, hex_cmp


def test_8bit_iframe_decode():
    """
    Test we can decode an 8-bit information frame.
    """
    frame = AX25Frame.decode(
        from_hex(
            "ac 96 68 84 ae 92 e0"  # Destination
            "ac 96 68 9a a6 98 61"  # Source
            "d4"  # Control
            "ff"  # PID
            "54 68 69 73 20 69 73 20 61 20 74 65 73 74"  # Payload
        ),
        modulo128=False,
    )

    assert isinstance(
        frame, AX258BitInformationFrame
    ), "Did not decode to 8-bit I-Frame"
    assert frame.nr == 6
    assert frame.ns == 2
    assert frame.pid == 0xFF
    assert frame.payload == b"This is a test"


def test_16bit_iframe_decode():
    """
    Test we can decode a 16-bit information frame.
    """
    frame = AX25Frame.decode(
        from_hex(
            "ac 96 68 84 ae 92 e0"  # Destination
            "ac 96 68 9a a6 98 61"  # Source
            "04 0d"  # Control
            "ff"  # PID
            "54 68 69 73 20 69 73 20 61 20 74 65 73 74"  # Payload
        ),
        modulo128=True,
    )

    assert isinstance(
        frame, AX2516BitInformationFrame
    ), "Did not decode to 16-bit I-Frame"
    assert frame.nr == 6
    assert frame.ns == 2
    assert frame.pf is True
    assert frame.pid == 0xFF
    assert frame.payload == b"This is a test"


def test_iframe_no_pid():
    """
    Test an information frame must carry a PID.
    """
    try:
        AX25Frame.decode(
            from_hex(
                "ac 96 68 84 ae 92 e0"  # Destination
                "ac 96 68 9a a6 98 61"  # Source
                "d4"  # Control
            ),
            modulo128=False,
        )
        assert False, "This should not have worked"
    except ValueError as e:
        assert str(e) == "Information frame has no PID"


def test_iframe_empty_payload():
    """
    Test an information frame may have an empty payload.
    """
    frame = AX25Frame.decode(
        from_hex(
            "ac 96 68 84 ae 92 e0"  # Destination
            "ac 96 68 9a a6 98 61"  # Source
            "00 f0"  # Control, PID
        ),
        modulo128=False,
    )
    assert frame.payload == b""


def test_iframe_str():
    """
    Test we can generate a string representation of an I-frame.
    """
    frame = AX258BitInformationFrame(
        destination="VK4BWI",
        source="VK4MSL",
        cr=True,
        pid=0xFF,
        nr=6,
        ns=2,
        payload=b"Testing 1 2 3",
    )

    assert str(frame) == (
        "VK4MSL>VK4BWI: N(R)=6 P/F=False N(S)=2 PID=0xff "
        "Payload=b'Testing 1 2 3'"
    )


def test_8bit_iframe_encode():
    """
    Test we can encode an 8-bit information frame.
    """
    frame = AX258BitInformationFrame(
        destination="ABCDEF-7",
        source="GHIJKL-1",
        cr=True,
        pid=0xF0,
        nr=3,
        ns=5,
        pf=True,
        payload=b"TEST",
    )
    hex_cmp(
        bytes(frame),
        "82 84 86 88 8a 8c ee"  # Destination
        "8e 90 92 94 96 98 63"  # Source
        "7a f0 54 45 53 54",  # Control, PID, payload
    )


def test_16bit_iframe_encode():
    """
    Test we can encode a 16-bit information frame.
    """
    frame = AX2516BitInformationFrame(
        destination="NOCALL",
        source="SEPEAQ-1",
        cr=True,
        pid=0xF0,
        nr=3,
        ns=5,
        pf=True,
        payload=b"TEST",
    )
    hex_cmp(
        bytes(frame),
        "9c 9e 86 82 98 98 e0"  # Destination
        "a6 8a a0 8a 82 a2 63"  # Source
        "0a 07 f0 54 45 53 54",  # Control, PID, payload
    )


def test_sequence_range():
    """
    Test sequence numbers are checked against the modulus.
    """
    AX2516BitInformationFrame(
        destination="VK4BWI", source="VK4MSL", pid=0xF0, nr=127, ns=127,
        payload=b"",
    )
    try:
        AX258BitInformationFrame(
            destination="VK4BWI", source="VK4MSL", pid=0xF0, nr=8, ns=0,
            payload=b"",
        )
        assert False, "This should not have worked"
    except ValueError as e:
        assert str(e) == "N(R)=8 out of range for modulo-8"
