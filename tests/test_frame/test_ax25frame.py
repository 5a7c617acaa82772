#!/usr/bin/env python3

from ax25codec.frame import (
    AX25Frame,
    AX25Modulo,
    AX25RawFrame,
    AX25UnnumberedInformationFrame,
    AX258BitInformationFrame,
    AX2516BitInformationFrame,
    AX2516BitReceiveReadyFrame,
    AX25SetAsyncBalancedModeFrame,
)
from ax25codec.errors import (
    ShortFrame,
    UnknownControl,
    UnknownModifier,
)
from ..hex import from_hex, hex_cmp

# Basic frame operations


def test_decode_short():
    """
    Test that a frame too short for an address does not cause a crash.
    """
    try:
        AX25Frame.decode(from_hex("ac 82 66"))
        assert False, "This should not have worked"
    except ShortFrame as e:
        assert str(e) == "Address field truncated after 0 addresses"


def test_decode_incomplete():
    """
    Test that a frame without a control field is rejected.
    """
    try:
        AX25Frame.decode(
            from_hex(
                "ac 96 68 84 ae 92 e0"  # Destination
                "ac 96 68 9a a6 98 61"  # Source
            )
        )
        assert False, "This should not have worked"
    except ShortFrame as e:
        assert str(e) == "Frame has no control field"


def test_decode_iframe():
    """
    Test that an I-frame gets decoded to a raw frame.
    """
    frame = AX25Frame.decode(
        from_hex(
            "ac 96 68 84 ae 92 e0"  # Destination
            "ac 96 68 9a a6 98 61"  # Source
            "00 11 22 33 44 55 66 77"  # Payload
        )
    )
    assert isinstance(frame, AX25RawFrame), "Did not decode to raw frame"
    hex_cmp(frame.frame_payload, "00 11 22 33 44 55 66 77")


def test_decode_sframe():
    """
    Test that an S-frame gets decoded to a raw frame.
    """
    frame = AX25Frame.decode(
        from_hex(
            "ac 96 68 84 ae 92 e0"  # Destination
            "ac 96 68 9a a6 98 61"  # Source
            "01 11 22 33 44 55 66 77"  # Payload
        )
    )
    assert isinstance(frame, AX25RawFrame), "Did not decode to raw frame"
    hex_cmp(frame.frame_payload, "01 11 22 33 44 55 66 77")


def test_decode_rawframe():
    """
    Test that we can decode an AX25RawFrame.
    """
    rawframe = AX25RawFrame(
        destination="VK4BWI",
        source="VK4MSL",
        cr=True,
        payload=b"\x03\xf0This is a test",
    )
    frame = AX25Frame.decode(rawframe)
    assert isinstance(frame, AX25UnnumberedInformationFrame)
    assert frame.pid == 0xF0
    assert frame.payload == b"This is a test"


def test_decode_rawframe_mod8():
    """
    Test that a raw frame can be dissected once the modulus is known.
    """
    rawframe = AX25Frame.decode(
        from_hex(
            "82 84 86 88 8a 8c ee"  # Destination: ABCDEF-7
            "8e 90 92 94 96 98 63"  # Source: GHIJKL-1
            "00 f0 54 45 53 54"  # I frame, "TEST"
        )
    )
    assert isinstance(rawframe, AX25RawFrame)

    frame = AX25Frame.decode(rawframe, modulo128=AX25Modulo.MOD8)
    assert isinstance(frame, AX258BitInformationFrame)
    assert frame.nr == 0
    assert frame.ns == 0
    assert frame.pid == 0xF0
    assert frame.payload == b"TEST"


def test_decode_auto_mod8():
    """
    Test automatic modulus detection picks modulo-8 when reserved bit 1 is
    set in the source address.
    """
    frame = AX25Frame.decode(
        from_hex(
            "82 84 86 88 8a 8c ee"  # Destination: ABCDEF-7
            "8e 90 92 94 96 98 63"  # Source: GHIJKL-1, res1 set
            "7a f0 54 45 53 54"  # I frame, "TEST"
        ),
        modulo128=AX25Modulo.AUTO,
    )
    assert isinstance(frame, AX258BitInformationFrame)
    assert frame.nr == 3
    assert frame.ns == 5
    assert frame.pf is True


def test_decode_auto_mod128():
    """
    Test automatic modulus detection picks modulo-128 when reserved bit 1 is
    clear in the source address.
    """
    frame = AX25Frame.decode(
        from_hex(
            "9c 9e 86 82 98 98 e0"  # Destination: NOCALL
            "a6 8a a0 8a 82 a2 23"  # Source, res1 clear
            "0a 07 f0 54 45 53 54"  # I frame, "TEST"
        ),
        modulo128=AX25Modulo.AUTO,
    )
    assert isinstance(frame, AX2516BitInformationFrame)
    assert frame.nr == 3
    assert frame.ns == 5
    assert frame.pf is True
    assert frame.payload == b"TEST"


def test_decode_mod128_short():
    """
    Test a modulo-128 frame needs two control bytes.
    """
    try:
        AX25Frame.decode(
            from_hex(
                "9c 9e 86 82 98 98 e0"  # Destination
                "a6 8a a0 8a 82 a2 23"  # Source
                "01"  # Half a control field
            ),
            modulo128=True,
        )
        assert False, "This should not have worked"
    except ShortFrame as e:
        assert str(e) == "Frame too short for 16-bit control field"


def test_decode_mod128_rr():
    """
    Test decoding a modulo-128 receive ready frame.
    """
    frame = AX25Frame.decode(
        from_hex(
            "9c 9e 86 82 98 98 e0"  # Destination
            "a6 8a a0 8a 82 a2 63"  # Source
            "01 08"  # Control
        ),
        modulo128=True,
    )
    assert isinstance(frame, AX2516BitReceiveReadyFrame)
    assert frame.nr == 4
    assert frame.pf is False


def test_decode_sframe_payload():
    """
    Test supervisory frames may not carry a payload.
    """
    try:
        AX25Frame.decode(
            from_hex(
                "ac 96 68 84 ae 92 e0"  # Destination
                "ac 96 68 9a a6 98 61"  # Source
                "01 11 22"  # RR + payload
            ),
            modulo128=False,
        )
        assert False, "This should not have worked"
    except UnknownControl as e:
        assert str(e) == "Supervisory frames do not support payloads."


def test_decode_unknown_modifier():
    """
    Test an unknown U frame modifier is rejected.
    """
    try:
        AX25Frame.decode(
            from_hex(
                "ac 82 66 84 84 84 ee"  # Destination: VA3BBB-7
                "ac 82 66 82 82 82 63"  # Source: VA3AAA-1
                "ff"  # Control
            )
        )
        assert False, "This should not have worked"
    except UnknownModifier as e:
        assert str(e) == "Unknown U frame modifier 0xef"


def test_decode_connection_frames():
    """
    Test decoding the frames of a connection set-up.
    """
    sabm = AX25Frame.decode(
        from_hex(
            "ac 82 66 84 84 84 ee"  # Destination: VA3BBB-7
            "ac 82 66 82 82 82 63"  # Source: VA3AAA-1
            "3f"  # SABM, P set
        )
    )
    assert isinstance(sabm, AX25SetAsyncBalancedModeFrame)
    assert sabm.pf is True
    assert str(sabm.header.destination.copy(ch=False)) == "VA3BBB-7"
    assert str(sabm.header.source) == "VA3AAA-1"
    assert sabm.header.cr is True

    iframe = AX25Frame.decode(
        from_hex(
            "ac 82 66 84 84 84 ee"  # Destination
            "ac 82 66 82 82 82 63"  # Source
            "00 f0 48 65 6c 6c 6f 2c 20 57 6f 72 6c 64 21"
        ),
        modulo128=False,
    )
    assert isinstance(iframe, AX258BitInformationFrame)
    assert iframe.payload == b"Hello, World!"


def test_encode_raw():
    """
    Test that we can encode a raw frame.
    """
    # Yes, this is really a UI frame.
    frame = AX25RawFrame(
        destination="VK4BWI",
        source="VK4MSL",
        cr=True,
        payload=b"\x03\xf0This is a test",
    )
    hex_cmp(
        bytes(frame),
        "ac 96 68 84 ae 92 e0"  # Destination
        "ac 96 68 9a a6 98 61"  # Source
        "03"  # Control
        "f0 54 68 69 73 20 69 73 20 61 20 74 65 73 74",  # Payload
    )


def test_raw_str():
    """
    Test we can get a string representation of a raw frame.
    """
    frame = AX25RawFrame(
        destination="VK4BWI", source="VK4MSL", payload=b"\xabThis is a test"
    )
    assert str(frame) == "VK4MSL>VK4BWI"


def test_ui_str():
    """
    Test we can get a string representation of a UI frame.
    """
    frame = AX25UnnumberedInformationFrame(
        destination="VK4BWI",
        source="VK4MSL",
        cr=True,
        pid=0xF0,
        payload=b"This is a test",
    )
    assert str(frame) == "VK4MSL>VK4BWI: PID=0xf0 Payload=b'This is a test'"


def test_modulo_from_arg():
    """
    Test the legacy modulo flags map onto AX25Modulo.
    """
    assert AX25Modulo.from_arg(None) is AX25Modulo.NONE
    assert AX25Modulo.from_arg(False) is AX25Modulo.MOD8
    assert AX25Modulo.from_arg(True) is AX25Modulo.MOD128
    assert AX25Modulo.from_arg(AX25Modulo.AUTO) is AX25Modulo.AUTO
