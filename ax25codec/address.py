#!/usr/bin/env python3

"""
AX.25 addressing: station addresses, digipeater paths and the frame header
that carries them.

Each address is seven bytes: six callsign characters shifted left by one bit
(space padded), then a byte holding the SSID, the two reserved bits, the
C/H bit and the HDLC address extension bit.  The extension bit is set on the
last address of the header only.
"""

import re
from collections.abc import Sequence

from .errors import BadAddress, ShortFrame

ADDRESS_LEN = 7
CALLSIGN_LEN = 6

# At most eight digipeaters may follow the source address.
MAX_REPEATERS = 8


class AX25Address(object):
    """
    A representation of an AX.25 address (callsign + SSID)
    """

    CALL_RE = re.compile(r"^([0-9A-Z]{1,6})(?:-([0-9]{1,2}))?(\*?)$")
    WIRE_CALL_RE = re.compile(r"^[0-9A-Z]{1,6} *$")

    CH_BIT = 0b10000000
    RES1_BIT = 0b01000000
    RES0_BIT = 0b00100000
    SSID_MASK = 0b00011110
    SSID_SHIFT = 1
    EXTENSION_BIT = 0b00000001

    @classmethod
    def decode(cls, data, ssid=None):
        """
        Decode an AX.25 address from a frame (bytes), from its text form
        (e.g. "VK4MSL-10*"), or copy an existing address.
        """
        if isinstance(data, (bytes, bytearray)):
            if len(data) < ADDRESS_LEN:
                raise ShortFrame(
                    "AX.25 addresses must be %d bytes" % ADDRESS_LEN
                )

            if any(b & 0x01 for b in data[0:CALLSIGN_LEN]):
                raise BadAddress(
                    "Callsign byte has the extension bit set: %r"
                    % bytes(data[0:ADDRESS_LEN])
                )

            callsign = bytes([b >> 1 for b in data[0:CALLSIGN_LEN]]).decode(
                "latin-1"
            )
            if not cls.WIRE_CALL_RE.match(callsign):
                raise BadAddress("Invalid callsign %r" % callsign)

            flags = data[CALLSIGN_LEN]
            return cls(
                callsign=callsign.strip(),
                ssid=(flags & cls.SSID_MASK) >> cls.SSID_SHIFT,
                ch=bool(flags & cls.CH_BIT),
                res0=bool(flags & cls.RES0_BIT),
                res1=bool(flags & cls.RES1_BIT),
                extension=bool(flags & cls.EXTENSION_BIT),
            )
        elif isinstance(data, str):
            match = cls.CALL_RE.match(data.strip().upper())
            if not match:
                raise BadAddress("Not a valid callsign: %r" % data)

            if ssid is None:
                ssid = int(match.group(2) or 0)

            return cls(
                callsign=match.group(1), ssid=ssid, ch=match.group(3) == "*"
            )
        elif isinstance(data, AX25Address):
            return data.copy()
        else:
            raise TypeError("Don't know how to decode %r" % data)

    def __init__(
        self,
        callsign,
        ssid=0,
        ch=False,
        res0=True,
        res1=True,
        extension=False,
    ):
        callsign = str(callsign).upper()
        if not self.WIRE_CALL_RE.match(callsign) or (" " in callsign):
            raise BadAddress("Not a valid callsign: %r" % callsign)

        ssid = int(ssid)
        if not (0 <= ssid <= 15):
            raise BadAddress("SSID %d out of range 0-15" % ssid)

        self._callsign = callsign
        self._ssid = ssid
        self._ch = bool(ch)
        self._res0 = bool(res0)
        self._res1 = bool(res1)
        self._extension = bool(extension)

    def _encode(self):
        for byte in self._callsign.ljust(CALLSIGN_LEN).encode("US-ASCII"):
            yield byte << 1

        flags = (self._ssid << self.SSID_SHIFT) & self.SSID_MASK
        if self._extension:
            flags |= self.EXTENSION_BIT
        if self._res0:
            flags |= self.RES0_BIT
        if self._res1:
            flags |= self.RES1_BIT
        if self._ch:
            flags |= self.CH_BIT
        yield flags

    def __bytes__(self):
        return bytes(self._encode())

    def __str__(self):
        address = self.callsign
        if self.ssid:
            address += "-%d" % self.ssid
        if self.ch:
            address += "*"
        return address

    def __repr__(self):
        return (
            "%s(callsign=%s, ssid=%d, ch=%r, res0=%r, res1=%r, extension=%r)"
            % (
                self.__class__.__name__,
                self.callsign,
                self.ssid,
                self.ch,
                self.res0,
                self.res1,
                self.extension,
            )
        )

    def _key(self):
        return (
            self.callsign,
            self.ssid,
            self.ch,
            self.res0,
            self.res1,
            self.extension,
        )

    def __eq__(self, other):
        if not isinstance(other, AX25Address):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    @property
    def callsign(self):
        return self._callsign

    @property
    def ssid(self):
        """
        Secondary Station Identifier.
        """
        return self._ssid

    @property
    def ch(self):
        """
        C/H bit.  In source and destination addresses this is the
        command/response bit; in digipeater addresses it is the
        "has been repeated" bit.
        """
        return self._ch

    @property
    def res0(self):
        return self._res0

    @property
    def res1(self):
        """
        Reserved bit 1.  AX.25 2.2 stations clear this bit in the source
        address when a modulo-128 connection is in use.
        """
        return self._res1

    @property
    def extension(self):
        """
        HDLC address extension bit: set on the last address of the header.
        """
        return self._extension

    def copy(self, **overrides):
        """
        Return a copy of this address, optionally with fields overridden.
        """
        fields = dict(
            callsign=self.callsign,
            ssid=self.ssid,
            ch=self.ch,
            res0=self.res0,
            res1=self.res1,
            extension=self.extension,
        )
        fields.update(overrides)
        return self.__class__(**fields)

    @property
    def normalised(self):
        """
        Return a copy with the reserved bits set and the C/H and extension
        bits cleared.
        """
        return self.copy(res0=True, res1=True, ch=False, extension=False)


class AX25Path(Sequence):
    """
    A digipeater path: up to eight repeater addresses.
    """

    def __init__(self, *path):
        if len(path) > MAX_REPEATERS:
            raise BadAddress(
                "At most %d repeaters permitted, got %d"
                % (MAX_REPEATERS, len(path))
            )
        self._path = tuple(AX25Address.decode(digi) for digi in path)

    def __len__(self):
        return len(self._path)

    def __getitem__(self, index):
        return self._path[index]

    def __str__(self):
        return ",".join(str(addr) for addr in self._path)

    def __repr__(self):
        return "%s(%s)" % (
            self.__class__.__name__,
            ", ".join(repr(addr) for addr in self._path),
        )


class AX25FrameHeader(object):
    """
    The address portion of an AX.25 frame.
    """

    @classmethod
    def decode(cls, data):
        """
        Decode a frame header from the data given, return the decoded header
        and the data remaining.
        """
        addresses = []
        while not (addresses and addresses[-1].extension):
            if len(data) < ADDRESS_LEN:
                raise ShortFrame(
                    "Address field truncated after %d addresses"
                    % len(addresses)
                )
            addresses.append(AX25Address.decode(data[0:ADDRESS_LEN]))
            data = data[ADDRESS_LEN:]

        if len(addresses) < 2:
            raise BadAddress("Too few addresses")

        return (
            cls(
                destination=addresses[0],
                source=addresses[1],
                repeaters=addresses[2:],
                cr=addresses[0].ch,
                src_cr=addresses[1].ch,
            ),
            data,
        )

    def __init__(
        self,
        destination,
        source,
        repeaters=None,
        cr=False,
        src_cr=None,
    ):
        self._cr = bool(cr)
        self._src_cr = src_cr
        self._destination = AX25Address.decode(destination)
        self._source = AX25Address.decode(source)
        self._repeaters = AX25Path(*(repeaters or []))

    def _encode(self):
        last = len(self._repeaters) - 1

        # C bit in the destination is set on commands
        yield bytes(self._destination.copy(ch=self.cr, extension=False))

        # and is the opposite in the source for AX.25 2.x
        yield bytes(
            self._source.copy(ch=self.src_cr, extension=(last < 0))
        )

        # H bits on repeaters are left as given
        for (pos, rpt) in enumerate(self._repeaters):
            yield bytes(rpt.copy(extension=(pos == last)))

    def __bytes__(self):
        return b"".join(self._encode())

    def __str__(self):
        # C/R bits are not shown, only the repeated marks
        return "%s>%s%s" % (
            self._source.copy(ch=False),
            self._destination.copy(ch=False),
            (",%s" % self._repeaters) if self._repeaters else "",
        )

    @property
    def destination(self):
        return self._destination

    @property
    def source(self):
        return self._source

    @property
    def repeaters(self):
        return self._repeaters

    @property
    def cr(self):
        """
        Command/Response bit in the destination address.
        """
        return self._cr

    @property
    def src_cr(self):
        """
        Command/Response bit in the source address.
        """
        if self._src_cr is None:
            return not self.cr
        return bool(self._src_cr)

    @property
    def legacy(self):
        """
        AX.25 1.x stations set both C bits identically.
        """
        return self.cr == self.src_cr
