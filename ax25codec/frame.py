#!/usr/bin/env python3

"""
AX.25 framing.  This module defines encoders and decoders for all frame types
used in version 2.2 of the AX.25 standard.

AX25Frame is the base class.  The kind of frame is identified from bits in
the control field, which is 8 bits wide for U frames and for I and S frames
on modulo-8 links, and 16 bits wide for I and S frames on modulo-128 links.

The control field is sent least-significant byte first, so the first byte
after the address field always says whether the frame is I, S or U.  What it
cannot say is whether a second control byte follows.  AX25Frame.decode
therefore takes a modulo mode:

    - AX25Modulo.NONE (or None): I and S frames are returned as AX25RawFrame
      with the control field left undissected.

    - AX25Modulo.MOD8 (or False): 8-bit control field.

    - AX25Modulo.MOD128 (or True): 16-bit control field.

    - AX25Modulo.AUTO: guess from the source address.  AX.25 2.2 clears
      reserved bit 1 of the source SSID byte on modulo-128 connections.
"""

import enum

from . import uint
from .address import AX25FrameHeader
from .errors import ShortFrame, UnknownControl, UnknownModifier
from . import xid


class AX25Modulo(enum.Enum):
    """
    Sequence numbering mode used to dissect I and S frames.
    """

    NONE = None
    MOD8 = 8
    MOD128 = 128
    AUTO = "auto"

    @classmethod
    def from_arg(cls, modulo128):
        """
        Accept either an AX25Modulo or the legacy None/False/True flags.
        """
        if isinstance(modulo128, cls):
            return modulo128
        if modulo128 is None:
            return cls.NONE
        return cls.MOD128 if modulo128 else cls.MOD8


class AX25Frame(object):
    """
    Base class for AX.25 frames.
    """

    # The following are the same for 8 and 16-bit control fields.
    CONTROL_I_MASK = 0b00000001
    CONTROL_I_VAL = 0b00000000
    CONTROL_US_MASK = 0b00000011
    CONTROL_S_VAL = 0b00000001
    CONTROL_U_VAL = 0b00000011

    # PID codes
    PID_ISO8208_CCITT = 0x01
    PID_VJ_IP4_COMPRESS = 0x06
    PID_VJ_IP4 = 0x07
    PID_SEGMENTATION = 0x08
    PID_TEXNET = 0xC3
    PID_LINKQUALITY = 0xC4
    PID_APPLETALK = 0xCA
    PID_APPLETALK_ARP = 0xCB
    PID_ARPA_IP4 = 0xCC
    PID_ARPA_ARP = 0xCD
    PID_FLEXNET = 0xCE
    PID_NETROM = 0xCF
    PID_NO_L3 = 0xF0
    PID_ESCAPE = 0xFF

    @classmethod
    def decode(cls, data, modulo128=None):
        """
        Decode a single AX.25 frame from the given bytes.  A previously
        decoded AX25RawFrame may be passed instead to dissect it further.
        """
        modulo = AX25Modulo.from_arg(modulo128)

        if isinstance(data, AX25Frame):
            header = data.header
            data = data.frame_payload
        else:
            (header, data) = AX25FrameHeader.decode(bytes(data))

        if not data:
            raise ShortFrame("Frame has no control field")

        control = data[0]
        if (control & cls.CONTROL_US_MASK) == cls.CONTROL_U_VAL:
            # U frames always have an 8-bit control field
            return AX25UnnumberedFrame.decode(header, control, data[1:])

        if modulo is AX25Modulo.AUTO:
            modulo = (
                AX25Modulo.MOD8 if header.source.res1 else AX25Modulo.MOD128
            )

        if modulo is AX25Modulo.MOD128:
            if len(data) < 2:
                raise ShortFrame("Frame too short for 16-bit control field")
            control |= data[1] << 8
            data = data[2:]
            information = AX2516BitInformationFrame
            supervisory = AX2516BitSupervisoryFrame
        elif modulo is AX25Modulo.MOD8:
            data = data[1:]
            information = AX258BitInformationFrame
            supervisory = AX258BitSupervisoryFrame
        else:
            return AX25RawFrame(
                destination=header.destination,
                source=header.source,
                repeaters=header.repeaters,
                cr=header.cr,
                src_cr=header.src_cr,
                payload=data,
            )

        if (control & cls.CONTROL_I_MASK) == cls.CONTROL_I_VAL:
            return information.decode(header, control, data)

        if data:
            raise UnknownControl(
                "Supervisory frames do not support payloads."
            )
        return supervisory.decode(header, control)

    def __init__(
        self,
        destination,
        source,
        repeaters=None,
        cr=False,
        src_cr=None,
    ):
        self._header = AX25FrameHeader(
            destination, source, repeaters, cr, src_cr
        )

    def __bytes__(self):
        return bytes(self._header) + self.frame_payload

    def __str__(self):
        return str(self._header)

    @property
    def header(self):
        return self._header

    @property
    def frame_payload(self):  # pragma: no cover
        """
        Return the bytes that follow the address field (control field
        onwards).
        """
        raise NotImplementedError("To be implemented in sub-class")


class AX258BitFrame(AX25Frame):
    """
    Base class for AX.25 frames which have a 8-bit control field.
    """

    POLL_FINAL = 0b00010000

    #  7   6   5   4   3   2   1   0
    # --------------------------------
    #     N(R)   | P |    N(S)   | 0   I Frame
    #     N(R)   |P/F| S   S | 0   1   S Frame
    #  M   M   M |P/F| M   M | 1   1   U Frame
    CONTROL_NR_MASK = 0b11100000
    CONTROL_NR_SHIFT = 5
    CONTROL_NS_MASK = 0b00001110
    CONTROL_NS_SHIFT = 1
    MODULUS = 8

    @property
    def control(self):
        return self._control

    @property
    def frame_payload(self):
        return bytes([self.control])


class AX2516BitFrame(AX25Frame):
    """
    Base class for AX.25 frames which have a 16-bit control field.
    """

    POLL_FINAL = 0b0000000100000000

    # 15  14  13  12  11  10   9   8   7   6   5   4   3   2   1   0
    # --------------------------------------------------------------
    #            N(R)            | P |            N(S)           | 0   I Frame
    #            N(R)            |P/F| 0   0   0   0 | S   S | 0   1   S Frame
    CONTROL_NR_MASK = 0b1111111000000000
    CONTROL_NR_SHIFT = 9
    CONTROL_NS_MASK = 0b0000000011111110
    CONTROL_NS_SHIFT = 1
    CONTROL_S_RESERVED = 0b0000000011110000
    MODULUS = 128

    @property
    def control(self):
        return self._control

    @property
    def frame_payload(self):
        return uint.encode(self.control, big_endian=False, length=2)


class AX25RawFrame(AX25Frame):
    """
    An AX.25 frame whose control field has not been dissected, because the
    width of the control field was not known at decode time.  It may be fed
    back to AX25Frame.decode with a modulo mode once that is known.
    """

    def __init__(
        self,
        destination,
        source,
        repeaters=None,
        cr=False,
        src_cr=None,
        payload=None,
    ):
        super(AX25RawFrame, self).__init__(
            destination=destination,
            source=source,
            repeaters=repeaters,
            cr=cr,
            src_cr=src_cr,
        )
        self._payload = bytes(payload or b"")

    @property
    def frame_payload(self):
        return self._payload


def _check_sequence(name, value, modulus):
    value = int(value)
    if not (0 <= value < modulus):
        raise ValueError(
            "%s=%d out of range for modulo-%d" % (name, value, modulus)
        )
    return value


class AX25InformationFrameMixin(object):
    """
    Common code for all information frames.
    """

    @classmethod
    def decode(cls, header, control, data):
        if not data:
            raise ShortFrame("Information frame has no PID")

        return cls(
            destination=header.destination,
            source=header.source,
            repeaters=header.repeaters,
            cr=header.cr,
            src_cr=header.src_cr,
            nr=(control & cls.CONTROL_NR_MASK) >> cls.CONTROL_NR_SHIFT,
            ns=(control & cls.CONTROL_NS_MASK) >> cls.CONTROL_NS_SHIFT,
            pf=bool(control & cls.POLL_FINAL),
            pid=data[0],
            payload=data[1:],
        )

    def __init__(
        self,
        destination,
        source,
        pid,
        nr,
        ns,
        payload,
        repeaters=None,
        pf=False,
        cr=False,
        src_cr=None,
    ):
        super(AX25InformationFrameMixin, self).__init__(
            destination=destination,
            source=source,
            repeaters=repeaters,
            cr=cr,
            src_cr=src_cr,
        )
        self._nr = _check_sequence("N(R)", nr, self.MODULUS)
        self._ns = _check_sequence("N(S)", ns, self.MODULUS)
        self._pf = bool(pf)
        self._pid = int(pid) & 0xFF
        self._payload = bytes(payload)

    @property
    def pid(self):
        return self._pid

    @property
    def nr(self):
        """
        Receive sequence number
        """
        return self._nr

    @property
    def ns(self):
        """
        Send sequence number
        """
        return self._ns

    @property
    def pf(self):
        return self._pf

    @property
    def payload(self):
        return self._payload

    @property
    def frame_payload(self):
        return (
            super(AX25InformationFrameMixin, self).frame_payload
            + bytes([self.pid])
            + self.payload
        )

    @property
    def _control(self):
        return (
            (self.nr << self.CONTROL_NR_SHIFT)
            | (self.POLL_FINAL if self.pf else 0)
            | (self.ns << self.CONTROL_NS_SHIFT)
            | self.CONTROL_I_VAL
        )

    def __str__(self):
        return "%s: N(R)=%d P/F=%s N(S)=%d PID=0x%02x Payload=%r" % (
            self.header,
            self.nr,
            self.pf,
            self.ns,
            self.pid,
            self.payload,
        )


class AX258BitInformationFrame(AX25InformationFrameMixin, AX258BitFrame):
    """
    An information frame using modulo-8 sequence numbers.
    """

    pass


class AX2516BitInformationFrame(AX25InformationFrameMixin, AX2516BitFrame):
    """
    An information frame using modulo-128 sequence numbers.
    """

    pass


class AX25SupervisoryCode(enum.IntEnum):
    """
    The S S bits of a supervisory control field.
    """

    RR = 0b00000000
    RNR = 0b00000100
    REJ = 0b00001000
    SREJ = 0b00001100


class AX25SupervisoryFrameMixin(object):
    """
    Common code for all supervisory frames.
    """

    SUPER_MASK = 0b00001100

    @classmethod
    def decode(cls, header, control):
        if control & getattr(cls, "CONTROL_S_RESERVED", 0):
            raise UnknownControl(
                "Reserved bits set in control field 0x%04x" % control
            )

        code = AX25SupervisoryCode(control & cls.SUPER_MASK)
        return cls.SUBCLASSES[code](
            destination=header.destination,
            source=header.source,
            repeaters=header.repeaters,
            cr=header.cr,
            src_cr=header.src_cr,
            nr=(control & cls.CONTROL_NR_MASK) >> cls.CONTROL_NR_SHIFT,
            pf=bool(control & cls.POLL_FINAL),
        )

    def __init__(
        self,
        destination,
        source,
        nr,
        repeaters=None,
        pf=False,
        cr=False,
        src_cr=None,
    ):
        super(AX25SupervisoryFrameMixin, self).__init__(
            destination=destination,
            source=source,
            repeaters=repeaters,
            cr=cr,
            src_cr=src_cr,
        )
        self._nr = _check_sequence("N(R)", nr, self.MODULUS)
        self._pf = bool(pf)

    @property
    def nr(self):
        return self._nr

    @property
    def pf(self):
        return self._pf

    @property
    def code(self):
        """
        Supervisory function code
        """
        return self.SUPERVISOR_CODE

    @property
    def _control(self):
        return (
            (self.nr << self.CONTROL_NR_SHIFT)
            | (self.POLL_FINAL if self.pf else 0)
            | int(self.code)
            | self.CONTROL_S_VAL
        )

    def __str__(self):
        return "%s: N(R)=%d P/F=%s %s" % (
            self.header,
            self.nr,
            self.pf,
            self.code.name,
        )


class AX25ReceiveReadyFrameMixin(AX25SupervisoryFrameMixin):
    """
    Receive Ready: ready to receive more I frames.
    """

    SUPERVISOR_CODE = AX25SupervisoryCode.RR


class AX25ReceiveNotReadyFrameMixin(AX25SupervisoryFrameMixin):
    """
    Receive Not Ready: temporarily busy.
    """

    SUPERVISOR_CODE = AX25SupervisoryCode.RNR


class AX25RejectFrameMixin(AX25SupervisoryFrameMixin):
    """
    Reject: resend everything from N(R) onwards.
    """

    SUPERVISOR_CODE = AX25SupervisoryCode.REJ


class AX25SelectiveRejectFrameMixin(AX25SupervisoryFrameMixin):
    """
    Selective Reject: resend only frame N(R).
    """

    SUPERVISOR_CODE = AX25SupervisoryCode.SREJ


class AX258BitReceiveReadyFrame(AX25ReceiveReadyFrameMixin, AX258BitFrame):
    pass


class AX2516BitReceiveReadyFrame(AX25ReceiveReadyFrameMixin, AX2516BitFrame):
    pass


class AX258BitReceiveNotReadyFrame(
    AX25ReceiveNotReadyFrameMixin, AX258BitFrame
):
    pass


class AX2516BitReceiveNotReadyFrame(
    AX25ReceiveNotReadyFrameMixin, AX2516BitFrame
):
    pass


class AX258BitRejectFrame(AX25RejectFrameMixin, AX258BitFrame):
    pass


class AX2516BitRejectFrame(AX25RejectFrameMixin, AX2516BitFrame):
    pass


class AX258BitSelectiveRejectFrame(
    AX25SelectiveRejectFrameMixin, AX258BitFrame
):
    pass


class AX2516BitSelectiveRejectFrame(
    AX25SelectiveRejectFrameMixin, AX2516BitFrame
):
    pass


class AX258BitSupervisoryFrame(AX25SupervisoryFrameMixin, AX258BitFrame):
    SUBCLASSES = {
        c.SUPERVISOR_CODE: c
        for c in (
            AX258BitReceiveReadyFrame,
            AX258BitReceiveNotReadyFrame,
            AX258BitRejectFrame,
            AX258BitSelectiveRejectFrame,
        )
    }


class AX2516BitSupervisoryFrame(AX25SupervisoryFrameMixin, AX2516BitFrame):
    SUBCLASSES = {
        c.SUPERVISOR_CODE: c
        for c in (
            AX2516BitReceiveReadyFrame,
            AX2516BitReceiveNotReadyFrame,
            AX2516BitRejectFrame,
            AX2516BitSelectiveRejectFrame,
        )
    }


class AX25UnnumberedFrame(AX258BitFrame):
    """
    Base class for un-numbered frames.  The five modifier bits (with the
    P/F bit masked off) select the frame kind; every kind is a registered
    sub-class.
    """

    MODIFIER_MASK = 0b11101111

    SUBCLASSES = {}

    @classmethod
    def register(cls, subclass):
        """
        Register a sub-class of AX25UnnumberedFrame with the decoder.
        """
        assert (
            subclass.MODIFIER not in cls.SUBCLASSES
        ), "Duplicate registration"
        cls.SUBCLASSES[subclass.MODIFIER] = subclass
        return subclass

    @classmethod
    def decode(cls, header, control, data):
        """
        Hand a partially decoded U frame to the sub-class registered for its
        modifier bits.
        """
        modifier = control & cls.MODIFIER_MASK
        try:
            subclass = cls.SUBCLASSES[modifier]
        except KeyError:
            raise UnknownModifier(
                "Unknown U frame modifier 0x%02x" % modifier
            )
        return subclass.decode(header, control, data)

    def __init__(
        self,
        destination,
        source,
        repeaters=None,
        pf=False,
        cr=False,
        src_cr=None,
    ):
        super(AX25UnnumberedFrame, self).__init__(
            destination=destination,
            source=source,
            repeaters=repeaters,
            cr=cr,
            src_cr=src_cr,
        )
        self._pf = bool(pf)

    @property
    def _control(self):
        return self.MODIFIER | (self.POLL_FINAL if self._pf else 0)

    @property
    def pf(self):
        return self._pf

    @property
    def modifier(self):
        return self.MODIFIER

    def __str__(self):
        return "%s: %s P/F=%s" % (
            self.header,
            self.__class__.__name__,
            self.pf,
        )


@AX25UnnumberedFrame.register
class AX25UnnumberedInformationFrame(AX25UnnumberedFrame):
    """
    Un-numbered information frame: connectionless data, as used by APRS.
    """

    MODIFIER = 0b00000011

    @classmethod
    def decode(cls, header, control, data):
        if not data:
            raise ShortFrame("Payload of UI must be at least one byte")
        return cls(
            destination=header.destination,
            source=header.source,
            repeaters=header.repeaters,
            cr=header.cr,
            src_cr=header.src_cr,
            pf=bool(control & cls.POLL_FINAL),
            pid=data[0],
            payload=data[1:],
        )

    def __init__(
        self,
        destination,
        source,
        pid,
        payload,
        repeaters=None,
        pf=False,
        cr=False,
        src_cr=None,
    ):
        super(AX25UnnumberedInformationFrame, self).__init__(
            destination=destination,
            source=source,
            repeaters=repeaters,
            cr=cr,
            src_cr=src_cr,
            pf=pf,
        )
        self._pid = int(pid) & 0xFF
        self._payload = bytes(payload)

    @property
    def pid(self):
        return self._pid

    @property
    def payload(self):
        return self._payload

    @property
    def frame_payload(self):
        return (
            super(AX25UnnumberedInformationFrame, self).frame_payload
            + bytes([self.pid])
            + self.payload
        )

    def __str__(self):
        return "%s: PID=0x%02x Payload=%r" % (
            self.header,
            self.pid,
            self.payload,
        )


@AX25UnnumberedFrame.register
class AX25FrameRejectFrame(AX25UnnumberedFrame):
    """
    Frame Reject (FRMR).  The information field reports why a frame was
    rejected: W (bad control field), X (unexpected I field), Y (I field too
    long), Z (bad N(R)), our V(S) and V(R), the C/R bit of the rejected frame
    and its control field.

    On modulo-8 links this is three bytes.  On modulo-128 links it is five
    bytes, with 7-bit V(S)/V(R) and a 16-bit rejected control field.
    """

    MODIFIER = 0b10000111
    W_MASK = 0b00000001
    X_MASK = 0b00000010
    Y_MASK = 0b00000100
    Z_MASK = 0b00001000

    # Modulo-8 layout
    VR_MASK = 0b11100000
    VR_POS = 5
    CR_MASK = 0b00010000
    VS_MASK = 0b00001110
    VS_POS = 1

    # Modulo-128 layout
    EXT_VR_MASK = 0b11111110
    EXT_CR_MASK = 0b00000001
    EXT_VS_MASK = 0b11111110
    EXT_POS = 1

    @classmethod
    def decode(cls, header, control, data):
        if len(data) == 3:
            vr = (data[1] & cls.VR_MASK) >> cls.VR_POS
            frmr_cr = bool(data[1] & cls.CR_MASK)
            vs = (data[1] & cls.VS_MASK) >> cls.VS_POS
            frmr_control = data[2]
            modulo128 = False
        elif len(data) == 5:
            vr = (data[1] & cls.EXT_VR_MASK) >> cls.EXT_POS
            frmr_cr = bool(data[1] & cls.EXT_CR_MASK)
            vs = (data[2] & cls.EXT_VS_MASK) >> cls.EXT_POS
            frmr_control = uint.decode(data[3:5], big_endian=True)
            modulo128 = True
        else:
            raise ShortFrame("Payload of FRMR must be 3 or 5 bytes")

        return cls(
            destination=header.destination,
            source=header.source,
            repeaters=header.repeaters,
            cr=header.cr,
            src_cr=header.src_cr,
            pf=bool(control & cls.POLL_FINAL),
            w=bool(data[0] & cls.W_MASK),
            x=bool(data[0] & cls.X_MASK),
            y=bool(data[0] & cls.Y_MASK),
            z=bool(data[0] & cls.Z_MASK),
            vr=vr,
            frmr_cr=frmr_cr,
            vs=vs,
            frmr_control=frmr_control,
            modulo128=modulo128,
        )

    def __init__(
        self,
        destination,
        source,
        w,
        x,
        y,
        z,
        vr,
        frmr_cr,
        vs,
        frmr_control,
        repeaters=None,
        pf=False,
        cr=False,
        src_cr=None,
        modulo128=False,
    ):
        super(AX25FrameRejectFrame, self).__init__(
            destination=destination,
            source=source,
            repeaters=repeaters,
            cr=cr,
            src_cr=src_cr,
            pf=pf,
        )

        modulus = 128 if modulo128 else 8
        self._modulo128 = bool(modulo128)
        self._w = bool(w)
        self._x = bool(x)
        self._y = bool(y)
        self._z = bool(z)
        self._frmr_cr = bool(frmr_cr)
        self._frmr_control = int(frmr_control)
        self._vr = _check_sequence("V(R)", vr, modulus)
        self._vs = _check_sequence("V(S)", vs, modulus)

    @property
    def frame_payload(self):
        return super(AX25FrameRejectFrame, self).frame_payload + bytes(
            self._gen_info()
        )

    def _gen_info(self):
        wxyz = 0
        if self._w:
            wxyz |= self.W_MASK
        if self._x:
            wxyz |= self.X_MASK
        if self._y:
            wxyz |= self.Y_MASK
        if self._z:
            wxyz |= self.Z_MASK
        yield wxyz

        if self._modulo128:
            yield (self._vr << self.EXT_POS) | (
                self.EXT_CR_MASK if self._frmr_cr else 0
            )
            yield self._vs << self.EXT_POS
            for byte in uint.encode(
                self._frmr_control, length=2, big_endian=True
            ):
                yield byte
        else:
            yield (
                (self._vr << self.VR_POS)
                | (self.CR_MASK if self._frmr_cr else 0)
                | (self._vs << self.VS_POS)
            )
            yield self._frmr_control & 0xFF

    @property
    def modulo128(self):
        return self._modulo128

    @property
    def w(self):
        return self._w

    @property
    def x(self):
        return self._x

    @property
    def y(self):
        return self._y

    @property
    def z(self):
        return self._z

    @property
    def vs(self):
        return self._vs

    @property
    def vr(self):
        return self._vr

    @property
    def frmr_cr(self):
        return self._frmr_cr

    @property
    def frmr_control(self):
        return self._frmr_control


class AX25BaseUnnumberedFrame(AX25UnnumberedFrame):
    """
    Common decoder for the un-numbered frames that carry no information
    field.
    """

    # Default C/R bit
    CR = False

    @classmethod
    def decode(cls, header, control, data):
        if data:
            raise ShortFrame(
                "%s does not support payload" % cls.__name__
            )

        return cls(
            destination=header.destination,
            source=header.source,
            repeaters=header.repeaters,
            pf=bool(control & cls.POLL_FINAL),
            cr=header.cr,
            src_cr=header.src_cr,
        )

    def __init__(
        self,
        destination,
        source,
        repeaters=None,
        pf=False,
        cr=None,
        src_cr=None,
    ):
        if cr is None:
            cr = self.CR

        super(AX25BaseUnnumberedFrame, self).__init__(
            destination=destination,
            source=source,
            repeaters=repeaters,
            cr=cr,
            src_cr=src_cr,
            pf=pf,
        )


@AX25UnnumberedFrame.register
class AX25SetAsyncBalancedModeFrame(AX25BaseUnnumberedFrame):
    """
    SABM: connect request, modulo-8.
    """

    MODIFIER = 0b00101111
    CR = True


@AX25UnnumberedFrame.register
class AX25SetAsyncBalancedModeExtendedFrame(AX25BaseUnnumberedFrame):
    """
    SABME: connect request, modulo-128.
    """

    MODIFIER = 0b01101111
    CR = True


@AX25UnnumberedFrame.register
class AX25DisconnectFrame(AX25BaseUnnumberedFrame):
    """
    DISC: disconnect request.
    """

    MODIFIER = 0b01000011
    CR = True


@AX25UnnumberedFrame.register
class AX25DisconnectModeFrame(AX25BaseUnnumberedFrame):
    """
    DM: the station is in disconnected mode.
    """

    MODIFIER = 0b00001111


@AX25UnnumberedFrame.register
class AX25UnnumberedAcknowledgeFrame(AX25BaseUnnumberedFrame):
    """
    UA: acknowledges SABM, SABME or DISC.
    """

    MODIFIER = 0b01100011


@AX25UnnumberedFrame.register
class AX25ExchangeIdentificationFrame(AX25UnnumberedFrame):
    """
    Exchange Identification (XID), used to negotiate link parameters.

    The information field is the format indicator (FI), group identifier
    (GI), a big-endian 16-bit group length and the parameter list.  When no
    parameter list is given, the process-wide XID defaults are used.
    """

    MODIFIER = 0b10101111

    FI_GENERAL = 0x82
    GI_PARAMETER_NEGOTIATION = 0x80

    @classmethod
    def decode(cls, header, control, data):
        if len(data) < 4:
            raise ShortFrame("Truncated XID header")

        fi = data[0]
        gi = data[1]
        gl = uint.decode(data[2:4], big_endian=True)
        data = data[4:]

        if len(data) != gl:
            raise ShortFrame(
                "XID group length %d, got %d bytes" % (gl, len(data))
            )

        return cls(
            destination=header.destination,
            source=header.source,
            repeaters=header.repeaters,
            fi=fi,
            gi=gi,
            parameters=xid.decode_parameters(data),
            pf=bool(control & cls.POLL_FINAL),
            cr=header.cr,
            src_cr=header.src_cr,
        )

    def __init__(
        self,
        destination,
        source,
        fi=FI_GENERAL,
        gi=GI_PARAMETER_NEGOTIATION,
        parameters=None,
        repeaters=None,
        pf=False,
        cr=False,
        src_cr=None,
    ):
        super(AX25ExchangeIdentificationFrame, self).__init__(
            destination=destination,
            source=source,
            repeaters=repeaters,
            cr=cr,
            src_cr=src_cr,
            pf=pf,
        )
        if parameters is None:
            parameters = xid.get_defaults()

        self._fi = int(fi)
        self._gi = int(gi)
        self._parameters = tuple(parameters)

    @property
    def fi(self):
        return self._fi

    @property
    def gi(self):
        return self._gi

    @property
    def parameters(self):
        return self._parameters

    @property
    def frame_payload(self):
        parameters = b"".join(bytes(param) for param in self.parameters)
        return (
            super(AX25ExchangeIdentificationFrame, self).frame_payload
            + bytes([self.fi, self.gi])
            + uint.encode(len(parameters), length=2, big_endian=True)
            + parameters
        )


@AX25UnnumberedFrame.register
class AX25TestFrame(AX25UnnumberedFrame):
    """
    TEST: echo request carrying an arbitrary payload.
    """

    MODIFIER = 0b11100011

    @classmethod
    def decode(cls, header, control, data):
        return cls(
            destination=header.destination,
            source=header.source,
            repeaters=header.repeaters,
            payload=data,
            pf=bool(control & cls.POLL_FINAL),
            cr=header.cr,
            src_cr=header.src_cr,
        )

    def __init__(
        self,
        destination,
        source,
        payload,
        repeaters=None,
        pf=False,
        cr=False,
        src_cr=None,
    ):
        super(AX25TestFrame, self).__init__(
            destination=destination,
            source=source,
            repeaters=repeaters,
            cr=cr,
            src_cr=src_cr,
            pf=pf,
        )
        self._payload = bytes(payload)

    @property
    def payload(self):
        return self._payload

    @property
    def frame_payload(self):
        return super(AX25TestFrame, self).frame_payload + self.payload
