#!/usr/bin/env python3

"""
AX.25 Exchange Identification (XID) parameters.

An XID information field carries a list of parameters, each encoded as a
parameter identifier (PI), a parameter length (PL) and a parameter value
(PV) of PL bytes.  Parameters with a known PI decode into typed objects;
anything else is kept as an AX25XIDRawParameter so it survives a round trip.

This module also holds the one piece of process-wide state in the package:
the default parameter list used when an XID frame is built without one.
init_defaults() must be called before the defaults are used, and
deinit_defaults() releases them again.
"""

import enum

from . import uint
from .errors import ShortFrame


class AX25XIDParameterIdentifier(enum.Enum):
    """
    Known values of PI in XID frames.
    """

    # Negotiates half/full duplex operation
    ClassesOfProcedure = 2

    # Selects between REJ, SREJ or both, and modulo 8 or 128
    HDLCOptionalFunctions = 3

    # Outgoing I field length in bits (not bytes)
    IFieldLengthTransmit = 5

    # Incoming I field length in bits (not bytes)
    IFieldLengthReceive = 6

    # Outgoing number of outstanding I-frames (k)
    WindowSizeTransmit = 7

    # Incoming number of outstanding I-frames (k)
    WindowSizeReceive = 8

    # Duration of the Wait For Acknowledge (T1) timer in milliseconds
    AcknowledgeTimer = 9

    # Retry count (N2)
    Retries = 10

    def __int__(self):
        return self.value


class AX25XIDParameter(object):
    """
    Representation of a single XID parameter.
    """

    PARAMETERS = {}

    @classmethod
    def register(cls, subclass):
        """
        Register a sub-class of XID parameter against its PI.
        """
        assert subclass.PI not in cls.PARAMETERS, "Duplicate registration"
        cls.PARAMETERS[subclass.PI] = subclass
        return subclass

    @classmethod
    def decode(cls, data):
        """
        Decode the parameter at the start of data, return the parameter and
        the remaining data.
        """
        if len(data) < 2:
            raise ShortFrame("Insufficient data for XID parameter")

        pi = data[0]
        pl = data[1]
        data = data[2:]

        if len(data) < pl:
            raise ShortFrame(
                "XID parameter %d is truncated: %d of %d bytes"
                % (pi, len(data), pl)
            )

        pv = bytes(data[0:pl]) if pl else None
        data = data[pl:]

        try:
            subclass = cls.PARAMETERS[AX25XIDParameterIdentifier(pi)]
        except (KeyError, ValueError):
            return (AX25XIDRawParameter(pi=pi, pv=pv), data)

        if (pv is None) or (
            (subclass.LENGTH is not None) and (len(pv) != subclass.LENGTH)
        ):
            # Not the shape we expect, keep it as given
            return (AX25XIDRawParameter(pi=pi, pv=pv), data)

        return (subclass.decode(pv), data)

    def __init__(self, pi):
        try:
            pi = AX25XIDParameterIdentifier(pi)
        except ValueError:
            # Pass through the PI as given.
            pass

        self._pi = pi

    @property
    def pi(self):
        """
        Return the Parameter Identifier
        """
        return self._pi

    @property
    def pv(self):  # pragma: no cover
        """
        Return the Parameter Value
        """
        raise NotImplementedError(
            "To be implemented in %s" % self.__class__.__name__
        )

    def __bytes__(self):
        pv = self.pv
        param = bytes([int(self.pi)])

        if pv is None:
            param += bytes([0])
        else:
            param += bytes([len(pv)]) + pv

        return param

    def __eq__(self, other):
        if not isinstance(other, AX25XIDParameter):
            return NotImplemented
        return bytes(self) == bytes(other)

    def __hash__(self):
        return hash(bytes(self))

    def __repr__(self):
        return "%s(pi=%r, pv=%r)" % (
            self.__class__.__name__,
            self.pi,
            self.pv,
        )


class AX25XIDRawParameter(AX25XIDParameter):
    """
    An XID parameter that we don't recognise.
    """

    LENGTH = None

    def __init__(self, pi, pv):
        if pv is not None:
            pv = bytes(pv)
        self._pv = pv
        super(AX25XIDRawParameter, self).__init__(pi=pi)

    @property
    def pv(self):
        return self._pv


class AX25XIDBitFieldParameter(AX25XIDParameter):
    """
    Base class for the little-endian bit field parameters.  Sub-classes list
    their flags in FLAGS as (name, mask, default) tuples; every bit is
    reproduced as given, even if the combination is invalid.
    """

    FLAGS = ()
    RESERVED_MASK = 0
    RESERVED_POS = 0

    @classmethod
    def decode(cls, pv):
        pv = uint.decode(pv, big_endian=False)
        flags = dict(
            (name, bool(pv & mask)) for (name, mask, _) in cls.FLAGS
        )
        return cls(
            reserved=(pv & cls.RESERVED_MASK) >> cls.RESERVED_POS, **flags
        )

    def __init__(self, reserved=0, **flags):
        known = set(name for (name, _, _) in self.FLAGS)
        unknown = set(flags) - known
        if unknown:
            raise TypeError(
                "Unknown flags for %s: %s"
                % (self.__class__.__name__, ", ".join(sorted(unknown)))
            )

        self._flags = dict(
            (name, bool(flags.get(name, default)))
            for (name, _, default) in self.FLAGS
        )
        self._reserved = int(reserved)
        super(AX25XIDBitFieldParameter, self).__init__(pi=self.PI)

    @property
    def value(self):
        """
        Return the integer value of the bit field.
        """
        value = (self._reserved << self.RESERVED_POS) & self.RESERVED_MASK
        for (name, mask, _) in self.FLAGS:
            if self._flags[name]:
                value |= mask
        return value

    @property
    def pv(self):
        return uint.encode(self.value, big_endian=False, length=self.LENGTH)

    @property
    def reserved(self):
        return self._reserved

    def __getitem__(self, name):
        return self._flags[name]

    def copy(self, **overrides):
        flags = dict(self._flags)
        flags.update(overrides)
        return self.__class__(reserved=self.reserved, **flags)


@AX25XIDParameter.register
class AX25XIDClassOfProceduresParameter(AX25XIDBitFieldParameter):
    """
    Class of Procedures.  Negotiates half or full duplex communications
    between two TNCs.  The defaults are such that at most half_duplex or
    full_duplex need setting.
    """

    PI = AX25XIDParameterIdentifier.ClassesOfProcedure
    LENGTH = 2

    FLAGS = (
        ("balanced_abm", 0b0000000000000001, True),
        ("unbalanced_nrm_pri", 0b0000000000000010, False),
        ("unbalanced_nrm_sec", 0b0000000000000100, False),
        ("unbalanced_arm_pri", 0b0000000000001000, False),
        ("unbalanced_arm_sec", 0b0000000000010000, False),
        ("half_duplex", 0b0000000000100000, False),
        ("full_duplex", 0b0000000001000000, False),
    )
    RESERVED_MASK = 0b1111111110000000
    RESERVED_POS = 7

    @property
    def half_duplex(self):
        return self["half_duplex"]

    @property
    def full_duplex(self):
        return self["full_duplex"]

    @property
    def balanced_abm(self):
        return self["balanced_abm"]


@AX25XIDParameter.register
class AX25XIDHDLCOptionalFunctionsParameter(AX25XIDBitFieldParameter):
    """
    HDLC Optional Functions.  Negotiates which reject mode and which
    sequence number modulus the link uses.  The defaults are such that at
    most srej, rej, modulo8 and modulo128 need setting.
    """

    PI = AX25XIDParameterIdentifier.HDLCOptionalFunctions
    LENGTH = 3

    FLAGS = (
        ("reserved1", 0b000000000000000000000001, False),
        ("rej", 0b000000000000000000000010, False),
        ("srej", 0b000000000000000000000100, False),
        ("ui", 0b000000000000000000001000, False),
        ("sim_rim", 0b000000000000000000010000, False),
        ("up", 0b000000000000000000100000, False),
        ("basic_addr", 0b000000000000000001000000, False),
        ("extd_addr", 0b000000000000000010000000, True),
        ("delete_i_resp", 0b000000000000000100000000, False),
        ("delete_i_cmd", 0b000000000000001000000000, False),
        ("modulo8", 0b000000000000010000000000, False),
        ("modulo128", 0b000000000000100000000000, False),
        ("rset", 0b000000000001000000000000, False),
        ("test", 0b000000000010000000000000, True),
        ("rd", 0b000000000100000000000000, False),
        ("fcs16", 0b000000001000000000000000, True),
        ("fcs32", 0b000000010000000000000000, False),
        ("sync_tx", 0b000000100000000000000000, True),
        ("start_stop_tx", 0b000001000000000000000000, False),
        ("start_stop_flow_ctl", 0b000010000000000000000000, False),
        ("start_stop_transp", 0b000100000000000000000000, False),
        ("srej_multiframe", 0b001000000000000000000000, False),
    )
    RESERVED_MASK = 0b110000000000000000000000
    RESERVED_POS = 22

    @property
    def rej(self):
        return self["rej"]

    @property
    def srej(self):
        return self["srej"]

    @property
    def modulo8(self):
        return self["modulo8"]

    @property
    def modulo128(self):
        return self["modulo128"]


class AX25XIDBigEndianParameter(AX25XIDParameter):
    """
    Base class for all big-endian parameters (field lengths, window sizes,
    ACK timers, retries).
    """

    LENGTH = None

    @classmethod
    def decode(cls, pv):
        return cls(value=uint.decode(pv, big_endian=True))

    def __init__(self, value):
        self._value = int(value)
        if self._value < 0:
            raise ValueError("%s must not be negative" % self.PI.name)
        super(AX25XIDBigEndianParameter, self).__init__(pi=self.PI)

    @property
    def pv(self):
        return uint.encode(self.value, big_endian=True, length=self.LENGTH)

    @property
    def value(self):
        return self._value

    def copy(self):
        return self.__class__(value=self.value)


@AX25XIDParameter.register
class AX25XIDIFieldLengthTransmitParameter(AX25XIDBigEndianParameter):
    PI = AX25XIDParameterIdentifier.IFieldLengthTransmit


@AX25XIDParameter.register
class AX25XIDIFieldLengthReceiveParameter(AX25XIDBigEndianParameter):
    PI = AX25XIDParameterIdentifier.IFieldLengthReceive


@AX25XIDParameter.register
class AX25XIDWindowSizeTransmitParameter(AX25XIDBigEndianParameter):
    PI = AX25XIDParameterIdentifier.WindowSizeTransmit
    LENGTH = 1


@AX25XIDParameter.register
class AX25XIDWindowSizeReceiveParameter(AX25XIDBigEndianParameter):
    PI = AX25XIDParameterIdentifier.WindowSizeReceive
    LENGTH = 1


@AX25XIDParameter.register
class AX25XIDAcknowledgeTimerParameter(AX25XIDBigEndianParameter):
    PI = AX25XIDParameterIdentifier.AcknowledgeTimer


@AX25XIDParameter.register
class AX25XIDRetriesParameter(AX25XIDBigEndianParameter):
    PI = AX25XIDParameterIdentifier.Retries


def decode_parameters(data):
    """
    Decode a complete XID parameter list.
    """
    parameters = []
    while data:
        (param, data) = AX25XIDParameter.decode(data)
        parameters.append(param)
    return parameters


# Process-wide default parameter list, see init_defaults()
_defaults = None


def init_defaults(parameters=None):
    """
    Set up the default XID parameters.  With no argument, the AX.25 2.2
    defaults for a half-duplex modulo-8 link are used.
    """
    global _defaults

    if parameters is None:
        parameters = [
            AX25XIDClassOfProceduresParameter(half_duplex=True),
            AX25XIDHDLCOptionalFunctionsParameter(
                rej=True, srej=True, modulo8=True
            ),
            AX25XIDIFieldLengthReceiveParameter(2048),
            AX25XIDWindowSizeReceiveParameter(7),
            AX25XIDAcknowledgeTimerParameter(3000),
            AX25XIDRetriesParameter(10),
        ]

    _defaults = tuple(parameters)


def deinit_defaults():
    """
    Release the default XID parameters.
    """
    global _defaults
    _defaults = None


def get_defaults():
    """
    Return the default XID parameter list.
    """
    if _defaults is None:
        raise RuntimeError("XID defaults used before init_defaults()")
    return _defaults
