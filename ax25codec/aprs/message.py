#!/usr/bin/env python3

"""
APRS messages, acknowledgements, rejections and bulletins.

    :ADDRESSEE:text{MMMMM

The addressee is space-padded to 9 characters; the optional message number
is 1 to 5 alphanumeric characters, optionally followed by an APRS 1.1
reply-ack (}AAAAA).
"""

import re

from ..errors import InvalidDti, InvalidField, InvalidLength
from .datatype import APRSDataType
from .record import APRSRecord, datatype_of, getlog, totext
from .symbol import is_printable


ADDRESSEE_LENGTH = 9
TEXT_LENGTH = 67
MSGNO_LENGTH = 5

# Characters that may not appear in message text.
FORBIDDEN = '|~{'

MSGNO_RE = re.compile(r'^[0-9A-Za-z]{1,5}$')
MSGID_RE = re.compile(r'{([^{}]*)(}[0-9A-Za-z]*)?(\r?)$')
ACKREJ_RE = re.compile(r'^(ack|rej)([0-9A-Za-z]{1,5})\r?$', re.IGNORECASE)
ACKREJ_BARE_RE = re.compile(r'^(ack|rej)\r?$', re.IGNORECASE)
QUERY_RE = re.compile(r'^\?([0-9A-Za-z\-]{1,16})\?\r?$')
BULLETIN_RE = re.compile(r'^BLN([0-9A-Z])([0-9A-Za-z\-]{0,4})$')


def _check_msgno(msgno):
    msgno = str(msgno)
    if not MSGNO_RE.match(msgno):
        raise InvalidField(
                'Message number must be 1-%d alphanumeric characters: %r' \
                % (MSGNO_LENGTH, msgno)
        )
    return msgno


def _check_addressee(addressee):
    addressee = str(addressee).strip()
    if not addressee:
        raise InvalidField('Empty addressee')
    if len(addressee) > ADDRESSEE_LENGTH:
        raise InvalidLength('Addressee %r too long' % addressee)
    if not all(is_printable(c) for c in addressee):
        raise InvalidField('Invalid addressee %r' % addressee)
    return addressee


def is_bulletin(addressee):
    """
    Tell whether the addressee is a bulletin (BLN0..BLN9) or announcement
    (BLNA..BLNZ).
    """
    return BULLETIN_RE.match(addressee.strip()) is not None


@APRSRecord.register(APRSDataType.MESSAGE)
class APRSMessage(APRSRecord):
    """
    An APRS message addressed to a station.
    """

    @classmethod
    def decode(cls, info, destination=None, log=None):
        log = getlog(log, cls.__module__)
        info = totext(info)
        if datatype_of(info) != APRSDataType.MESSAGE:
            raise InvalidDti('Not a message: %r' % info)

        if len(info) < (ADDRESSEE_LENGTH + 2):
            raise InvalidLength('Message too short: %r' % info)

        if info[ADDRESSEE_LENGTH + 1] != ':':
            raise InvalidField('Message addressee not terminated: %r' % info)

        addressee = info[1:ADDRESSEE_LENGTH + 1].strip()
        text = info[ADDRESSEE_LENGTH + 2:]

        match = ACKREJ_RE.match(text)
        if match:
            if match.group(1).lower() == 'ack':
                log.debug('Message is an acknowledgement')
                return APRSMessageAck(addressee, match.group(2))
            else:
                log.debug('Message is a rejection')
                return APRSMessageRej(addressee, match.group(2))

        if ACKREJ_BARE_RE.match(text):
            raise InvalidField(
                    'Acknowledgement without a message number: %r' % info
            )

        match = MSGID_RE.search(text)
        if match:
            msgno = _check_msgno(match.group(1))

            # APRS 1.1 Reply-ACK detection
            replyack = match.group(2)
            if replyack:
                replyack = replyack[1:] or True
            else:
                replyack = False
            text = text[:match.start(1)-1]
        else:
            msgno = None
            replyack = False

        # Drop the line ending some stations send
        if text.endswith('\r'):
            text = text[:-1]

        if (msgno is None) and is_bulletin(addressee):
            log.debug('Message is a bulletin')
            return APRSBulletin.from_addressee(addressee, text)

        return cls(addressee=addressee, text=text, msgno=msgno,
                replyack=replyack)

    def __init__(self, addressee, text, msgno=None, replyack=False):
        self.addressee = _check_addressee(addressee)

        text = str(text)
        if len(text) > TEXT_LENGTH:
            raise InvalidLength(
                    'Message text longer than %d characters' % TEXT_LENGTH
            )
        for char in FORBIDDEN:
            if char in text:
                raise InvalidField(
                        'Character %r not permitted in message text' % char
                )
        self.text = text

        if msgno is not None:
            msgno = _check_msgno(msgno)
        elif replyack:
            raise InvalidField('Reply-ack requires a message number')
        self.msgno = msgno

        if (replyack is not True) and replyack:
            replyack = _check_msgno(replyack)
        self.replyack = replyack

    @property
    def is_query(self):
        """
        True if this message is a directed query, ?TYPE?.
        """
        return QUERY_RE.match(self.text) is not None

    @property
    def query_type(self):
        """
        The query type of a directed query, or None.
        """
        match = QUERY_RE.match(self.text)
        if match:
            return match.group(1)
        return None

    def _encode_text(self):
        return self.text

    def _encode(self):
        payload = ':%-9s:%s' % (self.addressee, self._encode_text())

        if self.msgno is not None:
            payload += '{%s' % self.msgno

            if self.replyack is True:
                # We simply support reply-ack
                payload += '}'
            elif self.replyack:
                # We are ACKing with a reply
                payload += '}%s' % self.replyack

        return payload


class APRSMessageAck(APRSMessage):
    """
    Acknowledgement of message number msgno.
    """
    PREFIX = 'ack'

    def __init__(self, addressee, msgno):
        super(APRSMessageAck, self).__init__(
                addressee=addressee,
                text=self.PREFIX + _check_msgno(msgno)
        )
        # The number acknowledged, not one of our own
        self.acked = self.text[len(self.PREFIX):]

    @property
    def msgid(self):
        return self.acked


class APRSMessageRej(APRSMessageAck):
    """
    Rejection of message number msgno.
    """
    PREFIX = 'rej'


class APRSBulletin(APRSMessage):
    """
    A bulletin (BLN0 to BLN9) or an announcement (BLNA to BLNZ), optionally
    addressed to a group of up to 4 characters (e.g. BLN1WX).  Bulletins are
    not acknowledged, so never carry a message number.
    """

    @classmethod
    def from_addressee(cls, addressee, text):
        match = BULLETIN_RE.match(addressee)
        if not match:
            raise InvalidField('Not a bulletin addressee: %r' % addressee)
        return cls(match.group(1), text, group=match.group(2) or None)

    def __init__(self, bulletin_id, text, group=None):
        bulletin_id = str(bulletin_id)
        group = group or ''
        if not BULLETIN_RE.match('BLN%s%s' % (bulletin_id, group)):
            raise InvalidField(
                    'Invalid bulletin identifier %r group %r' \
                    % (bulletin_id, group)
            )

        self.bulletin_id = bulletin_id
        self.group = group or None
        super(APRSBulletin, self).__init__(
                addressee='BLN%s%s' % (bulletin_id, group),
                text=text
        )

    @property
    def is_announcement(self):
        return not self.bulletin_id.isdigit()
