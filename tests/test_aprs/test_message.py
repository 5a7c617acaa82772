#!/usr/bin/env python3

from ax25codec.aprs import decode
from ax25codec.aprs.message import APRSMessage, APRSMessageAck, \
        APRSMessageRej, APRSBulletin, is_bulletin
from ax25codec.errors import InvalidDti, InvalidField, InvalidLength

"""
Message handling tests.
"""


def test_message_decode():
    """
    Test we can decode a message with a message number.
    """
    msg = APRSMessage.decode(':WB2OSZ-7 :Hello{001}')
    assert type(msg) is APRSMessage
    assert msg.addressee == 'WB2OSZ-7'
    assert msg.text == 'Hello'
    assert msg.msgno == '001'
    assert msg.encode() == b':WB2OSZ-7 :Hello{001}'


def test_message_decode_plain_msgno():
    """
    Test a message number without a reply-ack marker.
    """
    msg = APRSMessage.decode(':WB2OSZ-7 :Hello{001')
    assert msg.msgno == '001'
    assert msg.replyack is False
    assert str(msg) == ':WB2OSZ-7 :Hello{001'


def test_message_decode_replyack():
    """
    Test an APRS 1.1 reply-ack is decoded.
    """
    msg = APRSMessage.decode(':WB2OSZ-7 :Hello{AB}CD')
    assert msg.msgno == 'AB'
    assert msg.replyack == 'CD'
    assert str(msg) == ':WB2OSZ-7 :Hello{AB}CD'


def test_message_decode_no_msgno():
    """
    Test a message without a message number.
    """
    msg = APRSMessage.decode(':WB2OSZ-7 :Hello\r')
    assert msg.text == 'Hello'
    assert msg.msgno is None
    assert str(msg) == ':WB2OSZ-7 :Hello'


def test_message_encode():
    """
    Test the addressee is padded to 9 characters.
    """
    msg = APRSMessage('N0CALL', 'Test message', msgno='42')
    assert str(msg) == ':N0CALL   :Test message{42'


def test_message_decode_short():
    """
    Test truncated messages are rejected.
    """
    try:
        APRSMessage.decode(':ABC')
        assert False, 'Should not have worked'
    except InvalidLength as e:
        assert str(e) == "Message too short: ':ABC'"


def test_message_decode_unterminated():
    """
    Test the addressee must be followed by a colon.
    """
    try:
        APRSMessage.decode(':WB2OSZ-7  Hello')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == \
                "Message addressee not terminated: ':WB2OSZ-7  Hello'"


def test_message_decode_wrong_dti():
    """
    Test the decoder refuses other data types.
    """
    try:
        APRSMessage.decode('>status')
        assert False, 'Should not have worked'
    except InvalidDti as e:
        assert str(e) == "Not a message: '>status'"


def test_message_text_too_long():
    """
    Test over-long message text is rejected.
    """
    try:
        APRSMessage('N0CALL', 'x' * 68)
        assert False, 'Should not have worked'
    except InvalidLength as e:
        assert str(e) == 'Message text longer than 67 characters'


def test_message_text_forbidden():
    """
    Test forbidden characters are rejected from message text.
    """
    try:
        APRSMessage('N0CALL', 'a|b')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == "Character '|' not permitted in message text"


def test_message_addressee_too_long():
    """
    Test over-long addressees are rejected.
    """
    try:
        APRSMessage('TOOLONGCALL', 'x')
        assert False, 'Should not have worked'
    except InvalidLength as e:
        assert str(e) == "Addressee 'TOOLONGCALL' too long"


def test_message_bad_msgno():
    """
    Test message numbers are 1 to 5 alphanumeric characters.
    """
    try:
        APRSMessage('N0CALL', 'x', msgno='123456')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == \
                "Message number must be 1-5 alphanumeric characters: '123456'"


def test_message_replyack_needs_msgno():
    """
    Test a reply-ack needs a message number.
    """
    try:
        APRSMessage('N0CALL', 'x', replyack=True)
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == 'Reply-ack requires a message number'


def test_ack_decode():
    """
    Test we can decode an acknowledgement.
    """
    msg = APRSMessage.decode(':WB2OSZ-7 :ack001')
    assert isinstance(msg, APRSMessageAck)
    assert msg.acked == '001'
    assert msg.msgid == '001'
    assert msg.msgno is None
    assert str(msg) == ':WB2OSZ-7 :ack001'


def test_rej_decode():
    """
    Test we can decode a rejection, in either case.
    """
    msg = APRSMessage.decode(':WB2OSZ-7 :REJ42')
    assert isinstance(msg, APRSMessageRej)
    assert msg.acked == '42'
    assert str(msg) == ':WB2OSZ-7 :rej42'


def test_ack_without_number():
    """
    Test an acknowledgement without a message number is rejected.
    """
    for text in ('rej', 'ACK'):
        info = ':WB2OSZ-7 :%s' % text
        try:
            APRSMessage.decode(info)
            assert False, 'Should not have accepted %r' % info
        except InvalidField as e:
            assert str(e) == \
                    'Acknowledgement without a message number: %r' % info


def test_bulletin_decode():
    """
    Test we can decode a bulletin.
    """
    msg = APRSMessage.decode(':BLN1     :Snow expected')
    assert isinstance(msg, APRSBulletin)
    assert msg.bulletin_id == '1'
    assert msg.group is None
    assert msg.is_announcement is False
    assert msg.text == 'Snow expected'
    assert str(msg) == ':BLN1     :Snow expected'


def test_announcement_decode():
    """
    Test we can decode a group announcement.
    """
    msg = APRSMessage.decode(':BLNAWX   :Net tonight')
    assert isinstance(msg, APRSBulletin)
    assert msg.bulletin_id == 'A'
    assert msg.group == 'WX'
    assert msg.is_announcement is True


def test_bulletin_with_msgno_is_message():
    """
    Test a BLN addressee with a message number is a plain message.
    """
    msg = APRSMessage.decode(':BLN1     :Hello{1')
    assert type(msg) is APRSMessage


def test_bulletin_bad_id():
    """
    Test bulletin identifiers are validated.
    """
    try:
        APRSBulletin('!', 'text')
        assert False, 'Should not have worked'
    except InvalidField as e:
        assert str(e) == "Invalid bulletin identifier '!' group ''"


def test_is_bulletin():
    """
    Test bulletin addressee detection.
    """
    assert is_bulletin('BLN0')
    assert is_bulletin('BLNQ     ')
    assert not is_bulletin('BLNX12345')
    assert not is_bulletin('N0CALL')


def test_query_message():
    """
    Test directed queries are recognised.
    """
    msg = APRSMessage('N0CALL', '?APRSP?')
    assert msg.is_query
    assert msg.query_type == 'APRSP'

    msg = APRSMessage('N0CALL', 'APRSP')
    assert not msg.is_query
    assert msg.query_type is None


def test_message_dispatch():
    """
    Test messages are dispatched by the top-level decoder.
    """
    msg = decode(b':WB2OSZ-7 :Hello{001}')
    assert isinstance(msg, APRSMessage)
    assert msg == APRSMessage('WB2OSZ-7', 'Hello', msgno='001',
            replyack=True)
