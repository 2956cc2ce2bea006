import pytest

from ircbot.protocol import ProtocolViolation
from ircbot.features.rfc1459.parsing import RFC1459Message, parse_line, split_channels


## Parsing.


def test_parse_full_line():
    message = parse_line(':nick!user@host COMMAND p1 p2 :trailing text')
    assert message.prefix == 'nick!user@host'
    assert message.sender_nick == 'nick'
    assert message.command == 'COMMAND'
    assert message.params == ('p1', 'p2')
    assert message.trailing == 'trailing text'


def test_parse_without_prefix():
    message = parse_line('NOTICE AUTH :*** Looking up your hostname')
    assert message.prefix == ''
    assert message.sender_nick == ''
    assert message.command == 'NOTICE'
    assert message.params == ('AUTH',)
    assert message.trailing == '*** Looking up your hostname'


def test_parse_without_trailing():
    message = parse_line(':server.example.net MODE TestBot +i')
    assert message.sender_nick == 'server.example.net'
    assert message.params == ('TestBot', '+i')
    assert message.trailing == ''


def test_parse_without_parameters():
    message = parse_line(':nick!user@host QUIT')
    assert message.command == 'QUIT'
    assert message.params == ()
    assert message.trailing == ''


def test_parse_only_trailing():
    message = parse_line(':old!user@host NICK :new')
    assert message.params == ()
    assert message.trailing == 'new'


def test_parse_numeric_stays_text():
    message = parse_line(':irc.example.net 353 TestBot = #lobby :@op +voice user')
    assert message.command == '353'
    assert message.is_numeric
    assert message.params == ('TestBot', '=', '#lobby')
    assert message.trailing == '@op +voice user'


def test_parse_strips_line_separator():
    assert parse_line(':a!b@c PRIVMSG #chan :hello\r\n').trailing == 'hello'
    assert parse_line(':a!b@c PRIVMSG #chan :hello\n').trailing == 'hello'


def test_parse_strips_colons_from_trailing():
    message = parse_line(':a!b@c PRIVMSG #chan :see http://example.com :)')
    assert message.trailing == 'see http//example.com )'


def test_parse_keeps_colons_when_asked():
    message = parse_line(':a!b@c PRIVMSG #chan :see http://example.com :)', strip_colons=False)
    assert message.trailing == 'see http://example.com :)'


def test_parse_repeated_spaces():
    message = parse_line(':a!b@c  MODE  #chan  +o  nick')
    assert message.command == 'MODE'
    assert message.params == ('#chan', '+o', 'nick')


def test_parse_sender_nick_without_user():
    assert parse_line(':irc.example.net 001 TestBot :Welcome').sender_nick == 'irc.example.net'


def test_parse_bytes_with_fallback_encoding():
    message = RFC1459Message.parse(b':a!b@c PRIVMSG #chan :caf\xe9\r\n')
    assert message.trailing == 'caf\xe9'


def test_parse_keeps_raw_line():
    assert parse_line(':a!b@c PRIVMSG #chan :hi\r\n').raw == ':a!b@c PRIVMSG #chan :hi'


@pytest.mark.parametrize('line', [
    '',
    '\r\n',
    '   ',
    ':prefix-only',
    ':server :only trailing',
])
def test_parse_malformed(line):
    with pytest.raises(ProtocolViolation):
        parse_line(line)


def test_message_is_read_only():
    message = parse_line(':a!b@c PRIVMSG #chan :hi')
    with pytest.raises(AttributeError):
        message.command = 'NOTICE'
    with pytest.raises(AttributeError):
        message.sender_nick = 'b'


## Construction.


def test_construct_message():
    message = RFC1459Message('PRIVMSG', ['#chan'], trailing='hello world')
    assert message.construct() == 'PRIVMSG #chan :hello world\r\n'


def test_construct_without_trailing():
    assert RFC1459Message('NICK', ['newnick']).construct() == 'NICK newnick\r\n'


def test_construct_empty_trailing():
    assert RFC1459Message('PRIVMSG', ['#chan'], trailing='').construct() == 'PRIVMSG #chan :\r\n'


def test_construct_with_prefix():
    message = RFC1459Message('PRIVMSG', ['#chan'], prefix='a!b@c', trailing='hi')
    assert message.construct() == ':a!b@c PRIVMSG #chan :hi\r\n'


def test_construct_reparses_to_same_message():
    message = RFC1459Message('USER', ['bot', '0', '*'], trailing='bot')
    parsed = parse_line(message.construct())
    assert parsed.command == message.command
    assert parsed.params == message.params
    assert parsed.trailing == message.trailing


def test_construct_invalid_command():
    with pytest.raises(ProtocolViolation):
        RFC1459Message('PRIV MSG', ['#chan']).construct()


def test_construct_parameter_with_space():
    with pytest.raises(ProtocolViolation):
        RFC1459Message('JOIN', ['#a #b']).construct()


def test_construct_forbidden_characters():
    with pytest.raises(ProtocolViolation):
        RFC1459Message('PRIVMSG', ['#chan'], trailing='one\r\nQUIT').construct()


def test_construct_too_long():
    with pytest.raises(ProtocolViolation):
        RFC1459Message('PRIVMSG', ['#chan'], trailing='x' * 600).construct()


def test_construct_forced():
    message = RFC1459Message('PRIVMSG', ['#chan'], trailing='x' * 600)
    assert message.construct(force=True).endswith('x\r\n')


## Channel lists.


def test_split_channels():
    assert split_channels('#a, #b') == ['#a', '#b']
    assert split_channels('#a') == ['#a']
    assert split_channels(' #a ,, #b ,') == ['#a', '#b']
    assert split_channels(['#a', '#b']) == ['#a', '#b']
    assert split_channels(None) == []
    assert split_channels('') == []
