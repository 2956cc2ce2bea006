## parsing.py
# RFC1459 parsing and construction.
import ircbot.protocol
from . import protocol


class RFC1459Message(ircbot.protocol.Message):
    """
    A single IRC protocol line: [:prefix ]command[ param1 param2 ...][ :trailing]

    Messages are read-only once created. A trailing of None means the line had no trailing part at all,
    which only matters when constructing the line again; `trailing` itself always reads as a string.
    """
    def __init__(self, command, params=(), prefix=None, trailing=None, _raw=None):
        self._command = command
        self._params = tuple(params)
        self._prefix = prefix or ''
        self._trailing = trailing
        self._raw = _raw

    @property
    def command(self):
        """ Textual command (PRIVMSG, NICK, ...) or three-digit numeric reply code. """
        return self._command

    @property
    def params(self):
        """ Middle parameters, in order. Does not include the trailing part. """
        return self._params

    @property
    def prefix(self):
        """ Origin of the message (nick!user@host or server name), without the leading colon. """
        return self._prefix

    @property
    def trailing(self):
        return self._trailing or ''

    @property
    def sender_nick(self):
        """ Nickname part of the prefix. Empty for messages without prefix. """
        if not self._prefix:
            return ''
        return self._prefix.split(protocol.USER_SEPARATOR, 1)[0].replace(protocol.PREFIX_MARKER, '')

    @property
    def raw(self):
        """ The line this message was parsed from, if any. """
        if self._raw is None:
            return self.construct(force=True).rstrip(protocol.LINE_SEPARATOR)
        return self._raw

    @property
    def is_numeric(self):
        return str(self._command).isdigit()

    @classmethod
    def parse(cls, line, encoding=ircbot.protocol.DEFAULT_ENCODING, strip_colons=True):
        """
        Parse given line into IRC message structure.
        Accepts both bytes and already decoded text. Returns a Message.
        """
        return parse_line(ircbot.protocol.decode(line, encoding), strip_colons=strip_colons)

    def construct(self, force=False):
        """ Construct a raw IRC message. """
        # Sanity check for command.
        command = str(self._command)
        if not protocol.COMMAND_PATTERN.match(command) and not force:
            raise ircbot.protocol.ProtocolViolation('The constructed command does not follow the command pattern ({pat})'.format(pat=protocol.COMMAND_PATTERN.pattern), message=command)
        message = command.upper()

        # Add parameters.
        for param in self._params:
            if (not param or protocol.ARGUMENT_SEPARATOR in param or param.startswith(protocol.TRAILING_PREFIX)) and not force:
                raise ircbot.protocol.ProtocolViolation('Only the trailing part of an IRC message can contain spaces or start with a colon.', message=param)
            message += protocol.ARGUMENT_SEPARATOR + param

        if self._trailing is not None:
            message += protocol.TRAILING_SEPARATOR + self._trailing

        # Prepend source.
        if self._prefix:
            message = protocol.PREFIX_MARKER + self._prefix + protocol.ARGUMENT_SEPARATOR + message

        # Sanity check for characters.
        if any(ch in message for ch in protocol.FORBIDDEN_CHARACTERS) and not force:
            raise ircbot.protocol.ProtocolViolation('The constructed message contains forbidden characters ({chs}).'.format(chs=', '.join(repr(ch) for ch in sorted(protocol.FORBIDDEN_CHARACTERS))), message=message)

        # Sanity check for length.
        message += protocol.LINE_SEPARATOR
        if len(message.encode(ircbot.protocol.DEFAULT_ENCODING)) > protocol.MESSAGE_LENGTH_LIMIT and not force:
            raise ircbot.protocol.ProtocolViolation('The constructed message is too long. ({len} > {maxlen})'.format(len=len(message), maxlen=protocol.MESSAGE_LENGTH_LIMIT), message=message)

        return message

    def __repr__(self):
        return '{cls}(command={cmd!r}, params={params!r}, prefix={prefix!r}, trailing={trailing!r})'.format(
            cls=self.__class__.__name__, cmd=self._command, params=self._params,
            prefix=self._prefix, trailing=self._trailing)


# Parsing.

def parse_line(line, strip_colons=True):
    """
    Parse one decoded protocol line into an RFC1459Message.

    If `strip_colons` is set, every colon in the trailing part is dropped, so "see http://x" arrives as "see http//x".
    Raises ProtocolViolation when no command can be found.
    """
    raw = line

    # Strip message separator.
    if line.endswith(protocol.LINE_SEPARATOR):
        line = line[:-len(protocol.LINE_SEPARATOR)]
    elif line.endswith(protocol.MINIMAL_LINE_SEPARATOR):
        line = line[:-len(protocol.MINIMAL_LINE_SEPARATOR)]

    if not line.strip():
        raise ircbot.protocol.ProtocolViolation('Improper IRC message format: empty line.', message=raw)

    # Format: (:prefix )?command( param)*( :trailing)?
    prefix = ''
    start = 0
    if line.startswith(protocol.PREFIX_MARKER):
        prefix_end = line.find(protocol.ARGUMENT_SEPARATOR)
        if prefix_end < 0:
            raise ircbot.protocol.ProtocolViolation('Improper IRC message format: prefix without command.', message=raw)
        prefix = line[1:prefix_end]
        start = prefix_end + 1

    # The separator right after the prefix counts too: ":server :text" has no command.
    trailing = None
    trailing_start = line.find(protocol.TRAILING_SEPARATOR, max(start - 1, 0))
    if trailing_start >= 0:
        trailing = line[trailing_start + len(protocol.TRAILING_SEPARATOR):]
    else:
        trailing_start = len(line)

    parts = [part for part in line[start:trailing_start].split(protocol.ARGUMENT_SEPARATOR) if part]
    if not parts:
        raise ircbot.protocol.ProtocolViolation('Improper IRC message format: no command.', message=raw)
    command, params = parts[0], parts[1:]

    if trailing is not None and strip_colons:
        trailing = trailing.replace(protocol.TRAILING_PREFIX, '')

    return RFC1459Message(command, params, prefix=prefix, trailing=trailing, _raw=line)


def split_channels(channels):
    """ Split a channel or comma-separated list of channels, dropping whitespace and empty entries. """
    if not channels:
        return []
    if not isinstance(channels, str):
        channels = protocol.CHANNEL_LIST_SEPARATOR.join(channels)
    channels = ''.join(channels.split())
    return [channel for channel in channels.split(protocol.CHANNEL_LIST_SEPARATOR) if channel]
