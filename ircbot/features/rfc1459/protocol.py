## protocol.py
# RFC1459 protocol constants.
import re


# While this *technically* is supposed to be 143, I've yet to see a server that actually uses those.
DEFAULT_PORT = 6667


## Limits.

MESSAGE_LENGTH_LIMIT = 512


## Message parsing.

LINE_SEPARATOR = '\r\n'
MINIMAL_LINE_SEPARATOR = '\n'

FORBIDDEN_CHARACTERS = { '\r', '\n', '\0' }
PREFIX_MARKER = ':'
USER_SEPARATOR = '!'
TRAILING_SEPARATOR = ' :'
TRAILING_PREFIX = ':'
ARGUMENT_SEPARATOR = ' '
CHANNEL_LIST_SEPARATOR = ','

COMMAND_PATTERN = re.compile('^([a-zA-Z]+|[0-9]+)$', re.UNICODE)

# Lines the dispatcher answers before parsing.
PING_COMMAND = 'PING'
ERROR_COMMAND = 'ERROR'
PING_TOKEN_LENGTH = len('PING ')


## Numeric replies.

# Nickname and registration errors, reported through the error event by name.
ERROR_REPLIES = {
    '431': 'ERR_NONICKNAMEGIVEN',
    '432': 'ERR_ERRONEUSNICKNAME',
    '433': 'ERR_NICKNAMEINUSE',
    '436': 'ERR_NICKCOLLISION',
    '437': 'ERR_UNAVAILRESOURCE',
    '484': 'ERR_RESTRICTED',
}
