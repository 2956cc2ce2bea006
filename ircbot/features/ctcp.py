## ctcp.py
# Client-to-Client-Protocol (CTCP) support.
import datetime
import re

import ircbot.protocol
from ircbot.events import Event
from ircbot.features import rfc1459

__all__ = [ 'CTCPSupport' ]


CTCP_DELIMITER = '\x01'
CTCP_ESCAPE_CHAR = '\x16'
CTCP_ESCAPE_PATTERN = re.compile(re.escape(CTCP_ESCAPE_CHAR) + '(.)', re.DOTALL)
CTCP_UNESCAPES = { '0': '\0', 'n': '\n', 'r': '\r', CTCP_ESCAPE_CHAR: CTCP_ESCAPE_CHAR }


class CTCPSupport(rfc1459.RFC1459Support):
    """ Support for CTCP messages. VERSION, TIME and PING are answered automatically, ACTIONs become events. """

    ## Callbacks.

    async def on_ctcp(self, by, what, contents):
        """
        Callback called when the user received a CTCP request.
        Dispatches to on_ctcp_request_<type> if such a handler exists; other requests are dropped.
        """
        attr = 'on_ctcp_request_' + ircbot.protocol.identifierify(what)
        if hasattr(self, attr):
            await getattr(self, attr)(by, contents)
        else:
            self.logger.debug('Ignoring unsupported CTCP request %s from %s.', what, by)

    async def on_ctcp_response(self, by, response):
        """ Callback called when the user received a CTCP response. Only NOTICEs carry these. """
        await self.fire(Event.CTCP_RESPONSE, by, response)

    ## Request handlers. Only methods named on_ctcp_request_<type> can be reached by remote users.

    async def on_ctcp_request_version(self, by, contents):
        """ Built-in CTCP version as some networks seem to require it. """
        await self.send_ctcp_response(by, 'VERSION ' + self.version_reply)

    async def on_ctcp_request_time(self, by, contents):
        await self.send_ctcp_response(by, 'TIME ' + datetime.datetime.now().strftime('%c'))

    async def on_ctcp_request_ping(self, by, contents):
        if contents:
            await self.send_ctcp_response(by, 'PING ' + contents)
        else:
            await self.send_ctcp_response(by, 'PING')

    async def on_ctcp_request_action(self, by, contents):
        await self.fire(Event.ACTION, by, contents or '')

    @property
    def version_reply(self):
        """ What we answer CTCP VERSION requests with. """
        if self.state.version_reply:
            return self.state.version_reply
        import ircbot
        return '{name} v{ver}'.format(name=ircbot.__name__, ver=ircbot.__version__)

    ## IRC API.

    async def send_ctcp_request(self, user, text):
        """ Send a CTCP request ("VERSION", "PING 1234", ...) to a user or channel. """
        await self.send(user, construct_ctcp(text))

    async def send_ctcp_response(self, user, text):
        """ Send a CTCP reply to a user. """
        await self.send_notice(user, construct_ctcp(text))

    async def send_action(self, destination, text):
        """ Send an ACTION: "shrugs" shows up as "<nickname> shrugs" for everyone else. """
        await self.send_ctcp_request(destination, 'ACTION ' + text)

    ## Handler overrides.

    async def on_raw_privmsg(self, message):
        """ Modify PRIVMSG to redirect CTCP messages. """
        if is_ctcp(message.trailing):
            what, contents = parse_ctcp(message.trailing)
            await self.on_ctcp(message.sender_nick, what, contents)
            await self.fire(Event.ANY_MESSAGE, message)
        else:
            await super().on_raw_privmsg(message)

    async def on_raw_notice(self, message):
        """ Modify NOTICE to redirect CTCP messages. """
        if is_ctcp(message.trailing):
            await self.on_ctcp_response(message.sender_nick, strip_ctcp(message.trailing))
        else:
            await super().on_raw_notice(message)


## Helpers.

def is_ctcp(message):
    """ Check if message follows the CTCP format. """
    return message.startswith(CTCP_DELIMITER)

def construct_ctcp(*parts):
    """ Construct CTCP message. """
    message = ' '.join(parts)
    message = message.replace(CTCP_ESCAPE_CHAR, CTCP_ESCAPE_CHAR + CTCP_ESCAPE_CHAR)
    message = message.replace('\0', CTCP_ESCAPE_CHAR + '0')
    message = message.replace('\n', CTCP_ESCAPE_CHAR + 'n')
    message = message.replace('\r', CTCP_ESCAPE_CHAR + 'r')
    return CTCP_DELIMITER + message + CTCP_DELIMITER

def strip_ctcp(message):
    """ Remove the delimiters around a CTCP message. """
    if message.startswith(CTCP_DELIMITER):
        message = message[1:]
    if message.endswith(CTCP_DELIMITER):
        message = message[:-1]
    return message

def parse_ctcp(query):
    """ Strip and de-quote CTCP messages. Returns the upper-cased type and its contents, if any. """
    query = strip_ctcp(query)
    query = CTCP_ESCAPE_PATTERN.sub(lambda match: CTCP_UNESCAPES.get(match.group(1), match.group(1)), query)
    if ' ' in query:
        what, contents = query.split(' ', 1)
        return what.upper(), contents
    return query.upper(), None
