## client.py
# Basic RFC1459 stuff.
import ircbot.protocol
from ircbot.client import BasicClient
from ircbot.events import Event
from . import parsing, protocol


class RFC1459Support(BasicClient):
    """ Basic RFC1459 client. """
    DEFAULT_QUIT_MESSAGE = 'Leaving'

    def __init__(self, nickname, channels=None, strip_trailing_colons=True, quit_message=None, **kwargs):
        super().__init__(nickname, quit_message=quit_message or self.DEFAULT_QUIT_MESSAGE, **kwargs)
        # Channels to join once the server has finished sending its MOTD.
        self.autojoin_channels = parsing.split_channels(channels)
        # Servers do send colons in free text; dropping them is what this client has always done.
        self.strip_trailing_colons = strip_trailing_colons

    ## Connection.

    async def connect(self, hostname=None, port=None, **kwargs):
        port = port or protocol.DEFAULT_PORT

        # Connect...
        await super().connect(hostname, port, **kwargs)
        # And initiate the IRC connection.
        await self.login()

    async def login(self):
        """
        Send our nickname and user information.
        This does not wait for the server: registration is complete once the end of the MOTD arrives.
        """
        await self.rawmsg('NICK', self.nickname)
        await self.rawmsg('USER', self.nickname, '0', '*', trailing=self.nickname)
        await self.fire(Event.LOGIN)

    ## Message handling.

    def _has_message(self):
        """ Whether or not we have messages available for processing. """
        sep = protocol.MINIMAL_LINE_SEPARATOR.encode(self.encoding)
        return sep in self._receive_buffer

    def _next_line(self):
        sep = protocol.MINIMAL_LINE_SEPARATOR.encode(self.encoding)
        message, _, data = self._receive_buffer.partition(sep)
        self._receive_buffer = data
        return ircbot.protocol.decode(message, self.encoding).rstrip('\r')

    def _create_message(self, command, *params, **kwargs):
        return parsing.RFC1459Message(command, params, **kwargs)

    def _parse_message(self, line):
        return parsing.parse_line(line, strip_colons=self.strip_trailing_colons)

    async def on_line(self, line):
        """ PING and ERROR are recognized on the raw line, before any parsing. """
        command = line[:len(protocol.ERROR_COMMAND)].upper()

        if command.startswith(protocol.PING_COMMAND):
            self.logger.debug('<< %s', line)
            await self.pong(line[protocol.PING_TOKEN_LENGTH:])
        elif command.startswith(protocol.ERROR_COMMAND):
            self.logger.debug('<< %s', line)
            await self.fire(Event.ERROR, line)
        else:
            await super().on_line(line)

    ## IRC API.

    async def send_raw(self, message):
        """ Send raw command, terminated by a line separator. """
        if isinstance(message, str) and not message.endswith(protocol.LINE_SEPARATOR):
            message = message.rstrip('\r\n') + protocol.LINE_SEPARATOR
        await super().send_raw(message)

    async def send(self, destination, text):
        """ Message channel or user. """
        await self.rawmsg('PRIVMSG', destination, trailing=text)

    async def send_notice(self, destination, text):
        """ Notice channel or user. """
        await self.rawmsg('NOTICE', destination, trailing=text)

    async def pong(self, payload):
        """ Answer a server PING with its payload, unmodified. """
        await self.send_raw('PONG ' + payload)

    async def join_channel(self, channels):
        """
        Join one channel or a comma-separated list of them ("#one, #two").
        A single JOIN is sent for all of them; observers hear about each channel separately.
        """
        channels = parsing.split_channels(channels)
        if not channels:
            return

        await self.rawmsg('JOIN', protocol.CHANNEL_LIST_SEPARATOR.join(channels))
        for channel in channels:
            # Ask for the topic, so the topic events follow the join.
            await self.rawmsg('TOPIC', channel)
            await self.fire(Event.JOIN_CHANNEL, channel)

    async def leave_channel(self, channels):
        """ Leave one channel or a comma-separated list of them. """
        channels = parsing.split_channels(channels)
        if not channels:
            return

        await self.rawmsg('PART', protocol.CHANNEL_LIST_SEPARATOR.join(channels))
        for channel in channels:
            await self.fire(Event.PART_CHANNEL, channel)

    async def change_nick(self, nickname):
        """
        Request a new nickname.
        Users should only rely on the nickname actually being changed when receiving a nick change event.
        """
        if self.connected:
            await self.rawmsg('NICK', nickname)

    async def quit(self):
        """ Quit network. """
        await self.rawmsg('QUIT', trailing=self.state.quit_message)

    ## Message handlers.

    async def on_raw_privmsg(self, message):
        """ PRIVMSG command. """
        target = message.params[0] if message.params else ''

        if self.is_same_nick(target, self.nickname):
            await self.fire(Event.QUERY_MESSAGE, message)
        else:
            await self.fire(Event.CHANNEL_MESSAGE, message)
        await self.fire(Event.ANY_MESSAGE, message)

    async def on_raw_notice(self, message):
        """ NOTICE command. """
        await self.fire(Event.NOTICE, message)

    async def on_raw_nick(self, message):
        """ NICK command. Ours only changes here, once the server says so. """
        old = message.sender_nick
        # Some servers send the new nickname as a middle parameter.
        new = message.trailing or (message.params[0] if message.params else '')

        if self.is_same_nick(old, self.nickname):
            self.state.nickname = new
        await self.fire(Event.NICK_CHANGE, old, new)

    async def on_raw_331(self, message):
        """ No topic set. """
        if len(message.params) == 2:
            await self.fire(Event.TOPIC_NOT_SET, message.params[1], message.trailing)

    async def on_raw_332(self, message):
        """ Topic of channel. """
        if len(message.params) == 2:
            await self.fire(Event.TOPIC, message.params[1], message.trailing)

    async def on_raw_353(self, message):
        """ Response to /NAMES. """
        if len(message.params) == 3 and message.params[2].startswith('#'):
            await self.fire(Event.NAME_REPLY, message.params[2], message.trailing.split())

    async def on_raw_372(self, message):
        """ MOTD line. """
        await self.fire(Event.MOTD, message)

    async def on_raw_376(self, message):
        """ End of MOTD: the server is ready for us to join channels. """
        await self.fire(Event.END_OF_MOTD)
        await self.join_channel(self.autojoin_channels)

    async def on_nickname_error(self, message):
        """ Nickname could not be used, or we are not allowed to change it. """
        await self.fire(Event.ERROR, protocol.ERROR_REPLIES[message.command])

    on_raw_431 = on_nickname_error  # ERR_NONICKNAMEGIVEN
    on_raw_432 = on_nickname_error  # ERR_ERRONEUSNICKNAME
    on_raw_433 = on_nickname_error  # ERR_NICKNAMEINUSE
    on_raw_436 = on_nickname_error  # ERR_NICKCOLLISION
    on_raw_437 = on_nickname_error  # ERR_UNAVAILRESOURCE
    on_raw_484 = on_nickname_error  # ERR_RESTRICTED
