## client.py
# Basic IRC client implementation.
import asyncio
import logging
import signal

from . import connection, protocol
from .events import Event, EventTable
from .models import ConnectionState

__all__ = ['Error', 'NotConnected', 'AlreadyConnected', 'BasicClient']


class Error(Exception):
    """ Base class for all ircbot errors. """
    pass


class NotConnected(Error):
    def __init__(self):
        super().__init__('Not connected to a server.')


class AlreadyConnected(Error):
    def __init__(self, hostname):
        super().__init__('Already connected to {}, disconnect first.'.format(hostname))
        self.hostname = hostname


class BasicClient:
    """
    Base IRC client class.
    This class on its own is not complete: in order to be able to run properly, _has_message, _next_line, _parse_message and _create_message have to be overloaded.
    """
    # How often a blocked read wakes up to look at the shutdown flag.
    SHUTDOWN_POLL_INTERVAL = 0.5
    SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(self, nickname, owners=None, quit_message=None, version_reply=None,
                 encoding=protocol.DEFAULT_ENCODING, **kwargs):
        """ Create a client. """
        self.logger = logging.getLogger(__name__)
        self.state = ConnectionState(nickname, owners=owners, quit_message=quit_message,
                                     version_reply=version_reply)
        self.encoding = encoding
        self.events = EventTable()
        self._shutdown_task = None
        self._reset_connection_attributes()

        if kwargs:
            self.logger.warning('Unused arguments: %s', ', '.join(kwargs.keys()))

    def _reset_connection_attributes(self):
        """ Reset connection attributes. """
        self.connection = None
        self._read_task = None
        self._receive_buffer = b''
        self._handler_top_level = False

    ## Connection.

    def run(self, *args, handle_signals=True, **kwargs):
        """ Connect and handle the connection until it is closed. """
        asyncio.run(self._run(*args, handle_signals=handle_signals, **kwargs))

    async def _run(self, *args, handle_signals=True, **kwargs):
        if handle_signals:
            self.install_signal_handlers()
        await self.connect(*args, **kwargs)
        await self.wait_closed()

    def install_signal_handlers(self):
        """ Have process termination signals shut the client down cleanly. """
        loop = asyncio.get_running_loop()
        for sig in self.SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self._on_shutdown_signal)
            except (NotImplementedError, RuntimeError):
                # Not available on this platform or outside the main thread.
                self.logger.debug('Cannot install handler for signal %s.', sig)

    def _on_shutdown_signal(self):
        # The loop only keeps a weak reference to tasks: hold on to it until shutdown has finished.
        if self._shutdown_task is None or self._shutdown_task.done():
            self._shutdown_task = asyncio.ensure_future(self.shutdown())
        return self._shutdown_task

    async def connect(self, hostname=None, port=None, **kwargs):
        """ Connect to IRC server. """
        if not hostname or not port:
            raise ValueError('Have to specify hostname and port.')
        if self.connected:
            raise AlreadyConnected(self.connection.hostname)

        self._reset_connection_attributes()
        await self._connect(hostname=hostname, port=port, **kwargs)

        self.logger = logging.getLogger(self.__class__.__name__ + ':' + hostname.lower())
        self.state.connected = True
        self.state.receiving = True
        self.state.shutdown_requested = False

        await self.on_connect()
        self._read_task = asyncio.ensure_future(self.handle_forever())

    async def _connect(self, hostname, port, source_address=None):
        """ Connect to IRC host. """
        self.connection = connection.Connection(hostname, port, source_address=source_address)
        await self.connection.connect()

    async def disconnect(self):
        """ Disconnect from server: announce it, say goodbye, and release the socket no matter what. """
        if not self.connected:
            return
        self.state.receiving = False

        try:
            await self.on_disconnect()
            await self.quit()
        except (NotConnected, ConnectionError, OSError) as e:
            self.logger.warning('Could not say goodbye to server: %s', e)
        finally:
            try:
                await self.connection.disconnect()
            finally:
                self.state.reset()

    async def shutdown(self):
        """
        Stop reading and disconnect. Safe to call from any task, including while a read is pending,
        and more than once.
        """
        if self.state.shutdown_requested:
            return
        self.state.shutdown_requested = True
        self.state.receiving = False

        # Closing the socket wakes up the pending read.
        await self.disconnect()

        task = self._read_task
        if task and task is not asyncio.current_task() and not task.done():
            _, pending = await asyncio.wait([task], timeout=self.SHUTDOWN_POLL_INTERVAL * 2)
            for task in pending:
                task.cancel()

    async def wait_closed(self):
        """ Wait until the read loop of the current connection has ended. """
        if self._read_task is not None:
            await asyncio.wait([self._read_task])

    ## Connection state.

    @property
    def connected(self):
        """ Whether or not we are connected. """
        return bool(self.state.connected and self.connection and self.connection.connected)

    @property
    def nickname(self):
        """ Our nickname, as last confirmed by the server. """
        return self.state.nickname

    def change_nick_offline(self, nickname):
        """ Change the nickname used for the next connection. Does nothing while connected. """
        if not self.connected:
            self.state.nickname = nickname

    def is_owner(self, nickname):
        return nickname in self.state.owners

    def add_owner(self, nickname):
        self.state.owners.add(nickname)

    def remove_owner(self, nickname):
        self.state.owners.discard(nickname)

    def set_quit_message(self, message):
        self.state.quit_message = message

    def set_version_reply(self, version):
        self.state.version_reply = version

    def is_same_nick(self, left, right):
        """ Check if given nicknames are equal. """
        return left == right

    ## Events.

    def on(self, event):
        """
        Decorator to subscribe a function to an event:

            @client.on(Event.CHANNEL_MESSAGE)
            async def greet(message): ...
        """
        def inner(callback):
            return self.events.subscribe(event, callback)
        return inner

    async def fire(self, event, *args):
        """ Notify observers of event. """
        await self.events.fire(event, *args)

    ## IRC API.

    async def send_raw(self, message):
        """ Send raw command. """
        await self._send(message)

    async def rawmsg(self, command, *args, **kwargs):
        """ Send raw message. """
        message = self._create_message(command, *args, **kwargs)
        await self._send(message.construct())

    async def quit(self):
        """ Announce we are leaving the server. Overloaded by protocol implementations. """
        pass

    ## Overloadable callbacks.

    async def on_connect(self):
        """ Callback called when the client has connected successfully. """
        await self.fire(Event.CONNECT)

    async def on_disconnect(self):
        """ Callback called right before the client disconnects. """
        await self.fire(Event.DISCONNECT)

    ## Message dispatch.

    def _has_message(self):
        """ Whether or not we have messages available for processing. """
        raise NotImplementedError()

    def _next_line(self):
        """ Take the next complete line out of the receive buffer. """
        raise NotImplementedError()

    def _create_message(self, command, *params, **kwargs):
        raise NotImplementedError()

    def _parse_message(self, line):
        raise NotImplementedError()

    async def _send(self, input):
        if not self.connected:
            raise NotConnected()

        if not isinstance(input, (bytes, str)):
            input = str(input)
        if isinstance(input, str):
            input = input.encode(self.encoding)

        self.logger.debug('>> %s', input.decode(self.encoding).rstrip('\r\n'))
        await self.connection.send(input)

    async def handle_forever(self):
        """ Handle data until the connection is closed or we are told to stop. """
        while self.connected and self.state.receiving:
            try:
                data = await self.connection.recv(timeout=self.SHUTDOWN_POLL_INTERVAL)
            except asyncio.TimeoutError:
                # Nothing yet: check whether we should still be receiving.
                continue
            except (ConnectionError, OSError, asyncio.IncompleteReadError, ValueError) as e:
                self.logger.debug('Read failed, closing connection: %s', e)
                data = None

            if not data:
                break
            await self.on_data(data)

        # The server went away or the socket broke: go through the regular disconnect.
        if self.connected and not self.state.shutdown_requested:
            await self.disconnect()

    ## Raw message handlers.

    async def on_data(self, data):
        """ Handle received data. """
        self._receive_buffer += data

        while self._has_message():
            await self.on_line(self._next_line())

    async def on_line(self, line):
        """ Handle a single decoded line. """
        try:
            message = self._parse_message(line)
        except protocol.ProtocolViolation as e:
            self.logger.warning('Encountered invalid IRC message from server: %r (%s)', line, e)
            await self.fire(Event.ERROR, line)
            return

        await self.on_raw(message)

    async def on_raw(self, message):
        """ Handle a single message. """
        self.logger.debug('<< %s', message.raw)

        # Invoke dispatcher, if we have one.
        method = 'on_raw_' + str(message.command).lower()
        try:
            # Set _top_level so __getattr__() can decide whether to return on_unknown or _ignored for unknown handlers.
            # The reason for this is that features can always call super().on_raw_* safely and thus don't need to care for other features,
            # while unknown messages for which no handlers exist at all are still logged.
            self._handler_top_level = True
            handler = getattr(self, method)
            self._handler_top_level = False

            await handler(message)
        except Exception:
            self.logger.exception('Failed to execute %s handler.', method)
        finally:
            self._handler_top_level = False

    async def on_unknown(self, message):
        """ Unknown command. """
        self.logger.debug('Unhandled command: [%s] %s %s', message.prefix, message.command,
                          message.params)

    async def _ignored(self, message):
        """ Ignore message. """
        pass

    def __getattr__(self, attr):
        """ Return on_unknown or _ignored for unknown handlers, depending on the invocation type. """
        # Is this a raw handler?
        if attr.startswith('on_raw_'):
            # Are we in on_raw() trying to find any message handler?
            if self.__dict__.get('_handler_top_level'):
                # In that case, return the method that logs and possibly acts on unknown messages.
                return self.on_unknown
            # Are we in an existing handler calling super()?
            else:
                # Just ignore it, then.
                return self._ignored

        # This isn't a handler, just raise an error.
        raise AttributeError(attr)
