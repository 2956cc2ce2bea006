## ident.py
# Identification protocol (RFC1413) responder, for servers that query it while we register.
import asyncio
import logging

import ircbot.protocol
from ircbot.features import rfc1459

__all__ = [ 'IdentResponder', 'IdentSupport' ]


IDENT_PORT = 113
IDENT_TIMEOUT = 3
IDENT_REPLY = '{query} : USERID : OTHER : {identity}'


class IdentResponder:
    """
    A short-lived ident server. It answers exactly one query with our identity and then stops listening.
    Nothing about it is essential: if the port can't be bound or nobody asks in time, we simply were not identified.
    """

    def __init__(self, identity, host='0.0.0.0', port=IDENT_PORT, timeout=IDENT_TIMEOUT):
        self.identity = identity
        self.host = host
        self.port = port
        self.timeout = timeout

        self.server = None
        self._answered = None
        self.logger = logging.getLogger(__name__)

    async def start(self):
        """ Start listening. """
        self._answered = asyncio.get_running_loop().create_future()
        self.server = await asyncio.start_server(self._handle, host=self.host, port=self.port)

    async def stop(self):
        """ Stop listening. """
        if self.server is not None:
            self.server.close()
            await self.server.wait_closed()
            self.server = None

    @property
    def address(self):
        """ (host, port) we are listening on. """
        if self.server is None or not self.server.sockets:
            return None
        return self.server.sockets[0].getsockname()[:2]

    async def run(self):
        """ Listen, answer a single query and stop. Returns whether a query was answered. """
        try:
            await self.start()
        except OSError as e:
            self.logger.warning('Could not listen for ident queries on port %s: %s', self.port, e)
            return False

        try:
            query = await asyncio.wait_for(self._answered, timeout=self.timeout)
        except asyncio.TimeoutError:
            self.logger.info('No ident query received within %s seconds.', self.timeout)
            return False
        except (ConnectionError, OSError) as e:
            self.logger.warning('Ident exchange failed: %s', e)
            return False
        finally:
            await self.stop()

        self.logger.info('Answered ident query: %s', query)
        return True

    async def _handle(self, reader, writer):
        try:
            query = await asyncio.wait_for(reader.readline(), timeout=self.timeout)
            query = ircbot.protocol.decode(query).strip()
            if not query:
                raise ConnectionError('Ident peer closed the connection without a query.')

            reply = IDENT_REPLY.format(query=query, identity=self.identity)
            writer.write((reply + rfc1459.protocol.LINE_SEPARATOR).encode(ircbot.protocol.DEFAULT_ENCODING))
            await writer.drain()
        except (asyncio.TimeoutError, ConnectionError, OSError) as e:
            if not self._answered.done():
                self._answered.set_exception(e)
        else:
            if not self._answered.done():
                self._answered.set_result(query)
        finally:
            writer.close()


class IdentSupport(rfc1459.RFC1459Support):
    """
    Answer an ident query while connecting.

    Pass use_ident=True to enable it. Binding port 113 usually requires elevated privileges;
    failure to do so is logged and reported through on_ident_failure(), and the connection goes ahead regardless.
    """
    IDENT_TIMEOUT = IDENT_TIMEOUT

    def __init__(self, *args, use_ident=False, ident_port=IDENT_PORT, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_ident = use_ident
        self.ident_port = ident_port
        self._ident_task = None

    ## Internal overrides.

    async def connect(self, hostname=None, port=None, **kwargs):
        """ Start the ident responder, then connect. The server queries it while we register. """
        if self.use_ident and not self.connected:
            responder = IdentResponder(self.nickname, port=self.ident_port, timeout=self.IDENT_TIMEOUT)
            self._ident_task = asyncio.ensure_future(self._identify(responder))

        try:
            await super().connect(hostname, port, **kwargs)
        except Exception:
            # Nobody is going to query us now.
            if self._ident_task is not None:
                self._ident_task.cancel()
            raise

    async def disconnect(self):
        if self._ident_task is not None and not self._ident_task.done():
            self._ident_task.cancel()
        await super().disconnect()

    async def _identify(self, responder):
        if await responder.run():
            await self.on_ident_success()
        else:
            await self.on_ident_failure()

    ## Callbacks.

    async def on_ident_success(self):
        """ Callback called when an ident query was answered. """
        pass

    async def on_ident_failure(self):
        """ Callback called when no ident query could be answered. Not fatal. """
        pass
