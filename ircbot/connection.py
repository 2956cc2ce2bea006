import asyncio
import logging

__all__ = ['Connection']


class Connection:
    """ A TCP connection over the IRC protocol. """
    CONNECT_TIMEOUT = 10

    def __init__(self, hostname, port, source_address=None):
        self.hostname = hostname
        self.port = port
        self.source_address = source_address

        self.reader = None
        self.writer = None
        self._send_lock = asyncio.Lock()
        self.logger = logging.getLogger(__name__)

    async def connect(self):
        """ Connect to target. """
        (self.reader, self.writer) = await asyncio.wait_for(
            asyncio.open_connection(
                host=self.hostname,
                port=self.port,
                local_addr=self.source_address,
            ),
            timeout=self.CONNECT_TIMEOUT
        )

    async def disconnect(self):
        """ Disconnect from target. Releases the socket even if closing the stream fails. """
        if not self.connected:
            return

        writer = self.writer
        self.reader = None
        self.writer = None
        try:
            writer.close()
            await writer.wait_closed()
        except (OSError, ConnectionError) as e:
            self.logger.debug('Error while closing connection to %s:%s: %s', self.hostname, self.port, e)
        finally:
            # Make sure the transport is gone even if the graceful close failed.
            writer.transport.abort()

    def abort(self):
        """ Drop the transport without waiting, waking up any pending read. """
        if self.writer is not None:
            self.writer.transport.abort()

    @property
    def connected(self):
        """ Whether this connection is... connected to something. """
        return self.reader is not None and self.writer is not None

    async def send(self, data):
        """ Write one chunk of data and flush it. Concurrent senders never interleave. """
        async with self._send_lock:
            if not self.connected:
                raise ConnectionError('Not connected to {}:{}.'.format(self.hostname, self.port))
            self.writer.write(data)
            await self.writer.drain()

    async def recv(self, *, timeout=None):
        """ Read one line. Returns an empty bytestring once the peer has closed the connection. """
        reader = self.reader
        if reader is None:
            return b''
        return await asyncio.wait_for(reader.readline(), timeout=timeout)
