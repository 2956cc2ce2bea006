import asyncio
import pytest

import ircbot
from ircbot.connection import Connection

TIMEOUT = 5


class LineServer:
    """ A tiny line-based TCP server on localhost that records what its single client sends. """

    def __init__(self):
        self.server = None
        self.writer = None
        self.lines = asyncio.Queue()
        self.accepted = asyncio.Event()

    async def start(self):
        self.server = await asyncio.start_server(self._handle, host='127.0.0.1', port=0)
        return self

    @property
    def port(self):
        return self.server.sockets[0].getsockname()[1]

    async def _handle(self, reader, writer):
        self.writer = writer
        self.accepted.set()
        try:
            while True:
                line = await reader.readline()
                if not line:
                    break
                await self.lines.put(line.decode('utf-8').rstrip('\r\n'))
        finally:
            writer.close()

    async def send(self, line):
        await asyncio.wait_for(self.accepted.wait(), timeout=TIMEOUT)
        self.writer.write((line + '\r\n').encode('utf-8'))
        await self.writer.drain()

    async def expect(self, count):
        return [await asyncio.wait_for(self.lines.get(), timeout=TIMEOUT) for _ in range(count)]

    async def drop_client(self):
        await asyncio.wait_for(self.accepted.wait(), timeout=TIMEOUT)
        self.writer.close()

    async def stop(self):
        if self.writer is not None:
            self.writer.close()
        self.server.close()
        await self.server.wait_closed()


def with_server(f):
    async def run():
        server = await LineServer().start()
        client = ircbot.MinimalBot('TestBot')
        try:
            return await f(server=server, client=client)
        finally:
            await client.shutdown()
            await server.stop()

    run.__name__ = f.__name__
    return run


## Client over TCP.


@pytest.mark.asyncio
@with_server
async def test_login(server, client):
    await client.connect('127.0.0.1', server.port)

    assert client.connected
    assert await server.expect(2) == ['NICK TestBot', 'USER TestBot 0 * :TestBot']


@pytest.mark.asyncio
@with_server
async def test_ping_pong(server, client):
    await client.connect('127.0.0.1', server.port)
    await server.expect(2)

    await server.send('PING :irc.example.net')
    assert await server.expect(1) == ['PONG :irc.example.net']


@pytest.mark.asyncio
@with_server
async def test_messages_reach_observers(server, client):
    received = asyncio.Queue()
    client.events.subscribe(ircbot.Event.CHANNEL_MESSAGE, received.put_nowait)

    await client.connect('127.0.0.1', server.port)
    await server.send(':a!b@c PRIVMSG #lobby :hello')

    message = await asyncio.wait_for(received.get(), timeout=TIMEOUT)
    assert message.trailing == 'hello'


@pytest.mark.asyncio
@with_server
async def test_server_closes_connection(server, client):
    disconnected = asyncio.Event()
    client.events.subscribe(ircbot.Event.DISCONNECT, disconnected.set)

    await client.connect('127.0.0.1', server.port)
    await server.expect(2)
    await server.drop_client()

    await asyncio.wait_for(disconnected.wait(), timeout=TIMEOUT)
    await asyncio.wait_for(client.wait_closed(), timeout=TIMEOUT)
    assert not client.connected


@pytest.mark.asyncio
@with_server
async def test_shutdown_during_blocked_read(server, client):
    await client.connect('127.0.0.1', server.port)
    await server.expect(2)

    # The read loop is waiting on a silent server.
    await asyncio.sleep(client.SHUTDOWN_POLL_INTERVAL / 2)
    await asyncio.wait_for(client.shutdown(), timeout=TIMEOUT)

    assert not client.connected
    assert client._read_task.done()
    assert await server.expect(1) == ['QUIT :Leaving']


@pytest.mark.asyncio
async def test_connect_refused():
    server = await LineServer().start()
    port = server.port
    await server.stop()

    client = ircbot.MinimalBot('TestBot')
    with pytest.raises(OSError):
        await client.connect('127.0.0.1', port)
    assert not client.connected


## Bare connection.


@pytest.mark.asyncio
async def test_concurrent_sends_do_not_interleave():
    server = await LineServer().start()
    connection = Connection('127.0.0.1', server.port)
    try:
        await connection.connect()
        lines = ['PRIVMSG #lobby :line number {}'.format(i) for i in range(50)]
        await asyncio.gather(*[connection.send((line + '\r\n').encode('utf-8')) for line in lines])

        assert sorted(await server.expect(len(lines))) == sorted(lines)
    finally:
        await connection.disconnect()
        await server.stop()


@pytest.mark.asyncio
async def test_connection_after_disconnect():
    server = await LineServer().start()
    connection = Connection('127.0.0.1', server.port)
    try:
        await connection.connect()
        assert connection.connected

        await connection.disconnect()
        assert not connection.connected
        assert await connection.recv(timeout=TIMEOUT) == b''
        with pytest.raises(ConnectionError):
            await connection.send(b'PING :late\r\n')

        # Disconnecting twice is harmless.
        await connection.disconnect()
    finally:
        await server.stop()
