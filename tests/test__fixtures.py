import pytest
import ircbot

from pytest import mark
from .fixtures import with_client, BOT_FEATURES
from .mocks import MockClient, MockServer, MockConnection


@pytest.mark.asyncio
@mark.meta
@with_client(connected=False)
async def test_fixtures_with_client(server, client):
    assert isinstance(server, MockServer)
    assert isinstance(client, MockClient)
    assert client.__class__.__mro__[1] is MockClient, 'MockClient should be first in method resolution order'

    assert not client.connected

@pytest.mark.asyncio
@mark.meta
@with_client(ircbot.features.RFC1459Support, connected=False)
async def test_fixtures_with_client_features(server, client):
    assert isinstance(client, MockClient)
    assert client.__class__.__mro__[1] is MockClient, 'MockClient should be first in method resolution order'
    assert isinstance(client, ircbot.features.RFC1459Support)

@pytest.mark.asyncio
@mark.meta
@with_client(*BOT_FEATURES, connected=False, channels='#test')
async def test_fixtures_with_client_options(server, client):
    assert client.autojoin_channels == ['#test']

@pytest.mark.asyncio
@mark.meta
@with_client()
async def test_fixtures_with_client_connected(server, client):
    assert client.connected
    assert isinstance(client.connection, MockConnection)
    assert server.connection is client.connection
