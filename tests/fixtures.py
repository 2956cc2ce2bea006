import ircbot
from .mocks import MockServer, MockClient


def with_client(*features, connected=True, **options):
    if not features:
        features = (ircbot.client.BasicClient,)
    if features not in with_client.classes:
        with_client.classes[features] = ircbot.featurize(MockClient, *features)

    def inner(f):
        async def run():
            server = MockServer()
            client = with_client.classes[features]('TestcaseRunner', mock_server=server, **options)
            if connected:
                await client.connect('mock.local', 1337)

            try:
                return await f(client=client, server=server)
            finally:
                await client.disconnect()
                await client.wait_closed()

        run.__name__ = f.__name__
        return run
    return inner

with_client.classes = {}

# The feature set a full bot runs with.
BOT_FEATURES = tuple(ircbot.features.ALL)
