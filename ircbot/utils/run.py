## run.py
# Run a bare bot that logs what it sees.
import logging

from ircbot.events import Event
from . import _args

logger = logging.getLogger('ircbot.run')


def log_events(client):
    """ Subscribe loggers for the chattier events. """
    @client.on(Event.CHANNEL_MESSAGE)
    def channel_message(message):
        logger.info('%s/<%s> %s', message.params[0], message.sender_nick, message.trailing)

    @client.on(Event.QUERY_MESSAGE)
    def query_message(message):
        logger.info('%s whispers: %s', message.sender_nick, message.trailing)

    @client.on(Event.JOIN_CHANNEL)
    def join_channel(channel):
        logger.info('Joined %s.', channel)

    @client.on(Event.NAME_REPLY)
    def name_reply(channel, users):
        logger.info('There are %d users on channel %s.', len(users), channel)

    @client.on(Event.ERROR)
    def error(error):
        logger.error('Server reported: %s', error)


def main():
    client, args = _args.client_from_args('ircbot', description='ircbot IRC bot library.')
    log_events(client)
    client.run(args.server, args.port)


if __name__ == '__main__':
    main()
