## _args.py
# Common argument parsing code.
import argparse
import logging
import ircbot

def client_from_args(name, description, default_nick='Bot', cls=ircbot.Bot):
    # Parse some arguments.
    parser = argparse.ArgumentParser(name, description=description, add_help=False,
        epilog='This program is part of {package}.'.format(package=ircbot.__name__))

    meta = parser.add_argument_group('Meta')
    meta.add_argument('-h', '--help', action='help', help='What you are reading right now.')
    meta.add_argument('-v', '--version', action='version', version='{package}/%(prog)s {ver}'.format(package=ircbot.__name__, ver=ircbot.__version__), help='Dump version number.')
    meta.add_argument('-V', '--verbose', help='Be verbose in warnings and errors.', action='store_true', default=False)
    meta.add_argument('-d', '--debug', help='Show debug output.', action='store_true', default=False)

    conn = parser.add_argument_group('Connection')
    conn.add_argument('server', help='The server to connect to.', metavar='SERVER')
    conn.add_argument('-p', '--port', help='The port to use. (default: 6667)', type=int, default=None)
    conn.add_argument('-e', '--encoding', help='Connection encoding. (default: UTF-8)', default='utf-8', metavar='ENCODING')
    conn.add_argument('--ident', help='Answer ident queries on port 113 while connecting. (default: no)', action='store_true', default=False)

    init = parser.add_argument_group('Initialization')
    init.add_argument('-n', '--nickname', help='Nickname. (default: {})'.format(default_nick), default=default_nick, metavar='NICK')
    init.add_argument('-c', '--channel', help='Channel to automatically join. Can be set multiple times for multiple channels.', action='append', dest='channels', default=[], metavar='CHANNEL')
    init.add_argument('-o', '--owner', help='Nickname allowed to control the bot. Can be set multiple times.', action='append', dest='owners', default=[], metavar='NICK')
    init.add_argument('-q', '--quit-message', help='Message shown when leaving.', metavar='MESSAGE')
    init.add_argument('--version-reply', help='Answer to CTCP VERSION requests.', metavar='VERSION')
    init.add_argument('--keep-colons', help='Do not strip colons from message text.', action='store_true', default=False)

    args = parser.parse_args()

    # Set log level.
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.ERROR

    logging.basicConfig(level=log_level)

    # Setup client.
    client = cls(nickname=args.nickname, channels=args.channels, owners=args.owners,
        quit_message=args.quit_message, version_reply=args.version_reply, encoding=args.encoding,
        strip_trailing_colons=not args.keep_colons, use_ident=args.ident)

    return client, args
