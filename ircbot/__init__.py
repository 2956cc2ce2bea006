from . import connection, protocol, client, events, features

from .client import Error, NotConnected, AlreadyConnected, BasicClient
from .events import Event, EventTable
from .protocol import ProtocolViolation

__name__ = 'ircbot'
__version__ = '0.3.0'
__version_info__ = (0, 3, 0)
__license__ = 'BSD'


def featurize(*features):
    """ Put features into proper MRO order. """
    from functools import cmp_to_key

    def compare_subclass(left, right):
        if issubclass(left, right):
            return -1
        elif issubclass(right, left):
            return 1
        return 0

    sorted_features = sorted(features, key=cmp_to_key(compare_subclass))
    name = 'FeaturizedClient[{features}]'.format(
        features=', '.join(feature.__name__ for feature in sorted_features))
    return type(name, tuple(sorted_features), {})


class Bot(featurize(*features.ALL)):
    """ A fully featured IRC bot client. """
    pass


class MinimalBot(featurize(*features.LITE)):
    """ A bot client without the ident responder. """
    pass
