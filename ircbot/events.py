## events.py
# Observer registration for client events.
import enum
import inspect
import logging

__all__ = ['Event', 'EventTable']


class Event(enum.Enum):
    """ Event kinds a client reports to its observers, along with the arguments observers receive. """
    CONNECT = 'connect'                 # ()
    DISCONNECT = 'disconnect'           # ()
    LOGIN = 'login'                     # ()
    END_OF_MOTD = 'end_of_motd'         # ()
    ANY_MESSAGE = 'any_message'         # (message)
    CHANNEL_MESSAGE = 'channel_message' # (message)
    QUERY_MESSAGE = 'query_message'     # (message)
    NOTICE = 'notice'                   # (message)
    MOTD = 'motd'                       # (message)
    ACTION = 'action'                   # (sender, text)
    CTCP_RESPONSE = 'ctcp_response'     # (sender, text)
    ERROR = 'error'                     # (error)
    JOIN_CHANNEL = 'join_channel'       # (channel)
    PART_CHANNEL = 'part_channel'       # (channel)
    NICK_CHANGE = 'nick_change'         # (old, new)
    NAME_REPLY = 'name_reply'           # (channel, users)
    TOPIC = 'topic'                     # (channel, topic)
    TOPIC_NOT_SET = 'topic_not_set'     # (channel, text)


class EventTable:
    """
    Ordered lists of observers per event kind.
    Observers can be plain callables or coroutine functions. They are called in the order they were subscribed,
    and firing an event nobody listens to does nothing.
    """

    def __init__(self):
        self._observers = {}
        self.logger = logging.getLogger(__name__)

    def subscribe(self, event, callback):
        """ Add an observer for the given event. The same callback can be added more than once. """
        self._observers.setdefault(Event(event), []).append(callback)
        return callback

    def unsubscribe(self, event, callback):
        """ Remove the first registration of callback for the given event. """
        observers = self._observers.get(Event(event), [])
        if callback in observers:
            observers.remove(callback)

    def observers(self, event):
        return list(self._observers.get(Event(event), []))

    def clear(self, event=None):
        """ Drop all observers, or only those of the given event. """
        if event is None:
            self._observers.clear()
        else:
            self._observers.pop(Event(event), None)

    async def fire(self, event, *args):
        """ Notify every observer of event, in order. A failing observer does not keep the others from running. """
        # Copy, so observers can (un)subscribe while being notified.
        for callback in self.observers(event):
            try:
                result = callback(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                self.logger.exception('Observer %r for %s failed.', callback, Event(event).name)

    def __contains__(self, event):
        return bool(self._observers.get(Event(event)))
