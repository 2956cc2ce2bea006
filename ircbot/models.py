## models.py
# Per-client connection state.


class ConnectionState:
    """
    Everything a client knows about its own session.
    The nickname is only ever changed once the server confirms it, or while offline.
    """

    def __init__(self, nickname, owners=None, quit_message=None, version_reply=None):
        self.nickname = nickname
        self.owners = set(owners or [])
        self.quit_message = quit_message
        self.version_reply = version_reply

        self.connected = False
        self.receiving = False
        self.shutdown_requested = False

    def reset(self):
        """ Forget everything tied to the current session. Identity and settings are kept for the next one. """
        self.connected = False
        self.receiving = False

    def __repr__(self):
        return '{cls}(nickname={nick!r}, connected={conn})'.format(
            cls=self.__class__.__name__, nick=self.nickname, conn=self.connected)
