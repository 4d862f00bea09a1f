class GameError(Exception):
    """Base exception for session and game-state failures.

    Every subclass is recoverable per request: the transport layer turns it
    into an error payload sent only to the caller that triggered it.
    """

    message = 'Game error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'success': False, 'error': self.message}


class SessionNotFound(GameError):
    message = 'Session not found'


class GameNotStarted(GameError):
    message = 'Game has not started'


class UnknownGame(GameError):
    message = 'Unknown game'


class JoinError(GameError):
    """Raised when a player cannot join a session."""

    message = 'Unable to join session'


class InvalidJoinCode(JoinError):
    message = 'Invalid join code'


class SessionAlreadyStarted(JoinError):
    message = 'Session is already underway'
