class JamSignageException(Exception):
    """Base class for errors raised by the JAM Signage player."""

    def __init__(self, message: str = None):
        self.message = message
        super().__init__(message)
