"""
Exception hierarchy for the trivia game.
"""


class TriviaError(Exception):
    """Base exception for trivia game errors."""
    pass


class FetchError(TriviaError):
    """Raised when a batch of clues could not be retrieved."""
    pass


class NetworkError(FetchError):
    """Raised when the request never produced an HTTP response."""
    pass


class BadStatusError(FetchError):
    """Raised when the clues API answers with anything other than 200."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Error: bad response code of {status_code} received.")


class DecodeError(FetchError):
    """Raised when the response body is not a usable clues payload."""
    pass


class GameSessionError(TriviaError):
    """Base exception for game session errors."""
    pass


class EmptyInputError(GameSessionError):
    """Raised when an answer is submitted with no text."""
    pass


class InvalidSessionStateError(GameSessionError):
    """Raised when session is in an invalid state for the requested operation."""
    pass
