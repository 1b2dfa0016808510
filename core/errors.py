"""Exception hierarchy for the wavepipe client.

Signing problems, transport failures, undecodable responses and errors
reported by the server each get their own type so callers can tell them
apart. Everything derives from ``WavepipeError``.
"""


class WavepipeError(Exception):
    """Base exception for all wavepipe client errors."""


class SigningError(WavepipeError, ValueError):
    """Invalid input to nonce generation, signing or token parsing."""


class TransportError(WavepipeError):
    """Network failure, or the server returned no data."""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


class DecodeError(WavepipeError):
    """Response body is not JSON, or lacks the expected session fields."""


class ApiError(WavepipeError):
    """The server answered with an ``error`` object."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

    def to_dict(self) -> dict:
        """Convert back to the server's error payload format."""
        return {"code": self.code, "message": self.message}
