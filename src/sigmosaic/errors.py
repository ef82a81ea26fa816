class CollageError(Exception):
    """Base class for failures while building a collage.

    ``source`` names the input that triggered the failure ("portrait",
    "signature", a config field, ...) when it is known.
    """

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class InvalidInputError(CollageError, ValueError):
    """Zero or negative dimensions, or a malformed configuration."""


class DecodeError(CollageError):
    """A source image could not be read as a raster."""


class EncodeError(CollageError):
    """The finished canvas could not be encoded."""
