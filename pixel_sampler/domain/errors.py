from typing import Optional


class PixelSamplerError(Exception):
    """Base class for every failure inside the sampling pipeline."""

    def __init__(self, message: str, uri: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.uri = uri

    def __str__(self) -> str:
        if self.uri is None:
            return self.message
        return f"{self.message} (uri={self.uri!r})"


class UnsupportedSchemeError(PixelSamplerError):
    """The URI matches no known scheme and is not an existing file."""


class UnreachableError(PixelSamplerError):
    """Bytes could not be obtained: I/O error, HTTP error, timeout, bad URI."""


class DecodeFailedError(PixelSamplerError):
    """The bytes are not a decodable image."""


class OutOfBoundsError(PixelSamplerError):
    """A pixel coordinate lies outside the image."""


class InvalidRequestError(PixelSamplerError):
    """The request cannot be mapped, e.g. a zero or negative display size."""
