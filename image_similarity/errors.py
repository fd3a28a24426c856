"""Exception types raised by the image similarity pipeline."""

from __future__ import annotations


class ImageSimilarityError(Exception):
    """Base class for every error surfaced by the pipeline."""


class ImageReadError(ImageSimilarityError, OSError):
    """Raised when the bytes of an image source cannot be read."""


class UnsupportedFormat(ImageSimilarityError, ValueError):
    """Raised when none of the supported codecs can decode the payload."""


class DecodeError(ImageSimilarityError, ValueError):
    """Raised when a recognised codec fails on a structurally broken payload."""

    def __init__(self, message: str, codec: str | None = None) -> None:
        super().__init__(message)
        self.codec = codec


class DimensionMismatch(ImageSimilarityError, ValueError):
    """Raised when two signatures cannot be compared bit for bit."""

    def __init__(self, left_bits: int, right_bits: int, expected: int) -> None:
        super().__init__(
            f"Signatures must both have {expected} bits (got {left_bits} and {right_bits})"
        )
        self.left_bits = left_bits
        self.right_bits = right_bits
        self.expected = expected
