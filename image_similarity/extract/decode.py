"""Decode PNG and JPEG payloads into Pillow images."""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError, ImageReadError, UnsupportedFormat

logger = logging.getLogger(__name__)

ImageSource = Union[str, os.PathLike, bytes, bytearray, Image.Image]

SUPPORTED_CODECS: tuple[str, ...] = ("PNG", "JPEG")

_MAGIC_PREFIXES: dict[str, tuple[bytes, ...]] = {
    "PNG": (b"\x89PNG\r\n\x1a\n",),
    "JPEG": (b"\xff\xd8\xff",),
}

_EXTENSION_CODECS: dict[str, str] = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".jpe": "JPEG",
}


@dataclass(slots=True)
class DecodedImage:
    """A decoded pixel surface along with the codec that produced it."""

    image: Image.Image
    codec: str | None
    label: str

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size


def sniff_codec(data: bytes) -> str | None:
    """Return the codec whose magic bytes prefix *data*, if any."""
    for codec, prefixes in _MAGIC_PREFIXES.items():
        if data.startswith(prefixes):
            return codec
    return None


def codec_from_name(name: str | None) -> str | None:
    """Return the codec implied by the extension of *name*, if recognised."""
    if not name:
        return None
    suffix = Path(str(name)).suffix.lower()
    return _EXTENSION_CODECS.get(suffix)


def candidate_codecs(data: bytes, name_hint: str | None = None) -> list[str]:
    """Return the order in which codecs should be attempted for *data*.

    Magic bytes win, the extension of *name_hint* comes next, and any supported
    codec not yet listed is appended so a mislabeled file still gets one try
    with the other decoder.
    """
    ordered: list[str] = []
    for codec in (sniff_codec(data), codec_from_name(name_hint), *SUPPORTED_CODECS):
        if codec and codec not in ordered:
            ordered.append(codec)
    return ordered


def read_source(source: str | os.PathLike) -> bytes:
    """Read the raw bytes behind a filesystem path."""
    path = Path(source)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ImageReadError(f"Unable to read image source {path}: {exc}") from exc


def decode_bytes(data: bytes, name_hint: str | None = None) -> DecodedImage:
    """Decode *data* with the first supported codec that accepts it."""
    label = str(name_hint) if name_hint else "<bytes>"
    if not data:
        raise UnsupportedFormat(f"{label}: empty image payload")

    sniffed = sniff_codec(data)
    last_error: Exception | None = None
    for codec in candidate_codecs(data, name_hint):
        try:
            image = _open_with(data, codec)
        except Exception as exc:  # noqa: BLE001 - every codec gets its turn
            logger.debug("%s: %s decoder rejected payload", label, codec, exc_info=True)
            last_error = exc
            continue
        if codec != sniffed and codec != codec_from_name(name_hint):
            logger.debug("%s: decoded with fallback codec %s", label, codec)
        return DecodedImage(image=image, codec=codec, label=label)

    if sniffed is not None:
        raise DecodeError(
            f"{label}: corrupt {sniffed} payload ({last_error})", codec=sniffed
        ) from last_error
    raise UnsupportedFormat(
        f"{label}: payload is neither {' nor '.join(SUPPORTED_CODECS)}"
    ) from last_error


def load_image(source: ImageSource, name_hint: str | None = None) -> DecodedImage:
    """Return a decoded image for a path, raw bytes, or an existing Pillow image."""
    if isinstance(source, Image.Image):
        label = name_hint or getattr(source, "filename", "") or "<image>"
        return DecodedImage(image=source, codec=source.format, label=str(label))
    if isinstance(source, (bytes, bytearray)):
        return decode_bytes(bytes(source), name_hint)
    if isinstance(source, (str, os.PathLike)):
        data = read_source(source)
        return decode_bytes(data, name_hint or os.fspath(source))
    raise TypeError(
        "Image sources must be paths, bytes, or PIL.Image.Image instances"
    )


def _open_with(data: bytes, codec: str) -> Image.Image:
    with Image.open(io.BytesIO(data), formats=[codec]) as image:
        image.load()
        if image.width == 0 or image.height == 0:
            raise UnidentifiedImageError(f"{codec} payload has no pixels")
        return image.copy()
