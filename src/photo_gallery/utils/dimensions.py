"""Header-only width/height probing for PNG and JPEG files.

Only the bytes needed to locate the dimensions are interpreted; pixel data is
never decoded.
"""

import struct
from pathlib import Path
from typing import NamedTuple, Optional, Union

from ..core.exceptions import MalformedHeader

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# SOF0-SOF3, SOF5-SOF7, SOF9-SOF11, SOF13-SOF15. 0xC4 (DHT), 0xC8 (JPG) and
# 0xCC (DAC) share the range but carry no frame header.
JPEG_SOF_MARKERS = frozenset({
    0xC0, 0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7,
    0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF,
})
JPEG_EOI = 0xD9
JPEG_SOS = 0xDA

PNG_EXTENSIONS = frozenset({'.png'})
JPEG_EXTENSIONS = frozenset({'.jpg', '.jpeg'})


class ImageDimensions(NamedTuple):
    """Pixel size read from an image header."""
    width: int
    height: int


def parse_png_dimensions(data: bytes) -> ImageDimensions:
    """Read width/height from the IHDR chunk, which always directly follows the signature."""
    if data[:8] != PNG_SIGNATURE:
        raise MalformedHeader("Invalid PNG signature")
    if len(data) < 24:
        raise MalformedHeader("PNG header truncated before IHDR dimensions")

    width, height = struct.unpack_from(">II", data, 16)
    return ImageDimensions(width, height)


def parse_jpeg_dimensions(data: bytes) -> ImageDimensions:
    """Walk JPEG marker segments until a start-of-frame segment is found."""
    if data[:2] != b"\xff\xd8":
        raise MalformedHeader("Invalid JPEG header")

    offset = 2
    length = len(data)

    while offset < length:
        # Fill bytes before a marker
        while offset < length and data[offset] == 0xFF:
            offset += 1
        if offset >= length:
            break

        marker = data[offset]
        offset += 1

        if marker in (JPEG_EOI, JPEG_SOS):
            break

        if offset + 2 > length:
            break
        (segment_length,) = struct.unpack_from(">H", data, offset)
        offset += 2

        if marker in JPEG_SOF_MARKERS:
            if offset + 5 > length:
                break
            # Segment body: precision (1 byte), height, width
            height, width = struct.unpack_from(">HH", data, offset + 1)
            return ImageDimensions(width, height)

        if segment_length < 2:
            raise MalformedHeader(f"Invalid JPEG segment length {segment_length} for marker 0x{marker:02X}")
        offset += segment_length - 2

    raise MalformedHeader("Failed to locate JPEG dimensions")


def probe_dimensions(data: bytes, extension: str) -> Optional[ImageDimensions]:
    """Return the dimensions encoded in ``data``.

    ``extension`` selects the parser (case-insensitive, leading dot optional).
    Formats without a parser yield ``None``; a PNG or JPEG whose header cannot
    be read raises :class:`MalformedHeader`.
    """
    ext = extension.lower()
    if ext and not ext.startswith('.'):
        ext = f'.{ext}'

    if ext in PNG_EXTENSIONS:
        return parse_png_dimensions(data)
    if ext in JPEG_EXTENSIONS:
        return parse_jpeg_dimensions(data)
    return None


def is_probeable(file_path: Union[str, Path]) -> bool:
    """Check whether the file extension has a header parser."""
    suffix = Path(file_path).suffix.lower()
    return suffix in PNG_EXTENSIONS or suffix in JPEG_EXTENSIONS


def read_image_dimensions(file_path: Union[str, Path]) -> Optional[ImageDimensions]:
    """Read a file from disk and probe its dimensions.

    Unsupported formats are not opened at all. Read failures propagate as
    ``OSError``.
    """
    path = Path(file_path)
    if not is_probeable(path):
        return None

    return probe_dimensions(path.read_bytes(), path.suffix)
