"""Footer parsing and layout validation.

File format:
  [Pixel data: variable]
    - RGB triples stored back to front (last byte is the red channel
      of the first pixel)
  [Footer: 12 bytes, little-endian]
    - Tag: 4 bytes (opaque)
    - Width: 2 bytes
    - Height: 2 bytes
    - Logical width: 2 bytes
    - Logical height: 2 bytes
"""

from __future__ import annotations

import logging
import struct

import numpy as np

from ootw_decoder.components.footer import Footer
from ootw_decoder.errors import ImageFormatError, TruncatedDataError

logger = logging.getLogger(__name__)

# File format constants
FOOTER_FORMAT = "<IHHHH"
FOOTER_SIZE = struct.calcsize(FOOTER_FORMAT)  # 4 + 2 * 4 = 12 bytes
BYTES_PER_PIXEL = 3
TILE_WIDTH = 8
TILE_HEIGHT = 8


def parse_footer(data: bytes) -> Footer:
    """Decode the footer at the end of a file.

    Args:
        data: Complete file contents

    Returns:
        Parsed Footer

    Raises:
        TruncatedDataError: If data is shorter than the footer
    """
    if len(data) < FOOTER_SIZE:
        raise TruncatedDataError(
            f"Data too short: need {FOOTER_SIZE} bytes for footer, got {len(data)}"
        )

    tag, width, height, logical_width, logical_height = struct.unpack(
        FOOTER_FORMAT, data[-FOOTER_SIZE:]
    )
    return Footer(
        tag=tag,
        width=width,
        height=height,
        logical_width=logical_width,
        logical_height=logical_height,
    )


def pack_footer(footer: Footer) -> bytes:
    """Encode a Footer as the 12 trailing bytes of a file."""
    if not isinstance(footer, Footer):
        raise TypeError(f"Expected Footer, got {type(footer)}")

    return struct.pack(
        FOOTER_FORMAT,
        footer.tag,
        footer.width,
        footer.height,
        footer.logical_width,
        footer.logical_height,
    )


def split_payload(data: bytes) -> tuple[np.ndarray, Footer]:
    """Separate pixel bytes from the footer.

    Returns:
        Tuple of (pixel_bytes as uint8 array, footer)
    """
    footer = parse_footer(data)
    pixels = np.frombuffer(data, dtype=np.uint8, count=len(data) - FOOTER_SIZE)
    return pixels, footer


def expected_pixel_bytes(footer: Footer) -> int:
    """Number of pixel bytes needed for the stored image."""
    return footer.pixel_count * BYTES_PER_PIXEL


def expected_file_size(footer: Footer) -> int:
    """Size of a file holding exactly the stored image."""
    return expected_pixel_bytes(footer) + FOOTER_SIZE


def validate_layout(footer: Footer, pixel_len: int, strict: bool = False) -> None:
    """Check that the pixel region can hold the image the footer describes.

    Surplus bytes are allowed unless strict is set; they come first in the
    file and are never read.

    Args:
        footer: Parsed footer
        pixel_len: Length of the pixel region in bytes
        strict: Reject surplus pixel data instead of warning

    Raises:
        ImageFormatError: If dimensions are unusable or data is misaligned
        TruncatedDataError: If the pixel region is too short
    """
    if footer.width == 0 or footer.height == 0:
        raise ImageFormatError(
            f"Image has no pixels: {footer.width}x{footer.height}"
        )

    if footer.width % TILE_WIDTH != 0 or footer.height % TILE_HEIGHT != 0:
        raise ImageFormatError(
            f"Image size {footer.width}x{footer.height} is not a multiple of "
            f"the {TILE_WIDTH}x{TILE_HEIGHT} tile size"
        )

    if pixel_len % BYTES_PER_PIXEL != 0:
        raise ImageFormatError(
            f"Pixel data length {pixel_len} is not a multiple of {BYTES_PER_PIXEL}"
        )

    needed = expected_pixel_bytes(footer)
    if pixel_len < needed:
        raise TruncatedDataError(
            f"Pixel data too short for {footer.width}x{footer.height}: "
            f"need {needed} bytes, got {pixel_len}"
        )

    if pixel_len > needed:
        surplus = pixel_len - needed
        if strict:
            raise ImageFormatError(
                f"Pixel data has {surplus} bytes beyond the "
                f"{footer.width}x{footer.height} image"
            )
        logger.warning(
            "Ignoring %d surplus bytes before the %dx%d image",
            surplus,
            footer.width,
            footer.height,
        )
