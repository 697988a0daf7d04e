"""High-level API for converting Out of the World images.

Provides decode() / encode() for in-memory conversion and convert_file()
for the file-to-PNG workflow used by the command-line tool.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image

from ootw_decoder.components.footer import Footer
from ootw_decoder.components.image import FullRGB, LogicalRGB, RawBinary
from ootw_decoder.config import DecoderConfig, load_config
from ootw_decoder.core.footer import (
    FOOTER_SIZE,
    expected_pixel_bytes,
    pack_footer,
    parse_footer,
)
from ootw_decoder.core.world import World
from ootw_decoder.errors import ImageFormatError
from ootw_decoder.systems.geometry import CropLogical, MirrorX
from ootw_decoder.systems.pixels import PixelUnpack
from ootw_decoder.systems.tiles import Untile

logger = logging.getLogger(__name__)

DEFAULT_STEM = "output"


@dataclass(frozen=True, eq=False)
class DecodedImage:
    """Result of decoding one file.

    Attributes:
        full: Complete stored image (H, W, 3) uint8
        logical: Visible region (h, w, 3) uint8, may be empty
        footer: Footer read from the file
    """

    full: np.ndarray
    logical: np.ndarray
    footer: Footer


@dataclass
class ConversionResult:
    """Files written by convert_file()."""

    source: Path
    footer: Footer
    outputs: list[Path] = field(default_factory=list)


def decode(data: bytes, mirror: bool = True, strict: bool = False) -> DecodedImage:
    """Decode file contents into full and logical RGB images.

    Args:
        data: Complete file contents, footer included
        mirror: Flip the assembled image horizontally (default: True)
        strict: Reject surplus pixel data instead of ignoring it

    Returns:
        DecodedImage with full and logical pixel arrays

    Raises:
        TruncatedDataError: If data is shorter than its footer requires
        ImageFormatError: If the footer describes an unusable layout

    Example:
        >>> with open("title.bin", "rb") as f:
        ...     img = decode(f.read())
        >>> img.full.shape
        (200, 320, 3)
    """
    world = World()

    try:
        entity = world.spawn_binary(data)

        (
            world.pipe(entity)
            .to(PixelUnpack(mode="decode", strict=strict))
            .to(Untile(mode="decode"))
            .to(MirrorX(mode="decode", enabled=mirror))
            .to(CropLogical(mode="decode"))
            .execute()
        )

        return DecodedImage(
            full=world.get_component(entity, FullRGB).pix,
            logical=world.get_component(entity, LogicalRGB).pix,
            footer=world.get_component(entity, Footer),
        )

    finally:
        world.clear()


def encode(
    image: np.ndarray,
    logical_size: tuple[int, int] | None = None,
    tag: int = 0,
    mirror: bool = True,
) -> bytes:
    """Encode an RGB image into the game's binary format.

    This is the exact inverse of decode(): decode(encode(img)).full == img.

    Args:
        image: Input image as (H, W, 3) uint8 array, H and W multiples of 8
        logical_size: (width, height) stored as the visible size; defaults
            to the full image size
        tag: Opaque 32-bit value stored in the footer
        mirror: Undo the horizontal mirror applied on decode

    Returns:
        File contents as bytes

    Raises:
        ValueError: If image has invalid shape, dtype or size
    """
    if not isinstance(image, np.ndarray):
        raise TypeError(f"Expected ndarray, got {type(image)}")
    if image.ndim == 3 and (image.shape[0] == 0 or image.shape[1] == 0):
        raise ValueError(f"Cannot encode empty image of shape {image.shape}")

    world = World()

    try:
        entity = world.spawn_image(image, logical_size=logical_size, tag=tag)

        raw = (
            world.pipe(entity)
            .to(MirrorX(mode="encode", enabled=mirror))
            .to(Untile(mode="encode"))
            .to(PixelUnpack(mode="encode"))
            .out(RawBinary)
        )
        footer = world.get_component(entity, Footer)

        return raw.data.tobytes() + pack_footer(footer)

    finally:
        world.clear()


def get_image_info(data: bytes) -> dict[str, Any]:
    """Describe a file from its footer without decoding pixels.

    Returns:
        Dictionary with footer fields plus pixel_bytes, expected_pixel_bytes,
        surplus_bytes and logical_clamped

    Raises:
        TruncatedDataError: If data cannot hold a footer
    """
    footer = parse_footer(data)
    pixel_bytes = len(data) - FOOTER_SIZE
    expected = expected_pixel_bytes(footer)
    info: dict[str, Any] = footer.model_dump()
    info.update(
        pixel_bytes=pixel_bytes,
        expected_pixel_bytes=expected,
        surplus_bytes=pixel_bytes - expected,
        logical_clamped=footer.logical_clamped,
    )
    return info


def save_png(path: str | os.PathLike[str], pixels: np.ndarray) -> Path:
    """Write an (H, W, 3) uint8 array as an RGB PNG.

    Raises:
        ImageFormatError: If the image is empty
        OSError: If the file cannot be written
    """
    if pixels.ndim != 3 or pixels.shape[2] != 3 or pixels.dtype != np.uint8:
        raise ValueError(
            f"Expected (H, W, 3) uint8 array, got {pixels.shape} {pixels.dtype}"
        )
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise ImageFormatError(f"Cannot write empty image to {path}")

    out = Path(path)
    Image.fromarray(pixels).save(out, format="PNG")
    return out


def output_paths(
    source: str | os.PathLike[str],
    output_dir: str | os.PathLike[str] | None = None,
    config: DecoderConfig | None = None,
) -> tuple[Path, Path]:
    """Return (full_path, logical_path) for an input file."""
    config = config or DecoderConfig()
    src = Path(source)
    stem = src.stem or DEFAULT_STEM
    directory = Path(output_dir) if output_dir is not None else src.parent
    return (
        directory / f"{stem}{config.output.full_suffix}.png",
        directory / f"{stem}{config.output.logical_suffix}.png",
    )


def convert_file(
    path: str | os.PathLike[str],
    output_dir: str | os.PathLike[str] | None = None,
    config: DecoderConfig | None = None,
) -> ConversionResult:
    """Convert one binary image file into PNG files.

    Writes ``<stem>-full.png`` and ``<stem>-logical.png`` next to the input
    (or into output_dir), as selected by the config.

    Raises:
        FileNotFoundError: If the input file does not exist
        ImageFormatError: If the file is malformed or truncated
        OSError: If reading or writing fails
    """
    config = config or load_config()
    src = Path(path)

    data = src.read_bytes()
    decoded = decode(
        data,
        mirror=config.decode.mirror,
        strict=config.decode.strict_size,
    )
    footer = decoded.footer
    logger.info(
        "Decoded %s: %dx%d (logical %dx%d)",
        src,
        footer.width,
        footer.height,
        footer.logical_width,
        footer.logical_height,
    )

    full_path, logical_path = output_paths(src, output_dir, config)
    if output_dir is not None:
        full_path.parent.mkdir(parents=True, exist_ok=True)

    result = ConversionResult(source=src, footer=footer)

    if config.output.write_full:
        result.outputs.append(save_png(full_path, decoded.full))
        logger.info("Wrote %s", full_path)

    if config.output.write_logical:
        if decoded.logical.size == 0:
            logger.warning(
                "Logical size of %s is empty (%dx%d); skipping %s",
                src,
                footer.logical_width,
                footer.logical_height,
                logical_path,
            )
        else:
            result.outputs.append(save_png(logical_path, decoded.logical))
            logger.info("Wrote %s", logical_path)

    return result
