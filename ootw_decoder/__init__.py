"""Out of the World image decoder.

Converts the tiled, byte-reversed bitmap files of the game "Out of the
World" into PNG images.

Quick Start:
    >>> from ootw_decoder import decode, convert_file
    >>>
    >>> with open("title.bin", "rb") as f:
    ...     img = decode(f.read())
    >>> img.full.shape, img.logical.shape
    ((200, 320, 3), (192, 304, 3))
    >>>
    >>> # Write title-full.png and title-logical.png next to the input
    >>> convert_file("title.bin")

For more control, build the stage pipeline yourself:
    >>> from ootw_decoder.core.world import World
    >>> from ootw_decoder.components.image import FullRGB
    >>> from ootw_decoder.systems.geometry import MirrorX
    >>> from ootw_decoder.systems.pixels import PixelUnpack
    >>> from ootw_decoder.systems.tiles import Untile
    >>>
    >>> world = World()
    >>> entity = world.spawn_binary(data)
    >>> full = (
    ...     world.pipe(entity)
    ...     .to(PixelUnpack())
    ...     .to(Untile())
    ...     .to(MirrorX())
    ...     .out(FullRGB)
    ... )
"""

__version__ = "0.1.0"

from ootw_decoder.api import (
    ConversionResult,
    DecodedImage,
    convert_file,
    decode,
    encode,
    get_image_info,
)
from ootw_decoder.errors import ImageFormatError, TruncatedDataError

__all__ = [
    "__version__",
    "ConversionResult",
    "DecodedImage",
    "ImageFormatError",
    "TruncatedDataError",
    "convert_file",
    "decode",
    "encode",
    "get_image_info",
]
