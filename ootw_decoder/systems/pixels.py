"""Pixel unpacking system.

Pixel bytes are stored back to front: reversing the pixel region yields
consecutive (R, G, B) triples in tile order. Any surplus bytes sit at the
start of the region and are never read.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ootw_decoder.components.footer import Footer
from ootw_decoder.components.image import PixelStream, RawBinary
from ootw_decoder.core.footer import (
    BYTES_PER_PIXEL,
    expected_pixel_bytes,
    validate_layout,
)
from ootw_decoder.core.system import Mode, System

if TYPE_CHECKING:
    from ootw_decoder.core.world import World

logger = logging.getLogger(__name__)


class PixelUnpack(System):
    """Convert between the raw pixel region and an RGB pixel stream.

    Modes:
    - 'decode': RawBinary + Footer -> PixelStream
    - 'encode': PixelStream + Footer -> RawBinary
    """

    def __init__(self, mode: Mode = "decode", strict: bool = False) -> None:
        """Initialize pixel unpacking.

        Args:
            mode: Direction of transformation
            strict: Reject surplus pixel bytes instead of ignoring them
        """
        super().__init__(mode=mode)
        self.strict = strict

    def required_components(self) -> list[type]:
        if self.mode == "decode":
            return [RawBinary, Footer]
        return [PixelStream, Footer]

    def produced_components(self) -> list[type]:
        if self.mode == "decode":
            return [PixelStream]
        return [RawBinary]

    def run(self, world: World, eids: list[int]) -> None:
        if self.mode == "decode":
            self._unpack(world, eids)
        else:
            self._pack(world, eids)

    def _unpack(self, world: World, eids: list[int]) -> None:
        """RawBinary -> PixelStream."""
        for eid in eids:
            raw = world.get_component(eid, RawBinary)
            footer = world.get_component(eid, Footer)

            validate_layout(footer, len(raw.data), strict=self.strict)

            needed = expected_pixel_bytes(footer)
            tail = raw.data[len(raw.data) - needed:]
            pix = np.ascontiguousarray(tail[::-1]).reshape(-1, BYTES_PER_PIXEL)

            logger.debug("Unpacked %d pixels for entity %d", len(pix), eid)
            world.add_component(eid, PixelStream(pix=pix))

    def _pack(self, world: World, eids: list[int]) -> None:
        """PixelStream -> RawBinary."""
        for eid in eids:
            stream = world.get_component(eid, PixelStream)
            footer = world.get_component(eid, Footer)

            if len(stream.pix) != footer.pixel_count:
                raise ValueError(
                    f"Pixel stream holds {len(stream.pix)} pixels, footer "
                    f"describes {footer.width}x{footer.height}"
                )

            data = np.ascontiguousarray(stream.pix.reshape(-1)[::-1])
            world.add_component(eid, RawBinary(data=data))
