"""Geometric post-processing: horizontal mirror and logical crop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ootw_decoder.components.footer import Footer
from ootw_decoder.components.image import FullRGB, LogicalRGB, TiledRGB
from ootw_decoder.core.system import Mode, System

if TYPE_CHECKING:
    from ootw_decoder.core.world import World

logger = logging.getLogger(__name__)


class MirrorX(System):
    """Flip images left to right.

    Modes:
    - 'decode': TiledRGB -> FullRGB
    - 'encode': FullRGB -> TiledRGB

    With enabled=False the image passes through unchanged, which helps
    when inspecting raw tile output.
    """

    def __init__(self, mode: Mode = "decode", enabled: bool = True) -> None:
        super().__init__(mode=mode)
        self.enabled = enabled

    def required_components(self) -> list[type]:
        return [TiledRGB] if self.mode == "decode" else [FullRGB]

    def produced_components(self) -> list[type]:
        return [FullRGB] if self.mode == "decode" else [TiledRGB]

    def run(self, world: World, eids: list[int]) -> None:
        src_type, dst_type = (
            (TiledRGB, FullRGB) if self.mode == "decode" else (FullRGB, TiledRGB)
        )
        for eid in eids:
            pix = world.get_component(eid, src_type).pix
            if self.enabled:
                pix = np.ascontiguousarray(pix[:, ::-1])
            world.add_component(eid, dst_type(pix=pix))


class CropLogical(System):
    """Crop the full image to the footer's logical size.

    Decode only: FullRGB + Footer -> LogicalRGB. The crop is anchored at the
    top-left corner and clamped to the full image.
    """

    def __init__(self, mode: Mode = "decode") -> None:
        super().__init__(mode=mode)
        if mode != "decode":
            raise ValueError("CropLogical only supports mode='decode'")

    def required_components(self) -> list[type]:
        return [FullRGB, Footer]

    def produced_components(self) -> list[type]:
        return [LogicalRGB]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            full = world.get_component(eid, FullRGB).pix
            footer = world.get_component(eid, Footer)

            if footer.logical_clamped:
                logger.warning(
                    "Logical size %dx%d exceeds image %dx%d; clamping",
                    footer.logical_width,
                    footer.logical_height,
                    footer.width,
                    footer.height,
                )

            _, _, right, lower = footer.logical_box
            pix = np.ascontiguousarray(full[:lower, :right])
            world.add_component(eid, LogicalRGB(pix=pix))
