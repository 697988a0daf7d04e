"""Tile unscrambling system.

The pixel stream is cut into 8x8 tiles, stored row by row. Each tile's 64
pixels fill a grid indexed ``grid[col, row]`` column by column, and the grid
is then unscrambled in four steps:

1. every 2x2 block is rotated 90 degrees counter-clockwise
2. the upper-right and lower-left 4x4 quadrants are swapped
3. columns 2, 3, 4, 5 become old columns 4, 5, 2, 3
4. rows 0..3 become old rows 1, 3, 0, 2 (and 4..7 become 5, 7, 4, 6)

All steps are pure permutations, so they collapse into one 64-entry index
table applied to every tile at once.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

import numpy as np

from ootw_decoder.components.footer import Footer
from ootw_decoder.components.image import PixelStream, TiledRGB
from ootw_decoder.core.footer import TILE_HEIGHT, TILE_WIDTH
from ootw_decoder.core.system import System

if TYPE_CHECKING:
    from ootw_decoder.core.world import World

TILE_PIXELS = TILE_WIDTH * TILE_HEIGHT

_COLUMN_ORDER = [0, 1, 4, 5, 2, 3, 6, 7]
_ROW_ORDER = [1, 3, 0, 2, 5, 7, 4, 6]


def rotate_blocks(grid: np.ndarray) -> np.ndarray:
    """Rotate each 2x2 block of a (col, row, ...) grid counter-clockwise."""
    out = grid.copy()
    out[0::2, 0::2] = grid[1::2, 0::2]  # UL <- UR
    out[1::2, 0::2] = grid[1::2, 1::2]  # UR <- DR
    out[1::2, 1::2] = grid[0::2, 1::2]  # DR <- DL
    out[0::2, 1::2] = grid[0::2, 0::2]  # DL <- UL
    return out


def swap_quadrants(grid: np.ndarray) -> np.ndarray:
    """Swap the upper-right and lower-left quadrants."""
    half_w = grid.shape[0] // 2
    half_h = grid.shape[1] // 2
    out = grid.copy()
    out[half_w:, :half_h] = grid[:half_w, half_h:]
    out[:half_w, half_h:] = grid[half_w:, :half_h]
    return out


def shuffle_columns(grid: np.ndarray) -> np.ndarray:
    return grid[_COLUMN_ORDER]


def shuffle_rows(grid: np.ndarray) -> np.ndarray:
    return grid[:, _ROW_ORDER]


@lru_cache(maxsize=None)
def _permutation() -> tuple[int, ...]:
    grid = np.arange(TILE_PIXELS).reshape(TILE_WIDTH, TILE_HEIGHT)
    for step in (rotate_blocks, swap_quadrants, shuffle_columns, shuffle_rows):
        grid = step(grid)
    return tuple(int(i) for i in grid.reshape(-1))


def tile_permutation() -> np.ndarray:
    """Index table mapping grid position ``col * 8 + row`` to stream offset.

    ``unscrambled = tile_stream[tile_permutation()]`` for one tile.
    """
    return np.array(_permutation(), dtype=np.intp)


def inverse_tile_permutation() -> np.ndarray:
    """Inverse of tile_permutation(), used when encoding."""
    return np.argsort(tile_permutation()).astype(np.intp)


class Untile(System):
    """Reassemble tiles into an image, or cut an image back into tiles.

    Modes:
    - 'decode': PixelStream + Footer -> TiledRGB
    - 'encode': TiledRGB -> PixelStream
    """

    def required_components(self) -> list[type]:
        if self.mode == "decode":
            return [PixelStream, Footer]
        return [TiledRGB]

    def produced_components(self) -> list[type]:
        if self.mode == "decode":
            return [TiledRGB]
        return [PixelStream]

    def run(self, world: World, eids: list[int]) -> None:
        if self.mode == "decode":
            self._untile(world, eids)
        else:
            self._tile(world, eids)

    def _untile(self, world: World, eids: list[int]) -> None:
        """PixelStream -> TiledRGB."""
        perm = tile_permutation()
        for eid in eids:
            stream = world.get_component(eid, PixelStream)
            footer = world.get_component(eid, Footer)

            tiles_y = footer.height // TILE_HEIGHT
            tiles_x = footer.width // TILE_WIDTH
            count = tiles_x * tiles_y * TILE_PIXELS
            if len(stream.pix) < count:
                raise ValueError(
                    f"Pixel stream holds {len(stream.pix)} pixels, "
                    f"{footer.width}x{footer.height} needs {count}"
                )

            tiles = stream.pix[:count].reshape(tiles_y, tiles_x, TILE_PIXELS, 3)
            tiles = tiles[:, :, perm, :]

            # (ty, tx, col, row, c) -> (ty, row, tx, col, c) -> (H, W, c)
            grid = tiles.reshape(tiles_y, tiles_x, TILE_WIDTH, TILE_HEIGHT, 3)
            pix = grid.transpose(0, 3, 1, 2, 4).reshape(
                tiles_y * TILE_HEIGHT, tiles_x * TILE_WIDTH, 3
            )

            world.add_component(eid, TiledRGB(pix=np.ascontiguousarray(pix)))

    def _tile(self, world: World, eids: list[int]) -> None:
        """TiledRGB -> PixelStream."""
        inverse = inverse_tile_permutation()
        for eid in eids:
            img = world.get_component(eid, TiledRGB).pix
            height, width = img.shape[:2]
            if width % TILE_WIDTH != 0 or height % TILE_HEIGHT != 0:
                raise ValueError(
                    f"Image size {width}x{height} is not a multiple of "
                    f"the {TILE_WIDTH}x{TILE_HEIGHT} tile size"
                )

            tiles_y = height // TILE_HEIGHT
            tiles_x = width // TILE_WIDTH
            grid = img.reshape(tiles_y, TILE_HEIGHT, tiles_x, TILE_WIDTH, 3)
            tiles = grid.transpose(0, 2, 3, 1, 4).reshape(
                tiles_y, tiles_x, TILE_PIXELS, 3
            )
            stream = tiles[:, :, inverse, :].reshape(-1, 3)

            world.add_component(eid, PixelStream(pix=np.ascontiguousarray(stream)))
