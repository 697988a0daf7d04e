"""Image components: RawBinary, PixelStream, TiledRGB, FullRGB, LogicalRGB."""

from typing import Any

import numpy as np
from pydantic import BaseModel, field_validator


class Component(BaseModel):
    """Base class for all pipeline components.

    Components are data containers using Pydantic for validation. Pixel data
    is held as numpy arrays, so arbitrary types are allowed.
    """

    model_config = {"arbitrary_types_allowed": True}


class RawBinary(Component):
    """Pixel region of an input file, footer already stripped.

    Attributes:
        data: 1-D uint8 array of the bytes preceding the footer
    """

    data: np.ndarray

    @field_validator("data")
    @classmethod
    def check_data(cls, data: Any) -> np.ndarray:
        if not isinstance(data, np.ndarray):
            raise TypeError(f"Expected ndarray, got {type(data)}")
        if data.ndim != 1 or data.dtype != np.uint8:
            raise ValueError(
                f"Expected 1-D uint8 array, got {data.ndim}-D {data.dtype}"
            )
        return data


class PixelStream(Component):
    """Pixels in stored (tile) order after byte reversal.

    Attributes:
        pix: (N, 3) uint8 array of RGB triples
    """

    pix: np.ndarray

    @field_validator("pix")
    @classmethod
    def check_pix(cls, pix: Any) -> np.ndarray:
        if not isinstance(pix, np.ndarray):
            raise TypeError(f"Expected ndarray, got {type(pix)}")
        if pix.ndim != 2 or pix.shape[1] != 3 or pix.dtype != np.uint8:
            raise ValueError(
                f"Expected (N, 3) uint8 array, got {pix.shape} {pix.dtype}"
            )
        return pix


class ImageComponent(Component):
    """Base for components holding an (H, W, 3) uint8 RGB image."""

    pix: np.ndarray

    @field_validator("pix")
    @classmethod
    def check_pix(cls, pix: Any) -> np.ndarray:
        if not isinstance(pix, np.ndarray):
            raise TypeError(f"Expected ndarray, got {type(pix)}")
        if pix.ndim != 3 or pix.shape[2] != 3:
            raise ValueError(f"Expected shape (H, W, 3), got {pix.shape}")
        if pix.dtype != np.uint8:
            raise ValueError(f"Expected dtype uint8, got {pix.dtype}")
        return pix

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) of the image."""
        return int(self.pix.shape[1]), int(self.pix.shape[0])


class TiledRGB(ImageComponent):
    """Image assembled from tiles, before mirroring."""


class FullRGB(ImageComponent):
    """Complete stored image as it is shown in game."""


class LogicalRGB(ImageComponent):
    """Visible region of the full image, cropped to the logical size."""
