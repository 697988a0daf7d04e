"""Footer component describing the stored and visible image size."""

from pydantic import Field

from ootw_decoder.components.image import Component

U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF


class Footer(Component):
    """Trailing 12-byte descriptor of an image file.

    Attributes:
        tag: Leading 4 bytes, not interpreted but kept for re-encoding
        width: Stored image width in pixels
        height: Stored image height in pixels
        logical_width: Width of the visible region
        logical_height: Height of the visible region
    """

    tag: int = Field(default=0, ge=0, le=U32_MAX)
    width: int = Field(ge=0, le=U16_MAX)
    height: int = Field(ge=0, le=U16_MAX)
    logical_width: int = Field(ge=0, le=U16_MAX)
    logical_height: int = Field(ge=0, le=U16_MAX)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def logical_box(self) -> tuple[int, int, int, int]:
        """Crop box (left, upper, right, lower), clamped to the full image."""
        return (
            0,
            0,
            min(self.logical_width, self.width),
            min(self.logical_height, self.height),
        )

    @property
    def logical_clamped(self) -> bool:
        """True if the logical size exceeds the stored image."""
        return self.logical_width > self.width or self.logical_height > self.height
