"""World: entity and component registry for conversion runs.

The World is the central registry that manages:
- Entity creation (integer IDs)
- Component storage (type -> entity -> component mapping)

Example:
    >>> world = World()
    >>> eid = world.spawn_binary(open("title.bin", "rb").read())
    >>> world.has_component(eid, RawBinary)
    True
    >>> world.clear()  # Reset for next file
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import numpy as np
from pydantic import BaseModel

from ootw_decoder.core.footer import split_payload

if TYPE_CHECKING:
    from ootw_decoder.core.pipeline import Pipe

Component = BaseModel

T = TypeVar("T", bound=Component)


class World:
    """Registry of entities and their components.

    Example:
        >>> world = World()
        >>> eid = world.spawn_binary(data)
        >>> world.pipe(eid).to(PixelUnpack()).out(PixelStream)
        >>> world.clear()
    """

    def __init__(self) -> None:
        self._next_eid = 0
        self._components: dict[type[Component], dict[int, Component]] = {}
        self._entities: set[int] = set()

    def new_entity(self) -> int:
        """Create a new entity and return its ID.

        Returns:
            Entity ID (monotonically increasing integer)
        """
        eid = self._next_eid
        self._next_eid += 1
        self._entities.add(eid)
        return eid

    def spawn_binary(self, data: bytes) -> int:
        """Ingest the raw contents of an image file.

        Args:
            data: Complete file contents, footer included

        Returns:
            Entity ID with RawBinary and Footer components attached

        Raises:
            TruncatedDataError: If data cannot hold a footer
        """
        from ootw_decoder.components.image import RawBinary

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected bytes, got {type(data)}")

        pixels, footer = split_payload(bytes(data))

        eid = self.new_entity()
        self.add_component(eid, RawBinary(data=pixels))
        self.add_component(eid, footer)

        return eid

    def spawn_image(
        self,
        img: np.ndarray,
        logical_size: tuple[int, int] | None = None,
        tag: int = 0,
    ) -> int:
        """Ingest an RGB image for re-encoding.

        Args:
            img: RGB image array (H, W, 3) uint8
            logical_size: (width, height) of the visible region; defaults
                to the full image
            tag: Opaque footer tag to store

        Returns:
            Entity ID with FullRGB and Footer components attached

        Raises:
            ValueError: If image shape or dtype is invalid
        """
        from ootw_decoder.components.footer import Footer
        from ootw_decoder.components.image import FullRGB

        if not isinstance(img, np.ndarray):
            raise TypeError(f"Expected ndarray, got {type(img)}")
        if img.ndim != 3 or img.shape[2] != 3:
            raise ValueError(
                f"Expected image with shape (H, W, 3), got {img.shape}"
            )
        if img.dtype != np.uint8:
            raise ValueError(f"Expected dtype uint8, got {img.dtype}")

        height, width = int(img.shape[0]), int(img.shape[1])
        logical_width, logical_height = logical_size or (width, height)

        eid = self.new_entity()
        self.add_component(eid, FullRGB(pix=np.ascontiguousarray(img)))
        self.add_component(
            eid,
            Footer(
                tag=tag,
                width=width,
                height=height,
                logical_width=logical_width,
                logical_height=logical_height,
            ),
        )

        return eid

    def clear(self) -> None:
        """Drop all entities and components so the World can be reused."""
        self._next_eid = 0
        self._components.clear()
        self._entities.clear()

    def add_component(self, eid: int, component: Component) -> None:
        """Attach a component to an entity, replacing one of the same type.

        Raises:
            ValueError: If entity does not exist
        """
        if eid not in self._entities:
            raise ValueError(f"Entity {eid} does not exist")

        comp_type = type(component)
        if comp_type not in self._components:
            self._components[comp_type] = {}

        self._components[comp_type][eid] = component

    def get_component(self, eid: int, comp_type: type[T]) -> T:
        """Retrieve a component from an entity.

        Raises:
            KeyError: If entity does not have the component
        """
        if comp_type not in self._components:
            raise KeyError(f"No entities have component type {comp_type.__name__}")
        if eid not in self._components[comp_type]:
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")

        return self._components[comp_type][eid]  # type: ignore

    def has_component(self, eid: int, comp_type: type[Component]) -> bool:
        return (
            comp_type in self._components
            and eid in self._components[comp_type]
        )

    def pipe(self, entity: int) -> "Pipe":
        """Start a fluent pipeline for the given entity.

        Systems are executed in order when `.out()` is called.

        Example:
            >>> full = (
            ...     world.pipe(entity)
            ...     .to(PixelUnpack())
            ...     .to(Untile())
            ...     .to(MirrorX())
            ...     .out(FullRGB)
            ... )
        """
        from ootw_decoder.core.pipeline import Pipe

        return Pipe(world=self, entity=entity)

    def __repr__(self) -> str:
        num_entities = len(self._entities)
        num_comp_types = len(self._components)
        return f"World(entities={num_entities}, component_types={num_comp_types})"
