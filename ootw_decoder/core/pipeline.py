"""Fluent pipeline for chaining conversion stages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from ootw_decoder.core.system import System
    from ootw_decoder.core.world import World

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class Pipe:
    """Fluent pipeline builder with dependency checking.

    Systems are chained with `.to()` or the `|` operator and run in order
    by `.execute()` or `.out()`.

    Example:
        >>> world = World()
        >>> entity = world.spawn_binary(data)
        >>> stream = (
        ...     world.pipe(entity)
        ...     .to(PixelUnpack())
        ...     .out(PixelStream)
        ... )
    """

    def __init__(self, world: "World", entity: int) -> None:
        self.world: World = world
        self.entities = [entity]
        self.systems: list[System] = []

    def to(self, system: "System") -> "Pipe":
        """Add system to pipeline."""
        self.systems.append(system)
        return self

    def __or__(self, system: "System") -> "Pipe":
        """Pipe operator, equivalent to `.to(system)`."""
        return self.to(system)

    def out(self, component_type: type[T]) -> T:
        """Execute pipeline and return component of specified type.

        Raises:
            RuntimeError: If any system cannot run (missing dependencies)
            KeyError: If entity doesn't have the requested component after execution
        """
        self.execute()
        return self.world.get_component(self.entities[0], component_type)

    def execute(self) -> None:
        """Run all systems in order.

        Raises:
            RuntimeError: If any system cannot run on any entity
        """
        for system in self.systems:
            runnable = [
                eid for eid in self.entities if system.can_run(self.world, eid)
            ]

            if not runnable:
                required = [ct.__name__ for ct in system.required_components()]
                raise RuntimeError(
                    f"System {type(system).__name__} cannot run: "
                    f"entities missing required components {required}. "
                    f"Available entities: {self.entities}"
                )

            logger.debug("Running %r on entities %s", system, runnable)
            system.run(self.world, runnable)
