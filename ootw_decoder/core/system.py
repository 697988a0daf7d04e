"""System base class for conversion stages.

Systems operate on components attached to entities, reading required
components and producing new ones.

Systems support two modes:
- 'decode': file bytes towards pixels (the converter direction)
- 'encode': pixels back towards file bytes

Example:
    >>> class MyStage(System):
    ...     def required_components(self):
    ...         return [InputComponent]
    ...     def produced_components(self):
    ...         return [OutputComponent]
    ...     def run(self, world, eids):
    ...         for eid in eids:
    ...             src = world.get_component(eid, InputComponent)
    ...             world.add_component(eid, OutputComponent(...))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from ootw_decoder.core.world import World

Mode = Literal["decode", "encode"]


class System(ABC):
    """Base class for all conversion stages.

    Attributes:
        mode: Transformation direction ('decode' or 'encode')
    """

    def __init__(self, mode: Mode = "decode") -> None:
        if mode not in ("decode", "encode"):
            raise ValueError(f"mode must be 'decode' or 'encode', got {mode!r}")
        self.mode = mode

    @abstractmethod
    def required_components(self) -> list[type]:
        """Return list of component types this system requires as input."""
        pass

    @abstractmethod
    def produced_components(self) -> list[type]:
        """Return list of component types this system produces as output."""
        pass

    @abstractmethod
    def run(self, world: World, eids: list[int]) -> None:
        """Execute system on given entities.

        Args:
            world: World instance with entities and components
            eids: List of entity IDs to process
        """
        pass

    def can_run(self, world: World, eid: int) -> bool:
        """Check if entity has all required components."""
        return all(world.has_component(eid, ct) for ct in self.required_components())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(mode={self.mode})"
