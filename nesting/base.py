"""Abstract base class for nesting engines."""

from abc import ABC, abstractmethod
from typing import List

from models.part import PartDescriptor
from models.slab import Slab


class NestingEngine(ABC):
    """
    Abstract base class for all slab nesting algorithms.
    Any algorithm must implement this interface.
    """

    @abstractmethod
    def pack(self, parts: List[PartDescriptor]) -> List[Slab]:
        """
        Nest parts of a single material onto as many slabs as needed.

        Args:
            parts: Parts sharing one material (grouping is the caller's job)

        Returns:
            Slabs with at least one placement each

        Raises:
            PartTooLargeForSlab: if any part fits no slab in any orientation
        """
        pass

    @abstractmethod
    def check_fits(self, part: PartDescriptor) -> None:
        """
        Raise PartTooLargeForSlab if the part cannot be nested at all.

        Lets callers screen a batch part by part before packing.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
