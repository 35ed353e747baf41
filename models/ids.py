"""Identifier generators for slabs and CNC programs."""

import itertools
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Optional


class IDGenerator(ABC):
    """Source of unique identifiers, injected wherever ids are minted."""

    @abstractmethod
    def new_id(self) -> str:
        """Return a fresh identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class UUIDGenerator(IDGenerator):
    """
    Random UUID4 identifiers, used in production.

    Args:
        length: Keep only the first characters of each id (None keeps all)
    """

    def __init__(self, length: Optional[int] = None):
        self.length = length

    def new_id(self) -> str:
        value = str(uuid.uuid4())
        return value[:self.length] if self.length else value


class SequentialIdGenerator(IDGenerator):
    """
    Deterministic identifiers of the form ``<prefix>_<counter:05d>``.

    Args:
        prefix: Text placed before the counter (e.g. "slab")
        start: First counter value
    """

    def __init__(self, prefix: str = "id", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            value = next(self._counter)
        return f"{self.prefix}_{value:05d}"

    def __repr__(self) -> str:
        return f"SequentialIdGenerator(prefix={self.prefix})"
