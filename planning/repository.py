"""Production plan repositories."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, MutableMapping, Optional

from models.errors import PlanNotFoundError
from models.plan import ProductionPlan

logger = logging.getLogger(__name__)


class ProductionPlanRepository(ABC):
    """
    Storage for production plans, keyed by part id.

    Implementations must make save() a create-or-replace with a single writer
    per part id at a time, and surface their own failures unchanged.
    """

    @abstractmethod
    def save(self, plan: ProductionPlan) -> None:
        """Create or replace the plan of plan.part_id."""
        pass

    @abstractmethod
    def find(self, part_id: str) -> Optional[ProductionPlan]:
        """Return the plan of a part, or None."""
        pass

    @abstractmethod
    def list(self) -> List[ProductionPlan]:
        """All stored plans."""
        pass

    def get(self, part_id: str) -> ProductionPlan:
        plan = self.find(part_id)
        if plan is None:
            raise PlanNotFoundError(f"No production plan for part {part_id!r}", part_id=part_id)
        return plan

    def list_by_order(self, order_id: str) -> List[ProductionPlan]:
        return [plan for plan in self.list() if plan.order_id == order_id]

    def list_by_slab(self, slab_id: str) -> List[ProductionPlan]:
        return [plan for plan in self.list() if plan.wall_saw_plan.slab_id == slab_id]

    def __iter__(self) -> Iterator[ProductionPlan]:
        return iter(self.list())


class InMemoryProductionPlanRepository(ProductionPlanRepository):
    """
    Repository backed by a dictionary of JSON documents.

    Plans are serialized on save and rebuilt on read, so callers never share
    a mutable plan with the store.
    """

    def __init__(self) -> None:
        self._items: MutableMapping[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def __contains__(self, part_id: object) -> bool:
        with self._lock:
            return part_id in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def save(self, plan: ProductionPlan) -> None:
        document = plan.to_dict()
        with self._lock:
            replaced = plan.part_id in self._items
            self._items[plan.part_id] = document
        logger.debug("%s plan for part %s", "Replaced" if replaced else "Created", plan.part_id)

    def find(self, part_id: str) -> Optional[ProductionPlan]:
        with self._lock:
            document = self._items.get(part_id)
        return ProductionPlan.from_dict(document) if document is not None else None

    def list(self) -> List[ProductionPlan]:
        with self._lock:
            documents = list(self._items.values())
        return [ProductionPlan.from_dict(document) for document in documents]

    def as_dicts(self) -> List[Dict[str, Any]]:
        """Stored JSON documents, in insertion order."""
        with self._lock:
            return [dict(document) for document in self._items.values()]
