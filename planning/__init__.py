"""Production planning: plan building, storage and the order workflow."""

from .config import PlannerConfig
from .builder import ProductionPlanBuilder
from .repository import ProductionPlanRepository, InMemoryProductionPlanRepository
from .result import OrderPlanResult, PartOutcome
from .service import ProductionPlanningService, SlabView, SlabViewPart

__all__ = [
    'PlannerConfig',
    'ProductionPlanBuilder',
    'ProductionPlanRepository',
    'InMemoryProductionPlanRepository',
    'OrderPlanResult',
    'PartOutcome',
    'ProductionPlanningService',
    'SlabView',
    'SlabViewPart',
]
