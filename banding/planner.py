"""Edge banding planner."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from models.part import PartDescriptor
from models.plan import EDGES, EdgeBand


@dataclass(frozen=True)
class BandingRule:
    """
    One row of the banding policy.

    Attributes:
        keywords: Case-insensitive substrings matched against the part role
        banded: Edges to band, in banding order
    """
    keywords: Tuple[str, ...]
    banded: Tuple[str, ...]

    def matches(self, role: str) -> bool:
        role = role.lower()
        return any(keyword in role for keyword in self.keywords)


@dataclass(frozen=True)
class BandingResult:
    """Edge decisions plus the banded edges in order."""
    edges: Dict[str, EdgeBand]
    sequence: List[str]


# Banding policy, first match wins. "top" is the front-facing edge.
DEFAULT_RULES: Tuple[BandingRule, ...] = (
    BandingRule(keywords=("back",), banded=()),
    BandingRule(keywords=("shelf",), banded=("top",)),
    BandingRule(keywords=("side", "left", "right"), banded=("top", "bottom", "left")),
)

DEFAULT_BANDED = ("top", "bottom", "left", "right")


class EdgeBandingPlanner:
    """
    Decides which edges of a part get banded and in which order.

    The rules are an ordered policy table matched on the part role (or its
    name when no role is given). Pass different rules to change the policy.
    """

    def __init__(self,
                 rules: Optional[Sequence[BandingRule]] = None,
                 default: Sequence[str] = DEFAULT_BANDED):
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES
        self.default = tuple(default)

    def banded_edges(self, role: str) -> Tuple[str, ...]:
        """Edges to band for a role, in order."""
        for rule in self.rules:
            if rule.matches(role):
                return rule.banded
        return self.default

    def plan_banding(self, part: PartDescriptor) -> BandingResult:
        """
        Plan banding for a part.

        Returns:
            BandingResult with all four edges and the banding sequence
        """
        banded = self.banded_edges(part.part_type)
        edges = {
            edge: EdgeBand(band=True, order=banded.index(edge) + 1) if edge in banded
            else EdgeBand(band=False, order=0)
            for edge in EDGES
        }
        sequence = sorted(
            (edge for edge, band in edges.items() if band.band),
            key=lambda edge: edges[edge].order
        )
        return BandingResult(edges=edges, sequence=sequence)

    def __repr__(self) -> str:
        return f"EdgeBandingPlanner(rules={len(self.rules)})"
