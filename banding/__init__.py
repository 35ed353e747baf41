"""Edge banding planning."""

from .planner import BandingResult, BandingRule, EdgeBandingPlanner, DEFAULT_RULES

__all__ = ['BandingResult', 'BandingRule', 'EdgeBandingPlanner', 'DEFAULT_RULES']
