"""Nesting engines: place parts onto slabs."""

from .base import NestingEngine
from .guillotine import GuillotineNestingEngine

__all__ = ['NestingEngine', 'GuillotineNestingEngine']
