"""Egg Tracker package: chicken registry, egg records and daily rollups."""

from .core.tracker import EggTracker
from .core.container import DIContainer

__all__ = [
    "EggTracker",
    "DIContainer",
    "domain",
    "summary",
    "storage",
    "core",
    "api",
    "utils",
]
