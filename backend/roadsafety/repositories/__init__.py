"""
Storage adapters for accidents, hotspots, countermeasures and projects.
"""

from .base import AccidentProvider, CountermeasureStore, HotspotStore, ProjectStore
from .caching import CachingAccidentProvider
from .memory import (
    InMemoryAccidentProvider,
    InMemoryCountermeasureStore,
    InMemoryHotspotStore,
    InMemoryProjectStore,
)

__all__ = [
    "AccidentProvider",
    "CachingAccidentProvider",
    "CountermeasureStore",
    "HotspotStore",
    "InMemoryAccidentProvider",
    "InMemoryCountermeasureStore",
    "InMemoryHotspotStore",
    "InMemoryProjectStore",
    "ProjectStore",
]
