"""
Road safety core: hotspot screening, hotspot lifecycle and countermeasure matching.

Usage:
    from roadsafety.services.screening import ScreeningEngine
    from roadsafety.services.cost_model import SimpleCostModel

    engine = ScreeningEngine(accident_provider, hotspot_store, SimpleCostModel())
    candidates = engine.screen(LocationType.ROAD_SEGMENT, threshold=10000)
"""

__version__ = "0.1.0"
