"""
PetAlert - Matching
Spatial index, report lifecycle and the matching service.
"""

from src.matching.geo_index import GeoIndex, GeoMatch, IndexEntry
from src.matching.lifecycle import LifecycleEngine, can_transition, validate_transition
from src.matching.service import MatchingService

__all__ = [
    "GeoIndex",
    "GeoMatch",
    "IndexEntry",
    "LifecycleEngine",
    "can_transition",
    "validate_transition",
    "MatchingService",
]
