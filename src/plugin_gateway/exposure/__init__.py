"""Exposure module - Layered tool visibility."""

from .schemas import ExposureTier, ExposureStrategyInfo, ScoringWeights
from .scoring import normalize_query, score_operation, rank_operations
from .service import ExposureStrategy, calculate_priority


__all__ = [
    "ExposureTier",
    "ExposureStrategyInfo",
    "ScoringWeights",
    "normalize_query",
    "score_operation",
    "rank_operations",
    "ExposureStrategy",
    "calculate_priority",
]
