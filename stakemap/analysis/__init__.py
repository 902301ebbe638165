"""Perception aggregation — mean positions, dispersion, and dissonance."""

from stakemap.analysis.aggregation import aggregate_global, aggregate_per_respondent
from stakemap.analysis.dissonance import build_distance_matrix, compute_dissonance
from stakemap.analysis.metrics import impact_score, normalize_distance, zone_label
from stakemap.analysis.models import AggregatedPoint, DissonancePair, DistanceMatrix

__all__ = [
    "AggregatedPoint",
    "DissonancePair",
    "DistanceMatrix",
    "aggregate_global",
    "aggregate_per_respondent",
    "build_distance_matrix",
    "compute_dissonance",
    "impact_score",
    "normalize_distance",
    "zone_label",
]
