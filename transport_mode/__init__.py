"""
Transport Mode - Guess how a GPS trajectory was travelled.

This package provides tools for:
- Normalising raw GPS fixes into a canonical trajectory DataFrame
- Geospatial primitives (great-circle distance, bearing)
- Trajectory statistics (speed percentiles, heading changes, stops)
- Four rule-based classifiers (baseline, percentile95, stop pattern, heading change)
- Scoring classifiers with confusion matrices, precision, recall and F1
- Synthetic trajectories per mode for testing and calibration

Example usage:
    from transport_mode import classify_trajectory, generate_trajectory

    # Generate sample data
    df = generate_trajectory('bus', duration=600, seed=42)

    # Classify
    result = classify_trajectory(df)
    print(result.percentile95, result.stop_pattern, result.mode)
"""

from .classifier import (
    classify_trajectory,
    TransportModeClassifier,
    TransportMode,
    SpeedClass,
    RouteType,
    baseline_classify,
    percentile95_classify,
    stop_pattern_classify,
    heading_change_classify,
)
from .config import ClassifierConfig
from .coordinates import distance, bearing, haversine_distance
from .evaluation import (
    build_confusion_matrix,
    accuracy,
    precision,
    recall,
    f1_score,
    compare_classifiers,
)
from .features import percentile, heading_changes, extract_features
from .sample_data import generate_trajectory, generate_trajectory_dataset
from .stops import find_stops, Stop
from .trajectory import Sample, to_trajectory_frame

__version__ = "0.1.0"
__all__ = [
    "classify_trajectory",
    "TransportModeClassifier",
    "TransportMode",
    "SpeedClass",
    "RouteType",
    "baseline_classify",
    "percentile95_classify",
    "stop_pattern_classify",
    "heading_change_classify",
    "ClassifierConfig",
    "distance",
    "bearing",
    "haversine_distance",
    "build_confusion_matrix",
    "accuracy",
    "precision",
    "recall",
    "f1_score",
    "compare_classifiers",
    "percentile",
    "heading_changes",
    "extract_features",
    "generate_trajectory",
    "generate_trajectory_dataset",
    "find_stops",
    "Stop",
    "Sample",
    "to_trajectory_frame",
]
