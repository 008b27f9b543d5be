"""
Transportation-mode classifiers.

Four independent rule-based strategies over one GPS trajectory:
- Baseline: bucket of the maximum speed
- Percentile95: bucket of the 95th-percentile speed (outlier resistant)
- Stop pattern: bus vs. car from stop frequency and spacing
- Heading change: fixed vs. variable route from heading-change statistics

All of them are pure: they never raise on empty or single-fix trajectories
and answer with a sentinel (UNKNOWN, None or UNCERTAIN) instead.
"""

import numpy as np
import pandas as pd
from typing import Any, Iterable, Mapping, Optional, Union
from dataclasses import dataclass
from enum import Enum

from .config import ClassifierConfig
from .coordinates import path_length
from .features import heading_change_stats, percentile
from .log import get_logger
from .stops import find_stops
from .trajectory import Sample, known_speeds, to_trajectory_frame

logger = get_logger(__name__)

TrajectoryLike = Union[pd.DataFrame, Iterable[Union[Sample, Mapping]], None]


class TransportMode(Enum):
    """Ground-truth transportation modes."""
    WALKING = "walking"
    CYCLING = "cycling"
    BUS = "bus"
    CAR = "car"
    TRAIN = "train"


class SpeedClass(Enum):
    """Labels of the speed-threshold classifiers."""
    WALKING = "walking"
    CYCLING = "cycling"
    BUS_OR_CAR = "bus-or-car"
    TRAIN = "train"
    UNKNOWN = "unknown"


class RouteType(Enum):
    """Labels of the heading-change classifier."""
    FIXED_ROUTE = "fixed-route"
    VARIABLE_ROUTE = "variable-route"
    UNCERTAIN = "uncertain"


TRANSPORT_MODES = [mode.value for mode in TransportMode]

_SPEED_CLASS_TO_MODE = {
    SpeedClass.WALKING: TransportMode.WALKING,
    SpeedClass.CYCLING: TransportMode.CYCLING,
    SpeedClass.TRAIN: TransportMode.TRAIN,
}


@dataclass
class ClassificationResult:
    """Labels produced by every classifier for one trajectory."""
    baseline: SpeedClass
    percentile95: SpeedClass
    stop_pattern: Optional[TransportMode]
    heading_change: Optional[RouteType]
    # Percentile95 class with bus-or-car resolved by the stop pattern
    mode: Optional[TransportMode]


class TransportModeClassifier:
    """
    Classifies a trajectory's transportation mode with four heuristics.

    Classification logic:
    - Speed classes: max (baseline) or 95th-percentile speed against fixed
      km/h buckets walking < 7 <= cycling < 25 <= bus-or-car < 80 <= train < 200
    - Stop pattern: only for automotive max speeds; more than one stop per km,
      or at least two stops spaced like bus stops, means bus
    - Heading change: low mean/std of heading changes means a fixed route,
      high mean or std a variable one, the band between is uncertain
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        """
        Initialize the classifier.

        Args:
            config: Thresholds to use; defaults to ClassifierConfig()
        """
        self.config = config if config is not None else ClassifierConfig()

    def _speed_class(self, speed: float) -> SpeedClass:
        walking_max, cycling_max, automotive_max, train_max = self.config.speed_bands
        if speed < walking_max:
            return SpeedClass.WALKING
        if speed < cycling_max:
            return SpeedClass.CYCLING
        if speed < automotive_max:
            return SpeedClass.BUS_OR_CAR
        if speed < train_max:
            return SpeedClass.TRAIN
        # Also reached for NaN speeds
        return SpeedClass.UNKNOWN

    def baseline(self, trajectory: TrajectoryLike) -> SpeedClass:
        """Classify by the maximum speed (km/h)."""
        speeds = known_speeds(to_trajectory_frame(trajectory))
        if len(speeds) == 0:
            logger.debug("baseline: no speed data")
            return SpeedClass.UNKNOWN
        return self._speed_class(float(np.max(speeds)))

    def percentile95(self, trajectory: TrajectoryLike) -> SpeedClass:
        """Classify by the configured speed percentile, robust to a single spike."""
        speeds = known_speeds(to_trajectory_frame(trajectory))
        if len(speeds) == 0:
            logger.debug("percentile95: no speed data")
            return SpeedClass.UNKNOWN
        return self._speed_class(percentile(speeds, self.config.speed_percentile))

    def stop_pattern(self, trajectory: TrajectoryLike) -> Optional[TransportMode]:
        """
        Distinguish bus from car by how often and how regularly it stops.

        Returns None when the maximum speed is outside the automotive range,
        since stop patterns say nothing about walking, cycling or trains.
        """
        df = to_trajectory_frame(trajectory)
        speeds = known_speeds(df)
        if len(speeds) == 0:
            return None

        max_speed = float(np.max(speeds))
        if not self.config.automotive_min_kmh <= max_speed < self.config.automotive_max_kmh:
            logger.debug(f"stop_pattern: max speed {max_speed:.1f} km/h outside automotive range")
            return None

        stops = find_stops(df, self.config.stop_speed_threshold)
        if len(stops) == 0:
            return TransportMode.CAR

        total_distance = path_length(df)
        avg_stop_spacing = total_distance / max(1, len(stops))
        # NaN coordinates give a NaN path length, which fails both bus rules
        if total_distance == 0:
            stops_per_km = float('inf')
        else:
            stops_per_km = len(stops) / (total_distance / 1000)

        if stops_per_km > self.config.bus_stops_per_km:
            return TransportMode.BUS

        in_bus_spacing = self.config.bus_spacing_min_m < avg_stop_spacing < self.config.bus_spacing_max_m
        if in_bus_spacing and len(stops) >= self.config.min_bus_stops:
            return TransportMode.BUS

        return TransportMode.CAR

    def heading_change(self, trajectory: TrajectoryLike) -> Optional[RouteType]:
        """
        Classify a route as fixed (rails, bus lines) or variable (free driving).

        Needs two adjacent fixes with a heading; returns None otherwise.
        """
        mean_deg, std_deg = heading_change_stats(to_trajectory_frame(trajectory))
        if np.isnan(mean_deg):
            logger.debug("heading_change: no adjacent headed fixes")
            return None

        cfg = self.config
        if mean_deg < cfg.fixed_mean_deg and std_deg < cfg.fixed_std_deg:
            return RouteType.FIXED_ROUTE
        if mean_deg > cfg.variable_mean_deg or std_deg > cfg.variable_std_deg:
            return RouteType.VARIABLE_ROUTE
        return RouteType.UNCERTAIN

    def classify(self, trajectory: TrajectoryLike) -> ClassificationResult:
        """
        Run all four classifiers on one trajectory.

        Args:
            trajectory: DataFrame or iterable of samples

        Returns:
            ClassificationResult with every label and the combined mode
        """
        df = to_trajectory_frame(trajectory)

        p95 = self.percentile95(df)
        stop_pattern = self.stop_pattern(df)

        if p95 == SpeedClass.BUS_OR_CAR:
            mode = stop_pattern if stop_pattern is not None else TransportMode.CAR
        else:
            mode = _SPEED_CLASS_TO_MODE.get(p95)

        return ClassificationResult(
            baseline=self.baseline(df),
            percentile95=p95,
            stop_pattern=stop_pattern,
            heading_change=self.heading_change(df),
            mode=mode,
        )


def baseline_classify(trajectory: TrajectoryLike, config: Optional[ClassifierConfig] = None) -> SpeedClass:
    """Convenience function for TransportModeClassifier.baseline."""
    return TransportModeClassifier(config).baseline(trajectory)


def percentile95_classify(trajectory: TrajectoryLike, config: Optional[ClassifierConfig] = None) -> SpeedClass:
    """Convenience function for TransportModeClassifier.percentile95."""
    return TransportModeClassifier(config).percentile95(trajectory)


def stop_pattern_classify(
    trajectory: TrajectoryLike,
    config: Optional[ClassifierConfig] = None,
) -> Optional[TransportMode]:
    """Convenience function for TransportModeClassifier.stop_pattern."""
    return TransportModeClassifier(config).stop_pattern(trajectory)


def heading_change_classify(
    trajectory: TrajectoryLike,
    config: Optional[ClassifierConfig] = None,
) -> Optional[RouteType]:
    """Convenience function for TransportModeClassifier.heading_change."""
    return TransportModeClassifier(config).heading_change(trajectory)


def classify_trajectory(
    trajectory: TrajectoryLike,
    config: Optional[ClassifierConfig] = None,
) -> ClassificationResult:
    """
    Convenience function to run every classifier on a trajectory.

    Args:
        trajectory: DataFrame or iterable of samples
        config: Optional thresholds

    Returns:
        ClassificationResult with all labels
    """
    return TransportModeClassifier(config).classify(trajectory)


def sensor_transport_mode(motion: Optional[Mapping[str, Any]]) -> str:
    """
    Ground-truth label from a phone motion-activity record.

    Walking or running wins over cycling, which wins over automotive and
    then stationary. Automotive cannot tell bus, car and train apart, so it
    is returned as ``"automotive"``.
    """
    if not motion:
        return "unknown"

    def flag(snake: str, camel: str) -> bool:
        return bool(motion.get(snake, motion.get(camel, False)))

    if flag('is_walking', 'isWalking') or flag('is_running', 'isRunning'):
        return TransportMode.WALKING.value
    if flag('is_cycling', 'isCycling'):
        return TransportMode.CYCLING.value
    if flag('is_automotive', 'isAutomotive'):
        return "automotive"
    if flag('is_stationary', 'isStationary'):
        return "stationary"
    return "unknown"


def automotive_transport_mode(speed_ms: float) -> TransportMode:
    """Split an automotive sensor label by speed (m/s): train above 25, car above 15, else bus."""
    if speed_ms > 25:
        return TransportMode.TRAIN
    if speed_ms > 15:
        return TransportMode.CAR
    return TransportMode.BUS
