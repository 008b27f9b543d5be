"""
Trajectory statistics used by the transportation-mode classifiers.

- Percentiles of the speed distribution
- Heading changes between consecutive fixes (circular differences)
- Summary features of a whole trajectory
"""

import math
import numpy as np
import pandas as pd
from typing import Sequence, Tuple
from dataclasses import dataclass

from .coordinates import path_length
from .stops import find_stops
from .trajectory import known_speeds


@dataclass
class TrajectoryFeatures:
    """Container for trajectory-level summary features."""
    num_points: int
    duration: float  # seconds for datetime timestamps, raw units otherwise
    max_speed_kmh: float
    p95_speed_kmh: float
    path_length: float  # meters
    num_stops: int
    mean_heading_change: float  # degrees
    std_heading_change: float  # degrees


def percentile(values: Sequence[float], p: float) -> float:
    """
    Nearest-rank percentile.

    Sorts a copy of ``values`` and picks the element at
    ``ceil(p/100 * n) - 1``, clamped to ``[0, n-1]``. p=100 gives the maximum
    and p=0 the minimum. Returns NaN for empty input.
    """
    ordered = np.sort(np.asarray(values, dtype=float))
    n = len(ordered)
    if n == 0:
        return float('nan')

    index = math.ceil((p / 100) * n) - 1
    index = min(max(index, 0), n - 1)
    return float(ordered[index])


def normalize_angle(angle: float) -> float:
    """Normalize angle to [-pi, pi] radians."""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle < -math.pi:
        angle += 2 * math.pi
    return angle


def heading_changes(df: pd.DataFrame, heading_col: str = 'heading') -> np.ndarray:
    """
    Absolute heading change between consecutive fixes.

    Only adjacent fixes that both carry a heading are paired, so a fully
    headed trajectory of n fixes yields n - 1 changes and any gap makes the
    result shorter.

    Args:
        df: Trajectory DataFrame with headings in radians
        heading_col: Name of heading column

    Returns:
        Array of shortest-arc changes in radians, each in [0, pi]
    """
    if heading_col not in df.columns or len(df) < 2:
        return np.zeros(0)

    headings = pd.to_numeric(df[heading_col], errors='coerce').values.astype(float)
    prev, curr = headings[:-1], headings[1:]
    paired = ~(np.isnan(prev) | np.isnan(curr))

    changes = [abs(normalize_angle(b - a)) for a, b in zip(prev[paired], curr[paired])]
    return np.array(changes, dtype=float)


def heading_change_stats(df: pd.DataFrame, heading_col: str = 'heading') -> Tuple[float, float]:
    """
    Mean and population standard deviation of heading changes, in degrees.

    Returns (nan, nan) when no two adjacent fixes both carry a heading.
    """
    changes = np.degrees(heading_changes(df, heading_col))
    if len(changes) == 0:
        return float('nan'), float('nan')
    return float(np.mean(changes)), float(np.std(changes))


def _duration(df: pd.DataFrame, time_col: str) -> float:
    if len(df) < 2:
        return 0.0
    if pd.api.types.is_datetime64_any_dtype(df[time_col]):
        return (df[time_col].iloc[-1] - df[time_col].iloc[0]).total_seconds()
    return float(df[time_col].iloc[-1] - df[time_col].iloc[0])


def extract_features(df: pd.DataFrame, time_col: str = 'timestamp') -> TrajectoryFeatures:
    """
    Summarize a canonical trajectory DataFrame.

    Args:
        df: DataFrame as produced by ``to_trajectory_frame``
        time_col: Name of timestamp column

    Returns:
        TrajectoryFeatures; speed and heading statistics are NaN when the
        trajectory carries no such data
    """
    speeds = known_speeds(df)
    mean_hc, std_hc = heading_change_stats(df)

    return TrajectoryFeatures(
        num_points=len(df),
        duration=_duration(df, time_col),
        max_speed_kmh=float(np.max(speeds)) if len(speeds) > 0 else float('nan'),
        p95_speed_kmh=percentile(speeds, 95),
        path_length=path_length(df),
        num_stops=len(find_stops(df)),
        mean_heading_change=mean_hc,
        std_heading_change=std_hc,
    )
