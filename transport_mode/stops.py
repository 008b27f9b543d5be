"""
Stop detection.

A stop is a maximal run of consecutive fixes whose speed is below a
threshold. Stops are derived on every call and carry no identity beyond
their index range.
"""

import numpy as np
import pandas as pd
from typing import List
from dataclasses import dataclass

from .coordinates import haversine_distance
from .trajectory import MS_TO_KMH


DEFAULT_STOP_SPEED_THRESHOLD = 0.5  # m/s


@dataclass
class Stop:
    """A run of low-speed fixes within a trajectory."""
    start_idx: int
    end_idx: int  # inclusive
    duration: float  # seconds for datetime timestamps, raw units otherwise
    # Distance across the stop: from the fix before the run to the first fix
    # after it (the final fix for a trailing run); 0 if the run starts at 0
    distance: float


def _elapsed(start, end) -> float:
    if start is None or end is None:
        return float('nan')
    delta = end - start
    if isinstance(delta, (pd.Timedelta, np.timedelta64)):
        return pd.Timedelta(delta).total_seconds()
    if hasattr(delta, 'total_seconds'):
        return delta.total_seconds()
    return float(delta)


def find_stops(
    df: pd.DataFrame,
    speed_threshold: float = DEFAULT_STOP_SPEED_THRESHOLD,
    speed_col: str = 'speed_kmh',
    time_col: str = 'timestamp',
    lat_col: str = 'latitude',
    lon_col: str = 'longitude',
) -> List[Stop]:
    """
    Find stops in a trajectory.

    Args:
        df: Trajectory DataFrame (speeds in km/h)
        speed_threshold: Speed below which a fix counts as stopped (m/s)
        speed_col: Name of speed column (km/h); missing speeds count as 0
        time_col: Name of timestamp column
        lat_col: Name of latitude column
        lon_col: Name of longitude column

    Returns:
        Non-overlapping stops in chronological order
    """
    n = len(df)
    stops: List[Stop] = []
    if n == 0:
        return stops

    if speed_col in df.columns:
        speed_ms = np.nan_to_num(df[speed_col].values.astype(float), nan=0.0) / MS_TO_KMH
    else:
        speed_ms = np.zeros(n)
    stopped = speed_ms < speed_threshold

    times = df[time_col].values
    lat = df[lat_col].values.astype(float)
    lon = df[lon_col].values.astype(float)

    def close_run(start: int, end: int, after: int) -> Stop:
        if start > 0:
            dist = float(haversine_distance(lat[start - 1], lon[start - 1], lat[after], lon[after]))
        else:
            dist = 0.0
        return Stop(
            start_idx=start,
            end_idx=end,
            duration=_elapsed(times[start], times[end]),
            distance=dist,
        )

    run_start = None
    for i in range(n):
        if stopped[i]:
            if run_start is None:
                run_start = i
        elif run_start is not None:
            stops.append(close_run(run_start, i - 1, i))
            run_start = None

    # Trailing run is closed at the final fix
    if run_start is not None:
        stops.append(close_run(run_start, n - 1, n - 1))

    return stops
