"""
Geospatial primitives for trajectory analysis.

Great-circle distance and initial bearing between GPS fixes on a spherical
Earth. Everything here is a pure function; out-of-range coordinates are not
validated and simply flow through the trigonometry.
"""

import numpy as np
import pandas as pd
from typing import Any


EARTH_RADIUS_M = 6371000.0  # Spherical Earth radius (meters)


def _coord(point: Any, name: str) -> float:
    """Read a coordinate from either a mapping/row or an object attribute."""
    if hasattr(point, name):
        return getattr(point, name)
    return point[name]


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great-circle distance between two points using Haversine formula.

    Args:
        lat1, lon1: First point (degrees)
        lat2, lon2: Second point (degrees)

    Returns:
        Distance in meters
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlat = np.radians(lat2 - lat1)
    dlon = np.radians(lon2 - lon1)

    a = np.sin(dlat / 2)**2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2)**2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def compute_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Compute initial bearing from point 1 to point 2.

    Args:
        lat1, lon1: First point (degrees)
        lat2, lon2: Second point (degrees)

    Returns:
        Bearing in radians in [0, 2*pi), where 0 is North. Coincident
        points give 0.
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlon_rad = np.radians(lon2 - lon1)

    x = np.sin(dlon_rad) * np.cos(lat2_rad)
    y = np.cos(lat1_rad) * np.sin(lat2_rad) - np.sin(lat1_rad) * np.cos(lat2_rad) * np.cos(dlon_rad)

    bearing = float(np.arctan2(x, y))
    if bearing < 0:
        bearing += 2 * np.pi
    # Tiny negative angles round up to exactly 2*pi
    if bearing >= 2 * np.pi:
        bearing -= 2 * np.pi
    return bearing


def distance(a: Any, b: Any) -> float:
    """Great-circle distance in meters between two samples."""
    return float(haversine_distance(
        _coord(a, 'latitude'), _coord(a, 'longitude'),
        _coord(b, 'latitude'), _coord(b, 'longitude'),
    ))


def bearing(a: Any, b: Any) -> float:
    """Initial bearing in radians from sample a to sample b."""
    return compute_bearing(
        _coord(a, 'latitude'), _coord(a, 'longitude'),
        _coord(b, 'latitude'), _coord(b, 'longitude'),
    )


def segment_distances(
    df: pd.DataFrame,
    lat_col: str = 'latitude',
    lon_col: str = 'longitude',
) -> np.ndarray:
    """
    Distances between consecutive fixes of a trajectory.

    Args:
        df: Trajectory DataFrame
        lat_col: Name of latitude column (degrees)
        lon_col: Name of longitude column (degrees)

    Returns:
        Array of length len(df) - 1 (empty for fewer than two points)
    """
    if len(df) < 2:
        return np.zeros(0)

    lat = df[lat_col].values.astype(float)
    lon = df[lon_col].values.astype(float)

    return haversine_distance(lat[:-1], lon[:-1], lat[1:], lon[1:])


def path_length(df: pd.DataFrame, lat_col: str = 'latitude', lon_col: str = 'longitude') -> float:
    """Total travelled distance in meters (sum of consecutive segments)."""
    return float(np.sum(segment_distances(df, lat_col, lon_col)))
