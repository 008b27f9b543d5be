"""
Trajectory representation and ingestion.

GPS fixes arrive from the data-acquisition layer in several shapes: speed in
m/s (``speed``) or km/h (``speedKmh``), heading in radians or degrees,
camelCase or snake_case keys. Everything is normalised once here into a
canonical DataFrame so the classifiers only ever see:

- ``timestamp``: monotonically non-decreasing (numeric or datetime)
- ``latitude`` / ``longitude``: decimal degrees
- ``speed_kmh``: km/h, NaN when unknown
- ``heading``: radians, NaN when unknown

Values are not validated: negative speeds and NaN coordinates pass through.
"""

import math
import numpy as np
import pandas as pd
from typing import Any, Iterable, Mapping, Optional, Union
from dataclasses import dataclass, asdict


MS_TO_KMH = 3.6

TRAJECTORY_COLUMNS = ['timestamp', 'latitude', 'longitude', 'speed_kmh', 'heading']

# Accepted spellings, in order of preference
_SPEED_KMH_KEYS = ('speed_kmh', 'speedKmh')
_SPEED_MS_KEYS = ('speed',)
_HEADING_RAD_KEYS = ('heading',)
_HEADING_DEG_KEYS = ('heading_degrees', 'headingDegrees')


@dataclass
class Sample:
    """One GPS fix."""
    timestamp: Any
    latitude: float
    longitude: float
    speed_kmh: Optional[float] = None
    heading: Optional[float] = None  # radians


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


def _first_present(raw: Mapping, keys) -> Optional[float]:
    for key in keys:
        value = raw.get(key)
        if not _is_missing(value):
            return value
    return None


def normalize_sample(raw: Union[Sample, Mapping]) -> Sample:
    """
    Convert a raw fix into a canonical Sample.

    km/h fields win over m/s ones, and radian headings win over degree ones.
    Missing latitude/longitude become NaN rather than raising, so a sparse
    fix can still contribute its speed.
    """
    if isinstance(raw, Sample):
        return raw

    speed_kmh = _first_present(raw, _SPEED_KMH_KEYS)
    if speed_kmh is None:
        speed_ms = _first_present(raw, _SPEED_MS_KEYS)
        if speed_ms is not None:
            speed_kmh = speed_ms * MS_TO_KMH

    heading = _first_present(raw, _HEADING_RAD_KEYS)
    if heading is None:
        heading_deg = _first_present(raw, _HEADING_DEG_KEYS)
        if heading_deg is not None:
            heading = math.radians(heading_deg)

    return Sample(
        timestamp=raw.get('timestamp'),
        latitude=raw.get('latitude', np.nan),
        longitude=raw.get('longitude', np.nan),
        speed_kmh=speed_kmh,
        heading=heading,
    )


def _normalize_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Copy a DataFrame and map legacy columns onto the canonical ones."""
    result = df.copy()

    if 'speed_kmh' not in result.columns:
        if 'speedKmh' in result.columns:
            result['speed_kmh'] = result['speedKmh']
        elif 'speed' in result.columns:
            result['speed_kmh'] = result['speed'] * MS_TO_KMH
        else:
            result['speed_kmh'] = np.nan

    if 'heading' not in result.columns:
        for col in _HEADING_DEG_KEYS:
            if col in result.columns:
                result['heading'] = np.radians(result[col])
                break
        else:
            result['heading'] = np.nan

    for col in ('timestamp', 'latitude', 'longitude'):
        if col not in result.columns:
            if len(result) == 0:
                result[col] = pd.Series(dtype=float)
            else:
                raise ValueError(f"Trajectory is missing required column: {col}")

    result['speed_kmh'] = result['speed_kmh'].astype(float)
    result['heading'] = result['heading'].astype(float)

    return result.reset_index(drop=True)


def to_trajectory_frame(
    data: Union[pd.DataFrame, Iterable[Union[Sample, Mapping]], None],
) -> pd.DataFrame:
    """
    Build a canonical trajectory DataFrame.

    Args:
        data: DataFrame, or iterable of Sample objects / mappings, in
            chronological order. None is treated as empty.

    Returns:
        DataFrame with at least TRAJECTORY_COLUMNS; a DataFrame input keeps
        its extra columns. The input is never modified.
    """
    if data is None:
        return pd.DataFrame({col: pd.Series(dtype=float) for col in TRAJECTORY_COLUMNS})

    if isinstance(data, pd.DataFrame):
        return _normalize_frame(data)

    rows = [asdict(normalize_sample(raw)) for raw in data]
    if not rows:
        return pd.DataFrame({col: pd.Series(dtype=float) for col in TRAJECTORY_COLUMNS})

    df = pd.DataFrame(rows, columns=TRAJECTORY_COLUMNS)
    df['speed_kmh'] = df['speed_kmh'].astype(float)
    df['heading'] = df['heading'].astype(float)
    return df


def known_speeds(df: pd.DataFrame) -> np.ndarray:
    """Speeds (km/h) of the samples that report one."""
    if 'speed_kmh' not in df.columns:
        return np.zeros(0)
    return df['speed_kmh'].dropna().values.astype(float)
