# transport_mode/config.py

from dataclasses import dataclass
from typing import Tuple


@dataclass
class ClassifierConfig:
    """
    Thresholds shared by the transportation-mode classifiers.

    Attributes
    ----------
    speed_bands
        Upper edges (km/h, exclusive) of the walking, cycling, bus-or-car
        and train buckets; anything at or above the last edge is unknown.
    speed_percentile
        Percentile used by the outlier-resistant speed classifier.
    stop_speed_threshold
        Speed (m/s) below which a fix counts as stopped.
    automotive_min_kmh, automotive_max_kmh
        Max-speed range [min, max) in which the stop-pattern classifier answers.
    bus_stops_per_km
        Stop frequency above which a trajectory is a bus.
    bus_spacing_min_m, bus_spacing_max_m
        Open interval of average inter-stop distance typical of bus routes.
    min_bus_stops
        Minimum stop count for the spacing rule to apply.
    fixed_mean_deg, fixed_std_deg
        Heading-change mean/std (degrees) below which a route is fixed.
    variable_mean_deg, variable_std_deg
        Heading-change mean/std (degrees) above which a route is variable.
    """
    speed_bands:          Tuple[float, float, float, float] = (7.0, 25.0, 80.0, 200.0)
    speed_percentile:     float = 95.0
    stop_speed_threshold: float = 0.5
    automotive_min_kmh:   float = 25.0
    automotive_max_kmh:   float = 80.0
    bus_stops_per_km:     float = 1.0
    bus_spacing_min_m:    float = 300.0
    bus_spacing_max_m:    float = 1000.0
    min_bus_stops:        int   = 2
    fixed_mean_deg:       float = 3.0
    fixed_std_deg:        float = 15.0
    variable_mean_deg:    float = 5.0
    variable_std_deg:     float = 20.0

    def __post_init__(self) -> None:
        if list(self.speed_bands) != sorted(self.speed_bands) or len(self.speed_bands) != 4:
            raise ValueError(f"speed_bands must be four ascending edges, got {self.speed_bands}")
        if not 0 <= self.speed_percentile <= 100:
            raise ValueError(f"speed_percentile must be in [0, 100], got {self.speed_percentile}")
