"""Personal viewing chance — turns a forecast probability into what this observer can see.

The factor curves are a tuning heuristic, not physics. Their shape is the
contract: low positive elevation beats overhead, and closer beats farther.
"""

from dataclasses import dataclass

from auroracompass.models import LookResult


@dataclass(frozen=True)
class ViewingFactors:
    """Breakpoints and weights for the elevation and distance curves."""

    horizon_tolerance_deg: float = -2.0  # Below this the aurora is hidden
    below_horizon_factor: float = 0.1
    low_elevation_deg: float = 5.0
    low_factor_start: float = 0.5
    low_factor_end: float = 0.8
    optimal_elevation_deg: float = 25.0
    high_elevation_deg: float = 30.0
    high_factor: float = 0.9
    # (upper bound km, factor), checked in order
    distance_steps: tuple[tuple[float, float], ...] = (
        (200.0, 1.0),
        (500.0, 0.95),
        (1000.0, 0.85),
        (1500.0, 0.7),
    )
    far_decay_km: float = 3000.0  # Factor lost per km past the last step
    far_floor: float = 0.3


DEFAULT_FACTORS = ViewingFactors()

# (lower bound probability, level), highest first
_ACTIVITY_LEVELS: tuple[tuple[float, str], ...] = (
    (70.0, "storm"),
    (50.0, "high"),
    (30.0, "moderate"),
    (10.0, "minor"),
)


def elevation_factor(
    elevation_deg: float, factors: ViewingFactors = DEFAULT_FACTORS
) -> float:
    """Visibility weight for how high the aurora sits above the horizon."""
    f = factors
    if elevation_deg < 0:
        return f.below_horizon_factor
    if elevation_deg < f.low_elevation_deg:
        span = f.low_factor_end - f.low_factor_start
        return f.low_factor_start + (elevation_deg / f.low_elevation_deg) * span
    if elevation_deg < f.high_elevation_deg:
        ramp = min(elevation_deg, f.optimal_elevation_deg) - f.low_elevation_deg
        width = f.optimal_elevation_deg - f.low_elevation_deg
        return f.low_factor_end + (ramp / width) * (1.0 - f.low_factor_end)
    return f.high_factor


def distance_factor(distance_km: float, factors: ViewingFactors = DEFAULT_FACTORS) -> float:
    """Visibility weight for how far away the aurora is along the surface."""
    for upper_km, weight in factors.distance_steps:
        if distance_km < upper_km:
            return weight
    last_km, last_weight = factors.distance_steps[-1]
    decayed = last_weight - (distance_km - last_km) / factors.far_decay_km
    return max(factors.far_floor, decayed)


def personal_viewing_chance(
    base_probability: float,
    geometry: LookResult,
    factors: ViewingFactors = DEFAULT_FACTORS,
) -> float:
    """Personalized 0–100 chance of seeing the aurora at a forecast point.

    Args:
        base_probability: Forecast probability at the point. Clamped to [0, 100].
        geometry: Look geometry from the observer to the point.
        factors: Curve parameters.

    Returns:
        Viewing chance in [0, 100]. Exactly 0 when the point sits more than
        the horizon tolerance below the horizon.
    """
    if geometry.elevation_deg < factors.horizon_tolerance_deg:
        return 0.0
    base = min(100.0, max(0.0, base_probability))
    chance = (
        base
        * elevation_factor(geometry.elevation_deg, factors)
        * distance_factor(geometry.distance_km, factors)
    )
    return min(100.0, max(0.0, chance))


def activity_level(probability: float) -> str:
    """Coarse activity label for a forecast probability."""
    for lower, level in _ACTIVITY_LEVELS:
        if probability >= lower:
            return level
    return "quiet"
