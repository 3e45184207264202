"""Look geometry — bearing, elevation, and distance from an observer to an elevated target.

Earth is treated as a sphere of mean radius. The target sits at a fixed
altitude above the surface (the aurora emission height), so the elevation
accounts for both that altitude and the curvature dropping the target below
the local horizon as distance grows. No refraction or terrain is modelled.
"""

import math

import numpy as np

from auroracompass.models import GeoPoint, LookResult, Observer

EARTH_RADIUS_M = 6_371_000.0
DEFAULT_AURORA_ALTITUDE_M = 110_000.0

_CARDINALS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)  # fmt: skip


def wrap_degrees(deg: float) -> float:
    """Normalize an angle into [0, 360)."""
    wrapped = deg % 360.0
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def compute_look_geometry(
    observer_lat: float,
    observer_lon: float,
    observer_alt_m: float,
    target_lat: float,
    target_lon: float,
    target_alt_m: float = DEFAULT_AURORA_ALTITUDE_M,
) -> LookResult:
    """Compute where an observer must look to see a target above the Earth.

    Args:
        observer_lat: Observer latitude (decimal degrees).
        observer_lon: Observer longitude (decimal degrees).
        observer_alt_m: Observer altitude above the sphere (meters).
        target_lat: Latitude of the point under the target.
        target_lon: Longitude of the point under the target.
        target_alt_m: Target altitude above the sphere (meters).

    Returns:
        LookResult with azimuth in [0, 360), elevation in [-90, 90] and the
        great-circle surface distance. Identical coordinates yield distance 0,
        elevation +90 and azimuth 0.
    """
    phi1 = math.radians(observer_lat)
    phi2 = math.radians(target_lat)
    d_phi = phi2 - phi1
    d_lambda = math.radians(target_lon - observer_lon)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(1.0, max(0.0, a))
    central_angle = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))

    if central_angle == 0.0:
        return LookResult(azimuth_deg=0.0, elevation_deg=90.0, surface_distance_m=0.0)

    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(
        d_lambda
    )
    azimuth = wrap_degrees(math.degrees(math.atan2(y, x)))

    # Chord from observer to target in the observer's vertical plane:
    # horizontal run along the local tangent, vertical rise along the local up.
    r_obs = EARTH_RADIUS_M + observer_alt_m
    r_tgt = EARTH_RADIUS_M + target_alt_m
    rise = r_tgt * math.cos(central_angle) - r_obs
    run = r_tgt * math.sin(central_angle)
    elevation = math.degrees(math.atan2(rise, run))

    return LookResult(
        azimuth_deg=azimuth,
        elevation_deg=min(90.0, max(-90.0, elevation)),
        surface_distance_m=EARTH_RADIUS_M * central_angle,
    )


def look_from(
    observer: Observer,
    point: GeoPoint,
    target_alt_m: float = DEFAULT_AURORA_ALTITUDE_M,
) -> LookResult:
    """compute_look_geometry() for model objects."""
    return compute_look_geometry(
        observer.latitude,
        observer.longitude,
        observer.altitude_m,
        point.latitude,
        point.longitude,
        target_alt_m,
    )


def compute_look_geometry_batch(
    observer: Observer,
    latitudes: np.ndarray,
    longitudes: np.ndarray,
    target_alt_m: float = DEFAULT_AURORA_ALTITUDE_M,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Vectorized compute_look_geometry() over many targets.

    Same semantics as the scalar version, including the identical-coordinate
    case. select_best() scores a hemisphere of forecast cells through this
    in one pass.

    Returns:
        (azimuth_deg, elevation_deg, surface_distance_m) arrays.
    """
    lat = np.radians(np.asarray(latitudes, dtype=float))
    lon = np.radians(np.asarray(longitudes, dtype=float))
    # same conversion as the targets so an identical coordinate gives exactly 0
    phi1 = float(np.radians(observer.latitude))
    d_phi = lat - phi1
    d_lambda = lon - float(np.radians(observer.longitude))

    a = np.sin(d_phi / 2) ** 2 + math.cos(phi1) * np.cos(lat) * np.sin(d_lambda / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    central = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))

    y = np.sin(d_lambda) * np.cos(lat)
    x = math.cos(phi1) * np.sin(lat) - math.sin(phi1) * np.cos(lat) * np.cos(d_lambda)
    azimuth = np.degrees(np.arctan2(y, x)) % 360.0
    azimuth = np.where(azimuth >= 360.0, 0.0, azimuth)

    r_obs = EARTH_RADIUS_M + observer.altitude_m
    r_tgt = EARTH_RADIUS_M + target_alt_m
    elevation = np.degrees(
        np.arctan2(r_tgt * np.cos(central) - r_obs, r_tgt * np.sin(central))
    )
    elevation = np.clip(elevation, -90.0, 90.0)

    same = central == 0.0
    azimuth = np.where(same, 0.0, azimuth)
    elevation = np.where(same, 90.0, elevation)

    return azimuth, elevation, EARTH_RADIUS_M * central


def cardinal_direction(azimuth_deg: float) -> str:
    """16-point compass label for an azimuth ("N", "NNE", ... "NNW")."""
    index = int(((azimuth_deg % 360.0) + 11.25) % 360.0 // 22.5)
    return _CARDINALS[index % 16]
