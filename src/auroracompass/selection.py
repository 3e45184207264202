"""Point selection — the single best place to look, and a geographically spread top list."""

import logging
import math
from collections.abc import Iterable, Sequence

from auroracompass.geometry import DEFAULT_AURORA_ALTITUDE_M, compute_look_geometry_batch
from auroracompass.models import GeoPoint, Hemisphere, LookCandidate, LookResult, Observer
from auroracompass.scoring import (
    DEFAULT_FACTORS,
    ViewingFactors,
    personal_viewing_chance,
)

log = logging.getLogger(__name__)

# (latitude band, longitude band) in degrees
COARSE_BIN_DEG = (8.0, 15.0)
FINE_BIN_DEG = (5.0, 10.0)


def select_best(
    points: Iterable[GeoPoint],
    observer: Observer | None,
    hemisphere: Hemisphere,
    target_alt_m: float = DEFAULT_AURORA_ALTITUDE_M,
    factors: ViewingFactors = DEFAULT_FACTORS,
) -> LookCandidate | None:
    """Pick the point in one hemisphere with the highest personal viewing chance.

    Ties keep the first point encountered in iteration order.

    Args:
        points: Forecast points (any order).
        observer: Current observer, or None when there is no location fix yet.
        hemisphere: Only points in this hemisphere are considered.
        target_alt_m: Aurora altitude used for the look geometry.
        factors: Viewing-chance curve parameters.

    Returns:
        The winning LookCandidate, or None without an observer or points.
    """
    if observer is None:
        return None

    eligible = [p for p in points if hemisphere.contains(p.latitude)]
    if not eligible:
        return None

    azimuths, elevations, distances = compute_look_geometry_batch(
        observer,
        [p.latitude for p in eligible],
        [p.longitude for p in eligible],
        target_alt_m,
    )

    best: LookCandidate | None = None
    for point, az, el, dist in zip(eligible, azimuths, elevations, distances):
        geometry = LookResult(
            azimuth_deg=float(az), elevation_deg=float(el), surface_distance_m=float(dist)
        )
        chance = personal_viewing_chance(point.probability, geometry, factors)
        if best is None or chance > best.viewing_chance:
            best = LookCandidate(point=point, geometry=geometry, viewing_chance=chance)
    return best


def _bin_key(point: GeoPoint, size: tuple[float, float]) -> tuple[int, int]:
    lat_deg, lon_deg = size
    return math.floor(point.latitude / lat_deg), math.floor(point.longitude / lon_deg)


def select_diverse_top(
    points: Iterable[GeoPoint],
    hemisphere: Hemisphere,
    max_count: int = 15,
    min_probability: float = 10.0,
) -> list[GeoPoint]:
    """Reduce a forecast to at most max_count geographically distinct, likely points.

    A coarse 8°x15° pass keeps the most probable point per cell so the list
    is spread across regions first. If that leaves room, a finer 5°x10° pass
    backfills with the next most probable unselected points. Both passes
    share one set of seen cells, so a fine cell is skipped only when an
    earlier backfill (or an equal coarse key) already took it.

    Args:
        points: Forecast points (any order).
        hemisphere: Only points in this hemisphere are considered.
        max_count: Upper bound on the result length.
        min_probability: Points below this probability are ignored.

    Returns:
        Selected points ordered by probability, highest first. Fewer than
        max_count when not enough points qualify; never padded.
    """
    if max_count <= 0:
        return []

    candidates = sorted(
        (
            p
            for p in points
            if hemisphere.contains(p.latitude) and p.probability >= min_probability
        ),
        key=lambda p: p.probability,
        reverse=True,
    )

    selected: list[GeoPoint] = []
    seen: set[tuple[int, int]] = set()
    for p in candidates:
        key = _bin_key(p, COARSE_BIN_DEG)
        if key in seen:
            continue
        seen.add(key)
        selected.append(p)
        if len(selected) >= max_count:
            break

    if len(selected) < max_count:
        taken = {p.stable_id for p in selected}
        for p in candidates:
            if p.stable_id in taken:
                continue
            key = _bin_key(p, FINE_BIN_DEG)
            if key in seen:
                continue
            seen.add(key)
            taken.add(p.stable_id)
            selected.append(p)
            if len(selected) >= max_count:
                break

    log.debug(
        "Selected %d of %d qualifying %s points",
        len(selected),
        len(candidates),
        hemisphere.value,
    )
    return sorted(selected, key=lambda p: p.probability, reverse=True)


def visibility_latitude(
    points: Sequence[GeoPoint], hemisphere: Hemisphere, threshold: float
) -> int | None:
    """Equatorward edge of the visible aurora, in absolute degrees of latitude.

    Returns the rounded latitude closest to the equator among points in the
    hemisphere at or above threshold (55 means 55°N or 55°S), or None.
    """
    qualifying = [
        p.latitude
        for p in points
        if hemisphere.contains(p.latitude) and p.probability >= threshold
    ]
    if not qualifying:
        return None
    if hemisphere is Hemisphere.NORTH:
        return round(min(qualifying))
    return round(abs(max(qualifying)))
