"""Top-level entry point — one observer update turned into an AuroraOverview."""

import logging
from collections.abc import Sequence

import httpx

from auroracompass.config import Settings
from auroracompass.geocode import NameCache, NominatimNameResolver, PointNamer
from auroracompass.models import AuroraOverview, GeoPoint, Hemisphere, Observer
from auroracompass.selection import select_best, select_diverse_top, visibility_latitude

log = logging.getLogger(__name__)


def run(
    points: Sequence[GeoPoint],
    observer: Observer | None,
    hemisphere: Hemisphere,
    settings: Settings | None = None,
) -> AuroraOverview:
    """Compute everything a presentation layer needs for one update.

    Re-invoke on every location, heading-target, or forecast refresh; the
    result is derived state and is never cached here.

    Args:
        points: Current forecast snapshot.
        observer: Current observer, or None before the first location fix.
        hemisphere: Hemisphere being viewed.
        settings: Tunables. Defaults to Settings().

    Returns:
        Fully computed AuroraOverview.
    """
    settings = settings or Settings()
    best = select_best(points, observer, hemisphere, settings.aurora_altitude_m)
    top = select_diverse_top(
        points,
        hemisphere,
        max_count=settings.max_locations,
        min_probability=settings.min_probability,
    )
    if best is not None:
        log.debug(
            "Best %s point %s: az=%.1f el=%.1f chance=%.1f",
            hemisphere.value,
            best.point.stable_id,
            best.geometry.azimuth_deg,
            best.geometry.elevation_deg,
            best.viewing_chance,
        )
    return AuroraOverview(
        hemisphere=hemisphere,
        best=best,
        top_locations=tuple(top),
        visibility_latitude=visibility_latitude(
            points, hemisphere, settings.visibility_threshold
        ),
    )


def build_namer(
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    cache: NameCache | None = None,
) -> PointNamer:
    """PointNamer backed by the configured Nominatim instance."""
    settings = settings or Settings()
    resolver = NominatimNameResolver(
        client=client,
        base_url=settings.nominatim_url,
        user_agent=settings.nominatim_user_agent,
    )
    return PointNamer(resolver, cache)


async def name_top_locations(
    namer: PointNamer,
    overview: AuroraOverview,
    settings: Settings | None = None,
) -> list[GeoPoint]:
    """Resolve names for the overview's top list, at most geocode_batch new ones.

    The best point is included even when it did not make the top list.
    """
    settings = settings or Settings()
    points = list(overview.top_locations)
    if overview.best is not None and overview.best.point not in points:
        points.insert(0, overview.best.point)
    return await namer.name_points(points, max_new=settings.geocode_batch)
