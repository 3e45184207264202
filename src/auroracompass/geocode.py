"""Place names for forecast points — async resolution applied without stale writes.

The core never waits on names. A PointNamer asks a NameResolver for a batch,
then writes results back only onto points that are still current: a point
replaced or dropped by a newer forecast refresh keeps its slot free.
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

import httpx

from auroracompass.models import GeoPoint

log = logging.getLogger(__name__)

NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT = "AuroraCompass/1.0"


class NameResolutionError(Exception):
    """Reverse geocoder returned something unusable."""


def coordinate_key(latitude: float, longitude: float) -> str:
    """Cache key for a coordinate. 0.1° cells share a name."""
    return f"{latitude:.1f},{longitude:.1f}"


class NameCache(Protocol):
    def get(self, key: str) -> str | None: ...

    def put(self, key: str, name: str) -> None: ...


class NameResolver(Protocol):
    async def resolve(self, points: Sequence[GeoPoint]) -> dict[str, str]:
        """Return {stable_id: name} for the points that could be named."""
        ...


class InMemoryNameCache:
    """Process-local NameCache. First write for a key wins."""

    def __init__(self) -> None:
        self._names: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._names)

    def get(self, key: str) -> str | None:
        return self._names.get(key)

    def put(self, key: str, name: str) -> None:
        self._names.setdefault(key, name)


class PointNamer:
    """Coordinates name lookups for the current forecast snapshot."""

    def __init__(self, resolver: NameResolver, cache: NameCache | None = None) -> None:
        self.resolver = resolver
        self.cache: NameCache = cache if cache is not None else InMemoryNameCache()
        self._current: dict[str, GeoPoint] | None = None

    def refresh(self, points: Iterable[GeoPoint]) -> None:
        """Register a new forecast snapshot. Older point objects become stale."""
        self._current = {p.stable_id: p for p in points}

    def is_current(self, point: GeoPoint) -> bool:
        """True until a refresh replaces or drops this point object."""
        if self._current is None:
            return True
        return self._current.get(point.stable_id) is point

    def apply_cached(self, points: Iterable[GeoPoint]) -> int:
        """Fill names from the cache. Returns how many points were named."""
        named = 0
        for p in points:
            if p.location_name is None:
                cached = self.cache.get(coordinate_key(p.latitude, p.longitude))
                if cached and p.assign_name(cached):
                    named += 1
        return named

    async def name_points(
        self, points: Sequence[GeoPoint], max_new: int = 5
    ) -> list[GeoPoint]:
        """Name as many points as possible, resolving at most max_new uncached ones.

        Args:
            points: Points to name, usually the diverse top list.
            max_new: Cap on resolver lookups for this call.

        Returns:
            The same points, in input order, with names applied where known.
        """
        self.apply_cached(points)
        pending = [p for p in points if p.location_name is None][: max(0, max_new)]
        if not pending:
            return list(points)

        resolved = await self.resolver.resolve(pending)
        by_id = {p.stable_id: p for p in pending}
        for stable_id, name in resolved.items():
            point = by_id.get(stable_id)
            if point is None or not name:
                continue
            self.cache.put(coordinate_key(point.latitude, point.longitude), name)
            if not self.is_current(point):
                log.debug("Discarding stale name %r for %s", name, stable_id)
                continue
            point.assign_name(name)

        log.info("Resolved %d of %d requested names", len(resolved), len(pending))
        return list(points)


def _place_name(payload: dict) -> str:
    """Short display name from a Nominatim reverse response."""
    if "error" in payload:
        raise NameResolutionError(payload["error"])
    address = payload.get("address")
    if not isinstance(address, dict):
        raise NameResolutionError("response has no address")

    locality = next(
        (
            address[k]
            for k in ("city", "town", "village", "hamlet", "county", "state", "region")
            if address.get(k)
        ),
        None,
    )
    if locality is None:
        locality = address.get("ocean") or address.get("sea")
    country = address.get("country")
    parts = [part for part in (locality, country) if part]
    if not parts:
        raise NameResolutionError("address has no usable components")
    return ", ".join(parts)


class NominatimNameResolver:
    """NameResolver backed by the Nominatim (OpenStreetMap) reverse geocoder.

    Lookups are sequential with a delay between them to respect the public
    instance's one-request-per-second policy. Failures for individual points
    are logged and skipped.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str = NOMINATIM_REVERSE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        delay_s: float = 1.1,
        lang: str = "en",
    ) -> None:
        self._client = client
        self.base_url = base_url
        self.user_agent = user_agent
        self.delay_s = delay_s
        self.lang = lang

    async def _reverse(self, client: httpx.AsyncClient, point: GeoPoint) -> str:
        params = {
            "lat": point.latitude,
            "lon": point.longitude,
            "format": "json",
            "zoom": 8,
            "accept-language": self.lang,
        }
        resp = await client.get(
            self.base_url,
            params=params,
            headers={"User-Agent": self.user_agent},
            timeout=10,
        )
        resp.raise_for_status()
        return _place_name(resp.json())

    async def resolve(self, points: Sequence[GeoPoint]) -> dict[str, str]:
        if self._client is not None:
            return await self._resolve_all(self._client, points)
        async with httpx.AsyncClient() as client:
            return await self._resolve_all(client, points)

    async def _resolve_all(
        self, client: httpx.AsyncClient, points: Sequence[GeoPoint]
    ) -> dict[str, str]:
        names: dict[str, str] = {}
        for i, point in enumerate(points):
            if i and self.delay_s > 0:
                await asyncio.sleep(self.delay_s)
            try:
                names[point.stable_id] = await self._reverse(client, point)
            except (httpx.HTTPError, NameResolutionError, ValueError) as exc:
                log.warning("Reverse geocode failed for %s: %s", point.stable_id, exc)
        return names
