"""
End-to-end tests for auroracompass.compute.run and the i18n helpers that
present its output.
"""

import asyncio

import httpx
import pytest

from auroracompass.compute import build_namer, name_top_locations, run
from auroracompass.config import Settings
from auroracompass.geocode import PointNamer
from auroracompass.heading import HeadingContinuityTracker
from auroracompass.i18n import activity_text, look_hint, t
from auroracompass.models import Hemisphere, LookCandidate, LookResult


class TestRun:
    def test_full_overview(self, fairbanks, mixed_snapshot):
        overview = run(mixed_snapshot, fairbanks, Hemisphere.NORTH)

        assert overview.hemisphere is Hemisphere.NORTH
        # ~73 km away and high in the sky: 90 x 0.9 x 1.0
        assert overview.best.point is mixed_snapshot[0]
        assert overview.best.viewing_chance == pytest.approx(81.0)
        assert len(overview.top_locations) == 4
        assert all(p.latitude >= 0 for p in overview.top_locations)
        assert overview.visibility_latitude == 65

    def test_overhead_scenario(self, fairbanks, overhead_point):
        overview = run([overhead_point], fairbanks, Hemisphere.NORTH)
        assert overview.best.geometry.elevation_deg == 90.0
        assert overview.best.viewing_chance == pytest.approx(72.0)

    def test_without_location_fix(self, mixed_snapshot):
        overview = run(mixed_snapshot, None, Hemisphere.NORTH)
        assert overview.best is None
        assert len(overview.top_locations) == 4

    def test_settings_flow_through(self, fairbanks, mixed_snapshot):
        settings = Settings(max_locations=1, visibility_threshold=70.0)
        overview = run(mixed_snapshot, fairbanks, Hemisphere.NORTH, settings)
        assert [p.probability for p in overview.top_locations] == [90.0]
        assert overview.visibility_latitude == 65

    def test_best_point_drives_heading(self, fairbanks, mixed_snapshot):
        """The UI feeds the best azimuth into the tracker on every heading sample."""
        best = run(mixed_snapshot, fairbanks, Hemisphere.NORTH).best
        tracker = HeadingContinuityTracker()
        first = tracker.update(350.0, best.geometry.azimuth_deg, best.point.stable_id)
        second = tracker.update(10.0, best.geometry.azimuth_deg, best.point.stable_id)
        assert abs(second - first) <= 180.0


class TestNameTopLocations:
    def test_names_best_point_through_configured_resolver(self, fairbanks, mixed_snapshot):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(
                200, json={"address": {"city": "Fairbanks", "country": "United States"}}
            )

        settings = Settings(
            geocode_batch=1,
            nominatim_url="http://geocoder.test/reverse",
            nominatim_user_agent="tests/1.0",
        )
        overview = run(mixed_snapshot, fairbanks, Hemisphere.NORTH, settings)

        async def go():
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport) as client:
                namer = build_namer(settings, client=client)
                namer.refresh(mixed_snapshot)
                return await name_top_locations(namer, overview, settings)

        named = asyncio.run(go())

        assert len(seen) == 1
        assert seen[0].startswith("http://geocoder.test/reverse?")
        assert named[0] is overview.best.point
        assert named[0].location_name == "Fairbanks, United States"
        assert all(p.location_name is None for p in named[1:])

    def test_later_batches_name_the_rest_of_the_list(self, fairbanks, mixed_snapshot):
        class CoordinateResolver:
            async def resolve(self, points):
                return {p.stable_id: f"near {p.stable_id}" for p in points}

        overview = run(mixed_snapshot, fairbanks, Hemisphere.NORTH)
        namer = PointNamer(CoordinateResolver())

        asyncio.run(name_top_locations(namer, overview, Settings(geocode_batch=1)))
        named = asyncio.run(
            name_top_locations(namer, overview, Settings(geocode_batch=15))
        )

        assert len(named) == 4
        assert all(p.location_name == f"near {p.stable_id}" for p in named)


class TestI18n:
    def test_fallbacks(self):
        assert t("no_data", "ko") == "오로라 데이터 없음"
        assert t("no_data", "fr") == "No aurora data"
        assert t("missing_key", "en") == "missing_key"

    def test_activity_text(self):
        assert activity_text(75.0) == "Storm Conditions"
        assert activity_text(5.0, "ko") == "조용함"

    def test_look_hint(self, overhead_point):
        above = LookCandidate(
            point=overhead_point,
            geometry=LookResult(azimuth_deg=10.0, elevation_deg=12.34, surface_distance_m=5e5),
            viewing_chance=50.0,
        )
        below = LookCandidate(
            point=overhead_point,
            geometry=LookResult(azimuth_deg=10.0, elevation_deg=-3.0, surface_distance_m=2e6),
            viewing_chance=0.0,
        )
        assert look_hint(above) == "Look N, 12.3° above the horizon"
        assert look_hint(below) == "Currently 3.0° below horizon"
        assert look_hint(None) == "No aurora data"
