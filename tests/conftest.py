"""
Shared fixtures for aurora-visibility tests.

Provides a fixed observer and small hand-built forecast snapshots with
known bin layouts so each test module can check selection logic against
expected picks.
"""

import pytest

from auroracompass.models import GeoPoint, Observer

# Fairbanks, Alaska: a classic auroral-zone viewing site
FAIRBANKS = (64.5, -149.0)


@pytest.fixture
def fairbanks():
    """Observer at sea level in Fairbanks."""
    return Observer(latitude=FAIRBANKS[0], longitude=FAIRBANKS[1], altitude_m=0.0)


@pytest.fixture
def overhead_point():
    """Forecast point directly above the Fairbanks observer."""
    return GeoPoint(latitude=FAIRBANKS[0], longitude=FAIRBANKS[1], probability=80.0)


@pytest.fixture
def mixed_snapshot():
    """Both hemispheres; three northern points share a coarse 8°x15° bin.

    Coarse bins:
      (65, -150), (66, -149), (70, -150) -> (8, -10)
      (50, 10)                           -> (6, 0)
      (-65, 140)                         -> south
    Fine 5°x10° bins of the two runners-up: (13, -15) and (14, -15).
    """
    return [
        GeoPoint(latitude=65.0, longitude=-150.0, probability=90.0),
        GeoPoint(latitude=66.0, longitude=-149.0, probability=80.0),
        GeoPoint(latitude=70.0, longitude=-150.0, probability=60.0),
        GeoPoint(latitude=50.0, longitude=10.0, probability=40.0),
        GeoPoint(latitude=-65.0, longitude=140.0, probability=95.0),
        GeoPoint(latitude=55.0, longitude=100.0, probability=5.0),
    ]
