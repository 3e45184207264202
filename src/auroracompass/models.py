"""Data model definitions — explicit boundaries between forecast, geometry, and selection layers."""

from dataclasses import dataclass
from enum import Enum


def point_id(latitude: float, longitude: float) -> str:
    """Coordinate-derived identity, stable across refreshes of the same forecast grid."""
    return f"{latitude:.2f},{longitude:.2f}"


class Hemisphere(str, Enum):
    """Hemisphere a forecast point belongs to. The equator counts as north."""

    NORTH = "north"
    SOUTH = "south"

    @classmethod
    def of(cls, latitude: float) -> "Hemisphere":
        return cls.NORTH if latitude >= 0 else cls.SOUTH

    def contains(self, latitude: float) -> bool:
        return Hemisphere.of(latitude) is self


@dataclass(eq=False)
class GeoPoint:
    """A single forecast cell: aurora probability at a coordinate.

    Coordinates and probability are fixed once created. Only location_name
    changes, and only through assign_name().
    """

    latitude: float  # Decimal degrees, [-90, 90]
    longitude: float  # Decimal degrees, [-180, 180]
    probability: float  # Aurora probability, [0, 100]
    stable_id: str = ""
    location_name: str | None = None  # Filled in by the name resolver

    def __post_init__(self) -> None:
        if not self.stable_id:
            self.stable_id = point_id(self.latitude, self.longitude)

    @property
    def hemisphere(self) -> Hemisphere:
        return Hemisphere.of(self.latitude)

    def assign_name(self, name: str | None) -> bool:
        """Apply a resolved place name. Returns True if the name changed.

        An existing name is never replaced by a different one.
        """
        if not name or self.location_name is not None:
            return False
        self.location_name = name
        return True


@dataclass(frozen=True)
class Observer:
    """Where the user is standing. Replaced on every location update."""

    latitude: float
    longitude: float
    altitude_m: float = 0.0


@dataclass(frozen=True)
class LookResult:
    """Where to look from an observer toward one target."""

    azimuth_deg: float  # Clockwise from true north, [0, 360)
    elevation_deg: float  # Above (+) or below (-) the local horizon, [-90, 90]
    surface_distance_m: float  # Great-circle distance along the surface

    @property
    def distance_km(self) -> float:
        return self.surface_distance_m / 1000.0

    @property
    def above_horizon(self) -> bool:
        return self.elevation_deg >= 0


@dataclass(frozen=True)
class LookCandidate:
    """A forecast point paired with its look geometry and personal score."""

    point: GeoPoint
    geometry: LookResult
    viewing_chance: float  # Personalized probability, [0, 100]


@dataclass
class HeadingState:
    """Mutable state behind the compass needle. Never persisted."""

    continuous_rotation: float = 0.0  # Unbounded; may grow past multiples of 360
    last_raw_heading_deg: float | None = None  # None = uninitialized
    target_id: str | None = None  # Identity of the point being tracked


@dataclass(frozen=True)
class AuroraOverview:
    """The sole input to presentation layers. Fully computed state."""

    hemisphere: Hemisphere
    best: LookCandidate | None  # None without an observer fix or points
    top_locations: tuple[GeoPoint, ...]  # Diverse, probability descending
    visibility_latitude: int | None  # Equatorward edge, absolute degrees
