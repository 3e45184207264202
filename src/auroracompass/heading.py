"""Compass needle rotation that never snaps back when the heading wraps past north."""

import logging
import math

from auroracompass.geometry import wrap_degrees
from auroracompass.models import HeadingState

log = logging.getLogger(__name__)


def shortest_delta(from_deg: float, to_deg: float) -> float:
    """Signed angular step from from_deg to to_deg, in (-180, 180]."""
    delta = (to_deg % 360.0 - from_deg % 360.0) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta


class HeadingContinuityTracker:
    """Turns wrapping 0–360° device headings into a continuous needle rotation.

    The rotation points the needle at a target azimuth relative to where the
    device faces. It is allowed to grow or shrink past multiples of 360 so
    an animated needle never spins the long way round.
    """

    def __init__(self) -> None:
        self.state = HeadingState()

    @property
    def continuous_rotation(self) -> float:
        return self.state.continuous_rotation

    @property
    def tracking(self) -> bool:
        return self.state.last_raw_heading_deg is not None

    def reset(self) -> None:
        """Return to the uninitialized state. The next update re-seeds."""
        self.state = HeadingState()

    def update(
        self,
        heading_deg: float,
        target_azimuth_deg: float,
        target_id: str | None = None,
    ) -> float:
        """Feed one heading sample and return the new continuous rotation.

        Args:
            heading_deg: Device heading, degrees clockwise from north.
            target_azimuth_deg: Azimuth of the point to indicate.
            target_id: Identity of that point. A change resets tracking.

        Returns:
            The continuous rotation in degrees. After the first sample, a
            single call never moves it by more than 180.
        """
        if not (math.isfinite(heading_deg) and math.isfinite(target_azimuth_deg)):
            log.debug("Ignoring non-finite heading sample %r", heading_deg)
            return self.state.continuous_rotation

        if target_id is not None and target_id != self.state.target_id:
            if self.tracking:
                log.debug("Tracked point changed to %s; re-seeding rotation", target_id)
            self.reset()
            self.state.target_id = target_id

        heading = wrap_degrees(heading_deg)
        target_rotation = wrap_degrees(wrap_degrees(target_azimuth_deg) - heading)

        if not self.tracking:
            self.state.continuous_rotation = target_rotation
        else:
            self.state.continuous_rotation += shortest_delta(
                self.state.continuous_rotation, target_rotation
            )
        self.state.last_raw_heading_deg = heading
        return self.state.continuous_rotation
